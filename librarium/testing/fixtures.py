"""
Librarium Testing - Pytest Fixtures.

Import ``librarium_fixtures`` in your ``conftest.py`` to register all
fixtures at once, or import individual fixtures.

Usage in conftest.py::

    from librarium.testing.fixtures import librarium_fixtures
    librarium_fixtures()
"""

from __future__ import annotations

import pytest

from librarium.config import RegistryConfig
from librarium.core import LibraryRegistry

from .notifier import RecordingNotifier


def librarium_fixtures():
    """
    Register Librarium pytest fixtures.

    This is a no-op: the fixtures are registered by importing this
    module. The function exists as a documentation anchor.
    """
    pass


@pytest.fixture
def registry():
    """A fresh :class:`LibraryRegistry` with no notifier, reset after use."""
    reg = LibraryRegistry()
    yield reg
    reg.reset_libraries()


@pytest.fixture
def recording_notifier():
    """A :class:`RecordingNotifier` cleared on teardown."""
    with RecordingNotifier() as notifier:
        yield notifier


@pytest.fixture
def observed_registry(recording_notifier):
    """A registry wired to ``recording_notifier`` that re-raises notifier errors."""
    reg = LibraryRegistry(
        notifier=recording_notifier,
        config=RegistryConfig(callback_errors="raise"),
    )
    yield reg
    reg.reset_libraries()
