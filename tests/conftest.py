"""
Shared test fixtures for the Librarium test suite.
"""

# Register Librarium testing fixtures
from librarium.testing.fixtures import librarium_fixtures
librarium_fixtures()

# Import fixtures so pytest can discover them
from librarium.testing.fixtures import (  # noqa: F401
    registry,
    recording_notifier,
    observed_registry,
)
