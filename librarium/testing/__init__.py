"""
Librarium Testing - helpers for code that publishes or consumes libraries.

Components:
    - RecordingNotifier: Notifier capturing registry events for assertions
    - CapturedEvent:     One captured event
    - fixtures:          pytest fixtures (``registry``, ``recording_notifier``,
                         ``observed_registry``)
"""

from .notifier import CapturedEvent, RecordingNotifier

__all__ = [
    "CapturedEvent",
    "RecordingNotifier",
]
