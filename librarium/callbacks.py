"""
Librarium Callbacks - notification bridge for registry events.

The registry talks to a ``LibraryNotifier``. Three implementations ship:

- ``NullNotifier``: the default, every hook is a no-op.
- ``LibraryCallbacks``: a small event hub with one ``Signal`` per event,
  addressable by the event names ``OnLibraryUpdate``, ``OnLibraryLoad`` and
  ``OnLibraryRemove``.
- ``librarium.testing.RecordingNotifier``: captures events for assertions.

Usage:
    callbacks = LibraryCallbacks()

    @callbacks.on("OnLibraryUpdate")
    def upgraded(name, payload, previous_version, new_version):
        print(f"{name}: {previous_version} -> {new_version}")

    registry = LibraryRegistry(notifier=callbacks)
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, runtime_checkable

from .faults import CallbackEventFault

logger = logging.getLogger("librarium.callbacks")

__all__ = [
    "LibraryNotifier",
    "NullNotifier",
    "Signal",
    "LibraryCallbacks",
    "ON_LIBRARY_UPDATE",
    "ON_LIBRARY_LOAD",
    "ON_LIBRARY_REMOVE",
    "LIBRARY_EVENTS",
]

ON_LIBRARY_UPDATE = "OnLibraryUpdate"
ON_LIBRARY_LOAD = "OnLibraryLoad"
ON_LIBRARY_REMOVE = "OnLibraryRemove"

LIBRARY_EVENTS = (ON_LIBRARY_UPDATE, ON_LIBRARY_LOAD, ON_LIBRARY_REMOVE)


@runtime_checkable
class LibraryNotifier(Protocol):
    """Sink for registry events."""

    def on_library_update(
        self,
        name: str,
        payload: Any,
        previous_version: Optional[int],
        new_version: int,
    ) -> None:
        ...

    def on_library_load(self, name: str, payload: Any, version: int) -> None:
        ...

    def on_library_remove(self, name: str, payload: Any, previous_version: Optional[int]) -> None:
        ...


class NullNotifier:
    """Notifier that ignores every event."""

    def on_library_update(self, name, payload, previous_version, new_version) -> None:
        pass

    def on_library_load(self, name, payload, version) -> None:
        pass

    def on_library_remove(self, name, payload, previous_version) -> None:
        pass

    def __repr__(self) -> str:
        return "<NullNotifier>"


class Signal:
    """
    A named event that fans out to connected receivers.

    Receivers are plain callables invoked positionally with the event
    arguments. Features:
        - Owner tagging (disconnect everything an owner registered)
        - Priority ordering (lower runs first, ties keep insertion order)
        - Temporary connections via context manager

    Receiver exceptions never stop the fan-out; they are logged and
    returned in place of the receiver's result.
    """

    def __init__(self, name: str):
        self.name = name
        # Each entry: (receiver, owner, priority)
        self._receivers: List[tuple] = []

    def connect(
        self,
        receiver: Callable,
        *,
        owner: Any = None,
        priority: int = 100,
    ) -> Callable:
        """
        Connect a receiver. Connecting the same callable twice is a no-op.

        Returns the receiver so this can be used as a decorator.
        """
        for existing, _, _ in self._receivers:
            if existing is receiver:
                return receiver

        self._receivers.append((receiver, owner, priority))
        self._receivers.sort(key=lambda entry: entry[2])
        return receiver

    def disconnect(self, receiver: Callable) -> bool:
        """
        Disconnect a receiver.

        Returns True if the receiver was found and removed.
        """
        for i, (existing, _, _) in enumerate(self._receivers):
            if existing is receiver:
                self._receivers.pop(i)
                return True
        return False

    def disconnect_owner(self, owner: Any) -> int:
        """Disconnect every receiver registered by ``owner``. Returns the count."""
        if owner is None:
            return 0
        before = len(self._receivers)
        self._receivers = [entry for entry in self._receivers if entry[1] is not owner]
        return before - len(self._receivers)

    def send(self, *args: Any) -> List[Any]:
        """
        Fire the signal, calling all connected receivers.

        Returns:
            List of return values (or raised exceptions) from receivers
        """
        results: List[Any] = []
        # Receivers may connect/disconnect while we are firing
        for receiver, _, _ in list(self._receivers):
            try:
                results.append(receiver(*args))
            except Exception as exc:
                logger.error(
                    f"Signal '{self.name}' receiver {getattr(receiver, '__name__', receiver)} "
                    f"raised {exc.__class__.__name__}: {exc}"
                )
                results.append(exc)
        return results

    @property
    def receivers(self) -> List[Callable]:
        return [receiver for receiver, _, _ in self._receivers]

    def has_listeners(self) -> bool:
        return bool(self._receivers)

    @contextlib.contextmanager
    def connected(self, receiver: Callable, *, priority: int = 100) -> Iterator[Callable]:
        """
        Context manager for temporary connection.

        The receiver is disconnected on exit.
        """
        self.connect(receiver, priority=priority)
        try:
            yield receiver
        finally:
            self.disconnect(receiver)

    def clear(self) -> None:
        self._receivers.clear()

    def __len__(self) -> int:
        return len(self._receivers)

    def __repr__(self) -> str:
        return f"<Signal '{self.name}' receivers={len(self._receivers)}>"


class LibraryCallbacks:
    """
    Event hub implementing ``LibraryNotifier``.

    Args:
        raise_errors: Re-raise the first receiver exception once every
            receiver of the event has run. Off by default so a faulty
            receiver cannot change registry outcomes.
    """

    def __init__(self, *, raise_errors: bool = False):
        self.raise_errors = raise_errors
        self._signals: Dict[str, Signal] = {event: Signal(event) for event in LIBRARY_EVENTS}

    def _signal(self, event: str) -> Signal:
        signal = self._signals.get(event)
        if signal is None:
            raise CallbackEventFault(event, list(LIBRARY_EVENTS))
        return signal

    def register_callback(
        self,
        event: str,
        func: Callable,
        owner: Any = None,
        *,
        priority: int = 100,
    ) -> Callable:
        """Connect ``func`` to ``event``."""
        return self._signal(event).connect(func, owner=owner, priority=priority)

    def on(self, event: str, *, owner: Any = None, priority: int = 100) -> Callable[[Callable], Callable]:
        """Decorator form of ``register_callback``."""
        def _decorator(func: Callable) -> Callable:
            return self.register_callback(event, func, owner, priority=priority)
        return _decorator

    def unregister_callback(self, event: str, func: Callable) -> bool:
        return self._signal(event).disconnect(func)

    def unregister_owner(self, owner: Any) -> int:
        """Drop every callback ``owner`` registered, across all events."""
        return sum(signal.disconnect_owner(owner) for signal in self._signals.values())

    def has_callbacks(self, event: str) -> bool:
        return self._signal(event).has_listeners()

    def trigger_event(self, event: str, *args: Any) -> List[Any]:
        """
        Fire ``event`` with ``args``.

        Returns:
            Receiver results, with exceptions in place of failed receivers
        """
        results = self._signal(event).send(*args)
        if self.raise_errors:
            for result in results:
                if isinstance(result, Exception):
                    raise result
        return results

    def clear(self) -> None:
        for signal in self._signals.values():
            signal.clear()

    # LibraryNotifier

    def on_library_update(self, name, payload, previous_version, new_version) -> None:
        self.trigger_event(ON_LIBRARY_UPDATE, name, payload, previous_version, new_version)

    def on_library_load(self, name, payload, version) -> None:
        self.trigger_event(ON_LIBRARY_LOAD, name, payload, version)

    def on_library_remove(self, name, payload, previous_version) -> None:
        self.trigger_event(ON_LIBRARY_REMOVE, name, payload, previous_version)

    def __repr__(self) -> str:
        counts = ", ".join(f"{event}={len(signal)}" for event, signal in self._signals.items())
        return f"<LibraryCallbacks {counts}>"
