"""
Core Librarium types and the library registry.

A ``LibraryRegistry`` is a shared namespace for versioned libraries:
independently loaded modules publish a payload under a name, and later
loads either upgrade it (when strictly newer) or defer to what is there.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Tuple

from .callbacks import LibraryNotifier, NullNotifier
from .config import RegistryConfig
from .faults import (
    DependencyUnsatisfiedFault,
    LibraryLockedFault,
    LibraryNotFoundFault,
    LibraryNotLockedFault,
)
from .fingerprint import FingerprintGenerator
from .graph import DependencyEdge, DependencyGraph
from .versioning import RESERVED_NAMES, parse_version, require_name, require_unreserved

logger = logging.getLogger("librarium.registry")


@dataclass
class LibraryEntry:
    """Materialized view of one registered library."""

    name: str
    payload: Any
    version: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "payload": self.payload, "version": self.version}


class LibraryRegistry:
    """
    In-memory registry of named, versioned libraries.

    State lives in four stores that move in lockstep under one re-entrant
    lock: versions, payloads, lock flags and dependency edges.

    Notifications go to the injected notifier after the lock is released,
    so a notifier may call back into the registry.

    Args:
        notifier: Receives update/remove events (``NullNotifier`` if None)
        config: Registry settings (defaults if None)
        payload_factory: Builds the payload for a library's first
            registration
    """

    def __init__(
        self,
        notifier: Optional[LibraryNotifier] = None,
        *,
        config: Optional[RegistryConfig] = None,
        payload_factory: Callable[[], Any] = dict,
    ) -> None:
        self._lock = threading.RLock()
        self._versions: Dict[str, int] = {}
        self._libs: Dict[str, Any] = {}
        self._locked: Set[str] = set()
        self._dependencies = DependencyGraph()

        self.config = config or RegistryConfig()
        self.notifier: LibraryNotifier = notifier if notifier is not None else NullNotifier()
        self.payload_factory = payload_factory
        self.reserved_names = RESERVED_NAMES | frozenset(self.config.reserved_names)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def new_library(self, name: str, version: Any) -> Tuple[Optional[Any], Optional[int]]:
        """
        Register ``name`` at ``version`` unless an equal or newer one exists.

        Args:
            name: Unique library identifier
            version: Number or string containing the version digits

        Returns:
            ``(payload, previous_version)`` when the version was recorded;
            ``(None, previous_version)`` when the existing version is equal
            or newer and nothing changed

        Raises:
            InvalidArgumentFault: Bad name or no digits in ``version``
            ReservedNameFault: ``name`` is a reserved operation name
            LibraryLockedFault: A locked library would be upgraded
        """
        require_name(name, operation="new_library")
        require_unreserved(name, self.reserved_names)
        new_version = parse_version(version, operation="new_library")

        with self._lock:
            return self._new_library_locked(name, new_version)

    def _new_library_locked(self, name: str, new_version: int) -> Tuple[Optional[Any], Optional[int]]:
        old_version = self._versions.get(name)
        if old_version is not None and old_version >= new_version:
            logger.debug("Kept %s at %d (offered %d)", name, old_version, new_version)
            return None, old_version

        if name in self._locked:
            raise LibraryLockedFault(name, "upgraded")

        payload = self._libs[name] if name in self._libs else self.payload_factory()
        self._libs[name] = payload
        self._versions[name] = new_version

        logger.debug("Registered %s %s -> %d", name, old_version, new_version)
        return payload, old_version

    def update_library(self, name: str, version: Any) -> Tuple[Optional[Any], Optional[int]]:
        """
        Force ``name`` to ``version``, even when that is a downgrade.

        A name that is not registered yet goes through ``new_library``.

        Returns:
            ``(payload, previous_version)``

        Raises:
            InvalidArgumentFault: Bad name or no digits in ``version``
            LibraryLockedFault: The library is locked
            ReservedNameFault: New name is reserved
        """
        require_name(name, operation="update_library")
        require_unreserved(name, self.reserved_names)

        with self._lock:
            if name in self._locked:
                raise LibraryLockedFault(name, "updated")

            new_version = parse_version(version, operation="update_library")

            if name not in self._libs:
                return self._new_library_locked(name, new_version)

            payload = self._libs[name]
            old_version = self._versions.get(name)
            self._versions[name] = new_version
            logger.debug("Updated %s %s -> %d", name, old_version, new_version)

        self._notify("on_library_update", name, payload, old_version, new_version)
        return payload, old_version

    def remove_library(self, name: str) -> Tuple[bool, Optional[str]]:
        """
        Remove ``name`` and its payload.

        Returns:
            ``(True, None)`` on removal, ``(False, reason)`` if absent

        Raises:
            LibraryLockedFault: The library is locked
        """
        with self._lock:
            if self._is_locked_locked(name):
                raise LibraryLockedFault(name, "removed")

            if not self._exists_locked(name):
                return False, f"Library '{name}' not found."

            old_version = self._versions.pop(name, None)
            payload = self._libs.pop(name)
            logger.debug("Removed %s (was %s)", name, old_version)

        self._notify("on_library_remove", name, payload, old_version)
        return True, None

    # ------------------------------------------------------------------
    # Lookup & enumeration
    # ------------------------------------------------------------------

    def get_library(self, name: str, silent: bool = False) -> Tuple[Optional[Any], Optional[int]]:
        """
        Look up ``name``.

        Returns:
            ``(payload, version)``; ``(None, None)`` when absent and silent

        Raises:
            LibraryNotFoundFault: Absent and not silent
        """
        with self._lock:
            if self._exists_locked(name):
                return self._libs[name], self._versions.get(name)

        if not silent:
            raise LibraryNotFoundFault(name)
        return None, None

    def library_exists(self, name: str) -> bool:
        with self._lock:
            return self._exists_locked(name)

    def get_version(self, name: str) -> Optional[int]:
        if not isinstance(name, str):
            return None
        with self._lock:
            return self._versions.get(name)

    def count_libraries(self) -> int:
        with self._lock:
            return len(self._libs)

    def iterate_libraries(self, sorted: bool = False) -> Iterator[Tuple[str, Any]]:
        """
        Iterate ``(name, payload)`` pairs.

        The iterator walks a snapshot taken at call time; registry changes
        made while iterating are not reflected and do not break it.
        """
        with self._lock:
            items = list(self._libs.items())
        if sorted:
            items.sort(key=lambda item: item[0])
        return iter(items)

    def list_libraries(self, sorted: bool = False) -> List[LibraryEntry]:
        """Every library with its payload and version."""
        with self._lock:
            entries = [
                LibraryEntry(name=name, payload=payload, version=self._versions[name])
                for name, payload in self._libs.items()
            ]
        if sorted:
            entries.sort(key=lambda entry: entry.name)
        return entries

    def for_each_library(self, visitor: Callable[[str, Any, int], Any]) -> None:
        """
        Call ``visitor(name, payload, version)`` for every library.

        Runs over a snapshot, outside the registry lock; the visitor may
        use the registry, but its changes are not seen by this pass.
        """
        for entry in self.list_libraries():
            visitor(entry.name, entry.payload, entry.version)

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    def is_locked(self, name: str) -> bool:
        with self._lock:
            return self._is_locked_locked(name)

    def lock_library(self, name: str) -> bool:
        """
        Freeze ``name`` against update and removal. Idempotent.

        Raises:
            InvalidArgumentFault: ``name`` is not a string
            LibraryNotFoundFault: ``name`` is not registered
        """
        require_name(name, operation="lock_library")
        with self._lock:
            if not self._exists_locked(name):
                raise LibraryNotFoundFault(name, operation="lock_library")
            self._locked.add(name)
        logger.debug("Locked %s", name)
        return True

    def unlock_library(self, name: str) -> bool:
        """
        Lift the lock on ``name``.

        Raises:
            InvalidArgumentFault: ``name`` is not a string
            LibraryNotLockedFault: ``name`` is not locked
        """
        require_name(name, operation="unlock_library")
        with self._lock:
            if name not in self._locked:
                raise LibraryNotLockedFault(name)
            self._locked.discard(name)
        logger.debug("Unlocked %s", name)
        return True

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    def register_dependency(self, consumer: str, dependency: str, required_version: Any) -> bool:
        """
        Record that ``consumer`` needs ``dependency`` at ``required_version``
        or newer.

        Edges are appended as given: duplicates are kept and the dependency
        does not have to be registered yet.
        """
        require_name(consumer, operation="register_dependency", argument="consumer")
        require_name(dependency, operation="register_dependency", argument="dependency")
        min_version = parse_version(
            required_version,
            operation="register_dependency",
            argument="required_version",
        )
        with self._lock:
            self._dependencies.add_edge(consumer, dependency, min_version)
        return True

    def check_dependencies(self, consumer: str) -> Tuple[bool, Optional[str]]:
        """
        Check ``consumer``'s edges in registration order.

        Returns:
            ``(True, None)`` when every edge is met (or there are none);
            otherwise ``(False, reason)`` for the first unmet edge
        """
        with self._lock:
            for edge in self._edges_locked(consumer):
                if not self._edge_met_locked(edge):
                    return False, _unsatisfied_reason(edge)
        return True, None

    def unmet_dependencies(self, consumer: str) -> List[DependencyEdge]:
        """Every unmet edge of ``consumer``, in registration order."""
        with self._lock:
            return [
                edge for edge in self._edges_locked(consumer)
                if not self._edge_met_locked(edge)
            ]

    def ensure_dependencies(self, consumer: str) -> None:
        """
        Raise unless every edge of ``consumer`` is met.

        Raises:
            DependencyUnsatisfiedFault: For the first unmet edge; metadata
                ``unmet`` lists all of them
        """
        unmet = self.unmet_dependencies(consumer)
        if unmet:
            first = unmet[0]
            raise DependencyUnsatisfiedFault(
                consumer,
                first.dependency,
                first.min_version,
                metadata={"unmet": [edge.to_dict() for edge in unmet]},
            )

    def dependencies_of(self, consumer: str) -> List[DependencyEdge]:
        with self._lock:
            return self._edges_locked(consumer)

    def dependents_of(self, name: str) -> List[str]:
        if not isinstance(name, str):
            return []
        with self._lock:
            return self._dependencies.get_dependents(name)

    def find_dependency_cycle(self) -> Optional[List[str]]:
        with self._lock:
            return self._dependencies.find_cycle()

    def load_order(self) -> List[str]:
        """
        Dependency-first order of every name mentioned by an edge.

        Raises:
            DependencyCycleFault: If the edges form a cycle
        """
        with self._lock:
            return self._dependencies.topological_sort()

    # ------------------------------------------------------------------
    # Reset & inspection
    # ------------------------------------------------------------------

    def reset_libraries(self) -> None:
        """Drop every library, lock and dependency edge."""
        with self._lock:
            self._versions.clear()
            self._libs.clear()
            self._locked.clear()
            self._dependencies.clear()
        logger.debug("Registry reset")

    def fingerprint(self) -> str:
        """SHA-256 digest of names, versions, locks and edges."""
        with self._lock:
            return FingerprintGenerator().generate(
                dict(self._versions),
                set(self._locked),
                self._dependencies.to_dict(),
            )

    def inspect(self) -> Dict[str, Any]:
        """
        Diagnostics snapshot.

        Returns:
            Library count, per-library details, load order (or the cycle
            that prevents one) and the fingerprint
        """
        with self._lock:
            cycle = self._dependencies.find_cycle()
            return {
                "fingerprint": self.fingerprint(),
                "library_count": len(self._libs),
                "libraries": [
                    {
                        "name": name,
                        "version": self._versions[name],
                        "locked": name in self._locked,
                        "dependencies": [
                            edge.to_dict() for edge in self._dependencies.edges(name)
                        ],
                    }
                    for name in sorted(self._libs)
                ],
                "dependency_graph": self._dependencies.to_dict(),
                "load_order": None if cycle else self._dependencies.topological_sort(),
                "cycle": cycle,
            }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _exists_locked(self, name: Any) -> bool:
        return isinstance(name, str) and name in self._libs

    def _is_locked_locked(self, name: Any) -> bool:
        return isinstance(name, str) and name in self._locked

    def _edges_locked(self, consumer: Any) -> List[DependencyEdge]:
        if not isinstance(consumer, str):
            return []
        return self._dependencies.edges(consumer)

    def _edge_met_locked(self, edge: DependencyEdge) -> bool:
        version = self._versions.get(edge.dependency)
        return version is not None and version >= edge.min_version

    def _notify(self, hook: str, *args: Any) -> None:
        try:
            getattr(self.notifier, hook)(*args)
        except Exception as exc:
            if self.config.callback_errors == "raise":
                raise
            logger.error(
                "Notifier %s failed for '%s': %s: %s",
                hook, args[0], exc.__class__.__name__, exc,
            )

    def __len__(self) -> int:
        return self.count_libraries()

    def __contains__(self, name: object) -> bool:
        return self.library_exists(name)

    def __repr__(self) -> str:
        return f"LibraryRegistry({self.count_libraries()} libraries)"


def _unsatisfied_reason(edge: DependencyEdge) -> str:
    return f"Dependency '{edge.dependency}' (version {edge.min_version}) is not satisfied."
