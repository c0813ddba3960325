"""
Librarium Faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- REGISTRY faults (arguments, reserved names, lookups, locking)
- DEPENDENCY faults
- CALLBACK faults
- CONFIG faults
"""

from typing import Any, Optional

from .core import Fault, FaultDomain, Severity


# ============================================================================
# REGISTRY Faults
# ============================================================================

class RegistryFault(Fault):
    """Base class for library registry faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        domain: FaultDomain = FaultDomain.REGISTRY,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=domain,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class InvalidArgumentFault(RegistryFault):
    """Argument has the wrong type or carries no parseable version."""

    def __init__(self, operation: str, argument: str, reason: str, **kwargs):
        super().__init__(
            code="INVALID_ARGUMENT",
            message=f"Bad argument '{argument}' to '{operation}' ({reason})",
            metadata={
                "operation": operation,
                "argument": argument,
                "reason": reason,
                **kwargs.get("metadata", {}),
            },
        )


class ReservedNameFault(RegistryFault):
    """Library name collides with a reserved operation name."""

    def __init__(self, name: str, **kwargs):
        super().__init__(
            code="RESERVED_NAME",
            message=f"Library name '{name}' is protected and cannot be used.",
            metadata={"name": name, **kwargs.get("metadata", {})},
        )


class LibraryNotFoundFault(RegistryFault):
    """Required library is not registered."""

    def __init__(self, name: str, *, operation: str = "get_library", **kwargs):
        if operation == "lock_library":
            message = f"Cannot lock non-existing library '{name}'."
        else:
            message = f"Library '{name}' not found."
        super().__init__(
            code="LIBRARY_NOT_FOUND",
            message=message,
            metadata={"name": name, "operation": operation, **kwargs.get("metadata", {})},
        )


class LibraryLockedFault(RegistryFault):
    """Update or removal attempted on a locked library."""

    def __init__(self, name: str, action: str, **kwargs):
        super().__init__(
            code="LIBRARY_LOCKED",
            message=f"Library '{name}' is locked and cannot be {action}.",
            metadata={"name": name, "action": action, **kwargs.get("metadata", {})},
        )


class LibraryNotLockedFault(RegistryFault):
    """Unlock attempted on a library that is not locked."""

    def __init__(self, name: str, **kwargs):
        super().__init__(
            code="LIBRARY_NOT_LOCKED",
            message=f"Library '{name}' is not locked.",
            metadata={"name": name, **kwargs.get("metadata", {})},
        )


# ============================================================================
# DEPENDENCY Faults
# ============================================================================

class DependencyUnsatisfiedFault(RegistryFault):
    """A dependency edge's minimum version is not met."""

    def __init__(self, consumer: str, dependency: str, min_version: int, **kwargs):
        super().__init__(
            code="DEPENDENCY_UNSATISFIED",
            message=f"Dependency '{dependency}' (version {min_version}) is not satisfied.",
            domain=FaultDomain.DEPENDENCY,
            metadata={
                "consumer": consumer,
                "dependency": dependency,
                "min_version": min_version,
                **kwargs.get("metadata", {}),
            },
        )


class DependencyCycleFault(RegistryFault):
    """Circular dependency detected in the dependency graph."""

    def __init__(self, cycle: list[str], **kwargs):
        cycle_str = " -> ".join(cycle + cycle[:1])
        super().__init__(
            code="DEPENDENCY_CYCLE",
            message=f"Circular dependency detected: {cycle_str}",
            domain=FaultDomain.DEPENDENCY,
            metadata={"cycle": cycle, "cycle_length": len(cycle), **kwargs.get("metadata", {})},
        )


# ============================================================================
# CALLBACK Faults
# ============================================================================

class CallbackFault(Fault):
    """Base class for callback bridge faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CALLBACK,
            severity=Severity.ERROR,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class CallbackEventFault(CallbackFault):
    """Event name is not one the bridge declares."""

    def __init__(self, event: str, known: list[str], **kwargs):
        super().__init__(
            code="CALLBACK_EVENT_UNKNOWN",
            message=f"Unknown callback event '{event}' (expected one of: {', '.join(known)})",
            metadata={"event": event, "known": known, **kwargs.get("metadata", {})},
        )


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Invalid configuration for '{key}': {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )
