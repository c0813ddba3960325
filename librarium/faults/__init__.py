"""
Librarium Faults - Structured fault handling.

Registry errors are typed fault signals with a stable code, a domain and
a severity, so callers can branch on `fault.code` instead of parsing
messages.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
- Registry, dependency, callback and config fault types
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    RegistryFault,
    InvalidArgumentFault,
    ReservedNameFault,
    LibraryNotFoundFault,
    LibraryLockedFault,
    LibraryNotLockedFault,
    DependencyUnsatisfiedFault,
    DependencyCycleFault,
    CallbackFault,
    CallbackEventFault,
    ConfigFault,
    ConfigInvalidFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",

    # Registry
    "RegistryFault",
    "InvalidArgumentFault",
    "ReservedNameFault",
    "LibraryNotFoundFault",
    "LibraryLockedFault",
    "LibraryNotLockedFault",

    # Dependency
    "DependencyUnsatisfiedFault",
    "DependencyCycleFault",

    # Callback
    "CallbackFault",
    "CallbackEventFault",

    # Config
    "ConfigFault",
    "ConfigInvalidFault",
]
