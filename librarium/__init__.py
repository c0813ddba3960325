"""
Librarium - in-process registry for named, versioned libraries.

Independently loaded modules publish a payload under a name once; later
loads upgrade it when strictly newer or defer to the existing instance.

- Version-gated registration with forced updates
- Per-library locking against update and removal
- Minimum-version dependency edges, checked on demand
- Optional notifier for update/remove events
"""

__version__ = "1.0.0"

from .core import (
    LibraryRegistry,
    LibraryEntry,
)

from .callbacks import (
    LibraryNotifier,
    NullNotifier,
    LibraryCallbacks,
    Signal,
    ON_LIBRARY_UPDATE,
    ON_LIBRARY_LOAD,
    ON_LIBRARY_REMOVE,
    LIBRARY_EVENTS,
)

from .config import (
    ConfigLoader,
    RegistryConfig,
)

from .graph import (
    DependencyGraph,
    DependencyEdge,
)

from .fingerprint import FingerprintGenerator

from .versioning import (
    RESERVED_NAMES,
    parse_version,
)

from .faults import (
    Fault,
    FaultDomain,
    Severity,
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
    # Core
    "LibraryRegistry",
    "LibraryEntry",

    # Callbacks
    "LibraryNotifier",
    "NullNotifier",
    "LibraryCallbacks",
    "Signal",
    "ON_LIBRARY_UPDATE",
    "ON_LIBRARY_LOAD",
    "ON_LIBRARY_REMOVE",
    "LIBRARY_EVENTS",

    # Config
    "ConfigLoader",
    "RegistryConfig",

    # Graph
    "DependencyGraph",
    "DependencyEdge",

    # Fingerprint
    "FingerprintGenerator",

    # Versioning
    "RESERVED_NAMES",
    "parse_version",

    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "RegistryFault",
    "InvalidArgumentFault",
    "ReservedNameFault",
    "LibraryNotFoundFault",
    "LibraryLockedFault",
    "LibraryNotLockedFault",
    "DependencyUnsatisfiedFault",
    "DependencyCycleFault",
    "CallbackFault",
    "CallbackEventFault",
    "ConfigFault",
    "ConfigInvalidFault",
]
