"""
Test 7: Faults (faults/)

Tests the Fault base class, domains, severities and every registry fault
type's code, message and metadata.
"""

import pytest

from librarium.faults import (
    DOMAIN_DEFAULTS,
    CallbackEventFault,
    ConfigInvalidFault,
    DependencyCycleFault,
    DependencyUnsatisfiedFault,
    Fault,
    FaultDomain,
    InvalidArgumentFault,
    LibraryLockedFault,
    LibraryNotFoundFault,
    LibraryNotLockedFault,
    RegistryFault,
    ReservedNameFault,
    Severity,
)


# ============================================================================
# Core
# ============================================================================

class TestSeverity:

    def test_aliases(self):
        assert Severity.LOW is Severity.INFO
        assert Severity.HIGH is Severity.ERROR
        assert Severity.CRITICAL is Severity.FATAL

    def test_str_enum(self):
        assert Severity.ERROR == "error"


class TestFaultDomain:

    def test_standard_domains(self):
        assert str(FaultDomain.REGISTRY) == "registry"
        assert FaultDomain.DEPENDENCY.value == "dependency"

    def test_equality(self):
        assert FaultDomain("registry") == FaultDomain.REGISTRY
        assert FaultDomain.REGISTRY == "registry"
        assert hash(FaultDomain("registry")) == hash(FaultDomain.REGISTRY)

    def test_defaults(self):
        assert DOMAIN_DEFAULTS[FaultDomain.REGISTRY]["severity"] == Severity.ERROR
        assert DOMAIN_DEFAULTS[FaultDomain.CONFIG]["severity"] == Severity.FATAL


class TestFault:

    def test_basic(self):
        fault = Fault(code="X", message="something", domain=FaultDomain.REGISTRY)
        assert isinstance(fault, Exception)
        assert str(fault) == "[X] something"
        assert fault.severity == Severity.ERROR
        assert fault.retryable is False

    def test_missing_fields(self):
        with pytest.raises(TypeError):
            Fault(message="no code", domain=FaultDomain.REGISTRY)

    def test_custom_domain_defaults(self):
        fault = Fault(code="X", message="m", domain=FaultDomain("plugins"))
        assert fault.severity == Severity.ERROR

    def test_extra_kwargs_land_in_metadata(self):
        fault = Fault(code="X", message="m", domain=FaultDomain.SYSTEM, metadata={"a": 1}, b=2)
        assert fault.metadata == {"a": 1, "b": 2}

    def test_to_dict(self):
        fault = Fault(code="X", message="m", domain=FaultDomain.SYSTEM)
        assert fault.to_dict() == {
            "code": "X",
            "message": "m",
            "domain": "system",
            "severity": "fatal",
            "retryable": False,
            "public": False,
            "metadata": {},
        }

    def test_repr(self):
        fault = Fault(code="X", message="m", domain=FaultDomain.REGISTRY)
        assert repr(fault) == "Fault(code='X', domain=registry, severity=error, public=False)"


# ============================================================================
# Registry faults
# ============================================================================

class TestRegistryFaults:

    def test_invalid_argument(self):
        fault = InvalidArgumentFault("new_library", "version", "no digits")
        assert isinstance(fault, RegistryFault)
        assert fault.code == "INVALID_ARGUMENT"
        assert fault.message == "Bad argument 'version' to 'new_library' (no digits)"
        assert fault.domain == FaultDomain.REGISTRY
        assert fault.severity == Severity.ERROR

    def test_reserved_name(self):
        fault = ReservedNameFault("RemoveLibrary")
        assert fault.message == "Library name 'RemoveLibrary' is protected and cannot be used."

    def test_not_found(self):
        assert LibraryNotFoundFault("LibX").message == "Library 'LibX' not found."
        fault = LibraryNotFoundFault("LibX", operation="lock_library")
        assert fault.message == "Cannot lock non-existing library 'LibX'."

    def test_locked(self):
        fault = LibraryLockedFault("LibX", "updated")
        assert fault.message == "Library 'LibX' is locked and cannot be updated."
        assert fault.code == "LIBRARY_LOCKED"

    def test_not_locked(self):
        assert LibraryNotLockedFault("LibX").message == "Library 'LibX' is not locked."

    def test_metadata_merge(self):
        fault = LibraryLockedFault("LibX", "removed", metadata={"thread": "main"})
        assert fault.metadata == {"name": "LibX", "action": "removed", "thread": "main"}


class TestDependencyFaults:

    def test_unsatisfied(self):
        fault = DependencyUnsatisfiedFault("LibApp", "LibCore", 3)
        assert fault.domain == FaultDomain.DEPENDENCY
        assert fault.message == "Dependency 'LibCore' (version 3) is not satisfied."
        assert fault.metadata["min_version"] == 3

    def test_cycle(self):
        fault = DependencyCycleFault(["A", "B"])
        assert fault.message == "Circular dependency detected: A -> B -> A"
        assert fault.metadata == {"cycle": ["A", "B"], "cycle_length": 2}


class TestOtherFaults:

    def test_callback_event(self):
        fault = CallbackEventFault("OnBoom", ["OnLibraryUpdate"])
        assert fault.domain == FaultDomain.CALLBACK
        assert "OnBoom" in fault.message

    def test_config_invalid(self):
        fault = ConfigInvalidFault("registry.callback_errors", "bad")
        assert fault.severity == Severity.FATAL
        assert fault.message == "Invalid configuration for 'registry.callback_errors': bad"
