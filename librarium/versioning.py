"""
Version parsing and name validation.

Versions are single non-negative integers. Any value whose string form
contains a decimal digit run is accepted; the first run wins, so
``"LibFoo-1.0-42"`` parses as 1 and ``"$Revision: 17 $"`` as 17.
"""

from __future__ import annotations

import re
from typing import Any, FrozenSet, Iterable

from .faults import InvalidArgumentFault, ReservedNameFault


_DIGIT_RUN = re.compile(r"[0-9]+")

RESERVED_NAMES: FrozenSet[str] = frozenset({
    "RemoveLibrary",
    "LibraryExists",
    "UpdateLibrary",
    "ListLibrary",
    "remove_library",
    "library_exists",
    "update_library",
    "list_libraries",
})


def parse_version(value: Any, *, operation: str = "new_library", argument: str = "version") -> int:
    """
    Extract the integer version from ``value``.

    Args:
        value: Number, string or any object whose ``str()`` embeds a version
        operation: Calling operation, reported in the fault
        argument: Argument name, reported in the fault

    Returns:
        The first maximal digit run as an int

    Raises:
        InvalidArgumentFault: If no digit run is present, or it is too long
            to convert
    """
    match = _DIGIT_RUN.search(str(value))
    if match is None:
        raise InvalidArgumentFault(
            operation,
            argument,
            f"version must be a number or contain a number, got {value!r}",
        )
    digits = match.group()
    try:
        return int(digits)
    except ValueError:
        # Interpreter caps int() conversion length
        raise InvalidArgumentFault(
            operation,
            argument,
            f"version too large ({len(digits)} digits)",
        ) from None


def require_name(name: Any, *, operation: str, argument: str = "name") -> str:
    """Ensure ``name`` is a non-empty string."""
    if not isinstance(name, str):
        raise InvalidArgumentFault(
            operation,
            argument,
            f"str expected, got {type(name).__name__}",
        )
    if not name:
        raise InvalidArgumentFault(operation, argument, "name must not be empty")
    return name


def require_unreserved(name: str, reserved: Iterable[str] = RESERVED_NAMES) -> str:
    """Reject names that collide with reserved operation identifiers."""
    if name in reserved:
        raise ReservedNameFault(name)
    return name
