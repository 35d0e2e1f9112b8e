"""
Lightweight domain validation helpers.

Pure checks with no I/O, applied at the entry points before any store is
touched.  Every failure raises InvalidInputError.
"""

from __future__ import annotations

from typing import Any

from fulfillment_kernel.exceptions import InvalidInputError


def require_identifier(value: Any, name: str) -> str:
    """Return value unchanged; reject blank or whitespace-padded strings."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(name, "must be a non-empty string")
    if value != value.strip():
        raise InvalidInputError(name, "must not have leading or trailing whitespace")
    return value


def require_quantity(value: Any, name: str = "quantity") -> int:
    """Return value if it is a non-negative int (bool is rejected)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(name, f"must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidInputError(name, f"must be >= 0, got {value}")
    return value


def require_positive_quantity(value: Any, name: str = "delta") -> int:
    """Return value if it is an int > 0."""
    value = require_quantity(value, name)
    if value == 0:
        raise InvalidInputError(name, "must be > 0")
    return value
