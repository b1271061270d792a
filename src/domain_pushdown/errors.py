"""Reasons a column's filter cannot be pushed down to the storage engine."""

from __future__ import annotations

from typing import Any


class PushdownError(Exception):
    """Base exception for all pushdown conversion errors."""


class UnsupportedTypeError(PushdownError):
    """A value of this logical type cannot be decoded into a storage literal."""

    def __init__(self, type_: Any, message: str | None = None) -> None:
        self.type = type_
        super().__init__(message or f"Unsupported type: {type_}")


class NumericOverflowError(PushdownError):
    """A narrowing conversion received a value outside the target range."""

    def __init__(self, value: int, target: str) -> None:
        self.value = value
        self.target = target
        super().__init__(f"{value} does not fit in {target}")


class UnsupportedComplexTypeError(PushdownError):
    """Filters over array, map and row columns are never pushed down."""

    def __init__(self, type_: Any) -> None:
        self.type = type_
        super().__init__(f"Filters over complex type {type_} are not pushed down")


class AlwaysTrueUnsupportedError(PushdownError):
    """The domain accepts every row and has no predicate form."""


class AlwaysFalseUnsupportedError(PushdownError):
    """The domain rejects every row and has no predicate form."""
