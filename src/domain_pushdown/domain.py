"""Query-engine filter constraints: ranges, value sets, domains and tuple domains.

A :class:`TupleDomain` maps each filtered column to a :class:`Domain`. A domain
is a :class:`ValueSet` of ordered, non-overlapping ranges plus a flag saying
whether null passes. Values are engine-native (ints, bytes, :class:`Int128`,
...), never decoded here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .types import LogicalType


@dataclass(frozen=True)
class ColumnHandle:
    name: str
    type: LogicalType


@dataclass(frozen=True)
class Range:
    """Interval over one ordered type. A ``None`` bound means unbounded."""

    type: LogicalType
    low: Any = None
    low_inclusive: bool = False
    high: Any = None
    high_inclusive: bool = False

    def __post_init__(self):
        if self.low is None and self.low_inclusive:
            raise ValueError("an unbounded low end cannot be inclusive")
        if self.high is None and self.high_inclusive:
            raise ValueError("an unbounded high end cannot be inclusive")
        # Bounds are engine-native, e.g. a real is its int bit pattern, so they
        # are not ordered here; the engine hands over sorted, non-empty ranges.
        if self.low is not None and self.high is not None:
            if self.low == self.high and not (self.low_inclusive and self.high_inclusive):
                raise ValueError(f"range at {self.low!r} is empty")

    @classmethod
    def all(cls, type_: LogicalType) -> Range:
        return cls(type_)

    @classmethod
    def equal(cls, type_: LogicalType, value: Any) -> Range:
        return cls(type_, value, True, value, True)

    @classmethod
    def range(
        cls,
        type_: LogicalType,
        low: Any,
        low_inclusive: bool,
        high: Any,
        high_inclusive: bool,
    ) -> Range:
        return cls(type_, low, low_inclusive, high, high_inclusive)

    @classmethod
    def greater_than(cls, type_: LogicalType, low: Any) -> Range:
        return cls(type_, low, False)

    @classmethod
    def greater_than_or_equal(cls, type_: LogicalType, low: Any) -> Range:
        return cls(type_, low, True)

    @classmethod
    def less_than(cls, type_: LogicalType, high: Any) -> Range:
        return cls(type_, high=high, high_inclusive=False)

    @classmethod
    def less_than_or_equal(cls, type_: LogicalType, high: Any) -> Range:
        return cls(type_, high=high, high_inclusive=True)

    @property
    def is_low_unbounded(self) -> bool:
        return self.low is None

    @property
    def is_high_unbounded(self) -> bool:
        return self.high is None

    @property
    def is_single_value(self) -> bool:
        return (
            self.low is not None
            and self.low_inclusive
            and self.high_inclusive
            and self.low == self.high
        )

    @property
    def is_all(self) -> bool:
        return self.is_low_unbounded and self.is_high_unbounded

    @property
    def single_value(self) -> Any:
        if not self.is_single_value:
            raise ValueError(f"{self} is not a single value")
        return self.low


@dataclass(frozen=True)
class ValueSet:
    """Ordered ranges of permitted non-null values for one column."""

    type: LogicalType
    ranges: tuple[Range, ...] = ()

    @classmethod
    def all(cls, type_: LogicalType) -> ValueSet:
        return cls(type_, (Range.all(type_),))

    @classmethod
    def none(cls, type_: LogicalType) -> ValueSet:
        return cls(type_, ())

    @classmethod
    def of_ranges(cls, type_: LogicalType, *ranges: Range) -> ValueSet:
        for r in ranges:
            if r.type != type_:
                raise ValueError(f"range over {r.type} in a value set of {type_}")
        return cls(type_, tuple(ranges))

    @classmethod
    def of(cls, type_: LogicalType, *values: Any) -> ValueSet:
        return cls.of_ranges(type_, *(Range.equal(type_, v) for v in values))

    @property
    def is_none(self) -> bool:
        return not self.ranges

    @property
    def is_all(self) -> bool:
        return len(self.ranges) == 1 and self.ranges[0].is_all

    @property
    def ordered_ranges(self) -> list[Range]:
        return list(self.ranges)


@dataclass(frozen=True)
class Domain:
    values: ValueSet
    null_allowed: bool

    @property
    def type(self) -> LogicalType:
        return self.values.type

    @classmethod
    def create(cls, values: ValueSet, null_allowed: bool) -> Domain:
        return cls(values, null_allowed)

    @classmethod
    def all(cls, type_: LogicalType) -> Domain:
        return cls(ValueSet.all(type_), True)

    @classmethod
    def none(cls, type_: LogicalType) -> Domain:
        return cls(ValueSet.none(type_), False)

    @classmethod
    def only_null(cls, type_: LogicalType) -> Domain:
        return cls(ValueSet.none(type_), True)

    @classmethod
    def not_null(cls, type_: LogicalType) -> Domain:
        return cls(ValueSet.all(type_), False)

    @classmethod
    def single_value(cls, type_: LogicalType, value: Any) -> Domain:
        return cls(ValueSet.of(type_, value), False)

    @classmethod
    def multiple_values(cls, type_: LogicalType, values: list[Any]) -> Domain:
        if not values:
            raise ValueError("values cannot be empty")
        return cls(ValueSet.of(type_, *values), False)

    @property
    def is_all(self) -> bool:
        return self.values.is_all and self.null_allowed

    @property
    def is_none(self) -> bool:
        return self.values.is_none and not self.null_allowed

    @property
    def is_only_null(self) -> bool:
        return self.values.is_none and self.null_allowed


class TupleDomain:
    """Conjunction of per-column domains.

    ``domains`` is None when no row can match at all. A column that is absent
    from the mapping is unconstrained.
    """

    __slots__ = ("_domains",)

    def __init__(self, domains: Mapping[ColumnHandle, Domain] | None):
        self._domains = None if domains is None else dict(domains)

    @classmethod
    def all(cls) -> TupleDomain:
        return cls({})

    @classmethod
    def none(cls) -> TupleDomain:
        return cls(None)

    @classmethod
    def with_column_domains(cls, domains: Mapping[ColumnHandle, Domain]) -> TupleDomain:
        if any(d.is_none for d in domains.values()):
            return cls.none()
        return cls(domains)

    @property
    def domains(self) -> dict[ColumnHandle, Domain] | None:
        return None if self._domains is None else dict(self._domains)

    @property
    def is_none(self) -> bool:
        return self._domains is None

    @property
    def is_all(self) -> bool:
        return self._domains is not None and all(d.is_all for d in self._domains.values())

    def __eq__(self, other):
        return isinstance(other, TupleDomain) and self._domains == other._domains

    def __hash__(self):
        if self._domains is None:
            return hash(None)
        return hash(frozenset(self._domains.items()))

    def __repr__(self):
        if self._domains is None:
            return "TupleDomain.none()"
        return f"TupleDomain({self._domains!r})"
