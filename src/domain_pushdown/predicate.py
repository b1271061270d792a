"""Storage-engine predicate tree and the builders that produce it.

Leaves address columns by their position in the storage :class:`RowType`.
Interior nodes are ``and`` / ``or`` over child predicates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .types import RowType

P = TypeVar("P")


@dataclass(frozen=True)
class LeafPredicate:
    method: str
    index: int
    field: str
    literals: tuple[Any, ...] = ()

    def __str__(self) -> str:
        if not self.literals:
            return f"{self.method}({self.field})"
        if self.method == "in":
            values = ", ".join(str(v) for v in self.literals)
            return f"in({self.field}, {{{values}}})"
        return f"{self.method}({self.field}, {self.literals[0]})"


@dataclass(frozen=True)
class CompoundPredicate:
    method: str
    children: tuple[Predicate, ...]

    def __str__(self) -> str:
        return f"{self.method}({', '.join(str(c) for c in self.children)})"


@dataclass(frozen=True)
class ConstantPredicate:
    value: bool

    def __str__(self) -> str:
        return "alwaysTrue" if self.value else "alwaysFalse"


Predicate = Union[LeafPredicate, CompoundPredicate, ConstantPredicate]

ALWAYS_TRUE = ConstantPredicate(True)
ALWAYS_FALSE = ConstantPredicate(False)


def referenced_fields(predicate: Predicate) -> set[int]:
    """Collect the positions of every field a predicate reads."""
    if isinstance(predicate, LeafPredicate):
        return {predicate.index}
    if isinstance(predicate, CompoundPredicate):
        indices: set[int] = set()
        for child in predicate.children:
            indices |= referenced_fields(child)
        return indices
    return set()


def leaves(predicate: Predicate) -> list[LeafPredicate]:
    if isinstance(predicate, LeafPredicate):
        return [predicate]
    if isinstance(predicate, CompoundPredicate):
        return [leaf for child in predicate.children for leaf in leaves(child)]
    return []


class BasePredicateBuilder(ABC, Generic[P]):
    """Constructors for one storage engine's predicate algebra.

    ``and_([])`` is always true, ``or_([])`` is always false, and either of
    them over a single predicate returns that predicate unchanged.
    """

    @abstractmethod
    def equal(self, index: int, literal: Any) -> P:
        """Field at ``index`` equals ``literal``."""

    @abstractmethod
    def is_in(self, index: int, literals: Sequence[Any]) -> P:
        """Field at ``index`` equals any of ``literals``."""

    @abstractmethod
    def less_than(self, index: int, literal: Any) -> P:
        """Field at ``index`` is below ``literal``."""

    @abstractmethod
    def less_or_equal(self, index: int, literal: Any) -> P:
        """Field at ``index`` is at most ``literal``."""

    @abstractmethod
    def greater_than(self, index: int, literal: Any) -> P:
        """Field at ``index`` is above ``literal``."""

    @abstractmethod
    def greater_or_equal(self, index: int, literal: Any) -> P:
        """Field at ``index`` is at least ``literal``."""

    @abstractmethod
    def is_null(self, index: int) -> P:
        """Field at ``index`` is null."""

    @abstractmethod
    def is_not_null(self, index: int) -> P:
        """Field at ``index`` is not null."""

    @abstractmethod
    def and_(self, predicates: Iterable[P]) -> P:
        """Conjunction of ``predicates``."""

    @abstractmethod
    def or_(self, predicates: Iterable[P]) -> P:
        """Disjunction of ``predicates``."""


class PredicateBuilder(BasePredicateBuilder[Predicate]):
    """Builds :class:`LeafPredicate` / :class:`CompoundPredicate` trees."""

    def __init__(self, row_type: RowType):
        self._row_type = row_type

    def _leaf(self, method: str, index: int, *literals: Any) -> LeafPredicate:
        if not 0 <= index < len(self._row_type):
            raise IndexError(
                f"field index {index} out of range for a row of {len(self._row_type)} fields"
            )
        return LeafPredicate(method, index, self._row_type[index].name, tuple(literals))

    def equal(self, index: int, literal: Any) -> Predicate:
        return self._leaf("equal", index, literal)

    def is_in(self, index: int, literals: Sequence[Any]) -> Predicate:
        if not literals:
            raise ValueError("in-list needs at least one literal")
        return self._leaf("in", index, *literals)

    def less_than(self, index: int, literal: Any) -> Predicate:
        return self._leaf("lessThan", index, literal)

    def less_or_equal(self, index: int, literal: Any) -> Predicate:
        return self._leaf("lessOrEqual", index, literal)

    def greater_than(self, index: int, literal: Any) -> Predicate:
        return self._leaf("greaterThan", index, literal)

    def greater_or_equal(self, index: int, literal: Any) -> Predicate:
        return self._leaf("greaterOrEqual", index, literal)

    def is_null(self, index: int) -> Predicate:
        return self._leaf("isNull", index)

    def is_not_null(self, index: int) -> Predicate:
        return self._leaf("isNotNull", index)

    def and_(self, predicates: Iterable[Predicate]) -> Predicate:
        return _combine("and", list(predicates), ALWAYS_TRUE)

    def or_(self, predicates: Iterable[Predicate]) -> Predicate:
        return _combine("or", list(predicates), ALWAYS_FALSE)


def _combine(method: str, predicates: list[Predicate], empty: Predicate) -> Predicate:
    if not predicates:
        return empty
    if len(predicates) == 1:
        return predicates[0]
    return CompoundPredicate(method, tuple(predicates))
