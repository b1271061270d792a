"""Convert query-engine tuple domains into storage-engine predicates.

Pushdown only narrows what the storage engine reads; the engine filters the
scanned rows again. A column whose domain cannot be expressed is therefore
dropped from the predicate, never approximated.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .decoder import decode_value
from .domain import ColumnHandle, Domain, Range, TupleDomain
from .errors import (
    AlwaysFalseUnsupportedError,
    AlwaysTrueUnsupportedError,
    NumericOverflowError,
    PushdownError,
    UnsupportedComplexTypeError,
    UnsupportedTypeError,
)
from .predicate import BasePredicateBuilder, PredicateBuilder
from .types import LogicalType, RowType

logger = logging.getLogger(__name__)

P = TypeVar("P")


class SkipReason(enum.Enum):
    ALWAYS_TRUE = "always true"
    ALWAYS_FALSE = "always false"
    UNSUPPORTED_COMPLEX_TYPE = "unsupported complex type"
    UNSUPPORTED_TYPE = "unsupported type"
    NUMERIC_OVERFLOW = "numeric overflow"

    @property
    def is_unsupported_input(self) -> bool:
        return self not in (SkipReason.ALWAYS_TRUE, SkipReason.ALWAYS_FALSE)


_SHAPE_ERRORS = {
    SkipReason.ALWAYS_TRUE: AlwaysTrueUnsupportedError,
    SkipReason.ALWAYS_FALSE: AlwaysFalseUnsupportedError,
}


@dataclass(frozen=True)
class ColumnConversion(Generic[P]):
    """Outcome of converting one column: a predicate, or why there is none."""

    predicate: P | None = None
    skip_reason: SkipReason | None = None
    detail: str = ""
    error: PushdownError | None = None

    @classmethod
    def converted(cls, predicate: P) -> ColumnConversion[P]:
        return cls(predicate=predicate)

    @classmethod
    def skipped(
        cls, reason: SkipReason, detail: str, error: PushdownError | None = None
    ) -> ColumnConversion[P]:
        return cls(skip_reason=reason, detail=detail, error=error)

    @property
    def ok(self) -> bool:
        return self.skip_reason is None

    def to_error(self) -> PushdownError:
        assert self.skip_reason is not None, "a converted column has no error"
        if self.error is not None:
            return self.error
        return _SHAPE_ERRORS[self.skip_reason](self.detail)


@dataclass(frozen=True)
class SkippedColumn:
    column: str
    type: LogicalType
    reason: SkipReason
    detail: str


@dataclass
class ConversionReport(Generic[P]):
    predicate: P | None = None
    skipped: list[SkippedColumn] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)


def convert_range(
    builder: BasePredicateBuilder[P], index: int, range_: Range
) -> P:
    """Predicate for one interval: a bound comparison per bounded end, ANDed.

    Raises:
        UnsupportedTypeError, NumericOverflowError: a bound cannot be decoded.
    """
    type_ = range_.type
    if range_.is_single_value:
        return builder.equal(index, decode_value(type_, range_.single_value))

    conjuncts = []
    if not range_.is_low_unbounded:
        low = decode_value(type_, range_.low)
        if range_.low_inclusive:
            conjuncts.append(builder.greater_or_equal(index, low))
        else:
            conjuncts.append(builder.greater_than(index, low))
    if not range_.is_high_unbounded:
        high = decode_value(type_, range_.high)
        if range_.high_inclusive:
            conjuncts.append(builder.less_or_equal(index, high))
        else:
            conjuncts.append(builder.less_than(index, high))
    return builder.and_(conjuncts)


def _ranges_to_predicate(
    builder: BasePredicateBuilder[P], index: int, type_: LogicalType, domain: Domain
) -> P:
    ranges = domain.values.ordered_ranges
    assert ranges, "a value-constrained domain has at least one range"

    values = []
    disjuncts = []
    for range_ in ranges:
        if range_.is_single_value:
            values.append(decode_value(type_, range_.single_value))
        else:
            disjuncts.append(convert_range(builder, index, range_))

    predicates = []
    if values:
        predicates.append(builder.is_in(index, values))
    predicates.extend(disjuncts)
    if domain.null_allowed:
        predicates.append(builder.is_null(index))
    return builder.or_(predicates)


def convert_domain(
    builder: BasePredicateBuilder[P], index: int, type_: LogicalType, domain: Domain
) -> ColumnConversion[P]:
    """Convert one column's domain into a single predicate.

    Complex columns are rejected before the domain shape is looked at, so an
    array, map or row column never yields a predicate of any kind.
    """
    if type_.is_composite:
        error = UnsupportedComplexTypeError(type_)
        return ColumnConversion.skipped(
            SkipReason.UNSUPPORTED_COMPLEX_TYPE, str(error), error
        )

    if domain.is_all:
        return ColumnConversion.skipped(
            SkipReason.ALWAYS_TRUE, "domain accepts every value and null"
        )
    if domain.values.is_none:
        if domain.null_allowed:
            return ColumnConversion.converted(builder.is_null(index))
        # Not pushed as always-false; the engine drops these rows after the scan.
        return ColumnConversion.skipped(
            SkipReason.ALWAYS_FALSE, "domain accepts no value and no null"
        )
    if domain.values.is_all:
        # null_allowed with every value is the is_all case above
        return ColumnConversion.converted(builder.is_not_null(index))

    try:
        return ColumnConversion.converted(
            _ranges_to_predicate(builder, index, type_, domain)
        )
    except NumericOverflowError as e:
        return ColumnConversion.skipped(SkipReason.NUMERIC_OVERFLOW, str(e), e)
    except UnsupportedTypeError as e:
        return ColumnConversion.skipped(SkipReason.UNSUPPORTED_TYPE, str(e), e)


class FilterConverter:
    """Translates a :class:`TupleDomain` into a predicate over ``row_type``.

    With ``strict=True`` a column that fails for lack of support (complex or
    undecodable type, overflow) raises instead of being left out. Always-true
    and always-false columns are left out either way.
    """

    def __init__(self, row_type: RowType, strict: bool = False):
        self._row_type = row_type
        self._strict = strict

    @property
    def row_type(self) -> RowType:
        return self._row_type

    def convert(
        self,
        tuple_domain: TupleDomain,
        builder: BasePredicateBuilder[P] | None = None,
    ) -> P | None:
        """Return the pushed-down predicate, or None if nothing can be pushed."""
        return self.convert_with_report(tuple_domain, builder).predicate

    def convert_with_report(
        self,
        tuple_domain: TupleDomain,
        builder: BasePredicateBuilder[P] | None = None,
    ) -> ConversionReport[P]:
        report: ConversionReport[P] = ConversionReport()
        if tuple_domain.is_none:
            # Same as the all case: no predicate, the engine filter still applies.
            logger.debug("Tuple domain matches no rows, nothing pushed down")
            return report
        if tuple_domain.is_all:
            return report

        if builder is None:
            builder = PredicateBuilder(self._row_type)

        conjuncts = []
        for column, domain in tuple_domain.domains.items():
            index = self._row_type.field_index(column.name)
            if index is None:
                report.unresolved.append(column.name)
                continue
            result = convert_domain(builder, index, column.type, domain)
            if result.ok:
                conjuncts.append(result.predicate)
            else:
                self._skip(column, result, report)

        if not conjuncts:
            logger.debug("No column of %s could be pushed down", tuple_domain)
            return report
        report.predicate = builder.and_(conjuncts)
        return report

    def _skip(
        self, column: ColumnHandle, result: ColumnConversion, report: ConversionReport
    ) -> None:
        if self._strict and result.skip_reason.is_unsupported_input:
            raise result.to_error()
        if result.skip_reason.is_unsupported_input:
            logger.warning(
                "Unsupported predicate on column %s of type %s, maybe the type "
                "of column is not supported yet: %s",
                column.name,
                column.type,
                result.detail,
            )
        else:
            logger.debug(
                "Column %s is %s, no predicate pushed", column.name, result.skip_reason.value
            )
        report.skipped.append(
            SkippedColumn(column.name, column.type, result.skip_reason, result.detail)
        )
