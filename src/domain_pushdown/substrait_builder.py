"""Predicate builder emitting Substrait expressions.

Leaves are ``functions_comparison`` calls over a direct field reference and a
typed literal, membership is a ``singular_or_list``, and conjunctions and
disjunctions are ``functions_boolean`` calls. Function anchors are handed out
per builder; declare them in the enclosing plan with
:meth:`SubstraitPredicateBuilder.extension_functions`.

Boolean literals are folded as they are combined:

- AND(true, x) -> x, AND(false, x) -> false
- OR(false, x) -> x, OR(true, x) -> true

:func:`is_bool_literal` and :func:`make_bool_literal` are taken unchanged from
substrait-distill's predicate simplification rule, which folds the same way.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from substrait.algebra_pb2 import Expression, FunctionArgument
from substrait.type_pb2 import Type

from .errors import UnsupportedTypeError
from .literals import BinaryString, DecimalLiteral, Timestamp
from .native import unpack_millis_utc
from .predicate import BasePredicateBuilder
from .types import LogicalType, RowType, TypeKind

COMPARISON_URN = "extension:io.substrait:functions_comparison"
BOOLEAN_URN = "extension:io.substrait:functions_boolean"

MICROSECONDS_PER_MILLISECOND = 1_000


def is_bool_literal(expr: Expression, value: bool) -> bool:
    """Check if an expression is a boolean literal with the given value."""
    if expr.WhichOneof("rex_type") != "literal":
        return False
    lit = expr.literal
    if lit.WhichOneof("literal_type") != "boolean":
        return False
    return lit.boolean == value


def make_bool_literal(value: bool) -> Expression:
    """Create a boolean literal expression."""
    expr = Expression()
    expr.literal.boolean = value
    return expr


def field_reference(index: int) -> Expression:
    expr = Expression()
    expr.selection.direct_reference.struct_field.field = index
    expr.selection.root_reference.SetInParent()
    return expr


def make_literal(type_: LogicalType, value: Any) -> Expression:
    """Encode a decoded storage literal as a Substrait literal of ``type_``."""
    expr = Expression()
    lit = expr.literal
    kind = type_.kind

    if kind == TypeKind.BOOLEAN:
        lit.boolean = value
    elif kind == TypeKind.INTEGER:
        lit.i32 = value
    elif kind == TypeKind.BIGINT:
        lit.i64 = value
    elif kind == TypeKind.REAL:
        lit.fp32 = value
    elif kind == TypeKind.DOUBLE:
        lit.fp64 = value
    elif kind == TypeKind.DATE:
        lit.date = value
    elif kind == TypeKind.TIME:
        lit.time = value * MICROSECONDS_PER_MILLISECOND
    elif kind == TypeKind.TIMESTAMP:
        lit.precision_timestamp.precision = 3
        lit.precision_timestamp.value = _epoch_millis(type_, value)
    elif kind == TypeKind.TIMESTAMP_TZ:
        lit.precision_timestamp_tz.precision = 3
        lit.precision_timestamp_tz.value = _epoch_millis(type_, value)
    elif kind == TypeKind.CHAR:
        lit.fixed_char = _text(type_, value)
    elif kind == TypeKind.VARCHAR:
        lit.string = _text(type_, value)
    elif kind == TypeKind.VARBINARY:
        lit.binary = bytes(value)
    elif kind == TypeKind.DECIMAL:
        if not isinstance(value, DecimalLiteral):
            raise UnsupportedTypeError(type_, f"expected a decimal literal, got {value!r}")
        lit.decimal.value = value.unscaled.to_bytes(16, "little", signed=True)
        lit.decimal.precision = value.precision
        lit.decimal.scale = value.scale
    else:
        raise UnsupportedTypeError(type_)
    return expr


def _epoch_millis(type_: LogicalType, value: Any) -> int:
    if isinstance(value, Timestamp):
        return value.to_epoch_millis()
    if type_.kind == TypeKind.TIMESTAMP_TZ and isinstance(value, int):
        return unpack_millis_utc(value)
    raise UnsupportedTypeError(type_, f"expected a timestamp literal, got {value!r}")


def _text(type_: LogicalType, value: Any) -> str:
    if isinstance(value, BinaryString):
        try:
            return value.data.decode("utf-8")
        except UnicodeDecodeError as e:
            # Substrait string literals must be valid UTF-8
            raise UnsupportedTypeError(type_, f"{type_} value is not valid UTF-8: {e}") from e
    raise UnsupportedTypeError(type_, f"expected a string literal, got {value!r}")


class SubstraitPredicateBuilder(BasePredicateBuilder[Expression]):
    """Builds Substrait boolean expressions over the fields of ``row_type``."""

    def __init__(self, row_type: RowType):
        self._row_type = row_type
        self._anchors: dict[tuple[str, str], int] = {}

    def function_names(self) -> dict[int, str]:
        """Mapping from function anchor to function name."""
        return {anchor: name for (_, name), anchor in self._anchors.items()}

    def extension_functions(self) -> list[tuple[str, str, int]]:
        """(urn, name, anchor) for every function used so far, in anchor order."""
        return sorted(
            ((urn, name, anchor) for (urn, name), anchor in self._anchors.items()),
            key=lambda item: item[2],
        )

    def _anchor(self, urn: str, name: str) -> int:
        key = (urn, name)
        if key not in self._anchors:
            self._anchors[key] = len(self._anchors) + 1
        return self._anchors[key]

    def _call(self, urn: str, name: str, args: list[Expression]) -> Expression:
        result = Expression()
        result.scalar_function.function_reference = self._anchor(urn, name)
        result.scalar_function.output_type.bool.nullability = Type.NULLABILITY_NULLABLE
        for expr in args:
            arg = FunctionArgument()
            arg.value.CopyFrom(expr)
            result.scalar_function.arguments.append(arg)
        return result

    def _field_type(self, index: int) -> LogicalType:
        if not 0 <= index < len(self._row_type):
            raise IndexError(
                f"field index {index} out of range for a row of {len(self._row_type)} fields"
            )
        return self._row_type[index].type

    def _compare(self, name: str, index: int, literal: Any) -> Expression:
        type_ = self._field_type(index)
        return self._call(
            COMPARISON_URN, name, [field_reference(index), make_literal(type_, literal)]
        )

    def equal(self, index: int, literal: Any) -> Expression:
        return self._compare("equal", index, literal)

    def is_in(self, index: int, literals: Sequence[Any]) -> Expression:
        if not literals:
            raise ValueError("in-list needs at least one literal")
        type_ = self._field_type(index)
        result = Expression()
        result.singular_or_list.value.CopyFrom(field_reference(index))
        for literal in literals:
            result.singular_or_list.options.append(make_literal(type_, literal))
        return result

    def less_than(self, index: int, literal: Any) -> Expression:
        return self._compare("lt", index, literal)

    def less_or_equal(self, index: int, literal: Any) -> Expression:
        return self._compare("lte", index, literal)

    def greater_than(self, index: int, literal: Any) -> Expression:
        return self._compare("gt", index, literal)

    def greater_or_equal(self, index: int, literal: Any) -> Expression:
        return self._compare("gte", index, literal)

    def is_null(self, index: int) -> Expression:
        self._field_type(index)
        return self._call(COMPARISON_URN, "is_null", [field_reference(index)])

    def is_not_null(self, index: int) -> Expression:
        self._field_type(index)
        return self._call(COMPARISON_URN, "is_not_null", [field_reference(index)])

    def and_(self, predicates: Iterable[Expression]) -> Expression:
        remaining = []
        for expr in predicates:
            if is_bool_literal(expr, False):
                return make_bool_literal(False)
            if not is_bool_literal(expr, True):
                remaining.append(expr)
        if not remaining:
            return make_bool_literal(True)
        if len(remaining) == 1:
            return remaining[0]
        return self._call(BOOLEAN_URN, "and", remaining)

    def or_(self, predicates: Iterable[Expression]) -> Expression:
        remaining = []
        for expr in predicates:
            if is_bool_literal(expr, True):
                return make_bool_literal(True)
            if not is_bool_literal(expr, False):
                remaining.append(expr)
        if not remaining:
            return make_bool_literal(False)
        if len(remaining) == 1:
            return remaining[0]
        return self._call(BOOLEAN_URN, "or", remaining)
