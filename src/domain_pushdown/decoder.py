"""Decode query-engine native values into storage-engine literals.

Every value handed to :func:`decode_value` is non-null. The mapping per
logical type:

- boolean, bigint, double: passed through
- integer, date: narrowed to 32 bits
- real: the low 32 bits of the int are reinterpreted as an IEEE-754 float
- time(3): picoseconds of day to milliseconds of day
- timestamp(3): the int is taken as epoch microseconds and truncated to millis
- timestamp(3) with time zone: packed ints pass through, long values become
  a :class:`Timestamp` of their epoch millis
- char/varchar: bytes wrapped as :class:`BinaryString`
- varbinary: bytes copied
- decimal: ``unscaled * 10^-scale`` at the declared precision and scale
"""

from __future__ import annotations

import struct
from typing import Any

from .errors import NumericOverflowError, UnsupportedTypeError
from .literals import BinaryString, DecimalLiteral, Timestamp
from .native import Int128, LongTimestampWithTimeZone
from .types import LogicalType, TypeKind

PICOSECONDS_PER_MILLISECOND = 1_000_000_000
MICROSECONDS_PER_MILLISECOND = 1_000
MILLIS_PRECISION = 3

_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def to_int_exact(value: int, target: str = "int32") -> int:
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise NumericOverflowError(value, target)
    return value


def int_bits_to_float(bits: int) -> float:
    return struct.unpack("<f", struct.pack("<I", bits & 0xFFFFFFFF))[0]


def float_to_int_bits(value: float) -> int:
    """Inverse of :func:`int_bits_to_float`, as the engine boxes a real."""
    return struct.unpack("<i", struct.pack("<f", value))[0]


def _truncating_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def _require_millis(type_: LogicalType) -> None:
    if type_.precision != MILLIS_PRECISION:
        raise UnsupportedTypeError(type_)


def _wrong_shape(type_: LogicalType, value: Any) -> UnsupportedTypeError:
    return UnsupportedTypeError(
        type_, f"cannot read a {type_} value from {type(value).__name__}"
    )


def _as_int(type_: LogicalType, value: Any) -> int:
    # bool is an int subclass but never a valid numeric carrier
    if isinstance(value, bool) or not isinstance(value, int):
        raise _wrong_shape(type_, value)
    return value


def _as_bytes(type_: LogicalType, value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise UnsupportedTypeError(
        type_, f"expected a byte sequence for {type_}, got {type(value).__name__}"
    )


def _decode_decimal(type_: LogicalType, value: Any) -> DecimalLiteral:
    if isinstance(value, int):
        unscaled = value
    elif isinstance(value, Int128):
        unscaled = value.to_int()
    elif isinstance(value, (bytes, bytearray)):
        unscaled = int.from_bytes(value, "little", signed=True)
    else:
        raise UnsupportedTypeError(
            type_, f"cannot read a decimal from {type(value).__name__}"
        )
    if len(str(abs(unscaled))) > type_.precision:
        raise NumericOverflowError(unscaled, str(type_))
    return DecimalLiteral.from_unscaled(unscaled, type_.precision, type_.scale)


def _decode_timestamp_tz(type_: LogicalType, value: Any) -> Any:
    if isinstance(value, int):
        return value
    if isinstance(value, LongTimestampWithTimeZone):
        return Timestamp.from_epoch_millis(value.epoch_millis)
    raise UnsupportedTypeError(
        type_, f"cannot read a timestamp with time zone from {type(value).__name__}"
    )


def decode_value(type_: LogicalType, value: Any) -> Any:
    """Convert one engine-native value of ``type_`` into a storage literal.

    Raises:
        UnsupportedTypeError: the type has no storage literal form.
        NumericOverflowError: a 32-bit narrowing received a wider value.
    """
    assert value is not None, "null values are never decoded"
    kind = type_.kind

    if kind == TypeKind.BOOLEAN:
        if not isinstance(value, bool):
            raise _wrong_shape(type_, value)
        return value
    if kind == TypeKind.DOUBLE:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _wrong_shape(type_, value)
        return value
    if kind == TypeKind.BIGINT:
        return _as_int(type_, value)
    if kind == TypeKind.INTEGER:
        return to_int_exact(_as_int(type_, value), "integer")
    if kind == TypeKind.REAL:
        return int_bits_to_float(_as_int(type_, value))
    if kind == TypeKind.DATE:
        return to_int_exact(_as_int(type_, value), "date")
    if kind == TypeKind.TIME:
        _require_millis(type_)
        return _truncating_div(_as_int(type_, value), PICOSECONDS_PER_MILLISECOND)
    if kind == TypeKind.TIMESTAMP:
        _require_millis(type_)
        value = _as_int(type_, value)
        # TODO: confirm the engine hands timestamp(3) over in micros before relying
        # on this division for anything stricter than pruning.
        return Timestamp.from_epoch_millis(
            _truncating_div(value, MICROSECONDS_PER_MILLISECOND)
        )
    if kind == TypeKind.TIMESTAMP_TZ:
        _require_millis(type_)
        return _decode_timestamp_tz(type_, value)
    if kind in (TypeKind.CHAR, TypeKind.VARCHAR):
        return BinaryString(_as_bytes(type_, value))
    if kind == TypeKind.VARBINARY:
        return _as_bytes(type_, value)
    if kind == TypeKind.DECIMAL:
        return _decode_decimal(type_, value)

    # array, map, row and the unsupported tail
    raise UnsupportedTypeError(type_)
