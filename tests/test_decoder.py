import decimal
import struct

import pytest

from domain_pushdown import NumericOverflowError, UnsupportedTypeError, decode_value
from domain_pushdown import types as t
from domain_pushdown.decoder import float_to_int_bits, int_bits_to_float
from domain_pushdown.literals import BinaryString, DecimalLiteral, Timestamp
from domain_pushdown.native import (
    Int128,
    LongTimestampWithTimeZone,
    pack_datetime_with_zone,
)


class TestScalarDecoding:
    def test_passthrough_types(self):
        """boolean, bigint and double come back unchanged."""
        assert decode_value(t.BOOLEAN, True) is True
        assert decode_value(t.BIGINT, 1 << 40) == 1 << 40
        assert decode_value(t.DOUBLE, 2.5) == 2.5

    def test_integer_narrows(self):
        assert decode_value(t.INTEGER, -7) == -7
        assert decode_value(t.INTEGER, (1 << 31) - 1) == (1 << 31) - 1

    def test_integer_overflow(self):
        with pytest.raises(NumericOverflowError):
            decode_value(t.INTEGER, 1 << 31)
        with pytest.raises(NumericOverflowError):
            decode_value(t.INTEGER, -(1 << 31) - 1)

    @pytest.mark.parametrize(
        "type_, value",
        [
            (t.BOOLEAN, 1),
            (t.BIGINT, 1.0),
            (t.BIGINT, True),
            (t.DOUBLE, "2.5"),
            (t.INTEGER, "3"),
            (t.INTEGER, False),
            (t.REAL, 1.5),
            (t.DATE, 19_000.0),
            (t.TIME_MILLIS, b"\x00"),
            (t.TIMESTAMP_MILLIS, 1.0),
        ],
    )
    def test_wrong_native_shape_unsupported(self, type_, value):
        """A value of the wrong Python type is an unsupported value, not a TypeError."""
        with pytest.raises(UnsupportedTypeError):
            decode_value(type_, value)

    def test_date_narrows(self):
        assert decode_value(t.DATE, 19_000) == 19_000
        with pytest.raises(NumericOverflowError):
            decode_value(t.DATE, 1 << 40)


class TestRealDecoding:
    @pytest.mark.parametrize("value", [0.0, 1.5, -3.25, 3.4028234663852886e38, 1e-45])
    def test_recovers_float_bits(self, value):
        """A real boxed as its int bits decodes to the same single-precision bits."""
        bits = float_to_int_bits(value)
        decoded = decode_value(t.REAL, bits)
        assert struct.pack("<f", decoded) == struct.pack("<f", value)

    def test_uses_low_32_bits(self):
        """Sign-extended and unsigned forms of the same bits decode identically."""
        bits = float_to_int_bits(-2.0)
        assert bits < 0
        assert int_bits_to_float(bits) == int_bits_to_float(bits & 0xFFFFFFFF) == -2.0


class TestTemporalDecoding:
    def test_time_picos_to_millis(self):
        picos = (3_600_000 + 250) * 1_000_000_000 + 999
        assert decode_value(t.TIME_MILLIS, picos) == 3_600_250

    def test_timestamp_micros_to_millis(self):
        assert decode_value(t.TIMESTAMP_MILLIS, 1_700_000_000_123_456) == Timestamp(
            1_700_000_000_123
        )

    def test_timestamp_truncates_toward_zero(self):
        assert decode_value(t.TIMESTAMP_MILLIS, -1_500) == Timestamp(-1)

    def test_timestamp_tz_packed_passes_through(self):
        packed = pack_datetime_with_zone(1_700_000_000_000, 7)
        assert decode_value(t.TIMESTAMP_TZ_MILLIS, packed) == packed

    def test_timestamp_tz_long_value(self):
        value = LongTimestampWithTimeZone(1_700_000_000_000, 500, 3)
        assert decode_value(t.TIMESTAMP_TZ_MILLIS, value) == Timestamp(1_700_000_000_000)

    @pytest.mark.parametrize(
        "type_", [t.time(6), t.timestamp(6), t.timestamp_tz(9), t.timestamp(0)]
    )
    def test_non_millis_precision_unsupported(self, type_):
        with pytest.raises(UnsupportedTypeError):
            decode_value(type_, 1)


class TestBinaryDecoding:
    def test_varchar_keeps_bytes(self):
        raw = "zürich".encode("utf-8")
        assert decode_value(t.varchar(10), raw) == BinaryString(raw)

    def test_char_keeps_bytes(self):
        assert decode_value(t.char(3), b"ab ") == BinaryString(b"ab ")

    def test_varbinary_copies(self):
        raw = bytearray(b"\x00\xff")
        decoded = decode_value(t.VARBINARY, raw)
        raw[0] = 1
        assert decoded == b"\x00\xff"

    def test_string_value_rejected(self):
        with pytest.raises(UnsupportedTypeError):
            decode_value(t.VARCHAR, "not bytes")


class TestDecimalDecoding:
    def test_short_decimal(self):
        decoded = decode_value(t.decimal(10, 2), 1050)
        assert decoded == DecimalLiteral(decimal.Decimal("10.50"), 10, 2)
        assert str(decoded) == "10.50"

    def test_negative_short_decimal(self):
        assert decode_value(t.decimal(5, 3), -5).value == decimal.Decimal("-0.005")

    def test_long_decimal_is_exact(self):
        """38 digits survive without rounding through a decimal context."""
        unscaled = 12345678901234567890123456789012345678
        decoded = decode_value(t.decimal(38, 10), Int128.from_int(unscaled))
        assert decoded.value == decimal.Decimal("1234567890123456789012345678.9012345678")
        assert decoded.unscaled == unscaled

    def test_long_negative_decimal(self):
        decoded = decode_value(t.decimal(20, 0), Int128.from_int(-(10**19)))
        assert decoded.unscaled == -(10**19)

    def test_too_many_digits(self):
        with pytest.raises(NumericOverflowError):
            decode_value(t.decimal(3, 1), 12345)


class TestUnsupportedTypes:
    @pytest.mark.parametrize(
        "type_",
        [
            t.array(t.INTEGER),
            t.map_of(t.VARCHAR, t.INTEGER),
            t.row(t.INTEGER, t.VARCHAR),
            t.unsupported("json"),
        ],
    )
    def test_raises_unsupported_type(self, type_):
        with pytest.raises(UnsupportedTypeError):
            decode_value(type_, 1)
