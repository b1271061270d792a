"""Value carriers used by the query engine for types that do not fit a plain int."""

from __future__ import annotations

from dataclasses import dataclass

_MASK_64 = (1 << 64) - 1
TIME_ZONE_MASK = 0xFFF
MILLIS_SHIFT = 12


@dataclass(frozen=True, order=True)
class Int128:
    """Two's complement 128-bit integer stored as signed high and unsigned low halves.

    Long decimals (precision > 18) carry their unscaled value this way.
    """

    high: int
    low: int

    @classmethod
    def from_int(cls, value: int) -> Int128:
        if not -(1 << 127) <= value < (1 << 127):
            raise OverflowError(f"{value} does not fit in 128 bits")
        return cls(value >> 64, value & _MASK_64)

    def to_int(self) -> int:
        return (self.high << 64) | (self.low & _MASK_64)


@dataclass(frozen=True, order=True)
class LongTimestampWithTimeZone:
    epoch_millis: int
    picos_of_milli: int = 0
    time_zone_key: int = 0


def pack_datetime_with_zone(epoch_millis: int, time_zone_key: int) -> int:
    """Pack epoch millis and a zone key into the engine's short timestamp-with-tz form."""
    return (epoch_millis << MILLIS_SHIFT) | (time_zone_key & TIME_ZONE_MASK)


def unpack_millis_utc(packed: int) -> int:
    return packed >> MILLIS_SHIFT
