"""Literal values in the storage engine's native representation."""

from __future__ import annotations

import decimal
from dataclasses import dataclass


@dataclass(frozen=True)
class BinaryString:
    """UTF-8 encoded string literal. The bytes are kept exactly as received."""

    data: bytes

    def __str__(self) -> str:
        return self.data.decode("utf-8", errors="replace")


@dataclass(frozen=True, order=True)
class Timestamp:
    millisecond: int
    nano_of_millisecond: int = 0

    @classmethod
    def from_epoch_millis(cls, millis: int, nanos_of_millisecond: int = 0) -> Timestamp:
        return cls(millis, nanos_of_millisecond)

    def to_epoch_millis(self) -> int:
        return self.millisecond


@dataclass(frozen=True)
class DecimalLiteral:
    value: decimal.Decimal
    precision: int
    scale: int

    def __post_init__(self):
        exponent = self.value.as_tuple().exponent
        if exponent != -self.scale:
            raise ValueError(f"decimal {self.value} does not have scale {self.scale}")
        digits = len(self.value.as_tuple().digits)
        if digits > self.precision:
            raise ValueError(
                f"decimal {self.value} exceeds precision {self.precision}"
            )

    @classmethod
    def from_unscaled(cls, unscaled: int, precision: int, scale: int) -> DecimalLiteral:
        """Build ``unscaled * 10^-scale`` without going through a rounding context."""
        sign, digits, _ = decimal.Decimal(unscaled).as_tuple()
        return cls(decimal.Decimal((sign, digits, -scale)), precision, scale)

    @property
    def unscaled(self) -> int:
        sign, digits, _ = self.value.as_tuple()
        magnitude = int("".join(str(d) for d in digits))
        return -magnitude if sign else magnitude

    def __str__(self) -> str:
        return str(self.value)
