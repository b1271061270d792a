"""Logical column types shared by the query engine and the storage schema."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class TypeKind(enum.Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    BIGINT = "bigint"
    REAL = "real"
    DOUBLE = "double"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMESTAMP_TZ = "timestamp with time zone"
    CHAR = "char"
    VARCHAR = "varchar"
    VARBINARY = "varbinary"
    DECIMAL = "decimal"
    ARRAY = "array"
    MAP = "map"
    ROW = "row"
    # Anything the decoder does not know about (json, uuid, ipaddress, ...).
    UNSUPPORTED = "unsupported"


COMPOSITE_KINDS = frozenset({TypeKind.ARRAY, TypeKind.MAP, TypeKind.ROW})


@dataclass(frozen=True)
class LogicalType:
    kind: TypeKind
    precision: int | None = None
    scale: int | None = None
    length: int | None = None
    element_types: tuple[LogicalType, ...] = ()
    name: str | None = None

    @property
    def is_composite(self) -> bool:
        return self.kind in COMPOSITE_KINDS

    def __str__(self) -> str:
        if self.name is not None:
            return self.name
        if self.kind == TypeKind.DECIMAL:
            return f"decimal({self.precision}, {self.scale})"
        if self.kind in (TypeKind.TIME, TypeKind.TIMESTAMP):
            return f"{self.kind.value}({self.precision})"
        if self.kind == TypeKind.TIMESTAMP_TZ:
            return f"timestamp({self.precision}) with time zone"
        if self.kind in (TypeKind.CHAR, TypeKind.VARCHAR) and self.length is not None:
            return f"{self.kind.value}({self.length})"
        if self.element_types:
            inner = ", ".join(str(t) for t in self.element_types)
            return f"{self.kind.value}({inner})"
        return self.kind.value


BOOLEAN = LogicalType(TypeKind.BOOLEAN)
INTEGER = LogicalType(TypeKind.INTEGER)
BIGINT = LogicalType(TypeKind.BIGINT)
REAL = LogicalType(TypeKind.REAL)
DOUBLE = LogicalType(TypeKind.DOUBLE)
DATE = LogicalType(TypeKind.DATE)
VARBINARY = LogicalType(TypeKind.VARBINARY)
TIME_MILLIS = LogicalType(TypeKind.TIME, precision=3)
TIMESTAMP_MILLIS = LogicalType(TypeKind.TIMESTAMP, precision=3)
TIMESTAMP_TZ_MILLIS = LogicalType(TypeKind.TIMESTAMP_TZ, precision=3)
VARCHAR = LogicalType(TypeKind.VARCHAR)


def varchar(length: int | None = None) -> LogicalType:
    return LogicalType(TypeKind.VARCHAR, length=length)


def char(length: int) -> LogicalType:
    return LogicalType(TypeKind.CHAR, length=length)


def decimal(precision: int, scale: int) -> LogicalType:
    if not 1 <= precision <= 38:
        raise ValueError(f"decimal precision must be in [1, 38], got {precision}")
    if not 0 <= scale <= precision:
        raise ValueError(f"decimal scale must be in [0, {precision}], got {scale}")
    return LogicalType(TypeKind.DECIMAL, precision=precision, scale=scale)


def time(precision: int = 3) -> LogicalType:
    return LogicalType(TypeKind.TIME, precision=precision)


def timestamp(precision: int = 3) -> LogicalType:
    return LogicalType(TypeKind.TIMESTAMP, precision=precision)


def timestamp_tz(precision: int = 3) -> LogicalType:
    return LogicalType(TypeKind.TIMESTAMP_TZ, precision=precision)


def array(element: LogicalType) -> LogicalType:
    return LogicalType(TypeKind.ARRAY, element_types=(element,))


def map_of(key: LogicalType, value: LogicalType) -> LogicalType:
    return LogicalType(TypeKind.MAP, element_types=(key, value))


def row(*fields: LogicalType) -> LogicalType:
    return LogicalType(TypeKind.ROW, element_types=tuple(fields))


def unsupported(name: str) -> LogicalType:
    return LogicalType(TypeKind.UNSUPPORTED, name=name)


@dataclass(frozen=True)
class DataField:
    name: str
    type: LogicalType
    nullable: bool = True


@dataclass(frozen=True)
class RowType:
    """Storage row schema. Predicates address its fields by position."""

    fields: tuple[DataField, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, *fields: tuple[str, LogicalType]) -> RowType:
        return cls(tuple(DataField(name, type_) for name, type_ in fields))

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field_index(self, name: str) -> int | None:
        """Position of the field with exactly this name, or None if absent."""
        for i, f in enumerate(self.fields):
            if f.name == name:
                return i
        return None

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, index: int) -> DataField:
        return self.fields[index]
