import pytest
from substrait.algebra_pb2 import Rel
from substrait.builders import plan as pb
from substrait.builders import type as tb
from substrait.extension_registry import ExtensionRegistry

from domain_pushdown import (
    ColumnHandle,
    FilterConverter,
    PredicateBuilder,
    RowType,
    SubstraitPredicateBuilder,
)
from domain_pushdown import types as t

AGE = ColumnHandle("age", t.INTEGER)
NAME = ColumnHandle("name", t.varchar())
PRICE = ColumnHandle("price", t.decimal(10, 2))
TAGS = ColumnHandle("tags", t.array(t.varchar()))
ATTRS = ColumnHandle("attrs", t.map_of(t.varchar(), t.varchar()))
CREATED = ColumnHandle("created", t.TIMESTAMP_MILLIS)
SCORE = ColumnHandle("score", t.REAL)

COLUMNS = [AGE, NAME, PRICE, TAGS, ATTRS, CREATED, SCORE]


def make_row_type(columns: list[ColumnHandle] = COLUMNS) -> RowType:
    """Create a storage row type with one field per column handle, in order."""
    return RowType.of(*((c.name, c.type) for c in columns))


def index_of(column: ColumnHandle) -> int:
    return make_row_type().field_index(column.name)


@pytest.fixture
def row_type():
    return make_row_type()


@pytest.fixture
def builder(row_type):
    return PredicateBuilder(row_type)


@pytest.fixture
def substrait_builder(row_type):
    return SubstraitPredicateBuilder(row_type)


@pytest.fixture
def converter(row_type):
    return FilterConverter(row_type)


REGISTRY = ExtensionRegistry()


def make_read(table_name: str, field_names: list[str]) -> Rel:
    """Create a materialized Read rel of a named table with i32 fields."""
    schema = tb.named_struct(
        field_names, tb.struct([tb.i32() for _ in field_names], nullable=False)
    )
    plan = pb.read_named_table(table_name, schema)(REGISTRY)
    return plan.relations[0].root.input


def get_rel_type(rel) -> str:
    return rel.WhichOneof("rel_type") or ""
