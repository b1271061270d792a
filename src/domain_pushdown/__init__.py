from .converter import (
    ColumnConversion,
    ConversionReport,
    FilterConverter,
    SkippedColumn,
    SkipReason,
    convert_domain,
    convert_range,
)
from .decoder import decode_value
from .domain import ColumnHandle, Domain, Range, TupleDomain, ValueSet
from .errors import (
    AlwaysFalseUnsupportedError,
    AlwaysTrueUnsupportedError,
    NumericOverflowError,
    PushdownError,
    UnsupportedComplexTypeError,
    UnsupportedTypeError,
)
from .predicate import (
    ALWAYS_FALSE,
    ALWAYS_TRUE,
    BasePredicateBuilder,
    CompoundPredicate,
    LeafPredicate,
    PredicateBuilder,
)
from .read import push_filter_into_read
from .substrait_builder import SubstraitPredicateBuilder
from .types import DataField, LogicalType, RowType, TypeKind

__all__ = [
    "ALWAYS_FALSE",
    "ALWAYS_TRUE",
    "AlwaysFalseUnsupportedError",
    "AlwaysTrueUnsupportedError",
    "BasePredicateBuilder",
    "ColumnConversion",
    "ColumnHandle",
    "CompoundPredicate",
    "ConversionReport",
    "DataField",
    "Domain",
    "FilterConverter",
    "LeafPredicate",
    "LogicalType",
    "NumericOverflowError",
    "PredicateBuilder",
    "PushdownError",
    "Range",
    "RowType",
    "SkipReason",
    "SkippedColumn",
    "SubstraitPredicateBuilder",
    "TupleDomain",
    "TypeKind",
    "UnsupportedComplexTypeError",
    "UnsupportedTypeError",
    "ValueSet",
    "convert_domain",
    "convert_range",
    "decode_value",
    "push_filter_into_read",
]
