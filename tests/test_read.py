from substrait.algebra_pb2 import Rel

from domain_pushdown import push_filter_into_read
from domain_pushdown.substrait_builder import make_bool_literal

from .conftest import get_rel_type, make_read


class TestPushFilterIntoRead:
    def test_read_gets_best_effort_filter(self, substrait_builder):
        """The predicate lands on the read as a hint; the input is untouched."""
        read = make_read("t", ["a", "b"])
        pred = substrait_builder.is_not_null(0)
        result = push_filter_into_read(read, pred)

        assert get_rel_type(result) == "read"
        assert result.read.best_effort_filter == pred
        assert not read.read.HasField("best_effort_filter")

    def test_filter_over_read_is_kept(self, substrait_builder):
        """Filter(Read) keeps the filter rel and sets best_effort_filter below it."""
        rel = Rel()
        rel.filter.input.CopyFrom(make_read("t", ["a", "b"]))
        rel.filter.condition.CopyFrom(make_bool_literal(True))
        pred = substrait_builder.is_null(1)

        result = push_filter_into_read(rel, pred)
        assert get_rel_type(result) == "filter"
        assert result.filter.input.read.best_effort_filter == pred

    def test_existing_best_effort_filter_not_overwritten(self, substrait_builder):
        read = make_read("t", ["a", "b"])
        first = push_filter_into_read(read, substrait_builder.is_null(0))
        assert push_filter_into_read(first, substrait_builder.is_null(1)) is None

    def test_non_read_input(self, substrait_builder):
        rel = Rel()
        rel.cross.left.CopyFrom(make_read("l", ["a"]))
        rel.cross.right.CopyFrom(make_read("r", ["b"]))
        assert push_filter_into_read(rel, substrait_builder.is_null(0)) is None
