import pytest

from domain_pushdown import Domain, Range, TupleDomain, ValueSet
from domain_pushdown import types as t
from domain_pushdown.decoder import float_to_int_bits
from domain_pushdown.native import Int128

from .conftest import AGE, NAME


class TestRange:
    def test_single_value(self):
        r = Range.equal(t.INTEGER, 5)
        assert r.is_single_value
        assert r.single_value == 5

    def test_closed_interval_is_not_single_value(self):
        r = Range.range(t.INTEGER, 1, True, 2, True)
        assert not r.is_single_value
        with pytest.raises(ValueError):
            r.single_value

    def test_unbounded_ends(self):
        r = Range.greater_than(t.INTEGER, 3)
        assert r.is_high_unbounded
        assert not r.is_low_unbounded
        assert not r.low_inclusive
        assert Range.all(t.INTEGER).is_all

    def test_rejects_empty_point(self):
        with pytest.raises(ValueError):
            Range.range(t.INTEGER, 5, True, 5, False)

    def test_rejects_inclusive_unbounded(self):
        with pytest.raises(ValueError):
            Range(t.INTEGER, None, True, 3, False)

    def test_int128_bounds(self):
        low = Int128.from_int(-(1 << 70))
        high = Int128.from_int(1 << 70)
        assert Range.range(t.decimal(30, 0), low, True, high, False).low == low

    def test_negative_real_interval(self):
        """Bit patterns of negative reals sort in reverse; the range is still accepted."""
        low, high = float_to_int_bits(-2.0), float_to_int_bits(-1.0)
        assert low > high
        r = Range.range(t.REAL, low, True, high, True)
        assert not r.is_single_value
        assert (r.low, r.high) == (low, high)


class TestValueSet:
    def test_keeps_given_order(self):
        ranges = [Range.equal(t.INTEGER, 9), Range.less_than(t.INTEGER, 0)]
        assert ValueSet.of_ranges(t.INTEGER, *ranges).ordered_ranges == ranges

    def test_rejects_mixed_types(self):
        with pytest.raises(ValueError):
            ValueSet.of_ranges(t.INTEGER, Range.equal(t.BIGINT, 1))

    def test_all_and_none(self):
        assert ValueSet.all(t.INTEGER).is_all
        assert ValueSet.none(t.INTEGER).is_none
        assert not ValueSet.of(t.INTEGER, 1).is_all


class TestDomain:
    def test_shapes(self):
        assert Domain.all(t.INTEGER).is_all
        assert Domain.none(t.INTEGER).is_none
        assert Domain.only_null(t.INTEGER).is_only_null
        not_null = Domain.not_null(t.INTEGER)
        assert not_null.values.is_all and not not_null.null_allowed
        assert not not_null.is_all

    def test_multiple_values_needs_values(self):
        with pytest.raises(ValueError):
            Domain.multiple_values(t.INTEGER, [])


class TestTupleDomain:
    def test_all(self):
        assert TupleDomain.all().is_all
        assert TupleDomain.with_column_domains({AGE: Domain.all(t.INTEGER)}).is_all

    def test_none_column_collapses(self):
        td = TupleDomain.with_column_domains(
            {AGE: Domain.single_value(t.INTEGER, 1), NAME: Domain.none(NAME.type)}
        )
        assert td.is_none
        assert td.domains is None
        assert td == TupleDomain.none()

    def test_domains_are_copied(self):
        td = TupleDomain.with_column_domains({AGE: Domain.single_value(t.INTEGER, 1)})
        td.domains.clear()
        assert AGE in td.domains
