from datetime import date, timedelta
from itertools import product

import pytest

from shared.domain.value_objects import DateRange, date_in_range, ranges_overlap


def test_single_day_touching_end_overlaps():
    assert ranges_overlap(date(2024, 7, 20), date(2024, 7, 20), date(2024, 7, 18), date(2024, 7, 20))


def test_adjacent_ranges_do_not_overlap():
    assert not ranges_overlap(date(2024, 7, 21), date(2024, 7, 25), date(2024, 7, 18), date(2024, 7, 20))


def test_containment_overlaps():
    assert ranges_overlap(date(2024, 7, 1), date(2024, 7, 31), date(2024, 7, 10), date(2024, 7, 12))
    assert ranges_overlap(date(2024, 7, 10), date(2024, 7, 12), date(2024, 7, 1), date(2024, 7, 31))


def test_overlap_is_symmetric():
    base = date(2024, 7, 1)
    days = [base + timedelta(days=n) for n in range(6)]
    ranges = [(a, b) for a, b in product(days, days) if a <= b]

    for (a_from, a_to), (b_from, b_to) in product(ranges, ranges):
        assert ranges_overlap(a_from, a_to, b_from, b_to) == ranges_overlap(b_from, b_to, a_from, a_to)


def test_date_in_range_is_inclusive():
    assert date_in_range(date(2024, 7, 18), date(2024, 7, 18), date(2024, 7, 20))
    assert date_in_range(date(2024, 7, 20), date(2024, 7, 18), date(2024, 7, 20))
    assert not date_in_range(date(2024, 7, 21), date(2024, 7, 18), date(2024, 7, 20))


class TestDateRange:

    def test_rejects_inverted_range(self):
        with pytest.raises(ValueError):
            DateRange(date(2024, 7, 20), date(2024, 7, 18))

    def test_length_counts_both_ends(self):
        assert len(DateRange(date(2024, 7, 18), date(2024, 7, 20))) == 3
        assert len(DateRange(date(2024, 7, 20), date(2024, 7, 20))) == 1

    def test_days_and_contains(self):
        dates = DateRange(date(2024, 7, 30), date(2024, 8, 1))
        assert list(dates.days()) == [date(2024, 7, 30), date(2024, 7, 31), date(2024, 8, 1)]
        assert dates.contains(date(2024, 7, 31))
        assert not dates.contains(date(2024, 8, 2))

    def test_overlaps_with(self):
        first = DateRange(date(2024, 7, 18), date(2024, 7, 20))
        assert first.overlaps_with(DateRange(date(2024, 7, 20), date(2024, 7, 20)))
        assert not first.overlaps_with(DateRange(date(2024, 7, 21), date(2024, 7, 25)))

    def test_includes_weekend(self):
        # 2024-07-20 is a Saturday
        assert DateRange(date(2024, 7, 19), date(2024, 7, 20)).includes_weekend()
        assert not DateRange(date(2024, 7, 15), date(2024, 7, 19)).includes_weekend()

    def test_str(self):
        assert str(DateRange(date(2024, 7, 18), date(2024, 7, 20))) == "18.07.2024 - 20.07.2024"
