"""
Tests for calendar-day series alignment.
"""

from datetime import timedelta, timezone

import pytest

from powerlaw_metrics import AlignedPair, EmptySeries, Observation, align
from conftest import day_ms, daily


class TestAlign:

    def test_time_of_day_offset(self):
        """Midnight and noon samples on the same dates pair up"""
        a = daily([1, 2, 3, 4, 5], first_age=20, hour=0)
        b = daily([10, 20, 30, 40, 50], first_age=20, hour=12)
        pairs = align(a, b)
        assert [(p.timestamp, p.primary, p.secondary) for p in pairs] == [
            (day_ms(20 + i), float(i + 1), float(10 * (i + 1))) for i in range(5)
        ]

    def test_unmatched_dropped(self):
        a = daily([1, 2, 3, 4], first_age=1)
        b = daily([7, 8], first_age=2, hour=6)
        pairs = align(a, b)
        assert pairs == [AlignedPair(day_ms(2), 2.0, 7.0), AlignedPair(day_ms(3), 3.0, 8.0)]

    def test_first_secondary_per_day_wins(self):
        a = daily([1.0], first_age=3)
        b = (Observation(day_ms(3, hour=1), 100.0), Observation(day_ms(3, hour=20), 200.0))
        assert align(a, b)[0].secondary == 100.0

    def test_follows_primary_order(self):
        a = daily([1, 2, 3])
        b = daily([4, 5, 6], hour=9)
        assert [p.timestamp for p in align(a, b)] == [o.timestamp for o in a]
        assert [p.timestamp for p in align(b, a)] == [o.timestamp for o in b]

    def test_timezone_shifts_day(self):
        """23:00 UTC and 01:00 UTC next day meet on the same local day at UTC+2"""
        a = (Observation(day_ms(5, hour=23), 1.0),)
        b = (Observation(day_ms(6, hour=1), 2.0),)
        assert align(a, b) == []
        assert len(align(a, b, timezone(timedelta(hours=2)))) == 1

    def test_inputs_not_mutated(self):
        a = daily([1, 2, 3])
        b = daily([3, 2, 1], hour=4)
        before = (a, b)
        align(a, b)
        assert (a, b) == before

    def test_empty(self):
        with pytest.raises(EmptySeries):
            align((), daily([1]))
        with pytest.raises(EmptySeries):
            align(daily([1]), [])
