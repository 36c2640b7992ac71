"""
Shared fixtures: synthetic daily series anchored on the genesis epoch.
"""

import pytest

from powerlaw_metrics import Observation, GENESIS_MS, DAY_MS

HOUR_MS = 3_600_000


def day_ms(age: int, hour: int = 0) -> int:
    """Timestamp of ``age`` (1 = genesis day) at ``hour`` UTC"""
    return GENESIS_MS + (age - 1) * DAY_MS + hour * HOUR_MS


def daily(values, first_age: int = 1, hour: int = 0):
    """Series with one observation per day starting at ``first_age``"""
    return tuple(Observation(day_ms(first_age + i, hour), float(v)) for i, v in enumerate(values))


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def power_series():
    """price = 0.0003 * age^2.5 for ages 1..500, no noise"""
    return tuple(Observation(day_ms(a), 0.0003 * a ** 2.5) for a in range(1, 501))


@pytest.fixture
def price_hashrate():
    """
    40 aligned days: hashrate sampled at 12:00 UTC, price at 00:00 UTC,
    price = 0.05 * (hashrate / 1e15) ** 0.8 exactly
    """
    hashrate = daily([(100 + 5 * i) * 1e15 for i in range(40)], first_age=10, hour=12)
    price = daily([0.05 * (h.value / 1e15) ** 0.8 for h in hashrate], first_age=10)
    return price, hashrate
