"""
Genesis-relative time index and calendar helpers.

Age is the regression variable for every metric: whole days since the
genesis epoch, counted from 1 so that ``log(age)`` is always defined.
"""

import math
from datetime import date, datetime, timezone, tzinfo
from typing import List, Optional, Tuple

import pandas as pd

from .config import GENESIS_MS, DAY_MS, TIME_PERIOD_DAYS
from .models import Observation, Series


def age_of(timestamp, epoch_ms: int = GENESIS_MS) -> int:
    """Days since ``epoch_ms`` (floor), plus one; never below 1."""
    if not math.isfinite(timestamp):
        raise ValueError(f"timestamp must be finite, got {timestamp!r}")
    days = (timestamp - epoch_ms) // DAY_MS
    return max(1, int(days) + 1)


def ages(series: Series, epoch_ms: int = GENESIS_MS) -> List[int]:
    return [age_of(o.timestamp, epoch_ms) for o in series]


def to_millis(when) -> int:
    """datetime / pandas Timestamp / ISO string / epoch ms -> epoch ms (naive taken as UTC)"""
    if isinstance(when, (int, float)) and not isinstance(when, bool):
        return int(when)
    ts = pd.Timestamp(when)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return int(ts.value // 1_000_000)


def day_key(timestamp: int, tz: tzinfo = timezone.utc) -> date:
    """Calendar day of a timestamp in ``tz``"""
    return datetime.fromtimestamp(timestamp / 1000, tz).date()


def window_start(period: str, now_ms: int) -> Optional[int]:
    """Cutoff timestamp for a named time period ("1M" … "3Y"); None for "All"."""
    try:
        days = TIME_PERIOD_DAYS[period]
    except KeyError:
        raise ValueError(f"unknown time period {period!r}; expected one of {list(TIME_PERIOD_DAYS)}") from None
    if days is None:
        return None
    return now_ms - days * DAY_MS


def filter_since(series: Series, start_ms: Optional[int]) -> Tuple[Observation, ...]:
    if start_ms is None:
        return tuple(series)
    return tuple(o for o in series if o.timestamp >= start_ms)
