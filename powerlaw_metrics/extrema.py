"""
All-time-high and trailing-window low markers.
"""

from .config import GENESIS_MS, DAY_MS, ONE_YEAR_DAYS
from .epoch import age_of
from .errors import EmptySeries
from .models import ExtremumPoint, Observation, Series


def _marker(o: Observation, epoch_ms: int) -> ExtremumPoint:
    return ExtremumPoint(o.value, o.timestamp, age_of(o.timestamp, epoch_ms))


def all_time_high(series: Series, epoch_ms: int = GENESIS_MS) -> ExtremumPoint:
    if not series:
        raise EmptySeries("all-time high of an empty series")
    best = series[0]
    for o in series[1:]:
        if o.value > best.value:
            best = o
    return _marker(best, epoch_ms)


def global_low(series: Series, epoch_ms: int = GENESIS_MS) -> ExtremumPoint:
    if not series:
        raise EmptySeries("low of an empty series")
    best = series[0]
    for o in series[1:]:
        if o.value < best.value:
            best = o
    return _marker(best, epoch_ms)


def one_year_low(series: Series, now_ms: int, window_days: int = ONE_YEAR_DAYS,
                 epoch_ms: int = GENESIS_MS) -> ExtremumPoint:
    """Lowest value in the last ``window_days``; the global low when that window is empty."""
    if not series:
        raise EmptySeries("one-year low of an empty series")
    cutoff = now_ms - window_days * DAY_MS
    recent = [o for o in series if o.timestamp >= cutoff]
    return global_low(recent or series, epoch_ms)
