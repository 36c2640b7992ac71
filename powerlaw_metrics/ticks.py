"""
Scale-aware axis ticks.

Linear axes get evenly spaced "nice" steps ({1, 2, 5} x 10^k). Log axes get
three tiers per decade so the renderer can style them apart:

    major         1 x 10^i
    intermediate  2, 5 x 10^i
    minor         3, 4, 6, 7, 8, 9 x 10^i

Tick values are built as integer mantissa over a power of ten, which keeps
0.2 as 0.2 instead of 0.20000000000000001-style noise.
"""

import math
from typing import List, Tuple

import pandas as pd

from .config import (
    GENESIS_MS, DAY_MS, DEFAULT_TICK_COUNT, NICE_MANTISSAS, LOG_MAJOR,
    LOG_INTERMEDIATE, LOG_MINOR, LOG_TICK_MARGIN, MONTH_TICK_MAX_YEARS,
    LabelKind, ScaleMode,
)
from .epoch import age_of
from .errors import DegenerateInput
from .labels import tick_labels, time_label
from .models import AxisTicks, TickSet


def _scaled(n: int, k: int) -> float:
    """n * 10**k without binary drift for negative k"""
    return float(n * 10 ** k) if k >= 0 else n / 10 ** (-k)


def _ordered(lo: float, hi: float) -> Tuple[float, float]:
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise DegenerateInput(f"axis range must be finite, got [{lo}, {hi}]")
    return (lo, hi) if lo <= hi else (hi, lo)


def _nice(raw: float) -> Tuple[int, int]:
    """(mantissa, exponent) of the largest {1,2,5} x 10^k not above ``raw``"""
    if not (raw > 0 and math.isfinite(raw)):
        raise DegenerateInput(f"step must be positive, got {raw}")
    k = math.floor(math.log10(raw))
    if _scaled(1, k + 1) <= raw:
        k += 1
    for m in sorted(NICE_MANTISSAS, reverse=True):
        if _scaled(m, k) <= raw:
            return m, k
    return max(NICE_MANTISSAS), k - 1


def nice_step(raw: float) -> float:
    return _scaled(*_nice(raw))


def linear_ticks(lo: float, hi: float, count: int = DEFAULT_TICK_COUNT,
                 non_negative: bool = False) -> TickSet:
    if count < 2:
        raise ValueError("count must be >= 2")
    lo, hi = _ordered(lo, hi)
    span = (hi - lo) or abs(hi) or 1.0
    m, k = _nice(span / (count - 1))
    step = _scaled(m, k)
    first = math.floor(lo / step + 1e-9)
    last = math.ceil(hi / step - 1e-9)
    ticks = [_scaled(i * m, k) for i in range(first, last + 1)]
    if non_negative:
        ticks = [t for t in ticks if t >= 0] or [0.0]
    return TickSet.from_tiers(ticks)


def log_ticks(lo: float, hi: float, margin: float = LOG_TICK_MARGIN) -> TickSet:
    lo, hi = _ordered(lo, hi)
    if lo <= 0:
        raise DegenerateInput(f"log axis needs a positive range, got [{lo}, {hi}]")
    lower, upper = lo / (1 + margin), hi * (1 + margin)

    tiers = {LOG_MAJOR: [], LOG_INTERMEDIATE: [], LOG_MINOR: []}
    for i in range(math.floor(math.log10(lo)) - 1, math.ceil(math.log10(hi)) + 2):
        for mantissas, bucket in tiers.items():
            for m in mantissas:
                v = _scaled(m, i)
                if lower <= v <= upper:
                    bucket.append(v)
    return TickSet.from_tiers(tiers[LOG_MAJOR], tiers[LOG_INTERMEDIATE], tiers[LOG_MINOR])


def value_ticks(lo: float, hi: float, scale: ScaleMode = ScaleMode.LINEAR,
                count: int = DEFAULT_TICK_COUNT, non_negative: bool = False,
                margin: float = LOG_TICK_MARGIN) -> TickSet:
    if ScaleMode(scale) is ScaleMode.LOG:
        return log_ticks(lo, hi, margin)
    return linear_ticks(lo, hi, count, non_negative)


def value_axis(lo: float, hi: float, kind: LabelKind, scale: ScaleMode = ScaleMode.LINEAR,
               count: int = DEFAULT_TICK_COUNT, non_negative: bool = True) -> AxisTicks:
    ticks = value_ticks(lo, hi, scale, count, non_negative)
    return AxisTicks(ticks, tuple(tick_labels(ticks.all, kind)))


# ───────────────────────────── time axis ─────────────────────────────
def _calendar_ticks(lo: int, hi: int) -> Tuple[List[int], List[int], List[int]]:
    start = pd.Timestamp(lo, unit="ms", tz="UTC")
    end = pd.Timestamp(hi, unit="ms", tz="UTC")
    to_ms = lambda ts: int((ts - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(milliseconds=1))

    major, intermediate, minor = [], [], []
    with_months = (hi - lo) / DAY_MS / 365.25 <= MONTH_TICK_MAX_YEARS
    for ts in pd.date_range(start.floor("D"), end, freq="MS"):
        if ts < start:
            continue
        if ts.month == 1:
            major.append(to_ms(ts))
        elif ts.month in (4, 7, 10):
            intermediate.append(to_ms(ts))
        elif with_months:
            minor.append(to_ms(ts))

    if not (major or intermediate or minor):
        # shorter than a month: one tick per day
        major = [to_ms(ts) for ts in pd.date_range(start.ceil("D"), end, freq="D")]
    return major, intermediate, minor


def time_ticks(start_ms: int, end_ms: int, scale: ScaleMode = ScaleMode.LINEAR,
               epoch_ms: int = GENESIS_MS) -> AxisTicks:
    """
    Calendar ticks between two timestamps. On a linear axis positions are
    timestamps; on a log axis they are genesis-relative ages, and ticks before
    the epoch are dropped because they would all collapse onto age 1.
    """
    lo, hi = _ordered(start_ms, end_ms)
    tiers = _calendar_ticks(int(lo), int(hi))

    if ScaleMode(scale) is ScaleMode.LOG:
        tiers = tuple([t for t in tier if t >= epoch_ms] for tier in tiers)
        position = lambda t: float(age_of(t, epoch_ms))
    else:
        position = float

    labels = {position(t): time_label(t) for tier in tiers for t in tier}
    ticks = TickSet.from_tiers(*([position(t) for t in tier] for tier in tiers))
    return AxisTicks(ticks, tuple(labels[p] for p in ticks.all))
