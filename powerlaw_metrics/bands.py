"""
Regression line and support/resistance envelopes projected from a fit.

The y value of every projected point comes from the genesis-relative age of
the original timestamp. The display axis only decides what goes into x, so
switching between a date axis and an age axis never moves the curve.
"""

from typing import Iterable, List, Sequence

from .config import (
    GENESIS_MS, DAY_MS, REGRESSION_MULT, SUPPORT_MULT, RESISTANCE_MULT, AxisMode,
)
from .epoch import age_of
from .models import BandSet, FitResult, Point


def project(fit: FitResult, timestamps: Iterable[int], multiplier: float = REGRESSION_MULT,
            axis: AxisMode = AxisMode.TIMESTAMP, epoch_ms: int = GENESIS_MS) -> List[Point]:
    axis = AxisMode(axis)
    out = []
    for ts in timestamps:
        age = age_of(ts, epoch_ms)
        y = fit.coefficient * max(1, age) ** fit.exponent * multiplier
        out.append(Point(ts if axis is AxisMode.TIMESTAMP else age, y))
    return out


def band_set(fit: FitResult, timestamps: Sequence[int], support: float = SUPPORT_MULT,
             resistance: float = RESISTANCE_MULT, axis: AxisMode = AxisMode.TIMESTAMP,
             epoch_ms: int = GENESIS_MS) -> BandSet:
    timestamps = list(timestamps)
    return BandSet(
        regression=tuple(project(fit, timestamps, REGRESSION_MULT, axis, epoch_ms)),
        support=tuple(project(fit, timestamps, support, axis, epoch_ms)),
        resistance=tuple(project(fit, timestamps, resistance, axis, epoch_ms)),
    )


def extend_timeline(timestamps: Sequence[int], until_ms: int, step_days: int = 1) -> List[int]:
    """``timestamps`` followed by ``step_days``-spaced points after the last one, up to ``until_ms``."""
    if step_days < 1:
        raise ValueError("step_days must be >= 1")
    out = list(timestamps)
    if not out:
        return out
    step = step_days * DAY_MS
    t = out[-1] + step
    while t <= until_ms:
        out.append(t)
        t += step
    return out
