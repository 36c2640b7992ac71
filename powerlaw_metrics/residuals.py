"""
Price-vs-hashrate residual oscillator.

One cross-series power law (price ≈ a · hashrate^b) is fitted over the whole
aligned history; residuals are then reported only for the display window.
Fitting on the window instead would make the curve drift every time the
viewed period changes.
"""

import logging
from datetime import timezone, tzinfo
from typing import List, Optional, Sequence

import pandas as pd

from .align import align
from .config import (
    HASHRATE_FIT_UNIT, MIN_RESIDUAL_PAIRS, RESIDUAL_ZONES, RESIDUAL_FLOOR_ZONE,
)
from .errors import InsufficientData
from .fit import fit_xy
from .models import ResidualPoint, ResidualResult, Series

logger = logging.getLogger(__name__)


def residual_percent(actual: float, expected: float) -> float:
    """Positive when ``actual`` sits above ``expected``."""
    return (actual - expected) / expected * 100


def residual_oscillator(price: Series, hashrate: Series, since_ms: Optional[int] = None,
                        hashrate_unit: float = HASHRATE_FIT_UNIT,
                        min_pairs: int = MIN_RESIDUAL_PAIRS,
                        tz: tzinfo = timezone.utc) -> ResidualResult:
    pairs = [p for p in align(price, hashrate, tz) if p.primary > 0 and p.secondary > 0]
    if len(pairs) < min_pairs:
        raise InsufficientData(min_pairs, len(pairs), "aligned price/hashrate pairs")

    fit = fit_xy([p.secondary / hashrate_unit for p in pairs], [p.primary for p in pairs])

    points = []
    for p in pairs:
        if since_ms is not None and p.timestamp < since_ms:
            continue
        x = p.secondary / hashrate_unit
        expected = fit.predict(x)
        points.append(ResidualPoint(p.timestamp, residual_percent(p.primary, expected),
                                    p.primary, expected, x))

    logger.debug("residual oscillator: %d pairs fitted, %d in window", len(pairs), len(points))
    return ResidualResult(fit, tuple(points))


def moving_average(values: Sequence[float], window: int) -> List[float]:
    """Centred mean over ``window // 2`` points on each side, shrinking at the edges."""
    if window < 1:
        raise ValueError("window must be >= 1")
    span = 2 * (window // 2) + 1
    return pd.Series(values, dtype=float).rolling(span, center=True, min_periods=1).mean().tolist()


def valuation_zone(residual: float) -> str:
    for bound, zone in RESIDUAL_ZONES:
        if residual >= bound:
            return zone
    return RESIDUAL_FLOOR_ZONE
