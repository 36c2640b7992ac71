"""
Power-law fitting in log-log space.

    value ≈ coefficient * x ** exponent   <=>   ln(value) = ln(coefficient) + exponent * ln(x)

``x`` is either the genesis-relative age of each observation or a value
supplied by the caller (e.g. hashrate when fitting price against hashrate).
Points with a non-positive coordinate are excluded, never clamped, so fits
are reproducible across implementations.
"""

import logging
import math
from datetime import timezone, tzinfo
from typing import Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd
from statsmodels.regression.linear_model import OLS

from .align import align
from .config import (
    GENESIS_MS, MIN_FIT_POINTS, MIN_SURFACE_POINTS, SURFACE_MIN_DET,
    HASHRATE_FIT_UNIT, TREND_LINE_STEPS, Independent, ScaleMode,
)
from .epoch import age_of
from .errors import DegenerateFit, DegenerateInput, InsufficientData, NonPositiveData
from .models import FitResult, Point, Series, SurfaceFit

logger = logging.getLogger(__name__)


def _positive(xs, ys) -> Tuple[np.ndarray, np.ndarray]:
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"x and y differ in length: {x.shape} vs {y.shape}")
    mask = np.isfinite(x) & np.isfinite(y) & (x > 0) & (y > 0)
    return x[mask], y[mask]


def fit_xy(xs: Sequence[float], ys: Sequence[float]) -> FitResult:
    """Ordinary least squares on (ln x, ln y)."""
    x, y = _positive(xs, ys)
    n = len(x)
    if n < MIN_FIT_POINTS:
        if n == 0 and len(xs) >= MIN_FIT_POINTS:
            raise NonPositiveData(MIN_FIT_POINTS, 0)
        raise InsufficientData(MIN_FIT_POINTS, n)

    lx, ly = np.log(x), np.log(y)
    if np.ptp(lx) == 0:
        raise DegenerateFit(f"independent variable is constant ({x[0]!r}) across {n} points")

    sx, sy = lx.sum(), ly.sum()
    sxy, sxx, syy = (lx * ly).sum(), (lx * lx).sum(), (ly * ly).sum()
    mx, my = sx / n, sy / n
    sxx_c = sxx - n * mx * mx
    sxy_c = sxy - n * mx * my
    syy_c = syy - n * my * my
    if sxx_c <= 0:
        raise DegenerateFit("independent variable has no usable variance")

    slope = sxy_c / sxx_c
    intercept = my - slope * mx
    # constant dependent variable: the horizontal line is exact
    if np.ptp(ly) == 0 or syy_c <= 0:
        r2 = 1.0
    else:
        r2 = min(1.0, sxy_c * sxy_c / (sxx_c * syy_c))

    result = FitResult(float(math.exp(intercept)), float(slope), float(r2), n)
    if not all(map(math.isfinite, (result.coefficient, result.exponent, result.r_squared))):
        raise DegenerateInput(f"fit produced non-finite parameters: {result}")
    logger.debug("power law fit n=%d (dropped %d) coefficient=%.6g exponent=%.6f r2=%.6f",
                 n, len(xs) - n, result.coefficient, result.exponent, result.r_squared)
    return result


def fit_series(series: Series, epoch_ms: int = GENESIS_MS) -> FitResult:
    """Fit value against age (days since ``epoch_ms``)."""
    return fit_xy([age_of(o.timestamp, epoch_ms) for o in series],
                  [o.value for o in series])


def fit_pairs(pairs: Iterable[Tuple[float, float]]) -> FitResult:
    """Fit dependent against a caller-supplied independent value, pairs of (x, y)."""
    pairs = list(pairs)
    return fit_xy([p[0] for p in pairs], [p[1] for p in pairs])


def fit_power_law(data, independent: Independent = Independent.AGE, epoch_ms: int = GENESIS_MS) -> FitResult:
    """
    Single entry point: ``data`` is a series when ``independent`` is AGE and a
    sequence of (x, y) pairs when it is RAW.
    """
    if Independent(independent) is Independent.AGE:
        return fit_series(data, epoch_ms)
    return fit_pairs(data)


def trend_line(fit: FitResult, lo: float, hi: float, steps: int = TREND_LINE_STEPS,
               spacing: ScaleMode = ScaleMode.LINEAR) -> List[Point]:
    """``steps + 1`` points of the fitted curve over [lo, hi]."""
    if lo <= 0 or hi <= 0:
        raise DegenerateInput(f"trend line range must be positive, got [{lo}, {hi}]")
    if steps < 1:
        raise ValueError("steps must be >= 1")
    if ScaleMode(spacing) is ScaleMode.LOG:
        xs = np.logspace(np.log10(lo), np.log10(hi), steps + 1)
    else:
        xs = np.linspace(lo, hi, steps + 1)
    return [Point(float(x), fit.predict(float(x))) for x in xs]


# ───────────────────────── price / hashrate / age surface ─────────────────────────
def fit_surface(price: Series, hashrate: Series, epoch_ms: int = GENESIS_MS,
                hashrate_unit: float = HASHRATE_FIT_UNIT, tz: tzinfo = timezone.utc) -> SurfaceFit:
    """
    ln(price) = ln(A) + B ln(hashrate) + C ln(age), solved by OLS over the
    calendar-day aligned history.
    """
    rows = [(age_of(p.timestamp, epoch_ms), p.secondary / hashrate_unit, p.primary)
            for p in align(price, hashrate, tz) if p.primary > 0 and p.secondary > 0]
    if len(rows) < MIN_SURFACE_POINTS:
        raise InsufficientData(MIN_SURFACE_POINTS, len(rows), "aligned points")

    arr = np.asarray(rows, dtype=float)
    lnd, lnh, lnp = np.log(arr[:, 0]), np.log(arr[:, 1]), np.log(arr[:, 2])

    h, d = lnh - lnh.mean(), lnd - lnd.mean()
    det = (h * h).sum() * (d * d).sum() - (h * d).sum() ** 2
    if abs(det) < SURFACE_MIN_DET:
        raise DegenerateInput(f"hashrate and age are collinear (det={det:.3g})")

    X = pd.DataFrame({"const": 1.0, "lnh": lnh, "lnd": lnd})
    res = OLS(lnp, X).fit()
    tss = float(((lnp - lnp.mean()) ** 2).sum())
    r2 = max(0.0, float(res.rsquared)) if tss > 0 else 1.0

    fit = SurfaceFit(float(math.exp(res.params["const"])), float(res.params["lnh"]),
                     float(res.params["lnd"]), r2, len(rows))
    logger.debug("surface fit n=%d A=%.6g B=%.4f C=%.4f r2=%.4f",
                 fit.n_points, fit.coefficient, fit.hashrate_exponent, fit.age_exponent, fit.r_squared)
    return fit
