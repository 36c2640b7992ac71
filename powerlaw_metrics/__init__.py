"""
Power-law analytics for crypto network metrics.

Usage:
    from powerlaw_metrics import fit_series, band_set, log_ticks

    fit = fit_series(price)                       # price ≈ C * age^E
    bands = band_set(fit, [o.timestamp for o in price])
    ticks = log_ticks(0.01, 1.0)
"""

from .config import (
    GENESIS_DATE, GENESIS_MS, DAY_MS, ScaleMode, AxisMode, Independent, LabelKind,
)
from .errors import (
    AnalyticsError, InsufficientData, DegenerateInput, DegenerateFit,
    NonPositiveData, EmptySeries,
)
from .models import (
    Observation, Point, FitResult, SurfaceFit, BandSet, ResidualPoint,
    ResidualResult, ExtremumPoint, AlignedPair, TickSet, AxisTicks,
    series_from_frame, series_to_frame,
)
from .epoch import age_of, ages, to_millis, day_key, window_start, filter_since
from .align import align
from .fit import fit_xy, fit_series, fit_pairs, fit_power_law, fit_surface, trend_line
from .bands import project, band_set, extend_timeline
from .residuals import residual_oscillator, residual_percent, moving_average, valuation_zone
from .extrema import all_time_high, global_low, one_year_low
from .labels import (
    format_currency, format_hashrate, format_volume, format_percent,
    format_magnitude, format_value, tick_labels, time_label,
)
from .ticks import nice_step, linear_ticks, log_ticks, value_ticks, value_axis, time_ticks

__version__ = "0.1.0"
