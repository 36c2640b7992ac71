"""
Constants, thresholds and enums shared by the analytics modules.
"""

from datetime import datetime, timezone
from enum import Enum

# ───────────────────────────── Epoch ─────────────────────────────
GENESIS_DATE = datetime(2021, 11, 7, tzinfo=timezone.utc)
GENESIS_MS   = int(GENESIS_DATE.timestamp()) * 1000
DAY_MS       = 86_400_000

# ───────────────────────────── Fits ─────────────────────────────
MIN_FIT_POINTS      = 2
MIN_RESIDUAL_PAIRS  = 10     # below this the oscillator is reported unavailable
MIN_SURFACE_POINTS  = 50
SURFACE_MIN_DET     = 1e-3
HASHRATE_FIT_UNIT   = 1e15   # hashrate is fitted in PH/s
TREND_LINE_STEPS    = 50

# ───────────────────────────── Bands ─────────────────────────────
REGRESSION_MULT = 1.0
SUPPORT_MULT    = 0.4
RESISTANCE_MULT = 2.2

# ───────────────────────────── Windows ─────────────────────────────
ONE_YEAR_DAYS = 365
TIME_PERIOD_DAYS = {
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
    "2Y": 730,
    "3Y": 1095,
    "All": None,
}

# ───────────────────────────── Residual zones ─────────────────────────────
# (lower bound %, zone) checked top-down; anything below the last is extreme undervaluation
RESIDUAL_ZONES = (
    (100.0, "Extreme Overvaluation"),
    (50.0,  "Moderate Overvaluation"),
    (25.0,  "Mild Overvaluation"),
    (-25.0, "Fair Value"),
    (-50.0, "Mild Undervaluation"),
    (-75.0, "Moderate Undervaluation"),
)
RESIDUAL_FLOOR_ZONE = "Extreme Undervaluation"
ZONE_LINES = (100.0, 50.0, 0.0, -50.0, -75.0)
MOVING_AVERAGE_WINDOWS = (7, 14, 30, 90)

# ───────────────────────────── Ticks ─────────────────────────────
DEFAULT_TICK_COUNT = 6
NICE_MANTISSAS     = (1, 2, 5)
LOG_MAJOR          = (1,)
LOG_INTERMEDIATE   = (2, 5)
LOG_MINOR          = (3, 4, 6, 7, 8, 9)
LOG_TICK_MARGIN    = 0.05
MONTH_TICK_MAX_YEARS = 5

# ───────────────────────────── Labels ─────────────────────────────
CURRENCY_SUFFIXES  = ((1e9, "B"), (1e6, "M"), (1e3, "k"))
CURRENCY_PRECISION = ((1.0, 2), (0.01, 4), (0.0001, 6))   # (lower bound, decimals)
HASHRATE_UNITS     = ("H/s", "KH/s", "MH/s", "GH/s", "TH/s", "PH/s", "EH/s")
VOLUME_SUFFIXES    = ((1e9, "B", 2), (1e6, "M", 2), (1e3, "K", 0))
MAGNITUDE_SUFFIXES = ((1e9, "B"), (1e6, "M"), (1e3, "K"))


class ScaleMode(str, Enum):
    """Axis scale"""
    LINEAR = "Linear"
    LOG = "Log"


class AxisMode(str, Enum):
    """What the x coordinate of a projected curve holds"""
    TIMESTAMP = "timestamp"
    AGE = "age"


class Independent(str, Enum):
    """Independent variable of a power-law fit"""
    AGE = "age"    # days since genesis
    RAW = "raw"    # caller-supplied value, e.g. hashrate


class LabelKind(str, Enum):
    """Tick label formatter strategies"""
    CURRENCY = "currency"
    HASHRATE = "hashrate"
    VOLUME = "volume"
    PERCENT = "percent"
    MAGNITUDE = "magnitude"
