"""
Data contracts passed between the analytics modules and the rendering layer.
"""

from dataclasses import dataclass, asdict
from typing import List, Sequence, Tuple

import pandas as pd


@dataclass(frozen=True)
class Observation:
    """One sample of a metric: epoch-millisecond timestamp and value"""
    timestamp: int
    value: float


Series = Sequence[Observation]

_UNIX_EPOCH = pd.Timestamp("1970-01-01", tz="UTC")


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class FitResult:
    """value ≈ coefficient * x ** exponent"""
    coefficient: float
    exponent: float
    r_squared: float
    n_points: int

    def predict(self, x: float) -> float:
        return self.coefficient * x ** self.exponent

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SurfaceFit:
    """price ≈ coefficient * hashrate ** hashrate_exponent * age ** age_exponent"""
    coefficient: float
    hashrate_exponent: float
    age_exponent: float
    r_squared: float
    n_points: int

    def predict(self, hashrate: float, age: float) -> float:
        return self.coefficient * hashrate ** self.hashrate_exponent * max(1.0, age) ** self.age_exponent

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class BandSet:
    regression: Tuple[Point, ...]
    support: Tuple[Point, ...]
    resistance: Tuple[Point, ...]


@dataclass(frozen=True)
class ResidualPoint:
    timestamp: int
    residual_percent: float
    actual: float
    expected: float
    independent: float


@dataclass(frozen=True)
class ResidualResult:
    """Cross-series fit over full history plus residuals for the display window"""
    fit: FitResult
    points: Tuple[ResidualPoint, ...]

    @property
    def values(self) -> List[float]:
        return [p.residual_percent for p in self.points]


@dataclass(frozen=True)
class ExtremumPoint:
    value: float
    timestamp: int
    age: int


@dataclass(frozen=True)
class AlignedPair:
    """Observations of two series falling on the same calendar day"""
    timestamp: int      # from the primary series
    primary: float
    secondary: float


@dataclass(frozen=True)
class TickSet:
    major: Tuple[float, ...] = ()
    intermediate: Tuple[float, ...] = ()
    minor: Tuple[float, ...] = ()
    all: Tuple[float, ...] = ()

    @classmethod
    def from_tiers(cls, major, intermediate=(), minor=()):
        merged = tuple(sorted(set(major) | set(intermediate) | set(minor)))
        return cls(tuple(major), tuple(intermediate), tuple(minor), merged)


@dataclass(frozen=True)
class AxisTicks:
    """Tick positions plus one label per entry of ``ticks.all``"""
    ticks: TickSet
    labels: Tuple[str, ...]


# ───────────────────────────── pandas bridges ─────────────────────────────
def series_from_frame(df: pd.DataFrame, time_col: str = "date", value_col: str = "value") -> Tuple[Observation, ...]:
    """
    Build a series from a DataFrame. Datetime columns are converted to epoch
    milliseconds (naive values are taken as UTC); rows with a missing or
    non-finite value are dropped and the result is sorted by timestamp.
    """
    ts = df[time_col]
    if not pd.api.types.is_numeric_dtype(ts):
        ts = pd.to_datetime(ts, utc=True, errors="coerce")
        millis = (ts - _UNIX_EPOCH) // pd.Timedelta(milliseconds=1)
    else:
        millis = pd.to_numeric(ts, errors="coerce")
    values = pd.to_numeric(df[value_col], errors="coerce")
    frame = pd.DataFrame({"ts": millis, "value": values}).replace([float("inf"), float("-inf")], float("nan"))
    frame = frame.dropna().sort_values("ts", kind="mergesort")
    return tuple(Observation(int(t), float(v)) for t, v in zip(frame["ts"], frame["value"]))


def series_to_frame(series: Series) -> pd.DataFrame:
    """Inverse of series_from_frame: columns ``date`` (UTC datetime) and ``value``"""
    df = pd.DataFrame({
        "timestamp": [o.timestamp for o in series],
        "value": [o.value for o in series],
    })
    df["date"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
    return df[["date", "timestamp", "value"]]
