"""
Tick label formatters, one per metric kind.

The threshold tables live in config.py; labels are user facing, so changing
a bound or a precision tier changes what every chart shows.
"""

from datetime import datetime, timezone
from typing import Iterable, List

from .config import (
    CURRENCY_SUFFIXES, CURRENCY_PRECISION, HASHRATE_UNITS, VOLUME_SUFFIXES,
    MAGNITUDE_SUFFIXES, LabelKind,
)


def _trim(s: str) -> str:
    return s.rstrip("0").rstrip(".") if "." in s else s


def _sign(v: float) -> str:
    return "-" if v < 0 else ""


def format_currency(v: float) -> str:
    """$1.5B / $12M / $3.2k, then $1.23 / $0.0123 / $0.000123, then $1.23e-05"""
    if v == 0:
        return "$0"
    a = abs(v)
    for bound, suffix in CURRENCY_SUFFIXES:
        if a >= bound:
            return f"{_sign(v)}${_trim(f'{a / bound:.2f}')}{suffix}"
    for bound, decimals in CURRENCY_PRECISION:
        if a >= bound:
            return f"{_sign(v)}${a:.{decimals}f}"
    return f"{_sign(v)}${a:.2e}"


def format_hashrate(v: float) -> str:
    """Scaled by powers of 1000 from H/s up to EH/s"""
    a = abs(v)
    i = 0
    while i < len(HASHRATE_UNITS) - 1 and a >= 1000 ** (i + 1):
        i += 1
    return f"{_sign(v)}{a / 1000 ** i:.2f} {HASHRATE_UNITS[i]}"


def format_volume(v: float) -> str:
    a = abs(v)
    for bound, suffix, decimals in VOLUME_SUFFIXES:
        if a >= bound:
            return f"{_sign(v)}${a / bound:.{decimals}f}{suffix}"
    return f"{_sign(v)}${_trim(f'{a:,.3f}')}"


def format_percent(v: float) -> str:
    return f"{int(round(v))}%"


def format_magnitude(v: float) -> str:
    a = abs(v)
    for bound, suffix in MAGNITUDE_SUFFIXES:
        if a >= bound:
            return f"{_sign(v)}{_trim(f'{a / bound:.2f}')}{suffix}"
    return f"{_sign(v)}{_trim(f'{a:.2f}')}"


FORMATTERS = {
    LabelKind.CURRENCY: format_currency,
    LabelKind.HASHRATE: format_hashrate,
    LabelKind.VOLUME: format_volume,
    LabelKind.PERCENT: format_percent,
    LabelKind.MAGNITUDE: format_magnitude,
}


def format_value(v: float, kind: LabelKind) -> str:
    return FORMATTERS[LabelKind(kind)](v)


def tick_labels(values: Iterable[float], kind: LabelKind) -> List[str]:
    fmt = FORMATTERS[LabelKind(kind)]
    return [fmt(v) for v in values]


def time_label(timestamp: int) -> str:
    """"2023" for a year start, "Apr 2023" for a month start, ISO date otherwise (UTC)"""
    d = datetime.fromtimestamp(timestamp / 1000, timezone.utc)
    if d.day == 1 and d.month == 1:
        return d.strftime("%Y")
    if d.day == 1:
        return d.strftime("%b %Y")
    return d.strftime("%Y-%m-%d")
