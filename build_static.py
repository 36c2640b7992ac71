#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Network Metrics Dashboard: power-law bands on price, hashrate trend, volume,
price vs hashrate with the surface fit, and the residual oscillator, with engine-generated log ticks.

Reads:  data/{price,hashrate,volume}.csv   (columns: date,value)
        missing files are fetched from $<METRIC>_CSV_URL and cached
Writes: docs/index.html
"""

import os, io, math, argparse
from datetime import datetime, timezone
import pandas as pd
import plotly.graph_objects as go
import requests

from powerlaw_metrics import (
    AnalyticsError, AxisMode, Independent, LabelKind, ScaleMode,
    ages, align, all_time_high, band_set, extend_timeline, fit_power_law, fit_series,
    fit_surface, moving_average, one_year_low, project, residual_oscillator,
    series_from_frame, time_ticks, to_millis, trend_line, value_axis, window_start,
)
from powerlaw_metrics.config import HASHRATE_FIT_UNIT, TIME_PERIOD_DAYS, ZONE_LINES

# ───────────────────────────── Config ─────────────────────────────
DATA_DIR    = "data"
OUTPUT_HTML = "docs/index.html"
END_PROJ    = datetime(2030, 12, 31, tzinfo=timezone.utc)
PROJ_STEP_D = 7
MA_WINDOW   = 30
UA          = {"User-Agent": "powerlaw-metrics/0.1"}

SERIES = {
    "price":    {"path": os.path.join(DATA_DIR, "price.csv"),    "env": "PRICE_CSV_URL"},
    "hashrate": {"path": os.path.join(DATA_DIR, "hashrate.csv"), "env": "HASHRATE_CSV_URL"},
    "volume":   {"path": os.path.join(DATA_DIR, "volume.csv"),   "env": "VOLUME_CSV_URL"},
}

COL_PRICE  = "#6366F1"
COL_HASH   = "#10B981"
COL_VOLUME = "#F59E0B"
COL_FIT    = "white"
COL_GRID   = "rgba(255,255,255,0.15)"
COL_MINOR  = "rgba(255,255,255,0.05)"

# ───────────────────────── Loaders ─────────────────────────
def _read_csv_text(text: str) -> pd.DataFrame:
    df = pd.read_csv(io.StringIO(text))
    df.columns = [c.lower().strip() for c in df.columns]
    date_cols = [c for c in df.columns if "date" in c or "time" in c]
    value_cols = [c for c in df.columns if c not in date_cols]
    if not date_cols or not value_cols:
        raise ValueError("csv needs a date column and a value column")
    return df[[date_cols[0], value_cols[0]]].set_axis(["date", "value"], axis=1)


def fetch_csv(url: str) -> pd.DataFrame:
    r = requests.get(url, timeout=30, headers=UA); r.raise_for_status()
    return _read_csv_text(r.text)


def load_series(name: str, path: str, url: str = None):
    """Series for ``name`` from ``path``; fetched from ``url`` and cached when the file is missing."""
    if os.path.exists(path):
        with open(path, encoding="utf-8") as f:
            df = _read_csv_text(f.read())
    elif url:
        df = fetch_csv(url)
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        df.to_csv(path, index=False)
        print(f"[fetch] wrote {path} ({len(df)} rows)")
    else:
        print(f"[warn] no data for {name}: {path} missing and no URL configured")
        return ()
    series = tuple(o for o in series_from_frame(df) if o.value > 0)
    print(f"[series] {name}: {len(series)} points")
    return series


# ───────────────────────── Axis helpers ─────────────────────────
def axis_layout(axis_ticks, **kw):
    """Plotly axis dict: labelled major/intermediate ticks, unlabelled minor gridlines."""
    t = axis_ticks.ticks
    label = dict(zip(t.all, axis_ticks.labels))
    shown = sorted(set(t.major) | set(t.intermediate))
    return dict(tickmode="array", tickvals=shown, ticktext=[label[v] for v in shown],
                showgrid=True, gridcolor=COL_GRID,
                minor=dict(tickmode="array", tickvals=list(t.minor), showgrid=True, gridcolor=COL_MINOR),
                **kw)


def _dark(fig, title):
    fig.update_layout(template="plotly_dark", title=title, hovermode="x",
                      plot_bgcolor="#111", paper_bgcolor="#111",
                      font=dict(family="Inter, system-ui, sans-serif", size=12),
                      legend=dict(orientation="h", yanchor="bottom", y=-0.3, xanchor="center", x=0.5))
    return fig


def _dates(ms):
    return pd.to_datetime(list(ms), unit="ms", utc=True)


# ───────────────────────── Figures ─────────────────────────
def price_figure(price, now_ms):
    """Price on log-log (age) axes with regression, support and resistance bands."""
    fig = _dark(go.Figure(), "Price: Power Law")
    ts = [o.timestamp for o in price]
    ys = [o.value for o in price]
    x_age = ages(price)
    fig.add_trace(go.Scatter(x=x_age, y=ys, name="Price", mode="lines",
                             line=dict(color=COL_PRICE, width=2),
                             text=[str(d.date()) for d in _dates(ts)],
                             hovertemplate="%{text}<br>$%{y:.4f}<extra></extra>"))
    lo_y, hi_y = min(ys), max(ys)
    try:
        fit = fit_series(price)
        domain = extend_timeline(ts, to_millis(END_PROJ), PROJ_STEP_D)
        bands = band_set(fit, domain, axis=AxisMode.AGE)
        for name, pts, dash in (("Resistance", bands.resistance, "dash"),
                                ("Regression", bands.regression, "solid"),
                                ("Support", bands.support, "dash")):
            fig.add_trace(go.Scatter(x=[p.x for p in pts], y=[p.y for p in pts], name=name,
                                     mode="lines", line=dict(color=COL_FIT, dash=dash, width=1)))
        lo_y = min(lo_y, min(p.y for p in bands.support))
        hi_y = max(hi_y, max(p.y for p in bands.resistance))
        print(f"[fit] price ≈ {fit.coefficient:.4g} · age^{fit.exponent:.4f}  (R²={fit.r_squared:.3f})")
    except AnalyticsError as e:
        print(f"[warn] price power law skipped: {e}")
        domain = ts

    ath = all_time_high(price)
    low = one_year_low(price, now_ms)
    fig.add_trace(go.Scatter(x=[ath.age, low.age], y=[ath.value, low.value], mode="markers+text",
                             name="ATH / 1Y low", text=["ATH", "1Y low"], textposition="top center",
                             marker=dict(symbol="diamond", size=9, color=["green", "red"])))

    # axis bottom snapped to the decade at or below the lowest band
    lo_y = 10 ** math.floor(math.log10(lo_y))
    x_axis = time_ticks(ts[0], domain[-1], ScaleMode.LOG)
    y_axis = value_axis(lo_y, hi_y, LabelKind.CURRENCY, ScaleMode.LOG)
    fig.update_layout(xaxis=axis_layout(x_axis, type="log", title="Days since genesis"),
                      yaxis=axis_layout(y_axis, type="log", title="Price (USD)",
                                        range=[math.log10(lo_y), math.log10(hi_y)]))
    return fig


def hashrate_figure(hashrate):
    fig = _dark(go.Figure(), "Network Hashrate")
    ts = [o.timestamp for o in hashrate]
    ys = [o.value for o in hashrate]
    fig.add_trace(go.Scatter(x=_dates(ts), y=ys, name="Hashrate", mode="lines",
                             line=dict(color=COL_HASH, width=2)))
    try:
        fit = fit_series(hashrate)
        pts = project(fit, ts)
        fig.add_trace(go.Scatter(x=_dates(p.x for p in pts), y=[p.y for p in pts], name="Power Law",
                                 mode="lines", line=dict(color=COL_FIT, dash="dash", width=1)))
    except AnalyticsError as e:
        print(f"[warn] hashrate power law skipped: {e}")
    y_axis = value_axis(min(ys), max(ys), LabelKind.HASHRATE, ScaleMode.LOG)
    fig.update_layout(xaxis=dict(type="date", title="Date"),
                      yaxis=axis_layout(y_axis, type="log", title="Hashrate"))
    return fig


def price_hashrate_figure(price, hashrate):
    """Price against hashrate (PH/s) on log-log axes, with the power-law trend and the surface fit."""
    pairs = [p for p in align(price, hashrate) if p.primary > 0 and p.secondary > 0]
    if not pairs:
        print("[warn] price vs hashrate: no overlapping days")
        return None

    fig = _dark(go.Figure(), "Price vs Hashrate")
    xs = [p.secondary / HASHRATE_FIT_UNIT for p in pairs]
    ys = [p.primary for p in pairs]
    fig.add_trace(go.Scatter(x=xs, y=ys, name="Daily", mode="markers",
                             marker=dict(color=COL_PRICE, size=4, opacity=0.7),
                             text=[str(d.date()) for d in _dates(p.timestamp for p in pairs)],
                             hovertemplate="%{text}<br>%{x:.2f} PH/s<br>$%{y:.4f}<extra></extra>"))
    try:
        fit = fit_power_law(list(zip(xs, ys)), Independent.RAW)
        line = trend_line(fit, min(xs), max(xs), spacing=ScaleMode.LOG)
        fig.add_trace(go.Scatter(x=[p.x for p in line], y=[p.y for p in line], name="Power Law Trend",
                                 mode="lines", line=dict(color=COL_FIT, dash="dash", width=2)))
        print(f"[fit] price ≈ {fit.coefficient:.4g} · PH/s^{fit.exponent:.4f}  (R²={fit.r_squared:.3f})")
    except AnalyticsError as e:
        print(f"[warn] price vs hashrate trend skipped: {e}")

    try:
        surf = fit_surface(price, hashrate)
        fig.add_annotation(xref="paper", yref="paper", x=0.01, y=0.99, xanchor="left", yanchor="top",
                           showarrow=False, align="left",
                           text=(f"price ≈ {surf.coefficient:.4g} · PH/s^{surf.hashrate_exponent:.3f}"
                                 f" · age^{surf.age_exponent:.3f}<br>R² = {surf.r_squared:.3f}"
                                 f" (n = {surf.n_points})"))
    except AnalyticsError as e:
        print(f"[warn] price / hashrate / age surface skipped: {e}")

    x_axis = value_axis(min(xs), max(xs), LabelKind.MAGNITUDE, ScaleMode.LOG)
    y_axis = value_axis(min(ys), max(ys), LabelKind.CURRENCY, ScaleMode.LOG)
    fig.update_layout(hovermode="closest",
                      xaxis=axis_layout(x_axis, type="log", title="Hashrate (PH/s)"),
                      yaxis=axis_layout(y_axis, type="log", title="Price (USD)"))
    return fig


def volume_figure(volume):
    fig = _dark(go.Figure(), "Trading Volume")
    ys = [o.value for o in volume]
    fig.add_trace(go.Bar(x=_dates(o.timestamp for o in volume), y=ys, name="Volume",
                         marker=dict(color=COL_VOLUME)))
    y_axis = value_axis(0, max(ys), LabelKind.VOLUME, ScaleMode.LINEAR)
    fig.update_layout(xaxis=dict(type="date", title="Date"),
                      yaxis=axis_layout(y_axis, title="Volume (USD)"))
    return fig


def residual_figure(price, hashrate, since_ms):
    try:
        res = residual_oscillator(price, hashrate, since_ms=since_ms)
    except AnalyticsError as e:
        print(f"[warn] residual oscillator unavailable: {e}")
        return None
    if not res.points:
        print("[warn] residual oscillator: no points in the selected period")
        return None

    fig = _dark(go.Figure(), "Power Law Residual: Price Deviation from Hashrate Trend")
    dates = _dates(p.timestamp for p in res.points)
    values = res.values
    fig.add_trace(go.Scatter(x=dates, y=values, name="Power Law Residual (%)", mode="lines+markers",
                             line=dict(color="#5B6CFF", width=2), marker=dict(size=4)))
    if len(values) > MA_WINDOW:
        fig.add_trace(go.Scatter(x=dates, y=moving_average(values, MA_WINDOW), mode="lines",
                                 name=f"{MA_WINDOW}-Day Moving Average",
                                 line=dict(color="#F59E0B", width=3)))
    for level in ZONE_LINES:
        fig.add_hline(y=level, line=dict(width=1, dash="dot", color=COL_GRID))

    lo, hi = min(min(values), min(ZONE_LINES)), max(max(values), max(ZONE_LINES))
    y_axis = value_axis(lo, hi, LabelKind.PERCENT, ScaleMode.LINEAR, non_negative=False)
    fig.update_layout(xaxis=dict(type="date", title="Date"),
                      yaxis=axis_layout(y_axis, title="Residual (%)"))
    print(f"[fit] price ≈ {res.fit.coefficient:.4g} · PH/s^{res.fit.exponent:.4f}  (R²={res.fit.r_squared:.3f})")
    return fig


# ───────────────────────────── HTML ─────────────────────────────
HTML = """<!doctype html>
<html lang="en"><head>
<meta charset="utf-8"/>
<meta name="viewport" content="width=device-width,initial-scale=1"/>
<title>Network Metrics Dashboard</title>
<style>
body{margin:0;background:#111;color:#e5e7eb;font-family:Inter,system-ui,Segoe UI,Arial,sans-serif}
.wrap{max-width:1200px;margin:0 auto;padding:16px}
.note{font-size:12px;color:#9ca3af}
</style>
</head><body>
<div class="wrap">
<h2>Network Metrics Dashboard</h2>
<div class="note">Data through __LAST_ISO__ · period __PERIOD__</div>
__PLOTS__
</div>
</body></html>
"""


def build(period="All", output=OUTPUT_HTML, now_ms=None):
    now_ms = now_ms if now_ms is not None else to_millis(datetime.now(timezone.utc))
    data = {k: load_series(k, v["path"], os.getenv(v["env"])) for k, v in SERIES.items()}

    figs = []
    if data["price"]:
        figs.append(price_figure(data["price"], now_ms))
    if data["hashrate"]:
        figs.append(hashrate_figure(data["hashrate"]))
    if data["price"] and data["hashrate"]:
        for fig in (price_hashrate_figure(data["price"], data["hashrate"]),
                    residual_figure(data["price"], data["hashrate"], window_start(period, now_ms))):
            if fig is not None:
                figs.append(fig)
    if data["volume"]:
        figs.append(volume_figure(data["volume"]))

    plots = "\n".join(
        f.to_html(full_html=False, include_plotlyjs="cdn" if i == 0 else False,
                  config={"responsive": True, "doubleClick": "reset"})
        for i, f in enumerate(figs)
    )
    last = max((s[-1].timestamp for s in data.values() if s), default=now_ms)
    html = (HTML.replace("__PLOTS__", plots or "<p>No data.</p>")
                .replace("__LAST_ISO__", str(_dates([last])[0].date()))
                .replace("__PERIOD__", period))

    os.makedirs(os.path.dirname(output) or ".", exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        f.write(html)
    print("Wrote", output)
    return output


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument("--period", default="All", choices=list(TIME_PERIOD_DAYS), help="residual display window")
    ap.add_argument("--output", default=OUTPUT_HTML)
    args = ap.parse_args(argv)
    build(args.period, args.output)


if __name__ == "__main__":
    main()
