"""
Tests for the static dashboard builder.
"""

import math

import pandas as pd
import pytest

import build_static
from powerlaw_metrics import (
    DAY_MS, GENESIS_MS, AxisMode, LabelKind, Observation, ScaleMode, band_set, fit_series, value_axis,
)
from conftest import day_ms, daily


def write_csv(path, header, rows):
    path.write_text(header + "\n" + "\n".join(f"{d},{v}" for d, v in rows) + "\n", encoding="utf-8")


def day_iso(i):
    return str(pd.Timestamp(GENESIS_MS + i * DAY_MS, unit="ms").date())


class TestLoadSeries:

    def test_reads_local_csv(self, tmp_path):
        path = tmp_path / "price.csv"
        write_csv(path, "Date,Price", [(day_iso(1), 2.0), (day_iso(0), 1.0), (day_iso(2), -1.0)])
        series = build_static.load_series("price", str(path))
        assert [o.value for o in series] == [1.0, 2.0]
        assert series[0].timestamp == GENESIS_MS

    def test_missing_file_without_url(self, tmp_path, capsys):
        assert build_static.load_series("volume", str(tmp_path / "nope.csv")) == ()
        assert "[warn]" in capsys.readouterr().out

    def test_fetches_and_caches(self, tmp_path, monkeypatch):
        calls = []

        def fake_fetch(url):
            calls.append(url)
            return pd.DataFrame({"date": [day_iso(0), day_iso(1)], "value": [5.0, 6.0]})

        monkeypatch.setattr(build_static, "fetch_csv", fake_fetch)
        path = tmp_path / "cache" / "hashrate.csv"
        series = build_static.load_series("hashrate", str(path), "https://example.invalid/h.csv")
        assert calls == ["https://example.invalid/h.csv"]
        assert path.exists()
        assert len(series) == 2

    def test_bad_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("a\n1\n", encoding="utf-8")
        with pytest.raises(ValueError):
            build_static.load_series("bad", str(path))


class TestAxisLayout:

    def test_minor_ticks_unlabelled(self):
        axis = build_static.axis_layout(value_axis(1, 1000, LabelKind.CURRENCY, ScaleMode.LOG), type="log")
        assert axis["tickvals"][0] == 1.0
        assert axis["ticktext"][0] == "$1.00"
        assert 3.0 in axis["minor"]["tickvals"]
        assert 3.0 not in axis["tickvals"]
        assert axis["type"] == "log"


class TestBuild:

    def test_writes_dashboard(self, tmp_path, monkeypatch):
        n = 120
        write_csv(tmp_path / "price.csv", "date,value",
                  [(day_iso(i), 0.01 * (i + 1) ** 1.5) for i in range(n)])
        write_csv(tmp_path / "hashrate.csv", "date,value",
                  [(day_iso(i), (i + 1) * 1e15) for i in range(n)])
        write_csv(tmp_path / "volume.csv", "date,value",
                  [(day_iso(i), 1e6 + i * 1e4) for i in range(n)])
        monkeypatch.setattr(build_static, "SERIES", {
            k: {"path": str(tmp_path / f"{k}.csv"), "env": f"UNSET_{k.upper()}_URL"}
            for k in ("price", "hashrate", "volume")
        })

        out = tmp_path / "docs" / "index.html"
        build_static.build("All", str(out), now_ms=GENESIS_MS + n * DAY_MS)

        html = out.read_text(encoding="utf-8")
        assert "Network Metrics Dashboard" in html
        assert "Days since genesis" in html
        assert "Power Law Residual" in html
        assert "Trading Volume" in html
        assert "Price vs Hashrate" in html

    def test_no_data(self, tmp_path, monkeypatch):
        monkeypatch.setattr(build_static, "SERIES", {
            "price": {"path": str(tmp_path / "p.csv"), "env": "UNSET_P_URL"},
            "hashrate": {"path": str(tmp_path / "h.csv"), "env": "UNSET_H_URL"},
            "volume": {"path": str(tmp_path / "v.csv"), "env": "UNSET_V_URL"},
        })
        out = tmp_path / "index.html"
        build_static.build(output=str(out), now_ms=GENESIS_MS)
        assert "No data." in out.read_text(encoding="utf-8")

    def test_rejects_unknown_period(self):
        with pytest.raises(SystemExit):
            build_static.main(["--period", "5Y"])


class TestPriceFigure:

    def test_support_band_has_labelled_gridline(self, power_series):
        """The lowest band sits above the first labelled y tick"""
        fig = build_static.price_figure(power_series, now_ms=day_ms(501))
        fit = fit_series(power_series)
        support = band_set(fit, [o.timestamp for o in power_series], axis=AxisMode.AGE).support
        bottom = min(p.y for p in support)
        assert min(fig.layout.yaxis.tickvals) <= bottom * 1.05
        assert fig.layout.yaxis.range[0] <= math.log10(bottom)

    def test_unfittable_series_keeps_price_range(self, capsys):
        price = tuple(Observation(day_ms(5, hour=h), v) for h, v in ((0, 3.0), (6, 4.0), (12, 5.0)))
        fig = build_static.price_figure(price, now_ms=day_ms(6))
        assert "[warn] price power law skipped" in capsys.readouterr().out
        assert [t.name for t in fig.data] == ["Price", "ATH / 1Y low"]
        assert min(fig.layout.yaxis.tickvals) <= 3.0


class TestPriceHashrateFigure:

    @staticmethod
    def history(n):
        hashrate = tuple(Observation(day_ms(a, hour=12), (50 + 10 * a + 30 * math.sin(a)) * 1e15)
                         for a in range(1, n + 1))
        price = tuple(Observation(day_ms(a), 2.0 * (h.value / 1e15) ** 0.5 * a ** 1.2)
                      for a, h in zip(range(1, n + 1), hashrate))
        return price, hashrate

    def test_trend_and_surface(self):
        price, hashrate = self.history(80)
        fig = build_static.price_hashrate_figure(price, hashrate)
        names = [t.name for t in fig.data]
        assert names == ["Daily", "Power Law Trend"]
        assert len(fig.data[0].x) == 80
        assert fig.data[0].x[0] == pytest.approx(hashrate[0].value / 1e15)
        assert len(fig.data[1].x) == 51
        note = fig.layout.annotations[0].text
        assert "R² = 1.000" in note
        assert "n = 80" in note
        assert fig.layout.xaxis.type == "log" and fig.layout.yaxis.type == "log"

    def test_short_history_skips_surface(self, price_hashrate, capsys):
        price, hashrate = price_hashrate
        fig = build_static.price_hashrate_figure(price, hashrate)
        out = capsys.readouterr().out
        assert "[warn] price / hashrate / age surface skipped" in out
        assert [t.name for t in fig.data] == ["Daily", "Power Law Trend"]
        assert len(fig.layout.annotations) == 0

    def test_no_overlapping_days(self, capsys):
        fig = build_static.price_hashrate_figure(daily([1, 2, 3]), daily([5e15, 6e15], first_age=10, hour=12))
        assert fig is None
        assert "[warn]" in capsys.readouterr().out
