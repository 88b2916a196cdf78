"""Tests for eventstudy.charts. All chart functions must return Figures."""

from __future__ import annotations

from collections.abc import Generator

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.figure import Figure

from eventstudy.bootstrap import BootstrapResult
from eventstudy.charts.caar import bootstrap_chart, caar_chart
from eventstudy.output.csv_export import build_caar_table


@pytest.fixture(autouse=True)
def _close_figures() -> Generator[None, None, None]:
    """Close all figures after each test."""
    yield
    plt.close("all")


def _make_result(label: str, n: int = 61, bands: bool = True) -> BootstrapResult:
    caar = np.linspace(0.0, 0.02, n)
    percentile_bands = {25.0: caar - 0.005, 75.0: caar + 0.005} if bands else {}
    return BootstrapResult(
        label=label,
        sample_size=30,
        iterations=40,
        population=50,
        mean_caar=caar,
        percentile_bands=percentile_bands,
    )


def _plotted(fig: Figure) -> list[str]:
    """Labels of data lines, excluding the zero reference lines."""
    return [
        line.get_label() for line in fig.axes[0].get_lines()
        if not line.get_label().startswith("_")
    ]


class TestCaarChart:

    def test_returns_figure(self) -> None:
        table = build_caar_table({
            "Beat": np.linspace(0, 0.03, 61),
            "Meet": np.zeros(61),
            "Miss": np.linspace(0, -0.03, 61),
        })
        fig = caar_chart(table)
        assert isinstance(fig, Figure)
        assert _plotted(fig) == ["Beat", "Meet", "Miss"]

    def test_empty_group_not_plotted(self) -> None:
        table = build_caar_table({"Beat": np.linspace(0, 0.03, 61)})
        fig = caar_chart(table)
        assert _plotted(fig) == ["Beat"]

    def test_custom_title(self) -> None:
        table = build_caar_table({"Beat": [0.01, 0.02]})
        fig = caar_chart(table, title="AAR by surprise group")
        assert fig.axes[0].get_title() == "AAR by surprise group"


class TestBootstrapChart:

    def test_returns_figure_with_bands(self) -> None:
        results = {"Beat": _make_result("Beat"), "Miss": _make_result("Miss")}
        fig = bootstrap_chart(results)
        assert isinstance(fig, Figure)
        ax = fig.axes[0]
        assert _plotted(fig) == ["Beat", "Miss"]
        assert len(ax.collections) == 2
        assert "40 iterations" in ax.get_title()

    def test_missing_band_skips_fill(self) -> None:
        fig = bootstrap_chart({"Beat": _make_result("Beat", bands=False)})
        assert len(fig.axes[0].collections) == 0

    def test_empty_result_skipped(self) -> None:
        fig = bootstrap_chart({"Miss": _make_result("Miss", n=0)})
        assert isinstance(fig, Figure)
        assert _plotted(fig) == []

    def test_days_follow_offset(self) -> None:
        fig = bootstrap_chart({"Beat": _make_result("Beat", n=21)}, offset=10)
        line = next(ln for ln in fig.axes[0].get_lines() if ln.get_label() == "Beat")
        assert line.get_xdata()[0] == -10
        assert line.get_xdata()[-1] == 10
