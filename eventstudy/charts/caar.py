"""CAAR charts.

Chart functions take exported tables or bootstrap results and return a
matplotlib Figure. Saving is left to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from eventstudy.analysis.groups import relative_days
from eventstudy.config import DAY_OFFSET
from eventstudy.output.csv_export import DAY_COLUMN

if TYPE_CHECKING:
    from eventstudy.bootstrap import BootstrapResult

logger = logging.getLogger(__name__)

GROUP_COLOURS = {
    "Beat": "#2e7d32",
    "Meet": "#1565c0",
    "Miss": "#c62828",
}


def _finish_axes(ax: Axes, ylabel: str) -> None:
    ax.axvline(0, color="grey", linestyle="--", linewidth=0.8)
    ax.axhline(0, color="grey", linewidth=0.5)
    ax.set_xlabel("Days relative to earnings announcement")
    ax.set_ylabel(ylabel)
    ax.yaxis.set_major_formatter(FuncFormatter(lambda v, _: f"{v:.1%}"))
    ax.legend(loc="upper left")
    ax.grid(alpha=0.3)


def caar_chart(table: pd.DataFrame, title: str = "CAAR by surprise group") -> Figure:
    """Line chart of every group column in a Day,<label>... table."""
    fig, ax = plt.subplots(figsize=(10, 6))
    labels = [c for c in table.columns if c != DAY_COLUMN]
    for label in labels:
        series = table[label]
        if series.notna().sum() == 0:
            logger.debug("%s: no data, not plotted", label)
            continue
        ax.plot(
            table[DAY_COLUMN],
            series,
            label=label,
            color=GROUP_COLOURS.get(label),
            linewidth=1.8,
        )
    ax.set_title(title)
    _finish_axes(ax, "CAAR")
    fig.tight_layout()
    return fig


def bootstrap_chart(
    results: Mapping[str, BootstrapResult],
    offset: int = DAY_OFFSET,
    band: tuple[float, float] = (25.0, 75.0),
) -> Figure:
    """Bootstrapped mean CAAR per group with a shaded percentile band.

    The band is drawn only when both percentiles were computed.
    """
    fig, ax = plt.subplots(figsize=(10, 6))
    lo, hi = band
    for label, result in results.items():
        if len(result.mean_caar) == 0:
            continue
        days = relative_days(len(result.mean_caar), offset)
        colour = GROUP_COLOURS.get(label)
        ax.plot(days, result.mean_caar, label=label, color=colour, linewidth=1.8)
        if lo in result.percentile_bands and hi in result.percentile_bands:
            ax.fill_between(
                days,
                np.asarray(result.percentile_bands[lo]),
                np.asarray(result.percentile_bands[hi]),
                color=colour,
                alpha=0.15,
            )
    iterations = max((r.iterations for r in results.values()), default=0)
    ax.set_title(f"Bootstrapped CAAR ({iterations} iterations)")
    _finish_axes(ax, "CAAR")
    fig.tight_layout()
    return fig
