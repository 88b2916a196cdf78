"""CSV export of AAR/CAAR tables in the Day,Beat,Meet,Miss layout."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from eventstudy.analysis.groups import relative_days
from eventstudy.config import DAY_OFFSET, GROUP_LABELS

if TYPE_CHECKING:
    from eventstudy.bootstrap import BootstrapResult

logger = logging.getLogger(__name__)

DAY_COLUMN = "Day"


def build_caar_table(
    series_by_label: Mapping[str, Sequence[float] | np.ndarray],
    labels: Sequence[str] = GROUP_LABELS,
    offset: int = DAY_OFFSET,
) -> pd.DataFrame:
    """Align per-group series by day index into one table.

    One row per day index up to the longest series; row d is relative
    day d - offset. Groups with shorter series are NaN past their end
    (written as blanks).

    Args:
        series_by_label: Label -> AAR or CAAR series.
        labels: Column order. Labels missing from the mapping are blank.
        offset: Relative day of index 0.

    Returns:
        DataFrame with columns Day, then one per label.
    """
    length = max(
        (len(series_by_label.get(label, ())) for label in labels), default=0,
    )
    table = pd.DataFrame({DAY_COLUMN: relative_days(length, offset)})
    for label in labels:
        values = np.full(length, np.nan)
        series = np.asarray(series_by_label.get(label, ()), dtype=float)
        values[: len(series)] = series
        table[label] = values
    return table


def build_band_table(
    result: BootstrapResult,
    offset: int = DAY_OFFSET,
) -> pd.DataFrame:
    """Mean and percentile bands of one bootstrapped group, by day."""
    table = pd.DataFrame({
        DAY_COLUMN: relative_days(len(result.mean_caar), offset),
        "mean": result.mean_caar,
    })
    for p, values in result.percentile_bands.items():
        table[f"p{p:g}"] = values
    return table


def export_table_csv(table: pd.DataFrame, path: Path) -> Path:
    """Write a table to CSV, blanks for missing values."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False, na_rep="")
    logger.info("Exported %s (%d rows)", path, len(table))
    return path


def export_bootstrap_csv(
    results: Mapping[str, BootstrapResult],
    path: Path,
    offset: int = DAY_OFFSET,
) -> Path:
    """Write bootstrapped mean CAARs, plus a companion bands file.

    The main file uses the Day,Beat,Meet,Miss layout. Percentile bands go
    to ``<stem>_bands.csv`` in long form with a ``group`` column.

    Returns:
        Path of the main file.
    """
    table = build_caar_table(
        {label: r.mean_caar for label, r in results.items()}, offset=offset,
    )
    export_table_csv(table, path)

    frames = []
    for label, result in results.items():
        bands = build_band_table(result, offset)
        bands.insert(0, "group", label)
        frames.append(bands)
    if frames:
        export_table_csv(
            pd.concat(frames, ignore_index=True),
            path.with_name(f"{path.stem}_bands.csv"),
        )
    return path
