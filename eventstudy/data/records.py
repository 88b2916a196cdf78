"""Earnings metadata loading from CSV."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import pandas as pd

from eventstudy.data.models import EarningsRecord
from eventstudy.errors import DataUnavailableError

logger = logging.getLogger(__name__)

# Columns are read by position; header names in the file are not enforced.
RECORD_COLUMNS = ("symbol", "eps_estimate", "actual_eps", "earnings_date")


def _parse_row(values: list[str], line_no: int) -> EarningsRecord | None:
    symbol, eps_raw, actual_raw, date_raw = (v.strip() for v in values)
    if not symbol:
        logger.warning("Line %d: empty symbol, skipping", line_no)
        return None
    try:
        eps_estimate = float(eps_raw)
        actual_eps = float(actual_raw)
    except ValueError:
        logger.warning(
            "Line %d (%s): unparseable EPS %r / %r, skipping",
            line_no, symbol, eps_raw, actual_raw,
        )
        return None
    if not (math.isfinite(eps_estimate) and math.isfinite(actual_eps)):
        logger.warning("Line %d (%s): non-finite EPS, skipping", line_no, symbol)
        return None
    return EarningsRecord(
        symbol=symbol,
        eps_estimate=eps_estimate,
        actual_eps=actual_eps,
        earnings_date=date_raw,
    )


def load_company_records(path: Path) -> list[EarningsRecord]:
    """Load earnings records from a CSV file with a header row.

    Expected columns, in order: symbol, EPS estimate, actual EPS,
    earnings date. Rows that cannot be parsed are logged and skipped.

    Args:
        path: CSV file path.

    Returns:
        Records in file order.

    Raises:
        DataUnavailableError: If the file is missing, empty, or has fewer
            than four columns.
    """
    try:
        df = pd.read_csv(
            path,
            header=0,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except FileNotFoundError as e:
        raise DataUnavailableError(f"Records file not found: {path}") from e
    except pd.errors.EmptyDataError as e:
        raise DataUnavailableError(f"Records file is empty: {path}") from e

    if df.shape[1] < len(RECORD_COLUMNS):
        raise DataUnavailableError(
            f"{path}: expected {len(RECORD_COLUMNS)} columns "
            f"({', '.join(RECORD_COLUMNS)}), found {df.shape[1]}"
        )

    records: list[EarningsRecord] = []
    for i, row in enumerate(df.iloc[:, : len(RECORD_COLUMNS)].itertuples(index=False)):
        # Line 1 is the header
        record = _parse_row(list(row), line_no=i + 2)
        if record is not None:
            records.append(record)

    logger.info("Loaded %d earnings records from %s", len(records), path)
    return records
