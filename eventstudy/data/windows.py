"""Event window slicing around an earnings date."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from eventstudy.config import EventWindowConfig
from eventstudy.errors import DataUnavailableError

logger = logging.getLogger(__name__)


def slice_event_window(
    prices: pd.Series,
    earnings_date: str,
    config: EventWindowConfig,
    symbol: str | None = None,
) -> pd.Series:
    """Cut a price series down to the event window.

    The event day is the first trading date on or after the earnings
    date. The window runs from ``days_before + 1`` prices before it to
    ``days_after`` prices after it, so the derived returns start at
    relative day -days_before and hold days_before + days_after + 1 values.

    Args:
        prices: Adjusted closes indexed by date, ascending.
        earnings_date: Announcement date (anything pd.Timestamp parses).
        config: Days before/after the event.
        symbol: Ticker, for error messages.

    Returns:
        Sliced price series (a view on the input).

    Raises:
        DataUnavailableError: If the date is unparseable or the series
            does not cover the full window.
    """
    name = symbol or str(prices.name)
    try:
        event_ts = pd.Timestamp(earnings_date)
    except (TypeError, ValueError) as e:
        raise DataUnavailableError(
            f"{name}: invalid earnings date {earnings_date!r}", symbol,
        ) from e
    if pd.isna(event_ts):
        raise DataUnavailableError(f"{name}: missing earnings date", symbol)

    event_idx = int(prices.index.searchsorted(event_ts, side="left"))
    if event_idx >= len(prices):
        raise DataUnavailableError(
            f"{name}: no prices on or after {event_ts.date()}", symbol,
        )

    start = event_idx - config.days_before - 1
    stop = event_idx + config.days_after + 1
    if start < 0 or stop > len(prices):
        raise DataUnavailableError(
            f"{name}: {len(prices)} prices do not cover the event window "
            f"around {event_ts.date()}",
            symbol,
        )

    window = prices.iloc[start:stop]
    logger.debug(
        "%s: window %s to %s (%d prices)",
        name, window.index[0].date(), window.index[-1].date(), len(window),
    )
    return window


def returns_index(prices: pd.Series) -> pd.Index:
    """Dates the returns of a price series belong to (all but the first)."""
    return prices.index[1:]


def market_returns_for_window(
    market_returns: pd.Series,
    window: pd.Series,
) -> np.ndarray:
    """Market returns over the date range spanned by a company window.

    Slices by date range only; dates are not matched one-to-one.

    Args:
        market_returns: Market returns indexed by date.
        window: Company price window.

    Returns:
        Market return values from the window's first return date to its
        last date, inclusive.
    """
    if len(window) < 2:
        return np.empty(0, dtype=float)
    dates = returns_index(window)
    return market_returns.loc[dates[0]: dates[-1]].to_numpy(dtype=float)
