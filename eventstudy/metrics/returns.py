"""Daily simple returns and abnormal returns against a market benchmark."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from eventstudy.errors import InvalidPriceError

logger = logging.getLogger(__name__)


def compute_returns(prices: Sequence[float] | np.ndarray) -> np.ndarray:
    """Convert a chronological price series into daily simple returns.

    return[i] = (prices[i+1] - prices[i]) / prices[i]

    Args:
        prices: Chronological adjusted closes.

    Returns:
        Array of length len(prices) - 1, or empty if fewer than 2 prices.

    Raises:
        InvalidPriceError: If any price is zero, negative, or non-finite.
    """
    arr = np.asarray(prices, dtype=float)
    if arr.size < 2:
        return np.empty(0, dtype=float)

    if not np.all(np.isfinite(arr)):
        raise InvalidPriceError("Price series contains non-finite values")

    bad = np.flatnonzero(arr <= 0)
    if bad.size:
        i = int(bad[0])
        raise InvalidPriceError(f"Non-positive price {arr[i]!r} at index {i}")

    return np.diff(arr) / arr[:-1]


def compute_abnormal_returns(
    company_returns: Sequence[float] | np.ndarray,
    market_returns: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """Subtract market returns from company returns, day by day.

    Only the overlap is kept: the output has length
    min(len(company_returns), len(market_returns)) and the tail of the
    longer series is dropped.

    Args:
        company_returns: Daily returns of the company.
        market_returns: Daily returns of the benchmark.

    Returns:
        Abnormal returns over the overlapping range.
    """
    a = np.asarray(company_returns, dtype=float)
    b = np.asarray(market_returns, dtype=float)
    n = min(a.size, b.size)
    if a.size != b.size:
        logger.debug(
            "Return length mismatch (%d vs %d), truncating to %d",
            a.size, b.size, n,
        )
    return a[:n] - b[:n]
