"""Daily adjusted-close price retrieval.

Provides a PriceProvider protocol with two implementations:
- AlphaVantagePriceProvider: Primary, TIME_SERIES_DAILY_ADJUSTED as CSV.
- YFinancePriceProvider: Fallback when no Alpha Vantage key is available.

Both pace requests: the upstream services allow one request at a time
with a delay between requests.
"""

from __future__ import annotations

import io
import json
import logging
import os
import time
from typing import Protocol

import pandas as pd
import requests

from eventstudy.config import ProviderConfig
from eventstudy.errors import DataUnavailableError

logger = logging.getLogger(__name__)

_RETRY_STATUS_CODES = {429, 500, 502, 503, 504}
_ADJUSTED_CLOSE_COLUMN = "adjusted_close"
# Position of adjusted close in the Alpha Vantage CSV layout:
# timestamp, open, high, low, close, adjusted_close, volume, ...
_ADJUSTED_CLOSE_POSITION = 5


class PriceProvider(Protocol):
    """Interface for fetching daily adjusted closes."""

    def fetch_prices(self, symbol: str) -> pd.Series:
        """Fetch the daily adjusted-close history for a symbol.

        Args:
            symbol: Ticker symbol (e.g. "AAPL").

        Returns:
            Adjusted closes indexed by date, ascending.

        Raises:
            DataUnavailableError: If no usable series could be fetched.
        """
        ...


class _Pacer:
    """Enforces a minimum delay between consecutive requests."""

    def __init__(self, delay: float) -> None:
        self._delay = delay
        self._last: float | None = None

    def wait(self) -> None:
        if self._last is not None:
            remaining = self._delay - (time.monotonic() - self._last)
            if remaining > 0:
                time.sleep(remaining)
        self._last = time.monotonic()


def parse_price_csv(text: str, symbol: str) -> pd.Series:
    """Parse an Alpha Vantage daily-adjusted CSV body.

    Rows whose adjusted close cannot be parsed are dropped with a warning.

    Args:
        text: CSV response body (newest row first).
        symbol: Ticker, used for naming and messages.

    Returns:
        Adjusted closes indexed by date, oldest first.

    Raises:
        DataUnavailableError: If the body is an API error message or has
            no usable rows.
    """
    stripped = text.lstrip()
    if not stripped:
        raise DataUnavailableError(f"{symbol}: empty response", symbol)
    if stripped.startswith("{"):
        # Errors and rate-limit notices come back as JSON even for CSV
        try:
            payload = json.loads(stripped)
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        message = next(
            (str(v) for k, v in payload.items()
             if k in ("Error Message", "Note", "Information")),
            stripped[:200],
        )
        raise DataUnavailableError(f"{symbol}: {message}", symbol)

    df = pd.read_csv(io.StringIO(stripped))
    if df.shape[1] <= _ADJUSTED_CLOSE_POSITION:
        raise DataUnavailableError(
            f"{symbol}: unexpected CSV layout {list(df.columns)}", symbol,
        )

    if _ADJUSTED_CLOSE_COLUMN in df.columns:
        raw = df[_ADJUSTED_CLOSE_COLUMN]
    else:
        raw = df.iloc[:, _ADJUSTED_CLOSE_POSITION]

    dates = pd.to_datetime(df.iloc[:, 0], errors="coerce")
    closes = pd.to_numeric(raw, errors="coerce")
    valid = dates.notna() & closes.notna()
    dropped = int((~valid).sum())
    if dropped:
        logger.warning("%s: dropped %d unparseable price rows", symbol, dropped)

    series = pd.Series(
        closes[valid].to_numpy(dtype=float),
        index=pd.DatetimeIndex(dates[valid]),
        name=symbol,
    ).sort_index()
    if series.empty:
        raise DataUnavailableError(f"{symbol}: no price rows", symbol)
    return series


class AlphaVantagePriceProvider:
    """Fetch daily adjusted closes from Alpha Vantage.

    Retries with exponential backoff on 429/5xx status codes and on
    connection errors.

    Args:
        api_key: Alpha Vantage API key.
        config: Endpoint, pacing and retry settings.
    """

    FUNCTION = "TIME_SERIES_DAILY_ADJUSTED"

    def __init__(self, api_key: str, config: ProviderConfig | None = None) -> None:
        self._api_key = api_key
        self._config = config or ProviderConfig()
        self._pacer = _Pacer(self._config.request_delay)

    def fetch_prices(self, symbol: str) -> pd.Series:
        """Fetch the full daily adjusted-close history for a symbol."""
        params = {
            "function": self.FUNCTION,
            "symbol": symbol,
            "outputsize": "full",
            "datatype": "csv",
            "apikey": self._api_key,
        }
        text = self._get(symbol, params)
        series = parse_price_csv(text, symbol)
        logger.debug("%s: fetched %d prices", symbol, len(series))
        return series

    def _get(self, symbol: str, params: dict[str, str]) -> str:
        """GET with pacing and retry logic, returning the response body."""
        cfg = self._config

        for attempt in range(cfg.max_retries):
            self._pacer.wait()
            try:
                response = requests.get(
                    cfg.base_url,
                    params=params,
                    timeout=cfg.request_timeout,
                )

                if response.status_code in _RETRY_STATUS_CODES:
                    sleep_time = cfg.backoff_factor * (2**attempt)
                    logger.warning(
                        "%s: Alpha Vantage returned %d, retrying in %.1fs "
                        "(attempt %d/%d)",
                        symbol,
                        response.status_code,
                        sleep_time,
                        attempt + 1,
                        cfg.max_retries,
                    )
                    time.sleep(sleep_time)
                    continue

                response.raise_for_status()
                return response.text

            except requests.RequestException as e:
                if attempt < cfg.max_retries - 1:
                    sleep_time = cfg.backoff_factor * (2**attempt)
                    logger.warning(
                        "%s: request failed: %s. Retrying in %.1fs "
                        "(attempt %d/%d)",
                        symbol,
                        e,
                        sleep_time,
                        attempt + 1,
                        cfg.max_retries,
                    )
                    time.sleep(sleep_time)
                else:
                    logger.error(
                        "%s: request failed after %d attempts: %s",
                        symbol,
                        cfg.max_retries,
                        e,
                    )

        raise DataUnavailableError(
            f"{symbol}: Alpha Vantage request failed after "
            f"{cfg.max_retries} attempts",
            symbol,
        )


class YFinancePriceProvider:
    """Fetch daily adjusted closes via yfinance (fallback provider).

    yfinance is imported lazily so the primary provider works without
    importing it.
    """

    def __init__(self, config: ProviderConfig | None = None) -> None:
        self._config = config or ProviderConfig()
        self._pacer = _Pacer(self._config.request_delay)

    def fetch_prices(self, symbol: str) -> pd.Series:
        """Fetch the full daily adjusted-close history via yfinance.download."""
        try:
            import yfinance as yf  # noqa: PLC0415
        except ImportError as e:
            raise DataUnavailableError(
                "yfinance is not installed. Install it with: pip install yfinance",
                symbol,
            ) from e

        self._pacer.wait()
        try:
            data = yf.download(
                tickers=symbol,
                period="max",
                progress=False,
                auto_adjust=True,
            )
        except Exception as e:
            raise DataUnavailableError(
                f"{symbol}: yfinance download failed: {e}", symbol,
            ) from e

        if data is None or data.empty or "Close" not in data.columns.get_level_values(0):
            raise DataUnavailableError(f"{symbol}: yfinance returned no data", symbol)

        close = data["Close"]
        if isinstance(close, pd.DataFrame):
            # Newer yfinance keys columns by (field, ticker) even for one symbol
            close = close.iloc[:, 0]

        index = pd.DatetimeIndex(close.index)
        if index.tz is not None:
            index = index.tz_localize(None)
        series = pd.Series(
            close.to_numpy(dtype=float), index=index, name=symbol,
        ).dropna().sort_index()
        if series.empty:
            raise DataUnavailableError(f"{symbol}: yfinance returned no prices", symbol)

        logger.debug("%s: fetched %d prices from yfinance", symbol, len(series))
        return series


def auto_select_provider(config: ProviderConfig | None = None) -> PriceProvider:
    """Select a price provider based on available credentials.

    Returns AlphaVantagePriceProvider if the configured API key
    environment variable is set, otherwise YFinancePriceProvider.
    """
    config = config or ProviderConfig()
    api_key = os.environ.get(config.api_key_env)
    if api_key:
        logger.info("Using AlphaVantagePriceProvider (%s found)", config.api_key_env)
        return AlphaVantagePriceProvider(api_key=api_key, config=config)
    logger.warning("%s not found, falling back to yfinance", config.api_key_env)
    return YFinancePriceProvider(config=config)
