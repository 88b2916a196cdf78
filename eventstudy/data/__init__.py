"""Data loading orchestration."""

from __future__ import annotations

import logging

import pandas as pd

from eventstudy.config import EventWindowConfig
from eventstudy.data.models import Company, CompanyRegistry, EarningsRecord
from eventstudy.data.prices import PriceProvider, auto_select_provider
from eventstudy.data.records import load_company_records
from eventstudy.data.windows import slice_event_window

logger = logging.getLogger(__name__)

__all__ = [
    "Company",
    "CompanyRegistry",
    "EarningsRecord",
    "PriceProvider",
    "auto_select_provider",
    "build_registry",
    "load_company_records",
    "load_price_window",
]


def build_registry(records: list[EarningsRecord]) -> CompanyRegistry:
    """Create the master company collection from metadata records.

    A symbol that appears more than once keeps its first record; later ones are
    ignored.
    """
    registry = CompanyRegistry()
    for record in records:
        if record.symbol in registry:
            logger.warning("%s: duplicate record, keeping the first", record.symbol)
            continue
        registry.add(Company.from_record(record))
    return registry


def load_price_window(
    provider: PriceProvider,
    company: Company,
    window: EventWindowConfig,
) -> pd.Series:
    """Fetch a company's prices and cut them to its event window.

    Loading sequence:
        1. Fetch the full adjusted-close history from the provider.
        2. Slice the window around the company's earnings date.

    Args:
        provider: Price provider.
        company: Company whose earnings date anchors the window.
        window: Days before/after the event.

    Returns:
        Windowed price series.

    Raises:
        DataUnavailableError: If the fetch fails or the history does not
            cover the window.
    """
    prices = provider.fetch_prices(company.symbol)
    return slice_event_window(
        prices, company.earnings_date, window, symbol=company.symbol,
    )
