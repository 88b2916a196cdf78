"""Event study orchestrator.

Executes the analysis from config to AnalysisResults:
load records, fetch the market series once, retrieve and classify each
company, then aggregate every group.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from eventstudy.analysis.groups import Group
from eventstudy.bootstrap import BootstrapResult, bootstrap_groups
from eventstudy.config import GROUP_LABELS, AnalysisConfig, EventWindowConfig
from eventstudy.data import (
    Company,
    CompanyRegistry,
    PriceProvider,
    auto_select_provider,
    build_registry,
    load_company_records,
    load_price_window,
)
from eventstudy.data.contracts import AnalysisResults, RetrievalLog
from eventstudy.data.windows import market_returns_for_window, returns_index
from eventstudy.errors import DataUnavailableError
from eventstudy.metrics.returns import compute_abnormal_returns, compute_returns
from eventstudy.output.csv_export import (
    build_caar_table,
    export_bootstrap_csv,
    export_table_csv,
)

logger = logging.getLogger(__name__)


def _empty_series(name: str) -> pd.Series:
    return pd.Series([], index=pd.DatetimeIndex([]), dtype=float, name=name)


def fetch_market_returns(
    provider: PriceProvider,
    symbol: str,
) -> tuple[pd.Series, pd.Series]:
    """Fetch benchmark prices once and derive their daily returns.

    A failed fetch yields empty series, so every company's abnormal
    returns come out empty rather than aborting the run.

    Args:
        provider: Price provider.
        symbol: Benchmark ticker.

    Returns:
        (prices, returns), returns indexed by the date of the later price.
    """
    logger.info("Retrieving market data (%s)", symbol)
    try:
        prices = provider.fetch_prices(symbol)
    except DataUnavailableError as e:
        logger.error("%s: market data unavailable: %s", symbol, e)
        return _empty_series(symbol), _empty_series(symbol)

    returns = pd.Series(
        compute_returns(prices.to_numpy(dtype=float)),
        index=returns_index(prices),
        name=symbol,
    )
    return prices, returns


def retrieve_company(
    company: Company,
    provider: PriceProvider,
    market_returns: pd.Series,
    window: EventWindowConfig,
) -> None:
    """Fetch one company's window and attach its return series.

    Raises:
        DataUnavailableError: If prices are missing or do not cover the
            event window. The company is left untouched.
        InvalidPriceError: If the window contains a non-positive price.
    """
    prices = load_price_window(provider, company, window)
    returns = compute_returns(prices.to_numpy(dtype=float))
    abnormal = compute_abnormal_returns(
        returns, market_returns_for_window(market_returns, prices),
    )
    company.attach(prices.to_numpy(dtype=float), returns, abnormal)


def compute_group_metrics(groups: dict[str, Group]) -> None:
    """Compute AAR and CAAR for every group."""
    for group in groups.values():
        group.compute()
        logger.info(
            "%s: %d companies, %d-day CAAR", group.label, len(group), len(group.caar),
        )


def retrieve_and_classify(
    registry: CompanyRegistry,
    provider: PriceProvider,
    market_returns: pd.Series,
    config: AnalysisConfig,
) -> tuple[dict[str, Group], RetrievalLog]:
    """Retrieve every company and assign it to its surprise group.

    Companies that fail retrieval are logged and excluded from all groups.

    Returns:
        (groups keyed by label, retrieval log).
    """
    groups = {label: Group(label, registry) for label in GROUP_LABELS}
    log = RetrievalLog()

    total = len(registry)
    for n, company in enumerate(registry, start=1):
        logger.info("Retrieving data for %s (%d/%d)", company.symbol, n, total)
        try:
            retrieve_company(company, provider, market_returns, config.window)
        except DataUnavailableError as e:
            logger.warning("%s: %s, skipping", company.symbol, e)
            log.skipped[company.symbol] = str(e)
            continue

        label = company.classification(config.classification).value
        groups[label].add(company.symbol)
        logger.debug(
            "%s: surprise %.2f%% -> %s", company.symbol, company.surprise_pct, label,
        )

    logger.info(
        "Retrieved %d / %d companies (%d skipped)",
        total - len(log.skipped),
        total,
        len(log.skipped),
    )
    return groups, log


def run_analysis(
    config: AnalysisConfig,
    provider: PriceProvider | None = None,
) -> AnalysisResults:
    """Execute the event study.

    Args:
        config: Analysis configuration.
        provider: Price provider. Defaults to auto-selection from the
            environment.

    Returns:
        AnalysisResults with groups aggregated.
    """
    logger.info("Starting event study: records=%s", config.records_path)

    # Step 1: Load metadata into the master collection.
    records = load_company_records(config.records_path)
    registry = build_registry(records)
    logger.info("Loaded %d companies", len(registry))

    # Step 2: Market series, fetched and differenced once.
    if provider is None:
        provider = auto_select_provider(config.provider)
    market_prices, market_returns = fetch_market_returns(
        provider, config.provider.market_symbol,
    )

    # Step 3: Per-company retrieval and classification.
    groups, log = retrieve_and_classify(registry, provider, market_returns, config)

    # Step 4: Aggregate only after every company is attached.
    compute_group_metrics(groups)

    return AnalysisResults(
        registry=registry,
        groups=groups,
        market_prices=market_prices,
        market_returns=market_returns,
        retrieval_log=log,
        config=config,
    )


def run_bootstrap(
    results: AnalysisResults,
    rng: np.random.Generator | None = None,
) -> dict[str, BootstrapResult]:
    """Bootstrap every group of a completed analysis."""
    cfg = results.config.bootstrap
    logger.info(
        "Bootstrapping: sample_size=%d, iterations=%d, seed=%s",
        cfg.sample_size, cfg.iterations, cfg.seed,
    )
    return bootstrap_groups(results.groups, cfg, rng=rng)


def export_results(
    results: AnalysisResults,
    output_dir: Path,
    bootstrap: dict[str, BootstrapResult] | None = None,
) -> list[Path]:
    """Write CAAR, AAR and (optionally) bootstrapped CAAR tables to CSV.

    Day labels follow the run's event window: index 0 is -days_before.

    Returns:
        Paths written.
    """
    offset = results.day_offset
    output_dir.mkdir(parents=True, exist_ok=True)
    written = [
        export_table_csv(
            build_caar_table(results.caar_by_label(), offset=offset),
            output_dir / "caar_data.csv",
        ),
        export_table_csv(
            build_caar_table(results.aar_by_label(), offset=offset),
            output_dir / "aar_data.csv",
        ),
    ]
    if bootstrap is not None:
        written.append(
            export_bootstrap_csv(
                bootstrap, output_dir / "bootstrapped_caar.csv", offset=offset,
            )
        )
    return written
