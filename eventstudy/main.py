"""CLI entry point for the earnings event study."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from eventstudy.config import (
    GROUP_LABELS,
    AnalysisConfig,
    BootstrapConfig,
    EventWindowConfig,
    ProviderConfig,
)
from eventstudy.data.contracts import AnalysisResults
from eventstudy.errors import EventStudyError
from eventstudy.output.console import render_company, render_group
from eventstudy.output.csv_export import build_caar_table
from eventstudy.runner import export_results, run_analysis, run_bootstrap

logger = logging.getLogger(__name__)


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--records",
        type=Path,
        default=Path("data/earnings.csv"),
        help="Earnings records CSV (default: data/earnings.csv)",
    )
    parser.add_argument(
        "--market",
        default="SPY",
        help="Benchmark symbol (default: SPY)",
    )
    parser.add_argument(
        "--days-before",
        type=int,
        default=30,
        help="Trading days before the earnings date (default: 30)",
    )
    parser.add_argument(
        "--days-after",
        type=int,
        default=30,
        help="Trading days after the earnings date (default: 30)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Seconds between data requests (default: 1.0)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="eventstudy",
        description="Earnings surprise event study (AAR/CAAR with bootstrapping)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze", help="Retrieve data, aggregate groups and export CAAR CSV"
    )
    _add_common_args(analyze_parser)
    analyze_parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Output directory (default: output/)",
    )
    analyze_parser.add_argument(
        "--plot",
        action="store_true",
        help="Also save a CAAR chart (caar.png)",
    )

    # bootstrap command
    bootstrap_parser = subparsers.add_parser(
        "bootstrap", help="Bootstrap group CAARs and export the averages"
    )
    _add_common_args(bootstrap_parser)
    bootstrap_parser.add_argument(
        "--sample-size",
        type=int,
        default=30,
        help="Companies drawn per group per iteration (default: 30)",
    )
    bootstrap_parser.add_argument(
        "--iterations",
        type=int,
        default=40,
        help="Number of bootstrap iterations (default: 40)",
    )
    bootstrap_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible draws (default: unseeded)",
    )
    bootstrap_parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Output directory (default: output/)",
    )
    bootstrap_parser.add_argument(
        "--plot",
        action="store_true",
        help="Also save a bootstrapped CAAR chart (bootstrapped_caar.png)",
    )

    # stock command
    stock_parser = subparsers.add_parser(
        "stock", help="Show EPS, group and returns around earnings for one stock"
    )
    stock_parser.add_argument("symbol", help="Ticker symbol")
    _add_common_args(stock_parser)

    # group command
    group_parser = subparsers.add_parser(
        "group", help="Show AAR or CAAR for one surprise group"
    )
    group_parser.add_argument("label", choices=GROUP_LABELS, help="Surprise group")
    group_parser.add_argument(
        "--metric",
        choices=["aar", "caar"],
        default="caar",
        help="Series to show (default: caar)",
    )
    _add_common_args(group_parser)

    args = parser.parse_args(argv)
    for option in ("days_before", "days_after", "delay"):
        if getattr(args, option) < 0:
            parser.error(f"--{option.replace('_', '-')} must be >= 0")
    return args


def _build_config(args: argparse.Namespace) -> AnalysisConfig:
    """Build AnalysisConfig from parsed arguments."""
    config = AnalysisConfig(
        records_path=args.records,
        provider=ProviderConfig(market_symbol=args.market, request_delay=args.delay),
        window=EventWindowConfig(
            days_before=args.days_before, days_after=args.days_after,
        ),
    )
    if getattr(args, "output_dir", None) is not None:
        config.output_directory = args.output_dir
    if args.command == "bootstrap":
        config.bootstrap = BootstrapConfig(
            sample_size=args.sample_size,
            iterations=args.iterations,
            seed=args.seed,
        )
    return config


def _save_figure(fig: object, path: Path) -> None:
    import matplotlib.pyplot as plt  # noqa: PLC0415

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)  # type: ignore[attr-defined]
    plt.close(fig)  # type: ignore[arg-type]
    logger.info("Chart written to %s", path)


def _log_summary(results: AnalysisResults) -> None:
    for label, group in results.groups.items():
        final = f"{group.caar[-1]:.4%}" if len(group.caar) else "n/a"
        logger.info("%s: %d companies, final CAAR %s", label, len(group), final)
    if results.retrieval_log.skipped:
        logger.info(
            "Skipped: %s", ", ".join(sorted(results.retrieval_log.skipped)),
        )


def run_analyze(args: argparse.Namespace) -> None:
    """Execute the analyze command.

    Args:
        args: Parsed CLI arguments.
    """
    config = _build_config(args)
    results = run_analysis(config)
    _log_summary(results)
    export_results(results, config.output_directory)

    if args.plot:
        from eventstudy.charts.caar import caar_chart  # noqa: PLC0415

        fig = caar_chart(
            build_caar_table(results.caar_by_label(), offset=results.day_offset)
        )
        _save_figure(fig, config.output_directory / "caar.png")


def run_bootstrap_command(args: argparse.Namespace) -> None:
    """Execute the bootstrap command.

    Args:
        args: Parsed CLI arguments.
    """
    config = _build_config(args)
    results = run_analysis(config)
    _log_summary(results)
    bootstrapped = run_bootstrap(results)
    export_results(results, config.output_directory, bootstrap=bootstrapped)

    if args.plot:
        from eventstudy.charts.caar import bootstrap_chart  # noqa: PLC0415

        fig = bootstrap_chart(bootstrapped, offset=results.day_offset)
        _save_figure(fig, config.output_directory / "bootstrapped_caar.png")


def run_stock(args: argparse.Namespace) -> None:
    """Execute the stock command.

    Args:
        args: Parsed CLI arguments (symbol plus data options).
    """
    config = _build_config(args)
    results = run_analysis(config)
    company = results.registry.get(args.symbol)
    if company is None:
        print(f"Stock {args.symbol} not found.")
        return
    print(render_company(
        company,
        offset=results.day_offset,
        thresholds=results.config.classification,
    ))


def run_group(args: argparse.Namespace) -> None:
    """Execute the group command.

    Args:
        args: Parsed CLI arguments (label, metric plus data options).
    """
    config = _build_config(args)
    results = run_analysis(config)
    group = results.groups[args.label]
    print(render_group(group, args.metric, offset=results.day_offset))


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).
    """
    args = _parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        if args.command == "analyze":
            run_analyze(args)
        elif args.command == "bootstrap":
            run_bootstrap_command(args)
        elif args.command == "stock":
            run_stock(args)
        elif args.command == "group":
            run_group(args)
        else:
            logger.error("Unknown command: %s", args.command)
            sys.exit(1)
    except EventStudyError as e:
        logger.error("%s failed: %s", args.command, e)
        sys.exit(1)


if __name__ == "__main__":
    main()
