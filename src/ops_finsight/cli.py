# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for Ops FinSight.

The CLI is intentionally thin: it reads a transactions CSV (and optional
seminar / client registries), runs the dashboard pipeline for the
requested period and prints the selected views as console tables.

High-level pipeline
-------------------
1) Load the TOML configuration (``ops_finsight_config.toml`` by default,
   or the file given with ``--config``).
2) Read transactions from ``--transactions`` and the optional name
   lookups from ``--seminars`` / ``--clients``.
3) Build the dashboard for ``--period`` (default from the configuration),
   with a continuous series at ``--granularity`` (default from the
   configuration).
4) Print the views selected by ``--scope``.
5) Optionally write the flattened ledger to ``--export-ledger``.

Examples
--------
    python -m ops_finsight.cli --transactions data/transactions.csv
    python -m ops_finsight.cli --transactions tx.csv --seminars seminars.csv \\
        --period ytd --granularity weekly --scope series
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .calendar_grid import GRANULARITIES
from .config import load_config
from .dashboard import DashboardData, build_dashboard
from .io import export_ledger_csv, read_name_lookup, read_transactions
from .periods import PERIODS, filter_by_period
from .views import (
    categories_to_dataframe,
    client_profitability_to_dataframe,
    monthly_to_dataframe,
    profitability_to_dataframe,
    series_to_dataframe,
    summary_to_dataframe,
)

logger = logging.getLogger(__name__)

SCOPES = ("summary", "series", "categories", "profitability", "all")


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m ops_finsight.cli",
        description=(
            "Ops FinSight - Financial analytics for business-unit dashboards. "
            "Reads normalized transactions and prints cumulative series, "
            "expense breakdowns and seminar/client profitability."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of ops_finsight and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            "'ops_finsight_config.toml' in the current directory is used when present."
        ),
    )
    ap.add_argument(
        "--transactions",
        dest="transactions_path",
        metavar="CSV_PATH",
        help="CSV file of normalized transactions.",
    )
    ap.add_argument(
        "--seminars",
        dest="seminars_path",
        metavar="CSV_PATH",
        help="Optional 'id,name' CSV naming the seminars/projects.",
    )
    ap.add_argument(
        "--clients",
        dest="clients_path",
        metavar="CSV_PATH",
        help="Optional 'id,name' CSV of clients; enables client profitability.",
    )
    ap.add_argument(
        "--period",
        choices=list(PERIODS),
        help="Reporting period. Defaults to analytics.default_period from config.",
    )
    ap.add_argument(
        "--granularity",
        choices=list(GRANULARITIES),
        help=(
            "Bucket size of the continuous cumulative series (one point per "
            "day, week or month). Defaults to analytics.default_granularity "
            "from config."
        ),
    )
    ap.add_argument(
        "--scope",
        choices=list(SCOPES),
        default="all",
        help="Which views to print (default: all).",
    )
    ap.add_argument(
        "--export-ledger",
        dest="export_ledger_path",
        metavar="CSV_PATH",
        help="Write the flattened ledger of the filtered period to this CSV file.",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return ap


def _print_table(title: str, df) -> None:
    print()
    print(title)
    print("-" * len(title))
    if df.empty:
        print("(no data)")
    else:
        print(df.to_string(index=False))


def _render(data: DashboardData, scope: str, decimals: int, currency: str) -> None:
    if scope in {"summary", "all"}:
        _print_table(
            f"Summary ({currency})", summary_to_dataframe(data.summary, decimals)
        )

    if scope in {"series", "all"}:
        _print_table(
            "Cumulative trend (per transaction)",
            series_to_dataframe(data.event_series, decimals),
        )
        _print_table(
            f"Cumulative trend ({data.granularity})",
            series_to_dataframe(data.continuous_series, decimals),
        )
        _print_table(
            "Monthly income and expenses (last 12 months)",
            monthly_to_dataframe(data.monthly, decimals),
        )

    if scope in {"categories", "all"}:
        _print_table(
            "Seminar-linked expenses by category",
            categories_to_dataframe(data.expenses.project_linked, decimals),
        )
        _print_table(
            "Operational expenses by category",
            categories_to_dataframe(data.expenses.operational, decimals),
        )
        _print_table(
            "Earnings by consultant",
            categories_to_dataframe(data.consultant_earnings, decimals),
        )

    if scope in {"profitability", "all"}:
        _print_table(
            "Profitability by seminar",
            profitability_to_dataframe(data.project_profitability, decimals),
        )
        if data.client_profitability:
            _print_table(
                "Profitability by client",
                client_profitability_to_dataframe(data.client_profitability, decimals),
            )


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the Ops FinSight CLI.

    Parses command-line arguments, loads the configuration, reads the
    transactions and registries, builds the dashboard for the requested
    period and prints the selected views. Invalid input files or options
    are reported through ``parser.error`` (exit status 2).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"ops_finsight version {__version__}")
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.transactions_path:
        parser.error("--transactions is required.")

    try:
        config = load_config(args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    for path in (args.transactions_path, args.seminars_path, args.clients_path):
        if path and not Path(path).is_file():
            parser.error(f"CSV file not found: {path}")

    try:
        transactions = read_transactions(args.transactions_path)
        seminars = read_name_lookup(args.seminars_path) if args.seminars_path else []
        clients = read_name_lookup(args.clients_path) if args.clients_path else None
    except ValueError as exc:
        parser.error(str(exc))

    data = build_dashboard(
        transactions,
        seminars=seminars,
        period=args.period,
        granularity=args.granularity,
        clients=clients,
        config=config,
    )

    print(
        f"Applied period: {data.period.label} "
        f"({data.period.start.isoformat()} → {data.period.end.isoformat()})"
    )
    print(f"Transactions in period: {data.summary.transaction_count}")
    if data.summary.transaction_count == 0:
        print("Warning: no transactions were found for the selected period.")

    _render(data, args.scope, config.decimals, config.currency)

    if args.export_ledger_path:
        period_selector = args.period or config.default_period
        rows = export_ledger_csv(
            filter_by_period(transactions, period_selector),
            args.export_ledger_path,
        )
        print()
        print(f"Ledger exported: {rows} rows → {args.export_ledger_path}")


if __name__ == "__main__":
    main()
