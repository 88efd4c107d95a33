# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Ops FinSight
------------

The analytics engine behind the finance dashboards of a multi-unit
business-operations platform. It turns a flat list of dated,
currency-normalized transactions into the derived views the dashboards
display.

Main capabilities:
- relative period filters (all time, year to date, month to date,
  last 12 months),
- cumulative revenue / expense / profit series, either one point per
  transaction or on a continuous daily / weekly / monthly axis with
  carry-forward through quiet buckets,
- category breakdowns, split into seminar-linked and operational expenses,
- profitability per seminar/project and per client,
- headline totals per business unit,
- CSV ingestion, ledger export and a thin command-line interface.

The engine is purely functional: every call recomputes its output from the
transactions it is given and keeps no state between calls. Fetching the
transactions and converting currencies belong to the data layer upstream.

Usage:
    python -m ops_finsight.cli --help
"""

__all__ = [
    "calendar_grid",
    "categories",
    "dashboard",
    "periods",
    "profitability",
    "series",
    "summary",
    "transactions",
    "views",
]

__version__ = "0.2.0"
