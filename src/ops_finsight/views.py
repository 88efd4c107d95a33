# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for Ops FinSight.

The analytics functions return lists of small frozen dataclasses. This
module converts them into pandas DataFrames with a stable column order,
ready to be printed by the CLI, exported to CSV or handed to a charting
layer. Amounts are rounded to the requested number of decimals here and
only here, so the engine itself keeps full precision.

Empty inputs produce empty DataFrames that still carry the expected
columns.
"""

from collections.abc import Sequence

import pandas as pd

from .categories import CategoryTotal
from .profitability import ClientProfitability, ProjectProfitability
from .series import MonthlyTotal, TimeSeriesPoint
from .summary import FinancialSummary

SERIES_COLUMNS = ["label", "revenue", "expenses", "profit"]
MONTHLY_COLUMNS = ["month", "income", "expenses", "profit"]
CATEGORY_COLUMNS = ["category", "amount", "share_pct"]
PROJECT_COLUMNS = ["project_id", "project_name", "revenue", "expenses", "profit"]
CLIENT_COLUMNS = [
    "client_id",
    "client_name",
    "revenue",
    "expenses",
    "billable_expenses",
    "profit",
    "margin_pct",
]
SUMMARY_COLUMNS = ["unit", "income", "expenses", "profit"]


def series_to_dataframe(
    points: Sequence[TimeSeriesPoint], decimals: int = 2
) -> pd.DataFrame:
    """One row per point: label, cumulative revenue/expenses and profit."""
    rows = [
        {
            "label": p.label,
            "revenue": round(p.cumulative_revenue, decimals),
            "expenses": round(p.cumulative_expenses, decimals),
            "profit": round(p.profit, decimals),
        }
        for p in points
    ]
    return pd.DataFrame(rows, columns=SERIES_COLUMNS)


def monthly_to_dataframe(
    totals: Sequence[MonthlyTotal], decimals: int = 2
) -> pd.DataFrame:
    rows = [
        {
            "month": m.label,
            "income": round(m.income, decimals),
            "expenses": round(m.expenses, decimals),
            "profit": round(m.profit, decimals),
        }
        for m in totals
    ]
    return pd.DataFrame(rows, columns=MONTHLY_COLUMNS)


def categories_to_dataframe(
    totals: Sequence[CategoryTotal], decimals: int = 2
) -> pd.DataFrame:
    """
    One row per category, in ranking order.

    ``share_pct`` is the category's share of the breakdown total, which
    is what the pie charts display.
    """
    grand_total = sum(t.amount for t in totals)
    rows = []
    for t in totals:
        share = t.amount / grand_total * 100.0 if grand_total > 0 else 0.0
        rows.append(
            {
                "category": t.category,
                "amount": round(t.amount, decimals),
                "share_pct": round(share, 1),
            }
        )
    return pd.DataFrame(rows, columns=CATEGORY_COLUMNS)


def profitability_to_dataframe(
    rows: Sequence[ProjectProfitability], decimals: int = 2
) -> pd.DataFrame:
    data = [
        {
            "project_id": r.project_id,
            "project_name": r.project_name,
            "revenue": round(r.revenue, decimals),
            "expenses": round(r.expenses, decimals),
            "profit": round(r.profit, decimals),
        }
        for r in rows
    ]
    return pd.DataFrame(data, columns=PROJECT_COLUMNS)


def client_profitability_to_dataframe(
    rows: Sequence[ClientProfitability], decimals: int = 2
) -> pd.DataFrame:
    data = [
        {
            "client_id": r.client_id,
            "client_name": r.client_name,
            "revenue": round(r.revenue, decimals),
            "expenses": round(r.expenses, decimals),
            "billable_expenses": round(r.billable_expenses, decimals),
            "profit": round(r.profit, decimals),
            "margin_pct": round(r.margin, 1),
        }
        for r in rows
    ]
    return pd.DataFrame(data, columns=CLIENT_COLUMNS)


def summary_to_dataframe(summary: FinancialSummary, decimals: int = 2) -> pd.DataFrame:
    """
    Per-unit totals followed by a final 'TOTAL' row.

    The 'TOTAL' row is always present, even without transactions.
    """
    rows: list[dict[str, object]] = []
    for unit, totals in summary.by_unit.items():
        rows.append(
            {
                "unit": unit,
                "income": round(totals.income, decimals),
                "expenses": round(totals.expenses, decimals),
                "profit": round(totals.income - totals.expenses, decimals),
            }
        )
    rows.append(
        {
            "unit": "TOTAL",
            "income": round(summary.total_income, decimals),
            "expenses": round(summary.total_expenses, decimals),
            "profit": round(summary.net_profit, decimals),
        }
    )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
