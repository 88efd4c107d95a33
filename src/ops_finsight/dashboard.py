# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Dashboard orchestration for Ops FinSight.

This module provides the high-level entry point used by the analytics
pages: ``build_dashboard()`` derives every view of the finance dashboard
for one period selector in a single call.

Workflow
--------
1. Filter the already-fetched transactions to the requested period
   (all time, year to date, month to date, last 12 months).
2. From that working set, compute independently:
   - the financial summary (totals, net profit, per-unit split),
   - the event-ordered cumulative series,
   - a continuous cumulative series at the requested granularity
     (``config.default_granularity`` when none is given), whose axis
     covers the same window as the period filter,
   - the plain income/expense totals of the last twelve months,
   - the seminar-linked vs operational expense breakdowns,
   - the income breakdown per consultant,
   - the profitability per seminar/project,
   - optionally the profitability per client.

Each step only reads the filtered list, so the order in which they run
does not matter and nothing is shared between calls.

Separation of concerns
----------------------
- ``periods.py``        : period selectors and filters.
- ``series.py``         : cumulative series builders.
- ``categories.py``     : category breakdowns and expense split.
- ``profitability.py``  : joins with the seminar/client registries.
- ``summary.py``        : headline totals.
- ``dashboard.py``      : assembles everything for one period.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .calendar_grid import check_granularity
from .categories import (
    CategoryTotal,
    ExpenseSplit,
    earnings_by_consultant,
    split_expenses,
)
from .config import AnalyticsConfig
from .periods import Period, filter_by_period, resolve_period
from .profitability import (
    ClientProfitability,
    ProjectProfitability,
    client_profitability,
    profitability_by_project,
)
from .series import (
    MonthlyTotal,
    TimeSeriesPoint,
    build_continuous_series,
    build_event_series,
    monthly_totals,
)
from .summary import FinancialSummary, calculate_summary
from .transactions import NameRef, Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardData:
    """
    Every derived view of the finance dashboard for one period.

    Attributes
    ----------
    period :
        Calendar window covered by the period selector.
    summary :
        Headline totals of the filtered transactions.
    event_series :
        Cumulative totals after each transaction.
    continuous_series :
        Cumulative totals per bucket over ``period``. The axis covers the
        whole window even when there are no transactions.
    granularity :
        Bucket size of ``continuous_series``.
    monthly :
        Income and expenses per month over the last twelve months.
    expenses :
        Seminar-linked and operational expense breakdowns.
    consultant_earnings :
        Income per consultant.
    project_profitability :
        Profitability per seminar/project.
    client_profitability :
        Profitability per client (empty when no client registry was given).
    """

    period: Period
    summary: FinancialSummary
    event_series: list[TimeSeriesPoint]
    expenses: ExpenseSplit
    consultant_earnings: list[CategoryTotal]
    project_profitability: list[ProjectProfitability]
    continuous_series: list[TimeSeriesPoint] = field(default_factory=list)
    granularity: Optional[str] = None
    monthly: list[MonthlyTotal] = field(default_factory=list)
    client_profitability: list[ClientProfitability] = field(default_factory=list)


def build_dashboard(
    transactions: Sequence[Transaction],
    seminars: Sequence[NameRef] = (),
    period: Optional[str] = None,
    granularity: Optional[str] = None,
    clients: Optional[Sequence[NameRef]] = None,
    config: Optional[AnalyticsConfig] = None,
    now: Optional[datetime] = None,
) -> DashboardData:
    """
    Compute the finance dashboard views for one period selector.

    Parameters
    ----------
    transactions :
        Already-fetched, currency-normalized transactions.
    seminars :
        Seminar/project registry used to name profitability rows.
    period :
        Period selector; defaults to ``config.default_period``.
    granularity :
        Bucket size of the continuous series; defaults to
        ``config.default_granularity``.
    clients :
        Optional client registry; enables the per-client profitability.
    config :
        Analytics options (link key, fallback prefix, defaults).
    now :
        Reference time for relative periods (defaults to the current time).

    Returns
    -------
    DashboardData
        All derived views. Empty input yields empty per-transaction
        views; the continuous series and the monthly totals still cover
        their whole axis with zero totals.

    Raises
    ------
    ValueError
        If the period selector or the granularity is unknown.
    """
    cfg = config or AnalyticsConfig()
    selector = period or cfg.default_period
    granularity = check_granularity(granularity or cfg.default_granularity)

    working = filter_by_period(transactions, selector, now=now)

    earliest = min((t.date for t in working), default=None)
    window = resolve_period(selector, now=now, earliest=earliest)
    latest = max((t.date.date() for t in working), default=window.end)
    if latest > window.end:
        # Keep future-dated transactions on the axis.
        window = Period(
            slug=window.slug, start=window.start, end=latest, label=window.label
        )

    clients_rows: list[ClientProfitability] = []
    if clients is not None:
        clients_rows = client_profitability(working, clients)

    data = DashboardData(
        period=window,
        summary=calculate_summary(working),
        event_series=build_event_series(working),
        expenses=split_expenses(working, link_key=cfg.link_key),
        consultant_earnings=earnings_by_consultant(working),
        project_profitability=profitability_by_project(
            working,
            seminars,
            link_key=cfg.link_key,
            fallback_prefix=cfg.fallback_label_prefix,
        ),
        continuous_series=build_continuous_series(
            working, granularity, window.start, window.end
        ),
        granularity=granularity,
        monthly=monthly_totals(working, now=now),
        client_profitability=clients_rows,
    )
    logger.debug(
        "Dashboard %s: %d transactions, %d project rows",
        selector,
        len(working),
        len(data.project_profitability),
    )
    return data
