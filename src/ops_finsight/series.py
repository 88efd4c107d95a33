# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Revenue / expense / profit series.

Three builders are provided:

1. ``build_event_series()``
   ------------------------
   One point per transaction, in chronological order. Each point holds the
   running totals right after that transaction. Several transactions on
   the same day produce several points with the same label.

2. ``build_continuous_series()``
   -----------------------------
   One point per calendar bucket (day, week or month) between a start and
   an end date, whether or not the bucket saw any activity. Buckets with
   no transactions repeat the previous cumulative totals (carry-forward),
   which gives a continuously sampled chart axis.

   The axis only covers [start, end]. Transactions dated outside that
   window are bucketed like the others but their bucket never appears on
   the axis, so they do not contribute to the series. Callers are expected
   to scope the transaction list to the same window beforehand (for
   example with ``periods.filter_by_range``).

3. ``monthly_totals()``
   -------------------
   Plain (non-cumulative) income and expenses for each of the last N
   calendar months, oldest first. Every month of the window is present,
   and transactions outside the window are ignored.

In the two cumulative series the revenue and expenses never decrease;
profit (revenue minus expenses) may.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from . import periods
from .calendar_grid import (
    MONTHLY,
    add_months,
    as_date,
    bucket_key,
    check_granularity,
    format_bucket_label,
    format_event_label,
    format_month_label,
    iter_axis,
)
from .transactions import Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Cumulative totals at one point of a series."""

    label: str
    cumulative_revenue: float
    cumulative_expenses: float

    @property
    def profit(self) -> float:
        return self.cumulative_revenue - self.cumulative_expenses


def build_event_series(transactions: Sequence[Transaction]) -> list[TimeSeriesPoint]:
    """
    Return the running totals after each transaction, oldest first.

    Transactions sharing the same date keep their input order.
    """
    revenue = 0.0
    expenses = 0.0
    points: list[TimeSeriesPoint] = []

    for t in sorted(transactions, key=lambda t: t.date):
        if t.is_income:
            revenue += t.amount
        else:
            expenses += t.amount
        points.append(
            TimeSeriesPoint(
                label=format_event_label(t.date),
                cumulative_revenue=revenue,
                cumulative_expenses=expenses,
            )
        )
    return points


def _bucket_totals(
    transactions: Sequence[Transaction], granularity: str
) -> dict[date, tuple[float, float]]:
    """Sum revenue and expenses per bucket key."""
    buckets: dict[date, tuple[float, float]] = {}
    for t in transactions:
        key = bucket_key(t.date, granularity)
        revenue, expenses = buckets.get(key, (0.0, 0.0))
        if t.is_income:
            revenue += t.amount
        else:
            expenses += t.amount
        buckets[key] = (revenue, expenses)
    return buckets


def build_continuous_series(
    transactions: Sequence[Transaction],
    granularity: str,
    start: date,
    end: date,
) -> list[TimeSeriesPoint]:
    """
    Return one cumulative point per bucket between ``start`` and ``end``.

    Steps:
        1. Bucket every transaction by day, Monday of its week, or first
           day of its month depending on ``granularity``.
        2. Generate the complete list of bucket keys from ``start``
           (snapped to its bucket) up to ``end`` inclusive.
        3. Walk the keys in order, adding each bucket's totals to the
           running totals when present and carrying them forward
           otherwise.

    Args:
        transactions: Transactions, expected to lie within [start, end].
        granularity: 'daily', 'weekly' or 'monthly'.
        start: First day of the axis (date or datetime).
        end: Last day of the axis (date or datetime).

    Returns:
        A list of TimeSeriesPoint, empty when ``start > end``.

    Raises:
        ValueError: if ``granularity`` is not supported.
    """
    check_granularity(granularity)
    buckets = _bucket_totals(transactions, granularity)
    axis = list(iter_axis(start, end, granularity))

    revenue = 0.0
    expenses = 0.0
    points: list[TimeSeriesPoint] = []
    for key in axis:
        bucket = buckets.get(key)
        if bucket is not None:
            revenue += bucket[0]
            expenses += bucket[1]
        points.append(
            TimeSeriesPoint(
                label=format_bucket_label(key, granularity),
                cumulative_revenue=revenue,
                cumulative_expenses=expenses,
            )
        )

    if logger.isEnabledFor(logging.DEBUG):
        on_axis = set(axis)
        dropped = sum(
            1 for t in transactions if bucket_key(t.date, granularity) not in on_axis
        )
        logger.debug(
            "Continuous %s series %s -> %s: %d points, %d transactions off-axis",
            granularity,
            as_date(start).isoformat(),
            as_date(end).isoformat(),
            len(points),
            dropped,
        )
    return points


@dataclass(frozen=True)
class MonthlyTotal:
    """Income and expenses booked within one calendar month."""

    label: str
    income: float
    expenses: float

    @property
    def profit(self) -> float:
        return self.income - self.expenses


def monthly_totals(
    transactions: Sequence[Transaction],
    months: int = 12,
    now: Optional[datetime] = None,
) -> list[MonthlyTotal]:
    """
    Return income and expenses for each of the last ``months`` months.

    The window ends with the month containing ``now`` and always holds
    exactly ``months`` entries, oldest first, labelled like 'Mar 25'.
    Transactions dated outside the window are ignored.

    Raises:
        ValueError: if ``months`` is not positive.
    """
    if months <= 0:
        raise ValueError(f"months must be positive, got {months}.")
    if now is None:
        now = periods._now()

    last = bucket_key(now, MONTHLY)
    first = add_months(last, -(months - 1))
    buckets = _bucket_totals(transactions, MONTHLY)

    totals = []
    for key in iter_axis(first, last, MONTHLY):
        income, expenses = buckets.get(key, (0.0, 0.0))
        totals.append(
            MonthlyTotal(
                label=format_month_label(key), income=income, expenses=expenses
            )
        )
    return totals
