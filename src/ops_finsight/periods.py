# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for Ops FinSight.

This module defines the relative reporting windows offered by the
dashboards (all time, year to date, month to date, last 12 months), a
Period value object describing the calendar window of a selector, and the
filters that restrict a transaction list to such a window.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .calendar_grid import add_months, as_date, start_of_month
from .transactions import Transaction

logger = logging.getLogger(__name__)

ALL = "all"
YEAR_TO_DATE = "ytd"
MONTH_TO_DATE = "mtd"
LAST_12_MONTHS = "12m"
PERIODS: tuple[str, ...] = (ALL, YEAR_TO_DATE, MONTH_TO_DATE, LAST_12_MONTHS)

_LABELS = {
    ALL: "All time",
    YEAR_TO_DATE: "Year to date",
    MONTH_TO_DATE: "Month to date",
    LAST_12_MONTHS: "Last 12 months",
}


@dataclass(frozen=True)
class Period:
    """Represents a reporting window with a human-readable label."""

    slug: str
    start: date
    end: date
    label: str


def _now() -> datetime:
    """Return the current local time (isolated for easier testing)."""
    return datetime.now()


def check_period(period: str) -> str:
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period!r}, expected one of {PERIODS}.")
    return period


def period_cutoff(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Return the first instant included by ``period``, or None for all time.

    - ytd: 1 January of the current year, 00:00,
    - mtd: first day of the current month, 00:00,
    - 12m: first day of the same month one year earlier, 00:00.
    """
    check_period(period)
    if period == ALL:
        return None

    today = as_date(now or _now())
    if period == YEAR_TO_DATE:
        start = date(today.year, 1, 1)
    elif period == MONTH_TO_DATE:
        start = start_of_month(today)
    else:
        start = add_months(start_of_month(today), -12)
    return datetime(start.year, start.month, start.day)


def filter_by_period(
    transactions: Sequence[Transaction],
    period: str,
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """
    Keep the transactions dated on or after the cutoff of ``period``.

    ``all`` returns every transaction. The relative order of the input is
    preserved and a transaction dated exactly at the cutoff is kept.
    """
    cutoff = period_cutoff(period, now)
    if cutoff is None:
        return list(transactions)

    kept = [t for t in transactions if t.date >= cutoff]
    logger.debug(
        "Period %s (cutoff %s): kept %d of %d transactions",
        period,
        cutoff.isoformat(),
        len(kept),
        len(transactions),
    )
    return kept


def filter_by_range(
    transactions: Sequence[Transaction], start: date, end: date
) -> list[Transaction]:
    """Keep the transactions whose calendar day lies in [start, end] (inclusive)."""
    start = as_date(start)
    end = as_date(end)
    return [t for t in transactions if start <= t.date.date() <= end]


def resolve_period(
    period: str,
    now: Optional[datetime] = None,
    earliest: Optional[date] = None,
) -> Period:
    """
    Return the calendar window covered by ``period``.

    The window always ends today. For ``all`` it starts at ``earliest``
    (typically the date of the oldest transaction), or today when unknown.
    """
    check_period(period)
    today = as_date(now or _now())

    cutoff = period_cutoff(period, now=datetime(today.year, today.month, today.day))
    if cutoff is not None:
        start = cutoff.date()
    elif earliest is not None:
        start = min(as_date(earliest), today)
    else:
        start = today

    return Period(slug=period, start=start, end=today, label=_LABELS[period])
