# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Calendar arithmetic used by the time-series builders.

Buckets are identified by the first calendar day they cover:

- daily:   the day itself,
- weekly:  the Monday of the week (Sunday belongs to the week that started
           on the preceding Monday),
- monthly: the first day of the month.

The helpers below are the only place where week/month arithmetic and
label formatting live, so the builders in ``series.py`` never manipulate
dates directly.
"""

from calendar import monthrange
from collections.abc import Iterator
from datetime import date, datetime, timedelta

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
GRANULARITIES: tuple[str, ...] = (DAILY, WEEKLY, MONTHLY)

_LABEL_FORMATS = {
    DAILY: "%b %d",
    WEEKLY: "%b %d",
    MONTHLY: "%b",
}
EVENT_LABEL_FORMAT = "%b %d, %Y"
MONTH_LABEL_FORMAT = "%b %y"


def check_granularity(granularity: str) -> str:
    """Return ``granularity`` if supported, raise ValueError otherwise."""
    if granularity not in GRANULARITIES:
        raise ValueError(
            f"Unknown granularity: {granularity!r}, expected one of {GRANULARITIES}."
        )
    return granularity


def as_date(value: date) -> date:
    """Drop the time part of a datetime; plain dates are returned as-is."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_week(day: date) -> date:
    """Monday of the week containing ``day``."""
    day = as_date(day)
    return day - timedelta(days=day.weekday())


def start_of_month(day: date) -> date:
    day = as_date(day)
    return day.replace(day=1)


def add_days(day: date, days: int) -> date:
    return as_date(day) + timedelta(days=days)


def add_weeks(day: date, weeks: int) -> date:
    return add_days(day, 7 * weeks)


def add_months(day: date, months: int) -> date:
    """Shift ``day`` by ``months``, clamping the day to the target month length."""
    day = as_date(day)
    year = day.year + (day.month - 1 + months) // 12
    month = (day.month - 1 + months) % 12 + 1
    last_day = monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def bucket_key(day: date, granularity: str) -> date:
    """Return the bucket key (first day of the bucket) containing ``day``."""
    check_granularity(granularity)
    if granularity == DAILY:
        return as_date(day)
    if granularity == WEEKLY:
        return start_of_week(day)
    return start_of_month(day)


def next_bucket(key: date, granularity: str) -> date:
    """Return the key of the bucket following ``key``."""
    check_granularity(granularity)
    if granularity == DAILY:
        return add_days(key, 1)
    if granularity == WEEKLY:
        return add_weeks(key, 1)
    return add_months(key, 1)


def iter_axis(start: date, end: date, granularity: str) -> Iterator[date]:
    """
    Yield every bucket key between ``start`` and ``end`` (inclusive).

    ``start`` is first snapped to its own bucket (e.g. back to Monday for
    weekly axes), then the axis advances one unit at a time until the key
    exceeds ``end``. Nothing is yielded when ``start > end``.
    """
    start = as_date(start)
    end = as_date(end)
    if start > end:
        return

    key = bucket_key(start, granularity)
    while key <= end:
        yield key
        key = next_bucket(key, granularity)


def format_bucket_label(key: date, granularity: str) -> str:
    """Display label of a bucket ('Jan 05' for days/weeks, 'Jan' for months)."""
    check_granularity(granularity)
    return as_date(key).strftime(_LABEL_FORMATS[granularity])


def format_event_label(day: date) -> str:
    """Display label of a single transaction event ('Jan 05, 2025')."""
    return day.strftime(EVENT_LABEL_FORMAT)


def format_month_label(key: date) -> str:
    """Display label of a calendar month bar ('Mar 25')."""
    return as_date(key).strftime(MONTH_LABEL_FORMAT)
