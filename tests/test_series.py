from datetime import date, datetime

import pytest

from ops_finsight.calendar_grid import DAILY, MONTHLY, WEEKLY
import ops_finsight.periods as periods
from ops_finsight.series import (
    MonthlyTotal,
    build_continuous_series,
    build_event_series,
    monthly_totals,
)
from ops_finsight.transactions import EXPENSE, INCOME

from conftest import make_tx


def _assert_monotonic(points) -> None:
    for prev, cur in zip(points, points[1:]):
        assert cur.cumulative_revenue >= prev.cumulative_revenue
        assert cur.cumulative_expenses >= prev.cumulative_expenses


# ---------------------------------------------------------------------------
# Event-ordered series
# ---------------------------------------------------------------------------


def test_event_series_sorts_and_accumulates() -> None:
    txs = [
        make_tx("2025-01-20", EXPENSE, 30.0),
        make_tx("2025-01-05", INCOME, 100.0),
        make_tx("2025-02-01", INCOME, 10.0),
    ]
    points = build_event_series(txs)

    assert [p.label for p in points] == ["Jan 05, 2025", "Jan 20, 2025", "Feb 01, 2025"]
    assert [(p.cumulative_revenue, p.cumulative_expenses, p.profit) for p in points] == [
        (100.0, 0.0, 100.0),
        (100.0, 30.0, 70.0),
        (110.0, 30.0, 80.0),
    ]


def test_event_series_one_point_per_transaction_on_same_day() -> None:
    txs = [
        make_tx("2025-03-02", EXPENSE, 5.0),
        make_tx("2025-03-02", INCOME, 20.0),
        make_tx("2025-03-01", INCOME, 1.0),
    ]
    points = build_event_series(txs)

    assert [p.label for p in points] == ["Mar 01, 2025", "Mar 02, 2025", "Mar 02, 2025"]
    # Same-day transactions keep their input order (expense first).
    assert points[1].cumulative_expenses == 5.0
    assert points[1].cumulative_revenue == 1.0
    assert points[2].cumulative_revenue == 21.0
    _assert_monotonic(points)


def test_event_series_empty() -> None:
    assert build_event_series([]) == []


# ---------------------------------------------------------------------------
# Continuous-axis series
# ---------------------------------------------------------------------------


def test_continuous_daily_example_scenario() -> None:
    txs = [
        make_tx("2025-01-05", INCOME, 100.0),
        make_tx("2025-01-20", EXPENSE, 30.0),
    ]
    points = build_continuous_series(txs, DAILY, date(2025, 1, 1), date(2025, 1, 31))

    assert len(points) == 31
    assert points[0].label == "Jan 01"
    assert (points[0].cumulative_revenue, points[0].cumulative_expenses) == (0.0, 0.0)

    jan5 = points[4]
    assert jan5.label == "Jan 05"
    assert (jan5.cumulative_revenue, jan5.cumulative_expenses) == (100.0, 0.0)

    for p in points[5:19]:  # Jan 06 .. Jan 19
        assert (p.cumulative_revenue, p.cumulative_expenses) == (100.0, 0.0)

    jan20 = points[19]
    assert jan20.label == "Jan 20"
    assert jan20.cumulative_expenses == 30.0

    assert points[-1].label == "Jan 31"
    assert points[-1].profit == 70.0
    _assert_monotonic(points)


def test_continuous_axis_is_complete_without_transactions() -> None:
    points = build_continuous_series([], DAILY, date(2025, 3, 1), date(2025, 3, 10))
    assert len(points) == 10
    assert all(p.cumulative_revenue == 0.0 and p.profit == 0.0 for p in points)


def test_continuous_carry_forward_between_buckets() -> None:
    txs = [
        make_tx("2025-01-01", INCOME, 50.0),
        make_tx("2025-05-20", EXPENSE, 20.0),
    ]
    points = build_continuous_series(txs, MONTHLY, date(2025, 1, 1), date(2025, 5, 31))

    assert [p.label for p in points] == ["Jan", "Feb", "Mar", "Apr", "May"]
    for p in points[1:4]:
        assert (p.cumulative_revenue, p.cumulative_expenses) == (
            points[0].cumulative_revenue,
            points[0].cumulative_expenses,
        )
    assert points[-1].profit == 30.0


def test_continuous_weekly_sunday_belongs_to_previous_monday() -> None:
    txs = [
        make_tx("2025-01-12", INCOME, 10.0),  # Sunday -> week of Mon Jan 06
        make_tx("2025-01-13", INCOME, 5.0),  # Monday -> week of Mon Jan 13
    ]
    points = build_continuous_series(txs, WEEKLY, date(2025, 1, 6), date(2025, 1, 19))

    assert [p.label for p in points] == ["Jan 06", "Jan 13"]
    assert points[0].cumulative_revenue == 10.0
    assert points[1].cumulative_revenue == 15.0


def test_continuous_weekly_snaps_start_back_to_monday() -> None:
    # 2025-01-08 is a Wednesday: the axis starts on Monday 2025-01-06.
    txs = [make_tx("2025-01-06", EXPENSE, 12.0)]
    points = build_continuous_series(
        txs, WEEKLY, datetime(2025, 1, 8, 9, 0), datetime(2025, 1, 20)
    )

    assert [p.label for p in points] == ["Jan 06", "Jan 13", "Jan 20"]
    assert points[0].cumulative_expenses == 12.0


def test_continuous_drops_transactions_outside_axis() -> None:
    txs = [
        make_tx("2024-12-31", INCOME, 1000.0),
        make_tx("2025-01-02", INCOME, 10.0),
        make_tx("2025-02-01", EXPENSE, 500.0),
    ]
    points = build_continuous_series(txs, DAILY, date(2025, 1, 1), date(2025, 1, 3))

    assert len(points) == 3
    assert points[-1].cumulative_revenue == 10.0
    assert points[-1].cumulative_expenses == 0.0


def test_continuous_start_after_end_is_empty() -> None:
    txs = [make_tx("2025-01-02", INCOME, 10.0)]
    assert build_continuous_series(txs, DAILY, date(2025, 2, 1), date(2025, 1, 1)) == []


def test_continuous_unknown_granularity() -> None:
    with pytest.raises(ValueError):
        build_continuous_series([], "hourly", date(2025, 1, 1), date(2025, 1, 2))


def test_series_idempotence(sample_transactions) -> None:
    start, end = date(2025, 1, 1), date(2025, 3, 31)
    assert build_continuous_series(sample_transactions, WEEKLY, start, end) == (
        build_continuous_series(sample_transactions, WEEKLY, start, end)
    )
    assert build_event_series(sample_transactions) == build_event_series(
        sample_transactions
    )


def test_monthly_totals_window_is_not_cumulative() -> None:
    txs = [
        make_tx("2024-12-31", INCOME, 99.0),
        make_tx("2025-01-10", INCOME, 100.0),
        make_tx("2025-01-20", EXPENSE, 30.0),
        make_tx("2025-03-01", EXPENSE, 20.0),
        make_tx("2025-04-01", INCOME, 5.0),
    ]
    totals = monthly_totals(txs, months=3, now=datetime(2025, 3, 15))

    assert totals == [
        MonthlyTotal("Jan 25", 100.0, 30.0),
        MonthlyTotal("Feb 25", 0.0, 0.0),
        MonthlyTotal("Mar 25", 0.0, 20.0),
    ]
    assert totals[0].profit == 70.0


def test_monthly_totals_default_twelve_months_across_years(monkeypatch) -> None:
    monkeypatch.setattr(periods, "_now", lambda: datetime(2025, 3, 15, 9, 0))
    totals = monthly_totals([])

    assert len(totals) == 12
    assert totals[0].label == "Apr 24"
    assert totals[-1].label == "Mar 25"
    assert all(m.income == 0.0 and m.expenses == 0.0 for m in totals)


def test_monthly_totals_requires_positive_months() -> None:
    with pytest.raises(ValueError):
        monthly_totals([], months=0, now=datetime(2025, 3, 15))
