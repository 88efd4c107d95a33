# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Category breakdowns for Ops FinSight.

This module groups transactions by a categorical key and ranks the groups
by total normalized amount. It powers the "expenses by category" charts,
including the split between expenses attributed to a seminar/project and
general operational overhead.

Ranking
-------
Groups are sorted by amount, highest first. Python's sort is stable, so
groups with the same amount keep the order in which their key first
appeared in the input. The output is therefore deterministic for a given
input order.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .transactions import (
    DEFAULT_LINK_KEY,
    Transaction,
    category_label,
    link_id,
)

UNASSIGNED = "Unassigned"


@dataclass(frozen=True)
class CategoryTotal:
    """Total normalized amount for one category."""

    category: str
    amount: float


@dataclass(frozen=True)
class ExpenseSplit:
    """
    Expense breakdowns split by business purpose.

    Attributes
    ----------
    project_linked :
        Category totals of expenses attributed to a seminar/project.
    operational :
        Category totals of every other expense.
    """

    project_linked: list[CategoryTotal]
    operational: list[CategoryTotal]


def _rank_totals(
    transactions: Iterable[Transaction], key: Callable[[Transaction], str]
) -> list[CategoryTotal]:
    totals: dict[str, float] = {}
    for t in transactions:
        label = key(t)
        totals[label] = totals.get(label, 0.0) + t.amount

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=label, amount=amount) for label, amount in ranked]


def aggregate_by_category(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """
    Sum amounts per category, highest total first.

    Income and expenses are not told apart: callers filter by type first
    when the breakdown should only cover one side.
    """
    return _rank_totals(transactions, category_label)


def group_expenses_by_category(
    transactions: Iterable[Transaction],
) -> list[CategoryTotal]:
    """Category breakdown of EXPENSE transactions only."""
    return aggregate_by_category(t for t in transactions if t.is_expense)


def split_expenses(
    transactions: Iterable[Transaction], link_key: str = DEFAULT_LINK_KEY
) -> ExpenseSplit:
    """
    Separate project-linked expenses from operational expenses.

    An expense is project-linked when its metadata holds a non-empty value
    under ``link_key``. Both partitions are disjoint and together cover
    every expense, so their totals add up to the overall expense total.
    """
    linked: list[Transaction] = []
    operational: list[Transaction] = []
    for t in transactions:
        if not t.is_expense:
            continue
        if link_id(t, link_key) is not None:
            linked.append(t)
        else:
            operational.append(t)

    return ExpenseSplit(
        project_linked=aggregate_by_category(linked),
        operational=aggregate_by_category(operational),
    )


def _consultant_label(tx: Transaction) -> str:
    meta = tx.metadata or {}
    for key in ("consultant_name", "staff_name"):
        value = str(meta.get(key) or "").strip()
        if value:
            return value
    return UNASSIGNED


def earnings_by_consultant(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """
    Income per consultant, highest first.

    The consultant is read from ``consultant_name``, then ``staff_name`` in
    the metadata; income without either is reported as 'Unassigned'.
    """
    return _rank_totals((t for t in transactions if t.is_income), _consultant_label)
