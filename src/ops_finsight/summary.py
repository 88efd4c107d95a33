# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Headline totals for the finance dashboards (total income, total expenses,
net profit) with a breakdown per business unit.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .transactions import Transaction

UNASSIGNED_UNIT = "unassigned"


@dataclass(frozen=True)
class UnitTotals:
    income: float = 0.0
    expenses: float = 0.0


@dataclass(frozen=True)
class FinancialSummary:
    """
    Totals over a set of transactions.

    Attributes
    ----------
    total_income, total_expenses :
        Sums of normalized amounts per transaction type.
    transaction_count :
        Number of transactions summarized.
    by_unit :
        Income and expenses per business unit id, in first-seen order.
        Transactions without a unit are grouped under 'unassigned'.
    """

    total_income: float
    total_expenses: float
    transaction_count: int
    by_unit: dict[str, UnitTotals] = field(default_factory=dict)

    @property
    def net_profit(self) -> float:
        return self.total_income - self.total_expenses


def calculate_summary(transactions: Iterable[Transaction]) -> FinancialSummary:
    total_income = 0.0
    total_expenses = 0.0
    count = 0
    per_unit: dict[str, tuple[float, float]] = {}

    for t in transactions:
        count += 1
        unit = t.unit_id or UNASSIGNED_UNIT
        income, expenses = per_unit.get(unit, (0.0, 0.0))
        if t.is_income:
            total_income += t.amount
            income += t.amount
        else:
            total_expenses += t.amount
            expenses += t.amount
        per_unit[unit] = (income, expenses)

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        transaction_count=count,
        by_unit={
            unit: UnitTotals(income=income, expenses=expenses)
            for unit, (income, expenses) in per_unit.items()
        },
    )
