# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Transaction model for Ops FinSight.

This module defines the input contract of the analytics engine: the
``Transaction`` value object and the small helpers every aggregator relies
on (category normalization, link-key lookup in metadata).

Amounts are expected to be already converted to the reporting currency by
the upstream data layer. The engine never converts currencies; it only
enforces that the normalized amount is a finite, non-negative magnitude.
The sign of a movement is carried by ``type`` (INCOME or EXPENSE), never by
the amount itself.

Policy for invalid amounts
--------------------------
Non-finite (NaN, inf) or negative amounts are rejected when the
``Transaction`` is built: an ``InvalidTransactionError`` is raised. The
aggregators downstream can therefore assume clean magnitudes.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

INCOME = "INCOME"
EXPENSE = "EXPENSE"
TRANSACTION_TYPES: tuple[str, ...] = (INCOME, EXPENSE)

UNCATEGORIZED = "Uncategorized"

# Metadata key used by the seminar registry to attribute a transaction to a
# seminar batch.
DEFAULT_LINK_KEY = "seminar_id"


class InvalidTransactionError(ValueError):
    """Raised when a transaction violates the input contract."""


@dataclass(frozen=True)
class NameRef:
    """Entry of a name lookup (seminar, project or client registry)."""

    id: str
    name: str


@dataclass(frozen=True)
class Transaction:
    """
    A dated financial movement, already normalized to one currency.

    Attributes
    ----------
    date :
        Timezone-naive timestamp. Plain dates are promoted to midnight and
        aware datetimes lose their tzinfo (compared by wall-clock value).
    type :
        Either ``INCOME`` or ``EXPENSE``.
    amount :
        Normalized amount in the reporting currency (finite, >= 0).
    category :
        Free-text label. Empty values are reported as ``Uncategorized``.
    metadata :
        Optional key-value bag (seminar_id, client_id, consultant_name...).
    id, unit_id, vendor, description :
        Optional descriptive fields, only used by the summary and the
        ledger export.
    """

    date: datetime
    type: str
    amount: float
    category: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    id: Optional[str] = None
    unit_id: Optional[str] = None
    vendor: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", _coerce_datetime(self.date))

        tx_type = str(self.type).strip().upper()
        if tx_type not in TRANSACTION_TYPES:
            raise InvalidTransactionError(
                f"Unknown transaction type {self.type!r}, "
                f"expected one of {TRANSACTION_TYPES}."
            )
        object.__setattr__(self, "type", tx_type)

        try:
            amount = float(self.amount)
        except (TypeError, ValueError) as exc:
            raise InvalidTransactionError(
                f"Transaction amount must be numeric, got {self.amount!r}."
            ) from exc
        if not math.isfinite(amount) or amount < 0:
            raise InvalidTransactionError(
                f"Transaction amount must be a finite non-negative number, "
                f"got {amount!r}."
            )
        object.__setattr__(self, "amount", amount)

        if self.metadata is None:
            object.__setattr__(self, "metadata", {})

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE


def _coerce_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise InvalidTransactionError(
        f"Transaction date must be a date or datetime, got {value!r}."
    )


def category_label(tx: Transaction) -> str:
    """Return the grouping label of a transaction's category."""
    category = (tx.category or "").strip()
    return category or UNCATEGORIZED


def link_id(tx: Transaction, key: str = DEFAULT_LINK_KEY) -> Optional[str]:
    """
    Return the linked entity id stored under ``key`` in the metadata.

    Missing keys and falsy values (None, empty strings, ``False``, ``0``)
    all mean "not linked" and return None. Other non-string ids are
    converted to strings.
    """
    if not tx.metadata:
        return None
    value = tx.metadata.get(key)
    if not value:
        return None
    value = str(value).strip()
    return value or None
