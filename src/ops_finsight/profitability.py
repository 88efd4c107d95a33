# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Profitability rollups joining transactions with a secondary registry.

1. Per project / seminar
   ----------------------
   ``profitability_by_project()`` groups the transactions that carry a
   link id in their metadata (``seminar_id`` by default), sums revenue and
   expenses per id, and resolves a display name from a lookup list. Ids
   missing from the lookup get a placeholder name built from the first
   eight characters of the id.

2. Per client
   -----------
   ``client_profitability()`` rolls transactions up by client. The client
   is taken from ``client_id`` in the metadata or, for older records that
   only stored a name, by matching ``client_name`` against the registry.
   Rows also carry a margin (profit as a percentage of revenue) and the
   billable part of the expenses (metadata ``is_billable`` set).

Both rollups are sorted by profit, highest first.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from .transactions import DEFAULT_LINK_KEY, NameRef, Transaction, link_id

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_PREFIX = "Seminar"


@dataclass(frozen=True)
class ProjectProfitability:
    """Revenue, expenses and profit of one project / seminar."""

    project_id: str
    project_name: str
    revenue: float
    expenses: float

    @property
    def profit(self) -> float:
        return self.revenue - self.expenses


@dataclass(frozen=True)
class ClientProfitability:
    """Revenue, expenses, profit and margin of one client.

    ``billable_expenses`` is the part of ``expenses`` that can be
    re-invoiced to the client.
    """

    client_id: str
    client_name: str
    revenue: float
    expenses: float
    billable_expenses: float = 0.0

    @property
    def profit(self) -> float:
        return self.revenue - self.expenses

    @property
    def margin(self) -> float:
        """Profit as a percentage of revenue (0.0 without revenue)."""
        if self.revenue <= 0:
            return 0.0
        return self.profit / self.revenue * 100.0


def _names_by_id(lookup: Iterable[NameRef]) -> dict[str, str]:
    # First entry wins when an id is listed twice.
    names: dict[str, str] = {}
    for ref in lookup:
        names.setdefault(str(ref.id), ref.name)
    return names


def fallback_name(project_id: str, prefix: str = DEFAULT_FALLBACK_PREFIX) -> str:
    """Placeholder name for an id that has no match in the lookup."""
    return f"{prefix} {project_id[:8]}"


def profitability_by_project(
    transactions: Iterable[Transaction],
    lookup: Iterable[NameRef],
    link_key: str = DEFAULT_LINK_KEY,
    fallback_prefix: str = DEFAULT_FALLBACK_PREFIX,
) -> list[ProjectProfitability]:
    """
    Return one profitability row per linked project, best profit first.

    Transactions without a non-empty ``link_key`` in their metadata are
    ignored. A row is emitted for every id seen, even when it only has
    expenses. Names come from ``lookup``; an unknown id (or an empty name)
    falls back to ``"<prefix> <first 8 chars of id>"``.
    """
    totals: dict[str, tuple[float, float]] = {}
    for t in transactions:
        project_id = link_id(t, link_key)
        if project_id is None:
            continue
        revenue, expenses = totals.get(project_id, (0.0, 0.0))
        if t.is_income:
            revenue += t.amount
        else:
            expenses += t.amount
        totals[project_id] = (revenue, expenses)

    names = _names_by_id(lookup)
    rows = [
        ProjectProfitability(
            project_id=project_id,
            project_name=(
                names.get(project_id) or fallback_name(project_id, fallback_prefix)
            ),
            revenue=revenue,
            expenses=expenses,
        )
        for project_id, (revenue, expenses) in totals.items()
    ]
    unresolved = sum(1 for pid in totals if not names.get(pid))
    if unresolved:
        logger.debug("%d linked ids have no name in the lookup", unresolved)

    return sorted(rows, key=lambda row: row.profit, reverse=True)


def _resolve_client_id(
    tx: Transaction, known_ids: set[str], id_by_name: dict[str, str]
) -> Optional[str]:
    client_id = link_id(tx, "client_id")
    if client_id is None:
        name = link_id(tx, "client_name")
        if name is not None:
            client_id = id_by_name.get(name)
    if client_id in known_ids:
        return client_id
    return None


def client_profitability(
    transactions: Iterable[Transaction], clients: Sequence[NameRef]
) -> list[ClientProfitability]:
    """
    Return one row per registered client with activity, best profit first.

    Only clients present in ``clients`` are reported. Transactions that
    cannot be attributed to one of them are ignored, and clients without
    any revenue or expense are left out.
    """
    names = _names_by_id(clients)
    id_by_name: dict[str, str] = {}
    for ref in clients:
        id_by_name.setdefault(ref.name, str(ref.id))

    totals: dict[str, tuple[float, float, float]] = {
        client_id: (0.0, 0.0, 0.0) for client_id in names
    }
    known_ids = set(names)
    for t in transactions:
        client_id = _resolve_client_id(t, known_ids, id_by_name)
        if client_id is None:
            continue
        revenue, expenses, billable = totals[client_id]
        if t.is_income:
            revenue += t.amount
        else:
            expenses += t.amount
            if t.metadata.get("is_billable"):
                billable += t.amount
        totals[client_id] = (revenue, expenses, billable)

    rows = [
        ClientProfitability(
            client_id=client_id,
            client_name=names[client_id],
            revenue=revenue,
            expenses=expenses,
            billable_expenses=billable,
        )
        for client_id, (revenue, expenses, billable) in totals.items()
        if revenue > 0 or expenses > 0
    ]
    return sorted(rows, key=lambda row: row.profit, reverse=True)
