# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for Ops FinSight.

This module reads transactions and name lookups from CSV files and writes
the flattened ledger export used by accountants.

Transactions CSV
----------------
Column names are case-insensitive.

    date, type, category, amount            (required)
    id, unit_id, vendor, description        (optional)
    metadata                                (optional, JSON object)

``amount`` must already be normalized to the reporting currency. The
columns ``amount_aed`` and ``amountinaed`` are accepted as aliases.

Name lookup CSV
---------------
    id, name

Ledger export
-------------
One row per transaction with the core fields, the metadata values an
accountant usually looks for (client, project, consultant, invoice,
billable flag, payment method) flattened into their own columns, and the
raw metadata serialized as JSON.
"""

import json
import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

import pandas as pd

from .transactions import InvalidTransactionError, NameRef, Transaction

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_AMOUNT_ALIASES = ("amount_aed", "amountinaed")
_OPTIONAL_TEXT = ("id", "unit_id", "vendor", "description")

LEDGER_COLUMNS = [
    "Transaction ID",
    "Date",
    "Business Unit",
    "Type",
    "Category",
    "Vendor / Client",
    "Description",
    "Amount",
    "Client Name",
    "Project Name / Code",
    "Consultant / Staff",
    "Invoice #",
    "Billable",
    "Payment Method",
    "Raw Metadata (JSON)",
]


def _text(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    value = str(value).strip()
    return value or None


def _parse_metadata(raw: Any, row_number: int) -> dict[str, Any]:
    text = _text(raw)
    if text is None:
        return {}
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"Invalid JSON in 'metadata' column at row {row_number}."
        ) from exc
    if not isinstance(value, dict):
        raise ValueError(
            f"'metadata' at row {row_number} must be a JSON object, "
            f"got {type(value).__name__}."
        )
    return value


def read_transactions(path: PathLike) -> list[Transaction]:
    """
    Read transactions from a CSV file.

    Returns
    -------
    list[Transaction]
        Transactions in file order.

    Raises
    ------
    ValueError
        If required columns are missing, or if a date, type, amount or
        metadata value is invalid. The message names the offending row
        (1-based, header excluded).
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.lower().strip() for c in df.columns]

    if "amount" not in df.columns:
        for alias in _AMOUNT_ALIASES:
            if alias in df.columns:
                df = df.rename(columns={alias: "amount"})
                break

    required = {"date", "type", "category", "amount"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            "Invalid transactions structure. Missing column(s): "
            + ", ".join(sorted(missing))
        )

    dates = pd.to_datetime(df["date"], format="ISO8601", errors="coerce")
    if dates.isna().any():
        bad_row = int(dates.isna().to_numpy().argmax()) + 1
        raise ValueError(f"Invalid value in 'date' column at row {bad_row}.")

    amounts = pd.to_numeric(df["amount"], errors="coerce")
    if amounts.isna().any():
        bad_row = int(amounts.isna().to_numpy().argmax()) + 1
        raise ValueError(f"Invalid numeric value in 'amount' column at row {bad_row}.")

    transactions: list[Transaction] = []
    for i, row in enumerate(df.to_dict(orient="records"), start=1):
        extras = {col: _text(row.get(col)) for col in _OPTIONAL_TEXT}
        try:
            tx = Transaction(
                date=dates.iloc[i - 1].to_pydatetime(),
                type=row["type"],
                amount=float(amounts.iloc[i - 1]),
                category=_text(row["category"]),
                metadata=_parse_metadata(row.get("metadata"), i),
                **extras,
            )
        except InvalidTransactionError as exc:
            raise ValueError(f"Invalid transaction at row {i}: {exc}") from exc
        transactions.append(tx)

    logger.debug("Read %d transactions from %s", len(transactions), path)
    return transactions


def read_name_lookup(path: PathLike) -> list[NameRef]:
    """Read an ``id,name`` CSV into a list of NameRef (file order)."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.lower().strip() for c in df.columns]
    if not {"id", "name"}.issubset(df.columns):
        raise ValueError("Invalid name lookup structure. Expected columns: id, name")

    return [
        NameRef(id=str(row["id"]).strip(), name=str(row["name"]).strip())
        for row in df.to_dict(orient="records")
        if str(row["id"]).strip()
    ]


def _first(meta: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        if key in meta and meta[key] is not None:
            return str(meta[key])
    return ""


def ledger_dataframe(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build the flattened ledger table (one row per transaction)."""
    rows: list[dict[str, object]] = []
    for t in transactions:
        meta = dict(t.metadata or {})
        if "is_billable" in meta:
            billable = "Yes" if meta["is_billable"] else "No"
        else:
            billable = ""

        rows.append(
            {
                "Transaction ID": t.id or "",
                "Date": t.date.date().isoformat(),
                "Business Unit": (t.unit_id or "").upper(),
                "Type": t.type,
                "Category": t.category or "",
                "Vendor / Client": t.vendor or "",
                "Description": t.description or "",
                "Amount": f"{t.amount:.2f}",
                "Client Name": _first(meta, "client_name"),
                "Project Name / Code": _first(meta, "project_name", "project_code"),
                "Consultant / Staff": _first(meta, "consultant_name", "staff_name"),
                "Invoice #": _first(meta, "invoice_number", "invoice_reference"),
                "Billable": billable,
                "Payment Method": _first(meta, "payment_method"),
                "Raw Metadata (JSON)": json.dumps(meta, sort_keys=True, default=str),
            }
        )

    return pd.DataFrame(rows, columns=LEDGER_COLUMNS)


def export_ledger_csv(transactions: Iterable[Transaction], path: PathLike) -> int:
    """
    Write the flattened ledger to ``path`` and return the number of rows.
    """
    df = ledger_dataframe(transactions)
    df.to_csv(path, index=False)
    logger.info("Exported %d ledger rows to %s", len(df), path)
    return len(df)
