from datetime import datetime

import pytest

from ops_finsight.transactions import EXPENSE, INCOME, Transaction


def make_tx(day, tx_type, amount, category=None, **metadata) -> Transaction:
    """Build a transaction dated ``day`` ('YYYY-MM-DD') with optional metadata."""
    return Transaction(
        date=datetime.fromisoformat(day),
        type=tx_type,
        amount=amount,
        category=category,
        metadata=metadata,
    )


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    return [
        make_tx("2025-01-05", INCOME, 1000.0, "Revenue - Seminar", seminar_id="sem-1"),
        make_tx("2025-01-10", EXPENSE, 200.0, "Accommodation", seminar_id="sem-1"),
        make_tx("2025-01-12", EXPENSE, 150.0, "Utilities"),
        make_tx("2025-02-03", EXPENSE, 80.0, "Travel & Transport", seminar_id="sem-2"),
        make_tx("2025-02-14", INCOME, 400.0, "Revenue - Consulting"),
        make_tx("2025-02-20", EXPENSE, 50.0, None),
        make_tx("2025-03-01", EXPENSE, 120.0, "Accommodation", seminar_id="sem-2"),
    ]
