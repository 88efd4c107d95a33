from datetime import datetime

import pandas as pd
import pytest

import ops_finsight.periods as periods
from ops_finsight import __version__
from ops_finsight.cli import main


@pytest.fixture
def csv_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(periods, "_now", lambda: datetime(2025, 3, 15, 12, 0))

    tx_path = tmp_path / "tx.csv"
    tx_path.write_text(
        "date,type,category,amount,unit_id,metadata\n"
        '2025-01-05,INCOME,Revenue - Seminar,500,imeda,"{""seminar_id"": ""sem-1""}"\n'
        '2025-01-20,EXPENSE,Accommodation,200,imeda,"{""seminar_id"": ""sem-1""}"\n'
        "2025-02-02,EXPENSE,Utilities,50,imeda,\n",
        encoding="utf-8",
    )
    seminars_path = tmp_path / "seminars.csv"
    seminars_path.write_text("id,name\nsem-1,Leadership Batch\n", encoding="utf-8")
    return tx_path, seminars_path


def test_cli_version(capsys) -> None:
    main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_cli_prints_all_views(csv_files, capsys) -> None:
    tx_path, seminars_path = csv_files
    main(
        [
            "--transactions",
            str(tx_path),
            "--seminars",
            str(seminars_path),
            "--granularity",
            "monthly",
        ]
    )
    out = capsys.readouterr().out

    assert "Applied period: All time (2025-01-05 → 2025-03-15)" in out
    assert "Transactions in period: 3" in out
    assert "Cumulative trend (monthly)" in out
    assert "Monthly income and expenses (last 12 months)" in out
    assert "Leadership Batch" in out
    assert "Operational expenses by category" in out
    assert "Utilities" in out


def test_cli_scope_and_ledger_export(csv_files, tmp_path, capsys) -> None:
    tx_path, _ = csv_files
    ledger = tmp_path / "ledger.csv"
    main(
        [
            "--transactions",
            str(tx_path),
            "--period",
            "ytd",
            "--scope",
            "summary",
            "--export-ledger",
            str(ledger),
        ]
    )
    out = capsys.readouterr().out

    assert "Summary (AED)" in out
    assert "Profitability by seminar" not in out
    assert "Ledger exported: 3 rows" in out
    assert len(pd.read_csv(ledger)) == 3


def test_cli_requires_transactions(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_cli_reports_invalid_csv(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    bad = tmp_path / "bad.csv"
    bad.write_text("date,type,category,amount\n2025-01-01,INCOME,X,-1\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--transactions", str(bad)])
    assert exc.value.code == 2


def test_cli_missing_file(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit):
        main(["--transactions", str(tmp_path / "missing.csv")])


def test_cli_granularity_defaults_to_config(csv_files, tmp_path, capsys) -> None:
    tx_path, _ = csv_files
    (tmp_path / "ops_finsight_config.toml").write_text(
        '[analytics]\ndefault_granularity = "weekly"\n', encoding="utf-8"
    )
    main(["--transactions", str(tx_path), "--scope", "series"])
    out = capsys.readouterr().out

    assert "Cumulative trend (weekly)" in out
