"""Tests for CSV export and import."""

from __future__ import annotations

import csv
from datetime import date

import pytest

from tallybook.services import export_csv, import_csv


def test_export_writes_fixed_header_and_iso_dates(tmp_path, make_txn):
    output_path = tmp_path / "nested" / "ledger.csv"
    txns = [
        make_txn(120.5, "expense", "Food", "2024-01-02", notes="Lunch, with team"),
        make_txn(5000, "income", "Salary", "2024-01-01"),
    ]

    written = export_csv.export_transactions_csv(transactions=txns, output_path=output_path)

    assert written == output_path
    with output_path.open(newline="", encoding="utf-8") as fh:
        reader = csv.reader(fh)
        header = next(reader)
        rows = list(reader)
    assert header == ["Date", "Type", "Category", "Amount", "Notes"]
    assert rows[0] == ["2024-01-02", "expense", "Food", "120.5", "Lunch, with team"]
    assert rows[1] == ["2024-01-01", "income", "Salary", "5000", ""]


def test_export_amounts_use_plain_decimals(make_txn):
    rows = list(csv.reader(export_csv.transactions_to_csv([make_txn(1e-07), make_txn(0.1), make_txn(2.0)]).splitlines()))
    assert [row[3] for row in rows[1:]] == ["0.0000001", "0.1", "2"]


def test_transactions_to_csv_empty_has_header_only():
    assert export_csv.transactions_to_csv([]).strip() == "Date,Type,Category,Amount,Notes"


def test_import_reads_exported_file(tmp_path, make_txn):
    path = tmp_path / "ledger.csv"
    txns = [make_txn(99.99, "savings", "Goals", "2024-03-03", notes="Trip")]
    export_csv.export_transactions_csv(transactions=txns, output_path=path)

    result = import_csv.import_transactions_csv(csv_path=path, user_id="u1")

    assert result.skipped == 0
    (txn,) = result.transactions
    assert (txn.date, txn.type, txn.category, txn.amount, txn.notes, txn.user_id) == (
        date(2024, 3, 3),
        "savings",
        "Goals",
        99.99,
        "Trip",
        "u1",
    )


def test_import_skips_bad_rows_and_reports_them(tmp_path, caplog):
    path = tmp_path / "mixed.csv"
    path.write_text(
        "DATE,type,Category,Amount,Notes,Extra\n"
        "2024-01-01,expense,Food,\"₹1,200\",ok,x\n"
        "not-a-date,expense,Food,10,,x\n"
        "2024-01-02,transfer,Food,10,,x\n"
        "2024-01-03,income,Salary,-5,,x\n",
        encoding="utf-8",
    )

    with caplog.at_level("WARNING"):
        result = import_csv.import_transactions_csv(csv_path=path)

    assert result.imported == 1
    assert result.transactions[0].amount == 1200
    assert result.skipped == 3
    assert result.errors[0].startswith("Row 3:")
    assert any("Skipped CSV row" in r.message for r in caplog.records)


def test_import_requires_core_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("Date,Amount\n2024-01-01,5\n", encoding="utf-8")
    with pytest.raises(import_csv.CsvImportError, match="type, category"):
        import_csv.import_transactions_csv(csv_path=path)


def test_import_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(import_csv.CsvImportError):
        import_csv.import_transactions_csv(csv_path=path)
