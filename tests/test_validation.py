"""Boundary validation tests."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from tallybook.services.validation import (
    TransactionValidationError,
    parse_amount,
    transaction_from_mapping,
    validate_transactions,
)


def test_mapping_becomes_transaction():
    txn = transaction_from_mapping(
        {"date": "2024-02-01", "type": "Expense", "category": " Food ", "amount": "₹1,250.50"},
        user_id="u1",
    )
    assert txn.date == date(2024, 2, 1)
    assert txn.type == "expense"
    assert txn.category == "Food"
    assert txn.amount == 1250.5
    assert txn.user_id == "u1"
    assert txn.notes == ""


@pytest.mark.parametrize(
    ("row", "field_name"),
    [
        ({"date": "yesterday", "type": "expense", "category": "Food", "amount": 1}, "date"),
        ({"date": "2024-01-01", "type": "transfer", "category": "Food", "amount": 1}, "type"),
        ({"date": "2024-01-01", "type": "expense", "category": "  ", "amount": 1}, "category"),
        ({"date": "2024-01-01", "type": "expense", "category": "Food", "amount": -5}, "amount"),
        ({"date": "2024-01-01", "type": "expense", "category": "Food", "amount": "abc"}, "amount"),
    ],
)
def test_bad_rows_name_the_field(row, field_name):
    with pytest.raises(TransactionValidationError) as excinfo:
        transaction_from_mapping(row)
    assert excinfo.value.field_name == field_name


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        parse_amount(float("nan"))


def test_validate_transactions_partitions(make_txn):
    good = make_txn(10)
    bad_type = make_txn(10, txn_type="bogus")
    no_date = SimpleNamespace(id="x", date=None, type="expense", category="Food", amount=1)
    report = validate_transactions([good, bad_type, no_date])
    assert report.valid == [good]
    assert [r[0] for r in report.rejected] == [bad_type, no_date]
    assert not report.ok
