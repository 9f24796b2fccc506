"""Aggregation service tests."""

from __future__ import annotations

from datetime import date

import pytest

from tallybook.services import aggregation


def test_totals_empty_is_all_zero():
    sums = aggregation.totals([])
    assert (sums.income, sums.expense, sums.savings, sums.balance) == (0.0, 0.0, 0.0, 0.0)


def test_savings_reduce_balance(make_txn):
    sums = aggregation.totals(
        [
            make_txn(1000, "income", "Salary"),
            make_txn(300, "expense", "Food"),
            make_txn(200, "savings", "Goals"),
        ]
    )
    assert sums.balance == 500
    assert sums.net_profit == sums.balance
    assert sums.amount_for("savings") == 200


def test_category_breakdown_scenario(make_txn):
    txns = [
        make_txn(100, "expense", "Food"),
        make_txn(50, "expense", "Food"),
        make_txn(500, "expense", "Rent"),
        make_txn(1000, "income", "Salary"),
    ]
    assert aggregation.by_category(txns, "expense") == {"Food": 150, "Rent": 500}

    shares = aggregation.category_breakdown(txns, "expense")
    assert [s.name for s in shares] == ["Rent", "Food"]
    assert shares[0].percentage == pytest.approx(500 / 650 * 100)
    assert sum(s.percentage for s in shares) == pytest.approx(100)


def test_category_breakdown_of_absent_type_is_empty(make_txn):
    assert aggregation.category_breakdown([make_txn(10)], "income") == []


def test_by_month_is_dense(make_txn):
    buckets = aggregation.by_month(
        [
            make_txn(100, "expense", on="2024-03-10"),
            make_txn(400, "income", "Salary", on="2024-01-05"),
        ]
    )
    assert [b.label for b in buckets] == ["Jan 2024", "Feb 2024", "Mar 2024"]
    feb = buckets[1]
    assert (feb.income, feb.expense, feb.savings, feb.balance) == (0, 0, 0, 0)
    assert buckets[0].income == 400
    assert buckets[2].balance == -100


def test_by_month_crosses_year_boundary(make_txn):
    buckets = aggregation.by_month([make_txn(1, on="2023-11-30"), make_txn(1, on="2024-02-01")])
    assert [b.month for b in buckets] == [
        date(2023, 11, 1),
        date(2023, 12, 1),
        date(2024, 1, 1),
        date(2024, 2, 1),
    ]


def test_by_month_empty():
    assert aggregation.by_month([]) == []


def test_by_day_is_dense_and_clipped(make_txn):
    days = aggregation.by_day(
        [make_txn(5, on="2024-01-02"), make_txn(7, on="2024-01-09")],
        date(2024, 1, 1),
        date(2024, 1, 3),
    )
    assert [d.day.day for d in days] == [1, 2, 3]
    assert [d.expense for d in days] == [0, 5, 0]


def test_percentage_of_income_zero_income():
    assert aggregation.percentage_of_income(250, 0) == 0
    assert aggregation.percentage_of_income(250, 1000) == 25


def test_summarize_savings_guidance(make_txn):
    summary = aggregation.summarize(
        [make_txn(10_000, "income", "Salary"), make_txn(4_000, "savings", "Goals")],
        recommended_rate=0.3,
    )
    assert summary.recommended_savings == 3000
    assert summary.is_saving_enough
    assert summary.savings_progress == 100
    assert summary.savings_percentage == 40


def test_summarize_without_income(make_txn):
    summary = aggregation.summarize([make_txn(100)])
    assert summary.savings_progress == 0
    assert summary.expenses_percentage == 0
    assert summary.balance == -100


def test_top_transactions_orders_by_amount(make_txn):
    txns = [make_txn(a) for a in (10, 300, 50, 300)]
    top = aggregation.top_transactions(txns, "expense", limit=3)
    assert [t.amount for t in top] == [300, 300, 50]
    assert top[0] is txns[1]
