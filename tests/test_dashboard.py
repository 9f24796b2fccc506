"""Dashboard pipeline tests."""

from __future__ import annotations

from datetime import date

from tallybook.models.category import Category
from tallybook.services.dashboard import build_dashboard
from tallybook.services.filters import FilterSpec

TODAY = date(2024, 3, 20)


def _ledger(make_txn):
    return [
        make_txn(5000, "income", "Salary", "2024-03-01"),
        make_txn(1200, "expense", "Food", "2024-03-05"),
        make_txn(800, "expense", "Food", "2024-02-10"),
        make_txn(1000, "savings", "Goals", "2024-02-15"),
        make_txn(4000, "income", "Salary", "2024-02-01"),
        make_txn(60, "expense", "Taxi", "2024-03-06"),
    ]


def test_dashboard_builds_every_view(make_txn, test_config):
    txns = _ledger(make_txn)
    cats = [
        Category(name="Food", type="expense", budget=1000.0),
        Category(name="Salary", type="income"),
    ]

    view = build_dashboard(txns, cats, FilterSpec(), today=TODAY, config=test_config)

    assert view.transactions == txns
    assert view.summary.totals.income == 9000
    assert view.summary.balance == 9000 - 2060 - 1000
    assert [s.name for s in view.expense_breakdown] == ["Food", "Taxi"]
    assert [m.label for m in view.months] == ["Feb 2024", "Mar 2024"]
    assert view.monthly_balance[-1].running_balance == view.summary.balance
    assert view.balance_points[-1].balance == view.summary.balance
    assert view.comparison.expense.current == 1260
    assert view.comparison.expense.previous == 800
    assert [u.name for u in view.categories.unlabeled] == ["Goals", "Taxi"]
    (food_budget,) = view.budgets
    assert food_budget.actual == 1200
    assert food_budget.over_budget
    assert view.rejected == 0


def test_filter_narrows_views_but_not_comparison(make_txn):
    txns = _ledger(make_txn)
    view = build_dashboard(txns, [], FilterSpec(time_period="lastMonth"), today=TODAY)
    assert {t.date.month for t in view.transactions} == {2}
    assert view.summary.totals.expense == 800
    assert view.comparison.income.current == 5000


def test_invalid_records_are_dropped(make_txn):
    txns = [make_txn(10), make_txn(10, txn_type="refund")]
    view = build_dashboard(txns, [], today=TODAY)
    assert view.rejected == 1
    assert len(view.transactions) == 1


def test_empty_ledger():
    view = build_dashboard([], [], today=TODAY)
    assert view.is_empty
    assert view.months == []
    assert view.trend.percentage == 0
