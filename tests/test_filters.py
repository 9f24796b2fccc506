"""Tests for the filter evaluator, period resolution and presets."""

from __future__ import annotations

from datetime import date

import pytest

from tallybook.services import filters
from tallybook.services.filters import AmountRange, FilterSpec, TimePeriod, apply_filters

TODAY = date(2024, 5, 15)  # a Wednesday


@pytest.fixture
def ledger(make_txn):
    return [
        make_txn(120, "expense", "Food", "2024-05-15"),
        make_txn(500, "expense", "Transport", "2024-05-14"),
        make_txn(1000, "expense", "Housing", "2024-05-09"),
        make_txn(5000, "income", "Salary", "2024-05-01"),
        make_txn(7500, "income", "Freelance", "2024-04-20"),
        make_txn(2000, "savings", "Emergency Fund", "2024-04-30"),
        make_txn(80, "expense", "Food", "2023-12-31"),
    ]


def test_default_spec_passes_everything_through(ledger):
    result = apply_filters(ledger, FilterSpec(), today=TODAY)
    assert result == ledger
    assert all(a is b for a, b in zip(result, ledger))


def test_apply_filters_is_idempotent(ledger):
    spec = FilterSpec(time_period="thisYear", type="expense", amount_range="under500")
    once = apply_filters(ledger, spec, today=TODAY)
    twice = apply_filters(once, spec, today=TODAY)
    assert once == twice


def test_result_is_identity_subset_in_input_order(ledger):
    spec = FilterSpec(type="expense")
    result = apply_filters(ledger, spec, today=TODAY)
    positions = [next(i for i, t in enumerate(ledger) if t is r) for r in result]
    assert positions == sorted(positions)
    assert all(t.type == "expense" for t in result)


def test_input_is_not_mutated(ledger):
    before = [(t.id, t.amount, t.date) for t in ledger]
    apply_filters(ledger, FilterSpec(category="Food"), today=TODAY)
    assert [(t.id, t.amount, t.date) for t in ledger] == before


def test_none_input_yields_empty_list():
    assert apply_filters(None, FilterSpec(), today=TODAY) == []


def test_amount_500_belongs_to_middle_range_only(make_txn):
    txn = make_txn(500)
    assert filters.matches(txn, FilterSpec(amount_range="500to1000"), today=TODAY)
    assert not filters.matches(txn, FilterSpec(amount_range="under500"), today=TODAY)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (499.99, "under500"),
        (1000, "500to1000"),
        (1000.01, "1000to5000"),
        (5000, "1000to5000"),
        (5000.01, "over5000"),
    ],
)
def test_amount_range_boundaries(make_txn, amount, expected):
    txn = make_txn(amount)
    hits = [
        rng.value
        for rng in AmountRange
        if rng not in (AmountRange.ALL, AmountRange.CUSTOM)
        and filters.matches(txn, FilterSpec(amount_range=rng), today=TODAY)
    ]
    assert hits == [expected]


def test_custom_amount_range_open_ends(make_txn):
    small, big = make_txn(10), make_txn(10_000)
    only_min = FilterSpec().with_custom_amount_range(100, None)
    only_max = FilterSpec().with_custom_amount_range(None, 100)
    assert apply_filters([small, big], only_min, today=TODAY) == [big]
    assert apply_filters([small, big], only_max, today=TODAY) == [small]


def test_custom_period_with_missing_bound_is_ignored(ledger):
    spec = FilterSpec().with_custom_date_range(date(2024, 5, 1), None)
    assert apply_filters(ledger, spec, today=TODAY) == ledger


def test_custom_period_is_inclusive(ledger):
    spec = FilterSpec().with_custom_date_range(date(2024, 4, 30), date(2024, 5, 9))
    result = apply_filters(ledger, spec, today=TODAY)
    assert sorted(t.date.isoformat() for t in result) == ["2024-04-30", "2024-05-01", "2024-05-09"]


@pytest.mark.parametrize(
    ("period", "expected"),
    [
        ("all", None),
        ("today", (date(2024, 5, 15), date(2024, 5, 15))),
        ("yesterday", (date(2024, 5, 14), date(2024, 5, 14))),
        ("last7days", (date(2024, 5, 9), date(2024, 5, 15))),
        ("thisWeek", (date(2024, 5, 13), date(2024, 5, 19))),
        ("lastWeek", (date(2024, 5, 6), date(2024, 5, 12))),
        ("thisMonth", (date(2024, 5, 1), date(2024, 5, 31))),
        ("lastMonth", (date(2024, 4, 1), date(2024, 4, 30))),
        ("thisYear", (date(2024, 1, 1), date(2024, 5, 15))),
        ("custom", None),
    ],
)
def test_resolve_period(period, expected):
    assert filters.resolve_period(period, today=TODAY) == expected


def test_last_month_wraps_year():
    assert filters.resolve_period("lastMonth", today=date(2024, 1, 10)) == (
        date(2023, 12, 1),
        date(2023, 12, 31),
    )


def test_week_starts_on_monday_even_on_sunday():
    sunday = date(2024, 5, 19)
    assert filters.resolve_period("thisWeek", today=sunday) == (date(2024, 5, 13), date(2024, 5, 19))


def test_leap_february_bounds():
    assert filters.resolve_period("thisMonth", today=date(2024, 2, 10))[1] == date(2024, 2, 29)


def test_all_predicates_must_pass(ledger):
    spec = FilterSpec(time_period="thisMonth", type="expense", category="Food")
    result = apply_filters(ledger, spec, today=TODAY)
    assert [(t.category, t.date) for t in result] == [("Food", date(2024, 5, 15))]


def test_spec_updates_return_new_values():
    base = FilterSpec()
    changed = base.with_type("income")
    assert base.type == "all"
    assert changed.type == "income"
    assert changed.active_filter_count == 1


def test_switching_period_away_from_custom_clears_dates():
    spec = FilterSpec().with_custom_date_range(date(2024, 1, 1), date(2024, 1, 31))
    assert spec.time_period is TimePeriod.CUSTOM
    switched = spec.with_time_period("thisMonth")
    assert switched.custom_date_from is None and switched.custom_date_to is None


def test_switching_amount_range_clears_custom_bounds():
    spec = FilterSpec().with_custom_amount_range(10, 20).with_amount_range("over5000")
    assert spec.custom_amount_min is None and spec.custom_amount_max is None


def test_reset_returns_default():
    spec = FilterSpec(type="expense", category="Food", amount_range="over5000")
    assert spec.active_filter_count == 3
    assert spec.reset().is_default


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        FilterSpec(type="transfer")


def test_spec_dict_round_trip_keeps_dates():
    spec = FilterSpec().with_custom_date_range(date(2024, 3, 1), date(2024, 3, 31)).with_type("savings")
    data = spec.to_dict()
    assert data["custom_date_from"] == "2024-03-01"
    assert FilterSpec.from_dict(data) == spec


def test_presets_start_from_a_reset_spec(ledger):
    spec = filters.find_preset("this-month-expenses").apply()
    assert spec.time_period is TimePeriod.THIS_MONTH
    assert spec.type == "expense"
    assert spec.category == "all"
    result = apply_filters(ledger, spec, today=TODAY)
    assert {t.category for t in result} == {"Food", "Transport", "Housing"}


def test_unknown_preset_raises_key_error():
    with pytest.raises(KeyError):
        filters.find_preset("nope")


def test_builtin_preset_ids_are_unique():
    ids = [p.id for p in filters.BUILTIN_PRESETS]
    assert len(ids) == len(set(ids))
