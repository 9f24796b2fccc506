"""Totals, category breakdowns and monthly buckets over a transaction list.

All functions are pure. Amounts are summed as given; rounding happens only
when values are formatted for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from ..constants import TransactionType


@dataclass(frozen=True, slots=True)
class Totals:
    """Summed amount per transaction type."""

    income: float = 0.0
    expense: float = 0.0
    savings: float = 0.0

    @property
    def balance(self) -> float:
        # Savings leave the spendable balance.
        return self.income - self.expense - self.savings

    @property
    def net_profit(self) -> float:
        return self.balance

    def amount_for(self, txn_type: str) -> float:
        return getattr(self, TransactionType(txn_type).value)


@dataclass(frozen=True, slots=True)
class MonthBucket:
    month: date
    label: str
    income: float
    expense: float
    savings: float

    @property
    def balance(self) -> float:
        return self.income - self.expense - self.savings


@dataclass(frozen=True, slots=True)
class DayBucket:
    day: date
    income: float
    expense: float
    savings: float


@dataclass(frozen=True, slots=True)
class CategoryShare:
    name: str
    amount: float
    percentage: float


@dataclass(frozen=True, slots=True)
class Summary:
    """Headline numbers for the summary cards."""

    totals: Totals
    recommended_savings: float
    savings_percentage: float
    expenses_percentage: float
    is_saving_enough: bool
    savings_progress: int

    @property
    def balance(self) -> float:
        return self.totals.balance


def totals(transactions: Iterable[Any]) -> Totals:
    """Sum amounts per type; every field is zero for an empty input."""

    sums = {t.value: 0.0 for t in TransactionType}
    for txn in transactions:
        if txn.type in sums:
            sums[txn.type] += txn.amount
    return Totals(**sums)


def by_category(transactions: Iterable[Any], txn_type: str) -> dict[str, float]:
    """Map each category label seen among ``txn_type`` transactions to its sum."""

    result: dict[str, float] = {}
    for txn in transactions:
        if txn.type != txn_type:
            continue
        result[txn.category] = result.get(txn.category, 0.0) + txn.amount
    return result


def category_breakdown(transactions: Iterable[Any], txn_type: str) -> list[CategoryShare]:
    """Category sums sorted largest first, each with its share of the type total."""

    sums = by_category(transactions, txn_type)
    grand_total = sum(sums.values())
    shares = [
        CategoryShare(
            name=name,
            amount=amount,
            percentage=(amount / grand_total * 100) if grand_total > 0 else 0.0,
        )
        for name, amount in sums.items()
    ]
    shares.sort(key=lambda share: share.amount, reverse=True)
    return shares


_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_start(day: date) -> date:
    return day.replace(day=1)


def next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def previous_month(day: date) -> date:
    if day.month == 1:
        return date(day.year - 1, 12, 1)
    return date(day.year, day.month - 1, 1)


def month_label(month: date) -> str:
    """``Jan 2024`` style label, independent of the process locale."""

    return f"{_MONTH_ABBR[month.month - 1]} {month.year}"


def by_month(transactions: Iterable[Any]) -> list[MonthBucket]:
    """Monthly buckets spanning the earliest to latest month, gaps included."""

    sums: dict[date, dict[str, float]] = {}
    for txn in transactions:
        key = month_start(txn.date)
        bucket = sums.setdefault(key, {t.value: 0.0 for t in TransactionType})
        if txn.type in bucket:
            bucket[txn.type] += txn.amount

    if not sums:
        return []

    buckets: list[MonthBucket] = []
    cursor, last = min(sums), max(sums)
    empty = {t.value: 0.0 for t in TransactionType}
    while cursor <= last:
        values = sums.get(cursor, empty)
        buckets.append(MonthBucket(month=cursor, label=month_label(cursor), **values))
        cursor = next_month(cursor)
    return buckets


def by_day(transactions: Iterable[Any], start: date, end: date) -> list[DayBucket]:
    """Dense daily buckets for ``[start, end]``; transactions outside are ignored."""

    if end < start:
        return []
    sums: dict[date, dict[str, float]] = {}
    for txn in transactions:
        if start <= txn.date <= end:
            bucket = sums.setdefault(txn.date, {t.value: 0.0 for t in TransactionType})
            if txn.type in bucket:
                bucket[txn.type] += txn.amount

    empty = {t.value: 0.0 for t in TransactionType}
    span = (end - start).days
    return [
        DayBucket(day=start + timedelta(days=i), **sums.get(start + timedelta(days=i), empty))
        for i in range(span + 1)
    ]


def percentage_of_income(value: float, income: float) -> float:
    """``value`` as a percentage of ``income``; zero income yields 0."""

    return (value / income) * 100 if income > 0 else 0.0


def summarize(transactions: Iterable[Any], recommended_rate: float = 0.3) -> Summary:
    """Totals plus the savings guidance shown next to them."""

    sums = totals(transactions)
    recommended = sums.income * recommended_rate
    progress = min(round(sums.savings / recommended * 100), 100) if recommended > 0 else 0
    return Summary(
        totals=sums,
        recommended_savings=recommended,
        savings_percentage=percentage_of_income(sums.savings, sums.income),
        expenses_percentage=percentage_of_income(sums.expense, sums.income),
        is_saving_enough=sums.savings >= recommended,
        savings_progress=progress,
    )


def top_transactions(
    transactions: Iterable[Any], txn_type: str, limit: Optional[int] = 5
) -> list[Any]:
    """Largest ``txn_type`` transactions first; ties keep input order."""

    matching = [txn for txn in transactions if txn.type == txn_type]
    matching.sort(key=lambda txn: txn.amount, reverse=True)
    return matching if limit is None else matching[: max(0, limit)]
