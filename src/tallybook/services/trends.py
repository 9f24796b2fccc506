"""Period comparisons and balance trends."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..constants import TransactionType
from .aggregation import MonthBucket, Totals, month_start, next_month, previous_month, totals

# Changes smaller than this many percentage points read as "no change".
FLAT_THRESHOLD = 0.1
DEFAULT_POINT_LIMIT = 30


@dataclass(frozen=True, slots=True)
class MetricComparison:
    metric: str
    current: float
    previous: float
    absolute_change: float
    percentage_change: float
    direction: str  # up | down | flat


@dataclass(frozen=True, slots=True)
class PeriodComparison:
    income: MetricComparison
    expense: MetricComparison
    savings: MetricComparison
    net_profit: MetricComparison

    def as_list(self) -> list[MetricComparison]:
        return [self.income, self.expense, self.savings, self.net_profit]


@dataclass(frozen=True, slots=True)
class BalancePoint:
    date: date
    balance: float
    last_amount: float
    last_type: str


@dataclass(frozen=True, slots=True)
class MonthlyBalance:
    month: date
    label: str
    monthly_balance: float
    running_balance: float


@dataclass(frozen=True, slots=True)
class BalanceTrend:
    percentage: float
    is_up: bool


def percentage_change(current: float, previous: float) -> float:
    """Relative change from ``previous``; a zero baseline maps to 100 or 0."""

    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / abs(previous) * 100


def compare_metric(current: float, previous: float, *, metric: str = "value") -> MetricComparison:
    change = current - previous
    pct = percentage_change(current, previous)
    if abs(pct) < FLAT_THRESHOLD:
        direction = "flat"
    elif change > 0:
        direction = "up"
    elif change < 0:
        direction = "down"
    else:
        direction = "flat"
    return MetricComparison(
        metric=metric,
        current=current,
        previous=previous,
        absolute_change=change,
        percentage_change=pct,
        direction=direction,
    )


def compare(current: Totals, previous: Totals) -> PeriodComparison:
    """Compare two aggregated periods metric by metric."""

    return PeriodComparison(
        income=compare_metric(current.income, previous.income, metric="income"),
        expense=compare_metric(current.expense, previous.expense, metric="expense"),
        savings=compare_metric(current.savings, previous.savings, metric="savings"),
        net_profit=compare_metric(current.net_profit, previous.net_profit, metric="net_profit"),
    )


def transactions_in_month(transactions: Iterable[Any], month: date) -> list[Any]:
    start = month_start(month)
    end = next_month(start)
    return [txn for txn in transactions if start <= txn.date < end]


def month_over_month(transactions: Sequence[Any], month: date) -> PeriodComparison:
    """Compare the calendar month containing ``month`` with the one before it."""

    current = totals(transactions_in_month(transactions, month))
    previous = totals(transactions_in_month(transactions, previous_month(month_start(month))))
    return compare(current, previous)


def running_balance(
    transactions: Iterable[Any], *, display_threshold: Optional[int] = DEFAULT_POINT_LIMIT
) -> list[BalancePoint]:
    """Cumulative balance after each transaction in date order.

    ``sorted`` is stable, so same-day transactions keep their input order.
    Above ``display_threshold`` points, runs of same-date points collapse to
    the last one of each date; the final balance is unaffected.
    """

    ordered = sorted(transactions, key=lambda txn: txn.date)
    points: list[BalancePoint] = []
    balance = 0.0
    for txn in ordered:
        balance += TransactionType(txn.type).sign * txn.amount
        points.append(
            BalancePoint(date=txn.date, balance=balance, last_amount=txn.amount, last_type=txn.type)
        )

    if display_threshold is None or len(points) <= display_threshold:
        return points

    collapsed: list[BalancePoint] = []
    for point in points:
        if collapsed and collapsed[-1].date == point.date:
            collapsed[-1] = point
        else:
            collapsed.append(point)
    return collapsed


def cumulative_monthly_balance(
    buckets: Sequence[MonthBucket], *, last: Optional[int] = None
) -> list[MonthlyBalance]:
    """Carry each month's net forward into a running total."""

    running = 0.0
    result: list[MonthlyBalance] = []
    for bucket in buckets:
        running += bucket.balance
        result.append(
            MonthlyBalance(
                month=bucket.month,
                label=bucket.label,
                monthly_balance=bucket.balance,
                running_balance=running,
            )
        )
    return result[-last:] if last else result


def balance_trend(points: Sequence[MonthlyBalance]) -> BalanceTrend:
    """Direction and size of the last month-to-month running-balance move."""

    if len(points) < 2:
        return BalanceTrend(percentage=0.0, is_up=True)
    current = points[-1].running_balance
    previous = points[-2].running_balance
    pct = percentage_change(current, previous)
    if previous == 0:
        return BalanceTrend(percentage=pct, is_up=current > 0)
    return BalanceTrend(percentage=abs(pct), is_up=pct > 0)
