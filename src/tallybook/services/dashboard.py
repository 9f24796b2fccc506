"""Recompute-on-demand pipeline feeding the overview screens.

``build_dashboard`` is the single entry point the presentation layer calls
whenever transactions, categories or the filter change. It validates the
records, applies the filter once and derives every view from that subset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from ..config import BaseConfig
from ..constants import TransactionType
from .aggregation import (
    CategoryShare,
    MonthBucket,
    Summary,
    by_month,
    category_breakdown,
    summarize,
)
from .budgeting import BudgetVariance, compute_variances
from .categories import CategoryJoin, join_categories
from .filters import FilterSpec, apply_filters
from .trends import (
    BalancePoint,
    BalanceTrend,
    MonthlyBalance,
    PeriodComparison,
    balance_trend,
    cumulative_monthly_balance,
    month_over_month,
    running_balance,
    transactions_in_month,
)
from .validation import validate_transactions

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DashboardView:
    spec: FilterSpec
    transactions: list[Any]
    summary: Summary
    expense_breakdown: list[CategoryShare]
    income_breakdown: list[CategoryShare]
    savings_breakdown: list[CategoryShare]
    months: list[MonthBucket]
    monthly_balance: list[MonthlyBalance]
    trend: BalanceTrend
    balance_points: list[BalancePoint]
    comparison: PeriodComparison
    categories: CategoryJoin
    budgets: list[BudgetVariance] = field(default_factory=list)
    rejected: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.transactions


def build_dashboard(
    transactions: Iterable[Any],
    categories: Iterable[Any],
    spec: Optional[FilterSpec] = None,
    *,
    today: Optional[date] = None,
    config: Optional[BaseConfig] = None,
) -> DashboardView:
    """Derive every overview panel from one transaction list.

    Month-over-month comparison and budget variances look at the month
    containing ``today`` across the whole (unfiltered) ledger; the remaining
    views reflect the filtered subset.
    """

    today = today or date.today()
    spec = spec or FilterSpec()
    point_limit = config.CHART_POINT_LIMIT if config else 30
    savings_rate = config.RECOMMENDED_SAVINGS_RATE if config else 0.3

    report = validate_transactions(transactions)
    if report.rejected:
        logger.warning("Dashboard skipped invalid transactions", extra={"count": len(report.rejected)})
    ledger = report.valid
    category_list = list(categories)

    visible = apply_filters(ledger, spec, today=today)
    months = by_month(visible)
    monthly = cumulative_monthly_balance(months)
    this_month = transactions_in_month(ledger, today)

    return DashboardView(
        spec=spec,
        transactions=visible,
        summary=summarize(visible, savings_rate),
        expense_breakdown=category_breakdown(visible, TransactionType.EXPENSE.value),
        income_breakdown=category_breakdown(visible, TransactionType.INCOME.value),
        savings_breakdown=category_breakdown(visible, TransactionType.SAVINGS.value),
        months=months,
        monthly_balance=monthly,
        trend=balance_trend(monthly),
        balance_points=running_balance(visible, display_threshold=point_limit),
        comparison=month_over_month(ledger, today),
        categories=join_categories(ledger, category_list),
        budgets=compute_variances(categories=category_list, transactions=this_month),
        rejected=len(report.rejected),
    )
