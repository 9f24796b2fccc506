"""Budgeting domain services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .aggregation import by_category


@dataclass(slots=True)
class BudgetVariance:
    """Lightweight DTO for reporting variance."""

    category: str
    type: str
    planned: float
    actual: float

    @property
    def delta(self) -> float:
        return self.actual - self.planned

    @property
    def percent_used(self) -> float:
        if self.planned <= 0:
            return 0.0
        return self.actual / self.planned * 100

    @property
    def over_budget(self) -> bool:
        return self.actual > self.planned


def compute_variances(
    *, categories: Iterable[Any], transactions: Iterable[Any]
) -> list[BudgetVariance]:
    """Compose budget vs actual variances for every category that has a budget.

    ``transactions`` should already be narrowed to the period being reviewed.
    """

    txns = list(transactions)
    actual_by_type: dict[str, dict[str, float]] = {}
    variances: list[BudgetVariance] = []
    for category in categories:
        budget: Optional[float] = getattr(category, "budget", None)
        if budget is None:
            continue
        if category.type not in actual_by_type:
            actual_by_type[category.type] = by_category(txns, category.type)
        actual = actual_by_type[category.type].get(category.name, 0.0)
        variances.append(
            BudgetVariance(
                category=category.name,
                type=category.type,
                planned=round(budget, 2),
                actual=round(actual, 2),
            )
        )

    variances.sort(key=lambda v: v.percent_used, reverse=True)
    return variances
