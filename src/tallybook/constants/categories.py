"""
Centralized transaction types and starter categories.
These lists seed a fresh ledger and back the CLI choices.
"""

from __future__ import annotations

from enum import Enum


class TransactionType(str, Enum):
    """Kind of money movement; decides the sign of its effect on balance."""

    EXPENSE = "expense"
    INCOME = "income"
    SAVINGS = "savings"

    @property
    def sign(self) -> int:
        # Savings leaves spendable balance just like an expense.
        return 1 if self is TransactionType.INCOME else -1


TRANSACTION_TYPES = [t.value for t in TransactionType]

# Sentinel accepted by filters for "no type/category constraint".
ALL = "all"

EXPENSE_CATEGORIES = [
    "Food",
    "Transport",
    "Entertainment",
    "Housing",
    "Utilities",
    "Healthcare",
    "Education",
    "Shopping",
    "Other",
]

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Gifts",
    "Investments",
    "Other",
]

SAVINGS_CATEGORIES = [
    "Emergency Fund",
    "Retirement",
    "Investments",
    "Goals",
    "Other",
]

DEFAULT_CATEGORIES = {
    TransactionType.EXPENSE.value: EXPENSE_CATEGORIES,
    TransactionType.INCOME.value: INCOME_CATEGORIES,
    TransactionType.SAVINGS.value: SAVINGS_CATEGORIES,
}

# Palette cycled through when categories are created without a color.
DEFAULT_COLORS = [
    "#10b981",
    "#ef4444",
    "#3b82f6",
    "#8b5cf6",
    "#f59e0b",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
    "#f97316",
    "#6366f1",
]

