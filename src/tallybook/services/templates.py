"""Transaction templates: saved shapes for recurring entries."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..models.template import TransactionTemplate
from ..models.transaction import Transaction
from .validation import parse_amount, parse_category, parse_type

DEFAULT_TEMPLATES: tuple[dict[str, Any], ...] = (
    {"name": "Monthly Rent", "type": "expense", "category": "Housing", "amount": 15000.0},
    {"name": "Salary", "type": "income", "category": "Salary", "amount": 50000.0},
    {"name": "Groceries", "type": "expense", "category": "Food", "amount": 2000.0},
    {"name": "Emergency Fund", "type": "savings", "category": "Emergency Fund", "amount": 5000.0},
)


def build_template(
    *,
    name: str,
    txn_type: str,
    category: str,
    amount: float,
    notes: str = "",
    user_id: str = "local",
    is_default: bool = False,
) -> TransactionTemplate:
    """Validate the fields a template carries and return an unsaved template."""

    if not name or not name.strip():
        raise ValueError("Template name is required")
    return TransactionTemplate(
        user_id=user_id,
        name=name.strip(),
        type=parse_type(txn_type),
        category=parse_category(category),
        amount=parse_amount(amount),
        notes=notes or "",
        is_default=is_default,
    )


def default_templates(*, user_id: str = "local") -> list[TransactionTemplate]:
    return [
        build_template(
            name=item["name"],
            txn_type=item["type"],
            category=item["category"],
            amount=item["amount"],
            user_id=user_id,
            is_default=True,
        )
        for item in DEFAULT_TEMPLATES
    ]


def instantiate_template(
    template: TransactionTemplate,
    *,
    on: Optional[date] = None,
    amount: Optional[float] = None,
    notes: Optional[str] = None,
) -> Transaction:
    """Stamp a new transaction out of ``template``; overrides win over stored values."""

    return Transaction(
        user_id=template.user_id,
        date=on or date.today(),
        type=template.type,
        category=template.category,
        amount=parse_amount(amount) if amount is not None else template.amount,
        notes=template.notes if notes is None else notes,
    )
