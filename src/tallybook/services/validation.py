"""Boundary validation for records entering the analytics engine.

The engine trusts its input. Records from storage, CSV files or the command
line pass through here first.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from ..constants import TRANSACTION_TYPES
from ..models.transaction import Transaction

logger = logging.getLogger(__name__)

_AMOUNT_NOISE = re.compile(r"[^\d.\-]")


class TransactionValidationError(ValueError):
    """A record that cannot become a transaction."""

    def __init__(self, field_name: str, value: Any, message: str):
        super().__init__(f"{field_name}: {message} (got {value!r})")
        self.field_name = field_name
        self.value = value


@dataclass
class ValidationReport:
    valid: list[Any] = field(default_factory=list)
    rejected: list[tuple[Any, TransactionValidationError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise TransactionValidationError("date", value, "missing")
    try:
        # ISO date, optionally followed by a time component
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise TransactionValidationError("date", value, "not an ISO-8601 date") from exc


def parse_type(value: Any) -> str:
    text = str(getattr(value, "value", value) or "").strip().lower()
    if text not in TRANSACTION_TYPES:
        raise TransactionValidationError("type", value, f"must be one of {', '.join(TRANSACTION_TYPES)}")
    return text


def parse_amount(value: Any) -> float:
    """Accept numbers or strings like ``"₹1,250.50"``; reject negatives and NaN."""

    if isinstance(value, bool):
        raise TransactionValidationError("amount", value, "not a number")
    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        cleaned = _AMOUNT_NOISE.sub("", str(value or ""))
        try:
            amount = float(cleaned)
        except ValueError as exc:
            raise TransactionValidationError("amount", value, "not a number") from exc
    if math.isnan(amount) or math.isinf(amount):
        raise TransactionValidationError("amount", value, "not a finite number")
    if amount < 0:
        raise TransactionValidationError("amount", value, "must not be negative")
    return amount


def parse_category(value: Any) -> str:
    text = str(value or "").strip()
    if not text:
        raise TransactionValidationError("category", value, "missing")
    return text


def transaction_from_mapping(row: Mapping[str, Any], *, user_id: str = "local") -> Transaction:
    """Build a validated :class:`Transaction` from a loosely typed mapping."""

    notes = row.get("notes")
    kwargs: dict[str, Any] = {
        "user_id": user_id,
        "date": parse_date(row.get("date")),
        "type": parse_type(row.get("type")),
        "category": parse_category(row.get("category")),
        "amount": parse_amount(row.get("amount")),
        "notes": "" if notes is None or (isinstance(notes, float) and math.isnan(notes)) else str(notes),
    }
    if row.get("id"):
        kwargs["id"] = str(row["id"])
    return Transaction(**kwargs)


def check_transaction(txn: Any) -> None:
    """Raise when an already-built transaction breaks the engine's contract."""

    if not isinstance(getattr(txn, "date", None), date):
        raise TransactionValidationError("date", getattr(txn, "date", None), "not a date")
    parse_type(getattr(txn, "type", None))
    parse_category(getattr(txn, "category", None))
    amount = getattr(txn, "amount", None)
    if not isinstance(amount, (int, float)) or isinstance(amount, bool):
        raise TransactionValidationError("amount", amount, "not a number")
    parse_amount(amount)


def validate_transactions(transactions: Iterable[Any]) -> ValidationReport:
    """Split records into those the engine may consume and those it must not."""

    report = ValidationReport()
    for txn in transactions:
        try:
            check_transaction(txn)
        except TransactionValidationError as exc:
            logger.warning(
                "Rejected transaction",
                extra={"transaction_id": getattr(txn, "id", None), "reason": str(exc)},
            )
            report.rejected.append((txn, exc))
        else:
            report.valid.append(txn)
    return report


def optional_float(value: Optional[str], field_name: str) -> Optional[float]:
    """Parse optional numeric form input; blank means unbounded."""

    if value is None or not str(value).strip():
        return None
    try:
        return float(str(value).strip())
    except ValueError as exc:
        raise TransactionValidationError(field_name, value, "not a number") from exc
