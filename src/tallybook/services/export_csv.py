"""CSV export helpers for Tallybook."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Iterable

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Date", "Type", "Category", "Amount", "Notes"]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        # plain decimal, never exponent notation
        return format(Decimal(repr(value)), "f")
    return str(value)


def _write_rows(fh: IO[str], transactions: Iterable[Any]) -> int:
    writer = csv.DictWriter(fh, fieldnames=CSV_HEADERS, quoting=csv.QUOTE_MINIMAL)
    writer.writeheader()
    count = 0
    for tx in transactions:
        writer.writerow(
            {
                "Date": _serialize_value(getattr(tx, "date", None)),
                "Type": _serialize_value(getattr(tx, "type", None)),
                "Category": _serialize_value(getattr(tx, "category", None)),
                "Amount": _serialize_value(getattr(tx, "amount", None)),
                "Notes": _serialize_value(getattr(tx, "notes", None)),
            }
        )
        count += 1
    return count


def transactions_to_csv(transactions: Iterable[Any]) -> str:
    """Render transactions as CSV text with the standard header row."""

    buffer = io.StringIO(newline="")
    _write_rows(buffer, transactions)
    return buffer.getvalue()


def export_transactions_csv(*, transactions: Iterable[Any], output_path: Path) -> Path:
    """Write transactions to CSV at `output_path`.

    Columns are deterministic: Date, Type, Category, Amount, Notes.
    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        count = _write_rows(fh, transactions)

    logger.info("Exported transactions", extra={"count": count, "path": str(output_path)})
    return output_path


def default_export_name(today: date) -> str:
    return f"transactions-{today.isoformat()}.csv"
