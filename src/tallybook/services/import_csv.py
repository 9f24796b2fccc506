"""CSV ingestion utilities.

Reads files in the layout produced by :mod:`tallybook.services.export_csv`.
Header matching is case-insensitive and extra columns are ignored. Rows that
fail validation are skipped and reported; they never abort the import.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.transaction import Transaction
from .validation import TransactionValidationError, transaction_from_mapping

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "type", "category", "amount")


class CsvImportError(ValueError):
    """The file cannot be read as a transaction CSV at all."""


@dataclass(slots=True)
class ImportResult:
    transactions: list[Transaction] = field(default_factory=list)
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return len(self.transactions)


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    try:
        frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    except FileNotFoundError as exc:
        raise CsvImportError(f"File not found: {file_path}") from exc
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise CsvImportError(f"Could not parse {file_path.name}: {exc}") from exc

    frame.columns = [str(c).strip().lower() for c in frame.columns]
    if frame.columns.duplicated().any():
        raise CsvImportError("Duplicate column headers")
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise CsvImportError(f"Missing required columns: {', '.join(missing)}")
    return frame


def parse_rows(frame: pd.DataFrame, *, user_id: str = "local") -> ImportResult:
    result = ImportResult()
    records: list[dict[str, Any]] = frame.to_dict(orient="records")
    # Row 1 is the header, so data starts on line 2.
    for line_no, row in enumerate(records, start=2):
        try:
            result.transactions.append(transaction_from_mapping(row, user_id=user_id))
        except TransactionValidationError as exc:
            result.skipped += 1
            result.errors.append(f"Row {line_no}: {exc}")
            logger.warning("Skipped CSV row", extra={"row": line_no, "reason": str(exc)})
    return result


def import_transactions_csv(*, csv_path: Path, user_id: str = "local") -> ImportResult:
    """Parse the file and return validated transactions; the caller persists them."""

    frame = normalize_frame(file_path=csv_path)
    result = parse_rows(frame, user_id=user_id)
    logger.info(
        "Parsed CSV import",
        extra={"path": str(csv_path), "imported": result.imported, "skipped": result.skipped},
    )
    return result
