"""Transaction repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Read/write access to the transaction store."""

    def list_transactions(self, *, user_id: str) -> list[Transaction]:
        """Every transaction owned by ``user_id``, oldest first."""
        ...

    def get_by_id(self, transaction_id: str, *, user_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def search(
        self,
        *,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        txn_type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[Transaction]:
        """Coarse server-side narrowing before the in-memory filters run."""
        ...

    def create(self, transaction: Transaction, *, user_id: str) -> Transaction:
        """Create a new transaction."""
        ...

    def bulk_create(self, transactions: Iterable[Transaction], *, user_id: str) -> int:
        """Insert many transactions in one session; returns the count."""
        ...

    def update(self, transaction: Transaction, *, user_id: str) -> Transaction:
        """Update an existing transaction."""
        ...

    def delete(self, transaction_id: str, *, user_id: str) -> None:
        """Delete a transaction by ID."""
        ...
