"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlmodel import select

from ...logging_config import get_logger
from ...models.transaction import Transaction
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_transactions(self, *, user_id: str) -> list[Transaction]:
        """Every transaction for the user, oldest first (insertion order on ties)."""
        with self.session_factory() as session:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .order_by(Transaction.date, Transaction.created_at)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_by_id(self, transaction_id: str, *, user_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def search(
        self,
        *,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        txn_type: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[Transaction]:
        """Search with optional date window, type and category label."""
        with self.session_factory() as session:
            statement = select(Transaction).where(Transaction.user_id == user_id)

            if start_date:
                statement = statement.where(Transaction.date >= start_date)
            if end_date:
                statement = statement.where(Transaction.date <= end_date)
            if txn_type:
                statement = statement.where(Transaction.type == txn_type)
            if category:
                statement = statement.where(Transaction.category == category)

            statement = statement.order_by(Transaction.date, Transaction.created_at)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, transaction: Transaction, *, user_id: str) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            transaction.user_id = user_id
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
            logger.debug("Transaction created", extra={"transaction_id": transaction.id})
            return transaction

    def bulk_create(self, transactions: Iterable[Transaction], *, user_id: str) -> int:
        """Insert many transactions in a single session."""
        count = 0
        with self.session_factory() as session:
            for txn in transactions:
                txn.user_id = user_id
                session.add(txn)
                count += 1
            session.commit()
        logger.info("Bulk insert finished", extra={"count": count})
        return count

    def update(self, transaction: Transaction, *, user_id: str) -> Transaction:
        """Update an existing transaction."""
        with self.session_factory() as session:
            transaction.user_id = user_id
            merged = session.merge(transaction)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, transaction_id: str, *, user_id: str) -> None:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if transaction:
                session.delete(transaction)
                session.commit()


__all__ = ["SQLModelTransactionRepository"]
