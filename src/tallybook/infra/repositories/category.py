"""SQLModel implementation of Category repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.category import Category
from ...models.transaction import Transaction
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @staticmethod
    def _owned(session: Session, category_id: str, user_id: str) -> Category:
        category = session.exec(
            select(Category).where(Category.id == category_id, Category.user_id == user_id)
        ).first()
        if category is None:
            raise LookupError(f"Category {category_id} not found")
        return category

    @staticmethod
    def _relabel(session: Session, old: str, new: str, txn_type: str, user_id: str) -> int:
        rows = session.exec(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .where(Transaction.type == txn_type)
            .where(Transaction.category == old)
        ).all()
        for row in rows:
            row.category = new
            session.add(row)
        return len(rows)

    def list_categories(self, *, user_id: str) -> list[Category]:
        """List all categories."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .order_by(Category.type, Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_by_type(self, category_type: str, *, user_id: str) -> list[Category]:
        """List categories filtered by type."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .where(Category.type == category_type)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_by_id(self, category_id: str, *, user_id: str) -> Optional[Category]:
        """Retrieve a category by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, category_type: str, *, user_id: str) -> Optional[Category]:
        """Retrieve a category by its name within one type."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category)
                .where(Category.user_id == user_id)
                .where(Category.type == category_type)
                .where(Category.name == name)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, category: Category, *, user_id: str) -> Category:
        """Create a new category; (name, type) must be unique per user."""
        if self.get_by_name(category.name, category.type, user_id=user_id) is not None:
            raise ValueError(f"Category '{category.name}' already exists for type {category.type}")
        with self.session_factory() as session:
            category.user_id = user_id
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            logger.info("Category created", extra={"category": category.name, "type": category.type})
            return category

    def rename(self, category_id: str, new_name: str, *, user_id: str) -> Category:
        """Rename a category and carry its transactions along."""
        new_name = new_name.strip()
        if not new_name:
            raise ValueError("Category name cannot be empty")
        with self.session_factory() as session:
            category = self._owned(session, category_id, user_id)
            clash = session.exec(
                select(Category)
                .where(Category.user_id == user_id)
                .where(Category.type == category.type)
                .where(Category.name == new_name)
                .where(Category.id != category.id)
            ).first()
            if clash is not None:
                raise ValueError(
                    f"Category '{new_name}' already exists for type {category.type}; merge them instead"
                )
            old_name = category.name
            moved = self._relabel(session, old_name, new_name, category.type, user_id)
            category.name = new_name
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
        logger.info(
            "Category renamed",
            extra={"old": old_name, "new": new_name, "transactions": moved},
        )
        return category

    def merge(self, source_id: str, target_id: str, *, user_id: str) -> int:
        """Relabel source transactions to the target and drop the source."""
        if source_id == target_id:
            raise ValueError("Cannot merge a category into itself")
        with self.session_factory() as session:
            source = self._owned(session, source_id, user_id)
            target = self._owned(session, target_id, user_id)
            if source.type != target.type:
                raise ValueError("Only categories of the same type can be merged")
            moved = self._relabel(session, source.name, target.name, source.type, user_id)
            target.usage_count = (target.usage_count or 0) + (source.usage_count or 0)
            if source.last_used and (target.last_used is None or source.last_used > target.last_used):
                target.last_used = source.last_used
            session.add(target)
            session.delete(source)
            session.commit()
        logger.info("Categories merged", extra={"source": source_id, "target": target_id, "moved": moved})
        return moved

    def reassign(self, from_id: str, to_id: str, *, user_id: str) -> int:
        """Relabel transactions from one category to another, keeping both."""
        with self.session_factory() as session:
            if from_id == to_id:
                raise ValueError("Cannot reassign a category to itself")
            source = self._owned(session, from_id, user_id)
            target = self._owned(session, to_id, user_id)
            if source.type != target.type:
                raise ValueError("Only categories of the same type can swap transactions")
            moved = self._relabel(session, source.name, target.name, source.type, user_id)
            session.commit()
        logger.info("Transactions reassigned", extra={"source": from_id, "target": to_id, "moved": moved})
        return moved

    def set_budget(self, category_id: str, budget: Optional[float], *, user_id: str) -> Category:
        """Update only the budget field."""
        if budget is not None and budget < 0:
            raise ValueError("Budget cannot be negative")
        with self.session_factory() as session:
            category = self._owned(session, category_id, user_id)
            category.budget = budget
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def record_usage(
        self, category_id: str, usage_count: int, last_used: Optional[date], *, user_id: str
    ) -> None:
        """Store derived usage statistics back on the category."""
        with self.session_factory() as session:
            category = self._owned(session, category_id, user_id)
            category.usage_count = usage_count
            if last_used is not None:
                category.last_used = last_used
            session.add(category)
            session.commit()

    def delete(self, category_id: str, *, user_id: str) -> None:
        """Delete a category by ID. Transactions keep their label."""
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if category:
                session.delete(category)
                session.commit()


__all__ = ["SQLModelCategoryRepository"]
