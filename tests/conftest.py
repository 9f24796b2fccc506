"""Pytest configuration and shared fixtures for Tallybook tests.

This module provides database fixtures, test data factories, and helper utilities
for testing the analytics engine, repositories, and services without touching the
real app database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from tallybook.config import TestConfig
from tallybook.context import create_app_context
from tallybook.models import Category, Transaction  # noqa: F401

USER_ID = "tester"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the ``Callable[[], ContextManager[Session]]`` shape."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def test_config(tmp_path, monkeypatch) -> TestConfig:
    """Configuration rooted in a temporary data directory."""

    monkeypatch.setenv("TALLYBOOK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TALLYBOOK_USER_ID", USER_ID)
    monkeypatch.delenv("TALLYBOOK_DATABASE_URL", raising=False)
    monkeypatch.delenv("TALLYBOOK_CHART_POINT_LIMIT", raising=False)
    monkeypatch.delenv("TALLYBOOK_RECOMMENDED_SAVINGS_RATE", raising=False)
    monkeypatch.delenv("TALLYBOOK_CURRENCY", raising=False)
    return TestConfig()


@pytest.fixture
def app_context(test_config):
    """Fully wired application context on a fresh database."""

    ctx = create_app_context(test_config)
    yield ctx
    ctx.require_engine().dispose()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def make_txn():
    """Build unsaved transactions for pure engine tests.

    Returns:
        Callable: Function returning a ``Transaction`` with sensible defaults
    """

    def _make(
        amount: float,
        txn_type: str = "expense",
        category: str = "Food",
        on: date | str = date(2024, 1, 15),
        notes: str = "",
    ) -> Transaction:
        if isinstance(on, str):
            on = date.fromisoformat(on)
        return Transaction(
            user_id=USER_ID,
            date=on,
            type=txn_type,
            category=category,
            amount=amount,
            notes=notes,
        )

    return _make


@pytest.fixture
def transaction_factory(session_factory, make_txn):
    """Factory for creating persisted test transactions."""

    def _create(amount: float, **kwargs) -> Transaction:
        txn = make_txn(amount, **kwargs)
        with session_factory() as session:
            session.add(txn)
            session.commit()
            session.refresh(txn)
            session.expunge(txn)
        return txn

    return _create


@pytest.fixture
def category_factory(session_factory):
    """Factory for creating persisted test categories.

    Returns:
        Callable: Function that creates and persists Category instances
    """

    def _create(
        name: str = "Food",
        category_type: str = "expense",
        budget: float | None = None,
        color: str = "#FF5733",
    ) -> Category:
        category = Category(
            user_id=USER_ID,
            name=name,
            type=category_type,
            budget=budget,
            color=color,
        )
        with session_factory() as session:
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
        return category

    return _create
