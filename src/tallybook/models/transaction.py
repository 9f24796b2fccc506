"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

import datetime as dt
from typing import ClassVar
from uuid import uuid4

from sqlmodel import Field, SQLModel


def new_id() -> str:
    """Opaque identifier used for every stored row."""

    return uuid4().hex


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Transaction(SQLModel, table=True):
    """A single recorded money movement.

    ``amount`` is never negative; ``type`` decides whether it adds to or
    deducts from the balance.
    """

    __tablename__: ClassVar[str] = "transaction"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(default="local", nullable=False, index=True, max_length=64)
    date: dt.date = Field(nullable=False, index=True)
    type: str = Field(nullable=False, index=True, max_length=16)
    category: str = Field(nullable=False, index=True, max_length=64)
    amount: float = Field(nullable=False, description="Non-negative; sign comes from type")
    notes: str = Field(default="", max_length=500)
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
