"""Reusable transaction templates."""

from __future__ import annotations

import datetime as dt
from typing import ClassVar

from sqlmodel import Field, SQLModel

from .transaction import new_id, utcnow


class TransactionTemplate(SQLModel, table=True):
    """Pre-filled transaction the user can stamp out on any date."""

    __tablename__: ClassVar[str] = "transaction_template"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(default="local", nullable=False, index=True, max_length=64)
    name: str = Field(nullable=False, max_length=64)
    type: str = Field(nullable=False, max_length=16)
    category: str = Field(nullable=False, max_length=64)
    amount: float = Field(default=0.0, nullable=False)
    notes: str = Field(default="", max_length=500)
    is_default: bool = Field(default=False, nullable=False)
    created_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: dt.datetime = Field(default_factory=utcnow, nullable=False)
