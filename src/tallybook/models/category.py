"""Ledger category definitions."""

from __future__ import annotations

import datetime as dt
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from .transaction import new_id


class Category(SQLModel, table=True):
    """User-defined label grouping transactions of one type."""

    __tablename__: ClassVar[str] = "category"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(default="local", nullable=False, index=True, max_length=64)
    name: str = Field(nullable=False, index=True, max_length=64)
    type: str = Field(default="expense", nullable=False, max_length=16)
    description: Optional[str] = Field(default=None, max_length=255)
    budget: Optional[float] = Field(default=None, description="Monthly limit, if any")
    color: Optional[str] = Field(default=None, max_length=7)
    is_default: bool = Field(default=False, nullable=False)
    usage_count: int = Field(default=0, nullable=False)
    last_used: Optional[dt.date] = Field(default=None)
