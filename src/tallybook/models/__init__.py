"""SQLModel table exports."""

from .category import Category
from .settings import AppSetting
from .template import TransactionTemplate
from .transaction import Transaction

__all__ = [
    "AppSetting",
    "Category",
    "Transaction",
    "TransactionTemplate",
]
