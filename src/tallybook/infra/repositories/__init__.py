"""Concrete repository implementations using SQLModel."""

from .category import SQLModelCategoryRepository
from .settings import SQLModelSettingsRepository
from .template import SQLModelTemplateRepository
from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelCategoryRepository",
    "SQLModelSettingsRepository",
    "SQLModelTemplateRepository",
    "SQLModelTransactionRepository",
]
