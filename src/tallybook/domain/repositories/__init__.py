"""Repository protocol definitions for domain layer."""

from .category import CategoryRepository
from .preferences import PreferenceStore
from .template import TemplateRepository
from .transaction import TransactionRepository

__all__ = [
    "CategoryRepository",
    "PreferenceStore",
    "TemplateRepository",
    "TransactionRepository",
]
