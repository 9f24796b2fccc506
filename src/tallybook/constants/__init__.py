"""Shared constants."""

from .categories import ALL, DEFAULT_CATEGORIES, TRANSACTION_TYPES, TransactionType

__all__ = ["ALL", "DEFAULT_CATEGORIES", "TRANSACTION_TYPES", "TransactionType"]
