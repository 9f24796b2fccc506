"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def list_categories(self, *, user_id: str) -> list[Category]:
        """List all categories."""
        ...

    def list_by_type(self, category_type: str, *, user_id: str) -> list[Category]:
        """List categories of one transaction type."""
        ...

    def get_by_id(self, category_id: str, *, user_id: str) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def get_by_name(self, name: str, category_type: str, *, user_id: str) -> Optional[Category]:
        """Retrieve a category by its (name, type) pair."""
        ...

    def create(self, category: Category, *, user_id: str) -> Category:
        """Create a new category."""
        ...

    def rename(self, category_id: str, new_name: str, *, user_id: str) -> Category:
        """Rename a category and relabel its transactions."""
        ...

    def merge(self, source_id: str, target_id: str, *, user_id: str) -> int:
        """Fold ``source`` into ``target``; returns relabelled transaction count."""
        ...

    def reassign(self, from_id: str, to_id: str, *, user_id: str) -> int:
        """Move transactions between two categories, keeping both."""
        ...

    def set_budget(self, category_id: str, budget: Optional[float], *, user_id: str) -> Category:
        """Update only the monthly budget of a category."""
        ...

    def delete(self, category_id: str, *, user_id: str) -> None:
        """Delete a category by ID."""
        ...
