"""Transaction template repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.template import TransactionTemplate


class TemplateRepository(Protocol):
    """Repository for saved transaction templates."""

    def list_all(self, *, user_id: str) -> list[TransactionTemplate]:
        ...

    def get_by_name(self, name: str, *, user_id: str) -> Optional[TransactionTemplate]:
        ...

    def create(self, template: TransactionTemplate, *, user_id: str) -> TransactionTemplate:
        ...

    def delete(self, template_id: str, *, user_id: str) -> None:
        ...
