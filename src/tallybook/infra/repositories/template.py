"""SQLModel implementation of the template repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.template import TransactionTemplate
from ..database import SessionFactory


class SQLModelTemplateRepository:
    """SQLModel-based template repository."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def list_all(self, *, user_id: str) -> list[TransactionTemplate]:
        with self.session_factory() as session:
            statement = (
                select(TransactionTemplate)
                .where(TransactionTemplate.user_id == user_id)
                .order_by(TransactionTemplate.is_default.desc(), TransactionTemplate.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_by_name(self, name: str, *, user_id: str) -> Optional[TransactionTemplate]:
        with self.session_factory() as session:
            obj = session.exec(
                select(TransactionTemplate)
                .where(TransactionTemplate.user_id == user_id)
                .where(TransactionTemplate.name == name)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, template: TransactionTemplate, *, user_id: str) -> TransactionTemplate:
        with self.session_factory() as session:
            template.user_id = user_id
            session.add(template)
            session.commit()
            session.refresh(template)
            session.expunge(template)
            return template

    def delete(self, template_id: str, *, user_id: str) -> None:
        with self.session_factory() as session:
            template = session.exec(
                select(TransactionTemplate)
                .where(TransactionTemplate.id == template_id)
                .where(TransactionTemplate.user_id == user_id)
            ).first()
            if template:
                session.delete(template)
                session.commit()


__all__ = ["SQLModelTemplateRepository"]
