"""Settings repository for app-level key/value pairs."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.settings import AppSetting
from ..database import SessionFactory


class SQLModelSettingsRepository:
    """SQLModel-based settings repository.

    Also satisfies the ``PreferenceStore`` protocol via ``get_value``/``set_value``.
    """

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[AppSetting]:
        with self.session_factory() as session:
            setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
            if setting:
                session.expunge(setting)
            return setting

    def set(self, key: str, value: str, description: str | None = None) -> AppSetting:
        with self.session_factory() as session:
            setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
            if setting:
                setting.value = value
                if description is not None:
                    setting.description = description
            else:
                setting = AppSetting(key=key, value=value, description=description)
            session.add(setting)
            session.commit()
            session.refresh(setting)
            session.expunge(setting)
            return setting

    def delete(self, key: str) -> None:
        with self.session_factory() as session:
            setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
            if setting:
                session.delete(setting)
                session.commit()

    def get_value(self, key: str) -> Optional[str]:
        setting = self.get(key)
        return setting.value if setting else None

    def set_value(self, key: str, value: str) -> None:
        self.set(key, value)


__all__ = ["SQLModelSettingsRepository"]
