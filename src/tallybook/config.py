"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default: float, cast=float):
    """Read a numeric environment variable, rejecting garbage early."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric, got {raw!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Tallybook"
    DB_FILENAME = "tallybook.db"
    TESTING = False

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("TALLYBOOK_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("TALLYBOOK_DATABASE_URL", self._build_sqlite_url())
        self.USER_ID = os.getenv("TALLYBOOK_USER_ID", "local").strip() or "local"
        self.CURRENCY = os.getenv("TALLYBOOK_CURRENCY", "INR").strip().upper()[:3] or "INR"
        self.CHART_POINT_LIMIT = _env_number("TALLYBOOK_CHART_POINT_LIMIT", 30, int)
        self.RECOMMENDED_SAVINGS_RATE = _env_number("TALLYBOOK_RECOMMENDED_SAVINGS_RATE", 0.3)
        if self.CHART_POINT_LIMIT < 1:
            raise ValueError("TALLYBOOK_CHART_POINT_LIMIT must be at least 1.")
        if not 0 <= self.RECOMMENDED_SAVINGS_RATE <= 1:
            raise ValueError("TALLYBOOK_RECOMMENDED_SAVINGS_RATE must be between 0 and 1.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file, logs and exports live."""

        data_root = os.getenv("TALLYBOOK_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            fallback_path = Path.home() / ".local" / "share" / self.APP_NAME.lower()
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    @property
    def export_dir(self) -> Path:
        path = self.DATA_DIR / "exports"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
        return engine_options


class TestConfig(BaseConfig):
    """Configuration for the test-suite with a quiet console."""

    TESTING = True
    __test__ = False

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False
