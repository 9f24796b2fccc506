"""Tallybook personal finance tracking package."""

from __future__ import annotations

from .config import BaseConfig
from .context import create_app_context

__all__ = ["BaseConfig", "create_app_context"]
