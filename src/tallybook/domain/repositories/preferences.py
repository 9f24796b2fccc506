"""Preference storage protocol."""

from __future__ import annotations

from typing import Optional, Protocol


class PreferenceStore(Protocol):
    """Minimal string key/value store backing user preferences."""

    def get_value(self, key: str) -> Optional[str]:
        """Return the stored value or ``None`` when unset."""
        ...

    def set_value(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key``."""
        ...
