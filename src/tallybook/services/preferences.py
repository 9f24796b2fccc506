"""Per-user display preferences kept in a :class:`PreferenceStore`."""

from __future__ import annotations

import json
import logging
import re
from typing import Optional

from ..domain.repositories.preferences import PreferenceStore
from .filters import FilterPreset, FilterSpec

logger = logging.getLogger(__name__)

SHOW_VALUES_KEY = "show_values"
LAST_FILTER_KEY = "last_filter"
CUSTOM_PRESETS_KEY = "custom_presets"


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class PreferenceService:
    """Typed accessors over a string key/value store, namespaced by user."""

    def __init__(self, store: PreferenceStore, *, user_id: str = "local"):
        self.store = store
        self.user_id = user_id

    def _key(self, name: str) -> str:
        return f"{self.user_id}:{name}"

    def _load_json(self, name: str):
        raw = self.store.get_value(self._key(name))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt preference", extra={"key": name})
            return None

    # -- value visibility --------------------------------------------------

    @property
    def show_values(self) -> bool:
        raw = self.store.get_value(self._key(SHOW_VALUES_KEY))
        return raw is None or raw.lower() == "true"

    def set_show_values(self, visible: bool) -> None:
        self.store.set_value(self._key(SHOW_VALUES_KEY), "true" if visible else "false")

    def toggle_values(self) -> bool:
        visible = not self.show_values
        self.set_show_values(visible)
        return visible

    # -- filters -----------------------------------------------------------

    def load_last_filter(self) -> FilterSpec:
        data = self._load_json(LAST_FILTER_KEY)
        if not isinstance(data, dict):
            return FilterSpec()
        try:
            return FilterSpec.from_dict(data)
        except (TypeError, ValueError):
            logger.warning("Stored filter no longer valid, using defaults")
            return FilterSpec()

    def save_last_filter(self, spec: FilterSpec) -> None:
        self.store.set_value(self._key(LAST_FILTER_KEY), json.dumps(spec.to_dict()))

    def list_custom_presets(self) -> list[FilterPreset]:
        data = self._load_json(CUSTOM_PRESETS_KEY) or []
        return [
            FilterPreset(item["id"], item["name"], item.get("description", ""), item["fields"])
            for item in data
            if isinstance(item, dict) and {"id", "name", "fields"} <= item.keys()
        ]

    def save_custom_preset(
        self, name: str, spec: FilterSpec, *, description: str = ""
    ) -> FilterPreset:
        """Store ``spec`` as a named preset, replacing any preset with the same id."""

        preset_id = _slugify(name)
        if not preset_id:
            raise ValueError("Preset name is required")
        fields = {k: v for k, v in spec.to_dict().items() if v != FilterSpec().to_dict()[k]}
        preset = FilterPreset(preset_id, name.strip(), description, fields)
        presets = [p for p in self.list_custom_presets() if p.id != preset_id]
        presets.append(preset)
        self._save_presets(presets)
        return preset

    def delete_custom_preset(self, preset_id: str) -> bool:
        presets = self.list_custom_presets()
        remaining = [p for p in presets if p.id != preset_id]
        if len(remaining) == len(presets):
            return False
        self._save_presets(remaining)
        return True

    def _save_presets(self, presets: list[FilterPreset]) -> None:
        payload = [
            {"id": p.id, "name": p.name, "description": p.description, "fields": dict(p.fields)}
            for p in presets
        ]
        self.store.set_value(self._key(CUSTOM_PRESETS_KEY), json.dumps(payload))


class MemoryPreferenceStore:
    """Dict-backed store for scripts and tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get_value(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_value(self, key: str, value: str) -> None:
        self._values[key] = value
