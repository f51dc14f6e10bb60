"""Durable view settings (the active tab) and their storage backends."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fleetsync._constants import DEFAULT_TAB, VIEW_SETTINGS_KEY, TabId

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """String key/value store, shaped like browser local storage."""

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Process-lifetime storage, mainly for tests and ephemeral controllers."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStorage:
    """Storage backed by one JSON object file, one string value per key.

    An unreadable file reads as empty; the next write replaces it.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _read_all(self) -> dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError):
            _logger.debug("Ignoring unreadable storage file %s", self._path, exc_info=True)
            return {}
        if not isinstance(data, dict):
            return {}
        return {key: value for key, value in data.items() if isinstance(value, str)}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, indent=2, sort_keys=True), encoding="utf-8")
        tmp.replace(self._path)


class ViewSettings(BaseModel):
    """User-chosen view state persisted across sessions."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    active_tab: TabId = Field(default=DEFAULT_TAB, alias="activeTab")
    filters: dict[str, Any] = Field(default_factory=dict)
    """Reserved for table filters; not interpreted yet."""


def _decode(raw: str) -> ViewSettings | None:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    # Older dashboards stored the tab as ``currentTab``.
    if "activeTab" not in data and "currentTab" in data:
        data = {**data, "activeTab": data["currentTab"]}
    if not isinstance(data.get("filters", {}), dict):
        data = {**data, "filters": {}}
    try:
        return ViewSettings.model_validate(data)
    except ValidationError:
        return None


def load_view_settings(storage: KeyValueStorage) -> ViewSettings:
    """Restore saved settings; missing or corrupt entries yield defaults."""
    try:
        raw = storage.get_item(VIEW_SETTINGS_KEY)
    except OSError:
        _logger.debug("View settings storage unreadable; using defaults", exc_info=True)
        return ViewSettings()
    if raw is None:
        return ViewSettings()
    settings = _decode(raw)
    if settings is None:
        _logger.debug("Discarding corrupt view settings: %.200s", raw)
        return ViewSettings()
    return settings


def save_view_settings(storage: KeyValueStorage, settings: ViewSettings) -> None:
    storage.set_item(VIEW_SETTINGS_KEY, settings.model_dump_json(by_alias=True))
