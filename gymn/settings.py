"""Utility functions for loading and saving user settings.

The settings are stored as a list of dictionaries to preserve order.
Each dictionary contains ``key``, ``value`` and ``type`` entries.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

# Path to the JSON file where settings are persisted.
SETTINGS_PATH = Path(__file__).resolve().parents[1] / "data" / "settings.json"

# Default settings to initialize the file on first run. An empty ``db_path``
# means the bundled default location.
DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    {"key": "db_path", "value": "", "type": "str"},
    {"key": "tick_interval", "value": 1.0, "type": "float"},
]

# Cache of loaded settings keyed by file path so each file is read once.
_settings_cache: Dict[Path, List[Dict[str, Any]]] = {}


def _defaults() -> List[Dict[str, Any]]:
    return [dict(item) for item in DEFAULT_SETTINGS]


def load_settings(path: Path = SETTINGS_PATH) -> List[Dict[str, Any]]:
    """Load settings from ``path`` or create it with the defaults.

    Keys added to :data:`DEFAULT_SETTINGS` since the file was written are
    appended with their default value.
    """
    path = Path(path)
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError):
            logging.exception("Could not read settings from %s, using defaults", path)
        else:
            if isinstance(data, list):
                known = {item.get("key") for item in data if isinstance(item, dict)}
                data.extend(d for d in _defaults() if d["key"] not in known)
                return data
            logging.warning("Ignoring malformed settings file %s", path)
    settings = _defaults()
    save_settings(settings, path)
    return settings


def save_settings(settings: List[Dict[str, Any]], path: Path = SETTINGS_PATH) -> None:
    """Persist ``settings`` to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(settings, fh)


def get_settings(path: Path = SETTINGS_PATH) -> List[Dict[str, Any]]:
    """Return the cached settings list, loading from disk if needed."""
    path = Path(path)
    if path not in _settings_cache:
        _settings_cache[path] = load_settings(path)
    return _settings_cache[path]


def clear_cache() -> None:
    _settings_cache.clear()


def get_value(key: str, path: Path = SETTINGS_PATH) -> Any:
    """Fetch the value associated with ``key``."""
    for item in get_settings(path):
        if item.get("key") == key:
            return item.get("value")
    return None


def set_value(key: str, value: Any, path: Path = SETTINGS_PATH) -> None:
    """Update ``key`` with ``value`` and persist the change."""
    settings = get_settings(path)
    for item in settings:
        if item.get("key") == key:
            item["value"] = value
            break
    else:
        settings.append({"key": key, "value": value, "type": type(value).__name__})
    save_settings(settings, path)
