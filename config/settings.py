"""JSON-backed configuration for the network ticket printer service.

Values from the environment (or a ``.env`` file) override the JSON file in
memory only; they are never written back by :func:`save_all`.
"""

from __future__ import annotations

import json
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

from dotenv import load_dotenv

_DEFAULT_CONFIG_FILE = Path(__file__).with_name("temp.settings.json")

_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "PRINTER": {
        "host": "192.168.1.100",
        "port": 9100,
        "timeout": 10
    },
    "LAYOUT": {
        "profile": "classic"
    },
    "SERVICE": {
        "host": "0.0.0.0",
        "port": 3000,
        "debug": False,
        "log_level": "INFO"
    }
}

# env var -> (section, key, parser)
_ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "PRINTER_IP": ("PRINTER", "host", str),
    "PRINTER_PORT": ("PRINTER", "port", int),
    "PRINTER_TIMEOUT": ("PRINTER", "timeout", float),
    "TICKET_PROFILE": ("LAYOUT", "profile", str),
    "SERVICE_PORT": ("SERVICE", "port", int),
    "LOG_LEVEL": ("SERVICE", "log_level", str),
}

_DATA: Dict[str, Dict[str, Any]] = {}


def _config_file() -> Path:
    override = os.environ.get("PRINTER_SETTINGS_FILE")
    return Path(override) if override else _DEFAULT_CONFIG_FILE


def _ensure_config_file() -> None:
    if not _config_file().exists():
        _write_config(_DEFAULTS)


def _merge_with_defaults(raw: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    merged: Dict[str, Dict[str, Any]] = {}
    for section, defaults in _DEFAULTS.items():
        section_values: Dict[str, Any] = deepcopy(defaults)
        incoming = raw.get(section)
        if isinstance(incoming, dict):
            section_values.update(incoming)
        merged[section] = section_values
    return merged


def _apply_env_overrides(data: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    result = deepcopy(data)
    for env_name, (section, key, parser) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value in (None, ""):
            continue
        try:
            result[section][key] = parser(value)
        except ValueError as exc:
            raise ValueError(f"Invalid value for {env_name}: {value!r}") from exc
    return result


def _load_config() -> Dict[str, Dict[str, Any]]:
    _ensure_config_file()
    with _config_file().open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    return _merge_with_defaults(raw)


def _write_config(data: Dict[str, Dict[str, Any]]) -> None:
    path = _config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, indent=2, ensure_ascii=False)


def _refresh_globals(new_data: Dict[str, Dict[str, Any]]) -> None:
    global PRINTER, LAYOUT, SERVICE, _DATA
    _DATA = _apply_env_overrides(new_data)
    PRINTER = deepcopy(_DATA["PRINTER"])
    LAYOUT = deepcopy(_DATA["LAYOUT"])
    SERVICE = deepcopy(_DATA["SERVICE"])


def reload() -> None:
    """Reload settings from disk and the environment."""
    load_dotenv()
    config = _load_config()
    _refresh_globals(config)


def get_all() -> Dict[str, Dict[str, Any]]:
    """Return a copy of the full configuration tree."""
    return deepcopy(_DATA)


def get_defaults() -> Dict[str, Dict[str, Any]]:
    """Return a copy of the default configuration values."""
    return deepcopy(_DEFAULTS)


def save_all(data: Dict[str, Dict[str, Any]]) -> None:
    """Persist the provided configuration tree and refresh module globals."""
    merged = _merge_with_defaults(data)
    _write_config(merged)
    _refresh_globals(merged)


def update_section(section: str, values: Dict[str, Any]) -> None:
    """Update a specific configuration section and persist it."""
    current = _load_config()
    if section not in current:
        raise KeyError(f"Unknown settings section: {section}")
    current[section].update(values)
    save_all(current)


reload()

__all__ = [
    "PRINTER",
    "LAYOUT",
    "SERVICE",
    "reload",
    "get_all",
    "get_defaults",
    "save_all",
    "update_section",
]
