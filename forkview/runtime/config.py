"""Persistent JSON config helpers.

Stores the preferred sort mode, UI theme, and network retry settings.
Malformed or missing config falls back to built-in defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..models import SortMode, coerce_sort_mode

logger = logging.getLogger(__name__)

APP_NAME = "forkview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError):
        logger.warning("ignoring unreadable config at %s", CONFIG_PATH, exc_info=True)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never interrupts browsing.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        logger.warning("unable to write config to %s", CONFIG_PATH, exc_info=True)


def load_sort_mode() -> SortMode | None:
    """Return the persisted sort mode, or ``None`` when unset."""
    value = load_config().get("sort")
    if not isinstance(value, str) or not value.strip():
        return None
    return coerce_sort_mode(value)


def save_sort_mode(mode: SortMode) -> None:
    config = load_config()
    if config.get("sort") == mode.value:
        return
    config["sort"] = mode.value
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _load_number(key: str, minimum: float) -> float | None:
    value = load_config().get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < minimum:
        return None
    return value


def load_retries() -> int | None:
    """Load the persisted retry count for transient network failures."""
    value = _load_number("retries", 0)
    return None if value is None else int(value)


def load_timeout() -> float | None:
    """Load the persisted per-request timeout in seconds."""
    value = _load_number("timeout", 0.001)
    return None if value is None else float(value)
