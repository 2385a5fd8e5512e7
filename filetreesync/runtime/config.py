"""Persistent JSON config helpers.

Stores the UI theme, size-label preference, and per-project expanded
directories. All access is defensive: malformed or missing config falls
back safely.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from platformdirs import user_config_dir

from ..paths import normalize_path

APP_NAME = "filetreesync"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so an unwritable config never breaks a run.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def load_theme_name() -> str | None:
    """Return the persisted theme name, if it is a non-empty string."""
    value = load_config().get("theme")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def save_theme_name(name: str) -> None:
    config = load_config()
    config["theme"] = name
    save_config(config)


def load_show_size_labels() -> bool:
    """Return persisted size-label preference; only explicit booleans count."""
    value = load_config().get("show_size_labels")
    return value if isinstance(value, bool) else True


def save_show_size_labels(show_size_labels: bool) -> None:
    config = load_config()
    config["show_size_labels"] = bool(show_size_labels)
    save_config(config)


def load_expanded_paths(project_root: str) -> set[str]:
    """Return expanded directory paths recorded for ``project_root``.

    Non-string items and a malformed ``expanded_by_root`` mapping are ignored.
    """
    by_root = load_config().get("expanded_by_root")
    if not isinstance(by_root, dict):
        return set()
    raw_paths = by_root.get(normalize_path(project_root))
    if not isinstance(raw_paths, list):
        return set()
    expanded: set[str] = set()
    for raw_path in raw_paths:
        if not isinstance(raw_path, str):
            continue
        path = normalize_path(raw_path)
        if path:
            expanded.add(path)
    return expanded


def save_expanded_paths(project_root: str, paths: Iterable[str]) -> None:
    """Persist expanded directory paths for ``project_root`` in sorted order."""
    config = load_config()
    by_root = config.get("expanded_by_root")
    if not isinstance(by_root, dict):
        by_root = {}
    normalized = sorted({normalize_path(path) for path in paths if isinstance(path, str) and path})
    by_root[normalize_path(project_root)] = normalized
    config["expanded_by_root"] = by_root
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_theme_name",
    "save_theme_name",
    "load_show_size_labels",
    "save_show_size_labels",
    "load_expanded_paths",
    "save_expanded_paths",
]
