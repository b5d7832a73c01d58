"""JSON config helpers.

Holds the documentation roots to index and the default result limit.
All access is defensive: malformed or missing config falls back safely.
The index itself never writes config.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "docindex"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_RESULT_LIMIT = 200


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_shard_roots() -> list[Path]:
    """Return configured documentation roots.

    Non-string and blank items are dropped; ``~`` is expanded.
    """
    value = load_config().get("shard_roots")
    if not isinstance(value, list):
        return []
    roots: list[Path] = []
    for item in value:
        if not isinstance(item, str):
            continue
        stripped = item.strip()
        if stripped:
            roots.append(Path(stripped).expanduser())
    return roots


def load_result_limit() -> int:
    """Return the configured result limit.

    Booleans, non-integers and values below 1 fall back to
    ``DEFAULT_RESULT_LIMIT``.
    """
    value = load_config().get("result_limit")
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return DEFAULT_RESULT_LIMIT
    return value
