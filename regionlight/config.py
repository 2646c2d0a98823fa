"""Persistent JSON config helpers.

Stores the interpreter command, default formatter, tab width and view style.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import shlex
from pathlib import Path

from platformdirs import user_config_dir

from .codegen import DEFAULT_TAB_WIDTH
from .oracle import default_interpreter_command
from .session import DEFAULT_FORMATTER

APP_NAME = "regionlight"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STYLE = "monokai"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _load_name(key: str, default: str) -> str:
    value = load_config().get(key)
    if not isinstance(value, str):
        return default
    stripped = value.strip()
    return stripped if stripped else default


def parse_interpreter(value: object) -> list[str] | None:
    """Normalize a shell-style string or list of strings into an argv list."""
    if isinstance(value, str):
        try:
            argv = shlex.split(value)
        except ValueError:
            return None
        return argv or None
    if isinstance(value, list) and value and all(isinstance(part, str) and part for part in value):
        return list(value)
    return None


def load_interpreter() -> list[str]:
    """Return the interpreter argv used for oracle queries and generated scripts.

    The command must read its program from stdin; the default is the running
    Python with ``-``.
    """
    return parse_interpreter(load_config().get("interpreter")) or default_interpreter_command()


def load_default_formatter() -> str:
    return _load_name("default_formatter", DEFAULT_FORMATTER)


def save_default_formatter(alias: str) -> None:
    stripped = str(alias).strip()
    if not stripped:
        return
    config = load_config()
    config["default_formatter"] = stripped
    save_config(config)


def load_tab_width() -> int:
    """Return the tab width used when embedding selections.

    Booleans, non-integers and values below 1 fall back to the default.
    """
    value = load_config().get("tab_width")
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return DEFAULT_TAB_WIDTH
    return value


def load_style() -> str:
    """Pygments style used to colorize views in the terminal."""
    return _load_name("style", DEFAULT_STYLE)
