"""Configuration file management for habit-hero.

Reads and writes ~/.habit-hero/config.json for session preferences. Challenge
data is never written here; it lives only in the session's memory.
"""
from __future__ import annotations

import json
from pathlib import Path

DEFAULT_CONFIG_PATH: Path = Path.home() / ".habit-hero" / "config.json"
DEFAULT_BACKFILL_DAYS = 1
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def get_username(config_path: Path | None = None) -> str | None:
    """Return the default session username, or None if not set."""
    raw = load_config(config_path).get("username")
    if isinstance(raw, str) and raw.strip():
        return raw
    return None


def set_username(username: str, config_path: Path | None = None) -> None:
    """Persist the default username to config."""
    config = load_config(config_path)
    config["username"] = username
    save_config(config, config_path)


def get_backfill_days(config_path: Path | None = None) -> int:
    """How many days before today a check-in may be recorded for (default 1)."""
    raw = load_config(config_path).get("backfill_days", DEFAULT_BACKFILL_DAYS)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_BACKFILL_DAYS
    return value if value >= 0 else DEFAULT_BACKFILL_DAYS


def get_log_level(config_path: Path | None = None) -> str:
    raw = load_config(config_path).get("log_level")
    if isinstance(raw, str) and raw.strip().upper() in LOG_LEVELS:
        return raw.strip().upper()
    return DEFAULT_LOG_LEVEL
