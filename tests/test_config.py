"""Tests for the config module."""
import json

from habit_hero.config import (
    DEFAULT_BACKFILL_DAYS,
    get_backfill_days,
    get_log_level,
    get_username,
    load_config,
    save_config,
    set_username,
)


class TestLoadConfig:
    def test_missing_file_returns_empty(self, tmp_path):
        assert load_config(tmp_path / "nonexistent.json") == {}

    def test_invalid_json_returns_empty(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")
        assert load_config(path) == {}

    def test_non_object_returns_empty(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_config(path) == {}

    def test_loads_valid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"key": "value"}', encoding="utf-8")
        assert load_config(path) == {"key": "value"}


class TestSaveConfig:
    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "sub" / "dir" / "config.json"
        save_config({"nested": True}, path)
        assert json.loads(path.read_text()) == {"nested": True}

    def test_overwrites_existing(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"v": 1}, path)
        save_config({"v": 2}, path)
        assert json.loads(path.read_text()) == {"v": 2}


class TestUsername:
    def test_not_set_returns_none(self, tmp_path):
        assert get_username(tmp_path / "config.json") is None

    def test_set_and_get(self, tmp_path):
        path = tmp_path / "config.json"
        set_username("alice", path)
        assert get_username(path) == "alice"

    def test_preserves_other_keys(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"backfill_days": 3}, path)
        set_username("alice", path)
        assert load_config(path) == {"backfill_days": 3, "username": "alice"}

    def test_blank_username_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"username": "  "}, path)
        assert get_username(path) is None


class TestBackfillDays:
    def test_default(self, tmp_path):
        assert get_backfill_days(tmp_path / "config.json") == DEFAULT_BACKFILL_DAYS

    def test_configured(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"backfill_days": 7}, path)
        assert get_backfill_days(path) == 7

    def test_invalid_falls_back(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"backfill_days": "lots"}, path)
        assert get_backfill_days(path) == DEFAULT_BACKFILL_DAYS

    def test_negative_falls_back(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"backfill_days": -2}, path)
        assert get_backfill_days(path) == DEFAULT_BACKFILL_DAYS


class TestLogLevel:
    def test_default(self, tmp_path):
        assert get_log_level(tmp_path / "config.json") == "WARNING"

    def test_uppercased(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"log_level": "debug"}, path)
        assert get_log_level(path) == "DEBUG"

    def test_unknown_level_falls_back(self, tmp_path):
        path = tmp_path / "config.json"
        save_config({"log_level": "chatty"}, path)
        assert get_log_level(path) == "WARNING"
