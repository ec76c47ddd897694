"""Tests for YAML/env configuration loading."""

import os
import tempfile
import unittest

import pytest
import yaml

from taglog.config import (
    ConfigError, HandlerConfig, LoggerConfig, _parse_bool, _parse_mode,
    load_config, load_yaml_config, parse_handler,
)
from taglog.formatter import DEFAULT_FORMAT


class TestParseHelpers(unittest.TestCase):
    def test_true_values(self):
        for val in ("true", "True", "1", "yes", " YES ", True):
            self.assertTrue(_parse_bool(val), f"Expected True for {val!r}")

    def test_false_values(self):
        for val in ("false", "0", "no", "", False):
            self.assertFalse(_parse_bool(val), f"Expected False for {val!r}")

    def test_modes(self):
        self.assertEqual(_parse_mode(0o644, "m"), 0o644)
        self.assertEqual(_parse_mode("0644", "m"), 0o644)
        self.assertEqual(_parse_mode("0o755", "m"), 0o755)
        self.assertIsNone(_parse_mode(None, "m"))

    def test_bad_mode(self):
        with self.assertRaises(ConfigError):
            _parse_mode("rwx", "file_permission")

    def test_bare_decimal_mode_rejected(self):
        with self.assertRaises(ConfigError):
            _parse_mode(755, "file_permission")
        self.assertEqual(_parse_mode(0o777, "m"), 0o777)

    def test_unquoted_yaml_mode_rejected(self):
        data = yaml.safe_load("handlers:\n  - file_permission: 644\n")
        with self.assertRaises(ConfigError):
            load_config(data)


class TestDefaults(unittest.TestCase):
    def test_handler_defaults(self):
        cfg = HandlerConfig()
        self.assertEqual(cfg.type, "stream")
        self.assertEqual(cfg.streams, ("stdout",))
        self.assertIsNone(cfg.tags)
        self.assertEqual(cfg.format, DEFAULT_FORMAT)
        self.assertEqual(cfg.file_permission, 0o775)
        self.assertFalse(cfg.use_locking)
        self.assertTrue(cfg.bubble)

    def test_logger_defaults(self):
        cfg = LoggerConfig()
        self.assertEqual(len(cfg.handlers), 1)
        self.assertTrue(cfg.use_microseconds)
        self.assertIsNone(cfg.timezone)
        self.assertEqual(cfg.default_tag, "debug")

    def test_frozen(self):
        with self.assertRaises(AttributeError):
            LoggerConfig().default_tag = "x"


class TestLoadYamlConfig:
    def test_none_path(self):
        assert load_yaml_config(None) == {}

    def test_missing_file(self, tmp_path):
        assert load_yaml_config(str(tmp_path / "nope.yml")) == {}

    def test_reads_mapping(self, tmp_path):
        path = tmp_path / "taglog.yml"
        path.write_text(yaml.dump({"timezone": "UTC"}))
        assert load_yaml_config(str(path)) == {"timezone": "UTC"}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_yaml_config(str(path)) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("handlers: [unclosed")
        with pytest.raises(ConfigError):
            load_yaml_config(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_yaml_config(str(path))


class TestParseHandler:
    def test_full_entry(self):
        cfg = parse_handler({
            "type": "Stream",
            "streams": ["./logs", "stderr"],
            "tags": {"cron": ["ERROR", "CRITICAL"]},
            "format": "%message%\n",
            "file_permission": "0640",
            "dir_permission": 0o700,
            "use_locking": "yes",
            "bubble": False,
        })
        assert cfg.type == "stream"
        assert cfg.streams == ("./logs", "stderr")
        assert cfg.tags == {"cron": ["ERROR", "CRITICAL"]}
        assert cfg.format == "%message%\n"
        assert cfg.file_permission == 0o640
        assert cfg.dir_permission == 0o700
        assert cfg.use_locking is True
        assert cfg.bubble is False

    def test_single_stream_string(self):
        assert parse_handler({"streams": "stderr"}).streams == ("stderr",)

    def test_event_handler(self):
        assert parse_handler({"type": "event"}).type == "event"

    def test_unknown_type(self):
        with pytest.raises(ConfigError):
            parse_handler({"type": "syslog"})

    def test_bad_tags(self):
        with pytest.raises(ConfigError):
            parse_handler({"tags": ["cron"]})

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            parse_handler("stream")


class TestLoadConfig:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for key in ("TAGLOG_MICROSECONDS", "TAGLOG_TIMEZONE", "TAGLOG_DEFAULT_TAG"):
            monkeypatch.delenv(key, raising=False)

    def test_empty_yaml_uses_defaults(self):
        assert load_config({}) == LoggerConfig()
        assert load_config(None) == LoggerConfig()

    def test_values_from_yaml(self):
        cfg = load_config({
            "use_microseconds": False,
            "timezone": "UTC",
            "default_tag": "app",
            "level_tags": {"error": "errors"},
            "handlers": [{"type": "event"}, {"streams": ["stderr"]}],
        })
        assert cfg.use_microseconds is False
        assert cfg.timezone == "UTC"
        assert cfg.default_tag == "app"
        assert cfg.level_tags == {"error": "errors"}
        assert [h.type for h in cfg.handlers] == ["event", "stream"]

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("TAGLOG_MICROSECONDS", "false")
        monkeypatch.setenv("TAGLOG_TIMEZONE", "Europe/Paris")
        monkeypatch.setenv("TAGLOG_DEFAULT_TAG", "svc")
        cfg = load_config({"use_microseconds": True, "timezone": "UTC"})
        assert cfg.use_microseconds is False
        assert cfg.timezone == "Europe/Paris"
        assert cfg.default_tag == "svc"

    def test_empty_handler_list(self):
        assert load_config({"handlers": []}).handlers == ()

    def test_handlers_must_be_list(self):
        with pytest.raises(ConfigError):
            load_config({"handlers": {"type": "event"}})

    def test_level_tags_must_be_mapping(self):
        with pytest.raises(ConfigError):
            load_config({"level_tags": ["error"]})

    def test_round_trip_through_file(self):
        data = {"handlers": [{"type": "stream", "streams": ["stdout"], "use_locking": True}]}
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as f:
            yaml.dump(data, f)
            temp_path = f.name
        try:
            cfg = load_config(load_yaml_config(temp_path))
            assert cfg.handlers[0].use_locking is True
        finally:
            os.unlink(temp_path)
