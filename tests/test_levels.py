"""Tests for the level registry."""

import pytest

from taglog.levels import (
    ALERT, CRITICAL, DEBUG, EMERGENCY, ERROR, INFO, LEVELS, NOTICE, WARNING,
    get_levels, level_name, level_rank, resolve_level,
)


class TestLevelTable:
    def test_table_matches_rfc5424(self):
        assert get_levels() == {
            0: "EMERGENCY", 1: "ALERT", 2: "CRITICAL", 3: "ERROR",
            4: "WARNING", 5: "NOTICE", 6: "INFO", 7: "DEBUG",
        }

    def test_ranks_are_ordered_by_severity(self):
        assert EMERGENCY < ALERT < CRITICAL < ERROR < WARNING < NOTICE < INFO < DEBUG

    def test_get_levels_returns_copy(self):
        levels = get_levels()
        levels[99] = "TRACE"
        assert 99 not in LEVELS


class TestLevelRank:
    @pytest.mark.parametrize("name,expected", [
        ("error", ERROR),
        ("ERROR", ERROR),
        ("Error", ERROR),
        ("  warning ", WARNING),
        ("emergency", EMERGENCY),
        ("notice", NOTICE),
        ("info", INFO),
    ])
    def test_case_insensitive(self, name, expected):
        assert level_rank(name) == expected

    @pytest.mark.parametrize("default", [EMERGENCY, ERROR, DEBUG, 42])
    def test_unknown_name_returns_default(self, default):
        assert level_rank("bogus", default) == default

    def test_default_is_debug(self):
        assert level_rank("trace") == DEBUG

    def test_non_string_returns_default(self):
        assert level_rank(None, ALERT) == ALERT


class TestLevelName:
    def test_known(self):
        assert level_name(CRITICAL) == "CRITICAL"

    @pytest.mark.parametrize("rank", [-1, 8, 100])
    def test_out_of_range(self, rank):
        assert level_name(rank) == "UNKNOWN_LEVEL"


class TestResolveLevel:
    def test_rank_passes_through(self):
        assert resolve_level(ERROR) == ERROR
        assert resolve_level(12) == 12

    def test_name_is_looked_up(self):
        assert resolve_level("critical") == CRITICAL

    def test_unknown_name_uses_default(self):
        assert resolve_level("nope", default=INFO) == INFO

    def test_bool_is_not_a_rank(self):
        assert resolve_level(True, default=NOTICE) == NOTICE

    def test_digit_string_is_a_rank(self):
        assert resolve_level("3") == ERROR
        assert resolve_level(" 6 ") == INFO
        assert resolve_level("12") == 12
