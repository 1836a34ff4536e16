"""Tests for the command-line entry point configuration."""

import pytest

from tictactoe.__main__ import resolve_log_level


@pytest.mark.parametrize(
    "value,expected",
    [(None, "INFO"), ("debug", "DEBUG"), (" Warning ", "WARNING"), ("ERROR", "ERROR")],
)
def test_known_log_levels(value, expected):
    assert resolve_log_level(value) == expected


@pytest.mark.parametrize("value", ["verbose", "", "warn", "NOTSET"])
def test_unknown_log_level_falls_back_to_info(value):
    assert resolve_log_level(value) == "INFO"
