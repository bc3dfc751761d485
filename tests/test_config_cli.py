"""
Pytest tests for settings validation and command-line overrides.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from interop_counter.cli import build_parser, config_from_args, run
from interop_counter.config import Config
from interop_counter.models import TimeWindow


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("MAX_CAPACITY", "DEFAULT_WINDOW", "LOG_LEVEL", "DESTINATION_CHAIN_ID"):
        monkeypatch.delenv(f"INTEROP_COUNTER_{name}", raising=False)


# --- Config ---


def test_defaults():
    config = Config()
    assert config.source_chain_id == 901
    assert config.destination_chain_id == 902
    assert config.destination_rpc_url.startswith("ws://")
    assert config.max_capacity == 100
    assert config.window is TimeWindow.LAST_HOUR
    assert config.dedupe_events is True
    assert config.log_level == "INFO"


@pytest.mark.parametrize(
    "values",
    [
        {"max_capacity": 0},
        {"max_event_logs": -1},
        {"default_window": "30d"},
        {"receipt_timeout": 0},
        {"log_level": "chatty"},
        {"unknown_option": True},
    ],
)
def test_invalid_values_are_rejected(values):
    with pytest.raises(ValidationError):
        Config(**values)


def test_log_level_is_normalized():
    assert Config(log_level="debug").log_level == "DEBUG"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("INTEROP_COUNTER_MAX_CAPACITY", "25")
    monkeypatch.setenv("INTEROP_COUNTER_DEFAULT_WINDOW", "7d")

    config = Config()

    assert config.max_capacity == 25
    assert config.window is TimeWindow.LAST_WEEK


# --- CLI ---


def test_config_from_args_only_passes_given_flags():
    args = build_parser().parse_args(["--capacity", "50", "-w", "24h", "-l", "debug"])
    config = config_from_args(args)

    assert config.max_capacity == 50
    assert config.window is TimeWindow.LAST_DAY
    assert config.log_level == "DEBUG"
    assert config.destination_chain_id == 902


def test_parser_rejects_unknown_window():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--window", "30d"])


def test_run_exits_on_invalid_config(capsys):
    with pytest.raises(SystemExit) as excinfo:
        run(["--capacity", "0"])

    assert excinfo.value.code == 2
    assert "Invalid configuration" in capsys.readouterr().err
