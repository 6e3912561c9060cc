"""
Tests for the simulation command line.
"""

import pytest

from monopoly_engine.cli import build_parser, main
from monopoly_engine.config import get_settings
from monopoly_engine.game_logger import GameLogger


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_parser_leaves_unset_flags_empty():
    args = build_parser().parse_args(["--players", "3"])

    assert args.players == 3
    assert args.agent is None
    assert args.seed is None
    assert not args.quiet


def test_quiet_run_prints_nothing(capsys):
    assert main(["--players", "2", "--seed", "4", "--max-turns", "5", "--quiet"]) == 0
    assert capsys.readouterr().out == ""


def test_verbose_run_prints_standings(capsys):
    main(["--players", "2", "--agent", "random", "--seed", "8", "--max-turns", "5"])

    out = capsys.readouterr().out
    assert "Starting game with 2 players using random agents" in out
    assert "Final Standings:" in out


def test_log_file_flag_writes_jsonl(tmp_path):
    log_file = tmp_path / "run.jsonl"

    main(["--players", "2", "--seed", "1", "--max-turns", "3", "--quiet", "--log-file", str(log_file)])

    records = GameLogger.read_records(str(log_file))
    assert records[0]["event_type"] == "game_start"
    assert records[-1]["event_type"] == "game_end"


def test_scenario_flag_seeds_game(tmp_path, capsys):
    scenario = tmp_path / "scenario.json"
    scenario.write_text('{"players": [{"name": "Zed", "balance": 5000}]}')

    main(["--players", "2", "--seed", "2", "--max-turns", "1", "--scenario", str(scenario)])

    assert "Zed" in capsys.readouterr().out
