"""
Tests for the JSONL game logger.
"""

from monopoly_engine.actions import RollDice
from monopoly_engine.game_logger import GameLogger


def test_creates_empty_log(tmp_path):
    path = tmp_path / "game.jsonl"
    path.write_text("stale\n")

    GameLogger(str(path))

    assert path.read_text() == ""


def test_default_file_name_is_timestamped(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    game_logger = GameLogger()

    assert game_logger.log_file.startswith("monopoly_game_")
    assert game_logger.log_file.endswith(".jsonl")
    assert (tmp_path / game_logger.log_file).exists()


def test_log_event_adds_envelope(tmp_path):
    path = str(tmp_path / "game.jsonl")
    game_logger = GameLogger(path)

    game_logger.log_event("note", text="hello")
    game_logger.log_event("note", text="again")

    records = GameLogger.read_records(path)
    assert [r["event_id"] for r in records] == [0, 1]
    assert records[0]["event_type"] == "note"
    assert records[0]["text"] == "hello"
    assert "timestamp" in records[0]


def test_log_action_records_events(tmp_path, engine, state):
    path = str(tmp_path / "game.jsonl")
    game_logger = GameLogger(path)
    result = engine.apply_action(state, RollDice())

    game_logger.log_action(result.state, "player_0", RollDice(), True, result.events)

    record = GameLogger.read_records(path)[0]
    assert record["event_type"] == "action"
    assert record["action"] == {"action": "roll_dice"}
    assert record["success"] is True
    assert record["events"][0]["type"] == "dice_rolled"
    assert "error" not in record


def test_log_rejected_action_keeps_error(tmp_path, state):
    path = str(tmp_path / "game.jsonl")
    game_logger = GameLogger(path)

    game_logger.log_action(state, "player_0", None, False, [], "Game is over")

    record = GameLogger.read_records(path)[0]
    assert record["action"] is None
    assert record["error"] == "Game is over"


def test_game_start_and_end(tmp_path, state):
    path = str(tmp_path / "game.jsonl")
    game_logger = GameLogger(path)

    game_logger.log_game_start(state, seed=42)
    game_logger.log_game_end(state)

    start, end = GameLogger.read_records(path)
    assert start["seed"] == 42
    assert [p["name"] for p in start["players"]] == ["Alice", "Bob"]
    assert end["winner"] is None
    assert end["final_state"]["turn_phase"] == "pre_roll"
