"""
Tests for the agent-driven game runner.
"""

import pytest

from monopoly_engine.actions import BuyProperty
from monopoly_engine.agents import Agent, GreedyAgent, RandomAgent
from monopoly_engine.engine import GameEngine
from monopoly_engine.game_logger import GameLogger
from monopoly_engine.runner import GameRunner


class BrokenAgent(Agent):
    """Agent that always fails to decide."""

    def choose_action(self, state, available_actions):
        raise RuntimeError("agent crashed")


class StubbornAgent(Agent):
    """Agent that always tries to buy, whether or not it can."""

    def choose_action(self, state, available_actions):
        return BuyProperty()


def _runner(agent_cls, seed=11, players=2, **kwargs):
    engine = GameEngine(seed=seed)
    state = engine.create_game(["Alice", "Bob", "Charlie", "Diana"][:players])
    agents = {}
    for i, p in enumerate(state.players):
        if agent_cls in (RandomAgent, GreedyAgent):
            agents[p.id] = agent_cls(p.id, p.name, seed=seed + i)
        else:
            agents[p.id] = agent_cls(p.id, p.name)
    return GameRunner(engine, state, agents, **kwargs)


def _assert_finished(state, max_turns):
    assert state.is_game_over or state.turn_number == max_turns + 1
    for player in state.players:
        if player.is_bankrupt:
            assert player.properties == {}


@pytest.mark.parametrize("seed", [3, 17])
def test_greedy_game_finishes(seed):
    runner = _runner(GreedyAgent, seed=seed, players=3, max_turns=150)
    final = runner.run()
    _assert_finished(final, 150)


@pytest.mark.parametrize("seed", [5, 23])
def test_random_game_finishes(seed):
    runner = _runner(RandomAgent, seed=seed, players=4, max_turns=120)
    final = runner.run()
    _assert_finished(final, 120)


def test_crashing_agents_fall_back_to_default_actions():
    runner = _runner(BrokenAgent, max_turns=6)

    final = runner.run()

    assert runner.forced_actions > 0
    _assert_finished(final, 6)


def test_rejected_actions_fall_back_to_default_actions():
    runner = _runner(StubbornAgent, max_turns=4)

    final = runner.run()

    assert runner.forced_actions > 0
    _assert_finished(final, 4)


def test_action_limit_forces_turn_end():
    runner = _runner(GreedyAgent, max_turns=20, max_actions_per_turn=1)
    final = runner.run()
    _assert_finished(final, 20)


def test_every_player_needs_an_agent():
    engine = GameEngine(seed=1)
    state = engine.create_game(["Alice", "Bob"])
    with pytest.raises(ValueError, match="player_1"):
        GameRunner(engine, state, {"player_0": GreedyAgent("player_0", "Alice")})


def test_event_callback_receives_events():
    seen = []
    runner = _runner(GreedyAgent, max_turns=3, on_events=lambda state, events: seen.extend(events))

    final = runner.run()

    assert seen
    assert [e.type for e in seen] == [e.type for e in final.game_log]


def test_runner_writes_game_log(tmp_path):
    log_file = str(tmp_path / "game.jsonl")
    runner = _runner(GreedyAgent, max_turns=3, game_logger=GameLogger(log_file))

    runner.run()

    records = GameLogger.read_records(log_file)
    assert records[0]["event_type"] == "game_start"
    assert records[0]["seed"] == 11
    assert records[-1]["event_type"] == "game_end"
    assert any(r["event_type"] == "action" and r["success"] for r in records)
    assert [r["event_id"] for r in records] == list(range(len(records)))
