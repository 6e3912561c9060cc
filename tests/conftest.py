"""Shared test fixtures for Monopoly rules engine tests."""

import pytest

from monopoly_engine.engine import GameEngine


@pytest.fixture
def engine():
    """Engine with fixed seed for reproducibility."""
    return GameEngine(seed=42)


@pytest.fixture
def state(engine):
    """Fresh two-player game: player_0 (Alice) and player_1 (Bob)."""
    return engine.create_game(["Alice", "Bob"])


@pytest.fixture
def four_player_state(engine):
    """Fresh four-player game."""
    return engine.create_game(["Alice", "Bob", "Charlie", "Diana"])
