"""
Game creation and JSON serialization.
"""

import logging
import random
from typing import List, Optional

from monopoly_engine.cards import CHANCE_CARDS, COMMUNITY_CHEST_CARDS, create_shuffled_deck
from monopoly_engine.config import DEFAULT_CONFIG, GameConfig
from monopoly_engine.models import GameState, PlayerState, TurnPhase

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 8


def create_initial_state(
    player_names: List[str],
    rng: random.Random,
    config: Optional[GameConfig] = None,
) -> GameState:
    """
    Create a fresh game.

    Args:
        player_names: Display names in seating order; ids are ``player_0``, ``player_1``, ...
        rng: Random generator used to shuffle both card decks
        config: Rule constants (starting cash, bank supply)

    Returns:
        New game state in ``pre_roll`` for the first player
    """
    config = config or DEFAULT_CONFIG
    if not MIN_PLAYERS <= len(player_names) <= MAX_PLAYERS:
        raise ValueError(f"A game needs {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(player_names)}")

    players = [
        PlayerState(id=f"player_{i}", name=name, balance=config.starting_cash)
        for i, name in enumerate(player_names)
    ]
    state = GameState(
        players=players,
        turn_phase=TurnPhase.PRE_ROLL,
        chance_deck=create_shuffled_deck(rng, len(CHANCE_CARDS)),
        community_chest_deck=create_shuffled_deck(rng, len(COMMUNITY_CHEST_CARDS)),
        bank_houses=config.house_limit,
        bank_hotels=config.hotel_limit,
    )
    logger.debug(f"Created game for {', '.join(player_names)}")
    return state


def serialize_state(state: GameState) -> str:
    """Serialize a state to JSON. Property maps stay keyed by board position."""
    return state.model_dump_json(indent=2)


def deserialize_state(data: str) -> GameState:
    """
    Restore a state serialized with ``serialize_state``.

    Raises:
        pydantic.ValidationError: If the document is not a valid game state
    """
    return GameState.model_validate_json(data)
