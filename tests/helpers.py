"""Helpers for arranging game states in tests.

Tests own the states they build, so these mutate in place.
"""

import random
from typing import Iterable, List

from monopoly_engine.bank import get_player
from monopoly_engine.engine import GameEngine
from monopoly_engine.models import GameState, PropertyState, TurnPhase


class ScriptedDice(random.Random):
    """Random generator whose ``randint`` returns scripted die faces in order."""

    def __init__(self, faces: Iterable[int]):
        super().__init__(0)
        self.faces: List[int] = list(faces)

    def randint(self, a, b):
        return self.faces.pop(0)


def rig_dice(engine: GameEngine, *faces: int) -> None:
    engine.rng = ScriptedDice(faces)


def set_phase(state: GameState, phase: TurnPhase) -> None:
    state.turn_phase = phase


def place(state: GameState, player_id: str, position: int) -> None:
    get_player(state, player_id).position = position


def set_balance(state: GameState, player_id: str, balance: int) -> None:
    get_player(state, player_id).balance = balance


def give(state: GameState, player_id: str, *positions: int, houses: int = 0, mortgaged: bool = False) -> None:
    player = get_player(state, player_id)
    for position in positions:
        player.properties[position] = PropertyState(houses=houses, mortgaged=mortgaged)


def jail(state: GameState, player_id: str) -> None:
    player = get_player(state, player_id)
    player.in_jail = True
    player.jail_turns = 0
    player.position = 10


def event_types(events) -> List[str]:
    return [event.type for event in events]
