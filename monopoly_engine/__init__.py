"""
Monopoly rules engine.

A deterministic turn state machine: query the available actions for a
state, apply one, and receive a new state plus the events it produced.
"""

from monopoly_engine.actions import Action, ActionType, AvailableAction, parse_action
from monopoly_engine.config import EngineSettings, GameConfig, get_settings
from monopoly_engine.engine import ActionResult, GameEngine
from monopoly_engine.exceptions import InvalidActionError, MonopolyError, PlayerNotFoundError, ScenarioError
from monopoly_engine.models import GameState, PendingDebt, PlayerState, PropertyState, TradeOffer, TurnPhase
from monopoly_engine.scenario import ScenarioConfig, apply_scenario, load_scenario
from monopoly_engine.state import create_initial_state, deserialize_state, serialize_state

__version__ = "0.1.0"

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "AvailableAction",
    "EngineSettings",
    "GameConfig",
    "GameEngine",
    "GameState",
    "InvalidActionError",
    "MonopolyError",
    "PendingDebt",
    "PlayerNotFoundError",
    "PlayerState",
    "PropertyState",
    "ScenarioConfig",
    "ScenarioError",
    "TradeOffer",
    "TurnPhase",
    "apply_scenario",
    "create_initial_state",
    "deserialize_state",
    "get_settings",
    "load_scenario",
    "parse_action",
    "serialize_state",
]
