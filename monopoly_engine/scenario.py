"""
Scenario seeding: per-player overrides applied once to a fresh game.

Example scenario file::

    {
      "players": [
        {"name": "Alice", "balance": 800,
         "properties": [{"position": 1, "houses": 2}, {"position": 3, "houses": 2}]},
        {"in_jail": true, "get_out_of_jail_cards": 1}
      ]
    }
"""

import logging
from pathlib import Path
from typing import List, Optional, Set, Union

from pydantic import BaseModel, Field

from monopoly_engine.board import JAIL_POSITION, get_ownable_space
from monopoly_engine.exceptions import ScenarioError
from monopoly_engine.models import GameState, PropertyState, TurnPhase
from monopoly_engine.spaces import PropertySpace

logger = logging.getLogger(__name__)


class ScenarioProperty(BaseModel):
    position: int
    houses: int = Field(default=0, ge=0, le=5)
    mortgaged: bool = False


class ScenarioPlayer(BaseModel):
    """Overrides for one player; omitted fields keep their fresh-game values."""

    name: Optional[str] = None
    balance: Optional[int] = None
    position: Optional[int] = Field(default=None, ge=0, le=39)
    properties: List[ScenarioProperty] = Field(default_factory=list)
    get_out_of_jail_cards: Optional[int] = Field(default=None, ge=0)
    in_jail: Optional[bool] = None


class ScenarioConfig(BaseModel):
    players: List[ScenarioPlayer] = Field(default_factory=list)


def load_scenario(path: Union[str, Path]) -> ScenarioConfig:
    """
    Load a scenario from a JSON file.

    Raises:
        pydantic.ValidationError: If the file does not match the scenario schema
    """
    return ScenarioConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))


def apply_scenario(state: GameState, scenario: ScenarioConfig) -> GameState:
    """
    Apply scenario overrides to a freshly created game.

    Pre-placed houses and hotels are debited from the bank supply.

    Returns:
        A new state; ``state`` is left untouched

    Raises:
        ScenarioError: On a non-ownable position, a property claimed twice,
            houses on a railroad or utility, houses on a mortgaged property,
            too many scenario players, or a bank supply shortfall
    """
    if len(scenario.players) > len(state.players):
        raise ScenarioError(
            f"Scenario defines {len(scenario.players)} players but the game has {len(state.players)}"
        )

    new_state = state.clone()
    claimed: Set[int] = set()

    for player, override in zip(new_state.players, scenario.players):
        if override.name is not None:
            player.name = override.name
        if override.balance is not None:
            player.balance = override.balance
        if override.position is not None:
            player.position = override.position
        if override.get_out_of_jail_cards is not None:
            player.get_out_of_jail_cards = override.get_out_of_jail_cards
        if override.in_jail:
            player.in_jail = True
            player.jail_turns = 0
            player.position = JAIL_POSITION

        for prop in override.properties:
            space = get_ownable_space(prop.position)
            if space is None:
                raise ScenarioError(f"Position {prop.position} is not an ownable property")
            if prop.position in claimed:
                raise ScenarioError(f"{space.name} is assigned to more than one player")
            if prop.houses and not isinstance(space, PropertySpace):
                raise ScenarioError(f"Cannot place houses on {space.name}")
            if prop.houses and prop.mortgaged:
                raise ScenarioError(f"{space.name} cannot be mortgaged with houses on it")

            if prop.houses == 5:
                new_state.bank_hotels -= 1
            else:
                new_state.bank_houses -= prop.houses
            if new_state.bank_houses < 0 or new_state.bank_hotels < 0:
                raise ScenarioError("Scenario places more buildings than the bank holds")

            claimed.add(prop.position)
            player.properties[prop.position] = PropertyState(houses=prop.houses, mortgaged=prop.mortgaged)

    if new_state.turn_phase == TurnPhase.PRE_ROLL and new_state.current_player.in_jail:
        new_state.turn_phase = TurnPhase.AWAITING_ROLL

    logger.info(f"Applied scenario to {len(scenario.players)} players")
    return new_state
