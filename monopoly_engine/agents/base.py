"""Base class for all Monopoly agents."""

from abc import ABC, abstractmethod
from typing import List, Optional

from monopoly_engine.actions import ActionType, AvailableAction, BaseAction
from monopoly_engine.models import GameState


class Agent(ABC):
    """
    Abstract base class for Monopoly agents.

    All agents must implement the `choose_action` method to select
    an action from the list of available actions.

    Attributes:
        player_id: The player's id in the game ("player_0", ...).
        name: The player's display name.
    """

    def __init__(self, player_id: str, name: str):
        """
        Initialize the agent.

        Args:
            player_id: The player's id in the game.
            name: The player's display name.
        """
        self.player_id = player_id
        self.name = name

    @abstractmethod
    def choose_action(self, state: GameState, available_actions: List[AvailableAction]) -> BaseAction:
        """
        Choose an action from the list of available actions.

        Args:
            state: The current game state.
            available_actions: Actions the engine currently accepts from this player.

        Returns:
            The chosen action, with parameters filled in.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(player_id='{self.player_id}', name='{self.name}')"


def find_action(available_actions: List[AvailableAction], action_type: ActionType) -> Optional[AvailableAction]:
    for available in available_actions:
        if available.action == action_type:
            return available
    return None
