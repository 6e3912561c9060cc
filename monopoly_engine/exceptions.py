"""
Custom exception hierarchy for the Monopoly rules engine.

Illegal moves are reported as rejected ``ActionResult`` values, not raised
to the caller; the classes here mark the boundary between the two.
"""


class MonopolyError(Exception):
    """Base exception for all game-related errors."""


class InvalidActionError(MonopolyError):
    """Action is not legal in the current state."""


class PlayerNotFoundError(MonopolyError):
    """A player id does not exist in the game state."""

    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class ScenarioError(MonopolyError):
    """Scenario override data cannot be applied to a fresh game."""


class CardDeckError(MonopolyError):
    """Card draw pile and discard pile are both empty."""
