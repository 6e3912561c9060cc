"""
Game state models.

``GameState`` is the single unit of truth for a game. The engine never
mutates a state it was handed: it works on ``GameState.clone()`` and returns
the copy, so snapshots derived from a common ancestor never share mutable
containers.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from monopoly_engine.events import GameEvent

BANK = "bank"


class TurnPhase(str, Enum):
    """Phases of a single player's turn."""

    PRE_ROLL = "pre_roll"
    AWAITING_ROLL = "awaiting_roll"
    POST_ROLL_LAND = "post_roll_land"
    PURCHASE_DECISION = "purchase_decision"
    AUCTION = "auction"
    PAYING_DEBT = "paying_debt"
    TRADING = "trading"
    POST_ACTION = "post_action"
    TURN_COMPLETE = "turn_complete"


class PropertyState(BaseModel):
    """Improvement state of an owned property. ``houses == 5`` is a hotel."""

    houses: int = Field(default=0, ge=0, le=5)
    mortgaged: bool = False

    @property
    def has_hotel(self) -> bool:
        return self.houses == 5


class PlayerState(BaseModel):
    """A player's position, money, holdings and jail status."""

    id: str
    name: str
    position: int = Field(default=0, ge=0, le=39)
    balance: int = 1500
    properties: Dict[int, PropertyState] = Field(default_factory=dict)
    in_jail: bool = False
    jail_turns: int = Field(default=0, ge=0, le=3)
    get_out_of_jail_cards: int = Field(default=0, ge=0)
    is_bankrupt: bool = False
    doubles_count: int = Field(default=0, ge=0, le=3)

    def clone(self) -> "PlayerState":
        return self.model_copy(
            update={"properties": {pos: ps.model_copy() for pos, ps in self.properties.items()}}
        )


class PendingDebt(BaseModel):
    """An unresolved negative balance. ``creditor`` is a player id or ``"bank"``."""

    creditor: str
    amount: int
    reason: str


class TradeOffer(BaseModel):
    from_player_id: str
    to_player_id: str
    offered_properties: List[int] = Field(default_factory=list)
    offered_money: int = 0
    requested_properties: List[int] = Field(default_factory=list)
    requested_money: int = 0


class GameState(BaseModel):
    """Complete snapshot of a game."""

    players: List[PlayerState]
    current_player_index: int = 0
    turn_phase: TurnPhase = TurnPhase.PRE_ROLL
    turn_number: int = 1
    last_dice_roll: Optional[Tuple[int, int]] = None

    chance_deck: List[int] = Field(default_factory=list)
    community_chest_deck: List[int] = Field(default_factory=list)
    chance_discard_pile: List[int] = Field(default_factory=list)
    community_chest_discard_pile: List[int] = Field(default_factory=list)

    bank_houses: int = 32
    bank_hotels: int = 12

    pending_debt: Optional[PendingDebt] = None
    active_trade: Optional[TradeOffer] = None
    # Phase to restore once the active trade is accepted or rejected
    trade_return_phase: Optional[TurnPhase] = None
    # One-shot rent multiplier set by "advance to nearest" cards
    rent_multiplier: Optional[int] = None

    game_log: List[GameEvent] = Field(default_factory=list)
    winner: Optional[str] = None

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def is_game_over(self) -> bool:
        return self.winner is not None

    def clone(self) -> "GameState":
        """Copy every mutable container. Events are frozen and shared."""
        return self.model_copy(
            update={
                "players": [p.clone() for p in self.players],
                "chance_deck": list(self.chance_deck),
                "community_chest_deck": list(self.community_chest_deck),
                "chance_discard_pile": list(self.chance_discard_pile),
                "community_chest_discard_pile": list(self.community_chest_discard_pile),
                "pending_debt": self.pending_debt.model_copy() if self.pending_debt else None,
                "active_trade": self.active_trade.model_copy(deep=True) if self.active_trade else None,
                "game_log": list(self.game_log),
            }
        )
