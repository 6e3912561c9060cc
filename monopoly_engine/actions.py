"""
Player actions and the legal-action descriptions handed to agents.

``Action`` is a tagged union discriminated on ``action``. Raw mappings (for
example parsed agent output) go through ``parse_action``.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, TypeAdapter


class ActionType(str, Enum):
    """Types of actions a player can take."""

    ROLL_DICE = "roll_dice"
    BUY_PROPERTY = "buy_property"
    AUCTION_PROPERTY = "auction_property"
    SUBMIT_BID = "submit_bid"
    BUILD_HOUSE = "build_house"
    BUILD_HOTEL = "build_hotel"
    SELL_HOUSE = "sell_house"
    MORTGAGE_PROPERTY = "mortgage_property"
    UNMORTGAGE_PROPERTY = "unmortgage_property"
    TRADE_OFFER = "trade_offer"
    ACCEPT_TRADE = "accept_trade"
    REJECT_TRADE = "reject_trade"
    PAY_JAIL_FINE = "pay_jail_fine"
    USE_JAIL_CARD = "use_jail_card"
    END_TURN = "end_turn"
    DECLARE_BANKRUPTCY = "declare_bankruptcy"


class BaseAction(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class RollDice(BaseAction):
    action: Literal["roll_dice"] = "roll_dice"


class BuyProperty(BaseAction):
    action: Literal["buy_property"] = "buy_property"


class AuctionProperty(BaseAction):
    action: Literal["auction_property"] = "auction_property"


class SubmitBid(BaseAction):
    """A sealed auction bid. ``player_id`` defaults to the current player."""

    action: Literal["submit_bid"] = "submit_bid"
    amount: NonNegativeInt
    player_id: Optional[str] = None


class BuildHouse(BaseAction):
    action: Literal["build_house"] = "build_house"
    property_position: int


class BuildHotel(BaseAction):
    action: Literal["build_hotel"] = "build_hotel"
    property_position: int


class SellHouse(BaseAction):
    action: Literal["sell_house"] = "sell_house"
    property_position: int


class MortgageProperty(BaseAction):
    action: Literal["mortgage_property"] = "mortgage_property"
    property_position: int


class UnmortgageProperty(BaseAction):
    action: Literal["unmortgage_property"] = "unmortgage_property"
    property_position: int


class ProposeTrade(BaseAction):
    action: Literal["trade_offer"] = "trade_offer"
    target_player_id: str
    offered_properties: List[int] = Field(default_factory=list)
    offered_money: NonNegativeInt = 0
    requested_properties: List[int] = Field(default_factory=list)
    requested_money: NonNegativeInt = 0


class AcceptTrade(BaseAction):
    action: Literal["accept_trade"] = "accept_trade"


class RejectTrade(BaseAction):
    action: Literal["reject_trade"] = "reject_trade"


class PayJailFine(BaseAction):
    action: Literal["pay_jail_fine"] = "pay_jail_fine"


class UseJailCard(BaseAction):
    action: Literal["use_jail_card"] = "use_jail_card"


class EndTurn(BaseAction):
    action: Literal["end_turn"] = "end_turn"


class DeclareBankruptcy(BaseAction):
    action: Literal["declare_bankruptcy"] = "declare_bankruptcy"


Action = Annotated[
    Union[
        RollDice,
        BuyProperty,
        AuctionProperty,
        SubmitBid,
        BuildHouse,
        BuildHotel,
        SellHouse,
        MortgageProperty,
        UnmortgageProperty,
        ProposeTrade,
        AcceptTrade,
        RejectTrade,
        PayJailFine,
        UseJailCard,
        EndTurn,
        DeclareBankruptcy,
    ],
    Field(discriminator="action"),
]

ACTION_ADAPTER: TypeAdapter = TypeAdapter(Action)


def parse_action(data: Any) -> BaseAction:
    """
    Parse a raw mapping such as ``{"action": "build_house", "property_position": 1}``.

    Raises:
        pydantic.ValidationError: On an unknown action kind or bad parameters
    """
    if isinstance(data, Mapping):
        data = dict(data)
    return ACTION_ADAPTER.validate_python(data)


class ParameterSchema(BaseModel):
    """JSON-schema-like description of one action parameter."""

    type: Literal["integer", "string", "array"]
    description: str
    enum: Optional[List[Union[int, str]]] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    items_enum: Optional[List[int]] = None


class AvailableAction(BaseModel):
    """One entry of the legal-actions list."""

    action: ActionType
    description: str
    parameters: Dict[str, ParameterSchema] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)

    def build(self, **params: Any) -> BaseAction:
        """Build the concrete action with the given parameters."""
        return parse_action({"action": self.action.value, **params})
