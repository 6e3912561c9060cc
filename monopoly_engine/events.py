"""
Domain events emitted by the engine.

Events are frozen, so snapshots that share an event log prefix never share
anything mutable. ``GameEvent`` is a tagged union discriminated on ``type``.
"""

from typing import Annotated, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from monopoly_engine.cards import DeckType


class BaseEvent(BaseModel):
    model_config = ConfigDict(frozen=True)


class DiceRolledEvent(BaseEvent):
    type: Literal["dice_rolled"] = "dice_rolled"
    player_id: str
    dice: Tuple[int, int]
    is_doubles: bool


class MovedEvent(BaseEvent):
    type: Literal["moved"] = "moved"
    player_id: str
    from_position: int
    to_position: int


class LandedEvent(BaseEvent):
    type: Literal["landed"] = "landed"
    player_id: str
    position: int
    space_name: str


class PassGoEvent(BaseEvent):
    type: Literal["pass_go"] = "pass_go"
    player_id: str
    amount: int


class RentPaidEvent(BaseEvent):
    type: Literal["rent_paid"] = "rent_paid"
    payer_id: str
    owner_id: str
    position: int
    amount: int


class PropertyBoughtEvent(BaseEvent):
    type: Literal["property_bought"] = "property_bought"
    player_id: str
    position: int
    price: int


class AuctionStartedEvent(BaseEvent):
    type: Literal["auction_started"] = "auction_started"
    position: int


class AuctionBidEvent(BaseEvent):
    type: Literal["auction_bid"] = "auction_bid"
    player_id: str
    position: int
    amount: int


class AuctionWonEvent(BaseEvent):
    type: Literal["auction_won"] = "auction_won"
    player_id: str
    position: int
    amount: int


class AuctionNoBidsEvent(BaseEvent):
    type: Literal["auction_no_bids"] = "auction_no_bids"
    position: int


class HouseBuiltEvent(BaseEvent):
    type: Literal["house_built"] = "house_built"
    player_id: str
    position: int
    houses: int


class HotelBuiltEvent(BaseEvent):
    type: Literal["hotel_built"] = "hotel_built"
    player_id: str
    position: int


class HouseSoldEvent(BaseEvent):
    type: Literal["house_sold"] = "house_sold"
    player_id: str
    position: int
    houses: int
    refund: int


class HotelSoldEvent(BaseEvent):
    """``houses`` is what remains after the sale: 4 on a downgrade, 0 when sold outright."""

    type: Literal["hotel_sold"] = "hotel_sold"
    player_id: str
    position: int
    houses: int
    refund: int


class CardDrawnEvent(BaseEvent):
    type: Literal["card_drawn"] = "card_drawn"
    player_id: str
    deck: DeckType
    card_id: int
    text: str


class TaxPaidEvent(BaseEvent):
    type: Literal["tax_paid"] = "tax_paid"
    player_id: str
    amount: int
    space_name: str


class JailedEvent(BaseEvent):
    type: Literal["jailed"] = "jailed"
    player_id: str
    reason: str


class ReleasedEvent(BaseEvent):
    type: Literal["released"] = "released"
    player_id: str
    reason: str


class MortgagedEvent(BaseEvent):
    type: Literal["mortgaged"] = "mortgaged"
    player_id: str
    position: int
    amount: int


class UnmortgagedEvent(BaseEvent):
    type: Literal["unmortgaged"] = "unmortgaged"
    player_id: str
    position: int
    amount: int


class TradeProposedEvent(BaseEvent):
    type: Literal["trade_proposed"] = "trade_proposed"
    from_player_id: str
    to_player_id: str


class TradeCompletedEvent(BaseEvent):
    type: Literal["trade_completed"] = "trade_completed"
    from_player_id: str
    to_player_id: str
    description: str


class TradeRejectedEvent(BaseEvent):
    type: Literal["trade_rejected"] = "trade_rejected"
    from_player_id: str
    to_player_id: str


class BankruptcyEvent(BaseEvent):
    type: Literal["bankruptcy"] = "bankruptcy"
    player_id: str
    creditor: str


class GameOverEvent(BaseEvent):
    type: Literal["game_over"] = "game_over"
    winner_id: str


class CollectEvent(BaseEvent):
    type: Literal["collect"] = "collect"
    player_id: str
    amount: int
    reason: str


class PayEvent(BaseEvent):
    type: Literal["pay"] = "pay"
    player_id: str
    amount: int
    reason: str


class TransferEvent(BaseEvent):
    type: Literal["transfer"] = "transfer"
    from_player_id: str
    to_player_id: str
    amount: int
    reason: str


GameEvent = Annotated[
    Union[
        DiceRolledEvent,
        MovedEvent,
        LandedEvent,
        PassGoEvent,
        RentPaidEvent,
        PropertyBoughtEvent,
        AuctionStartedEvent,
        AuctionBidEvent,
        AuctionWonEvent,
        AuctionNoBidsEvent,
        HouseBuiltEvent,
        HotelBuiltEvent,
        HouseSoldEvent,
        HotelSoldEvent,
        CardDrawnEvent,
        TaxPaidEvent,
        JailedEvent,
        ReleasedEvent,
        MortgagedEvent,
        UnmortgagedEvent,
        TradeProposedEvent,
        TradeCompletedEvent,
        TradeRejectedEvent,
        BankruptcyEvent,
        GameOverEvent,
        CollectEvent,
        PayEvent,
        TransferEvent,
    ],
    Field(discriminator="type"),
]
