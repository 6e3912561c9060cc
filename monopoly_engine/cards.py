"""
Chance and Community Chest cards.

Decks live in game state as lists of indices into the immutable card tables
below. The tables themselves are never copied or mutated.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from monopoly_engine.exceptions import CardDeckError
from monopoly_engine.spaces import SpaceType


class DeckType(str, Enum):
    """The two card decks."""

    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"


@dataclass(frozen=True)
class MoveTo:
    """Advance to an absolute position, optionally collecting Go salary when passing it."""

    position: int
    collect_go: bool = True


@dataclass(frozen=True)
class MoveBack:
    spaces: int


@dataclass(frozen=True)
class MoveToNearest:
    """Advance to the nearest railroad or utility; rent due there is multiplied."""

    space_type: SpaceType
    pay_multiplier: int


@dataclass(frozen=True)
class Collect:
    amount: int


@dataclass(frozen=True)
class Pay:
    amount: int


@dataclass(frozen=True)
class PayPerHouse:
    house_amount: int
    hotel_amount: int


@dataclass(frozen=True)
class CollectFromEachPlayer:
    amount: int


@dataclass(frozen=True)
class PayEachPlayer:
    amount: int


@dataclass(frozen=True)
class GetOutOfJailFree:
    pass


@dataclass(frozen=True)
class GoToJail:
    pass


CardEffect = Union[
    MoveTo,
    MoveBack,
    MoveToNearest,
    Collect,
    Pay,
    PayPerHouse,
    CollectFromEachPlayer,
    PayEachPlayer,
    GetOutOfJailFree,
    GoToJail,
]


@dataclass(frozen=True)
class Card:
    """A single Chance or Community Chest card."""

    card_id: int
    deck: DeckType
    text: str
    effect: CardEffect


def _cards(deck: DeckType, entries: List[Tuple[str, CardEffect]]) -> Tuple[Card, ...]:
    return tuple(Card(i, deck, text, effect) for i, (text, effect) in enumerate(entries))


CHANCE_CARDS: Tuple[Card, ...] = _cards(DeckType.CHANCE, [
    ("Advance to Boardwalk.", MoveTo(39)),
    ("Advance to Go. Collect $200.", MoveTo(0)),
    ("Advance to Illinois Avenue. If you pass Go, collect $200.", MoveTo(24)),
    ("Advance to St. Charles Place. If you pass Go, collect $200.", MoveTo(11)),
    ("Advance to the nearest Railroad. Pay owner twice the rental.",
     MoveToNearest(SpaceType.RAILROAD, 2)),
    ("Advance to the nearest Railroad. Pay owner twice the rental.",
     MoveToNearest(SpaceType.RAILROAD, 2)),
    ("Advance to the nearest Utility. If owned, pay owner 10 times the dice roll.",
     MoveToNearest(SpaceType.UTILITY, 10)),
    ("Bank pays you dividend of $50.", Collect(50)),
    ("Get Out of Jail Free.", GetOutOfJailFree()),
    ("Go Back 3 Spaces.", MoveBack(3)),
    ("Go to Jail. Go directly to Jail, do not pass Go, do not collect $200.", GoToJail()),
    ("Make general repairs on all your property. For each house pay $25. For each hotel pay $100.",
     PayPerHouse(25, 100)),
    ("Speeding fine $15.", Pay(15)),
    ("Take a trip to Reading Railroad. If you pass Go, collect $200.", MoveTo(5)),
    ("You have been elected Chairman of the Board. Pay each player $50.", PayEachPlayer(50)),
    ("Your building loan matures. Collect $150.", Collect(150)),
])

COMMUNITY_CHEST_CARDS: Tuple[Card, ...] = _cards(DeckType.COMMUNITY_CHEST, [
    ("Advance to Go. Collect $200.", MoveTo(0)),
    ("Bank error in your favor. Collect $200.", Collect(200)),
    ("Doctor's fee. Pay $50.", Pay(50)),
    ("From sale of stock you get $50.", Collect(50)),
    ("Get Out of Jail Free.", GetOutOfJailFree()),
    ("Go to Jail. Go directly to jail, do not pass Go, do not collect $200.", GoToJail()),
    ("Holiday fund matures. Receive $100.", Collect(100)),
    ("Income tax refund. Collect $20.", Collect(20)),
    ("It is your birthday. Collect $10 from every player.", CollectFromEachPlayer(10)),
    ("Life insurance matures. Collect $100.", Collect(100)),
    ("Pay hospital fees of $100.", Pay(100)),
    ("Pay school fees of $50.", Pay(50)),
    ("Receive $25 consultancy fee.", Collect(25)),
    ("You are assessed for street repair. $40 per house. $115 per hotel.", PayPerHouse(40, 115)),
    ("You have won second prize in a beauty contest. Collect $10.", Collect(10)),
    ("You inherit $100.", Collect(100)),
])


def get_card_table(deck: DeckType) -> Tuple[Card, ...]:
    return CHANCE_CARDS if deck == DeckType.CHANCE else COMMUNITY_CHEST_CARDS


def create_shuffled_deck(rng: random.Random, size: int) -> List[int]:
    """Create a shuffled permutation of card indices."""
    indices = list(range(size))
    rng.shuffle(indices)
    return indices


def draw_card(deck: List[int], discard_pile: List[int], rng: random.Random) -> int:
    """
    Draw the top card index from ``deck``, mutating it in place.

    When the deck is exhausted the discard pile is shuffled into a new deck
    and emptied. The caller decides whether the drawn card is discarded.

    Raises:
        CardDeckError: If both the deck and the discard pile are empty
    """
    if not deck:
        if not discard_pile:
            raise CardDeckError("Cannot draw from an empty deck with an empty discard pile")
        deck.extend(discard_pile)
        discard_pile.clear()
        rng.shuffle(deck)
    return deck.pop(0)
