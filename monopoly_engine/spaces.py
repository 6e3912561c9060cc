"""
Board space definitions and types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class SpaceType(str, Enum):
    """Types of spaces on the board."""

    GO = "go"
    PROPERTY = "property"
    RAILROAD = "railroad"
    UTILITY = "utility"
    TAX = "tax"
    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"
    JAIL = "jail"
    GO_TO_JAIL = "go_to_jail"
    FREE_PARKING = "free_parking"


class ColorGroup(str, Enum):
    """Property color groups."""

    BROWN = "brown"
    LIGHT_BLUE = "light_blue"
    PINK = "pink"
    ORANGE = "orange"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    DARK_BLUE = "dark_blue"


@dataclass(frozen=True)
class Space:
    """Base class for a board space."""

    position: int
    name: str
    space_type: SpaceType

    @property
    def is_ownable(self) -> bool:
        return False


@dataclass(frozen=True)
class OwnableSpace(Space):
    """A space that can be bought and mortgaged."""

    price: int
    mortgage_value: int

    @property
    def is_ownable(self) -> bool:
        return True


@dataclass(frozen=True)
class PropertySpace(OwnableSpace):
    """A property that can be owned, built upon, and mortgaged.

    ``rent`` is the six-entry ladder: base, 1-4 houses, hotel.
    """

    color_group: ColorGroup
    house_cost: int
    rent: Tuple[int, int, int, int, int, int]


@dataclass(frozen=True)
class RailroadSpace(OwnableSpace):
    """A railroad."""


@dataclass(frozen=True)
class UtilitySpace(OwnableSpace):
    """A utility (Electric Company, Water Works)."""


@dataclass(frozen=True)
class TaxSpace(Space):
    """A tax space with a fixed amount."""

    amount: int
