"""
The standard 40-space board.

Board data is module-level and read-only; it is shared by reference and
never copied into game state.
"""

from typing import Dict, List, Optional, Tuple

from monopoly_engine.spaces import (
    ColorGroup,
    OwnableSpace,
    PropertySpace,
    RailroadSpace,
    Space,
    SpaceType,
    TaxSpace,
    UtilitySpace,
)

BOARD_SIZE = 40
JAIL_POSITION = 10


def _property(position, name, color_group, price, house_cost, rent) -> PropertySpace:
    return PropertySpace(
        position=position,
        name=name,
        space_type=SpaceType.PROPERTY,
        price=price,
        mortgage_value=price // 2,
        color_group=color_group,
        house_cost=house_cost,
        rent=rent,
    )


def _railroad(position, name) -> RailroadSpace:
    return RailroadSpace(position, name, SpaceType.RAILROAD, price=200, mortgage_value=100)


def _utility(position, name) -> UtilitySpace:
    return UtilitySpace(position, name, SpaceType.UTILITY, price=150, mortgage_value=75)


BOARD: Tuple[Space, ...] = (
    Space(0, "Go", SpaceType.GO),
    _property(1, "Mediterranean Avenue", ColorGroup.BROWN, 60, 50, (2, 10, 30, 90, 160, 250)),
    Space(2, "Community Chest", SpaceType.COMMUNITY_CHEST),
    _property(3, "Baltic Avenue", ColorGroup.BROWN, 60, 50, (4, 20, 60, 180, 320, 450)),
    TaxSpace(4, "Income Tax", SpaceType.TAX, amount=200),
    _railroad(5, "Reading Railroad"),
    _property(6, "Oriental Avenue", ColorGroup.LIGHT_BLUE, 100, 50, (6, 30, 90, 270, 400, 550)),
    Space(7, "Chance", SpaceType.CHANCE),
    _property(8, "Vermont Avenue", ColorGroup.LIGHT_BLUE, 100, 50, (6, 30, 90, 270, 400, 550)),
    _property(9, "Connecticut Avenue", ColorGroup.LIGHT_BLUE, 120, 50, (8, 40, 100, 300, 450, 600)),
    Space(10, "Jail / Just Visiting", SpaceType.JAIL),
    _property(11, "St. Charles Place", ColorGroup.PINK, 140, 100, (10, 50, 150, 450, 625, 750)),
    _utility(12, "Electric Company"),
    _property(13, "States Avenue", ColorGroup.PINK, 140, 100, (10, 50, 150, 450, 625, 750)),
    _property(14, "Virginia Avenue", ColorGroup.PINK, 160, 100, (12, 60, 180, 500, 700, 900)),
    _railroad(15, "Pennsylvania Railroad"),
    _property(16, "St. James Place", ColorGroup.ORANGE, 180, 100, (14, 70, 200, 550, 750, 950)),
    Space(17, "Community Chest", SpaceType.COMMUNITY_CHEST),
    _property(18, "Tennessee Avenue", ColorGroup.ORANGE, 180, 100, (14, 70, 200, 550, 750, 950)),
    _property(19, "New York Avenue", ColorGroup.ORANGE, 200, 100, (16, 80, 220, 600, 800, 1000)),
    Space(20, "Free Parking", SpaceType.FREE_PARKING),
    _property(21, "Kentucky Avenue", ColorGroup.RED, 220, 150, (18, 90, 250, 700, 875, 1050)),
    Space(22, "Chance", SpaceType.CHANCE),
    _property(23, "Indiana Avenue", ColorGroup.RED, 220, 150, (18, 90, 250, 700, 875, 1050)),
    _property(24, "Illinois Avenue", ColorGroup.RED, 240, 150, (20, 100, 300, 750, 925, 1100)),
    _railroad(25, "B&O Railroad"),
    _property(26, "Atlantic Avenue", ColorGroup.YELLOW, 260, 150, (22, 110, 330, 800, 975, 1150)),
    _property(27, "Ventnor Avenue", ColorGroup.YELLOW, 260, 150, (22, 110, 330, 800, 975, 1150)),
    _utility(28, "Water Works"),
    _property(29, "Marvin Gardens", ColorGroup.YELLOW, 280, 150, (24, 120, 360, 850, 1025, 1200)),
    Space(30, "Go To Jail", SpaceType.GO_TO_JAIL),
    _property(31, "Pacific Avenue", ColorGroup.GREEN, 300, 200, (26, 130, 390, 900, 1100, 1275)),
    _property(32, "North Carolina Avenue", ColorGroup.GREEN, 300, 200, (26, 130, 390, 900, 1100, 1275)),
    Space(33, "Community Chest", SpaceType.COMMUNITY_CHEST),
    _property(34, "Pennsylvania Avenue", ColorGroup.GREEN, 320, 200, (28, 150, 450, 1000, 1200, 1400)),
    _railroad(35, "Short Line"),
    Space(36, "Chance", SpaceType.CHANCE),
    _property(37, "Park Place", ColorGroup.DARK_BLUE, 350, 200, (35, 175, 500, 1100, 1300, 1500)),
    TaxSpace(38, "Luxury Tax", SpaceType.TAX, amount=100),
    _property(39, "Boardwalk", ColorGroup.DARK_BLUE, 400, 200, (50, 200, 600, 1400, 1700, 2000)),
)

COLOR_GROUPS: Dict[ColorGroup, Tuple[int, ...]] = {}
for _space in BOARD:
    if isinstance(_space, PropertySpace):
        COLOR_GROUPS.setdefault(_space.color_group, ())
        COLOR_GROUPS[_space.color_group] += (_space.position,)

RAILROAD_POSITIONS: Tuple[int, ...] = tuple(s.position for s in BOARD if isinstance(s, RailroadSpace))
UTILITY_POSITIONS: Tuple[int, ...] = tuple(s.position for s in BOARD if isinstance(s, UtilitySpace))
OWNABLE_POSITIONS: Tuple[int, ...] = tuple(s.position for s in BOARD if s.is_ownable)


def get_space(position: int) -> Space:
    """Get the space at a board position (0-39)."""
    if not 0 <= position < BOARD_SIZE:
        raise ValueError(f"Invalid board position: {position}")
    return BOARD[position]


def get_ownable_space(position: int) -> Optional[OwnableSpace]:
    """Get the ownable space at a position, or None if it cannot be owned."""
    if not 0 <= position < BOARD_SIZE:
        return None
    space = BOARD[position]
    return space if isinstance(space, OwnableSpace) else None


def get_property_space(position: int) -> Optional[PropertySpace]:
    """Get the buildable property at a position, or None."""
    if not 0 <= position < BOARD_SIZE:
        return None
    space = BOARD[position]
    return space if isinstance(space, PropertySpace) else None


def get_group_positions(space: OwnableSpace) -> Tuple[int, ...]:
    """Positions sharing an ownership group with ``space`` (color, railroads or utilities)."""
    if isinstance(space, PropertySpace):
        return COLOR_GROUPS[space.color_group]
    if isinstance(space, RailroadSpace):
        return RAILROAD_POSITIONS
    return UTILITY_POSITIONS


def find_nearest(position: int, space_type: SpaceType) -> Tuple[int, bool]:
    """
    Find the next space of ``space_type`` strictly ahead of ``position``.

    Wraps to the first matching space when none lies ahead.

    Returns:
        Tuple of (target position, whether the move wrapped past Go)
    """
    candidates: List[int] = [s.position for s in BOARD if s.space_type == space_type]
    if not candidates:
        raise ValueError(f"No spaces of type {space_type.value}")
    for candidate in candidates:
        if candidate > position:
            return candidate, False
    return candidates[0], True
