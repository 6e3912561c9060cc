"""
Rent calculation.
"""

from typing import Optional, Tuple

from monopoly_engine.bank import count_railroads, count_utilities, owns_color_group
from monopoly_engine.models import PlayerState
from monopoly_engine.spaces import OwnableSpace, PropertySpace, RailroadSpace, UtilitySpace


def calculate_rent(
    space: OwnableSpace,
    owner: Optional[PlayerState],
    dice_roll: Optional[Tuple[int, int]],
    payer_id: Optional[str] = None,
    multiplier: Optional[int] = None,
) -> int:
    """
    Calculate rent owed for landing on ``space``.

    Args:
        space: The landed-on ownable space
        owner: The owning player, or None if unowned
        dice_roll: The roll that brought the payer here (used for utilities)
        payer_id: The landing player's id; rent on your own property is 0
        multiplier: Card-forced multiplier. Scales railroad rent; for
            utilities it replaces the 4x/10x rule with dice x multiplier.

    Returns:
        Rent amount, 0 if unowned, self-owned or mortgaged
    """
    if owner is None or owner.id == payer_id:
        return 0
    prop = owner.properties.get(space.position)
    if prop is None or prop.mortgaged:
        return 0

    if isinstance(space, PropertySpace):
        if prop.houses == 0:
            base = space.rent[0]
            return base * 2 if owns_color_group(owner, space.color_group) else base
        return space.rent[prop.houses]

    if isinstance(space, RailroadSpace):
        count = count_railroads(owner)
        rent = 25 * (2 ** (count - 1))
        return rent * multiplier if multiplier else rent

    if isinstance(space, UtilitySpace):
        dice_sum = sum(dice_roll) if dice_roll else 0
        if multiplier:
            return dice_sum * multiplier
        return dice_sum * (10 if count_utilities(owner) >= 2 else 4)

    return 0
