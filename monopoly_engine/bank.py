"""
Ownership ledger: player lookup, ownership queries and money movements.

Functions that change balances operate on a state the engine has already
cloned; nothing here copies state.
"""

from typing import List, Optional, Tuple

from monopoly_engine.board import COLOR_GROUPS, RAILROAD_POSITIONS, UTILITY_POSITIONS, get_ownable_space
from monopoly_engine.exceptions import PlayerNotFoundError
from monopoly_engine.models import BANK, GameState, PendingDebt, PlayerState, PropertyState, TurnPhase
from monopoly_engine.spaces import ColorGroup, PropertySpace


def get_player(state: GameState, player_id: str) -> PlayerState:
    """
    Look up a player by id.

    Raises:
        PlayerNotFoundError: If no player has this id
    """
    for player in state.players:
        if player.id == player_id:
            return player
    raise PlayerNotFoundError(player_id)


def get_property_owner(state: GameState, position: int) -> Optional[PlayerState]:
    """Return the player owning ``position``, or None if it is unowned."""
    for player in state.players:
        if position in player.properties:
            return player
    return None


def is_property_owned(state: GameState, position: int) -> bool:
    return get_property_owner(state, position) is not None


def get_active_players(state: GameState) -> List[PlayerState]:
    """Players who are not bankrupt, in seating order."""
    return [p for p in state.players if not p.is_bankrupt]


def owns_color_group(player: PlayerState, color_group: ColorGroup) -> bool:
    return all(pos in player.properties for pos in COLOR_GROUPS[color_group])


def group_has_mortgage(player: PlayerState, color_group: ColorGroup) -> bool:
    return any(
        player.properties[pos].mortgaged
        for pos in COLOR_GROUPS[color_group]
        if pos in player.properties
    )


def group_house_counts(player: PlayerState, color_group: ColorGroup) -> List[int]:
    """House counts across a color group; unowned members count as 0."""
    return [
        player.properties[pos].houses if pos in player.properties else 0
        for pos in COLOR_GROUPS[color_group]
    ]


def count_railroads(player: PlayerState, unmortgaged_only: bool = True) -> int:
    return sum(
        1
        for pos in RAILROAD_POSITIONS
        if pos in player.properties and not (unmortgaged_only and player.properties[pos].mortgaged)
    )


def count_utilities(player: PlayerState) -> int:
    return sum(
        1
        for pos in UTILITY_POSITIONS
        if pos in player.properties and not player.properties[pos].mortgaged
    )


def count_buildings(player: PlayerState) -> Tuple[int, int]:
    """Return (houses, hotels) on the player's properties."""
    houses = 0
    hotels = 0
    for prop in player.properties.values():
        if prop.houses == 5:
            hotels += 1
        else:
            houses += prop.houses
    return houses, hotels


def has_buildings_in_group(player: PlayerState, position: int) -> bool:
    """True if any property in the color group of ``position`` carries houses."""
    space = get_ownable_space(position)
    if not isinstance(space, PropertySpace):
        return False
    return any(h > 0 for h in group_house_counts(player, space.color_group))


def is_tradable(player: PlayerState, position: int) -> bool:
    prop = player.properties.get(position)
    return prop is not None and prop.houses == 0


def grant_property(player: PlayerState, position: int, prop: Optional[PropertyState] = None) -> None:
    player.properties[position] = prop if prop is not None else PropertyState()


def transfer_money(payer: PlayerState, payee: Optional[PlayerState], amount: int) -> None:
    """Move ``amount`` from ``payer`` to ``payee`` (None for the bank). Balances may go negative."""
    payer.balance -= amount
    if payee is not None:
        payee.balance += amount


def record_debt_if_negative(state: GameState, player: PlayerState, creditor: str, reason: str) -> bool:
    """
    Enter ``paying_debt`` if the player's balance is negative.

    Returns:
        True if a debt was recorded
    """
    if player.balance >= 0:
        return False
    state.pending_debt = PendingDebt(creditor=creditor, amount=-player.balance, reason=reason)
    state.turn_phase = TurnPhase.PAYING_DEBT
    return True


def settle_debt_if_solvent(state: GameState) -> bool:
    """
    Clear the pending debt once the current player's balance is non-negative.

    Returns:
        True if a debt was cleared
    """
    if state.pending_debt is None or state.current_player.balance < 0:
        return False
    state.pending_debt = None
    if state.turn_phase == TurnPhase.PAYING_DEBT:
        state.turn_phase = TurnPhase.POST_ACTION
    return True


def net_worth(state: GameState, player_id: str) -> int:
    """Cash plus purchase price of unmortgaged holdings plus house cost of buildings."""
    player = get_player(state, player_id)
    worth = player.balance
    for position, prop in player.properties.items():
        space = get_ownable_space(position)
        if space is None:
            continue
        worth += space.mortgage_value if prop.mortgaged else space.price
        if isinstance(space, PropertySpace):
            worth += prop.houses * space.house_cost
    return worth


def total_player_money(state: GameState) -> int:
    return sum(p.balance for p in state.players)


def is_bank(creditor: str) -> bool:
    return creditor == BANK
