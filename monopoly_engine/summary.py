"""
Plain-text summaries of game state for agents and console output.
"""

from typing import Dict, List

from monopoly_engine.bank import get_player, group_has_mortgage, owns_color_group
from monopoly_engine.board import COLOR_GROUPS, get_property_space, get_space
from monopoly_engine.events import GameEvent
from monopoly_engine.models import BANK, GameState, PlayerState, PropertyState
from monopoly_engine.spaces import PropertySpace, RailroadSpace

RECENT_EVENT_COUNT = 8


def build_turn_summary(state: GameState, player_id: str) -> str:
    """
    Describe the game from one player's point of view.

    Args:
        state: Current game state
        player_id: The player the summary is written for

    Returns:
        Multi-line summary text
    """
    player = get_player(state, player_id)
    space = get_space(player.position)

    lines = [
        f"=== TURN {state.turn_number} ===",
        f"Phase: {format_phase(state.turn_phase.value)}",
        "",
        f"YOUR STATUS ({player.name}):",
        f"  Position: {space.name} (space {player.position})",
        f"  Balance: ${player.balance}",
        f"  Properties: {format_properties(player)}",
        f"  Get Out of Jail Free cards: {player.get_out_of_jail_cards}",
    ]
    if player.in_jail:
        lines.append(f"  IN JAIL (attempt {player.jail_turns + 1} of 3)")
    if state.last_dice_roll:
        a, b = state.last_dice_roll
        lines.append(f"  Last dice roll: [{a}][{b}] = {a + b}")

    lines.append("")
    lines.append("OTHER PLAYERS:")
    for other in state.players:
        if other.id == player.id:
            continue
        if other.is_bankrupt:
            lines.append(f"  {other.name}: BANKRUPT")
            continue
        jail = " | IN JAIL" if other.in_jail else ""
        lines.append(
            f"  {other.name}: ${other.balance} | {get_space(other.position).name} "
            f"(space {other.position}) | {len(other.properties)} properties{jail}"
        )

    recent = state.game_log[-RECENT_EVENT_COUNT:]
    if recent:
        lines.append("")
        lines.append("RECENT EVENTS:")
        lines.extend(f"  {format_event(event, state)}" for event in recent)

    if state.pending_debt:
        debt = state.pending_debt
        creditor = "the Bank" if debt.creditor == BANK else get_player(state, debt.creditor).name
        lines.append("")
        lines.append(
            f"*** DEBT: ${debt.amount} owed to {creditor} for {debt.reason}. "
            f"Raise funds or declare bankruptcy. ***"
        )

    if state.active_trade:
        trade = state.active_trade
        lines.append("")
        lines.append("TRADE OFFER:")
        lines.append(f"  From: {get_player(state, trade.from_player_id).name}")
        lines.append(f"  Offering: {format_trade_items(trade.offered_properties, trade.offered_money)}")
        lines.append(f"  Requesting: {format_trade_items(trade.requested_properties, trade.requested_money)}")

    hints = _build_hints(player)
    if hints:
        lines.append("")
        lines.append("BUILDING OPPORTUNITIES:")
        lines.extend(f"  {hint}" for hint in hints)

    lines.append("")
    lines.append("PROPERTY OWNERSHIP:")
    for owner in state.players:
        if owner.is_bankrupt or not owner.properties:
            continue
        labels = [_property_label(pos, prop) for pos, prop in sorted(owner.properties.items())]
        lines.append(f"  {owner.name}: {', '.join(labels)}")

    return "\n".join(lines)


def build_auction_summary(state: GameState, player_id: str, position: int) -> str:
    """Describe an auction to one bidder."""
    player = get_player(state, player_id)
    space = get_space(position)
    price = getattr(space, "price", 0)
    return "\n".join([
        "=== AUCTION ===",
        f"Property: {space.name} (position {position})",
        f"List price: ${price}",
        f"Your balance: ${player.balance}",
        "",
        "Submit your bid. Bid 0 to pass. Highest bidder wins.",
    ])


def format_phase(phase: str) -> str:
    return phase.replace("_", " ").title()


def format_properties(player: PlayerState) -> str:
    """Group a player's properties by color group, railroads and utilities."""
    if not player.properties:
        return "None"

    groups: Dict[str, List[str]] = {}
    for position, prop in sorted(player.properties.items()):
        space = get_space(position)
        if isinstance(space, PropertySpace):
            group = space.color_group.value
        elif isinstance(space, RailroadSpace):
            group = "railroads"
        else:
            group = "utilities"
        groups.setdefault(group, []).append(_property_label(position, prop))

    return " | ".join(f"{group}: {', '.join(labels)}" for group, labels in groups.items())


def format_trade_items(positions: List[int], money: int) -> str:
    parts = []
    if positions:
        parts.append(", ".join(get_space(pos).name for pos in positions))
    if money > 0:
        parts.append(f"${money}")
    return " + ".join(parts) if parts else "Nothing"


def format_event(event: GameEvent, state: GameState) -> str:
    """One-line, human-readable description of an event."""

    def name(player_id: str) -> str:
        for p in state.players:
            if p.id == player_id:
                return p.name
        return player_id

    kind = event.type
    if kind == "dice_rolled":
        doubles = " DOUBLES!" if event.is_doubles else ""
        return f"{name(event.player_id)} rolled [{event.dice[0]}][{event.dice[1]}]{doubles}"
    if kind == "moved":
        return f"{name(event.player_id)} moved to {get_space(event.to_position).name}"
    if kind == "landed":
        return f"{name(event.player_id)} landed on {event.space_name}"
    if kind == "pass_go":
        return f"{name(event.player_id)} passed Go and collected ${event.amount}"
    if kind == "rent_paid":
        return (
            f"{name(event.payer_id)} paid ${event.amount} rent to {name(event.owner_id)} "
            f"for {get_space(event.position).name}"
        )
    if kind == "property_bought":
        return f"{name(event.player_id)} bought {get_space(event.position).name} for ${event.price}"
    if kind == "auction_started":
        return f"Auction started for {get_space(event.position).name}"
    if kind == "auction_bid":
        return f"{name(event.player_id)} bid ${event.amount}"
    if kind == "auction_won":
        return f"{name(event.player_id)} won auction for {get_space(event.position).name} at ${event.amount}"
    if kind == "auction_no_bids":
        return f"No bids on {get_space(event.position).name}"
    if kind == "house_built":
        return f"{name(event.player_id)} built house on {get_space(event.position).name} ({event.houses} houses)"
    if kind == "hotel_built":
        return f"{name(event.player_id)} built hotel on {get_space(event.position).name}"
    if kind == "house_sold":
        return (
            f"{name(event.player_id)} sold house on {get_space(event.position).name} "
            f"({event.houses} houses remain)"
        )
    if kind == "hotel_sold":
        return f"{name(event.player_id)} sold hotel on {get_space(event.position).name}"
    if kind == "card_drawn":
        return f'{name(event.player_id)} drew {event.deck.value}: "{event.text}"'
    if kind == "tax_paid":
        return f"{name(event.player_id)} paid ${event.amount} {event.space_name}"
    if kind == "jailed":
        return f"{name(event.player_id)} went to Jail: {event.reason}"
    if kind == "released":
        return f"{name(event.player_id)} got out of Jail: {event.reason}"
    if kind == "mortgaged":
        return f"{name(event.player_id)} mortgaged {get_space(event.position).name} for ${event.amount}"
    if kind == "unmortgaged":
        return f"{name(event.player_id)} unmortgaged {get_space(event.position).name} for ${event.amount}"
    if kind == "trade_proposed":
        return f"{name(event.from_player_id)} proposed a trade to {name(event.to_player_id)}"
    if kind == "trade_completed":
        return f"Trade completed: {event.description}"
    if kind == "trade_rejected":
        return f"{name(event.to_player_id)} rejected trade from {name(event.from_player_id)}"
    if kind == "bankruptcy":
        return f"{name(event.player_id)} declared BANKRUPTCY!"
    if kind == "game_over":
        return f"GAME OVER! {name(event.winner_id)} wins!"
    if kind == "collect":
        return f"{name(event.player_id)} collected ${event.amount}: {event.reason}"
    if kind == "pay":
        return f"{name(event.player_id)} paid ${event.amount}: {event.reason}"
    if kind == "transfer":
        return (
            f"{name(event.from_player_id)} paid ${event.amount} to {name(event.to_player_id)}: "
            f"{event.reason}"
        )
    return event.model_dump_json()


def _property_label(position: int, prop: PropertyState) -> str:
    label = get_space(position).name
    if prop.mortgaged:
        label += " [M]"
    if prop.houses == 5:
        label += " [Hotel]"
    elif prop.houses > 0:
        label += f" [{prop.houses}H]"
    return label


def _build_hints(player: PlayerState) -> List[str]:
    hints = []
    for color_group, positions in COLOR_GROUPS.items():
        if not owns_color_group(player, color_group) or group_has_mortgage(player, color_group):
            continue
        houses = [player.properties[pos].houses for pos in positions]
        if max(houses) >= 5:
            continue

        first: PropertySpace = get_property_space(positions[0])
        if player.balance < first.house_cost:
            hints.append(
                f"You have the {color_group.value} monopoly but can't afford to build "
                f"(${first.house_cost}/house, you have ${player.balance})."
            )
            continue

        fewest = min(houses)
        buildable = [
            f"{get_space(pos).name} (pos {pos})"
            for pos in positions
            if player.properties[pos].houses <= fewest and player.properties[pos].houses < 4
        ]
        if buildable:
            hints.append(
                f"{color_group.value} monopoly: can build on {', '.join(buildable)} "
                f"for ${first.house_cost}/house."
            )
    return hints
