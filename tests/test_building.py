"""
Tests for building and selling houses and hotels.
"""

from helpers import give, set_balance, set_phase

from monopoly_engine.actions import ActionType, BuildHotel, BuildHouse, SellHouse
from monopoly_engine.bank import get_player
from monopoly_engine.models import TurnPhase


def _houses(state, position, player_id="player_0"):
    return get_player(state, player_id).properties[position].houses


def _available(engine, state, action_type):
    for available in engine.get_available_actions(state):
        if available.action == action_type:
            return available
    return None


def test_build_first_house_on_brown(engine, state):
    """Building on a full color group costs the house price and takes a house from the bank."""
    give(state, "player_0", 1, 3)

    result = engine.apply_action(state, BuildHouse(property_position=1))

    assert result.success
    assert _houses(result.state, 1) == 1
    assert get_player(result.state, "player_0").balance == 1450
    assert result.state.bank_houses == 31
    assert result.events[-1].type == "house_built"


def test_even_build_rule(engine, state):
    """
    Houses must be built evenly across the color group.
    Rule: 'you cannot build a second House on any one Site until you have built one House on every Site'
    """
    give(state, "player_0", 1, 3)
    built = engine.apply_action(state, BuildHouse(property_position=1)).state

    second = engine.apply_action(built, BuildHouse(property_position=1))

    assert not second.success
    assert "evenly" in second.error
    assert _houses(built, 1) == 1


def test_cannot_build_without_monopoly(engine, state):
    give(state, "player_0", 1)

    result = engine.apply_action(state, BuildHouse(property_position=1))

    assert not result.success
    assert result.error == "You must own all properties in the color group"


def test_cannot_build_with_mortgaged_group_member(engine, state):
    give(state, "player_0", 1)
    give(state, "player_0", 3, mortgaged=True)

    result = engine.apply_action(state, BuildHouse(property_position=1))

    assert not result.success
    assert "mortgaged" in result.error


def test_cannot_build_when_bank_has_no_houses(engine, state):
    give(state, "player_0", 1, 3)
    state.bank_houses = 0

    result = engine.apply_action(state, BuildHouse(property_position=1))

    assert not result.success
    assert result.error == "No houses available in the bank"


def test_cannot_build_fifth_house(engine, state):
    give(state, "player_0", 1, 3, houses=4)
    state.bank_houses = 24

    result = engine.apply_action(state, BuildHouse(property_position=1))

    assert not result.success
    assert "build_hotel" in result.error


def test_cannot_build_without_funds(engine, state):
    give(state, "player_0", 1, 3)
    set_balance(state, "player_0", 49)

    result = engine.apply_action(state, BuildHouse(property_position=1))

    assert not result.success
    assert "Insufficient funds" in result.error


def test_building_allowed_after_action(engine, state):
    give(state, "player_0", 1, 3)
    set_phase(state, TurnPhase.POST_ACTION)

    assert engine.apply_action(state, BuildHouse(property_position=3)).success


def test_building_not_allowed_while_in_debt(engine, state):
    give(state, "player_0", 1, 3)
    set_phase(state, TurnPhase.PAYING_DEBT)

    result = engine.apply_action(state, BuildHouse(property_position=1))

    assert not result.success
    assert result.error.startswith("Cannot build_house during phase")


def test_build_hotel_returns_houses_to_bank(engine, state):
    """Upgrading to a hotel returns the four houses and takes one hotel."""
    give(state, "player_0", 1, 3, houses=4)
    state.bank_houses = 24

    result = engine.apply_action(state, BuildHotel(property_position=1))

    assert result.success
    assert _houses(result.state, 1) == 5
    assert result.state.bank_houses == 28
    assert result.state.bank_hotels == 11
    assert get_player(result.state, "player_0").balance == 1450
    assert result.events[-1].type == "hotel_built"


def test_hotel_requires_four_houses(engine, state):
    give(state, "player_0", 1, 3, houses=3)
    state.bank_houses = 26

    result = engine.apply_action(state, BuildHotel(property_position=1))

    assert not result.success
    assert result.error == "Must have exactly 4 houses to build a hotel"


def test_hotel_requires_four_houses_across_group(engine, state):
    give(state, "player_0", 1, houses=4)
    give(state, "player_0", 3, houses=3)
    state.bank_houses = 25

    result = engine.apply_action(state, BuildHotel(property_position=1))

    assert not result.success
    assert "evenly" in result.error


def test_hotel_requires_bank_hotel(engine, state):
    give(state, "player_0", 1, 3, houses=4)
    state.bank_houses = 24
    state.bank_hotels = 0

    result = engine.apply_action(state, BuildHotel(property_position=1))

    assert not result.success
    assert result.error == "No hotels available in the bank"


def test_sell_house_refunds_half_cost(engine, state):
    give(state, "player_0", 1, 3, houses=1)
    state.bank_houses = 30

    result = engine.apply_action(state, SellHouse(property_position=1))

    assert result.success
    assert _houses(result.state, 1) == 0
    assert result.state.bank_houses == 31
    assert get_player(result.state, "player_0").balance == 1525
    assert result.events[-1].refund == 25


def test_even_sell_rule(engine, state):
    give(state, "player_0", 1, houses=1)
    give(state, "player_0", 3, houses=2)
    state.bank_houses = 29

    result = engine.apply_action(state, SellHouse(property_position=1))

    assert not result.success
    assert "evenly" in result.error
    assert engine.apply_action(state, SellHouse(property_position=3)).success


def test_sell_hotel_downgrades_to_four_houses(engine, state):
    give(state, "player_0", 1, 3, houses=5)
    state.bank_hotels = 10

    result = engine.apply_action(state, SellHouse(property_position=1))

    assert result.success
    assert _houses(result.state, 1) == 4
    assert result.state.bank_houses == 28
    assert result.state.bank_hotels == 11
    assert result.events[-1].type == "hotel_sold"


def test_sell_hotel_during_house_shortage_clears_property(engine, state):
    give(state, "player_0", 1, 3, houses=5)
    state.bank_houses = 2
    state.bank_hotels = 10

    result = engine.apply_action(state, SellHouse(property_position=1))

    assert result.success
    assert _houses(result.state, 1) == 0
    assert result.state.bank_houses == 2
    assert result.state.bank_hotels == 11


def test_sell_without_houses_fails(engine, state):
    give(state, "player_0", 1, 3)

    result = engine.apply_action(state, SellHouse(property_position=1))

    assert not result.success
    assert result.error == "No houses to sell"


def test_available_build_positions_follow_even_rule(engine, state):
    give(state, "player_0", 1, 3)
    available = _available(engine, state, ActionType.BUILD_HOUSE)
    assert available.parameters["property_position"].enum == [1, 3]

    built = engine.apply_action(state, BuildHouse(property_position=1)).state
    available = _available(engine, built, ActionType.BUILD_HOUSE)
    assert available.parameters["property_position"].enum == [3]


def test_no_build_action_without_monopoly(engine, state):
    give(state, "player_0", 1)
    assert _available(engine, state, ActionType.BUILD_HOUSE) is None
    assert _available(engine, state, ActionType.BUILD_HOTEL) is None
