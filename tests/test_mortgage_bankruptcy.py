"""
Tests for mortgages, debt and bankruptcy.
"""

from helpers import give, set_balance, set_phase

from monopoly_engine.actions import (
    ActionType,
    DeclareBankruptcy,
    EndTurn,
    MortgageProperty,
    UnmortgageProperty,
)
from monopoly_engine.bank import get_player, get_property_owner
from monopoly_engine.models import BANK, PendingDebt, TurnPhase


def _in_debt(state, balance, creditor=BANK, player_id="player_0"):
    set_balance(state, player_id, balance)
    state.pending_debt = PendingDebt(creditor=creditor, amount=-balance, reason="Rent")
    set_phase(state, TurnPhase.PAYING_DEBT)
    return state


def test_mortgage_pays_mortgage_value(engine, state):
    give(state, "player_0", 39)

    result = engine.apply_action(state, MortgageProperty(property_position=39))

    assert result.success
    assert get_player(result.state, "player_0").properties[39].mortgaged
    assert get_player(result.state, "player_0").balance == 1700
    assert result.events[-1].amount == 200


def test_cannot_mortgage_twice(engine, state):
    give(state, "player_0", 39, mortgaged=True)

    result = engine.apply_action(state, MortgageProperty(property_position=39))

    assert not result.success
    assert result.error == "Property is already mortgaged"


def test_cannot_mortgage_with_houses_in_group(engine, state):
    """Rule: all buildings in the colour-group must be sold before mortgaging."""
    give(state, "player_0", 1, houses=1)
    give(state, "player_0", 3)

    result = engine.apply_action(state, MortgageProperty(property_position=3))

    assert not result.success
    assert result.error == "Must sell all houses in the color group before mortgaging"


def test_cannot_mortgage_unowned_property(engine, state):
    result = engine.apply_action(state, MortgageProperty(property_position=39))

    assert not result.success
    assert result.error == "You do not own this property"


def test_unmortgage_costs_value_plus_interest(engine, state):
    give(state, "player_0", 39, mortgaged=True)

    result = engine.apply_action(state, UnmortgageProperty(property_position=39))

    assert result.success
    assert not get_player(result.state, "player_0").properties[39].mortgaged
    assert get_player(result.state, "player_0").balance == 1500 - 220


def test_unmortgage_rounds_interest_down(engine, state):
    give(state, "player_0", 1, mortgaged=True)

    result = engine.apply_action(state, UnmortgageProperty(property_position=1))

    # 30 mortgage value plus 10% interest
    assert get_player(result.state, "player_0").balance == 1467


def test_unmortgage_with_insufficient_funds(engine, state):
    give(state, "player_0", 39, mortgaged=True)
    set_balance(state, "player_0", 219)

    result = engine.apply_action(state, UnmortgageProperty(property_position=39))

    assert not result.success
    assert "Insufficient funds" in result.error


def test_mortgage_clears_debt_when_solvent(engine, state):
    give(state, "player_0", 39)
    _in_debt(state, -50)

    result = engine.apply_action(state, MortgageProperty(property_position=39))

    assert result.success
    assert get_player(result.state, "player_0").balance == 150
    assert result.state.pending_debt is None
    assert result.state.turn_phase == TurnPhase.POST_ACTION


def test_mortgage_short_of_debt_stays_in_debt(engine, state):
    give(state, "player_0", 1)
    _in_debt(state, -500)

    result = engine.apply_action(state, MortgageProperty(property_position=1))

    assert result.success
    assert get_player(result.state, "player_0").balance == -470
    assert result.state.turn_phase == TurnPhase.PAYING_DEBT


def test_unmortgage_not_allowed_in_debt(engine, state):
    give(state, "player_0", 39, mortgaged=True)
    _in_debt(state, -10)

    result = engine.apply_action(state, UnmortgageProperty(property_position=39))

    assert not result.success


def test_cannot_end_turn_while_in_debt(engine, state):
    _in_debt(state, -10)

    result = engine.apply_action(state, EndTurn())

    assert not result.success
    assert "debt" in result.error


def test_only_bankruptcy_when_nothing_to_sell(engine, state):
    _in_debt(state, -10)

    types = [a.action for a in engine.get_available_actions(state)]

    assert types == [ActionType.DECLARE_BANKRUPTCY]


def test_debt_actions_offer_mortgage_and_sale(engine, state):
    give(state, "player_0", 1, 3, houses=1)
    give(state, "player_0", 39)
    state.bank_houses = 30
    _in_debt(state, -10)

    available = {a.action: a for a in engine.get_available_actions(state)}

    assert available[ActionType.SELL_HOUSE].parameters["property_position"].enum == [1, 3]
    assert available[ActionType.MORTGAGE_PROPERTY].parameters["property_position"].enum == [39]
    assert ActionType.BUILD_HOUSE not in available
    assert ActionType.END_TURN not in available


def test_bankruptcy_to_bank_returns_everything(engine, four_player_state):
    state = four_player_state
    give(state, "player_0", 1, 3, houses=2)
    give(state, "player_0", 5, mortgaged=True)
    state.bank_houses = 28
    get_player(state, "player_0").get_out_of_jail_cards = 1
    _in_debt(state, -100)

    result = engine.apply_action(state, DeclareBankruptcy())

    assert result.success
    player = get_player(result.state, "player_0")
    assert player.is_bankrupt
    assert player.balance == 0
    assert player.properties == {}
    assert player.get_out_of_jail_cards == 0
    assert result.state.bank_houses == 32
    assert get_property_owner(result.state, 1) is None
    assert get_property_owner(result.state, 5) is None
    assert result.state.turn_phase == TurnPhase.TURN_COMPLETE
    assert result.state.winner is None
    assert result.events[-1].type == "bankruptcy"
    assert result.events[-1].creditor == BANK


def test_bankruptcy_to_player_transfers_assets(engine, state):
    give(state, "player_0", 1)
    give(state, "player_0", 5, mortgaged=True)
    get_player(state, "player_0").get_out_of_jail_cards = 1
    _in_debt(state, -20, creditor="player_1")

    result = engine.apply_action(state, DeclareBankruptcy())

    creditor = get_player(result.state, "player_1")
    assert set(creditor.properties) == {1, 5}
    assert creditor.properties[5].mortgaged
    assert creditor.get_out_of_jail_cards == 1
    assert creditor.balance == 1500
    assert get_player(result.state, "player_0").is_bankrupt


def test_last_bankruptcy_ends_game(engine, state):
    _in_debt(state, -20, creditor="player_1")

    result = engine.apply_action(state, DeclareBankruptcy())

    assert result.state.winner == "player_1"
    assert [e.type for e in result.events] == ["bankruptcy", "game_over"]
    assert engine.check_winner(result.state) == "player_1"
    assert engine.get_available_actions(result.state) == []


def test_bankruptcy_only_while_in_debt(engine, state):
    result = engine.apply_action(state, DeclareBankruptcy())

    assert not result.success
    assert result.error == "Cannot declare_bankruptcy during phase pre_roll"


def test_game_continues_after_bankruptcy(engine, four_player_state):
    state = four_player_state
    _in_debt(state, -20)
    bankrupt = engine.apply_action(state, DeclareBankruptcy()).state

    result = engine.complete_turn(bankrupt)

    assert result.state.current_player.id == "player_1"
    assert result.state.turn_phase == TurnPhase.PRE_ROLL
    assert engine.check_winner(result.state) is None
