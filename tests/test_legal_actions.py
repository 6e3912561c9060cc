"""
Seeded random play checking that the legal-actions list and apply_action agree.

Every action the engine lists as available must succeed when applied,
board-wide invariants must hold after every step, and the players' total
money may only change by what the step's events say the bank paid or took.
"""

import random

import pytest

from monopoly_engine.actions import ActionType
from monopoly_engine.agents import RandomAgent
from monopoly_engine.bank import count_buildings, get_active_players, get_player, is_bank, total_player_money
from monopoly_engine.board import OWNABLE_POSITIONS, get_property_space
from monopoly_engine.engine import GameEngine
from monopoly_engine.models import TurnPhase

MAX_STEPS = 250


def _concrete_actions(state, available):
    """Yield every distinct way the engine suggests to fill in ``available``."""
    if available.action == ActionType.TRADE_OFFER:
        params = available.parameters
        offered = params["offered_properties"].items_enum
        for target_id in params["target_player_id"].enum:
            target = get_player(state, target_id)
            requested = [pos for pos in params["requested_properties"].items_enum if pos in target.properties]
            if offered:
                yield available.build(target_player_id=target_id, offered_properties=[offered[0]])
            if requested:
                yield available.build(target_player_id=target_id, requested_properties=[requested[0]])
    elif "property_position" in available.parameters:
        for position in available.parameters["property_position"].enum:
            yield available.build(property_position=position)
    else:
        yield available.build()


def _check_invariants(state):
    houses = 0
    hotels = 0
    owners = {}
    for player in state.players:
        player_houses, player_hotels = count_buildings(player)
        houses += player_houses
        hotels += player_hotels
        for position in player.properties:
            assert position in OWNABLE_POSITIONS
            assert position not in owners, f"position {position} owned twice"
            owners[position] = player.id
        if player.is_bankrupt:
            assert player.properties == {}
        if player.id != state.current_player.id:
            assert player.balance >= 0

    assert state.bank_houses + houses == 32
    assert state.bank_hotels + hotels == 12
    assert state.bank_houses >= 0
    assert state.bank_hotels >= 0
    if state.current_player.balance < 0:
        assert state.turn_phase in (TurnPhase.PAYING_DEBT, TurnPhase.TRADING)
    assert not state.current_player.is_bankrupt or state.turn_phase == TurnPhase.TURN_COMPLETE


def _bank_flow(before, events):
    """Net money the players gain from the bank across ``events``."""
    flow = 0
    for event in events:
        if event.type in ("pass_go", "collect", "mortgaged"):
            flow += event.amount
        elif event.type in ("house_sold", "hotel_sold"):
            flow += event.refund
        elif event.type in ("pay", "tax_paid", "auction_won", "unmortgaged"):
            flow -= event.amount
        elif event.type == "property_bought":
            flow -= event.price
        elif event.type in ("house_built", "hotel_built"):
            flow -= get_property_space(event.position).house_cost
        elif event.type == "bankruptcy":
            # The bankrupt player's cash goes to the creditor, and any shortfall is written off.
            balance = get_player(before, event.player_id).balance
            flow -= balance if is_bank(event.creditor) else min(balance, 0)
    return flow


def _check_money_conserved(before, after, events):
    assert total_player_money(after) == total_player_money(before) + _bank_flow(before, events)


def _check_every_listed_action_applies(engine, state, actor_id):
    available = engine.get_available_actions(state, actor_id)
    assert available, f"no actions in {state.turn_phase.value}"
    for entry in available:
        for action in _concrete_actions(state, entry):
            result = engine.apply_action(state, action)
            assert result.success, f"{action} listed but rejected: {result.error}"
            _check_money_conserved(state, result.state, result.events)
    return available


def _check_bids(engine, state):
    for bidder in get_active_players(state):
        available = engine.get_available_actions(state, bidder.id)
        assert [a.action for a in available] == [ActionType.SUBMIT_BID]
        schema = available[0].parameters["amount"]
        for amount in (schema.minimum, schema.maximum):
            result = engine.apply_action(state, available[0].build(amount=amount, player_id=bidder.id))
            assert result.success, result.error


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_listed_actions_always_apply(seed):
    engine = GameEngine(seed=seed)
    state = engine.create_game(["Alice", "Bob", "Charlie"])
    agents = {p.id: RandomAgent(p.id, p.name, seed=seed + i) for i, p in enumerate(state.players)}
    bid_rng = random.Random(seed)

    for _ in range(MAX_STEPS):
        _check_invariants(state)
        if state.is_game_over:
            break

        phase = state.turn_phase
        if phase == TurnPhase.POST_ROLL_LAND:
            result = engine.resolve_landing(state)
        elif phase == TurnPhase.AUCTION:
            _check_bids(engine, state)
            bids = {p.id: bid_rng.randint(0, max(min(p.balance, 300), 0)) for p in get_active_players(state)}
            result = engine.resolve_auction(state, bids)
        elif phase == TurnPhase.TURN_COMPLETE:
            result = engine.complete_turn(state)
        else:
            actor_id = state.active_trade.to_player_id if phase == TurnPhase.TRADING else state.current_player.id
            available = _check_every_listed_action_applies(engine, state, actor_id)
            result = engine.apply_action(state, agents[actor_id].choose_action(state, available))

        assert result.success, result.error
        _check_money_conserved(state, result.state, result.events)
        state = result.state

    _check_invariants(state)


def test_same_seed_same_game():
    """Two engines with equal seeds fed equal choices produce identical histories."""
    final_states = []
    for _ in range(2):
        engine = GameEngine(seed=99)
        state = engine.create_game(["Alice", "Bob"])
        agents = {p.id: RandomAgent(p.id, p.name, seed=5) for p in state.players}
        for _ in range(150):
            if state.is_game_over:
                break
            phase = state.turn_phase
            if phase == TurnPhase.POST_ROLL_LAND:
                state = engine.resolve_landing(state).state
            elif phase == TurnPhase.AUCTION:
                state = engine.resolve_auction(state, {}).state
            elif phase == TurnPhase.TURN_COMPLETE:
                state = engine.complete_turn(state).state
            else:
                actor_id = state.active_trade.to_player_id if phase == TurnPhase.TRADING else state.current_player.id
                action = agents[actor_id].choose_action(state, engine.get_available_actions(state, actor_id))
                state = engine.apply_action(state, action).state
        final_states.append(state)

    first, second = final_states
    assert first == second
    assert first.game_log == second.game_log
