"""Greedy agent that prefers buying properties and building."""

import random
from typing import List

from monopoly_engine.actions import ActionType, AvailableAction, BaseAction
from monopoly_engine.agents.base import Agent, find_action
from monopoly_engine.bank import get_player
from monopoly_engine.board import get_ownable_space, get_property_space
from monopoly_engine.models import GameState

CASH_RESERVE = 200


class GreedyAgent(Agent):
    """
    Simple AI that prefers buying properties and building when possible.

    Will occasionally decline expensive purchases to trigger auctions,
    based on the ratio of property price to available cash.
    """

    def __init__(self, player_id: str, name: str, seed: int = 0):
        """
        Initialize the greedy agent.

        Args:
            player_id: The player's id in the game.
            name: The player's display name.
            seed: Seed for the occasional random purchase decision.
        """
        super().__init__(player_id, name)
        self.rng = random.Random(seed)

    def choose_action(self, state: GameState, available_actions: List[AvailableAction]) -> BaseAction:
        """
        Choose action with simple greedy strategy.

        Priority order:
        1. Bid or respond to trades when asked
        2. Escape debt (sell, then mortgage, then bankruptcy)
        3. Buy properties (unless too expensive)
        4. Build hotels/houses while keeping a cash reserve
        5. Roll dice
        6. End turn
        """
        player = get_player(state, self.player_id)

        bid = find_action(available_actions, ActionType.SUBMIT_BID)
        if bid:
            return bid.build(amount=self._bid_amount(state, bid))

        reject = find_action(available_actions, ActionType.REJECT_TRADE)
        if reject:
            # Simple agents don't trade
            return reject.build()

        if find_action(available_actions, ActionType.DECLARE_BANKRUPTCY):
            for action_type in (ActionType.END_TURN, ActionType.SELL_HOUSE, ActionType.MORTGAGE_PROPERTY):
                available = find_action(available_actions, action_type)
                if available:
                    return _with_first_position(available)
            return find_action(available_actions, ActionType.DECLARE_BANKRUPTCY).build()

        buy = find_action(available_actions, ActionType.BUY_PROPERTY)
        decline = find_action(available_actions, ActionType.AUCTION_PROPERTY)
        if decline:
            space = get_ownable_space(player.position)
            if buy and space is not None:
                price_ratio = space.price / max(player.balance, 1)
                # Decline if property costs more than 40% of cash
                if price_ratio > 0.4:
                    return decline.build()
                # For moderately expensive properties, randomly decline 30% of the time
                if price_ratio > 0.2 and self.rng.random() < 0.3:
                    return decline.build()
                return buy.build()
            return decline.build()

        if player.in_jail:
            card = find_action(available_actions, ActionType.USE_JAIL_CARD)
            if card:
                return card.build()
            fine = find_action(available_actions, ActionType.PAY_JAIL_FINE)
            if fine and player.balance > CASH_RESERVE * 2:
                return fine.build()

        for action_type in (ActionType.BUILD_HOTEL, ActionType.BUILD_HOUSE):
            available = find_action(available_actions, action_type)
            if available:
                position = available.parameters["property_position"].enum[0]
                space = get_property_space(position)
                if player.balance - space.house_cost >= CASH_RESERVE:
                    return available.build(property_position=position)

        for action_type in (ActionType.ROLL_DICE, ActionType.END_TURN):
            available = find_action(available_actions, action_type)
            if available:
                return available.build()

        return available_actions[0].build()

    def _bid_amount(self, state: GameState, bid: AvailableAction) -> int:
        space = get_ownable_space(state.current_player.position)
        maximum = bid.parameters["amount"].maximum or 0
        if space is None:
            return 0
        return min(space.price, maximum // 2)


def _with_first_position(available: AvailableAction) -> BaseAction:
    if "property_position" in available.parameters:
        return available.build(property_position=available.parameters["property_position"].enum[0])
    return available.build()
