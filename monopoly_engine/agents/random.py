"""Random agent that makes random legal moves."""

import random
from typing import Any, Dict, List, Optional

from monopoly_engine.actions import ActionType, AvailableAction, BaseAction
from monopoly_engine.agents.base import Agent, find_action
from monopoly_engine.bank import get_player, is_tradable
from monopoly_engine.models import GameState


class RandomAgent(Agent):
    """
    Simple AI that makes random legal moves.

    Prioritizes ROLL_DICE and END_TURN actions to keep the game moving
    and avoid infinite loops.
    """

    def __init__(self, player_id: str, name: str, seed: Optional[int] = None):
        """
        Initialize the random agent.

        Args:
            player_id: The player's id in the game.
            name: The player's display name.
            seed: Seed for this agent's own random generator.
        """
        super().__init__(player_id, name)
        self.rng = random.Random(seed)

    def choose_action(self, state: GameState, available_actions: List[AvailableAction]) -> BaseAction:
        """
        Choose a random available action with basic priorities.

        Prioritizes ROLL_DICE and END_TURN to keep the game moving, and only
        declares bankruptcy when nothing else is possible.
        """
        roll = find_action(available_actions, ActionType.ROLL_DICE)
        if roll and self.rng.random() < 0.8:
            return roll.build()

        end_turn = find_action(available_actions, ActionType.END_TURN)
        if end_turn and self.rng.random() < 0.7:
            return end_turn.build()

        candidates = [a for a in available_actions if a.action != ActionType.DECLARE_BANKRUPTCY]
        available = self.rng.choice(candidates or available_actions)

        if available.action == ActionType.TRADE_OFFER:
            params = self._random_trade(state, available)
            if params is not None:
                return available.build(**params)
            others = [a for a in available_actions if a.action != ActionType.TRADE_OFFER]
            available = self.rng.choice(others)

        return available.build(**self._random_parameters(available))

    def _random_parameters(self, available: AvailableAction) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        for name, schema in available.parameters.items():
            if name not in available.required:
                continue
            if schema.enum:
                params[name] = self.rng.choice(schema.enum)
            elif schema.type == "integer":
                low = schema.minimum or 0
                high = schema.maximum if schema.maximum is not None else low
                params[name] = self.rng.randint(low, min(high, low + 200))
        return params

    def _random_trade(self, state: GameState, available: AvailableAction) -> Optional[Dict[str, Any]]:
        """Offer one of our properties for one of the target's, or for nothing."""
        me = get_player(state, self.player_id)
        offered = [pos for pos in me.properties if is_tradable(me, pos)]

        targets = []
        for target_id in available.parameters["target_player_id"].enum:
            target = get_player(state, target_id)
            requested = [pos for pos in target.properties if is_tradable(target, pos)]
            if offered or requested:
                targets.append((target_id, requested))
        if not targets:
            return None

        target_id, requested = self.rng.choice(targets)

        params: Dict[str, Any] = {"target_player_id": target_id}
        if offered:
            params["offered_properties"] = [self.rng.choice(sorted(offered))]
        if requested:
            params["requested_properties"] = [self.rng.choice(sorted(requested))]
        return params
