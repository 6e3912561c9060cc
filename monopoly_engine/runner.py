"""
Synchronous game runner.

Drives agents through a game: asks the engine for available actions, lets
the acting agent choose, applies the choice, resolves landings and auctions,
and advances turns. Agent failures never reach the engine; after too many
rejected or failed choices a deterministic fallback action is applied.
"""

import logging
from typing import Callable, Dict, List, Optional

from monopoly_engine.actions import ActionType, AvailableAction, BaseAction, SubmitBid
from monopoly_engine.agents.base import Agent, find_action
from monopoly_engine.bank import get_active_players
from monopoly_engine.engine import ActionResult, GameEngine
from monopoly_engine.events import GameEvent
from monopoly_engine.exceptions import MonopolyError
from monopoly_engine.game_logger import GameLogger
from monopoly_engine.models import GameState, TurnPhase

logger = logging.getLogger(__name__)

EventCallback = Callable[[GameState, List[GameEvent]], None]

# Applied in order of preference when an agent cannot produce a valid action
FALLBACK_PRIORITY = (
    ActionType.END_TURN,
    ActionType.ROLL_DICE,
    ActionType.REJECT_TRADE,
    ActionType.AUCTION_PROPERTY,
    ActionType.SUBMIT_BID,
    ActionType.DECLARE_BANKRUPTCY,
)

# Forced turn completion prefers giving up over playing on
FORCED_END_PRIORITY = (
    ActionType.END_TURN,
    ActionType.DECLARE_BANKRUPTCY,
    ActionType.REJECT_TRADE,
    ActionType.AUCTION_PROPERTY,
    ActionType.SUBMIT_BID,
    ActionType.ROLL_DICE,
)

MAX_FORCED_STEPS = 50


class GameRunner:
    """Runs one game to completion with one agent per player."""

    def __init__(
        self,
        engine: GameEngine,
        state: GameState,
        agents: Dict[str, Agent],
        max_turns: int = 500,
        max_actions_per_turn: int = 100,
        max_failed_actions: int = 3,
        game_logger: Optional[GameLogger] = None,
        on_events: Optional[EventCallback] = None,
    ):
        """
        Initialize the runner.

        Args:
            engine: Engine that owns the game's random generator
            state: Starting state (fresh or seeded from a scenario)
            agents: Agent per player id; every player needs one
            max_turns: Stop after this turn number even without a winner
            max_actions_per_turn: Actions allowed before the turn is forced to end
            max_failed_actions: Rejected or failed agent choices before a fallback
            game_logger: Optional JSONL history writer
            on_events: Called with the new state and events after each successful step
        """
        missing = [p.id for p in state.players if p.id not in agents]
        if missing:
            raise ValueError(f"No agent for players: {', '.join(missing)}")

        self.engine = engine
        self.state = state
        self.agents = agents
        self.max_turns = max_turns
        self.max_actions_per_turn = max_actions_per_turn
        self.max_failed_actions = max_failed_actions
        self.game_logger = game_logger
        self.on_events = on_events
        self.forced_actions = 0

    def run(self) -> GameState:
        """Play until someone wins or the turn limit is reached."""
        if self.game_logger:
            self.game_logger.log_game_start(self.state, self.engine.seed)

        while not self.state.is_game_over and self.state.turn_number <= self.max_turns:
            self.play_turn()

        if not self.state.is_game_over:
            logger.info(f"Turn limit of {self.max_turns} reached without a winner")
        if self.game_logger:
            self.game_logger.log_game_end(self.state)
        return self.state

    def play_turn(self) -> None:
        """Play the current player's turn, including extra rolls after doubles."""
        player = self.state.current_player
        logger.debug(f"Turn {self.state.turn_number}: {player.name}")

        steps = 0
        while not self.state.is_game_over and self.state.turn_phase != TurnPhase.TURN_COMPLETE:
            if steps >= self.max_actions_per_turn:
                logger.warning(f"{player.name} hit the action limit, forcing end of turn")
                self._force_turn_end()
                break
            self.step()
            steps += 1

        if not self.state.is_game_over and self.state.turn_phase == TurnPhase.TURN_COMPLETE:
            self._record(self.engine.complete_turn(self.state), player.id, None)

    def step(self) -> None:
        """Advance the game by one engine call (or one full auction)."""
        phase = self.state.turn_phase
        if phase == TurnPhase.POST_ROLL_LAND:
            self._record(self.engine.resolve_landing(self.state), self.state.current_player.id, None)
        elif phase == TurnPhase.AUCTION:
            self._run_auction()
        elif phase == TurnPhase.TRADING and self.state.active_trade is not None:
            self._choose_and_apply(self.state.active_trade.to_player_id)
        else:
            self._choose_and_apply(self.state.current_player.id)

    # ------------------------------------------------------------------

    def _choose_and_apply(self, actor_id: str) -> None:
        agent = self.agents[actor_id]
        failures = 0
        while failures < self.max_failed_actions:
            available = self.engine.get_available_actions(self.state, actor_id)
            if not available:
                raise MonopolyError(f"No available actions for {actor_id} in {self.state.turn_phase.value}")
            try:
                action = agent.choose_action(self.state, available)
            except Exception as e:
                logger.warning(f"{agent.name} failed to choose an action: {e}")
                failures += 1
                continue

            result = self.engine.apply_action(self.state, action)
            self._record(result, actor_id, action)
            if result.success:
                return
            failures += 1

        logger.warning(f"{agent.name} made {failures} failed attempts, applying fallback action")
        self._apply_fallback(actor_id, FALLBACK_PRIORITY)

    def _run_auction(self) -> None:
        """Collect one sealed bid from every non-bankrupt player, then resolve."""
        bids: Dict[str, int] = {}
        for bidder in get_active_players(self.state):
            bids[bidder.id] = self._collect_bid(bidder.id)

        self._record(self.engine.resolve_auction(self.state, bids), self.state.current_player.id, None)

    def _collect_bid(self, bidder_id: str) -> int:
        agent = self.agents[bidder_id]
        for _ in range(self.max_failed_actions):
            available = self.engine.get_available_actions(self.state, bidder_id)
            try:
                action = agent.choose_action(self.state, available)
            except Exception as e:
                logger.warning(f"{agent.name} failed to bid: {e}")
                continue
            if not isinstance(action, SubmitBid):
                logger.warning(f"{agent.name} answered an auction with {action.action}")
                continue
            if action.player_id is None:
                action = action.model_copy(update={"player_id": bidder_id})
            if action.player_id != bidder_id:
                continue

            result = self.engine.apply_action(self.state, action)
            self._record(result, bidder_id, action)
            if result.success:
                return action.amount

        logger.warning(f"{agent.name} did not place a valid bid, counting it as 0")
        return 0

    def _apply_fallback(self, actor_id: str, priority) -> None:
        available = self.engine.get_available_actions(self.state, actor_id)
        action = _pick_fallback(available, priority, actor_id)
        if action is None:
            raise MonopolyError(f"No fallback action for {actor_id} in {self.state.turn_phase.value}")
        result = self.engine.apply_action(self.state, action)
        self._record(result, actor_id, action)
        if not result.success:
            raise MonopolyError(f"Fallback {action.action} was rejected: {result.error}")
        self.forced_actions += 1

    def _force_turn_end(self) -> None:
        for _ in range(MAX_FORCED_STEPS):
            if self.state.is_game_over or self.state.turn_phase == TurnPhase.TURN_COMPLETE:
                return
            phase = self.state.turn_phase
            if phase == TurnPhase.POST_ROLL_LAND:
                self._record(self.engine.resolve_landing(self.state), self.state.current_player.id, None)
            elif phase == TurnPhase.AUCTION:
                self._record(self.engine.resolve_auction(self.state, {}), self.state.current_player.id, None)
            elif phase == TurnPhase.TRADING and self.state.active_trade is not None:
                self._apply_fallback(self.state.active_trade.to_player_id, FORCED_END_PRIORITY)
            else:
                self._apply_fallback(self.state.current_player.id, FORCED_END_PRIORITY)
        raise MonopolyError("Could not force the turn to end")

    def _record(self, result: ActionResult, actor_id: str, action: Optional[BaseAction]) -> None:
        if self.game_logger:
            self.game_logger.log_action(
                result.state, actor_id, action, result.success, result.events, result.error,
            )
        if not result.success:
            return
        self.state = result.state
        if self.on_events and result.events:
            self.on_events(self.state, result.events)


def _pick_fallback(available: List[AvailableAction], priority, actor_id: str) -> Optional[BaseAction]:
    for action_type in priority:
        candidate = find_action(available, action_type)
        if candidate is None:
            continue
        if action_type == ActionType.SUBMIT_BID:
            return candidate.build(amount=0, player_id=actor_id)
        return candidate.build()
    return None
