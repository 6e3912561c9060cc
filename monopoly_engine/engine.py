"""
Turn engine: legal actions, action validation and landing resolution.

The engine never mutates a state passed to it. Every successful call
returns a fresh ``GameState`` plus the events it emitted; every rejected
call returns the original state untouched with an error message.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Union

from pydantic import ValidationError

from monopoly_engine import bank
from monopoly_engine.actions import (
    ActionType,
    AvailableAction,
    BaseAction,
    ParameterSchema,
    ProposeTrade,
    SubmitBid,
    parse_action,
)
from monopoly_engine.board import (
    BOARD_SIZE,
    JAIL_POSITION,
    find_nearest,
    get_ownable_space,
    get_property_space,
    get_space,
)
from monopoly_engine.cards import (
    Card,
    Collect,
    CollectFromEachPlayer,
    DeckType,
    GetOutOfJailFree,
    GoToJail,
    MoveBack,
    MoveTo,
    MoveToNearest,
    Pay,
    PayEachPlayer,
    PayPerHouse,
    draw_card,
    get_card_table,
)
from monopoly_engine.config import DEFAULT_CONFIG, GameConfig
from monopoly_engine.dice import dice_total, is_doubles, roll_dice
from monopoly_engine.events import (
    AuctionBidEvent,
    AuctionNoBidsEvent,
    AuctionStartedEvent,
    AuctionWonEvent,
    BankruptcyEvent,
    CardDrawnEvent,
    CollectEvent,
    DiceRolledEvent,
    GameEvent,
    GameOverEvent,
    HotelBuiltEvent,
    HotelSoldEvent,
    HouseBuiltEvent,
    HouseSoldEvent,
    JailedEvent,
    LandedEvent,
    MortgagedEvent,
    MovedEvent,
    PassGoEvent,
    PayEvent,
    PropertyBoughtEvent,
    ReleasedEvent,
    RentPaidEvent,
    TaxPaidEvent,
    TradeCompletedEvent,
    TradeProposedEvent,
    TradeRejectedEvent,
    TransferEvent,
    UnmortgagedEvent,
)
from monopoly_engine.exceptions import InvalidActionError
from monopoly_engine.models import BANK, GameState, PendingDebt, PlayerState, TradeOffer, TurnPhase
from monopoly_engine.rent import calculate_rent
from monopoly_engine.spaces import SpaceType, TaxSpace
from monopoly_engine.state import create_initial_state

logger = logging.getLogger(__name__)

_MANAGEMENT_PHASES = frozenset({TurnPhase.PRE_ROLL, TurnPhase.POST_ACTION})
_RAISE_FUNDS_PHASES = frozenset({TurnPhase.PRE_ROLL, TurnPhase.POST_ACTION, TurnPhase.PAYING_DEBT})

ACTION_PHASES: Dict[ActionType, FrozenSet[TurnPhase]] = {
    ActionType.ROLL_DICE: frozenset({TurnPhase.PRE_ROLL, TurnPhase.AWAITING_ROLL}),
    ActionType.BUY_PROPERTY: frozenset({TurnPhase.PURCHASE_DECISION}),
    ActionType.AUCTION_PROPERTY: frozenset({TurnPhase.PURCHASE_DECISION}),
    ActionType.SUBMIT_BID: frozenset({TurnPhase.AUCTION}),
    ActionType.BUILD_HOUSE: _MANAGEMENT_PHASES,
    ActionType.BUILD_HOTEL: _MANAGEMENT_PHASES,
    ActionType.UNMORTGAGE_PROPERTY: _MANAGEMENT_PHASES,
    ActionType.SELL_HOUSE: _RAISE_FUNDS_PHASES,
    ActionType.MORTGAGE_PROPERTY: _RAISE_FUNDS_PHASES,
    ActionType.TRADE_OFFER: _RAISE_FUNDS_PHASES,
    ActionType.ACCEPT_TRADE: frozenset({TurnPhase.TRADING}),
    ActionType.REJECT_TRADE: frozenset({TurnPhase.TRADING}),
    ActionType.PAY_JAIL_FINE: frozenset({TurnPhase.PRE_ROLL, TurnPhase.AWAITING_ROLL}),
    ActionType.USE_JAIL_CARD: frozenset({TurnPhase.PRE_ROLL, TurnPhase.AWAITING_ROLL}),
    ActionType.END_TURN: frozenset({TurnPhase.POST_ACTION, TurnPhase.PAYING_DEBT}),
    ActionType.DECLARE_BANKRUPTCY: frozenset({TurnPhase.PAYING_DEBT}),
}


@dataclass
class ActionResult:
    """Outcome of an engine call."""

    success: bool
    state: GameState
    events: List[GameEvent] = field(default_factory=list)
    error: Optional[str] = None


class GameEngine:
    """
    Monopoly rules engine.

    Owns the random generator for dice and card shuffles, so two engines
    built with the same seed and fed the same actions produce identical
    states and events.
    """

    def __init__(self, seed: Optional[int] = None, config: Optional[GameConfig] = None):
        self.seed = seed
        self.config = config or DEFAULT_CONFIG
        self.rng = random.Random(seed)
        self._handlers: Dict[ActionType, Callable[[GameState, Any, List[GameEvent]], None]] = {
            ActionType.ROLL_DICE: self._roll_dice,
            ActionType.BUY_PROPERTY: self._buy_property,
            ActionType.AUCTION_PROPERTY: self._auction_property,
            ActionType.SUBMIT_BID: self._submit_bid,
            ActionType.BUILD_HOUSE: self._build_house,
            ActionType.BUILD_HOTEL: self._build_hotel,
            ActionType.SELL_HOUSE: self._sell_house,
            ActionType.MORTGAGE_PROPERTY: self._mortgage_property,
            ActionType.UNMORTGAGE_PROPERTY: self._unmortgage_property,
            ActionType.TRADE_OFFER: self._trade_offer,
            ActionType.ACCEPT_TRADE: self._accept_trade,
            ActionType.REJECT_TRADE: self._reject_trade,
            ActionType.PAY_JAIL_FINE: self._pay_jail_fine,
            ActionType.USE_JAIL_CARD: self._use_jail_card,
            ActionType.END_TURN: self._end_turn,
            ActionType.DECLARE_BANKRUPTCY: self._declare_bankruptcy,
        }

    def create_game(self, player_names: List[str]) -> GameState:
        """Create a new game, shuffling both decks with this engine's generator."""
        return create_initial_state(player_names, self.rng, self.config)

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def apply_action(self, state: GameState, action: Union[BaseAction, Mapping[str, Any]]) -> ActionResult:
        """
        Validate and apply one action for the acting player.

        Args:
            state: Current game state (not modified)
            action: A parsed action, or a raw mapping tagged by ``action``

        Returns:
            ActionResult with the new state and emitted events on success,
            or the original state and an error message on rejection
        """
        if not isinstance(action, BaseAction):
            try:
                action = parse_action(action)
            except ValidationError as e:
                return self._reject(state, f"Malformed action: {_format_validation_error(e)}")

        if state.is_game_over:
            return self._reject(state, "Game is over")

        action_type = ActionType(action.action)
        if state.turn_phase not in ACTION_PHASES[action_type]:
            return self._reject(
                state, f"Cannot {action_type.value} during phase {state.turn_phase.value}"
            )

        new_state = state.clone()
        events: List[GameEvent] = []
        try:
            self._handlers[action_type](new_state, action, events)
        except InvalidActionError as e:
            return self._reject(state, str(e))

        new_state.game_log.extend(events)
        logger.debug(
            f"Turn {state.turn_number}: {state.current_player.name} {action_type.value} "
            f"-> {new_state.turn_phase.value} ({len(events)} events)"
        )
        return ActionResult(success=True, state=new_state, events=events)

    def resolve_landing(self, state: GameState) -> ActionResult:
        """
        Resolve the space the current player landed on.

        Card effects that move the player are resolved in the same call,
        looping until the player settles.
        """
        if state.turn_phase != TurnPhase.POST_ROLL_LAND:
            return self._reject(state, "No landing to resolve")

        new_state = state.clone()
        events: List[GameEvent] = []
        while new_state.turn_phase == TurnPhase.POST_ROLL_LAND:
            self._resolve_space(new_state, events)

        new_state.game_log.extend(events)
        return ActionResult(success=True, state=new_state, events=events)

    def resolve_auction(self, state: GameState, bids: Mapping[str, int]) -> ActionResult:
        """
        Resolve an auction for the property the current player declined.

        The highest strictly positive bid wins; among equal highest bids the
        first one in ``bids`` iteration order wins. With no positive bid the
        property stays unowned.

        Args:
            state: Game state in the ``auction`` phase
            bids: Bid amount per player id

        Raises:
            PlayerNotFoundError: If a bidder id does not exist
        """
        if state.turn_phase != TurnPhase.AUCTION:
            return self._reject(state, "No auction in progress")

        position = state.current_player.position
        space = get_ownable_space(position)
        if space is None or bank.is_property_owned(state, position):
            return self._reject(state, "Current space cannot be auctioned")

        for bidder_id, amount in bids.items():
            bidder = bank.get_player(state, bidder_id)
            if amount < 0:
                return self._reject(state, "Bid must be non-negative")
            if amount > 0 and (bidder.is_bankrupt or amount > bidder.balance):
                return self._reject(state, f"Bid of ${amount} by {bidder.name} exceeds balance")

        winner_id: Optional[str] = None
        highest = 0
        for bidder_id, amount in bids.items():
            if amount > highest:
                winner_id = bidder_id
                highest = amount

        new_state = state.clone()
        events: List[GameEvent] = []
        if winner_id is None:
            events.append(AuctionNoBidsEvent(position=position))
        else:
            winner = bank.get_player(new_state, winner_id)
            bank.transfer_money(winner, None, highest)
            bank.grant_property(winner, position)
            events.append(AuctionWonEvent(player_id=winner_id, position=position, amount=highest))
            logger.debug(f"{winner.name} won {space.name} at auction for ${highest}")

        new_state.turn_phase = TurnPhase.POST_ACTION
        new_state.game_log.extend(events)
        return ActionResult(success=True, state=new_state, events=events)

    def complete_turn(self, state: GameState) -> ActionResult:
        """
        Finish a completed turn: declare a winner if one player remains,
        otherwise hand the turn to the next non-bankrupt player.
        """
        if state.is_game_over:
            return self._reject(state, "Game is over")
        if state.turn_phase != TurnPhase.TURN_COMPLETE:
            return self._reject(state, "Turn is not complete")

        new_state = state.clone()
        events: List[GameEvent] = []
        if not self._declare_winner_if_decided(new_state, events):
            self._advance_to_next_player(new_state)

        new_state.game_log.extend(events)
        return ActionResult(success=True, state=new_state, events=events)

    def check_winner(self, state: GameState) -> Optional[str]:
        """Return the id of the only non-bankrupt player, if exactly one remains."""
        if state.winner is not None:
            return state.winner
        active = bank.get_active_players(state)
        return active[0].id if len(active) == 1 else None

    # ------------------------------------------------------------------
    # Legal actions
    # ------------------------------------------------------------------

    def get_available_actions(self, state: GameState, player_id: Optional[str] = None) -> List[AvailableAction]:
        """
        List every action that would succeed if applied now.

        Args:
            state: Current game state
            player_id: Acting player for the ``auction`` phase, where every
                player bids; defaults to the current player

        Returns:
            Ordered list of available actions with parameter schemas
        """
        if state.is_game_over:
            return []

        player = state.current_player
        phase = state.turn_phase
        actions: List[AvailableAction] = []

        if phase in (TurnPhase.PRE_ROLL, TurnPhase.AWAITING_ROLL):
            actions.append(AvailableAction(
                action=ActionType.ROLL_DICE,
                description="Roll for doubles to leave jail" if player.in_jail else "Roll the dice and move",
            ))
            if player.in_jail:
                actions.extend(self._jail_actions(player))
            if phase == TurnPhase.PRE_ROLL:
                actions.extend(self._management_actions(state, player, debt=False))

        elif phase == TurnPhase.PURCHASE_DECISION:
            space = get_ownable_space(player.position)
            if space is not None and not bank.is_property_owned(state, space.position):
                if player.balance >= space.price:
                    actions.append(AvailableAction(
                        action=ActionType.BUY_PROPERTY,
                        description=f"Buy {space.name} for ${space.price}",
                    ))
                actions.append(AvailableAction(
                    action=ActionType.AUCTION_PROPERTY,
                    description=f"Decline {space.name} and put it up for auction",
                ))

        elif phase == TurnPhase.AUCTION:
            bidder = bank.get_player(state, player_id) if player_id else player
            if not bidder.is_bankrupt:
                actions.append(AvailableAction(
                    action=ActionType.SUBMIT_BID,
                    description="Submit a sealed bid (0 to pass)",
                    parameters={
                        "amount": ParameterSchema(
                            type="integer",
                            description="Bid amount in dollars",
                            minimum=0,
                            maximum=max(bidder.balance, 0),
                        ),
                    },
                    required=["amount"],
                ))

        elif phase == TurnPhase.PAYING_DEBT:
            actions.extend(self._management_actions(state, player, debt=True))
            actions.append(AvailableAction(
                action=ActionType.DECLARE_BANKRUPTCY,
                description="Declare bankruptcy and leave the game",
            ))
            if player.balance >= 0:
                actions.append(AvailableAction(action=ActionType.END_TURN, description="End your turn"))

        elif phase == TurnPhase.TRADING:
            if state.active_trade is not None and self._trade_error(state, state.active_trade) is None:
                actions.append(AvailableAction(action=ActionType.ACCEPT_TRADE, description="Accept the trade offer"))
            actions.append(AvailableAction(action=ActionType.REJECT_TRADE, description="Reject the trade offer"))

        elif phase == TurnPhase.POST_ACTION:
            actions.append(AvailableAction(action=ActionType.END_TURN, description="End your turn"))
            actions.extend(self._management_actions(state, player, debt=False))

        return actions

    def _jail_actions(self, player: PlayerState) -> List[AvailableAction]:
        actions = []
        if player.get_out_of_jail_cards > 0:
            actions.append(AvailableAction(
                action=ActionType.USE_JAIL_CARD,
                description="Use a Get Out of Jail Free card",
            ))
        if player.balance >= self.config.jail_fine:
            actions.append(AvailableAction(
                action=ActionType.PAY_JAIL_FINE,
                description=f"Pay the ${self.config.jail_fine} fine to leave jail",
            ))
        return actions

    def _management_actions(self, state: GameState, player: PlayerState, debt: bool) -> List[AvailableAction]:
        checks = [] if debt else [
            (ActionType.BUILD_HOUSE, "Build a house", self._build_house_error),
            (ActionType.BUILD_HOTEL, "Build a hotel", self._build_hotel_error),
        ]
        checks.append((ActionType.SELL_HOUSE, "Sell a house or hotel back to the bank", self._sell_house_error))
        checks.append((ActionType.MORTGAGE_PROPERTY, "Mortgage a property", self._mortgage_error))
        if not debt:
            checks.append((ActionType.UNMORTGAGE_PROPERTY, "Pay off a mortgage", self._unmortgage_error))

        actions = []
        for action_type, description, error_check in checks:
            positions = [pos for pos in sorted(player.properties) if error_check(state, player, pos) is None]
            if positions:
                actions.append(AvailableAction(
                    action=action_type,
                    description=description,
                    parameters={
                        "property_position": ParameterSchema(
                            type="integer",
                            description="Board position of the property",
                            enum=positions,
                        ),
                    },
                    required=["property_position"],
                ))

        trade = self._trade_action(state, player)
        if trade is not None:
            actions.append(trade)
        return actions

    def _trade_action(self, state: GameState, player: PlayerState) -> Optional[AvailableAction]:
        others = [p for p in bank.get_active_players(state) if p.id != player.id]
        offerable = [pos for pos in sorted(player.properties) if bank.is_tradable(player, pos)]
        requestable = sorted(
            pos for other in others for pos in other.properties if bank.is_tradable(other, pos)
        )
        if not others or not (offerable or requestable):
            return None
        return AvailableAction(
            action=ActionType.TRADE_OFFER,
            description="Propose a trade to another player",
            parameters={
                "target_player_id": ParameterSchema(
                    type="string",
                    description="Player to trade with",
                    enum=[p.id for p in others],
                ),
                "offered_properties": ParameterSchema(
                    type="array",
                    description="Positions of your properties to give",
                    items_enum=offerable,
                ),
                "offered_money": ParameterSchema(
                    type="integer",
                    description="Cash to give",
                    minimum=0,
                    maximum=max(player.balance, 0),
                ),
                "requested_properties": ParameterSchema(
                    type="array",
                    description="Positions of the target's properties to receive",
                    items_enum=requestable,
                ),
                "requested_money": ParameterSchema(
                    type="integer",
                    description="Cash to receive",
                    minimum=0,
                ),
            },
            required=["target_player_id"],
        )

    # ------------------------------------------------------------------
    # Rolling and movement
    # ------------------------------------------------------------------

    def _roll_dice(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        dice = roll_dice(self.rng)
        doubles = is_doubles(dice)
        state.last_dice_roll = dice
        events.append(DiceRolledEvent(player_id=player.id, dice=dice, is_doubles=doubles))

        if player.in_jail:
            self._roll_in_jail(state, player, dice, events)
            return

        if doubles:
            player.doubles_count += 1
            if player.doubles_count >= 3:
                self._send_to_jail(player, "Rolled three consecutive doubles", events)
                state.turn_phase = TurnPhase.POST_ACTION
                return
        else:
            player.doubles_count = 0

        self._move_forward(player, dice_total(dice), events)
        state.turn_phase = TurnPhase.POST_ROLL_LAND

    def _roll_in_jail(self, state: GameState, player: PlayerState, dice, events: List[GameEvent]) -> None:
        if is_doubles(dice):
            self._release(player, "rolled doubles", events)
            self._move_forward(player, dice_total(dice), events)
            state.turn_phase = TurnPhase.POST_ROLL_LAND
            return

        player.jail_turns += 1
        if player.jail_turns < self.config.max_jail_turns:
            state.turn_phase = TurnPhase.POST_ACTION
            return

        fine = self.config.jail_fine
        bank.transfer_money(player, None, fine)
        events.append(PayEvent(player_id=player.id, amount=fine, reason="Jail fine"))
        self._release(player, f"paid ${fine} fine after {self.config.max_jail_turns} failed rolls", events)
        self._move_forward(player, dice_total(dice), events)
        state.turn_phase = TurnPhase.POST_ROLL_LAND
        bank.record_debt_if_negative(state, player, BANK, "Jail fine")

    def _move_forward(self, player: PlayerState, spaces: int, events: List[GameEvent]) -> None:
        old_position = player.position
        new_position = (old_position + spaces) % BOARD_SIZE
        if spaces > 0 and new_position < old_position:
            self._collect_go_salary(player, events)
        player.position = new_position
        events.append(MovedEvent(player_id=player.id, from_position=old_position, to_position=new_position))

    def _move_to(self, player: PlayerState, target: int, passed_go: bool, events: List[GameEvent]) -> None:
        old_position = player.position
        if passed_go:
            self._collect_go_salary(player, events)
        player.position = target
        events.append(MovedEvent(player_id=player.id, from_position=old_position, to_position=target))

    def _collect_go_salary(self, player: PlayerState, events: List[GameEvent]) -> None:
        player.balance += self.config.go_salary
        events.append(PassGoEvent(player_id=player.id, amount=self.config.go_salary))

    def _send_to_jail(self, player: PlayerState, reason: str, events: List[GameEvent]) -> None:
        player.position = JAIL_POSITION
        player.in_jail = True
        player.jail_turns = 0
        player.doubles_count = 0
        events.append(JailedEvent(player_id=player.id, reason=reason))

    def _release(self, player: PlayerState, reason: str, events: List[GameEvent]) -> None:
        player.in_jail = False
        player.jail_turns = 0
        events.append(ReleasedEvent(player_id=player.id, reason=reason))

    # ------------------------------------------------------------------
    # Landing resolution
    # ------------------------------------------------------------------

    def _resolve_space(self, state: GameState, events: List[GameEvent]) -> None:
        player = state.current_player
        space = get_space(player.position)
        events.append(LandedEvent(player_id=player.id, position=space.position, space_name=space.name))

        if space.space_type in (SpaceType.GO, SpaceType.JAIL, SpaceType.FREE_PARKING):
            state.turn_phase = TurnPhase.POST_ACTION

        elif space.space_type == SpaceType.GO_TO_JAIL:
            self._send_to_jail(player, "Landed on Go To Jail", events)
            state.turn_phase = TurnPhase.POST_ACTION

        elif isinstance(space, TaxSpace):
            bank.transfer_money(player, None, space.amount)
            events.append(TaxPaidEvent(player_id=player.id, amount=space.amount, space_name=space.name))
            state.turn_phase = TurnPhase.POST_ACTION
            bank.record_debt_if_negative(state, player, BANK, space.name)

        elif space.space_type == SpaceType.CHANCE:
            self._draw_card(state, player, DeckType.CHANCE, events)

        elif space.space_type == SpaceType.COMMUNITY_CHEST:
            self._draw_card(state, player, DeckType.COMMUNITY_CHEST, events)

        else:
            self._resolve_ownable(state, player, events)

    def _resolve_ownable(self, state: GameState, player: PlayerState, events: List[GameEvent]) -> None:
        space = get_ownable_space(player.position)
        multiplier = state.rent_multiplier
        state.rent_multiplier = None

        owner = bank.get_property_owner(state, space.position)
        if owner is None:
            state.turn_phase = TurnPhase.PURCHASE_DECISION
            return

        state.turn_phase = TurnPhase.POST_ACTION
        rent = calculate_rent(space, owner, state.last_dice_roll, payer_id=player.id, multiplier=multiplier)
        if rent <= 0:
            return

        bank.transfer_money(player, owner, rent)
        events.append(RentPaidEvent(payer_id=player.id, owner_id=owner.id, position=space.position, amount=rent))
        logger.debug(f"{player.name} paid ${rent} rent to {owner.name} for {space.name}")
        bank.record_debt_if_negative(state, player, owner.id, f"Rent on {space.name}")

    def _draw_card(self, state: GameState, player: PlayerState, deck_type: DeckType, events: List[GameEvent]) -> None:
        if deck_type == DeckType.CHANCE:
            deck, discard_pile = state.chance_deck, state.chance_discard_pile
        else:
            deck, discard_pile = state.community_chest_deck, state.community_chest_discard_pile

        index = draw_card(deck, discard_pile, self.rng)
        card = get_card_table(deck_type)[index]
        # Jail cards stay with the player instead of the discard pile
        if not isinstance(card.effect, GetOutOfJailFree):
            discard_pile.append(index)

        events.append(CardDrawnEvent(player_id=player.id, deck=deck_type, card_id=card.card_id, text=card.text))
        self._apply_card_effect(state, player, card, events)

    def _apply_card_effect(self, state: GameState, player: PlayerState, card: Card, events: List[GameEvent]) -> None:
        effect = card.effect
        state.turn_phase = TurnPhase.POST_ACTION

        if isinstance(effect, MoveTo):
            passed_go = effect.collect_go and effect.position < player.position
            self._move_to(player, effect.position, passed_go, events)
            state.turn_phase = TurnPhase.POST_ROLL_LAND

        elif isinstance(effect, MoveBack):
            self._move_to(player, (player.position - effect.spaces) % BOARD_SIZE, False, events)
            state.turn_phase = TurnPhase.POST_ROLL_LAND

        elif isinstance(effect, MoveToNearest):
            target, wrapped = find_nearest(player.position, effect.space_type)
            self._move_to(player, target, wrapped, events)
            state.rent_multiplier = effect.pay_multiplier
            state.turn_phase = TurnPhase.POST_ROLL_LAND

        elif isinstance(effect, Collect):
            player.balance += effect.amount
            events.append(CollectEvent(player_id=player.id, amount=effect.amount, reason=card.text))

        elif isinstance(effect, Pay):
            self._pay_bank(state, player, effect.amount, card.text, events)

        elif isinstance(effect, PayPerHouse):
            houses, hotels = bank.count_buildings(player)
            total = houses * effect.house_amount + hotels * effect.hotel_amount
            if total > 0:
                self._pay_bank(state, player, total, card.text, events)

        elif isinstance(effect, CollectFromEachPlayer):
            for other in bank.get_active_players(state):
                if other.id == player.id:
                    continue
                # Payers are capped at their cash so only the drawer can end up in debt.
                amount = min(effect.amount, max(other.balance, 0))
                bank.transfer_money(other, player, amount)
                events.append(TransferEvent(
                    from_player_id=other.id, to_player_id=player.id, amount=amount, reason=card.text,
                ))

        elif isinstance(effect, PayEachPlayer):
            for other in bank.get_active_players(state):
                if other.id == player.id:
                    continue
                bank.transfer_money(player, other, effect.amount)
                events.append(TransferEvent(
                    from_player_id=player.id, to_player_id=other.id, amount=effect.amount, reason=card.text,
                ))
            bank.record_debt_if_negative(state, player, BANK, card.text)

        elif isinstance(effect, GetOutOfJailFree):
            player.get_out_of_jail_cards += 1

        elif isinstance(effect, GoToJail):
            self._send_to_jail(player, card.text, events)

    def _pay_bank(self, state: GameState, player: PlayerState, amount: int, reason: str, events: List[GameEvent]) -> None:
        bank.transfer_money(player, None, amount)
        events.append(PayEvent(player_id=player.id, amount=amount, reason=reason))
        bank.record_debt_if_negative(state, player, BANK, reason)

    # ------------------------------------------------------------------
    # Buying and auctions
    # ------------------------------------------------------------------

    def _buy_property(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        space = get_ownable_space(player.position)
        if space is None:
            raise InvalidActionError("Not a purchasable space")
        if bank.is_property_owned(state, space.position):
            raise InvalidActionError("Property already owned")
        if player.balance < space.price:
            raise InvalidActionError(f"Insufficient funds. Need ${space.price}, have ${player.balance}")

        bank.transfer_money(player, None, space.price)
        bank.grant_property(player, space.position)
        events.append(PropertyBoughtEvent(player_id=player.id, position=space.position, price=space.price))
        state.turn_phase = TurnPhase.POST_ACTION

    def _auction_property(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        space = get_ownable_space(state.current_player.position)
        if space is None or bank.is_property_owned(state, space.position):
            raise InvalidActionError("Not a purchasable space")
        events.append(AuctionStartedEvent(position=space.position))
        state.turn_phase = TurnPhase.AUCTION

    def _submit_bid(self, state: GameState, action: SubmitBid, events: List[GameEvent]) -> None:
        bidder_id = action.player_id or state.current_player.id
        bidder = next((p for p in state.players if p.id == bidder_id), None)
        if bidder is None or bidder.is_bankrupt:
            raise InvalidActionError(f"Invalid bidder: {bidder_id}")
        if action.amount > bidder.balance:
            raise InvalidActionError("Bid exceeds balance")
        events.append(AuctionBidEvent(
            player_id=bidder.id, position=state.current_player.position, amount=action.amount,
        ))

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _build_house_error(self, state: GameState, player: PlayerState, position: int) -> Optional[str]:
        space = get_property_space(position)
        if space is None:
            return "Not a property"
        prop = player.properties.get(position)
        if prop is None:
            return "You do not own this property"
        if prop.mortgaged:
            return "Property is mortgaged"
        if not bank.owns_color_group(player, space.color_group):
            return "You must own all properties in the color group"
        if bank.group_has_mortgage(player, space.color_group):
            return "Cannot build while any property in the group is mortgaged"
        if prop.houses >= 4:
            return "Property already has 4 houses. Use build_hotel to upgrade."
        if prop.houses > min(bank.group_house_counts(player, space.color_group)):
            return "Must build evenly. Build on properties with fewer houses first."
        if state.bank_houses <= 0:
            return "No houses available in the bank"
        if player.balance < space.house_cost:
            return f"Insufficient funds. Houses cost ${space.house_cost}"
        return None

    def _build_hotel_error(self, state: GameState, player: PlayerState, position: int) -> Optional[str]:
        space = get_property_space(position)
        if space is None:
            return "Not a property"
        prop = player.properties.get(position)
        if prop is None:
            return "You do not own this property"
        if prop.houses != 4:
            return "Must have exactly 4 houses to build a hotel"
        if not bank.owns_color_group(player, space.color_group):
            return "You must own all properties in the color group"
        if bank.group_has_mortgage(player, space.color_group):
            return "Cannot build while any property in the group is mortgaged"
        if min(bank.group_house_counts(player, space.color_group)) < 4:
            return "Must build evenly. Every property in the group needs 4 houses before a hotel."
        if state.bank_hotels <= 0:
            return "No hotels available in the bank"
        if player.balance < space.house_cost:
            return f"Insufficient funds. Hotel costs ${space.house_cost}"
        return None

    def _sell_house_error(self, state: GameState, player: PlayerState, position: int) -> Optional[str]:
        space = get_property_space(position)
        if space is None:
            return "Not a property"
        prop = player.properties.get(position)
        if prop is None:
            return "You do not own this property"
        if prop.houses == 0:
            return "No houses to sell"
        if prop.houses < max(bank.group_house_counts(player, space.color_group)):
            return "Must sell evenly. Sell from properties with more houses first."
        return None

    def _build_house(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        position = action.property_position
        _raise_if(self._build_house_error(state, player, position))

        space = get_property_space(position)
        prop = player.properties[position]
        bank.transfer_money(player, None, space.house_cost)
        prop.houses += 1
        state.bank_houses -= 1
        events.append(HouseBuiltEvent(player_id=player.id, position=position, houses=prop.houses))

    def _build_hotel(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        position = action.property_position
        _raise_if(self._build_hotel_error(state, player, position))

        space = get_property_space(position)
        bank.transfer_money(player, None, space.house_cost)
        player.properties[position].houses = 5
        state.bank_houses += 4
        state.bank_hotels -= 1
        events.append(HotelBuiltEvent(player_id=player.id, position=position))

    def _sell_house(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        position = action.property_position
        _raise_if(self._sell_house_error(state, player, position))

        space = get_property_space(position)
        prop = player.properties[position]
        refund = space.house_cost // 2

        if prop.houses == 5:
            state.bank_hotels += 1
            if state.bank_houses >= 4:
                prop.houses = 4
                state.bank_houses -= 4
            else:
                # Not enough houses in the bank to downgrade
                prop.houses = 0
            player.balance += refund
            events.append(HotelSoldEvent(player_id=player.id, position=position, houses=prop.houses, refund=refund))
        else:
            prop.houses -= 1
            state.bank_houses += 1
            player.balance += refund
            events.append(HouseSoldEvent(player_id=player.id, position=position, houses=prop.houses, refund=refund))

        bank.settle_debt_if_solvent(state)

    # ------------------------------------------------------------------
    # Mortgages
    # ------------------------------------------------------------------

    def _mortgage_error(self, state: GameState, player: PlayerState, position: int) -> Optional[str]:
        if get_ownable_space(position) is None:
            return "Not a mortgageable space"
        prop = player.properties.get(position)
        if prop is None:
            return "You do not own this property"
        if prop.mortgaged:
            return "Property is already mortgaged"
        if bank.has_buildings_in_group(player, position):
            return "Must sell all houses in the color group before mortgaging"
        return None

    def _unmortgage_error(self, state: GameState, player: PlayerState, position: int) -> Optional[str]:
        space = get_ownable_space(position)
        if space is None:
            return "Not a property"
        prop = player.properties.get(position)
        if prop is None:
            return "You do not own this property"
        if not prop.mortgaged:
            return "Property is not mortgaged"
        cost = self.config.unmortgage_cost(space.mortgage_value)
        if player.balance < cost:
            return f"Insufficient funds. Unmortgage costs ${cost}"
        return None

    def _mortgage_property(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        position = action.property_position
        _raise_if(self._mortgage_error(state, player, position))

        space = get_ownable_space(position)
        player.properties[position].mortgaged = True
        player.balance += space.mortgage_value
        events.append(MortgagedEvent(player_id=player.id, position=position, amount=space.mortgage_value))
        bank.settle_debt_if_solvent(state)

    def _unmortgage_property(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        position = action.property_position
        _raise_if(self._unmortgage_error(state, player, position))

        cost = self.config.unmortgage_cost(get_ownable_space(position).mortgage_value)
        player.properties[position].mortgaged = False
        bank.transfer_money(player, None, cost)
        events.append(UnmortgagedEvent(player_id=player.id, position=position, amount=cost))

    # ------------------------------------------------------------------
    # Trading
    # ------------------------------------------------------------------

    def _trade_error(self, state: GameState, offer: TradeOffer) -> Optional[str]:
        if offer.from_player_id != state.current_player.id:
            return "Trade must be from the current player"
        offerer = state.current_player
        target = next((p for p in state.players if p.id == offer.to_player_id), None)
        if target is None or target.id == offerer.id or target.is_bankrupt:
            return "Invalid trade target"
        if offer.offered_money < 0 or offer.requested_money < 0:
            return "Trade amounts must be non-negative"
        if not (offer.offered_properties or offer.requested_properties or offer.offered_money or offer.requested_money):
            return "Trade must include at least one property or amount of money"

        listed = offer.offered_properties + offer.requested_properties
        if len(set(listed)) != len(listed):
            return "A property cannot be listed twice in a trade"

        for position in offer.offered_properties:
            if position not in offerer.properties:
                return f"You don't own property at position {position}"
            if not bank.is_tradable(offerer, position):
                return "Must sell houses before trading a property"
        for position in offer.requested_properties:
            if position not in target.properties:
                return f"{target.name} doesn't own property at position {position}"
            if not bank.is_tradable(target, position):
                return f"{target.name} must sell houses before trading that property"

        if offer.offered_money > 0 and offer.offered_money > offerer.balance:
            return "Insufficient funds for offered money"
        if offer.requested_money > 0 and offer.requested_money > target.balance:
            return f"{target.name} has insufficient funds"
        return None

    def _trade_offer(self, state: GameState, action: ProposeTrade, events: List[GameEvent]) -> None:
        offer = TradeOffer(
            from_player_id=state.current_player.id,
            to_player_id=action.target_player_id,
            offered_properties=list(action.offered_properties),
            offered_money=action.offered_money,
            requested_properties=list(action.requested_properties),
            requested_money=action.requested_money,
        )
        _raise_if(self._trade_error(state, offer))

        state.active_trade = offer
        state.trade_return_phase = state.turn_phase
        state.turn_phase = TurnPhase.TRADING
        events.append(TradeProposedEvent(from_player_id=offer.from_player_id, to_player_id=offer.to_player_id))

    def _accept_trade(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        offer = state.active_trade
        if offer is None:
            raise InvalidActionError("No active trade")
        _raise_if(self._trade_error(state, offer))

        offerer = bank.get_player(state, offer.from_player_id)
        target = bank.get_player(state, offer.to_player_id)
        for position in offer.offered_properties:
            target.properties[position] = offerer.properties.pop(position)
        for position in offer.requested_properties:
            offerer.properties[position] = target.properties.pop(position)
        bank.transfer_money(offerer, target, offer.offered_money)
        bank.transfer_money(target, offerer, offer.requested_money)

        description = (
            f"{offerer.name} gave {_describe_items(offer.offered_properties, offer.offered_money)} "
            f"to {target.name} for {_describe_items(offer.requested_properties, offer.requested_money)}"
        )
        events.append(TradeCompletedEvent(
            from_player_id=offerer.id, to_player_id=target.id, description=description,
        ))
        self._close_trade(state)
        bank.settle_debt_if_solvent(state)

    def _reject_trade(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        offer = state.active_trade
        if offer is None:
            raise InvalidActionError("No active trade")
        events.append(TradeRejectedEvent(from_player_id=offer.from_player_id, to_player_id=offer.to_player_id))
        self._close_trade(state)

    def _close_trade(self, state: GameState) -> None:
        state.turn_phase = state.trade_return_phase or TurnPhase.POST_ACTION
        state.trade_return_phase = None
        state.active_trade = None

    # ------------------------------------------------------------------
    # Jail
    # ------------------------------------------------------------------

    def _pay_jail_fine(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        fine = self.config.jail_fine
        if not player.in_jail:
            raise InvalidActionError("Not in jail")
        if player.balance < fine:
            raise InvalidActionError(f"Insufficient funds to pay ${fine} fine")

        bank.transfer_money(player, None, fine)
        events.append(PayEvent(player_id=player.id, amount=fine, reason="Jail fine"))
        self._release(player, "paid fine", events)
        state.turn_phase = TurnPhase.AWAITING_ROLL

    def _use_jail_card(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        if not player.in_jail:
            raise InvalidActionError("Not in jail")
        if player.get_out_of_jail_cards <= 0:
            raise InvalidActionError("No Get Out of Jail Free cards")

        player.get_out_of_jail_cards -= 1
        self._release(player, "used Get Out of Jail Free card", events)
        state.turn_phase = TurnPhase.AWAITING_ROLL

    # ------------------------------------------------------------------
    # Turn end and bankruptcy
    # ------------------------------------------------------------------

    def _end_turn(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        if state.turn_phase == TurnPhase.PAYING_DEBT:
            if player.balance < 0:
                raise InvalidActionError(f"Cannot end turn while ${-player.balance} in debt")
            state.pending_debt = None

        rolled_doubles = state.last_dice_roll is not None and is_doubles(state.last_dice_roll)
        if not player.in_jail and player.doubles_count > 0 and rolled_doubles:
            state.turn_phase = TurnPhase.PRE_ROLL
            return

        player.doubles_count = 0
        state.last_dice_roll = None
        state.turn_phase = TurnPhase.TURN_COMPLETE

    def _declare_bankruptcy(self, state: GameState, action: BaseAction, events: List[GameEvent]) -> None:
        player = state.current_player
        debt = state.pending_debt or PendingDebt(creditor=BANK, amount=0, reason="Bankruptcy")

        if bank.is_bank(debt.creditor):
            houses, hotels = bank.count_buildings(player)
            state.bank_houses += houses
            state.bank_hotels += hotels
        else:
            creditor = bank.get_player(state, debt.creditor)
            creditor.properties.update(player.properties)
            if player.balance > 0:
                creditor.balance += player.balance
            creditor.get_out_of_jail_cards += player.get_out_of_jail_cards

        player.balance = 0
        player.properties = {}
        player.get_out_of_jail_cards = 0
        player.in_jail = False
        player.jail_turns = 0
        player.doubles_count = 0
        player.is_bankrupt = True
        state.pending_debt = None
        events.append(BankruptcyEvent(player_id=player.id, creditor=debt.creditor))
        logger.info(f"{player.name} went bankrupt to {debt.creditor}")

        self._declare_winner_if_decided(state, events)
        state.turn_phase = TurnPhase.TURN_COMPLETE

    def _declare_winner_if_decided(self, state: GameState, events: List[GameEvent]) -> bool:
        winner_id = self.check_winner(state)
        if winner_id is None:
            return False
        if state.winner is None:
            state.winner = winner_id
            events.append(GameOverEvent(winner_id=winner_id))
            logger.info(f"Game over: {bank.get_player(state, winner_id).name} wins")
        return True

    def _advance_to_next_player(self, state: GameState) -> None:
        count = len(state.players)
        index = state.current_player_index
        for _ in range(count):
            index = (index + 1) % count
            if not state.players[index].is_bankrupt:
                break

        state.current_player_index = index
        state.turn_number += 1
        state.last_dice_roll = None
        player = state.players[index]
        player.doubles_count = 0
        state.turn_phase = TurnPhase.AWAITING_ROLL if player.in_jail else TurnPhase.PRE_ROLL

    def _reject(self, state: GameState, error: str) -> ActionResult:
        logger.info(f"Rejected action for {state.current_player.name}: {error}")
        return ActionResult(success=False, state=state, events=[], error=error)


def _raise_if(error: Optional[str]) -> None:
    if error is not None:
        raise InvalidActionError(error)


def _describe_items(positions: List[int], money: int) -> str:
    parts = [get_space(pos).name for pos in positions]
    if money:
        parts.append(f"${money}")
    return ", ".join(parts) if parts else "nothing"


def _format_validation_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else first.get("msg", str(error))
