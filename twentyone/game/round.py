"""Round engine: one hand of Twenty-One, from the deal to settlement."""

import logging
from random import Random
from typing import NoReturn

from transitions import Machine

from twentyone.cards import Card, Deck
from twentyone.errors import EmptyDeckError, InvalidActionError
from twentyone.game.events import EventEmitter, EventType
from twentyone.game.snapshot import HandView, RoundResult, RoundSnapshot
from twentyone.game.state import RoundState
from twentyone.hand import Outcome, evaluate_hands
from twentyone.player import Action, Player, Policy

logger = logging.getLogger(__name__)

OPENING_CARDS = 4

OUTCOME_EVENTS = {
    Outcome.USER_WINS: EventType.USER_WINS,
    Outcome.DEALER_WINS: EventType.DEALER_WINS,
    Outcome.TIE: EventType.TIE,
}


class Round:
    """
    A single round driven by a state machine.

    The caller supplies the user's hit/stay actions; the dealer's turn and
    settlement run on their own. No I/O happens here: progress is reported
    through events and snapshots.
    """

    STATES = [s.name.lower() for s in RoundState]

    TRANSITIONS = [
        {"trigger": "cards_dealt", "source": "dealing", "dest": "user_turn"},
        {"trigger": "user_done", "source": "user_turn", "dest": "dealer_turn"},
        {"trigger": "user_busts", "source": "user_turn", "dest": "settlement"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "settlement"},
        {"trigger": "round_settled", "source": "settlement", "dest": "done"},
    ]

    def __init__(
        self,
        user: Player,
        dealer: Player,
        deck: Deck | None = None,
        events: EventEmitter | None = None,
        rng: Random | None = None,
        round_number: int = 1,
    ) -> None:
        """
        Initialize a round.

        Args:
            user: The human player; its policy drives ``play``
            dealer: The house; its policy drives the dealer turn
            deck: Deck to draw from (a fresh shuffled deck if not provided)
            events: Emitter to report to (a private one if not provided)
            rng: Random number generator for the fresh deck
            round_number: Position of this round within its match
        """
        self.user = user
        self.dealer = dealer
        self.deck = deck if deck is not None else Deck(rng=rng)
        self.events = events if events is not None else EventEmitter()
        self.round_number = round_number
        self.result: RoundResult | None = None

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="dealing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    @property
    def is_done(self) -> bool:
        return self.state == RoundState.DONE

    def deal(self) -> RoundState:
        """
        Deal two cards to the user, then two to the dealer.

        The dealer's second card is dealt face down. A user dealt 21 has no
        decision to make, so the round plays out to settlement.
        """
        if self.state != RoundState.DEALING:
            self._reject("deal")
        if len(self.deck) < OPENING_CARDS:
            raise EmptyDeckError(
                f"Opening deal needs {OPENING_CARDS} cards, {len(self.deck)} left"
            )

        self.user.reset_hand()
        self.dealer.reset_hand()

        for _ in range(2):
            self.draw_card(self.user)
        self.draw_card(self.dealer)
        self.draw_card(self.dealer, face_up=False)

        self.events.emit_new(
            EventType.ROUND_STARTED,
            round=self.round_number,
            user_hand=self.user.hand.describe(),
            dealer_hand=self.dealer.hand.describe(),
        )
        self.cards_dealt()

        if self.user.hand.is_twenty_one:
            self.events.emit_new(EventType.USER_TWENTY_ONE, hand_value=self.user.total)
            self._end_user_turn()

        return self.state

    def draw_card(self, player: Player, face_up: bool = True) -> Card:
        """Move the top card of the deck into ``player``'s hand."""
        card = self.deck.draw()
        if not face_up:
            card = card.face_down()
        player.hand.add_card(card)
        logger.debug("%s draws %r", player, card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand=player.name,
            hand_value=player.hand.visible_value,
        )
        return card

    def hit(self) -> Card:
        """User takes another card."""
        self._require_user_turn(Action.HIT)

        card = self.draw_card(self.user)
        hand = self.user.hand
        self.events.emit_new(EventType.USER_HIT, hand_value=hand.value)

        if hand.is_busted:
            self.events.emit_new(EventType.USER_BUSTS, hand_value=hand.value)
            self.user_busts()
            self.settle()
        elif hand.is_twenty_one:
            self.events.emit_new(EventType.USER_TWENTY_ONE, hand_value=hand.value)
            self._end_user_turn()

        return card

    def stay(self) -> RoundState:
        """User keeps the current hand."""
        self._require_user_turn(Action.STAY)
        self.events.emit_new(EventType.USER_STAYS, hand_value=self.user.total)
        self._end_user_turn()
        return self.state

    def apply(self, action: Action) -> RoundState:
        """Dispatch a user action."""
        if action is Action.HIT:
            self.hit()
        elif action is Action.STAY:
            self.stay()
        else:
            self._reject(action)
        return self.state

    def play(self, policy: Policy | None = None) -> RoundResult:
        """
        Play the round to completion.

        Args:
            policy: Source of the user's decisions (defaults to the user's own)

        Returns:
            The settled round result
        """
        policy = policy or self.user.policy
        if self.state == RoundState.DEALING:
            self.deal()
        while self.state == RoundState.USER_TURN:
            self.apply(policy.decide(self.user.hand))
        assert self.result is not None
        return self.result

    def _end_user_turn(self) -> None:
        self.user_done()
        self._play_dealer()

    def _play_dealer(self) -> None:
        """Reveal the hole card, then draw until the dealer's policy stays."""
        hand = self.dealer.hand
        hole_card = hand.cards[-1]
        hand.reveal()
        self.events.emit_new(
            EventType.DEALER_REVEALS,
            card=str(hole_card.face_up()),
            hand_value=hand.value,
        )

        while self.dealer.decide() is Action.HIT:
            self.draw_card(self.dealer)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=hand.value)

        if hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=hand.value)

        self.dealer_done()
        self.settle()

    def settle(self) -> RoundResult:
        """
        Decide the round and credit the winner with one point.

        A tie leaves both scores unchanged.
        """
        if self.state != RoundState.SETTLEMENT:
            self._reject("settle")

        outcome = evaluate_hands(self.user.hand, self.dealer.hand)
        if outcome is Outcome.USER_WINS:
            self.user.score += 1
        elif outcome is Outcome.DEALER_WINS:
            self.dealer.score += 1

        self.result = RoundResult(
            round_number=self.round_number,
            outcome=outcome,
            user_total=self.user.total,
            dealer_total=self.dealer.total,
            user_busted=self.user.is_busted,
            dealer_busted=self.dealer.is_busted,
            user_score=self.user.score,
            dealer_score=self.dealer.score,
        )

        self.events.emit_new(
            OUTCOME_EVENTS[outcome],
            user_total=self.result.user_total,
            dealer_total=self.result.dealer_total,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            round=self.round_number,
            outcome=outcome.name,
            user_score=self.user.score,
            dealer_score=self.dealer.score,
        )
        logger.info(
            "Round %d: %s (%d vs %d), score %d-%d",
            self.round_number,
            outcome,
            self.result.user_total,
            self.result.dealer_total,
            self.user.score,
            self.dealer.score,
        )

        self.round_settled()
        return self.result

    def snapshot(self) -> RoundSnapshot:
        """Return a read-only view of the round."""
        return RoundSnapshot(
            round_number=self.round_number,
            state=self.state,
            user=HandView.of(self.user),
            dealer=HandView.of(self.dealer),
            result=self.result,
        )

    def _require_user_turn(self, action: Action) -> None:
        if self.state != RoundState.USER_TURN:
            self._reject(action)

    def _reject(self, action: object) -> NoReturn:
        self.events.emit_new(
            EventType.INVALID_ACTION,
            action=str(action),
            state=self.state.name,
        )
        raise InvalidActionError(action, self.state)
