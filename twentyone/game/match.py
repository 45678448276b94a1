"""Match engine: rounds repeated until one side reaches the score limit."""

import logging
from random import Random
from typing import NoReturn

from transitions import Machine

from config import config
from twentyone.cards import Deck
from twentyone.errors import InvalidActionError
from twentyone.game.events import EventEmitter, EventType
from twentyone.game.round import Round
from twentyone.game.snapshot import MatchResult, MatchSnapshot, RoundResult
from twentyone.game.state import MatchState
from twentyone.player import Action, Answer, Chooser, Player, Policy, normalize_player_name

logger = logging.getLogger(__name__)


class Match:
    """
    A match between the user and the dealer.

    Scores carry over from round to round; each round gets a freshly
    shuffled deck. The first side to reach ``score_limit`` wins the match.
    """

    STATES = [s.name.lower() for s in MatchState]

    TRANSITIONS = [
        {"trigger": "begin_round", "source": "ready", "dest": "in_round"},
        {"trigger": "end_round", "source": "in_round", "dest": "ready"},
        {"trigger": "end_match", "source": "in_round", "dest": "match_over"},
        {"trigger": "restart", "source": ["ready", "match_over"], "dest": "ready"},
    ]

    def __init__(
        self,
        user_name: str | None = None,
        score_limit: int | None = None,
        dealer_stand_value: int | None = None,
        chooser: Chooser | None = None,
        rng: Random | None = None,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Initialize a new match.

        Args:
            user_name: Raw user name; normalized, blank falls back to the default
            score_limit: Points needed to win the match
            dealer_stand_value: Total at which the dealer stops drawing
            chooser: Callback supplying the user's hit/stay decisions
            rng: Random number generator for reproducible shuffles
            events: Emitter shared with every round
        """
        game = config.game
        self.score_limit = score_limit if score_limit is not None else game.score_limit
        if self.score_limit < 1:
            raise ValueError("score_limit must be at least 1")
        stand_value = (
            dealer_stand_value if dealer_stand_value is not None else game.dealer_stand_value
        )
        if not 2 <= stand_value <= game.target:
            raise ValueError(f"dealer_stand_value must be between 2 and {game.target}")

        name = normalize_player_name(user_name, default=game.default_user_name)
        self.user = Player.user(name, chooser)
        self.dealer = Player.dealer(stand_value)

        self._rng = rng or Random()
        self.events = events if events is not None else EventEmitter()

        self.round_number = 1
        self.current_round: Round | None = None
        self.history: list[RoundResult] = []
        self.winner: Player | None = None

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="ready",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

        self.events.emit_new(
            EventType.MATCH_STARTED,
            user=self.user.name,
            score_limit=self.score_limit,
        )

    @property
    def state(self) -> MatchState:
        """Get current match state as enum."""
        return MatchState[self._machine_state.upper()]  # type: ignore

    @property
    def is_over(self) -> bool:
        return self.state == MatchState.MATCH_OVER

    @property
    def scores(self) -> dict[str, int]:
        """Return the running scores keyed by player name."""
        return {self.user.name: self.user.score, self.dealer.name: self.dealer.score}

    @property
    def rounds_played(self) -> int:
        return len(self.history)

    def start_round(self) -> Round:
        """
        Deal a new round with a freshly shuffled deck.

        The round counter advances only when a round follows an earlier one.
        """
        if self.state != MatchState.READY:
            self._reject("start round")

        if self.current_round is not None:
            self.round_number += 1

        deck = Deck(rng=self._rng)
        self.events.emit_new(EventType.DECK_SHUFFLED, cards=len(deck))
        self.current_round = Round(
            self.user,
            self.dealer,
            deck=deck,
            events=self.events,
            round_number=self.round_number,
        )
        self.begin_round()
        logger.debug("Starting round %d", self.round_number)

        self.current_round.deal()
        self._check_round()
        return self.current_round

    def hit(self) -> None:
        self.apply(Action.HIT)

    def stay(self) -> None:
        self.apply(Action.STAY)

    def apply(self, action: Action) -> MatchState:
        """Pass a user action to the round in progress."""
        if self.state != MatchState.IN_ROUND or self.current_round is None:
            self._reject(action)
        self.current_round.apply(action)
        self._check_round()
        return self.state

    def play_round(self, policy: Policy | None = None) -> RoundResult:
        """Start a round and play it out with ``policy``."""
        current = self.start_round()
        result = current.play(policy)
        self._check_round()
        return result

    def play(self, policy: Policy | None = None) -> MatchResult:
        """Play rounds until someone reaches the score limit."""
        if self.state == MatchState.IN_ROUND and self.current_round is not None:
            self.current_round.play(policy)
            self._check_round()
        while not self.is_over:
            self.play_round(policy)
        result = self.result
        assert result is not None
        return result

    @property
    def result(self) -> MatchResult | None:
        """Return the final standing, or None while the match is running."""
        if self.winner is None:
            return None
        return MatchResult(
            winner=self.winner.name,
            user_score=self.user.score,
            dealer_score=self.dealer.score,
            rounds_played=self.rounds_played,
        )

    def _check_round(self) -> None:
        """Record a settled round and decide whether the match is over."""
        current = self.current_round
        if self.state != MatchState.IN_ROUND or current is None or not current.is_done:
            return
        assert current.result is not None
        self.history.append(current.result)

        # At most one side scores per round, so only one can reach the limit.
        for player in (self.user, self.dealer):
            if player.score >= self.score_limit:
                self.winner = player
                break

        if self.winner is None:
            self.end_round()
            return

        self.end_match()
        self.events.emit_new(
            EventType.MATCH_ENDED,
            winner=self.winner.name,
            user_score=self.user.score,
            dealer_score=self.dealer.score,
            rounds=self.rounds_played,
        )
        logger.info(
            "%s wins the match %d to %d after %d rounds",
            self.winner,
            max(self.user.score, self.dealer.score),
            min(self.user.score, self.dealer.score),
            self.rounds_played,
        )

    def play_again(self, answer: Answer) -> bool:
        """
        Handle the caller's choice after a finished match.

        Returns:
            True if a new match was set up, False if the caller is done
        """
        if not self.is_over:
            self._reject(answer)
        if answer is Answer.YES:
            self.reset()
            return True
        if answer is Answer.NO:
            return False
        self._reject(answer)

    def reset(self) -> None:
        """Zero both scores and the round counter for a fresh match."""
        if self.state == MatchState.IN_ROUND:
            self._reject("reset")

        self.user.score = 0
        self.dealer.score = 0
        self.user.reset_hand()
        self.dealer.reset_hand()
        self.round_number = 1
        self.current_round = None
        self.history.clear()
        self.winner = None

        self.restart()
        self.events.emit_new(EventType.MATCH_RESET, user=self.user.name)
        logger.debug("Match reset")

    def snapshot(self) -> MatchSnapshot:
        """Return a read-only view of the match."""
        return MatchSnapshot(
            state=self.state,
            round_number=self.round_number,
            score_limit=self.score_limit,
            user_score=self.user.score,
            dealer_score=self.dealer.score,
            winner=self.winner.name if self.winner else None,
            current_round=self.current_round.snapshot() if self.current_round else None,
        )

    def _reject(self, action: object) -> NoReturn:
        self.events.emit_new(
            EventType.INVALID_ACTION,
            action=str(action),
            state=self.state.name,
        )
        raise InvalidActionError(action, self.state)
