"""Tests for the match engine."""

import pytest
from random import Random

from config import config
from twentyone.errors import InvalidActionError
from twentyone.game import EventType, MatchState, RoundState
from twentyone.game import match as match_module
from twentyone.game.match import Match
from twentyone.hand import Outcome
from twentyone.player import Action, Answer, UserPolicy

USER_WINS = ("10S", "9H", "10D", "8C")  # 19 vs 18 on a stay
DEALER_WINS = ("10S", "7H", "10D", "9C")  # 17 vs 19 on a stay
TIE = ("10S", "8H", "QD", "8C")  # 18 vs 18
NEEDS_DECISION = ("10S", "2H", "10D", "8C", "5S", "9S")  # 12 vs 18


@pytest.fixture
def deal_sequence(monkeypatch, stack):
    """Make each new round draw from the next stacked deck in a list."""
    decks = []

    def _install(*orders):
        decks.extend(stack(*order) for order in orders)
        monkeypatch.setattr(match_module, "Deck", lambda rng=None: decks.pop(0))

    return _install


@pytest.fixture
def match(events):
    return Match(user_name="ada", score_limit=5, rng=Random(42), events=events)


class TestMatchSetup:
    """Tests for match construction."""

    def test_defaults_from_config(self):
        m = Match()
        assert m.score_limit == config.game.score_limit
        assert m.user.name == config.game.default_user_name
        assert m.dealer.policy.stand_value == config.game.dealer_stand_value
        assert m.state == MatchState.READY
        assert m.round_number == 1
        assert m.winner is None

    def test_user_name_normalized(self, match):
        assert match.user.name == "Ada"

    def test_dealer_name_rejected(self):
        with pytest.raises(ValueError):
            Match(user_name="Dealer")

    def test_invalid_score_limit(self):
        with pytest.raises(ValueError):
            Match(score_limit=0)

    def test_custom_stand_value(self):
        assert Match(dealer_stand_value=16).dealer.policy.stand_value == 16

    @pytest.mark.parametrize("stand_value", [0, 1, 22, 99])
    def test_stand_value_out_of_range(self, stand_value):
        """Test that an override gets the same range check as the config."""
        with pytest.raises(ValueError):
            Match(dealer_stand_value=stand_value)

    @pytest.mark.parametrize("stand_value", [2, 21])
    def test_stand_value_bounds_accepted(self, stand_value):
        assert Match(dealer_stand_value=stand_value).dealer.policy.stand_value == stand_value

    def test_match_started_event(self, match, events):
        started = events.of_type(EventType.MATCH_STARTED)[0]
        assert started.data == {"user": "Ada", "score_limit": 5}


class TestMatchRounds:
    """Tests for playing rounds within a match."""

    def test_five_user_wins_ends_after_round_five(self, match, deal_sequence):
        """Test that the match is decided on round 5, not before."""
        deal_sequence(*[USER_WINS] * 5)
        for expected_round in range(1, 6):
            assert not match.is_over
            result = match.play_round()
            assert result.outcome is Outcome.USER_WINS
            assert match.round_number == expected_round

        assert match.is_over
        assert match.winner is match.user
        assert match.result.user_score == 5
        assert match.result.rounds_played == 5

    def test_dealer_can_win_the_match(self, events, deal_sequence):
        deal_sequence(*[DEALER_WINS] * 2)
        m = Match(score_limit=2, events=events)
        result = m.play()
        assert result.winner == "Dealer"
        assert (result.user_score, result.dealer_score) == (0, 2)
        ended = events.of_type(EventType.MATCH_ENDED)[0]
        assert ended.data["winner"] == "Dealer"

    def test_ties_do_not_score(self, events, deal_sequence):
        deal_sequence(TIE, TIE, USER_WINS)
        m = Match(score_limit=1, events=events)
        assert m.play_round().is_tie
        assert m.play_round().is_tie
        assert not m.is_over
        m.play_round()
        assert m.is_over
        assert m.result.rounds_played == 3
        assert m.round_number == 3

    def test_scores_persist_across_rounds(self, match, deal_sequence):
        deal_sequence(USER_WINS, DEALER_WINS, USER_WINS)
        for _ in range(3):
            match.play_round()
        assert match.scores == {"Ada": 2, "Dealer": 1}
        assert [r.outcome for r in match.history] == [
            Outcome.USER_WINS,
            Outcome.DEALER_WINS,
            Outcome.USER_WINS,
        ]

    def test_fresh_deck_each_round(self, match):
        match.play_round()
        first = match.current_round
        second = match.start_round()
        assert second is not first
        assert second.deck is not first.deck
        assert second.round_number == 2
        assert len(second.deck) + len(match.user.hand) + len(match.dealer.hand) == 52

    def test_interactive_round(self, match, deal_sequence):
        """Test forwarding hit/stay to the round in progress."""
        deal_sequence(NEEDS_DECISION)
        current = match.start_round()
        assert match.state == MatchState.IN_ROUND
        assert current.state == RoundState.USER_TURN

        match.hit()
        assert match.user.total == 17
        assert match.state == MatchState.IN_ROUND

        match.stay()
        assert current.is_done
        assert match.state == MatchState.READY
        assert match.dealer.score == 1

    def test_apply_forwards_actions(self, match, deal_sequence):
        deal_sequence(NEEDS_DECISION)
        match.start_round()
        assert match.apply(Action.STAY) == MatchState.READY

    def test_play_finishes_round_in_progress(self, events, deal_sequence):
        """Test that play() picks up a round started by hand."""
        deal_sequence(NEEDS_DECISION, USER_WINS)
        m = Match(score_limit=1, events=events)
        current = m.start_round()
        assert current.state == RoundState.USER_TURN

        result = m.play(UserPolicy.scripted([Action.HIT]))

        assert current.is_done
        assert current.result.user_total == 17
        assert result.winner == "Dealer"
        assert result.rounds_played == 1

    def test_play_with_policy(self, events):
        """Test a full random match with a simple threshold policy."""
        m = Match(score_limit=3, rng=Random(7), events=events)
        policy = UserPolicy(lambda hand: Action.HIT if hand.value < 17 else Action.STAY)
        result = m.play(policy)
        assert max(result.user_score, result.dealer_score) == 3
        assert min(result.user_score, result.dealer_score) < 3
        assert result.rounds_played == len(events.of_type(EventType.ROUND_ENDED))


class TestMatchInvalidActions:
    """Tests for actions not allowed in the current match state."""

    def test_start_round_during_round(self, match, deal_sequence):
        deal_sequence(NEEDS_DECISION)
        match.start_round()
        with pytest.raises(InvalidActionError):
            match.start_round()
        assert match.state == MatchState.IN_ROUND

    def test_action_between_rounds(self, match):
        with pytest.raises(InvalidActionError):
            match.hit()
        assert match.state == MatchState.READY

    def test_start_round_after_match_over(self, events, deal_sequence):
        deal_sequence(USER_WINS)
        m = Match(score_limit=1, events=events)
        m.play()
        with pytest.raises(InvalidActionError):
            m.start_round()
        assert events.of_type(EventType.INVALID_ACTION)

    def test_reset_during_round(self, match, deal_sequence):
        deal_sequence(NEEDS_DECISION)
        match.start_round()
        with pytest.raises(InvalidActionError):
            match.reset()

    def test_play_again_before_match_over(self, match):
        with pytest.raises(InvalidActionError):
            match.play_again(Answer.YES)


class TestPlayAgain:
    """Tests for finishing and restarting a match."""

    def test_yes_resets(self, events, deal_sequence):
        deal_sequence(USER_WINS, USER_WINS, DEALER_WINS)
        m = Match(score_limit=2, events=events)
        m.play()

        assert m.play_again(Answer.YES) is True
        assert m.state == MatchState.READY
        assert m.scores == {"Player 1": 0, "Dealer": 0}
        assert m.round_number == 1
        assert m.winner is None
        assert m.history == []
        assert len(m.user.hand) == 0
        assert events.of_type(EventType.MATCH_RESET)

        m.play_round()
        assert m.round_number == 1
        assert m.dealer.score == 1

    def test_no_keeps_final_state(self, events, deal_sequence):
        deal_sequence(USER_WINS)
        m = Match(score_limit=1, events=events)
        m.play()
        assert m.play_again(Answer.NO) is False
        assert m.is_over
        assert m.winner is m.user

    def test_reset_between_rounds(self, match, deal_sequence):
        deal_sequence(USER_WINS)
        match.play_round()
        match.reset()
        assert match.user.score == 0
        assert match.round_number == 1


class TestMatchSnapshot:
    """Tests for the read-only match view."""

    def test_snapshot_before_first_round(self, match):
        snap = match.snapshot()
        assert snap.state == MatchState.READY
        assert snap.current_round is None
        assert snap.winner is None
        assert snap.score_limit == 5

    def test_snapshot_mid_round(self, match, deal_sequence):
        deal_sequence(NEEDS_DECISION)
        match.start_round()
        snap = match.snapshot()
        assert snap.state == MatchState.IN_ROUND
        assert snap.current_round.dealer.total is None
        assert snap.current_round.user.total == 12

    def test_snapshot_after_match(self, events, deal_sequence):
        deal_sequence(USER_WINS)
        m = Match(user_name="grace hopper", score_limit=1, events=events)
        m.play()
        snap = m.snapshot()
        assert snap.winner == "Grace Hopper"
        assert snap.user_score == 1
        assert snap.current_round.result.outcome is Outcome.USER_WINS
