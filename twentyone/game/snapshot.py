"""Read-only views handed to the caller for display."""

from dataclasses import dataclass

from twentyone.game.state import MatchState, RoundState
from twentyone.hand import Hand, Outcome
from twentyone.player import Player


@dataclass(frozen=True)
class HandView:
    """A player's hand as the table sees it."""

    name: str
    cards: tuple[str, ...]
    description: str
    total: int | None  # None while a card is face down
    score: int

    @classmethod
    def of(cls, player: Player) -> "HandView":
        hand: Hand = player.hand
        return cls(
            name=player.name,
            cards=tuple(str(card) for card in hand),
            description=hand.describe(),
            total=hand.visible_value,
            score=player.score,
        )


@dataclass(frozen=True)
class RoundResult:
    """Settled outcome of one round, with scores after settlement."""

    round_number: int
    outcome: Outcome
    user_total: int
    dealer_total: int
    user_busted: bool
    dealer_busted: bool
    user_score: int
    dealer_score: int

    @property
    def is_tie(self) -> bool:
        return self.outcome is Outcome.TIE


@dataclass(frozen=True)
class RoundSnapshot:
    """Current round state plus both hands."""

    round_number: int
    state: RoundState
    user: HandView
    dealer: HandView
    result: RoundResult | None = None


@dataclass(frozen=True)
class MatchResult:
    """Final standing of a finished match."""

    winner: str
    user_score: int
    dealer_score: int
    rounds_played: int


@dataclass(frozen=True)
class MatchSnapshot:
    """Match-level view: scores, round counter and the current round."""

    state: MatchState
    round_number: int
    score_limit: int
    user_score: int
    dealer_score: int
    winner: str | None
    current_round: RoundSnapshot | None
