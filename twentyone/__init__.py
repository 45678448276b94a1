"""Twenty-One card game engine - no terminal I/O."""

from twentyone.cards import Card, Deck, Rank, Suit
from twentyone.errors import EmptyDeckError, InvalidActionError, TwentyOneError
from twentyone.hand import Hand, Outcome, evaluate_hands
from twentyone.player import Action, Answer, DealerPolicy, Player, Policy, UserPolicy
from twentyone.game import Match, Round

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Hand",
    "Outcome",
    "evaluate_hands",
    "Action",
    "Answer",
    "Policy",
    "UserPolicy",
    "DealerPolicy",
    "Player",
    "Round",
    "Match",
    "TwentyOneError",
    "EmptyDeckError",
    "InvalidActionError",
]
