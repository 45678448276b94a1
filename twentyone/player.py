"""Players and the policies that make their hit/stay decisions."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable

from twentyone.hand import Hand

DEALER_NAME = "Dealer"
DEFAULT_STAND_VALUE = 17


class Action(Enum):
    """Moves available during a turn."""

    HIT = auto()
    STAY = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Answer(Enum):
    """Reply to the "play another match?" question."""

    YES = auto()
    NO = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Policy(ABC):
    """Decides whether a hand should take another card."""

    @abstractmethod
    def decide(self, hand: Hand) -> Action:
        """Return the next action for ``hand``."""
        ...


class DealerPolicy(Policy):
    """
    Fixed-threshold dealer play.

    Draws while the total is below ``stand_value`` and stands on anything at
    or above it, soft totals included.
    """

    def __init__(self, stand_value: int = DEFAULT_STAND_VALUE) -> None:
        self.stand_value = stand_value

    def decide(self, hand: Hand) -> Action:
        if hand.is_busted or hand.value >= self.stand_value:
            return Action.STAY
        return Action.HIT

    def __repr__(self) -> str:
        return f"DealerPolicy(stand_value={self.stand_value})"


Chooser = Callable[[Hand], Action]


class UserPolicy(Policy):
    """
    Defers the decision to the caller.

    ``chooser`` is usually a blocking prompt owned by the interactive shell.
    A busted hand or a hand of 21 ends the turn without asking. The answer
    is passed through unchecked; the round rejects anything but an Action.
    """

    def __init__(self, chooser: Chooser) -> None:
        self._chooser = chooser

    def decide(self, hand: Hand) -> Action:
        if hand.is_busted or hand.is_twenty_one:
            return Action.STAY
        return self._chooser(hand)

    @classmethod
    def scripted(cls, actions: list[Action], default: Action = Action.STAY) -> "UserPolicy":
        """Replay ``actions`` in order, then fall back to ``default``."""
        remaining = list(actions)

        def _next(hand: Hand) -> Action:
            return remaining.pop(0) if remaining else default

        return cls(_next)


def normalize_player_name(raw: str | None, default: str = "Player 1") -> str:
    """
    Capitalize each word of a user-supplied name.

    Blank names fall back to ``default``. The dealer's name is reserved.
    """
    words = (raw or "").split()
    if " ".join(words).lower() == DEALER_NAME.lower():
        raise ValueError(f"'{DEALER_NAME}' is reserved for the house")
    name = " ".join(word.capitalize() for word in words)
    return name or default


@dataclass
class Player:
    """A participant: a name, a hand, a match score and a decision policy."""

    name: str
    policy: Policy
    hand: Hand = field(default_factory=Hand)
    score: int = 0

    @classmethod
    def user(cls, name: str, chooser: Chooser | None = None) -> "Player":
        """Create the human player; without a chooser every turn stays."""
        policy = UserPolicy(chooser or (lambda hand: Action.STAY))
        return cls(name=name, policy=policy)

    @classmethod
    def dealer(cls, stand_value: int = DEFAULT_STAND_VALUE) -> "Player":
        """Create the house player."""
        return cls(name=DEALER_NAME, policy=DealerPolicy(stand_value))

    def decide(self) -> Action:
        """Ask this player's policy for the next action."""
        return self.policy.decide(self.hand)

    @property
    def total(self) -> int:
        return self.hand.value

    @property
    def is_busted(self) -> bool:
        return self.hand.is_busted

    def reset_hand(self) -> None:
        self.hand.clear()

    def __str__(self) -> str:
        return self.name
