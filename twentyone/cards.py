"""Card and Deck classes."""

from dataclasses import dataclass, field, replace
from enum import Enum
from random import Random
from typing import Iterable, Iterator

from twentyone.errors import EmptyDeckError

HIDDEN_CARD = "a hidden card"


class Suit(Enum):
    """Card suits."""

    SPADES = "S"
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"

    def __str__(self) -> str:
        return self.name.title()


class Rank(Enum):
    """Card ranks, valued by their Twenty-One points."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "Jack"
    QUEEN = "Queen"
    KING = "King"
    ACE = "Ace"

    def __str__(self) -> str:
        return self.value

    @property
    def points(self) -> int:
        """Return the point value (Ace = 11, face cards = 10)."""
        return RANK_POINTS[self]

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


RANK_POINTS: dict[Rank, int] = {
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 10,
    Rank.QUEEN: 10,
    Rank.KING: 10,
    Rank.ACE: 11,
}

# Ace demoted from 11 to 1
ACE_ADJUSTMENT = 10


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    Visibility is not part of a card's identity: a face-down copy compares
    and hashes equal to the face-up card.
    """

    rank: Rank
    suit: Suit
    visible: bool = field(default=True, compare=False)

    def __str__(self) -> str:
        if not self.visible:
            return HIDDEN_CARD
        return f"{self.rank} of {self.suit}"

    def __repr__(self) -> str:
        flag = "" if self.visible else ", hidden"
        return f"Card({self.rank.name}, {self.suit.name}{flag})"

    @property
    def value(self) -> int:
        """Return the nominal point value."""
        return self.rank.points

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    def face_down(self) -> "Card":
        """Return a hidden copy of this card."""
        return replace(self, visible=False)

    def face_up(self) -> "Card":
        """Return a visible copy of this card."""
        return replace(self, visible=True)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a short string like 'AS', '10h', 'KC'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {rank.value: rank for rank in Rank if rank.value.isdigit()}
        rank_map.update(T=Rank.TEN, J=Rank.JACK, Q=Rank.QUEEN, K=Rank.KING, A=Rank.ACE)

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        try:
            suit = Suit(suit_str)
        except ValueError:
            raise ValueError(f"Invalid suit: {suit_str}") from None

        return cls(rank_map[rank_str], suit)


class Deck:
    """A standard 52-card deck, shuffled when created."""

    def __init__(
        self,
        rng: Random | None = None,
        cards: Iterable[Card] | None = None,
    ) -> None:
        """
        Initialize a new deck.

        Args:
            rng: Random number generator used for shuffling
            cards: Explicit card order (top of the deck last); skips the shuffle
        """
        self._rng = rng or Random()
        self._cards: list[Card] = []
        if cards is not None:
            self._cards = list(cards)
        else:
            self.reset()
            self.shuffle()

    def reset(self) -> None:
        """Reset deck to all 52 cards in order."""
        self._cards = [Card(rank, suit) for suit in Suit for rank in Rank]

    def shuffle(self) -> None:
        """Shuffle the remaining cards."""
        self._rng.shuffle(self._cards)

    def draw(self) -> Card:
        """Remove and return the top card."""
        if not self._cards:
            raise EmptyDeckError()
        return self._cards.pop()

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)
