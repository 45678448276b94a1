"""Hand evaluation for Twenty-One."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from twentyone.cards import ACE_ADJUSTMENT, Card

TWENTY_ONE = 21


class Outcome(Enum):
    """Result of comparing the user's hand with the dealer's."""

    USER_WINS = auto()
    DEALER_WINS = auto()
    TIE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


def join_cards(cards: list[str]) -> str:
    """Join card names as prose: 'A and B', or 'A, B, and C'."""
    if len(cards) < 3:
        return " and ".join(cards)
    return f"{', '.join(cards[:-1])}, and {cards[-1]}"


@dataclass
class Hand:
    """An ordered set of cards held by one player."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    def hide_card(self, index: int) -> None:
        """Turn the card at ``index`` face down."""
        self.cards[index] = self.cards[index].face_down()

    def reveal(self) -> None:
        """Turn every card face up."""
        self.cards = [card.face_up() for card in self.cards]

    @property
    def value(self) -> int:
        """
        Calculate the best hand value.

        Every Ace starts at 11; Aces are demoted to 1 one at a time while
        the total is over 21. Hidden cards still count.
        """
        total = 0
        aces = 0

        for card in self.cards:
            if card.is_ace:
                aces += 1
            total += card.value

        while total > TWENTY_ONE and aces > 0:
            total -= ACE_ADJUSTMENT
            aces -= 1

        return total

    @property
    def is_soft(self) -> bool:
        """Check if an Ace is still counted as 11."""
        if not any(card.is_ace for card in self.cards):
            return False
        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + ACE_ADJUSTMENT <= TWENTY_ONE

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > TWENTY_ONE

    @property
    def is_twenty_one(self) -> bool:
        """Check if the hand totals exactly 21, with any number of cards."""
        return self.value == TWENTY_ONE

    @property
    def has_hidden_card(self) -> bool:
        return any(not card.visible for card in self.cards)

    @property
    def visible_value(self) -> int | None:
        """Return the value, or None while any card is face down."""
        if self.has_hidden_card:
            return None
        return self.value

    def describe(self) -> str:
        """Return the cards as prose, masking face-down cards."""
        return join_cards([str(card) for card in self.cards])

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


def evaluate_hands(user_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare the user's hand with the dealer's.

    A busted user always loses, even if the dealer also busted. Otherwise a
    busted dealer loses, then the higher total wins and equal totals tie.
    """
    if user_hand.is_busted:
        return Outcome.DEALER_WINS

    if dealer_hand.is_busted:
        return Outcome.USER_WINS

    user_value = user_hand.value
    dealer_value = dealer_hand.value

    if user_value > dealer_value:
        return Outcome.USER_WINS
    if dealer_value > user_value:
        return Outcome.DEALER_WINS
    return Outcome.TIE
