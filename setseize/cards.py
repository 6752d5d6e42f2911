"""Card-related data structures and helpers for Set & Seize."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Tuple

from .errors import InvalidAceChoice


class Suit(Enum):
    HEARTS = "H"
    DIAMONDS = "D"
    CLUBS = "C"
    SPADES = "S"

    def __str__(self) -> str:
        return self.name.lower()


class Rank(Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    def __str__(self) -> str:
        return self.name.lower()


RANK_ORDER: list[Rank] = list(Rank)

# Positional values; the Ace has no fixed value until it is played.
RANK_VALUES: dict[Rank, int] = {
    Rank.TWO: 2,
    Rank.THREE: 3,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.EIGHT: 8,
    Rank.NINE: 9,
    Rank.TEN: 10,
    Rank.JACK: 11,
    Rank.QUEEN: 12,
    Rank.KING: 13,
}

ACE_VALUES: Tuple[int, int] = (1, 14)
DEFAULT_ACE_VALUE = 1


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    rank: Rank
    suit: Suit

    @property
    def id(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    @property
    def is_ace(self) -> bool:
        return self.rank is Rank.ACE

    def candidate_values(self) -> Tuple[int, ...]:
        if self.is_ace:
            return ACE_VALUES
        return (RANK_VALUES[self.rank],)

    @classmethod
    def from_id(cls, card_id: str) -> "Card":
        if len(card_id) != 2:
            raise ValueError(f"Malformed card id: {card_id!r}")
        return cls(Rank(card_id[0].upper()), Suit(card_id[1].upper()))

    def __str__(self) -> str:
        return self.id


def resolve_value(card: Card, chosen_ace_value: Optional[int] = None) -> int:
    """Return the numeric value a card carries for a single play.

    Raises:
        InvalidAceChoice: a value was chosen for a non-Ace, or an Ace was
            given something other than 1 or 14.
    """
    if not card.is_ace:
        if chosen_ace_value is not None:
            raise InvalidAceChoice(f"{card.id} is not an Ace; no value choice allowed.")
        return RANK_VALUES[card.rank]
    if chosen_ace_value is None:
        return DEFAULT_ACE_VALUE
    if chosen_ace_value not in ACE_VALUES:
        raise InvalidAceChoice(f"Ace value must be 1 or 14, got {chosen_ace_value}.")
    return chosen_ace_value


def can_take_value(card: Card, value: int) -> bool:
    """Return True if the card can be played for the given value."""
    return value in card.candidate_values()


def cards_from_ids(card_ids: Iterable[str]) -> list[Card]:
    return [Card.from_id(card_id) for card_id in card_ids]


def serialize_card(card: Card) -> dict[str, str]:
    return {"id": card.id, "rank": card.rank.value, "suit": card.suit.value}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    if "id" in payload:
        return Card.from_id(payload["id"])
    return Card(Rank(payload["rank"].upper()), Suit(payload["suit"].upper()))


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"


def build_deck() -> list[Card]:
    """Return the ordered 52-card deck."""
    return [Card(rank, suit) for suit in Suit for rank in RANK_ORDER]
