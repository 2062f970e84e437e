"""Card-related data structures and helpers for Eleven."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value


# Deck value per rank. Picture cards never take part in subset sums.
CARD_VALUES: dict[Rank, int] = {
    Rank.ACE: 1,
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

PICTURE_RANKS = frozenset({Rank.JACK, Rank.QUEEN, Rank.KING})


def card_value(rank: Rank) -> int:
    return CARD_VALUES[rank]


@dataclass(frozen=True)
class Card:
    """Immutable playing card. Two cards are the same card only if their ids match."""

    id: str
    suit: Suit
    rank: Rank
    value: int

    @classmethod
    def of(cls, rank: Rank, suit: Suit, card_id: str | None = None) -> "Card":
        return cls(
            id=card_id or f"{rank.value}-{suit.value}",
            suit=suit,
            rank=rank,
            value=card_value(rank),
        )

    def is_picture(self) -> bool:
        return self.rank in PICTURE_RANKS

    def matches(self, rank: Rank, suit: Suit) -> bool:
        return self.rank is rank and self.suit is suit


def serialize_card(card: Card) -> dict[str, object]:
    return {
        "id": card.id,
        "rank": card.rank.value,
        "suit": card.suit.value,
        "value": card.value,
    }


def deserialize_card(payload: Mapping[str, object]) -> Card:
    rank = Rank(str(payload["rank"]).upper())
    suit = Suit(str(payload["suit"]).lower())
    return Card(id=str(payload["id"]), suit=suit, rank=rank, value=card_value(rank))


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"
