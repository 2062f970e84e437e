"""Deck creation utilities for Eleven."""

from __future__ import annotations

import uuid
from random import Random
from typing import Callable, List, Optional, Sequence, TypeVar

from .cards import Card, Rank, Suit, card_value

T = TypeVar("T")

DECK_SIZE = 52


def _uuid_id() -> str:
    return uuid.uuid4().hex


def build_deck(id_factory: Optional[Callable[[], str]] = None) -> List[Card]:
    """Return the ordered 52-card deck, every card carrying a fresh id."""
    make_id = id_factory or _uuid_id
    return [
        Card(id=make_id(), suit=suit, rank=rank, value=card_value(rank))
        for suit in Suit
        for rank in Rank
    ]


def seeded_ids(rng: Random) -> Callable[[], str]:
    """Id factory drawing from ``rng`` so seeded games are reproducible."""

    def make_id() -> str:
        return uuid.UUID(int=rng.getrandbits(128), version=4).hex

    return make_id


def shuffle_deck(deck: Sequence[T], rng: Optional[Random] = None) -> List[T]:
    """Fisher-Yates shuffle returning a new list; ``deck`` is left untouched."""
    if rng is None:
        rng = Random()
    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards
