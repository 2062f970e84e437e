"""Game state values for Eleven.

Every structure here is frozen; the engine produces a new ``GameState`` for
each transition with ``dataclasses.replace`` and never edits one in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from .cards import Card


class InvalidMove(RuntimeError):
    """Raised when a move cannot be applied to the current state."""


class CardNotInHand(InvalidMove):
    """Raised when the played card is not in the active player's hand."""


class IllegalCapture(InvalidMove):
    """Raised when the submitted capture set is not a legal option."""


class GamePhase(Enum):
    DEALING = "dealing"
    PLAYING = "playing"
    SCORING = "scoring"
    GAME_OVER = "game_over"


class GameMode(Enum):
    ONE_VS_ONE = "1v1"
    TWO_VS_TWO = "2v2"


@dataclass(frozen=True)
class BonusEvent:
    player_id: str
    timestamp: int


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    hand: Tuple[Card, ...] = ()
    captured_cards: Tuple[Card, ...] = ()
    score: int = 0
    is_bot: bool = False
    round_scopas: int = 0
    team_index: Optional[int] = None

    def find_in_hand(self, card_id: str) -> Optional[Card]:
        return next((card for card in self.hand if card.id == card_id), None)

    def capture(self, cards: Iterable[Card]) -> "Player":
        return replace(self, captured_cards=self.captured_cards + tuple(cards))


@dataclass(frozen=True)
class TeamInfo:
    team_index: int
    player_ids: Tuple[str, ...]
    score: int = 0
    round_scopas: int = 0
    captured_cards: Tuple[Card, ...] = ()

    def capture(self, cards: Iterable[Card]) -> "TeamInfo":
        return replace(self, captured_cards=self.captured_cards + tuple(cards))


@dataclass(frozen=True)
class GameState:
    deck: Tuple[Card, ...]
    board: Tuple[Card, ...]
    players: Tuple[Player, ...]
    active_player_index: int = 0
    round: int = 1
    phase: GamePhase = GamePhase.PLAYING
    last_capturing_player_index: Optional[int] = None
    active_scopa_player_index: Optional[int] = None
    deal_order: int = 0
    game_mode: GameMode = GameMode.ONE_VS_ONE
    teams: Optional[Tuple[TeamInfo, TeamInfo]] = None
    last_bonus_event: Optional[BonusEvent] = None
    deal_id: int = 0

    @property
    def active_player(self) -> Player:
        return self.players[self.active_player_index]

    def next_player_index(self, index: int) -> int:
        return (index + 1) % len(self.players)

    def all_hands_empty(self) -> bool:
        return all(not player.hand for player in self.players)

    def card_count(self) -> int:
        """Total cards across deck, board, hands and player capture piles."""
        return (
            len(self.deck)
            + len(self.board)
            + sum(len(player.hand) for player in self.players)
            + sum(len(player.captured_cards) for player in self.players)
        )
