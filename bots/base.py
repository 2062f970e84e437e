"""Common bot strategy interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from engine.rules import TARGET_SUM, valid_captures
from engine.state import GameState


@dataclass(frozen=True)
class Move:
    hand_card_id: str
    capture_card_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_capture(self) -> bool:
        return bool(self.capture_card_ids)


def legal_moves(state: GameState, player_index: int, *, target_sum: int = TARGET_SUM) -> List[Move]:
    """Every capture option for each hand card, or a trail when it has none."""
    moves: List[Move] = []
    for card in state.players[player_index].hand:
        options = valid_captures(card, state.board, target_sum=target_sum)
        if options:
            moves.extend(Move(card.id, tuple(c.id for c in option)) for option in options)
        else:
            moves.append(Move(card.id))
    return moves


class BotStrategy:
    """Base class for bot policies."""

    name: str = "BaseBot"

    def on_round_start(self, state: GameState, player: int) -> None:
        """Optional hook invoked whenever a fresh deck is dealt."""
        return None

    def choose_move(self, state: GameState, player: int, *, target_sum: int = TARGET_SUM) -> Move:
        """Return the move to play; defaults to the first legal move."""
        moves = legal_moves(state, player, target_sum=target_sum)
        if not moves:
            raise RuntimeError("No legal moves available for bot.")
        return moves[0]
