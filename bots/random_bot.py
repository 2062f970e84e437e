"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional

from engine.rules import TARGET_SUM
from engine.state import GameState

from .base import BotStrategy, Move, legal_moves


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_move(self, state: GameState, player: int, *, target_sum: int = TARGET_SUM) -> Move:
        moves = legal_moves(state, player, target_sum=target_sum)
        if not moves:
            raise RuntimeError("No legal moves available for bot.")
        return self._rng.choice(moves)
