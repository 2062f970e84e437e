"""Bot strategies for Eleven."""

from .base import BotStrategy, Move, legal_moves
from .baseline_greedy import GreedyBot, get_best_move
from .random_bot import RandomBot

__all__ = ["BotStrategy", "Move", "legal_moves", "GreedyBot", "get_best_move", "RandomBot"]
