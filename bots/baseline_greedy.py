"""Baseline greedy bot."""

from __future__ import annotations

from typing import Optional, Sequence

from engine.cards import Card, Rank, Suit
from engine.rules import TARGET_SUM, valid_captures
from engine.state import GameState

from .base import BotStrategy, Move

CAPTURE_BASE = 10
CLEAR_BOARD_BONUS = 50
BIG_CASINO_BONUS = 20
LITTLE_CASINO_BONUS = 15
ACE_BONUS = 5
SPADE_BONUS = 2

TRAIL_PENALTIES = (
    (lambda card: card.matches(Rank.TEN, Suit.DIAMONDS), -20),
    (lambda card: card.matches(Rank.TWO, Suit.SPADES), -15),
    (lambda card: card.rank is Rank.ACE, -10),
)


def evaluate_capture(hand_card: Card, captured: Sequence[Card], board: Sequence[Card]) -> int:
    score = CAPTURE_BASE
    if len(captured) == len(board):
        score += CLEAR_BOARD_BONUS

    taken = [hand_card, *captured]
    for card in taken:
        if card.matches(Rank.TEN, Suit.DIAMONDS):
            score += BIG_CASINO_BONUS
        if card.matches(Rank.TWO, Suit.SPADES):
            score += LITTLE_CASINO_BONUS
        if card.rank is Rank.ACE:
            score += ACE_BONUS
        if card.suit is Suit.SPADES:
            score += SPADE_BONUS
    return score + len(taken)


def evaluate_trail(card: Card) -> int:
    return sum(penalty for applies, penalty in TRAIL_PENALTIES if applies(card))


def get_best_move(state: GameState, bot_player_index: int, *, target_sum: int = TARGET_SUM) -> Move:
    """Pick the single highest scoring capture or trail, looking one move ahead.

    Ties keep the first option found, scanning hand cards in hand order.
    """
    hand = state.players[bot_player_index].hand
    board = state.board

    best_move: Optional[Move] = None
    best_score = -100

    for card in hand:
        options = valid_captures(card, board, target_sum=target_sum)
        if options:
            for option in options:
                score = evaluate_capture(card, option, board)
                if score > best_score:
                    best_score = score
                    best_move = Move(card.id, tuple(c.id for c in option))
        else:
            score = evaluate_trail(card)
            if score > best_score:
                best_score = score
                best_move = Move(card.id)

    if best_move is None:
        if not hand:
            raise RuntimeError("Bot has no cards to play.")
        return Move(hand[0].id)
    return best_move


class GreedyBot(BotStrategy):
    name = "Greedy"

    def choose_move(self, state: GameState, player: int, *, target_sum: int = TARGET_SUM) -> Move:
        return get_best_move(state, player, target_sum=target_sum)
