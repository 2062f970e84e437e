"""Capture legality for Eleven."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .cards import Card, Rank

TARGET_SUM = 11

Capture = Tuple[Card, ...]


def valid_captures(hand_card: Card, board: Sequence[Card], *, target_sum: int = TARGET_SUM) -> List[Capture]:
    """Return every legal capture for ``hand_card`` against ``board``.

    A Jack sweeps every non-Queen/King card in a single option. A Queen or King
    takes one matching card per option. A number card takes any group of board
    number cards summing to ``target_sum`` minus its own value; groups are told
    apart by card identity, so equal-valued cards yield separate options.
    An empty list means the card can only be trailed.
    """
    if hand_card.rank is Rank.JACK:
        sweep = tuple(card for card in board if card.rank not in {Rank.QUEEN, Rank.KING})
        return [sweep] if sweep else []

    if hand_card.is_picture():
        return [(card,) for card in board if card.rank is hand_card.rank]

    target = target_sum - hand_card.value
    if target <= 0:
        return []
    numbers = [card for card in board if not card.is_picture()]
    return _subsets_summing_to(numbers, target)


def _subsets_summing_to(cards: Sequence[Card], target: int) -> List[Capture]:
    results: List[Capture] = []
    chosen: List[Card] = []

    def backtrack(start: int, total: int) -> None:
        if total == target:
            results.append(tuple(chosen))
            return
        for index in range(start, len(cards)):
            card = cards[index]
            if total + card.value > target:
                continue
            chosen.append(card)
            backtrack(index + 1, total + card.value)
            chosen.pop()

    backtrack(0, 0)
    return results


def is_legal_capture(
    hand_card: Card,
    board: Sequence[Card],
    capture_ids: Iterable[str],
    *,
    target_sum: int = TARGET_SUM,
) -> bool:
    """Return True if ``capture_ids`` names exactly one of the legal captures."""
    wanted = frozenset(capture_ids)
    return any(
        frozenset(card.id for card in option) == wanted
        for option in valid_captures(hand_card, board, target_sum=target_sum)
    )
