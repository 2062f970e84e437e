"""Round scoring helpers for Eleven."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .cards import Card, Rank, Suit
from .rules_schema import DEFAULT_RULES, RuleSet
from .state import GameMode, GameState, Player, TeamInfo

BIG_CASINO_POINTS = 3
LITTLE_CASINO_POINTS = 2
CLUBS_MAJORITY = 7
CLUBS_POINTS = 7


@dataclass(frozen=True)
class ScoreBreakdown:
    clubs_count: int
    aces: int
    jacks: int
    big_casino: int
    little_casino: int
    clubs_points: int
    scopas: int
    total: int


def score_cards(captured_cards: Iterable[Card], round_scopas: int, bonus_multiplier: int) -> ScoreBreakdown:
    cards = list(captured_cards)
    clubs_count = sum(1 for card in cards if card.suit is Suit.CLUBS)
    aces = sum(1 for card in cards if card.rank is Rank.ACE)
    jacks = sum(1 for card in cards if card.rank is Rank.JACK)
    big_casino = BIG_CASINO_POINTS if any(card.matches(Rank.TEN, Suit.DIAMONDS) for card in cards) else 0
    little_casino = LITTLE_CASINO_POINTS if any(card.matches(Rank.TWO, Suit.CLUBS) for card in cards) else 0
    clubs_points = CLUBS_POINTS if clubs_count >= CLUBS_MAJORITY else 0
    scopa_points = round_scopas * bonus_multiplier

    return ScoreBreakdown(
        clubs_count=clubs_count,
        aces=aces,
        jacks=jacks,
        big_casino=big_casino,
        little_casino=little_casino,
        clubs_points=clubs_points,
        scopas=round_scopas,
        total=aces + jacks + big_casino + little_casino + clubs_points + scopa_points,
    )


def calculate_score(player: Player, rules: RuleSet = DEFAULT_RULES) -> ScoreBreakdown:
    multiplier = rules.scopa_multiplier(GameMode.ONE_VS_ONE.value)
    return score_cards(player.captured_cards, player.round_scopas, multiplier)


def calculate_team_score(team: TeamInfo, rules: RuleSet = DEFAULT_RULES) -> ScoreBreakdown:
    multiplier = rules.scopa_multiplier(GameMode.TWO_VS_TWO.value)
    return score_cards(team.captured_cards, team.round_scopas, multiplier)


def round_results(state: GameState, rules: RuleSet = DEFAULT_RULES) -> List[ScoreBreakdown]:
    """Breakdown per side (player in 1v1, team in 2v2) for the round in ``state``."""
    if state.teams is not None:
        return [calculate_team_score(team, rules) for team in state.teams]
    return [calculate_score(player, rules) for player in state.players]


def side_scores(state: GameState) -> List[int]:
    if state.teams is not None:
        return [team.score for team in state.teams]
    return [player.score for player in state.players]


def match_winner(state: GameState, rules: RuleSet = DEFAULT_RULES) -> Optional[int]:
    """Return the index of the winning player (1v1) or team (2v2), if any.

    A side wins once its cumulative score reaches the threshold for the mode.
    When several sides are past it the highest score wins; an exact tie at the
    top keeps the match going.
    """
    threshold = rules.win_threshold(state.game_mode.value)
    scores = side_scores(state)
    best = max(scores)
    if best < threshold or scores.count(best) > 1:
        return None
    return scores.index(best)
