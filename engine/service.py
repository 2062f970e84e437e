"""Convenience service layer for UI and agents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .cards import card_label, serialize_card
from .game import GameEngine
from .rules import valid_captures
from .scoring import ScoreBreakdown, match_winner, round_results
from .state import GamePhase, GameState

logger = logging.getLogger(__name__)


@dataclass
class PlayerView:
    id: str
    name: str
    is_bot: bool
    team_index: Optional[int]
    score: int
    round_scopas: int
    hand_size: int
    captured_count: int


@dataclass
class TeamView:
    team_index: int
    player_ids: list[str]
    score: int
    round_scopas: int
    captured_count: int


@dataclass
class CaptureOption:
    hand_card_id: str
    capture_card_ids: list[str]
    labels: list[str]


@dataclass
class GameView:
    phase: str
    mode: str
    round: int
    deal_id: int
    deal_order: int
    active_player: int
    deck_size: int
    board: list[dict]
    board_labels: list[str]
    hand: list[dict]
    hand_labels: list[str]
    capture_options: list[CaptureOption]
    players: list[PlayerView]
    teams: list[TeamView]
    last_capturing_player: Optional[int]
    bonus_event: Optional[dict]
    round_results: list[dict]
    winner: Optional[int]


class GameService:
    """Facade around GameEngine holding the single authoritative state for a host."""

    def __init__(self, engine: Optional[GameEngine] = None) -> None:
        self.engine = engine or GameEngine()
        self.state: Optional[GameState] = None

    # Session lifecycle -------------------------------------------------

    def start_game(
        self,
        player_names: Sequence[str],
        *,
        game_mode: Optional[str] = None,
        forced_deal_order: Optional[int] = None,
    ) -> GameView:
        self.state = self.engine.initialize_game(player_names, forced_deal_order, game_mode)
        logger.debug("Started %s game, dealer seat %d", self.state.game_mode.value, self.state.deal_order)
        return self.get_view()

    def has_active_game(self) -> bool:
        return self.state is not None

    # Actions -----------------------------------------------------------

    def play(self, hand_card_id: str, capture_card_ids: Sequence[str] = ()) -> GameView:
        state = self._require_state()
        self.state = self.engine.execute_move(state, hand_card_id, list(capture_card_ids))
        return self.get_view(state.active_player_index)

    def next_round(self) -> GameView:
        self.state = self.engine.next_round(self._require_state())
        return self.get_view()

    def restart_match(self) -> GameView:
        self.state = self.engine.restart_match(self._require_state())
        return self.get_view()

    # Views -------------------------------------------------------------

    def get_view(self, perspective: Optional[int] = None) -> GameView:
        state = self._require_state()
        if perspective is None:
            perspective = state.active_player_index
        hand = list(state.players[perspective].hand)

        options: list[CaptureOption] = []
        if state.phase is GamePhase.PLAYING and perspective == state.active_player_index:
            for card in hand:
                for option in valid_captures(card, state.board, target_sum=self.engine.rules.target_sum):
                    options.append(
                        CaptureOption(
                            hand_card_id=card.id,
                            capture_card_ids=[c.id for c in option],
                            labels=[card_label(c) for c in option],
                        )
                    )

        results: list[dict] = []
        winner = None
        if state.phase in (GamePhase.SCORING, GamePhase.GAME_OVER):
            results = [_breakdown_payload(result) for result in round_results(state, self.engine.rules)]
            winner = match_winner(state, self.engine.rules)

        event = state.last_bonus_event
        return GameView(
            phase=state.phase.value,
            mode=state.game_mode.value,
            round=state.round,
            deal_id=state.deal_id,
            deal_order=state.deal_order,
            active_player=state.active_player_index,
            deck_size=len(state.deck),
            board=[serialize_card(card) for card in state.board],
            board_labels=[card_label(card) for card in state.board],
            hand=[serialize_card(card) for card in hand],
            hand_labels=[card_label(card) for card in hand],
            capture_options=options,
            players=[
                PlayerView(
                    id=player.id,
                    name=player.name,
                    is_bot=player.is_bot,
                    team_index=player.team_index,
                    score=player.score,
                    round_scopas=player.round_scopas,
                    hand_size=len(player.hand),
                    captured_count=len(player.captured_cards),
                )
                for player in state.players
            ],
            teams=[
                TeamView(
                    team_index=team.team_index,
                    player_ids=list(team.player_ids),
                    score=team.score,
                    round_scopas=team.round_scopas,
                    captured_count=len(team.captured_cards),
                )
                for team in (state.teams or ())
            ],
            last_capturing_player=state.last_capturing_player_index,
            bonus_event={"player_id": event.player_id, "timestamp": event.timestamp} if event else None,
            round_results=results,
            winner=winner,
        )

    # Helpers -----------------------------------------------------------

    def _require_state(self) -> GameState:
        if self.state is None:
            raise RuntimeError("No active game.")
        return self.state


def _breakdown_payload(result: ScoreBreakdown) -> dict:
    return {
        "clubs_count": result.clubs_count,
        "aces": result.aces,
        "jacks": result.jacks,
        "big_casino": result.big_casino,
        "little_casino": result.little_casino,
        "clubs_points": result.clubs_points,
        "scopas": result.scopas,
        "total": result.total,
    }
