"""High-level game orchestration for Eleven."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from random import Random
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .cards import Card, Rank
from .deck import build_deck, seeded_ids, shuffle_deck
from .rules import is_legal_capture
from .rules_schema import DEFAULT_RULES, RuleSet
from .scoring import match_winner, round_results, side_scores
from .state import (
    BonusEvent,
    CardNotInHand,
    GameMode,
    GamePhase,
    GameState,
    IllegalCapture,
    InvalidMove,
    Player,
    TeamInfo,
)

logger = logging.getLogger(__name__)

PLAYERS_PER_MODE = {GameMode.ONE_VS_ONE: 2, GameMode.TWO_VS_TWO: 4}


def _now_ms() -> int:
    return int(time.time() * 1000)


def deal_cards(
    deck: Sequence[Card],
    players: Sequence[Player],
    count: int,
    deal_order: int,
) -> Tuple[Tuple[Card, ...], Tuple[Player, ...]]:
    """Deal ``count`` cards to each player from the front of ``deck``.

    Dealing starts with the player at ``deal_order`` and continues around the
    table. A short deck is not an error; later seats just receive fewer cards.
    """
    remaining = list(deck)
    dealt = list(players)
    for offset in range(len(dealt)):
        seat = (deal_order + offset) % len(dealt)
        take, remaining = remaining[:count], remaining[count:]
        dealt[seat] = replace(dealt[seat], hand=dealt[seat].hand + tuple(take))
    return tuple(remaining), tuple(dealt)


def _resolve_mode(player_count: int, game_mode: Union[GameMode, str, None]) -> GameMode:
    if game_mode is None:
        mode = GameMode.TWO_VS_TWO if player_count == 4 else GameMode.ONE_VS_ONE
    else:
        mode = GameMode(game_mode) if isinstance(game_mode, str) else game_mode
    expected = PLAYERS_PER_MODE[mode]
    if player_count != expected:
        raise ValueError(f"Mode {mode.value} needs {expected} players, got {player_count}.")
    return mode


@dataclass
class GameEngine:
    """Apply moves to immutable ``GameState`` values.

    The engine holds only configuration and sources of randomness and time;
    game progress lives entirely in the states it returns.
    """

    rules: RuleSet = DEFAULT_RULES
    rng: Optional[Random] = None
    clock: Callable[[], int] = _now_ms
    bot_names: frozenset = field(default_factory=lambda: frozenset({"Bot"}))

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = Random()

    deal_cards = staticmethod(deal_cards)

    # Setup -------------------------------------------------------------

    def initialize_game(
        self,
        player_names: Sequence[str],
        forced_deal_order: Optional[int] = None,
        game_mode: Union[GameMode, str, None] = None,
    ) -> GameState:
        names = list(player_names)
        mode = _resolve_mode(len(names), game_mode)
        team_game = mode is GameMode.TWO_VS_TWO
        players = tuple(
            Player(
                id=f"player-{index}",
                name=name,
                is_bot=name in self.bot_names,
                team_index=index % 2 if team_game else None,
            )
            for index, name in enumerate(names)
        )
        teams = self._fresh_teams(players) if team_game else None
        deal_order = self._pick_deal_order(len(players), forced_deal_order)
        logger.debug("New %s game for %s, dealer seat %d", mode.value, names, deal_order)
        return self._deal_round(players, teams, mode, deal_order, deal_id=1)

    def next_round(self, state: GameState) -> GameState:
        """Start the next deck cycle, or end the match if a side has won."""
        if state.phase is not GamePhase.SCORING:
            raise InvalidMove(f"Next round requires the scoring phase, not {state.phase.value}.")
        winner = match_winner(state, self.rules)
        if winner is not None:
            logger.info("Match over, side %d wins with scores %s", winner, side_scores(state))
            return replace(state, phase=GamePhase.GAME_OVER)

        players = tuple(
            replace(player, hand=(), captured_cards=(), round_scopas=0) for player in state.players
        )
        teams = None
        if state.teams is not None:
            teams = tuple(replace(team, captured_cards=(), round_scopas=0) for team in state.teams)
        deal_order = state.next_player_index(state.deal_order)
        return self._deal_round(players, teams, state.game_mode, deal_order, deal_id=state.deal_id + 1)

    def restart_match(self, state: GameState) -> GameState:
        """Deal a fresh match for the same seats with every score back at zero."""
        players = tuple(
            replace(player, hand=(), captured_cards=(), round_scopas=0, score=0) for player in state.players
        )
        teams = self._fresh_teams(players) if state.teams is not None else None
        deal_order = self._pick_deal_order(len(players), None)
        return self._deal_round(players, teams, state.game_mode, deal_order, deal_id=state.deal_id + 1)

    # Moves -------------------------------------------------------------

    def execute_move(self, state: GameState, hand_card_id: str, capture_card_ids: Sequence[str]) -> GameState:
        if state.phase is not GamePhase.PLAYING:
            raise InvalidMove(f"Moves are not allowed in phase {state.phase.value}.")

        index = state.active_player_index
        player = state.players[index]
        hand_card = player.find_in_hand(hand_card_id)
        if hand_card is None:
            raise CardNotInHand(f"Card {hand_card_id!r} is not in {player.name}'s hand.")

        wanted = frozenset(capture_card_ids)
        captured = tuple(card for card in state.board if card.id in wanted)
        if len(captured) != len(wanted):
            raise IllegalCapture("Capture names cards that are not on the board.")
        if captured and self.rules.validate_captures and not is_legal_capture(
            hand_card, state.board, wanted, target_sum=self.rules.target_sum
        ):
            raise IllegalCapture(f"{sorted(wanted)} is not a legal capture for {hand_card.rank.value}.")

        is_capture = bool(captured)
        players = list(state.players)
        teams = list(state.teams) if state.teams is not None else None

        players[index] = replace(player, hand=tuple(card for card in player.hand if card.id != hand_card_id))
        if is_capture:
            taken = (hand_card,) + captured
            players[index] = players[index].capture(taken)
            if teams is not None:
                team_index = player.team_index
                teams[team_index] = teams[team_index].capture(taken)
            board = tuple(card for card in state.board if card.id not in wanted)
        else:
            board = state.board + (hand_card,)

        bonus_event = state.last_bonus_event
        scopa_index = state.active_scopa_player_index
        if is_capture and not board and hand_card.rank is not Rank.JACK:
            self._award_scopa(players, teams, index)
            bonus_event = BonusEvent(player_id=player.id, timestamp=self.clock())
            scopa_index = index
            logger.debug("Board cleared by %s", player.name)

        logger.debug(
            "%s %s %s%s",
            player.name,
            "captures with" if is_capture else "trails",
            hand_card.rank.value,
            hand_card.suit.value[0],
        )

        next_state = replace(
            state,
            players=tuple(players),
            teams=tuple(teams) if teams is not None else None,
            board=board,
            last_capturing_player_index=index if is_capture else state.last_capturing_player_index,
            active_scopa_player_index=scopa_index,
            last_bonus_event=bonus_event,
        )

        if next_state.all_hands_empty():
            if next_state.deck:
                return self._refill_hands(next_state)
            return self._finish_round(next_state)

        return replace(next_state, active_player_index=next_state.next_player_index(index))

    # Helpers -----------------------------------------------------------

    def _award_scopa(self, players: List[Player], teams: Optional[List[TeamInfo]], index: int) -> None:
        if teams is not None:
            mine = players[index].team_index
            other = 1 - mine
            if teams[other].round_scopas > 0:
                teams[other] = replace(teams[other], round_scopas=teams[other].round_scopas - 1)
            else:
                teams[mine] = replace(teams[mine], round_scopas=teams[mine].round_scopas + 1)
            return

        opponent = (index + 1) % len(players)
        if players[opponent].round_scopas > 0:
            players[opponent] = replace(players[opponent], round_scopas=players[opponent].round_scopas - 1)
        else:
            players[index] = replace(players[index], round_scopas=players[index].round_scopas + 1)

    def _refill_hands(self, state: GameState) -> GameState:
        deck, players = deal_cards(state.deck, state.players, self.rules.hand_size, state.deal_order)
        logger.debug("Dealt %d more cards each, %d left in deck", self.rules.hand_size, len(deck))
        return replace(
            state,
            deck=deck,
            players=players,
            round=state.round + 1,
            active_player_index=state.deal_order,
            deal_id=state.deal_id + 1,
        )

    def _finish_round(self, state: GameState) -> GameState:
        players = list(state.players)
        teams = list(state.teams) if state.teams is not None else None

        if state.board:
            recipient = state.last_capturing_player_index
            if recipient is None:
                # Nobody captured all round: the dealer collects what is left.
                recipient = state.deal_order
            players[recipient] = players[recipient].capture(state.board)
            if teams is not None:
                team_index = players[recipient].team_index
                teams[team_index] = teams[team_index].capture(state.board)

        scored = replace(
            state,
            players=tuple(players),
            teams=tuple(teams) if teams is not None else None,
            board=(),
            phase=GamePhase.SCORING,
        )
        results = round_results(scored, self.rules)
        if teams is not None:
            teams = [replace(team, score=team.score + result.total) for team, result in zip(teams, results)]
        else:
            players = [replace(p, score=p.score + result.total) for p, result in zip(players, results)]

        scored = replace(scored, players=tuple(players), teams=tuple(teams) if teams is not None else None)
        logger.info("Round finished, round points %s, totals %s", [r.total for r in results], side_scores(scored))
        return scored

    def _deal_round(
        self,
        players: Tuple[Player, ...],
        teams: Optional[Tuple[TeamInfo, ...]],
        mode: GameMode,
        deal_order: int,
        *,
        deal_id: int,
    ) -> GameState:
        deck = shuffle_deck(build_deck(seeded_ids(self.rng)), self.rng)
        deck, players = deal_cards(deck, players, self.rules.hand_size, deal_order)
        board, deck = deck[: self.rules.board_size], deck[self.rules.board_size :]
        return GameState(
            deck=deck,
            board=board,
            players=players,
            active_player_index=deal_order,
            round=1,
            phase=GamePhase.PLAYING,
            deal_order=deal_order,
            game_mode=mode,
            teams=teams,
            deal_id=deal_id,
        )

    def _pick_deal_order(self, player_count: int, forced: Optional[int]) -> int:
        if forced is None:
            return self.rng.randrange(player_count)
        if not 0 <= forced < player_count:
            raise ValueError(f"Deal order {forced} out of range for {player_count} players.")
        return forced

    @staticmethod
    def _fresh_teams(players: Sequence[Player]) -> Tuple[TeamInfo, TeamInfo]:
        return tuple(
            TeamInfo(
                team_index=team_index,
                player_ids=tuple(p.id for p in players if p.team_index == team_index),
            )
            for team_index in (0, 1)
        )
