import copy
from random import Random

import pytest

from engine.cards import Card, Rank, Suit
from engine.game import GameEngine, deal_cards
from engine.rules_schema import RuleSet
from engine.state import (
    BonusEvent,
    CardNotInHand,
    GameMode,
    GamePhase,
    GameState,
    IllegalCapture,
    InvalidMove,
    Player,
)


def make_engine(**kwargs) -> GameEngine:
    return GameEngine(rng=Random(1), clock=lambda: 1234, **kwargs)


def two_player_state(hand_a, hand_b, board, *, deck=(), **overrides) -> GameState:
    players = (
        Player(id="a", name="Alice", hand=tuple(hand_a)),
        Player(id="b", name="Bob", hand=tuple(hand_b)),
    )
    fields = dict(deck=tuple(deck), board=tuple(board), players=players)
    fields.update(overrides)
    return GameState(**fields)


def test_initialize_one_vs_one():
    state = make_engine().initialize_game(["You", "Bot"], forced_deal_order=1)
    assert state.game_mode is GameMode.ONE_VS_ONE
    assert state.phase is GamePhase.PLAYING
    assert state.round == 1
    assert state.deal_order == 1
    assert state.active_player_index == 1
    assert [len(p.hand) for p in state.players] == [4, 4]
    assert len(state.board) == 4
    assert len(state.deck) == 52 - 12
    assert state.teams is None
    assert state.last_capturing_player_index is None
    assert [p.is_bot for p in state.players] == [False, True]
    assert state.card_count() == 52


def test_initialize_two_vs_two_seats_teams_alternately():
    state = make_engine().initialize_game(["N", "E", "S", "W"])
    assert state.game_mode is GameMode.TWO_VS_TWO
    assert [p.team_index for p in state.players] == [0, 1, 0, 1]
    assert state.teams is not None
    assert state.teams[0].player_ids == ("player-0", "player-2")
    assert state.teams[1].player_ids == ("player-1", "player-3")
    assert all(team.score == 0 and not team.captured_cards for team in state.teams)
    assert len(state.deck) == 52 - 20
    assert 0 <= state.deal_order < 4
    assert state.active_player_index == state.deal_order


def test_initialize_rejects_bad_player_counts():
    engine = make_engine()
    with pytest.raises(ValueError):
        engine.initialize_game(["Solo"])
    with pytest.raises(ValueError):
        engine.initialize_game(["A", "B", "C"])
    with pytest.raises(ValueError):
        engine.initialize_game(["A", "B"], game_mode="2v2")
    with pytest.raises(ValueError):
        engine.initialize_game(["A", "B"], forced_deal_order=2)


def test_deal_cards_starts_with_dealer():
    deck = [Card.of(rank, Suit.HEARTS) for rank in list(Rank)[:8]]
    players = (Player(id="a", name="A"), Player(id="b", name="B"))
    remaining, dealt = deal_cards(deck, players, 4, deal_order=1)
    assert remaining == ()
    assert list(dealt[1].hand) == deck[:4]
    assert list(dealt[0].hand) == deck[4:]


def test_deal_cards_short_deck_deals_fewer():
    deck = [Card.of(rank, Suit.HEARTS) for rank in list(Rank)[:5]]
    players = (Player(id="a", name="A"), Player(id="b", name="B"))
    remaining, dealt = deal_cards(deck, players, 4, deal_order=0)
    assert remaining == ()
    assert len(dealt[0].hand) == 4
    assert len(dealt[1].hand) == 1


def test_trail_places_card_on_board_and_passes_turn():
    five = Card.of(Rank.FIVE, Suit.HEARTS)
    nine = Card.of(Rank.NINE, Suit.CLUBS)
    state = two_player_state([five, Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], [nine])
    result = make_engine().execute_move(state, five.id, [])
    assert result.board == (nine, five)
    assert result.active_player_index == 1
    assert result.last_capturing_player_index is None
    assert five not in result.players[0].hand


def test_capture_moves_cards_to_pile():
    four = Card.of(Rank.FOUR, Suit.HEARTS)
    three = Card.of(Rank.THREE, Suit.CLUBS)
    four_spades = Card.of(Rank.FOUR, Suit.SPADES)
    nine = Card.of(Rank.NINE, Suit.CLUBS)
    state = two_player_state([four, Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], [three, four_spades, nine])
    result = make_engine().execute_move(state, four.id, [three.id, four_spades.id])
    assert result.board == (nine,)
    assert set(result.players[0].captured_cards) == {four, three, four_spades}
    assert result.last_capturing_player_index == 0
    assert result.players[0].round_scopas == 0
    assert result.last_bonus_event is None


def test_last_capturer_survives_trails():
    five = Card.of(Rank.FIVE, Suit.HEARTS)
    state = two_player_state(
        [five, Card.of(Rank.TWO, Suit.HEARTS)],
        [Card.of(Rank.SIX, Suit.SPADES)],
        [Card.of(Rank.NINE, Suit.CLUBS)],
        last_capturing_player_index=1,
    )
    result = make_engine().execute_move(state, five.id, [])
    assert result.last_capturing_player_index == 1


def test_clearing_the_board_earns_bonus():
    seven = Card.of(Rank.SEVEN, Suit.HEARTS)
    four = Card.of(Rank.FOUR, Suit.CLUBS)
    state = two_player_state([seven, Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], [four])
    result = make_engine().execute_move(state, seven.id, [four.id])
    assert result.board == ()
    assert result.players[0].round_scopas == 1
    assert result.players[1].round_scopas == 0
    assert result.active_scopa_player_index == 0
    assert result.last_bonus_event == BonusEvent(player_id="a", timestamp=1234)


def test_clearing_bonus_offsets_opponent_bonus():
    seven = Card.of(Rank.SEVEN, Suit.HEARTS)
    four = Card.of(Rank.FOUR, Suit.CLUBS)
    state = two_player_state([seven, Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], [four])
    players = (state.players[0], Player(id="b", name="Bob", hand=state.players[1].hand, round_scopas=1))
    state = GameState(deck=(), board=state.board, players=players)
    result = make_engine().execute_move(state, seven.id, [four.id])
    assert result.players[0].round_scopas == 0
    assert result.players[1].round_scopas == 0
    assert result.last_bonus_event is not None
    assert result.last_bonus_event.player_id == "a"


def test_jack_sweep_is_not_a_bonus():
    jack = Card.of(Rank.JACK, Suit.HEARTS)
    board = [Card.of(Rank.FOUR, Suit.CLUBS), Card.of(Rank.NINE, Suit.SPADES)]
    state = two_player_state([jack, Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], board)
    result = make_engine().execute_move(state, jack.id, [c.id for c in board])
    assert result.board == ()
    assert result.players[0].round_scopas == 0
    assert result.last_bonus_event is None
    assert result.active_scopa_player_index is None


def test_missing_hand_card_raises():
    state = two_player_state([Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], [])
    with pytest.raises(CardNotInHand):
        make_engine().execute_move(state, "6-spades", [])
    with pytest.raises(CardNotInHand):
        make_engine().execute_move(state, "no-such-card", [])


def test_illegal_capture_rejected():
    four = Card.of(Rank.FOUR, Suit.HEARTS)
    three = Card.of(Rank.THREE, Suit.CLUBS)
    state = two_player_state([four], [Card.of(Rank.SIX, Suit.SPADES)], [three])
    with pytest.raises(IllegalCapture):
        make_engine().execute_move(state, four.id, [three.id])
    with pytest.raises(IllegalCapture):
        make_engine().execute_move(state, four.id, ["not-on-board"])


def test_capture_validation_can_be_disabled():
    four = Card.of(Rank.FOUR, Suit.HEARTS)
    three = Card.of(Rank.THREE, Suit.CLUBS)
    state = two_player_state([four, Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], [three])
    engine = make_engine(rules=RuleSet(validate_captures=False))
    result = engine.execute_move(state, four.id, [three.id])
    assert three in result.players[0].captured_cards


def test_moves_outside_playing_phase_rejected():
    two = Card.of(Rank.TWO, Suit.HEARTS)
    state = two_player_state([two], [], [], phase=GamePhase.SCORING)
    with pytest.raises(InvalidMove):
        make_engine().execute_move(state, two.id, [])


def test_execute_move_does_not_mutate_input():
    four = Card.of(Rank.FOUR, Suit.HEARTS)
    seven = Card.of(Rank.SEVEN, Suit.CLUBS)
    state = two_player_state([four, Card.of(Rank.TWO, Suit.HEARTS)], [Card.of(Rank.SIX, Suit.SPADES)], [seven])
    snapshot = copy.deepcopy(state)
    result = make_engine().execute_move(state, four.id, [seven.id])
    assert state == snapshot
    assert result is not state
    assert result != state


def test_empty_hands_with_deck_left_deals_again():
    deck = [Card.of(rank, Suit.DIAMONDS) for rank in list(Rank)[:8]]
    two = Card.of(Rank.TWO, Suit.HEARTS)
    nine = Card.of(Rank.NINE, Suit.CLUBS)
    state = two_player_state([], [two], [nine], deck=deck, active_player_index=1, deal_order=1, deal_id=3)
    result = make_engine().execute_move(state, two.id, [])
    assert result.phase is GamePhase.PLAYING
    assert result.round == 2
    assert result.active_player_index == 1
    assert result.deck == ()
    assert list(result.players[1].hand) == deck[:4]
    assert list(result.players[0].hand) == deck[4:]
    assert result.board == (nine, two)
    assert result.deal_id == 4


def test_round_end_gives_board_to_last_capturer():
    five = Card.of(Rank.FIVE, Suit.HEARTS)
    king = Card.of(Rank.KING, Suit.SPADES)
    state = two_player_state([five], [], [king], last_capturing_player_index=1)
    result = make_engine().execute_move(state, five.id, [])
    assert result.phase is GamePhase.SCORING
    assert result.board == ()
    assert {king, five} <= set(result.players[1].captured_cards)
    assert result.players[0].captured_cards == ()


def test_round_end_without_any_capture_goes_to_dealer():
    five = Card.of(Rank.FIVE, Suit.HEARTS)
    ace = Card.of(Rank.ACE, Suit.CLUBS)
    state = two_player_state([], [five], [ace], active_player_index=1, deal_order=0)
    result = make_engine().execute_move(state, five.id, [])
    assert result.phase is GamePhase.SCORING
    assert set(result.players[0].captured_cards) == {ace, five}
    assert result.players[0].score == 1
    assert result.card_count() == 2


def test_round_end_adds_round_points_to_scores():
    seven = Card.of(Rank.SEVEN, Suit.HEARTS)
    ace = Card.of(Rank.ACE, Suit.CLUBS)
    three = Card.of(Rank.THREE, Suit.SPADES)
    players = (
        Player(id="a", name="Alice", hand=(seven,), score=10),
        Player(id="b", name="Bob", score=20, captured_cards=(Card.of(Rank.JACK, Suit.CLUBS),)),
    )
    state = GameState(deck=(), board=(ace, three), players=players)
    result = make_engine().execute_move(state, seven.id, [ace.id, three.id])
    assert result.phase is GamePhase.SCORING
    # one ace plus one board-clearing bonus worth five
    assert result.players[0].score == 10 + 1 + 5
    assert result.players[1].score == 20 + 1


def test_next_round_rotates_dealer_and_keeps_scores():
    engine = make_engine()
    state = engine.initialize_game(["A", "B"], forced_deal_order=0)
    players = tuple(
        Player(id=p.id, name=p.name, score=score, round_scopas=1, captured_cards=(Card.of(Rank.TWO, Suit.CLUBS),))
        for p, score in zip(state.players, (30, 12))
    )
    scored = GameState(deck=(), board=(), players=players, phase=GamePhase.SCORING, deal_order=0, deal_id=5)
    nxt = engine.next_round(scored)
    assert nxt.phase is GamePhase.PLAYING
    assert nxt.deal_order == 1
    assert nxt.active_player_index == 1
    assert nxt.round == 1
    assert nxt.deal_id == 6
    assert [p.score for p in nxt.players] == [30, 12]
    assert all(p.captured_cards == () and p.round_scopas == 0 for p in nxt.players)
    assert nxt.card_count() == 52


def test_next_round_ends_match_when_threshold_reached():
    players = (Player(id="a", name="A", score=64), Player(id="b", name="B", score=50))
    scored = GameState(deck=(), board=(), players=players, phase=GamePhase.SCORING)
    assert make_engine().next_round(scored).phase is GamePhase.GAME_OVER


def test_next_round_requires_scoring_phase():
    state = make_engine().initialize_game(["A", "B"])
    with pytest.raises(InvalidMove):
        make_engine().next_round(state)


def test_restart_match_resets_scores():
    players = (Player(id="a", name="A", score=64, is_bot=True), Player(id="b", name="B", score=50))
    over = GameState(deck=(), board=(), players=players, phase=GamePhase.GAME_OVER)
    fresh = make_engine().restart_match(over)
    assert fresh.phase is GamePhase.PLAYING
    assert [p.score for p in fresh.players] == [0, 0]
    assert [p.name for p in fresh.players] == ["A", "B"]
    assert fresh.players[0].is_bot
    assert fresh.card_count() == 52
