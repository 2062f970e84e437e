"""Simple bot arena for Eleven."""

from __future__ import annotations

import argparse
import logging
from random import Random
from typing import Dict, Iterable, Optional, Sequence

from engine.game import GameEngine
from engine.scoring import match_winner, round_results, side_scores
from engine.state import GamePhase, GameState

from .base import BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "greedy": GreedyBot,
    "random": RandomBot,
}


def play_round(engine: GameEngine, state: GameState, bots: Sequence[BotStrategy]) -> GameState:
    """Play moves until the current deck cycle reaches the scoring phase."""
    for seat, bot in enumerate(bots):
        bot.on_round_start(state, seat)
    while state.phase == GamePhase.PLAYING:
        player = state.active_player_index
        move = bots[player].choose_move(state, player, target_sum=engine.rules.target_sum)
        state = engine.execute_move(state, move.hand_card_id, move.capture_card_ids)
    return state


def run_match(
    bots: Sequence[BotStrategy],
    *,
    seed: Optional[int] = None,
    max_rounds: int = 100,
) -> dict:
    engine = GameEngine(rng=Random(seed))
    names = [f"{bot.name} {seat + 1}" for seat, bot in enumerate(bots)]
    state = engine.initialize_game(names)
    history = []
    for _ in range(max_rounds):
        state = play_round(engine, state, bots)
        history.append(
            {
                "round_points": [result.total for result in round_results(state, engine.rules)],
                "scores": side_scores(state),
            }
        )
        state = engine.next_round(state)
        if state.phase == GamePhase.GAME_OVER:
            break
    else:
        logger.warning("Match stopped after %d rounds without a winner", max_rounds)

    return {
        "mode": state.game_mode.value,
        "scores": side_scores(state),
        "winner": match_winner(state, engine.rules),
        "history": history,
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a bot match.")
    parser.add_argument("--bot-a", default="greedy", choices=BOT_REGISTRY.keys())
    parser.add_argument("--bot-b", default="random", choices=BOT_REGISTRY.keys())
    parser.add_argument("--mode", default="1v1", choices=["1v1", "2v2"])
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--max-rounds", type=int, default=100)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    kinds = [args.bot_a, args.bot_b]
    if args.mode == "2v2":
        # Teammates sit at alternating seats.
        kinds = kinds * 2
    bots = [BOT_REGISTRY[kind]() for kind in kinds]
    results = run_match(bots, seed=args.seed, max_rounds=args.max_rounds)

    print(f"Final scores after {len(results['history'])} rounds: {results['scores']}")
    if results["winner"] is None:
        print("No winner.")
    else:
        print(f"Winner: side {results['winner']} ({kinds[results['winner']]})")


if __name__ == "__main__":
    main()
