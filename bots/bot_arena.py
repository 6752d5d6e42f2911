"""Simple bot arena for Set & Seize."""

from __future__ import annotations

import argparse
import logging
from typing import Dict, Iterable, Sequence

from setseize.deck import DEFAULT_PLAYERS
from setseize.errors import InvariantViolation
from setseize.game import SetAndSeizeGame
from setseize.logging_utils import setup_logging
from setseize.rules_schema import DEFAULT_RULES, RuleSet, load_rules

from .base import BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "greedy": GreedyBot,
    "random": RandomBot,
}

# Upper bound on turns; a 52-card game takes exactly 48.
MAX_TURNS = 200


def play_game(game: SetAndSeizeGame, bots: Sequence[BotStrategy]) -> None:
    seats = dict(zip(game.player_ids, bots))
    for player_id, bot in seats.items():
        bot.on_game_start(game.state, player_id)
    turns = 0
    while not game.is_over():
        if turns >= MAX_TURNS:
            raise RuntimeError(f"Game {game.game_id} did not finish within {MAX_TURNS} turns.")
        player_id = game.current_player
        action = seats[player_id].choose_action(game.state, player_id)
        outcome = game.play(player_id, action)
        if not outcome.accepted:
            assert outcome.rejection is not None
            raise RuntimeError(f"{seats[player_id].name} chose an illegal action: {outcome.rejection.message}")
        turns += 1


def run_match(
    bot_a: BotStrategy,
    bot_b: BotStrategy,
    *,
    n_games: int = 10,
    seed: int | None = None,
    rules: RuleSet = DEFAULT_RULES,
) -> dict:
    bots = [bot_a, bot_b]
    totals = {player_id: 0 for player_id in DEFAULT_PLAYERS}
    wins = {player_id: 0 for player_id in DEFAULT_PLAYERS}
    history = []
    discarded = 0
    for idx in range(n_games):
        game = SetAndSeizeGame(
            seed=None if seed is None else seed + idx,
            rules=rules,
            starting_player=DEFAULT_PLAYERS[idx % 2],
        )
        try:
            play_game(game, bots)
        except InvariantViolation:
            discarded += 1
            continue
        assert game.result is not None
        for player_id, points in game.result.points.items():
            totals[player_id] += points
        if game.result.winner is not None:
            wins[game.result.winner] += 1
        history.append({"scores": dict(game.result.points), "winner": game.result.winner})
        logger.debug("Game %d: %s", idx, game.result.points)
    return {"scores": totals, "wins": wins, "history": history, "discarded": discarded}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a bot match.")
    parser.add_argument("--bot-a", default="greedy", choices=BOT_REGISTRY.keys())
    parser.add_argument("--bot-b", default="random", choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--rules", default=None, help="Optional YAML rules file.")
    args = parser.parse_args(argv)

    rules = load_rules(args.rules) if args.rules else DEFAULT_RULES
    setup_logging(rules.logging.level)

    bot_a = BOT_REGISTRY[args.bot_a]()
    bot_b = BOT_REGISTRY[args.bot_b]()
    results = run_match(bot_a, bot_b, n_games=args.n, seed=args.seed, rules=rules)

    print(f"Points after {args.n} games: {results['scores']}")
    print(f"Wins: {results['wins']} (draws: {args.n - results['discarded'] - sum(results['wins'].values())})")


if __name__ == "__main__":
    main()
