from bots.baseline_greedy import GreedyBot
from bots.base import legal_actions
from bots.bot_arena import run_match
from bots.random_bot import RandomBot
from setseize.game import SetAndSeizeGame


def test_run_match_executes():
    results = run_match(GreedyBot(), RandomBot(seed=1), n_games=2, seed=7)
    assert "scores" in results
    assert len(results["scores"]) == 2
    assert len(results["history"]) == 2
    assert results["discarded"] == 0


def test_legal_actions_always_include_a_drop_at_start():
    game = SetAndSeizeGame(seed=9)
    actions = legal_actions(game.state, game.current_player)
    drops = [action for action in actions if action.action_type == "drop"]
    assert len(drops) == 4
