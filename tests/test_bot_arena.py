from bots.baseline_greedy import GreedyBot
from bots.bot_arena import main, run_match
from bots.random_bot import RandomBot


def test_run_match_executes():
    results = run_match([GreedyBot(), RandomBot(seed=3)], seed=7)
    assert results["mode"] == "1v1"
    assert len(results["scores"]) == 2
    assert results["history"]
    assert results["winner"] in (None, 0, 1)
    if results["winner"] is not None:
        assert max(results["scores"]) >= 62


def test_run_team_match_tracks_team_scores():
    results = run_match([GreedyBot(), RandomBot(seed=1), GreedyBot(), RandomBot(seed=2)], seed=4, max_rounds=2)
    assert results["mode"] == "2v2"
    assert len(results["scores"]) == 2
    assert 1 <= len(results["history"]) <= 2


def test_cli_runs(capsys):
    main(["--seed", "3", "--max-rounds", "1"])
    out = capsys.readouterr().out
    assert "Final scores" in out
