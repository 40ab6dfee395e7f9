#!/usr/bin/env python3
import sys
import os
import json
import tempfile
import unittest

# Add parent directory to path to make imports work in test
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd

from game_history import deserialize_board_state
from simulation.analysis import SUMMARY_COLUMNS, results_to_frame, summarize_results
from simulation.game_runner import GameRunner
from simulation.run_simulation import run_simulation
from simulation.simulation_config import Matchup, SimulationConfig, load_config, save_config


def fake_result(x, o, winner, moves=9):
    return {
        "game_id": f"{x}-{o}-{winner}-{moves}",
        "x_config": {"difficulty": x},
        "o_config": {"difficulty": o},
        "size": 3,
        "winner": winner,
        "moves": moves,
        "avg_x_move_ms": 2.0,
        "avg_o_move_ms": 4.0,
    }


class TestGameRunner(unittest.TestCase):

    def test_hard_vs_hard_is_a_tie(self):
        runner = GameRunner({"difficulty": "hard", "time_limit_ms": 200},
                            {"difficulty": "hard", "time_limit_ms": 200}, seed=1)
        result = runner.run_game()

        self.assertEqual(result["winner"], "tie")
        self.assertEqual(result["moves"], 9)
        self.assertEqual(result["fallbacks"], 0)
        self.assertEqual(result["game_id"], runner.game_id)

    def test_hard_does_not_lose_to_easy(self):
        for seed in range(3):
            runner = GameRunner({"difficulty": "easy"}, {"difficulty": "hard", "time_limit_ms": 200}, seed=seed)
            self.assertIn(runner.run_game()["winner"], ("O", "tie"))

    def test_result_record_matches_history(self):
        runner = GameRunner({"difficulty": "medium"}, {"difficulty": "easy"}, size=4, seed=7)
        result = runner.run_game()

        history = result["move_history"].split(",")
        self.assertEqual(len(history), result["moves"])
        self.assertTrue(history[0].startswith("X"))

        record = deserialize_board_state(result["record"])
        self.assertEqual(record.board_size, 4)
        self.assertEqual([f"{m.player}{m.position}" for m in record.moves], history)
        self.assertGreaterEqual(result["avg_x_move_ms"], 0)

    def test_seeded_games_repeat(self):
        first = GameRunner({"difficulty": "easy"}, {"difficulty": "easy"}, seed=21).run_game()
        second = GameRunner({"difficulty": "easy"}, {"difficulty": "easy"}, seed=21).run_game()
        self.assertEqual(first["move_history"], second["move_history"])


class TestAnalysis(unittest.TestCase):

    def test_summary_rates(self):
        results = [
            fake_result("easy", "hard", "O", 7),
            fake_result("easy", "hard", "O", 5),
            fake_result("easy", "hard", "tie", 9),
            fake_result("hard", "hard", "tie", 9),
        ]
        summary = summarize_results(results).set_index("matchup")

        easy = summary.loc["easy_vs_hard"]
        self.assertEqual(easy["games"], 3)
        self.assertEqual(easy["o_wins"], 2)
        self.assertEqual(easy["ties"], 1)
        self.assertEqual(easy["x_wins"], 0)
        self.assertAlmostEqual(easy["o_win_rate"], 2 / 3)
        self.assertAlmostEqual(easy["avg_moves"], 7.0)
        self.assertEqual(summary.loc["hard_vs_hard"]["tie_rate"], 1.0)

    def test_empty_results(self):
        summary = summarize_results([])
        self.assertTrue(summary.empty)
        self.assertEqual(list(summary.columns), SUMMARY_COLUMNS)

    def test_frame_has_one_row_per_game(self):
        frame = results_to_frame([fake_result("easy", "easy", "X"), fake_result("easy", "easy", "O")])
        self.assertEqual(len(frame), 2)
        self.assertEqual(frame["fallbacks"].tolist(), [0, 0])


class TestSimulationConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "simulation_config.json")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_default_config_created(self):
        config = load_config(self.path)
        self.assertTrue(os.path.exists(self.path))
        self.assertEqual([m.label() for m in config.matchups],
                         ["easy_vs_hard", "medium_vs_hard", "hard_vs_hard"])

    def test_save_then_load(self):
        config = SimulationConfig(matchups=[Matchup("medium", "easy")], games_per_matchup=2,
                                  board_size=4, time_limit_ms=100, seed=5)
        save_config(config, self.path)
        self.assertEqual(load_config(self.path), config)

    def test_side_configs(self):
        config = SimulationConfig(matchups=[Matchup("easy", "medium")], time_limit_ms=250)
        self.assertEqual(config.get_all_configs(), [{
            "matchup": "easy_vs_medium",
            "x": {"difficulty": "easy", "time_limit_ms": 250},
            "o": {"difficulty": "medium", "time_limit_ms": 250},
        }])

    def test_run_simulation_writes_summary(self):
        output_dir = os.path.join(self.tmpdir.name, "results")
        with open(self.path, "w") as f:
            json.dump({
                "matchups": [{"x_difficulty": "easy", "o_difficulty": "medium"}],
                "games_per_matchup": 2,
                "board_size": 3,
                "time_limit_ms": 100,
                "seed": 3,
                "output_dir": output_dir,
            }, f)

        summary_file = run_simulation(self.path)
        summary = pd.read_csv(summary_file)
        self.assertEqual(summary["matchup"].tolist(), ["easy_vs_medium"])
        self.assertEqual(int(summary["games"].iloc[0]), 2)
        self.assertEqual(len([name for name in os.listdir(output_dir) if name.startswith("games_")]), 1)


if __name__ == '__main__':
    unittest.main()
