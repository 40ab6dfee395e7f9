#!/usr/bin/env python3
"""
Play batches of engine-vs-engine games and write a summary.

Matchups, game counts and the Hard time budget come from a JSON config
file; a default one is created when the path does not exist.
"""

import argparse
import logging
import os
import sys
from datetime import datetime

# Add the parent directory to the path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from simulation.analysis import results_to_frame, summarize_results
from simulation.simulation_config import load_config
from simulation.game_runner import GameRunner

logger = logging.getLogger(__name__)


def run_simulation(config_path: str) -> str:
    """Run every configured matchup and return the path of the summary CSV."""
    config = load_config(config_path)
    all_configs = config.get_all_configs()

    logger.info(f"Starting simulation at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"  Matchups: {[c['matchup'] for c in all_configs]}")
    logger.info(f"  Games per matchup: {config.games_per_matchup}")
    logger.info(f"  Board size: {config.board_size}x{config.board_size}")

    results = []
    for matchup_index, game_config in enumerate(all_configs):
        for game_index in range(config.games_per_matchup):
            seed = None
            if config.seed is not None:
                seed = config.seed + matchup_index * 1000 + game_index * 2
            runner = GameRunner(game_config['x'], game_config['o'], config.board_size, seed)
            result = runner.run_game()
            results.append(result)
            logger.info(f"{game_config['matchup']} game {game_index + 1}: winner={result['winner']} "
                        f"moves={result['moves']}")

    os.makedirs(config.output_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    games_file = os.path.join(config.output_dir, f"games_{timestamp}.csv")
    summary_file = os.path.join(config.output_dir, f"summary_{timestamp}.csv")

    results_to_frame(results).to_csv(games_file, index=False)
    summary = summarize_results(results)
    summary.to_csv(summary_file, index=False)

    logger.info(f"\n{summary.to_string(index=False)}")
    return summary_file


def main():
    parser = argparse.ArgumentParser(description="Run Tic-Tac-Toe engine self-play simulations.")
    parser.add_argument("--config", type=str, default="simulation_config.json", help="Simulation config file")
    parser.add_argument("--verbose", action="store_true", help="Log search details")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    summary_file = run_simulation(args.config)
    print(f"Summary saved to: {summary_file}")


if __name__ == "__main__":
    main()
