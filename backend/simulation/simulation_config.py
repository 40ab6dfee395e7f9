"""
Configuration settings for the simulation module.
"""

import os
import json
import logging
from typing import List, Dict, Optional
from dataclasses import dataclass, field, asdict

logger = logging.getLogger(__name__)


@dataclass
class Matchup:
    """One pairing of difficulties; X moves first."""
    x_difficulty: str = "hard"
    o_difficulty: str = "hard"

    def label(self) -> str:
        return f"{self.x_difficulty}_vs_{self.o_difficulty}"


@dataclass
class SimulationConfig:
    """Configuration for a batch of self-play games."""
    matchups: List[Matchup] = field(default_factory=lambda: [
        Matchup("easy", "hard"),
        Matchup("medium", "hard"),
        Matchup("hard", "hard"),
    ])
    games_per_matchup: int = 10
    board_size: int = 3
    time_limit_ms: int = 1000
    seed: Optional[int] = None
    output_dir: str = "simulation_results"

    def get_all_configs(self) -> List[Dict]:
        """Per-game side configurations for every matchup."""
        return [
            {
                'matchup': matchup.label(),
                'x': {'difficulty': matchup.x_difficulty, 'time_limit_ms': self.time_limit_ms},
                'o': {'difficulty': matchup.o_difficulty, 'time_limit_ms': self.time_limit_ms},
            }
            for matchup in self.matchups
        ]


def load_config(config_path: str) -> SimulationConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        SimulationConfig object
    """
    if not os.path.exists(config_path):
        # Create default config if it doesn't exist
        logger.info(f"Config file {config_path} not found. Creating default configuration...")
        default_config = SimulationConfig()
        save_config(default_config, config_path)
        return default_config

    with open(config_path, 'r') as f:
        config_dict = json.load(f)

    if 'matchups' in config_dict:
        config_dict['matchups'] = [Matchup(**m) for m in config_dict['matchups']]

    return SimulationConfig(**config_dict)


def save_config(config: SimulationConfig, config_path: str):
    """
    Save configuration to a JSON file.

    Args:
        config: SimulationConfig object
        config_path: Path to save the configuration file
    """
    os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(asdict(config), f, indent=2)
