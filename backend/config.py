"""
Configuration settings for the Tic-Tac-Toe AI engine.
"""

import os
import json
import logging
from typing import Annotated, Dict, Any, Optional
from dataclasses import dataclass, asdict, fields

from pydantic import Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 20
DEFAULT_BOARD_SIZE = 3

# Default path for an optional overrides file
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "ai_config.json")


# Field constraints, enforced when loading overrides from a file
Positive = Annotated[int, Field(gt=0)]
NonNegative = Annotated[int, Field(ge=0)]
Probability = Annotated[float, Field(ge=0.0, le=1.0)]


@dataclass
class AIConfig:
    """All tunable constants of the engine in one place."""
    # Scoring system (win/loss magnitude is multiplied by size^2)
    win_score: Positive = 1000
    tie_score: int = 0

    # Move prioritization
    center_bonus: NonNegative = 30
    corner_bonus: NonNegative = 20
    edge_bonus: NonNegative = 10

    # Line evaluation
    line_score_base: Positive = 10
    fork_bonus: NonNegative = 50
    block_bonus: NonNegative = 40
    immediate_win_priority: NonNegative = 10000

    # Search configuration
    time_limit_ms: NonNegative = 1000
    min_search_depth: Positive = 1
    max_search_depth: Positive = 12

    # Cache capacities
    small_board_cache_size: Positive = 15000  # 3x3 boards
    medium_board_cache_size: Positive = 8000  # 4x4-6x6 boards
    large_board_cache_size: Positive = 2000   # 7x7+ boards

    # Performance thresholds
    large_board_threshold: NonNegative = 7  # Hard delegates to Medium above this size
    endgame_threshold: NonNegative = 8      # Search to completion at or below this many empty cells

    # AI behavior tuning
    easy_smart_percentage: Probability = 0.25
    easy_strategic_bias: Probability = 0.3
    medium_random_percentage: Probability = 0.15

    # Feature switches
    enable_transposition_table: bool = True
    enable_iterative_deepening: bool = True
    enable_move_ordering: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def win_score_for(size: int, config: Optional[AIConfig] = None) -> int:
    """Magnitude of a decided game, scaled with the number of cells."""
    config = config or AIConfig()
    return config.win_score * size * size


def cache_size_for(size: int, config: Optional[AIConfig] = None) -> int:
    """
    Cache capacity for a board size. Larger boards rarely revisit a position,
    so they get the smallest caches.
    """
    config = config or AIConfig()
    if size <= DEFAULT_BOARD_SIZE:
        return config.small_board_cache_size
    if size <= 6:
        return config.medium_board_cache_size
    return config.large_board_cache_size


def max_depth_for(size: int) -> int:
    """
    Maximum search depth for a board size.
    Non-increasing in size; 3x3 allows the complete game tree.
    """
    if size <= 3:
        return 9
    if size == 4:
        return 7
    if size == 5:
        return 5
    if size == 6:
        return 4
    if size == 7:
        return 3
    return 2


def load_ai_config(config_path: str = DEFAULT_CONFIG_PATH) -> AIConfig:
    """
    Load engine configuration from a JSON overrides file.

    Args:
        config_path: Path to the overrides file

    Returns:
        AIConfig with overrides applied, or the defaults when the file is
        missing, unreadable or holds an out-of-range value
    """
    if not os.path.exists(config_path):
        return AIConfig()

    try:
        with open(config_path, 'r') as f:
            overrides = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read AI config {config_path}: {e}. Using defaults")
        return AIConfig()

    if not isinstance(overrides, dict):
        logger.warning(f"AI config {config_path} is not a JSON object. Using defaults")
        return AIConfig()

    known = {f.name for f in fields(AIConfig)}
    unknown = set(overrides) - known
    if unknown:
        logger.warning(f"Ignoring unknown AI config keys: {sorted(unknown)}")

    try:
        config = TypeAdapter(AIConfig).validate_python({k: v for k, v in overrides.items() if k in known})
    except ValidationError as e:
        logger.warning(f"Invalid values in AI config {config_path}: {e}. Using defaults")
        return AIConfig()

    if config.min_search_depth > config.max_search_depth:
        logger.warning(f"min_search_depth {config.min_search_depth} exceeds max_search_depth "
                       f"{config.max_search_depth} in {config_path}. Using defaults")
        return AIConfig()

    return config


def save_ai_config(config: AIConfig, config_path: str = DEFAULT_CONFIG_PATH):
    """
    Save configuration to a JSON file.

    Args:
        config: AIConfig object
        config_path: Path to save the configuration file
    """
    os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
