import logging
import random
import time
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional

from config import AIConfig, DEFAULT_BOARD_SIZE, cache_size_for
from game_logic import Board, get_available_moves, get_winning_combinations, validate_board, validate_player
from models.evaluator import BoardEvaluator
from models.lru_cache import LRUCache, StatsLRUCache
from models.minimax_agent import MinimaxAgent
from models.random_agent import RandomAgent
from models.strategic_agent import StrategicAgent

logger = logging.getLogger(__name__)

NO_MOVE = -1


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class MoveResult:
    """Outcome of a move selection, including why a fallback was used."""
    move: int
    difficulty: str
    elapsed_ms: float
    fallback: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TicTacToeEngine:
    """
    One AI session. Owns the evaluation cache, the fork cache and the
    transposition table, sized for the board currently being played.
    Not safe for concurrent searches; use one engine per thread.
    """

    def __init__(self, config: Optional[AIConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or AIConfig()
        self.rng = rng or random.Random()
        self.board_size = None
        self.last_result: Optional[MoveResult] = None
        self.initialize_caches(DEFAULT_BOARD_SIZE)

    def initialize_caches(self, size: int) -> None:
        """Create fresh caches sized for `size`. Discards everything cached so far."""
        capacity = cache_size_for(size, self.config)
        self.evaluation_cache = StatsLRUCache(capacity)
        self.fork_cache = LRUCache(capacity)
        self.transposition_table = StatsLRUCache(capacity)
        self.board_size = size

        self.evaluator = BoardEvaluator(self.evaluation_cache, self.fork_cache, self.config)
        self.medium_agent = StrategicAgent(self.evaluator, self.config, self.rng)
        self.easy_agent = RandomAgent(self.medium_agent, self.config, self.rng)
        self.hard_agent = MinimaxAgent(self.evaluator, self.transposition_table,
                                       fallback_agent=self.medium_agent, config=self.config)
        logger.debug(f"Caches initialized for {size}x{size} board with capacity {capacity}")

    def select_move(self, board: Board, difficulty, size: int = DEFAULT_BOARD_SIZE, player: str = "O",
                    time_limit_ms: Optional[int] = None) -> MoveResult:
        """
        Choose a move and report how it was chosen. Any internal failure is
        logged and turned into the first available move.
        """
        start_time = time.monotonic()
        difficulty_name = getattr(difficulty, "value", difficulty)

        try:
            move = self._choose_move(board, difficulty, size, player, time_limit_ms)
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.info(f"AI ({difficulty_name}) took {elapsed_ms:.0f}ms to decide on move {move} "
                        f"for {size}x{size} board")
            result = MoveResult(move, str(difficulty_name), elapsed_ms)
        except Exception as e:
            logger.exception(f"Error selecting AI move ({difficulty_name}, size={size}): {e}")
            elapsed_ms = (time.monotonic() - start_time) * 1000
            result = MoveResult(self._fallback_move(board), str(difficulty_name), elapsed_ms,
                                fallback=True, error=f"{type(e).__name__}: {e}")

        self.last_result = result
        return result

    def get_ai_move(self, board: Board, difficulty, size: int = DEFAULT_BOARD_SIZE, player: str = "O",
                    time_limit_ms: Optional[int] = None) -> int:
        """Position for the AI to play; never raises."""
        return self.select_move(board, difficulty, size, player, time_limit_ms).move

    def _choose_move(self, board: Board, difficulty, size: int, player: str,
                     time_limit_ms: Optional[int]) -> int:
        validate_board(board, size)
        validate_player(player)
        difficulty = Difficulty(difficulty)

        available_moves = get_available_moves(board)
        if not available_moves:
            raise ValueError("No available moves on the board")

        if size != self.board_size:
            self.initialize_caches(size)

        if difficulty == Difficulty.EASY:
            move = self.easy_agent.get_move(board, size, player)
        elif difficulty == Difficulty.MEDIUM:
            move = self.medium_agent.get_move(board, size, player)
        else:
            move = self.hard_agent.get_move(board, size, player, time_limit_ms)

        if move not in available_moves:
            raise RuntimeError(f"AI selected invalid move {move}")
        return move

    @staticmethod
    def _fallback_move(board) -> int:
        try:
            available_moves = get_available_moves(board)
        except TypeError:
            logger.error(f"Cannot derive a fallback move from board of type {type(board).__name__}")
            return NO_MOVE
        return available_moves[0] if available_moves else NO_MOVE

    def clear_caches(self) -> None:
        self.evaluation_cache.clear()
        self.fork_cache.clear()
        self.transposition_table.clear()
        logger.info("All caches cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        hit_rate = self.evaluation_cache.get_hit_rate()
        winning_combinations = get_winning_combinations.cache_info().currsize

        return {
            "board_size": self.board_size,
            "capacity": self.evaluation_cache.capacity,
            "winning_combinations": winning_combinations,
            "board_evaluations": len(self.evaluation_cache),
            "fork_detections": len(self.fork_cache),
            "transposition_table": len(self.transposition_table),
            "total_entries": (winning_combinations + len(self.evaluation_cache)
                              + len(self.fork_cache) + len(self.transposition_table)),
            "hit_rate": round(hit_rate * 100, 2),
            "transposition_hit_rate": round(self.transposition_table.get_hit_rate() * 100, 2),
            "ai_config": self.config.to_dict(),
        }
