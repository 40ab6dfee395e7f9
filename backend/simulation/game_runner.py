from typing import Dict, Optional, Any
import logging
import random
import time
import uuid
import sys
import os

# Add the parent directory to the path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import AIConfig, DEFAULT_BOARD_SIZE
from game_history import serialize_board_state
from models.engine import TicTacToeEngine
from models.game_state import GameState

logger = logging.getLogger(__name__)


class GameRunner:
    """
    Runs a single game between two AI engines and captures the results.
    Each side gets its own engine so the two searches never share caches.
    """

    def __init__(self, x_config: Dict, o_config: Dict, size: int = DEFAULT_BOARD_SIZE,
                 seed: Optional[int] = None):
        """
        Initialize a game runner with agent configurations.

        Args:
            x_config: Configuration dict for the X side, at least 'difficulty'
            o_config: Configuration dict for the O side
            size: Board dimension
            seed: Seed for the random choices of Easy/Medium play
        """
        self.x_config = x_config
        self.o_config = o_config
        self.size = size
        self.seed = seed
        self.game_id = str(uuid.uuid4())  # Generate a unique game ID
        self.move_history = []

    def _create_engine(self, config: Dict, seed_offset: int) -> TicTacToeEngine:
        rng = random.Random(None if self.seed is None else self.seed + seed_offset)
        ai_config = AIConfig(time_limit_ms=config.get('time_limit_ms', AIConfig.time_limit_ms))
        return TicTacToeEngine(ai_config, rng)

    def run_game(self) -> Dict[str, Any]:
        """
        Run a complete game and return statistics.

        Returns:
            Dict containing game statistics
        """
        state = GameState(self.size)
        engines = {
            "X": self._create_engine(self.x_config, 0),
            "O": self._create_engine(self.o_config, 1),
        }
        configs = {"X": self.x_config, "O": self.o_config}
        think_times = {"X": [], "O": []}
        fallbacks = 0

        start_time = time.time()

        while not state.is_terminal():
            player = state.turn
            result = engines[player].select_move(state.board, configs[player]['difficulty'],
                                                 self.size, player)
            think_times[player].append(result.elapsed_ms)
            if result.fallback:
                fallbacks += 1
                logger.warning(f"Game {self.game_id}: {player} fell back to move {result.move}: {result.error}")

            self.move_history.append(f"{player}{result.move}")
            state.apply_move(result.move)

        return {
            "game_id": self.game_id,
            "x_config": self.x_config,
            "o_config": self.o_config,
            "size": self.size,
            "winner": state.get_winner(),
            "moves": len(state.moves),
            "game_duration": time.time() - start_time,
            "avg_x_move_ms": sum(think_times["X"]) / len(think_times["X"]) if think_times["X"] else 0,
            "avg_o_move_ms": sum(think_times["O"]) / len(think_times["O"]) if think_times["O"] else 0,
            "fallbacks": fallbacks,
            "move_history": ",".join(self.move_history),
            "record": serialize_board_state(state.board, state.moves, self.size),
        }
