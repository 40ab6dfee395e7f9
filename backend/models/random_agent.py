import random
from typing import Optional

from config import AIConfig
from game_logic import Board, get_available_moves, get_strategic_positions


class RandomAgent:
    """
    Agent for the Easy difficulty: mostly random, occasionally hands the
    move to a stronger agent and slightly prefers center and corner cells.
    """

    def __init__(self, smart_agent=None, config: Optional[AIConfig] = None,
                 rng: Optional[random.Random] = None):
        self.smart_agent = smart_agent
        self.config = config or AIConfig()
        self.rng = rng or random.Random()

    def get_move(self, board: Board, size: int, player: str = "O") -> int:
        available_moves = get_available_moves(board)
        if not available_moves:
            raise ValueError("No available moves on the board")

        # Sometimes play properly to keep games interesting
        if self.smart_agent is not None and self.rng.random() < self.config.easy_smart_percentage:
            return self.smart_agent.get_move(board, size, player)

        positions = get_strategic_positions(size)
        good_moves = [move for move in available_moves
                      if move in positions.center or move in positions.corners]

        if good_moves and self.rng.random() < self.config.easy_strategic_bias:
            return self.rng.choice(good_moves)

        return self.rng.choice(available_moves)
