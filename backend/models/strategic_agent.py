import random
from typing import List, Optional

from config import AIConfig
from game_logic import (
    Board,
    count_threats,
    get_available_moves,
    get_opponent,
    get_strategic_positions,
    is_winning_move,
    make_move,
)
from models.evaluator import BoardEvaluator


class StrategicAgent:
    """
    Rule-based agent for the Medium difficulty.

    Priority chain: win, block, fork (own then opponent's, boards >= 4x4),
    center, corner, an occasional random move, and finally the best
    one-ply evaluation.
    """

    def __init__(self, evaluator: BoardEvaluator, config: Optional[AIConfig] = None,
                 rng: Optional[random.Random] = None):
        self.evaluator = evaluator
        self.config = config or AIConfig()
        self.rng = rng or random.Random()

    def get_move(self, board: Board, size: int, player: str = "O") -> int:
        available_moves = get_available_moves(board)
        if not available_moves:
            raise ValueError("No available moves on the board")

        opponent = get_opponent(player)

        # Immediate win
        for move in available_moves:
            if is_winning_move(board, move, player, size):
                return move

        # Block immediate loss
        for move in available_moves:
            if is_winning_move(board, move, opponent, size):
                return move

        if size >= 4:
            fork_move = self.find_fork_move(board, available_moves, size, player)
            if fork_move is not None:
                return fork_move

            # Take the square the opponent would fork from
            fork_move = self.find_fork_move(board, available_moves, size, opponent)
            if fork_move is not None:
                return fork_move

        positions = get_strategic_positions(size)
        for center in positions.center:
            if board[center] is None:
                return center
        for corner in positions.corners:
            if board[corner] is None:
                return corner

        # Small chance to play randomly to avoid being too predictable
        if self.rng.random() < self.config.medium_random_percentage:
            return self.rng.choice(available_moves)

        return self.best_evaluated_move(board, available_moves, size, player)

    def find_fork_move(self, board: Board, available_moves: List[int], size: int,
                       player: str) -> Optional[int]:
        """First move that opens two or more simultaneous threats for `player`."""
        for move in available_moves:
            if count_threats(board, move, player, size) >= 2:
                return move
        return None

    def best_evaluated_move(self, board: Board, available_moves: List[int], size: int,
                            player: str) -> int:
        best_move = available_moves[0]
        best_score = float("-inf")

        for move in available_moves:
            score = self.evaluator.evaluate(make_move(board, move, player), size, player)
            if score > best_score:
                best_score = score
                best_move = move

        return best_move
