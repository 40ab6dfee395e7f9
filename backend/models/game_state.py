from typing import List, Dict, Optional

from config import DEFAULT_BOARD_SIZE
from game_logic import TIE, check_winner, create_empty_board, get_available_moves, make_move


class GameState:
    """
    A class representing the state of an N x N Tic-Tac-Toe game.
    X always moves first. Used by the self-play runner and the replay tools.
    """

    def __init__(self, size: int = DEFAULT_BOARD_SIZE):
        self.size = size
        self.board = create_empty_board(size)
        self.moves: List[Dict] = []  # [{"player": "X", "position": 4}, ...]
        self.turn = "X"
        self.winner: Optional[str] = None

    def clone(self) -> 'GameState':
        """Create a copy of the current game state."""
        new_state = GameState(self.size)
        new_state.board = list(self.board)
        new_state.moves = [dict(move) for move in self.moves]
        new_state.turn = self.turn
        new_state.winner = self.winner
        return new_state

    def get_valid_moves(self) -> List[int]:
        """Get all valid moves for the current player."""
        if self.is_terminal():
            return []
        return get_available_moves(self.board)

    def apply_move(self, position: int) -> None:
        """Place the current player's marker and pass the turn."""
        if self.is_terminal():
            raise ValueError("Game is already over")

        self.board = make_move(self.board, position, self.turn)
        self.moves.append({"player": self.turn, "position": position})
        self.winner = check_winner(self.board, self.size)

        if self.winner is None:
            self.turn = "O" if self.turn == "X" else "X"

    def is_terminal(self) -> bool:
        """Check if the game has ended."""
        return self.winner is not None

    def get_winner(self) -> Optional[str]:
        """'X', 'O', 'tie', or None while the game is still going."""
        return self.winner

    def is_tie(self) -> bool:
        return self.winner == TIE
