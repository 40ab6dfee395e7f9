from functools import lru_cache
from math import isqrt
from typing import List, Optional, Tuple, NamedTuple, Dict

from config import MIN_BOARD_SIZE, MAX_BOARD_SIZE, DEFAULT_BOARD_SIZE

PLAYERS = ("X", "O")
TIE = "tie"

# Boards up to this size check wins against the precomputed line list
COMBINATION_CHECK_MAX_SIZE = 5

Board = List[Optional[str]]


class StrategicPositions(NamedTuple):
    center: Tuple[int, ...]
    corners: Tuple[int, ...]
    edges: Tuple[int, ...]


def validate_board_size(size) -> None:
    """Check the board dimension is an integer between 3 and 20."""
    if isinstance(size, bool) or not isinstance(size, int) or not (MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE):
        raise ValueError(
            f"Invalid board size: {size}. Must be an integer between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}."
        )


def validate_position(position, size: int) -> None:
    max_position = size * size - 1
    if isinstance(position, bool) or not isinstance(position, int) or not (0 <= position <= max_position):
        raise ValueError(
            f"Invalid position: {position}. Must be between 0 and {max_position} for a {size}x{size} board."
        )


def validate_player(player) -> None:
    if player not in PLAYERS:
        raise ValueError(f"Invalid player: {player}. Must be 'X' or 'O'.")


def validate_board(board: Board, size: int) -> None:
    """Check the board length matches the dimension and every cell holds a valid value."""
    validate_board_size(size)
    if len(board) != size * size:
        raise ValueError(f"Board size mismatch: expected {size * size} cells, got {len(board)}")
    for index, cell in enumerate(board):
        if cell is not None and cell not in PLAYERS:
            raise ValueError(f"Invalid cell value {cell!r} at position {index}")


def board_size_of(board: Board) -> int:
    """Infer the dimension from the cell count."""
    size = isqrt(len(board))
    if size * size != len(board):
        raise ValueError(f"Board with {len(board)} cells is not square")
    validate_board_size(size)
    return size


def get_opponent(player: str) -> str:
    return "X" if player == "O" else "O"


@lru_cache(maxsize=32)
def get_winning_combinations(size: int) -> Tuple[Tuple[int, ...], ...]:
    """All rows, all columns and both full diagonals for a board size."""
    validate_board_size(size)

    rows = [tuple(row * size + col for col in range(size)) for row in range(size)]
    cols = [tuple(row * size + col for row in range(size)) for col in range(size)]
    main_diagonal = tuple(i * size + i for i in range(size))
    anti_diagonal = tuple(i * size + (size - 1 - i) for i in range(size))

    return tuple(rows + cols + [main_diagonal, anti_diagonal])


@lru_cache(maxsize=32)
def get_lines_through(size: int) -> Dict[int, Tuple[Tuple[int, ...], ...]]:
    """Map each position to the winning lines that contain it."""
    lines: Dict[int, list] = {position: [] for position in range(size * size)}
    for combination in get_winning_combinations(size):
        for position in combination:
            lines[position].append(combination)
    return {position: tuple(combos) for position, combos in lines.items()}


@lru_cache(maxsize=32)
def get_strategic_positions(size: int) -> StrategicPositions:
    """Center cell(s), corners and non-corner edge cells for a board size."""
    mid = size // 2

    if size % 2 == 1:
        center = (mid * size + mid,)
    else:
        center = (
            (mid - 1) * size + (mid - 1),
            (mid - 1) * size + mid,
            mid * size + (mid - 1),
            mid * size + mid,
        )

    corners = (0, size - 1, size * (size - 1), size * size - 1)

    edges = []
    for i in range(1, size - 1):
        edges.append(i)                        # Top edge
        edges.append(i * size)                 # Left edge
        edges.append((size - 1) * size + i)    # Bottom edge
        edges.append(i * size + (size - 1))    # Right edge

    return StrategicPositions(center, corners, tuple(edges))


def create_empty_board(size: int = DEFAULT_BOARD_SIZE) -> Board:
    validate_board_size(size)
    return [None] * (size * size)


def get_available_moves(board: Board) -> List[int]:
    """Empty positions in ascending order."""
    return [index for index, cell in enumerate(board) if cell is None]


def make_move(board: Board, position: int, player: str) -> Board:
    """Return a new board with the move applied. The input board is left untouched."""
    size = board_size_of(board)
    validate_position(position, size)
    validate_player(player)

    if board[position] is not None:
        raise ValueError(f"Invalid move: position {position} is already occupied by '{board[position]}'")

    new_board = list(board)
    new_board[position] = player
    return new_board


def check_winner_by_combinations(board: Board, size: int) -> Optional[str]:
    """Winner lookup over the precomputed winning lines."""
    for combination in get_winning_combinations(size):
        first = board[combination[0]]
        if first is not None and all(board[index] == first for index in combination):
            return first

    if all(cell is not None for cell in board):
        return TIE
    return None


def check_winner_by_scan(board: Board, size: int) -> Optional[str]:
    """
    Winner lookup that treats every cell as a potential line start and walks
    `size` cells right, down, down-right and down-left. Avoids building the
    line list for large boards.
    """
    directions = [(0, 1), (1, 0), (1, 1), (1, -1)]

    for start in range(size * size):
        first = board[start]
        if first is None:
            continue
        row, col = divmod(start, size)
        for d_row, d_col in directions:
            end_row = row + d_row * (size - 1)
            end_col = col + d_col * (size - 1)
            if not (0 <= end_row < size and 0 <= end_col < size):
                continue
            if all(board[(row + d_row * step) * size + col + d_col * step] == first for step in range(1, size)):
                return first

    if all(cell is not None for cell in board):
        return TIE
    return None


def check_winner(board: Board, size: int = DEFAULT_BOARD_SIZE) -> Optional[str]:
    """
    Returns the winning marker, "tie" for a full board without a winner,
    or None while the game is still going.
    """
    validate_board_size(size)
    if len(board) != size * size:
        raise ValueError(f"Board size mismatch: expected {size * size} cells, got {len(board)}")

    if size <= COMBINATION_CHECK_MAX_SIZE:
        return check_winner_by_combinations(board, size)
    return check_winner_by_scan(board, size)


def count_threats(board: Board, position: int, player: str, size: int) -> int:
    """
    Number of lines through an empty position that would be one move from
    completion if `player` took that position.
    """
    threats = 0
    for combination in get_lines_through(size)[position]:
        player_count = 1
        empty_count = 0
        for index in combination:
            if index == position:
                continue
            cell = board[index]
            if cell == player:
                player_count += 1
            elif cell is None:
                empty_count += 1
        if player_count == size - 1 and empty_count == 1:
            threats += 1
    return threats


def is_winning_move(board: Board, position: int, player: str, size: int) -> bool:
    """True if taking an empty position completes a line for `player`."""
    for combination in get_lines_through(size)[position]:
        if all(index == position or board[index] == player for index in combination):
            return True
    return False
