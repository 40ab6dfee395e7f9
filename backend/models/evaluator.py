from collections import Counter
from typing import Optional, Sequence

from config import AIConfig, win_score_for
from game_logic import (
    Board,
    TIE,
    check_winner,
    get_opponent,
    get_strategic_positions,
    get_winning_combinations,
)
from models.lru_cache import LRUCache, StatsLRUCache


def board_key(board: Board) -> str:
    """Compact string form of the board contents, '-' for empty cells."""
    return "".join(cell or "-" for cell in board)


class BoardEvaluator:
    """
    Static position evaluation from one player's perspective.

    Combines line potential, positional bonuses and fork detection. Results
    are memoized per board and perspective; fork detection has its own cache
    because Medium play queries it for boards that are never fully evaluated.
    """

    def __init__(self, cache: StatsLRUCache, fork_cache: Optional[LRUCache] = None,
                 config: Optional[AIConfig] = None):
        self.cache = cache
        self.fork_cache = fork_cache
        self.config = config or AIConfig()

    def evaluate(self, board: Board, size: int, player: str = "O") -> int:
        """
        Score the board for `player`: +win/-win for decided games, 0 for a tie,
        otherwise a heuristic kept strictly inside the win/loss range.
        """
        key = f"{board_key(board)}_{player}"
        cached = self.cache.get_with_stats(key)
        if cached is not None:
            return cached

        opponent = get_opponent(player)
        win_score = win_score_for(size, self.config)
        winner = check_winner(board, size)

        if winner == player:
            score = win_score
        elif winner == opponent:
            score = -win_score
        elif winner == TIE:
            score = self.config.tie_score
        else:
            score = self._heuristic_score(board, size, player, opponent)
            # A proven result must always outrank a heuristic guess
            limit = win_score // 2
            score = max(-limit, min(limit, score))

        self.cache.set(key, score)
        return score

    def _heuristic_score(self, board: Board, size: int, player: str, opponent: str) -> int:
        score = 0

        for combination in get_winning_combinations(size):
            score += self.evaluate_line(board, combination, player, size)

        positions = get_strategic_positions(size)
        for cells, bonus in ((positions.center, self.config.center_bonus),
                             (positions.corners, self.config.corner_bonus),
                             (positions.edges, self.config.edge_bonus)):
            for position in cells:
                if board[position] == player:
                    score += bonus
                elif board[position] == opponent:
                    score -= bonus

        if size >= 4:
            score += self.detect_forks(board, player, size)
            score -= self.detect_forks(board, opponent, size)

        return score

    def evaluate_line(self, board: Board, combination: Sequence[int], player: str, size: int) -> int:
        """
        Potential of a single line. Lines holding both markers are dead;
        a line one move from completion counts double plus the fork bonus.
        """
        opponent = get_opponent(player)
        player_count = 0
        opponent_count = 0

        for index in combination:
            if board[index] == player:
                player_count += 1
            elif board[index] == opponent:
                opponent_count += 1

        if player_count > 0 and opponent_count > 0:
            return 0

        count = player_count or opponent_count
        if count == 0:
            return 0

        score = self.config.line_score_base ** count
        if count == size - 1:
            score = 2 * score + self.config.fork_bonus

        return score if player_count else -score

    def detect_forks(self, board: Board, player: str, size: int) -> int:
        """
        Sum of fork bonuses over every empty cell where `player` would open
        two or more simultaneous threats.

        A cell opens a threat on a line holding size-2 of `player`'s markers,
        no opponent marker and exactly two empty cells, one of them the cell
        itself. Counting those lines once per board gives the same totals as
        probing every empty cell.
        """
        key = f"{board_key(board)}_{player}"
        if self.fork_cache is not None:
            cached = self.fork_cache.get(key)
            if cached is not None:
                return cached

        threats_at = Counter()
        for combination in get_winning_combinations(size):
            player_count = 0
            empties = []
            for index in combination:
                cell = board[index]
                if cell is None:
                    empties.append(index)
                    if len(empties) > 2:
                        break
                elif cell == player:
                    player_count += 1
                else:
                    break
            else:
                if len(empties) == 2 and player_count == size - 2:
                    threats_at.update(empties)

        fork_score = sum(self.config.fork_bonus * threats
                         for threats in threats_at.values() if threats >= 2)

        if self.fork_cache is not None:
            self.fork_cache.set(key, fork_score)
        return fork_score
