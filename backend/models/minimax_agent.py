import logging
import time
from typing import List, NamedTuple, Optional

from config import AIConfig, max_depth_for, win_score_for
from game_logic import (
    Board,
    TIE,
    check_winner,
    get_available_moves,
    get_lines_through,
    get_opponent,
    get_strategic_positions,
    is_winning_move,
    make_move,
)
from models.evaluator import BoardEvaluator, board_key
from models.lru_cache import StatsLRUCache

logger = logging.getLogger(__name__)

EXACT = "exact"
LOWER = "lower"
UPPER = "upper"


class SearchResult(NamedTuple):
    score: float
    best_move: Optional[int] = None


class TranspositionEntry(NamedTuple):
    score: float
    depth: int  # Remaining depth the score was searched to
    flag: str


class MinimaxAgent:
    """
    Minimax agent with alpha-beta pruning, a transposition table and
    time-bounded iterative deepening. Plays the Hard difficulty.
    """

    INF = float("inf")

    def __init__(self, evaluator: BoardEvaluator, transposition_table: StatsLRUCache,
                 fallback_agent=None, config: Optional[AIConfig] = None):
        self.evaluator = evaluator
        self.transposition_table = transposition_table
        self.fallback_agent = fallback_agent  # Used above the large board threshold
        self.config = config or AIConfig()

        # Search bookkeeping, reset at the root of every search
        self.timed_out = False
        self.nodes_searched = 0
        self.last_completed_depth = 0

    def get_move(self, board: Board, size: int, player: str = "O",
                 time_limit_ms: Optional[int] = None) -> int:
        """Pick a move for `player` using the strongest search the board size allows."""
        available_moves = get_available_moves(board)
        if not available_moves:
            raise ValueError("No available moves on the board")

        # Immediate win
        for move in available_moves:
            if is_winning_move(board, move, player, size):
                return move

        # Exhaustive search is not attempted on very large boards
        if size > self.config.large_board_threshold:
            if self.fallback_agent is None:
                raise ValueError(f"No fallback strategy configured for {size}x{size} boards")
            logger.info(f"Board size {size}x{size} too large for search - using strategic play")
            return self.fallback_agent.get_move(board, size, player)

        remaining_moves = len(available_moves)

        # Near endgame - search to completion
        if remaining_moves <= self.config.endgame_threshold:
            result = self.minimax(board, 0, True, -self.INF, self.INF, size, player,
                                  max_depth=remaining_moves)
            self.last_completed_depth = remaining_moves
            logger.debug(f"Endgame search over {remaining_moves} empty cells: {self.nodes_searched} nodes, "
                         f"score {result.score}")
            return result.best_move if result.best_move is not None else available_moves[0]

        if self.config.enable_iterative_deepening:
            return self.iterative_deepening(board, available_moves, size, player, time_limit_ms)

        depth = max_depth_for(size)
        result = self.minimax(board, 0, True, -self.INF, self.INF, size, player, max_depth=depth)
        self.last_completed_depth = depth
        logger.debug(f"Fixed depth {depth} search: {self.nodes_searched} nodes, score {result.score}")
        return result.best_move if result.best_move is not None else available_moves[0]

    def iterative_deepening(self, board: Board, available_moves: List[int], size: int,
                            player: str = "O", time_limit_ms: Optional[int] = None) -> int:
        """
        Search at increasing depth until the time budget runs out, the depth
        bound is reached or a forced win shows up. Returns the best move of
        the deepest completed iteration; an interrupted iteration is discarded.
        """
        if time_limit_ms is None:
            time_limit_ms = self.config.time_limit_ms

        start_time = time.monotonic()
        deadline = start_time + time_limit_ms / 1000.0
        best_move = available_moves[0]
        win_score = win_score_for(size, self.config)
        max_bound = min(self.config.max_search_depth, max_depth_for(size), len(available_moves))

        self.last_completed_depth = 0
        depth = self.config.min_search_depth
        total_nodes = 0
        tt_hits_before = self.transposition_table.hits

        while depth <= max_bound and time.monotonic() < deadline:
            result = self.minimax(board, 0, True, -self.INF, self.INF, size, player,
                                  max_depth=depth, deadline=deadline)
            total_nodes += self.nodes_searched
            if self.timed_out:
                break

            if result.best_move is not None:
                best_move = result.best_move
            self.last_completed_depth = depth

            # No need to search deeper than a confirmed win
            if result.score >= win_score - depth:
                break
            depth += 1

        elapsed_ms = (time.monotonic() - start_time) * 1000
        logger.debug(f"Iterative deepening reached depth {self.last_completed_depth}/{max_bound} "
                     f"in {elapsed_ms:.1f}ms, best move {best_move}, {total_nodes} nodes, "
                     f"{self.transposition_table.hits - tt_hits_before} table hits")
        return best_move

    def minimax(self, board: Board, depth: int, is_maximizing: bool, alpha: float, beta: float,
                size: int, player: str = "O", max_depth: Optional[int] = None,
                deadline: Optional[float] = None) -> SearchResult:
        """
        Minimax with alpha-beta pruning from `player`'s perspective.

        Wins score win_score - depth and losses -win_score + depth so that
        faster wins and slower losses are preferred. Past the deadline the
        static evaluation is returned instead of recursing further.
        """
        if depth == 0:
            self.timed_out = False
            self.nodes_searched = 0
        self.nodes_searched += 1

        if deadline is not None and time.monotonic() > deadline:
            self.timed_out = True
            return SearchResult(self.evaluator.evaluate(board, size, player))

        depth_limit = max_depth if max_depth is not None else max_depth_for(size)
        remaining_depth = depth_limit - depth

        # Transposition table lookup; the root always searches so it can report a move
        tt_key = None
        if self.config.enable_transposition_table:
            tt_key = f"{board_key(board)}_{depth}_{is_maximizing}_{player}_{alpha}_{beta}"
            if depth > 0:
                entry = self.transposition_table.get_with_stats(tt_key)
                if entry is not None and entry.depth >= remaining_depth:
                    if entry.flag == EXACT:
                        return SearchResult(entry.score)
                    if entry.flag == LOWER and entry.score >= beta:
                        return SearchResult(entry.score)
                    if entry.flag == UPPER and entry.score <= alpha:
                        return SearchResult(entry.score)

        # Terminal nodes
        winner = check_winner(board, size)
        win_score = win_score_for(size, self.config)
        if winner == player:
            return SearchResult(win_score - depth)
        if winner == get_opponent(player):
            return SearchResult(-win_score + depth)
        if winner == TIE:
            return SearchResult(self.config.tie_score)

        # Depth limit reached
        if depth >= depth_limit:
            return SearchResult(self.evaluator.evaluate(board, size, player))

        available_moves = get_available_moves(board)
        if not available_moves:
            return SearchResult(self.config.tie_score)

        mover = player if is_maximizing else get_opponent(player)
        ordered_moves = self._order_moves(available_moves, board, size, mover)

        original_alpha, original_beta = alpha, beta
        best_move = None

        if is_maximizing:
            best_score = -self.INF
            for move in ordered_moves:
                child = self.minimax(make_move(board, move, mover), depth + 1, False, alpha, beta,
                                     size, player, max_depth, deadline)
                if child.score > best_score:
                    best_score = child.score
                    best_move = move
                alpha = max(alpha, best_score)
                if beta <= alpha:
                    break  # Beta cutoff
        else:
            best_score = self.INF
            for move in ordered_moves:
                child = self.minimax(make_move(board, move, mover), depth + 1, True, alpha, beta,
                                     size, player, max_depth, deadline)
                if child.score < best_score:
                    best_score = child.score
                    best_move = move
                beta = min(beta, best_score)
                if beta <= alpha:
                    break  # Alpha cutoff

        # Results from an interrupted search are not trustworthy
        if tt_key is not None and not self.timed_out:
            if best_score <= original_alpha:
                flag = UPPER
            elif best_score >= original_beta:
                flag = LOWER
            else:
                flag = EXACT
            self.transposition_table.set(tt_key, TranspositionEntry(best_score, remaining_depth, flag))

        return SearchResult(best_score, best_move)

    def _order_moves(self, moves: List[int], board: Board, size: int, player: str) -> List[int]:
        """
        Order moves by priority for better pruning. Ties keep ascending
        position order.
        """
        if not self.config.enable_move_ordering:
            return list(moves)

        priorities = {move: self._move_priority(move, board, size, player) for move in moves}
        return sorted(moves, key=lambda move: priorities[move], reverse=True)

    def _move_priority(self, position: int, board: Board, size: int, player: str) -> int:
        """
        Positional value (center > corner > edge) plus immediate wins,
        threats created and opponent threats blocked by taking `position`.
        """
        priority = 0
        positions = get_strategic_positions(size)

        if position in positions.center:
            priority += self.config.center_bonus
        elif position in positions.corners:
            priority += self.config.corner_bonus
        elif position in positions.edges:
            priority += self.config.edge_bonus

        opponent = get_opponent(player)
        threats = 0
        blocks = 0

        for combination in get_lines_through(size)[position]:
            player_count = 1  # The candidate itself
            opponent_count = 0
            empty_count = 0
            for index in combination:
                if index == position:
                    continue
                cell = board[index]
                if cell == player:
                    player_count += 1
                elif cell == opponent:
                    opponent_count += 1
                else:
                    empty_count += 1

            if player_count == size:
                priority += self.config.immediate_win_priority
            elif player_count == size - 1 and empty_count == 1:
                threats += 1
            elif opponent_count == size - 1 and player_count == 1:
                blocks += 1

        priority += threats * self.config.fork_bonus
        priority += blocks * self.config.block_bonus
        return priority
