#!/usr/bin/env python3
import sys
import os
import random
import unittest

# Add parent directory to path to make imports work in test
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from game_logic import (
    TIE,
    check_winner,
    check_winner_by_combinations,
    check_winner_by_scan,
    count_threats,
    create_empty_board,
    get_available_moves,
    get_strategic_positions,
    get_winning_combinations,
    is_winning_move,
    make_move,
)


def random_playout(size, rng, max_moves=None):
    """Play random alternating moves from the empty board until the game ends."""
    board = create_empty_board(size)
    player = "X"
    played = 0
    while check_winner_by_combinations(board, size) is None:
        if max_moves is not None and played >= max_moves:
            break
        board = make_move(board, rng.choice(get_available_moves(board)), player)
        player = "O" if player == "X" else "X"
        played += 1
    return board


class TestBoardModel(unittest.TestCase):

    def test_create_empty_board(self):
        board = create_empty_board(3)
        self.assertEqual(len(board), 9)
        self.assertTrue(all(cell is None for cell in board))
        self.assertEqual(len(create_empty_board(20)), 400)

    def test_create_empty_board_rejects_invalid_sizes(self):
        for size in (2, 21, 0, -3, 3.5, "3", True):
            with self.assertRaises(ValueError, msg=f"size {size!r} should be rejected"):
                create_empty_board(size)

    def test_available_moves_in_ascending_order(self):
        board = ['X', None, 'O', None, 'X', None, None, None, None]
        self.assertEqual(get_available_moves(board), [1, 3, 5, 6, 7, 8])

    def test_available_moves_full_board(self):
        board = ['X', 'O', 'X', 'O', 'X', 'O', 'X', 'O', 'X']
        self.assertEqual(get_available_moves(board), [])

    def test_make_move_returns_new_board(self):
        original = create_empty_board(3)
        new_board = make_move(original, 0, 'X')
        self.assertEqual(new_board[0], 'X')
        self.assertIsNone(original[0])
        self.assertIsNot(new_board, original)

    def test_make_move_rejects_occupied_cell(self):
        board = ['X'] + [None] * 8
        with self.assertRaises(ValueError):
            make_move(board, 0, 'O')
        self.assertEqual(board[0], 'X')

    def test_make_move_rejects_out_of_range_position(self):
        board = create_empty_board(3)
        for position in (-1, 9, 100, 1.0, None):
            with self.assertRaises(ValueError):
                make_move(board, position, 'X')

    def test_make_move_rejects_invalid_marker(self):
        board = create_empty_board(3)
        for marker in ('Z', None, 'x', ''):
            with self.assertRaises(ValueError):
                make_move(board, 4, marker)

    def test_make_move_rejects_non_square_board(self):
        with self.assertRaises(ValueError):
            make_move([None] * 8, 0, 'X')


class TestWinDetection(unittest.TestCase):

    def test_rows_columns_and_diagonals(self):
        cases = {
            "top row": (['X', 'X', 'X', None, None, None, None, None, None], 'X'),
            "middle row": ([None, None, None, 'O', 'O', 'O', None, None, None], 'O'),
            "left column": (['X', None, None, 'X', None, None, 'X', None, None], 'X'),
            "right column": ([None, None, 'O', None, None, 'O', None, None, 'O'], 'O'),
            "main diagonal": (['X', None, None, None, 'X', None, None, None, 'X'], 'X'),
            "anti diagonal": ([None, None, 'O', None, 'O', None, 'O', None, None], 'O'),
        }
        for name, (board, expected) in cases.items():
            with self.subTest(name):
                self.assertEqual(check_winner(board, 3), expected)

    def test_tie(self):
        board = ['X', 'O', 'X', 'X', 'O', 'O', 'O', 'X', 'X']
        self.assertEqual(check_winner(board, 3), TIE)

    def test_game_in_progress(self):
        board = ['X', 'O', None, None, 'X', None, None, None, None]
        self.assertIsNone(check_winner(board, 3))
        self.assertIsNone(check_winner(create_empty_board(3), 3))

    def test_win_on_last_cell_is_not_a_tie(self):
        board = ['X', 'O', 'X', 'O', 'X', 'O', 'O', 'X', 'X']
        self.assertEqual(check_winner(board, 3), 'X')

    def test_board_length_mismatch(self):
        with self.assertRaises(ValueError):
            check_winner([None] * 9, 4)

    def test_large_board_anti_diagonal(self):
        size = 6
        board = create_empty_board(size)
        for i in range(size):
            board[i * size + (size - 1 - i)] = 'O'
        self.assertEqual(check_winner(board, size), 'O')

    def test_large_board_partial_line_is_not_a_win(self):
        size = 8
        board = create_empty_board(size)
        for col in range(size - 1):
            board[3 * size + col] = 'X'
        self.assertIsNone(check_winner(board, size))

    def test_winning_combinations(self):
        for size in (3, 4, 7, 20):
            combinations = get_winning_combinations(size)
            self.assertEqual(len(combinations), 2 * size + 2)
            self.assertTrue(all(len(line) == size for line in combinations))
        self.assertIs(get_winning_combinations(5), get_winning_combinations(5))

    def test_both_paths_agree_on_reachable_boards(self):
        rng = random.Random(1234)
        for size in range(3, 9):
            for _ in range(60):
                board = random_playout(size, rng)
                self.assertEqual(check_winner_by_combinations(board, size),
                                 check_winner_by_scan(board, size))

            # Partially played boards too
            for moves in range(0, size * size, max(1, size // 2)):
                board = random_playout(size, rng, max_moves=moves)
                self.assertEqual(check_winner_by_combinations(board, size),
                                 check_winner_by_scan(board, size))

    def test_both_paths_agree_on_every_line(self):
        for size in (4, 5, 6):
            for line in get_winning_combinations(size):
                board = create_empty_board(size)
                for index in line:
                    board[index] = 'X'
                self.assertEqual(check_winner_by_combinations(board, size), 'X')
                self.assertEqual(check_winner_by_scan(board, size), 'X')


class TestStrategicPositions(unittest.TestCase):

    def test_odd_board(self):
        positions = get_strategic_positions(3)
        self.assertEqual(positions.center, (4,))
        self.assertEqual(positions.corners, (0, 2, 6, 8))
        self.assertEqual(sorted(positions.edges), [1, 3, 5, 7])

    def test_even_board_has_four_centers(self):
        positions = get_strategic_positions(4)
        self.assertEqual(positions.center, (5, 6, 9, 10))
        self.assertEqual(positions.corners, (0, 3, 12, 15))
        self.assertEqual(len(positions.edges), 8)


class TestThreats(unittest.TestCase):

    def test_count_threats(self):
        # O at 0,1 (row 0) and 6,10 (column 2): taking 2 opens two threats
        board = create_empty_board(4)
        for position in (0, 1, 6, 10):
            board[position] = 'O'
        self.assertEqual(count_threats(board, 2, 'O', 4), 2)
        self.assertEqual(count_threats(board, 3, 'O', 4), 1)
        self.assertEqual(count_threats(board, 2, 'X', 4), 0)

    def test_is_winning_move(self):
        board = ['O', 'O', None, 'X', 'X', None, None, None, None]
        self.assertTrue(is_winning_move(board, 2, 'O', 3))
        self.assertTrue(is_winning_move(board, 5, 'X', 3))
        self.assertFalse(is_winning_move(board, 2, 'X', 3))


if __name__ == '__main__':
    unittest.main()
