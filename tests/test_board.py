"""Tests for the stacked-block board."""

import sys
sys.path.insert(0, '.')

import pytest

from stratos.game.board import (
    Board, RED, BLUE, EMPTY, BOARD_SIZE, TOTAL_CELLS, opposite, forward_dir
)


class TestBoardBasics:
    """Test basic board operations."""

    def test_empty_board(self):
        """New board should be empty."""
        board = Board()
        assert board.count_blocks() == 0
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                assert board.is_empty(row, col)
                assert board.top(row, col) == EMPTY

    def test_initial_setup(self):
        """Rows 0-3 hold one Red block, rows 4-7 one Blue block."""
        board = Board.initial()
        assert board.count_blocks() == TOTAL_CELLS
        assert board.count_blocks(RED) == 32
        assert board.count_blocks(BLUE) == 32
        for col in range(BOARD_SIZE):
            assert board.stack(0, col) == (RED,)
            assert board.stack(3, col) == (RED,)
            assert board.stack(4, col) == (BLUE,)
            assert board.stack(7, col) == (BLUE,)

    def test_from_stacks(self):
        board = Board.from_stacks({(2, 3): (BLUE, RED), (5, 5): (BLUE,)})
        assert board.height(2, 3) == 2
        assert board.top(2, 3) == RED
        assert board.stack(2, 3) == (BLUE, RED)
        assert board.count_blocks() == 3
        assert board.count_blocks(BLUE) == 2

    def test_from_stacks_out_of_bounds(self):
        with pytest.raises(ValueError):
            Board.from_stacks({(8, 0): (RED,)})

    def test_wrong_cell_count(self):
        with pytest.raises(ValueError):
            Board([()] * 10)

    def test_out_of_bounds_reads(self):
        """Reads outside the board behave like empty cells."""
        board = Board.initial()
        assert board.stack(-1, 0) == ()
        assert board.height(0, 8) == 0
        assert board.top(8, 8) == EMPTY

    def test_valid_positions(self):
        assert Board.is_valid_pos(0, 0)
        assert Board.is_valid_pos(7, 7)
        assert not Board.is_valid_pos(-1, 0)
        assert not Board.is_valid_pos(0, 8)

    def test_index_conversion(self):
        assert Board.pos_to_index(0, 0) == 0
        assert Board.pos_to_index(3, 5) == 29
        assert Board.pos_to_index(7, 7) == TOTAL_CELLS - 1


class TestBoardUpdates:
    """Boards are immutable: updates return new boards."""

    def test_move_block(self):
        board = Board.from_stacks({(3, 3): (RED, RED), (3, 4): (BLUE,)})
        moved = board.move_block((3, 3), (3, 4))

        assert moved.stack(3, 3) == (RED,)
        assert moved.stack(3, 4) == (BLUE, RED)
        # Original untouched
        assert board.stack(3, 3) == (RED, RED)
        assert board.stack(3, 4) == (BLUE,)

    def test_move_block_from_empty(self):
        with pytest.raises(AssertionError):
            Board().move_block((0, 0), (0, 1))

    def test_owned_positions_row_major(self):
        board = Board.from_stacks({
            (5, 1): (RED,),
            (0, 7): (RED,),
            (2, 2): (RED, BLUE),
            (0, 3): (BLUE, RED),
        })
        assert board.owned_positions(RED) == [(0, 3), (0, 7), (5, 1)]
        assert board.owned_positions(BLUE) == [(2, 2)]

    def test_equality_and_hash(self):
        a = Board.initial()
        b = Board.initial()
        assert a == b
        assert hash(a) == hash(b)
        assert a != a.move_block((3, 0), (3, 1))

        cache = {a: 1}
        assert cache[b] == 1

    def test_str(self):
        text = str(Board.from_stacks({(0, 0): (RED, RED)}))
        assert 'R2' in text


class TestColors:

    def test_opposite(self):
        assert opposite(RED) == BLUE
        assert opposite(BLUE) == RED

    def test_forward_dir(self):
        """Red advances toward row 7, Blue toward row 0."""
        assert forward_dir(RED) == 1
        assert forward_dir(BLUE) == -1


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
