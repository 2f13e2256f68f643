"""
Stacked-block board for Stratos.
8x8 grid where every cell holds a tuple of colors (bottom -> top).
"""

from typing import Iterator, Optional

EMPTY = 0
RED = 1
BLUE = 2

BOARD_SIZE = 8
TOTAL_CELLS = BOARD_SIZE * BOARD_SIZE  # 64

# Rows 0-3 start Red, rows 4-7 start Blue
HOME_ROWS = {
    RED: range(0, BOARD_SIZE // 2),
    BLUE: range(BOARD_SIZE // 2, BOARD_SIZE),
}

# Row each color must reach to win by crossing
GOAL_ROW = {RED: BOARD_SIZE - 1, BLUE: 0}

COLOR_NAMES = {EMPTY: 'Empty', RED: 'Red', BLUE: 'Blue'}


def opposite(color: int) -> int:
    """Get the opposite color."""
    return BLUE if color == RED else RED


def forward_dir(color: int) -> int:
    """Row step that counts as forward for color."""
    return 1 if color == RED else -1


class Board:
    """
    Immutable grid of stacks.
    Every operation that changes the position returns a new Board.
    """

    __slots__ = ('_cells', '_hash')

    def __init__(self, cells=None):
        if cells is None:
            cells = ((),) * TOTAL_CELLS
        self._cells = tuple(tuple(stack) for stack in cells)
        if len(self._cells) != TOTAL_CELLS:
            raise ValueError(f"Board needs {TOTAL_CELLS} cells, got {len(self._cells)}")
        self._hash = None

    @classmethod
    def initial(cls) -> 'Board':
        """Standard setup: one Red block on rows 0-3, one Blue block on rows 4-7."""
        cells = []
        for row in range(BOARD_SIZE):
            color = RED if row in HOME_ROWS[RED] else BLUE
            cells.extend([(color,)] * BOARD_SIZE)
        return cls(cells)

    @classmethod
    def from_stacks(cls, stacks: dict) -> 'Board':
        """
        Build a board from {(row, col): (color, ...)}.
        Cells not mentioned are empty.
        """
        cells = [()] * TOTAL_CELLS
        for (row, col), stack in stacks.items():
            if not cls.is_valid_pos(row, col):
                raise ValueError(f"Position out of bounds: {(row, col)}")
            cells[cls.pos_to_index(row, col)] = tuple(stack)
        return cls(cells)

    @staticmethod
    def pos_to_index(row: int, col: int) -> int:
        """Convert (row, col) to cell index."""
        return row * BOARD_SIZE + col

    @staticmethod
    def is_valid_pos(row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def stack(self, row: int, col: int) -> tuple:
        """Blocks at position, bottom first. Empty tuple when out of bounds."""
        if not self.is_valid_pos(row, col):
            return ()
        return self._cells[row * BOARD_SIZE + col]

    def height(self, row: int, col: int) -> int:
        return len(self.stack(row, col))

    def top(self, row: int, col: int) -> int:
        """Color of the top block, or EMPTY."""
        stack = self.stack(row, col)
        return stack[-1] if stack else EMPTY

    def is_empty(self, row: int, col: int) -> bool:
        return not self.stack(row, col)

    def cells(self) -> Iterator[tuple]:
        """Yield (row, col, stack) in row-major order."""
        for index, stack in enumerate(self._cells):
            row, col = divmod(index, BOARD_SIZE)
            yield row, col, stack

    def owned_positions(self, color: int) -> list:
        """Positions whose top block is color, row-major."""
        return [(row, col) for row, col, stack in self.cells()
                if stack and stack[-1] == color]

    def count_blocks(self, color: Optional[int] = None) -> int:
        """Count blocks on the board (all of them, or one color)."""
        if color is None:
            return sum(len(stack) for stack in self._cells)
        return sum(stack.count(color) for stack in self._cells)

    def move_block(self, src: tuple, dst: tuple) -> 'Board':
        """Pop the top block at src and push it onto dst."""
        src_index = self.pos_to_index(*src)
        dst_index = self.pos_to_index(*dst)
        source = self._cells[src_index]
        assert source, f"Cannot move from empty stack at {src}"

        cells = list(self._cells)
        cells[src_index] = source[:-1]
        cells[dst_index] = self._cells[dst_index] + (source[-1],)
        return Board(cells)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(self._cells)
        return self._hash

    def __str__(self) -> str:
        """String representation: top color letter plus height, row 0 at top."""
        symbols = {RED: 'R', BLUE: 'B'}
        lines = ['    ' + ' '.join(f'{c:>3}' for c in range(BOARD_SIZE))]
        for row in range(BOARD_SIZE):
            line = f'{row:2d}  '
            for col in range(BOARD_SIZE):
                top = self.top(row, col)
                if top == EMPTY:
                    line += '  .'
                    continue
                line += f' {symbols[top]}{self.height(row, col)}'
            lines.append(line)
        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f'Board(blocks={self.count_blocks()})'
