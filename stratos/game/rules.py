"""
Stratos game rules implementation.
Move legality, move application and win conditions (crossing, lockout).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .board import (
    Board, EMPTY, RED, BLUE, BOARD_SIZE, GOAL_ROW, opposite, forward_dir
)

# 4 orthogonal directions in generation order: (name, dr, dc)
DIRECTIONS_4 = [
    ('Up', -1, 0),
    ('Down', 1, 0),
    ('Left', 0, -1),
    ('Right', 0, 1),
]


class MoveKind(Enum):
    """Classification of a legal move."""
    ACROSS = "Across"        # Equal height onto own color
    STEP_DOWN = "StepDown"   # 1-2 lower onto empty or own color
    CAPTURE = "Capture"      # 1-2 lower onto opponent


class WinMode(Enum):
    """How a game was won."""
    CROSSING = "Crossing"
    LOCKOUT = "Lockout"
    REPETITION = "Repetition"


def square_key(pos: tuple) -> str:
    """Identifier of a square, e.g. '3,4'."""
    return f"{pos[0]},{pos[1]}"


@dataclass(frozen=True)
class Move:
    """A validated move of the top block from src to an adjacent dst."""
    src: tuple
    dst: tuple
    kind: MoveKind

    @property
    def key(self) -> str:
        return f"{square_key(self.src)}->{square_key(self.dst)}"

    @property
    def row_step(self) -> int:
        return self.dst[0] - self.src[0]


@dataclass(frozen=True)
class GameStatus:
    """Derived game status. mode is None while the game is in progress."""
    mode: Optional[WinMode] = None
    winner: int = EMPTY

    @property
    def is_terminal(self) -> bool:
        return self.mode is not None


IN_PROGRESS = GameStatus()


class Rules:
    """Game rules for Stratos."""

    MAX_STEP_DOWN = 2  # Largest height drop for step-down and capture

    @staticmethod
    def classify(board: Board, color: int, src: tuple, dst: tuple) -> Optional[MoveKind]:
        """
        Classify moving the top block of src onto dst for color.
        Returns None when the move is illegal (never raises).
        """
        sr, sc = src
        dr, dc = dst
        if not Board.is_valid_pos(sr, sc) or not Board.is_valid_pos(dr, dc):
            return None
        if abs(sr - dr) + abs(sc - dc) != 1:
            return None

        h_src = board.height(sr, sc)
        if h_src == 0 or board.top(sr, sc) != color:
            return None

        delta = board.height(dr, dc) - h_src
        top_dst = board.top(dr, dc)

        # Backward moves must strictly lose height
        backward = (dr - sr) == -forward_dir(color)
        if backward and delta >= 0:
            return None

        if -Rules.MAX_STEP_DOWN <= delta <= -1:
            if top_dst != EMPTY and top_dst != color:
                return MoveKind.CAPTURE
            return MoveKind.STEP_DOWN

        if top_dst == EMPTY:
            return None
        if top_dst == color:
            return MoveKind.ACROSS if delta == 0 else None

        # Opponent without a 1-2 height advantage
        return None

    @staticmethod
    def is_valid_move(board: Board, color: int, src: tuple, dst: tuple) -> bool:
        return Rules.classify(board, color, src, dst) is not None

    @staticmethod
    def get_invalid_reason(board: Board, color: int, src: tuple, dst: tuple) -> str:
        """
        Get the reason why a move is invalid.
        Returns empty string if move is valid.
        """
        sr, sc = src
        dr, dc = dst
        if not Board.is_valid_pos(sr, sc) or not Board.is_valid_pos(dr, dc):
            return "Out of bounds"
        if abs(sr - dr) + abs(sc - dc) != 1:
            return "Move one square orthogonally"
        if board.is_empty(sr, sc):
            return "No stack to move"
        if board.top(sr, sc) != color:
            return "Not your stack"

        delta = board.height(dr, dc) - board.height(sr, sc)
        top_dst = board.top(dr, dc)
        backward = (dr - sr) == -forward_dir(color)

        if backward and delta >= 0:
            return "Backward moves must step down"
        if -Rules.MAX_STEP_DOWN <= delta <= -1:
            return ""
        if top_dst == EMPTY:
            return "Empty squares need a 1-2 step down"
        if top_dst == color:
            return "" if delta == 0 else "Own stacks must be level to move across"
        return "Capture needs a 1-2 height advantage"

    @staticmethod
    def get_moves_from(board: Board, color: int, src: tuple) -> list:
        """Legal moves starting at src, in direction order."""
        moves = []
        row, col = src
        for _, dr, dc in DIRECTIONS_4:
            dst = (row + dr, col + dc)
            kind = Rules.classify(board, color, src, dst)
            if kind is not None:
                moves.append(Move(src, dst, kind))
        return moves

    @staticmethod
    def get_valid_moves(board: Board, color: int) -> list:
        """All legal moves for color: row-major, then Up/Down/Left/Right."""
        moves = []
        for pos in board.owned_positions(color):
            moves.extend(Rules.get_moves_from(board, color, pos))
        return moves

    @staticmethod
    def has_legal_moves(board: Board, color: int) -> bool:
        for row, col in board.owned_positions(color):
            for _, dr, dc in DIRECTIONS_4:
                if Rules.classify(board, color, (row, col), (row + dr, col + dc)):
                    return True
        return False

    @staticmethod
    def apply_move(board: Board, move: Move) -> Board:
        """
        Move the top block of move.src onto move.dst.
        The move must already be validated; it is not re-checked here.
        """
        new_board = board.move_block(move.src, move.dst)
        assert new_board.count_blocks() == board.count_blocks(), "Block count changed"
        return new_board

    @staticmethod
    def crossing_winner(board: Board) -> int:
        """
        Red wins with a top block on row 7, Blue with a top block on row 0.
        Returns RED, BLUE, or EMPTY (no winner).
        """
        for col in range(BOARD_SIZE):
            if board.top(GOAL_ROW[RED], col) == RED:
                return RED
            if board.top(GOAL_ROW[BLUE], col) == BLUE:
                return BLUE
        return EMPTY

    @staticmethod
    def lockout_winner(board: Board, to_move: int) -> int:
        """The side to move loses if it has no legal move (no passing)."""
        if Rules.has_legal_moves(board, to_move):
            return EMPTY
        return opposite(to_move)

    @staticmethod
    def get_status(board: Board, to_move: int, repetition_winner: int = EMPTY) -> GameStatus:
        """
        Derive game status.

        Checks in order:
        1. Repetition (already decided by the tracker)
        2. Crossing
        3. Lockout of the side to move
        """
        if repetition_winner != EMPTY:
            return GameStatus(WinMode.REPETITION, repetition_winner)

        winner = Rules.crossing_winner(board)
        if winner != EMPTY:
            return GameStatus(WinMode.CROSSING, winner)

        winner = Rules.lockout_winner(board, to_move)
        if winner != EMPTY:
            return GameStatus(WinMode.LOCKOUT, winner)

        return IN_PROGRESS
