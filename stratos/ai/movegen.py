"""
Move generation and ordering for Stratos AI.
Ranks legal moves so alpha-beta sees the strongest candidates first.
"""

from typing import Optional

from ..game.board import Board, forward_dir
from ..game.rules import Rules, Move, MoveKind
from .heuristic import center_bonus


class MoveGenerator:
    """
    Generates and orders moves for the AI.
    The same ordering drives the greedy pick and alpha-beta move order.
    """

    # Configuration
    CAPTURE_WEIGHT = 50
    STEP_DOWN_WEIGHT = 10
    FORWARD_WEIGHT = 8
    HEIGHT_CAP = 6          # Tall stacks stop earning extra weight here
    AVOID_PENALTY = 1000    # Pushes the avoided move to the back

    def get_moves(self, board: Board, color: int, avoid: Optional[str] = None) -> list:
        """
        Get ordered list of legal moves.

        Args:
            board: Current board state
            color: Color to generate moves for
            avoid: Optional Move.key to rank last

        Returns:
            List of Move, ordered by expected quality
        """
        return self.order_moves(board, color, Rules.get_valid_moves(board, color), avoid)

    def order_moves(self, board: Board, color: int, moves: list,
                    avoid: Optional[str] = None) -> list:
        """Sort moves by descending weight; equal weights keep generation order."""
        return sorted(moves, key=lambda m: -self.score_move(board, color, m, avoid))

    def score_move(self, board: Board, color: int, move: Move,
                   avoid: Optional[str] = None) -> int:
        """Score a move for ordering purposes."""
        weight = 0
        if move.kind == MoveKind.CAPTURE:
            weight += self.CAPTURE_WEIGHT
        elif move.kind == MoveKind.STEP_DOWN:
            weight += self.STEP_DOWN_WEIGHT

        if move.row_step == forward_dir(color):
            weight += self.FORWARD_WEIGHT

        weight += center_bonus(move.dst[1])

        # Height of the destination stack once the block lands
        height_after = board.height(*move.dst) + 1
        weight += min(height_after, self.HEIGHT_CAP)

        if avoid is not None and move.key == avoid:
            weight -= self.AVOID_PENALTY
        return weight
