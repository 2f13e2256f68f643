"""
Heuristic evaluation function for Stratos.
Scores positions from Red's point of view (positive = good for Red).
"""

from ..game.board import Board, RED, BLUE, BOARD_SIZE, GOAL_ROW
from ..game.rules import Rules


def center_bonus(col: int) -> int:
    """Bonus for central columns: 4 for the two middle files, 2 next to them."""
    if col in (3, 4):
        return 4
    if col in (2, 5):
        return 2
    return 0


class Heuristic:
    """
    Evaluates board positions for the AI.
    Material/advance per stack, mobility, and pressure on the goal rows.
    """

    # Weights for different factors
    ADVANCE_WEIGHT = 14
    HEIGHT_WEIGHT = 4
    MOBILITY_WEIGHT = 3
    NEAR_GOAL_BONUS = 40
    GOAL_BONUS = 120

    # Rows one step away from each color's goal row
    NEAR_GOAL_ROW = {RED: GOAL_ROW[RED] - 1, BLUE: GOAL_ROW[BLUE] + 1}

    CACHE_MAX_ENTRIES = 200_000

    def __init__(self):
        # Cache for evaluated positions (boards are immutable and hashable)
        self._cache = {}

    def clear(self):
        self._cache.clear()

    def evaluate(self, board: Board) -> int:
        """
        Evaluate the board position.

        Args:
            board: Position to score

        Returns:
            Integer score (positive favors Red, negative favors Blue)
        """
        cached = self._cache.get(board)
        if cached is not None:
            return cached

        score = (self._evaluate_stacks(board) +
                 self._evaluate_mobility(board) +
                 self._evaluate_goal_rows(board))

        if len(self._cache) >= self.CACHE_MAX_ENTRIES:
            self._cache.clear()
        self._cache[board] = score
        return score

    def _evaluate_stacks(self, board: Board) -> int:
        """Advance, height and centrality of every owned stack."""
        score = 0
        for row, col, stack in board.cells():
            if not stack:
                continue
            top = stack[-1]
            advance = row if top == RED else (BOARD_SIZE - 1 - row)
            value = (self.ADVANCE_WEIGHT * advance +
                     self.HEIGHT_WEIGHT * len(stack) +
                     center_bonus(col))
            score += value if top == RED else -value
        return score

    def _evaluate_mobility(self, board: Board) -> int:
        red_moves = len(Rules.get_valid_moves(board, RED))
        blue_moves = len(Rules.get_valid_moves(board, BLUE))
        return self.MOBILITY_WEIGHT * (red_moves - blue_moves)

    def _evaluate_goal_rows(self, board: Board) -> int:
        score = 0
        for col in range(BOARD_SIZE):
            if board.top(self.NEAR_GOAL_ROW[RED], col) == RED:
                score += self.NEAR_GOAL_BONUS
            if board.top(self.NEAR_GOAL_ROW[BLUE], col) == BLUE:
                score -= self.NEAR_GOAL_BONUS

            # Normally the game has ended by crossing, but search nodes can reach it
            if board.top(GOAL_ROW[RED], col) == RED:
                score += self.GOAL_BONUS
            if board.top(GOAL_ROW[BLUE], col) == BLUE:
                score -= self.GOAL_BONUS
        return score
