"""
AI Engine for Stratos.
Implements three move pickers of increasing strength:

- Random: uniform choice over legal moves
- Greedy: one-ply lookahead on the static evaluation
- Minimax: fixed-depth search with Alpha-Beta Pruning and move ordering
"""

import logging
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..game.board import Board, RED, BLUE, EMPTY, opposite
from ..game.rules import Rules, Move
from ..game.state import AIDifficulty
from .heuristic import Heuristic
from .movegen import MoveGenerator

logger = logging.getLogger(__name__)


class Strategy(Enum):
    """Move selection strategies."""
    RANDOM = "random"
    GREEDY = "greedy"
    MINIMAX = "minimax"


@dataclass
class AIDebugInfo:
    """Debug information from AI search."""
    strategy: str = ""
    thinking_time: float = 0.0
    search_depth: int = 0
    nodes_evaluated: int = 0
    nodes_per_second: float = 0.0
    best_move: Optional[Move] = None
    best_score: int = 0
    top_moves: list = field(default_factory=list)
    beta_cutoffs: int = 0
    timed_out: bool = False


class AIEngine:
    """
    Stratos AI.

    Scores are always from Red's point of view: Red maximizes, Blue
    minimizes. Every search node is a pure function of its board and
    returns (score, move); the counters below are statistics only.
    """

    # Score bounds
    INF = 10_000_000
    WIN_SCORE = 999_999       # A crossing on the board
    LOCKOUT_SCORE = 99_999    # Side to move has no legal move

    DEFAULT_DEPTH = 3

    # Score penalty on the avoided move at the root (greedy and minimax)
    AVOID_SCORE_PENALTY = 15

    # Poll the clock every 64 nodes when a time limit is set
    TIME_CHECK_MASK = 0x3F

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None,
                 time_limit: Optional[float] = None):
        self.heuristic = Heuristic()
        self.move_gen = MoveGenerator()
        self.rng = rng if rng is not None else random.Random(seed)

        # Optional search deadline in seconds (None = search to full depth)
        self.time_limit = time_limit or None
        self.difficulty = AIDifficulty.VERY_HARD

        # Search state
        self.node_count = 0
        self.beta_cutoffs = 0
        self.start_time = 0.0

        self.debug_info = AIDebugInfo()

    def set_difficulty(self, difficulty: AIDifficulty, time_limit: Optional[float] = None):
        """
        Set the difficulty used by get_move and its search deadline.

        Args:
            difficulty: Preset to play at
            time_limit: Seconds per move overriding the preset's limit;
                0 searches to full depth
        """
        self.difficulty = difficulty
        if time_limit is None:
            time_limit = difficulty.time_limit
        self.time_limit = time_limit or None

    def get_move(self, board: Board, color: int,
                 difficulty: Optional[AIDifficulty] = None,
                 avoid: Optional[str] = None) -> Optional[Move]:
        """
        Get a move for color at the given difficulty (default: the one
        from set_difficulty).

        Returns:
            A legal Move, or None if color has no legal move
        """
        if difficulty is None:
            difficulty = self.difficulty
        return self.choose(board, color, Strategy(difficulty.strategy),
                           difficulty.depth, avoid)

    def choose(self, board: Board, color: int, strategy: Strategy,
               depth: int = DEFAULT_DEPTH, avoid: Optional[str] = None) -> Optional[Move]:
        """Pick a move with the given strategy."""
        strategy = Strategy(strategy)
        self.start_time = time.time()
        self.node_count = 0
        self.beta_cutoffs = 0
        self.debug_info = AIDebugInfo(strategy=strategy.value)

        if strategy == Strategy.RANDOM:
            move = self.pick_random(Rules.get_valid_moves(board, color), avoid)
        elif strategy == Strategy.GREEDY:
            move = self.pick_greedy(board, color, avoid)
        else:
            move = self.pick_minimax(board, color, depth, avoid)

        elapsed = time.time() - self.start_time
        self.debug_info.thinking_time = elapsed
        self.debug_info.best_move = move
        self.debug_info.nodes_evaluated = self.node_count
        self.debug_info.nodes_per_second = self.node_count / elapsed if elapsed > 0 else 0
        self.debug_info.beta_cutoffs = self.beta_cutoffs

        logger.debug("%s picked %s in %.3fs (%d nodes, score %d)",
                     strategy.value, move.key if move else None, elapsed,
                     self.node_count, self.debug_info.best_score)
        return move

    def pick_random(self, moves: list, avoid: Optional[str] = None) -> Optional[Move]:
        """Uniform choice, skipping the avoided move unless it is the only one."""
        candidates = [m for m in moves if m.key != avoid] if avoid else moves
        if not candidates:
            candidates = moves
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def pick_greedy(self, board: Board, color: int,
                    avoid: Optional[str] = None) -> Optional[Move]:
        """One-ply lookahead: best static evaluation after each move."""
        moves = Rules.get_valid_moves(board, color)
        if not moves:
            return None

        best_move = None
        best_score = -self.INF if color == RED else self.INF
        for move in self.move_gen.order_moves(board, color, moves, avoid):
            self.node_count += 1
            score = self.heuristic.evaluate(Rules.apply_move(board, move))
            score = self._apply_avoid_penalty(score, color, move, avoid)

            # Strict improvement: the first of equal moves wins
            if (score > best_score) if color == RED else (score < best_score):
                best_score = score
                best_move = move

        if best_move is None:
            return self.pick_random(moves, avoid)

        self.debug_info.search_depth = 1
        self.debug_info.best_score = best_score
        return best_move

    def pick_minimax(self, board: Board, color: int, depth: int = DEFAULT_DEPTH,
                     avoid: Optional[str] = None) -> Optional[Move]:
        """Alpha-beta search to a fixed depth, falling back to greedy then random."""
        moves = Rules.get_valid_moves(board, color)
        if not moves:
            return None

        move, score, root_scores = self._search_root(board, color, depth, avoid)

        self.debug_info.search_depth = depth
        self.debug_info.best_score = score
        root_scores.sort(reverse=(color == RED), key=lambda x: x[1])
        self.debug_info.top_moves = root_scores[:5]

        if move is None:
            move = self.pick_greedy(board, color, avoid) or self.pick_random(moves, avoid)
        return move

    def _search_root(self, board: Board, color: int, depth: int,
                     avoid: Optional[str] = None) -> tuple:
        """
        Search from the root position.

        Same node logic as _minimax, plus the avoid penalty and the time
        limit: a timeout keeps the best move among fully searched children.

        Returns:
            (best_move, best_score, all_root_scores)
        """
        self.node_count += 1
        winner = Rules.crossing_winner(board)
        if winner != EMPTY:
            return None, self._crossing_score(winner), []
        if depth <= 0:
            return None, self.heuristic.evaluate(board), []

        deadline = self.start_time + self.time_limit if self.time_limit else None
        alpha, beta = -self.INF, self.INF
        maximizing = color == RED
        best_score = -self.INF if maximizing else self.INF
        best_move = None
        all_scores = []

        for move in self.move_gen.get_moves(board, color, avoid):
            child = Rules.apply_move(board, move)
            try:
                score, _ = self._minimax(child, opposite(color), depth - 1,
                                         alpha, beta, deadline)
            except TimeoutError:
                self.debug_info.timed_out = True
                logger.debug("Search timed out after %d root moves", len(all_scores))
                break

            score = self._apply_avoid_penalty(score, color, move, avoid)
            all_scores.append((move, score))

            if (score > best_score) if maximizing else (score < best_score):
                best_score = score
                best_move = move

            if maximizing:
                alpha = max(alpha, best_score)
            else:
                beta = min(beta, best_score)
            if beta <= alpha:
                self.beta_cutoffs += 1
                break

        return best_move, best_score, all_scores

    def _minimax(self, board: Board, color: int, depth: int,
                 alpha: int, beta: int, deadline: Optional[float] = None) -> tuple:
        """
        Alpha-Beta search.

        Args:
            board: Position to search
            color: Color to play
            depth: Remaining depth
            alpha: Best score Red is assured of
            beta: Best score Blue is assured of
            deadline: Absolute time.time() limit, or None

        Returns:
            (score, best_move); best_move is None at leaves and terminals
        """
        self.node_count += 1
        if (deadline is not None and
                (self.node_count & self.TIME_CHECK_MASK) == 0 and
                time.time() > deadline):
            raise TimeoutError()

        winner = Rules.crossing_winner(board)
        if winner != EMPTY:
            return self._crossing_score(winner), None

        if depth <= 0:
            return self.heuristic.evaluate(board), None

        moves = self.move_gen.get_moves(board, color)
        if not moves:
            # Lockout: the side to move loses
            return (-self.LOCKOUT_SCORE if color == RED else self.LOCKOUT_SCORE), None

        best_move = None
        if color == RED:
            best = -self.INF
            for move in moves:
                score, _ = self._minimax(Rules.apply_move(board, move), BLUE,
                                         depth - 1, alpha, beta, deadline)
                if score > best:
                    best = score
                    best_move = move
                alpha = max(alpha, best)
                if beta <= alpha:
                    self.beta_cutoffs += 1
                    break
        else:
            best = self.INF
            for move in moves:
                score, _ = self._minimax(Rules.apply_move(board, move), RED,
                                         depth - 1, alpha, beta, deadline)
                if score < best:
                    best = score
                    best_move = move
                beta = min(beta, best)
                if beta <= alpha:
                    self.beta_cutoffs += 1
                    break

        return best, best_move

    def _crossing_score(self, winner: int) -> int:
        return self.WIN_SCORE if winner == RED else -self.WIN_SCORE

    def _apply_avoid_penalty(self, score: int, color: int, move: Move,
                             avoid: Optional[str]) -> int:
        if avoid is None or move.key != avoid:
            return score
        return score - self.AVOID_SCORE_PENALTY if color == RED else score + self.AVOID_SCORE_PENALTY

    def get_debug_info(self) -> dict:
        """Get debug information as dictionary."""
        info = self.debug_info
        return {
            'strategy': info.strategy,
            'thinking_time': info.thinking_time,
            'search_depth': info.search_depth,
            'nodes_evaluated': info.nodes_evaluated,
            'nodes_per_second': info.nodes_per_second,
            'best_move': info.best_move.key if info.best_move else None,
            'best_score': info.best_score,
            'top_moves': [(m.key, s) for m, s in info.top_moves],
            'beta_cutoffs': info.beta_cutoffs,
            'timed_out': info.timed_out,
        }


def choose_move(board: Board, color: int, strategy: Strategy,
                depth: int = AIEngine.DEFAULT_DEPTH,
                rng: Optional[random.Random] = None,
                avoid: Optional[str] = None) -> Optional[Move]:
    """Pick a move for color with a one-off engine."""
    return AIEngine(rng=rng).choose(board, color, strategy, depth, avoid)
