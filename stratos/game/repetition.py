"""
Repetition (bounce) tracking for Stratos.
A color that bounces between the same two squares three times loses.
"""

from dataclasses import dataclass
from typing import Optional

from .board import RED, BLUE, EMPTY, opposite
from .rules import Move, square_key

REPETITION_LIMIT = 3  # Alternating pairs that lose the game


@dataclass(frozen=True)
class RepetitionTracker:
    """Last pair of squares a color moved between and how often it alternated."""
    endpoints: Optional[tuple] = None
    direction: Optional[int] = None
    pairs: int = 0


def new_trackers() -> dict:
    """Fresh tracker for each color."""
    return {RED: RepetitionTracker(), BLUE: RepetitionTracker()}


def move_endpoints(move: Move) -> tuple:
    """
    Unordered endpoint pair and direction flag of a move.

    The flag compares the square identifiers as strings ('3,1' > '3,0'),
    so it is a consistent tie-break rather than a geometric direction.
    """
    a = square_key(move.src)
    b = square_key(move.dst)
    direction = 1 if a < b else -1
    return tuple(sorted((a, b))), direction


def update_tracker(tracker: RepetitionTracker, move: Move) -> RepetitionTracker:
    endpoints, direction = move_endpoints(move)
    if tracker.endpoints != endpoints:
        return RepetitionTracker(endpoints, direction, 0)

    pairs = tracker.pairs
    if tracker.direction is not None and tracker.direction != direction:
        pairs += 1
    return RepetitionTracker(endpoints, direction, pairs)


def update_repetition(trackers: dict, color: int, move: Move) -> tuple:
    """
    Record an accepted move by color.

    Returns (new_trackers, winner) where winner is the opponent of color
    once its alternating-pair count reaches REPETITION_LIMIT, else EMPTY.
    The other color's tracker is left untouched.
    """
    updated = dict(trackers)
    updated[color] = update_tracker(trackers[color], move)

    winner = EMPTY
    if updated[color].pairs >= REPETITION_LIMIT:
        winner = opposite(color)
    return updated, winner
