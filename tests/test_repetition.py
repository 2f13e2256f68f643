"""Tests for repetition (bounce) tracking."""

import sys
sys.path.insert(0, '.')

from stratos.game.board import RED, BLUE, EMPTY
from stratos.game.rules import Move, MoveKind
from stratos.game.repetition import (
    RepetitionTracker, REPETITION_LIMIT, new_trackers, move_endpoints,
    update_tracker, update_repetition
)


def _move(src, dst):
    return Move(src, dst, MoveKind.ACROSS)


RIGHT = _move((3, 0), (3, 1))
LEFT = _move((3, 1), (3, 0))


class TestEndpoints:

    def test_unordered_pair(self):
        assert move_endpoints(RIGHT)[0] == move_endpoints(LEFT)[0] == ("3,0", "3,1")

    def test_direction_flag(self):
        """Flag compares the square identifiers, so it flips with the move."""
        assert move_endpoints(RIGHT)[1] == 1
        assert move_endpoints(LEFT)[1] == -1

    def test_direction_flag_is_lexicographic(self):
        """Vertical moves flip the flag the same way."""
        assert move_endpoints(_move((4, 0), (3, 0)))[1] == -1
        assert move_endpoints(_move((3, 0), (4, 0)))[1] == 1


class TestTracker:

    def test_first_move_starts_tracking(self):
        tracker = update_tracker(RepetitionTracker(), RIGHT)
        assert tracker.endpoints == ("3,0", "3,1")
        assert tracker.direction == 1
        assert tracker.pairs == 0

    def test_alternating_increments(self):
        tracker = RepetitionTracker()
        for expected, move in enumerate([RIGHT, LEFT, RIGHT, LEFT]):
            tracker = update_tracker(tracker, move)
            assert tracker.pairs == expected

    def test_same_direction_twice_does_not_increment(self):
        tracker = update_tracker(RepetitionTracker(), RIGHT)
        tracker = update_tracker(tracker, LEFT)
        assert tracker.pairs == 1
        tracker = update_tracker(tracker, LEFT)
        assert tracker.pairs == 1
        assert tracker.direction == -1

    def test_third_square_resets(self):
        tracker = RepetitionTracker()
        for move in (RIGHT, LEFT, RIGHT):
            tracker = update_tracker(tracker, move)
        assert tracker.pairs == 2

        tracker = update_tracker(tracker, _move((3, 1), (3, 2)))
        assert tracker.pairs == 0
        assert tracker.endpoints == ("3,1", "3,2")


class TestRepetitionWinner:

    def test_three_bounces_lose(self):
        trackers = new_trackers()
        winners = []
        for move in (RIGHT, LEFT, RIGHT, LEFT):
            trackers, winner = update_repetition(trackers, RED, move)
            winners.append(winner)

        assert winners == [EMPTY, EMPTY, EMPTY, BLUE]
        assert trackers[RED].pairs == REPETITION_LIMIT

    def test_blue_bounces_give_red_the_win(self):
        up = _move((4, 0), (3, 0))
        down = _move((3, 0), (4, 0))
        trackers = new_trackers()
        for move in (up, down, up):
            trackers, winner = update_repetition(trackers, BLUE, move)
            assert winner == EMPTY
        trackers, winner = update_repetition(trackers, BLUE, down)
        assert winner == RED

    def test_trackers_are_independent(self):
        trackers = new_trackers()
        trackers, _ = update_repetition(trackers, RED, RIGHT)
        trackers, _ = update_repetition(trackers, RED, LEFT)
        trackers, _ = update_repetition(trackers, BLUE, _move((5, 5), (5, 6)))

        assert trackers[RED].pairs == 1
        assert trackers[BLUE].pairs == 0
        assert trackers[BLUE].endpoints == ("5,5", "5,6")

    def test_input_not_mutated(self):
        trackers = new_trackers()
        updated, _ = update_repetition(trackers, RED, RIGHT)
        assert trackers[RED] == RepetitionTracker()
        assert updated[RED] != trackers[RED]


if __name__ == "__main__":
    import pytest
    pytest.main([__file__, "-v"])
