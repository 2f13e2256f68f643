"""Tests for the AI engine."""

import random
import sys
import time
sys.path.insert(0, '.')

from stratos.game.board import Board, RED, BLUE
from stratos.game.rules import Rules, Move, MoveKind
from stratos.game.state import AIDifficulty
from stratos.ai.engine import AIEngine, Strategy, choose_move

# Red one step from row 7, Blue far away
RED_CAN_CROSS = Board.from_stacks({(6, 3): (RED,), (1, 0): (BLUE,)})

# Blue threatens to cross at (0,4); only capturing it stops that
BLUE_THREAT = Board.from_stacks({(1, 3): (RED, RED), (1, 4): (BLUE,)})

# Red's only block has no legal move
RED_LOCKED = Board.from_stacks({
    (3, 3): (RED,),
    (2, 3): (BLUE, BLUE),
    (4, 3): (BLUE,),
    (3, 2): (BLUE,),
    (3, 4): (BLUE, BLUE, BLUE),
})


def _sparse_board():
    return Board.from_stacks({
        (2, 2): (RED, RED), (2, 5): (RED,), (3, 3): (RED,),
        (4, 4): (BLUE,), (5, 2): (BLUE, BLUE), (5, 6): (BLUE,),
    })


class TestRandom:

    def test_seeded_random_is_reproducible(self):
        board = Board.initial()
        first = AIEngine(seed=42).choose(board, RED, Strategy.RANDOM)
        second = AIEngine(seed=42).choose(board, RED, Strategy.RANDOM)
        assert first == second
        assert first in Rules.get_valid_moves(board, RED)

    def test_random_skips_avoided_move(self):
        board = Board.from_stacks({(0, 0): (RED,)})
        avoid = "0,0->1,0"
        for seed in range(20):
            move = AIEngine(seed=seed).choose(board, RED, Strategy.RANDOM, avoid=avoid)
            assert move.key == "0,0->0,1"

    def test_random_plays_avoided_move_if_only_one(self):
        board = Board.from_stacks({(3, 3): (RED, RED, RED), (3, 4): (BLUE,)})
        move = AIEngine(seed=1).choose(board, RED, Strategy.RANDOM, avoid="3,3->3,4")
        assert move.key == "3,3->3,4"

    def test_no_moves(self):
        assert AIEngine(seed=1).choose(RED_LOCKED, RED, Strategy.RANDOM) is None


class TestGreedy:

    def test_greedy_crosses(self):
        move = AIEngine().choose(RED_CAN_CROSS, RED, Strategy.GREEDY)
        assert move == Move((6, 3), (7, 3), MoveKind.STEP_DOWN)

    def test_greedy_blue_crosses(self):
        board = Board.from_stacks({(1, 4): (BLUE,), (6, 0): (RED,)})
        move = AIEngine().choose(board, BLUE, Strategy.GREEDY)
        assert move.dst == (0, 4)

    def test_greedy_is_legal_from_start(self):
        board = Board.initial()
        for color in (RED, BLUE):
            move = AIEngine().choose(board, color, Strategy.GREEDY)
            assert move in Rules.get_valid_moves(board, color)

    def test_greedy_no_moves(self):
        assert AIEngine().choose(RED_LOCKED, RED, Strategy.GREEDY) is None


class TestMinimax:

    def test_finds_crossing(self):
        for depth in (1, 2, 3):
            move = AIEngine().choose(RED_CAN_CROSS, RED, Strategy.MINIMAX, depth)
            assert move.dst == (7, 3)

    def test_stops_crossing_threat(self):
        move = AIEngine().choose(BLUE_THREAT, RED, Strategy.MINIMAX, 2)
        assert move == Move((1, 3), (1, 4), MoveKind.CAPTURE)

    def test_move_is_legal(self):
        """Minimax returns one of the generated moves."""
        rng = random.Random(3)
        board, color = Board.initial(), RED
        for _ in range(12):
            moves = Rules.get_valid_moves(board, color)
            board = Rules.apply_move(board, rng.choice(moves))
            color = BLUE if color == RED else RED

        move = AIEngine().choose(board, color, Strategy.MINIMAX, 1)
        assert move in Rules.get_valid_moves(board, color)

        sparse = _sparse_board()
        for color in (RED, BLUE):
            move = AIEngine().choose(sparse, color, Strategy.MINIMAX, 2)
            assert move in Rules.get_valid_moves(sparse, color)

    def test_deterministic(self):
        board = _sparse_board()
        first = AIEngine(seed=1).choose(board, BLUE, Strategy.MINIMAX, 2)
        second = AIEngine(seed=99).choose(board, BLUE, Strategy.MINIMAX, 2)
        assert first == second

    def test_terminal_scores(self):
        engine = AIEngine()
        score, move = engine._minimax(RED_LOCKED, RED, 2, -engine.INF, engine.INF)
        assert score == -AIEngine.LOCKOUT_SCORE
        assert move is None

        crossed = Rules.apply_move(RED_CAN_CROSS, Move((6, 3), (7, 3), MoveKind.STEP_DOWN))
        score, move = engine._minimax(crossed, BLUE, 3, -engine.INF, engine.INF)
        assert score == AIEngine.WIN_SCORE
        assert move is None

    def test_depth_zero_is_evaluation(self):
        engine = AIEngine()
        board = _sparse_board()
        score, move = engine._minimax(board, RED, 0, -engine.INF, engine.INF)
        assert score == engine.heuristic.evaluate(board)
        assert move is None

    def test_no_moves(self):
        assert AIEngine().choose(RED_LOCKED, RED, Strategy.MINIMAX, 3) is None

    def test_time_limit(self):
        """An expired deadline still yields a legal move."""
        engine = AIEngine(time_limit=1e-9)
        board = Board.initial()
        move = engine.choose(board, RED, Strategy.MINIMAX, 3)
        assert move in Rules.get_valid_moves(board, RED)
        assert engine.get_debug_info()['timed_out']


class TestEngineApi:

    def test_get_move_by_difficulty(self):
        board = _sparse_board()
        engine = AIEngine(seed=5)
        for difficulty in AIDifficulty:
            move = engine.get_move(board, BLUE, difficulty)
            assert move in Rules.get_valid_moves(board, BLUE)
            assert engine.get_debug_info()['strategy'] == difficulty.strategy

    def test_choose_move_helper(self):
        move = choose_move(RED_CAN_CROSS, RED, Strategy.MINIMAX, depth=2)
        assert move.dst == (7, 3)

        rng = random.Random(8)
        move = choose_move(Board.initial(), BLUE, Strategy.RANDOM, rng=rng)
        assert move in Rules.get_valid_moves(Board.initial(), BLUE)

    def test_debug_info(self):
        engine = AIEngine()
        move = engine.choose(BLUE_THREAT, RED, Strategy.MINIMAX, 2)
        info = engine.get_debug_info()

        assert info['strategy'] == 'minimax'
        assert info['search_depth'] == 2
        assert info['best_move'] == move.key
        assert info['best_score'] == AIEngine.LOCKOUT_SCORE
        assert info['nodes_evaluated'] > 0
        assert info['top_moves'][0] == (move.key, AIEngine.LOCKOUT_SCORE)
        assert not info['timed_out']


class TestDifficultyTimeLimit:

    def test_presets_have_limits(self):
        for difficulty in (AIDifficulty.HARD, AIDifficulty.VERY_HARD):
            assert difficulty.time_limit > 0

    def test_set_difficulty_uses_preset(self):
        engine = AIEngine()
        engine.set_difficulty(AIDifficulty.VERY_HARD)
        assert engine.difficulty == AIDifficulty.VERY_HARD
        assert engine.time_limit == AIDifficulty.VERY_HARD.time_limit

    def test_zero_limit_searches_full_depth(self):
        engine = AIEngine()
        engine.set_difficulty(AIDifficulty.VERY_HARD, 0)
        assert engine.time_limit is None

        engine.set_difficulty(AIDifficulty.EASY)
        assert engine.time_limit is None

    def test_override_limit(self):
        engine = AIEngine()
        engine.set_difficulty(AIDifficulty.HARD, 0.25)
        assert engine.time_limit == 0.25

    def test_default_difficulty_move_is_bounded(self):
        """Depth 3 from the opening finishes near the preset limit."""
        engine = AIEngine()
        engine.set_difficulty(AIDifficulty.VERY_HARD)
        board = Board.initial()

        start = time.time()
        move = engine.get_move(board, RED)
        elapsed = time.time() - start

        assert move in Rules.get_valid_moves(board, RED)
        assert elapsed < AIDifficulty.VERY_HARD.time_limit + 2.0
        assert engine.get_debug_info()['strategy'] == 'minimax'


if __name__ == "__main__":
    import pytest
    pytest.main([__file__, "-v"])
