"""Tests for the game controller (without opening a window)."""

import sys
sys.path.insert(0, '.')

import pytest

import stratos.app as app
from stratos.game.board import RED, BLUE
from stratos.game.state import GameMode, AIDifficulty


class _StubRenderer:
    """Stands in for the pygame window."""

    def __init__(self):
        self.flipped = False


class _StubInputHandler:

    def __init__(self, renderer):
        self.renderer = renderer


@pytest.fixture
def make_game(monkeypatch):
    monkeypatch.setattr(app, "Renderer", _StubRenderer)
    monkeypatch.setattr(app, "InputHandler", _StubInputHandler)
    return app.StratosGame


class TestBoardFlip:

    def test_blue_human_starts_flipped(self, make_game):
        assert make_game(GameMode.PVE, BLUE).renderer.flipped
        assert not make_game(GameMode.PVE, RED).renderer.flipped
        assert not make_game(GameMode.PVP, BLUE).renderer.flipped

    def test_toggle_mode_into_pve_flips(self, make_game):
        game = make_game(GameMode.EVE, BLUE)
        assert not game.renderer.flipped

        game._toggle_mode()
        assert game.state.mode == GameMode.PVE
        assert game.renderer.flipped

        game._toggle_mode()
        assert game.state.mode == GameMode.PVP
        assert not game.renderer.flipped

    def test_toggle_color(self, make_game):
        game = make_game(GameMode.PVE, RED)
        game._toggle_color()
        assert game.state.human_color == BLUE
        assert game.renderer.flipped


class TestAITimeLimit:

    def test_default_uses_preset(self, make_game):
        game = make_game()
        assert game.ai_engine.time_limit == AIDifficulty.VERY_HARD.time_limit

    def test_zero_means_full_depth(self, make_game):
        game = make_game(time_limit=0)
        assert game.ai_engine.time_limit is None

    def test_difficulty_cycle_updates_engine(self, make_game):
        game = make_game(difficulty=AIDifficulty.MEDIUM)
        game._toggle_difficulty()
        assert game.ai_engine.difficulty == AIDifficulty.HARD
        assert game.ai_engine.time_limit == AIDifficulty.HARD.time_limit

    def test_override_survives_difficulty_cycle(self, make_game):
        game = make_game(difficulty=AIDifficulty.HARD, time_limit=0.5)
        game._toggle_difficulty()
        assert game.get_current_difficulty() == AIDifficulty.VERY_HARD
        assert game.ai_engine.time_limit == 0.5


class TestParseArgs:

    def test_defaults(self):
        args = app.parse_args([])
        assert args.mode == "pve"
        assert args.human_color == "red"
        assert args.difficulty == "very_hard"
        assert args.time_limit is None
        assert args.log_level == "WARNING"

    def test_time_limit(self):
        args = app.parse_args(["--time-limit", "0", "--difficulty", "hard", "--seed", "3"])
        assert args.time_limit == 0.0
        assert AIDifficulty[args.difficulty.upper()] == AIDifficulty.HARD
        assert args.seed == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
