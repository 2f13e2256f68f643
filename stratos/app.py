"""
Stratos - stacked-block strategy game, Human vs Human or vs AI.
Game controller and command line entry point.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from stratos.game.state import GameState, GameMode, AIDifficulty
from stratos.game.board import RED, BLUE, opposite
from stratos.game.rules import Rules
from stratos.ai.engine import AIEngine
from stratos.ui.renderer import Renderer
from stratos.ui.input import InputHandler, InputAction

logger = logging.getLogger("stratos")

# Delay before an AI move so the previous move is drawn first
AI_MOVE_DELAY = 0.22


class StratosGame:
    """Main game controller."""

    def __init__(self, mode: GameMode = GameMode.PVE, human_color: int = RED,
                 difficulty: AIDifficulty = AIDifficulty.VERY_HARD,
                 seed: Optional[int] = None, time_limit: Optional[float] = None):
        self.renderer = Renderer()
        self.input_handler = InputHandler(self.renderer)
        self.ai_engine = AIEngine(seed=seed)

        # None follows the difficulty preset, 0 searches to full depth
        self.time_limit = time_limit
        self.ai_engine.set_difficulty(difficulty, time_limit)

        # Game state
        self.state = GameState(mode, human_color)

        # UI state
        self.selected: Optional[tuple] = None
        self.show_debug = False
        self.running = True
        self.ai_ready_at = 0.0

        # Mode cycle
        self.modes = [GameMode.PVE, GameMode.PVP, GameMode.EVE]
        self.current_mode_idx = self.modes.index(mode)

        # AI difficulty cycle
        self.difficulties = list(AIDifficulty)
        self.current_difficulty_idx = self.difficulties.index(difficulty)

        self._update_flip()

    def run(self):
        """Main game loop."""
        while self.running:
            self._handle_input()

            if self.state.is_ai_turn():
                if not self.ai_ready_at:
                    self.ai_ready_at = time.time() + AI_MOVE_DELAY
                elif time.time() >= self.ai_ready_at:
                    self._run_ai_turn()
                    self.ai_ready_at = 0.0

            debug_info = self.ai_engine.get_debug_info() if self.show_debug else None
            self.renderer.render(
                self.state,
                selected=self.selected,
                debug_info=debug_info,
                show_debug=self.show_debug,
                difficulty=self.get_current_difficulty()
            )
            self.renderer.tick(60)

        self.renderer.quit()

    def _handle_input(self):
        """Process all input events."""
        events = self.input_handler.process_events()

        for event in events:
            if event.action == InputAction.QUIT:
                # Close overlays first, then quit
                if self.renderer.show_help_overlay or self.renderer.show_rules_overlay:
                    self.renderer.close_overlays()
                else:
                    self.running = False

            elif event.action == InputAction.SELECT_CELL:
                if event.position and self.state.is_human_turn():
                    self._click_cell(event.position)

            elif event.action == InputAction.MOVE_SELECTED:
                if self.selected and self.state.is_human_turn():
                    dr, dc = event.direction
                    row, col = self.selected
                    self._try_move(self.selected, (row + dr, col + dc))

            elif event.action == InputAction.NEW_GAME:
                self._new_game()

            elif event.action == InputAction.UNDO:
                self._undo()

            elif event.action == InputAction.SWAP_TURN:
                if self.state.swap_turn():
                    self.selected = None

            elif event.action == InputAction.FLIP_BOARD:
                self.renderer.toggle_flip()

            elif event.action == InputAction.TOGGLE_MODE:
                self._toggle_mode()

            elif event.action == InputAction.TOGGLE_COLOR:
                self._toggle_color()

            elif event.action == InputAction.TOGGLE_DIFFICULTY:
                self._toggle_difficulty()

            elif event.action == InputAction.TOGGLE_DEBUG:
                self.show_debug = not self.show_debug

            elif event.action == InputAction.TOGGLE_HELP:
                self.renderer.toggle_help_overlay()

            elif event.action == InputAction.TOGGLE_RULES:
                self.renderer.toggle_rules_overlay()

    def _click_cell(self, pos: tuple):
        """Select a stack, or move the selected stack onto pos."""
        if self.selected == pos:
            self.selected = None
            return

        if self.selected and self.state.board.top(*self.selected) == self.state.current_turn:
            if any(m.dst == pos for m in self.state.get_moves_from(self.selected)):
                self._try_move(self.selected, pos)
                return

        self.selected = pos

    def _try_move(self, src: tuple, dst: tuple, thinking_time: float = 0.0):
        """Make a move, or explain why it was rejected."""
        color = self.state.current_turn
        reason = Rules.get_invalid_reason(self.state.board, color, src, dst)
        if reason:
            self.renderer.show_error(reason)
            return

        if self.state.make_move(src, dst, thinking_time):
            self.selected = None

    def _run_ai_turn(self):
        """Execute AI move."""
        self.state.start_ai_timer()

        move = self.ai_engine.get_move(self.state.board, self.state.current_turn)

        self.state.stop_ai_timer()

        # No move means the AI is locked out, which the state already reports
        if move:
            self._try_move(move.src, move.dst, self.state.last_ai_time)

    def _new_game(self):
        """Start a new game."""
        self.state.reset()
        self.selected = None
        self.ai_ready_at = 0.0
        self.ai_engine.heuristic.clear()

    def _undo(self):
        """Undo the last move(s)."""
        # Undo both player and AI moves in PVE mode
        if self.state.mode == GameMode.PVE:
            self.state.undo_move()
            if self.state.is_ai_turn():
                self.state.undo_move()
        else:
            self.state.undo_move()
        self.selected = None
        self.ai_ready_at = 0.0

    def _toggle_mode(self):
        """Toggle between game modes."""
        self.current_mode_idx = (self.current_mode_idx + 1) % len(self.modes)
        self.state.reset(self.modes[self.current_mode_idx])
        self._update_flip()
        self.selected = None
        self.ai_ready_at = 0.0

    def _toggle_color(self):
        """Human takes the other color; restarts the game."""
        self.state.reset(human_color=opposite(self.state.human_color))
        self._update_flip()
        self.selected = None
        self.ai_ready_at = 0.0

    def _update_flip(self):
        """Show the human's pieces at the bottom when they play Blue against the AI."""
        self.renderer.flipped = (self.state.mode == GameMode.PVE and
                                 self.state.human_color == BLUE)

    def _toggle_difficulty(self):
        """Toggle AI difficulty level."""
        self.current_difficulty_idx = (self.current_difficulty_idx + 1) % len(self.difficulties)
        diff = self.get_current_difficulty()
        self.ai_engine.set_difficulty(diff, self.time_limit)
        logger.info("AI difficulty: %s", diff.label)

    def get_current_difficulty(self) -> AIDifficulty:
        """Get current AI difficulty."""
        return self.difficulties[self.current_difficulty_idx]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stratos - stacked-block strategy game")
    parser.add_argument("--mode", choices=[m.value for m in GameMode], default=GameMode.PVE.value,
                        help="pvp (hotseat), pve (vs AI) or eve (AI vs AI) (default: pve)")
    parser.add_argument("--human-color", choices=["red", "blue"], default="red",
                        help="color played by the human in pve (default: red)")
    parser.add_argument("--difficulty", choices=[d.name.lower() for d in AIDifficulty],
                        default=AIDifficulty.VERY_HARD.name.lower(),
                        help="AI level (default: very_hard)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the AI's random choices")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="AI seconds per move, 0 for full fixed-depth search "
                             "(default: per difficulty)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging level (default: WARNING)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        game = StratosGame(
            mode=GameMode(args.mode),
            human_color=RED if args.human_color == "red" else BLUE,
            difficulty=AIDifficulty[args.difficulty.upper()],
            seed=args.seed,
            time_limit=args.time_limit,
        )
        game.run()
    except KeyboardInterrupt:
        print("\nGame interrupted.")
        sys.exit(0)
    except Exception:
        logger.exception("Unexpected error")
        sys.exit(1)


if __name__ == "__main__":
    main()
