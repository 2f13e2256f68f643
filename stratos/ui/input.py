"""
Input handling for Stratos.
Processes mouse and keyboard events.
"""

import pygame
from enum import Enum, auto
from typing import Optional
from dataclasses import dataclass


class InputAction(Enum):
    """Types of input actions."""
    NONE = auto()
    QUIT = auto()
    SELECT_CELL = auto()       # Click on a board square
    MOVE_SELECTED = auto()     # Arrow key: move the selected stack
    NEW_GAME = auto()
    UNDO = auto()
    SWAP_TURN = auto()         # Hotseat only
    FLIP_BOARD = auto()
    TOGGLE_MODE = auto()
    TOGGLE_COLOR = auto()      # Human plays the other color (PvE)
    TOGGLE_DIFFICULTY = auto()
    TOGGLE_DEBUG = auto()
    TOGGLE_HELP = auto()
    TOGGLE_RULES = auto()


@dataclass
class InputEvent:
    """Represents a processed input event."""
    action: InputAction
    position: Optional[tuple] = None   # Board position for SELECT_CELL
    direction: Optional[tuple] = None  # Board step for MOVE_SELECTED
    mouse_pos: Optional[tuple] = None  # Screen position


# Screen directions for arrow keys: (dr, dc)
ARROW_KEYS = {
    pygame.K_UP: (-1, 0),
    pygame.K_DOWN: (1, 0),
    pygame.K_LEFT: (0, -1),
    pygame.K_RIGHT: (0, 1),
}


class InputHandler:
    """Handles user input for the game."""

    def __init__(self, renderer):
        self.renderer = renderer

    def process_events(self) -> list[InputEvent]:
        """
        Process all pending pygame events.
        Returns list of InputEvents.
        """
        events = []

        for event in pygame.event.get():
            input_event = self._process_event(event)
            if input_event and input_event.action != InputAction.NONE:
                events.append(input_event)

        return events

    def _process_event(self, event: pygame.event.Event) -> Optional[InputEvent]:
        """Process a single pygame event."""
        if event.type == pygame.QUIT:
            return InputEvent(InputAction.QUIT)

        elif event.type == pygame.MOUSEMOTION:
            self.renderer.update_hover(event.pos)
            return None

        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:  # Left click
                return self._handle_click(event.pos)

        elif event.type == pygame.KEYDOWN:
            return self._handle_keydown(event.key)

        return None

    def _handle_click(self, pos: tuple) -> InputEvent:
        """Handle mouse click."""
        button = self.renderer.get_button_at(pos)
        if button:
            action_map = {
                'new_game': InputAction.NEW_GAME,
                'undo': InputAction.UNDO,
                'flip': InputAction.FLIP_BOARD,
                'mode': InputAction.TOGGLE_MODE,
                'swap': InputAction.SWAP_TURN,
            }
            return InputEvent(action_map.get(button, InputAction.NONE), mouse_pos=pos)

        board_pos = self.renderer.screen_to_board(pos[0], pos[1])
        if board_pos:
            return InputEvent(InputAction.SELECT_CELL, position=board_pos, mouse_pos=pos)

        return InputEvent(InputAction.NONE)

    def _handle_keydown(self, key: int) -> InputEvent:
        """Handle keyboard input."""
        if key in ARROW_KEYS:
            direction = self.renderer.screen_direction(*ARROW_KEYS[key])
            return InputEvent(InputAction.MOVE_SELECTED, direction=direction)

        key_map = {
            pygame.K_ESCAPE: InputAction.QUIT,
            pygame.K_n: InputAction.NEW_GAME,
            pygame.K_u: InputAction.UNDO,
            pygame.K_z: InputAction.UNDO,
            pygame.K_t: InputAction.SWAP_TURN,
            pygame.K_f: InputAction.FLIP_BOARD,
            pygame.K_m: InputAction.TOGGLE_MODE,
            pygame.K_c: InputAction.TOGGLE_COLOR,
            pygame.K_l: InputAction.TOGGLE_DIFFICULTY,
            pygame.K_d: InputAction.TOGGLE_DEBUG,
            # Help and rules
            pygame.K_QUESTION: InputAction.TOGGLE_HELP,
            pygame.K_SLASH: InputAction.TOGGLE_HELP,  # ? is shift+/
            pygame.K_h: InputAction.TOGGLE_HELP,
            pygame.K_i: InputAction.TOGGLE_RULES,
        }

        return InputEvent(key_map.get(key, InputAction.NONE))
