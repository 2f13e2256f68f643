"""
Pygame renderer for Stratos.
Handles all visual rendering of the game.
"""

import pygame
import time
from typing import Optional

from ..game.board import BOARD_SIZE, RED, BLUE, COLOR_NAMES
from ..game.rules import MoveKind
from ..game.state import GameState, GameMode, AIDifficulty

# Window settings
WINDOW_WIDTH = 1000
WINDOW_HEIGHT = 720

# Board settings
BOARD_MARGIN = 40
BOARD_AREA_SIZE = 640
LABEL_SPACE = 24
CELL_SIZE = (BOARD_AREA_SIZE - 2 * LABEL_SPACE) // BOARD_SIZE  # 74
GRID_ORIGIN = BOARD_MARGIN + LABEL_SPACE
BLOCK_STRIP = 6          # Height of one block in a stack's side view
MAX_VISIBLE_BLOCKS = 8

# Panel settings
PANEL_X = BOARD_MARGIN + BOARD_AREA_SIZE + 20
PANEL_WIDTH = WINDOW_WIDTH - PANEL_X - 20

# Colors
COLOR_BG = (15, 23, 42)
COLOR_BOARD = (17, 24, 39)
COLOR_CELL_LIGHT = (51, 65, 85)
COLOR_CELL_DARK = (30, 41, 59)
COLOR_LINE = (71, 85, 105)
COLOR_RED_BLOCK = (225, 29, 72)
COLOR_RED_EDGE = (159, 18, 57)
COLOR_BLUE_BLOCK = (14, 165, 233)
COLOR_BLUE_EDGE = (3, 105, 161)
COLOR_SELECTED = (250, 204, 21)
COLOR_LAST_MOVE = (226, 232, 240)
COLOR_TEXT = (220, 220, 220)
COLOR_TEXT_DIM = (150, 150, 150)
COLOR_PANEL_BG = (30, 41, 59)
COLOR_HIGHLIGHT = (255, 200, 100)
COLOR_WIN_HIGHLIGHT = (255, 215, 0)

# Destination outline per move kind
KIND_COLORS = {
    MoveKind.ACROSS: (52, 211, 153),
    MoveKind.STEP_DOWN: (96, 165, 250),
    MoveKind.CAPTURE: (248, 113, 113),
}

BLOCK_COLORS = {
    RED: (COLOR_RED_BLOCK, COLOR_RED_EDGE),
    BLUE: (COLOR_BLUE_BLOCK, COLOR_BLUE_EDGE),
}


class Renderer:
    """Handles rendering of the Stratos game."""

    def __init__(self):
        pygame.init()
        pygame.display.set_caption("Stratos")

        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.clock = pygame.time.Clock()

        # Fonts
        self.font_large = pygame.font.Font(None, 48)
        self.font_medium = pygame.font.Font(None, 32)
        self.font_small = pygame.font.Font(None, 24)

        # View state
        self.hover_pos: Optional[tuple] = None
        self.flipped = False

        # Buttons
        self.button_width = 120
        self.button_height = 38
        self.buttons = {}

        # Overlay state
        self.show_help_overlay = False
        self.show_rules_overlay = False

        # Error message state
        self.error_message = ""
        self.error_message_time = 0

    def _view_to_board(self, vrow: int, vcol: int) -> tuple:
        if self.flipped:
            return (BOARD_SIZE - 1 - vrow, BOARD_SIZE - 1 - vcol)
        return (vrow, vcol)

    def board_to_screen(self, row: int, col: int) -> tuple:
        """Top-left screen corner of a board cell."""
        vrow, vcol = self._view_to_board(row, col)
        return (GRID_ORIGIN + vcol * CELL_SIZE, GRID_ORIGIN + vrow * CELL_SIZE)

    def screen_to_board(self, x: int, y: int) -> Optional[tuple]:
        """Convert screen coordinates to board coordinates."""
        vcol = (x - GRID_ORIGIN) // CELL_SIZE
        vrow = (y - GRID_ORIGIN) // CELL_SIZE
        if 0 <= vrow < BOARD_SIZE and 0 <= vcol < BOARD_SIZE:
            return self._view_to_board(vrow, vcol)
        return None

    def screen_direction(self, dr: int, dc: int) -> tuple:
        """Board step for an on-screen direction (arrow keys follow the view)."""
        if self.flipped:
            return (-dr, -dc)
        return (dr, dc)

    def update_hover(self, pos: tuple):
        self.hover_pos = self.screen_to_board(pos[0], pos[1])

    def get_button_at(self, pos: tuple) -> Optional[str]:
        for name, rect in self.buttons.items():
            if rect.collidepoint(pos):
                return name
        return None

    def toggle_flip(self):
        self.flipped = not self.flipped

    def toggle_help_overlay(self):
        self.show_help_overlay = not self.show_help_overlay
        self.show_rules_overlay = False

    def toggle_rules_overlay(self):
        self.show_rules_overlay = not self.show_rules_overlay
        self.show_help_overlay = False

    def close_overlays(self):
        self.show_help_overlay = False
        self.show_rules_overlay = False

    def show_error(self, message: str):
        """Show an error message temporarily."""
        self.error_message = message
        self.error_message_time = time.time()

    def tick(self, fps: int = 60):
        self.clock.tick(fps)

    def quit(self):
        pygame.quit()

    def render(self, state: GameState, selected: Optional[tuple] = None,
               debug_info: Optional[dict] = None, show_debug: bool = False,
               difficulty: AIDifficulty = None):
        """Render the complete game state."""
        self.screen.fill(COLOR_BG)

        self._render_board(state, selected)
        self._render_panel(state, selected, difficulty)

        if show_debug and debug_info:
            self._render_debug_panel(debug_info)

        if self.show_help_overlay:
            self._render_help_overlay()
        if self.show_rules_overlay:
            self._render_rules_overlay()

        # Error message (temporary, fades after 2 seconds)
        if self.error_message and time.time() - self.error_message_time < 2.0:
            elapsed = time.time() - self.error_message_time
            alpha = int(255 * (1 - elapsed / 2.0))

            error_box = pygame.Surface((420, 40), pygame.SRCALPHA)
            error_box.fill((180, 50, 50, min(200, alpha)))
            box_x = BOARD_MARGIN + (BOARD_AREA_SIZE - 420) // 2
            box_y = BOARD_MARGIN + BOARD_AREA_SIZE - 50
            self.screen.blit(error_box, (box_x, box_y))

            error_text = self.font_medium.render(self.error_message, True, (255, 255, 255))
            text_x = box_x + (420 - error_text.get_width()) // 2
            self.screen.blit(error_text, (text_x, box_y + 8))

        pygame.display.flip()

    def _render_board(self, state: GameState, selected: Optional[tuple]):
        """Render the game board."""
        board_rect = pygame.Rect(BOARD_MARGIN, BOARD_MARGIN, BOARD_AREA_SIZE, BOARD_AREA_SIZE)
        pygame.draw.rect(self.screen, COLOR_BOARD, board_rect, border_radius=12)

        # File letters and rank numbers, as seen from Red's side unless flipped
        for i in range(BOARD_SIZE):
            row, col = self._view_to_board(i, i)
            letter = self.font_small.render(chr(ord('A') + col), True, COLOR_TEXT_DIM)
            x = GRID_ORIGIN + i * CELL_SIZE + (CELL_SIZE - letter.get_width()) // 2
            self.screen.blit(letter, (x, GRID_ORIGIN + BOARD_SIZE * CELL_SIZE + 4))
            number = self.font_small.render(str(BOARD_SIZE - row), True, COLOR_TEXT_DIM)
            y = GRID_ORIGIN + i * CELL_SIZE + (CELL_SIZE - number.get_height()) // 2
            self.screen.blit(number, (BOARD_MARGIN + 6, y))

        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                x, y = self.board_to_screen(row, col)
                cell = pygame.Rect(x + 1, y + 1, CELL_SIZE - 2, CELL_SIZE - 2)
                shade = COLOR_CELL_LIGHT if (row + col) % 2 == 0 else COLOR_CELL_DARK
                pygame.draw.rect(self.screen, shade, cell, border_radius=6)
                stack = state.board.stack(row, col)
                if stack:
                    self._render_stack(x, y, stack)

        # Last move: outline both squares
        if state.last_move:
            for pos in (state.last_move.src, state.last_move.dst):
                x, y = self.board_to_screen(*pos)
                pygame.draw.rect(self.screen, COLOR_LAST_MOVE,
                                 (x + 2, y + 2, CELL_SIZE - 4, CELL_SIZE - 4), 1, border_radius=6)

        # Hover indicator over own stacks
        if self.hover_pos and state.is_human_turn():
            row, col = self.hover_pos
            if state.board.top(row, col) == state.current_turn:
                x, y = self.board_to_screen(row, col)
                s = pygame.Surface((CELL_SIZE, CELL_SIZE), pygame.SRCALPHA)
                s.fill((255, 255, 255, 30))
                self.screen.blit(s, (x, y))

        # Selection and its legal destinations
        if selected:
            x, y = self.board_to_screen(*selected)
            pygame.draw.rect(self.screen, COLOR_SELECTED,
                             (x + 1, y + 1, CELL_SIZE - 2, CELL_SIZE - 2), 3, border_radius=6)
            if not state.is_game_over:
                for move in state.get_moves_from(selected):
                    dx, dy = self.board_to_screen(*move.dst)
                    pygame.draw.rect(self.screen, KIND_COLORS[move.kind],
                                     (dx + 4, dy + 4, CELL_SIZE - 8, CELL_SIZE - 8), 3,
                                     border_radius=6)
                    label = self.font_small.render(move.kind.value, True, KIND_COLORS[move.kind])
                    self.screen.blit(label, (dx + (CELL_SIZE - label.get_width()) // 2, dy + 6))

    def _render_stack(self, x: int, y: int, stack: tuple):
        """Side view of a stack: one strip per block, bottom first, top block as a cap."""
        visible = stack[-MAX_VISIBLE_BLOCKS:]
        inner = CELL_SIZE - 20
        base_y = y + CELL_SIZE - 10

        for i, block in enumerate(visible[:-1]):
            fill, edge = BLOCK_COLORS[block]
            strip = pygame.Rect(x + 10, base_y - (i + 1) * BLOCK_STRIP, inner, BLOCK_STRIP - 1)
            pygame.draw.rect(self.screen, edge, strip)

        fill, edge = BLOCK_COLORS[visible[-1]]
        cap_bottom = base_y - (len(visible) - 1) * BLOCK_STRIP
        cap = pygame.Rect(x + 10, cap_bottom - 24, inner, 24)
        pygame.draw.rect(self.screen, fill, cap, border_radius=4)
        pygame.draw.rect(self.screen, edge, cap, 2, border_radius=4)

        height = self.font_small.render(str(len(stack)), True, (255, 255, 255))
        self.screen.blit(height, (cap.centerx - height.get_width() // 2,
                                  cap.centery - height.get_height() // 2))

    def _render_panel(self, state: GameState, selected: Optional[tuple],
                      difficulty: AIDifficulty = None):
        """Render the side panel with game info."""
        panel_rect = pygame.Rect(PANEL_X, BOARD_MARGIN, PANEL_WIDTH, BOARD_AREA_SIZE)
        pygame.draw.rect(self.screen, COLOR_PANEL_BG, panel_rect, border_radius=10)

        y_offset = BOARD_MARGIN + 20

        title = self.font_large.render("STRATOS", True, COLOR_TEXT)
        self.screen.blit(title, (PANEL_X + 20, y_offset))
        y_offset += 50

        mode_short = {
            GameMode.PVP: "PvP",
            GameMode.PVE: "PvE",
            GameMode.EVE: "EvE",
        }.get(state.mode, "?")
        if state.mode in [GameMode.PVE, GameMode.EVE] and difficulty:
            info_text = f"{mode_short}  •  {difficulty.label.capitalize()}"
        else:
            info_text = mode_short
        if self.flipped:
            info_text += "  •  Flipped"
        info_label = self.font_small.render(info_text, True, COLOR_TEXT_DIM)
        self.screen.blit(info_label, (PANEL_X + 20, y_offset))
        y_offset += 30

        pygame.draw.line(self.screen, COLOR_LINE,
                         (PANEL_X + 20, y_offset), (PANEL_X + PANEL_WIDTH - 20, y_offset))
        y_offset += 16

        for color in [RED, BLUE]:
            player = state.players[color]
            is_current = state.current_turn == color and not state.is_game_over
            is_winner = state.is_game_over and state.winner == color

            box_height = 58
            if is_current or is_winner:
                highlight_rect = pygame.Rect(PANEL_X + 12, y_offset - 5, PANEL_WIDTH - 24, box_height)
                if is_winner:
                    pygame.draw.rect(self.screen, (55, 50, 30), highlight_rect, border_radius=8)
                    pygame.draw.rect(self.screen, COLOR_WIN_HIGHLIGHT, highlight_rect, 2, border_radius=8)
                else:
                    pygame.draw.rect(self.screen, (50, 58, 72), highlight_rect, border_radius=8)

            fill, edge = BLOCK_COLORS[color]
            icon = pygame.Rect(PANEL_X + 22, y_offset + 4, 20, 20)
            pygame.draw.rect(self.screen, fill, icon, border_radius=4)
            pygame.draw.rect(self.screen, edge, icon, 2, border_radius=4)

            name_color = COLOR_WIN_HIGHLIGHT if is_winner else COLOR_TEXT
            name = self.font_medium.render(player.name, True, name_color)
            self.screen.blit(name, (PANEL_X + 52, y_offset + 2))

            owned = len(state.board.owned_positions(color))
            bounces = state.trackers[color].pairs
            detail = f"Stacks: {owned}   Bounces: {bounces}/3"
            detail_label = self.font_small.render(detail, True, COLOR_TEXT_DIM)
            self.screen.blit(detail_label, (PANEL_X + 52, y_offset + 30))

            y_offset += box_height + 6

        pygame.draw.line(self.screen, COLOR_LINE,
                         (PANEL_X + 20, y_offset), (PANEL_X + PANEL_WIDTH - 20, y_offset))
        y_offset += 16

        # Selected stack
        if selected:
            owner = COLOR_NAMES[state.board.top(*selected)]
            height = state.board.height(*selected)
            sel_text = f"Selected {chr(ord('A') + selected[1])}{BOARD_SIZE - selected[0]}: {owner}, h={height}"
        else:
            sel_text = "Click a stack to select it"
        sel_label = self.font_small.render(sel_text, True, COLOR_TEXT)
        self.screen.blit(sel_label, (PANEL_X + 20, y_offset))
        y_offset += 28

        # AI timer during AI turn
        if state.is_ai_turn():
            timer = self.font_medium.render(f"AI: {state.get_ai_elapsed_time():.2f}s", True, (100, 220, 150))
            self.screen.blit(timer, (PANEL_X + 20, y_offset))
        y_offset += 36

        self._render_buttons(state, y_offset)
        y_offset += 100

        if state.is_game_over:
            result_rect = pygame.Rect(PANEL_X + 15, y_offset, PANEL_WIDTH - 30, 70)
            pygame.draw.rect(self.screen, (55, 50, 35), result_rect, border_radius=8)
            pygame.draw.rect(self.screen, COLOR_WIN_HIGHLIGHT, result_rect, 2, border_radius=8)

            winner_text = f"{COLOR_NAMES[state.winner].upper()} WINS!"
            winner = self.font_large.render(winner_text, True, COLOR_WIN_HIGHLIGHT)
            self.screen.blit(winner, (PANEL_X + (PANEL_WIDTH - winner.get_width()) // 2, y_offset + 8))

            reason = self.font_small.render(f"by {state.status.mode.value}", True, (180, 180, 180))
            self.screen.blit(reason, (PANEL_X + (PANEL_WIDTH - reason.get_width()) // 2, y_offset + 45))

        hint_y = BOARD_MARGIN + BOARD_AREA_SIZE - 25
        hint = self.font_small.render("Press ? for help  •  I for rules", True, (100, 105, 115))
        self.screen.blit(hint, (PANEL_X + (PANEL_WIDTH - hint.get_width()) // 2, hint_y))

    def _render_buttons(self, state: GameState, start_y: int):
        """Render panel buttons."""
        mouse_pos = pygame.mouse.get_pos()

        button_x = PANEL_X + 18
        self.buttons = {
            'new_game': pygame.Rect(button_x, start_y, self.button_width, self.button_height),
            'undo': pygame.Rect(button_x + 128, start_y, self.button_width, self.button_height),
            'flip': pygame.Rect(button_x, start_y + 46, self.button_width, self.button_height),
            'mode': pygame.Rect(button_x + 128, start_y + 46, self.button_width, self.button_height),
        }
        labels = {
            'new_game': 'New Game',
            'undo': 'Undo',
            'flip': 'Flip Board',
            'mode': 'Mode',
        }
        if state.mode == GameMode.PVP:
            labels['mode'] = 'Swap Turn'
            self.buttons['swap'] = self.buttons.pop('mode')
            labels['swap'] = labels.pop('mode')

        for name, rect in self.buttons.items():
            is_hover = rect.collidepoint(mouse_pos)
            color = (75, 85, 100) if is_hover else (55, 62, 75)
            border_color = COLOR_HIGHLIGHT if is_hover else (80, 85, 95)

            pygame.draw.rect(self.screen, (25, 28, 35), rect.move(2, 2), border_radius=8)
            pygame.draw.rect(self.screen, color, rect, border_radius=8)
            pygame.draw.rect(self.screen, border_color, rect, 1, border_radius=8)

            label = self.font_small.render(labels[name], True, COLOR_TEXT)
            self.screen.blit(label, (rect.centerx - label.get_width() // 2,
                                     rect.centery - label.get_height() // 2))

    def _render_debug_panel(self, debug_info: dict):
        """Render AI search statistics over the lower board area."""
        panel_x = BOARD_MARGIN + 20
        panel_y = BOARD_MARGIN + BOARD_AREA_SIZE - 230
        panel_width = 300
        panel_height = 210

        s = pygame.Surface((panel_width, panel_height), pygame.SRCALPHA)
        s.fill((20, 20, 30, 220))
        self.screen.blit(s, (panel_x, panel_y))
        pygame.draw.rect(self.screen, COLOR_TEXT, (panel_x, panel_y, panel_width, panel_height), 1)

        y = panel_y + 12
        title = self.font_medium.render("AI Performance", True, COLOR_HIGHLIGHT)
        self.screen.blit(title, (panel_x + 15, y))
        y += 30

        nodes = debug_info.get('nodes_evaluated', 0)
        lines = [
            f"Strategy: {debug_info.get('strategy', '')}",
            f"Time: {debug_info.get('thinking_time', 0):.3f}s",
            f"Depth: {debug_info.get('search_depth', 0)}",
            f"Nodes: {nodes:,}  Cutoffs: {debug_info.get('beta_cutoffs', 0):,}",
            f"Move: {debug_info.get('best_move') or 'N/A'}",
            f"Score: {debug_info.get('best_score', 0):+,}",
        ]
        if debug_info.get('timed_out'):
            lines.append("Stopped at time limit")
        for line in lines:
            text = self.font_small.render(line, True, COLOR_TEXT)
            self.screen.blit(text, (panel_x + 25, y))
            y += 20

    def _render_overlay_box(self, box_width: int, box_height: int, border: tuple) -> tuple:
        overlay = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 200))
        self.screen.blit(overlay, (0, 0))

        box_x = (WINDOW_WIDTH - box_width) // 2
        box_y = (WINDOW_HEIGHT - box_height) // 2
        pygame.draw.rect(self.screen, (45, 50, 60),
                         (box_x, box_y, box_width, box_height), border_radius=12)
        pygame.draw.rect(self.screen, border,
                         (box_x, box_y, box_width, box_height), 2, border_radius=12)
        return box_x, box_y

    def _render_help_overlay(self):
        """Render keyboard shortcuts help overlay."""
        box_width, box_height = 440, 520
        box_x, box_y = self._render_overlay_box(box_width, box_height, COLOR_HIGHLIGHT)
        y = box_y + 20

        title = self.font_large.render("KEYBOARD SHORTCUTS", True, COLOR_HIGHLIGHT)
        self.screen.blit(title, (box_x + (box_width - title.get_width()) // 2, y))
        y += 50

        sections = [
            ("Play", [
                ("Click", "Select stack / move"),
                ("Arrows", "Move selected stack"),
                ("U / Z", "Undo Move"),
                ("T", "Swap Turn (PvP)"),
            ]),
            ("Game", [
                ("N", "New Game"),
                ("M", "Toggle Mode"),
                ("C", "Switch Human Color"),
                ("L", "AI Level"),
            ]),
            ("View", [
                ("F", "Flip Board"),
                ("D", "Debug Info"),
                ("I", "Rules of Play"),
            ]),
        ]
        for section_name, shortcuts in sections:
            header = self.font_medium.render(section_name, True, (180, 180, 180))
            self.screen.blit(header, (box_x + 30, y))
            y += 28
            for key, desc in shortcuts:
                self.screen.blit(self.font_small.render(key, True, COLOR_HIGHLIGHT), (box_x + 50, y))
                self.screen.blit(self.font_small.render(desc, True, COLOR_TEXT), (box_x + 150, y))
                y += 24
            y += 12

        close_hint = self.font_small.render("Press ? or ESC to close", True, (120, 120, 120))
        self.screen.blit(close_hint, (box_x + (box_width - close_hint.get_width()) // 2,
                                      box_y + box_height - 35))

    def _render_rules_overlay(self):
        """Render the rules of play."""
        box_width, box_height = 600, 520
        box_x, box_y = self._render_overlay_box(box_width, box_height, (100, 180, 255))
        y = box_y + 20

        title = self.font_large.render("RULES OF PLAY", True, (100, 180, 255))
        self.screen.blit(title, (box_x + (box_width - title.get_width()) // 2, y))
        y += 55

        lines = [
            ("Goal", COLOR_HIGHLIGHT),
            ("Reach the opponent's back row (Crossing),", COLOR_TEXT),
            ("leave the opponent without a move (Lockout), or", COLOR_TEXT),
            ("watch them bounce A<->B three times (Repetition).", COLOR_TEXT),
            ("", COLOR_TEXT),
            ("Movement", COLOR_HIGHLIGHT),
            ("Only the top block moves, one square orthogonally.", COLOR_TEXT),
            ("Across: onto your own stack of equal height.", KIND_COLORS[MoveKind.ACROSS]),
            ("Step-Down: onto a square 1-2 lower, any direction.", KIND_COLORS[MoveKind.STEP_DOWN]),
            ("Capture: onto an opponent stack 1-2 lower;", KIND_COLORS[MoveKind.CAPTURE]),
            ("  their blocks stay buried underneath.", KIND_COLORS[MoveKind.CAPTURE]),
            ("Backward moves must step down.", COLOR_TEXT),
            ("", COLOR_TEXT),
            ("Red moves first. Passing is not allowed.", COLOR_TEXT),
        ]
        for text, color in lines:
            if text:
                self.screen.blit(self.font_small.render(text, True, color), (box_x + 30, y))
            y += 24

        close_hint = self.font_small.render("Press I or ESC to close", True, (120, 120, 120))
        self.screen.blit(close_hint, (box_x + (box_width - close_hint.get_width()) // 2,
                                      box_y + box_height - 35))
