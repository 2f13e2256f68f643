"""
Game state management for Stratos.
Tracks current turn, repetition trackers, game status, and provides game flow control.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .board import Board, RED, BLUE, EMPTY, COLOR_NAMES, opposite
from .rules import Rules, Move, GameStatus
from .repetition import new_trackers, update_repetition

logger = logging.getLogger(__name__)


class GameMode(Enum):
    """Game modes."""
    PVP = "pvp"           # Player vs Player (hotseat)
    PVE = "pve"           # Player vs AI
    EVE = "eve"           # AI vs AI


class AIDifficulty(Enum):
    """AI difficulty levels with the search strategy, depth and time limit they use."""
    EASY = ("easy", "random", 0, 0.0)
    MEDIUM = ("medium", "greedy", 1, 0.0)
    HARD = ("hard", "minimax", 2, 1.0)             # Depth 2, 1.0s limit
    VERY_HARD = ("very hard", "minimax", 3, 1.5)   # Depth 3, 1.5s limit (default)

    def __init__(self, label: str, strategy: str, depth: int, time_limit: float):
        self._label = label
        self._strategy = strategy
        self._depth = depth
        self._time_limit = time_limit

    @property
    def label(self) -> str:
        return self._label

    @property
    def strategy(self) -> str:
        return self._strategy

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def time_limit(self) -> float:
        """Search deadline in seconds; 0 searches to full depth."""
        return self._time_limit


class PlayerType(Enum):
    """Player types."""
    HUMAN = "human"
    AI = "ai"


@dataclass
class Player:
    """Player information."""
    color: int
    player_type: PlayerType
    name: str = ""

    def __post_init__(self):
        if not self.name:
            type_name = "Human" if self.player_type == PlayerType.HUMAN else "AI"
            self.name = f"{COLOR_NAMES[self.color]} ({type_name})"


@dataclass
class MoveRecord:
    """Record of a single move."""
    move: Move
    color: int
    thinking_time: float = 0.0


@dataclass(frozen=True)
class _Snapshot:
    """Everything needed to step back one move."""
    board: Board
    current_turn: int
    trackers: dict
    repetition_winner: int
    status: GameStatus


class GameState:
    """
    Manages the complete state of a Stratos game.

    Turn state machine: while status is in progress the side in
    current_turn is awaiting a move; once status is terminal no move is
    accepted until reset().
    """

    def __init__(self, mode: GameMode = GameMode.PVE, human_color: int = RED,
                 board: Optional[Board] = None, first_turn: int = RED):
        self.mode = mode
        self.human_color = human_color

        # Starting position (a custom one can be supplied for analysis/tests)
        self._start_board = board
        self._first_turn = first_turn

        self._init_game()
        self._setup_players(mode)

    def _init_game(self):
        self.board = self._start_board if self._start_board is not None else Board.initial()
        self.current_turn = self._first_turn
        self.trackers = new_trackers()
        self.repetition_winner = EMPTY
        self.move_history: list[MoveRecord] = []
        self._snapshots: list[_Snapshot] = []
        self.last_move: Optional[Move] = None

        # AI timing
        self.ai_thinking = False
        self.ai_start_time = 0.0
        self.last_ai_time = 0.0

        self.status = Rules.get_status(self.board, self.current_turn)

    def _setup_players(self, mode: GameMode):
        """Setup players based on game mode."""
        if mode == GameMode.PVP:
            types = {RED: PlayerType.HUMAN, BLUE: PlayerType.HUMAN}
        elif mode == GameMode.PVE:
            ai_color = opposite(self.human_color)
            types = {self.human_color: PlayerType.HUMAN, ai_color: PlayerType.AI}
        else:  # EVE
            types = {RED: PlayerType.AI, BLUE: PlayerType.AI}
        self.players = {color: Player(color, types[color]) for color in (RED, BLUE)}

    def reset(self, mode: Optional[GameMode] = None, human_color: Optional[int] = None):
        """Reset the game to its starting position."""
        if mode is not None:
            self.mode = mode
        if human_color is not None:
            self.human_color = human_color
        self._init_game()
        self._setup_players(self.mode)

    @property
    def is_game_over(self) -> bool:
        return self.status.is_terminal

    @property
    def winner(self) -> int:
        return self.status.winner

    def get_current_player(self) -> Player:
        """Get the current player."""
        return self.players[self.current_turn]

    def is_ai_turn(self) -> bool:
        """Check if it's AI's turn."""
        return (not self.is_game_over and
                self.get_current_player().player_type == PlayerType.AI)

    def is_human_turn(self) -> bool:
        """Check if it's human's turn."""
        return (not self.is_game_over and
                self.get_current_player().player_type == PlayerType.HUMAN)

    def make_move(self, src: tuple, dst: tuple, thinking_time: float = 0.0) -> bool:
        """
        Attempt to move the top block of src onto dst for the side to move.
        Returns True if move was accepted.
        """
        if self.is_game_over:
            return False

        color = self.current_turn
        kind = Rules.classify(self.board, color, src, dst)
        if kind is None:
            return False

        move = Move(tuple(src), tuple(dst), kind)
        self._snapshots.append(_Snapshot(
            self.board, self.current_turn, self.trackers,
            self.repetition_winner, self.status
        ))

        self.board = Rules.apply_move(self.board, move)
        self.trackers, self.repetition_winner = update_repetition(self.trackers, color, move)

        self.move_history.append(MoveRecord(move, color, thinking_time))
        self.last_move = move
        self.current_turn = opposite(color)
        self.status = Rules.get_status(self.board, self.current_turn, self.repetition_winner)

        logger.debug("%s played %s (%s)", COLOR_NAMES[color], move.key, kind.value)
        if self.is_game_over:
            logger.info("Game over: %s wins by %s",
                        COLOR_NAMES[self.status.winner], self.status.mode.value)
        return True

    def undo_move(self) -> bool:
        """Undo the last move, restoring board, turn and repetition state."""
        if not self._snapshots:
            return False

        snapshot = self._snapshots.pop()
        self.move_history.pop()

        self.board = snapshot.board
        self.current_turn = snapshot.current_turn
        self.trackers = snapshot.trackers
        self.repetition_winner = snapshot.repetition_winner
        self.status = snapshot.status
        self.last_move = self.move_history[-1].move if self.move_history else None
        return True

    def swap_turn(self) -> bool:
        """
        Hand the move to the other side without moving (hotseat only).
        The swapped-in side loses by lockout if it has no legal move.
        """
        if self.mode != GameMode.PVP or self.is_game_over:
            return False
        self.current_turn = opposite(self.current_turn)
        self.status = Rules.get_status(self.board, self.current_turn, self.repetition_winner)
        return True

    def get_valid_moves(self) -> list:
        """Get all valid moves for current player."""
        return Rules.get_valid_moves(self.board, self.current_turn)

    def get_moves_from(self, src: tuple) -> list:
        """Valid moves of the current player starting at src."""
        return Rules.get_moves_from(self.board, self.current_turn, src)

    def start_ai_timer(self):
        """Start timing AI computation."""
        self.ai_thinking = True
        self.ai_start_time = time.time()

    def stop_ai_timer(self):
        """Stop timing AI computation."""
        self.ai_thinking = False
        self.last_ai_time = time.time() - self.ai_start_time

    def get_ai_elapsed_time(self) -> float:
        """Get elapsed time for current AI computation."""
        if self.ai_thinking:
            return time.time() - self.ai_start_time
        return self.last_ai_time

    def get_move_count(self) -> int:
        """Get total number of moves made."""
        return len(self.move_history)

    def get_game_info(self) -> dict:
        """Get current game information."""
        return {
            'mode': self.mode.value,
            'turn': COLOR_NAMES[self.current_turn],
            'move_count': self.get_move_count(),
            'blocks': {
                'red': self.board.count_blocks(RED),
                'blue': self.board.count_blocks(BLUE),
            },
            'bounces': {
                'red': self.trackers[RED].pairs,
                'blue': self.trackers[BLUE].pairs,
            },
            'is_game_over': self.is_game_over,
            'winner': COLOR_NAMES[self.winner] if self.is_game_over else None,
            'win_mode': self.status.mode.value if self.is_game_over else None,
            'last_move': self.last_move.key if self.last_move else None,
            'last_ai_time': self.last_ai_time,
        }

    def __str__(self) -> str:
        info = self.get_game_info()
        lines = [
            f"Mode: {info['mode']}",
            f"Turn: {info['turn']} (Move #{info['move_count'] + 1})",
            f"Bounces - Red: {info['bounces']['red']}, Blue: {info['bounces']['blue']}",
        ]
        if info['is_game_over']:
            lines.append(f"Game Over! {info['winner']} wins by {info['win_mode']}")
        return '\n'.join(lines)
