from .board import Board, EMPTY, RED, BLUE
from .rules import Rules, Move, MoveKind
from .state import GameState

__all__ = ['Board', 'Rules', 'Move', 'MoveKind', 'GameState', 'EMPTY', 'RED', 'BLUE']
