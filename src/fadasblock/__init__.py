"""Falling-block puzzle engine with a pygame front-end."""

from .board import Board
from .config import GameConfig
from .game import Game
from .game_state import GameState, Snapshot, Status
from .ledger import JsonFileStore, MemoryStore, ScoreEntry, ScoreLedger
from .render import BoardRenderer
from .scheduler import AsyncioScheduler, ManualScheduler, RepeatingTask
from .tetromino import TETROMINOES, Piece, TetrominoType, random_tetromino, rotate_clockwise
from .utils import KICK_OFFSETS, can_move, gravity_interval_ms, try_rotate

__all__ = [
    "Board",
    "BoardRenderer",
    "Game",
    "GameConfig",
    "GameState",
    "Snapshot",
    "Status",
    "JsonFileStore",
    "MemoryStore",
    "ScoreEntry",
    "ScoreLedger",
    "AsyncioScheduler",
    "ManualScheduler",
    "RepeatingTask",
    "TETROMINOES",
    "Piece",
    "TetrominoType",
    "random_tetromino",
    "rotate_clockwise",
    "KICK_OFFSETS",
    "can_move",
    "gravity_interval_ms",
    "try_rotate",
]
