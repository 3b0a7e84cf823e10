"""High level game state container."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from .board import Board, Grid
from .config import DEFAULT_INTERVAL_MS
from .tetromino import Piece, Shape


class Status(str, Enum):
    """Lifecycle of a game session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Read-only copy of everything a renderer needs for one frame.

    Snapshots compare by value, so a renderer can skip frames that did not
    change.
    """

    cells: Grid
    active_shape: Optional[Shape]
    active_row: int
    active_col: int
    next_shape: Optional[Shape]
    score: int
    lines: int
    elapsed: int
    interval_ms: int
    status: Status

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return all(_same(getattr(self, f.name), getattr(other, f.name)) for f in fields(self))

    def __hash__(self) -> int:
        return hash(
            (
                self.cells.tobytes(),
                self.active_row,
                self.active_col,
                self.score,
                self.lines,
                self.elapsed,
                self.interval_ms,
                self.status,
            )
        )


def _same(a: object, b: object) -> bool:
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return a is not None and b is not None and np.array_equal(a, b)
    return a == b


def _readonly(array: Optional[NDArray]) -> Optional[NDArray]:
    if array is None:
        return None
    copy = array.copy()
    copy.flags.writeable = False
    return copy


@dataclass
class GameState:
    """Mutable state for a game session."""

    board: Board = field(default_factory=Board)
    active: Optional[Piece] = None
    upcoming: Optional[Shape] = None
    player: str = ""
    score: int = 0
    lines: int = 0
    elapsed: int = 0
    interval_ms: int = DEFAULT_INTERVAL_MS
    status: Status = Status.IDLE

    @property
    def paused(self) -> bool:
        return self.status is Status.PAUSED

    @property
    def game_over(self) -> bool:
        return self.status is Status.GAME_OVER

    def snapshot(self) -> Snapshot:
        active = self.active
        return Snapshot(
            cells=_readonly(self.board.grid),
            active_shape=_readonly(active.shape) if active else None,
            active_row=active.row if active else 0,
            active_col=active.col if active else 0,
            next_shape=_readonly(self.upcoming),
            score=self.score,
            lines=self.lines,
            elapsed=self.elapsed,
            interval_ms=self.interval_ms,
            status=self.status,
        )
