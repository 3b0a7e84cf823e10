"""Backend-neutral drawing of game snapshots.

:class:`BoardRenderer` turns a :class:`~fadasblock.game_state.Snapshot` into
rectangle calls on one or two :class:`DrawingSurface` objects.  The pygame
front-end wraps ``pygame.Surface``; tests use a recording fake.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple

import numpy as np

from .config import BLOCK_SIZE
from .game_state import Snapshot
from .tetromino import Shape

Color = Tuple[int, int, int]

LOCKED_COLOR: Color = (159, 207, 154)
ACTIVE_COLOR: Color = (124, 144, 189)
BORDER_COLOR: Color = (60, 64, 72)

# Margin left around the preview piece, in pixels.
PREVIEW_PADDING = 10


class DrawingSurface(Protocol):
    width: int
    height: int

    def clear(self) -> None:
        ...

    def fill_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None:
        ...

    def stroke_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None:
        ...


def preview_layout(shape: Shape, width: int, height: int) -> Tuple[int, int, int]:
    """Return ``(block, offset_x, offset_y)`` to centre ``shape`` in a box."""

    rows, cols = shape.shape
    block = (min(width, height) - PREVIEW_PADDING) // max(rows, cols)
    offset_x = (width - cols * block) // 2
    offset_y = (height - rows * block) // 2
    return block, offset_x, offset_y


class BoardRenderer:
    """Draw the board on ``surface`` and the next piece on ``preview``."""

    def __init__(
        self,
        surface: DrawingSurface,
        preview: Optional[DrawingSurface] = None,
        *,
        block_size: int = BLOCK_SIZE,
    ) -> None:
        self.surface = surface
        self.preview = preview
        self.block_size = block_size

    def render(self, snapshot: Snapshot) -> None:
        self.draw_board(snapshot)
        if self.preview is not None:
            self.draw_next(snapshot.next_shape)

    def draw_board(self, snapshot: Snapshot) -> None:
        self.surface.clear()
        for row, col in np.argwhere(snapshot.cells):
            self._draw_block(int(col), int(row), LOCKED_COLOR)
        if snapshot.active_shape is not None:
            for dr, dc in np.argwhere(snapshot.active_shape):
                self._draw_block(snapshot.active_col + int(dc), snapshot.active_row + int(dr), ACTIVE_COLOR)

    def draw_next(self, shape: Optional[Shape]) -> None:
        preview = self.preview
        preview.clear()
        if shape is None:
            return
        block, offset_x, offset_y = preview_layout(shape, preview.width, preview.height)
        for r, c in np.argwhere(shape):
            x = offset_x + int(c) * block
            y = offset_y + int(r) * block
            preview.fill_rect(x, y, block - 1, block - 1, ACTIVE_COLOR)

    def _draw_block(self, col: int, row: int, color: Color) -> None:
        size = self.block_size
        # Leave a one pixel gap so the grid stays visible.
        args = (col * size, row * size, size - 1, size - 1)
        self.surface.fill_rect(*args, color)
        self.surface.stroke_rect(*args, BORDER_COLOR)


def format_score(score: int) -> str:
    return str(score).zfill(6)


def format_elapsed(seconds: int) -> str:
    """Format ``seconds`` as ``hh:mm:ss``."""

    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_speed(factor: float) -> str:
    return f"{factor:.1f}x"
