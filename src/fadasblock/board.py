"""Board representation for the playfield."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .config import COLS, ROWS
from .tetromino import Piece, Shape


Grid = NDArray[np.bool_]


def create_empty_grid(height: int = ROWS, width: int = COLS) -> Grid:
    """Return a new empty board grid."""

    return np.zeros((height, width), dtype=bool)


class Board:
    """Playfield holding the occupied cells.

    ``grid[row, col]`` is ``True`` exactly where a locked block sits.  Row
    ``0`` is the top of the board.
    """

    def __init__(self, height: int = ROWS, width: int = COLS) -> None:
        self.height = height
        self.width = width
        self.grid: Grid = create_empty_grid(height, width)

    def reset(self) -> None:
        self.grid = create_empty_grid(self.height, self.width)

    def collides(self, shape: Shape, row: int, col: int) -> bool:
        """Return ``True`` if ``shape`` anchored at ``(row, col)`` is illegal.

        A set cell collides when it falls outside the side walls, below the
        floor, or onto a locked block.  Cells above the top edge only collide
        with the walls, so freshly spawned pieces may poke out of the board.
        """

        for dr, dc in np.argwhere(shape):
            r = row + int(dr)
            c = col + int(dc)
            if c < 0 or c >= self.width or r >= self.height:
                return True
            if r >= 0 and self.grid[r, c]:
                return True
        return False

    def lock(self, piece: Piece) -> int:
        """Merge ``piece`` into the grid and return the number of rows cleared.

        Blocks that lie outside the board are dropped silently.
        """

        for r, c in piece.blocks():
            if 0 <= r < self.height and 0 <= c < self.width:
                self.grid[r, c] = True
        return self.clear_lines()

    def clear_lines(self) -> int:
        """Clear completed rows and return how many were removed.

        Rows are scanned bottom-up.  After a removal everything above drops by
        one, so the same index is checked again before moving on.
        """

        cleared = 0
        row = self.height - 1
        while row >= 0:
            if self.grid[row].all():
                remaining = np.delete(self.grid, row, axis=0)
                self.grid = np.vstack((create_empty_grid(1, self.width), remaining))
                cleared += 1
            else:
                row -= 1
        return cleared
