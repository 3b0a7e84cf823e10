"""Tetromino definitions and basic behaviour.

Shapes are small numpy boolean matrices.  The catalog entries are read-only;
every piece that enters play works on its own copy so that moving or rotating
it can never leak back into the catalog.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .config import SPAWN_COL, SPAWN_ROW

Shape = NDArray[np.bool_]


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    O = "O"
    T = "T"
    S = "S"
    Z = "Z"
    J = "J"
    L = "L"


def _frozen(rows: Sequence[Sequence[int]]) -> Shape:
    shape = np.array(rows, dtype=bool)
    shape.flags.writeable = False
    return shape


# Spawn orientation of every piece.
TETROMINOES: Mapping[TetrominoType, Shape] = MappingProxyType(
    {
        TetrominoType.I: _frozen([[1, 1, 1, 1]]),
        TetrominoType.O: _frozen([[1, 1], [1, 1]]),
        TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1]]),
        TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
        TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
        TetrominoType.J: _frozen([[1, 0, 0], [1, 1, 1]]),
        TetrominoType.L: _frozen([[0, 0, 1], [1, 1, 1]]),
    }
)


def random_tetromino(rng: Optional[random.Random] = None) -> Shape:
    """Return a writeable copy of a uniformly chosen catalog shape."""

    kind = (rng or random).choice(list(TetrominoType))
    return TETROMINOES[kind].copy()


def rotate_clockwise(shape: Shape) -> Shape:
    """Return ``shape`` rotated 90 degrees clockwise.

    A ``rows x cols`` matrix becomes ``cols x rows``.  The input is left
    untouched and the result never shares memory with it.
    """

    return np.rot90(shape, k=-1).copy()


@dataclass
class Piece:
    """Active falling piece in the game."""

    shape: Shape
    row: int = SPAWN_ROW
    col: int = SPAWN_COL

    def move(self, dx: int, dy: int) -> None:
        """Move the piece by the given offsets.

        ``dx`` moves horizontally (columns) and ``dy`` moves vertically
        (rows).
        """

        self.row += dy
        self.col += dx

    def blocks(self) -> List[Tuple[int, int]]:
        """Return the global ``(row, col)`` coordinates for this piece."""

        return [(self.row + int(r), self.col + int(c)) for r, c in np.argwhere(self.shape)]
