"""Utility helpers for the game engine."""

from __future__ import annotations

from .board import Board
from .config import (
    DEFAULT_INTERVAL_MS,
    INTERVAL_DECREMENT_MS,
    MIN_INTERVAL_MS,
    SCORE_STEP,
)
from .tetromino import Piece, rotate_clockwise


# Column offsets tried, in order, when a rotation collides in place.
KICK_OFFSETS = (0, -1, 1, -2, 2)


def gravity_interval_ms(
    score: int,
    *,
    default: int = DEFAULT_INTERVAL_MS,
    decrement: int = INTERVAL_DECREMENT_MS,
    minimum: int = MIN_INTERVAL_MS,
    step: int = SCORE_STEP,
) -> int:
    """Return the fall interval in milliseconds for ``score``.

    Every ``step`` points speed the piece up by ``decrement`` milliseconds
    until ``minimum`` is reached.
    """

    return max(default - (score // step) * decrement, minimum)


def can_move(board: Board, piece: Piece, dx: int, dy: int) -> bool:
    """Return ``True`` if ``piece`` can move by ``dx`` and ``dy`` on ``board``."""

    return not board.collides(piece.shape, piece.row + dy, piece.col + dx)


def try_rotate(board: Board, piece: Piece) -> bool:
    """Rotate ``piece`` clockwise in place, kicking it sideways if needed.

    The rotated shape is tried at the same row with each offset from
    ``KICK_OFFSETS``.  The first position that fits wins.  When none fits the
    piece is left as it was and ``False`` is returned.
    """

    rotated = rotate_clockwise(piece.shape)
    for offset in KICK_OFFSETS:
        col = piece.col + offset
        if not board.collides(rotated, piece.row, col):
            piece.shape = rotated
            piece.col = col
            return True
    return False
