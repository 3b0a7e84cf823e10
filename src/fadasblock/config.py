"""Tunable gameplay constants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


# Dimensions of the playfield.
COLS = 10
ROWS = 20

# Gravity timing in milliseconds.  Every ``SCORE_STEP`` points shave
# ``INTERVAL_DECREMENT_MS`` off the drop interval down to ``MIN_INTERVAL_MS``.
DEFAULT_INTERVAL_MS = 500
MIN_INTERVAL_MS = 100
INTERVAL_DECREMENT_MS = 50
SCORE_STEP = 1000

SCORE_PER_LINE = 100

# Every new piece appears with its top-left cell here.
SPAWN_ROW = 0
SPAWN_COL = 3

# The elapsed-time counter advances once per second.
CLOCK_INTERVAL_MS = 1000

LEDGER_CAPACITY = 10
STORAGE_KEY = "fadasblock_scores"

# Size of a single board cell in pixels
BLOCK_SIZE = 30


@dataclass(frozen=True)
class GameConfig:
    """Gameplay settings handed to :class:`~fadasblock.game.Game`."""

    cols: int = COLS
    rows: int = ROWS
    default_interval_ms: int = DEFAULT_INTERVAL_MS
    min_interval_ms: int = MIN_INTERVAL_MS
    interval_decrement_ms: int = INTERVAL_DECREMENT_MS
    score_step: int = SCORE_STEP
    score_per_line: int = SCORE_PER_LINE
    spawn_row: int = SPAWN_ROW
    spawn_col: int = SPAWN_COL
    clock_interval_ms: int = CLOCK_INTERVAL_MS
    seed: Optional[int] = None
