"""Game loop and command dispatcher.

:class:`Game` owns the single :class:`~fadasblock.game_state.GameState` and is
the only thing that mutates it.  Gravity and the elapsed-time counter are two
repeating tasks obtained from a scheduler; player commands are plain method
calls.  Every call runs to completion before the next one starts, so each
tick or command is one atomic state transition.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Protocol

from .board import Board
from .config import GameConfig
from .game_state import GameState, Snapshot, Status
from .ledger import ScoreLedger
from .scheduler import ManualScheduler, RepeatingTask, Scheduler
from .tetromino import Piece, random_tetromino
from .utils import can_move, gravity_interval_ms, try_rotate


LOGGER = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, snapshot: Snapshot) -> None:
        ...


class Game:
    """Drive a game session from start to game over."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        ledger: Optional[ScoreLedger] = None,
        renderer: Optional[Renderer] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.scheduler = scheduler or ManualScheduler()
        self.ledger = ledger
        self.renderer = renderer
        self.rng = rng or random.Random(self.config.seed)
        self.state = GameState(
            board=Board(self.config.rows, self.config.cols),
            interval_ms=self.config.default_interval_ms,
        )
        self._gravity_task: Optional[RepeatingTask] = None
        self._clock_task: Optional[RepeatingTask] = None

    # Queries ---------------------------------------------------------
    @property
    def status(self) -> Status:
        return self.state.status

    @property
    def speed_factor(self) -> float:
        """How many times faster than the starting speed pieces fall."""

        return self.config.default_interval_ms / self.state.interval_ms

    def snapshot(self) -> Snapshot:
        return self.state.snapshot()

    # Commands --------------------------------------------------------
    def start(self, name: str = "") -> None:
        """Begin a fresh game for ``name``.

        Ignored while a game is in progress; after a game over it starts a new
        one.
        """

        if self.state.status in (Status.RUNNING, Status.PAUSED):
            LOGGER.debug("Start ignored: game already in progress")
            return
        state = self.state
        state.board.reset()
        state.player = name
        state.score = 0
        state.lines = 0
        state.elapsed = 0
        state.interval_ms = self.config.default_interval_ms
        state.active = self._spawn(random_tetromino(self.rng))
        state.upcoming = random_tetromino(self.rng)
        state.status = Status.RUNNING
        self._start_timers()
        LOGGER.info("Game started for %s", name or "anonymous player")
        self._notify()

    def toggle_pause(self) -> None:
        state = self.state
        if state.status is Status.RUNNING:
            self._stop_timers()
            state.status = Status.PAUSED
            LOGGER.info("Paused")
        elif state.status is Status.PAUSED:
            state.status = Status.RUNNING
            self._start_timers()
            LOGGER.info("Resumed")
        else:
            LOGGER.debug("Pause ignored: game not running")
            return
        self._notify()

    def move_left(self) -> None:
        self._shift(-1)

    def move_right(self) -> None:
        self._shift(1)

    def rotate(self) -> None:
        if not self._accepts_commands():
            return
        if try_rotate(self.state.board, self.state.active):
            self._notify()

    def soft_drop(self) -> None:
        self.tick()

    def hard_drop(self) -> None:
        if not self._accepts_commands():
            return
        board, piece = self.state.board, self.state.active
        while can_move(board, piece, 0, 1):
            piece.move(0, 1)
        self.tick()

    def tick(self) -> None:
        """Apply one step of gravity, locking the piece when it lands."""

        if not self._accepts_commands():
            return
        state = self.state
        if can_move(state.board, state.active, 0, 1):
            state.active.move(0, 1)
        else:
            self._lock_and_spawn()
            if state.status is Status.GAME_OVER:
                return
        self._notify()

    # Internals -------------------------------------------------------
    def _accepts_commands(self) -> bool:
        if self.state.status is not Status.RUNNING or self.state.active is None:
            LOGGER.debug("Command ignored in state %s", self.state.status.value)
            return False
        return True

    def _shift(self, dx: int) -> None:
        if not self._accepts_commands():
            return
        if can_move(self.state.board, self.state.active, dx, 0):
            self.state.active.move(dx, 0)
            self._notify()

    def _spawn(self, shape) -> Piece:
        return Piece(shape, row=self.config.spawn_row, col=self.config.spawn_col)

    def _lock_and_spawn(self) -> None:
        state = self.state
        cleared = state.board.lock(state.active)
        if cleared:
            state.score += cleared * self.config.score_per_line
            state.lines += cleared
            LOGGER.debug("Cleared %d row(s). Score: %d", cleared, state.score)
            self._update_speed()

        state.active = self._spawn(state.upcoming)
        state.upcoming = random_tetromino(self.rng)
        if state.board.collides(state.active.shape, state.active.row, state.active.col):
            self._end_game()

    def _update_speed(self) -> None:
        config = self.config
        interval = gravity_interval_ms(
            self.state.score,
            default=config.default_interval_ms,
            decrement=config.interval_decrement_ms,
            minimum=config.min_interval_ms,
            step=config.score_step,
        )
        if interval != self.state.interval_ms:
            LOGGER.debug("Drop interval %d ms -> %d ms", self.state.interval_ms, interval)
        self.state.interval_ms = interval
        self._restart_gravity()

    def _restart_gravity(self) -> None:
        if self._gravity_task is not None:
            self._gravity_task.cancel()
        self._gravity_task = self.scheduler.call_every(self.state.interval_ms, self.tick)

    def _clock_tick(self) -> None:
        if self.state.status is not Status.RUNNING:
            return
        self.state.elapsed += 1
        self._notify()

    def _start_timers(self) -> None:
        self._stop_timers()
        self._gravity_task = self.scheduler.call_every(self.state.interval_ms, self.tick)
        self._clock_task = self.scheduler.call_every(self.config.clock_interval_ms, self._clock_tick)

    def _stop_timers(self) -> None:
        for task in (self._gravity_task, self._clock_task):
            if task is not None:
                task.cancel()
        self._gravity_task = None
        self._clock_task = None

    def _end_game(self) -> None:
        state = self.state
        self._stop_timers()
        state.status = Status.GAME_OVER
        LOGGER.info("Game over. Score: %d, lines: %d", state.score, state.lines)
        if self.ledger is not None:
            self.ledger.record(state.player, state.score)
        self._notify()

    def _notify(self) -> None:
        if self.renderer is not None:
            self.renderer.render(self.state.snapshot())


__all__ = ["Game", "Renderer"]
