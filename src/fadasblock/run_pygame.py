"""pygame front-end for the game engine.

The window shows the board on the left and a side panel with the next piece,
the score readouts and the best scores.  Gravity and the clock run as
``asyncio`` timers on the same loop that pumps pygame events, so key presses
and ticks never overlap.

Keys: arrows move/rotate/soft drop, Space hard drops and P pauses.  Between
games, typing edits the player name, Enter starts a new game and Delete
twice clears the score table.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Tuple

import pygame

from .config import BLOCK_SIZE, COLS, ROWS
from .game import Game
from .game_state import Status
from .ledger import DEFAULT_NAME, JsonFileStore, ScoreLedger
from .render import BoardRenderer, Color, format_elapsed, format_score, format_speed
from .scheduler import AsyncioScheduler


LOGGER = logging.getLogger(__name__)

# Frames per second to run the game loop at
FPS = 60

BOARD_WIDTH = COLS * BLOCK_SIZE
BOARD_HEIGHT = ROWS * BLOCK_SIZE
PANEL_WIDTH = 220
PREVIEW_RECT = (BOARD_WIDTH + 50, 20, 120, 120)

BACKGROUND: Color = (18, 20, 26)
TEXT_COLOR: Color = (220, 224, 232)

DEFAULT_SCORES_PATH = "~/.fadasblock_scores.json"

MAX_NAME_LENGTH = 16


class PygameSurface:
    """Adapt a ``pygame.Surface`` to :class:`fadasblock.render.DrawingSurface`."""

    def __init__(self, surface: pygame.Surface, background: Color = BACKGROUND) -> None:
        self.surface = surface
        self.background = background
        self.width, self.height = surface.get_size()

    def clear(self) -> None:
        self.surface.fill(self.background)

    def fill_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None:
        pygame.draw.rect(self.surface, color, pygame.Rect(x, y, w, h))

    def stroke_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None:
        pygame.draw.rect(self.surface, color, pygame.Rect(x, y, w, h), 1)


def handle_key(event: pygame.event.Event, game: Game, player: str) -> None:
    """Translate a key press into a game command."""

    key = event.key
    if key == pygame.K_LEFT:
        game.move_left()
    elif key == pygame.K_RIGHT:
        game.move_right()
    elif key == pygame.K_DOWN:
        game.soft_drop()
    elif key == pygame.K_UP:
        game.rotate()
    elif key == pygame.K_SPACE:
        game.hard_drop()
    elif key == pygame.K_p:
        game.toggle_pause()
    elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
        game.start(player)


def scores_path() -> Path:
    return Path(os.environ.get("FADASBLOCK_SCORES", DEFAULT_SCORES_PATH)).expanduser()


class GameRunner:
    """Own the window and the event loop for one desktop session.

    Between games the keyboard edits the player name: printable keys append,
    Backspace deletes and Enter starts.  Delete pressed twice in a row wipes
    the score table.
    """

    def __init__(self, player: str, ledger: ScoreLedger) -> None:
        self.player = player[:MAX_NAME_LENGTH]
        self.ledger = ledger
        self.game: Optional[Game] = None
        self.confirm_clear = False
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False

    def on_key(self, event: pygame.event.Event) -> None:
        """Route a key press to name entry, the score table or the game."""

        if self.game.status in (Status.RUNNING, Status.PAUSED):
            handle_key(event, self.game, self.player)
            return

        key = event.key
        if key == pygame.K_DELETE:
            if self.confirm_clear:
                self.ledger.clear()
                LOGGER.info("Score table cleared")
            self.confirm_clear = not self.confirm_clear
            return
        self.confirm_clear = False

        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.game.start(self.player)
        elif key == pygame.K_BACKSPACE:
            self.player = self.player[:-1]
        else:
            char = getattr(event, "unicode", "")
            if char and char.isprintable() and len(self.player) < MAX_NAME_LENGTH:
                self.player += char

    def _status_line(self) -> str:
        status = self.game.status
        if self.confirm_clear:
            return "Delete again to clear scores"
        if status is Status.IDLE:
            return f"Name: {self.player}_  (Enter)"
        if status is Status.PAUSED:
            return "Paused (P to resume)"
        if status is Status.GAME_OVER:
            return f"Game over. Name: {self.player}_"
        return f"Player: {self.player or DEFAULT_NAME}"

    def _draw_panel(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        panel = pygame.Rect(BOARD_WIDTH, PREVIEW_RECT[1] + PREVIEW_RECT[3], PANEL_WIDTH, BOARD_HEIGHT)
        screen.fill(BACKGROUND, panel)
        state = self.game.state
        lines = [
            self._status_line(),
            "",
            f"Score  {format_score(state.score)}",
            f"Lines  {state.lines}",
            f"Time   {format_elapsed(state.elapsed)}",
            f"Speed  {format_speed(self.game.speed_factor)}",
            "",
            "Best scores",
        ]
        lines += [f"{i:>2}. {e.name[:10]:<10} {e.points}" for i, e in enumerate(self.ledger.entries, 1)]
        x, y = panel.x + 12, panel.y + 16
        for text in lines:
            screen.blit(font.render(text, True, TEXT_COLOR), (x, y))
            y += font.get_linesize()

    def _layout(self) -> Tuple[pygame.Surface, BoardRenderer]:
        screen = pygame.display.set_mode((BOARD_WIDTH + PANEL_WIDTH, BOARD_HEIGHT))
        pygame.display.set_caption("fadasblock")
        screen.fill(BACKGROUND)
        board = screen.subsurface(pygame.Rect(0, 0, BOARD_WIDTH, BOARD_HEIGHT))
        preview = screen.subsurface(pygame.Rect(*PREVIEW_RECT))
        return screen, BoardRenderer(PygameSurface(board), PygameSurface(preview))

    async def run(self) -> None:
        pygame.init()
        screen, renderer = self._layout()
        font = pygame.font.Font(None, 24)
        clock = pygame.time.Clock()

        self.game = Game(
            scheduler=AsyncioScheduler(asyncio.get_running_loop()),
            ledger=self.ledger,
            renderer=renderer,
        )
        renderer.render(self.game.snapshot())
        LOGGER.info("Window ready")

        self._running = True
        while self._running:
            clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    self.on_key(event)
            self._draw_panel(screen, font)
            pygame.display.flip()
            # Let the gravity and clock timers run between frames.
            await asyncio.sleep(0)

        pygame.quit()
        LOGGER.info("Window closed")


def main(player: Optional[str] = None) -> None:
    level = os.environ.get("FADASBLOCK_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    name = player or os.environ.get("FADASBLOCK_PLAYER", "")
    runner = GameRunner(name, ScoreLedger(JsonFileStore(scores_path())))
    asyncio.run(runner.run())


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
