import pygame
import pytest

from fadasblock.game import Game
from fadasblock.game_state import Status
from fadasblock.ledger import MemoryStore, ScoreLedger
from fadasblock.run_pygame import MAX_NAME_LENGTH, GameRunner, handle_key, scores_path
from fadasblock.scheduler import ManualScheduler
from fadasblock.tetromino import TETROMINOES, Piece, TetrominoType


class FakeGame:
    def __init__(self) -> None:
        self.calls = []

    def __getattr__(self, name):
        return lambda *args: self.calls.append((name, *args))


@pytest.mark.parametrize(
    "key, expected",
    [
        (pygame.K_LEFT, ("move_left",)),
        (pygame.K_RIGHT, ("move_right",)),
        (pygame.K_DOWN, ("soft_drop",)),
        (pygame.K_UP, ("rotate",)),
        (pygame.K_SPACE, ("hard_drop",)),
        (pygame.K_p, ("toggle_pause",)),
        (pygame.K_RETURN, ("start", "ana")),
    ],
)
def test_keys_map_to_commands(key, expected):
    game = FakeGame()
    handle_key(pygame.event.Event(pygame.KEYDOWN, key=key), game, "ana")
    assert game.calls == [expected]


def test_unmapped_key_is_ignored():
    game = FakeGame()
    handle_key(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_q), game, "ana")
    assert game.calls == []


def test_scores_path_from_environment(monkeypatch, tmp_path):
    target = tmp_path / "scores.json"
    monkeypatch.setenv("FADASBLOCK_SCORES", str(target))
    assert scores_path() == target
    monkeypatch.delenv("FADASBLOCK_SCORES")
    assert scores_path().name == ".fadasblock_scores.json"


def key_event(key, char=""):
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode=char)


def make_runner(name=""):
    ledger = ScoreLedger(MemoryStore(), clock=lambda: "2024-01-01T00:00:00.000Z")
    runner = GameRunner(name, ledger)
    runner.game = Game(scheduler=ManualScheduler(), ledger=ledger)
    return runner


def type_text(runner, text):
    for char in text:
        runner.on_key(key_event(ord(char.lower()), char))


def test_name_typed_before_start_is_used_for_the_game():
    runner = make_runner()
    type_text(runner, "Anaa")
    runner.on_key(key_event(pygame.K_BACKSPACE))
    assert runner.player == "Ana"
    runner.on_key(key_event(pygame.K_RETURN, "\r"))
    assert runner.game.status is Status.RUNNING
    assert runner.game.state.player == "Ana"


def test_letters_drive_the_game_while_running():
    runner = make_runner("ana")
    runner.on_key(key_event(pygame.K_RETURN, "\r"))
    runner.on_key(key_event(pygame.K_p, "p"))
    assert runner.game.status is Status.PAUSED
    assert runner.player == "ana"


def test_name_length_is_capped_and_control_chars_ignored():
    runner = make_runner()
    type_text(runner, "x" * (MAX_NAME_LENGTH + 5))
    runner.on_key(key_event(pygame.K_TAB, "\t"))
    assert runner.player == "x" * MAX_NAME_LENGTH


def test_blank_name_is_recorded_as_anon():
    runner = make_runner()
    runner.on_key(key_event(pygame.K_RETURN, "\r"))
    state = runner.game.state
    state.board.grid[0, 4] = True
    state.active = Piece(TETROMINOES[TetrominoType.O].copy(), row=18, col=0)
    state.upcoming = TETROMINOES[TetrominoType.I].copy()
    runner.game.tick()
    assert runner.game.status is Status.GAME_OVER
    assert runner.ledger.entries[0].name == "Anon"


def test_delete_twice_clears_scores():
    runner = make_runner()
    runner.ledger.record("bob", 300)
    runner.on_key(key_event(pygame.K_DELETE))
    assert runner.confirm_clear
    assert len(runner.ledger.entries) == 1
    runner.on_key(key_event(pygame.K_DELETE))
    assert runner.ledger.entries == []
    assert not runner.confirm_clear


def test_other_key_cancels_clear_confirmation():
    runner = make_runner()
    runner.ledger.record("bob", 300)
    runner.on_key(key_event(pygame.K_DELETE))
    type_text(runner, "a")
    runner.on_key(key_event(pygame.K_DELETE))
    assert len(runner.ledger.entries) == 1
    assert runner.player == "a"


def test_delete_does_not_clear_scores_during_a_game():
    runner = make_runner("ana")
    runner.ledger.record("bob", 300)
    runner.on_key(key_event(pygame.K_RETURN, "\r"))
    runner.on_key(key_event(pygame.K_DELETE))
    runner.on_key(key_event(pygame.K_DELETE))
    assert len(runner.ledger.entries) == 1
    assert not runner.confirm_clear
