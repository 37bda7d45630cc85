from __future__ import annotations

import random
import re
from datetime import UTC, datetime

from guessgame.api.models import Feedback, GameSettings, GameState, GameStats, GameStatus
from guessgame.fsm import GameFSM, next_status_after_guess


class GuessValidationError(ValueError):
    """A rejected guess. `message` is meant to be shown to the player as-is."""

    code = "invalid_guess"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyInputError(GuessValidationError):
    code = "empty_input"

    def __init__(self) -> None:
        super().__init__("Please enter a number")


class NotANumberError(GuessValidationError):
    code = "not_a_number"

    def __init__(self) -> None:
        super().__init__("Please enter a valid number")


class OutOfRangeError(GuessValidationError):
    code = "out_of_range"

    def __init__(self, min_range: int, max_range: int):
        super().__init__(f"Please enter a number between {min_range} and {max_range}")
        self.min_range = min_range
        self.max_range = max_range


# ASCII digits only: int() alone would also take "5_0" or non-Latin digits.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _now() -> datetime:
    return datetime.now(tz=UTC)


def generate_target(min_range: int, max_range: int, *, rng: random.Random | None = None) -> int:
    """Uniform integer in [min_range, max_range], both ends inclusive."""

    if min_range > max_range:
        raise ValueError("min_range must be <= max_range")
    return (rng or random).randint(min_range, max_range)


def validate_guess(raw: str | None, min_range: int, max_range: int) -> int:
    text = (raw or "").strip()
    if not text:
        raise EmptyInputError()

    if not _INTEGER_RE.fullmatch(text):
        raise NotANumberError()
    try:
        value = int(text)
    except ValueError as e:
        # Only the interpreter's digit limit can fail here; such a number is out of range anyway.
        raise OutOfRangeError(min_range, max_range) from e

    if value < min_range or value > max_range:
        raise OutOfRangeError(min_range, max_range)
    return value


def apply_guess(state: GameState, guess: int) -> GameState:
    """Return the state after `guess`; `state` itself is left untouched.

    Raises GameNotPlayingError unless the round is in progress.
    """

    correct = guess == state.target_number
    status = next_status_after_guess(state.game_status, correct=correct)

    if correct:
        feedback = Feedback.correct
    elif guess < state.target_number:
        feedback = Feedback.higher
    else:
        feedback = Feedback.lower

    return state.model_copy(
        update={
            "attempts": state.attempts + 1,
            "last_guess": guess,
            "feedback": feedback,
            "game_status": status,
        }
    )


def record_win(attempts: int, stats: GameStats, *, now: datetime | None = None) -> GameStats:
    best = attempts if stats.best_score is None else min(stats.best_score, attempts)
    return GameStats(
        games_played=stats.games_played + 1,
        best_score=best,
        last_played_date=now or _now(),
    )


def start_new_game(
    settings: GameSettings,
    *,
    current: GameStatus = GameStatus.new,
    rng: random.Random | None = None,
) -> GameState:
    """Fresh round using the settings' range (state keeps a copy of it)."""

    fsm = GameFSM(current)
    fsm.start()

    return GameState(
        target_number=generate_target(settings.min_range, settings.max_range, rng=rng),
        attempts=0,
        game_status=fsm.status,
        min_range=settings.min_range,
        max_range=settings.max_range,
        last_guess=None,
        feedback=None,
    )
