from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import redis

from guessgame.api.models import FeedbackEvent, GameSettings, GameState, GameStats, GameStatus
from guessgame.engine import apply_guess, start_new_game, validate_guess
from guessgame.feedback import (
    FeedbackHook,
    emit_feedback,
    feedback_event_for_guess,
    feedback_event_for_new_game,
)
from guessgame.fsm import GameNotPlayingError
from guessgame.game_store import (
    clear_all,
    load_game_settings,
    load_game_state,
    load_game_stats,
    save_game_settings,
    save_game_state,
    update_game_stats,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GameSession:
    state: GameState
    settings: GameSettings
    stats: GameStats
    feedback_event: FeedbackEvent | None = None


@dataclass(frozen=True, slots=True)
class GuessOutcome:
    """Result of one accepted guess.

    - `feedback_event`: the event fired for the device layer (None when haptics are off).
    """

    state: GameState
    stats: GameStats
    feedback_event: FeedbackEvent | None


def _needs_new_target(state: GameState) -> bool:
    return state.game_status == GameStatus.new or state.target_number == 0


def load_session(*, r: redis.Redis, rng: random.Random | None = None) -> GameSession:
    """Load all three records; start a round if none is in progress yet."""

    state = load_game_state(r=r)
    settings = load_game_settings(r=r)
    stats = load_game_stats(r=r)

    if _needs_new_target(state):
        state = start_new_game(settings, rng=rng)
        save_game_state(r=r, state=state)
        logger.info("Started first round (range %d..%d)", state.min_range, state.max_range)

    return GameSession(state=state, settings=settings, stats=stats)


def submit_guess(*, r: redis.Redis, raw: str, hook: FeedbackHook | None = None) -> GuessOutcome:
    """Validate and apply one raw guess.

    Raises GameNotPlayingError if no round is in progress, or a GuessValidationError
    subclass for bad input. Neither changes any stored record.
    """

    state = load_game_state(r=r)
    if state.game_status != GameStatus.playing:
        raise GameNotPlayingError(f"Guesses are not accepted while the game is '{state.game_status.value}'")

    guess = validate_guess(raw, state.min_range, state.max_range)
    new_state = apply_guess(state, guess)
    save_game_state(r=r, state=new_state)
    logger.debug("Guess %d -> %s (attempt %d)", guess, new_state.feedback, new_state.attempts)

    if new_state.game_status == GameStatus.won:
        # Separate write from the state above; stats are re-read at this point.
        stats = update_game_stats(r=r, attempts=new_state.attempts)
        logger.info("Round won in %d attempts", new_state.attempts)
    else:
        stats = load_game_stats(r=r)

    settings = load_game_settings(r=r)
    event = emit_feedback(hook, feedback_event_for_guess(new_state), settings)
    return GuessOutcome(state=new_state, stats=stats, feedback_event=event)


def new_game(*, r: redis.Redis, hook: FeedbackHook | None = None, rng: random.Random | None = None) -> GameSession:
    current = load_game_state(r=r)
    settings = load_game_settings(r=r)
    stats = load_game_stats(r=r)

    state = start_new_game(settings, current=current.game_status, rng=rng)
    save_game_state(r=r, state=state)
    logger.info("New round (range %d..%d)", state.min_range, state.max_range)

    event = emit_feedback(hook, feedback_event_for_new_game(), settings)
    return GameSession(state=state, settings=settings, stats=stats, feedback_event=event)


def update_settings(*, r: redis.Redis, settings: GameSettings) -> GameSettings:
    """Persist new settings. The round in progress keeps its range until the next new game."""

    save_game_settings(r=r, settings=settings)
    return settings


def reset_all(*, r: redis.Redis) -> None:
    clear_all(r=r)
    logger.info("Cleared all stored game data")
