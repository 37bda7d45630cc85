from __future__ import annotations

import logging
from typing import TypeVar

import redis
from pydantic import ValidationError

from guessgame.api.models import CamelModel, GameSettings, GameState, GameStats
from guessgame.engine import record_win

logger = logging.getLogger(__name__)

GAME_STATE_KEY = "gameState"
GAME_SETTINGS_KEY = "gameSettings"
GAME_STATS_KEY = "gameStats"

ALL_KEYS = (GAME_STATE_KEY, GAME_SETTINGS_KEY, GAME_STATS_KEY)

RecordT = TypeVar("RecordT", bound=CamelModel)


def _load(*, r: redis.Redis, key: str, model: type[RecordT]) -> RecordT:
    """Read one record, falling back to the model's defaults.

    Missing keys, undecodable payloads and store errors all degrade to the default;
    callers never see a persistence error.
    """

    try:
        raw = r.get(key)
    except (redis.RedisError, UnicodeDecodeError):
        # decode_responses=True: non-UTF-8 bytes fail inside the client, before validation.
        logger.warning("Error loading %s; using defaults", key, exc_info=True)
        return model()

    if not raw:
        return model()

    try:
        return model.model_validate_json(raw)
    except ValidationError:
        logger.warning("Stored %s is unreadable; using defaults", key, exc_info=True)
        return model()


def _save(*, r: redis.Redis, key: str, value: CamelModel, exclude: set[str] | None = None) -> None:
    try:
        r.set(key, value.model_dump_json(by_alias=True, exclude=exclude))
    except redis.RedisError:
        # Best-effort: a dropped write only leaves a stale record behind.
        logger.warning("Error saving %s", key, exc_info=True)


def load_game_state(*, r: redis.Redis) -> GameState:
    return _load(r=r, key=GAME_STATE_KEY, model=GameState)


def save_game_state(*, r: redis.Redis, state: GameState) -> None:
    # lastGuess is left out of the document until a guess has been made.
    exclude = {"last_guess"} if state.last_guess is None else None
    _save(r=r, key=GAME_STATE_KEY, value=state, exclude=exclude)


def load_game_settings(*, r: redis.Redis) -> GameSettings:
    return _load(r=r, key=GAME_SETTINGS_KEY, model=GameSettings)


def save_game_settings(*, r: redis.Redis, settings: GameSettings) -> None:
    _save(r=r, key=GAME_SETTINGS_KEY, value=settings)


def load_game_stats(*, r: redis.Redis) -> GameStats:
    return _load(r=r, key=GAME_STATS_KEY, model=GameStats)


def save_game_stats(*, r: redis.Redis, stats: GameStats) -> None:
    _save(r=r, key=GAME_STATS_KEY, value=stats)


def update_game_stats(*, r: redis.Redis, attempts: int) -> GameStats:
    """Count a win of `attempts` guesses against the stats as stored right now."""

    stats = record_win(attempts, load_game_stats(r=r))
    save_game_stats(r=r, stats=stats)
    return stats


def clear_all(*, r: redis.Redis) -> None:
    try:
        r.delete(*ALL_KEYS)
    except redis.RedisError:
        logger.warning("Error clearing all data", exc_info=True)
