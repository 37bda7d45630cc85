from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class GameStatus(StrEnum):
    new = "new"
    playing = "playing"
    won = "won"


class Feedback(StrEnum):
    # Direction the *player* should move next.
    higher = "higher"
    lower = "lower"
    correct = "correct"


class FeedbackEvent(StrEnum):
    success = "success"
    impact_light = "impact-light"
    impact_medium = "impact-medium"


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON (matches the persisted record layout)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GameState(CamelModel):
    target_number: int = 0
    attempts: int = Field(default=0, ge=0)
    game_status: GameStatus = GameStatus.new
    min_range: int = 1
    max_range: int = 100
    last_guess: int | None = None
    feedback: Feedback | None = None

    @model_validator(mode="after")
    def _check_range(self) -> GameState:
        if self.min_range > self.max_range:
            raise ValueError("minRange must be <= maxRange")
        # Target is only meaningful once a round has started.
        if self.game_status != GameStatus.new and not self.min_range <= self.target_number <= self.max_range:
            raise ValueError("targetNumber must lie within [minRange, maxRange]")
        return self


class GameSettings(CamelModel):
    haptic_enabled: bool = True
    min_range: int = 1
    max_range: int = 100

    @model_validator(mode="after")
    def _check_range(self) -> GameSettings:
        if self.min_range > self.max_range:
            raise ValueError("minRange must be <= maxRange")
        return self


class GameStats(CamelModel):
    games_played: int = Field(default=0, ge=0)
    best_score: int | None = None
    last_played_date: datetime | None = None


class GuessRequest(BaseModel):
    # Raw text as typed by the player; validated by the engine, not by pydantic.
    guess: str


class PublicGameState(CamelModel):
    """GameState as shown to the player: the target stays hidden until the round is won."""

    target_number: int | None = None
    attempts: int
    game_status: GameStatus
    min_range: int
    max_range: int
    last_guess: int | None = None
    feedback: Feedback | None = None

    @classmethod
    def from_state(cls, state: GameState) -> PublicGameState:
        data = state.model_dump()
        if state.game_status != GameStatus.won:
            data["target_number"] = None
        return cls.model_validate(data)


class SessionText(CamelModel):
    feedback: str
    range_hint: str
    placeholder: str
    last_guess: str | None = None
    win_message: str | None = None


class SessionResponse(CamelModel):
    state: PublicGameState
    settings: GameSettings
    stats: GameStats
    text: SessionText


class GuessResponse(CamelModel):
    state: PublicGameState
    stats: GameStats
    feedback_event: FeedbackEvent | None = None
    text: SessionText


class ErrorDetail(BaseModel):
    code: str
    message: str
