from __future__ import annotations

import logging
from collections.abc import Callable

import redis

from guessgame.api.models import Feedback, FeedbackEvent, GameSettings, GameState
from guessgame.streams import publish_feedback_event

logger = logging.getLogger(__name__)

# Device-side effect (vibration etc). We only decide when and how strong.
FeedbackHook = Callable[[FeedbackEvent], None]


def feedback_event_for_guess(state: GameState) -> FeedbackEvent:
    """Event for a state produced by `apply_guess`."""

    if state.feedback == Feedback.correct:
        return FeedbackEvent.success
    return FeedbackEvent.impact_medium


def feedback_event_for_new_game() -> FeedbackEvent:
    return FeedbackEvent.impact_light


def emit_feedback(hook: FeedbackHook | None, event: FeedbackEvent, settings: GameSettings) -> FeedbackEvent | None:
    """Fire `event` through `hook` unless haptics are turned off.

    Returns the event actually fired, or None.
    """

    if not settings.haptic_enabled:
        return None
    if hook is not None:
        hook(event)
    return event


def stream_feedback_hook(*, r: redis.Redis) -> FeedbackHook:
    """Hook that hands events to the device layer through a Redis stream."""

    def _hook(event: FeedbackEvent) -> None:
        try:
            publish_feedback_event(r=r, event=event.value)
        except redis.RedisError:
            logger.warning("Error publishing feedback event %s", event.value, exc_info=True)

    return _hook
