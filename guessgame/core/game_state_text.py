from __future__ import annotations

from guessgame.api.models import Feedback, GameState, GameStatus, SessionText


_FEEDBACK_TEXT: dict[Feedback, str] = {
    Feedback.higher: "Go Higher!",
    Feedback.lower: "Go Lower!",
    Feedback.correct: "Correct!",
}


def feedback_text(state: GameState) -> str:
    if state.feedback is None:
        return "Enter your guess!"
    return _FEEDBACK_TEXT[state.feedback]


def range_hint(state: GameState) -> str:
    return f"Between {state.min_range} and {state.max_range}"


def input_placeholder(state: GameState) -> str:
    return f"Enter {state.min_range}-{state.max_range}"


def last_guess_text(state: GameState) -> str | None:
    if state.last_guess is None:
        return None
    return f"Your last guess: {state.last_guess}"


def win_message(state: GameState) -> str | None:
    if state.game_status != GameStatus.won:
        return None
    noun = "attempt" if state.attempts == 1 else "attempts"
    return f"You guessed the number {state.target_number} in {state.attempts} {noun}!"


def session_text(state: GameState) -> SessionText:
    """All player-facing strings for the current state, in one payload."""

    return SessionText(
        feedback=feedback_text(state),
        range_hint=range_hint(state),
        placeholder=input_placeholder(state),
        last_guess=last_guess_text(state),
        win_message=win_message(state),
    )
