from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from guessgame.api.models import GameStatus


class GameNotPlayingError(ValueError):
    """Raised when a guess arrives while no round is in progress."""


class GameFSM(StateMachine):
    """Guards `gameStatus` transitions.

    - start: new -> playing, playing -> playing, won -> playing (always with a fresh target)
    - miss:  playing -> playing
    - hit:   playing -> won

    The engine computes the rest of the state; the FSM only decides which status follows.
    """

    new = State(GameStatus.new.value, value=GameStatus.new.value, initial=True)
    playing = State(GameStatus.playing.value, value=GameStatus.playing.value)
    won = State(GameStatus.won.value, value=GameStatus.won.value)

    start = new.to(playing) | playing.to.itself() | won.to(playing)
    miss = playing.to.itself()
    hit = playing.to(won)

    def __init__(self, status: GameStatus | str = GameStatus.new):
        super().__init__(start_value=GameStatus(status).value)

    @property
    def status(self) -> GameStatus:
        return GameStatus(str(self.current_state.value))


def next_status_after_guess(status: GameStatus, *, correct: bool) -> GameStatus:
    fsm = GameFSM(status)
    try:
        if correct:
            fsm.hit()
        else:
            fsm.miss()
    except TransitionNotAllowed as e:
        raise GameNotPlayingError(f"Guesses are not accepted while the game is '{GameStatus(status).value}'") from e
    return fsm.status
