from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status
import redis

from guessgame.api.deps import get_redis
from guessgame.api.models import (
    ErrorDetail,
    FeedbackEvent,
    GameSettings,
    GameState,
    GameStats,
    GuessRequest,
    GuessResponse,
    PublicGameState,
    SessionResponse,
)
from guessgame.core.game_state_text import session_text
from guessgame.engine import GuessValidationError
from guessgame.feedback import stream_feedback_hook
from guessgame.fsm import GameNotPlayingError
from guessgame.game_store import load_game_settings, load_game_stats
from guessgame.session import GameSession, load_session, new_game, reset_all, submit_guess, update_settings
from guessgame.websocket_hub import listeners

router = APIRouter()


def _session_response(session: GameSession) -> SessionResponse:
    return SessionResponse(
        state=PublicGameState.from_state(session.state),
        settings=session.settings,
        stats=session.stats,
        text=session_text(session.state),
    )


async def _broadcast_session_updated(state: GameState, feedback_event: FeedbackEvent | None = None) -> None:
    await listeners.notify(
        {
            "type": "session_updated",
            "state": PublicGameState.from_state(state).model_dump(mode="json", by_alias=True),
            "feedbackEvent": feedback_event.value if feedback_event is not None else None,
        }
    )


@router.websocket("/ws/session")
async def session_updates_ws(websocket: WebSocket) -> None:
    await listeners.attach(websocket)
    try:
        # Incoming text is ignored; reading just keeps the socket open until the client leaves.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        listeners.detach(websocket)


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/session", response_model=SessionResponse)
async def get_session_route(r: redis.Redis = Depends(get_redis)) -> SessionResponse:
    return _session_response(load_session(r=r))


@router.post(
    "/session/guess",
    response_model=GuessResponse,
    responses={
        status.HTTP_409_CONFLICT: {"description": "No round in progress"},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorDetail, "description": "Rejected guess"},
    },
)
async def guess_route(payload: GuessRequest, r: redis.Redis = Depends(get_redis)) -> GuessResponse:
    try:
        outcome = submit_guess(r=r, raw=payload.guess, hook=stream_feedback_hook(r=r))
    except GameNotPlayingError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except GuessValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=ErrorDetail(code=e.code, message=e.message).model_dump(),
        ) from e

    await _broadcast_session_updated(outcome.state, outcome.feedback_event)
    return GuessResponse(
        state=PublicGameState.from_state(outcome.state),
        stats=outcome.stats,
        feedback_event=outcome.feedback_event,
        text=session_text(outcome.state),
    )


@router.post("/session/new", response_model=SessionResponse)
async def new_game_route(r: redis.Redis = Depends(get_redis)) -> SessionResponse:
    session = new_game(r=r, hook=stream_feedback_hook(r=r))
    await _broadcast_session_updated(session.state, session.feedback_event)
    return _session_response(session)


@router.get("/settings", response_model=GameSettings)
async def get_settings_route(r: redis.Redis = Depends(get_redis)) -> GameSettings:
    return load_game_settings(r=r)


@router.put("/settings", response_model=GameSettings)
async def put_settings_route(payload: GameSettings, r: redis.Redis = Depends(get_redis)) -> GameSettings:
    return update_settings(r=r, settings=payload)


@router.get("/stats", response_model=GameStats)
async def get_stats_route(r: redis.Redis = Depends(get_redis)) -> GameStats:
    return load_game_stats(r=r)


@router.delete("/data", status_code=status.HTTP_204_NO_CONTENT)
async def clear_data_route(r: redis.Redis = Depends(get_redis)) -> Response:
    reset_all(r=r)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
