from __future__ import annotations

import fakeredis
from fastapi.testclient import TestClient

from guessgame.api.models import GameSettings, GameState, GameStatus
from guessgame.game_store import load_game_state, save_game_settings, save_game_state
from guessgame.streams import FEEDBACK_STREAM_KEY


def _seed_round(r: fakeredis.FakeRedis, *, target: int) -> None:
    save_game_state(r=r, state=GameState(target_number=target, game_status=GameStatus.playing))


def test_healthcheck_and_info(client: TestClient) -> None:
    assert client.get("/healthcheck").json() == {"status": "ok"}
    assert client.get("/info").json()["name"] == "guess-number"


def test_get_session_starts_round_and_hides_target(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis

    resp = client.get("/session")
    assert resp.status_code == 200
    data = resp.json()

    assert data["state"]["gameStatus"] == "playing"
    assert data["state"]["targetNumber"] is None
    assert data["state"]["attempts"] == 0
    assert data["settings"] == {"hapticEnabled": True, "minRange": 1, "maxRange": 100}
    assert data["stats"] == {"gamesPlayed": 0, "bestScore": None, "lastPlayedDate": None}
    assert data["text"]["feedback"] == "Enter your guess!"
    assert data["text"]["placeholder"] == "Enter 1-100"
    assert data["text"]["rangeHint"] == "Between 1 and 100"

    stored = load_game_state(r=r)
    assert 1 <= stored.target_number <= 100


def test_guess_round_trip(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis
    _seed_round(r, target=50)

    resp = client.post("/session/guess", json={"guess": "30"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["state"]["feedback"] == "higher"
    assert data["state"]["attempts"] == 1
    assert data["state"]["lastGuess"] == 30
    assert data["state"]["targetNumber"] is None
    assert data["feedbackEvent"] == "impact-medium"
    assert data["text"]["feedback"] == "Go Higher!"
    assert data["text"]["lastGuess"] == "Your last guess: 30"

    resp = client.post("/session/guess", json={"guess": "70"})
    assert resp.json()["state"]["feedback"] == "lower"

    resp = client.post("/session/guess", json={"guess": "50"})
    assert resp.status_code == 200
    won = resp.json()
    assert won["state"]["gameStatus"] == "won"
    assert won["state"]["feedback"] == "correct"
    assert won["state"]["targetNumber"] == 50
    assert won["state"]["attempts"] == 3
    assert won["feedbackEvent"] == "success"
    assert won["stats"]["gamesPlayed"] == 1
    assert won["stats"]["bestScore"] == 3
    assert won["stats"]["lastPlayedDate"] is not None
    assert won["text"]["winMessage"] == "You guessed the number 50 in 3 attempts!"

    events = [fields["event"] for _, fields in r.xrange(FEEDBACK_STREAM_KEY)]
    assert events == ["impact-medium", "impact-medium", "success"]

    # Input is disabled once won.
    resp = client.post("/session/guess", json={"guess": "50"})
    assert resp.status_code == 409

    stats = client.get("/stats").json()
    assert stats["gamesPlayed"] == 1
    assert stats["bestScore"] == 3


def test_guess_validation_errors(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis
    _seed_round(r, target=50)

    cases = {
        "": ("empty_input", "Please enter a number"),
        "abc": ("not_a_number", "Please enter a valid number"),
        "150": ("out_of_range", "Please enter a number between 1 and 100"),
        "1" * 40: ("out_of_range", "Please enter a number between 1 and 100"),
        "5_0": ("not_a_number", "Please enter a valid number"),
    }
    for raw, (code, message) in cases.items():
        resp = client.post("/session/guess", json={"guess": raw})
        assert resp.status_code == 422
        assert resp.json()["detail"] == {"code": code, "message": message}

    # Rejected guesses don't count as attempts.
    assert load_game_state(r=r).attempts == 0


def test_guess_without_round_is_conflict(client: TestClient) -> None:
    resp = client.post("/session/guess", json={"guess": "10"})
    assert resp.status_code == 409


def test_settings_and_new_game(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis

    assert client.get("/settings").json() == {"hapticEnabled": True, "minRange": 1, "maxRange": 100}

    bad = client.put("/settings", json={"hapticEnabled": True, "minRange": 10, "maxRange": 1})
    assert bad.status_code == 422

    ok = client.put("/settings", json={"hapticEnabled": False, "minRange": 4, "maxRange": 4})
    assert ok.status_code == 200
    assert ok.json() == {"hapticEnabled": False, "minRange": 4, "maxRange": 4}

    resp = client.post("/session/new")
    assert resp.status_code == 200
    data = resp.json()
    assert data["state"]["gameStatus"] == "playing"
    assert data["state"]["minRange"] == 4
    assert data["state"]["maxRange"] == 4
    assert data["text"]["placeholder"] == "Enter 4-4"
    assert load_game_state(r=r).target_number == 4

    # Haptics are off, so nothing reached the device stream.
    assert r.xlen(FEEDBACK_STREAM_KEY) == 0

    won = client.post("/session/guess", json={"guess": "4"}).json()
    assert won["state"]["gameStatus"] == "won"
    assert won["feedbackEvent"] is None


def test_new_game_after_win_fires_light_impact(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis
    _seed_round(r, target=9)
    client.post("/session/guess", json={"guess": "9"})

    resp = client.post("/session/new")
    assert resp.status_code == 200
    assert resp.json()["state"]["attempts"] == 0

    _, last = r.xrange(FEEDBACK_STREAM_KEY)[-1]
    assert last["event"] == "impact-light"


def test_clear_all_data(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, r = client_and_redis
    save_game_settings(r=r, settings=GameSettings(haptic_enabled=False, min_range=1, max_range=3))
    _seed_round(r, target=2)
    client.post("/session/guess", json={"guess": "2"})

    resp = client.delete("/data")
    assert resp.status_code == 204

    assert client.get("/stats").json() == {"gamesPlayed": 0, "bestScore": None, "lastPlayedDate": None}
    assert client.get("/settings").json() == {"hapticEnabled": True, "minRange": 1, "maxRange": 100}
    assert load_game_state(r=r) == GameState()
