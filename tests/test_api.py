"""Tests for the FastAPI game endpoints."""

from __future__ import annotations

import inspect
import os
import random
import tempfile

import pytest

os.environ.setdefault("RACK_RUSH_CLOCK_INTERVAL", "0")
os.environ.setdefault("RACK_RUSH_HIGHSCORES", os.path.join(tempfile.mkdtemp(), "scores.json"))

from fastapi.testclient import TestClient  # noqa: E402

import main  # noqa: E402
from rack_rush.highscores import HighScoreStore  # noqa: E402
from rack_rush.session import GameSession  # noqa: E402

from conftest import load_rack  # noqa: E402


@pytest.fixture
def client(monkeypatch, small_dictionary) -> TestClient:
    session = GameSession(small_dictionary, HighScoreStore(), rng=random.Random(5))
    monkeypatch.setattr(main, "game_session", session)
    monkeypatch.setattr(main, "dictionary", small_dictionary)
    monkeypatch.setattr(main, "CLOCK_INTERVAL", 0)
    return TestClient(main.app)


def _stage_payload(rack: list, letters: str, row: int, col: int) -> dict:
    used = []
    tiles = []
    for i, ch in enumerate(letters):
        tile = next(t for t in rack if t["letter"] == ch and t["id"] not in used)
        used.append(tile["id"])
        tiles.append({"row": row, "col": col + i, "tile_id": tile["id"]})
    return {"tiles": tiles}


class TestGameFlow:
    def test_state_before_start(self, client: TestClient) -> None:
        body = client.get("/api/game/state").json()
        assert body["phase"] == "ready"
        assert body["tiles_in_bag"] == 100
        assert len(body["board"]) == 15
        assert body["board"][7][7]["premium"] == "DW"

    def test_start(self, client: TestClient) -> None:
        body = client.post("/api/game/start", json={"mode": "fast"}).json()
        assert body["phase"] == "play"
        assert body["time_left"] == 180
        assert body["target"] == 120
        assert len(body["rack"]) == 7
        assert "120" in body["message"]

    def test_unknown_mode_is_bad_request(self, client: TestClient) -> None:
        response = client.post("/api/game/start", json={"mode": "blitz"})
        assert response.status_code == 400
        assert "blitz" in response.json()["detail"]

    def test_submit_before_start_is_bad_request(self, client: TestClient) -> None:
        assert client.post("/api/game/submit").status_code == 400

    def test_place_and_submit(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        load_rack(main.game_session, "CATXQZE")
        rack = client.get("/api/game/state").json()["rack"]

        body = client.post("/api/game/place", json=_stage_payload(rack, "CAT", 7, 6)).json()
        assert [t["tile"]["letter"] for t in body["placed_tiles"]] == ["C", "A", "T"]

        body = client.post("/api/game/submit").json()
        assert body["score"] == 10
        assert body["played_words"][0]["word"] == "CAT"
        assert body["board"][7][7]["letter"] == "A"
        assert body["board"][7][7]["premium_used"]
        assert body["is_first_move"] is False

    def test_invalid_word_reports_strike(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        load_rack(main.game_session, "CATXQZE")
        rack = client.get("/api/game/state").json()["rack"]
        client.post("/api/game/place", json=_stage_payload(rack, "TAC", 7, 6))
        body = client.post("/api/game/submit").json()
        assert body["strikes"] == 1
        assert body["message"] == '"TAC" is not a valid word. Strike 1/3'
        assert body["error_message"] == body["message"]

    def test_staging_unknown_tile_is_bad_request(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        response = client.post("/api/game/place", json={"tiles": [{"row": 7, "col": 7, "tile_id": "nope"}]})
        assert response.status_code == 400

    def test_remove_and_clear(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        load_rack(main.game_session, "CATXQZE")
        rack = client.get("/api/game/state").json()["rack"]
        client.post("/api/game/place", json=_stage_payload(rack, "CAT", 7, 6))
        body = client.post("/api/game/placed/remove", json={"row": 7, "col": 8}).json()
        assert len(body["placed_tiles"]) == 2
        body = client.post("/api/game/placed/clear").json()
        assert body["placed_tiles"] == []

    def test_exchange_and_budget(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        assert client.post("/api/game/exchange", json={"indices": [0]}).json()["exchanges_left"] == 1
        assert client.post("/api/game/exchange", json={"indices": [0]}).json()["exchanges_left"] == 0
        body = client.post("/api/game/exchange", json={"indices": [0]}).json()
        assert body["message"] == "Exchange not allowed."
        assert body["exchanges_used"] == 2

    def test_shuffle(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        before = sorted(t["id"] for t in client.get("/api/game/state").json()["rack"])
        after = sorted(t["id"] for t in client.post("/api/game/rack/shuffle").json()["rack"])
        assert before == after

    def test_blank_letter(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        load_rack(main.game_session, "_ATXQZE")
        rack = client.get("/api/game/state").json()["rack"]
        body = client.post("/api/game/place", json=_stage_payload(rack, "_AT", 7, 6)).json()
        assert body["blank_letter_input"] == [7, 6]
        body = client.post("/api/game/blank", json={"letter": "C"}).json()
        assert body["placed_tiles"][0]["tile"]["letter"] == "C"
        assert body["blank_letter_input"] is None
        assert client.post("/api/game/blank/cancel").status_code == 200

    def test_request_blank_letter(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        load_rack(main.game_session, "_ATXQZE")
        rack = client.get("/api/game/state").json()["rack"]
        client.post("/api/game/place", json=_stage_payload(rack, "_AT", 7, 6))
        body = client.post("/api/game/blank/cancel").json()
        assert body["blank_letter_input"] is None
        body = client.post("/api/game/blank/request", json={"row": 7, "col": 6}).json()
        assert body["blank_letter_input"] == [7, 6]
        assert client.post("/api/game/blank/request", json={"row": 7, "col": 7}).status_code == 400

    def test_typing(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        load_rack(main.game_session, "CATXQZE")
        body = client.post("/api/game/select", json={"row": 7, "col": 6}).json()
        assert body["cursor"] == {"position": [7, 6], "direction": "right"}
        for key in "CAT":
            body = client.post("/api/game/type", json={"key": key}).json()
        assert len(body["placed_tiles"]) == 3
        body = client.post("/api/game/type", json={"key": "M"}).json()
        assert body["message"] == "Key 'M' ignored."

    def test_reset(self, client: TestClient) -> None:
        client.post("/api/game/start", json={"mode": "fast"})
        body = client.post("/api/game/reset").json()
        assert body["phase"] == "ready"
        assert body["rack"] == []

    def test_dictionary_stats(self, client: TestClient, small_dictionary) -> None:
        body = client.get("/api/dictionary/stats").json()
        assert body == {"is_loaded": True, "word_count": len(small_dictionary), "source": "memory"}


class TestRoutes:
    def test_game_routes_run_in_threadpool(self) -> None:
        # Session calls take a lock and may write the high score file
        endpoints = [r.endpoint for r in main.app.routes if getattr(r, "path", "").startswith("/api/")]
        assert endpoints
        assert not any(inspect.iscoroutinefunction(e) for e in endpoints)
