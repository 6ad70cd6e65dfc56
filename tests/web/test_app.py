"""Tests for the FastAPI web application."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from shogi_engine.web.app import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _new_game(client: TestClient, gote_type: str = "random") -> dict:
    res = client.post("/api/new-game", json={"gote_type": gote_type})
    assert res.status_code == 200
    return res.json()


class TestNewGame:
    def test_create_game(self, client: TestClient) -> None:
        data = _new_game(client)
        assert "game_id" in data
        state = data["state"]
        assert state["current_player"] == "SENTE"
        assert not state["is_terminal"]
        assert state["winner"] is None
        assert not state["in_check"]
        assert state["sfen"] == "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL"
        assert len(state["squares"]) == 81
        assert len(state["legal_moves"]) == 30
        assert state["history"] == []
        assert state["cursor"] == -1
        assert state["hands"] == {"SENTE": [], "GOTE": []}

    def test_invalid_gote_type(self, client: TestClient) -> None:
        res = client.post("/api/new-game", json={"gote_type": "minimax"})
        assert res.status_code == 422


class TestMakeMove:
    def test_move_by_id_with_ai_reply(self, client: TestClient) -> None:
        game_id = _new_game(client)["game_id"]
        res = client.post("/api/move", json={"game_id": game_id, "move": 1})
        assert res.status_code == 200
        data = res.json()
        assert data["player_move"] == "９六歩"
        assert data["ai_move"] is not None
        assert data["state"]["current_player"] == "SENTE"
        assert len(data["state"]["history"]) == 2

    def test_move_by_notation_human_vs_human(self, client: TestClient) -> None:
        game_id = _new_game(client, "human")["game_id"]
        res = client.post("/api/move", json={"game_id": game_id, "move": "７六歩"})
        assert res.status_code == 200
        data = res.json()
        assert data["ai_move"] is None
        assert data["state"]["current_player"] == "GOTE"
        assert data["state"]["history"] == ["1. ▲７七歩７六"]

    def test_invalid_move(self, client: TestClient) -> None:
        game_id = _new_game(client)["game_id"]
        res = client.post("/api/move", json={"game_id": game_id, "move": 999})
        assert res.status_code == 400
        res = client.post("/api/move", json={"game_id": game_id, "move": "５五角"})
        assert res.status_code == 400

    def test_game_not_found(self, client: TestClient) -> None:
        res = client.post("/api/move", json={"game_id": "nonexistent", "move": 1})
        assert res.status_code == 404


class TestUndoReplay:
    def test_undo(self, client: TestClient) -> None:
        game_id = _new_game(client, "human")["game_id"]
        client.post("/api/move", json={"game_id": game_id, "move": "７六歩"})
        res = client.post("/api/undo", json={"game_id": game_id})
        assert res.status_code == 200
        state = res.json()["state"]
        assert state["cursor"] == -1
        assert state["current_player"] == "SENTE"
        # 棋譜は残る（やり直しの候補として保持）
        assert len(state["history"]) == 1

    def test_undo_at_start(self, client: TestClient) -> None:
        game_id = _new_game(client)["game_id"]
        res = client.post("/api/undo", json={"game_id": game_id})
        assert res.status_code == 400

    def test_replay(self, client: TestClient) -> None:
        game_id = _new_game(client)["game_id"]
        client.post("/api/move", json={"game_id": game_id, "move": "７六歩"})
        res = client.post("/api/replay", json={"game_id": game_id, "index": 0})
        assert res.status_code == 200
        state = res.json()["state"]
        assert state["cursor"] == 0
        assert state["current_player"] == "GOTE"

    def test_replay_out_of_range(self, client: TestClient) -> None:
        game_id = _new_game(client)["game_id"]
        res = client.post("/api/replay", json={"game_id": game_id, "index": 5})
        assert res.status_code == 400


class TestGetState:
    def test_get_existing_game(self, client: TestClient) -> None:
        game_id = _new_game(client)["game_id"]
        res = client.get(f"/api/state/{game_id}")
        assert res.status_code == 200
        assert "９ ８ ７" in res.json()["board_display"]

    def test_get_nonexistent_game(self, client: TestClient) -> None:
        res = client.get("/api/state/nonexistent")
        assert res.status_code == 404


class TestGameFlow:
    def test_play_multiple_moves(self, client: TestClient) -> None:
        """Play several moves without errors."""
        data = _new_game(client)
        game_id = data["game_id"]
        state = data["state"]
        for _ in range(5):
            if state["is_terminal"]:
                break
            res = client.post(
                "/api/move",
                json={"game_id": game_id, "move": state["legal_moves"][0]["id"]},
            )
            assert res.status_code == 200
            state = res.json()["state"]
