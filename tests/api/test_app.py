"""Tests for /lobbychess/api/app.py, going through the HTTP layer"""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from lobbychess.api.app import create_app
from lobbychess.core.config import EngineSettings
from lobbychess.core.shared_types import DisconnectPolicy
from tests.conftest import BLACK_PLAYER, WHITE_PLAYER


def as_player(player: str) -> dict[str, str]:
    return {"X-Player-Id": player}


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(EngineSettings()))


@pytest.fixture
def game_id(client: TestClient) -> str:
    """A game with both seats taken"""
    response = client.post("/games", json={"name": "http lobby"})
    game_id = response.json()["game_id"]
    client.post(f"/games/{game_id}/players", json={"color": "white"}, headers=as_player(WHITE_PLAYER))
    client.post(f"/games/{game_id}/players", json={"color": "black"}, headers=as_player(BLACK_PLAYER))
    return game_id


# --- LOBBY ---
def test_create_game(client: TestClient) -> None:
    response = client.post("/games", json={"name": "friday blitz"})
    assert response.status_code == 201
    assert response.json()["name"] == "friday blitz"

    listed = client.get("/games").json()
    assert [game["game_id"] for game in listed] == [response.json()["game_id"]]


def test_create_game_with_blank_name(client: TestClient) -> None:
    response = client.post("/games", json={"name": "  "})
    assert response.status_code == 422


def test_unknown_game(client: TestClient) -> None:
    assert client.get(f"/games/{uuid4()}").status_code == 404
    assert client.get(f"/games/{uuid4()}/board").status_code == 404


# --- BOARD & MOVES ---
def test_initial_state(client: TestClient, game_id: str) -> None:
    state = client.get(f"/games/{game_id}").json()
    assert state["name"] == "http lobby"
    assert state["white_turn"] is True
    assert state["in_check"] is False
    assert state["players"] == {"white": WHITE_PLAYER, "black": BLACK_PLAYER}
    assert state["termination"] == {"over": False, "winner": "none", "reason": None}
    assert len(state["board"]) == 32


def test_make_move(client: TestClient, game_id: str) -> None:
    response = client.post(
        f"/games/{game_id}/moves",
        json={"from_square": "e2", "to_square": "e4"},
        headers=as_player(WHITE_PLAYER),
    )
    assert response.status_code == 200
    state = response.json()
    assert state["board"]["e4"] == "wP"
    assert "e2" not in state["board"]
    assert state["white_turn"] is False
    assert client.get(f"/games/{game_id}/turn").json() is False


def test_rejected_move_is_not_an_error(client: TestClient, game_id: str) -> None:
    board_before = client.get(f"/games/{game_id}/board").json()
    response = client.post(
        f"/games/{game_id}/moves",
        json={"from_square": "e7", "to_square": "e5"},
        headers=as_player(BLACK_PLAYER),
    )
    assert response.status_code == 200
    assert response.json()["board"] == board_before
    assert response.json()["white_turn"] is True


def test_move_with_invalid_square(client: TestClient, game_id: str) -> None:
    response = client.post(
        f"/games/{game_id}/moves",
        json={"from_square": "e2", "to_square": "e9"},
        headers=as_player(WHITE_PLAYER),
    )
    assert response.status_code == 422


def test_move_without_player_header(client: TestClient, game_id: str) -> None:
    response = client.post(f"/games/{game_id}/moves", json={"from_square": "e2", "to_square": "e4"})
    assert response.status_code == 422


def test_natural_language_command(client: TestClient, game_id: str) -> None:
    response = client.post(
        f"/games/{game_id}/commands",
        json={"command": "knight to f3"},
        headers=as_player(WHITE_PLAYER),
    )
    assert response.status_code == 200
    assert response.json()["board"]["f3"] == "wN"

    chat = client.post(
        f"/games/{game_id}/commands",
        json={"command": "nice move!"},
        headers=as_player(BLACK_PLAYER),
    )
    assert chat.status_code == 200
    assert chat.json() is None


def test_checkmate_over_http(client: TestClient, game_id: str) -> None:
    for player, from_square, to_square in [
        (WHITE_PLAYER, "f2", "f3"),
        (BLACK_PLAYER, "e7", "e5"),
        (WHITE_PLAYER, "g2", "g4"),
        (BLACK_PLAYER, "d8", "h4"),
    ]:
        client.post(
            f"/games/{game_id}/moves",
            json={"from_square": from_square, "to_square": to_square},
            headers=as_player(player),
        )

    assert client.get(f"/games/{game_id}/check/white").json() is True
    assert client.get(f"/games/{game_id}/check/black").json() is False
    termination = client.get(f"/games/{game_id}/termination").json()
    assert termination == {"over": True, "winner": "black", "reason": "checkmate"}


# --- PLAYERS ---
def test_bind_color(client: TestClient) -> None:
    game_id = client.post("/games", json={"name": "seats"}).json()["game_id"]
    response = client.post(f"/games/{game_id}/players", json={"color": "white"}, headers=as_player("alice"))
    assert response.json() == {"success": True, "players": {"white": "alice", "black": ""}}

    taken = client.post(f"/games/{game_id}/players", json={"color": "white"}, headers=as_player("bob"))
    assert taken.json()["success"] is False


def test_bind_unknown_color(client: TestClient, game_id: str) -> None:
    response = client.post(f"/games/{game_id}/players", json={"color": "green"}, headers=as_player("bob"))
    assert response.status_code == 422


def test_disconnect_releases_seat(client: TestClient, game_id: str) -> None:
    response = client.delete(f"/games/{game_id}/players/me", headers=as_player(WHITE_PLAYER))
    assert response.status_code == 204
    assert client.get(f"/games/{game_id}/players").json() == {"white": "", "black": BLACK_PLAYER}


def test_disconnect_deletes_game() -> None:
    client = TestClient(create_app(EngineSettings(disconnect_policy=DisconnectPolicy.DELETE_GAME)))
    game_id = client.post("/games", json={"name": "one and done"}).json()["game_id"]
    client.post(f"/games/{game_id}/players", json={"color": "white"}, headers=as_player(WHITE_PLAYER))

    stranger = client.delete(f"/games/{game_id}/players/me", headers=as_player("stranger"))
    assert stranger.status_code == 204
    assert client.get(f"/games/{game_id}").status_code == 200

    client.delete(f"/games/{game_id}/players/me", headers=as_player(WHITE_PLAYER))
    assert client.get(f"/games/{game_id}").status_code == 404
    assert client.get("/games").json() == []


def test_disconnect_from_unknown_game(client: TestClient) -> None:
    response = client.delete(f"/games/{uuid4()}/players/me", headers=as_player(WHITE_PLAYER))
    assert response.status_code == 404


def test_apps_do_not_share_games() -> None:
    first = TestClient(create_app(EngineSettings()))
    second = TestClient(create_app(EngineSettings()))
    first.post("/games", json={"name": "only here"})
    assert second.get("/games").json() == []
