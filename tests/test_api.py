"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ai import MoveSelector
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = (0.0, 0.0)


def _new_game(mistake_chance=None):
    response = client.post("/api/game")
    assert response.status_code == 200
    payload = response.json()
    if mistake_chance is not None:
        ui.SESSIONS[payload["id"]].ai = MoveSelector(mistake_chance=mistake_chance)
    return payload


def _move(game_id, row, col):
    return client.post(f"/api/game/{game_id}/move", json={"row": row, "col": col})


def test_create_game_and_first_move():
    payload = _new_game()
    assert payload["currentPlayer"] == "X"
    assert payload["moveLog"] == []
    assert payload["board"] == [["", "", ""], ["", "", ""], ["", "", ""]]
    assert payload["winner"] is None
    assert payload["winningCells"] is None
    assert payload["score"] == {"humanWins": 0, "computerWins": 0, "draws": 0}

    game_id = payload["id"]
    move_response = _move(game_id, 0, 0)
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["moveLog"][0] == {"player": "X", "row": 0, "col": 0}
    assert state["board"][0][0] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["aiPending"] is False
    assert final_state["moveLog"][-1]["player"] == "O"
    assert final_state["lastMove"] == final_state["moveLog"][-1]
    assert len(final_state["availableMoves"]) == 7


def test_invalid_move_rejected():
    game_id = _new_game()["id"]
    assert _move(game_id, 0, 0).status_code == 200

    duplicate_move = _move(game_id, 0, 0)
    assert duplicate_move.status_code == 400
    assert duplicate_move.json()["detail"]


def test_out_of_range_move_is_validation_error():
    game_id = _new_game()["id"]
    assert _move(game_id, 3, 0).status_code == 422
    assert _move(game_id, 0, -1).status_code == 422


def test_move_rejected_while_ai_pending():
    game_id = _new_game()["id"]
    ui.SESSIONS[game_id].ai_pending = True
    response = _move(game_id, 1, 1)
    assert response.status_code == 400
    assert client.get(f"/api/game/{game_id}").json()["board"][1][1] == ""


def test_unknown_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert _move("missing", 0, 0).status_code == 404


def test_full_game_records_result_once_and_keeps_score():
    game_id = _new_game(mistake_chance=0.0)["id"]

    # Against the deterministic heuristic: O takes center, then corner (0, 2),
    # then blocks at (1, 0); X wins along the bottom row.
    for row, col in [(0, 0), (2, 2), (2, 0)]:
        assert _move(game_id, row, col).status_code == 200

    state = client.get(f"/api/game/{game_id}").json()
    assert state["board"] == [["X", "", "O"], ["O", "O", ""], ["X", "", "X"]]

    final = _move(game_id, 2, 1).json()
    assert final["winner"] == "X"
    assert final["gameOver"] is True
    assert final["winningCells"] == [[2, 0], [2, 1], [2, 2]]
    assert final["aiPending"] is False
    assert final["score"] == {"humanWins": 1, "computerWins": 0, "draws": 0}

    assert _move(game_id, 1, 2).status_code == 400
    again = client.get(f"/api/game/{game_id}").json()
    assert again["score"]["humanWins"] == 1

    fresh = client.post(f"/api/game/{game_id}/new").json()
    assert fresh["board"] == [["", "", ""], ["", "", ""], ["", "", ""]]
    assert fresh["currentPlayer"] == "X"
    assert fresh["winner"] is None
    assert fresh["moveLog"] == []
    assert fresh["score"]["humanWins"] == 1

    cleared = client.post(f"/api/game/{game_id}/score/reset").json()
    assert cleared["score"] == {"humanWins": 0, "computerWins": 0, "draws": 0}


def test_stale_ai_turn_ignored_after_new_game():
    game_id = _new_game()["id"]
    session = ui.SESSIONS[game_id]
    with session.lock:
        session.game.make_move(0, 0)
        session.ai_pending = True
        generation = session.generation

    client.post(f"/api/game/{game_id}/new")
    ui._run_ai_turn(game_id, generation)

    state = client.get(f"/api/game/{game_id}").json()
    assert state["board"] == [["", "", ""], ["", "", ""], ["", "", ""]]
    assert state["aiPending"] is False


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic Tac Toe" in response.text
