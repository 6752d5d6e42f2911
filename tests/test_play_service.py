from fastapi.testclient import TestClient

from server.play_service import app

client = TestClient(app)


def _start(**body):
    response = client.post("/games", json=body)
    assert response.status_code == 200
    return response.json()


def test_start_and_view_game():
    started = _start(seed=3)
    game_id = started["game_id"]
    assert len(started["state"]["hand"]) == 4

    response = client.get(f"/games/{game_id}", params={"player_id": "player2"})
    assert response.status_code == 200
    state = response.json()["state"]
    assert state["perspective"] == "player2"
    assert state["opponent_hand_size"] == 4


def test_unknown_game_is_404():
    response = client.get("/games/missing", params={"player_id": "player1"})
    assert response.status_code == 404


def test_rejected_action_is_409():
    started = _start(seed=3)
    card_id = started["state"]["hand"][0]["id"]
    response = client.post(
        f"/games/{started['game_id']}/actions",
        json={"player_id": "player2", "action": {"actionType": "drop", "playedCardId": card_id}},
    )
    assert response.status_code == 409
    assert response.json()["detail"]["errorKind"] == "TurnError"


def test_malformed_action_is_422():
    started = _start(seed=3)
    response = client.post(
        f"/games/{started['game_id']}/actions",
        json={"player_id": "player1", "action": {"actionType": "shuffle", "playedCardId": "2H"}},
    )
    assert response.status_code == 422


def test_bot_answers_for_second_seat():
    started = _start(seed=3, opponent="greedy")
    card_id = started["state"]["hand"][0]["id"]
    response = client.post(
        f"/games/{started['game_id']}/actions",
        json={"player_id": "player1", "action": {"actionType": "drop", "playedCardId": card_id}},
    )
    assert response.status_code == 200
    state = response.json()["state"]
    assert state["current_player_id"] == "player1"
    assert state["opponent_hand_size"] == len(state["hand"])


def test_unknown_opponent_is_400():
    response = client.post("/games", json={"opponent": "oracle"})
    assert response.status_code == 400


def test_delete_game():
    started = _start(seed=3)
    game_id = started["game_id"]
    assert client.delete(f"/games/{game_id}").status_code == 200
    assert client.get(f"/games/{game_id}", params={"player_id": "player1"}).status_code == 404
