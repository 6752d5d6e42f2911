import pytest

from setseize import resolver
from setseize.errors import InvariantViolation
from setseize.repository import GameNotFound, InMemoryGameRepository
from setseize.service import TableService


def test_table_service_initial_view():
    service = TableService()
    view = service.start_game(("alice", "bob"), seed=4)

    assert view.phase == "playing"
    assert view.round == 1
    assert view.perspective == "alice"
    assert view.current_player_id == "alice"
    assert len(view.hand) == 4
    assert len(view.hand_labels) == 4
    assert view.opponent_hand_size == 4
    assert len(view.middle) == 4
    assert view.deck_size == 40
    assert view.must_capture is None
    assert view.scores is None


def test_rejection_is_reported_in_the_view():
    service = TableService()
    view = service.start_game(("alice", "bob"), seed=4)
    card_id = view.hand[0]["id"]

    turn = service.submit(view.game_id, "bob", {"actionType": "drop", "playedCardId": card_id})
    assert not turn.accepted
    assert turn.error["errorKind"] == "TurnError"
    assert turn.table.current_player_id == "alice"


def test_drop_updates_the_view():
    service = TableService()
    view = service.start_game(("alice", "bob"), seed=4)
    card_id = view.hand[0]["id"]

    turn = service.submit(view.game_id, "alice", {"actionType": "drop", "playedCardId": card_id})
    assert turn.accepted
    assert len(turn.table.middle) == 5
    assert turn.table.middle[-1].id == card_id
    assert turn.table.current_player_id == "bob"
    assert len(turn.table.hand) == 3


def test_snapshot_hides_opponent_hand():
    service = TableService()
    view = service.start_game(("alice", "bob"), seed=4)

    snapshot = service.snapshot(view.game_id, "alice")
    players = {player["id"]: player for player in snapshot["players"]}
    assert players["bob"]["hand"] is None
    assert players["bob"]["handSize"] == 4
    assert len(players["alice"]["hand"]) == 4
    assert snapshot["deck"] is None
    assert len(service.snapshot(view.game_id)["deck"]) == 40


def test_invariant_failure_removes_game(monkeypatch):
    repository = InMemoryGameRepository()
    service = TableService(repository)
    view = service.start_game(("alice", "bob"), seed=4)

    def broken(state):
        raise InvariantViolation("boom")

    monkeypatch.setattr(resolver, "check_invariants", broken)
    with pytest.raises(InvariantViolation):
        service.submit(view.game_id, "alice", {"actionType": "drop", "playedCardId": view.hand[0]["id"]})
    assert len(repository) == 0
    with pytest.raises(GameNotFound):
        service.get_table_view(view.game_id, "alice")


def test_end_game_forgets_the_game():
    service = TableService()
    view = service.start_game(seed=1)
    service.end_game(view.game_id)
    with pytest.raises(GameNotFound):
        service.get_table_view(view.game_id, "player1")
