"""JSON-friendly snapshots of tables and verdicts."""

from __future__ import annotations

from typing import Dict, List, Optional

from .builds import Build, MiddleItem
from .cards import Card, serialize_card
from .resolver import Rejection
from .state import TableState


def encode_card(card: Card) -> Dict[str, object]:
    payload: Dict[str, object] = dict(serialize_card(card))
    payload["isAce"] = card.is_ace
    return payload


def encode_build(build: Build) -> Dict[str, object]:
    return {
        "id": build.id,
        "cards": [encode_card(card) for card in build.cards],
        "totalValue": build.total_value,
        "ownerId": build.owner_id,
        "isHard": build.is_hard,
        "hardGroupId": build.hard_group_id,
    }


def encode_item(item: MiddleItem) -> Dict[str, object]:
    if isinstance(item, Build):
        return {"type": "build", **encode_build(item)}
    return {"type": "card", **encode_card(item)}


def encode_table(state: TableState, perspective: Optional[str] = None) -> Dict[str, object]:
    """Snapshot the table.

    With a ``perspective`` the opponent's hand is reduced to a card count.
    """
    players: List[Dict[str, object]] = []
    for player_id in state.player_order:
        player = state.player(player_id)
        visible = perspective is None or perspective == player_id
        players.append(
            {
                "id": player_id,
                "hand": [encode_card(card) for card in player.hand] if visible else None,
                "handSize": len(player.hand),
                "capturedPile": [encode_card(card) for card in player.captured_pile],
                "activeBuildIds": sorted(player.active_build_ids),
            }
        )
    obligation = state.obligation
    return {
        "phase": state.phase.name.lower(),
        "round": state.round_number,
        "deckSize": len(state.deck),
        "deck": [encode_card(card) for card in state.deck] if perspective is None else None,
        "middleItems": [encode_item(item) for item in state.middle_items],
        "players": players,
        "currentPlayerId": state.current_player_id,
        "lastCapturePlayerId": state.last_capture_player_id,
        "mustCapture": (
            {"ownerId": obligation.owner_id, "buildId": obligation.build_id} if obligation is not None else None
        ),
    }


def encode_rejection(rejection: Rejection) -> Dict[str, str]:
    return {"errorKind": rejection.kind, "message": rejection.message}
