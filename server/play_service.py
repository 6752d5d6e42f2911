"""REST service to play Set & Seize, optionally against a bot."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bots.bot_arena import BOT_REGISTRY
from bots.base import BotStrategy
from setseize.actions import PlayerAction
from setseize.deck import DEFAULT_PLAYERS
from setseize.errors import InvariantViolation
from setseize.game import GameDiscarded
from setseize.repository import GameNotFound, InMemoryGameRepository
from setseize.rules_schema import load_rules
from setseize.service import TableService, TurnView

logger = logging.getLogger(__name__)


class StartRequest(BaseModel):
    player_ids: List[str] = Field(default_factory=lambda: list(DEFAULT_PLAYERS), min_length=2, max_length=2)
    seed: Optional[int] = None
    opponent: Optional[str] = None


class ActionRequest(BaseModel):
    player_id: str
    action: PlayerAction


repository = InMemoryGameRepository()
service = TableService(repository, load_rules(os.environ.get("SETSEIZE_RULES")))
opponents: Dict[str, BotStrategy] = {}


app = FastAPI(title="Set & Seize Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ensure_game(game_id: str):
    try:
        return repository.get(game_id)
    except GameNotFound:
        raise HTTPException(status_code=404, detail="Game not found") from None


def bot_seat(game_id: str) -> Optional[str]:
    if game_id not in opponents:
        return None
    return ensure_game(game_id).player_ids[1]


def let_bot_play(game_id: str) -> List[dict]:
    """Play the bot seat until it is the human's turn again or the game ends."""
    seat = bot_seat(game_id)
    events: List[dict] = []
    if seat is None:
        return events
    game = ensure_game(game_id)
    bot = opponents[game_id]
    while not game.is_over() and game.current_player == seat:
        turn = service.submit(game_id, seat, bot.choose_action(game.state, seat))
        if not turn.accepted:
            raise HTTPException(status_code=500, detail=f"Bot action rejected: {turn.error}")
        events.extend(turn.events)
    return events


@app.post("/games")
def start_game(request: StartRequest) -> Dict[str, object]:
    if request.opponent is not None and request.opponent not in BOT_REGISTRY:
        raise HTTPException(status_code=400, detail=f"Unknown opponent {request.opponent}")
    if request.player_ids[0] == request.player_ids[1]:
        raise HTTPException(status_code=400, detail="Player ids must differ")
    view = service.start_game(request.player_ids, seed=request.seed)
    if request.opponent is not None:
        opponents[view.game_id] = BOT_REGISTRY[request.opponent]()
        let_bot_play(view.game_id)
        view = service.get_table_view(view.game_id, request.player_ids[0])
    return {"game_id": view.game_id, "state": asdict(view)}


@app.get("/games/{game_id}")
def get_game(game_id: str, player_id: str) -> Dict[str, object]:
    game = ensure_game(game_id)
    if player_id not in game.player_ids:
        raise HTTPException(status_code=404, detail="Player not in this game")
    return {"state": asdict(service.get_table_view(game_id, player_id))}


@app.post("/games/{game_id}/actions")
def take_action(game_id: str, request: ActionRequest) -> Dict[str, object]:
    game = ensure_game(game_id)
    player_id = request.player_id
    if player_id not in game.player_ids:
        raise HTTPException(status_code=404, detail="Player not in this game")

    try:
        turn: TurnView = service.submit(game_id, player_id, request.action)
        if not turn.accepted:
            raise HTTPException(status_code=409, detail=turn.error)
        events = turn.events + let_bot_play(game_id)
    except (InvariantViolation, GameDiscarded):
        logger.error("Game %s discarded after an engine failure.", game_id)
        opponents.pop(game_id, None)
        raise HTTPException(status_code=500, detail="Game discarded after an engine failure") from None
    return {
        "state": asdict(service.get_table_view(game_id, player_id)),
        "events": events,
    }


@app.delete("/games/{game_id}")
def end_game(game_id: str) -> Dict[str, object]:
    ensure_game(game_id)
    service.end_game(game_id)
    opponents.pop(game_id, None)
    return {"deleted": game_id}
