"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional

from setseize.actions import PlayerAction
from setseize.state import TableState

from .base import BotStrategy, legal_actions


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_action(self, state: TableState, player_id: str) -> PlayerAction:
        legal = legal_actions(state, player_id)
        if not legal:
            raise RuntimeError("No legal actions available for bot.")
        return self._rng.choice(legal)
