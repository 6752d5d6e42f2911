"""High-level game orchestration for Set & Seize."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from random import Random
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from .actions import PlayerAction
from .cards import Card
from .deck import DEFAULT_PLAYERS, deal_new_game
from .errors import InvariantViolation
from .events import RoundEvent
from .resolver import ActionResult, resolve_action
from .rules_schema import DEFAULT_RULES, RuleSet
from .scoring import GameScoreResult
from .state import TableState

logger = logging.getLogger(__name__)


class GameDiscarded(RuntimeError):
    """Raised when acting on a game whose table broke an invariant."""


@dataclass
class SetAndSeizeGame:
    """Own one table and feed it actions, one at a time."""

    player_ids: Tuple[str, str] = DEFAULT_PLAYERS
    seed: Optional[int] = None
    rules: RuleSet = field(default_factory=lambda: DEFAULT_RULES)
    deck: Optional[Sequence[Card]] = None
    starting_player: Optional[str] = None
    game_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    state: TableState = field(init=False)
    history: List[Tuple[str, PlayerAction]] = field(init=False, default_factory=list)
    events: List[RoundEvent] = field(init=False, default_factory=list)
    result: Optional[GameScoreResult] = field(init=False, default=None)
    discarded: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        rng = Random(self.seed)
        self.state, events = deal_new_game(
            self.player_ids,
            rng=rng,
            deck=self.deck,
            rules=self.rules,
            starting_player=self.starting_player,
        )
        self.events.extend(events)

    @property
    def current_player(self) -> str:
        return self.state.current_player_id

    def is_over(self) -> bool:
        return self.state.is_over()

    def play(self, player_id: str, action: Union[PlayerAction, Mapping]) -> ActionResult:
        if self.discarded:
            raise GameDiscarded(f"Game {self.game_id} was discarded after an engine failure.")
        try:
            outcome = resolve_action(self.state, player_id, action, self.rules)
        except InvariantViolation:
            self.discarded = True
            logger.exception("Discarding game %s.", self.game_id)
            raise
        if not outcome.accepted:
            return outcome

        self.state = outcome.state
        parsed = action if isinstance(action, PlayerAction) else PlayerAction.model_validate(action)
        self.history.append((player_id, parsed))
        self.events.extend(outcome.events)
        if outcome.score is not None:
            self.result = outcome.score
        return outcome
