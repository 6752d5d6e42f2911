"""Convenience service layer for UI and agents.

Views are projections of the engine's table; every rule decision is taken by
``resolve_action`` and nowhere else.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Union

from .actions import PlayerAction
from .builds import Build
from .cards import card_label
from .encode import encode_card, encode_rejection, encode_table
from .deck import DEFAULT_PLAYERS
from .errors import InvariantViolation
from .game import SetAndSeizeGame
from .obligation import can_make_any_capture, obligated_build
from .repository import GameRepository, InMemoryGameRepository
from .rules_schema import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)


@dataclass
class MiddleItemView:
    kind: str
    id: str
    label: str
    cards: list[dict]
    total_value: Optional[int] = None
    owner_id: Optional[str] = None
    is_hard: bool = False
    hard_group_id: Optional[str] = None


@dataclass
class TableView:
    game_id: str
    phase: str
    round: int
    perspective: str
    current_player_id: str
    deck_size: int
    hand: list[dict]
    hand_labels: list[str]
    opponent_hand_size: int
    middle: list[MiddleItemView]
    captured_counts: Dict[str, int]
    last_capture_player_id: Optional[str]
    must_capture: Optional[dict]
    capture_available: bool
    scores: Optional[Dict[str, int]] = None
    winner: Optional[str] = None
    breakdown: Optional[Dict[str, dict]] = None


@dataclass
class TurnView:
    accepted: bool
    table: TableView
    error: Optional[dict] = None
    events: list[dict] = field(default_factory=list)


class TableService:
    """Facade around SetAndSeizeGame and a GameRepository for UI consumers."""

    def __init__(self, repository: Optional[GameRepository] = None, rules: Optional[RuleSet] = None) -> None:
        self.repository = repository or InMemoryGameRepository()
        self.rules = rules or DEFAULT_RULES

    # Game lifecycle ----------------------------------------------------

    def start_game(
        self,
        player_ids: Sequence[str] = DEFAULT_PLAYERS,
        *,
        seed: Optional[int] = None,
        starting_player: Optional[str] = None,
    ) -> TableView:
        game = SetAndSeizeGame(
            player_ids=(player_ids[0], player_ids[1]),
            seed=seed,
            rules=self.rules,
            starting_player=starting_player,
        )
        self.repository.create(game)
        logger.info("Started game %s for %s.", game.game_id, " vs ".join(game.player_ids))
        return self.get_table_view(game.game_id, player_ids[0])

    def end_game(self, game_id: str) -> None:
        self.repository.remove(game_id)

    # Actions -----------------------------------------------------------

    def submit(self, game_id: str, player_id: str, action: Union[PlayerAction, Mapping]) -> TurnView:
        game = self.repository.get(game_id)
        try:
            outcome = game.play(player_id, action)
        except InvariantViolation:
            self.repository.remove(game_id)
            raise
        table = self.get_table_view(game_id, player_id)
        if not outcome.accepted:
            assert outcome.rejection is not None
            return TurnView(accepted=False, table=table, error=encode_rejection(outcome.rejection))
        return TurnView(
            accepted=True,
            table=table,
            events=[event.to_payload() for event in outcome.events],
        )

    # Views -------------------------------------------------------------

    def get_table_view(self, game_id: str, perspective: str) -> TableView:
        game = self.repository.get(game_id)
        state = game.state
        if perspective not in state.players:
            raise KeyError(f"Unknown player {perspective}.")
        player = state.player(perspective)
        opponent = state.player(state.opponent(perspective))

        obligation_build = obligated_build(state, perspective)
        must_capture = None
        if obligation_build is not None:
            must_capture = {"buildId": obligation_build.id, "totalValue": obligation_build.total_value}

        result = game.result
        return TableView(
            game_id=game_id,
            phase=state.phase.name.lower(),
            round=state.round_number,
            perspective=perspective,
            current_player_id=state.current_player_id,
            deck_size=len(state.deck),
            hand=[encode_card(card) for card in player.hand],
            hand_labels=[card_label(card) for card in player.hand],
            opponent_hand_size=len(opponent.hand),
            middle=[self._item_view(item) for item in state.middle_items],
            captured_counts={player_id: len(state.player(player_id).captured_pile) for player_id in state.player_order},
            last_capture_player_id=state.last_capture_player_id,
            must_capture=must_capture,
            capture_available=can_make_any_capture(player.hand, state.loose_cards(), state.builds()),
            scores=dict(result.points) if result is not None else None,
            winner=result.winner if result is not None else None,
            breakdown=(
                {player_id: asdict(entry) for player_id, entry in result.breakdown.items()}
                if result is not None
                else None
            ),
        )

    def snapshot(self, game_id: str, perspective: Optional[str] = None) -> dict:
        """Raw table payload; without a perspective the deck is included."""
        return encode_table(self.repository.get(game_id).state, perspective)

    # Helpers -----------------------------------------------------------

    def _item_view(self, item) -> MiddleItemView:
        if isinstance(item, Build):
            kind = "hard build" if item.is_hard else "build"
            return MiddleItemView(
                kind="build",
                id=item.id,
                label=f"{kind.title()} of {item.total_value} ({item.owner_id})",
                cards=[encode_card(card) for card in item.cards],
                total_value=item.total_value,
                owner_id=item.owner_id,
                is_hard=item.is_hard,
                hard_group_id=item.hard_group_id,
            )
        return MiddleItemView(kind="card", id=item.id, label=card_label(item), cards=[encode_card(item)])
