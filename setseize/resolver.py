"""Single authoritative resolution of one player action against a table."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .actions import PlayerAction
from .builds import Build, BuildRegistry, flatten
from .cards import Card, can_take_value, resolve_value
from .deck import advance_round
from .errors import (
    CardNotInHand,
    IllegalStack,
    InvalidBuildSum,
    InvariantViolation,
    MalformedAction,
    MissingBuildTargetValue,
    NoValidCaptureCombination,
    RuleViolation,
    TurnError,
)
from .events import RoundEvent
from .obligation import enforce_obligation, reconcile_obligation
from .partition import can_partition_all
from .rules_schema import RuleSet
from .scoring import GameScoreResult
from .state import Obligation, Phase, TableState, check_invariants, refresh_build_ownership

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejection:
    kind: str
    message: str


@dataclass(frozen=True)
class ActionResult:
    """Outcome of ``resolve_action``.

    On rejection ``state`` is the unchanged input table.
    """

    state: TableState
    rejection: Optional[Rejection] = None
    events: Tuple[RoundEvent, ...] = ()
    score: Optional[GameScoreResult] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


def resolve_action(
    state: TableState,
    player_id: str,
    action: Union[PlayerAction, Mapping],
    rules: Optional[RuleSet] = None,
) -> ActionResult:
    """Apply one action and return the next table, or a rejection.

    Raises:
        InvariantViolation: the engine produced an inconsistent table; the
            game instance must be discarded.
    """
    if not isinstance(action, PlayerAction):
        try:
            action = PlayerAction.model_validate(action)
        except ValidationError as exc:
            logger.info("Rejected malformed action from %s: %s", player_id, exc)
            message = f"Malformed action: {exc.error_count()} invalid field(s)."
            return ActionResult(state=state, rejection=Rejection(MalformedAction.__name__, message))

    try:
        played_state = _apply(state, player_id, action)
    except RuleViolation as exc:
        logger.info("Rejected %s from %s: %s (%s)", action.action_type, player_id, exc.kind, exc)
        return ActionResult(state=state, rejection=Rejection(exc.kind, str(exc)))

    _verify(played_state, player_id, action)
    next_state, events, score = advance_round(played_state, rules)
    _verify(next_state, player_id, action)
    return ActionResult(state=next_state, events=tuple(events), score=score)


def _verify(state: TableState, player_id: str, action: PlayerAction) -> None:
    try:
        check_invariants(state)
    except InvariantViolation:
        logger.error("Table invariant broken after %s by %s with %s.", action.action_type, player_id, action.played_card_id)
        raise


@dataclass
class _Turn:
    """Mutable scratch space for one action; frozen into a new table at the end."""

    state: TableState
    player_id: str
    hand: List[Card]
    captured: List[Card]
    registry: BuildRegistry
    obligation: Optional[Obligation]
    last_capture_player_id: Optional[str]

    @classmethod
    def start(cls, state: TableState, player_id: str, played: Card) -> "_Turn":
        player = state.player(player_id)
        return cls(
            state=state,
            player_id=player_id,
            hand=[card for card in player.hand if card != played],
            captured=list(player.captured_pile),
            registry=BuildRegistry(state.middle_items, state.build_counter),
            obligation=state.obligation,
            last_capture_player_id=state.last_capture_player_id,
        )

    def finish(self) -> TableState:
        players = dict(self.state.players)
        players[self.player_id] = replace(
            players[self.player_id],
            hand=tuple(self.hand),
            captured_pile=tuple(self.captured),
        )
        items = tuple(self.registry.items)
        return replace(
            self.state,
            middle_items=items,
            players=refresh_build_ownership(players, items),
            current_player_id=self.state.opponent(self.player_id),
            last_capture_player_id=self.last_capture_player_id,
            obligation=reconcile_obligation(self.obligation, self.registry.builds()),
            build_counter=self.registry.counter,
        )


def _apply(state: TableState, player_id: str, action: PlayerAction) -> TableState:
    if state.phase is not Phase.PLAYING:
        raise TurnError(f"Actions are not accepted during {state.phase.name.lower()}.")
    if player_id not in state.players:
        raise TurnError(f"Unknown player {player_id}.")
    if player_id != state.current_player_id:
        raise TurnError("Not this player's turn.")

    played = state.player(player_id).find_in_hand(action.played_card_id)
    if played is None:
        raise CardNotInHand(f"Card {action.played_card_id} is not in your hand.")
    value = resolve_value(played, action.ace_value_choice)

    enforce_obligation(state, player_id, action.action_type, action.build_target_value)

    turn = _Turn.start(state, player_id, played)
    if action.action_type == "drop":
        turn.registry.items.append(played)
        logger.info("%s drops %s.", player_id, played.id)
    elif action.action_type == "capture":
        _capture(turn, played, value, action.selected_middle_card_ids)
    else:
        _build(turn, played, value, action)
    return turn.finish()


def _capture(turn: _Turn, played: Card, value: int, selected_ids: List[str]) -> None:
    if not selected_ids:
        raise NoValidCaptureCombination("Select at least one middle card or build to capture.")
    loose, builds = turn.registry.select_for_capture(selected_ids, value)
    pool = loose + flatten(builds)
    if not can_partition_all(pool, value):
        raise NoValidCaptureCombination(f"The selected cards cannot be grouped into sums of {value}.")

    turn.registry.take_loose(card.id for card in loose)
    turn.registry.remove(build.id for build in builds)
    turn.captured.extend([played, *pool])
    turn.last_capture_player_id = turn.player_id
    logger.info(
        "%s captures %s with %s (value %d).",
        turn.player_id,
        ", ".join(card.id for card in pool),
        played.id,
        value,
    )


def _build(turn: _Turn, played: Card, value: int, action: PlayerAction) -> None:
    target = action.build_target_value
    if target is None:
        raise MissingBuildTargetValue("A build needs a target value.")

    pair_card: Optional[Card] = None
    if action.card_to_pair_for_hard_build_id:
        if not action.is_hard_build:
            raise InvalidBuildSum("A pairing card can only be used for a hard build.")
        if action.build_to_stack_on_id:
            raise IllegalStack("A pairing card cannot be used when stacking.")
        pair_card = next((card for card in turn.hand if card.id == action.card_to_pair_for_hard_build_id), None)
        if pair_card is None:
            raise CardNotInHand(f"Pairing card {action.card_to_pair_for_hard_build_id} is not in your hand.")
        turn.hand.remove(pair_card)

    # The pairing card goes into the build, so it cannot be the card that takes it.
    if not any(can_take_value(card, target) for card in turn.hand):
        raise MissingBuildTargetValue(f"You need a card worth {target} left in hand to take this build.")

    registry = turn.registry
    primary: Build
    if action.build_to_stack_on_id:
        base, primary = registry.stack(
            turn.player_id, played, value, action.build_to_stack_on_id, action.selected_middle_card_ids, target
        )
        logger.info("%s stacks %s on %s (%d -> %d).", turn.player_id, played.id, base.id, base.total_value, target)
    elif action.is_hard_build:
        group = registry.create_hard(
            turn.player_id, played, value, action.selected_middle_card_ids, pair_card, target
        )
        primary = group[0]
        logger.info("%s makes a hard %d in %d piles.", turn.player_id, target, len(group))
    else:
        primary = registry.create_soft(turn.player_id, played, value, action.selected_middle_card_ids, target)
        logger.info("%s builds %d with %s.", turn.player_id, target, played.id)

    registry.add_groups(turn.player_id, action.additional_build_groups, target)
    combined = registry.combine_matching(turn.player_id, target)
    if combined is not None:
        primary, consumed = combined
        logger.info("%s combines %d builds of %d into hard build %s.", turn.player_id, len(consumed), target, primary.id)
    turn.obligation = Obligation(owner_id=turn.player_id, build_id=primary.id)
