"""Must-capture obligation tracking and the legality gate it imposes."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .builds import Build
from .cards import Card
from .errors import ObligationViolation
from .state import Obligation, TableState
from .subsets import has_subset_sum

__all__ = [
    "Obligation",
    "can_make_any_capture",
    "enforce_obligation",
    "obligated_build",
    "reconcile_obligation",
]


def obligated_build(state: TableState, player_id: str) -> Optional[Build]:
    """Return the build ``player_id`` is obligated to capture, if any."""
    obligation = state.obligation
    if obligation is None or obligation.owner_id != player_id:
        return None
    build = state.find_build(obligation.build_id)
    if build is None or build.owner_id != player_id:
        return None
    return build


def can_make_any_capture(hand: Sequence[Card], loose: Sequence[Card], builds: Iterable[Build]) -> bool:
    """Return True if any hand card, under any Ace value, could capture something."""
    build_values = {build.total_value for build in builds}
    for card in hand:
        for value in card.candidate_values():
            if value in build_values:
                return True
            if has_subset_sum(loose, value):
                return True
    return False


def enforce_obligation(state: TableState, player_id: str, action_type: str, build_target: Optional[int]) -> None:
    """Reject actions that dodge a standing must-capture obligation.

    The gate only binds while the obligated player has a capture available;
    otherwise the obligation is waived for this turn.
    """
    build = obligated_build(state, player_id)
    if build is None or action_type == "capture":
        return
    if action_type == "build" and build_target == build.total_value:
        return
    hand = state.player(player_id).hand
    if not can_make_any_capture(hand, state.loose_cards(), state.builds()):
        return
    if action_type == "drop":
        raise ObligationViolation(
            f"You must capture or build {build.total_value} again; dropping is not allowed."
        )
    raise ObligationViolation(
        f"You must capture or build {build.total_value} again; building {build_target} is not allowed."
    )


def reconcile_obligation(obligation: Optional[Obligation], builds: Iterable[Build]) -> Optional[Obligation]:
    """Drop the obligation once its build is gone or has changed hands."""
    if obligation is None:
        return None
    for build in builds:
        if build.id == obligation.build_id:
            return obligation if build.owner_id == obligation.owner_id else None
    return None
