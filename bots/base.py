"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Dict, List, Optional

from setseize.actions import PlayerAction
from setseize.builds import Build
from setseize.resolver import resolve_action
from setseize.rules_schema import RuleSet
from setseize.state import TableState
from setseize.subsets import enumerate_subsets

# Loose-card subsets offered per played value; large middles have thousands.
MAX_CAPTURE_SUBSETS = 16


def build_units(builds: List[Build]) -> Dict[str, List[Build]]:
    """Group builds that have to be captured together."""
    units: Dict[str, List[Build]] = {}
    for build in builds:
        units.setdefault(build.unit_key, []).append(build)
    return units


def candidate_actions(state: TableState, player_id: str) -> List[PlayerAction]:
    """Enumerate plausible actions: single-unit captures, two-card builds, drops.

    The list is not filtered for legality; see ``legal_actions``.
    """
    player = state.player(player_id)
    loose = state.loose_cards()
    units = build_units(state.builds())
    actions: List[PlayerAction] = []
    for card in player.hand:
        for value in card.candidate_values():
            ace = value if card.is_ace else None
            for subset in enumerate_subsets(loose, value, limit=MAX_CAPTURE_SUBSETS):
                actions.append(PlayerAction.capture(card.id, [other.id for other in subset], ace_value=ace))
            for members in units.values():
                if members[0].total_value == value:
                    actions.append(PlayerAction.capture(card.id, [build.id for build in members], ace_value=ace))
            for other in loose:
                for other_value in other.candidate_values():
                    actions.append(
                        PlayerAction.build(card.id, value + other_value, [other.id], ace_value_choice=ace)
                    )
        actions.append(PlayerAction.drop(card.id))
    return actions


def legal_actions(state: TableState, player_id: str, rules: Optional[RuleSet] = None) -> List[PlayerAction]:
    """Candidate actions the resolver accepts on this table."""
    return [
        action
        for action in candidate_actions(state, player_id)
        if resolve_action(state, player_id, action, rules).accepted
    ]


class BotStrategy:
    """Base class for bot policies."""

    name: str = "BaseBot"

    def on_game_start(self, state: TableState, player_id: str) -> None:
        """Optional hook invoked after the opening deal."""
        return None

    def choose_action(self, state: TableState, player_id: str) -> PlayerAction:
        """Return the action to submit for ``player_id``."""
        legal = legal_actions(state, player_id)
        if not legal:
            raise RuntimeError("No legal actions available for bot.")
        return legal[0]
