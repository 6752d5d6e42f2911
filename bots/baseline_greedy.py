"""Baseline greedy bot."""

from __future__ import annotations

from typing import List, Optional, Sequence, Set

from setseize.actions import PlayerAction
from setseize.builds import flatten
from setseize.cards import RANK_VALUES, Card, Suit
from setseize.resolver import resolve_action
from setseize.scoring import TEN_OF_DIAMONDS, TWO_OF_SPADES
from setseize.state import TableState
from setseize.subsets import enumerate_subsets

from .base import BotStrategy, build_units, legal_actions


def card_worth(card: Card) -> int:
    """Rough value of holding ``card`` at the end of the game."""
    worth = 1
    if card.is_ace:
        worth += 3
    if card == TWO_OF_SPADES:
        worth += 3
    if card == TEN_OF_DIAMONDS:
        worth += 5
    if card.suit is Suit.SPADES:
        worth += 1
    return worth


def _widest_capture(state: TableState, value: int) -> List[str]:
    """Collect every matching build unit plus disjoint loose subsets."""
    selection: List[str] = []
    for members in build_units(state.builds()).values():
        if members[0].total_value == value:
            selection.extend(build.id for build in members)

    used: Set[str] = set()
    subsets = enumerate_subsets(state.loose_cards(), value)
    subsets.sort(key=len, reverse=True)
    for subset in subsets:
        ids = {other.id for other in subset}
        if ids & used:
            continue
        used |= ids
        selection.extend(other.id for other in subset)
    return selection


def _captured_cards(state: TableState, selection: Sequence[str]) -> List[Card]:
    chosen = set(selection)
    return [
        card
        for item in state.middle_items
        if item.id in chosen
        for card in flatten([item])
    ]


class GreedyBot(BotStrategy):
    name = "Greedy"

    def choose_action(self, state: TableState, player_id: str) -> PlayerAction:
        best = self._best_capture(state, player_id)
        if best is not None:
            return best

        legal = legal_actions(state, player_id)
        if not legal:
            raise RuntimeError("No legal actions available for bot.")
        drops = [action for action in legal if action.action_type == "drop"]
        if not drops:
            return legal[0]
        hand = {card.id: card for card in state.player(player_id).hand}
        drops.sort(key=lambda action: (card_worth(hand[action.played_card_id]), _rank_value(hand[action.played_card_id])))
        return drops[0]

    def _best_capture(self, state: TableState, player_id: str) -> Optional[PlayerAction]:
        best: Optional[PlayerAction] = None
        best_score = 0
        for card in state.player(player_id).hand:
            for value in card.candidate_values():
                selection = _widest_capture(state, value)
                if not selection:
                    continue
                action = PlayerAction.capture(card.id, selection, ace_value=value if card.is_ace else None)
                if not resolve_action(state, player_id, action).accepted:
                    continue
                score = card_worth(card) + sum(card_worth(taken) for taken in _captured_cards(state, selection))
                if score > best_score:
                    best, best_score = action, score
        return best


def _rank_value(card: Card) -> int:
    return RANK_VALUES.get(card.rank, 1)
