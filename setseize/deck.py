"""Deck creation and dealing for Set & Seize."""

from __future__ import annotations

import logging
from dataclasses import replace
from random import Random
from typing import Dict, List, Optional, Sequence, Tuple

from .cards import Card, build_deck
from .events import ROUND_DEALT, ROUND_OVER, RoundEvent
from .rules_schema import DEFAULT_RULES, RuleSet
from .scoring import GameScoreResult, finish_game
from .state import DECK_SIZE, Phase, PlayerState, TableState

logger = logging.getLogger(__name__)

DEFAULT_PLAYERS: Tuple[str, str] = ("player1", "player2")

__all__ = [
    "DEFAULT_PLAYERS",
    "advance_round",
    "build_deck",
    "deal_new_game",
    "deal_round",
    "shuffled_deck",
]


def shuffled_deck(rng: Optional[Random] = None) -> List[Card]:
    cards = build_deck()
    (rng or Random()).shuffle(cards)
    return cards


def deal_new_game(
    player_ids: Sequence[str] = DEFAULT_PLAYERS,
    *,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
    rules: Optional[RuleSet] = None,
    starting_player: Optional[str] = None,
) -> Tuple[TableState, List[RoundEvent]]:
    """Create a fresh table and run the opening deal."""
    cards = list(deck) if deck is not None else shuffled_deck(rng)
    if len(cards) != DECK_SIZE:
        raise ValueError(f"Deck must contain exactly {DECK_SIZE} cards.")
    if len(player_ids) != 2 or player_ids[0] == player_ids[1]:
        raise ValueError("Set & Seize needs two distinct players.")

    order = (player_ids[0], player_ids[1])
    state = TableState(
        deck=tuple(cards),
        middle_items=(),
        players={player_id: PlayerState(id=player_id) for player_id in order},
        player_order=order,
        current_player_id=starting_player or order[0],
        phase=Phase.DEALING,
    )
    return deal_round(state, rules, opening=True)


def deal_round(
    state: TableState,
    rules: Optional[RuleSet] = None,
    *,
    opening: bool = False,
) -> Tuple[TableState, List[RoundEvent]]:
    """Deal a hand to each player, and the middle at game start.

    Moves the table to SCORING instead when the deck cannot cover the deal.
    """
    deal = (rules or DEFAULT_RULES).deal
    middle_count = deal.middle_cards if opening else 0
    needed = deal.hand_size * len(state.player_order) + middle_count
    if len(state.deck) < needed:
        logger.info("Deck has %d cards, %d needed; moving to scoring.", len(state.deck), needed)
        return replace(state, phase=Phase.SCORING), []

    deck = list(state.deck)
    dealt: Dict[str, List[Card]] = {player_id: [] for player_id in state.player_order}
    for _ in range(deal.hand_size):
        for player_id in state.player_order:
            dealt[player_id].append(deck.pop(0))
    middle = list(state.middle_items) + deck[:middle_count]
    deck = deck[middle_count:]

    players = {
        player_id: replace(player, hand=player.hand + tuple(dealt[player_id]))
        for player_id, player in state.players.items()
    }
    dealt_state = replace(
        state,
        deck=tuple(deck),
        middle_items=tuple(middle),
        players=players,
        phase=Phase.PLAYING,
        round_number=state.round_number + 1,
    )
    logger.info("Round %d dealt; %d cards left in the deck.", dealt_state.round_number, len(deck))
    return dealt_state, [RoundEvent(ROUND_DEALT, dealt_state.round_number)]


def advance_round(
    state: TableState,
    rules: Optional[RuleSet] = None,
) -> Tuple[TableState, List[RoundEvent], Optional[GameScoreResult]]:
    """Deal or score once both hands are empty; otherwise a no-op."""
    if state.phase is not Phase.PLAYING or not state.hands_empty():
        return state, [], None

    next_state, events = deal_round(replace(state, phase=Phase.DEALING), rules)
    if next_state.phase is not Phase.SCORING:
        return next_state, events, None

    final_state, result = finish_game(next_state, rules)
    events.append(RoundEvent(ROUND_OVER, final_state.round_number, scores=dict(result.points), winner=result.winner))
    return final_state, events, result
