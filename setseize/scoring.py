"""End-of-game scoring for Set & Seize."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .cards import Card, Rank, Suit
from .rules_schema import DEFAULT_RULES, RuleSet, ScoringConfig
from .state import Phase, TableState, refresh_build_ownership

logger = logging.getLogger(__name__)

TWO_OF_SPADES = Card(Rank.TWO, Suit.SPADES)
TEN_OF_DIAMONDS = Card(Rank.TEN, Suit.DIAMONDS)


class ScoringError(ValueError):
    """Raised when scoring is asked for an unsupported table."""


@dataclass(frozen=True)
class PlayerScoreBreakdown:
    card_count: int
    spades_count: int
    aces: int = 0
    two_of_spades: int = 0
    ten_of_diamonds: int = 0
    most_spades: int = 0
    most_cards: int = 0

    @property
    def total(self) -> int:
        return self.aces + self.two_of_spades + self.ten_of_diamonds + self.most_spades + self.most_cards


@dataclass(frozen=True)
class GameScoreResult:
    points: Dict[str, int]
    breakdown: Dict[str, PlayerScoreBreakdown]
    winner: Optional[str]

    @property
    def is_draw(self) -> bool:
        return self.winner is None


def _card_points(pile: Sequence[Card], config: ScoringConfig) -> PlayerScoreBreakdown:
    return PlayerScoreBreakdown(
        card_count=len(pile),
        spades_count=sum(1 for card in pile if card.suit is Suit.SPADES),
        aces=config.ace_points * sum(1 for card in pile if card.is_ace),
        two_of_spades=config.two_of_spades_points if TWO_OF_SPADES in pile else 0,
        ten_of_diamonds=config.ten_of_diamonds_points if TEN_OF_DIAMONDS in pile else 0,
    )


def score_piles(piles: Mapping[str, Sequence[Card]], config: Optional[ScoringConfig] = None) -> GameScoreResult:
    """Score two captured piles and name the winner (None on a draw)."""
    if len(piles) != 2:
        raise ScoringError("Exactly two players are supported.")
    config = config or DEFAULT_RULES.scoring

    (first, first_pile), (second, second_pile) = piles.items()
    a = _card_points(first_pile, config)
    b = _card_points(second_pile, config)

    if a.spades_count > b.spades_count:
        a = replace(a, most_spades=config.most_spades_bonus)
    elif b.spades_count > a.spades_count:
        b = replace(b, most_spades=config.most_spades_bonus)

    split = a.card_count == b.card_count == config.split_card_count
    if not split:
        if a.card_count > b.card_count:
            a = replace(a, most_cards=config.most_cards_bonus)
        elif b.card_count > a.card_count:
            b = replace(b, most_cards=config.most_cards_bonus)

    points = {first: a.total, second: b.total}
    if a.total > b.total:
        winner: Optional[str] = first
    elif b.total > a.total:
        winner = second
    else:
        winner = None
    return GameScoreResult(points=points, breakdown={first: a, second: b}, winner=winner)


def sweep_middle(state: TableState) -> TableState:
    """Award the remaining middle cards to the last player who captured.

    With no capture all game long the middle stays unclaimed.
    """
    captor = state.last_capture_player_id
    if captor is None or not state.middle_items:
        return state
    remaining = state.middle_cards()
    logger.info("%s takes the remaining %d middle cards.", captor, len(remaining))
    players = dict(state.players)
    players[captor] = replace(players[captor], captured_pile=players[captor].captured_pile + tuple(remaining))
    return replace(
        state,
        middle_items=(),
        players=refresh_build_ownership(players, ()),
        obligation=None,
    )


def finish_game(state: TableState, rules: Optional[RuleSet] = None) -> Tuple[TableState, GameScoreResult]:
    rules = rules or DEFAULT_RULES
    swept = sweep_middle(state)
    result = score_piles(
        {player_id: swept.player(player_id).captured_pile for player_id in swept.player_order},
        rules.scoring,
    )
    logger.info("Game over: points %s, winner %s.", result.points, result.winner or "draw")
    return replace(swept, phase=Phase.GAME_OVER), result
