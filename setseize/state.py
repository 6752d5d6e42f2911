"""Table state for Set & Seize."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from .builds import Build, MiddleItem, flatten
from .cards import Card, build_deck
from .errors import InvariantViolation

DECK_SIZE = 52


class Phase(Enum):
    DEALING = auto()
    PLAYING = auto()
    SCORING = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class Obligation:
    """``owner_id`` must capture ``build_id`` (or build its value again)."""

    owner_id: str
    build_id: str


@dataclass(frozen=True)
class PlayerState:
    id: str
    hand: Tuple[Card, ...] = ()
    captured_pile: Tuple[Card, ...] = ()
    active_build_ids: FrozenSet[str] = frozenset()

    def find_in_hand(self, card_id: str) -> Optional[Card]:
        return next((card for card in self.hand if card.id == card_id), None)


@dataclass(frozen=True)
class TableState:
    """Immutable snapshot of one game; every accepted action yields a new one."""

    deck: Tuple[Card, ...]
    middle_items: Tuple[MiddleItem, ...]
    players: Mapping[str, PlayerState]
    player_order: Tuple[str, str]
    current_player_id: str
    phase: Phase = Phase.PLAYING
    last_capture_player_id: Optional[str] = None
    obligation: Optional[Obligation] = None
    build_counter: int = 0
    round_number: int = 0

    def __post_init__(self) -> None:
        if len(self.player_order) != 2:
            raise ValueError("TableState supports exactly two players.")
        if set(self.player_order) != set(self.players):
            raise ValueError("player_order must list every seated player.")

    def opponent(self, player_id: str) -> str:
        first, second = self.player_order
        return second if player_id == first else first

    def player(self, player_id: str) -> PlayerState:
        return self.players[player_id]

    def builds(self) -> List[Build]:
        return [item for item in self.middle_items if isinstance(item, Build)]

    def find_build(self, build_id: str) -> Optional[Build]:
        return next((build for build in self.builds() if build.id == build_id), None)

    def loose_cards(self) -> List[Card]:
        return [item for item in self.middle_items if isinstance(item, Card)]

    def middle_cards(self) -> List[Card]:
        return flatten(self.middle_items)

    def hands_empty(self) -> bool:
        return all(not player.hand for player in self.players.values())

    def is_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def with_player(self, player: PlayerState) -> "TableState":
        players = dict(self.players)
        players[player.id] = player
        return replace(self, players=players)

    @classmethod
    def from_layout(
        cls,
        *,
        hands: Mapping[str, Sequence[str]],
        middle: Sequence[object] = (),
        captured: Optional[Mapping[str, Sequence[str]]] = None,
        deck: Optional[Sequence[str]] = None,
        current_player_id: Optional[str] = None,
        last_capture_player_id: Optional[str] = None,
        obligation: Optional[Obligation] = None,
        phase: Phase = Phase.PLAYING,
    ) -> "TableState":
        """Arrange a table from explicit card ids.

        ``middle`` entries are card ids or ready-made ``Build`` objects. When
        ``deck`` is omitted the remaining cards of a fresh deck fill it, in
        deck order, so the table always holds all 52 cards.
        """
        captured = captured or {}
        order = tuple(hands)
        items: List[MiddleItem] = [Card.from_id(entry) if isinstance(entry, str) else entry for entry in middle]
        players: Dict[str, PlayerState] = {}
        for player_id in order:
            owned = frozenset(
                item.id for item in items if isinstance(item, Build) and item.owner_id == player_id
            )
            players[player_id] = PlayerState(
                id=player_id,
                hand=tuple(Card.from_id(card_id) for card_id in hands[player_id]),
                captured_pile=tuple(Card.from_id(card_id) for card_id in captured.get(player_id, ())),
                active_build_ids=owned,
            )
        placed = {card.id for card in flatten(items)}
        for player in players.values():
            placed.update(card.id for card in player.hand)
            placed.update(card.id for card in player.captured_pile)
        if deck is None:
            deck_cards = tuple(card for card in build_deck() if card.id not in placed)
        else:
            deck_cards = tuple(Card.from_id(card_id) for card_id in deck)
        counter = max(
            (_id_number(key) for item in items if isinstance(item, Build) for key in (item.id, item.hard_group_id or "")),
            default=0,
        )
        return cls(
            deck=deck_cards,
            middle_items=tuple(items),
            players=players,
            player_order=(order[0], order[1]),
            current_player_id=current_player_id or order[0],
            phase=phase,
            last_capture_player_id=last_capture_player_id,
            obligation=obligation,
            build_counter=counter,
        )


def _id_number(identifier: str) -> int:
    digits = "".join(ch for ch in identifier if ch.isdigit())
    return int(digits) if digits else 0


def zone_cards(state: TableState) -> Dict[str, List[Card]]:
    """Return every zone's cards keyed by a readable zone name."""
    zones: Dict[str, List[Card]] = {"deck": list(state.deck), "middle": state.middle_cards()}
    for player_id, player in state.players.items():
        zones[f"hand:{player_id}"] = list(player.hand)
        zones[f"captured:{player_id}"] = list(player.captured_pile)
    return zones


def check_invariants(state: TableState) -> None:
    """Raise InvariantViolation if the table is internally inconsistent."""
    zones = zone_cards(state)
    total = sum(len(cards) for cards in zones.values())
    if total != DECK_SIZE:
        raise InvariantViolation(f"Card conservation broken: {total} cards on the table.")

    counts = Counter(card.id for cards in zones.values() for card in cards)
    duplicated = sorted(card_id for card_id, count in counts.items() if count > 1)
    if duplicated:
        raise InvariantViolation(f"Cards in more than one zone: {', '.join(duplicated)}.")

    builds = state.builds()
    build_ids = [build.id for build in builds]
    if len(set(build_ids)) != len(build_ids):
        raise InvariantViolation("Duplicate build ids in the middle.")
    for player_id, player in state.players.items():
        owned = frozenset(build.id for build in builds if build.owner_id == player_id)
        if owned != player.active_build_ids:
            raise InvariantViolation(f"Active builds of {player_id} out of sync with the middle.")

    obligation = state.obligation
    if obligation is not None:
        build = state.find_build(obligation.build_id)
        if build is None or build.owner_id != obligation.owner_id:
            raise InvariantViolation(
                f"Obligation of {obligation.owner_id} references missing build {obligation.build_id}."
            )


def refresh_build_ownership(players: Mapping[str, PlayerState], items: Iterable[MiddleItem]) -> Dict[str, PlayerState]:
    """Return players whose ``active_build_ids`` match the given middle items."""
    builds = [item for item in items if isinstance(item, Build)]
    refreshed: Dict[str, PlayerState] = {}
    for player_id, player in players.items():
        owned = frozenset(build.id for build in builds if build.owner_id == player_id)
        refreshed[player_id] = replace(player, active_build_ids=owned)
    return refreshed
