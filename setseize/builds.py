"""Build registry: creation, stacking, combining and capture selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .cards import Card
from .errors import (
    IllegalStack,
    InvalidBuildSum,
    NoValidCaptureCombination,
    PartialHardBuildCapture,
)
from .partition import find_disjoint_builds
from .subsets import sums_to

HARD_BUILD_MIN_GROUPS = 2


@dataclass(frozen=True)
class Build:
    """A pile of middle cards declared to be worth ``total_value``.

    Builds never change after creation; stacking or combining replaces them.
    """

    id: str
    cards: Tuple[Card, ...]
    total_value: int
    owner_id: str
    is_hard: bool = False
    hard_group_id: Optional[str] = None

    @property
    def card_ids(self) -> FrozenSet[str]:
        return frozenset(card.id for card in self.cards)

    @property
    def unit_key(self) -> str:
        """Key shared by all builds that must be captured together."""
        return self.hard_group_id or self.id


MiddleItem = Union[Card, Build]


def is_build(item: MiddleItem) -> bool:
    return isinstance(item, Build)


def flatten(items: Iterable[MiddleItem]) -> List[Card]:
    cards: List[Card] = []
    for item in items:
        if isinstance(item, Build):
            cards.extend(item.cards)
        else:
            cards.append(item)
    return cards


class BuildRegistry:
    """Working copy of the middle zone for the duration of one action.

    Every operation validates before it mutates, but callers still discard
    the registry whenever a ``RuleViolation`` escapes.
    """

    def __init__(self, items: Iterable[MiddleItem], counter: int = 0) -> None:
        self.items: List[MiddleItem] = list(items)
        self.counter = counter

    # Lookups -----------------------------------------------------------

    def builds(self) -> List[Build]:
        return [item for item in self.items if isinstance(item, Build)]

    def loose_cards(self) -> List[Card]:
        return [item for item in self.items if isinstance(item, Card)]

    def get(self, build_id: str) -> Optional[Build]:
        return next((build for build in self.builds() if build.id == build_id), None)

    def group_members(self, build: Build) -> List[Build]:
        if build.hard_group_id is None:
            return [build]
        return [other for other in self.builds() if other.hard_group_id == build.hard_group_id]

    def owned_by(self, owner_id: str) -> List[Build]:
        return [build for build in self.builds() if build.owner_id == owner_id]

    # Mutations ---------------------------------------------------------

    def add(self, build: Build) -> Build:
        self.items.append(build)
        return build

    def remove(self, build_ids: Iterable[str]) -> None:
        doomed = set(build_ids)
        self.items = [item for item in self.items if not (isinstance(item, Build) and item.id in doomed)]

    def take_loose(self, card_ids: Iterable[str]) -> List[Card]:
        """Remove and return the named loose cards for use in a new build."""
        wanted = list(dict.fromkeys(card_ids))
        loose = {card.id: card for card in self.loose_cards()}
        build_card_ids = {card_id for build in self.builds() for card_id in build.card_ids}
        build_ids = {build.id for build in self.builds()}
        taken: List[Card] = []
        for card_id in wanted:
            if card_id in loose:
                taken.append(loose[card_id])
            elif card_id in build_card_ids or card_id in build_ids:
                raise IllegalStack(f"{card_id} belongs to a build; use stacking to extend builds.")
            else:
                raise InvalidBuildSum(f"{card_id} is not a loose middle card.")
        taken_ids = {card.id for card in taken}
        self.items = [item for item in self.items if not (isinstance(item, Card) and item.id in taken_ids)]
        return taken

    def _next_id(self, prefix: str) -> str:
        self.counter += 1
        return f"{prefix}{self.counter}"

    # Build actions -----------------------------------------------------

    def create_soft(
        self,
        owner_id: str,
        played: Card,
        played_value: int,
        middle_ids: Sequence[str],
        target: int,
    ) -> Build:
        middle = self.take_loose(middle_ids)
        if not middle:
            raise InvalidBuildSum("A soft build needs at least one middle card.")
        if not sums_to(middle, target - played_value):
            raise InvalidBuildSum(f"{played.id} and the selected cards do not add up to {target}.")
        return self.add(
            Build(
                id=self._next_id("B"),
                cards=(played, *middle),
                total_value=target,
                owner_id=owner_id,
            )
        )

    def create_hard(
        self,
        owner_id: str,
        played: Card,
        played_value: int,
        middle_ids: Sequence[str],
        pair_card: Optional[Card],
        target: int,
    ) -> List[Build]:
        pool = [played, *self.take_loose(middle_ids)]
        if pair_card is not None:
            pool.append(pair_card)
        groups = find_disjoint_builds(pool, target, HARD_BUILD_MIN_GROUPS, resolved={played.id: played_value})
        if groups is None:
            raise InvalidBuildSum(f"The cards cannot be split into two or more groups of {target}.")
        group_id = self._next_id("G")
        return [
            self.add(
                Build(
                    id=self._next_id("B"),
                    cards=tuple(group),
                    total_value=target,
                    owner_id=owner_id,
                    is_hard=True,
                    hard_group_id=group_id,
                )
            )
            for group in groups
        ]

    def stack(
        self,
        owner_id: str,
        played: Card,
        played_value: int,
        build_id: str,
        middle_ids: Sequence[str],
        target: int,
    ) -> Tuple[Build, Build]:
        """Raise an opponent's soft build to ``target``; return (old, new)."""
        base = self.get(build_id)
        if base is None:
            raise IllegalStack(f"No build {build_id} on the table.")
        if base.is_hard:
            raise IllegalStack("Hard builds cannot be extended.")
        if base.owner_id == owner_id:
            raise IllegalStack("You cannot stack on your own build.")
        middle = self.take_loose(middle_ids)
        if not sums_to(middle, target - base.total_value - played_value):
            raise InvalidBuildSum(f"Stacking on {base.total_value} does not reach {target}.")
        self.remove([base.id])
        stacked = self.add(
            Build(
                id=self._next_id("B"),
                cards=(*base.cards, played, *middle),
                total_value=target,
                owner_id=owner_id,
            )
        )
        return base, stacked

    def add_groups(self, owner_id: str, groups: Sequence[Sequence[str]], target: int) -> List[Build]:
        created: List[Build] = []
        for group in groups:
            if not group:
                continue
            cards = self.take_loose(group)
            if not sums_to(cards, target):
                raise InvalidBuildSum(f"Cards {', '.join(group)} do not add up to {target}.")
            created.append(
                self.add(Build(id=self._next_id("B"), cards=tuple(cards), total_value=target, owner_id=owner_id))
            )
        return created

    def combine_matching(self, owner_id: str, target: int) -> Optional[Tuple[Build, List[Build]]]:
        """Merge the owner's same-value builds into one hard build.

        Returns the merged build and the builds it consumed, or None when the
        owner holds fewer than two separately capturable builds of ``target``.
        """
        matching = [build for build in self.owned_by(owner_id) if build.total_value == target]
        if len({build.unit_key for build in matching}) < 2:
            return None
        cards = tuple(card for build in matching for card in build.cards)
        self.remove(build.id for build in matching)
        group_id = self._next_id("G")
        merged = self.add(
            Build(
                id=self._next_id("B"),
                cards=cards,
                total_value=target,
                owner_id=owner_id,
                is_hard=True,
                hard_group_id=group_id,
            )
        )
        return merged, matching

    # Capture -----------------------------------------------------------

    def select_for_capture(self, selected_ids: Sequence[str], value: int) -> Tuple[List[Card], List[Build]]:
        """Resolve selected ids into loose cards and whole builds.

        Ids may name loose cards, builds, or individual cards inside builds.
        """
        loose = {card.id: card for card in self.loose_cards()}
        builds = {build.id: build for build in self.builds()}
        owner_of_card: Dict[str, Build] = {card.id: build for build in builds.values() for card in build.cards}

        taken_loose: List[Card] = []
        whole: Dict[str, Build] = {}
        touched: Dict[str, Set[str]] = {}
        for selected in dict.fromkeys(selected_ids):
            if selected in loose:
                taken_loose.append(loose[selected])
            elif selected in builds:
                whole[selected] = builds[selected]
            elif selected in owner_of_card:
                touched.setdefault(owner_of_card[selected].id, set()).add(selected)
            else:
                raise NoValidCaptureCombination(f"{selected} is not in the middle.")

        for build_id, card_ids in touched.items():
            build = builds[build_id]
            if build_id in whole:
                continue
            if card_ids == set(build.card_ids):
                whole[build_id] = build
            elif build.is_hard:
                raise PartialHardBuildCapture(f"Hard build {build_id} must be captured in full.")
            else:
                raise NoValidCaptureCombination(f"Build {build_id} must be captured whole.")

        for build in list(whole.values()):
            if not build.is_hard:
                continue
            missing = [member.id for member in self.group_members(build) if member.id not in whole]
            if missing:
                raise PartialHardBuildCapture(
                    f"Hard build group {build.hard_group_id} also includes {', '.join(missing)}."
                )

        for build in whole.values():
            if build.total_value != value:
                raise NoValidCaptureCombination(f"Build {build.id} is worth {build.total_value}, not {value}.")

        return taken_loose, list(whole.values())
