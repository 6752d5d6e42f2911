"""Exact partitioning of card pools into equal-value groups.

Used for capture legality (every selected card must be consumed by groups
worth the played value) and for hard builds (at least two such groups).
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from .cards import Card
from .subsets import ResolvedValues, card_values, subset_indices

Group = Tuple[int, ...]


def can_partition_all(
    pool: Sequence[Card],
    target: int,
    *,
    resolved: Optional[ResolvedValues] = None,
) -> bool:
    """Return True if every card in ``pool`` fits in a group summing to ``target``.

    An empty pool has no groups and is not partitionable.
    """
    return find_disjoint_builds(pool, target, 1, resolved=resolved) is not None


def find_disjoint_builds(
    pool: Sequence[Card],
    target: int,
    min_groups: int,
    *,
    resolved: Optional[ResolvedValues] = None,
) -> Optional[List[List[Card]]]:
    """Return a partition of the whole pool into ``min_groups`` or more groups.

    Every group sums to ``target`` and no card is left over. Returns None when
    no such partition exists.
    """
    cards = list(pool)
    if not cards or target <= 0:
        return None
    options = [card_values(card, resolved) for card in cards]
    groups = _partition(options, tuple(range(len(cards))), target, 0, min_groups)
    if groups is None:
        return None
    return [[cards[index] for index in group] for group in groups]


def _partition(
    options: Sequence[Tuple[int, ...]],
    remaining: Tuple[int, ...],
    target: int,
    formed: int,
    min_groups: int,
) -> Optional[List[Group]]:
    if not remaining:
        return [] if formed >= min_groups else None

    anchor, rest = remaining[0], remaining[1:]
    for group in _groups_with_anchor(options, anchor, rest, target):
        left = tuple(index for index in rest if index not in group)
        tail = _partition(options, left, target, formed + 1, min_groups)
        if tail is not None:
            return [group] + tail
    return None


def _groups_with_anchor(
    options: Sequence[Tuple[int, ...]],
    anchor: int,
    rest: Tuple[int, ...],
    target: int,
) -> Iterator[Group]:
    """Yield index groups containing ``anchor`` that sum to ``target``."""
    seen = set()
    rest_options = [options[index] for index in rest]
    for value in options[anchor]:
        needed = target - value
        if needed < 0:
            continue
        if needed == 0:
            candidates = [()]
        else:
            candidates = subset_indices(rest_options, needed)
        for chosen in candidates:
            group = (anchor,) + tuple(rest[position] for position in chosen)
            if group not in seen:
                seen.add(group)
                yield group
