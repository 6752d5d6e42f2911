"""Subset-sum enumeration over card pools with dual-valued Aces."""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Set, Tuple

from .cards import Card

# Card id -> value fixed for the current action (the played card).
ResolvedValues = Mapping[str, int]


def card_values(card: Card, resolved: Optional[ResolvedValues] = None) -> Tuple[int, ...]:
    if resolved is not None and card.id in resolved:
        return (resolved[card.id],)
    return card.candidate_values()


def subset_indices(
    options: Sequence[Tuple[int, ...]],
    target: int,
    limit: Optional[int] = None,
) -> List[Tuple[int, ...]]:
    """Return every non-empty index set whose chosen values sum to ``target``.

    ``options`` holds the candidate values of each position. Index sets come
    out in depth-first order and each set is reported once, even when two Ace
    assignments reach the same total. The search stops once ``limit`` sets
    have been found.
    """
    results: List[Tuple[int, ...]] = []
    seen: Set[Tuple[int, ...]] = set()
    size = len(options)

    def search(start: int, running: int, chosen: Tuple[int, ...]) -> None:
        if limit is not None and len(results) >= limit:
            return
        if running == target and chosen and chosen not in seen:
            seen.add(chosen)
            results.append(chosen)
        # Values are positive, so nothing can be added once the target is reached.
        if running >= target or start >= size:
            return
        for index in range(start, size):
            for value in options[index]:
                search(index + 1, running + value, chosen + (index,))

    search(0, 0, ())
    return results


def enumerate_subsets(
    pool: Sequence[Card],
    target: int,
    *,
    resolved: Optional[ResolvedValues] = None,
    limit: Optional[int] = None,
) -> List[List[Card]]:
    """Return subsets of ``pool`` whose values can sum exactly to ``target``.

    All of them unless ``limit`` caps the count; the first ones in search order
    are kept.
    """
    cards = list(pool)
    options = [card_values(card, resolved) for card in cards]
    return [[cards[index] for index in chosen] for chosen in subset_indices(options, target, limit)]


def possible_sums(cards: Sequence[Card], *, resolved: Optional[ResolvedValues] = None) -> Set[int]:
    """Return every total the full card list can reach under Ace choices."""
    totals = {0}
    for card in cards:
        totals = {total + value for total in totals for value in card_values(card, resolved)}
    return totals


def sums_to(cards: Sequence[Card], target: int, *, resolved: Optional[ResolvedValues] = None) -> bool:
    return target in possible_sums(cards, resolved=resolved)


def has_subset_sum(pool: Sequence[Card], target: int, *, resolved: Optional[ResolvedValues] = None) -> bool:
    """Return True if some non-empty subset of ``pool`` can sum to ``target``."""
    reachable: Set[int] = set()
    for card in pool:
        values = card_values(card, resolved)
        grown = {total + value for total in reachable for value in values if total + value <= target}
        grown.update(value for value in values if value <= target)
        reachable |= grown
        if target in reachable:
            return True
    return False
