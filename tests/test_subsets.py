from setseize.cards import cards_from_ids
from setseize.subsets import enumerate_subsets, has_subset_sum, possible_sums, sums_to


def _ids(subsets):
    return [[card.id for card in subset] for subset in subsets]


def test_enumerates_every_subset_in_search_order():
    pool = cards_from_ids(["2S", "3H", "5D", "6C"])
    assert _ids(enumerate_subsets(pool, 8)) == [["2S", "6C"], ["3H", "5D"]]


def test_lone_ace_matches_one_or_fourteen_only():
    pool = cards_from_ids(["AS"])
    assert _ids(enumerate_subsets(pool, 1)) == [["AS"]]
    assert _ids(enumerate_subsets(pool, 14)) == [["AS"]]
    assert enumerate_subsets(pool, 7) == []


def test_two_aces_reported_once_per_subset():
    pool = cards_from_ids(["AS", "AH"])
    assert _ids(enumerate_subsets(pool, 15)) == [["AS", "AH"]]
    assert _ids(enumerate_subsets(pool, 2)) == [["AS", "AH"]]


def test_resolved_values_pin_an_ace():
    pool = cards_from_ids(["AS", "3H"])
    assert _ids(enumerate_subsets(pool, 4)) == [["AS", "3H"]]
    assert enumerate_subsets(pool, 4, resolved={"AS": 14}) == []


def test_empty_pool_has_no_subsets():
    assert enumerate_subsets([], 5) == []


def test_possible_sums_cover_ace_choices():
    assert possible_sums(cards_from_ids(["AS", "2H"])) == {3, 16}
    assert sums_to(cards_from_ids(["AS", "2H"]), 16)
    assert sums_to([], 0)


def test_has_subset_sum():
    pool = cards_from_ids(["9H", "4D", "QC"])
    assert has_subset_sum(pool, 13)
    assert not has_subset_sum(pool, 5)
    assert not has_subset_sum([], 3)


def test_limit_keeps_the_first_subsets_in_search_order():
    pool = cards_from_ids(["2S", "3H", "5D", "6C", "4H", "4D"])
    everything = _ids(enumerate_subsets(pool, 8))
    assert len(everything) > 2
    assert _ids(enumerate_subsets(pool, 8, limit=2)) == everything[:2]
    assert enumerate_subsets(pool, 8, limit=0) == []
