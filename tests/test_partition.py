from setseize.cards import cards_from_ids
from setseize.partition import can_partition_all, find_disjoint_builds


def test_pool_splits_into_groups_of_target():
    assert can_partition_all(cards_from_ids(["2S", "6C", "3H", "5D"]), 8)


def test_leftover_card_blocks_partition():
    assert not can_partition_all(cards_from_ids(["2S", "6C", "3H", "4D"]), 8)


def test_empty_pool_is_not_partitionable():
    assert not can_partition_all([], 8)


def test_ace_may_take_either_value():
    assert can_partition_all(cards_from_ids(["AS", "KH"]), 14)
    assert can_partition_all(cards_from_ids(["AS", "9H", "5D"]), 14)
    assert not can_partition_all(cards_from_ids(["AS", "KH"]), 14, resolved={"AS": 14})


def test_find_disjoint_builds_requires_minimum_groups():
    groups = find_disjoint_builds(cards_from_ids(["8H", "8S"]), 8, 2)
    assert [[card.id for card in group] for group in groups] == [["8H"], ["8S"]]
    assert find_disjoint_builds(cards_from_ids(["5H", "3C"]), 8, 2) is None


def test_find_disjoint_builds_uses_every_card():
    groups = find_disjoint_builds(cards_from_ids(["5H", "3C", "6D", "2S"]), 8, 2)
    assert [[card.id for card in group] for group in groups] == [["5H", "3C"], ["6D", "2S"]]
    assert find_disjoint_builds(cards_from_ids(["5H", "3C", "6D", "2S", "4H"]), 8, 2) is None
