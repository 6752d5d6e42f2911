from setseize.actions import PlayerAction
from setseize.builds import Build
from setseize.cards import cards_from_ids
from setseize.obligation import can_make_any_capture, reconcile_obligation
from setseize.resolver import resolve_action
from setseize.state import Obligation, TableState


def _nine(owner="p1"):
    return Build("B1", tuple(cards_from_ids(["5H", "4D"])), 9, owner)


def _obligated_table(p1_hand, middle, p2_hand=("QD", "9C")):
    return TableState.from_layout(
        hands={"p1": list(p1_hand), "p2": list(p2_hand)},
        middle=[_nine(), *middle],
        obligation=Obligation("p1", "B1"),
    )


def test_obligated_player_cannot_drop():
    state = _obligated_table(["9S", "4H", "KD"], ["5C"])
    outcome = resolve_action(state, "p1", PlayerAction.drop("4H"))
    assert outcome.rejection.kind == "ObligationViolation"


def test_obligated_player_cannot_build_another_value():
    state = _obligated_table(["9S", "4H", "TC"], ["6D"])
    outcome = resolve_action(state, "p1", PlayerAction.build("4H", 10, ["6D"]))
    assert outcome.rejection.kind == "ObligationViolation"


def test_building_the_same_value_again_is_allowed():
    state = _obligated_table(["9S", "4H", "KD"], ["5C"])
    outcome = resolve_action(state, "p1", PlayerAction.build("4H", 9, ["5C"]))

    assert outcome.accepted
    (merged,) = outcome.state.builds()
    assert merged.is_hard
    assert outcome.state.obligation == Obligation("p1", merged.id)


def test_capturing_the_build_clears_the_obligation():
    state = _obligated_table(["9S", "4H", "KD"], ["5C"])
    outcome = resolve_action(state, "p1", PlayerAction.capture("9S", ["B1"]))

    assert outcome.accepted
    assert outcome.state.obligation is None
    assert outcome.state.player("p1").active_build_ids == frozenset()


def test_obligation_is_waived_without_any_capture():
    state = _obligated_table(["4H", "KD"], ["QC"])
    outcome = resolve_action(state, "p1", PlayerAction.drop("4H"))

    assert outcome.accepted
    assert outcome.state.obligation == Obligation("p1", "B1")


def test_opponent_capture_clears_the_obligation():
    state = _obligated_table(["9S", "4H", "KD"], ["5C"])
    state = resolve_action(state, "p1", PlayerAction.build("4H", 9, ["5C"])).state
    merged = state.builds()[0]

    outcome = resolve_action(state, "p2", PlayerAction.capture("9C", [merged.id]))
    assert outcome.accepted
    assert outcome.state.obligation is None


def test_reconcile_drops_stale_obligations():
    obligation = Obligation("p1", "B1")
    assert reconcile_obligation(obligation, [_nine()]) == obligation
    assert reconcile_obligation(obligation, [_nine(owner="p2")]) is None
    assert reconcile_obligation(obligation, []) is None
    assert reconcile_obligation(None, [_nine()]) is None


def test_can_make_any_capture_checks_builds_and_loose_cards():
    hand = cards_from_ids(["4H", "AS"])
    assert not can_make_any_capture(hand, cards_from_ids(["QC"]), [])
    assert can_make_any_capture(hand, cards_from_ids(["9C", "5D"]), [])
    assert can_make_any_capture(cards_from_ids(["9S"]), [], [_nine()])
