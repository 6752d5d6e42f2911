import pytest

from setseize.builds import Build
from setseize.cards import Suit, build_deck, cards_from_ids
from setseize.rules_schema import ScoringConfig
from setseize.scoring import ScoringError, finish_game, score_piles, sweep_middle
from setseize.state import Phase, TableState


def _split_by_suit(first_suits):
    deck = build_deck()
    first = [card for card in deck if card.suit in first_suits]
    second = [card for card in deck if card.suit not in first_suits]
    return first, second


def test_even_split_withholds_card_bonus():
    spades_hearts, diamonds_clubs = _split_by_suit({Suit.SPADES, Suit.HEARTS})
    result = score_piles({"p1": spades_hearts, "p2": diamonds_clubs})

    # p1: two Aces, the 2 of spades, most spades. p2: two Aces, the 10 of diamonds.
    assert result.points == {"p1": 4, "p2": 4}
    assert sum(result.points.values()) == 8
    assert result.is_draw
    assert result.breakdown["p1"].most_cards == 0
    assert result.breakdown["p2"].most_cards == 0
    assert result.breakdown["p1"].most_spades == 1


def test_more_cards_earns_bonus():
    spades_hearts, diamonds_clubs = _split_by_suit({Suit.SPADES, Suit.HEARTS})
    moved = next(card for card in diamonds_clubs if card.id == "2C")
    diamonds_clubs.remove(moved)
    result = score_piles({"p1": spades_hearts + [moved], "p2": diamonds_clubs})

    assert result.points == {"p1": 7, "p2": 4}
    assert result.winner == "p1"
    assert result.breakdown["p1"].card_count == 27


def test_tied_spades_earn_nothing():
    result = score_piles({"p1": cards_from_ids(["3S", "4H"]), "p2": cards_from_ids(["5S", "6H"])})
    assert result.points == {"p1": 0, "p2": 0}


def test_scoring_config_is_honoured():
    config = ScoringConfig(ten_of_diamonds_points=5, most_cards_bonus=0)
    result = score_piles({"p1": cards_from_ids(["TD", "4H", "5C"]), "p2": cards_from_ids(["6H"])}, config)
    assert result.points == {"p1": 5, "p2": 0}


def test_score_piles_needs_two_players():
    with pytest.raises(ScoringError):
        score_piles({"p1": []})


def test_sweep_goes_to_last_captor():
    build = Build("B1", tuple(cards_from_ids(["5H", "4D"])), 9, "p2")
    state = TableState.from_layout(
        hands={"p1": [], "p2": []},
        middle=[build, "KC"],
        deck=[],
        captured={"p1": [card.id for card in build_deck() if card.id not in {"5H", "4D", "KC"}]},
        last_capture_player_id="p2",
    )
    swept = sweep_middle(state)
    assert swept.middle_items == ()
    assert {card.id for card in swept.player("p2").captured_pile} == {"5H", "4D", "KC"}
    assert swept.player("p2").active_build_ids == frozenset()


def test_middle_stays_unclaimed_without_any_capture():
    state = TableState.from_layout(hands={"p1": [], "p2": []}, middle=["KC"], deck=[])
    assert sweep_middle(state) is state


def test_finish_game_moves_to_game_over():
    state = TableState.from_layout(
        hands={"p1": [], "p2": []},
        middle=["KC"],
        deck=[],
        captured={"p1": ["AS", "2S"], "p2": ["TD", "3H"]},
        last_capture_player_id="p2",
    )
    final, result = finish_game(state)

    assert final.phase is Phase.GAME_OVER
    assert final.middle_items == ()
    # p1: Ace, 2 of spades, most spades. p2: 10 of diamonds, most cards.
    assert result.points == {"p1": 3, "p2": 5}
    assert result.winner == "p2"
