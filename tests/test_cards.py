import pytest

from setseize.cards import (
    Card,
    Rank,
    Suit,
    build_deck,
    card_label,
    deserialize_card,
    resolve_value,
    serialize_card,
)
from setseize.errors import InvalidAceChoice


def test_card_ids_round_trip_through_from_id():
    card = Card.from_id("TD")
    assert card == Card(Rank.TEN, Suit.DIAMONDS)
    assert card.id == "TD"
    assert Card.from_id("as") == Card(Rank.ACE, Suit.SPADES)


def test_malformed_card_id_is_rejected():
    with pytest.raises(ValueError):
        Card.from_id("10D")


def test_deck_holds_52_unique_cards():
    deck = build_deck()
    assert len(deck) == 52
    assert len({card.id for card in deck}) == 52
    assert sum(1 for card in deck if card.is_ace) == 4


def test_non_ace_values_follow_rank():
    assert resolve_value(Card.from_id("7H")) == 7
    assert resolve_value(Card.from_id("TC")) == 10
    assert resolve_value(Card.from_id("JC")) == 11
    assert resolve_value(Card.from_id("KS")) == 13


def test_ace_resolves_to_chosen_value_or_one():
    ace = Card.from_id("AH")
    assert ace.candidate_values() == (1, 14)
    assert resolve_value(ace) == 1
    assert resolve_value(ace, 14) == 14


def test_illegal_ace_choices_raise():
    with pytest.raises(InvalidAceChoice):
        resolve_value(Card.from_id("AH"), 7)
    with pytest.raises(InvalidAceChoice):
        resolve_value(Card.from_id("5H"), 1)


def test_serialization_helpers():
    card = Card.from_id("2S")
    assert serialize_card(card) == {"id": "2S", "rank": "2", "suit": "S"}
    assert deserialize_card({"rank": "2", "suit": "s"}) == card
    assert card_label(Card.from_id("AS")) == "Ace of Spades"
