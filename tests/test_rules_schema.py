import pytest
from pydantic import ValidationError

from setseize.rules_schema import DEFAULT_RULES, RuleSet, load_rules


def test_defaults_match_the_standard_game():
    assert DEFAULT_RULES.deal.hand_size == 4
    assert DEFAULT_RULES.deal.middle_cards == 4
    assert DEFAULT_RULES.scoring.most_cards_bonus == 3
    assert DEFAULT_RULES.scoring.split_card_count == 26
    assert DEFAULT_RULES.logging.level == "INFO"


def test_load_rules_from_yaml(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("deal:\n  hand_size: 6\nscoring:\n  ten_of_diamonds_points: 3\nlogging:\n  level: debug\n")

    rules = load_rules(path)
    assert rules.deal.hand_size == 6
    assert rules.deal.middle_cards == 4
    assert rules.scoring.ten_of_diamonds_points == 3
    assert rules.logging.level == "DEBUG"


def test_missing_or_empty_file_yields_defaults(tmp_path):
    assert load_rules(tmp_path / "absent.yaml") == RuleSet()
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_rules(empty) == RuleSet()
    assert load_rules() == RuleSet()


def test_invalid_values_are_rejected():
    with pytest.raises(ValidationError):
        RuleSet(logging={"level": "LOUD"})
    with pytest.raises(ValidationError):
        RuleSet(deal={"hand_size": 20, "middle_cards": 20})
    with pytest.raises(ValidationError):
        RuleSet(scoring={"ace_points": -1})
