"""Validation schema for Set & Seize rules configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DealConfig(BaseModel):
    hand_size: int = Field(4, ge=1, description="Cards dealt to each player per round.")
    middle_cards: int = Field(4, ge=0, description="Cards dealt face-up to the middle at game start.")


class ScoringConfig(BaseModel):
    ace_points: int = Field(1, ge=0, description="Points per captured Ace.")
    two_of_spades_points: int = Field(1, ge=0, description="Points for capturing the 2 of spades.")
    ten_of_diamonds_points: int = Field(2, ge=0, description="Points for capturing the 10 of diamonds.")
    most_spades_bonus: int = Field(1, ge=0, description="Bonus for strictly more spades.")
    most_cards_bonus: int = Field(3, ge=0, description="Bonus for strictly more captured cards.")
    split_card_count: int = Field(
        26,
        ge=0,
        description="When both piles hold exactly this many cards the most-cards bonus is withheld.",
    )


class LoggingConfig(BaseModel):
    level: str = Field("INFO", description="Root logging level.")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"Unknown logging level: {value!r}")
        return normalized


class RuleSet(BaseModel):
    deal: DealConfig = Field(default_factory=DealConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("deal")
    @classmethod
    def ensure_deal_fits_deck(cls, value: DealConfig) -> DealConfig:
        if 2 * value.hand_size + value.middle_cards > 52:
            raise ValueError("Opening deal needs more than 52 cards.")
        return value


DEFAULT_RULES = RuleSet()


def load_rules(path: Optional[Union[Path, str]] = None) -> RuleSet:
    """Load a rule set from YAML; a missing path yields the defaults."""
    if path is None:
        return RuleSet()

    config_path = Path(path)
    if not config_path.exists():
        logging.getLogger(__name__).warning("Rules file %s not found; using defaults.", config_path)
        return RuleSet()

    with open(config_path) as handle:
        data = yaml.safe_load(handle)

    return RuleSet(**data) if data else RuleSet()
