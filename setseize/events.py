"""Round-boundary events surfaced to callers of the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

ROUND_DEALT = "roundDealt"
ROUND_OVER = "roundOver"


@dataclass(frozen=True)
class RoundEvent:
    name: str
    round_number: int
    scores: Dict[str, int] = field(default_factory=dict)
    winner: Optional[str] = None

    def to_payload(self) -> dict:
        payload: dict = {"event": self.name, "round": self.round_number}
        if self.name == ROUND_OVER:
            payload["scores"] = dict(self.scores)
            payload["winner"] = self.winner
        return payload
