"""Player action payloads accepted by the resolver."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ActionType = Literal["drop", "capture", "build"]


class PlayerAction(BaseModel):
    """One turn's request.

    Accepts both the camelCase wire names and the snake_case attribute names.
    The Ace choice is left unconstrained here so an illegal value surfaces as
    an ``InvalidAceChoice`` rejection rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    action_type: ActionType = Field(alias="actionType")
    played_card_id: str = Field(alias="playedCardId")
    ace_value_choice: Optional[int] = Field(None, alias="aceValueChoice")
    selected_middle_card_ids: List[str] = Field(default_factory=list, alias="selectedMiddleCardIds")
    build_target_value: Optional[int] = Field(None, alias="buildTargetValue")
    is_hard_build: bool = Field(False, alias="isHardBuild")
    card_to_pair_for_hard_build_id: Optional[str] = Field(None, alias="cardToPairForHardBuildId")
    build_to_stack_on_id: Optional[str] = Field(None, alias="buildToStackOnId")
    additional_build_groups: List[List[str]] = Field(default_factory=list, alias="additionalBuildGroups")

    @classmethod
    def drop(cls, card_id: str, *, ace_value: Optional[int] = None) -> "PlayerAction":
        return cls(action_type="drop", played_card_id=card_id, ace_value_choice=ace_value)

    @classmethod
    def capture(cls, card_id: str, selection: List[str], *, ace_value: Optional[int] = None) -> "PlayerAction":
        return cls(
            action_type="capture",
            played_card_id=card_id,
            selected_middle_card_ids=list(selection),
            ace_value_choice=ace_value,
        )

    @classmethod
    def build(
        cls,
        card_id: str,
        target: Optional[int],
        selection: Optional[List[str]] = None,
        **extra,
    ) -> "PlayerAction":
        return cls(
            action_type="build",
            played_card_id=card_id,
            build_target_value=target,
            selected_middle_card_ids=list(selection or []),
            **extra,
        )
