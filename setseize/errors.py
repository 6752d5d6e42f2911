"""Error taxonomy for the Set & Seize engine."""

from __future__ import annotations


class RuleViolation(RuntimeError):
    """Base class for rejected actions.

    Raised inside the engine and converted into a ``Rejection`` at the
    ``resolve_action`` boundary; the table state is left untouched.
    """

    @property
    def kind(self) -> str:
        return type(self).__name__


class MalformedAction(RuleViolation):
    """Raised when a wire payload does not describe a valid action."""


class TurnError(RuleViolation):
    """Raised when a player acts out of turn or outside the playing phase."""


class CardNotInHand(RuleViolation):
    """Raised when the played card is not in the acting player's hand."""


class InvalidAceChoice(RuleViolation):
    """Raised when an Ace value choice is illegal or given for a non-Ace."""


class ObligationViolation(RuleViolation):
    """Raised when an obligated player tries to dodge a must-capture."""


class NoValidCaptureCombination(RuleViolation):
    """Raised when a capture selection cannot be grouped by the played value."""


class InvalidBuildSum(RuleViolation):
    """Raised when build cards do not add up to the declared target."""


class IllegalStack(RuleViolation):
    """Raised when stacking targets a hard build, an own build or no build."""


class PartialHardBuildCapture(RuleViolation):
    """Raised when only part of a hard build group is selected for capture."""


class MissingBuildTargetValue(RuleViolation):
    """Raised when a build has no target or no card left in hand to take it."""


class InvariantViolation(RuntimeError):
    """Raised when the table breaks conservation or disjointness.

    This signals an engine bug; the game instance must be discarded.
    """
