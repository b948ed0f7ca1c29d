# fantasy_soccer/logic/rejections.py
from __future__ import annotations

import enum


class RejectionReason(str, enum.Enum):
    DEADLINE_PASSED = "DeadlinePassed"
    DUPLICATE_PLAYER = "DuplicatePlayer"
    POSITION_MISMATCH = "PositionMismatch"
    FORMATION_OUT_OF_RANGE = "FormationOutOfRange"
    BUDGET_EXCEEDED = "BudgetExceeded"
    CAPTAIN_ROLE_CONFLICT = "CaptainRoleConflict"
    NOT_FOUND = "NotFound"
    PERSISTENCE_ERROR = "PersistenceError"

    @property
    def is_retryable(self) -> bool:
        # Everything else fails again deterministically on the same input.
        return self is RejectionReason.PERSISTENCE_ERROR

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.DEADLINE_PASSED: "Transfer deadline has passed. You can no longer make changes to your team.",
    RejectionReason.DUPLICATE_PLAYER: "That player is already in your squad.",
    RejectionReason.POSITION_MISMATCH: "A replacement must play the same position as the player it replaces.",
    RejectionReason.FORMATION_OUT_OF_RANGE: "Your starting line-up would not be a valid formation.",
    RejectionReason.BUDGET_EXCEEDED: "Not enough budget remaining for this player.",
    RejectionReason.CAPTAIN_ROLE_CONFLICT: "A player cannot be both captain and vice captain.",
    RejectionReason.NOT_FOUND: "Team, roster entry or player not found.",
    RejectionReason.PERSISTENCE_ERROR: "Could not save your team. Please try again.",
}


class PersistenceError(Exception):
    """Raised by the roster store when a read or commit against the database fails."""

    pass
