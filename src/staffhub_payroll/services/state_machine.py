"""Payroll record state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from staffhub_payroll.errors import InvalidTransitionError


class PayrollStatus(str, Enum):
    """Payroll record status values."""

    DRAFT = "draft"
    APPROVED = "approved"


class PayrollStateMachine:
    """State machine for payroll record status transitions.

    Allowed transitions:
    - draft → approved

    Approved is terminal; an approved record is immutable.
    """

    # Define valid transitions: {from_status: [allowed_to_statuses]}
    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.DRAFT: [PayrollStatus.APPROVED],
        PayrollStatus.APPROVED: [],  # Terminal state
    }

    INITIAL_STATUS = PayrollStatus.DRAFT

    # Statuses where record fields may still change
    MUTABLE = {PayrollStatus.DRAFT}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            reason = "approved payrolls are final" if cls.is_terminal(from_status) else None
            raise InvalidTransitionError(from_status, to_status, reason)

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        """Check if no further transition is possible."""
        return status in cls.VALID_TRANSITIONS and not cls.VALID_TRANSITIONS[status]

    @classmethod
    def is_mutable(cls, status: str) -> bool:
        """Check if a record in this status may still be modified."""
        return status in cls.MUTABLE

    @classmethod
    def sources_for(cls, to_status: str) -> list[str]:
        """Status values a record must hold to move to to_status."""
        return [
            PayrollStatus(status).value
            for status in cls.VALID_TRANSITIONS
            if cls.can_transition(status, to_status)
        ]
