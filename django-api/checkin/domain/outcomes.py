"""Typed results of a redemption attempt.

Expected business results are values, not exceptions: a scanned code that
matches nothing is a normal event at the door.
"""

import enum
from dataclasses import dataclass
from datetime import datetime

from checkin.domain.models import EventSummary, Ticket
from checkin.domain.value_objects import RedemptionCode


class RedemptionStatus(str, enum.Enum):
    REDEEMED = "REDEEMED"
    ALREADY_REDEEMED = "ALREADY_REDEEMED"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    # Lookup only: the ticket exists and has not been used yet.
    VALID = "VALID"


_MESSAGES = {
    RedemptionStatus.REDEEMED: "Check-in completed",
    RedemptionStatus.ALREADY_REDEEMED: "Ticket already used",
    RedemptionStatus.TICKET_NOT_FOUND: "Invalid code or ticket does not exist",
    RedemptionStatus.UNAUTHORIZED: "You are not authorized to check in tickets for this event",
    RedemptionStatus.VALID: "Ticket is valid and has not been used",
}


@dataclass(frozen=True)
class RedemptionOutcome:
    """Result of redeem() or lookup() for a single code."""

    status: RedemptionStatus
    code: RedemptionCode
    ticket: Ticket | None = None
    event: EventSummary | None = None
    redeemed_at: datetime | None = None
    audit_recorded: bool = True

    @property
    def message(self) -> str:
        if self.status is RedemptionStatus.REDEEMED and self.ticket is not None:
            return f"Welcome, {self.ticket.holder_name}!"
        if self.status is RedemptionStatus.ALREADY_REDEEMED and self.redeemed_at is not None:
            return f"Ticket already used at {self.redeemed_at.isoformat()}"
        return _MESSAGES[self.status]

    @classmethod
    def not_found(cls, code: RedemptionCode) -> "RedemptionOutcome":
        return cls(status=RedemptionStatus.TICKET_NOT_FOUND, code=code)

    @classmethod
    def unauthorized(cls, code: RedemptionCode, ticket: Ticket) -> "RedemptionOutcome":
        # The ticket itself is withheld from callers without rights to the event.
        return cls(status=RedemptionStatus.UNAUTHORIZED, code=code, event=ticket.event)

    @classmethod
    def already_redeemed(cls, code: RedemptionCode, ticket: Ticket) -> "RedemptionOutcome":
        return cls(
            status=RedemptionStatus.ALREADY_REDEEMED,
            code=code,
            ticket=ticket,
            event=ticket.event,
            redeemed_at=ticket.redeemed_at,
        )
