from checkin.domain.models import (
    CheckInRecord,
    CheckInStats,
    Event,
    EventStatus,
    EventSummary,
    Grant,
    GrantStatus,
    PaymentStatus,
    Ticket,
    TicketKind,
    UserProfile,
)
from checkin.domain.outcomes import RedemptionOutcome, RedemptionStatus
from checkin.domain.value_objects import (
    EventId,
    GrantId,
    Money,
    RedemptionCode,
    TicketId,
    UserId,
)

__all__ = [
    "CheckInRecord",
    "CheckInStats",
    "Event",
    "EventStatus",
    "EventSummary",
    "Grant",
    "GrantStatus",
    "PaymentStatus",
    "Ticket",
    "TicketKind",
    "UserProfile",
    "RedemptionOutcome",
    "RedemptionStatus",
    "EventId",
    "GrantId",
    "Money",
    "RedemptionCode",
    "TicketId",
    "UserId",
]
