"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in checkin/models.py (persistence layer).
"""

import enum
from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal

from checkin.domain.value_objects import (
    EventId,
    GrantId,
    Money,
    RedemptionCode,
    TicketId,
    UserId,
)


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class TicketKind(str, enum.Enum):
    FREE = "free"
    PAID = "paid"


class GrantStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


@dataclass(frozen=True)
class UserProfile:
    """A registered user as known to the identity provider."""

    id: UserId
    name: str
    email: str
    is_organizer: bool = False


@dataclass(frozen=True)
class EventSummary:
    """The slice of an event shown to the operator at the door."""

    id: EventId
    organizer_id: UserId | None
    title: str
    date: date
    time: time
    location: str


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    organizer_id: UserId | None
    title: str
    description: str
    date: date
    time: time
    location: str
    capacity: int | None
    status: EventStatus
    ticket_kind: TicketKind
    price: Money
    created_at: datetime
    updated_at: datetime

    def summary(self) -> EventSummary:
        return EventSummary(
            id=self.id,
            organizer_id=self.organizer_id,
            title=self.title,
            date=self.date,
            time=self.time,
            location=self.location,
        )


@dataclass(frozen=True)
class Ticket:
    """Domain representation of one issued admission right."""

    id: TicketId
    code: RedemptionCode
    event: EventSummary
    holder_name: str
    holder_email: str
    holder_phone: str | None
    price: Money
    payment_status: PaymentStatus
    payment_id: str | None
    redeemed: bool
    redeemed_at: datetime | None
    created_at: datetime

    def mark_redeemed(self, at: datetime) -> "Ticket":
        return replace(self, redeemed=True, redeemed_at=at)


@dataclass(frozen=True)
class Grant:
    """A staff user's permission to check in tickets for one event."""

    id: GrantId
    event_id: EventId
    authorized_user_id: UserId
    authorized_by: UserId | None
    status: GrantStatus
    created_at: datetime
    updated_at: datetime
    user_name: str = ""
    user_email: str = ""

    @property
    def is_approved(self) -> bool:
        return self.status is GrantStatus.APPROVED


@dataclass(frozen=True)
class CheckInRecord:
    """Audit entry written once per successful redemption."""

    id: int
    ticket_id: TicketId
    event_id: EventId
    checked_in_by: UserId
    checked_in_at: datetime


@dataclass(frozen=True)
class CheckInStats:
    """Door progress for one event."""

    event_id: EventId
    total: int
    checked_in: int

    @property
    def remaining(self) -> int:
        return max(self.total - self.checked_in, 0)

    @property
    def percentage(self) -> Decimal:
        if self.total <= 0:
            return Decimal("0.0")
        return (Decimal(self.checked_in) * 100 / Decimal(self.total)).quantize(Decimal("0.1"))
