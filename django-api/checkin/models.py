"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models
from django.utils import timezone

from checkin.domain import EventStatus, GrantStatus, PaymentStatus, RedemptionCode, TicketKind


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.value.title()) for member in enum_cls]


def generate_ticket_code() -> str:
    return RedemptionCode.generate().value


class Profile(models.Model):
    """A user known to the identity provider."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    is_organizer = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Lets DRF treat a resolved profile as request.user.
    is_authenticated = True
    is_anonymous = False

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer = models.ForeignKey(
        Profile, on_delete=models.SET_NULL, null=True, related_name="organized_events"
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    date = models.DateField()
    time = models.TimeField()
    location = models.CharField(max_length=255)
    capacity = models.PositiveIntegerField(blank=True, null=True)
    status = models.CharField(
        max_length=20, choices=_choices(EventStatus), default=EventStatus.DRAFT.value
    )
    ticket_type = models.CharField(
        max_length=10, choices=_choices(TicketKind), default=TicketKind.FREE.value
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "time"]
        indexes = [
            models.Index(fields=["organizer", "date"], name="checkin_event_org_date_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class Ticket(models.Model):
    """Persistence model for issued tickets."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tickets")
    qr_code = models.CharField(max_length=64, unique=True, default=generate_ticket_code)
    attendee_name = models.CharField(max_length=255)
    attendee_email = models.EmailField(max_length=255)
    attendee_phone = models.CharField(max_length=50, blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_status = models.CharField(
        max_length=20, choices=_choices(PaymentStatus), default=PaymentStatus.PENDING.value
    )
    payment_id = models.CharField(max_length=120, blank=True, null=True)
    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["event", "checked_in"], name="checkin_ticket_event_used_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.qr_code} - {self.attendee_name}"


class EventAuthorization(models.Model):
    """A staff user's check-in permission for one event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="authorizations")
    authorized_user = models.ForeignKey(
        Profile, on_delete=models.CASCADE, related_name="event_authorizations"
    )
    authorized_by = models.ForeignKey(
        Profile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="granted_authorizations",
    )
    status = models.CharField(
        max_length=20, choices=_choices(GrantStatus), default=GrantStatus.PENDING.value
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "authorized_user"], name="unique_event_authorized_user"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.authorized_user_id} @ {self.event_id} ({self.status})"


class CheckIn(models.Model):
    """Append-only audit trail of completed redemptions."""

    ticket = models.ForeignKey(Ticket, on_delete=models.PROTECT, related_name="checkins")
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="checkins")
    checked_in_by = models.ForeignKey(
        Profile, on_delete=models.PROTECT, related_name="performed_checkins"
    )
    checked_in_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-checked_in_at"]
        indexes = [
            models.Index(fields=["event", "-checked_in_at"], name="checkin_checkin_event_at_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.ticket_id} by {self.checked_in_by_id}"
