"""Django ORM implementation of the TicketStore and AuthorizationDirectory."""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from checkin import models
from checkin.conf import stats_cache_key
from checkin.domain import (
    CheckInRecord,
    CheckInStats,
    Event,
    EventId,
    EventStatus,
    EventSummary,
    Grant,
    GrantId,
    GrantStatus,
    Money,
    PaymentStatus,
    RedemptionCode,
    Ticket,
    TicketId,
    TicketKind,
    UserId,
    UserProfile,
)
from checkin.stores.interfaces import AuthorizationDirectory, TicketStore

logger = logging.getLogger(__name__)

# Tickets that count towards the door list.
ADMITTING_PAYMENT_STATUSES = (PaymentStatus.COMPLETED.value, PaymentStatus.PENDING.value)


def _user_id(value: UUID | None) -> UserId | None:
    return UserId(value) if value is not None else None


def _to_event_summary(row: models.Event) -> EventSummary:
    return EventSummary(
        id=EventId(row.id),
        organizer_id=_user_id(row.organizer_id),
        title=row.title,
        date=row.date,
        time=row.time,
        location=row.location,
    )


def _to_event(row: models.Event) -> Event:
    return Event(
        id=EventId(row.id),
        organizer_id=_user_id(row.organizer_id),
        title=row.title,
        description=row.description,
        date=row.date,
        time=row.time,
        location=row.location,
        capacity=row.capacity,
        status=EventStatus(row.status),
        ticket_kind=TicketKind(row.ticket_type),
        price=Money(Decimal(row.price)),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_ticket(row: models.Ticket) -> Ticket:
    return Ticket(
        id=TicketId(row.id),
        code=RedemptionCode(row.qr_code),
        event=_to_event_summary(row.event),
        holder_name=row.attendee_name,
        holder_email=row.attendee_email,
        holder_phone=row.attendee_phone,
        price=Money(Decimal(row.price)),
        payment_status=PaymentStatus(row.payment_status),
        payment_id=row.payment_id,
        redeemed=row.checked_in,
        redeemed_at=row.checked_in_at,
        created_at=row.created_at,
    )


def _to_grant(row: models.EventAuthorization) -> Grant:
    return Grant(
        id=GrantId(row.id),
        event_id=EventId(row.event_id),
        authorized_user_id=UserId(row.authorized_user_id),
        authorized_by=_user_id(row.authorized_by_id),
        status=GrantStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        user_name=row.authorized_user.name,
        user_email=row.authorized_user.email,
    )


def _to_profile(row: models.Profile) -> UserProfile:
    return UserProfile(
        id=UserId(row.id),
        name=row.name,
        email=row.email,
        is_organizer=row.is_organizer,
    )


class DjangoTicketStore(TicketStore):
    """PostgreSQL-backed ticket store using Django ORM."""

    def find_ticket_by_code(self, code: RedemptionCode) -> Ticket | None:
        row = (
            models.Ticket.objects.select_related("event")
            .filter(qr_code=code.value)
            .first()
        )
        return _to_ticket(row) if row is not None else None

    def mark_redeemed(self, ticket_id: TicketId, redeemed_at: datetime) -> int:
        # UPDATE ... WHERE id = %s AND checked_in = false
        rows = models.Ticket.objects.filter(pk=ticket_id.value, checked_in=False).update(
            checked_in=True, checked_in_at=redeemed_at
        )
        if rows:
            # update() sends no post_save, so the stats key is dropped here.
            event_id = (
                models.Ticket.objects.filter(pk=ticket_id.value)
                .values_list("event_id", flat=True)
                .first()
            )
            cache.delete(stats_cache_key(event_id))
        return rows

    def append_checkin_record(
        self,
        ticket_id: TicketId,
        event_id: EventId,
        checked_in_by: UserId,
        checked_in_at: datetime,
    ) -> CheckInRecord:
        # Savepoint: a failed insert must not poison an enclosing transaction.
        with transaction.atomic():
            row = models.CheckIn.objects.create(
                ticket_id=ticket_id.value,
                event_id=event_id.value,
                checked_in_by_id=checked_in_by.value,
                checked_in_at=checked_in_at,
            )
        return CheckInRecord(
            id=row.pk,
            ticket_id=ticket_id,
            event_id=event_id,
            checked_in_by=checked_in_by,
            checked_in_at=row.checked_in_at,
        )

    def get_checkin_stats(self, event_id: EventId) -> CheckInStats:
        counts = models.Ticket.objects.filter(
            event_id=event_id.value,
            payment_status__in=ADMITTING_PAYMENT_STATUSES,
        ).aggregate(
            total=Count("id"),
            checked_in=Count("id", filter=Q(checked_in=True)),
        )
        return CheckInStats(
            event_id=event_id,
            total=counts["total"] or 0,
            checked_in=counts["checked_in"] or 0,
        )


class DjangoAuthorizationDirectory(AuthorizationDirectory):
    """Events, profiles and grants backed by Django ORM."""

    def get_event(self, event_id: EventId) -> Event | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return _to_event(row) if row is not None else None

    def find_events_owned_by(self, user_id: UserId) -> list[Event]:
        rows = models.Event.objects.filter(organizer_id=user_id.value).order_by("date", "time")
        return [_to_event(row) for row in rows]

    def find_user(self, identifier: str) -> UserProfile | None:
        identifier = identifier.strip()
        try:
            row = models.Profile.objects.filter(pk=UUID(identifier)).first()
        except ValueError:
            row = models.Profile.objects.filter(email__iexact=identifier).first()
        return _to_profile(row) if row is not None else None

    def find_grant(self, event_id: EventId, user_id: UserId) -> Grant | None:
        row = (
            models.EventAuthorization.objects.select_related("authorized_user")
            .filter(event_id=event_id.value, authorized_user_id=user_id.value)
            .first()
        )
        return _to_grant(row) if row is not None else None

    def get_grant(self, grant_id: GrantId) -> Grant | None:
        row = (
            models.EventAuthorization.objects.select_related("authorized_user")
            .filter(pk=grant_id.value)
            .first()
        )
        return _to_grant(row) if row is not None else None

    def list_grants_for_event(self, event_id: EventId) -> list[Grant]:
        rows = (
            models.EventAuthorization.objects.select_related("authorized_user")
            .filter(event_id=event_id.value)
            .order_by("-created_at")
        )
        return [_to_grant(row) for row in rows]

    def insert_grant(
        self,
        event_id: EventId,
        user_id: UserId,
        granter_id: UserId | None,
        status: GrantStatus,
    ) -> Grant | None:
        try:
            with transaction.atomic():
                row = models.EventAuthorization.objects.create(
                    event_id=event_id.value,
                    authorized_user_id=user_id.value,
                    authorized_by_id=granter_id.value if granter_id is not None else None,
                    status=status.value,
                )
        except IntegrityError:
            logger.info("Grant for user %s on event %s already exists", user_id, event_id)
            return None
        return self.get_grant(GrantId(row.id))

    def update_grant_status(self, grant_id: GrantId, status: GrantStatus) -> Grant | None:
        row = models.EventAuthorization.objects.filter(pk=grant_id.value).first()
        if row is None:
            return None
        row.status = status.value
        row.save(update_fields=["status", "updated_at"])
        return self.get_grant(grant_id)

    def delete_grant(self, grant_id: GrantId) -> bool:
        deleted, _ = models.EventAuthorization.objects.filter(pk=grant_id.value).delete()
        return deleted > 0
