"""Pytest configuration and shared fixtures."""

import threading
import uuid
from dataclasses import replace
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from checkin.domain import (
    CheckInRecord,
    CheckInStats,
    Event,
    EventId,
    EventStatus,
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

NOW = datetime(2026, 3, 14, 20, 0, tzinfo=timezone.utc)


def uid(name: str) -> UserId:
    return UserId(uuid.uuid5(uuid.NAMESPACE_URL, f"user:{name}"))


def make_event(title: str = "Festival X", organizer: str | None = "org-1") -> Event:
    return Event(
        id=EventId(uuid.uuid5(uuid.NAMESPACE_URL, f"event:{title}")),
        organizer_id=uid(organizer) if organizer else None,
        title=title,
        description="",
        date=date(2026, 3, 14),
        time=time(20, 0),
        location="Parque Ibirapuera",
        capacity=500,
        status=EventStatus.PUBLISHED,
        ticket_kind=TicketKind.PAID,
        price=Money(Decimal("50.00")),
        created_at=NOW,
        updated_at=NOW,
    )


def make_ticket(event: Event, code: str = "ING-ABC12345", **overrides) -> Ticket:
    ticket = Ticket(
        id=TicketId(uuid.uuid5(uuid.NAMESPACE_URL, f"ticket:{code}")),
        code=RedemptionCode(code),
        event=event.summary(),
        holder_name="Maria Souza",
        holder_email="maria@example.com",
        holder_phone=None,
        price=Money(Decimal("50.00")),
        payment_status=PaymentStatus.COMPLETED,
        payment_id=None,
        redeemed=False,
        redeemed_at=None,
        created_at=NOW,
    )
    return replace(ticket, **overrides)


class InMemoryTicketStore(TicketStore):
    """Ticket store whose conditional update is guarded by a lock."""

    def __init__(self, tickets: list[Ticket] = ()) -> None:
        self.tickets = {t.code.value: t for t in tickets}
        self.checkins: list[CheckInRecord] = []
        self.fail_append = False
        self.read_barrier: threading.Barrier | None = None
        self._reads = 0
        self._lock = threading.Lock()

    def add(self, ticket: Ticket) -> None:
        self.tickets[ticket.code.value] = ticket

    def find_ticket_by_code(self, code: RedemptionCode) -> Ticket | None:
        if self.read_barrier is not None:
            with self._lock:
                self._reads += 1
                first_reads = self._reads <= self.read_barrier.parties
            if first_reads:
                # Hold concurrent readers until all of them have seen the same state.
                self.read_barrier.wait(timeout=5)
        return self.tickets.get(code.value)

    def mark_redeemed(self, ticket_id: TicketId, redeemed_at: datetime) -> int:
        with self._lock:
            for code, ticket in self.tickets.items():
                if ticket.id == ticket_id:
                    if ticket.redeemed:
                        return 0
                    self.tickets[code] = ticket.mark_redeemed(redeemed_at)
                    return 1
        return 0

    def append_checkin_record(
        self,
        ticket_id: TicketId,
        event_id: EventId,
        checked_in_by: UserId,
        checked_in_at: datetime,
    ) -> CheckInRecord:
        if self.fail_append:
            raise RuntimeError("audit table unavailable")
        with self._lock:
            record = CheckInRecord(
                id=len(self.checkins) + 1,
                ticket_id=ticket_id,
                event_id=event_id,
                checked_in_by=checked_in_by,
                checked_in_at=checked_in_at,
            )
            self.checkins.append(record)
        return record

    def get_checkin_stats(self, event_id: EventId) -> CheckInStats:
        counted = [
            t
            for t in self.tickets.values()
            if t.event.id == event_id
            and t.payment_status in (PaymentStatus.COMPLETED, PaymentStatus.PENDING)
        ]
        return CheckInStats(
            event_id=event_id,
            total=len(counted),
            checked_in=sum(1 for t in counted if t.redeemed),
        )


class InMemoryDirectory(AuthorizationDirectory):
    """Authorization directory backed by dicts."""

    def __init__(self) -> None:
        self.events: dict[EventId, Event] = {}
        self.users: dict[UserId, UserProfile] = {}
        self.grants: dict[GrantId, Grant] = {}
        self.insert_conflicts = False

    def add_event(self, event: Event) -> Event:
        self.events[event.id] = event
        return event

    def add_user(self, name: str, email: str | None = None) -> UserProfile:
        profile = UserProfile(id=uid(name), name=name, email=email or f"{name}@example.com")
        self.users[profile.id] = profile
        return profile

    def add_grant(self, event: Event, user: str, status: GrantStatus) -> Grant:
        grant = Grant(
            id=GrantId(uuid.uuid4()),
            event_id=event.id,
            authorized_user_id=uid(user),
            authorized_by=event.organizer_id,
            status=status,
            created_at=NOW,
            updated_at=NOW,
        )
        self.grants[grant.id] = grant
        return grant

    def get_event(self, event_id: EventId) -> Event | None:
        return self.events.get(event_id)

    def find_events_owned_by(self, user_id: UserId) -> list[Event]:
        owned = [e for e in self.events.values() if e.organizer_id == user_id]
        return sorted(owned, key=lambda e: (e.date, e.time))

    def find_user(self, identifier: str) -> UserProfile | None:
        identifier = identifier.strip()
        for profile in self.users.values():
            if str(profile.id) == identifier or profile.email.lower() == identifier.lower():
                return profile
        return None

    def find_grant(self, event_id: EventId, user_id: UserId) -> Grant | None:
        for grant in self.grants.values():
            if grant.event_id == event_id and grant.authorized_user_id == user_id:
                return grant
        return None

    def get_grant(self, grant_id: GrantId) -> Grant | None:
        return self.grants.get(grant_id)

    def list_grants_for_event(self, event_id: EventId) -> list[Grant]:
        return [g for g in self.grants.values() if g.event_id == event_id]

    def insert_grant(
        self,
        event_id: EventId,
        user_id: UserId,
        granter_id: UserId | None,
        status: GrantStatus,
    ) -> Grant | None:
        if self.insert_conflicts or self.find_grant(event_id, user_id) is not None:
            return None
        grant = Grant(
            id=GrantId(uuid.uuid4()),
            event_id=event_id,
            authorized_user_id=user_id,
            authorized_by=granter_id,
            status=status,
            created_at=NOW,
            updated_at=NOW,
        )
        self.grants[grant.id] = grant
        return grant

    def update_grant_status(self, grant_id: GrantId, status: GrantStatus) -> Grant | None:
        grant = self.grants.get(grant_id)
        if grant is None:
            return None
        self.grants[grant_id] = replace(grant, status=status)
        return self.grants[grant_id]

    def delete_grant(self, grant_id: GrantId) -> bool:
        return self.grants.pop(grant_id, None) is not None


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def festival() -> Event:
    return make_event()


@pytest.fixture
def directory(festival: Event) -> InMemoryDirectory:
    directory = InMemoryDirectory()
    directory.add_event(festival)
    for name in ("org-1", "staff-1", "staff-2", "stranger"):
        directory.add_user(name)
    return directory


@pytest.fixture
def ticket_store(festival: Event) -> InMemoryTicketStore:
    return InMemoryTicketStore([make_ticket(festival)])


# ORM fixtures


@pytest.fixture
def organizer(db):
    from checkin.models import Profile
    return Profile.objects.create(name="Olivia Organizer", email="org-1@example.com", is_organizer=True)


@pytest.fixture
def staff(db):
    from checkin.models import Profile
    return Profile.objects.create(name="Sam Staff", email="staff-1@example.com")


@pytest.fixture
def other_staff(db):
    from checkin.models import Profile
    return Profile.objects.create(name="Sofia Staff", email="staff-2@example.com")


@pytest.fixture
def festival_event(organizer):
    from checkin.models import Event
    return Event.objects.create(
        organizer=organizer,
        title="Festival X",
        date=date(2026, 3, 14),
        time=time(20, 0),
        location="Parque Ibirapuera",
        status=EventStatus.PUBLISHED.value,
        ticket_type=TicketKind.PAID.value,
        price=Decimal("50.00"),
    )


@pytest.fixture
def festival_ticket(festival_event):
    from checkin.models import Ticket
    return Ticket.objects.create(
        event=festival_event,
        qr_code="ING-ABC12345",
        attendee_name="Maria Souza",
        attendee_email="maria@example.com",
        price=Decimal("50.00"),
        payment_status=PaymentStatus.COMPLETED.value,
    )


@pytest.fixture
def staff_grant(festival_event, staff, organizer):
    from checkin.models import EventAuthorization
    return EventAuthorization.objects.create(
        event=festival_event,
        authorized_user=staff,
        authorized_by=organizer,
        status=GrantStatus.APPROVED.value,
    )
