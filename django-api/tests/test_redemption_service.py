"""Unit tests for RedemptionService.

These test outcomes, idempotence and single-winner redemption against
in-memory stores.
Run with: pytest tests/test_redemption_service.py -v
"""

import threading
import uuid
from datetime import timedelta

import pytest

from checkin.domain import EventId, GrantStatus, RedemptionStatus
from checkin.domain.errors import EventNotFoundError, InvalidRedemptionCodeError, NotAuthorizedError
from checkin.services import AuthorizationService, RedemptionService

from conftest import NOW, make_event, make_ticket, uid


class SteppingClock:
    def __init__(self) -> None:
        self.now = NOW

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def service(ticket_store, directory, clock) -> RedemptionService:
    return RedemptionService(
        tickets=ticket_store,
        authorization=AuthorizationService(directory),
        directory=directory,
        clock=clock,
    )


@pytest.fixture
def approved_staff(directory, festival):
    return directory.add_grant(festival, "staff-1", GrantStatus.APPROVED)


class TestRedeem:
    """Tests for RedemptionService.redeem."""

    def test_first_scan_redeems_and_records_checkin(self, service, ticket_store, approved_staff):
        outcome = service.redeem("ING-ABC12345", uid("staff-1"))

        assert outcome.status is RedemptionStatus.REDEEMED
        assert outcome.redeemed_at == NOW
        assert outcome.ticket.holder_name == "Maria Souza"
        assert outcome.event.title == "Festival X"
        assert outcome.audit_recorded

        stored = ticket_store.tickets["ING-ABC12345"]
        assert stored.redeemed and stored.redeemed_at == NOW
        assert len(ticket_store.checkins) == 1
        assert ticket_store.checkins[0].checked_in_by == uid("staff-1")

    def test_second_scan_reports_already_redeemed(self, service, ticket_store, approved_staff):
        """Re-scanning keeps the original timestamp and writes no new record."""
        service.redeem("ING-ABC12345", uid("staff-1"))
        outcome = service.redeem("ING-ABC12345", uid("staff-1"))

        assert outcome.status is RedemptionStatus.ALREADY_REDEEMED
        assert outcome.redeemed_at == NOW
        assert ticket_store.tickets["ING-ABC12345"].redeemed_at == NOW
        assert len(ticket_store.checkins) == 1

    def test_organizer_can_redeem_without_grant(self, service):
        outcome = service.redeem("ING-ABC12345", uid("org-1"))
        assert outcome.status is RedemptionStatus.REDEEMED

    def test_code_is_trimmed(self, service, approved_staff):
        outcome = service.redeem("  ING-ABC12345 \n", uid("staff-1"))
        assert outcome.status is RedemptionStatus.REDEEMED

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_code_is_rejected(self, service, raw):
        with pytest.raises(InvalidRedemptionCodeError):
            service.redeem(raw, uid("staff-1"))

    def test_unknown_code_mutates_nothing(self, service, ticket_store, approved_staff):
        outcome = service.redeem("NONEXISTENT-CODE", uid("staff-1"))

        assert outcome.status is RedemptionStatus.TICKET_NOT_FOUND
        assert outcome.ticket is None
        assert not ticket_store.tickets["ING-ABC12345"].redeemed
        assert ticket_store.checkins == []

    def test_user_authorized_for_other_event_is_rejected(self, service, ticket_store, directory):
        show = directory.add_event(make_event("Show Y", organizer="org-2"))
        directory.add_grant(show, "staff-1", GrantStatus.APPROVED)

        outcome = service.redeem("ING-ABC12345", uid("staff-1"))

        assert outcome.status is RedemptionStatus.UNAUTHORIZED
        assert not ticket_store.tickets["ING-ABC12345"].redeemed
        assert ticket_store.checkins == []

    def test_pending_grant_is_rejected(self, service, ticket_store, directory, festival):
        directory.add_grant(festival, "staff-2", GrantStatus.PENDING)
        outcome = service.redeem("ING-ABC12345", uid("staff-2"))
        assert outcome.status is RedemptionStatus.UNAUTHORIZED

    def test_unauthorized_check_precedes_already_redeemed(self, service, ticket_store, festival):
        ticket_store.add(make_ticket(festival, redeemed=True, redeemed_at=NOW))
        outcome = service.redeem("ING-ABC12345", uid("stranger"))
        assert outcome.status is RedemptionStatus.UNAUTHORIZED
        assert outcome.redeemed_at is None

    def test_audit_failure_keeps_ticket_redeemed(self, service, ticket_store, approved_staff, caplog):
        ticket_store.fail_append = True

        outcome = service.redeem("ING-ABC12345", uid("staff-1"))

        assert outcome.status is RedemptionStatus.REDEEMED
        assert not outcome.audit_recorded
        assert ticket_store.tickets["ING-ABC12345"].redeemed
        assert "check-in record was not written" in caplog.text

    def test_store_failure_propagates(self, service, ticket_store, approved_staff, monkeypatch):
        def unavailable(*args, **kwargs):
            raise ConnectionError("store unreachable")

        monkeypatch.setattr(ticket_store, "mark_redeemed", unavailable)
        with pytest.raises(ConnectionError):
            service.redeem("ING-ABC12345", uid("staff-1"))
        assert not ticket_store.tickets["ING-ABC12345"].redeemed

    def test_lost_race_reports_winner_timestamp(self, service, ticket_store, approved_staff, monkeypatch):
        """If the conditional update matches no row, the stored state wins."""
        winner_time = NOW - timedelta(minutes=5)
        original = ticket_store.find_ticket_by_code
        calls = []

        def stale_then_fresh(code):
            calls.append(code)
            ticket = original(code)
            if len(calls) == 1:
                # Another scanner commits right after our read.
                ticket_store.tickets[code.value] = ticket.mark_redeemed(winner_time)
            return ticket

        monkeypatch.setattr(ticket_store, "find_ticket_by_code", stale_then_fresh)
        outcome = service.redeem("ING-ABC12345", uid("staff-1"))

        assert outcome.status is RedemptionStatus.ALREADY_REDEEMED
        assert outcome.redeemed_at == winner_time
        assert ticket_store.checkins == []


class TestConcurrentRedeem:
    def test_two_scanners_one_winner(self, service, ticket_store, directory, festival, approved_staff):
        directory.add_grant(festival, "staff-2", GrantStatus.APPROVED)
        ticket_store.read_barrier = threading.Barrier(2)
        outcomes = []

        def scan(user):
            outcomes.append(service.redeem("ING-ABC12345", uid(user)))

        threads = [threading.Thread(target=scan, args=(u,)) for u in ("staff-1", "staff-2")]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        statuses = sorted(o.status.value for o in outcomes)
        assert statuses == ["ALREADY_REDEEMED", "REDEEMED"]
        assert len(ticket_store.checkins) == 1
        winner = next(o for o in outcomes if o.status is RedemptionStatus.REDEEMED)
        loser = next(o for o in outcomes if o.status is RedemptionStatus.ALREADY_REDEEMED)
        assert loser.redeemed_at == winner.redeemed_at


class TestLookup:
    def test_lookup_reports_valid_without_redeeming(self, service, ticket_store, approved_staff):
        outcome = service.lookup("ING-ABC12345", uid("staff-1"))
        assert outcome.status is RedemptionStatus.VALID
        assert not ticket_store.tickets["ING-ABC12345"].redeemed
        assert ticket_store.checkins == []

    def test_lookup_after_redeem(self, service, approved_staff):
        service.redeem("ING-ABC12345", uid("staff-1"))
        outcome = service.lookup("ING-ABC12345", uid("staff-1"))
        assert outcome.status is RedemptionStatus.ALREADY_REDEEMED
        assert outcome.redeemed_at == NOW

    def test_lookup_unauthorized(self, service):
        assert service.lookup("ING-ABC12345", uid("stranger")).status is RedemptionStatus.UNAUTHORIZED


class TestStats:
    def test_stats_count_redeemed_tickets(self, service, ticket_store, festival, approved_staff):
        ticket_store.add(make_ticket(festival, code="ING-ZZZ22222"))
        service.redeem("ING-ABC12345", uid("staff-1"))

        stats = service.stats_for_event(festival.id, uid("org-1"))

        assert (stats.total, stats.checked_in, stats.remaining) == (2, 1, 1)

    def test_stats_require_rights(self, service, festival):
        with pytest.raises(NotAuthorizedError):
            service.stats_for_event(festival.id, uid("stranger"))

    def test_stats_unknown_event(self, service):
        with pytest.raises(EventNotFoundError):
            service.stats_for_event(EventId(uuid.uuid4()), uid("org-1"))
