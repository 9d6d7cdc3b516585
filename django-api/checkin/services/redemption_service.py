"""Redemption service - validates and commits ticket check-ins at the door.

A ticket moves from unredeemed to redeemed exactly once. The transition is a
single conditional write in the ticket store, so two operators scanning the
same ticket at the same moment get one REDEEMED and one ALREADY_REDEEMED.

Expected results (unknown code, no rights, already used) come back as
RedemptionOutcome values. Store failures propagate to the caller, who may
retry the same scan safely.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from checkin.domain import (
    CheckInStats,
    Event,
    EventId,
    RedemptionCode,
    RedemptionOutcome,
    RedemptionStatus,
    Ticket,
    UserId,
)
from checkin.domain.errors import EventNotFoundError, InvalidRedemptionCodeError, NotAuthorizedError
from checkin.services.authorization_service import AuthorizationService
from checkin.stores.interfaces import AuthorizationDirectory, TicketStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_code(raw: str | None) -> RedemptionCode:
    """Trim a scanned or typed code.

    Raises:
        InvalidRedemptionCodeError: If the code is empty or malformed.
    """
    try:
        return RedemptionCode.parse(raw)
    except ValueError as exc:
        raise InvalidRedemptionCodeError(str(exc)) from exc


class RedemptionService:
    """Service for ticket check-in."""

    def __init__(
        self,
        tickets: TicketStore,
        authorization: AuthorizationService,
        directory: AuthorizationDirectory,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._tickets = tickets
        self._authorization = authorization
        self._directory = directory
        self._clock = clock

    def redeem(self, raw_code: str | None, acting_user_id: UserId) -> RedemptionOutcome:
        """Check in the ticket behind a code on behalf of a staff user.

        Raises:
            InvalidRedemptionCodeError: If the code is empty or malformed.
        """
        code = parse_code(raw_code)
        ticket, denied = self._resolve(code, acting_user_id)
        if denied is not None:
            return denied

        if ticket.redeemed:
            logger.info("Ticket %s already redeemed at %s", ticket.id, ticket.redeemed_at)
            return RedemptionOutcome.already_redeemed(code, ticket)

        now = self._clock()
        if self._tickets.mark_redeemed(ticket.id, now) == 0:
            # Someone else redeemed it between our read and our write.
            return self._lost_race(code, ticket)

        redeemed = ticket.mark_redeemed(now)
        audit_recorded = self._record_checkin(redeemed, acting_user_id)
        logger.info("Ticket %s redeemed for event %s by %s", ticket.id, ticket.event.id, acting_user_id)
        return RedemptionOutcome(
            status=RedemptionStatus.REDEEMED,
            code=code,
            ticket=redeemed,
            event=redeemed.event,
            redeemed_at=now,
            audit_recorded=audit_recorded,
        )

    def lookup(self, raw_code: str | None, acting_user_id: UserId) -> RedemptionOutcome:
        """Report a ticket's state without redeeming it."""
        code = parse_code(raw_code)
        ticket, denied = self._resolve(code, acting_user_id)
        if denied is not None:
            return denied
        if ticket.redeemed:
            return RedemptionOutcome.already_redeemed(code, ticket)
        return RedemptionOutcome(
            status=RedemptionStatus.VALID, code=code, ticket=ticket, event=ticket.event
        )

    def stats_for_event(self, event_id: EventId, acting_user_id: UserId) -> CheckInStats:
        """Return door progress for an event.

        Raises:
            EventNotFoundError: If the event does not exist.
            NotAuthorizedError: If the user has no check-in rights for it.
        """
        self.require_checkin_rights(event_id, acting_user_id)
        return self._tickets.get_checkin_stats(event_id)

    def require_checkin_rights(self, event_id: EventId, acting_user_id: UserId) -> Event:
        event = self._directory.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        if not self._authorization.is_authorized(acting_user_id, event.id, event.organizer_id):
            raise NotAuthorizedError()
        return event

    def _resolve(
        self, code: RedemptionCode, acting_user_id: UserId
    ) -> tuple[Ticket | None, RedemptionOutcome | None]:
        ticket = self._tickets.find_ticket_by_code(code)
        if ticket is None:
            logger.info("No ticket matches code %s", code)
            return None, RedemptionOutcome.not_found(code)

        if not self._authorization.is_authorized(
            acting_user_id, ticket.event.id, ticket.event.organizer_id
        ):
            logger.warning(
                "User %s is not authorized to check in event %s", acting_user_id, ticket.event.id
            )
            return ticket, RedemptionOutcome.unauthorized(code, ticket)

        return ticket, None

    def _lost_race(self, code: RedemptionCode, ticket: Ticket) -> RedemptionOutcome:
        current = self._tickets.find_ticket_by_code(code)
        if current is None:
            current = ticket
        logger.info("Ticket %s was redeemed concurrently at %s", ticket.id, current.redeemed_at)
        return RedemptionOutcome.already_redeemed(code, current)

    def _record_checkin(self, ticket: Ticket, acting_user_id: UserId) -> bool:
        # The redemption is already committed; a missing audit row is
        # reconciled later rather than undoing the check-in.
        try:
            self._tickets.append_checkin_record(
                ticket.id, ticket.event.id, acting_user_id, ticket.redeemed_at
            )
        except Exception:
            logger.exception(
                "Ticket %s redeemed by %s but the check-in record was not written",
                ticket.id,
                acting_user_id,
            )
            return False
        return True
