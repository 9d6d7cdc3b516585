"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from checkin.domain import (
    CheckInRecord,
    CheckInStats,
    Event,
    EventId,
    Grant,
    GrantId,
    GrantStatus,
    RedemptionCode,
    Ticket,
    TicketId,
    UserId,
    UserProfile,
)


class TicketStore(ABC):
    """Interface for ticket persistence operations."""

    @abstractmethod
    def find_ticket_by_code(self, code: RedemptionCode) -> Ticket | None:
        """Return the ticket with this exact code, joined with its event summary."""
        ...

    @abstractmethod
    def mark_redeemed(self, ticket_id: TicketId, redeemed_at: datetime) -> int:
        """Mark the ticket redeemed only if it is not redeemed yet.

        Must be a single conditional write. Returns the number of affected
        rows: 1 if this call redeemed the ticket, 0 otherwise.
        """
        ...

    @abstractmethod
    def append_checkin_record(
        self,
        ticket_id: TicketId,
        event_id: EventId,
        checked_in_by: UserId,
        checked_in_at: datetime,
    ) -> CheckInRecord:
        """Append an audit record for a completed redemption.

        checked_in_at is the time written to the ticket by mark_redeemed.
        """
        ...

    @abstractmethod
    def get_checkin_stats(self, event_id: EventId) -> CheckInStats:
        """Return ticket and check-in counts for an event."""
        ...


class AuthorizationDirectory(ABC):
    """Interface for events, users and check-in grants."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def find_events_owned_by(self, user_id: UserId) -> list[Event]:
        """Return events organized by the user, ordered by date ascending."""
        ...

    @abstractmethod
    def find_user(self, identifier: str) -> UserProfile | None:
        """Return the user whose ID or email matches, or None."""
        ...

    @abstractmethod
    def find_grant(self, event_id: EventId, user_id: UserId) -> Grant | None:
        """Return the grant for (event, user), or None."""
        ...

    @abstractmethod
    def get_grant(self, grant_id: GrantId) -> Grant | None:
        """Return a grant by ID, or None if not found."""
        ...

    @abstractmethod
    def list_grants_for_event(self, event_id: EventId) -> list[Grant]:
        """Return all grants for an event, newest first."""
        ...

    @abstractmethod
    def insert_grant(
        self,
        event_id: EventId,
        user_id: UserId,
        granter_id: UserId | None,
        status: GrantStatus,
    ) -> Grant | None:
        """Create a grant. Returns None if (event, user) already has one."""
        ...

    @abstractmethod
    def update_grant_status(self, grant_id: GrantId, status: GrantStatus) -> Grant | None:
        """Change a grant's status. Returns None if the grant does not exist."""
        ...

    @abstractmethod
    def delete_grant(self, grant_id: GrantId) -> bool:
        """Delete a grant. Returns False if it did not exist."""
        ...
