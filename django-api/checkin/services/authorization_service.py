"""Authorization service - who may check in tickets for an event.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging

from checkin.domain import Event, EventId, Grant, GrantId, GrantStatus, UserId
from checkin.domain.errors import (
    EventNotFoundError,
    GrantConflictError,
    GrantNotFoundError,
    NotEventOrganizerError,
    UserNotFoundError,
)
from checkin.stores.interfaces import AuthorizationDirectory

logger = logging.getLogger(__name__)

# Marks an omitted organizer_id; None means the event has no organizer.
_LOOKUP_ORGANIZER = object()


class AuthorizationService:
    """Decides and manages check-in rights per event.

    The event organizer always has rights to their own event. Anyone else
    needs an approved grant; pending, denied and missing grants all deny.
    """

    def __init__(self, directory: AuthorizationDirectory) -> None:
        self._directory = directory

    def is_authorized(
        self,
        user_id: UserId,
        event_id: EventId,
        organizer_id: UserId | None | object = _LOOKUP_ORGANIZER,
    ) -> bool:
        """Return True if the user may redeem tickets for the event.

        When organizer_id is omitted the event is looked up; an unknown event
        is never authorized. Pass None for an event without an organizer.
        """
        if organizer_id is _LOOKUP_ORGANIZER:
            event = self._directory.get_event(event_id)
            if event is None:
                return False
            organizer_id = event.organizer_id

        if organizer_id is not None and user_id == organizer_id:
            return True

        grant = self._directory.find_grant(event_id, user_id)
        return grant is not None and grant.is_approved

    def grant_authorization(
        self, granter_id: UserId, event_id: EventId, target_identifier: str
    ) -> Grant:
        """Give a user approved check-in rights for an event.

        Raises:
            EventNotFoundError: If the event does not exist.
            NotEventOrganizerError: If the granter does not organize the event.
            UserNotFoundError: If no user matches the email or ID.
            GrantConflictError: If the user already has a grant for the event.
        """
        self._require_organizer(granter_id, event_id)

        target = self._directory.find_user(target_identifier)
        if target is None:
            raise UserNotFoundError(target_identifier)

        if self._directory.find_grant(event_id, target.id) is not None:
            raise GrantConflictError(str(event_id), str(target.id))

        grant = self._directory.insert_grant(
            event_id, target.id, granter_id, GrantStatus.APPROVED
        )
        if grant is None:
            # Lost a race with a concurrent grant for the same user.
            raise GrantConflictError(str(event_id), str(target.id))

        logger.info("User %s granted check-in rights on event %s by %s", target.id, event_id, granter_id)
        return grant

    def revoke_authorization(self, grant_id: GrantId, acting_user_id: UserId) -> None:
        """Delete a grant.

        Raises:
            GrantNotFoundError: If the grant does not exist.
            NotEventOrganizerError: If the acting user does not organize the event.
        """
        grant = self._get_grant(grant_id)
        self._require_organizer(acting_user_id, grant.event_id)

        if not self._directory.delete_grant(grant_id):
            raise GrantNotFoundError(str(grant_id))
        logger.info("Grant %s on event %s revoked by %s", grant_id, grant.event_id, acting_user_id)

    def set_grant_status(
        self, grant_id: GrantId, status: GrantStatus, acting_user_id: UserId
    ) -> Grant:
        grant = self._get_grant(grant_id)
        self._require_organizer(acting_user_id, grant.event_id)

        updated = self._directory.update_grant_status(grant_id, status)
        if updated is None:
            raise GrantNotFoundError(str(grant_id))
        return updated

    def list_grants(self, event_id: EventId, acting_user_id: UserId) -> list[Grant]:
        self._require_organizer(acting_user_id, event_id)
        return self._directory.list_grants_for_event(event_id)

    def events_owned_by(self, user_id: UserId) -> list[Event]:
        return self._directory.find_events_owned_by(user_id)

    def _get_grant(self, grant_id: GrantId) -> Grant:
        grant = self._directory.get_grant(grant_id)
        if grant is None:
            raise GrantNotFoundError(str(grant_id))
        return grant

    def _require_organizer(self, user_id: UserId, event_id: EventId) -> Event:
        event = self._directory.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        if event.organizer_id is None or event.organizer_id != user_id:
            logger.warning("User %s is not the organizer of event %s", user_id, event_id)
            raise NotEventOrganizerError()
        return event
