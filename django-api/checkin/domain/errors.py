"""Domain error codes for the check-in module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_CODE = "INVALID_CODE"
    INVALID_ID = "INVALID_ID"
    INVALID_GRANT_STATUS = "INVALID_GRANT_STATUS"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    GRANT_NOT_FOUND = "GRANT_NOT_FOUND"
    GRANT_CONFLICT = "GRANT_CONFLICT"
    NOT_EVENT_ORGANIZER = "NOT_EVENT_ORGANIZER"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidRedemptionCodeError(DomainError):
    """Raised when a scanned or typed code is empty or malformed."""

    def __init__(self, reason: str = "Ticket code is required") -> None:
        super().__init__(code=ErrorCode.INVALID_CODE, message=reason)


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "ID") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} format",
        )


class InvalidGrantStatusError(DomainError):
    """Raised when a grant status value is not recognised."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_GRANT_STATUS,
            message="Status must be one of: pending, approved, denied",
        )


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class UserNotFoundError(DomainError):
    """Raised when a grant target cannot be resolved to a registered user."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message="No user is registered with this email or ID",
        )
        self.identifier = identifier


class GrantNotFoundError(DomainError):
    """Raised when an authorization grant is not found."""

    def __init__(self, grant_id: str) -> None:
        super().__init__(
            code=ErrorCode.GRANT_NOT_FOUND,
            message="Authorization not found",
        )
        self.grant_id = grant_id


class GrantConflictError(DomainError):
    """Raised when the user already holds a grant for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.GRANT_CONFLICT,
            message="This user already has an authorization for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class NotEventOrganizerError(DomainError):
    """Raised when someone other than the organizer manages grants."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_EVENT_ORGANIZER,
            message="Only the event organizer can manage authorizations",
        )


class NotAuthorizedError(DomainError):
    """Raised when a user lacks check-in rights for an event."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_AUTHORIZED,
            message="You are not authorized for this event",
        )
