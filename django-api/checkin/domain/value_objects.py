"""Domain primitives that enforce validity at creation time."""

import secrets
from dataclasses import dataclass
from decimal import Decimal
from typing import Self
from uuid import UUID

CODE_PREFIX = "ING"
CODE_LENGTH = 8
# No 0/O or 1/I so codes can be typed from a printed ticket.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
MAX_CODE_LENGTH = 64


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TicketId:
    """Unique identifier for a Ticket."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class GrantId:
    """Unique identifier for an authorization grant."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId:
    """Unique identifier for a user profile."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RedemptionCode:
    """The string printed on a ticket and encoded in its QR code.

    Codes are opaque: matching is exact after trimming surrounding whitespace.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Redemption code cannot be empty")
        if len(self.value) > MAX_CODE_LENGTH:
            raise ValueError("Redemption code is too long")
        if any(ch.isspace() or not ch.isprintable() for ch in self.value):
            raise ValueError("Redemption code contains whitespace or control characters")

    @classmethod
    def parse(cls, raw: str | None) -> Self:
        return cls(value=(raw or "").strip())

    @classmethod
    def generate(cls) -> Self:
        body = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        return cls(value=f"{CODE_PREFIX}-{body}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"
