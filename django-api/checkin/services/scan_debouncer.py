"""Cooldown for camera scans.

A camera keeps decoding the same QR code for as long as the ticket is held in
front of it. Repeats of the same (operator, code) pair inside the cooldown
window are suppressed before they reach the redemption service.
"""

import hashlib
from typing import Any, Protocol

from checkin.domain import RedemptionCode, UserId

DEFAULT_COOLDOWN_SECONDS = 2.0


class CooldownCache(Protocol):
    """The slice of Django's cache API the debouncer needs."""

    def add(self, key: str, value: Any, timeout: float | None = ...) -> bool: ...

    def delete(self, key: str) -> Any: ...


class ScanDebouncer:
    def __init__(self, cache: CooldownCache, cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS) -> None:
        self._cache = cache
        self._cooldown = cooldown_seconds

    def should_process(self, operator_id: UserId, code: RedemptionCode) -> bool:
        """Return False if this operator submitted this code within the cooldown."""
        if self._cooldown <= 0:
            return True
        return self._cache.add(self._key(operator_id, code), 1, timeout=self._cooldown)

    def release(self, operator_id: UserId, code: RedemptionCode) -> None:
        """Forget a scan that produced no outcome so it can be retried at once."""
        if self._cooldown > 0:
            self._cache.delete(self._key(operator_id, code))

    @staticmethod
    def _key(operator_id: UserId, code: RedemptionCode) -> str:
        digest = hashlib.sha1(code.value.encode("utf-8")).hexdigest()
        return f"checkin:scan:{operator_id}:{digest}"
