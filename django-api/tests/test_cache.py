"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache

from checkin.conf import stats_cache_key
from checkin.domain import RedemptionCode
from checkin.models import CheckIn
from checkin.services import ScanDebouncer

from conftest import uid


class FakeCache:
    """Honours add() semantics with a controllable clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.expiry: dict[str, float] = {}

    def add(self, key, value, timeout=None) -> bool:
        if key in self.expiry and self.expiry[key] > self.now:
            return False
        self.expiry[key] = self.now + timeout
        return True

    def delete(self, key) -> bool:
        return self.expiry.pop(key, None) is not None


class TestScanDebouncer:
    """Tests for the camera scan cooldown."""

    def test_repeat_within_cooldown_is_suppressed(self):
        debouncer = ScanDebouncer(FakeCache(), cooldown_seconds=2)
        code = RedemptionCode("ING-ABC12345")

        assert debouncer.should_process(uid("staff-1"), code)
        assert not debouncer.should_process(uid("staff-1"), code)

    def test_repeat_after_cooldown_passes(self):
        fake = FakeCache()
        debouncer = ScanDebouncer(fake, cooldown_seconds=2)
        code = RedemptionCode("ING-ABC12345")

        debouncer.should_process(uid("staff-1"), code)
        fake.now = 2.5
        assert debouncer.should_process(uid("staff-1"), code)

    def test_other_operator_or_code_is_not_suppressed(self):
        debouncer = ScanDebouncer(FakeCache(), cooldown_seconds=2)
        code = RedemptionCode("ING-ABC12345")

        debouncer.should_process(uid("staff-1"), code)
        assert debouncer.should_process(uid("staff-2"), code)
        assert debouncer.should_process(uid("staff-1"), RedemptionCode("ING-ZZZ22222"))

    def test_released_scan_can_be_retried_at_once(self):
        debouncer = ScanDebouncer(FakeCache(), cooldown_seconds=2)
        code = RedemptionCode("ING-ABC12345")

        assert debouncer.should_process(uid("staff-1"), code)
        debouncer.release(uid("staff-1"), code)
        assert debouncer.should_process(uid("staff-1"), code)

    def test_zero_cooldown_disables_debounce(self):
        debouncer = ScanDebouncer(FakeCache(), cooldown_seconds=0)
        code = RedemptionCode("ING-ABC12345")
        assert debouncer.should_process(uid("staff-1"), code)
        assert debouncer.should_process(uid("staff-1"), code)


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for stats cache invalidation on model changes."""

    def test_ticket_save_invalidates_stats(self, festival_ticket):
        key = stats_cache_key(festival_ticket.event_id)
        cache.set(key, {"total": 0})

        festival_ticket.attendee_name = "Maria S. Souza"
        festival_ticket.save()

        assert cache.get(key) is None

    def test_checkin_created_invalidates_stats(self, festival_ticket, staff):
        key = stats_cache_key(festival_ticket.event_id)
        cache.set(key, {"total": 1, "checked_in": 0})

        CheckIn.objects.create(ticket=festival_ticket, event_id=festival_ticket.event_id, checked_in_by=staff)

        assert cache.get(key) is None
