"""Wire services to the Django-backed stores."""

from django.core.cache import cache
from django.utils import timezone

from checkin.conf import app_setting
from checkin.services import AuthorizationService, RedemptionService, ScanDebouncer
from checkin.stores.django_store import DjangoAuthorizationDirectory, DjangoTicketStore


def get_authorization_service() -> AuthorizationService:
    return AuthorizationService(DjangoAuthorizationDirectory())


def get_redemption_service() -> RedemptionService:
    directory = DjangoAuthorizationDirectory()
    return RedemptionService(
        tickets=DjangoTicketStore(),
        authorization=AuthorizationService(directory),
        directory=directory,
        clock=timezone.now,
    )


def get_scan_debouncer() -> ScanDebouncer:
    return ScanDebouncer(cache, cooldown_seconds=float(app_setting("SCAN_COOLDOWN_SECONDS")))
