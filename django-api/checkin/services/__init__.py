from checkin.services.authorization_service import AuthorizationService
from checkin.services.redemption_service import RedemptionService
from checkin.services.scan_debouncer import ScanDebouncer

__all__ = [
    "AuthorizationService",
    "RedemptionService",
    "ScanDebouncer",
]
