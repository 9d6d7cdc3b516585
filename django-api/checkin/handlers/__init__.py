from checkin.handlers.views import (
    AuthorizationDetailView,
    CheckInStatsView,
    EventAuthorizationCheckView,
    EventAuthorizationListView,
    LookupView,
    OwnedEventListView,
    RedeemView,
    ScanView,
)

__all__ = [
    "AuthorizationDetailView",
    "CheckInStatsView",
    "EventAuthorizationCheckView",
    "EventAuthorizationListView",
    "LookupView",
    "OwnedEventListView",
    "RedeemView",
    "ScanView",
]
