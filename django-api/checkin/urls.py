from django.urls import path

from checkin.handlers import (
    AuthorizationDetailView,
    CheckInStatsView,
    EventAuthorizationCheckView,
    EventAuthorizationListView,
    LookupView,
    OwnedEventListView,
    RedeemView,
    ScanView,
)

urlpatterns = [
    path("checkin/redeem", RedeemView.as_view(), name="checkin-redeem"),
    path("checkin/scan", ScanView.as_view(), name="checkin-scan"),
    path("checkin/lookup", LookupView.as_view(), name="checkin-lookup"),
    path("events/mine", OwnedEventListView.as_view(), name="owned-event-list"),
    path(
        "events/<str:event_id>/authorization",
        EventAuthorizationCheckView.as_view(),
        name="event-authorization-check",
    ),
    path(
        "events/<str:event_id>/authorizations",
        EventAuthorizationListView.as_view(),
        name="event-authorization-list",
    ),
    path(
        "events/<str:event_id>/checkin-stats",
        CheckInStatsView.as_view(),
        name="event-checkin-stats",
    ),
    path(
        "authorizations/<str:grant_id>",
        AuthorizationDetailView.as_view(),
        name="authorization-detail",
    ),
]
