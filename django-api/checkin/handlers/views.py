"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain results to HTTP responses
- Never contain business logic
- Never expose internal error details (see handlers/exceptions.py)

The acting user is always taken from the authenticated request and passed to
services explicitly.
"""

from typing import TypeVar

from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from checkin.conf import app_setting, stats_cache_key
from checkin.domain import EventId, GrantId, GrantStatus, RedemptionOutcome, RedemptionStatus, UserId
from checkin.domain.errors import InvalidGrantStatusError, InvalidIdError
from checkin.handlers.dependencies import (
    get_authorization_service,
    get_redemption_service,
    get_scan_debouncer,
)
from checkin.handlers.serializers import (
    CheckInStatsSerializer,
    EventSerializer,
    GrantRequestSerializer,
    GrantSerializer,
    GrantStatusRequestSerializer,
    RedeemRequestSerializer,
    RedemptionOutcomeSerializer,
)
from checkin.services.redemption_service import parse_code

OUTCOME_STATUS = {
    RedemptionStatus.REDEEMED: status.HTTP_200_OK,
    RedemptionStatus.VALID: status.HTTP_200_OK,
    RedemptionStatus.ALREADY_REDEEMED: status.HTTP_409_CONFLICT,
    RedemptionStatus.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RedemptionStatus.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
}

IdT = TypeVar("IdT", EventId, GrantId)


def _parse_id(id_cls: type[IdT], raw: str, kind: str) -> IdT:
    try:
        return id_cls.from_string(raw)
    except ValueError:
        raise InvalidIdError(kind)


def _acting_user(request: Request) -> UserId:
    return UserId(request.user.id)


def _outcome_response(outcome: RedemptionOutcome) -> Response:
    return Response(
        RedemptionOutcomeSerializer(outcome).data,
        status=OUTCOME_STATUS[outcome.status],
    )


class CheckInView(APIView):
    permission_classes = [IsAuthenticated]


class RedeemView(CheckInView):
    """Handler for POST /api/checkin/redeem (manual entry)"""

    def post(self, request: Request) -> Response:
        payload = RedeemRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        outcome = get_redemption_service().redeem(
            payload.validated_data["code"], _acting_user(request)
        )
        return _outcome_response(outcome)


class ScanView(CheckInView):
    """Handler for POST /api/checkin/scan (camera decoder)"""

    def post(self, request: Request) -> Response:
        payload = RedeemRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        code = parse_code(payload.validated_data["code"])
        user_id = _acting_user(request)
        debouncer = get_scan_debouncer()

        if not debouncer.should_process(user_id, code):
            return Response(
                {
                    "status": "DUPLICATE_SCAN",
                    "message": "Same code scanned moments ago; ignoring repeat",
                    "code": code.value,
                },
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )
        try:
            outcome = get_redemption_service().redeem(code.value, user_id)
        except Exception:
            debouncer.release(user_id, code)
            raise
        return _outcome_response(outcome)


class LookupView(CheckInView):
    """Handler for POST /api/checkin/lookup"""

    def post(self, request: Request) -> Response:
        payload = RedeemRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        outcome = get_redemption_service().lookup(
            payload.validated_data["code"], _acting_user(request)
        )
        return _outcome_response(outcome)


class OwnedEventListView(CheckInView):
    """Handler for GET /api/events/mine"""

    def get(self, request: Request) -> Response:
        events = get_authorization_service().events_owned_by(_acting_user(request))
        return Response({"results": EventSerializer(events, many=True).data})


class EventAuthorizationCheckView(CheckInView):
    """Handler for GET /api/events/{event_id}/authorization"""

    def get(self, request: Request, event_id: str) -> Response:
        eid = _parse_id(EventId, event_id, "event ID")
        authorized = get_authorization_service().is_authorized(_acting_user(request), eid)
        return Response({"event_id": str(eid), "authorized": authorized})


class EventAuthorizationListView(CheckInView):
    """Handler for GET/POST /api/events/{event_id}/authorizations"""

    def get(self, request: Request, event_id: str) -> Response:
        eid = _parse_id(EventId, event_id, "event ID")
        grants = get_authorization_service().list_grants(eid, _acting_user(request))
        return Response({"results": GrantSerializer(grants, many=True).data})

    def post(self, request: Request, event_id: str) -> Response:
        eid = _parse_id(EventId, event_id, "event ID")
        payload = GrantRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        grant = get_authorization_service().grant_authorization(
            _acting_user(request), eid, payload.validated_data["user"]
        )
        return Response(GrantSerializer(grant).data, status=status.HTTP_201_CREATED)


class AuthorizationDetailView(CheckInView):
    """Handler for PATCH/DELETE /api/authorizations/{grant_id}"""

    def patch(self, request: Request, grant_id: str) -> Response:
        gid = _parse_id(GrantId, grant_id, "authorization ID")
        payload = GrantStatusRequestSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            new_status = GrantStatus(payload.validated_data["status"].strip().lower())
        except ValueError:
            raise InvalidGrantStatusError()
        grant = get_authorization_service().set_grant_status(gid, new_status, _acting_user(request))
        return Response(GrantSerializer(grant).data)

    def delete(self, request: Request, grant_id: str) -> Response:
        gid = _parse_id(GrantId, grant_id, "authorization ID")
        get_authorization_service().revoke_authorization(gid, _acting_user(request))
        return Response(status=status.HTTP_204_NO_CONTENT)


class CheckInStatsView(CheckInView):
    """Handler for GET /api/events/{event_id}/checkin-stats"""

    def get(self, request: Request, event_id: str) -> Response:
        eid = _parse_id(EventId, event_id, "event ID")
        service = get_redemption_service()
        user_id = _acting_user(request)
        key = stats_cache_key(eid)

        # Rights are checked on every request; only the counts are cached.
        data = cache.get(key)
        if data is None:
            data = dict(CheckInStatsSerializer(service.stats_for_event(eid, user_id)).data)
            cache.set(key, data, timeout=app_setting("STATS_CACHE_SECONDS"))
        else:
            service.require_checkin_rights(eid, user_id)
        return Response(data)
