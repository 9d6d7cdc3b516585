"""Map domain and store errors to HTTP responses.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Internal error details
never reach the client.
"""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from checkin.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.INVALID_CODE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_GRANT_STATUS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.GRANT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.GRANT_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_EVENT_ORGANIZER: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
}


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def api_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        return Response(
            error_body(exc.code.value, exc.message),
            status=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
        )
    if isinstance(exc, DatabaseError):
        logger.exception("Store failure while handling %s", context.get("view").__class__.__name__)
        return Response(
            error_body("STORE_UNAVAILABLE", "Service temporarily unavailable, please try again"),
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return exception_handler(exc, context)
