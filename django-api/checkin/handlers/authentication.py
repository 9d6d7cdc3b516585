"""Request authentication.

Sign-in happens at the identity provider; the gateway in front of this
service forwards the signed-in user's profile ID in a trusted header.
"""

from uuid import UUID

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

from checkin.conf import app_setting
from checkin.models import Profile


def _meta_key(header: str) -> str:
    return "HTTP_" + header.upper().replace("-", "_")


class TrustedHeaderAuthentication(BaseAuthentication):
    """Resolve request.user to the Profile named by the identity header."""

    def authenticate(self, request: Request):
        raw = request.META.get(_meta_key(app_setting("USER_HEADER")))
        if not raw:
            return None
        try:
            profile_id = UUID(raw.strip())
        except ValueError:
            raise exceptions.AuthenticationFailed("Malformed user header")
        profile = Profile.objects.filter(pk=profile_id).first()
        if profile is None:
            raise exceptions.AuthenticationFailed("Unknown user")
        return profile, None

    def authenticate_header(self, request: Request) -> str:
        return app_setting("USER_HEADER")
