"""Member authentication with the access token sent to them by email."""

from dataclasses import dataclass

from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

from bookclub.apps import get_container
from bookclub.domain.errors import UnknownAccessTokenError


@dataclass(frozen=True)
class AuthenticatedMember:
    """The request user for a member authenticated by access token."""

    member_id: str
    is_authenticated = True
    is_staff = False


class AccessTokenAuthentication(BaseAuthentication):
    """Reads ``Authorization: Token <access token>``."""

    keyword = "Token"

    def authenticate(self, request):
        header = get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise AuthenticationFailed("Invalid token header.")

        try:
            access_token = header[1].decode()
            member_id = get_container().application.authenticate(access_token)
        except (UnicodeError, UnknownAccessTokenError) as exc:
            raise AuthenticationFailed("Invalid token.") from exc

        return AuthenticatedMember(member_id=member_id.value), access_token

    def authenticate_header(self, request) -> str:
        return self.keyword
