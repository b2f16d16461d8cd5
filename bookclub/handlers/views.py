"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call the application service for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.permissions import BasePermission, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookclub.apps import get_container
from bookclub.domain.errors import INVARIANT_CODES, NOT_FOUND_CODES, DomainError
from bookclub.handlers.authentication import AuthenticatedMember
from bookclub.handlers.serializers import (
    AccessRequestSerializer,
    BookSummarySerializer,
    PlanSessionSerializer,
    SessionForAdministratorSerializer,
    UpcomingSessionSerializer,
)


def domain_error_response(error: DomainError) -> Response:
    if error.code in NOT_FOUND_CODES:
        status_code = status.HTTP_404_NOT_FOUND
    elif error.code in INVARIANT_CODES:
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    return Response({"code": error.code.value, "message": error.message}, status=status_code)


class IsMember(BasePermission):
    def has_permission(self, request, view) -> bool:
        return isinstance(request.user, AuthenticatedMember)


class BookClubView(APIView):
    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            return domain_error_response(exc)
        return super().handle_exception(exc)

    @property
    def application(self):
        return get_container().application


class AccessRequestView(BookClubView):
    """Handler for POST /api/access-requests"""

    authentication_classes = []
    permission_classes = []

    def post(self, request: Request) -> Response:
        serializer = AccessRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.application.request_access(**serializer.validated_data)
        return Response(status=status.HTTP_202_ACCEPTED)


class UpcomingSessionListView(BookClubView):
    """Handler for GET /api/sessions"""

    permission_classes = [IsMember]

    def get(self, request: Request) -> Response:
        sessions = self.application.list_upcoming_sessions(request.user.member_id)
        return Response(UpcomingSessionSerializer(sessions, many=True).data)


class AttendanceView(BookClubView):
    """Handler for POST and DELETE /api/sessions/{session_id}/attendance"""

    permission_classes = [IsMember]

    def post(self, request: Request, session_id: str) -> Response:
        self.application.attend_session(session_id, request.user.member_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def delete(self, request: Request, session_id: str) -> Response:
        self.application.cancel_attendance(session_id, request.user.member_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SessionCallUrlView(BookClubView):
    """Handler for GET /api/sessions/{session_id}/call-url"""

    permission_classes = [IsMember]

    def get(self, request: Request, session_id: str) -> Response:
        return Response({"url": self.application.get_call_url_for_session(session_id)})


class BookSummaryView(BookClubView):
    """Handler for GET /api/book"""

    permission_classes = [IsMember]

    def get(self, request: Request) -> Response:
        return Response(BookSummarySerializer(self.application.get_book_summary()).data)


class AdministratorSessionListView(BookClubView):
    """Handler for GET and POST /api/admin/sessions"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        sessions = self.application.list_upcoming_sessions_for_administrator()
        return Response(SessionForAdministratorSerializer(sessions, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = PlanSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session_id = self.application.plan_session(**serializer.validated_data)
        return Response({"session_id": str(session_id)}, status=status.HTTP_201_CREATED)


class AdministratorSessionDetailView(BookClubView):
    """Handler for GET /api/admin/sessions/{session_id}"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request, session_id: str) -> Response:
        session = self.application.get_session_for_administrator(session_id)
        return Response(SessionForAdministratorSerializer(session).data)


class ImportPurchasesView(BookClubView):
    """Handler for POST /api/admin/purchases/import"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request) -> Response:
        return Response({"imported": self.application.import_all_purchases()})
