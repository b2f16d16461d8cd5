"""In-memory store implementations.

Used by the test container and for running the application without a
database. Repositories keep copies, so an aggregate loaded twice is never
the same object.
"""

import copy
from collections import defaultdict
from datetime import datetime, timedelta

from bookclub.domain import (
    AccessToken,
    LeanpubInvoiceId,
    Member,
    MemberForMailing,
    Purchase,
    Session,
    SessionForAdministrator,
    SessionId,
    UpcomingSession,
)
from bookclub.domain.errors import (
    MemberNotFoundError,
    PurchaseNotFoundError,
    SessionNotFoundError,
    UnknownAccessTokenError,
)
from bookclub.domain.events import (
    AttendeeCancelledTheirAttendance,
    AttendeeRegisteredForSession,
    SessionWasPlanned,
)
from bookclub.stores.interfaces import (
    MemberRepository,
    Members,
    PurchaseRepository,
    SessionRepository,
    Sessions,
)


def _stored_copy(aggregate):
    stored = copy.deepcopy(aggregate)
    stored.release_events()
    return stored


class InMemoryMemberRepository(MemberRepository):
    def __init__(self) -> None:
        self._members: dict[LeanpubInvoiceId, Member] = {}

    def save(self, member: Member) -> None:
        self._members[member.member_id] = _stored_copy(member)

    def get_by_id(self, member_id: LeanpubInvoiceId) -> Member:
        if member_id not in self._members:
            raise MemberNotFoundError(member_id.value)
        return copy.deepcopy(self._members[member_id])

    def exists(self, member_id: LeanpubInvoiceId) -> bool:
        return member_id in self._members

    def all(self) -> list[Member]:
        return [copy.deepcopy(member) for member in self._members.values()]


class InMemoryPurchaseRepository(PurchaseRepository):
    def __init__(self) -> None:
        self._purchases: dict[LeanpubInvoiceId, Purchase] = {}

    def save(self, purchase: Purchase) -> None:
        self._purchases[purchase.purchase_id] = _stored_copy(purchase)

    def get_by_id(self, purchase_id: LeanpubInvoiceId) -> Purchase:
        if purchase_id not in self._purchases:
            raise PurchaseNotFoundError(purchase_id.value)
        return copy.deepcopy(self._purchases[purchase_id])

    def exists(self, purchase_id: LeanpubInvoiceId) -> bool:
        return purchase_id in self._purchases


class InMemorySessionRepository(SessionRepository):
    def __init__(self) -> None:
        self._sessions: dict[SessionId, Session] = {}

    def save(self, session: Session) -> None:
        self._sessions[session.session_id] = _stored_copy(session)

    def get_by_id(self, session_id: SessionId) -> Session:
        if session_id not in self._sessions:
            raise SessionNotFoundError(str(session_id))
        return copy.deepcopy(self._sessions[session_id])

    def exists(self, session_id: SessionId) -> bool:
        return session_id in self._sessions


class InMemoryMembers(Members):
    """Answers member queries straight from the in-memory member repository."""

    def __init__(self, member_repository: InMemoryMemberRepository) -> None:
        self._member_repository = member_repository

    def get_one(self, member_id: LeanpubInvoiceId) -> MemberForMailing:
        member = self._member_repository.get_by_id(member_id)
        return MemberForMailing(
            member_id=member.member_id,
            email_address=member.email_address,
            time_zone=member.time_zone,
        )

    def get_member_id_by_access_token(self, access_token: AccessToken) -> LeanpubInvoiceId:
        for member in self._member_repository.all():
            if member.access_token == access_token:
                return member.member_id
        raise UnknownAccessTokenError()


class InMemorySessions(Sessions):
    def __init__(self, grace_period: timedelta = timedelta(0)) -> None:
        self._grace_period = grace_period
        self._sessions: dict[str, UpcomingSession] = {}
        self._sessions_for_administrator: dict[str, SessionForAdministrator] = {}
        # session id -> member id -> currently attending
        self._attendees: defaultdict[str, dict[str, bool]] = defaultdict(dict)

    def when_session_was_planned(self, event: SessionWasPlanned) -> None:
        session_id = str(event.session_id)
        self._sessions[session_id] = UpcomingSession(
            session_id=session_id,
            date=event.date.value,
            description=event.description,
        )
        self._sessions_for_administrator[session_id] = SessionForAdministrator(
            session_id=session_id,
            date=event.date.value,
            description=event.description,
            maximum_number_of_attendees=event.maximum_number_of_attendees.value,
        )

    def when_attendee_registered_for_session(self, event: AttendeeRegisteredForSession) -> None:
        self._attendees[str(event.session_id)][event.member_id.value] = True

    def when_attendee_cancelled_their_attendance(
        self, event: AttendeeCancelledTheirAttendance
    ) -> None:
        self._attendees[str(event.session_id)][event.member_id.value] = False

    def upcoming_sessions(
        self, current_time: datetime, member_id: LeanpubInvoiceId
    ) -> list[UpcomingSession]:
        upcoming_sessions = []
        for session in self._by_date(self._sessions.values()):
            if not session.is_to_be_considered_upcoming(current_time, self._grace_period):
                continue
            if self._attendees.get(session.session_id, {}).get(member_id.value, False):
                session = session.with_active_member_registered_as_attendee()
            upcoming_sessions.append(session)
        return upcoming_sessions

    def upcoming_sessions_for_administrator(
        self, current_time: datetime
    ) -> list[SessionForAdministrator]:
        return [
            self._with_current_number_of_attendees(session)
            for session in self._by_date(self._sessions_for_administrator.values())
            if session.is_to_be_considered_upcoming(current_time, self._grace_period)
        ]

    def get_session_for_administrator(self, session_id: SessionId) -> SessionForAdministrator:
        session = self._sessions_for_administrator.get(str(session_id))
        if session is None:
            raise SessionNotFoundError(str(session_id))
        return self._with_current_number_of_attendees(session)

    def _with_current_number_of_attendees(
        self, session: SessionForAdministrator
    ) -> SessionForAdministrator:
        attendees = self._attendees.get(session.session_id, {})
        return session.with_number_of_attendees(sum(attendees.values()))

    @staticmethod
    def _by_date(sessions):
        return sorted(sessions, key=lambda session: session.date)
