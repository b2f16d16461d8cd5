"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every interface has a
Django ORM implementation (django_store.py) and an in-memory one
(in_memory.py); the composition root picks one set.
"""

from abc import ABC, abstractmethod
from datetime import datetime

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
from bookclub.domain.events import (
    AttendeeCancelledTheirAttendance,
    AttendeeRegisteredForSession,
    DomainEvent,
    SessionWasPlanned,
)


class MemberRepository(ABC):
    """Interface for member persistence operations."""

    @abstractmethod
    def save(self, member: Member) -> None: ...

    @abstractmethod
    def get_by_id(self, member_id: LeanpubInvoiceId) -> Member:
        """Return a member by ID.

        Raises:
            MemberNotFoundError: If the member does not exist.
        """
        ...

    @abstractmethod
    def exists(self, member_id: LeanpubInvoiceId) -> bool: ...


class PurchaseRepository(ABC):
    """Interface for purchase persistence operations."""

    @abstractmethod
    def save(self, purchase: Purchase) -> None: ...

    @abstractmethod
    def get_by_id(self, purchase_id: LeanpubInvoiceId) -> Purchase:
        """Return a purchase by its invoice ID.

        Raises:
            PurchaseNotFoundError: If the purchase was never imported.
        """
        ...

    @abstractmethod
    def exists(self, purchase_id: LeanpubInvoiceId) -> bool: ...


class SessionRepository(ABC):
    """Interface for session persistence operations."""

    @abstractmethod
    def save(self, session: Session) -> None:
        """Store the session, including its current attendees."""
        ...

    @abstractmethod
    def get_by_id(self, session_id: SessionId) -> Session:
        """Return a session by ID.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        ...

    @abstractmethod
    def exists(self, session_id: SessionId) -> bool: ...


class Members(ABC):
    """Read side for member details needed outside the Member aggregate."""

    @abstractmethod
    def get_one(self, member_id: LeanpubInvoiceId) -> MemberForMailing:
        """Raises MemberNotFoundError for an unknown member."""
        ...

    @abstractmethod
    def get_member_id_by_access_token(self, access_token: AccessToken) -> LeanpubInvoiceId:
        """Raises UnknownAccessTokenError when no member holds the token."""
        ...


class Sessions(ABC):
    """Session read model, projected from session events.

    Projection methods must be idempotent: applying the same event twice
    leaves the read model as if it was applied once.
    """

    @abstractmethod
    def when_session_was_planned(self, event: SessionWasPlanned) -> None: ...

    @abstractmethod
    def when_attendee_registered_for_session(self, event: AttendeeRegisteredForSession) -> None: ...

    @abstractmethod
    def when_attendee_cancelled_their_attendance(
        self, event: AttendeeCancelledTheirAttendance
    ) -> None: ...

    def handle(self, event: DomainEvent) -> None:
        match event:
            case SessionWasPlanned():
                self.when_session_was_planned(event)
            case AttendeeRegisteredForSession():
                self.when_attendee_registered_for_session(event)
            case AttendeeCancelledTheirAttendance():
                self.when_attendee_cancelled_their_attendance(event)
            case _:
                raise TypeError(f"{type(self).__name__} does not handle {event.kind}")

    @abstractmethod
    def upcoming_sessions(
        self, current_time: datetime, member_id: LeanpubInvoiceId
    ) -> list[UpcomingSession]:
        """Return upcoming sessions ordered by date, flagged for the given member."""
        ...

    @abstractmethod
    def upcoming_sessions_for_administrator(
        self, current_time: datetime
    ) -> list[SessionForAdministrator]:
        """Return upcoming sessions ordered by date, with their current number of attendees."""
        ...

    @abstractmethod
    def get_session_for_administrator(self, session_id: SessionId) -> SessionForAdministrator:
        """Return one session with its current number of attendees.

        Raises:
            SessionNotFoundError: If no such session was planned.
        """
        ...
