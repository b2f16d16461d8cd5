"""Application service - the single entry point for commands and queries.

Services:
- Depend only on interfaces (stores, collaborators, dispatcher)
- Parse identifiers coming from callers into value objects
- Load aggregate -> run command -> save -> dispatch recorded events
- Return domain models or raise domain errors

Events are dispatched only after the aggregate was saved. A failing
subscriber does not undo the save.
"""

import logging
from dataclasses import replace
from datetime import datetime

from bookclub.domain import (
    AccessToken,
    Capacity,
    EmailAddress,
    LeanpubInvoiceId,
    Member,
    Purchase,
    ScheduledDate,
    Session,
    SessionForAdministrator,
    SessionId,
    TimeZone,
    UpcomingSession,
)
from bookclub.domain.errors import (
    AccessAlreadyRequestedError,
    InvalidAccessRequestError,
    InvalidInvoiceIdError,
    InvalidSessionError,
    InvalidSessionIdError,
    UnknownAccessTokenError,
)
from bookclub.services.collaborators import (
    AccessTokenGenerator,
    AssetPublisher,
    BookSummary,
    Clock,
    GetBookSummary,
    IndividualPurchases,
    SessionCallUrls,
)
from bookclub.services.dispatcher import EventDispatcher
from bookclub.stores.interfaces import (
    MemberRepository,
    Members,
    PurchaseRepository,
    SessionRepository,
    Sessions,
)

logger = logging.getLogger(__name__)


class Application:
    """Commands and queries of the book club."""

    def __init__(
        self,
        *,
        member_repository: MemberRepository,
        purchase_repository: PurchaseRepository,
        session_repository: SessionRepository,
        dispatcher: EventDispatcher,
        clock: Clock,
        sessions: Sessions,
        members: Members,
        individual_purchases: IndividualPurchases,
        get_book_summary: GetBookSummary,
        asset_publisher: AssetPublisher,
        access_token_generator: AccessTokenGenerator,
        session_call_urls: SessionCallUrls,
    ) -> None:
        self._member_repository = member_repository
        self._purchase_repository = purchase_repository
        self._session_repository = session_repository
        self._dispatcher = dispatcher
        self._clock = clock
        self._sessions = sessions
        self._members = members
        self._individual_purchases = individual_purchases
        self._get_book_summary = get_book_summary
        self._asset_publisher = asset_publisher
        self._access_token_generator = access_token_generator
        self._session_call_urls = session_call_urls

    # Purchases

    def import_purchase(self, invoice_id: str) -> bool:
        """Import a Leanpub purchase. Returns False if it was imported before.

        Raises:
            InvalidInvoiceIdError: If the invoice_id is malformed.
        """
        purchase_id = _invoice_id(invoice_id)
        if self._purchase_repository.exists(purchase_id):
            return False

        purchase = Purchase.import_purchase(purchase_id)
        self._purchase_repository.save(purchase)
        logger.info("Imported purchase %s", purchase_id)
        self._dispatcher.dispatch_all(purchase.release_events())
        return True

    def import_all_purchases(self) -> int:
        """Import every individual purchase known to Leanpub; returns how many were new."""
        imported = 0
        for invoice_id in self._individual_purchases.list_invoice_ids():
            if self.import_purchase(invoice_id):
                imported += 1
        logger.info("Imported %d new purchase(s)", imported)
        return imported

    # Members

    def request_access(self, invoice_id: str, email_address: str, time_zone: str) -> None:
        """Request access to the club with the invoice ID of a purchase.

        Access is granted right away if the purchase was imported and not
        yet claimed; otherwise the request stays pending.

        Raises:
            InvalidInvoiceIdError: If the invoice_id is malformed.
            InvalidAccessRequestError: If the email address or time zone is invalid.
            AccessAlreadyRequestedError: If access was requested with this invoice before.
        """
        member_id = _invoice_id(invoice_id)
        try:
            email = EmailAddress(email_address)
            zone = TimeZone(time_zone)
        except ValueError as exc:
            raise InvalidAccessRequestError(str(exc)) from exc

        if self._member_repository.exists(member_id):
            raise AccessAlreadyRequestedError(member_id.value)

        member = Member.request_access(member_id, email, zone, requested_at=self._clock.now())
        self._member_repository.save(member)
        logger.info("Member %s requested access", member_id)
        self._dispatcher.dispatch_all(member.release_events())

    def generate_access_token(self, member_id: str) -> None:
        """Give the member a new access token, which replaces the previous one.

        Raises:
            MemberNotFoundError: If the member does not exist.
            AccessNotGrantedError: If the member was not granted access.
        """
        member = self._member_repository.get_by_id(_invoice_id(member_id))
        member.generate_access_token(self._access_token_generator.generate())
        self._member_repository.save(member)
        logger.info("Generated an access token for member %s", member.member_id)
        self._dispatcher.dispatch_all(member.release_events())

    def authenticate(self, access_token: str) -> LeanpubInvoiceId:
        """Return the ID of the member holding this access token.

        Raises:
            UnknownAccessTokenError: If no member holds the token.
        """
        try:
            token = AccessToken(access_token)
        except ValueError as exc:
            raise UnknownAccessTokenError() from exc
        return self._members.get_member_id_by_access_token(token)

    # Sessions

    def plan_session(
        self, date: datetime, description: str, maximum_number_of_attendees: int
    ) -> SessionId:
        """Plan a new session and return its ID.

        Raises:
            InvalidSessionError: If the date is naive, the description empty or
                the maximum number of attendees below 1.
        """
        try:
            session = Session.plan(
                SessionId.generate(),
                ScheduledDate(date),
                description,
                Capacity(maximum_number_of_attendees),
            )
        except ValueError as exc:
            raise InvalidSessionError(str(exc)) from exc

        self._session_repository.save(session)
        logger.info("Planned session %s", session.session_id)
        self._dispatcher.dispatch_all(session.release_events())
        return session.session_id

    def attend_session(self, session_id: str, member_id: str) -> None:
        """Register the member as an attendee of the session.

        Raises:
            InvalidSessionIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
            MemberNotFoundError: If the member does not exist.
            SessionIsFullError: If the session has no seats left.
        """
        attendee = _invoice_id(member_id)
        session = self._session_repository.get_by_id(_session_id(session_id))
        self._members.get_one(attendee)
        session.attend(attendee)
        self._session_repository.save(session)
        logger.info("Member %s attends session %s", attendee, session.session_id)
        self._dispatcher.dispatch_all(session.release_events())

    def cancel_attendance(self, session_id: str, member_id: str) -> None:
        """Cancel the member's attendance of the session.

        Raises:
            InvalidSessionIdError: If the session_id is not a valid UUID.
            SessionNotFoundError: If the session does not exist.
        """
        attendee = _invoice_id(member_id)
        session = self._session_repository.get_by_id(_session_id(session_id))
        session.cancel_attendance(attendee)
        self._session_repository.save(session)
        logger.info("Member %s cancelled attendance of session %s", attendee, session.session_id)
        self._dispatcher.dispatch_all(session.release_events())

    def list_upcoming_sessions(self, member_id: str) -> list[UpcomingSession]:
        return self._sessions.upcoming_sessions(self._clock.now(), _invoice_id(member_id))

    def list_upcoming_sessions_for_administrator(self) -> list[SessionForAdministrator]:
        return self._sessions.upcoming_sessions_for_administrator(self._clock.now())

    def get_session_for_administrator(self, session_id: str) -> SessionForAdministrator:
        """Raises InvalidSessionIdError or SessionNotFoundError."""
        return self._sessions.get_session_for_administrator(_session_id(session_id))

    def get_call_url_for_session(self, session_id: str) -> str:
        """Raises InvalidSessionIdError or SessionNotFoundError."""
        parsed = _session_id(session_id)
        self._sessions.get_session_for_administrator(parsed)
        return self._session_call_urls.get_call_url(parsed)

    # Book

    def get_book_summary(self) -> BookSummary:
        summary = self._get_book_summary.get()
        return replace(
            summary, cover_image_url=self._asset_publisher.publish(summary.cover_image_url)
        )


def _invoice_id(value: str) -> LeanpubInvoiceId:
    try:
        return LeanpubInvoiceId(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInvoiceIdError() from exc


def _session_id(value: str) -> SessionId:
    try:
        return SessionId.from_string(value)
    except (AttributeError, TypeError, ValueError) as exc:
        raise InvalidSessionIdError() from exc
