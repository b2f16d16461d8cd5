"""Aggregates: Member, Purchase and Session.

Aggregates are the only place where state changes are decided. Each command
method validates first, then records an event and applies it. Recorded
events are buffered until the application service releases them for
dispatching. Django ORM models are in bookclub/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Self

from bookclub.domain.errors import (
    AccessNotGrantedError,
    PurchaseAlreadyClaimedError,
    SessionIsFullError,
)
from bookclub.domain.events import (
    AccessWasGrantedToMember,
    AnAccessTokenWasGenerated,
    AttendeeCancelledTheirAttendance,
    AttendeeRegisteredForSession,
    DomainEvent,
    MemberRequestedAccess,
    PurchaseWasClaimed,
    PurchaseWasImported,
    SessionWasPlanned,
)
from bookclub.domain.value_objects import (
    AccessToken,
    Capacity,
    EmailAddress,
    LeanpubInvoiceId,
    ScheduledDate,
    SessionId,
    TimeZone,
)


@dataclass(eq=False)
class Aggregate:
    """Buffers the events recorded by the most recent commands."""

    _events: list[DomainEvent] = field(default_factory=list, init=False, repr=False)

    def _record_that(self, event: DomainEvent) -> None:
        self._events.append(event)

    def release_events(self) -> list[DomainEvent]:
        events, self._events = self._events, []
        return events


@dataclass(eq=False)
class Member(Aggregate):
    member_id: LeanpubInvoiceId
    email_address: EmailAddress
    time_zone: TimeZone
    requested_access_at: datetime
    was_granted_access: bool = False
    access_token: AccessToken | None = None

    @classmethod
    def request_access(
        cls,
        member_id: LeanpubInvoiceId,
        email_address: EmailAddress,
        time_zone: TimeZone,
        requested_at: datetime,
    ) -> Self:
        member = cls(
            member_id=member_id,
            email_address=email_address,
            time_zone=time_zone,
            requested_access_at=requested_at,
        )
        member._record_that(
            MemberRequestedAccess(
                member_id=member_id,
                email_address=email_address,
                time_zone=time_zone,
                requested_at=requested_at,
            )
        )
        return member

    def grant_access(self) -> None:
        if self.was_granted_access:
            return

        self.was_granted_access = True
        self._record_that(
            AccessWasGrantedToMember(member_id=self.member_id, email_address=self.email_address)
        )

    def generate_access_token(self, access_token: AccessToken) -> None:
        """Replace the member's access token.

        Raises:
            AccessNotGrantedError: If the member has not been granted access yet.
        """
        if not self.was_granted_access:
            raise AccessNotGrantedError(self.member_id.value)

        self.access_token = access_token
        self._record_that(
            AnAccessTokenWasGenerated(
                member_id=self.member_id,
                email_address=self.email_address,
                access_token=access_token,
            )
        )


@dataclass(eq=False)
class Purchase(Aggregate):
    purchase_id: LeanpubInvoiceId
    claimed_by: LeanpubInvoiceId | None = None

    @classmethod
    def import_purchase(cls, purchase_id: LeanpubInvoiceId) -> Self:
        purchase = cls(purchase_id=purchase_id)
        purchase._record_that(PurchaseWasImported(purchase_id=purchase_id))
        return purchase

    @property
    def was_claimed(self) -> bool:
        return self.claimed_by is not None

    def claim(self, member_id: LeanpubInvoiceId, claimed_at: datetime) -> None:
        """Claim this purchase on behalf of a member.

        Raises:
            PurchaseAlreadyClaimedError: If the purchase was claimed before.
        """
        if self.was_claimed:
            raise PurchaseAlreadyClaimedError(self.purchase_id.value)

        self.claimed_by = member_id
        self._record_that(
            PurchaseWasClaimed(
                purchase_id=self.purchase_id,
                member_id=member_id,
                claimed_at=claimed_at,
            )
        )


@dataclass(eq=False)
class Session(Aggregate):
    session_id: SessionId
    date: ScheduledDate
    description: str
    maximum_number_of_attendees: Capacity
    attendees: list[LeanpubInvoiceId] = field(default_factory=list)

    @classmethod
    def plan(
        cls,
        session_id: SessionId,
        date: ScheduledDate,
        description: str,
        maximum_number_of_attendees: Capacity,
    ) -> Self:
        description = description.strip()
        if not description:
            raise ValueError("A session needs a description")

        session = cls(
            session_id=session_id,
            date=date,
            description=description,
            maximum_number_of_attendees=maximum_number_of_attendees,
        )
        session._record_that(
            SessionWasPlanned(
                session_id=session_id,
                date=date,
                description=description,
                maximum_number_of_attendees=maximum_number_of_attendees,
            )
        )
        return session

    def is_attended_by(self, member_id: LeanpubInvoiceId) -> bool:
        return member_id in self.attendees

    def attend(self, member_id: LeanpubInvoiceId) -> None:
        """Register a member as an attendee.

        Raises:
            SessionIsFullError: If the maximum number of attendees was reached.
        """
        if self.is_attended_by(member_id):
            return

        if len(self.attendees) >= self.maximum_number_of_attendees.value:
            raise SessionIsFullError(str(self.session_id))

        self.attendees.append(member_id)
        self._record_that(
            AttendeeRegisteredForSession(session_id=self.session_id, member_id=member_id)
        )

    def cancel_attendance(self, member_id: LeanpubInvoiceId) -> None:
        if not self.is_attended_by(member_id):
            return

        self.attendees.remove(member_id)
        self._record_that(
            AttendeeCancelledTheirAttendance(session_id=self.session_id, member_id=member_id)
        )
