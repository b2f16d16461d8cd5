"""Domain events.

Events are immutable facts, named in the past tense. Every concrete event
class carries a ``kind`` from the closed ``EventKind`` enum, which is what
the dispatcher routes on.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar

from bookclub.domain.value_objects import (
    AccessToken,
    Capacity,
    EmailAddress,
    LeanpubInvoiceId,
    ScheduledDate,
    SessionId,
    TimeZone,
)


class EventKind(Enum):
    """Every kind of domain event."""

    MEMBER_REQUESTED_ACCESS = "member_requested_access"
    ACCESS_WAS_GRANTED_TO_MEMBER = "access_was_granted_to_member"
    AN_ACCESS_TOKEN_WAS_GENERATED = "an_access_token_was_generated"
    PURCHASE_WAS_IMPORTED = "purchase_was_imported"
    PURCHASE_WAS_CLAIMED = "purchase_was_claimed"
    SESSION_WAS_PLANNED = "session_was_planned"
    ATTENDEE_REGISTERED_FOR_SESSION = "attendee_registered_for_session"
    ATTENDEE_CANCELLED_THEIR_ATTENDANCE = "attendee_cancelled_their_attendance"


@dataclass(frozen=True)
class MemberRequestedAccess:
    kind: ClassVar[EventKind] = EventKind.MEMBER_REQUESTED_ACCESS

    member_id: LeanpubInvoiceId
    email_address: EmailAddress
    time_zone: TimeZone
    requested_at: datetime


@dataclass(frozen=True)
class AccessWasGrantedToMember:
    kind: ClassVar[EventKind] = EventKind.ACCESS_WAS_GRANTED_TO_MEMBER

    member_id: LeanpubInvoiceId
    email_address: EmailAddress


@dataclass(frozen=True)
class AnAccessTokenWasGenerated:
    kind: ClassVar[EventKind] = EventKind.AN_ACCESS_TOKEN_WAS_GENERATED

    member_id: LeanpubInvoiceId
    email_address: EmailAddress
    access_token: AccessToken


@dataclass(frozen=True)
class PurchaseWasImported:
    kind: ClassVar[EventKind] = EventKind.PURCHASE_WAS_IMPORTED

    purchase_id: LeanpubInvoiceId


@dataclass(frozen=True)
class PurchaseWasClaimed:
    kind: ClassVar[EventKind] = EventKind.PURCHASE_WAS_CLAIMED

    purchase_id: LeanpubInvoiceId
    member_id: LeanpubInvoiceId
    claimed_at: datetime


@dataclass(frozen=True)
class SessionWasPlanned:
    kind: ClassVar[EventKind] = EventKind.SESSION_WAS_PLANNED

    session_id: SessionId
    date: ScheduledDate
    description: str
    maximum_number_of_attendees: Capacity


@dataclass(frozen=True)
class AttendeeRegisteredForSession:
    kind: ClassVar[EventKind] = EventKind.ATTENDEE_REGISTERED_FOR_SESSION

    session_id: SessionId
    member_id: LeanpubInvoiceId


@dataclass(frozen=True)
class AttendeeCancelledTheirAttendance:
    kind: ClassVar[EventKind] = EventKind.ATTENDEE_CANCELLED_THEIR_ATTENDANCE

    session_id: SessionId
    member_id: LeanpubInvoiceId


DomainEvent = (
    MemberRequestedAccess
    | AccessWasGrantedToMember
    | AnAccessTokenWasGenerated
    | PurchaseWasImported
    | PurchaseWasClaimed
    | SessionWasPlanned
    | AttendeeRegisteredForSession
    | AttendeeCancelledTheirAttendance
)
