from bookclub.domain.events import DomainEvent, EventKind
from bookclub.domain.models import Member, Purchase, Session
from bookclub.domain.read_models import MemberForMailing, SessionForAdministrator, UpcomingSession
from bookclub.domain.value_objects import (
    AccessToken,
    Capacity,
    EmailAddress,
    LeanpubInvoiceId,
    ScheduledDate,
    SessionId,
    TimeZone,
)

__all__ = [
    "Member",
    "Purchase",
    "Session",
    "DomainEvent",
    "EventKind",
    "UpcomingSession",
    "SessionForAdministrator",
    "MemberForMailing",
    "LeanpubInvoiceId",
    "SessionId",
    "EmailAddress",
    "TimeZone",
    "AccessToken",
    "Capacity",
    "ScheduledDate",
]
