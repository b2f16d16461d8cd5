"""Read-model records returned by the session projections.

These are derived views, rebuilt from session events. They are never used
to validate commands.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Self

from bookclub.domain.value_objects import EmailAddress, LeanpubInvoiceId, TimeZone


def is_to_be_considered_upcoming(
    date: datetime, current_time: datetime, grace_period: timedelta = timedelta(0)
) -> bool:
    """A session stays upcoming until ``grace_period`` after it started."""
    return date >= current_time - grace_period


@dataclass(frozen=True)
class UpcomingSession:
    """A session as shown to a member."""

    session_id: str
    date: datetime
    description: str
    member_is_registered_as_attendee: bool = False

    def is_to_be_considered_upcoming(
        self, current_time: datetime, grace_period: timedelta = timedelta(0)
    ) -> bool:
        return is_to_be_considered_upcoming(self.date, current_time, grace_period)

    def with_active_member_registered_as_attendee(self) -> Self:
        return replace(self, member_is_registered_as_attendee=True)


@dataclass(frozen=True)
class SessionForAdministrator:
    """A session as shown to the administrator, with a live attendee count."""

    session_id: str
    date: datetime
    description: str
    maximum_number_of_attendees: int
    number_of_attendees: int = 0

    def is_to_be_considered_upcoming(
        self, current_time: datetime, grace_period: timedelta = timedelta(0)
    ) -> bool:
        return is_to_be_considered_upcoming(self.date, current_time, grace_period)

    def with_number_of_attendees(self, number_of_attendees: int) -> Self:
        return replace(self, number_of_attendees=number_of_attendees)


@dataclass(frozen=True)
class MemberForMailing:
    member_id: LeanpubInvoiceId
    email_address: EmailAddress
    time_zone: TimeZone
