"""Unit tests for domain primitives and aggregates.

These test invariants that must hold at construction time and for every
command an aggregate accepts.
Run with: pytest tests/test_domain.py -v
"""

from datetime import UTC, datetime, timedelta
from typing import get_args
from uuid import UUID

import pytest

from bookclub.domain import (
    AccessToken,
    Capacity,
    EmailAddress,
    LeanpubInvoiceId,
    Member,
    Purchase,
    ScheduledDate,
    Session,
    SessionId,
    TimeZone,
)
from bookclub.domain.errors import (
    AccessNotGrantedError,
    ErrorCode,
    PurchaseAlreadyClaimedError,
    SessionIsFullError,
)
from bookclub.domain.events import (
    AccessWasGrantedToMember,
    AnAccessTokenWasGenerated,
    AttendeeCancelledTheirAttendance,
    AttendeeRegisteredForSession,
    DomainEvent,
    EventKind,
    MemberRequestedAccess,
    PurchaseWasClaimed,
    PurchaseWasImported,
    SessionWasPlanned,
)
from bookclub.domain.read_models import SessionForAdministrator, UpcomingSession

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
MEMBER_ID = LeanpubInvoiceId("jP6LfQ3UkfOvZTLZLNfDfg")
OTHER_MEMBER_ID = LeanpubInvoiceId("6gbXPEDMOEMKCNwOykPvpg")


def a_member(member_id: LeanpubInvoiceId = MEMBER_ID) -> Member:
    member = Member.request_access(
        member_id, EmailAddress("info@matthiasnoback.nl"), TimeZone("Europe/Amsterdam"), NOW
    )
    member.release_events()
    return member


def a_session(maximum_number_of_attendees: int = 10) -> Session:
    session = Session.plan(
        SessionId.generate(),
        ScheduledDate(NOW + timedelta(days=7)),
        "Chapter 1",
        Capacity(maximum_number_of_attendees),
    )
    session.release_events()
    return session


class TestValueObjects:
    """Tests for value objects."""

    def test_invoice_id_accepts_leanpub_format(self):
        """LeanpubInvoiceId keeps URL-safe invoice IDs as they are."""
        assert LeanpubInvoiceId("jP6LfQ3UkfOvZTLZLNfDfg").value == "jP6LfQ3UkfOvZTLZLNfDfg"

    @pytest.mark.parametrize("value", ["", "has spaces", "slash/ed"])
    def test_invoice_id_rejects_invalid_values(self, value):
        """LeanpubInvoiceId raises ValueError for empty or unsafe values."""
        with pytest.raises(ValueError):
            LeanpubInvoiceId(value)

    def test_session_id_from_string_valid_uuid(self):
        """SessionId.from_string parses valid UUID."""
        value = "6a6c1a3e-8f43-4bd4-a1b4-0b8b2f7e1c11"
        assert SessionId.from_string(value).value == UUID(value)

    def test_session_id_from_string_invalid_uuid(self):
        """SessionId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            SessionId.from_string("not-a-uuid")

    def test_email_address_lowercases_domain(self):
        """EmailAddress normalises the domain but keeps the local part."""
        assert EmailAddress("Info@Example.COM").value == "Info@example.com"

    @pytest.mark.parametrize("value", ["", "no-at-sign", "@example.com", "info@"])
    def test_email_address_rejects_invalid_values(self, value):
        """EmailAddress raises ValueError for malformed addresses."""
        with pytest.raises(ValueError):
            EmailAddress(value)

    def test_time_zone_rejects_unknown_zone(self):
        """TimeZone raises ValueError for names that are not IANA zones."""
        with pytest.raises(ValueError):
            TimeZone("Europe/Atlantis")

    def test_capacity_rejects_zero(self):
        """A session needs room for at least one attendee."""
        with pytest.raises(ValueError):
            Capacity(0)

    def test_scheduled_date_rejects_naive_datetime(self):
        """ScheduledDate raises ValueError without a timezone."""
        with pytest.raises(ValueError):
            ScheduledDate(datetime(2026, 3, 1, 12, 0))

    def test_scheduled_date_in_time_zone(self):
        """ScheduledDate converts to the given time zone."""
        local = ScheduledDate(NOW).in_time_zone(TimeZone("Europe/Amsterdam"))
        assert local.hour == 13


class TestEvents:
    """Tests for the event catalogue."""

    def test_every_kind_has_exactly_one_event_type(self):
        """Each EventKind is carried by one event class."""
        kinds = [event_type.kind for event_type in get_args(DomainEvent)]
        assert len(kinds) == len(EventKind)
        assert set(kinds) == set(EventKind)

    def test_events_are_immutable(self):
        """Events cannot be changed after they were recorded."""
        event = PurchaseWasImported(purchase_id=MEMBER_ID)
        with pytest.raises(AttributeError):
            event.purchase_id = OTHER_MEMBER_ID


class TestMember:
    """Tests for the Member aggregate."""

    def test_request_access_records_event(self):
        """Requesting access records MemberRequestedAccess."""
        member = Member.request_access(
            MEMBER_ID, EmailAddress("info@example.com"), TimeZone("UTC"), NOW
        )

        assert member.release_events() == [
            MemberRequestedAccess(
                member_id=MEMBER_ID,
                email_address=EmailAddress("info@example.com"),
                time_zone=TimeZone("UTC"),
                requested_at=NOW,
            )
        ]
        assert not member.was_granted_access

    def test_release_events_empties_the_buffer(self):
        """Released events are not released a second time."""
        member = Member.request_access(
            MEMBER_ID, EmailAddress("info@example.com"), TimeZone("UTC"), NOW
        )
        member.release_events()
        assert member.release_events() == []

    def test_grant_access_is_recorded_once(self):
        """Granting access twice records a single event."""
        member = a_member()

        member.grant_access()
        member.grant_access()

        assert member.release_events() == [
            AccessWasGrantedToMember(member_id=MEMBER_ID, email_address=member.email_address)
        ]
        assert member.was_granted_access

    def test_generate_access_token_requires_access(self):
        """No token is generated before access was granted."""
        member = a_member()

        with pytest.raises(AccessNotGrantedError) as exc_info:
            member.generate_access_token(AccessToken("token-1"))

        assert exc_info.value.code == ErrorCode.ACCESS_NOT_GRANTED
        assert member.access_token is None
        assert member.release_events() == []

    def test_generate_access_token_replaces_previous_token(self):
        """A new token replaces the previous one."""
        member = a_member()
        member.grant_access()
        member.generate_access_token(AccessToken("token-1"))
        member.generate_access_token(AccessToken("token-2"))

        events = member.release_events()

        assert member.access_token == AccessToken("token-2")
        assert events[-1] == AnAccessTokenWasGenerated(
            member_id=MEMBER_ID,
            email_address=member.email_address,
            access_token=AccessToken("token-2"),
        )


class TestPurchase:
    """Tests for the Purchase aggregate."""

    def test_import_records_event(self):
        """Importing a purchase records PurchaseWasImported."""
        purchase = Purchase.import_purchase(MEMBER_ID)
        assert purchase.release_events() == [PurchaseWasImported(purchase_id=MEMBER_ID)]
        assert not purchase.was_claimed

    def test_claim_records_event(self):
        """Claiming a purchase records PurchaseWasClaimed."""
        purchase = Purchase(purchase_id=MEMBER_ID)

        purchase.claim(MEMBER_ID, claimed_at=NOW)

        assert purchase.claimed_by == MEMBER_ID
        assert purchase.release_events() == [
            PurchaseWasClaimed(purchase_id=MEMBER_ID, member_id=MEMBER_ID, claimed_at=NOW)
        ]

    def test_claim_twice_raises_error(self):
        """A claimed purchase cannot be claimed again and stays unchanged."""
        purchase = Purchase(purchase_id=MEMBER_ID, claimed_by=MEMBER_ID)

        with pytest.raises(PurchaseAlreadyClaimedError):
            purchase.claim(OTHER_MEMBER_ID, claimed_at=NOW)

        assert purchase.claimed_by == MEMBER_ID
        assert purchase.release_events() == []


class TestSession:
    """Tests for the Session aggregate."""

    def test_plan_records_event(self):
        """Planning a session records SessionWasPlanned."""
        session_id = SessionId.generate()
        date = ScheduledDate(NOW)

        session = Session.plan(session_id, date, "  Chapter 1 ", Capacity(5))

        assert session.release_events() == [
            SessionWasPlanned(
                session_id=session_id,
                date=date,
                description="Chapter 1",
                maximum_number_of_attendees=Capacity(5),
            )
        ]

    def test_plan_requires_description(self):
        """A session without description is rejected."""
        with pytest.raises(ValueError):
            Session.plan(SessionId.generate(), ScheduledDate(NOW), " ", Capacity(5))

    def test_attend_records_event(self):
        """Attending records AttendeeRegisteredForSession."""
        session = a_session()

        session.attend(MEMBER_ID)

        assert session.is_attended_by(MEMBER_ID)
        assert session.release_events() == [
            AttendeeRegisteredForSession(session_id=session.session_id, member_id=MEMBER_ID)
        ]

    def test_attend_twice_is_a_no_op(self):
        """Registering twice records one event and one attendee."""
        session = a_session()

        session.attend(MEMBER_ID)
        session.attend(MEMBER_ID)

        assert session.attendees == [MEMBER_ID]
        assert len(session.release_events()) == 1

    def test_attend_full_session_raises_error(self):
        """Registering beyond the maximum number of attendees fails without changes."""
        session = a_session(maximum_number_of_attendees=1)
        session.attend(MEMBER_ID)
        session.release_events()

        with pytest.raises(SessionIsFullError):
            session.attend(OTHER_MEMBER_ID)

        assert session.attendees == [MEMBER_ID]
        assert session.release_events() == []

    def test_cancel_attendance_frees_a_seat(self):
        """After a cancellation another member can take the seat."""
        session = a_session(maximum_number_of_attendees=1)
        session.attend(MEMBER_ID)

        session.cancel_attendance(MEMBER_ID)
        session.attend(OTHER_MEMBER_ID)

        assert session.release_events() == [
            AttendeeRegisteredForSession(session_id=session.session_id, member_id=MEMBER_ID),
            AttendeeCancelledTheirAttendance(session_id=session.session_id, member_id=MEMBER_ID),
            AttendeeRegisteredForSession(session_id=session.session_id, member_id=OTHER_MEMBER_ID),
        ]

    def test_cancel_without_attending_is_a_no_op(self):
        """Cancelling without being registered records nothing."""
        session = a_session()
        session.cancel_attendance(MEMBER_ID)
        assert session.release_events() == []


class TestReadModels:
    """Tests for read-model records."""

    def test_session_at_current_time_is_upcoming(self):
        """The upcoming boundary is inclusive."""
        session = UpcomingSession(session_id="s", date=NOW, description="d")
        assert session.is_to_be_considered_upcoming(NOW)

    def test_session_before_current_time_is_not_upcoming(self):
        """A session that started is no longer upcoming."""
        session = UpcomingSession(session_id="s", date=NOW - timedelta(seconds=1), description="d")
        assert not session.is_to_be_considered_upcoming(NOW)

    def test_grace_period_keeps_started_session_upcoming(self):
        """Within the grace period a started session is still listed."""
        session = SessionForAdministrator(
            session_id="s",
            date=NOW - timedelta(minutes=30),
            description="d",
            maximum_number_of_attendees=10,
        )
        assert session.is_to_be_considered_upcoming(NOW, grace_period=timedelta(hours=1))

    def test_with_number_of_attendees_returns_copy(self):
        """Read-model records are immutable."""
        session = SessionForAdministrator(
            session_id="s", date=NOW, description="d", maximum_number_of_attendees=10
        )
        updated = session.with_number_of_attendees(3)
        assert session.number_of_attendees == 0
        assert updated.number_of_attendees == 3
