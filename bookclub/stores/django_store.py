"""Django ORM implementations of the stores.

Each store queries the ORM and converts rows to domain models. Rows never
leave this module.
"""

from datetime import datetime, timedelta

from django.db import transaction
from django.db.models import Count

from bookclub import models
from bookclub.domain import (
    AccessToken,
    Capacity,
    EmailAddress,
    LeanpubInvoiceId,
    Member,
    MemberForMailing,
    Purchase,
    ScheduledDate,
    Session,
    SessionForAdministrator,
    SessionId,
    TimeZone,
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


class DjangoMemberRepository(MemberRepository):
    """Member repository backed by the Django ORM."""

    def save(self, member: Member) -> None:
        models.Member.objects.update_or_create(
            member_id=member.member_id.value,
            defaults={
                "email_address": member.email_address.value,
                "time_zone": member.time_zone.value,
                "requested_access_at": member.requested_access_at,
                "was_granted_access": member.was_granted_access,
                "access_token": member.access_token.value if member.access_token else None,
            },
        )

    def get_by_id(self, member_id: LeanpubInvoiceId) -> Member:
        try:
            row = models.Member.objects.get(member_id=member_id.value)
        except models.Member.DoesNotExist as exc:
            raise MemberNotFoundError(member_id.value) from exc

        return Member(
            member_id=LeanpubInvoiceId(row.member_id),
            email_address=EmailAddress(row.email_address),
            time_zone=TimeZone(row.time_zone),
            requested_access_at=row.requested_access_at,
            was_granted_access=row.was_granted_access,
            access_token=AccessToken(row.access_token) if row.access_token else None,
        )

    def exists(self, member_id: LeanpubInvoiceId) -> bool:
        return models.Member.objects.filter(member_id=member_id.value).exists()


class DjangoPurchaseRepository(PurchaseRepository):
    """Purchase repository backed by the Django ORM."""

    def save(self, purchase: Purchase) -> None:
        models.Purchase.objects.update_or_create(
            purchase_id=purchase.purchase_id.value,
            defaults={
                "claimed_by": purchase.claimed_by.value if purchase.claimed_by else None,
            },
        )

    def get_by_id(self, purchase_id: LeanpubInvoiceId) -> Purchase:
        try:
            row = models.Purchase.objects.get(purchase_id=purchase_id.value)
        except models.Purchase.DoesNotExist as exc:
            raise PurchaseNotFoundError(purchase_id.value) from exc

        return Purchase(
            purchase_id=LeanpubInvoiceId(row.purchase_id),
            claimed_by=LeanpubInvoiceId(row.claimed_by) if row.claimed_by else None,
        )

    def exists(self, purchase_id: LeanpubInvoiceId) -> bool:
        return models.Purchase.objects.filter(purchase_id=purchase_id.value).exists()


class DjangoSessionRepository(SessionRepository):
    """Session repository backed by the Django ORM.

    Attendees are stored as child rows and replaced on every save.
    """

    def save(self, session: Session) -> None:
        with transaction.atomic():
            row, _ = models.Session.objects.update_or_create(
                session_id=session.session_id.value,
                defaults={
                    "date": session.date.value,
                    "description": session.description,
                    "maximum_number_of_attendees": session.maximum_number_of_attendees.value,
                },
            )
            attendee_ids = [member_id.value for member_id in session.attendees]
            row.attendees.exclude(member_id__in=attendee_ids).delete()
            existing = set(row.attendees.values_list("member_id", flat=True))
            for member_id in attendee_ids:
                if member_id not in existing:
                    models.SessionAttendee.objects.create(session=row, member_id=member_id)

    def get_by_id(self, session_id: SessionId) -> Session:
        try:
            row = models.Session.objects.prefetch_related("attendees").get(
                session_id=session_id.value
            )
        except models.Session.DoesNotExist as exc:
            raise SessionNotFoundError(str(session_id)) from exc

        return Session(
            session_id=SessionId(row.session_id),
            date=ScheduledDate(row.date),
            description=row.description,
            maximum_number_of_attendees=Capacity(row.maximum_number_of_attendees),
            attendees=[LeanpubInvoiceId(attendee.member_id) for attendee in row.attendees.all()],
        )

    def exists(self, session_id: SessionId) -> bool:
        return models.Session.objects.filter(session_id=session_id.value).exists()


class DjangoMembers(Members):
    """Answers member queries from the member table."""

    def get_one(self, member_id: LeanpubInvoiceId) -> MemberForMailing:
        row = models.Member.objects.filter(member_id=member_id.value).first()
        if row is None:
            raise MemberNotFoundError(member_id.value)

        return MemberForMailing(
            member_id=LeanpubInvoiceId(row.member_id),
            email_address=EmailAddress(row.email_address),
            time_zone=TimeZone(row.time_zone),
        )

    def get_member_id_by_access_token(self, access_token: AccessToken) -> LeanpubInvoiceId:
        member_id = (
            models.Member.objects.filter(access_token=access_token.value, was_granted_access=True)
            .values_list("member_id", flat=True)
            .first()
        )
        if member_id is None:
            raise UnknownAccessTokenError()
        return LeanpubInvoiceId(member_id)


class DjangoSessions(Sessions):
    """Session read model stored in the PlannedSession and SessionAttendance tables."""

    def __init__(self, grace_period: timedelta = timedelta(0)) -> None:
        self._grace_period = grace_period

    def when_session_was_planned(self, event: SessionWasPlanned) -> None:
        models.PlannedSession.objects.update_or_create(
            session_id=event.session_id.value,
            defaults={
                "date": event.date.value,
                "description": event.description,
                "maximum_number_of_attendees": event.maximum_number_of_attendees.value,
            },
        )

    def when_attendee_registered_for_session(self, event: AttendeeRegisteredForSession) -> None:
        self._mark_attendance(event.session_id, event.member_id, is_attending=True)

    def when_attendee_cancelled_their_attendance(
        self, event: AttendeeCancelledTheirAttendance
    ) -> None:
        self._mark_attendance(event.session_id, event.member_id, is_attending=False)

    def upcoming_sessions(
        self, current_time: datetime, member_id: LeanpubInvoiceId
    ) -> list[UpcomingSession]:
        rows = list(self._upcoming(current_time))
        attending = set(
            models.SessionAttendance.objects.filter(
                member_id=member_id.value,
                is_attending=True,
                session_id__in=[row.session_id for row in rows],
            ).values_list("session_id", flat=True)
        )

        return [
            UpcomingSession(
                session_id=str(row.session_id),
                date=row.date,
                description=row.description,
                member_is_registered_as_attendee=row.session_id in attending,
            )
            for row in rows
        ]

    def upcoming_sessions_for_administrator(
        self, current_time: datetime
    ) -> list[SessionForAdministrator]:
        rows = list(self._upcoming(current_time))
        counts = self._number_of_attendees([row.session_id for row in rows])

        return [
            self._session_for_administrator(row, counts.get(row.session_id, 0)) for row in rows
        ]

    def get_session_for_administrator(self, session_id: SessionId) -> SessionForAdministrator:
        row = models.PlannedSession.objects.filter(session_id=session_id.value).first()
        if row is None:
            raise SessionNotFoundError(str(session_id))

        counts = self._number_of_attendees([row.session_id])
        return self._session_for_administrator(row, counts.get(row.session_id, 0))

    def _upcoming(self, current_time: datetime):
        return models.PlannedSession.objects.filter(
            date__gte=current_time - self._grace_period
        ).order_by("date")

    @staticmethod
    def _mark_attendance(
        session_id: SessionId, member_id: LeanpubInvoiceId, is_attending: bool
    ) -> None:
        models.SessionAttendance.objects.update_or_create(
            session_id=session_id.value,
            member_id=member_id.value,
            defaults={"is_attending": is_attending},
        )

    @staticmethod
    def _number_of_attendees(session_ids) -> dict:
        rows = (
            models.SessionAttendance.objects.filter(session_id__in=session_ids, is_attending=True)
            .values("session_id")
            .annotate(number_of_attendees=Count("id"))
        )
        return {row["session_id"]: row["number_of_attendees"] for row in rows}

    @staticmethod
    def _session_for_administrator(
        row: models.PlannedSession, number_of_attendees: int
    ) -> SessionForAdministrator:
        return SessionForAdministrator(
            session_id=str(row.session_id),
            date=row.date,
            description=row.description,
            maximum_number_of_attendees=row.maximum_number_of_attendees,
            number_of_attendees=number_of_attendees,
        )
