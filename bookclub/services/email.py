"""Outgoing email.

SendEmail reacts to domain events by composing a message and handing it to
a Mailer. It does not dispatch any events itself.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from django.core.mail import send_mail

from bookclub.domain import SessionId
from bookclub.domain.events import (
    AnAccessTokenWasGenerated,
    AttendeeRegisteredForSession,
    DomainEvent,
)
from bookclub.stores.interfaces import Members, Sessions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Email:
    recipient: str
    subject: str
    body: str


class Mailer(ABC):
    @abstractmethod
    def send(self, email: Email) -> None: ...


class DjangoMailer(Mailer):
    """Sends email through the configured Django email backend."""

    def __init__(self, from_email: str) -> None:
        self._from_email = from_email

    def send(self, email: Email) -> None:
        send_mail(
            subject=email.subject,
            message=email.body,
            from_email=self._from_email,
            recipient_list=[email.recipient],
        )
        logger.info("Sent email %r to %s", email.subject, email.recipient)


class MailerSpy(Mailer):
    def __init__(self) -> None:
        self.sent_emails: list[Email] = []

    def send(self, email: Email) -> None:
        self.sent_emails.append(email)


class SendEmail:
    def __init__(self, mailer: Mailer, members: Members, sessions: Sessions, base_url: str) -> None:
        self._mailer = mailer
        self._members = members
        self._sessions = sessions
        self._base_url = base_url.rstrip("/")

    def handle(self, event: DomainEvent) -> None:
        match event:
            case AnAccessTokenWasGenerated():
                self.when_an_access_token_was_generated(event)
            case AttendeeRegisteredForSession():
                self.when_attendee_registered_for_session(event)
            case _:
                raise TypeError(f"SendEmail does not handle {event.kind}")

    def when_an_access_token_was_generated(self, event: AnAccessTokenWasGenerated) -> None:
        login_url = f"{self._base_url}/login/{event.access_token}"
        self._mailer.send(
            Email(
                recipient=event.email_address.value,
                subject="Your access to the book club",
                body=(
                    "Welcome to the book club!\n\n"
                    f"Use the following link to log in:\n\n{login_url}\n\n"
                    "Keep this link to yourself, it gives access to your membership."
                ),
            )
        )

    def when_attendee_registered_for_session(self, event: AttendeeRegisteredForSession) -> None:
        member = self._members.get_one(event.member_id)
        session = self._sessions.get_session_for_administrator(event.session_id)
        local_date = session.date.astimezone(member.time_zone.as_tzinfo())

        self._mailer.send(
            Email(
                recipient=member.email_address.value,
                subject=f"You are attending: {session.description}",
                body=(
                    f"You have registered for the session \"{session.description}\".\n\n"
                    f"Date: {local_date:%A, %B} {local_date.day}, {local_date:%Y at %H:%M}"
                    f" ({member.time_zone})\n\n"
                    f"Session details: {self._session_url(event.session_id)}"
                ),
            )
        )

    def _session_url(self, session_id: SessionId) -> str:
        return f"{self._base_url}/sessions/{session_id}"
