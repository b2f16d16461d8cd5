"""Composition root.

Builds and wires every component once. The collaborators (stores, mailer,
clock, Leanpub adapters...) come as a bundle, so the same wiring is used with
Django-backed adapters in production and in-memory ones in tests.
"""

from dataclasses import dataclass
from datetime import datetime

import httpx
from django.conf import settings
from django.core.files.storage import default_storage
from django.utils import timezone

from bookclub.domain import EventKind
from bookclub.services.application import Application
from bookclub.services.collaborators import (
    AccessTokenGenerator,
    AssetPublisher,
    Clock,
    FakeClock,
    GetBookSummary,
    InMemoryAssetPublisher,
    InMemoryBookSummary,
    InMemoryIndividualPurchases,
    InMemorySessionCallUrls,
    IndividualPurchases,
    SequentialAccessTokenGenerator,
    SessionCallUrls,
    SystemClock,
    TemplateSessionCallUrls,
    UuidAccessTokenGenerator,
)
from bookclub.services.dispatcher import (
    EventDispatcher,
    EventDispatcherSpy,
    EventDispatcherWithSubscribers,
)
from bookclub.services.email import DjangoMailer, Mailer, MailerSpy, SendEmail
from bookclub.services.leanpub import (
    LeanpubBookSummary,
    LeanpubIndividualPurchases,
    StorageAssetPublisher,
)
from bookclub.services.policies import AccessPolicy, GenerateAccessToken
from bookclub.stores.django_store import (
    DjangoMemberRepository,
    DjangoMembers,
    DjangoPurchaseRepository,
    DjangoSessionRepository,
    DjangoSessions,
)
from bookclub.stores.in_memory import (
    InMemoryMemberRepository,
    InMemoryMembers,
    InMemoryPurchaseRepository,
    InMemorySessionRepository,
    InMemorySessions,
)
from bookclub.stores.interfaces import (
    MemberRepository,
    Members,
    PurchaseRepository,
    SessionRepository,
    Sessions,
)


@dataclass(frozen=True)
class Collaborators:
    member_repository: MemberRepository
    purchase_repository: PurchaseRepository
    session_repository: SessionRepository
    members: Members
    sessions: Sessions
    mailer: Mailer
    clock: Clock
    access_token_generator: AccessTokenGenerator
    individual_purchases: IndividualPurchases
    get_book_summary: GetBookSummary
    asset_publisher: AssetPublisher
    session_call_urls: SessionCallUrls
    base_url: str


@dataclass(frozen=True)
class Container:
    collaborators: Collaborators
    dispatcher: EventDispatcher
    application: Application


def django_collaborators() -> Collaborators:
    """Production adapters, configured from Django settings."""
    leanpub = httpx.Client(base_url=settings.LEANPUB_BASE_URL, timeout=settings.LEANPUB_TIMEOUT)

    return Collaborators(
        member_repository=DjangoMemberRepository(),
        purchase_repository=DjangoPurchaseRepository(),
        session_repository=DjangoSessionRepository(),
        members=DjangoMembers(),
        sessions=DjangoSessions(grace_period=settings.BOOKCLUB_UPCOMING_SESSION_GRACE_PERIOD),
        mailer=DjangoMailer(from_email=settings.DEFAULT_FROM_EMAIL),
        clock=SystemClock(),
        access_token_generator=UuidAccessTokenGenerator(),
        individual_purchases=LeanpubIndividualPurchases(
            leanpub, settings.LEANPUB_BOOK_SLUG, settings.LEANPUB_API_KEY
        ),
        get_book_summary=LeanpubBookSummary(
            leanpub, settings.LEANPUB_BOOK_SLUG, settings.LEANPUB_API_KEY
        ),
        asset_publisher=StorageAssetPublisher(leanpub, default_storage),
        session_call_urls=TemplateSessionCallUrls(settings.BOOKCLUB_SESSION_CALL_URL_TEMPLATE),
        base_url=settings.BOOKCLUB_BASE_URL,
    )


def in_memory_collaborators(current_time: datetime | None = None) -> Collaborators:
    """Fakes for every collaborator; nothing touches the database or the network."""
    member_repository = InMemoryMemberRepository()

    return Collaborators(
        member_repository=member_repository,
        purchase_repository=InMemoryPurchaseRepository(),
        session_repository=InMemorySessionRepository(),
        members=InMemoryMembers(member_repository),
        sessions=InMemorySessions(),
        mailer=MailerSpy(),
        clock=FakeClock(current_time or timezone.now()),
        access_token_generator=SequentialAccessTokenGenerator(),
        individual_purchases=InMemoryIndividualPurchases(),
        get_book_summary=InMemoryBookSummary(),
        asset_publisher=InMemoryAssetPublisher(),
        session_call_urls=InMemorySessionCallUrls(),
        base_url="http://localhost:8000",
    )


def build_container(collaborators: Collaborators, *, record_events: bool = False) -> Container:
    """Wire the dispatcher, the application service and every subscriber.

    With ``record_events`` the dispatcher handed to the application and the
    policies is an EventDispatcherSpy, so every dispatched event is recorded.
    """
    event_dispatcher = EventDispatcherWithSubscribers()
    dispatcher: EventDispatcher = (
        EventDispatcherSpy(event_dispatcher) if record_events else event_dispatcher
    )

    application = Application(
        member_repository=collaborators.member_repository,
        purchase_repository=collaborators.purchase_repository,
        session_repository=collaborators.session_repository,
        dispatcher=dispatcher,
        clock=collaborators.clock,
        sessions=collaborators.sessions,
        members=collaborators.members,
        individual_purchases=collaborators.individual_purchases,
        get_book_summary=collaborators.get_book_summary,
        asset_publisher=collaborators.asset_publisher,
        access_token_generator=collaborators.access_token_generator,
        session_call_urls=collaborators.session_call_urls,
    )
    access_policy = AccessPolicy(
        collaborators.purchase_repository,
        collaborators.member_repository,
        dispatcher,
        collaborators.clock,
    )
    send_email = SendEmail(
        collaborators.mailer,
        collaborators.members,
        collaborators.sessions,
        collaborators.base_url,
    )

    # Projections first: later subscribers may read from them.
    event_dispatcher.subscribe(EventKind.SESSION_WAS_PLANNED, collaborators.sessions)
    event_dispatcher.subscribe(EventKind.ATTENDEE_REGISTERED_FOR_SESSION, collaborators.sessions)
    event_dispatcher.subscribe(
        EventKind.ATTENDEE_CANCELLED_THEIR_ATTENDANCE, collaborators.sessions
    )

    event_dispatcher.subscribe(EventKind.MEMBER_REQUESTED_ACCESS, access_policy)
    event_dispatcher.subscribe(EventKind.PURCHASE_WAS_IMPORTED, access_policy)
    event_dispatcher.subscribe(EventKind.PURCHASE_WAS_CLAIMED, access_policy)
    event_dispatcher.subscribe(
        EventKind.ACCESS_WAS_GRANTED_TO_MEMBER, GenerateAccessToken(application)
    )
    event_dispatcher.subscribe(EventKind.AN_ACCESS_TOKEN_WAS_GENERATED, send_email)
    event_dispatcher.subscribe(EventKind.ATTENDEE_REGISTERED_FOR_SESSION, send_email)

    return Container(collaborators=collaborators, dispatcher=dispatcher, application=application)
