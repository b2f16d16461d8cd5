"""External collaborators used by the application service.

Each collaborator is an interface with a production adapter and an
in-memory/fake one. The composition root decides which one is used.
"""

import itertools
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import uuid4

from django.utils import timezone

from bookclub.domain import AccessToken, SessionId


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return timezone.now()


class FakeClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, current_time: datetime) -> None:
        self._current_time = current_time

    def now(self) -> datetime:
        return self._current_time

    def set_current_time(self, current_time: datetime) -> None:
        self._current_time = current_time

    def advance(self, delta: timedelta) -> None:
        self._current_time += delta


class AccessTokenGenerator(ABC):
    @abstractmethod
    def generate(self) -> AccessToken:
        """Return a new, globally unique access token."""
        ...


class UuidAccessTokenGenerator(AccessTokenGenerator):
    def generate(self) -> AccessToken:
        return AccessToken(str(uuid4()))


class SequentialAccessTokenGenerator(AccessTokenGenerator):
    """Generates token-1, token-2, ... so tests can predict tokens."""

    def __init__(self, prefix: str = "token") -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)

    def generate(self) -> AccessToken:
        return AccessToken(f"{self._prefix}-{next(self._counter)}")


class SessionCallUrls(ABC):
    @abstractmethod
    def get_call_url(self, session_id: SessionId) -> str: ...


class TemplateSessionCallUrls(SessionCallUrls):
    """Builds call URLs from a template containing ``{session_id}``."""

    def __init__(self, url_template: str) -> None:
        self._url_template = url_template

    def get_call_url(self, session_id: SessionId) -> str:
        return self._url_template.format(session_id=session_id)


class InMemorySessionCallUrls(SessionCallUrls):
    def __init__(self, default_url: str = "https://example.com/call") -> None:
        self._default_url = default_url
        self._urls: dict[SessionId, str] = {}

    def set_call_url(self, session_id: SessionId, url: str) -> None:
        self._urls[session_id] = url

    def get_call_url(self, session_id: SessionId) -> str:
        return self._urls.get(session_id, self._default_url)


@dataclass(frozen=True)
class BookSummary:
    title: str
    subtitle: str
    url: str
    cover_image_url: str


class GetBookSummary(ABC):
    @abstractmethod
    def get(self) -> BookSummary: ...


class InMemoryBookSummary(GetBookSummary):
    def __init__(self, summary: BookSummary | None = None) -> None:
        self._summary = summary or BookSummary(
            title="Title",
            subtitle="Subtitle",
            url="https://leanpub.com/book",
            cover_image_url="https://leanpub.com/book/cover.png",
        )

    def get(self) -> BookSummary:
        return self._summary


class AssetPublisher(ABC):
    @abstractmethod
    def publish(self, url: str) -> str:
        """Make the asset at ``url`` available locally and return its public URL."""
        ...


class InMemoryAssetPublisher(AssetPublisher):
    """Returns URLs unchanged and remembers which ones were published."""

    def __init__(self) -> None:
        self.published_urls: list[str] = []

    def publish(self, url: str) -> str:
        self.published_urls.append(url)
        return url


class IndividualPurchases(ABC):
    @abstractmethod
    def list_invoice_ids(self) -> Iterator[str]:
        """Yield the invoice ID of every individual purchase of the book."""
        ...


class InMemoryIndividualPurchases(IndividualPurchases):
    def __init__(self, invoice_ids: Iterable[str] = ()) -> None:
        self._invoice_ids = list(invoice_ids)

    def add(self, invoice_id: str) -> None:
        self._invoice_ids.append(invoice_id)

    def list_invoice_ids(self) -> Iterator[str]:
        return iter(list(self._invoice_ids))
