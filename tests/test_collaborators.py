"""Tests for the adapters of external collaborators.

Leanpub is replaced by an httpx.MockTransport, files are stored in memory.
Run with: pytest tests/test_collaborators.py -v
"""

from datetime import UTC, datetime, timedelta

import httpx
import pytest
from django.core.files.storage import InMemoryStorage

from bookclub.domain import SessionId
from bookclub.services.collaborators import (
    FakeClock,
    SequentialAccessTokenGenerator,
    TemplateSessionCallUrls,
    UuidAccessTokenGenerator,
)
from bookclub.services.email import DjangoMailer, Email
from bookclub.services.leanpub import (
    LeanpubBookSummary,
    LeanpubIndividualPurchases,
    StorageAssetPublisher,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def leanpub_client(handler) -> httpx.Client:
    return httpx.Client(base_url="https://leanpub.com", transport=httpx.MockTransport(handler))


class TestLeanpubIndividualPurchases:
    """Tests for LeanpubIndividualPurchases"""

    def test_pages_until_an_empty_page(self):
        """Invoice IDs of all pages are yielded in order."""
        pages = {
            "1": [{"invoice_id": "a"}, {"invoice_id": "b"}],
            "2": [{"invoice_id": "c"}],
            "3": [],
        }
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=pages[request.url.params["page"]])

        purchases = LeanpubIndividualPurchases(leanpub_client(handler), "the-book", "secret")

        assert list(purchases.list_invoice_ids()) == ["a", "b", "c"]
        assert [request.url.path for request in requests] == [
            "/the-book/individual_purchases.json"
        ] * 3
        assert requests[0].url.params["api_key"] == "secret"

    def test_http_errors_are_raised(self):
        purchases = LeanpubIndividualPurchases(
            leanpub_client(lambda request: httpx.Response(500)), "the-book", "secret"
        )

        with pytest.raises(httpx.HTTPStatusError):
            list(purchases.list_invoice_ids())


class TestLeanpubBookSummary:
    """Tests for LeanpubBookSummary"""

    def test_maps_book_fields(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/the-book.json"
            return httpx.Response(
                200,
                json={
                    "title": "Recipes for Decoupling",
                    "subtitle": None,
                    "url": "https://leanpub.com/the-book",
                    "title_page_url": "https://leanpub.com/the-book/cover.png",
                },
            )

        summary = LeanpubBookSummary(leanpub_client(handler), "the-book", "secret").get()

        assert summary.title == "Recipes for Decoupling"
        assert summary.subtitle == ""
        assert summary.url == "https://leanpub.com/the-book"
        assert summary.cover_image_url == "https://leanpub.com/the-book/cover.png"


class TestStorageAssetPublisher:
    """Tests for StorageAssetPublisher"""

    def test_publish_downloads_and_stores_asset(self):
        """The asset is stored under its own name and overwritten on republish."""
        content = [b"first", b"second"]
        client = leanpub_client(lambda request: httpx.Response(200, content=content.pop(0)))
        storage = InMemoryStorage(base_url="/media/")
        publisher = StorageAssetPublisher(client, storage)

        publisher.publish("https://leanpub.com/the-book/cover.png")
        url = publisher.publish("https://leanpub.com/the-book/cover.png")

        assert url == "/media/assets/cover.png"
        with storage.open("assets/cover.png") as stored:
            assert stored.read() == b"second"


class TestDjangoMailer:
    """Tests for DjangoMailer"""

    def test_send_uses_django_mail(self, mailoutbox):
        DjangoMailer(from_email="bookclub@example.com").send(
            Email(recipient="info@example.com", subject="Hello", body="Body")
        )

        [message] = mailoutbox
        assert message.from_email == "bookclub@example.com"
        assert message.to == ["info@example.com"]
        assert message.subject == "Hello"
        assert message.body == "Body"


class TestSmallCollaborators:
    """Tests for clocks, token generators and call URLs."""

    def test_fake_clock_moves_only_when_told(self):
        clock = FakeClock(NOW)
        clock.advance(timedelta(hours=1))
        assert clock.now() == NOW + timedelta(hours=1)
        clock.set_current_time(NOW)
        assert clock.now() == NOW

    def test_sequential_access_tokens(self):
        generator = SequentialAccessTokenGenerator()
        assert [generator.generate().value for _ in range(2)] == ["token-1", "token-2"]

    def test_uuid_access_tokens_are_unique(self):
        generator = UuidAccessTokenGenerator()
        assert generator.generate() != generator.generate()

    def test_template_session_call_urls(self):
        session_id = SessionId.from_string("6a6c1a3e-8f43-4bd4-a1b4-0b8b2f7e1c11")
        urls = TemplateSessionCallUrls("https://meet.example.com/{session_id}")
        assert urls.get_call_url(session_id) == (
            "https://meet.example.com/6a6c1a3e-8f43-4bd4-a1b4-0b8b2f7e1c11"
        )
