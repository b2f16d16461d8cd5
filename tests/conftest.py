"""Pytest configuration and shared fixtures."""

from dataclasses import replace
from datetime import UTC, datetime

import pytest
from django.apps import apps
from rest_framework.test import APIClient

from bookclub.container import Container, build_container, django_collaborators, in_memory_collaborators
from bookclub.services.collaborators import (
    FakeClock,
    InMemoryAssetPublisher,
    InMemoryBookSummary,
    InMemoryIndividualPurchases,
    InMemorySessionCallUrls,
    SequentialAccessTokenGenerator,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def container() -> Container:
    """In-memory container with a spy dispatcher, a fake clock and a mailer spy."""
    return build_container(in_memory_collaborators(current_time=NOW), record_events=True)


@pytest.fixture
def django_container(monkeypatch) -> Container:
    """Django-backed container installed as the app's container, with fake external services."""
    collaborators = replace(
        django_collaborators(),
        clock=FakeClock(NOW),
        access_token_generator=SequentialAccessTokenGenerator(),
        individual_purchases=InMemoryIndividualPurchases(),
        get_book_summary=InMemoryBookSummary(),
        asset_publisher=InMemoryAssetPublisher(),
        session_call_urls=InMemorySessionCallUrls(),
    )
    container = build_container(collaborators, record_events=True)
    monkeypatch.setattr(apps.get_app_config("bookclub"), "container", container)
    return container
