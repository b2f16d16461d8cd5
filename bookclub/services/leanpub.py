"""Leanpub API adapters.

Both adapters share one ``httpx.Client`` configured with the Leanpub base
URL. HTTP errors are not caught: a failing Leanpub API fails the operation
that needed it.
"""

import logging
import posixpath
from collections.abc import Iterator
from urllib.parse import urlsplit

import httpx
from django.core.files.base import ContentFile
from django.core.files.storage import Storage

from bookclub.services.collaborators import (
    AssetPublisher,
    BookSummary,
    GetBookSummary,
    IndividualPurchases,
)

logger = logging.getLogger(__name__)


class LeanpubIndividualPurchases(IndividualPurchases):
    """Pages through /<book>/individual_purchases.json until an empty page is returned."""

    def __init__(self, client: httpx.Client, book_slug: str, api_key: str) -> None:
        self._client = client
        self._book_slug = book_slug
        self._api_key = api_key

    def list_invoice_ids(self) -> Iterator[str]:
        page = 1
        while True:
            logger.info("Fetching individual purchases page %d", page)
            response = self._client.get(
                f"/{self._book_slug}/individual_purchases.json",
                params={"api_key": self._api_key, "page": page},
            )
            response.raise_for_status()
            purchases = response.json()
            if not purchases:
                return

            for purchase in purchases:
                yield purchase["invoice_id"]
            page += 1


class LeanpubBookSummary(GetBookSummary):
    def __init__(self, client: httpx.Client, book_slug: str, api_key: str) -> None:
        self._client = client
        self._book_slug = book_slug
        self._api_key = api_key

    def get(self) -> BookSummary:
        logger.info("Fetching book summary for %s", self._book_slug)
        response = self._client.get(f"/{self._book_slug}.json", params={"api_key": self._api_key})
        response.raise_for_status()
        data = response.json()

        return BookSummary(
            title=data["title"],
            subtitle=data.get("subtitle") or "",
            url=data["url"],
            cover_image_url=data["title_page_url"],
        )


class StorageAssetPublisher(AssetPublisher):
    """Downloads assets and stores them with a Django storage backend."""

    def __init__(self, client: httpx.Client, storage: Storage, directory: str = "assets") -> None:
        self._client = client
        self._storage = storage
        self._directory = directory

    def publish(self, url: str) -> str:
        response = self._client.get(url)
        response.raise_for_status()

        name = posixpath.join(self._directory, posixpath.basename(urlsplit(url).path))
        if self._storage.exists(name):
            self._storage.delete(name)
        name = self._storage.save(name, ContentFile(response.content))
        logger.info("Published %s as %s", url, name)

        return self._storage.url(name)
