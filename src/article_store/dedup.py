"""In-memory duplicate detection by article id, canonical URL and content hash."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from article_store.models import ArticleRecord
from crawl_articles.fetch_articles.urls import normalize_url

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100_000


class DedupReason(Enum):
    ID = "id"
    URL = "url"
    CONTENT = "content"


class _BoundedSet:
    """Insertion-ordered set that drops its oldest half when full."""

    def __init__(self, max_size: int):
        self._items: dict[str, None] = {}
        self._max_size = max_size

    def __contains__(self, item: str) -> bool:
        return item in self._items

    def __len__(self) -> int:
        return len(self._items)

    def add(self, item: str) -> None:
        if item in self._items:
            return
        if len(self._items) >= self._max_size:
            drop = max(1, len(self._items) // 2)
            for key in list(self._items)[:drop]:
                del self._items[key]
            logger.debug("Evicted %d oldest dedup entries", drop)
        self._items[item] = None


def _url_key(url: str) -> str:
    return normalize_url(url) or url.strip()


class DedupIndex:
    def __init__(self, max_size: int = DEFAULT_MAX_SIZE):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._ids = _BoundedSet(max_size)
        self._urls = _BoundedSet(max_size)
        self._hashes = _BoundedSet(max_size)

    def __len__(self) -> int:
        return len(self._ids)

    def seen_id(self, article_id: str) -> bool:
        return article_id in self._ids

    def seen_url(self, url: str) -> bool:
        return bool(url) and _url_key(url) in self._urls

    def seen_hash(self, content_hash: str) -> bool:
        return bool(content_hash) and content_hash in self._hashes

    def check(self, record: ArticleRecord) -> Optional[DedupReason]:
        """Return why the record is a duplicate, or None if it is new."""
        if self.seen_id(record.id):
            return DedupReason.ID
        if self.seen_url(record.url):
            return DedupReason.URL
        content_hash = record.content_hash or record.compute_hash()
        if self.seen_hash(content_hash):
            return DedupReason.CONTENT
        return None

    def add(self, record: ArticleRecord) -> None:
        self._ids.add(record.id)
        if record.url:
            self._urls.add(_url_key(record.url))
        self._hashes.add(record.content_hash or record.compute_hash())

    @classmethod
    def from_records(cls, records: Iterable[ArticleRecord], max_size: int = DEFAULT_MAX_SIZE) -> "DedupIndex":
        index = cls(max_size)
        for record in records:
            index.add(record)
        logger.info("Seeded dedup index with %d articles", len(index))
        return index


def deduplicate(
    records: Iterable[ArticleRecord],
) -> tuple[list[ArticleRecord], list[tuple[ArticleRecord, DedupReason]]]:
    """Split records into first occurrences and duplicates (with the reason).

    The index is sized to the whole batch so no entry is ever evicted.
    """
    records = list(records)
    index = DedupIndex(max_size=max(len(records), DEFAULT_MAX_SIZE))
    unique: list[ArticleRecord] = []
    duplicates: list[tuple[ArticleRecord, DedupReason]] = []

    for record in records:
        reason = index.check(record)
        if reason is None:
            index.add(record)
            unique.append(record)
        else:
            duplicates.append((record, reason))

    if duplicates:
        logger.info("Found %d duplicate articles", len(duplicates))
    return unique, duplicates
