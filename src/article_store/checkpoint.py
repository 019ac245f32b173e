"""Crawl progress checkpoints persisted as JSON."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from common.datetime import now_kst, parse_datetime
from common.local_io import write_text_atomic
from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


@dataclass
class CrawlStats:
    total_crawled: int
    total_errors: int
    error_rate: float  # percent of attempts
    crawl_rate: float  # articles per minute
    elapsed_seconds: float


@dataclass
class CrawlState:
    completed_articles: set[str] = field(default_factory=set)
    last_category: Optional[str] = None
    last_page: int = 0
    last_url: Optional[str] = None
    total_crawled: int = 0
    total_errors: int = 0
    started_at: datetime = field(default_factory=now_kst)
    updated_at: datetime = field(default_factory=now_kst)

    def is_completed(self, article_id: str) -> bool:
        return article_id in self.completed_articles

    def mark_completed(self, article_id: str, url: Optional[str] = None) -> None:
        if article_id not in self.completed_articles:
            self.completed_articles.add(article_id)
            self.total_crawled += 1
        if url:
            self.last_url = url
        self.updated_at = now_kst()

    def record_error(self, url: Optional[str] = None) -> None:
        self.total_errors += 1
        if url:
            self.last_url = url
        self.updated_at = now_kst()

    def set_position(self, category: str, page: int) -> None:
        self.last_category = category
        self.last_page = page
        self.updated_at = now_kst()

    def stats(self) -> CrawlStats:
        elapsed = max((self.updated_at - self.started_at).total_seconds(), 0.0)
        attempts = self.total_crawled + self.total_errors
        error_rate = self.total_errors / attempts * 100.0 if attempts else 0.0
        crawl_rate = self.total_crawled / (elapsed / 60.0) if elapsed > 0 else 0.0
        return CrawlStats(
            total_crawled=self.total_crawled,
            total_errors=self.total_errors,
            error_rate=error_rate,
            crawl_rate=crawl_rate,
            elapsed_seconds=elapsed,
        )

    def save(self, path: Path) -> None:
        """Write the state atomically, creating parent directories."""
        data = serialize_dataclass(self)
        write_text_atomic(Path(path), json.dumps(data, ensure_ascii=False, indent=2))
        logger.debug("Saved checkpoint to %s", path)

    @classmethod
    def from_dict(cls, data: dict) -> "CrawlState":
        return cls(
            completed_articles=set(data.get("completed_articles") or []),
            last_category=data.get("last_category"),
            last_page=int(data.get("last_page") or 0),
            last_url=data.get("last_url"),
            total_crawled=int(data.get("total_crawled") or 0),
            total_errors=int(data.get("total_errors") or 0),
            started_at=parse_datetime(data.get("started_at")) or now_kst(),
            updated_at=parse_datetime(data.get("updated_at")) or now_kst(),
        )

    @classmethod
    def load(cls, path: Path) -> "CrawlState":
        """Load a checkpoint; a missing or unreadable file gives a fresh state."""
        path = Path(path)
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("checkpoint is not a JSON object")
            state = cls.from_dict(data)
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring corrupted checkpoint %s: %s", path, e)
            return cls()
        logger.info("Resuming from checkpoint %s (%d completed)", path, len(state.completed_articles))
        return state
