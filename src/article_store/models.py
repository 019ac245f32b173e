"""Data models for the article archive."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from common.datetime import now_kst, parse_datetime
from common.hashing import build_article_id, compute_content_hash
from common.utils import get_value


class NewsCategory(Enum):
    """Naver News sections, valued by their section ID."""
    POLITICS = 100
    ECONOMY = 101
    SOCIETY = 102
    CULTURE = 103
    WORLD = 104
    IT = 105

    @property
    def section_id(self) -> int:
        return self.value

    @property
    def slug(self) -> str:
        return self.name.lower()

    @property
    def korean_name(self) -> str:
        return _KOREAN_NAMES[self]

    @classmethod
    def from_section_id(cls, section_id: int) -> Optional["NewsCategory"]:
        try:
            return cls(section_id)
        except ValueError:
            return None

    @classmethod
    def parse(cls, value: str) -> Optional["NewsCategory"]:
        """Parse an English slug or Korean section name."""
        return _ALIASES.get(value.strip().lower())

    def __str__(self) -> str:
        return self.slug


_KOREAN_NAMES = {
    NewsCategory.POLITICS: "정치",
    NewsCategory.ECONOMY: "경제",
    NewsCategory.SOCIETY: "사회",
    NewsCategory.CULTURE: "생활/문화",
    NewsCategory.WORLD: "세계",
    NewsCategory.IT: "IT/과학",
}

_ALIASES = {
    "politics": NewsCategory.POLITICS,
    "정치": NewsCategory.POLITICS,
    "economy": NewsCategory.ECONOMY,
    "경제": NewsCategory.ECONOMY,
    "society": NewsCategory.SOCIETY,
    "사회": NewsCategory.SOCIETY,
    "culture": NewsCategory.CULTURE,
    "생활/문화": NewsCategory.CULTURE,
    "문화": NewsCategory.CULTURE,
    "world": NewsCategory.WORLD,
    "세계": NewsCategory.WORLD,
    "it": NewsCategory.IT,
    "it/과학": NewsCategory.IT,
    "과학": NewsCategory.IT,
}

# Categories assigned by the parser for non-section article layouts
EXTRA_CATEGORIES = ("entertainment", "sports", "card")

KNOWN_CATEGORIES = frozenset([c.slug for c in NewsCategory] + list(EXTRA_CATEGORIES))


@dataclass
class ArticleRecord:
    """A single crawled article."""
    oid: str
    aid: str
    title: str
    body: str
    url: str
    category: str = ""
    publisher: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    crawled_at: datetime = field(default_factory=now_kst)
    content_hash: Optional[str] = None

    @property
    def id(self) -> str:
        return build_article_id(self.oid, self.aid)

    def compute_hash(self) -> str:
        """Set and return the SHA-256 hash of the body."""
        self.content_hash = compute_content_hash(self.body)
        return self.content_hash

    def with_hash(self) -> "ArticleRecord":
        """Return a copy with the content hash computed."""
        record = replace(self)
        record.compute_hash()
        return record

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "oid": self.oid,
            "aid": self.aid,
            "title": self.title,
            "category": self.category,
            "publisher": self.publisher,
            "author": self.author,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "crawled_at": self.crawled_at.isoformat(),
            "url": self.url,
            "content_hash": self.content_hash,
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ArticleRecord":
        """Build a record from a dict or any object exposing the same attributes."""
        return cls(
            oid=str(get_value(data, "oid") or ""),
            aid=str(get_value(data, "aid") or ""),
            title=get_value(data, "title") or "",
            body=get_value(data, "body") or "",
            url=get_value(data, "url") or "",
            category=get_value(data, "category") or "",
            publisher=get_value(data, "publisher") or None,
            author=get_value(data, "author") or None,
            published_at=parse_datetime(get_value(data, "published_at")),
            crawled_at=parse_datetime(get_value(data, "crawled_at")) or now_kst(),
            content_hash=get_value(data, "content_hash") or None,
        )
