"""Render and parse single-article Markdown documents.

A document is a metadata header between two ``---`` lines, a ``# title`` heading,
the body, and a sign-off footer separated from the body by a final ``---`` rule::

    ---
    id: "001_0014123456"
    title: "..."
    ...
    ---

    # Title

    Body text

    ---

    *출처: 연합뉴스 | 원문: https://n.news.naver.com/... | 수집: 2024-12-15 15:02:11*
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from article_store.models import ArticleRecord
from common.datetime import format_kst, now_kst, parse_datetime

logger = logging.getLogger(__name__)

HEADER_FIELDS = (
    "id",
    "title",
    "category",
    "publisher",
    "author",
    "published_at",
    "crawled_at",
    "url",
    "oid",
    "aid",
    "content_hash",
)

RULE = "---"
FOOTER_PREFIX = "*출처:"
PUBLISHED_AT_FORMAT = "%Y-%m-%d %H:%M"
CRAWLED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"
FILENAME_TITLE_LENGTH = 50


class MarkdownFormatError(ValueError):
    """Raised when a document does not follow the article Markdown layout."""


def _header_values(record: ArticleRecord) -> dict[str, str]:
    return {
        "id": record.id,
        "title": record.title,
        "category": record.category or "",
        "publisher": record.publisher or "",
        "author": record.author or "",
        "published_at": format_kst(record.published_at, PUBLISHED_AT_FORMAT),
        "crawled_at": format_kst(record.crawled_at, CRAWLED_AT_FORMAT),
        "url": record.url,
        "oid": record.oid,
        "aid": record.aid,
        "content_hash": record.content_hash or "",
    }


def render_footer(record: ArticleRecord) -> str:
    publisher = record.publisher or "-"
    crawled_at = format_kst(record.crawled_at, CRAWLED_AT_FORMAT)
    return f"{FOOTER_PREFIX} {publisher} | 원문: {record.url} | 수집: {crawled_at}*"


def render_markdown(record: ArticleRecord) -> str:
    """Render an article record as a Markdown document."""
    values = _header_values(record)
    lines = [RULE]
    for key in HEADER_FIELDS:
        # JSON strings are valid YAML double-quoted scalars
        lines.append(f"{key}: {json.dumps(values[key], ensure_ascii=False)}")
    lines.append(RULE)
    lines.append("")
    lines.append(f"# {' '.join(record.title.split())}")
    lines.append("")
    if record.body:
        lines.append(record.body)
        lines.append("")
    lines.append(RULE)
    lines.append("")
    lines.append(render_footer(record))
    return "\n".join(lines) + "\n"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _split_header(lines: list[str]) -> tuple[dict, list[str]]:
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines) or lines[start].strip() != RULE:
        raise MarkdownFormatError("Document does not start with a metadata header")

    for end in range(start + 1, len(lines)):
        if lines[end].strip() == RULE:
            break
    else:
        raise MarkdownFormatError("Metadata header is not terminated")

    try:
        # BaseLoader keeps every scalar a string, so unquoted ids keep leading zeros
        header = yaml.load("\n".join(lines[start + 1:end]), Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise MarkdownFormatError(f"Invalid metadata header: {exc}") from exc

    if header is None:
        header = {}
    if not isinstance(header, dict):
        raise MarkdownFormatError("Metadata header is not a mapping")

    return header, lines[end + 1:]


def _split_body(lines: list[str]) -> tuple[str, str]:
    """Return (heading title, body) from the lines after the header."""
    lines = list(lines)
    while lines and not lines[0].strip():
        lines.pop(0)

    heading = ""
    if lines and lines[0].startswith("# "):
        heading = lines.pop(0)[2:].strip()

    while lines and not lines[-1].strip():
        lines.pop()

    # Footer: the last line, preceded by the final rule
    if lines and lines[-1].strip().startswith(FOOTER_PREFIX):
        lines.pop()
        while lines and not lines[-1].strip():
            lines.pop()
        if lines and lines[-1].strip() == RULE:
            lines.pop()

    return heading, "\n".join(lines).strip()


def _ids_from_stem(stem: str) -> tuple[str, str]:
    parts = stem.split("_")
    if len(parts) >= 2:
        return parts[0], parts[1]
    return "", ""


def _parse_timestamp(value: Any, field_name: str, record_id: str):
    try:
        return parse_datetime(value)
    except (ValueError, OverflowError):
        logger.warning("Unparseable %s for %s: %r", field_name, record_id, value)
        return None


def parse_markdown(text: str, source_path: Optional[Path] = None) -> ArticleRecord:
    """Parse a Markdown document into an article record.

    Missing oid/aid fall back to the ``id`` header field, then to the file stem
    ``{oid}_{aid}[_title]`` when a source path is given.
    """
    text = text.lstrip("\ufeff").replace("\r\n", "\n")
    header, rest = _split_header(text.split("\n"))
    heading, body = _split_body(rest)

    oid = _as_text(header.get("oid"))
    aid = _as_text(header.get("aid"))
    if not (oid and aid):
        oid, aid = _ids_from_stem(_as_text(header.get("id")))
    if not (oid and aid) and source_path is not None:
        oid, aid = _ids_from_stem(Path(source_path).stem)
    if not (oid and aid):
        raise MarkdownFormatError("Cannot determine article id (oid/aid)")

    record_id = f"{oid}_{aid}"
    published_raw = header.get("published_at") or header.get("date")
    crawled_at = _parse_timestamp(header.get("crawled_at"), "crawled_at", record_id)
    if crawled_at is None:
        logger.debug("No crawled_at for %s, using current time", record_id)
        crawled_at = now_kst()

    return ArticleRecord(
        oid=oid,
        aid=aid,
        title=_as_text(header.get("title")) or heading,
        body=body,
        url=_as_text(header.get("url")),
        category=_as_text(header.get("category")),
        publisher=_as_text(header.get("publisher")) or None,
        author=_as_text(header.get("author")) or None,
        published_at=_parse_timestamp(published_raw, "published_at", record_id),
        crawled_at=crawled_at,
        content_hash=_as_text(header.get("content_hash")) or None,
    )


def read_markdown_file(path: Path) -> ArticleRecord:
    """Read a single-article Markdown file."""
    path = Path(path)
    return parse_markdown(path.read_text(encoding="utf-8"), source_path=path)


def sanitize_filename(title: str, max_len: int = FILENAME_TITLE_LENGTH) -> str:
    """Make a title safe for use in a filename."""
    kept = [c for c in title if c.isalnum() or c in "-_ "][:max_len]
    return "".join(kept).strip().replace(" ", "_").lower()


def record_filename(record: ArticleRecord) -> str:
    """Filename for a record: ``{oid}_{aid}_{sanitized_title}.md``."""
    title = sanitize_filename(record.title)
    if title:
        return f"{record.oid}_{record.aid}_{title}.md"
    return f"{record.oid}_{record.aid}.md"
