"""Parse Naver News article pages into article records."""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

import trafilatura
from lxml import html as lxml_html
from readability import Document

from article_store.models import ArticleRecord
from common.datetime import KST, now_kst
from crawl_articles.errors import ArticleNotFoundError, UnknownFormatError
from crawl_articles.fetch_articles.urls import canonical_url, extract_ids
from crawl_articles.parse_articles.sanitize import has_content, sanitize_text
from crawl_articles.parse_articles.selectors import (
    CONTENT_AREAS,
    DELETED_INDICATORS,
    ERROR_CONTAINERS,
    FALLBACK_ORDER,
    FORMAT_HOSTS,
    FORMAT_MARKERS,
    MIN_ARTICLE_PAGE_LENGTH,
    NOISE,
    SELECTORS,
    ArticleFormat,
    FormatSelectors,
)

logger = logging.getLogger(__name__)

DATE_ATTRIBUTES = ("data-date-time", "data-modify-date-time")

# 2024.12.15. 오후 2:30 / 2024-12-15 14:30:00 / 2024년 12월 15일 14:30 / 2024.12.15.
DATE_PATTERN = re.compile(
    r"(\d{4})\s*[.\-/년]\s*(\d{1,2})\s*[.\-/월]\s*(\d{1,2})\s*[.일]?"
    r"(?:\s*(오전|오후|AM|PM))?"
    r"(?:\s*(\d{1,2}):(\d{2})(?::(\d{2}))?)?",
    re.IGNORECASE,
)

BLOCK_TAGS = ("p", "div", "li", "h1", "h2", "h3", "h4", "tr")


@dataclass
class ParsedFields:
    title: str
    body: str
    category: str = ""
    publisher: Optional[str] = None
    author: Optional[str] = None
    published_at: Optional[datetime] = None


_PARSER = lxml_html.HTMLParser(encoding="utf-8")


def _load(page: str):
    return lxml_html.document_fromstring(page.encode("utf-8"), parser=_PARSER)


def _first_text(doc, selectors) -> Optional[str]:
    for selector in selectors:
        for element in doc.cssselect(selector)[:1]:
            text = element.text_content()
            if has_content(text):
                return text
    return None


def _element_text(element) -> str:
    """Text of an element with line breaks for <br> and block elements."""
    for br in element.iter("br"):
        br.tail = "\n" + (br.tail or "")
    for block in element.iter(*BLOCK_TAGS):
        block.tail = "\n" + (block.tail or "")
    return element.text_content()


def _content_text(doc, selectors) -> Optional[str]:
    for selector in selectors:
        for element in doc.cssselect(selector)[:1]:
            element = copy.deepcopy(element)
            for noise_selector in NOISE:
                for noise in element.cssselect(noise_selector):
                    noise.drop_tree()
            text = _element_text(element)
            if has_content(text):
                return text
    return None


def _captions(doc, selectors) -> Optional[str]:
    captions = []
    for selector in selectors:
        for element in doc.cssselect(selector):
            text = element.text_content()
            if has_content(text):
                captions.append(text)
    return "\n\n".join(captions) if captions else None


def _meta(doc, name: str) -> Optional[str]:
    for element in doc.xpath("//meta[@property=$name or @name=$name]", name=name):
        content = element.get("content")
        if has_content(content):
            return content.strip()
    return None


def _publisher(doc, selectors) -> Optional[str]:
    for selector in selectors:
        for element in doc.cssselect(selector)[:1]:
            alt = element.get("alt")
            if has_content(alt):
                return sanitize_text(alt)
            text = element.text_content()
            if has_content(text):
                return sanitize_text(text)

    # "연합뉴스 | 네이버"
    author_meta = _meta(doc, "og:article:author")
    if author_meta:
        return author_meta.split("|")[0].strip() or None
    return None


def parse_article_date(text: str | None) -> Optional[datetime]:
    """Parse the date formats shown on article pages as Seoul time."""
    if not text:
        return None
    match = DATE_PATTERN.search(text)
    if not match:
        return None

    year, month, day = int(match.group(1)), int(match.group(2)), int(match.group(3))
    meridiem = (match.group(4) or "").upper()
    hour = int(match.group(5)) if match.group(5) else 0
    minute = int(match.group(6)) if match.group(6) else 0
    second = int(match.group(7)) if match.group(7) else 0

    if meridiem in ("오후", "PM") and hour < 12:
        hour += 12
    elif meridiem in ("오전", "AM") and hour == 12:
        hour = 0

    try:
        return datetime(year, month, day, hour, minute, second, tzinfo=KST)
    except ValueError:
        return None


def _published_at(doc, selectors) -> Optional[datetime]:
    for attribute in DATE_ATTRIBUTES:
        for element in doc.xpath(f"//*[@{attribute}]"):
            parsed = parse_article_date(element.get(attribute))
            if parsed:
                return parsed
    return parse_article_date(_first_text(doc, selectors))


def _parse_format(doc, selectors: FormatSelectors) -> Optional[ParsedFields]:
    title = _first_text(doc, selectors.title)
    if not title:
        return None

    body = _content_text(doc, selectors.content)
    if not body and selectors.captions:
        body = _captions(doc, selectors.captions)
    if not body:
        return None

    author = _first_text(doc, selectors.author)
    return ParsedFields(
        title=sanitize_text(title),
        body=sanitize_text(body),
        category=selectors.category,
        publisher=_publisher(doc, selectors.publisher),
        author=sanitize_text(author) if author else None,
        published_at=_published_at(doc, selectors.date),
    )


def _fallback_title(doc) -> Optional[str]:
    title = _meta(doc, "og:title")
    if not title:
        found = doc.xpath("//title")
        title = found[0].text_content() if found else None
    return sanitize_text(title) if has_content(title) else None


def extract_with_trafilatura(page: str) -> Optional[str]:
    return trafilatura.extract(page)


def extract_with_readability(page: str) -> Optional[str]:
    summary_html = Document(page).summary()
    text = _element_text(lxml_html.fromstring(summary_html))
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return "\n".join(lines) if lines else None


def _parse_generic(doc, page: str, url: str) -> Optional[ParsedFields]:
    """Last resort: trafilatura, then readability-lxml."""
    title = _fallback_title(doc)
    if not title:
        return None

    body = None
    try:
        body = extract_with_trafilatura(page)
    except Exception as e:
        logger.warning("trafilatura failed for %s: %s", url, e)

    if not has_content(body):
        try:
            body = extract_with_readability(page)
        except Exception as e:
            logger.warning("readability failed for %s: %s", url, e)

    if not has_content(body):
        return None

    return ParsedFields(
        title=title,
        body=sanitize_text(body),
        publisher=_publisher(doc, ()),
        published_at=_published_at(doc, ()),
    )


def _detect(doc, url: Optional[str]) -> ArticleFormat:
    if url:
        host_format = FORMAT_HOSTS.get(urlparse(url).hostname or "")
        if host_format:
            return host_format
    for article_format, marker in FORMAT_MARKERS:
        if doc.cssselect(marker):
            return article_format
    return ArticleFormat.UNKNOWN


def detect_format(page: str, url: Optional[str] = None) -> ArticleFormat:
    """Detect the article layout from the host, then from page markers."""
    if not page.strip():
        return ArticleFormat.UNKNOWN
    return _detect(_load(page), url)


def is_deleted_article(page: str) -> bool:
    """Check for Naver's deleted or missing article pages."""
    if not page.strip():
        return True
    doc = _load(page)

    titles = doc.xpath("//title")
    if titles:
        title_text = titles[0].text_content()
        if any(indicator in title_text for indicator in DELETED_INDICATORS):
            return True

    for selector in ERROR_CONTAINERS:
        for element in doc.cssselect(selector):
            text = element.text_content()
            if any(indicator in text for indicator in DELETED_INDICATORS):
                return True

    has_content_area = any(doc.cssselect(selector) for selector in CONTENT_AREAS)
    return not has_content_area and len(page) < MIN_ARTICLE_PAGE_LENGTH


def parse_fields(page: str, url: Optional[str] = None) -> ParsedFields:
    """Extract article fields, trying the detected layout first.

    Raises:
        UnknownFormatError: If no layout or generic extractor finds a title and body.
    """
    doc = _load(page)
    detected = _detect(doc, url)

    order = [detected] if detected in SELECTORS else []
    order += [f for f in FALLBACK_ORDER if f not in order]

    for article_format in order:
        fields = _parse_format(doc, SELECTORS[article_format])
        if fields:
            if article_format != detected:
                logger.debug("Parsed %s as %s (detected %s)", url, article_format.value, detected.value)
            return fields

    fields = _parse_generic(doc, page, url or "")
    if fields:
        logger.debug("Parsed %s with generic extractor", url)
        return fields

    raise UnknownFormatError(f"Unknown article format: {url}")


def parse_article(page: str, url: str) -> ArticleRecord:
    """Parse an article page into a record with a computed content hash.

    Raises:
        InvalidArticleUrlError: If the URL carries no oid/aid.
        ArticleNotFoundError: If the page reports a deleted article.
        UnknownFormatError: If no content could be extracted.
    """
    oid, aid = extract_ids(url)
    if is_deleted_article(page):
        raise ArticleNotFoundError(f"Article deleted or not found: {url}")

    fields = parse_fields(page, url)
    record = ArticleRecord(
        oid=oid,
        aid=aid,
        title=fields.title,
        body=fields.body,
        url=canonical_url(oid, aid),
        category=fields.category,
        publisher=fields.publisher,
        author=fields.author,
        published_at=fields.published_at,
        crawled_at=now_kst(),
    )
    record.compute_hash()
    return record
