"""Naver News article URL parsing, validation and canonicalization."""

from __future__ import annotations

import ipaddress
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from lxml import html as lxml_html

from crawl_articles.errors import InvalidArticleUrlError

CANONICAL_URL = "https://n.news.naver.com/mnews/article/{oid}/{aid}"
LIST_URL = "https://news.naver.com/main/list.naver?mode=LSD&mid=shm&sid1={sid}&date={date}&page={page}"
SECTION_REFERER = "https://news.naver.com/section/{sid}"

ALLOWED_DOMAINS = frozenset([
    "n.news.naver.com",
    "news.naver.com",
    "m.news.naver.com",
    "entertain.naver.com",
    "sports.naver.com",
    "sports.news.naver.com",
])

# /mnews/article/001/0014123456 or /article/001/0014123456
ARTICLE_PATH_PATTERN = re.compile(r"/(?:mnews/)?article/(\d{3})/(\d{10,})")
# read.naver?oid=001&aid=0014123456 and the entertainment/sports equivalents
OID_PARAM_PATTERN = re.compile(r"[?&]oid=(\d{3})(?:&|$|#)")
AID_PARAM_PATTERN = re.compile(r"[?&]aid=(\d{10,})(?:&|$|#)")

BLOCKED_HOSTS = frozenset(["localhost", "127.0.0.1", "::1"])

_PARSER = lxml_html.HTMLParser(encoding="utf-8")


def extract_ids(url: str) -> tuple[str, str]:
    """Return (oid, aid) from any recognised article URL form."""
    match = ARTICLE_PATH_PATTERN.search(url)
    if match:
        return match.group(1), match.group(2)

    oid = OID_PARAM_PATTERN.search(url)
    aid = AID_PARAM_PATTERN.search(url)
    if oid and aid:
        return oid.group(1), aid.group(1)

    raise InvalidArticleUrlError(f"No article ids in URL: {url}")


def canonical_url(oid: str, aid: str) -> str:
    return CANONICAL_URL.format(oid=oid, aid=aid)


def normalize_url(url: str) -> Optional[str]:
    """Canonical desktop article URL, or None if the URL has no article ids."""
    try:
        oid, aid = extract_ids(url)
    except InvalidArticleUrlError:
        return None
    return canonical_url(oid, aid)


def _host(url: str) -> Optional[str]:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def is_allowed_domain(url: str) -> bool:
    return _host(url) in ALLOWED_DOMAINS


def _is_private_ip(host: str) -> bool:
    try:
        address = ipaddress.IPv4Address(host)
    except ValueError:
        return False
    return address.is_private or address.is_link_local


def is_safe_url(url: str) -> bool:
    """Reject non-HTTP schemes and loopback or private network hosts."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    host = parsed.hostname
    if not host or host in BLOCKED_HOSTS:
        return False
    return not _is_private_ip(host)


def is_valid_article_url(url: str) -> bool:
    if normalize_url(url) is None:
        return False
    return is_allowed_domain(url) and is_safe_url(url)


def to_absolute(url: str, base: str) -> str:
    if url.startswith(("http://", "https://")):
        return url
    return urljoin(base, url)


def extract_article_urls(html: str, base: str) -> list[str]:
    """Canonical article URLs linked from a page, sorted and deduplicated."""
    if not html or not html.strip():
        return []
    doc = lxml_html.document_fromstring(html.encode("utf-8"), parser=_PARSER)

    urls = set()
    for href in doc.xpath("//a/@href"):
        absolute = to_absolute(href.strip(), base)
        if is_valid_article_url(absolute):
            urls.add(normalize_url(absolute))
    return sorted(urls)


def build_list_url(section_id: int, date: str, page: int) -> str:
    """Section list page URL for a YYYYMMDD date."""
    return LIST_URL.format(sid=section_id, date=date, page=page)


def section_referer(section_id: int) -> str:
    return SECTION_REFERER.format(sid=section_id)
