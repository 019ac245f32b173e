"""Rate-limited HTTP fetcher for Naver News pages."""

from __future__ import annotations

import logging
import random
import re
import time
from typing import Callable, Optional

import requests

from crawl_articles.config import FetchConfig
from crawl_articles.errors import FetchError, MaxRetriesExceededError
from crawl_articles.fetch_articles.urls import is_safe_url, section_referer

logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
)

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
    "Accept-Encoding": "gzip, deflate",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "same-origin",
    "Upgrade-Insecure-Requests": "1",
}

RETRY_STATUSES = frozenset([429, 500, 502, 503, 504])

CHARSET_PATTERN = re.compile(r"charset\s*=\s*[\"']?([\w-]+)", re.IGNORECASE)

# Naver's euc-kr pages use characters only cp949 covers
_CODEC_ALIASES = {
    "euc-kr": "cp949",
    "euckr": "cp949",
    "ks_c_5601-1987": "cp949",
    "utf8": "utf-8",
}


def should_retry(status: int) -> bool:
    return status in RETRY_STATUSES


def _codec(charset: str) -> str:
    charset = charset.strip().lower()
    return _CODEC_ALIASES.get(charset, charset)


def _try_decode(content: bytes, codec: str) -> Optional[str]:
    try:
        return content.decode(codec)
    except (UnicodeDecodeError, LookupError):
        return None


def decode_content(content: bytes, content_type: str = "") -> str:
    """Decode a response body as UTF-8 or EUC-KR.

    Order: charset from Content-Type, strict UTF-8, cp949, then a charset
    declared in the first 1 KB of the document.
    """
    match = CHARSET_PATTERN.search(content_type or "")
    if match:
        text = _try_decode(content, _codec(match.group(1)))
        if text is not None:
            return text
        logger.debug("Declared charset %s failed, sniffing", match.group(1))

    for codec in ("utf-8", "cp949"):
        text = _try_decode(content, codec)
        if text is not None:
            return text

    head = content[:1024].decode("ascii", errors="ignore")
    match = CHARSET_PATTERN.search(head)
    if match:
        text = _try_decode(content, _codec(match.group(1)))
        if text is not None:
            return text

    raise FetchError("Failed to decode content with UTF-8 or EUC-KR")


class RateLimiter:
    """Keeps at least 1/requests_per_second seconds between requests."""

    def __init__(
        self,
        requests_per_second: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.min_interval = 1.0 / requests_per_second
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    def wait(self) -> None:
        now = self._clock()
        if self._last is not None:
            remaining = self.min_interval - (now - self._last)
            if remaining > 0:
                self._sleep(remaining)
                now = self._clock()
        self._last = now


class NaverFetcher:
    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config or FetchConfig()
        self.session = session or requests.Session()
        self._sleep = sleep
        self.rate_limiter = RateLimiter(self.config.requests_per_second, sleep=sleep)

    def build_headers(self, referer: Optional[str] = None) -> dict[str, str]:
        headers = dict(BASE_HEADERS)
        headers["User-Agent"] = random.choice(USER_AGENTS)
        if referer:
            headers["Referer"] = referer
        return headers

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (1-based)."""
        delay = self.config.base_delay_seconds * 2 ** (attempt - 1)
        return min(delay, self.config.max_delay_seconds)

    def fetch(self, url: str, referer: Optional[str] = None) -> str:
        """GET a page and return its decoded text, retrying transient failures."""
        if not is_safe_url(url):
            raise FetchError(f"Refusing to fetch unsafe URL: {url}", url=url)

        last_error: Optional[Exception] = None
        for attempt in range(self.config.max_retries + 1):
            if attempt > 0:
                delay = self.backoff_delay(attempt)
                logger.debug("Retry %d for %s in %.1fs (%s)", attempt, url, delay, last_error)
                self._sleep(delay)

            self.rate_limiter.wait()
            try:
                response = self.session.get(
                    url,
                    headers=self.build_headers(referer),
                    timeout=self.config.timeout_seconds,
                )
            except (requests.Timeout, requests.ConnectionError) as e:
                last_error = e
                continue

            if response.ok:
                return decode_content(response.content, response.headers.get("Content-Type", ""))
            if should_retry(response.status_code):
                last_error = FetchError(f"HTTP {response.status_code}", status=response.status_code, url=url)
                continue
            raise FetchError(f"HTTP {response.status_code} for {url}", status=response.status_code, url=url)

        logger.warning("Giving up on %s after %d attempts: %s", url, self.config.max_retries + 1, last_error)
        raise MaxRetriesExceededError(f"Max retries exceeded for {url}: {last_error}", url=url)

    def fetch_article(self, url: str, section_id: Optional[int] = None) -> str:
        referer = section_referer(section_id) if section_id else "https://news.naver.com/"
        return self.fetch(url, referer=referer)

    def close(self) -> None:
        self.session.close()
