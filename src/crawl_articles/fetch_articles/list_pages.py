"""Collect article URLs from paginated section list pages."""

from __future__ import annotations

import logging
import re

from article_store.models import NewsCategory
from crawl_articles.errors import NoArticlesFoundError
from crawl_articles.fetch_articles.fetcher import NaverFetcher
from crawl_articles.fetch_articles.urls import build_list_url, extract_article_urls

logger = logging.getLogger(__name__)


def is_valid_date(date: str) -> bool:
    """Check a YYYYMMDD string (year 2000-2100)."""
    if len(date) != 8 or not date.isdigit():
        return False
    year, month, day = int(date[:4]), int(date[4:6]), int(date[6:])
    return 2000 <= year <= 2100 and 1 <= month <= 12 and 1 <= day <= 31


def has_next_page(html: str, page: int) -> bool:
    """Check for a link to the following page or a "next" paging control."""
    if re.search(rf"[?&;]page={page + 1}(?!\d)", html):
        return True
    return "다음</a>" in html or 'class="next"' in html


def collect_article_urls(
    fetcher: NaverFetcher,
    category: NewsCategory,
    date: str,
    max_pages: int = 0,
) -> list[str]:
    """Collect canonical article URLs for a section and date.

    Pagination stops at an empty page, a page with nothing new, when no next
    page is linked, or after ``max_pages`` pages (0 means no limit).
    """
    if not is_valid_date(date):
        raise ValueError(f"Invalid date format: {date}. Expected YYYYMMDD")

    urls: set[str] = set()
    page = 1
    while max_pages <= 0 or page <= max_pages:
        list_url = build_list_url(category.section_id, date, page)
        logger.debug("Fetching list page %s", list_url)
        html = fetcher.fetch_article(list_url, category.section_id)

        page_urls = extract_article_urls(html, list_url)
        if not page_urls:
            logger.debug("No article links on page %d, stopping", page)
            break

        before = len(urls)
        urls.update(page_urls)
        if len(urls) == before:
            # Naver repeats the last page past the end of the list
            logger.debug("Page %d added nothing new, stopping", page)
            break

        if not has_next_page(html, page):
            break
        page += 1

    if not urls:
        raise NoArticlesFoundError(f"No articles found for {category.slug} on {date}")

    logger.info("Collected %d article URLs for %s on %s (%d pages)", len(urls), category.slug, date, page)
    return sorted(urls)
