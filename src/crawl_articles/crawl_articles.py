"""Crawl Naver News sections into Markdown article files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from article_store.checkpoint import CrawlState
from article_store.collection import DEFAULT_DELIMITER, append_to_collection
from article_store.dedup import DedupIndex
from article_store.models import NewsCategory
from article_store.writer import ArticleStorage
from crawl_articles.errors import (
    ArticleNotFoundError,
    CrawlError,
    InvalidArticleUrlError,
    NoArticlesFoundError,
)
from crawl_articles.fetch_articles.fetcher import NaverFetcher
from crawl_articles.fetch_articles.list_pages import collect_article_urls
from crawl_articles.fetch_articles.urls import extract_ids, is_valid_article_url, normalize_url
from crawl_articles.parse_articles.parse import parse_article

logger = logging.getLogger(__name__)


class CrawlOutcome(Enum):
    SAVED = "saved"
    ALREADY_COMPLETED = "already_completed"
    ALREADY_STORED = "already_stored"
    DUPLICATE = "duplicate"
    DELETED = "deleted"


@dataclass
class CrawlSummary:
    categories: list[str] = field(default_factory=list)
    urls_found: int = 0
    saved: int = 0
    skipped: int = 0
    duplicates: int = 0
    deleted: int = 0
    failed: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.saved + self.skipped + self.duplicates + self.deleted + self.failed

    def count(self, outcome: CrawlOutcome) -> None:
        if outcome is CrawlOutcome.SAVED:
            self.saved += 1
        elif outcome is CrawlOutcome.DUPLICATE:
            self.duplicates += 1
        elif outcome is CrawlOutcome.DELETED:
            self.deleted += 1
        else:
            self.skipped += 1


def crawl_single_url(
    url: str,
    fetcher: NaverFetcher,
    storage: ArticleStorage,
    state: CrawlState,
    dedup: DedupIndex,
    section_id: Optional[int] = None,
    category: str = "",
    collection_path: Optional[Path] = None,
    delimiter: str = DEFAULT_DELIMITER,
) -> CrawlOutcome:
    """Fetch, parse and store one article.

    Raises:
        InvalidArticleUrlError: If the URL is not an allowed Naver article URL.
        CrawlError: If fetching or parsing fails.
        OSError: If the article cannot be written.
    """
    if not is_valid_article_url(url):
        raise InvalidArticleUrlError(f"Not a Naver News article URL: {url}")
    url = normalize_url(url)
    article_id = "_".join(extract_ids(url))

    if state.is_completed(article_id):
        logger.debug("Already crawled %s", article_id)
        return CrawlOutcome.ALREADY_COMPLETED
    if dedup.seen_id(article_id) or dedup.seen_url(url):
        logger.debug("Already known %s", article_id)
        return CrawlOutcome.DUPLICATE

    html = fetcher.fetch_article(url, section_id)
    try:
        record = parse_article(html, url)
    except ArticleNotFoundError:
        logger.info("Article %s was deleted", article_id)
        return CrawlOutcome.DELETED

    if not record.category and category:
        record.category = category

    reason = dedup.check(record)
    if reason is not None:
        logger.info("Skipping %s: duplicate %s", article_id, reason.value)
        return CrawlOutcome.DUPLICATE

    path = storage.save(record)
    dedup.add(record)
    state.mark_completed(article_id, url)
    if path is None:
        return CrawlOutcome.ALREADY_STORED

    if collection_path is not None:
        append_to_collection(record, collection_path, delimiter)
    logger.debug("Saved %s to %s", article_id, path)
    return CrawlOutcome.SAVED


def crawl_articles(
    categories: list[NewsCategory],
    date: str,
    max_pages: int,
    fetcher: NaverFetcher,
    storage: ArticleStorage,
    state: CrawlState,
    dedup: DedupIndex,
    collection_path: Optional[Path] = None,
    delimiter: str = DEFAULT_DELIMITER,
    checkpoint_path: Optional[Path] = None,
    checkpoint_every: int = 10,
    max_articles: int = 0,
) -> CrawlSummary:
    """Crawl every listed article of the given sections for one date."""
    summary = CrawlSummary(categories=[c.slug for c in categories])
    logger.info("Crawling %d categories for %s", len(categories), date)

    for category in categories:
        logger.info("Crawling category %s (%s)", category.slug, category.korean_name)
        state.set_position(category.slug, 0)

        try:
            urls = collect_article_urls(fetcher, category, date, max_pages)
        except NoArticlesFoundError:
            logger.warning("No articles listed for %s on %s", category.slug, date)
            continue
        except CrawlError as e:
            logger.error("Failed to list %s: %s", category.slug, e)
            continue

        if max_articles > 0:
            urls = urls[:max_articles]
        summary.urls_found += len(urls)
        logger.info("Found %d article URLs for %s", len(urls), category.slug)

        for index, url in enumerate(urls, start=1):
            try:
                outcome = crawl_single_url(
                    url,
                    fetcher,
                    storage,
                    state,
                    dedup,
                    section_id=category.section_id,
                    category=category.slug,
                    collection_path=collection_path,
                    delimiter=delimiter,
                )
            except (CrawlError, OSError) as e:
                logger.warning("Failed to crawl %s: %s", url, e)
                state.record_error(url)
                summary.failed += 1
                summary.errors.append((url, str(e)))
                continue

            summary.count(outcome)
            if checkpoint_path is not None and index % checkpoint_every == 0:
                state.save(checkpoint_path)

        logger.info(
            "Finished %s: %d saved, %d failed so far",
            category.slug,
            summary.saved,
            summary.failed,
        )

    if checkpoint_path is not None:
        state.save(checkpoint_path)

    stats = state.stats()
    logger.info(
        "Crawl finished: %d saved, %d skipped, %d duplicates, %d deleted, %d failed (%.1f%% errors, %.1f articles/min)",
        summary.saved,
        summary.skipped,
        summary.duplicates,
        summary.deleted,
        summary.failed,
        stats.error_rate,
        stats.crawl_rate,
    )
    return summary
