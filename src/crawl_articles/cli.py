"""CLI for crawling Naver News articles."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from article_store.checkpoint import CrawlState
from article_store.collection import read_directory
from article_store.dedup import DedupIndex
from article_store.writer import ArticleStorage
from common.cli_helpers import setup_logging, today_crawl_date
from crawl_articles.config import load_config, set_config
from crawl_articles.crawl_articles import crawl_articles, crawl_single_url
from crawl_articles.errors import CrawlError
from crawl_articles.fetch_articles.fetcher import NaverFetcher
from crawl_articles.helpers import parse_categories, parse_crawl_articles_args

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    args = parse_crawl_articles_args(argv)

    config = load_config(args.config)
    set_config(config)

    output_dir = Path(args.output_dir or config.storage.output_dir)
    collection = args.collection or config.storage.collection_path
    collection_path = Path(collection) if collection else None
    checkpoint_path = Path(args.checkpoint or config.checkpoint.path)

    storage = ArticleStorage(output_dir, skip_existing=config.storage.skip_existing)
    state = CrawlState.load(checkpoint_path) if args.resume else CrawlState()
    dedup = DedupIndex.from_records(
        read_directory(output_dir) if output_dir.is_dir() else [],
        max_size=config.dedup_max_size,
    )
    fetcher = NaverFetcher(config.fetch)

    try:
        if args.url:
            try:
                outcome = crawl_single_url(
                    args.url,
                    fetcher,
                    storage,
                    state,
                    dedup,
                    collection_path=collection_path,
                    delimiter=config.storage.delimiter,
                )
            except (CrawlError, OSError) as e:
                logger.error("Failed to crawl %s: %s", args.url, e)
                return 1
            logger.info("%s: %s", args.url, outcome.value)
            return 0

        categories = parse_categories(args.categories or config.categories)
        summary = crawl_articles(
            categories=categories,
            date=args.date or today_crawl_date(),
            max_pages=config.max_pages if args.max_pages is None else args.max_pages,
            fetcher=fetcher,
            storage=storage,
            state=state,
            dedup=dedup,
            collection_path=collection_path,
            delimiter=config.storage.delimiter,
            checkpoint_path=checkpoint_path,
            checkpoint_every=config.checkpoint.save_every,
            max_articles=config.max_articles if args.max_articles is None else args.max_articles,
        )
    finally:
        fetcher.close()

    if summary.processed == 0:
        logger.warning("No articles crawled")
    logger.info("Output directory: %s", output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
