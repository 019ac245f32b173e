"""Helper functions for the crawl_articles CLI."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from article_store.models import NewsCategory
from common.cli_helpers import parse_crawl_date
from common.utils import parse_csv_list

logger = logging.getLogger(__name__)


def parse_categories(value: str | list[str] | None) -> list[NewsCategory]:
    '''Parse the --categories argument (or config list) into sections.'''

    # No value or "all" means every section
    if isinstance(value, str):
        names = parse_csv_list(value)
    else:
        names = [name.strip() for name in value or [] if name.strip()]
    if not names or any(name.lower() == "all" for name in names):
        return list(NewsCategory)

    categories = []
    for name in names:
        category = NewsCategory.parse(name)
        if category is None:
            logger.warning("Invalid category: %s", name)
        elif category not in categories:
            categories.append(category)

    if not categories:
        valid = ", ".join(c.slug for c in NewsCategory)
        raise ValueError(f"No valid categories provided. Valid categories: {valid}")

    return categories


def parse_crawl_articles_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    '''Parse CLI arguments for crawl_articles.'''

    parser = argparse.ArgumentParser(description="Crawl Naver News articles into Markdown files.")
    parser.add_argument(
        "--categories",
        default=None,
        help="Comma-separated sections, English or Korean (default: from config, 'all' for every section).",
    )
    parser.add_argument("--date", type=parse_crawl_date, default=None, help="YYYYMMDD (default: today in Seoul).")
    parser.add_argument("--max-pages", type=int, default=None, help="List pages per section, 0 for no limit.")
    parser.add_argument("--max-articles", type=int, default=None, help="Articles per section, 0 for no limit.")
    parser.add_argument("--url", default=None, help="Crawl a single article URL.")
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--collection", default=None, help="Also append articles to this collection file.")
    parser.add_argument("--checkpoint", default=None, help="Checkpoint file path.")
    parser.add_argument("--resume", action="store_true", help="Resume from the checkpoint file.")
    parser.add_argument("--config", default=None, help="Config name or path (default: $CRAWL_CONFIG_ENV or prod).")
    return parser.parse_args(argv)
