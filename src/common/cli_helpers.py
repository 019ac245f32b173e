"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging
import os
from datetime import datetime

from common.datetime import now_kst


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging format for CLI tools.

    The level defaults to the LOG_LEVEL environment variable, then INFO.
    """
    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_crawl_date(value: str, field_name: str = "date") -> str:
    """Parse a crawl date for argparse arguments.

    Args:
        value: Date string in YYYYMMDD or YYYY-MM-DD format.
        field_name: Name of the field for error messages.

    Returns:
        Date string in YYYYMMDD format.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid date.
    """
    compact = value.strip().replace("-", "")
    try:
        datetime.strptime(compact, "%Y%m%d")
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{field_name} must be YYYYMMDD") from exc
    return compact


def today_crawl_date() -> str:
    """Today's date in Seoul as YYYYMMDD."""
    return now_kst().strftime("%Y%m%d")
