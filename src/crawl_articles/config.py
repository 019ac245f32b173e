"""YAML configuration for the Naver News crawler."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from article_store.collection import DEFAULT_DELIMITER
from article_store.models import NewsCategory
from common.config import ConfigSingleton, find_config_path, get_section, load_yaml

# Directory holding prod.yaml / dev.yaml, overridable with CRAWL_CONFIG_DIR
CONFIG_DIR = Path(__file__).parent / "configs"


@dataclass
class FetchConfig:
    requests_per_second: float = 2.0
    max_retries: int = 3
    timeout_seconds: float = 30.0
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.base_delay_seconds < 0 or self.max_delay_seconds < 0:
            raise ValueError("retry delays must not be negative")


@dataclass
class StorageConfig:
    output_dir: str = "output/articles"
    collection_path: Optional[str] = None
    delimiter: str = DEFAULT_DELIMITER
    skip_existing: bool = True

    def __post_init__(self) -> None:
        if not self.output_dir:
            raise ValueError("output_dir must not be empty")
        if not self.delimiter.strip():
            raise ValueError("delimiter must not be empty")


@dataclass
class CheckpointConfig:
    path: str = "output/checkpoint.json"
    save_every: int = 10

    def __post_init__(self) -> None:
        if self.save_every <= 0:
            raise ValueError("save_every must be positive")


@dataclass
class CrawlConfig:
    categories: list[str] = field(default_factory=lambda: [c.slug for c in NewsCategory])
    max_pages: int = 0  # 0 = until the list runs out
    max_articles: int = 0  # per category, 0 = no limit
    dedup_max_size: int = 100_000
    fetch: FetchConfig = field(default_factory=FetchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    checkpoint: CheckpointConfig = field(default_factory=CheckpointConfig)

    def __post_init__(self) -> None:
        for category in self.categories:
            if NewsCategory.parse(category) is None:
                raise ValueError(f"Unknown category in config: {category}")
        if self.max_pages < 0 or self.max_articles < 0:
            raise ValueError("max_pages and max_articles must not be negative")
        if self.dedup_max_size <= 0:
            raise ValueError("dedup_max_size must be positive")


def config_from_dict(data: dict) -> CrawlConfig:
    defaults = CrawlConfig()
    return CrawlConfig(
        categories=list(data.get("categories") or defaults.categories),
        max_pages=int(data.get("max_pages", defaults.max_pages)),
        max_articles=int(data.get("max_articles", defaults.max_articles)),
        dedup_max_size=int(data.get("dedup_max_size", defaults.dedup_max_size)),
        fetch=FetchConfig(**get_section(data, "fetch")),
        storage=StorageConfig(**get_section(data, "storage")),
        checkpoint=CheckpointConfig(**get_section(data, "checkpoint")),
    )


def load_config(name: str | None = None) -> CrawlConfig:
    """Load a crawl config by name (``prod``, ``dev``) or path.

    The name defaults to the CRAWL_CONFIG_ENV environment variable, then ``prod``.
    """
    config_dir = Path(os.environ.get("CRAWL_CONFIG_DIR") or CONFIG_DIR)
    path = find_config_path(name, config_dir, default_name="prod", env_var="CRAWL_CONFIG_ENV")
    return config_from_dict(load_yaml(path))


_manager: ConfigSingleton[CrawlConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
