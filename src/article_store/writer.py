"""Single-file Markdown storage for article records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from article_store.markdown import record_filename, render_markdown
from article_store.models import ArticleRecord

logger = logging.getLogger(__name__)


@dataclass
class BatchSaveResult:
    saved: list[Path] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.saved) + len(self.failed) + len(self.skipped)

    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 1.0
        return len(self.saved) / self.total


class ArticleStorage:
    """Writes one ``{oid}_{aid}_{title}.md`` file per article."""

    def __init__(self, output_dir: Path, skip_existing: bool = True):
        self.output_dir = Path(output_dir)
        self.skip_existing = skip_existing

    def exists(self, record: ArticleRecord) -> bool:
        if not self.output_dir.is_dir():
            return False
        if (self.output_dir / f"{record.id}.md").exists():
            return True
        return any(self.output_dir.glob(f"{record.id}_*.md"))

    def path_for(self, record: ArticleRecord) -> Path:
        return self.output_dir / record_filename(record)

    def save(self, record: ArticleRecord) -> Optional[Path]:
        """Save a record; returns None when skipped as already stored."""
        if self.skip_existing and self.exists(record):
            logger.debug("Skipping existing article %s", record.id)
            return None
        if not record.content_hash:
            record.compute_hash()

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(record)
        path.write_text(render_markdown(record), encoding="utf-8")
        logger.debug("Saved %s to %s", record.id, path)
        return path

    def save_batch(self, records: Iterable[ArticleRecord]) -> BatchSaveResult:
        result = BatchSaveResult()
        for record in records:
            try:
                path = self.save(record)
            except OSError as e:
                logger.error("Failed to save %s: %s", record.id, e)
                result.failed.append((record.id, str(e)))
                continue
            if path is None:
                result.skipped.append(record.id)
            else:
                result.saved.append(path)

        logger.info(
            "Saved %d articles (%d skipped, %d failed) to %s",
            len(result.saved),
            len(result.skipped),
            len(result.failed),
            self.output_dir,
        )
        return result
