"""Document collections: article documents concatenated with a delimiter line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from article_store.markdown import MarkdownFormatError, parse_markdown, read_markdown_file, render_markdown
from article_store.models import ArticleRecord

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "<!-- article-break -->"


def _check_delimiter(delimiter: str) -> str:
    delimiter = delimiter.strip()
    if not delimiter:
        raise ValueError("Collection delimiter must not be empty")
    return delimiter


def join_records(records: Iterable[ArticleRecord], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Render records and join them into a single collection text."""
    delimiter = _check_delimiter(delimiter)
    documents = [render_markdown(record).strip("\n") for record in records]
    if not documents:
        return ""
    return f"\n\n{delimiter}\n\n".join(documents) + "\n"


def split_documents(text: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Split collection text on delimiter lines, dropping empty chunks."""
    delimiter = _check_delimiter(delimiter)
    documents = []
    current: list[str] = []
    for line in text.replace("\r\n", "\n").split("\n"):
        if line.strip() == delimiter:
            documents.append("\n".join(current))
            current = []
        else:
            current.append(line)
    documents.append("\n".join(current))
    return [doc.strip("\n") + "\n" for doc in documents if doc.strip()]


def iter_collection_text(
    text: str,
    delimiter: str = DEFAULT_DELIMITER,
    strict: bool = False,
) -> Iterator[ArticleRecord]:
    """Parse every document of a collection text."""
    for index, document in enumerate(split_documents(text, delimiter)):
        try:
            yield parse_markdown(document)
        except MarkdownFormatError as e:
            if strict:
                raise
            logger.warning("Skipping document %d: %s", index, e)


def read_collection(
    path: Path,
    delimiter: str = DEFAULT_DELIMITER,
    strict: bool = False,
) -> Iterator[ArticleRecord]:
    """Read article records from a collection file."""
    text = Path(path).read_text(encoding="utf-8")
    yield from iter_collection_text(text, delimiter, strict)


def write_collection(
    records: Iterable[ArticleRecord],
    path: Path,
    delimiter: str = DEFAULT_DELIMITER,
) -> int:
    """Write records to a collection file, replacing it. Returns the record count."""
    records = list(records)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(join_records(records, delimiter), encoding="utf-8")
    logger.info("Wrote %d articles to %s", len(records), path)
    return len(records)


def append_to_collection(
    record: ArticleRecord,
    path: Path,
    delimiter: str = DEFAULT_DELIMITER,
) -> None:
    """Append one record to a collection file, creating it if needed."""
    delimiter = _check_delimiter(delimiter)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    has_content = path.exists() and path.stat().st_size > 0
    with path.open("a", encoding="utf-8") as f:
        if has_content:
            f.write(f"\n{delimiter}\n\n")
        f.write(render_markdown(record))


def read_directory(directory: Path, strict: bool = False) -> Iterator[ArticleRecord]:
    """Read single-article Markdown files from a directory, sorted by name."""
    for path in sorted(Path(directory).glob("*.md")):
        try:
            yield read_markdown_file(path)
        except (MarkdownFormatError, UnicodeDecodeError) as e:
            if strict:
                raise
            logger.warning("Skipping %s: %s", path, e)


def load_records(
    path: Path,
    delimiter: str = DEFAULT_DELIMITER,
    strict: bool = False,
) -> list[ArticleRecord]:
    """Load records from a directory of Markdown files or a collection file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Path not found: {path}")
    if path.is_dir():
        records = list(read_directory(path, strict))
    else:
        records = list(read_collection(path, delimiter, strict))
    logger.info("Loaded %d articles from %s", len(records), path)
    return records
