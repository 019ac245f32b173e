"""Hashing utilities."""

import hashlib
import re

CONTENT_HASH_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def compute_content_hash(body: str) -> str:
    """Return the SHA-256 hex digest of an article body."""
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


def is_content_hash(value: str | None) -> bool:
    """Check that a value looks like a SHA-256 hex digest."""
    return bool(value) and CONTENT_HASH_PATTERN.match(value) is not None


def build_article_id(oid: str, aid: str) -> str:
    """Build the article ID from the outlet and article identifiers."""
    return f"{oid}_{aid}"
