"""Structural checks over article records."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from article_store.models import KNOWN_CATEGORIES, ArticleRecord
from common.datetime import as_kst
from common.hashing import compute_content_hash, is_content_hash
from crawl_articles.errors import InvalidArticleUrlError
from crawl_articles.fetch_articles.urls import extract_ids

ERROR = "error"
WARNING = "warning"

OID_PATTERN = re.compile(r"^\d{3}$")
AID_PATTERN = re.compile(r"^\d{10,}$")


@dataclass
class ValidationIssue:
    record_id: str
    field: str
    message: str
    severity: str = ERROR


@dataclass
class ValidationReport:
    total: int = 0
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == WARNING)

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0


def _check_ids(record: ArticleRecord, issues: list[ValidationIssue]) -> None:
    record_id = record.id
    if not record.oid or not record.aid:
        issues.append(ValidationIssue(record_id, "id", "id is empty"))
        return
    if not OID_PATTERN.match(record.oid):
        issues.append(ValidationIssue(record_id, "oid", f"oid must be 3 digits: {record.oid!r}"))
    if not AID_PATTERN.match(record.aid):
        issues.append(ValidationIssue(record_id, "aid", f"aid must be 10+ digits: {record.aid!r}"))


def _check_hash(record: ArticleRecord, issues: list[ValidationIssue]) -> None:
    if not record.content_hash:
        issues.append(ValidationIssue(record.id, "content_hash", "content_hash is missing"))
    elif not is_content_hash(record.content_hash):
        issues.append(ValidationIssue(record.id, "content_hash", "content_hash is not a 64-character hex string"))
    elif record.content_hash != compute_content_hash(record.body):
        issues.append(ValidationIssue(record.id, "content_hash", "content_hash does not match body"))


def _check_url(record: ArticleRecord, issues: list[ValidationIssue]) -> None:
    if not record.url:
        issues.append(ValidationIssue(record.id, "url", "url is empty"))
        return
    try:
        oid, aid = extract_ids(record.url)
    except InvalidArticleUrlError:
        issues.append(ValidationIssue(record.id, "url", f"url has no article ids: {record.url}"))
        return
    if (oid, aid) != (record.oid, record.aid):
        issues.append(ValidationIssue(record.id, "url", f"url points to {oid}_{aid}"))


def validate_record(record: ArticleRecord) -> list[ValidationIssue]:
    """Run all per-record checks."""
    issues: list[ValidationIssue] = []
    _check_ids(record, issues)
    _check_hash(record, issues)
    _check_url(record, issues)

    if not record.title.strip():
        issues.append(ValidationIssue(record.id, "title", "title is empty"))
    if not record.body.strip():
        issues.append(ValidationIssue(record.id, "body", "body is empty"))

    if record.published_at is None:
        issues.append(ValidationIssue(record.id, "published_at", "published_at is missing", WARNING))
    elif as_kst(record.published_at) > as_kst(record.crawled_at):
        issues.append(ValidationIssue(record.id, "published_at", "published_at is after crawled_at", WARNING))

    if not record.category:
        issues.append(ValidationIssue(record.id, "category", "category is empty", WARNING))
    elif record.category not in KNOWN_CATEGORIES:
        issues.append(ValidationIssue(record.id, "category", f"unknown category: {record.category}", WARNING))

    return issues


def validate_records(records: Iterable[ArticleRecord]) -> ValidationReport:
    """Validate records individually and report duplicates across the set."""
    report = ValidationReport()
    id_counts: Counter[str] = Counter()
    hash_owners: dict[str, str] = {}

    for record in records:
        report.total += 1
        report.issues.extend(validate_record(record))
        id_counts[record.id] += 1

        if record.content_hash:
            first = hash_owners.setdefault(record.content_hash, record.id)
            if first != record.id:
                report.issues.append(
                    ValidationIssue(record.id, "content_hash", f"same content as {first}", WARNING)
                )

    for record_id, count in id_counts.items():
        if count > 1:
            report.issues.append(ValidationIssue(record_id, "id", f"id appears {count} times", WARNING))

    return report
