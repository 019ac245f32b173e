"""Tests for article_store.markdown module."""

from datetime import datetime
from pathlib import Path

import pytest

from article_store.markdown import (
    MarkdownFormatError,
    parse_markdown,
    read_markdown_file,
    record_filename,
    render_markdown,
    sanitize_filename,
)
from article_store.models import ArticleRecord
from common.datetime import KST

SAMPLE = """---
id: "001_0014123456"
title: "기사 제목"
category: "politics"
publisher: "연합뉴스"
author: "홍길동 기자"
published_at: "2024-12-15 14:30"
crawled_at: "2024-12-15 15:02:11"
url: "https://n.news.naver.com/mnews/article/001/0014123456"
oid: "001"
aid: "0014123456"
content_hash: ""
---

# 기사 제목

첫 문단.

둘째 문단.

---

*출처: 연합뉴스 | 원문: https://n.news.naver.com/mnews/article/001/0014123456 | 수집: 2024-12-15 15:02:11*
"""


def make_record(**overrides) -> ArticleRecord:
    values = dict(
        oid="001",
        aid="0014123456",
        title="기사 제목",
        body="첫 문단.\n\n둘째 문단.",
        url="https://n.news.naver.com/mnews/article/001/0014123456",
        category="politics",
        publisher="연합뉴스",
        author="홍길동 기자",
        published_at=datetime(2024, 12, 15, 14, 30, tzinfo=KST),
        crawled_at=datetime(2024, 12, 15, 15, 2, 11, tzinfo=KST),
    )
    values.update(overrides)
    return ArticleRecord(**values)


class TestRenderMarkdown:
    def test_matches_document_layout(self) -> None:
        assert render_markdown(make_record()) == SAMPLE

    def test_quotes_values_with_special_characters(self) -> None:
        text = render_markdown(make_record(title='제목: "인용" #해시'))
        assert 'title: "제목: \\"인용\\" #해시"' in text

    def test_empty_optional_fields(self) -> None:
        text = render_markdown(make_record(publisher=None, author=None, published_at=None))
        assert 'publisher: ""' in text
        assert 'published_at: ""' in text
        assert "*출처: - |" in text


class TestParseMarkdown:
    def test_parses_sample(self) -> None:
        record = parse_markdown(SAMPLE)
        assert record.id == "001_0014123456"
        assert record.title == "기사 제목"
        assert record.body == "첫 문단.\n\n둘째 문단."
        assert record.publisher == "연합뉴스"
        assert record.published_at == datetime(2024, 12, 15, 14, 30, tzinfo=KST)
        assert record.crawled_at == datetime(2024, 12, 15, 15, 2, 11, tzinfo=KST)
        assert record.content_hash is None

    def test_render_parse_preserves_record(self) -> None:
        record = make_record().with_hash()
        assert parse_markdown(render_markdown(record)) == record

    def test_body_may_contain_rules(self) -> None:
        record = make_record(body="위\n\n---\n\n아래")
        assert parse_markdown(render_markdown(record)).body == "위\n\n---\n\n아래"

    def test_document_without_footer(self) -> None:
        text = '---\nid: "001_0014123456"\ntitle: "t"\n---\n\n# t\n\n본문만 있음\n'
        assert parse_markdown(text).body == "본문만 있음"

    def test_unquoted_values_keep_leading_zeros(self) -> None:
        text = (
            "---\nid: 001_0014123456\noid: 001\naid: 0014123456\ntitle: t\n"
            "published_at: 2024-12-15 14:30\n---\n\n# t\n\nbody\n"
        )
        record = parse_markdown(text)
        assert (record.oid, record.aid) == ("001", "0014123456")
        assert record.id == "001_0014123456"
        assert record.published_at == datetime(2024, 12, 15, 14, 30, tzinfo=KST)

    def test_unquoted_id_field_only(self) -> None:
        record = parse_markdown("---\nid: 023_0003871234\ntitle: t\n---\n\n# t\n\nbody\n")
        assert (record.oid, record.aid) == ("023", "0003871234")

    def test_ids_from_id_field(self) -> None:
        text = '---\nid: "023_0003871234"\ntitle: "t"\n---\n\n# t\n\nbody\n'
        record = parse_markdown(text)
        assert (record.oid, record.aid) == ("023", "0003871234")

    def test_ids_from_file_stem(self) -> None:
        text = '---\ntitle: "t"\n---\n\n# t\n\nbody\n'
        record = parse_markdown(text, source_path=Path("023_0003871234_t.md"))
        assert record.id == "023_0003871234"

    def test_title_falls_back_to_heading(self) -> None:
        text = '---\nid: "001_0014123456"\n---\n\n# 본문 제목\n\nbody\n'
        assert parse_markdown(text).title == "본문 제목"

    def test_bom_and_crlf(self) -> None:
        record = parse_markdown("\ufeff" + SAMPLE.replace("\n", "\r\n"))
        assert record.body == "첫 문단.\n\n둘째 문단."

    def test_bad_timestamp_becomes_none(self) -> None:
        text = SAMPLE.replace('"2024-12-15 14:30"', '"언젠가"')
        assert parse_markdown(text).published_at is None

    def test_missing_header_raises(self) -> None:
        with pytest.raises(MarkdownFormatError):
            parse_markdown("# 제목\n\n본문\n")

    def test_unterminated_header_raises(self) -> None:
        with pytest.raises(MarkdownFormatError):
            parse_markdown('---\nid: "001_0014123456"\n')

    def test_non_mapping_header_raises(self) -> None:
        with pytest.raises(MarkdownFormatError):
            parse_markdown("---\n- a\n- b\n---\n\nbody\n")

    def test_missing_ids_raise(self) -> None:
        with pytest.raises(MarkdownFormatError):
            parse_markdown('---\ntitle: "t"\n---\n\nbody\n')


class TestFilenames:
    def test_sanitize_filename(self) -> None:
        assert sanitize_filename("Hello, World! 안녕") == "hello_world_안녕"

    def test_sanitize_truncates(self) -> None:
        assert len(sanitize_filename("가" * 80)) == 50

    def test_record_filename(self) -> None:
        assert record_filename(make_record(title="기사 제목")) == "001_0014123456_기사_제목.md"

    def test_record_filename_without_title(self) -> None:
        assert record_filename(make_record(title="!!!")) == "001_0014123456.md"

    def test_read_markdown_file(self, tmp_path) -> None:
        path = tmp_path / "001_0014123456_기사_제목.md"
        path.write_text(SAMPLE, encoding="utf-8")
        assert read_markdown_file(path).title == "기사 제목"
