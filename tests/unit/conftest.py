from datetime import datetime

import pytest

from article_store.models import ArticleRecord
from common.datetime import KST


def build_record(oid: str = "001", aid: str = "0014123456", **overrides) -> ArticleRecord:
    values = dict(
        oid=oid,
        aid=aid,
        title=f"제목 {aid}",
        body=f"{aid} 본문입니다.",
        url=f"https://n.news.naver.com/mnews/article/{oid}/{aid}",
        category="politics",
        publisher="연합뉴스",
        author="홍길동 기자",
        published_at=datetime(2024, 12, 15, 14, 30, tzinfo=KST),
        crawled_at=datetime(2024, 12, 15, 15, 2, 11, tzinfo=KST),
    )
    values.update(overrides)
    record = ArticleRecord(**values)
    record.compute_hash()
    return record


@pytest.fixture
def make_article():
    return build_record
