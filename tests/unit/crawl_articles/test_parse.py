"""Tests for crawl_articles.parse_articles.parse module."""

from datetime import datetime
from unittest.mock import patch

import pytest

from common.datetime import KST
from common.hashing import compute_content_hash
from crawl_articles.errors import ArticleNotFoundError, InvalidArticleUrlError, UnknownFormatError
from crawl_articles.parse_articles.parse import (
    detect_format,
    extract_with_readability,
    is_deleted_article,
    parse_article,
    parse_article_date,
    parse_fields,
)
from crawl_articles.parse_articles.selectors import ArticleFormat

URL = "https://n.news.naver.com/mnews/article/001/0014123456?sid=100"

GENERAL_PAGE = """<html><head>
<title>기사 제목 : 네이버 뉴스</title>
<meta property="og:title" content="기사 제목">
<meta property="og:article:author" content="연합뉴스 | 네이버">
</head><body>
<div class="media_end_head_top_logo"><img alt="연합뉴스" src="logo.png"></div>
<h2 id="title_area" class="media_end_head_headline"><span>기사   제목</span></h2>
<span class="media_end_head_info_datestamp_time _ARTICLE_DATE_TIME" data-date-time="2024-12-15 14:30:00">2024.12.15. 오후 2:30</span>
<em class="media_end_head_journalist_name">홍길동 기자</em>
<article id="dic_area" class="go_trans _article_content">
첫 문장입니다.<br><br>둘째 문장입니다.
<span class="end_photo_org"><img src="x.jpg"><em class="img_desc">사진 설명</em></span>
<script>var x = 1;</script>
</article>
</body></html>"""

ENTERTAINMENT_PAGE = """<html><body>
<h2 class="end_tit">연예 제목</h2>
<div class="article_info"><span class="author"><em>2024.12.15. 오전 9:05</em></span></div>
<div class="press_logo"><img alt="스타뉴스"></div>
<div class="article_body">연예 본문입니다.<br>두 번째 줄.</div>
</body></html>"""

CARD_PAGE = """<html><body>
<h2 class="end_tit">카드뉴스</h2>
<div class="end_ct_area"><img src="1.jpg"></div>
<em class="img_desc">첫 장 설명</em>
<figcaption>둘째 장</figcaption>
</body></html>"""

PLAIN_PAGE = """<html><head><title>일반 페이지 제목</title></head>
<body><article><p>알 수 없는 구조의 본문</p></article></body></html>"""


class TestParseArticleDate:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2024.12.15. 14:30", datetime(2024, 12, 15, 14, 30)),
            ("2024.12.15 14:30", datetime(2024, 12, 15, 14, 30)),
            ("2024.12.15. 오후 2:30", datetime(2024, 12, 15, 14, 30)),
            ("2024.12.15. 오전 12:10", datetime(2024, 12, 15, 0, 10)),
            ("2024.12.15. 오후 12:10", datetime(2024, 12, 15, 12, 10)),
            ("2024-12-15 14:30:45", datetime(2024, 12, 15, 14, 30, 45)),
            ("2024년 12월 15일 14:30", datetime(2024, 12, 15, 14, 30)),
            ("기사입력 2024.12.15.", datetime(2024, 12, 15)),
        ],
    )
    def test_formats(self, text, expected) -> None:
        assert parse_article_date(text) == expected.replace(tzinfo=KST)

    @pytest.mark.parametrize("text", [None, "", "날짜 없음", "2024.02.30."])
    def test_unparseable(self, text) -> None:
        assert parse_article_date(text) is None


class TestDetectFormat:
    def test_markers(self) -> None:
        assert detect_format('<div id="dic_area">x</div>') is ArticleFormat.GENERAL
        assert detect_format('<div class="article_body">x</div>') is ArticleFormat.ENTERTAINMENT
        assert detect_format('<div class="news_end">x</div>') is ArticleFormat.SPORTS
        assert detect_format('<article class="Article_comp_news_article__XIpve">x</article>') is ArticleFormat.SPORTS
        assert detect_format('<h2 class="ArticleHead_article_title__qh8GV">t</h2>') is ArticleFormat.SPORTS
        assert detect_format('<div class="card_area">x</div>') is ArticleFormat.CARD
        assert detect_format("<div>x</div>") is ArticleFormat.UNKNOWN

    def test_host_wins(self) -> None:
        page = '<div id="dic_area">x</div>'
        assert detect_format(page, "https://entertain.naver.com/read?oid=001&aid=0014123456") is ArticleFormat.ENTERTAINMENT


class TestIsDeletedArticle:
    def test_deleted_title(self) -> None:
        assert is_deleted_article("<html><head><title>삭제된 기사입니다</title></head><body></body></html>")

    def test_error_container(self) -> None:
        assert is_deleted_article('<html><body><div class="error_content">존재하지 않는 기사입니다</div></body></html>')

    def test_short_page_without_content(self) -> None:
        assert is_deleted_article("<html><body><p>잠시 후 다시 시도해 주세요</p></body></html>")

    def test_empty_page(self) -> None:
        assert is_deleted_article("   ")

    def test_normal_article(self) -> None:
        assert not is_deleted_article(GENERAL_PAGE)

    def test_article_about_deletion(self) -> None:
        page = """<html><head><title>SBS 기사 삭제 논란</title></head>
        <body><div id="dic_area">삭제된 기사가 논란이 되고 있다.</div></body></html>"""
        assert not is_deleted_article(page)

    def test_long_page_without_content_area(self) -> None:
        page = "<html><body>" + "<p>긴 페이지</p>" * 600 + "</body></html>"
        assert not is_deleted_article(page)


class TestParseArticle:
    def test_general_article(self) -> None:
        record = parse_article(GENERAL_PAGE, URL)
        assert record.id == "001_0014123456"
        assert record.url == "https://n.news.naver.com/mnews/article/001/0014123456"
        assert record.title == "기사 제목"
        assert record.body == "첫 문장입니다.\n\n둘째 문장입니다."
        assert record.publisher == "연합뉴스"
        assert record.author == "홍길동 기자"
        assert record.published_at == datetime(2024, 12, 15, 14, 30, tzinfo=KST)
        assert record.category == ""
        assert record.content_hash == compute_content_hash(record.body)

    def test_entertainment_article(self) -> None:
        record = parse_article(ENTERTAINMENT_PAGE, "https://entertain.naver.com/read?oid=108&aid=0003281234")
        assert record.url == "https://n.news.naver.com/mnews/article/108/0003281234"
        assert record.title == "연예 제목"
        assert record.body == "연예 본문입니다.\n두 번째 줄."
        assert record.category == "entertainment"
        assert record.publisher == "스타뉴스"
        assert record.published_at == datetime(2024, 12, 15, 9, 5, tzinfo=KST)

    def test_card_news_uses_captions(self) -> None:
        record = parse_article(CARD_PAGE, URL)
        assert record.category == "card"
        assert record.body == "첫 장 설명\n\n둘째 장"

    def test_deleted_article_raises(self) -> None:
        with pytest.raises(ArticleNotFoundError):
            parse_article("<html><head><title>삭제된 기사입니다</title></head></html>", URL)

    def test_invalid_url_raises(self) -> None:
        with pytest.raises(InvalidArticleUrlError):
            parse_article(GENERAL_PAGE, "https://news.naver.com/main/list.naver")


class TestFallbacks:
    def test_falls_back_from_detected_format(self) -> None:
        fields = parse_fields(GENERAL_PAGE, "https://sports.news.naver.com/news?oid=001&aid=0014123456")
        assert fields.title == "기사 제목"
        assert fields.category == ""

    @patch("crawl_articles.parse_articles.parse.extract_with_trafilatura")
    def test_generic_extractor(self, mock_traf) -> None:
        mock_traf.return_value = "알 수 없는 구조의 본문"
        record = parse_article(PLAIN_PAGE, URL)
        assert record.title == "일반 페이지 제목"
        assert record.body == "알 수 없는 구조의 본문"

    @patch("crawl_articles.parse_articles.parse.extract_with_readability")
    @patch("crawl_articles.parse_articles.parse.extract_with_trafilatura")
    def test_readability_after_trafilatura_error(self, mock_traf, mock_read) -> None:
        mock_traf.side_effect = Exception("fail")
        mock_read.return_value = "readability 본문"
        assert parse_fields(PLAIN_PAGE, URL).body == "readability 본문"

    @patch("crawl_articles.parse_articles.parse.extract_with_readability")
    @patch("crawl_articles.parse_articles.parse.extract_with_trafilatura")
    def test_unknown_format(self, mock_traf, mock_read) -> None:
        mock_traf.return_value = None
        mock_read.return_value = None
        with pytest.raises(UnknownFormatError):
            parse_article(PLAIN_PAGE, URL)


class TestExtractWithReadability:
    @patch("crawl_articles.parse_articles.parse.Document")
    def test_returns_summary_text(self, mock_doc) -> None:
        mock_doc.return_value.summary.return_value = "<div><p> 첫 줄 </p><p>둘째 줄</p></div>"
        assert extract_with_readability("<html></html>") == "첫 줄\n둘째 줄"

    @patch("crawl_articles.parse_articles.parse.Document")
    def test_empty_summary(self, mock_doc) -> None:
        mock_doc.return_value.summary.return_value = "<div> </div>"
        assert extract_with_readability("<html></html>") is None
