"""Tests for crawl_articles.parse_articles.sanitize module."""

from crawl_articles.parse_articles.sanitize import (
    decode_html_entities,
    has_content,
    remove_byline,
    remove_control_chars,
    remove_zero_width,
    sanitize_text,
    strip_html_tags,
    truncate,
)


class TestSanitizeText:
    def test_full_cleanup(self) -> None:
        dirty = "  Hello\u200bWorld  &amp;\tfriends \n\n\n\n  둘째\x00 줄  "
        assert sanitize_text(dirty) == "HelloWorld & friends\n\n둘째 줄"

    def test_nbsp_becomes_space(self) -> None:
        assert sanitize_text("Hello&nbsp;World&#xa0;Test") == "Hello World Test"

    def test_crlf(self) -> None:
        assert sanitize_text("a\r\nb") == "a\nb"


class TestHelpers:
    def test_remove_zero_width(self) -> None:
        assert remove_zero_width("가\u200b나\ufeff다\u200c\u2028") == "가나다"

    def test_remove_control_chars_keeps_newlines_and_tabs(self) -> None:
        assert remove_control_chars("a\x00b\x07c\nd\te") == "abc\nd\te"

    def test_decode_html_entities(self) -> None:
        assert decode_html_entities("&lt;div&gt;Hello &amp; World&lt;/div&gt;") == "<div>Hello & World</div>"

    def test_strip_html_tags(self) -> None:
        assert strip_html_tags("<p>Hello <strong>World</strong></p>") == "Hello World"

    def test_has_content(self) -> None:
        assert has_content("Hello")
        assert not has_content("")
        assert not has_content("   \n\t  ")
        assert not has_content(None)

    def test_truncate(self) -> None:
        assert truncate("Hello World", 5) == "He..."
        assert truncate("Hello World", 20) == "Hello World"
        assert truncate("안녕하세요 반갑습니다", 5) == "안녕..."

    def test_remove_byline(self) -> None:
        text = "(서울=연합뉴스) 홍길동 기자 = 본문 시작\n기사 내용입니다.\n홍길동 기자\nhong@yna.co.kr"
        assert remove_byline(text) == "기사 내용입니다."
