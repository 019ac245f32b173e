"""Text cleanup for extracted article titles and bodies."""

import html
import re

ZERO_WIDTH_PATTERN = re.compile("[\u200b-\u200f\u2028-\u202f\ufeff]")
SPACES_PATTERN = re.compile(r"[ \t]+")
MULTI_NEWLINE_PATTERN = re.compile(r"\n{3,}")
TAG_PATTERN = re.compile(r"<[^>]+>")
BYLINE_PATTERN = re.compile(r"^.*기자\s*=.*$|^.*기자$|\S+@\S+\.\S+", re.MULTILINE)


def remove_zero_width(text: str) -> str:
    return ZERO_WIDTH_PATTERN.sub("", text)


def remove_control_chars(text: str) -> str:
    """Drop control characters except newlines and tabs."""
    return "".join(
        c for c in text
        if c in "\n\t" or not (ord(c) < 32 or 0x7F <= ord(c) <= 0x9F)
    )


def decode_html_entities(text: str) -> str:
    return html.unescape(text).replace("\xa0", " ")


def trim_lines(text: str) -> str:
    return "\n".join(line.strip() for line in text.split("\n"))


def sanitize_text(text: str) -> str:
    """Normalize scraped text: invisible characters, entities and whitespace."""
    text = remove_zero_width(text)
    text = remove_control_chars(text.replace("\r\n", "\n").replace("\r", "\n"))
    text = decode_html_entities(text)
    text = SPACES_PATTERN.sub(" ", text)
    text = trim_lines(text)
    text = MULTI_NEWLINE_PATTERN.sub("\n\n", text)
    return text.strip()


def strip_html_tags(text: str) -> str:
    return TAG_PATTERN.sub("", text)


def has_content(text: str | None) -> bool:
    return bool(text and text.strip())


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return text[:max(max_len - 3, 0)] + "..."


def remove_byline(text: str) -> str:
    """Remove reporter bylines and e-mail addresses."""
    return BYLINE_PATTERN.sub("", text).strip()
