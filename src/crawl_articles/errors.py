"""Exceptions raised while crawling Naver News."""

from __future__ import annotations

from typing import Optional


class CrawlError(Exception):
    """Base class for crawl failures."""


class FetchError(CrawlError):
    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.url = url


class MaxRetriesExceededError(FetchError):
    pass


class ParseError(CrawlError):
    pass


class ArticleNotFoundError(ParseError):
    """The page reports the article as deleted or missing."""


class UnknownFormatError(ParseError):
    """No known layout or generic extractor produced a title and body."""


class InvalidArticleUrlError(ParseError, ValueError):
    pass


class NoArticlesFoundError(CrawlError):
    pass
