"""CSS selectors for the Naver News article layouts."""

from dataclasses import dataclass
from enum import Enum


class ArticleFormat(Enum):
    GENERAL = "general"
    ENTERTAINMENT = "entertainment"
    SPORTS = "sports"
    CARD = "card"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FormatSelectors:
    title: tuple[str, ...]
    content: tuple[str, ...]
    date: tuple[str, ...] = ()
    publisher: tuple[str, ...] = ()
    author: tuple[str, ...] = ()
    captions: tuple[str, ...] = ()
    category: str = ""


GENERAL = FormatSelectors(
    title=(
        "#title_area span",
        ".media_end_head_title",
        "h2.media_end_head_headline",
    ),
    content=(
        "#dic_area",
        "#articleBodyContents",
        "article#dic_area",
    ),
    date=(
        ".media_end_head_info_datestamp_time",
        "._ARTICLE_DATE_TIME",
        "span.media_end_head_info_datestamp_time",
    ),
    publisher=(
        ".media_end_head_top_logo img",
        ".press_logo img",
        "a.media_end_head_top_logo_img img",
    ),
    author=(
        ".media_end_head_journalist_name",
        ".byline",
        ".journalist_name",
        "span.byline_s",
    ),
)

ENTERTAINMENT = FormatSelectors(
    title=(
        ".end_tit",
        "h2.end_tit",
        ".article_tit",
        "h2.ArticleHead_article_title__qh8GV",
        ".ArticleHead_article_title__qh8GV",
        "h2[class*='article_title']",
    ),
    content=(
        ".article_body",
        "#articeBody",
        "div.end_body_wrp",
        "article.Article_comp_news_article__XIpve",
        "article[class*='_article_body']",
        "div._article_content",
        "article#comp_news_article",
    ),
    date=(
        ".article_info .author em",
        ".info_date",
        "span.author em",
        ".DateInfo_info_item__3yQPs em.date",
        ".DateInfo_article_head_date_info__CS6Gx em.date",
        "div[class*='DateInfo'] em.date",
    ),
    publisher=(
        ".JournalistCard_press_name__s3Eup",
        "em[class*='press_name']",
        ".press_name",
        ".press_logo img",
    ),
    author=(
        ".JournalistCard_name__0ZSAO",
        "em[class*='name']",
        ".journalist_name",
    ),
    category="entertainment",
)

SPORTS = FormatSelectors(
    title=(
        ".news_headline .title",
        "h4.title",
        ".NewsEndMain_article_title__j5ND9",
        "h2.ArticleHead_article_title__qh8GV",
        ".ArticleHead_article_title__qh8GV",
        "h2[class*='article_title']",
    ),
    content=(
        ".news_end",
        "#newsEndContents",
        "div.NewsEndMain_article_body__D5MUB",
        "article.Article_comp_news_article__XIpve",
        "article[class*='_article_body']",
        "div._article_content",
        "article#comp_news_article",
    ),
    date=(
        ".info span",
        ".news_date",
        "em.date",
        ".DateInfo_info_item__3yQPs em.date",
        ".DateInfo_article_head_date_info__CS6Gx em.date",
        "div[class*='DateInfo'] em.date",
    ),
    publisher=(
        ".JournalistCard_press_name__s3Eup",
        "em[class*='press_name']",
        ".press_name",
        ".press_logo img",
    ),
    author=(
        ".JournalistCard_name__0ZSAO",
        "em[class*='name']",
        ".journalist_name",
    ),
    category="sports",
)

CARD = FormatSelectors(
    title=(
        "h2.end_tit",
        ".media_end_head_title",
        "h3.tit_view",
    ),
    content=(
        "div.end_ct_area",
        "div.card_area",
        "div.content_area",
    ),
    captions=(
        "em.img_desc",
        ".txt",
        "figcaption",
    ),
    category="card",
)

SELECTORS = {
    ArticleFormat.GENERAL: GENERAL,
    ArticleFormat.ENTERTAINMENT: ENTERTAINMENT,
    ArticleFormat.SPORTS: SPORTS,
    ArticleFormat.CARD: CARD,
}

# Tried in this order after the detected format fails
FALLBACK_ORDER = (
    ArticleFormat.GENERAL,
    ArticleFormat.ENTERTAINMENT,
    ArticleFormat.SPORTS,
    ArticleFormat.CARD,
)

# Format markers, checked in order
FORMAT_MARKERS = (
    (ArticleFormat.GENERAL, "#dic_area"),
    (ArticleFormat.ENTERTAINMENT, ".article_body, div.end_body_wrp"),
    (ArticleFormat.SPORTS, ".news_end, div.NewsEndMain_article_body__D5MUB"),
    (ArticleFormat.SPORTS, "article.Article_comp_news_article__XIpve, article#comp_news_article"),
    (ArticleFormat.SPORTS, "h2[class*='ArticleHead_article_title']"),
    (ArticleFormat.CARD, "div.end_ct_area, div.card_area"),
)

FORMAT_HOSTS = {
    "entertain.naver.com": ArticleFormat.ENTERTAINMENT,
    "m.entertain.naver.com": ArticleFormat.ENTERTAINMENT,
    "sports.naver.com": ArticleFormat.SPORTS,
    "sports.news.naver.com": ArticleFormat.SPORTS,
    "m.sports.naver.com": ArticleFormat.SPORTS,
}

# Removed from bodies before taking their text
NOISE = (
    "em.img_desc",
    "div.link_news",
    ".end_photo_org",
    ".vod_player_wrap",
    "script",
    "style",
    "noscript",
    "iframe",
    ".ad_wrap",
    ".reporter_area",
    ".byline_wrap",
    ".copyright",
    ".source",
)

DELETED_INDICATORS = (
    "삭제된 기사",
    "없는 기사",
    "서비스 되지 않는",
    "페이지를 찾을 수 없습니다",
    "삭제되었거나",
    "존재하지 않는 기사",
    "기사가 삭제, 수정, 이동되었거나",
)

ERROR_CONTAINERS = (
    ".error_content",
    ".deleted_content",
    ".article_error",
    ".news_error",
    "#ct > .error_msg",
    ".err_wrap",
)

# Any of these present means the page has an article body area
CONTENT_AREAS = ("#dic_area", ".article_body", ".news_end", "article") + CARD.content

# Pages without a content area shorter than this are treated as error pages
MIN_ARTICLE_PAGE_LENGTH = 5000
