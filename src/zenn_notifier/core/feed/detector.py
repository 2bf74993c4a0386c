"""RSS エントリから未処理の記事を抽出する。"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from zenn_notifier.shared.exceptions import DomainError
from zenn_notifier.shared.logging import get_logger

from .cache import ProcessedCache

_TAG_PATTERN = re.compile(r"<[^>]+>")
_SPACE_PATTERN = re.compile(r"\s+")

logger = get_logger(__name__)


class FeedError(DomainError):
    """RSS の取得・解析に失敗したことを示す。"""

    default_message = "RSS の取得に失敗しました"


@dataclass(slots=True, frozen=True)
class FeedArticle:
    """分類ステップへ渡す新着記事。"""

    guid: str
    title: str
    link: str
    pub_date: str = ""
    content: str = ""
    content_snippet: str = ""

    def to_payload(self) -> dict[str, str]:
        return {
            "title": self.title,
            "link": self.link,
            "pubDate": self.pub_date,
            "content": self.content,
            "contentSnippet": self.content_snippet,
            "guid": self.guid,
        }


def article_key(entry: Mapping[str, Any]) -> str:
    """guid → id → link → title の順で記事を識別するキーを決める。"""

    for field_name in ("guid", "id", "link", "title"):
        value = entry.get(field_name)
        if value:
            return str(value)
    return ""


def strip_html(value: str) -> str:
    text = _TAG_PATTERN.sub(" ", value)
    return _SPACE_PATTERN.sub(" ", html.unescape(text)).strip()


def _entry_content(entry: Mapping[str, Any]) -> str:
    content = entry.get("content")
    if isinstance(content, list) and content:
        first = content[0]
        if isinstance(first, Mapping) and first.get("value"):
            return str(first["value"])
    if isinstance(content, str):
        return content
    return str(entry.get("summary") or entry.get("description") or "")


def to_feed_article(entry: Mapping[str, Any], key: str) -> FeedArticle:
    content = _entry_content(entry)
    snippet_source = entry.get("summary") or entry.get("description") or content
    return FeedArticle(
        guid=key,
        title=str(entry.get("title") or ""),
        link=str(entry.get("link") or ""),
        pub_date=str(entry.get("published") or entry.get("updated") or ""),
        content=content,
        content_snippet=strip_html(str(snippet_source)),
    )


def detect_new_articles(
    entries: Iterable[Mapping[str, Any]], cache: ProcessedCache
) -> list[FeedArticle]:
    """キャッシュに無いエントリをフィード順に返す。キーを持たないエントリは無視する。"""

    articles: list[FeedArticle] = []
    seen: set[str] = set()
    for entry in entries:
        key = article_key(entry)
        if not key or key in cache or key in seen:
            continue
        seen.add(key)
        article = to_feed_article(entry, key)
        logger.info(
            "feed_new_article",
            index=len(articles) + 1,
            title=article.title,
            link=article.link,
            published=article.pub_date,
            guid=key,
        )
        articles.append(article)
    return articles


__all__ = [
    "FeedArticle",
    "FeedError",
    "article_key",
    "detect_new_articles",
    "strip_html",
    "to_feed_article",
]
