"""分類器 (Gemini) の出力を通知用の記事一覧へ正規化する。"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from zenn_notifier.core.notify.models import Category
from zenn_notifier.shared.exceptions import DomainError
from zenn_notifier.shared.logging import get_logger
from zenn_notifier.shared.types import isoformat_z, utc_now

_FENCED_JSON = re.compile(r"```json\n([\s\S]*?)\n```")

logger = get_logger(__name__)


class AnalysisError(DomainError):
    """分類結果が処理できない場合のエラー。"""

    default_message = "分類結果の処理に失敗しました"


def extract_payload(raw: str) -> dict[str, Any]:
    """生出力から記事一覧を含む辞書を取り出す。

    `{"response": "```json ... ```"}` のように応答文字列の中へ JSON が
    埋め込まれている形式にも対応する。解析できない場合は空の記事一覧を返す。
    """

    if not raw.strip():
        msg = "分類結果が空です"
        raise AnalysisError(msg)

    try:
        parsed = json.loads(raw)
        if isinstance(parsed, dict) and isinstance(parsed.get("response"), str):
            response = parsed["response"]
            match = _FENCED_JSON.search(response)
            parsed = json.loads(match.group(1) if match else response)
    except json.JSONDecodeError as exc:
        logger.error("analysis_parse_failed", error=str(exc), raw=raw[:300])
        return {"articles": []}

    if not isinstance(parsed, dict):
        return {"articles": []}
    return parsed


def normalize_article(article: Mapping[str, Any], *, analyzed_at: str) -> dict[str, str]:
    return {
        "title": str(article.get("title") or ""),
        "link": str(article.get("link") or ""),
        "pubDate": str(article.get("pubDate") or ""),
        "guid": str(article.get("guid") or ""),
        "category": Category.normalize(article.get("category")).value,
        "summary": str(article.get("summary") or ""),
        "analyzedAt": analyzed_at,
    }


def normalize_articles(
    payload: Mapping[str, Any], *, now: datetime | None = None
) -> list[dict[str, str]]:
    """辞書でない要素を捨て、各フィールドを文字列化しカテゴリを正規化する。"""

    raw_articles = payload.get("articles")
    articles: Sequence[Any] = raw_articles if isinstance(raw_articles, list) else []
    analyzed_at = isoformat_z(now or utc_now())

    normalized: list[dict[str, str]] = []
    for index, article in enumerate(articles):
        if not isinstance(article, Mapping):
            logger.warning("analysis_article_invalid", index=index)
            continue
        normalized.append(normalize_article(article, analyzed_at=analyzed_at))
    return normalized


def build_analysis_document(
    articles: Sequence[Mapping[str, str]],
    *,
    source: str = "gemini",
    now: datetime | None = None,
) -> dict[str, Any]:
    ai_count = sum(1 for article in articles if article.get("category") == Category.AI.value)
    return {
        "articles": list(articles),
        "metadata": {
            "totalCount": len(articles),
            "aiRelatedCount": ai_count,
            "otherCount": len(articles) - ai_count,
            "processedAt": isoformat_z(now or utc_now()),
            "source": source,
        },
    }


__all__ = [
    "AnalysisError",
    "build_analysis_document",
    "extract_payload",
    "normalize_article",
    "normalize_articles",
]
