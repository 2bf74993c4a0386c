"""分類済み記事ファイル (analyzed-articles.json) の読み込み。"""

from __future__ import annotations

import json
from pathlib import Path

from zenn_notifier.shared.exceptions import InputDataError
from zenn_notifier.shared.logging import get_logger

from .models import Item

logger = get_logger(__name__)


def load_analyzed_items(path: Path) -> list[Item]:
    """記事一覧を読み込む。ファイルが無い・記事が空の場合は空リストを返す。"""

    if not path.exists():
        logger.warning("analyzed_file_missing", path=str(path))
        return []

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("analyzed_file_invalid", path=str(path), error=str(exc))
        msg = f"{path} を解析できませんでした: {exc}"
        raise InputDataError(msg) from exc

    articles = payload.get("articles") if isinstance(payload, dict) else None
    if not isinstance(articles, list):
        return []
    return [Item.from_dict(article) for article in articles if isinstance(article, dict)]


__all__ = ["load_analyzed_items"]
