"""通知対象記事とチャンネル単位の配信結果モデル。"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from zenn_notifier.shared.exceptions import BaseAppError


class Category(StrEnum):
    """分類ステップが付与するカテゴリ。"""

    AI = "AI関連"
    OTHER = "AI以外"

    @classmethod
    def normalize(cls, value: object) -> Category:
        """未知のラベルは AI以外 に寄せる。"""

        return cls.AI if value == cls.AI.value else cls.OTHER


@dataclass(slots=True, frozen=True)
class Item:
    """分類済みの通知対象記事。"""

    title: str
    link: str
    summary: str
    category: str
    content_snippet: str = ""
    guid: str = ""
    pub_date: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Item:
        return cls(
            title=str(payload.get("title") or ""),
            link=str(payload.get("link") or ""),
            summary=str(payload.get("summary") or ""),
            category=str(payload.get("category") or Category.OTHER.value),
            content_snippet=str(
                payload.get("contentSnippet") or payload.get("content_snippet") or ""
            ),
            guid=str(payload.get("guid") or ""),
            pub_date=str(payload.get("pubDate") or payload.get("pub_date") or ""),
        )


@dataclass(slots=True)
class ChannelOutcome:
    """1 チャンネル分の配信集計。"""

    label: str
    attempted: int = 0
    succeeded: int = 0
    first_error: BaseAppError | None = None
    failed_item: Item | None = None

    @property
    def ok(self) -> bool:
        return self.first_error is None


__all__ = ["Category", "ChannelOutcome", "Item"]
