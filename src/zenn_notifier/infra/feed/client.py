"""RSS フィードを取得して feedparser で解析するクライアント。"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import feedparser
import httpx

from zenn_notifier.core.feed.detector import FeedError
from zenn_notifier.shared.logging import get_logger


@dataclass(slots=True, frozen=True)
class FeedDocument:
    title: str
    entries: list[dict[str, Any]] = field(default_factory=list)


class FeedClient:
    """RSS を HTTP で取得する。"""

    def __init__(
        self,
        *,
        http_get: Callable[..., httpx.Response] = httpx.get,
        timeout: float = 15.0,
        logger=None,
    ) -> None:
        self._http_get = http_get
        self._timeout = timeout
        self._logger = logger or get_logger(__name__, component="feed-client")

    def fetch(self, url: str) -> FeedDocument:
        try:
            response = self._http_get(url, timeout=self._timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._logger.error(
                "feed_fetch_failed", url=url, status_code=exc.response.status_code
            )
            msg = f"RSS の取得に失敗しました (HTTP {exc.response.status_code})"
            raise FeedError(msg) from exc
        except httpx.RequestError as exc:
            self._logger.error("feed_request_error", url=url, message=str(exc))
            msg = f"RSS への接続に失敗しました: {exc}"
            raise FeedError(msg) from exc

        parsed = feedparser.parse(response.content)
        if parsed.bozo and not parsed.entries:
            self._logger.error("feed_malformed", url=url, error=str(parsed.get("bozo_exception")))
            msg = "RSS の解析に失敗しました"
            raise FeedError(msg)

        title = str(parsed.feed.get("title", ""))
        entries = [dict(entry) for entry in parsed.entries]
        self._logger.info("feed_fetched", url=url, title=title, total=len(entries))
        return FeedDocument(title=title, entries=entries)


__all__ = ["FeedClient", "FeedDocument"]
