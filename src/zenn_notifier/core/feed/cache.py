"""既読記事 ID のキャッシュ。"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from zenn_notifier.shared.logging import get_logger

DEFAULT_CACHE_SIZE = 50

logger = get_logger(__name__)


class ProcessedCache:
    """挿入順を保つ有界の集合。上限を超えると古い ID から捨てる。"""

    def __init__(self, ids: Iterable[str] = (), *, capacity: int = DEFAULT_CACHE_SIZE) -> None:
        if capacity <= 0:
            msg = "capacity must be positive"
            raise ValueError(msg)
        self._capacity = capacity
        self._ids: dict[str, None] = {}
        self.extend(ids)

    def __contains__(self, article_id: object) -> bool:
        return article_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def capacity(self) -> int:
        return self._capacity

    def ids(self) -> list[str]:
        return list(self._ids)

    def extend(self, ids: Iterable[str]) -> None:
        for article_id in ids:
            if article_id and article_id not in self._ids:
                self._ids[article_id] = None
        while len(self._ids) > self._capacity:
            del self._ids[next(iter(self._ids))]

    @classmethod
    def load(cls, path: Path, *, capacity: int = DEFAULT_CACHE_SIZE) -> ProcessedCache:
        """JSON 配列を読み込む。存在しない・壊れている場合は空から始める。"""

        if not path.exists():
            logger.info("processed_cache_missing", path=str(path))
            return cls(capacity=capacity)

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("processed_cache_invalid", path=str(path), error=str(exc))
            return cls(capacity=capacity)

        if not isinstance(payload, list):
            logger.warning("processed_cache_invalid", path=str(path), error="not a list")
            return cls(capacity=capacity)

        cache = cls((str(value) for value in payload if value), capacity=capacity)
        logger.info("processed_cache_loaded", path=str(path), count=len(cache))
        return cache

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.ids(), ensure_ascii=False, indent=2), encoding="utf-8")


__all__ = ["DEFAULT_CACHE_SIZE", "ProcessedCache"]
