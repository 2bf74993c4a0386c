"""既読キャッシュ (有界の順序付き集合) を検証する。"""

from __future__ import annotations

import json
from pathlib import Path

from zenn_notifier.core.feed import ProcessedCache


def test_extend_evicts_oldest_entries() -> None:
    cache = ProcessedCache(["a", "b", "c"], capacity=4)

    cache.extend(["b", "d", "e"])

    assert cache.ids() == ["b", "c", "d", "e"]
    assert "a" not in cache
    assert len(cache) == 4


def test_load_and_save_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "cache" / "rss-processed.json"
    cache = ProcessedCache(["x", "y"])
    cache.save(path)

    loaded = ProcessedCache.load(path)

    assert loaded.ids() == ["x", "y"]
    assert json.loads(path.read_text(encoding="utf-8")) == ["x", "y"]


def test_load_trims_to_capacity(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text(json.dumps([str(index) for index in range(60)]), encoding="utf-8")

    cache = ProcessedCache.load(path, capacity=50)

    assert len(cache) == 50
    assert cache.ids()[0] == "10"


def test_load_invalid_file_starts_fresh(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    not_list = tmp_path / "object.json"
    not_list.write_text('{"ids": []}', encoding="utf-8")

    assert len(ProcessedCache.load(broken)) == 0
    assert len(ProcessedCache.load(not_list)) == 0
    assert len(ProcessedCache.load(tmp_path / "missing.json")) == 0
