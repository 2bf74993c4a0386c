"""共有型・ユーティリティ。"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """UTC の現在時刻を返す。"""

    return datetime.now(UTC)


def isoformat_z(value: datetime) -> str:
    """`2024-01-01T00:00:00.000Z` 形式 (ミリ秒・Z 終端) の文字列へ変換する。"""

    utc_value = value.astimezone(UTC)
    return utc_value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_value.microsecond // 1000:03d}Z"


__all__ = ["isoformat_z", "utc_now"]
