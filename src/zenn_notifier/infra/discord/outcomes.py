"""Webhook への 1 回の送信結果。"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Success:
    status_code: int


@dataclass(slots=True, frozen=True)
class RateLimited:
    """429 応答。`retry_after_ms` は単位補正済みの待機ヒント。"""

    retry_after_ms: float
    status_code: int = 429


@dataclass(slots=True, frozen=True)
class Fatal:
    """リトライしても結果が変わらない応答 (4xx/5xx)。"""

    status_code: int
    body: str


@dataclass(slots=True, frozen=True)
class NetworkError:
    """DNS・TCP・TLS・タイムアウトなど接続レベルの失敗。"""

    cause: Exception


@dataclass(slots=True, frozen=True)
class InvalidDestination:
    """宛先 URL 自体が不正で、リクエストを組み立てられない。"""

    cause: Exception


DeliveryOutcome = Success | RateLimited | Fatal | NetworkError | InvalidDestination


__all__ = [
    "DeliveryOutcome",
    "Fatal",
    "InvalidDestination",
    "NetworkError",
    "RateLimited",
    "Success",
]
