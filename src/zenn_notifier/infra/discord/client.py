"""Discord Webhook へ 1 回だけ POST するトランスポート。"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from zenn_notifier.shared.exceptions import BaseAppError
from zenn_notifier.shared.logging import get_logger

from .outcomes import (
    DeliveryOutcome,
    Fatal,
    InvalidDestination,
    NetworkError,
    RateLimited,
    Success,
)

DEFAULT_USERNAME = "Zenn RSS Monitor"
RATE_LIMIT_STATUS = 429


class DiscordWebhookError(BaseAppError):
    """Webhook 投稿に失敗した際の例外。"""

    default_message = "Discord Webhook 送信に失敗しました"


@dataclass(slots=True)
class DiscordRetryConfig:
    """レート制限時のリトライ設定。時間はすべてミリ秒。"""

    max_retries: int = 5
    backoff_factor: float = 1.6
    backoff_cap_ms: float = 10_000
    default_retry_after_ms: float = 1_500
    retry_after_seconds_threshold: float = 50

    def wait_ms(self, retry_after_ms: float, attempt: int) -> float:
        """`attempt` 回目 (1 始まり) のリトライ前に待つ時間。"""

        scaled = retry_after_ms * self.backoff_factor ** max(0, attempt - 1)
        return min(scaled, self.backoff_cap_ms)


def resolve_retry_after_ms(
    raw: object,
    *,
    default_ms: float = 1_500,
    seconds_threshold: float = 50,
) -> float:
    """Retry-After ヒントをミリ秒へ正規化する。

    実装によって秒・ミリ秒どちらで返るかが揺れるため、閾値未満は秒とみなす。
    欠落・解釈不能・0 以下は既定値を返す。
    """

    if raw is None or isinstance(raw, bool):
        return float(default_ms)
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return float(default_ms)
    if not math.isfinite(value) or value <= 0:
        return float(default_ms)
    if value < seconds_threshold:
        return value * 1000
    return value


def _extract_retry_after(response: httpx.Response) -> object:
    header = response.headers.get("Retry-After")
    if header:
        return header
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        return payload.get("retry_after")
    return None


class DiscordWebhookTransport:
    """1 回の送信を行い、結果を DeliveryOutcome に分類する。内部でリトライはしない。"""

    def __init__(
        self,
        *,
        username: str = DEFAULT_USERNAME,
        retry_config: DiscordRetryConfig | None = None,
        http_post: Callable[..., httpx.Response] = httpx.post,
        timeout: float = 10.0,
        logger=None,
    ) -> None:
        self._username = username
        self._retry_config = retry_config or DiscordRetryConfig()
        self._http_post = http_post
        self._timeout = timeout
        self._logger = logger or get_logger(__name__, component="discord-transport")

    def send(self, destination: str, text: str) -> DeliveryOutcome:
        payload = {"username": self._username, "content": text}
        try:
            response = self._http_post(
                destination,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            self._logger.warning("discord_webhook_request_error", message=str(exc))
            return NetworkError(cause=exc)
        except httpx.InvalidURL as exc:
            self._logger.error("discord_webhook_invalid_url", message=str(exc))
            return InvalidDestination(cause=exc)

        status_code = response.status_code
        if 200 <= status_code < 300:
            return Success(status_code=status_code)

        if status_code == RATE_LIMIT_STATUS:
            retry_after_ms = resolve_retry_after_ms(
                _extract_retry_after(response),
                default_ms=self._retry_config.default_retry_after_ms,
                seconds_threshold=self._retry_config.retry_after_seconds_threshold,
            )
            return RateLimited(retry_after_ms=retry_after_ms)

        body = response.text.strip()
        return Fatal(status_code=status_code, body=body)


__all__ = [
    "DEFAULT_USERNAME",
    "DiscordRetryConfig",
    "DiscordWebhookError",
    "DiscordWebhookTransport",
    "resolve_retry_after_ms",
]
