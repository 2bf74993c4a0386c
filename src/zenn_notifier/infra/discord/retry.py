"""レート制限に合わせて送信を繰り返す配信制御。"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from zenn_notifier.shared.exceptions import Result
from zenn_notifier.shared.logging import get_logger

from .client import DiscordRetryConfig, DiscordWebhookError
from .outcomes import (
    DeliveryOutcome,
    Fatal,
    InvalidDestination,
    NetworkError,
    RateLimited,
    Success,
)


class WebhookTransportProtocol(Protocol):
    def send(self, destination: str, text: str) -> DeliveryOutcome:
        """1 回だけ送信し、結果を分類して返す。"""


class DeliveryError(DiscordWebhookError):
    """1 メッセージの配信が最終的に失敗したことを表す。"""

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str,
        channel: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
        attempts: int = 1,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.channel = channel
        self.status_code = status_code
        self.body = body
        self.attempts = attempts


@dataclass(slots=True, frozen=True)
class DeliveryReceipt:
    """配信成功時の記録。"""

    attempts: int
    waited_ms: float
    status_code: int


class DiscordDeliveryController:
    """Transport をラップし、429 のときだけ指数バックオフで再送する。

    致命的なステータスと通信エラーは即座に失敗として返す。
    リトライ回数は `deliver` 呼び出しごとに数え直す。
    """

    def __init__(
        self,
        transport: WebhookTransportProtocol,
        *,
        retry_config: DiscordRetryConfig | None = None,
        sleep_func: Callable[[float], None] = time.sleep,
        logger=None,
    ) -> None:
        self._transport = transport
        self._retry_config = retry_config or DiscordRetryConfig()
        self._sleep = sleep_func
        self._logger = logger or get_logger(__name__, component="discord-delivery")

    def deliver(
        self, destination: str, text: str, *, label: str | None = None
    ) -> Result[DeliveryReceipt, DeliveryError]:
        config = self._retry_config
        retries = 0
        calls = 0
        waited_ms = 0.0

        while True:
            calls += 1
            outcome = self._transport.send(destination, text)

            if isinstance(outcome, Success):
                return Result.ok(
                    DeliveryReceipt(
                        attempts=calls, waited_ms=waited_ms, status_code=outcome.status_code
                    )
                )

            if isinstance(outcome, RateLimited):
                retries += 1
                if retries > config.max_retries:
                    self._logger.error(
                        "discord_webhook_retry_exhausted",
                        channel=label,
                        attempts=calls,
                        waited_ms=waited_ms,
                    )
                    return Result.err(
                        DeliveryError(
                            f"{label or 'Discord'}: リトライ上限 ({config.max_retries} 回) に達しました",
                            reason="retry budget exhausted",
                            channel=label,
                            status_code=outcome.status_code,
                            attempts=calls,
                        )
                    )

                wait_ms = config.wait_ms(outcome.retry_after_ms, retries)
                self._logger.warning(
                    "discord_webhook_rate_limited",
                    channel=label,
                    attempt=retries,
                    retry_after_ms=outcome.retry_after_ms,
                    wait_ms=wait_ms,
                )
                self._sleep(wait_ms / 1000)
                waited_ms += wait_ms
                continue

            if isinstance(outcome, Fatal):
                self._logger.error(
                    "discord_webhook_failed",
                    channel=label,
                    status_code=outcome.status_code,
                    attempt=calls,
                    body=outcome.body or None,
                )
                return Result.err(
                    DeliveryError(
                        f"{label or 'Discord'}: HTTP {outcome.status_code}",
                        reason="fatal status",
                        channel=label,
                        status_code=outcome.status_code,
                        body=outcome.body,
                        attempts=calls,
                    )
                )

            if isinstance(outcome, NetworkError):
                self._logger.error(
                    "discord_webhook_network_error",
                    channel=label,
                    attempt=calls,
                    message=str(outcome.cause),
                )
                return Result.err(
                    DeliveryError(
                        f"{label or 'Discord'}: 通信に失敗しました ({outcome.cause})",
                        reason="network error",
                        channel=label,
                        attempts=calls,
                    )
                )

            if isinstance(outcome, InvalidDestination):
                self._logger.error(
                    "discord_webhook_invalid_destination",
                    channel=label,
                    message=str(outcome.cause),
                )
                return Result.err(
                    DeliveryError(
                        f"{label or 'Discord'}: Webhook URL が不正です ({outcome.cause})",
                        reason="invalid destination",
                        channel=label,
                        attempts=calls,
                    )
                )

            msg = f"Unsupported delivery outcome: {outcome!r}"
            raise TypeError(msg)


__all__ = [
    "DeliveryError",
    "DeliveryReceipt",
    "DiscordDeliveryController",
    "WebhookTransportProtocol",
]
