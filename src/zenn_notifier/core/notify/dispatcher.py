"""チャンネル単位でキューを順次配信するディスパッチャ。"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from structlog.stdlib import BoundLogger

from zenn_notifier.shared.exceptions import BaseAppError, Result
from zenn_notifier.shared.logging import get_logger

from .models import ChannelOutcome, Item

DEFAULT_PACING_DELAY_MS = 400


class DeliveryControllerProtocol(Protocol):
    """1 メッセージを (必要ならリトライしつつ) 届ける配信制御。"""

    def deliver(
        self, destination: str, text: str, *, label: str | None = None
    ) -> Result[Any, BaseAppError]:
        """送信結果を Result で返す。例外は送出しない。"""


@dataclass(slots=True)
class ChannelDispatcher:
    """1 つの宛先に対し、記事を入力順に 1 件ずつ送信する。

    致命的な失敗が起きた時点でその宛先の残りキューは打ち切る。
    呼び出しごとの状態はローカル変数のみで持つため、宛先ごとに並行実行してよい。
    """

    controller: DeliveryControllerProtocol
    message_builder: Callable[[Item], str]
    pacing_delay_ms: int = DEFAULT_PACING_DELAY_MS
    sleep_func: Callable[[float], None] = time.sleep
    logger: BoundLogger = field(
        default_factory=lambda: get_logger(__name__, component="channel-dispatcher")
    )

    def dispatch_channel(
        self,
        destination: str | None,
        items: Sequence[Item],
        *,
        label: str | None = None,
    ) -> ChannelOutcome | None:
        """宛先キューを配信し、集計結果を返す。宛先未設定または空キューなら None。"""

        channel = label or "channel"
        if not destination or not items:
            self.logger.info("channel_dispatch_skipped", channel=channel, queued=len(items))
            return None

        outcome = ChannelOutcome(label=channel)
        total = len(items)
        for index, item in enumerate(items):
            text = self.message_builder(item)
            outcome.attempted += 1
            result = self.controller.deliver(destination, text, label=channel)

            if result.is_err:
                error = result.unwrap_err()
                outcome.first_error = error
                outcome.failed_item = item
                self.logger.error(
                    "channel_dispatch_aborted",
                    channel=channel,
                    title=item.title,
                    position=index + 1,
                    remaining=total - index - 1,
                    error=str(error),
                )
                break

            outcome.succeeded += 1
            if index + 1 < total and self.pacing_delay_ms > 0:
                self.sleep_func(self.pacing_delay_ms / 1000)

        self.logger.info(
            "channel_dispatch_completed",
            channel=channel,
            attempted=outcome.attempted,
            succeeded=outcome.succeeded,
            ok=outcome.ok,
        )
        return outcome


__all__ = ["ChannelDispatcher", "DeliveryControllerProtocol", "DEFAULT_PACING_DELAY_MS"]
