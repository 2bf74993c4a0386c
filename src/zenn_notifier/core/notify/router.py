"""カテゴリごとに記事を振り分け、宛先ごとにディスパッチャを呼び出す。"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from structlog.stdlib import BoundLogger

from zenn_notifier.shared.exceptions import DomainError
from zenn_notifier.shared.logging import get_logger

from .dispatcher import ChannelDispatcher
from .models import ChannelOutcome, Item


class ChannelDispatchError(DomainError):
    """チャンネル配信が想定外の例外で中断したことを示す。"""

    default_message = "チャンネル配信が中断しました"


@dataclass(slots=True)
class NotificationRun:
    """1 回の通知処理で得られたチャンネル別結果。"""

    outcomes: list[ChannelOutcome] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return any(not outcome.ok for outcome in self.outcomes)

    @property
    def total_sent(self) -> int:
        return sum(outcome.succeeded for outcome in self.outcomes)

    @property
    def failures(self) -> tuple[ChannelOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if not outcome.ok)


def partition_by_category(items: Iterable[Item]) -> dict[str, list[Item]]:
    """カテゴリごとのキューへ分割する。各キュー内の順序は入力順を保つ。"""

    partitions: dict[str, list[Item]] = {}
    for item in items:
        partitions.setdefault(str(item.category), []).append(item)
    return partitions


def _dispatch_isolated(
    dispatcher: ChannelDispatcher,
    destination: str,
    queue: list[Item],
    *,
    label: str,
    logger: BoundLogger,
) -> ChannelOutcome | None:
    """想定外の例外を 1 チャンネルの失敗として閉じ込める。"""

    try:
        return dispatcher.dispatch_channel(destination, queue, label=label)
    except Exception as exc:  # noqa: BLE001
        logger.error("channel_dispatch_crashed", channel=label, error=str(exc), exc_info=True)
        error = ChannelDispatchError(f"{label}: 配信中に予期しないエラーが発生しました ({exc})")
        return ChannelOutcome(label=label, first_error=error)


def route(
    items: Sequence[Item],
    destinations_by_category: Mapping[str, str | None],
    *,
    dispatcher: ChannelDispatcher,
    max_workers: int = 1,
    logger: BoundLogger | None = None,
) -> list[ChannelOutcome]:
    """宛先が設定されたカテゴリだけを配信し、結果を宛先の定義順で返す。

    `max_workers` が 2 以上ならチャンネルをスレッドで並行配信する。
    チャンネル同士は状態を共有しないため、一方の失敗は他方に影響しない。
    """

    log = logger or get_logger(__name__, component="router")
    partitions = partition_by_category(items)

    for category, queue in partitions.items():
        if not destinations_by_category.get(category):
            log.info("route_category_unmapped", category=category, skipped=len(queue))

    jobs: list[tuple[str, str, list[Item]]] = []
    for category, destination in destinations_by_category.items():
        queue = partitions.get(str(category), [])
        if destination and queue:
            jobs.append((str(category), destination, queue))

    if max_workers <= 1 or len(jobs) <= 1:
        outcomes = [
            _dispatch_isolated(dispatcher, destination, queue, label=category, logger=log)
            for category, destination, queue in jobs
        ]
    else:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(jobs))) as executor:
            futures = [
                executor.submit(
                    _dispatch_isolated, dispatcher, destination, queue, label=category, logger=log
                )
                for category, destination, queue in jobs
            ]
            outcomes = [future.result() for future in futures]

    return [outcome for outcome in outcomes if outcome is not None]


def run_notifications(
    items: Sequence[Item],
    destinations_by_category: Mapping[str, str | None],
    *,
    dispatcher: ChannelDispatcher,
    max_workers: int = 1,
) -> NotificationRun:
    """`route` の結果を NotificationRun にまとめる。"""

    return NotificationRun(
        outcomes=route(
            items,
            destinations_by_category,
            dispatcher=dispatcher,
            max_workers=max_workers,
        )
    )


__all__ = [
    "ChannelDispatchError",
    "NotificationRun", "partition_by_category", "route", "run_notifications"]
