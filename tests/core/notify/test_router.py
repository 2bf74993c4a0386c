"""カテゴリ振り分けと宛先ごとの独立性を検証する。"""

from __future__ import annotations

import threading

import httpx
import pytest

from zenn_notifier.core.notify import (
    ChannelDispatcher,
    ChannelDispatchError,
    ChannelOutcome,
    Item,
    partition_by_category,
    route,
    run_notifications,
)
from zenn_notifier.infra.discord import (
    DeliveryError,
    DeliveryReceipt,
    DiscordDeliveryController,
    DiscordWebhookTransport,
)
from zenn_notifier.shared.exceptions import Result


def _item(title: str, category: str) -> Item:
    return Item(title=title, link=f"https://zenn.dev/{title}", summary="", category=category)


class RecordingController:
    def __init__(self, failing_destinations: set[str] | None = None) -> None:
        self.failing = failing_destinations or set()
        self.sent: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def deliver(self, destination: str, text: str, *, label: str | None = None):
        with self._lock:
            self.sent.append((destination, text))
        if destination in self.failing:
            return Result.err(DeliveryError("HTTP 401", reason="fatal status", channel=label))
        return Result.ok(DeliveryReceipt(attempts=1, waited_ms=0.0, status_code=204))


def _dispatcher(controller: RecordingController) -> ChannelDispatcher:
    return ChannelDispatcher(
        controller=controller,
        message_builder=lambda item: item.title,
        sleep_func=lambda _seconds: None,
    )


def test_partition_preserves_relative_order() -> None:
    items = [_item("a1", "A"), _item("b1", "B"), _item("a2", "A")]

    partitions = partition_by_category(items)

    assert [item.title for item in partitions["A"]] == ["a1", "a2"]
    assert [item.title for item in partitions["B"]] == ["b1"]


def test_route_dispatches_only_mapped_categories() -> None:
    controller = RecordingController()
    items = [_item("a1", "A"), _item("b1", "B"), _item("a2", "A")]

    outcomes = route(items, {"A": "hook-a", "B": None}, dispatcher=_dispatcher(controller))

    assert controller.sent == [("hook-a", "a1"), ("hook-a", "a2")]
    assert len(outcomes) == 1
    assert outcomes[0].label == "A"
    assert (outcomes[0].attempted, outcomes[0].succeeded) == (2, 2)


def test_route_failure_does_not_block_other_destinations() -> None:
    controller = RecordingController(failing_destinations={"hook-a"})
    items = [_item("a1", "A"), _item("a2", "A"), _item("b1", "B")]

    run = run_notifications(
        items, {"A": "hook-a", "B": "hook-b"}, dispatcher=_dispatcher(controller)
    )

    assert ("hook-b", "b1") in controller.sent
    assert ("hook-a", "a2") not in controller.sent
    assert run.has_failures
    assert [outcome.label for outcome in run.failures] == ["A"]
    assert run.total_sent == 1


def test_route_parallel_keeps_destination_order() -> None:
    controller = RecordingController()
    items = [_item("b1", "B"), _item("a1", "A"), _item("b2", "B")]

    outcomes = route(
        items,
        {"A": "hook-a", "B": "hook-b"},
        dispatcher=_dispatcher(controller),
        max_workers=2,
    )

    assert [outcome.label for outcome in outcomes] == ["A", "B"]
    assert [outcome.succeeded for outcome in outcomes] == [1, 2]
    b_texts = [text for destination, text in controller.sent if destination == "hook-b"]
    assert b_texts == ["b1", "b2"]


def test_route_with_no_items_returns_nothing() -> None:
    controller = RecordingController()

    assert route([], {"A": "hook-a"}, dispatcher=_dispatcher(controller)) == []
    assert controller.sent == []


def test_route_invalid_destination_does_not_block_sibling() -> None:
    posted: list[str] = []

    def http_post(url: str, **_kwargs: object) -> httpx.Response:
        request = httpx.Request("POST", url)
        posted.append(url)
        return httpx.Response(204, request=request)

    transport = DiscordWebhookTransport(http_post=http_post)
    controller = DiscordDeliveryController(transport, sleep_func=lambda _seconds: None)
    dispatcher = ChannelDispatcher(
        controller=controller,
        message_builder=lambda item: item.title,
        sleep_func=lambda _seconds: None,
    )
    items = [_item("a1", "A"), _item("b1", "B")]

    run = run_notifications(
        items,
        {"A": "https://discord.com/api/webhooks/1/tok\n", "B": "https://example.com/hook-b"},
        dispatcher=dispatcher,
    )

    assert posted == ["https://example.com/hook-b"]
    assert [outcome.label for outcome in run.failures] == ["A"]
    assert run.failures[0].first_error.reason == "invalid destination"
    assert run.total_sent == 1


class ExplodingDispatcher:
    def __init__(self, crashing_label: str) -> None:
        self.crashing_label = crashing_label
        self.dispatched: list[str] = []

    def dispatch_channel(self, destination, items, *, label=None):
        self.dispatched.append(label)
        if label == self.crashing_label:
            raise RuntimeError("unexpected")
        return ChannelOutcome(label=label, attempted=len(items), succeeded=len(items))


@pytest.mark.parametrize("max_workers", [1, 2])
def test_route_isolates_unexpected_channel_errors(max_workers: int) -> None:
    dispatcher = ExplodingDispatcher("A")
    items = [_item("a1", "A"), _item("b1", "B")]

    outcomes = route(
        items,
        {"A": "hook-a", "B": "hook-b"},
        dispatcher=dispatcher,
        max_workers=max_workers,
    )

    assert sorted(dispatcher.dispatched) == ["A", "B"]
    assert [outcome.label for outcome in outcomes] == ["A", "B"]
    assert isinstance(outcomes[0].first_error, ChannelDispatchError)
    assert outcomes[1].ok
    assert outcomes[1].succeeded == 1
