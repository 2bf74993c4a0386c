from __future__ import annotations

import time
from collections.abc import Callable
from functools import partial
from pathlib import Path
from typing import Annotated

import httpx
import typer
from pydantic import SecretStr
from structlog.stdlib import BoundLogger

from zenn_notifier.core.notify import (
    Category,
    ChannelDispatcher,
    ChannelOutcome,
    load_analyzed_items,
    run_notifications,
)
from zenn_notifier.infra.discord import (
    DiscordDeliveryController,
    DiscordRetryConfig,
    DiscordWebhookTransport,
    build_item_message,
)
from zenn_notifier.shared.config import AppSettings, get_settings
from zenn_notifier.shared.exceptions import BaseAppError
from zenn_notifier.shared.logging import get_logger

app = typer.Typer(help="分類済み記事を Discord Webhook へ通知するコマンド")


def _secret_value(secret: SecretStr | None) -> str | None:
    return secret.get_secret_value() if secret is not None else None


def _clean_url(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _resolve_destinations(
    settings: AppSettings, *, ai_webhook: str | None, other_webhook: str | None
) -> dict[str, str | None]:
    discord_settings = settings.discord
    return {
        Category.AI.value: _clean_url(
            ai_webhook or _secret_value(discord_settings.ai_webhook_url)
        ),
        Category.OTHER.value: _clean_url(
            other_webhook or _secret_value(discord_settings.other_webhook_url)
        ),
    }


def _retry_config(settings: AppSettings) -> DiscordRetryConfig:
    delivery = settings.delivery
    return DiscordRetryConfig(
        max_retries=delivery.max_retries,
        backoff_factor=delivery.backoff_factor,
        backoff_cap_ms=delivery.backoff_cap_ms,
        default_retry_after_ms=delivery.default_retry_after_ms,
        retry_after_seconds_threshold=delivery.retry_after_seconds_threshold,
    )


def _build_dispatcher(
    settings: AppSettings,
    *,
    logger: BoundLogger,
    http_post: Callable[..., httpx.Response] = httpx.post,
    sleep_func: Callable[[float], None] = time.sleep,
) -> ChannelDispatcher:
    delivery = settings.delivery
    retry_config = _retry_config(settings)
    transport = DiscordWebhookTransport(
        username=settings.discord.webhook_username,
        retry_config=retry_config,
        http_post=http_post,
        timeout=delivery.request_timeout_seconds,
        logger=logger,
    )
    controller = DiscordDeliveryController(
        transport, retry_config=retry_config, sleep_func=sleep_func, logger=logger
    )
    return ChannelDispatcher(
        controller=controller,
        message_builder=partial(build_item_message, limit=delivery.message_limit),
        pacing_delay_ms=delivery.pacing_delay_ms,
        sleep_func=sleep_func,
        logger=logger,
    )


def _report(outcome: ChannelOutcome) -> str:
    if outcome.ok:
        return f"✅ {outcome.label}: {outcome.succeeded}件送信完了"
    title = outcome.failed_item.title if outcome.failed_item else "(不明)"
    return (
        f"❌ {outcome.label}: 「{title}」の送信に失敗しました "
        f"({outcome.succeeded}/{outcome.attempted}件成功): {outcome.first_error}"
    )


@app.command("send")
def send(
    input_path: Annotated[
        Path | None,
        typer.Option("--input", "-i", help="分類済み記事ファイル。省略時は設定値。"),
    ] = None,
    ai_webhook: Annotated[
        str | None,
        typer.Option(
            "--ai-webhook",
            envvar="DISCORD_AI_WEBHOOK",
            help="AI関連 カテゴリの Webhook URL",
            show_default=False,
        ),
    ] = None,
    other_webhook: Annotated[
        str | None,
        typer.Option(
            "--other-webhook",
            envvar="DISCORD_OTHER_WEBHOOK",
            help="AI以外 カテゴリの Webhook URL",
            show_default=False,
        ),
    ] = None,
    max_workers: Annotated[
        int | None,
        typer.Option("--max-workers", min=1, help="チャンネルを並行処理するワーカー数"),
    ] = None,
) -> None:
    """分類済み記事をカテゴリごとの Webhook へ順番に送信する。"""

    logger = get_logger("cli.notify.send")
    try:
        settings = get_settings()
        path = input_path or settings.analysis.output_path
        items = load_analyzed_items(path)
    except BaseAppError as exc:
        logger.error("notify_input_failed", error=str(exc))
        typer.echo(f"入力の読み込みに失敗しました: {exc}")
        raise typer.Exit(code=1) from exc

    if not items:
        typer.echo("通知対象の記事はありません")
        return

    destinations = _resolve_destinations(
        settings, ai_webhook=ai_webhook, other_webhook=other_webhook
    )
    dispatcher = _build_dispatcher(settings, logger=logger)
    run = run_notifications(
        items,
        destinations,
        dispatcher=dispatcher,
        max_workers=max_workers or settings.delivery.max_workers,
    )

    for outcome in run.outcomes:
        typer.echo(_report(outcome))

    logger.info(
        "notify_completed",
        items=len(items),
        sent=run.total_sent,
        failed_channels=[outcome.label for outcome in run.failures],
    )
    if run.has_failures:
        raise typer.Exit(code=1)

    typer.echo("🎉 全て送信完了")


__all__ = ["app", "send"]
