from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from zenn_notifier.core.feed import FeedError, ProcessedCache, detect_new_articles
from zenn_notifier.infra.feed import FeedClient
from zenn_notifier.shared.config import AppSettings, get_settings
from zenn_notifier.shared.exceptions import BaseAppError
from zenn_notifier.shared.logging import get_logger
from zenn_notifier.shared.outputs import write_step_outputs

app = typer.Typer(help="RSS から未処理の記事を検出するコマンド")


def _create_feed_client(settings: AppSettings) -> FeedClient:
    return FeedClient(timeout=settings.feed.request_timeout_seconds)


def _emit_outputs(values: dict[str, object], github_output: Path | None) -> None:
    lines = write_step_outputs(values, github_output)
    if github_output is None:
        for line in lines:
            typer.echo(line)


@app.command("detect")
def detect(
    rss_url: Annotated[
        str | None,
        typer.Option("--rss-url", envvar="RSS_URL", help="監視する RSS。省略時は設定値。"),
    ] = None,
    github_output: Annotated[
        Path | None,
        typer.Option(
            "--github-output",
            envvar="GITHUB_OUTPUT",
            help="ステップ出力の追記先",
            show_default=False,
        ),
    ] = None,
) -> None:
    """新着記事を書き出し、既読キャッシュを更新する。"""

    logger = get_logger("cli.feed.detect")
    try:
        settings = get_settings()
    except BaseAppError as exc:
        logger.error("feed_settings_failed", error=str(exc))
        typer.echo(f"設定の読み込みに失敗しました: {exc}")
        raise typer.Exit(code=1) from exc

    url = rss_url or str(settings.feed.rss_url)
    client = _create_feed_client(settings)
    try:
        document = client.fetch(url)
    except FeedError as exc:
        typer.echo(f"RSS の処理に失敗しました: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"Feed title: {document.title}")
    typer.echo(f"Total items in feed: {len(document.entries)}")

    feed_settings = settings.feed
    cache = ProcessedCache.load(feed_settings.cache_path, capacity=feed_settings.cache_size)
    articles = detect_new_articles(document.entries, cache)
    typer.echo(f"Found {len(articles)} new articles")

    if articles:
        payload = [article.to_payload() for article in articles]
        feed_settings.output_path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        typer.echo(f"✅ Saved {len(articles)} new articles to {feed_settings.output_path}")

        cache.extend(article.guid for article in articles)
        cache.save(feed_settings.cache_path)
        typer.echo(f"📝 Updated cache with {len(cache)} processed IDs")

    logger.info("feed_detect_completed", url=url, new_articles=len(articles))
    _emit_outputs(
        {"has-new-articles": bool(articles), "new-articles-count": len(articles)},
        github_output,
    )


__all__ = ["app", "detect"]
