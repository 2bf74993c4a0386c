from __future__ import annotations

import typer

from zenn_notifier.cli.commands import analysis, feed, notify
from zenn_notifier.shared.config import get_settings
from zenn_notifier.shared.exceptions import ConfigurationError
from zenn_notifier.shared.logging import configure_logging

app = typer.Typer(help="Zenn RSS 新着記事の検出・分類結果整形・Discord 通知を行うCLI")

app.add_typer(feed.app, name="feed", help="RSS の新着記事検出")
app.add_typer(analysis.app, name="analysis", help="分類結果の正規化")
app.add_typer(notify.app, name="notify", help="Discord Webhook への通知")


def main() -> None:
    """エントリポイント。"""

    try:
        settings = get_settings()
    except ConfigurationError:
        # 設定エラーは各コマンドが利用者向けに報告する
        configure_logging()
    else:
        configure_logging(settings.log_level, json_output=settings.log_json)
    app()


if __name__ == "__main__":  # pragma: no cover - CLI エントリ
    main()
