from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from zenn_notifier.cli.commands.feed import _emit_outputs
from zenn_notifier.core.analysis import (
    AnalysisError,
    build_analysis_document,
    extract_payload,
    normalize_articles,
)
from zenn_notifier.shared.config import get_settings
from zenn_notifier.shared.exceptions import BaseAppError
from zenn_notifier.shared.logging import get_logger

app = typer.Typer(help="分類器の出力を通知用ファイルへ整形するコマンド")


@app.command("process")
def process(
    gemini_json: Annotated[
        str,
        typer.Option(
            "--gemini-json",
            envvar="GEMINI_JSON",
            help="分類器の生出力 (JSON)",
            show_default=False,
        ),
    ] = "",
    output_path: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="出力ファイル。省略時は設定値。"),
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
    """分類結果を検証・正規化し、カテゴリ別件数とともに保存する。"""

    logger = get_logger("cli.analysis.process")
    try:
        settings = get_settings()
        payload = extract_payload(gemini_json)
    except AnalysisError as exc:
        logger.error("analysis_input_empty", error=str(exc))
        typer.echo("GEMINI_JSON environment variable is empty.")
        raise typer.Exit(code=1) from exc
    except BaseAppError as exc:
        logger.error("analysis_settings_failed", error=str(exc))
        typer.echo(f"設定の読み込みに失敗しました: {exc}")
        raise typer.Exit(code=1) from exc

    articles = normalize_articles(payload)
    document = build_analysis_document(articles, source=settings.analysis.source)
    target = output_path or settings.analysis.output_path
    target.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")

    metadata = document["metadata"]
    logger.info(
        "analysis_processed",
        total=metadata["totalCount"],
        ai_related=metadata["aiRelatedCount"],
        other=metadata["otherCount"],
    )
    typer.echo(f"✅ Processed and saved {len(articles)} analyzed articles")
    _emit_outputs({"analyzed-count": len(articles)}, github_output)


__all__ = ["app", "process"]
