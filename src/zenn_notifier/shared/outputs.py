"""GitHub Actions のステップ出力 (`GITHUB_OUTPUT`) ヘルパー。"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_step_outputs(values: Mapping[str, object]) -> tuple[str, ...]:
    return tuple(f"{key}={_format_value(value)}" for key, value in values.items())


def write_step_outputs(values: Mapping[str, object], path: Path | None) -> tuple[str, ...]:
    """`key=value` 行を出力ファイルへ追記し、書き込んだ行を返す。

    `path` が None の場合は何も書き込まず、呼び出し側で標準出力へ表示する。
    """

    lines = format_step_outputs(values)
    if path is not None:
        with path.open("a", encoding="utf-8") as fh:
            for line in lines:
                fh.write(f"{line}\n")
    return lines


__all__ = ["format_step_outputs", "write_step_outputs"]
