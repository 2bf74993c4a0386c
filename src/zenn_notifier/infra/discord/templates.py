"""Discord 通知用のメッセージテンプレート。"""

from __future__ import annotations

from zenn_notifier.core.notify.models import Item

DISCORD_MESSAGE_LIMIT = 2000
ELLIPSIS = "…"
SECTION_SEPARATOR = "\n\n"


def truncate_text(value: str, limit: int = 300) -> str:
    """長文を `limit` 文字以内へ短縮する。省略記号を置く余地が無ければ空文字。"""

    if len(value) <= limit:
        return value
    if limit <= len(ELLIPSIS):
        return ""
    return value[: limit - len(ELLIPSIS)].rstrip() + ELLIPSIS


def format_header(title: str) -> str:
    """太字タイトル行と、その後ろの空行。"""

    return f"**【{title}】**{SECTION_SEPARATOR}"


def format_link(link: str) -> str:
    return f"🔗 {link}"


def select_body(item: Item) -> str:
    return (item.summary or item.content_snippet or "").strip()


def build_item_message(item: Item, *, limit: int = DISCORD_MESSAGE_LIMIT) -> str:
    """1 記事分の投稿本文を組み立てる。

    ヘッダー (タイトル) とリンク行は切り詰めず、残りの文字数を本文へ割り当てる。
    本文が収まらない場合は末尾を `…` に置き換え、ヘッダーとリンクだけで
    上限に達する場合は本文を省略する。
    """

    header = format_header(item.title)
    link_line = format_link(item.link)
    body = select_body(item)

    budget = max(0, limit - len(header) - len(link_line))
    text_budget = budget - len(SECTION_SEPARATOR)
    if not body or text_budget <= 0:
        return f"{header}{link_line}"

    shortened = truncate_text(body, text_budget)
    if not shortened:
        return f"{header}{link_line}"
    return f"{header}{shortened}{SECTION_SEPARATOR}{link_line}"


__all__ = [
    "DISCORD_MESSAGE_LIMIT",
    "ELLIPSIS",
    "build_item_message",
    "format_header",
    "format_link",
    "select_body",
    "truncate_text",
]
