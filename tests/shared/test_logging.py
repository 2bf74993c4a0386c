from __future__ import annotations

from zenn_notifier.shared.logging import redact_webhook_urls


def test_redact_webhook_urls_masks_token() -> None:
    event = {
        "event": "x",
        "url": "https://discord.com/api/webhooks/123456/abc-DEF_ghi",
        "count": 3,
    }

    redacted = redact_webhook_urls(None, "info", event)

    assert redacted["url"] == "https://discord.com/api/webhooks/123456/***"
    assert redacted["count"] == 3
