"""shared.config の読み込みと検証を確認するテスト。"""

from __future__ import annotations

import pytest

from zenn_notifier.shared.config import get_settings
from zenn_notifier.shared.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _cleanup_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults(monkeypatch, tmp_path) -> None:
    """環境変数が無くても既定値で起動でき、Webhook は未設定になる。"""

    monkeypatch.chdir(tmp_path)
    for key in ("DISCORD__AI_WEBHOOK_URL", "DISCORD__OTHER_WEBHOOK_URL"):
        monkeypatch.delenv(key, raising=False)

    settings = get_settings()

    assert settings.discord.ai_webhook_url is None
    assert settings.discord.other_webhook_url is None
    assert settings.discord.webhook_username == "Zenn RSS Monitor"
    assert settings.delivery.message_limit == 2000
    assert settings.delivery.pacing_delay_ms == 400
    assert settings.delivery.max_retries == 5
    assert settings.delivery.backoff_factor == 1.6
    assert settings.delivery.backoff_cap_ms == 10_000
    assert settings.delivery.default_retry_after_ms == 1_500
    assert settings.delivery.retry_after_seconds_threshold == 50
    assert settings.feed.cache_size == 50
    assert str(settings.feed.rss_url) == "https://zenn.dev/feed"


def test_settings_load_from_nested_env(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    for key, value in {
        "DISCORD__AI_WEBHOOK_URL": "https://discord.com/api/webhooks/1/ai",
        "DISCORD__WEBHOOK_USERNAME": "Bot",
        "DELIVERY__MAX_RETRIES": "2",
        "DELIVERY__PACING_DELAY_MS": "0",
        "FEED__CACHE_PATH": "./state/cache.json",
    }.items():
        monkeypatch.setenv(key, value)

    settings = get_settings()

    assert settings.discord.ai_webhook_url is not None
    assert (
        settings.discord.ai_webhook_url.get_secret_value()
        == "https://discord.com/api/webhooks/1/ai"
    )
    assert settings.discord.webhook_username == "Bot"
    assert settings.delivery.max_retries == 2
    assert settings.delivery.pacing_delay_ms == 0
    assert str(settings.feed.cache_path) == "state/cache.json"


def test_settings_reject_invalid_values(monkeypatch, tmp_path) -> None:
    """不正な調整値は ConfigurationError になる。"""

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DELIVERY__BACKOFF_FACTOR", "0.5")

    with pytest.raises(ConfigurationError):
        get_settings()
