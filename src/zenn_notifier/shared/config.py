"""アプリケーション全体で共有する設定ローダー。"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

EnvName = Literal["local", "test", "ci", "production"]


class DiscordSettings(BaseModel):
    """カテゴリごとの Discord Webhook 設定。

    Webhook が未設定のカテゴリは通知対象外として扱う (エラーにはしない)。
    """

    ai_webhook_url: SecretStr | None = Field(None, description="AI関連 カテゴリの投稿先")
    other_webhook_url: SecretStr | None = Field(None, description="AI以外 カテゴリの投稿先")
    webhook_username: str = Field("Zenn RSS Monitor", description="Webhook 投稿時のユーザー名")


class DeliverySettings(BaseModel):
    """配信制御 (文字数制限・ペーシング・バックオフ) の調整値。"""

    message_limit: int = Field(2000, gt=0, description="1 メッセージの最大文字数")
    pacing_delay_ms: int = Field(400, ge=0, description="送信成功後に次の送信まで待つ時間")
    max_retries: int = Field(5, ge=0, description="レート制限時の最大リトライ回数")
    backoff_factor: float = Field(1.6, ge=1.0, description="リトライごとの待機倍率")
    backoff_cap_ms: int = Field(10_000, gt=0, description="1 回あたりの待機上限")
    default_retry_after_ms: int = Field(
        1_500, gt=0, description="Retry-After が得られない場合の待機時間"
    )
    retry_after_seconds_threshold: float = Field(
        50, gt=0, description="この値未満の Retry-After は秒とみなしてミリ秒へ換算する"
    )
    request_timeout_seconds: float = Field(10.0, gt=0, description="HTTP タイムアウト")
    max_workers: int = Field(1, ge=1, description="チャンネルを並行処理する最大ワーカー数")


class FeedSettings(BaseModel):
    """RSS 取得と既読キャッシュの設定。"""

    rss_url: AnyHttpUrl = Field("https://zenn.dev/feed", description="監視対象の RSS")
    cache_path: Path = Field(Path("cache/rss-processed.json"), description="既読 ID キャッシュ")
    cache_size: int = Field(50, gt=0, description="キャッシュに保持する既読 ID の件数")
    output_path: Path = Field(Path("new-articles.json"), description="新着記事の出力先")
    request_timeout_seconds: float = Field(15.0, gt=0)


class AnalysisSettings(BaseModel):
    """分類結果ファイルの設定。"""

    output_path: Path = Field(
        Path("analyzed-articles.json"), description="分類済み記事の出力先 (通知の入力)"
    )
    source: str = Field("gemini", description="metadata.source に記録する分類器名")


class AppSettings(BaseSettings):
    """共有設定。`.env` 読み込みと環境変数バリデーションを担う。"""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: EnvName = Field("local", description="実行環境識別子")
    log_level: str = Field("INFO", description="ルートロガーのログレベル")
    log_json: bool = Field(False, description="JSON 形式でログを出力するか")
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    feed: FeedSettings = Field(default_factory=FeedSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """設定をロードし、再利用する。

    LRU キャッシュによりプロセス内での重複読み込みを防ぎ、
    `pytest` などから `get_settings.cache_clear()` を呼び出すことで再読込できる。
    """

    try:
        return AppSettings()
    except ValidationError as exc:  # pragma: no cover - ValidationError carries context
        raise ConfigurationError(str(exc)) from exc


__all__ = [
    "AnalysisSettings",
    "AppSettings",
    "DeliverySettings",
    "DiscordSettings",
    "EnvName",
    "FeedSettings",
    "get_settings",
]
