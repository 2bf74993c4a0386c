"""Discord Webhook 通知クライアント。"""

from .client import (
    DEFAULT_USERNAME,
    DiscordRetryConfig,
    DiscordWebhookError,
    DiscordWebhookTransport,
    resolve_retry_after_ms,
)
from .outcomes import (
    DeliveryOutcome,
    Fatal,
    InvalidDestination,
    NetworkError,
    RateLimited,
    Success,
)
from .retry import DeliveryError, DeliveryReceipt, DiscordDeliveryController
from .templates import DISCORD_MESSAGE_LIMIT, build_item_message, truncate_text

__all__ = [
    "DEFAULT_USERNAME",
    "DISCORD_MESSAGE_LIMIT",
    "DeliveryError",
    "DeliveryOutcome",
    "DeliveryReceipt",
    "DiscordDeliveryController",
    "DiscordRetryConfig",
    "DiscordWebhookError",
    "DiscordWebhookTransport",
    "Fatal",
    "InvalidDestination",
    "NetworkError",
    "RateLimited",
    "Success",
    "build_item_message",
    "resolve_retry_after_ms",
    "truncate_text",
]
