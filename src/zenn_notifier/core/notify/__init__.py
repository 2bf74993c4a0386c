"""分類済み記事の振り分けとチャンネル配信。"""

from .dispatcher import ChannelDispatcher, DeliveryControllerProtocol
from .loader import load_analyzed_items
from .models import Category, ChannelOutcome, Item
from .router import (
    ChannelDispatchError,
    NotificationRun,
    partition_by_category,
    route,
    run_notifications,
)

__all__ = [
    "Category",
    "ChannelDispatchError",
    "ChannelDispatcher",
    "ChannelOutcome",
    "DeliveryControllerProtocol",
    "Item",
    "NotificationRun",
    "load_analyzed_items",
    "partition_by_category",
    "route",
    "run_notifications",
]
