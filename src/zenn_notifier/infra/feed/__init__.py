"""RSS 取得クライアント。"""

from .client import FeedClient, FeedDocument

__all__ = ["FeedClient", "FeedDocument"]
