"""RSS 新着記事の検出と既読管理。"""

from .cache import DEFAULT_CACHE_SIZE, ProcessedCache
from .detector import FeedArticle, FeedError, article_key, detect_new_articles

__all__ = [
    "DEFAULT_CACHE_SIZE",
    "FeedArticle",
    "FeedError",
    "ProcessedCache",
    "article_key",
    "detect_new_articles",
]
