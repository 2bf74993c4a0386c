"""分類結果の正規化。"""

from .normalizer import (
    AnalysisError,
    build_analysis_document,
    extract_payload,
    normalize_articles,
)

__all__ = [
    "AnalysisError",
    "build_analysis_document",
    "extract_payload",
    "normalize_articles",
]
