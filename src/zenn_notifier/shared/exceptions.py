"""共通例外と配信結果を表す Result 型。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar


class BaseAppError(Exception):
    """全レイヤで共有するベース例外。"""

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ConfigurationError(BaseAppError):
    """設定読み込みや不正値を示すエラー。"""

    default_message = "Configuration is invalid or missing"


class DomainError(BaseAppError):
    """フィード処理・分類結果処理などドメイン層の基底例外。"""

    default_message = "Domain layer error"


class InputDataError(DomainError):
    """中間ファイル (new-articles.json など) が読めない場合のエラー。"""

    default_message = "入力データの読み込みに失敗しました"


T = TypeVar("T")
E = TypeVar("E", bound=BaseAppError)


@dataclass(slots=True)
class Result(Generic[T, E]):
    """成功値か失敗 (例外インスタンス) のどちらか一方を保持する。

    リトライ制御のように「失敗も正常な戻り値として扱いたい」箇所で使い、
    呼び出し側は `is_ok` / `is_err` で分岐する。
    """

    value: T | None = None
    error: E | None = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            msg = "Result must contain either value or error"
            raise ValueError(msg)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        if self.value is None:
            msg = "Cannot unwrap error result"
            raise RuntimeError(msg)
        return self.value

    def unwrap_err(self) -> E:
        if self.error is None:
            msg = "Cannot unwrap ok result"
            raise RuntimeError(msg)
        return self.error

    @classmethod
    def ok(cls, value: T) -> Result[T, E]:
        return cls(value=value)

    @classmethod
    def err(cls, error: E) -> Result[T, E]:
        return cls(error=error)


__all__ = [
    "BaseAppError",
    "ConfigurationError",
    "DomainError",
    "InputDataError",
    "Result",
]
