"""共有レイヤの公開インターフェース。"""

from .config import AppSettings, get_settings
from .exceptions import BaseAppError, ConfigurationError, DomainError, InputDataError, Result
from .logging import configure_logging, get_logger
from .outputs import write_step_outputs
from .types import isoformat_z, utc_now

__all__ = [
    "AppSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "BaseAppError",
    "ConfigurationError",
    "DomainError",
    "InputDataError",
    "Result",
    "isoformat_z",
    "utc_now",
    "write_step_outputs",
]
