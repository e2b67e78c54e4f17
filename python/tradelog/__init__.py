__all__ = [
    "init_logger", "init_logger_from_env", "Logger", "LoggerConfig",
    "DebugLevel", "DebugOptions", "TradingError",
]
__version__ = "0.1.0"

from .logging import Logger, DebugLevel, DebugOptions
from .config import LoggerConfig
from .errors import TradingError
from .bootstrap import init_logger, init_logger_from_env
