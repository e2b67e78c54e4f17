# Logger settings, given explicitly or resolved from the environment.

from __future__ import annotations
import logging, os
from dataclasses import dataclass
from typing import Optional

DEBUG = "DEBUG"


def _default(value: Optional[str], env_var: str, fallback: str) -> str:
    return value or os.getenv(env_var) or fallback


@dataclass(frozen=True)
class LoggerConfig:
    app_name: str
    app_module_name: str
    log_level: str = "INFO"
    distribution: Optional[str] = None

    @property
    def threshold(self) -> int:
        # only the exact tag "DEBUG" lowers the floor
        return logging.DEBUG if self.log_level == DEBUG else logging.INFO

    @property
    def build_distribution(self) -> str:
        return self.distribution or self.app_name

    @classmethod
    def from_env(
        cls,
        app_name: Optional[str] = None,
        app_module_name: Optional[str] = None,
        log_level: Optional[str] = None,
        distribution: Optional[str] = None,
    ) -> "LoggerConfig":
        """Explicit values first, then APP_NAME / APP_MODULE_NAME / LOG_LEVEL."""
        return cls(
            app_name=_default(app_name, "APP_NAME", "app"),
            app_module_name=_default(app_module_name, "APP_MODULE_NAME", "main"),
            log_level=_default(log_level, "LOG_LEVEL", "INFO"),
            distribution=distribution,
        )
