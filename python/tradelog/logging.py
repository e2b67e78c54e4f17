# JSON-structured logging facade over structlog.
# Loggers are built by bootstrap.init_logger; every entry already carries the
# app name (``logger``) and module name (``app_module``).

from __future__ import annotations
import enum
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Tuple, Union

from . import diagnostics
from .config import LoggerConfig
from .errors import DomainError

LOGGABLE_TYPES = (str, int, float, timedelta, BaseException)
# Keys written by the pipeline itself; caller values under these names would be lost.
RESERVED_FIELDS = frozenset({
    "event", "level", "timestamp", "logger", "app_module",
    "filename", "lineno", "func_name",
    "exc_info", "exception", "stack_info", "stack", "error",
})


class DebugLevel(enum.Enum):
    INFO = "INFO"
    STACK = "STACK"
    MEM = "MEM"
    GC = "GC"
    BUILD = "BUILD"
    ALL = "ALL"
    INVALID = ""

    @classmethod
    def parse(cls, value: Union["DebugLevel", str]) -> "DebugLevel":
        """Map a level tag to its member; unknown tags map to INVALID."""
        if isinstance(value, cls):
            return value
        if value and isinstance(value, str) and value in cls.__members__:
            return cls[value]
        return cls.INVALID

    def includes(self, section: "DebugLevel") -> bool:
        if self is DebugLevel.INVALID:
            return False
        return self is section or self is DebugLevel.ALL


@dataclass(frozen=True)
class DebugOptions:
    enabled: bool = False
    level: Union[DebugLevel, str] = DebugLevel.INFO


def _check_fields(fields: Dict[str, Any]) -> Tuple[Dict[str, Any], List[Tuple[str, str]]]:
    """Split caller fields into loggable ones and (key, reason) problems.

    Reserved keys are dropped. Values of other types are kept as their repr.
    """
    clean: Dict[str, Any] = {}
    problems: List[Tuple[str, str]] = []
    for key, value in fields.items():
        if key in RESERVED_FIELDS:
            problems.append((key, "reserved field name"))
        elif isinstance(value, LOGGABLE_TYPES):
            clean[key] = value
        else:
            problems.append((key, f"unsupported type {type(value).__name__}"))
            clean[key] = repr(value)
    return clean, problems


def render_field_values(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """structlog processor: durations as float seconds, exceptions as text."""
    for key, value in event_dict.items():
        if isinstance(value, timedelta):
            event_dict[key] = value.total_seconds()
        elif isinstance(value, BaseException):
            event_dict[key] = str(value)
    return event_dict


class Logger:
    def __init__(self, log: Any, config: LoggerConfig) -> None:
        self._log = log
        self.config = config

    def _fields(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        clean, problems = _check_fields(fields)
        for key, reason in problems:
            self._log.error(f"Invalid log field: {key}", reason=reason)
        return clean

    def info(self, msg: str, **fields: Any) -> None:
        self._log.info(msg, **self._fields(fields))

    def verbose(self, msg: str, **fields: Any) -> None:
        """Emit at debug severity; dropped unless initialized with "DEBUG"."""
        self._log.debug(msg, **self._fields(fields))

    def error(self, err: DomainError, **fields: Any) -> None:
        fields = self._fields(fields)
        message = f"Error: {err}, ErrorCode: {err.error_code()}, Details: {err.details()}"
        cause = err.original_error()
        if cause is not None:
            fields["error"] = cause
            if isinstance(cause, BaseException) and cause.__traceback__ is not None:
                fields["exc_info"] = cause
        self._log.error(message, **fields)

    def debug(self, msg: str, options: DebugOptions = DebugOptions(), **fields: Any) -> None:
        """Log ``msg`` and, when enabled, the runtime sections ``options.level`` selects.

        The message itself is emitted once, before ``options.enabled`` is
        looked at. An unknown level is reported at error severity and the
        runtime snapshots are still taken, but no section is emitted.
        """
        self._log.info(msg, **self._fields(fields))
        if not options.enabled:
            return

        level = DebugLevel.parse(options.level)
        if level is DebugLevel.INVALID:
            shown = getattr(options.level, "name", options.level)
            self._log.error(f"Invalid debug option: {shown}")

        gc_stats = diagnostics.read_gc_stats()
        mem_stats = diagnostics.read_memory_stats()
        build_info = diagnostics.read_build_info(self.config.build_distribution)

        if level.includes(DebugLevel.STACK):
            self._log.info("Stack Trace", stack_info=True)
        if level.includes(DebugLevel.MEM):
            for line in mem_stats.entries():
                self._log.info(line)
        if level.includes(DebugLevel.GC):
            for line in gc_stats.entries():
                self._log.info(line)
        if level.includes(DebugLevel.BUILD) and build_info is not None:
            self._log.info(f"Build Info: {build_info}")
