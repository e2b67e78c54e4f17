# Logger construction: a private structlog pipeline per Logger, JSON to stderr.

from __future__ import annotations
import sys
from typing import Any, List, Optional, TextIO

import structlog

from .config import LoggerConfig
from .diagnostics import gc_monitor
from .logging import Logger, render_field_values

# Frames from this package are skipped when attributing entries to a call site.
# Matching is by prefix, so the trailing dot keeps modules like tradelog_app apart.
_IGNORED_FRAMES = ["tradelog."]


def _processors() -> List[Any]:
    return [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            parameters={
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            },
            additional_ignores=_IGNORED_FRAMES,
        ),
        structlog.processors.StackInfoRenderer(additional_ignores=_IGNORED_FRAMES),
        structlog.processors.format_exc_info,
        render_field_values,
        structlog.processors.JSONRenderer(),
    ]


def build_logger(cfg: LoggerConfig, stream: Optional[TextIO] = None) -> Logger:
    log = structlog.wrap_logger(
        structlog.PrintLogger(file=stream if stream is not None else sys.stderr),
        processors=_processors(),
        wrapper_class=structlog.make_filtering_bound_logger(cfg.threshold),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
    gc_monitor.install()
    return Logger(log.bind(logger=cfg.app_name, app_module=cfg.app_module_name), cfg)


def init_logger(
    app_name: str,
    app_module_name: str,
    log_level: str,
    *,
    stream: Optional[TextIO] = None,
    distribution: Optional[str] = None,
) -> Logger:
    """Build a Logger writing one JSON object per entry to ``stream`` (stderr).

    ``log_level`` must be exactly "DEBUG" to let verbose entries through;
    anything else falls back to the informational threshold. ``distribution``
    names the installed package reported by build diagnostics and defaults
    to ``app_name``.
    """
    return build_logger(LoggerConfig(app_name, app_module_name, log_level, distribution), stream)


def init_logger_from_env(
    app_name: Optional[str] = None,
    app_module_name: Optional[str] = None,
    log_level: Optional[str] = None,
    *,
    stream: Optional[TextIO] = None,
    distribution: Optional[str] = None,
) -> Logger:
    cfg = LoggerConfig.from_env(app_name, app_module_name, log_level, distribution)
    return build_logger(cfg, stream)
