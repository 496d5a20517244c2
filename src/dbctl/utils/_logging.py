"""Structured logging for dbctl.

Every logger built here owns its file. Nothing touches the global structlog
or stdlib logging configuration, so a host application embedding the
supervisor keeps its own logging setup.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import PurePath
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import (
        EventDict,
        FilteringBoundLogger,
        Processor,
        WrappedLogger,
    )

Rendering = Literal["json", "text"]

# Discards everything, including critical
_SILENT = logging.CRITICAL + 1


def resolve_level(level: str | None = None) -> int:
    """Resolve the effective log level.

    DBCTL_DEBUG forces DEBUG. Otherwise the given level applies, then
    DBCTL_LOG_LEVEL, then INFO. Unknown level names mean INFO.

    Args:
        level: Level name (debug, info, warning, error).

    Returns:
        The stdlib logging level.
    """
    if os.environ.get("DBCTL_DEBUG"):
        return logging.DEBUG
    name = level or os.environ.get("DBCTL_LOG_LEVEL") or "info"
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _stringify_paths(
    _logger: WrappedLogger, _method: str, event_dict: EventDict
) -> EventDict:
    # Handles, tool paths and data dirs are logged as plain path strings
    return {
        key: str(value) if isinstance(value, PurePath) else value
        for key, value in event_dict.items()
    }


def _file_sink(path: Path, *, max_bytes: int, backup_count: int) -> WrappedLogger:
    if max_bytes <= 0:
        return structlog.WriteLogger(path.open("a", encoding="utf-8"))

    handler = RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    sink = logging.getLogger(f"dbctl.logfile.{path}")
    for old in sink.handlers:
        old.close()
    sink.handlers = [handler]
    sink.propagate = False
    # Level filtering happens in the bound logger
    sink.setLevel(logging.DEBUG)
    return sink


def create_file_logger(
    log_file: Path,
    *,
    level: str | None = None,
    rendering: Rendering = "json",
    max_bytes: int = 0,
    backup_count: int = 0,
    **context: object,
) -> FilteringBoundLogger:
    """Create a logger that appends structured events to a file.

    Args:
        log_file: Log file path. Missing parent directories are created.
        level: Level name, see ``resolve_level``.
        rendering: One JSON object per line, or ``key=value`` text.
        max_bytes: Rotate once the file reaches this size. 0 disables rotation.
        backup_count: Rotated files to keep.
        **context: Values bound to every event, such as the command name.

    Returns:
        The bound logger.
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    processors: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _stringify_paths,
    ]
    if rendering == "text":
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )

    logger = structlog.wrap_logger(
        _file_sink(log_file, max_bytes=max_bytes, backup_count=backup_count),
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(level)),
        context_class=dict,
    )
    return cast("FilteringBoundLogger", logger.bind(**context))


def create_null_logger() -> FilteringBoundLogger:
    """Return a logger that drops every event."""
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[],
            wrapper_class=structlog.make_filtering_bound_logger(_SILENT),
            context_class=dict,
        ),
    )
