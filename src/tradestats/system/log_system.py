"""
Structured logging for tradestats.

Everything logs through structlog on top of the stdlib root logger:

- console handler on stderr (stdout belongs to the report summary)
- optional JSON file handler, rotating by size

Event names are dotted (``report.generated``, ``trades.loaded``) and carry
their context as key/value pairs.
"""

import inspect
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
TimestampFormat = Literal["iso", "compact", "time"]

DEFAULT_LOG_FILE = Path("logs/tradestats.log")

_LEVEL_COLORS = {
    "debug": "\033[36m",
    "info": "\033[32m",
    "warning": "\033[33m",
    "error": "\033[31m",
    "critical": "\033[35m",
}
_GRAY = "\033[90m"
_RESET = "\033[0m"


class LoggingConfig(BaseModel):
    """Logging settings.

    INFO covers one line per trade load and per generated or written report.
    DEBUG adds resolved windows and per-section sizes. WARNING is used for
    trade rows that could not be parsed.

    Timestamps are stored under ``log_timestamp`` so event fields named
    ``timestamp`` survive untouched:

    - "iso": 2025-03-01T09:30:00.123456+00:00
    - "compact": 250301-093000.12
    - "time": 09:30:00.12
    """

    level: LogLevel = Field(default="INFO", description="Minimum console log level")
    format: Literal["console", "json"] = Field(default="console", description="Console output format")
    timestamp_format: TimestampFormat = Field(default="compact", description="Timestamp layout")
    enable_file: bool = Field(default=False, description="Also write JSON lines to a file")
    file_path: Path | None = Field(default=None, description="Log file (logs/tradestats.log when unset)")
    file_level: LogLevel = Field(default="WARNING", description="Minimum file log level")
    file_rotation: bool = Field(default=True, description="Rotate the log file by size")
    max_file_size_mb: int = Field(default=10, description="Rotation threshold in MB")
    backup_count: int = Field(default=3, description="Rotated files kept")


def _timestamper(fmt: TimestampFormat):
    def add_log_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        if fmt == "iso":
            event_dict["log_timestamp"] = now.isoformat()
        else:
            pattern = "%y%m%d-%H%M%S" if fmt == "compact" else "%H:%M:%S"
            event_dict["log_timestamp"] = f"{now.strftime(pattern)}.{now.microsecond // 10000:02d}"
        return event_dict

    return add_log_timestamp


def _shared_processors(fmt: TimestampFormat) -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _timestamper(fmt),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.CallsiteParameterAdder(
            [structlog.processors.CallsiteParameter.FILENAME, structlog.processors.CallsiteParameter.LINENO]
        ),
    ]


def _render_console(logger: Any, name: str, event_dict: dict[str, Any]) -> str:
    """``<time> [level] event | k=v ... (module:line)``"""
    stamp = event_dict.pop("log_timestamp", "")
    level = event_dict.pop("level", "info")
    event = event_dict.pop("event", "")
    filename = event_dict.pop("filename", "")
    lineno = event_dict.pop("lineno", "")
    logger_name = event_dict.pop("logger", "")

    line = f"{stamp} [{_LEVEL_COLORS.get(level, '')}{level}{_RESET}] {event}"

    context = " ".join(f"{key}={value}" for key, value in sorted(event_dict.items()) if not key.startswith("_"))
    if context:
        line += f" {_GRAY}|{_RESET} {context}"

    if filename and lineno:
        origin = logger_name or Path(filename).stem
        line += f" {_GRAY}({origin}:{lineno}){_RESET}"
    return line


def _file_handler(config: LoggingConfig, pre_chain: list[Any]) -> logging.Handler:
    path = config.file_path or DEFAULT_LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    handler: logging.Handler
    if config.file_rotation:
        handler = RotatingFileHandler(
            filename=str(path),
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    else:
        handler = logging.FileHandler(filename=str(path), encoding="utf-8")

    handler.setLevel(config.file_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer(), foreign_pre_chain=pre_chain)
    )
    return handler


class LoggerFactory:
    """
    Configures structlog once and hands out loggers.

    Example:
        LoggerFactory.configure(LoggingConfig(level="DEBUG"))

        logger = LoggerFactory.get_logger()
        logger.info("report.generated", total_records=120)

    get_logger() configures defaults on first use, so library code can
    create module-level loggers at import time.
    """

    _config: LoggingConfig | None = None

    @classmethod
    def configure(cls, config: LoggingConfig | None = None) -> None:
        config = config or LoggingConfig()
        if config.enable_file and config.file_path is None:
            config = config.model_copy(update={"file_path": DEFAULT_LOG_FILE})

        shared = _shared_processors(config.timestamp_format)

        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(config.level)
        console.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=_render_console if config.format == "console" else structlog.processors.JSONRenderer(),
                foreign_pre_chain=shared,
            )
        )
        handlers: list[logging.Handler] = [console]

        root_level = logging.getLevelName(config.level)
        if config.enable_file:
            handlers.append(_file_handler(config, shared))
            root_level = min(root_level, logging.getLevelName(config.file_level))

        logging.basicConfig(level=root_level, handlers=handlers, force=True)

        if config.format == "console":
            exc_processors = [
                structlog.dev.set_exc_info,
                structlog.processors.ExceptionRenderer(structlog.dev.plain_traceback),  # type: ignore[arg-type]
            ]
        else:
            exc_processors = [structlog.processors.format_exc_info]

        structlog.configure(
            processors=[*shared, *exc_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        cls._config = config

    @classmethod
    def get_logger(cls, name: str | None = None):
        """
        Return a structlog logger.

        Args:
            name: Logger name; defaults to the caller's module __name__.
        """
        if cls._config is None:
            cls.configure()

        if name is None:
            caller = inspect.currentframe()
            caller = caller.f_back if caller else None
            name = caller.f_globals.get("__name__", "tradestats") if caller else "tradestats"

        return structlog.get_logger(name)

    @classmethod
    def reset(cls) -> None:
        """Drop handlers and structlog configuration (used between tests)."""
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.NOTSET)
        cls._config = None
        structlog.reset_defaults()
