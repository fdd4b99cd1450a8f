"""
PassForge Structured Logger
============================

Provides :class:`ForgeLogger`, a structured logging facade that emits
both human-friendly Rich console output and machine-parseable JSON logs
to rotating log files.

Library modules create quiet child loggers (``passforge.<name>``) that
propagate to the ``passforge`` root logger.  Nothing is printed until an
application, normally the CLI, calls :meth:`ForgeLogger.configure`.

Password values are never passed to the logger; callers log lengths,
bands and counts only.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER_NAME = "passforge"

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)

# Library default: stay silent unless an application configures handlers.
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


# ========================== JSON Formatter =================================


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {
          "timestamp": "...",
          "level": "INFO",
          "logger": "passforge.policy",
          "message": "...",
          "component": "policy",
          "operation": "validate_password",
          "extra": { ... },
          "exc_info": "..."
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("component", "operation"):
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val

        extra = getattr(record, "forge_extra", None)
        if extra is not None:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


# ========================== Rich Console Handler ===========================


class _ColorConsoleHandler(RichHandler):
    """:class:`rich.logging.RichHandler` bound to a stderr console with
    the PassForge log theme.
    """

    def __init__(self, **kwargs: Any) -> None:
        console = Console(theme=_LOG_THEME, stderr=True)
        super().__init__(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


# ========================== ForgeLogger ====================================


class ForgeLogger:
    """Structured, context-aware logger for PassForge components.

    Each instance is bound to a *component* name (e.g. ``"policy"``) and
    can carry a temporary *operation* context via a context manager.
    Keyword arguments that are not standard ``logging`` arguments are
    collected into a structured ``extra`` payload.

    Usage::

        log = ForgeLogger("expiry")
        with log.operation("calculate_expiry"):
            log.debug("Entropy band computed", band="strong", length=14)

    Args:
        component: Name appended to the ``passforge`` logger hierarchy.
        log_level: Optional level for this logger; ``None`` inherits the
                   level configured on the root ``passforge`` logger.
    """

    def __init__(self, component: str, *, log_level: str | None = None) -> None:
        self._component = component
        self._operation: str | None = None
        self._logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")
        if log_level is not None:
            self._logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # ------------------------------------------------------------------ #
    #  Application-level configuration
    # ------------------------------------------------------------------ #

    @staticmethod
    def configure(
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> logging.Logger:
        """Attach handlers to the root ``passforge`` logger.

        Repeated calls replace the previously installed handlers.

        Args:
            log_level:      Minimum severity (DEBUG, INFO, WARNING, ERROR).
            log_file:       Rotating log file path; ``None`` disables it.
            json_logs:      Emit JSON lines to the file handler.
            max_bytes:      Maximum file size before rotation (10 MiB).
            backup_count:   Number of rotated files kept.
            console_output: Attach the Rich stderr handler.

        Returns:
            The configured stdlib root logger.
        """
        level = getattr(logging, log_level.upper(), logging.INFO)
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(level)
        root.handlers.clear()
        root.addHandler(logging.NullHandler())

        if console_output:
            root.addHandler(_ColorConsoleHandler(level=level))

        if log_file is not None:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setLevel(level)
            if json_logs:
                fh.setFormatter(_JSONFormatter())
            else:
                fh.setFormatter(
                    logging.Formatter(
                        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                        datefmt="%Y-%m-%dT%H:%M:%S%z",
                    )
                )
            root.addHandler(fh)

        return root

    # ------------------------------------------------------------------ #
    #  Context management -- operation scope
    # ------------------------------------------------------------------ #

    class _OperationContext:
        """Context manager that temporarily binds an operation name."""

        def __init__(self, parent: ForgeLogger, operation: str) -> None:
            self._parent = parent
            self._operation = operation
            self._prev: str | None = None

        def __enter__(self) -> ForgeLogger:
            self._prev = self._parent._operation
            self._parent._operation = self._operation
            return self._parent

        def __exit__(self, *exc: Any) -> None:
            self._parent._operation = self._prev

    def operation(self, name: str) -> _OperationContext:
        """Return a context manager that sets the *operation* field."""
        return self._OperationContext(self, name)

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Move custom keyword arguments into the record's *extra*."""
        extra = kwargs.pop("extra", {}) or {}

        forge_extra: dict[str, Any] = {}
        standard_keys = {"exc_info", "stack_info", "stacklevel"}
        for key in list(kwargs):
            if key not in standard_keys:
                forge_extra[key] = kwargs.pop(key)

        extra["component"] = self._component
        extra["operation"] = self._operation
        if forge_extra:
            extra["forge_extra"] = forge_extra

        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **self._enrich(kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an ERROR-level message with the active exception traceback."""
        kwargs["exc_info"] = kwargs.get("exc_info", True)
        self._logger.error(msg, *args, **self._enrich(kwargs))

    # ------------------------------------------------------------------ #
    #  Timing helper
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Context manager measuring and logging elapsed time."""

        def __init__(self, logger_inst: ForgeLogger, label: str) -> None:
            self._logger = logger_inst
            self._label = label
            self._start: float = 0.0

        def __enter__(self) -> ForgeLogger._TimingContext:
            self._start = time.perf_counter()
            self._logger.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._logger.debug(
                "Completed: %s (%.3f sec)", self._label, self.elapsed
            )

        @property
        def elapsed(self) -> float:
            """Seconds elapsed since entering the context."""
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs start / finish and elapsed time.

        Usage::

            with log.timed("argon2id hash"):
                raw = hash_secret_raw(...)
        """
        return self._TimingContext(self, label)

