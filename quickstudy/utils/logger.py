from __future__ import annotations

import copy
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")

LOGGER_NAME = "quickstudy"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow built-in name)
        record.request_id = REQUEST_ID.get("-")
        return True


class ColorFormatter(logging.Formatter):
    """
    Console-only ANSI formatter: blue timestamp, per-level colour, dim logger name.
    Disabled when NO_COLOR is set or the stream is not a TTY.
    """

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"
    _BLUE = "\x1b[34m"

    _LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[36m",  # cyan
        logging.INFO: "\x1b[32m",  # green
        logging.WARNING: "\x1b[33m",  # yellow
        logging.ERROR: "\x1b[31m",  # red
        logging.CRITICAL: "\x1b[35m",  # magenta
    }

    def __init__(self, *args, enable_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.enable_color = enable_color

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = super().formatTime(record, datefmt)
        return f"{self._BLUE}{stamp}{self._RESET}" if self.enable_color else stamp

    def format(self, record: logging.LogRecord) -> str:
        if not self.enable_color:
            return super().format(record)
        r = copy.copy(record)
        level_color = self._LEVEL_COLORS.get(r.levelno, "\x1b[37m")
        r.levelname = f"{level_color}{r.levelname}{self._RESET}"
        r.name = f"{self._DIM}{r.name}{self._RESET}"
        r.request_id = f"{self._DIM}{getattr(r, 'request_id', '-')}{self._RESET}"
        return super().format(r)


def _should_enable_color(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    try:
        return bool(getattr(stream, "isatty", lambda: False)())
    except Exception:
        return False


def _parse_level(level: str) -> int:
    return logging.getLevelNamesMapping().get((level or "INFO").upper(), logging.INFO)


def configure_logging(
    *,
    log_dir: str | Path | None = None,
    log_file: str = "quickstudy.log",
    level: str | None = None,
    console: bool | None = None,
) -> logging.Logger:
    """
    Configure the app logger: rotating file under LOG_DIR plus an optional console handler.
    The `learning` core logs through the same handlers. Idempotent: safe to call multiple times.
    """
    from quickstudy.config import settings

    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger

    numeric_level = _parse_level(level or settings.LOG_LEVEL)
    log_dir = Path(log_dir or settings.LOG_DIR)
    console = settings.LOG_TO_CONSOLE if console is None else console

    fmt = (
        "%(asctime)s %(levelname)-8s %(name)s "
        "pid=%(process)d request_id=%(request_id)s src=%(filename)s:%(lineno)d "
        "%(message)s"
    )
    datefmt = "%Y-%m-%d %H:%M:%S"
    request_filter = RequestIdFilter()

    log_dir.mkdir(parents=True, exist_ok=True)
    fh = RotatingFileHandler(
        filename=str(log_dir / log_file),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10,
        encoding="utf-8",
    )
    fh.setLevel(numeric_level)
    fh.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    fh.addFilter(request_filter)
    handlers: list[logging.Handler] = [fh]

    if console:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(numeric_level)
        ch.setFormatter(ColorFormatter(fmt=fmt, datefmt=datefmt, enable_color=_should_enable_color(sys.stdout)))
        ch.addFilter(request_filter)
        handlers.append(ch)

    for name in (LOGGER_NAME, "learning", "infra"):
        target = logging.getLogger(name)
        target.setLevel(numeric_level)
        target.propagate = False
        for handler in handlers:
            target.addHandler(handler)

    logger._configured = True  # type: ignore[attr-defined]
    return logger


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or str(uuid.uuid4())
    REQUEST_ID.set(rid)
    return rid


def clear_request_id() -> None:
    REQUEST_ID.set("-")


class log_request:
    """
    Small helper to time operations:
      with log_request(logger, "generate quiz"):
          ...
    """

    def __init__(self, logger: logging.Logger, name: str):
        self.logger = logger
        self.name = name
        self.start = 0.0

    def __enter__(self):
        self.start = time.time()
        self.logger.debug("start %s", self.name)
        return self

    def __exit__(self, exc_type, exc, tb):
        dur_ms = int((time.time() - self.start) * 1000)
        if exc is None:
            self.logger.info("%s ok duration_ms=%s", self.name, dur_ms)
        else:
            self.logger.warning("%s failed duration_ms=%s error=%s", self.name, dur_ms, exc_type.__name__)
        return False
