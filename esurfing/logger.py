"""Console and file logging with line-count based rotation."""

from __future__ import annotations

import inspect
import os
import sys
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import TextIO

__all__ = ["LogLevel", "Logger", "default_log_dir"]

LOG_FILE_NAME = "run.log"
DEFAULT_MAX_LINES = 100000

_LABELS = {
    0: "调试",
    1: "信息",
    2: "警告",
    3: "错误",
    4: "致命",
}


class LogLevel(IntEnum):
    """Severity of a log record, from least to most severe."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    @property
    def label(self) -> str:
        """The display name written into each log line."""
        return _LABELS.get(int(self), "未知")


def default_log_dir(debug: bool, small_device: bool) -> Path:
    """Return the directory where log files are kept by default."""
    if sys.platform == "win32":
        return Path(sys.argv[0]).resolve().parent / "logs"
    base = "/var/log/esurfing"
    if debug and not small_device and os.path.exists("/etc/openwrt_release"):
        base = "/usr/esurfing"
    return Path(base) / "logs"


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def _file_timestamp() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


def _caller() -> tuple[str, int]:
    frame = inspect.currentframe()
    while frame is not None and frame.f_code.co_filename == __file__:
        frame = frame.f_back
    if frame is None:
        return "?", 0
    return os.path.basename(frame.f_code.co_filename), frame.f_lineno


class Logger:
    """Writes records to stdout and to ``run.log`` in the log directory.

    After ``max_lines`` lines the file is renamed to a timestamped name and
    a fresh ``run.log`` is started; on close the current file is renamed too.
    """

    def __init__(
        self,
        log_dir: str | os.PathLike[str] | None = None,
        debug: bool = False,
        max_lines: int = DEFAULT_MAX_LINES,
    ) -> None:
        if max_lines <= 0:
            raise ValueError("max_lines must be positive")
        self.level = LogLevel.DEBUG if debug else LogLevel.INFO
        self.log_dir = Path(log_dir) if log_dir is not None else default_log_dir(debug, False)
        self.max_lines = max_lines
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / LOG_FILE_NAME
        self._handle: TextIO | None = self._open()
        self._lines = 0
        self.debug(f"日志等级: {self.level.label}")

    def _open(self) -> TextIO:
        return open(self.log_file, "a", encoding="utf-8")

    def _archive_path(self) -> Path:
        return self.log_dir / f"{_file_timestamp()}.log"

    def _rotate(self) -> None:
        if self._handle is None or self._lines < self.max_lines:
            return
        self._handle.close()
        self._handle = None
        os.replace(self.log_file, self._archive_path())
        self._lines = 0
        self._handle = self._open()

    def log(self, level: LogLevel, message: str) -> None:
        """Write ``message`` if ``level`` is at or above the logger's level."""
        level = LogLevel(level)
        if level < self.level:
            return
        file_name, line_no = _caller()
        line = f"[{_timestamp()}] [{level.label}] [{file_name}:{line_no}] {message}\n"
        sys.stdout.write(line)
        sys.stdout.flush()
        if self._handle is not None:
            self._handle.write(line)
            self._handle.flush()
            self._lines += 1
            self._rotate()

    def debug(self, message: str) -> None:
        """Log at debug level."""
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        """Log at info level."""
        self.log(LogLevel.INFO, message)

    def warn(self, message: str) -> None:
        """Log at warning level."""
        self.log(LogLevel.WARN, message)

    def error(self, message: str) -> None:
        """Log at error level."""
        self.log(LogLevel.ERROR, message)

    def fatal(self, message: str) -> None:
        """Log at fatal level."""
        self.log(LogLevel.FATAL, message)

    def close(self) -> None:
        """Close the log file and archive it under a timestamped name."""
        if self._handle is None:
            return
        self.debug("正在关闭日志系统")
        self._handle.close()
        self._handle = None
        os.replace(self.log_file, self._archive_path())

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()