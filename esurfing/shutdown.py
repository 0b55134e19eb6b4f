"""Orderly shutdown: cleanup callbacks, logger closing and signal handling."""

from __future__ import annotations

import signal
import sys
from types import FrameType
from typing import Callable

from .logger import Logger

__all__ = ["Shutdown"]


class Shutdown:
    """Runs registered cleanup callbacks and closes the logger on exit."""

    def __init__(self, logger: Logger) -> None:
        self.logger = logger
        self._callbacks: list[Callable[[], object]] = []

    def add_cleanup(self, callback: Callable[[], object]) -> None:
        """Register ``callback`` to run, in registration order, at cleanup."""
        self._callbacks.append(callback)

    def perform_cleanup(self) -> None:
        """Run the cleanup callbacks once, then close the logger."""
        self.logger.debug("执行关闭函数")
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        self.logger.close()

    def shut(self, exit_code: int) -> None:
        """Clean up and exit the program with ``exit_code``."""
        self.logger.info("正在关闭程序")
        self.perform_cleanup()
        sys.exit(exit_code)

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        if signum == signal.SIGINT:
            self.logger.debug("接收到 SIGINT 信号 (Ctrl+C)")
        elif signum == signal.SIGTERM:
            self.logger.debug("接收到 SIGTERM 信号 (Terminate request)")
        else:
            self.logger.debug(f"接收到未处理的信号: {signum}")
        self.shut(0)

    def install_signal_handlers(self) -> None:
        """Shut down cleanly on SIGINT and SIGTERM; exit with 1 if that fails."""
        for signum, name in ((signal.SIGINT, "SIGINT"), (signal.SIGTERM, "SIGTERM")):
            try:
                signal.signal(signum, self._handle_signal)
            except (ValueError, OSError):
                self.logger.error(f"信号 {name}")
                sys.exit(1)