"""Logging utilities for cc-ci-setup."""

from __future__ import annotations

import logging

from rich.markup import escape

from cc_ci_setup.console import console, err_console

LOGGER_NAME = "cc-ci-setup"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


class ConsoleFormatter(logging.Formatter):
    """Formatter that renders records as indented, symbol-prefixed rich markup."""

    SYMBOLS = {
        logging.DEBUG: "[debug]\\[DEBUG][/debug]",
        logging.INFO: "[info]ℹ[/info]",
        SUCCESS: "[success]✓[/success]",
        logging.WARNING: "[warning]⚠[/warning]",
        logging.ERROR: "[error]✗[/error]",
        logging.CRITICAL: "[error]✗[/error]",
    }
    STYLES = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        symbol = self.SYMBOLS.get(record.levelno, "")
        message = escape(record.getMessage())
        style = self.STYLES.get(record.levelno)
        if style:
            message = f"[{style}]{message}[/{style}]"
        return f"  {symbol} {message}"


class ConsoleHandler(logging.Handler):
    """Print formatted records through the rich consoles; errors go to stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            target = err_console if record.levelno >= logging.ERROR else console
            target.print(self.format(record), highlight=False)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.handlers.clear()
    handler = ConsoleHandler()
    handler.setFormatter(ConsoleFormatter())
    logger.addHandler(handler)
    return logger
