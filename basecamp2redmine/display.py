"""
Centralized display utilities for console output.
Provides rich logging on stderr so that stdout can carry the generated script.
"""

import logging
import os
from typing import Any, Protocol, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS = 25
NOTICE = 21


# Define Protocol for extended Logger with success and notice methods
class ExtendedLogger(Protocol):
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def success(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def notice(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


# Create a custom theme for logging
LOGGING_THEME = Theme(
    {
        "logging.level.debug": "dim",
        "logging.level.info": "blue",
        "logging.level.notice": "cyan",
        "logging.level.warning": "bold yellow",
        "logging.level.error": "bold red",
        "logging.level.critical": "bold red on white",
        "logging.level.success": "bold green",
    }
)

# Global console instance with theme; stderr keeps stdout free for the script
console = Console(theme=LOGGING_THEME, stderr=True)


def _success(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(SUCCESS):
        self._log(SUCCESS, message, args, stacklevel=2, **kwargs)


def _notice(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(NOTICE):
        self._log(NOTICE, message, args, stacklevel=2, **kwargs)


logging.addLevelName(SUCCESS, "SUCCESS")
logging.addLevelName(NOTICE, "NOTICE")
setattr(logging.Logger, "success", _success)
setattr(logging.Logger, "notice", _notice)


def configure_logging(level: str = "INFO", log_file: str | None = None) -> ExtendedLogger:
    """
    Configure logging with rich formatting.

    Args:
        level: Logging level (DEBUG, INFO, NOTICE, SUCCESS, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file

    Returns:
        Configured logger instance

    """
    if level.upper() == "NOTICE":
        numeric_level = NOTICE
    elif level.upper() == "SUCCESS":
        numeric_level = SUCCESS
    else:
        numeric_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            show_time=True,
            show_level=True,
            log_time_format="[%X]",
        ),
    ]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"),
        )
        file_handler.setLevel(numeric_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,  # Ensure we can reconfigure logging if needed
    )

    logger = logging.getLogger("basecamp2redmine")
    logger.debug("Rich logging configured at %s", level.upper())
    if log_file:
        logger.debug("Log file: %s", log_file)

    return cast(ExtendedLogger, logger)
