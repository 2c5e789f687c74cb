"""Context-aware logging for schedules and command runs."""

import logging
from typing import Any

LOGGER_NAME = "cronkit"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(context)s] - %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: int = logging.INFO) -> logging.Logger:
    """
    Configure a logger whose records carry a ``context`` field.

    Calling again with the same name only changes the level.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger


class ContextLogger:
    """
    Logger wrapper that renders ``key=value`` context into each record.

    The context of a schedule (its expression, bound command) is attached
    once with :meth:`with_context`; per-call keyword arguments are appended
    after it.
    """

    def __init__(self, logger: logging.Logger, context: dict[str, Any] | None = None) -> None:
        self.logger = logger
        self.context = dict(context or {})

    def render(self, **extra_context: Any) -> str:
        """Context as ``k=v, k=v`` (bound keys first)."""
        merged = {**self.context, **extra_context}
        return ", ".join(f"{key}={value}" for key, value in merged.items())

    def log(self, level: int, message: str, exc_info: bool = False, **extra_context: Any) -> None:
        # Skip rendering for records the logger would drop
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level,
            message,
            extra={"context": self.render(**extra_context)},
            exc_info=exc_info,
        )

    def debug(self, message: str, **extra_context: Any) -> None:
        self.log(logging.DEBUG, message, **extra_context)

    def info(self, message: str, **extra_context: Any) -> None:
        self.log(logging.INFO, message, **extra_context)

    def warning(self, message: str, **extra_context: Any) -> None:
        self.log(logging.WARNING, message, **extra_context)

    def error(self, message: str, exc_info: bool = False, **extra_context: Any) -> None:
        self.log(logging.ERROR, message, exc_info=exc_info, **extra_context)

    def with_context(self, **context: Any) -> "ContextLogger":
        """Child logger with *context* added; the parent is left unchanged."""
        return ContextLogger(self.logger, {**self.context, **context})


def get_logger(verbose: bool = False, **context: Any) -> ContextLogger:
    """
    Build the shared cronkit logger.

    Args:
        verbose: Log fires and state changes (DEBUG) instead of WARNING and up
        **context: Context attached to every record
    """
    level = logging.DEBUG if verbose else logging.WARNING
    return ContextLogger(setup_logger(LOGGER_NAME, level), context)
