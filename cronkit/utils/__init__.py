"""Utility modules for cronkit."""

from cronkit.utils.logging import ContextLogger, get_logger, setup_logger
from cronkit.utils.time import ZERO_TIME, get_timezone, is_zero_time, utc_now

__all__ = [
    "setup_logger",
    "get_logger",
    "ContextLogger",
    "ZERO_TIME",
    "get_timezone",
    "is_zero_time",
    "utc_now",
]
