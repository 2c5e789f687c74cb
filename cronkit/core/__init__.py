"""Core cronkit components."""

from cronkit.core.common import (
    CronError,
    ExpressionError,
    FieldKind,
    ImpossibleScheduleError,
    InternalError,
    InvalidCommandError,
    InvalidFieldCountError,
    InvalidSpecialCharacterUsageError,
    InvalidValueError,
    UnsupportedFieldKindError,
    UnsupportedMacroError,
)
from cronkit.core.execution import CommandExecutor
from cronkit.core.expression import ParsedSchedule, ValueResolver, get_fields
from cronkit.core.schedule import JobNotification, Schedule, new_job_stream, parse
from cronkit.core.state import SearchState
from cronkit.core.triggers import calculate_next

__all__ = [
    # Common Types
    "FieldKind",
    "SearchState",
    # Exceptions
    "CronError",
    "ExpressionError",
    "InvalidFieldCountError",
    "InvalidValueError",
    "InvalidSpecialCharacterUsageError",
    "UnsupportedMacroError",
    "ImpossibleScheduleError",
    "InternalError",
    "UnsupportedFieldKindError",
    "InvalidCommandError",
    # Parsing
    "ParsedSchedule",
    "ValueResolver",
    "get_fields",
    # Search
    "calculate_next",
    # Schedule
    "Schedule",
    "JobNotification",
    "parse",
    "new_job_stream",
    # Execution
    "CommandExecutor",
]
