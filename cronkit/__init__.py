"""
cronkit - Extended cron expressions with second and year precision

Usage:
    import threading
    from datetime import datetime

    from cronkit import SearchState, parse

    # 7 fields: second minute hour day-of-month month day-of-week year
    schedule = parse("0 30 9 ? * MON-FRI *")

    next_time, state = schedule.next(datetime(2025, 6, 13, 10, 0))
    assert state is SearchState.FOUND  # 2025-06-16 09:30:00

    # Special syntaxes: L, LW, 15W, FRI#3, 5L, ? and @ macros
    month_end = parse("0 0 18 LW * ? *")

    # Run a command on every fire until stopped
    stop = threading.Event()
    parse("@hourly").bind("/usr/local/bin/rotate-logs --keep 24").run(stop)
    ...
    stop.set()
"""

from cronkit.core import (
    CommandExecutor,
    CronError,
    ExpressionError,
    FieldKind,
    ImpossibleScheduleError,
    InvalidCommandError,
    InvalidFieldCountError,
    InvalidSpecialCharacterUsageError,
    InvalidValueError,
    JobNotification,
    ParsedSchedule,
    Schedule,
    SearchState,
    UnsupportedMacroError,
    ValueResolver,
    calculate_next,
    get_fields,
    new_job_stream,
    parse,
)

__all__ = [
    # Entry points
    "parse",
    "new_job_stream",
    "get_fields",
    "calculate_next",
    # Core
    "Schedule",
    "ParsedSchedule",
    "JobNotification",
    "SearchState",
    "FieldKind",
    "ValueResolver",
    "CommandExecutor",
    # Exceptions
    "CronError",
    "ExpressionError",
    "InvalidFieldCountError",
    "InvalidValueError",
    "InvalidSpecialCharacterUsageError",
    "UnsupportedMacroError",
    "ImpossibleScheduleError",
    "InvalidCommandError",
]
