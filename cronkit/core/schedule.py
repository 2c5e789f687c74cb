"""Schedule handle: next-time lookups, command binding and dispatch loop."""

from __future__ import annotations

import shlex
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from cronkit.core.common.exceptions import InvalidCommandError
from cronkit.core.execution.command_executor import CommandExecutor
from cronkit.core.expression.parser import ParsedSchedule, get_fields
from cronkit.core.expression.values import ValueResolver
from cronkit.core.state.enums import SearchState
from cronkit.core.triggers.cron_calc import calculate_next
from cronkit.utils.logging import ContextLogger, get_logger
from cronkit.utils.time import get_timezone, seconds_between, utc_now

NowFn = Callable[[], datetime]


def _zone_clock(timezone: str) -> NowFn:
    tz = get_timezone(timezone)
    return lambda: utc_now().astimezone(tz)


@dataclass(frozen=True)
class JobNotification:
    """One event of a notification stream."""

    time: datetime | None
    state: SearchState


class Schedule:
    """
    Parsed cron schedule with an optional bound command.

    The parsed fields are immutable, so one Schedule can serve any number
    of concurrent ``next()`` calls.

    Usage:
        >>> schedule = parse("0 */5 * * * ? *").bind("backup.sh --full")
        >>> stop = threading.Event()
        >>> schedule.run(stop)
        >>> # ...
        >>> stop.set()
    """

    def __init__(
        self,
        parsed: ParsedSchedule,
        logger: ContextLogger | None = None,
        verbose: bool = False,
        max_workers: int = 4,
        executor: CommandExecutor | None = None,
    ) -> None:
        """
        Initialize schedule.

        Args:
            parsed: Result of ``get_fields``
            logger: Custom logger (uses default if None)
            verbose: Enable debug logging on the default logger
            max_workers: Concurrent commands for the default executor
            executor: Shared command executor (one per run() if None)
        """
        self.parsed = parsed
        self.logger = (logger or get_logger(verbose)).with_context(expression=parsed.expression)
        self.max_workers = max_workers
        self.command: str | None = None
        self.args: list[str] = []
        self.max_retries = 0

        self._executor = executor
        self._deactivated = False
        self._lock = threading.Lock()

    @property
    def expression(self) -> str:
        return self.parsed.expression

    @property
    def once(self) -> bool:
        return self.parsed.once

    def __repr__(self) -> str:
        return f"Schedule(expression={self.expression!r}, command={self.command!r})"

    def next(self, reference: datetime | None) -> tuple[datetime | None, SearchState]:
        """
        Calculate the first fire time strictly after *reference*.

        Returns:
            Tuple of (time, state); time is None unless state is FOUND
        """
        return calculate_next(self.parsed, reference)

    def bind(self, command: str, max_retries: int = 0) -> Schedule:
        """
        Bind a command (with arguments) to the schedule.

        Args:
            command: Command line, split with shell-like quoting rules
            max_retries: Additional attempts after a failed run

        Returns:
            self, for chaining

        Raises:
            InvalidCommandError: Empty command or negative max_retries
        """
        parts = shlex.split(command)
        if not parts:
            raise InvalidCommandError("Command must not be empty")
        if max_retries < 0:
            raise InvalidCommandError("max_retries must be >= 0")

        self.command = parts[0]
        self.args = parts[1:]
        self.max_retries = max_retries
        return self

    def notifications(
        self,
        stop_event: threading.Event,
        timezone: str = "UTC",
        now_fn: NowFn | None = None,
    ) -> Iterator[JobNotification]:
        """
        Stream fire notifications until a terminal state or cancellation.

        Blocks between fires. Yields ``(fire_time, FOUND)`` each time a fire
        time elapses and ``(None, state)`` once for the terminal state.
        Cancellation ends the stream without a notification.

        Args:
            stop_event: Cancellation signal, checked while waiting
            timezone: IANA timezone the expression is evaluated in
            now_fn: Clock (default: now in ``timezone``)
        """
        clock = now_fn or _zone_clock(timezone)

        if self.parsed.once:
            yield JobNotification(None, SearchState.ONCE_EXEC)
            return

        now = clock()
        next_time, state = self.next(now)

        while True:
            if state.is_terminal():
                self.logger.debug("Cronjob finishes with state", state=str(state))
                yield JobNotification(None, state)
                return

            delay = max(0.0, seconds_between(now, next_time))  # type: ignore[arg-type]
            if stop_event.wait(timeout=delay):
                self.logger.debug("Context done")
                return

            yield JobNotification(next_time, SearchState.FOUND)

            # Event.wait may return slightly early; never fire twice
            now = max(clock(), next_time)  # type: ignore[type-var]
            next_time, state = self.next(now)

    def run(
        self,
        stop_event: threading.Event,
        timezone: str = "UTC",
        now_fn: NowFn | None = None,
    ) -> threading.Thread:
        """
        Start periodic execution of the bound command (non-blocking).

        The loop runs in a daemon thread until ``stop_event`` is set or the
        schedule has no further fire time. Commands are launched without
        waiting for them; a failing command is logged and the loop goes on.

        Returns:
            The loop thread

        Raises:
            InvalidCommandError: No command bound
            ValueError: Invalid timezone
        """
        if self.command is None:
            raise InvalidCommandError(
                "No command bound. Call schedule.bind(command) before schedule.run()."
            )
        get_timezone(timezone)

        thread = threading.Thread(
            target=self._run_loop,
            args=(stop_event, timezone, now_fn),
            daemon=True,
            name=f"cronkit-{self.command}",
        )
        thread.start()
        return thread

    # ------------------------------------------------------------------------
    # Internal Methods
    # ------------------------------------------------------------------------

    def _run_loop(
        self, stop_event: threading.Event, timezone: str, now_fn: NowFn | None
    ) -> None:
        executor = self._executor or CommandExecutor(self.max_workers, self.logger)
        owns_executor = self._executor is None

        try:
            if self.parsed.once:
                self._run_once(executor)
                return

            for notification in self.notifications(stop_event, timezone, now_fn):
                if notification.state is not SearchState.FOUND:
                    break
                self.logger.debug("Cronjob runs", fire_time=notification.time)
                executor.submit(self.command, self.args, self.max_retries)  # type: ignore[arg-type]
        except Exception:
            self.logger.error("Cronjob loop failed", exc_info=True)
            raise
        finally:
            if owns_executor:
                executor.shutdown(wait=False)

    def _run_once(self, executor: CommandExecutor) -> None:
        with self._lock:
            if self._deactivated:
                self.logger.debug("Cronjob already executed (once)")
                return
            self._deactivated = True

        executor.submit(self.command, self.args, self.max_retries)  # type: ignore[arg-type]
        self.logger.debug("Cronjob finishes (once)")


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def parse(
    expression: str,
    resolver: ValueResolver | None = None,
    **schedule_options: Any,
) -> Schedule:
    """
    Parse an expression into a Schedule.

    Args:
        expression: Cron expression (5, 6 or 7 fields) or ``@`` macro
        resolver: Value resolver (random source and ``.`` snapshot)
        **schedule_options: Passed to ``Schedule`` (logger, verbose, ...)

    Raises:
        ExpressionError: Invalid expression
    """
    return Schedule(get_fields(expression, resolver), **schedule_options)


def new_job_stream(
    expression: str,
    stop_event: threading.Event,
    timezone: str = "UTC",
    now_fn: NowFn | None = None,
    **schedule_options: Any,
) -> Iterator[JobNotification]:
    """
    Parse an expression and return its notification stream.

    The expression is parsed eagerly, so parse errors surface here and
    not on the first ``next()`` of the iterator.
    """
    schedule = parse(expression, **schedule_options)
    return schedule.notifications(stop_event, timezone=timezone, now_fn=now_fn)
