"""Common test fixtures and utilities."""

import threading
import time
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from cronkit.core.expression.values import TimeSnapshot, ValueResolver


def wait_for(
    condition: Callable[[], bool],
    timeout: float = 10.0,
    interval: float = 0.05,
    error_message: str | None = None,
) -> bool:
    """
    Wait until condition is True, polling at interval (eventually pattern).

    Args:
        condition: Function that returns bool
        timeout: Maximum wait time in seconds
        interval: Polling interval in seconds
        error_message: Custom error message if timeout

    Returns:
        True if condition met

    Raises:
        AssertionError: If timeout exceeded

    Example:
        wait_for(lambda: len(executions) >= 2, timeout=10)
    """
    start = time.time()
    last_exception = None

    while time.time() - start < timeout:
        try:
            if condition():
                return True
        except Exception as e:
            last_exception = e
        time.sleep(interval)

    elapsed = time.time() - start
    if error_message is None:
        error_message = f"Condition not met within {timeout}s (elapsed: {elapsed:.2f}s)"

    if last_exception:
        error_message += f"\nLast exception: {last_exception}"

    raise AssertionError(error_message)


class SteppingClock:
    """
    Fake clock that advances by one step (one second by default) per call.

    Start it a millisecond before a whole second and every-second schedules
    fire one millisecond after each reading, so real ``Event.wait`` timeouts
    stay short.
    """

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)) -> None:
        self._current = start
        self._step = step
        self._lock = threading.Lock()
        self.calls = 0

    def __call__(self) -> datetime:
        with self._lock:
            value = self._current
            self._current += self._step
            self.calls += 1
            return value


@pytest.fixture
def stop_event() -> Iterator[threading.Event]:
    """Cancellation event, always set on teardown so loop threads exit."""
    event = threading.Event()
    yield event
    event.set()


class FixedRandomSource:
    """Deterministic random source returning the lower bound plus an offset."""

    def __init__(self, offset: int = 0) -> None:
        self.offset = offset
        self.calls: list[tuple[int, int]] = []

    def randint(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        return min(low + self.offset, high)


@pytest.fixture
def snapshot():
    """Frozen startup instant: Saturday 2022-12-31 23:59:59."""
    return TimeSnapshot(second=59, minute=59, hour=23, day=31, month=12, weekday=6, year=2022)


@pytest.fixture
def random_source():
    return FixedRandomSource(offset=3)


@pytest.fixture
def resolver(random_source, snapshot):
    return ValueResolver(random_source=random_source, snapshot=snapshot)


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = Mock()
    logger.info = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    logger.debug = Mock()
    logger.with_context = Mock(return_value=logger)
    return logger


@pytest.fixture
def mock_executor():
    """Create a mock command executor."""
    executor = Mock()
    executor.submit = Mock(return_value=Mock())
    executor.shutdown = Mock()
    return executor
