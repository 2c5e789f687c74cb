"""Unit tests for Schedule: binding, notification stream and dispatch loop."""

import threading
from datetime import datetime
from itertools import islice
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from conftest import SteppingClock, wait_for

from cronkit.core.common.exceptions import InvalidCommandError, InvalidFieldCountError
from cronkit.core.schedule import JobNotification, Schedule, new_job_stream, parse
from cronkit.core.state.enums import SearchState

# A millisecond before a whole second
START = datetime(2022, 6, 10, 10, 0, 0, 999000)
LAST_SECOND = datetime(2099, 12, 31, 23, 59, 58, 999000)


class RecordingEvent(threading.Event):
    """Stop event that records requested timeouts and reports cancellation."""

    def __init__(self):
        super().__init__()
        self.timeouts = []

    def wait(self, timeout=None):
        self.timeouts.append(timeout)
        return True


class TestParse:
    """Test parse entry point."""

    def test_returns_schedule(self, mock_logger):
        schedule = parse("0 30 9 ? * MON-FRI *", logger=mock_logger)

        assert isinstance(schedule, Schedule)
        assert schedule.expression == "0 30 9 ? * MON-FRI *"
        assert not schedule.once
        mock_logger.with_context.assert_called_once_with(expression="0 30 9 ? * MON-FRI *")

    def test_macro_keeps_its_name(self, mock_logger):
        schedule = parse(" @daily ", logger=mock_logger)

        assert schedule.expression == "@daily"
        mock_logger.with_context.assert_called_once_with(expression="@daily")
        assert schedule.next(datetime(2025, 6, 13, 10)) == (
            datetime(2025, 6, 14),
            SearchState.FOUND,
        )

    def test_invalid_expression_raises(self):
        with pytest.raises(InvalidFieldCountError):
            parse("* * *")

    def test_reboot(self):
        assert parse("@reboot").once

    def test_next(self):
        schedule = parse("0 30 9 ? * MON-FRI *")

        assert schedule.next(datetime(2025, 6, 13, 10)) == (
            datetime(2025, 6, 16, 9, 30),
            SearchState.FOUND,
        )
        assert schedule.next(None) == (None, SearchState.ZERO_TIME)

    def test_repr(self):
        schedule = parse("@daily").bind("backup.sh")

        assert repr(schedule) == "Schedule(expression='@daily', command='backup.sh')"


class TestBind:
    """Test command binding."""

    def test_splits_arguments(self):
        schedule = parse("@daily")

        result = schedule.bind("backup.sh --full 'two words' \"and more\"", max_retries=2)

        assert result is schedule
        assert schedule.command == "backup.sh"
        assert schedule.args == ["--full", "two words", "and more"]
        assert schedule.max_retries == 2

    def test_rebind_replaces_command(self):
        schedule = parse("@daily").bind("first --a").bind("second")

        assert schedule.command == "second"
        assert schedule.args == []

    @pytest.mark.parametrize("command", ["", "   "])
    def test_empty_command(self, command):
        with pytest.raises(InvalidCommandError):
            parse("@daily").bind(command)

    def test_negative_retries(self):
        with pytest.raises(InvalidCommandError):
            parse("@daily").bind("echo", max_retries=-1)

    def test_unbalanced_quotes(self):
        with pytest.raises(ValueError):
            parse("@daily").bind("echo 'unterminated")


class TestNotifications:
    """Test the notification stream."""

    def test_yields_fire_times(self, stop_event, mock_logger):
        schedule = parse("* * * * * * *", logger=mock_logger)

        stream = schedule.notifications(stop_event, now_fn=SteppingClock(START))

        notifications = list(islice(stream, 3))

        assert notifications == [
            JobNotification(datetime(2022, 6, 10, 10, 0, 1), SearchState.FOUND),
            JobNotification(datetime(2022, 6, 10, 10, 0, 2), SearchState.FOUND),
            JobNotification(datetime(2022, 6, 10, 10, 0, 3), SearchState.FOUND),
        ]

    def test_ends_with_terminal_state(self, stop_event, mock_logger):
        schedule = parse("* * * * * * 2099", logger=mock_logger)

        notifications = list(schedule.notifications(stop_event, now_fn=SteppingClock(LAST_SECOND)))

        assert notifications == [
            JobNotification(datetime(2099, 12, 31, 23, 59, 59), SearchState.FOUND),
            JobNotification(None, SearchState.NO_MATCHES),
        ]
        mock_logger.debug.assert_any_call("Cronjob finishes with state", state="no-matches")

    def test_zero_time_from_clock(self, stop_event, mock_logger):
        schedule = parse("* * * * * * *", logger=mock_logger)

        notifications = list(schedule.notifications(stop_event, now_fn=lambda: None))

        assert notifications == [JobNotification(None, SearchState.ZERO_TIME)]

    def test_run_once(self, stop_event):
        notifications = list(parse("@reboot").notifications(stop_event))

        assert notifications == [JobNotification(None, SearchState.ONCE_EXEC)]

    def test_cancelled_before_first_fire(self, stop_event, mock_logger):
        schedule = parse("0 0 0 1 1 ? *", logger=mock_logger)
        stop_event.set()

        notifications = list(schedule.notifications(stop_event, now_fn=SteppingClock(START)))

        assert notifications == []
        mock_logger.debug.assert_any_call("Context done")

    def test_cancelled_between_fires(self, stop_event, mock_logger):
        schedule = parse("* * * * * * *", logger=mock_logger)
        received = []

        for notification in schedule.notifications(stop_event, now_fn=SteppingClock(START)):
            received.append(notification)
            stop_event.set()

        assert received == [JobNotification(datetime(2022, 6, 10, 10, 0, 1), SearchState.FOUND)]

    def test_never_fires_twice_for_the_same_time(self, stop_event):
        """A clock that lags behind the fire time still moves forward."""
        schedule = parse("* * * * * * *")
        lagging = SteppingClock(START, step=datetime.resolution)

        times = [n.time for n in islice(schedule.notifications(stop_event, now_fn=lagging), 2)]

        assert times == [datetime(2022, 6, 10, 10, 0, 1), datetime(2022, 6, 10, 10, 0, 2)]

    def test_default_clock_uses_timezone(self, stop_event):
        seoul = ZoneInfo("Asia/Seoul")
        schedule = parse("* * * * * * *")

        notification = next(schedule.notifications(stop_event, timezone="Asia/Seoul"))

        assert notification.state is SearchState.FOUND
        assert notification.time.tzinfo is seoul

    @pytest.mark.parametrize(
        "now, expected_wait",
        [
            (datetime(2026, 3, 29, 1, 30), 1800.0),  # CET -> CEST
            (datetime(2026, 10, 25, 1, 30), 9000.0),  # CEST -> CET
        ],
    )
    def test_wait_spans_dst_transition(self, now, expected_wait):
        """Timer covers elapsed real time, not the wall-clock difference."""
        berlin = ZoneInfo("Europe/Berlin")
        schedule = parse("0 0 3 * * * *")
        stop = RecordingEvent()

        notifications = list(
            schedule.notifications(stop, now_fn=lambda: now.replace(tzinfo=berlin))
        )

        assert notifications == []
        assert stop.timeouts == [expected_wait]


class TestNewJobStream:
    """Test new_job_stream entry point."""

    def test_parses_eagerly(self):
        with pytest.raises(InvalidFieldCountError):
            new_job_stream("* * *", threading.Event())

    def test_streams_notifications(self, stop_event):
        stream = new_job_stream("* * * * * * 2099", stop_event, now_fn=SteppingClock(LAST_SECOND))

        assert [n.state for n in stream] == [SearchState.FOUND, SearchState.NO_MATCHES]


class TestRun:
    """Test the dispatch loop."""

    def test_requires_bound_command(self, stop_event):
        with pytest.raises(InvalidCommandError):
            parse("@daily").run(stop_event)

    def test_invalid_timezone(self, stop_event):
        with pytest.raises(ValueError):
            parse("@daily").bind("echo").run(stop_event, timezone="Invalid/Zone")

    def test_submits_on_each_fire(self, stop_event, mock_logger, mock_executor):
        schedule = parse("* * * * * * *", logger=mock_logger, executor=mock_executor)
        schedule.bind("echo hello", max_retries=1)

        thread = schedule.run(stop_event, now_fn=SteppingClock(START))

        assert thread.daemon
        assert thread.name == "cronkit-echo"
        wait_for(lambda: mock_executor.submit.call_count >= 3, timeout=5)

        stop_event.set()
        thread.join(timeout=5)

        assert not thread.is_alive()
        mock_executor.submit.assert_called_with("echo", ["hello"], 1)
        mock_logger.debug.assert_any_call("Cronjob runs", fire_time=datetime(2022, 6, 10, 10, 0, 1))
        mock_executor.shutdown.assert_not_called()

    def test_stops_on_terminal_state(self, stop_event, mock_logger, mock_executor):
        schedule = parse("* * * * * * 2099", logger=mock_logger, executor=mock_executor)
        schedule.bind("echo")

        thread = schedule.run(stop_event, now_fn=SteppingClock(LAST_SECOND))
        thread.join(timeout=5)

        assert not thread.is_alive()
        mock_executor.submit.assert_called_once_with("echo", [], 0)
        mock_logger.debug.assert_any_call("Cronjob finishes with state", state="no-matches")

    def test_cancellation(self, stop_event, mock_logger, mock_executor):
        schedule = parse("0 0 0 1 1 ? *", logger=mock_logger, executor=mock_executor)
        schedule.bind("echo")

        thread = schedule.run(stop_event)
        stop_event.set()
        thread.join(timeout=5)

        assert not thread.is_alive()
        mock_executor.submit.assert_not_called()
        mock_logger.debug.assert_any_call("Context done")

    def test_run_once_executes_a_single_time(self, stop_event, mock_logger, mock_executor):
        schedule = parse("@reboot", logger=mock_logger, executor=mock_executor).bind("boot.sh")

        schedule.run(stop_event).join(timeout=5)
        schedule.run(stop_event).join(timeout=5)

        mock_executor.submit.assert_called_once_with("boot.sh", [], 0)
        mock_logger.debug.assert_any_call("Cronjob finishes (once)")
        mock_logger.debug.assert_any_call("Cronjob already executed (once)")

    def test_owns_default_executor(self, stop_event, mock_logger):
        schedule = parse("@reboot", logger=mock_logger, max_workers=2).bind("boot.sh")

        with patch("cronkit.core.schedule.CommandExecutor") as executor_cls:
            schedule.run(stop_event).join(timeout=5)

        executor_cls.assert_called_once_with(2, mock_logger)
        executor_cls.return_value.submit.assert_called_once_with("boot.sh", [], 0)
        executor_cls.return_value.shutdown.assert_called_once_with(wait=False)

    def test_loop_failure_is_logged_and_raised(self, stop_event, mock_logger, mock_executor):
        schedule = parse("* * * * * * *", logger=mock_logger, executor=mock_executor)
        schedule.bind("echo")

        def broken_clock():
            raise RuntimeError("clock failure")

        with pytest.raises(RuntimeError, match="clock failure"):
            schedule._run_loop(stop_event, "UTC", broken_clock)

        mock_logger.error.assert_called_once_with("Cronjob loop failed", exc_info=True)
