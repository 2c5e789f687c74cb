"""Fire-and-forget execution of bound commands."""

import subprocess
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from tenacity import RetryError, Retrying, stop_after_attempt, wait_random_exponential

from cronkit.utils.logging import ContextLogger, get_logger


class CommandExecutor:
    """
    Runs external commands on a thread pool.

    Each submission returns immediately; the command runs in a worker
    thread, is retried with jittered exponential backoff on failure and
    finally logged. Failures never propagate to the caller.
    """

    MAX_WORKERS = 64

    def __init__(self, max_workers: int = 4, logger: ContextLogger | None = None) -> None:
        """
        Initialize command executor.

        Args:
            max_workers: Maximum number of commands running at the same time
            logger: Custom logger (uses default if None)

        Raises:
            ValueError: If max_workers is out of range
        """
        if not 1 <= max_workers <= self.MAX_WORKERS:
            raise ValueError(f"max_workers must be between 1 and {self.MAX_WORKERS}")

        self.max_workers = max_workers
        self.logger = logger or get_logger()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="cronkit-command"
        )

    def submit(self, command: str, args: Sequence[str] = (), max_retries: int = 0) -> Future:
        """
        Schedule a command for execution (non-blocking).

        Args:
            command: Executable name or path
            args: Command arguments
            max_retries: Additional attempts after a failed run

        Returns:
            Future resolving to True on success, False after the last failed attempt
        """
        return self._executor.submit(self._run, command, list(args), max_retries)

    def _run(self, command: str, args: list[str], max_retries: int) -> bool:
        command_logger = self.logger.with_context(command=command)

        try:
            for attempt in Retrying(
                stop=stop_after_attempt(max_retries + 1),
                wait=wait_random_exponential(multiplier=0.1, min=0.1, max=5),
                reraise=False,
            ):
                with attempt:
                    number = attempt.retry_state.attempt_number
                    if number > 1:
                        command_logger.debug("Retrying command", attempt=number)
                    subprocess.run([command, *args], check=True)
        except RetryError as e:
            error = e.last_attempt.exception()
            command_logger.error(
                "Cronjob runs with error",
                attempts=e.last_attempt.attempt_number,
                error=str(error),
            )
            return False

        command_logger.debug("Command finished")
        return True

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting commands; optionally wait for running ones."""
        self._executor.shutdown(wait=wait, cancel_futures=False)
