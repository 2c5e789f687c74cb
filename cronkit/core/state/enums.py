"""Search state enumeration."""

from enum import Enum


class SearchState(str, Enum):
    """Outcome of a next-fire-time search."""

    FOUND = "found"  # A next fire time was produced
    ONCE_EXEC = "once-exec"  # @reboot schedule, never periodic
    NO_MATCHES = "no-matches"  # Year bound exhausted
    ZERO_TIME = "zero-time"  # Reference time was unset

    def __str__(self) -> str:
        return self.value

    def is_terminal(self) -> bool:
        """Check if a dispatch loop must stop on this state."""
        return self is not SearchState.FOUND
