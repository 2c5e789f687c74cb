"""Search state."""

from cronkit.core.state.enums import SearchState

__all__ = ["SearchState"]
