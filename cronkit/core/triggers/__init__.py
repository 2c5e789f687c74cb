"""Next-fire-time calculation."""

from cronkit.core.triggers.cron_calc import calculate_next, get_days_values

__all__ = ["calculate_next", "get_days_values"]
