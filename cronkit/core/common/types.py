"""Common type definitions for cronkit."""

from enum import Enum


class FieldKind(Enum):
    """The seven time components of a cron expression, in expression order."""

    SECOND = ("seconds", 0, 59)
    MINUTE = ("minutes", 0, 59)
    HOUR = ("hours", 0, 23)
    DAY_OF_MONTH = ("day-of-month", 1, 31)
    MONTH = ("month", 1, 12)
    DAY_OF_WEEK = ("day-of-week", 0, 6)  # Sunday = 0
    YEAR = ("year", 1970, 2099)

    def __init__(self, display_name: str, min_value: int, max_value: int) -> None:
        self.display_name = display_name
        self.min_value = min_value
        self.max_value = max_value

    def __str__(self) -> str:
        return self.display_name

    def bounds(self) -> tuple[int, int]:
        return self.min_value, self.max_value

    def values(self) -> list[int]:
        """All values of the field kind, ascending."""
        return list(range(self.min_value, self.max_value + 1))


FIELD_ORDER: tuple[FieldKind, ...] = (
    FieldKind.SECOND,
    FieldKind.MINUTE,
    FieldKind.HOUR,
    FieldKind.DAY_OF_MONTH,
    FieldKind.MONTH,
    FieldKind.DAY_OF_WEEK,
    FieldKind.YEAR,
)
