"""
Value resolution for single field tokens.

Turns one comma-free token (``*``, ``5``, ``MON-FRI``, ``*/15``, ``10-50/20``,
``L``, ``15W``, ``FRI#3``...) into the integer values it denotes for a field
kind. Tokens are expected upper-cased.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from cronkit.core.common.exceptions import (
    InvalidSpecialCharacterUsageError,
    InvalidValueError,
    UnsupportedFieldKindError,
)
from cronkit.core.common.types import FieldKind
from cronkit.core.expression.rng import RandomSource, default_random_source

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

WEEKDAYS = {"SUN": 0, "MON": 1, "TUE": 2, "WED": 3, "THU": 4, "FRI": 5, "SAT": 6}
MONTHS = {
    "JAN": 1,
    "FEB": 2,
    "MAR": 3,
    "APR": 4,
    "MAY": 5,
    "JUN": 6,
    "JUL": 7,
    "AUG": 8,
    "SEP": 9,
    "OCT": 10,
    "NOV": 11,
    "DEC": 12,
}

_DOW_NAMES = "|".join(WEEKDAYS)
_MONTH_NAMES = "|".join(MONTHS)
_VALUE = rf"(\d+|{_DOW_NAMES}|{_MONTH_NAMES})"

# Special shapes
WEEKDAY_DOM_RE = re.compile(r"(0?[1-9]|[12][0-9]|3[01])W")
LAST_DOW_RE = re.compile(rf"([0-7]|{_DOW_NAMES})L")
NTH_DOW_RE = re.compile(rf"([0-7]|{_DOW_NAMES})#([1-5])")

# Plain shapes, in priority order after `*` and `.`
SINGLE_RE = re.compile(_VALUE)
RANGE_RE = re.compile(rf"{_VALUE}-{_VALUE}")
WILDCARD_STEP_RE = re.compile(r"\*/(\d+)")
SINGLE_STEP_RE = re.compile(rf"{_VALUE}/(\d+)")
RANGE_STEP_RE = re.compile(rf"{_VALUE}-{_VALUE}/(\d+)")

SPECIAL_TOKENS = ("R", "L", "LW", "?")

# Units of special combinations
UNIT_LAST = "L"
UNIT_LAST_WEEKDAY = "LW"
UNIT_NEAREST_WEEKDAY = "W"
UNIT_NTH = "#"
UNIT_NO_VALUE = "?"


def is_special(token: str) -> bool:
    """Check if a token uses one of the special (non-list) syntaxes."""
    if token in SPECIAL_TOKENS:
        return True
    return any(
        pattern.fullmatch(token) for pattern in (WEEKDAY_DOM_RE, LAST_DOW_RE, NTH_DOW_RE)
    )


# ---------------------------------------------------------------------------
# Startup snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeSnapshot:
    """Frozen field components of one instant, used by the ``.`` token."""

    second: int
    minute: int
    hour: int
    day: int
    month: int
    weekday: int  # Sunday = 0
    year: int

    @classmethod
    def capture(cls, moment: datetime | None = None) -> TimeSnapshot:
        moment = moment or datetime.now()
        return cls(
            second=moment.second,
            minute=moment.minute,
            hour=moment.hour,
            day=moment.day,
            month=moment.month,
            weekday=(moment.weekday() + 1) % 7,
            year=moment.year,
        )

    def value_for(self, kind: FieldKind) -> int:
        if kind is FieldKind.SECOND:
            return self.second
        if kind is FieldKind.MINUTE:
            return self.minute
        if kind is FieldKind.HOUR:
            return self.hour
        if kind is FieldKind.DAY_OF_MONTH:
            return self.day
        if kind is FieldKind.MONTH:
            return self.month
        if kind is FieldKind.DAY_OF_WEEK:
            return self.weekday
        if kind is FieldKind.YEAR:
            return self.year
        raise UnsupportedFieldKindError(kind)


# Captured once per process
STARTUP_SNAPSHOT = TimeSnapshot.capture()


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class ValueResolver:
    """
    Resolves field tokens to sorted, duplicate-free value lists.

    Args:
        random_source: Source for the ``R`` token (shared, thread-safe default)
        snapshot: Instant used for the ``.`` token (process start by default)
    """

    def __init__(
        self,
        random_source: RandomSource | None = None,
        snapshot: TimeSnapshot | None = None,
    ) -> None:
        self.random_source = random_source or default_random_source
        self.snapshot = snapshot or STARTUP_SNAPSHOT

    def resolve(self, token: str, kind: FieldKind) -> list[int]:
        """
        Resolve a plain token.

        Args:
            token: Upper-cased token without commas
            kind: Field kind the token belongs to

        Returns:
            Sorted list of values

        Raises:
            InvalidValueError: Token is malformed or out of bounds
        """
        if token == "*":
            return kind.values()

        if token == ".":
            return [self.snapshot.value_for(kind)]

        match = SINGLE_RE.fullmatch(token)
        if match:
            return [self._single_value(match.group(1), kind)]

        match = RANGE_RE.fullmatch(token)
        if match:
            return self._range_values(match.group(1), match.group(2), kind)

        match = WILDCARD_STEP_RE.fullmatch(token)
        if match:
            step = self._step(match.group(1), token, kind)
            return list(range(kind.min_value, kind.max_value + 1, step))

        match = SINGLE_STEP_RE.fullmatch(token)
        if match:
            step = self._step(match.group(2), token, kind)
            start = self._single_value(match.group(1), kind)
            return list(range(start, kind.max_value + 1, step))

        match = RANGE_STEP_RE.fullmatch(token)
        if match:
            step = self._step(match.group(3), token, kind)
            return self._range_step_values(match.group(1), match.group(2), step, kind)

        raise InvalidValueError(kind.display_name, token)

    def resolve_special(self, token: str, kind: FieldKind) -> tuple[list[int], str | None]:
        """
        Resolve a special token.

        Returns:
            Tuple of (values, unit). ``unit`` is None when the token
            collapses to plain values (``R``, ``L`` in day-of-week).

        Raises:
            InvalidSpecialCharacterUsageError: Syntax not allowed for the field kind
        """
        self._check_special_usage(token, kind)

        if token == "R":
            return [self.random_source.randint(kind.min_value, kind.max_value)], None

        if token == UNIT_LAST:
            if kind is FieldKind.DAY_OF_WEEK:
                return [6], None  # Saturday
            return [], UNIT_LAST

        if token in (UNIT_LAST_WEEKDAY, UNIT_NO_VALUE):
            return [], token

        match = WEEKDAY_DOM_RE.fullmatch(token)
        if match:
            return [int(match.group(1))], UNIT_NEAREST_WEEKDAY

        match = LAST_DOW_RE.fullmatch(token)
        if match:
            if kind is not FieldKind.DAY_OF_WEEK:
                raise InvalidSpecialCharacterUsageError(
                    "the '{x}L' is only allowed in the DoW field", kind.display_name
                )
            return [self._weekday(match.group(1))], UNIT_LAST

        match = NTH_DOW_RE.fullmatch(token)
        if match:
            return [self._weekday(match.group(1)), int(match.group(2))], UNIT_NTH

        raise UnsupportedFieldKindError(token)

    # ------------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------------

    def _check_special_usage(self, token: str, kind: FieldKind) -> None:
        if token == "R":
            return

        if kind not in (FieldKind.DAY_OF_MONTH, FieldKind.DAY_OF_WEEK):
            raise InvalidSpecialCharacterUsageError(
                "the special characters 'L', 'W', '?' and '#' are only allowed "
                "in the DoM and DoW fields",
                kind.display_name,
            )
        if kind is not FieldKind.DAY_OF_MONTH and (
            token == UNIT_LAST_WEEKDAY or WEEKDAY_DOM_RE.fullmatch(token)
        ):
            raise InvalidSpecialCharacterUsageError(
                "the special character 'W' is only allowed in the DoM field", kind.display_name
            )
        if kind is not FieldKind.DAY_OF_WEEK and NTH_DOW_RE.fullmatch(token):
            raise InvalidSpecialCharacterUsageError(
                "the special character '#' is only allowed in the DoW field", kind.display_name
            )

    def _single_value(self, value: str, kind: FieldKind) -> int:
        """Resolve one number or name and check it against the kind bounds."""
        if value in WEEKDAYS:
            num, name_kind = WEEKDAYS[value], FieldKind.DAY_OF_WEEK
        elif value in MONTHS:
            num, name_kind = MONTHS[value], FieldKind.MONTH
        else:
            num, name_kind = int(value), None

        if name_kind is not None and name_kind is not kind:
            raise InvalidValueError(kind.display_name, value)

        max_value = kind.max_value
        if kind is FieldKind.DAY_OF_WEEK:
            max_value = 7  # Sunday alias

        if not kind.min_value <= num <= max_value:
            raise InvalidValueError(kind.display_name, value)

        if kind is FieldKind.DAY_OF_WEEK and num == 7:
            return 0
        return num

    def _range_values(self, first: str, last: str, kind: FieldKind) -> list[int]:
        start = self._single_value(first, kind)
        end = self._single_value(last, kind)

        if start <= end:
            return list(range(start, end + 1))

        if kind is FieldKind.YEAR:
            raise InvalidValueError(kind.display_name, f"{first}-{last}")

        # Wrap around: FRI-MON -> SUN, MON, FRI, SAT
        return list(range(kind.min_value, end + 1)) + list(range(start, kind.max_value + 1))

    def _range_step_values(self, first: str, last: str, step: int, kind: FieldKind) -> list[int]:
        start = self._single_value(first, kind)
        end = self._single_value(last, kind)

        if start <= end:
            return list(range(start, end + 1, step))

        if kind is FieldKind.YEAR:
            raise InvalidValueError(kind.display_name, f"{first}-{last}")

        values: list[int] = []
        running = False
        position = 0
        for value in kind.values() * 2:
            if value == start:
                running = True
            if not running:
                continue

            if position % step == 0:
                values.append(value)
            position += 1

            if value < start and value == end:
                break

        return sorted(values)

    def _step(self, text: str, token: str, kind: FieldKind) -> int:
        step = int(text)
        if step == 0:
            raise InvalidValueError(kind.display_name, token)
        return step

    def _weekday(self, value: str) -> int:
        num = WEEKDAYS[value] if value in WEEKDAYS else int(value)
        return 0 if num == 7 else num
