"""
Next-fire-time calculator for parsed cron schedules.

The search walks six scopes (year, month, day, hour, minute, second). Each
scope looks up the first candidate at or after the current value:

* no candidate left: carry into the next value of the enclosing scope,
  reset every inner scope to its first candidate and restart at year;
* a larger candidate: snap to it, reset inner scopes to their first
  candidate and descend;
* the current value itself: descend unchanged.

Day candidates are computed per month as the union of the day-of-month and
day-of-week rules (the two fields are OR-combined, as in classic cron).
"""

from __future__ import annotations

from bisect import bisect_left
from calendar import monthrange
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from cronkit.core.common.types import FieldKind
from cronkit.core.expression.fields import Field
from cronkit.core.expression.parser import ParsedSchedule
from cronkit.core.expression.values import (
    UNIT_LAST,
    UNIT_LAST_WEEKDAY,
    UNIT_NEAREST_WEEKDAY,
    UNIT_NO_VALUE,
    UNIT_NTH,
)
from cronkit.core.state.enums import SearchState
from cronkit.utils.time import is_zero_time

# ---------------------------------------------------------------------------
# Calendar helpers (weekdays use cron numbering, Sunday = 0)
# ---------------------------------------------------------------------------


def cron_weekday(year: int, month: int, day: int) -> int:
    return (date(year, month, day).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def last_weekday_of_month(year: int, month: int) -> int:
    """Last Monday-Friday day of the month."""
    last_day = days_in_month(year, month)
    weekday = cron_weekday(year, month, last_day)
    if weekday == 0:
        return last_day - 2
    if weekday == 6:
        return last_day - 1
    return last_day


def nearest_weekday(year: int, month: int, day: int) -> int | None:
    """
    Monday-Friday day closest to ``day`` without leaving the month.

    Returns None if the month has fewer than ``day`` days.
    """
    last_day = days_in_month(year, month)
    if day > last_day:
        return None

    weekday = cron_weekday(year, month, day)
    if weekday == 0:
        return day - 2 if day == last_day else day + 1
    if weekday == 6:
        return day + 2 if day == 1 else day - 1
    return day


def last_dow_in_month(year: int, month: int, weekday: int) -> int:
    """Day of the last occurrence of ``weekday`` in the month."""
    last_day = days_in_month(year, month)
    return last_day - (cron_weekday(year, month, last_day) - weekday) % 7


def nth_dow_in_month(year: int, month: int, weekday: int, nth: int) -> int | None:
    """Day of the ``nth`` occurrence of ``weekday``, or None if there is none."""
    first = 1 + (weekday - cron_weekday(year, month, 1)) % 7
    day = first + (nth - 1) * 7
    return day if day <= days_in_month(year, month) else None


def dows_in_month(year: int, month: int, weekdays: Iterable[int]) -> list[int]:
    """Every day of the month falling on one of ``weekdays``."""
    last_day = days_in_month(year, month)
    first_weekday = cron_weekday(year, month, 1)
    days: list[int] = []
    for weekday in weekdays:
        days.extend(range(1 + (weekday - first_weekday) % 7, last_day + 1, 7))
    return days


# ---------------------------------------------------------------------------
# Day resolution
# ---------------------------------------------------------------------------


def _days_from_dom(field: Field, year: int, month: int) -> list[int]:
    last_day = days_in_month(year, month)
    days: list[int] = []

    for combination in field.combinations:
        if combination.unit == UNIT_NO_VALUE:
            break

        if combination.unit == UNIT_LAST:
            days.append(last_day)
        elif combination.unit == UNIT_LAST_WEEKDAY:
            days.append(last_weekday_of_month(year, month))
        elif combination.unit == UNIT_NEAREST_WEEKDAY:
            day = nearest_weekday(year, month, combination.values[0])
            if day is not None:
                days.append(day)
        else:
            days.extend(d for d in combination.values if d <= last_day)

    return days


def _days_from_dow(field: Field, year: int, month: int) -> list[int]:
    days: list[int] = []

    for combination in field.combinations:
        if combination.unit == UNIT_NO_VALUE:
            break

        if combination.unit == UNIT_LAST:
            days.append(last_dow_in_month(year, month, combination.values[0]))
        elif combination.unit == UNIT_NTH:
            weekday, nth = combination.values
            day = nth_dow_in_month(year, month, weekday, nth)
            if day is not None:
                days.append(day)
        else:
            days.extend(dows_in_month(year, month, combination.values))

    return days


def get_days_values(parsed: ParsedSchedule, year: int, month: int) -> list[int]:
    """Sorted candidate days of the month (DoM days OR DoW days)."""
    days = set(_days_from_dom(parsed.dom, year, month))  # type: ignore[arg-type]
    days.update(_days_from_dow(parsed.dow, year, month))  # type: ignore[arg-type]
    return sorted(days)


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Scope:
    """One level of the cascade."""

    kind: FieldKind
    candidates: Callable[[datetime], Sequence[int]]
    getter: Callable[[datetime], int]
    snap: Callable[[datetime, int], datetime]
    carry: Callable[[datetime], datetime] | None


def _build_scopes(parsed: ParsedSchedule) -> tuple[_Scope, ...]:
    years = parsed.year.plain_values  # type: ignore[union-attr]
    months = parsed.month.plain_values  # type: ignore[union-attr]
    hours = parsed.hours.plain_values  # type: ignore[union-attr]
    minutes = parsed.minutes.plain_values  # type: ignore[union-attr]
    seconds = parsed.seconds.plain_values  # type: ignore[union-attr]

    first_month, first_hour, first_minute, first_second = (
        months[0],
        hours[0],
        minutes[0],
        seconds[0],
    )

    def build(ref: datetime, *parts: int) -> datetime:
        return datetime(*parts, tzinfo=ref.tzinfo)  # type: ignore[misc]

    def day_start(ref: datetime, day: date) -> datetime:
        return build(ref, day.year, day.month, day.day, first_hour, first_minute, first_second)

    def next_month(d: datetime) -> datetime:
        year, month = (d.year + 1, 1) if d.month == 12 else (d.year, d.month + 1)
        return day_start(d, date(year, month, 1))

    def next_hour(d: datetime) -> datetime:
        moment = d.replace(tzinfo=None, minute=0, second=0) + timedelta(hours=1)
        return build(
            d, moment.year, moment.month, moment.day, moment.hour, first_minute, first_second
        )

    def next_minute(d: datetime) -> datetime:
        moment = d.replace(tzinfo=None, second=0) + timedelta(minutes=1)
        return build(
            d, moment.year, moment.month, moment.day, moment.hour, moment.minute, first_second
        )

    return (
        _Scope(
            kind=FieldKind.YEAR,
            candidates=lambda d: years,
            getter=lambda d: d.year,
            snap=lambda d, v: build(d, v, first_month, 1, first_hour, first_minute, first_second),
            carry=None,
        ),
        _Scope(
            kind=FieldKind.MONTH,
            candidates=lambda d: months,
            getter=lambda d: d.month,
            snap=lambda d, v: build(d, d.year, v, 1, first_hour, first_minute, first_second),
            carry=lambda d: build(
                d, d.year + 1, first_month, 1, first_hour, first_minute, first_second
            ),
        ),
        _Scope(
            kind=FieldKind.DAY_OF_MONTH,
            candidates=lambda d: get_days_values(parsed, d.year, d.month),
            getter=lambda d: d.day,
            snap=lambda d, v: day_start(d, date(d.year, d.month, v)),
            carry=next_month,
        ),
        _Scope(
            kind=FieldKind.HOUR,
            candidates=lambda d: hours,
            getter=lambda d: d.hour,
            snap=lambda d, v: build(d, d.year, d.month, d.day, v, first_minute, first_second),
            carry=lambda d: day_start(d, d.date() + timedelta(days=1)),
        ),
        _Scope(
            kind=FieldKind.MINUTE,
            candidates=lambda d: minutes,
            getter=lambda d: d.minute,
            snap=lambda d, v: build(d, d.year, d.month, d.day, d.hour, v, first_second),
            carry=next_hour,
        ),
        _Scope(
            kind=FieldKind.SECOND,
            candidates=lambda d: seconds,
            getter=lambda d: d.second,
            snap=lambda d, v: d.replace(second=v),
            carry=next_minute,
        ),
    )


def calculate_next(
    parsed: ParsedSchedule, reference: datetime | None
) -> tuple[datetime | None, SearchState]:
    """
    Calculate the first fire time strictly after *reference*.

    Args:
        parsed: Parsed schedule (never modified)
        reference: Reference time; naive or timezone-aware. The result keeps
            its tzinfo and is computed on wall-clock values.

    Returns:
        Tuple of (next fire time, state). The time is None unless the state
        is ``SearchState.FOUND``.
    """
    if reference is None or is_zero_time(reference):
        return None, SearchState.ZERO_TIME
    if parsed.once:
        return None, SearchState.ONCE_EXEC
    if reference.year > FieldKind.YEAR.max_value:
        return None, SearchState.NO_MATCHES

    current = reference.replace(microsecond=0) + timedelta(seconds=1)
    scopes = _build_scopes(parsed)

    index = 0
    while index < len(scopes):
        scope = scopes[index]
        candidates = scope.candidates(current)
        value = scope.getter(current)
        position = bisect_left(candidates, value)

        if position == len(candidates):
            if scope.carry is None:
                return None, SearchState.NO_MATCHES
            current = scope.carry(current)
            index = 0
            continue

        if candidates[position] != value:
            current = scope.snap(current, candidates[position])
        index += 1

    return current, SearchState.FOUND
