"""Expression validation and assembly of the parsed schedule."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from cronkit.core.common.exceptions import ImpossibleScheduleError, InvalidFieldCountError
from cronkit.core.common.types import FIELD_ORDER
from cronkit.core.expression.fields import Field, create_field
from cronkit.core.expression.macros import RUN_ONCE, expression_from_macro
from cronkit.core.expression.values import ValueResolver

MIN_FIELDS = 5
MAX_FIELDS = 7


@dataclass(frozen=True)
class ParsedSchedule:
    """
    Immutable result of parsing an expression.

    All seven fields are None for run-once (``@reboot``) schedules.
    """

    expression: str = ""
    seconds: Field | None = None
    minutes: Field | None = None
    hours: Field | None = None
    dom: Field | None = None
    month: Field | None = None
    dow: Field | None = None
    year: Field | None = None
    once: bool = False

    def fields(self) -> tuple[Field | None, ...]:
        """Fields in expression order (second .. year)."""
        return (
            self.seconds,
            self.minutes,
            self.hours,
            self.dom,
            self.month,
            self.dow,
            self.year,
        )


def get_fields(expression: str, resolver: ValueResolver | None = None) -> ParsedSchedule:
    """
    Parse a cron expression or macro.

    Args:
        expression: 5, 6 or 7 whitespace-separated fields, or an ``@`` macro
        resolver: Value resolver (default: shared random source, startup snapshot)

    Returns:
        ParsedSchedule

    Raises:
        ExpressionError: Any parse failure
    """
    source = expression.strip()

    expanded = expression_from_macro(source)
    if expanded == RUN_ONCE:
        return ParsedSchedule(expression=source, once=True)

    # Macros keep their own name as the schedule's expression
    parts = (expanded or source).split()
    if not MIN_FIELDS <= len(parts) <= MAX_FIELDS:
        raise InvalidFieldCountError(source)

    if len(parts) == 5:
        parts.insert(0, "0")  # Classic cron: minute-first
    if len(parts) < MAX_FIELDS:
        parts.append("*")  # Every year

    return create_fields(parts, resolver or ValueResolver(), expression=source)


def create_fields(
    parts: Sequence[str],
    resolver: ValueResolver,
    expression: str | None = None,
) -> ParsedSchedule:
    """
    Build all seven fields in order and validate the combination.

    Raises:
        InvalidFieldCountError: ``parts`` is not exactly seven fields
        ImpossibleScheduleError: Both DoM and DoW are ``?``
    """
    if len(parts) != MAX_FIELDS:
        raise InvalidFieldCountError(" ".join(parts))

    seconds, minutes, hours, dom, month, dow, year = (
        create_field(part, kind, resolver) for part, kind in zip(parts, FIELD_ORDER)
    )

    if dom.is_no_value and dow.is_no_value:
        raise ImpossibleScheduleError()

    return ParsedSchedule(
        expression=expression if expression is not None else " ".join(parts),
        seconds=seconds,
        minutes=minutes,
        hours=hours,
        dom=dom,
        month=month,
        dow=dow,
        year=year,
    )
