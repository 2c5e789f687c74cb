"""Cron expression parsing."""

from cronkit.core.expression.fields import Combination, Field, create_field, merge_combinations
from cronkit.core.expression.macros import MACROS, RUN_ONCE, expression_from_macro
from cronkit.core.expression.parser import ParsedSchedule, create_fields, get_fields
from cronkit.core.expression.rng import LockedRandomSource, RandomSource
from cronkit.core.expression.values import STARTUP_SNAPSHOT, TimeSnapshot, ValueResolver

__all__ = [
    "Combination",
    "Field",
    "create_field",
    "merge_combinations",
    "MACROS",
    "RUN_ONCE",
    "expression_from_macro",
    "ParsedSchedule",
    "create_fields",
    "get_fields",
    "RandomSource",
    "LockedRandomSource",
    "TimeSnapshot",
    "STARTUP_SNAPSHOT",
    "ValueResolver",
]
