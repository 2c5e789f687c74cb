"""Common components shared across core modules."""

from cronkit.core.common.exceptions import (
    CronError,
    ExpressionError,
    ImpossibleScheduleError,
    InternalError,
    InvalidCommandError,
    InvalidFieldCountError,
    InvalidSpecialCharacterUsageError,
    InvalidValueError,
    UnsupportedFieldKindError,
    UnsupportedMacroError,
)
from cronkit.core.common.types import FIELD_ORDER, FieldKind

__all__ = [
    # Types
    "FieldKind",
    "FIELD_ORDER",
    # Exceptions
    "CronError",
    "ExpressionError",
    "InvalidFieldCountError",
    "InvalidValueError",
    "InvalidSpecialCharacterUsageError",
    "UnsupportedMacroError",
    "ImpossibleScheduleError",
    "InternalError",
    "UnsupportedFieldKindError",
    "InvalidCommandError",
]
