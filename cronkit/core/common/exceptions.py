"""Custom exceptions for cronkit."""


class CronError(Exception):
    """Base exception for cronkit errors."""

    pass


# ---------------------------------------------------------------------------
# Parse-time errors
# ---------------------------------------------------------------------------


class ExpressionError(CronError, ValueError):
    """Expression could not be turned into a schedule."""

    pass


class InvalidFieldCountError(ExpressionError):
    """Expression does not have 5, 6 or 7 whitespace-separated fields."""

    def __init__(self, expression: str) -> None:
        self.expression = expression
        super().__init__(f"invalid expression given '{expression}'")


class InvalidValueError(ExpressionError):
    """A token is not a valid value for its field."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"invalid value in field '{field}' given: '{value}'")


class InvalidSpecialCharacterUsageError(ExpressionError):
    """A special character is used where the field does not allow it."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class UnsupportedMacroError(ExpressionError):
    """Unknown ``@`` macro."""

    def __init__(self, macro: str) -> None:
        self.macro = macro
        super().__init__(f"unsupported macro given '{macro}'")


class ImpossibleScheduleError(ExpressionError):
    """Both day-of-month and day-of-week are ``?``."""

    def __init__(self) -> None:
        super().__init__(
            "the cronjob will never run; both DoM and DoW contain the special character '?'"
        )


# ---------------------------------------------------------------------------
# Programming errors
# ---------------------------------------------------------------------------


class InternalError(CronError):
    """Invariant violation inside cronkit (a bug, not bad input)."""

    pass


class UnsupportedFieldKindError(InternalError):
    """Field kind or special shape that the resolver does not know."""

    def __init__(self, what: object) -> None:
        self.what = what
        super().__init__(f"unsupported field kind or expression given: '{what}'")


# ---------------------------------------------------------------------------
# Dispatch errors
# ---------------------------------------------------------------------------


class InvalidCommandError(CronError, ValueError):
    """Command binding is missing or malformed."""

    pass
