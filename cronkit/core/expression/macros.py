"""Expansion of ``@`` macros into canonical 7-field expressions."""

from cronkit.core.common.exceptions import UnsupportedMacroError

MACRO_PREFIX = "@"

# Marker returned for @reboot; never a valid expression itself.
RUN_ONCE = "~"

MACROS: dict[str, str] = {
    "@yearly": "0 0 0 1 1 * *",
    "@annually": "0 0 0 1 1 * *",
    "@monthly": "0 0 0 1 * * *",
    "@weekly": "0 0 0 * * 0 *",
    "@daily": "0 0 0 * * * *",
    "@midnight": "0 0 0 * * * *",
    "@hourly": "0 0 * * * * *",
    "@minutely": "0 * * * * * *",
    "@every_minute": "0 * * * * * *",
    "@secondly": "* * * * * * *",
    "@every_second": "* * * * * * *",
    "@reboot": RUN_ONCE,
}


def expression_from_macro(expression: str) -> str | None:
    """
    Expand a macro into its canonical expression.

    Args:
        expression: Trimmed expression string

    Returns:
        Canonical 7-field expression, ``RUN_ONCE`` for ``@reboot``,
        or None if the expression is not a macro

    Raises:
        UnsupportedMacroError: Unknown ``@`` token
    """
    if not expression.startswith(MACRO_PREFIX):
        return None

    try:
        return MACROS[expression]
    except KeyError:
        raise UnsupportedMacroError(expression) from None
