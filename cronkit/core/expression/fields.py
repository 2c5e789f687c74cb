"""Field parsing and combination merging."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from cronkit.core.common.exceptions import InvalidSpecialCharacterUsageError
from cronkit.core.common.types import FieldKind
from cronkit.core.expression.values import UNIT_NO_VALUE, ValueResolver, is_special

SEPARATOR = ","


@dataclass(frozen=True)
class Combination:
    """
    One resolved clause of a field.

    Either a plain list of values (``unit`` is None) or a special rule
    identified by ``unit`` (``L``, ``LW``, ``W``, ``#``, ``?``) with its
    auxiliary values.
    """

    values: tuple[int, ...] = ()
    unit: str | None = None

    @property
    def is_special(self) -> bool:
        return self.unit is not None

    @property
    def is_no_value(self) -> bool:
        return self.unit == UNIT_NO_VALUE


@dataclass(frozen=True)
class Field:
    """Parsed field: the raw sub-expression plus its merged combinations."""

    kind: FieldKind
    expression: str
    combinations: tuple[Combination, ...]

    @property
    def plain_values(self) -> tuple[int, ...]:
        """Values of the plain combination, empty if the field has none."""
        for combination in self.combinations:
            if not combination.is_special:
                return combination.values
        return ()

    @property
    def first_value(self) -> int:
        return self.plain_values[0]

    @property
    def is_no_value(self) -> bool:
        return bool(self.combinations) and self.combinations[0].is_no_value


def create_field(expression: str, kind: FieldKind, resolver: ValueResolver) -> Field:
    """
    Parse one field of an expression.

    Args:
        expression: Raw field text (``1,15,L``)
        kind: Field kind
        resolver: Value resolver

    Returns:
        Field with merged combinations

    Raises:
        InvalidSpecialCharacterUsageError: Empty token or ``?`` mixed with others
        InvalidValueError: Token not valid for the field
    """
    combinations: list[Combination] = []

    for token in expression.split(SEPARATOR):
        if token == "" or (UNIT_NO_VALUE in expression and expression != UNIT_NO_VALUE):
            raise InvalidSpecialCharacterUsageError(
                f"invalid expression in field '{kind.display_name}' given: '{expression}'",
                kind.display_name,
            )

        token = token.upper()

        if is_special(token):
            values, unit = resolver.resolve_special(token, kind)
        else:
            values, unit = resolver.resolve(token, kind), None

        combinations.append(Combination(values=tuple(values), unit=unit))

    return Field(kind=kind, expression=expression, combinations=merge_combinations(combinations))


def merge_combinations(combinations: Iterable[Combination]) -> tuple[Combination, ...]:
    """
    Fold plain combinations into one and drop duplicate special ones.

    Specials keep first-seen order; the merged plain combination (sorted,
    duplicate-free) comes last.
    """
    combinations = tuple(combinations)
    if len(combinations) < 2:
        return combinations

    specials: list[Combination] = []
    values: set[int] = set()

    for combination in combinations:
        if combination.is_special:
            if combination not in specials:
                specials.append(combination)
        else:
            values.update(combination.values)

    if values:
        specials.append(Combination(values=tuple(sorted(values))))

    return tuple(specials)
