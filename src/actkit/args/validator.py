"""Conversion of CLI-supplied strings into prompt values.

Each converter either returns the typed value or raises
:class:`~actkit.errors.ArgValidationError` naming the argument.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from actkit.errors import ArgValidationError
from actkit.prompt.requests import Choice, normalize_choices

_TRUE = ("true", "1", "yes")
_FALSE = ("false", "0", "no")


def _fmt(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


def convert_to_number(
    value: str,
    arg_name: str,
    min: float | None = None,
    max: float | None = None,
) -> int | float:
    if not value.strip():
        raise ArgValidationError(arg_name, value, "Expected a number.")
    try:
        num = float(value)
    except ValueError:
        raise ArgValidationError(arg_name, value, "Expected a number.") from None
    if num != num:  # NaN
        raise ArgValidationError(arg_name, value, "Expected a number.")

    if min is not None and num < min:
        raise ArgValidationError(arg_name, value, f"Must be at least {_fmt(min)}.")
    if max is not None and num > max:
        raise ArgValidationError(arg_name, value, f"Must be at most {_fmt(max)}.")

    if num.is_integer() and abs(num) < 2**53:
        return int(num)
    return num


def convert_to_boolean(value: str | None, arg_name: str) -> bool:
    if value is None or value.lower() in _TRUE:
        return True
    if value.lower() in _FALSE:
        return False
    raise ArgValidationError(arg_name, value, "Expected a boolean (true/false).")


def convert_to_select_value(
    value: str,
    choices: Sequence[Any],
    arg_name: str,
) -> Any:
    """Match ``value`` against each choice's label or stringified value."""
    normalized: tuple[Choice, ...] = normalize_choices(list(choices))
    for choice in normalized:
        if choice.label == value or str(choice.value) == value:
            return choice.value
    raise ArgValidationError(
        arg_name, value, "Invalid option.", [c.label for c in normalized]
    )


def convert_to_multi_select_value(
    value: str,
    choices: Sequence[Any],
    arg_name: str,
) -> list[Any]:
    return [
        convert_to_select_value(part.strip(), choices, arg_name)
        for part in value.split(",")
    ]


def validate_text_value(
    value: str,
    arg_name: str,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: re.Pattern | str | None = None,
) -> str:
    if min_length is not None and len(value) < min_length:
        raise ArgValidationError(
            arg_name, value, f"Must be at least {min_length} characters."
        )
    if max_length is not None and len(value) > max_length:
        raise ArgValidationError(
            arg_name, value, f"Must be at most {max_length} characters."
        )
    if pattern is not None:
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        if not regex.search(value):
            raise ArgValidationError(arg_name, value, "Does not match required pattern.")
    return value
