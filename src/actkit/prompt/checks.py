"""Typed-input interpretation shared by the line reader and the interactive UI.

Each ``parse_*`` function turns one raw answer into ``(value, error)``;
``error`` is a short diagnostic to show before asking again.
"""

from __future__ import annotations

import math
import re
from typing import Any, Sequence

from actkit.i18n import core_t
from actkit.prompt.requests import (
    Choice,
    NumberRequest,
    PasswordRequest,
    TextRequest,
    Validator,
    apply_text_format,
    check_validator,
)


def format_number(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


def check_text(
    value: str,
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: re.Pattern | None = None,
    required: bool = False,
    validate: Validator | None = None,
) -> str | None:
    if required and not value:
        return core_t("value_required")
    if min_length is not None and len(value) < min_length:
        return core_t("min_length", min=min_length)
    if max_length is not None and len(value) > max_length:
        return core_t("max_length", max=max_length)
    if pattern is not None and not pattern.search(value):
        return core_t("pattern_mismatch")
    return check_validator(validate, value)


def parse_number(
    raw: str,
    *,
    default: float | None = None,
    min: float | None = None,
    max: float | None = None,
    integer: bool = False,
    required: bool = True,
) -> tuple[float | None, str | None]:
    raw = raw.strip()
    if not raw:
        if default is not None:
            return default, None
        if not required:
            return None, None
        return None, core_t("number_required")
    try:
        value = float(raw)
    except ValueError:
        return None, core_t("invalid_number")
    if not math.isfinite(value):
        return None, core_t("invalid_number")
    if integer and not value.is_integer():
        return None, core_t("integer_required")
    if min is not None and value < min:
        return None, core_t("at_least", min=format_number(min))
    if max is not None and value > max:
        return None, core_t("at_most", max=format_number(max))
    return (int(value) if value.is_integer() else value), None


def parse_confirm(raw: str, default: bool | None = None) -> tuple[bool | None, str | None]:
    answer = raw.strip().lower()
    if not answer and default is not None:
        return default, None
    if answer in ("y", "yes"):
        return True, None
    if answer in ("n", "no"):
        return False, None
    return None, core_t("answer_yes_no")


def parse_choice(
    raw: str, choices: Sequence[Choice], default: Any = None
) -> tuple[Any, str | None]:
    """1-based index into ``choices``; empty input picks ``default`` when set."""
    answer = raw.strip()
    if not answer and default is not None:
        return default, None
    if answer.isdigit() and 1 <= int(answer) <= len(choices):
        return choices[int(answer) - 1].value, None
    return None, core_t("invalid_choice", count=len(choices))


def parse_choices(
    raw: str,
    choices: Sequence[Choice],
    *,
    default: Sequence[Any] | None = None,
    min: int | None = None,
    max: int | None = None,
) -> tuple[list[Any] | None, str | None]:
    """Comma-separated 1-based indices."""
    answer = raw.strip()
    if not answer and default:
        return list(default), None

    indices: list[int] = []
    for part in filter(None, (p.strip() for p in answer.split(","))):
        if not part.isdigit() or not 1 <= int(part) <= len(choices):
            return None, core_t("invalid_choices", count=len(choices))
        indices.append(int(part) - 1)

    if min and len(indices) < min:
        return None, core_t("select_at_least", min=min)
    if max and len(indices) > max:
        return None, core_t("select_at_most", max=max)
    return [choices[i].value for i in indices], None


def match_key(
    raw: str, keys: Sequence[str] | None, case_insensitive: bool = False
) -> tuple[str | None, str | None]:
    if not keys:
        return raw, None
    answer = raw.lower() if case_insensitive else raw
    allowed = [k.lower() for k in keys] if case_insensitive else list(keys)
    if answer in allowed:
        return raw, None
    return None, core_t("invalid_key", keys=", ".join(keys))


# ── Whole-answer helpers ─────────────────────────────────────


def text_answer(req: TextRequest, raw: str) -> tuple[str | None, str | None]:
    """Default, constraints, prefix/suffix/format, then the user validator."""
    raw = raw.strip()
    if not raw and req.default is not None:
        raw = req.default
    error = check_text(
        raw,
        min_length=req.min_length,
        max_length=req.max_length,
        pattern=req.pattern,
        required=req.required,
    )
    if error:
        return None, error
    value = apply_text_format(raw, req.format, req.prefix, req.suffix) if raw else raw
    error = check_validator(req.validate, value)
    return (None, error) if error else (value, None)


def number_answer(req: NumberRequest, raw: str) -> tuple[float | None, str | None]:
    value, error = parse_number(
        raw,
        default=req.default,
        min=req.min,
        max=req.max,
        integer=req.integer,
        required=req.required,
    )
    if error is None and value is not None:
        error = check_validator(req.validate, value)
    return (None, error) if error else (value, None)


def password_answer(req: PasswordRequest, raw: str) -> tuple[str | None, str | None]:
    error = check_text(raw, min_length=req.min_length, validate=req.validate)
    return (None, error) if error else (raw, None)
