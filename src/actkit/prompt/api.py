"""Prompt construction functions.

Each function validates its own static invariants, builds a request and
awaits the active responder. None of them knows how the value is produced.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from actkit.errors import EmptyChoiceSet, EmptyStepList
from actkit.prompt.requests import (
    ArgMapping,
    ConfirmRequest,
    FormPage,
    FormRequest,
    MultiSelectRequest,
    NumberRequest,
    PasswordRequest,
    SelectRequest,
    StepFormRequest,
    TextFormat,
    TextRequest,
    Validator,
    WaitForEnterRequest,
    WaitForKeyRequest,
    normalize_choices,
)
from actkit.prompt.responder import resolve


def _mapping(arg: str | None, arg_short: str | None, arg_index: int | None) -> ArgMapping:
    return ArgMapping(arg=arg, arg_short=arg_short, arg_index=arg_index)


def _page(page: FormPage | dict) -> FormPage:
    return page if isinstance(page, FormPage) else FormPage.model_validate(page)


async def text(
    message: str,
    *,
    default: str | None = None,
    placeholder: str = "",
    validate: Validator | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | re.Pattern | None = None,
    format: TextFormat | None = None,
    prefix: str = "",
    suffix: str = "",
    multiline: bool = False,
    description: str = "",
    arg: str | None = None,
    arg_short: str | None = None,
    arg_index: int | None = None,
) -> str:
    """Ask for a line of text.

    ``description`` only feeds ``--help`` output for mapped arguments.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    request = TextRequest(
        message=message,
        default=default,
        placeholder=placeholder,
        validate=validate,
        min_length=min_length,
        max_length=max_length,
        pattern=pattern,
        format=format,
        prefix=prefix,
        suffix=suffix,
        multiline=multiline,
        mapping=_mapping(arg, arg_short, arg_index),
    )
    return await resolve(request)


async def number(
    message: str,
    *,
    default: float | None = None,
    min: float | None = None,
    max: float | None = None,
    integer: bool = False,
    validate: Validator | None = None,
    description: str = "",
    arg: str | None = None,
    arg_short: str | None = None,
    arg_index: int | None = None,
) -> float:
    request = NumberRequest(
        message=message,
        default=default,
        min=min,
        max=max,
        integer=integer,
        validate=validate,
        mapping=_mapping(arg, arg_short, arg_index),
    )
    return await resolve(request)


async def password(
    message: str,
    *,
    min_length: int | None = None,
    validate: Validator | None = None,
    description: str = "",
    arg: str | None = None,
    arg_short: str | None = None,
    arg_index: int | None = None,
) -> str:
    request = PasswordRequest(
        message=message,
        min_length=min_length,
        validate=validate,
        mapping=_mapping(arg, arg_short, arg_index),
    )
    return await resolve(request)


async def confirm(
    message: str,
    *,
    default: bool | None = None,
    description: str = "",
    arg: str | None = None,
    arg_short: str | None = None,
    arg_index: int | None = None,
) -> bool:
    request = ConfirmRequest(
        message=message,
        default=default,
        mapping=_mapping(arg, arg_short, arg_index),
    )
    return await resolve(request)


async def select(
    message: str,
    choices: Sequence[Any],
    *,
    default: Any = None,
    description: str = "",
    arg: str | None = None,
    arg_short: str | None = None,
    arg_index: int | None = None,
) -> Any:
    """Pick one value. Raw values become ``Choice(str(value), value)``."""
    if not choices:
        raise EmptyChoiceSet("select() choices cannot be empty")
    request = SelectRequest(
        message=message,
        choices=normalize_choices(choices),
        default=default,
        mapping=_mapping(arg, arg_short, arg_index),
    )
    return await resolve(request)


async def multi_select(
    message: str,
    choices: Sequence[Any],
    *,
    default: Sequence[Any] | None = None,
    min: int | None = None,
    max: int | None = None,
    description: str = "",
    arg: str | None = None,
    arg_short: str | None = None,
    arg_index: int | None = None,
) -> list[Any]:
    if not choices:
        raise EmptyChoiceSet("multi_select() choices cannot be empty")
    request = MultiSelectRequest(
        message=message,
        choices=normalize_choices(choices),
        default=tuple(default) if default is not None else None,
        min=min,
        max=max,
        mapping=_mapping(arg, arg_short, arg_index),
    )
    return list(await resolve(request))


async def wait_for_enter(message: str = "") -> None:
    await resolve(WaitForEnterRequest(message=message))


async def wait_for_key(
    keys: Sequence[str] | None = None,
    *,
    message: str = "",
    timeout: float | None = None,
    case_insensitive: bool = False,
) -> str:
    request = WaitForKeyRequest(
        message=message,
        keys=tuple(keys) if keys else None,
        case_insensitive=case_insensitive,
        timeout=timeout,
    )
    return await resolve(request)


async def form(page: FormPage | dict) -> dict[str, Any]:
    """Show a single page of fields; resolves to ``{field_key: value}``."""
    return dict(await resolve(FormRequest(page=_page(page))))


async def step_form(
    steps: Sequence[FormPage | dict],
    *,
    validate: Validator | None = None,
) -> dict[str, Any]:
    """Multi-step form; values from all steps are merged in step order.

    ``validate`` runs once on the merged values after the last step.
    """
    if not steps:
        raise EmptyStepList("step_form() requires at least one step")
    request = StepFormRequest(
        steps=tuple(_page(step) for step in steps),
        validate=validate,
    )
    return dict(await resolve(request))


class PromptAPI:
    """``ctx.tui.prompt``: callable for forms, with one method per prompt type.

    ``await tui.prompt(page)`` shows a form; ``await tui.prompt([p1, p2])``
    runs a step form.
    """

    text = staticmethod(text)
    number = staticmethod(number)
    password = staticmethod(password)
    confirm = staticmethod(confirm)
    select = staticmethod(select)
    multi_select = staticmethod(multi_select)
    form = staticmethod(form)
    step_form = staticmethod(step_form)

    async def __call__(
        self,
        page_or_steps: FormPage | dict | Sequence[FormPage | dict],
        *,
        validate: Validator | None = None,
    ) -> dict[str, Any]:
        if isinstance(page_or_steps, (list, tuple)):
            return await step_form(page_or_steps, validate=validate)
        return await form(page_or_steps)
