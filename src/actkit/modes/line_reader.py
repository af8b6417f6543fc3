"""Line-oriented prompt fallback for headless runs.

Writes a rendered prompt, reads one line, and asks again with a short
diagnostic on stderr until the answer is valid. Choice indices are 1-based.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from prompt_toolkit import prompt as pt_prompt
from rich.console import Console as RichConsole

from actkit.i18n import core_t
from actkit.prompt.checks import (
    format_number,
    match_key,
    number_answer,
    parse_choice,
    parse_choices,
    parse_confirm,
    password_answer,
    text_answer,
)
from actkit.prompt.requests import (
    Choice,
    ConfirmRequest,
    MultiSelectRequest,
    NumberRequest,
    PasswordRequest,
    Request,
    SelectRequest,
    TextRequest,
    WaitForEnterRequest,
    WaitForKeyRequest,
)

InputFn = Callable[[str], str]


def masked_input(message: str) -> str:
    return pt_prompt(message, is_password=True)


class LineReader:
    """Resolves single-value requests by reading lines."""

    def __init__(
        self,
        input_fn: InputFn | None = None,
        password_fn: InputFn | None = None,
        console: RichConsole | None = None,
        err_console: RichConsole | None = None,
    ):
        self._input = input_fn or input
        self._password = password_fn or masked_input
        self._out = console or RichConsole(highlight=False, soft_wrap=True)
        self._err = err_console or RichConsole(stderr=True, highlight=False, soft_wrap=True)
        self._handlers: dict[str, Callable[[Any], Any]] = {
            "text": self.text,
            "number": self.number,
            "password": self.password,
            "confirm": self.confirm,
            "select": self.select,
            "multi_select": self.multi_select,
            "wait_for_enter": self.wait_for_enter,
            "wait_for_key": self.wait_for_key,
        }

    async def read(self, request: Request) -> Any:
        handler = self._handlers.get(request.type)
        if handler is None:
            raise ValueError(f"Line reader cannot resolve {request.type!r} requests")
        return await handler(request)

    # ── I/O ──────────────────────────────────────────────────

    async def _ask(self, prompt: str, *, secret: bool = False) -> str:
        fn = self._password if secret else self._input
        return await asyncio.to_thread(fn, prompt)

    def say(self, line: str = "") -> None:
        self._out.print(line, markup=False)

    def fail(self, error: str) -> None:
        self._err.print(f"✗ {error}", markup=False)

    def heading(self, title: str, description: str = "") -> None:
        if title:
            self.say(title)
        if description:
            self.say(f"  {description}")

    def _show_choices(self, message: str, choices: tuple[Choice, ...], default: Any = None):
        self.say(message)
        for i, choice in enumerate(choices, 1):
            desc = f" - {choice.description}" if choice.description else ""
            mark = " (default)" if default is not None and choice.value == default else ""
            self.say(f"  {i}. {choice.label}{desc}{mark}")

    # ── Handlers ─────────────────────────────────────────────

    async def text(self, req: TextRequest) -> str:
        hint = f" ({core_t('default_hint', value=req.default)})" if req.default else ""
        placeholder = f" [{req.placeholder}]" if req.placeholder else ""
        while True:
            raw = await self._ask(f"{req.message}{hint}{placeholder}: ")
            value, error = text_answer(req, raw)
            if error is None:
                return value
            self.fail(error)

    async def number(self, req: NumberRequest) -> float | None:
        hint = (
            f" ({core_t('default_hint', value=format_number(req.default))})"
            if req.default is not None else ""
        )
        if req.min is not None or req.max is not None:
            lo = format_number(req.min) if req.min is not None else ""
            hi = format_number(req.max) if req.max is not None else ""
            hint += f" [{lo}..{hi}]"
        while True:
            value, error = number_answer(req, await self._ask(f"{req.message}{hint}: "))
            if error is None:
                return value
            self.fail(error)

    async def password(self, req: PasswordRequest) -> str:
        hint = f" (min: {req.min_length} chars)" if req.min_length else ""
        while True:
            raw = await self._ask(f"{req.message}{hint}: ", secret=True)
            value, error = password_answer(req, raw)
            if error is None:
                return value
            self.fail(error)

    async def confirm(self, req: ConfirmRequest) -> bool:
        if req.default is None:
            hint = " (y/n)"
        else:
            hint = " (Y/n)" if req.default else " (y/N)"
        while True:
            value, error = parse_confirm(await self._ask(f"{req.message}{hint}: "), req.default)
            if error is None:
                return value
            self.fail(error)

    async def select(self, req: SelectRequest) -> Any:
        self._show_choices(req.message, req.choices, req.default)
        while True:
            raw = await self._ask(f"{core_t('enter_choice')}: ")
            value, error = parse_choice(raw, req.choices, req.default)
            if error is None:
                return value
            self.fail(error)

    async def multi_select(self, req: MultiSelectRequest) -> list[Any]:
        self._show_choices(req.message, req.choices)
        hint = f" (min: {req.min})" if req.min else ""
        hint += f" (max: {req.max})" if req.max else ""
        while True:
            raw = await self._ask(f"{core_t('enter_choices')}{hint}: ")
            values, error = parse_choices(
                raw, req.choices, default=req.default, min=req.min, max=req.max
            )
            if error is None:
                return values
            self.fail(error)

    async def wait_for_enter(self, req: WaitForEnterRequest) -> None:
        prompt = f"{req.message} (press Enter)" if req.message else core_t("press_enter")
        await self._ask(prompt)

    async def wait_for_key(self, req: WaitForKeyRequest) -> str:
        keys_hint = f" [{'/'.join(req.keys)}]" if req.keys else ""
        while True:
            raw = await self._ask(f"{req.message or core_t('press_key')}{keys_hint}: ")
            key, error = match_key(raw, req.keys, req.case_insensitive)
            if error is None:
                return key
            self.fail(error)
