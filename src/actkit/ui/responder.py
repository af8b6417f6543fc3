"""Interactive responder using Rich + prompt_toolkit."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.text import Text

from actkit.i18n import core_t
from actkit.log import log_prompt
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
from actkit.prompt.forms import Answer, FormWalker
from actkit.prompt.requests import (
    Choice,
    ConfirmRequest,
    FormPage,
    MultiSelectRequest,
    NumberRequest,
    PasswordRequest,
    Request,
    SelectRequest,
    TextRequest,
    WaitForEnterRequest,
    WaitForKeyRequest,
)

KeyReader = Callable[[FormattedText], Awaitable[str]]


async def read_single_key(message: FormattedText) -> str:
    """Return the first key pressed, without waiting for Enter."""
    kb = KeyBindings()

    @kb.add(Keys.Any)
    def _any(event):
        event.app.exit(result=event.data)

    @kb.add("enter")
    def _enter(event):
        event.app.exit(result="\r")

    session: PromptSession[str] = PromptSession(key_bindings=kb)
    return await session.prompt_async(message)


class InteractiveResponder(FormWalker):
    """Renders each request in the terminal and waits for the user.

    Choices are shown in a numbered panel; answers are typed into a
    prompt_toolkit prompt and re-asked with a short diagnostic when invalid.
    """

    def __init__(
        self,
        console: RichConsole | None = None,
        session: PromptSession | None = None,
        read_key: KeyReader | None = None,
        before_prompt: Callable[[], None] | None = None,
    ):
        self._console = console or RichConsole()
        self._session = session or PromptSession()
        self._read_key = read_key or read_single_key
        self._before_prompt = before_prompt
        self._handlers: dict[str, Callable[[Any], Awaitable[Any]]] = {
            "text": self._text,
            "number": self._number,
            "password": self._password,
            "confirm": self._confirm,
            "select": self._select,
            "multi_select": self._multi_select,
            "wait_for_enter": self._wait_for_enter,
            "wait_for_key": self._wait_for_key,
        }

    async def __call__(self, request: Request) -> Any:
        if self._before_prompt:
            self._before_prompt()
        if request.type == "form":
            return await self.resolve_form(request)
        if request.type == "step_form":
            return await self.resolve_step_form(request)
        return (await self.answer(request)).value

    async def answer(self, request: Request) -> Answer:
        value = await self._handlers[request.type](request)
        log_prompt(request.type, "ui")
        return Answer(value, "ui")

    # ── Rendering ────────────────────────────────────────────

    def show_error(self, message: str) -> None:
        self._console.print(Text(f"  ✗ {message}", style="red"))

    def show_page(self, page: FormPage, step: int = 1, total: int = 1) -> None:
        if not page.title and not page.description and total == 1:
            return
        body = Text(page.description or "", style="dim")
        title = page.title or ""
        if total > 1:
            title = f"{title} ({step}/{total})" if title else f"{step}/{total}"
        self._console.print()
        self._console.print(
            Panel(
                body,
                title=Text(title, style="bold blue"),
                border_style="blue",
                expand=False,
                padding=(0, 1),
            )
        )

    def _show_choices(
        self, message: str, choices: Sequence[Choice], default: Any = None, multiple: bool = False
    ) -> None:
        lines = Text()
        for i, choice in enumerate(choices, 1):
            lines.append(f"\n  [{i}] ", style="cyan bold")
            lines.append(choice.label)
            if choice.description:
                lines.append(f" - {choice.description}", style="dim")
            if default is not None and choice.value == default:
                lines.append(" (default)", style="italic")
        lines.append("\n")
        hint = " (comma-separated)" if multiple else ""
        self._console.print(
            Panel(
                lines,
                title=Text(f"{message}{hint}", style="bold"),
                border_style="blue",
                expand=False,
                padding=(0, 1),
            )
        )

    async def _ask(
        self,
        message: str,
        hint: str = "",
        *,
        default: str = "",
        placeholder: str = "",
        is_password: bool = False,
        multiline: bool = False,
    ) -> str:
        fragments = [("bold", f"? {message}")]
        if hint:
            fragments.append(("#888888", f" {hint}"))
        fragments.append(("", " "))
        return await self._session.prompt_async(
            FormattedText(fragments),
            default=default,
            placeholder=FormattedText([("#666666", placeholder)]) if placeholder else None,
            is_password=is_password,
            multiline=multiline,
        )

    # ── Handlers ─────────────────────────────────────────────

    async def _text(self, req: TextRequest) -> str:
        while True:
            raw = await self._ask(
                req.message,
                default=req.default or "",
                placeholder=req.placeholder,
                multiline=req.multiline,
            )
            value, error = text_answer(req, raw)
            if error is None:
                return value
            self.show_error(error)

    async def _number(self, req: NumberRequest) -> float | None:
        hint = ""
        if req.min is not None or req.max is not None:
            lo = format_number(req.min) if req.min is not None else ""
            hi = format_number(req.max) if req.max is not None else ""
            hint = f"[{lo}..{hi}]"
        default = format_number(req.default) if req.default is not None else ""
        while True:
            value, error = number_answer(req, await self._ask(req.message, hint, default=default))
            if error is None:
                return value
            self.show_error(error)

    async def _password(self, req: PasswordRequest) -> str:
        while True:
            raw = await self._ask(req.message, is_password=True)
            value, error = password_answer(req, raw)
            if error is None:
                return value
            self.show_error(error)

    async def _confirm(self, req: ConfirmRequest) -> bool:
        if req.default is None:
            hint = "[y/n]"
        else:
            hint = "[Y/n]" if req.default else "[y/N]"
        while True:
            value, error = parse_confirm(await self._ask(req.message, hint), req.default)
            if error is None:
                return value
            self.show_error(error)

    async def _select(self, req: SelectRequest) -> Any:
        self._show_choices(req.message, req.choices, req.default)
        while True:
            raw = await self._ask(core_t("enter_choice"))
            value, error = parse_choice(raw, req.choices, req.default)
            if error is None:
                return value
            self.show_error(error)

    async def _multi_select(self, req: MultiSelectRequest) -> list[Any]:
        self._show_choices(req.message, req.choices, multiple=True)
        while True:
            raw = await self._ask(core_t("enter_choices"))
            values, error = parse_choices(
                raw, req.choices, default=req.default, min=req.min, max=req.max
            )
            if error is None:
                return values
            self.show_error(error)

    async def _wait_for_enter(self, req: WaitForEnterRequest) -> None:
        await self._ask(req.message or core_t("press_enter"), "(Enter)" if req.message else "")

    async def _wait_for_key(self, req: WaitForKeyRequest) -> str:
        hint = f" [{'/'.join(req.keys)}]" if req.keys else ""
        message = FormattedText([
            ("bold", f"? {req.message or core_t('press_key')}"),
            ("#888888", f"{hint} "),
        ])
        while True:
            key, error = match_key(await self._read_key(message), req.keys, req.case_insensitive)
            if error is None:
                return key
            self.show_error(error)
