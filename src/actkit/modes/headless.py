"""Headless mode: run one action from the command line, without a UI.

Prompts that carry an argument mapping are answered from CLI flags; the
rest (and mapped prompts with no flag, when stdin is a terminal) fall back
to the line reader. A flag value that fails validation aborts the run.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable

from rich.console import Console as RichConsole

from actkit.action.executor import run_action
from actkit.action.registry import resolve_action
from actkit.action.types import Action
from actkit.args.analyzer import ActionArgsMeta, analyze_action_args, format_args_help
from actkit.args.parser import ParsedArgs, get_arg_value, get_flag_value, parse_args
from actkit.args.validator import (
    convert_to_boolean,
    convert_to_multi_select_value,
    convert_to_number,
    convert_to_select_value,
    validate_text_value,
)
from actkit.config import Config
from actkit.control.feedback import discard_feedback
from actkit.control.terminal import is_interactive
from actkit.errors import (
    ActionNotFoundError,
    ArgValidationError,
    MissingArgumentError,
    format_error,
)
from actkit.i18n import core_t, set_locale
from actkit.log import log_prompt, setup_logging
from actkit.modes.line_reader import LineReader
from actkit.output.render import PlainTextRenderer
from actkit.prompt.forms import Answer, FormWalker
from actkit.prompt.requests import (
    ConfirmRequest,
    FormPage,
    MultiSelectRequest,
    NumberRequest,
    PasswordRequest,
    Request,
    SelectRequest,
    TextRequest,
    apply_text_format,
    check_validator,
)
from actkit.prompt.responder import clear_responder, set_responder

logger = logging.getLogger("actkit.headless")

HELP_FLAGS = ("--help", "-h")


# ── Flag conversion ──────────────────────────────────────────


def _checked(value: Any, raw: str, name: str, validate: Any) -> Any:
    error = check_validator(validate, value)
    if error:
        raise ArgValidationError(name, raw, error)
    return value


def _text_from_flag(req: TextRequest, raw: str, name: str) -> str:
    validate_text_value(raw, name, req.min_length, req.max_length, req.pattern)
    if req.required and not raw:
        raise ArgValidationError(name, raw, "A value is required.")
    value = apply_text_format(raw, req.format, req.prefix, req.suffix)
    return _checked(value, raw, name, req.validate)


def _number_from_flag(req: NumberRequest, raw: str, name: str) -> float:
    value = convert_to_number(raw, name, req.min, req.max)
    if req.integer and not isinstance(value, int):
        raise ArgValidationError(name, raw, "Expected an integer.")
    return _checked(value, raw, name, req.validate)


def _password_from_flag(req: PasswordRequest, raw: str, name: str) -> str:
    validate_text_value(raw, name, req.min_length)
    return _checked(raw, raw, name, req.validate)


def _select_from_flag(req: SelectRequest, raw: str, name: str) -> Any:
    return convert_to_select_value(raw, req.choices, name)


def _multi_select_from_flag(req: MultiSelectRequest, raw: str, name: str) -> list[Any]:
    values = convert_to_multi_select_value(raw, req.choices, name)
    if req.min and len(values) < req.min:
        raise ArgValidationError(name, raw, f"Select at least {req.min}.")
    if req.max and len(values) > req.max:
        raise ArgValidationError(name, raw, f"Select at most {req.max}.")
    return values


_FLAG_CONVERTERS: dict[str, Callable[[Any, str, str], Any]] = {
    "text": _text_from_flag,
    "number": _number_from_flag,
    "password": _password_from_flag,
    "select": _select_from_flag,
    "multi_select": _multi_select_from_flag,
}

_MISSING = object()


def value_from_flags(parsed: ParsedArgs, request: Request) -> Any:
    """Converted flag value for a mapped request, or ``_MISSING``."""
    mapping = request.mapping
    if isinstance(request, ConfirmRequest):
        flag = get_flag_value(parsed, mapping)
        if flag is not None:
            return flag
        raw = get_arg_value(parsed, mapping)
        return _MISSING if raw is None else convert_to_boolean(raw, mapping.name)

    raw = get_arg_value(parsed, mapping)
    if raw is None:
        return _MISSING
    return _FLAG_CONVERTERS[request.type](request, raw, mapping.name)


# ── Responder ────────────────────────────────────────────────


class HeadlessResponder(FormWalker):
    """Responder for headless runs: flags first, then defaults or the reader."""

    def __init__(
        self,
        parsed: ParsedArgs,
        reader: LineReader | None = None,
        interactive: Callable[[], bool] = is_interactive,
    ):
        self.parsed = parsed
        self.reader = reader or LineReader()
        self._interactive = interactive

    async def __call__(self, request: Request) -> Any:
        if request.type == "form":
            return await self.resolve_form(request)
        if request.type == "step_form":
            return await self.resolve_step_form(request)
        return (await self.answer(request)).value

    async def answer(self, request: Request) -> Answer:
        mapping = getattr(request, "mapping", None)
        if mapping:
            value = value_from_flags(self.parsed, request)
            if value is not _MISSING:
                log_prompt(request.type, "flag", mapping.name)
                return Answer(value, "flag", retryable=False)
            if not self._interactive():
                default = getattr(request, "default", None)
                if default is None:
                    raise MissingArgumentError(mapping.label)
                log_prompt(request.type, "default", mapping.name)
                if isinstance(request, MultiSelectRequest):
                    default = list(default)
                return Answer(default, "default", retryable=False)

        value = await self.reader.read(request)
        log_prompt(request.type, "reader")
        return Answer(value, "reader")

    def show_error(self, message: str) -> None:
        self.reader.fail(message)

    def show_page(self, page: FormPage, step: int = 1, total: int = 1) -> None:
        title = f"{page.title} ({step}/{total})" if page.title and total > 1 else page.title
        self.reader.heading(title, page.description)


# ── Driver ───────────────────────────────────────────────────


class HeadlessMode:
    """Runs a single action by name or path and reports a process exit code."""

    def __init__(
        self,
        config: Config | None = None,
        *,
        workspace: Path | None = None,
        home: Path | None = None,
        reader: LineReader | None = None,
        console: RichConsole | None = None,
        err_console: RichConsole | None = None,
        interactive: Callable[[], bool] = is_interactive,
    ):
        self.config = config or Config()
        self.workspace = workspace
        self.home = home
        self._out = console or RichConsole(highlight=False, soft_wrap=True)
        self._err = err_console or RichConsole(stderr=True, highlight=False, soft_wrap=True)
        self.reader = reader or LineReader(console=self._out, err_console=self._err)
        self.renderer = PlainTextRenderer(self._out, self._err)
        self._interactive = interactive

    def _say(self, line: str = "", *, err: bool = False) -> None:
        (self._err if err else self._out).print(line, markup=False)

    def run(self, action_ref: str | None, argv: list[str] | None = None) -> int:
        return asyncio.run(self.run_async(action_ref, argv))

    async def run_async(self, action_ref: str | None, argv: list[str] | None = None) -> int:
        argv = list(argv or [])
        if not action_ref:
            self._say(f"Error: {core_t('action_required')}", err=True)
            self._say("Usage: actkit run <action> [args...]", err=True)
            return 1

        setup_logging(self.config.log_dir, self.config.logging_level, stderr_level=logging.ERROR)
        set_locale(self.config.locale)

        action = self._resolve(action_ref)
        if action is None:
            return 1

        if any(token in HELP_FLAGS for token in argv):
            self._say(self.help_text(action))
            return 0

        responder = HeadlessResponder(parse_args(argv), self.reader, self._interactive)
        set_responder(responder)
        try:
            self._say(core_t("running", name=action.name))
            self._say()
            result = await run_action(
                action,
                args=argv,
                config=self.config,
                on_output=self.renderer.render,
                on_visual_feedback=discard_feedback,
                cwd=self.workspace,
            )
        finally:
            clear_responder()

        if result.messages:
            self._say()
        if result.success:
            self._say(core_t("completed", name=action.name))
            return 0

        self._say(core_t("failed", name=action.name), err=True)
        self._say(format_error(result.error), err=True)
        return result.exit_code

    def _resolve(self, action_ref: str) -> Action | None:
        try:
            return resolve_action(action_ref, self.config, self.workspace, self.home)
        except ActionNotFoundError as e:
            self._say(f"Error: {core_t('action_not_found', name=action_ref)}", err=True)
            if e.available:
                self._say("", err=True)
                self._say(core_t("available_actions"), err=True)
                for name in e.available:
                    self._say(f"  - {name}", err=True)
            return None
        except Exception as e:
            logger.error("action_load_failed", extra={"data": {"ref": action_ref}}, exc_info=True)
            self._say(f"Error: {format_error(e)}", err=True)
            return None

    def help_text(self, action: Action) -> str:
        meta = analyze_action_args(action.file_path) if action.file_path else None
        if meta is None:
            meta = ActionArgsMeta()
        if not meta.name:
            meta.name = action.name
        if not meta.description and isinstance(action.description, str):
            meta.description = action.description
        return format_args_help(meta, core_t("no_args"))
