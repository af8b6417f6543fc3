"""Per-run action context assembly."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from actkit.args.parser import ParsedArgs, parse_args
from actkit.config import Config
from actkit.control import ControlAPI, FeedbackController, FeedbackSetter
from actkit.i18n import TranslateFn, Translator, get_translator
from actkit.output.channel import OutputChannel, OutputSink
from actkit.prompt.api import PromptAPI
from actkit.shell import ShellExecutor, create_shell_executor

if TYPE_CHECKING:
    from actkit.action.types import Action


@dataclass
class TuiAPI:
    prompt: PromptAPI
    output: OutputChannel
    control: ControlAPI


@dataclass
class ActionContext:
    """Everything an action's ``run`` receives."""

    tui: TuiAPI
    shell: ShellExecutor
    t: TranslateFn
    cwd: Path
    env: dict[str, str]
    config: Config
    plugin_config: dict[str, Any] | None = None
    args: list[str] = field(default_factory=list)
    parsed_args: ParsedArgs = field(default_factory=ParsedArgs)


@dataclass
class BuiltContext:
    context: ActionContext
    output: OutputChannel
    feedback: FeedbackController


def create_action_context(
    action: Action,
    *,
    config: Config | None = None,
    args: list[str] | None = None,
    plugin_config: dict[str, Any] | None = None,
    on_output: OutputSink | None = None,
    on_visual_feedback: FeedbackSetter | None = None,
    translator: Translator | None = None,
    cwd: Path | None = None,
) -> BuiltContext:
    """Build a fresh context, output channel and feedback controller for one run."""
    config = config or Config()
    translator = translator or get_translator()
    if action.translations and not translator.has(action.name):
        translator.register(action.name, action.translations)
    allowed = [action.plugin_namespace] if action.plugin_namespace else []

    output = OutputChannel(sink=on_output)
    feedback = FeedbackController(setter=on_visual_feedback)
    workdir = cwd or Path.cwd()
    raw_args = list(args or [])

    context = ActionContext(
        tui=TuiAPI(prompt=PromptAPI(), output=output, control=ControlAPI(feedback)),
        shell=create_shell_executor(workdir),
        t=translator.scoped(action.name, allowed),
        cwd=workdir,
        env=dict(os.environ),
        config=config,
        plugin_config=plugin_config,
        args=raw_args,
        parsed_args=parse_args(raw_args),
    )
    return BuiltContext(context=context, output=output, feedback=feedback)
