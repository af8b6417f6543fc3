"""Interactive mode: pick and run an action with a Rich terminal UI."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from rich.console import Console as RichConsole
from rich.text import Text

from actkit.action.executor import run_action
from actkit.action.registry import build_registry, resolve_action
from actkit.action.types import Action
from actkit.config import Config
from actkit.errors import ActionNotFoundError, format_error
from actkit.i18n import core_t, set_locale
from actkit.log import setup_logging
from actkit.output.render import RichRenderer
from actkit.prompt import api as prompt_api
from actkit.prompt.requests import Choice
from actkit.prompt.responder import clear_responder, set_responder
from actkit.ui.feedback import RichFeedback
from actkit.ui.responder import InteractiveResponder

logger = logging.getLogger("actkit.interactive")


class InteractiveMode:
    def __init__(
        self,
        config: Config | None = None,
        *,
        workspace: Path | None = None,
        home: Path | None = None,
        console: RichConsole | None = None,
        responder: InteractiveResponder | None = None,
    ):
        self.config = config or Config()
        self.workspace = workspace
        self.home = home
        self._console = console or RichConsole()
        self.feedback = RichFeedback(self._console)
        self.responder = responder or InteractiveResponder(
            self._console, before_prompt=self.feedback.stop
        )
        self.renderer = RichRenderer(self._console)

    def run(self, action_ref: str | None = None, argv: list[str] | None = None) -> int:
        return asyncio.run(self.run_async(action_ref, argv))

    async def run_async(self, action_ref: str | None = None, argv: list[str] | None = None) -> int:
        setup_logging(self.config.log_dir, self.config.logging_level)
        set_locale(self.config.locale)

        set_responder(self.responder)
        try:
            action = await self._pick(action_ref)
            if action is None:
                return 1

            self._console.print(Text(core_t("running", name=action.name), style="dim"))
            result = await run_action(
                action,
                args=list(argv or []),
                config=self.config,
                on_output=self.renderer.render,
                on_visual_feedback=self.feedback,
                cwd=self.workspace,
            )
        finally:
            self.feedback.stop()
            clear_responder()

        self._console.print()
        if result.success:
            self._console.print(Text(core_t("completed", name=action.name), style="green"))
            self._console.print(Text(f"{result.duration / 1000:.2f}s", style="dim"))
            return 0
        self._console.print(Text(core_t("failed", name=action.name), style="bold red"))
        self._console.print(Text(format_error(result.error), style="red"))
        return result.exit_code

    async def _pick(self, action_ref: str | None) -> Action | None:
        if action_ref:
            try:
                return resolve_action(action_ref, self.config, self.workspace, self.home)
            except ActionNotFoundError:
                self._console.print(
                    Text(core_t("action_not_found", name=action_ref), style="bold red")
                )
                return None
            except Exception as e:
                logger.error("action_load_failed", extra={"data": {"ref": action_ref}}, exc_info=True)
                self._console.print(Text(f"Error: {format_error(e)}", style="bold red"))
                return None

        registry = build_registry(self.config, self.workspace, self.home)
        actions = registry.all()
        if not actions:
            self._console.print(Text("No actions found.", style="yellow"))
            return None
        choices = [
            Choice(label=a.name, value=a.name, description=a.describe())
            for a in actions
        ]
        name = await prompt_api.select("Select an action", choices)
        return registry.get_by_name(name)
