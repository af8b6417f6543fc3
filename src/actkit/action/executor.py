"""Action executor.

``run_action`` is the single boundary where an action's failure is caught:
callers always get an :class:`ExecutionResult`, never the exception. That
includes ``sys.exit()`` inside an action; ``KeyboardInterrupt`` and task
cancellation still propagate.
"""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from actkit.action.context import create_action_context
from actkit.action.types import Action
from actkit.config import Config
from actkit.control.feedback import FeedbackSetter, VisualFeedback
from actkit.errors import ShellCommandError, format_error
from actkit.i18n import Translator
from actkit.log import log_action_run
from actkit.output.channel import OutputChannel, OutputMessage, OutputSink

logger = logging.getLogger("actkit.executor")


@dataclass
class ExecutionResult:
    """Outcome of one ``run_action`` call."""

    success: bool
    duration: float  # milliseconds
    messages: list[OutputMessage] = field(default_factory=list)
    error: BaseException | None = None
    final_visual_state: VisualFeedback = None

    @property
    def exit_code(self) -> int:
        """Process exit code a headless driver should use."""
        if self.success:
            return 0
        if isinstance(self.error, ShellCommandError) and self.error.exit_code > 0:
            return self.error.exit_code
        if isinstance(self.error, SystemExit) and isinstance(self.error.code, int) and self.error.code > 0:
            return self.error.code
        return 1


async def run_action(
    action: Action,
    *,
    args: list[str] | None = None,
    plugins: dict[str, dict[str, Any]] | None = None,
    config: Config | None = None,
    on_output: OutputSink | None = None,
    on_visual_feedback: FeedbackSetter | None = None,
    translator: Translator | None = None,
    cwd: Path | None = None,
) -> ExecutionResult:
    """Run an action with a freshly built context.

    Args:
        action: The action to run.
        args: Raw CLI tokens passed through to the context.
        plugins: Plugin name -> user config; consulted for the action's
            plugin namespace before ``config.plugins``.
        config: Application config passed through unmodified.
        on_output: Live sink receiving each output message as it is appended.
        on_visual_feedback: Setter receiving spinner/progress state changes.

    Returns:
        ExecutionResult with success flag, duration in ms, and all messages.
    """
    config = config or Config()
    logger.info("action_start", extra={"data": {"action": action.name}})

    plugin_config = None
    if action.plugin_namespace:
        if plugins and action.plugin_namespace in plugins:
            plugin_config = plugins[action.plugin_namespace]
        else:
            plugin_config = config.plugin_config(action.plugin_namespace)

    output: OutputChannel | None = None
    feedback = None
    t0 = time.monotonic()
    try:
        built = create_action_context(
            action,
            config=config,
            args=args,
            plugin_config=plugin_config,
            on_output=on_output,
            on_visual_feedback=on_visual_feedback,
            translator=translator,
            cwd=cwd,
        )
        output, feedback = built.output, built.feedback

        result = action.run(built.context)
        if inspect.isawaitable(result):
            await result
    except (Exception, SystemExit) as e:
        elapsed = time.monotonic() - t0
        if output is None:
            output = OutputChannel(sink=on_output)
        log_action_run(action.name, elapsed, False, len(output), format_error(e))
        return ExecutionResult(
            success=False,
            duration=round(elapsed * 1000, 3),
            messages=output.messages,
            error=e,
            final_visual_state=feedback.state if feedback else None,
        )

    elapsed = time.monotonic() - t0
    log_action_run(action.name, elapsed, True, len(output))
    return ExecutionResult(
        success=True,
        duration=round(elapsed * 1000, 3),
        messages=output.messages,
        final_visual_state=feedback.state,
    )
