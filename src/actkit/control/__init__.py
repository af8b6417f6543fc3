"""Control API: timing, visual feedback and terminal helpers."""

from __future__ import annotations

from typing import Sequence

from actkit.control.feedback import (
    FeedbackController,
    FeedbackSetter,
    ProgressControl,
    ProgressState,
    SpinnerControl,
    SpinnerKind,
    SpinnerState,
    VisualFeedback,
    discard_feedback,
)
from actkit.control.terminal import TerminalSize, delay, get_terminal_size, is_interactive
from actkit.prompt import api as prompt_api


class ControlAPI:
    """``ctx.tui.control`` for one run."""

    def __init__(self, feedback: FeedbackController):
        self._feedback = feedback

    delay = staticmethod(delay)
    is_interactive = staticmethod(is_interactive)
    get_terminal_size = staticmethod(get_terminal_size)

    async def wait_for_enter(self, message: str = "") -> None:
        await prompt_api.wait_for_enter(message)

    async def wait_for_key(
        self,
        keys: Sequence[str] | None = None,
        *,
        message: str = "",
        timeout: float | None = None,
        case_insensitive: bool = False,
    ) -> str:
        return await prompt_api.wait_for_key(
            keys, message=message, timeout=timeout, case_insensitive=case_insensitive
        )

    def spinner(self, kind: SpinnerKind = "dots", message: str = "Loading...") -> SpinnerControl:
        return self._feedback.spinner(kind=kind, message=message)

    def progress(
        self,
        total: float = 100,
        value: float = 0,
        message: str = "Processing...",
    ) -> ProgressControl:
        return self._feedback.progress(total=total, value=value, message=message)


__all__ = [
    "ControlAPI",
    "FeedbackController",
    "FeedbackSetter",
    "ProgressControl",
    "ProgressState",
    "SpinnerControl",
    "SpinnerState",
    "TerminalSize",
    "VisualFeedback",
    "delay",
    "discard_feedback",
    "get_terminal_size",
    "is_interactive",
]
