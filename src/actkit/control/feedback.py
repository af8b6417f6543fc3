"""Spinner / progress state machine.

The controller only produces state and hands it to an injected setter; an
interactive front-end draws it, headless mode plugs in a setter that drops
it. ``succeed``/``fail`` schedule an automatic clear that any later
``start``/``stop`` cancels.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Literal, Union

Status = Literal["running", "success", "error"]
SpinnerKind = Literal["dots", "line", "arc"]

AUTO_CLEAR_DELAY = 1.0  # seconds


@dataclass(frozen=True)
class SpinnerState:
    kind: SpinnerKind
    message: str
    status: Status = "running"


@dataclass(frozen=True)
class ProgressState:
    value: float
    total: float
    message: str
    status: Status = "running"

    @property
    def percent(self) -> int:
        return int(self.value * 100 / self.total) if self.total else 0


VisualFeedback = Union[SpinnerState, ProgressState, None]
FeedbackSetter = Callable[[VisualFeedback], None]


def discard_feedback(state: VisualFeedback) -> None:
    """Setter for modes that show no transient status."""


class FeedbackController:
    """Holds the visual feedback state of one action run."""

    def __init__(
        self,
        setter: FeedbackSetter | None = None,
        clear_delay: float = AUTO_CLEAR_DELAY,
    ):
        self._setter = setter or discard_feedback
        self._clear_delay = clear_delay
        self._state: VisualFeedback = None
        self._timer: Any = None
        self._lock = threading.Lock()

    @property
    def state(self) -> VisualFeedback:
        return self._state

    def _set(self, state: VisualFeedback) -> None:
        self._state = state
        self._setter(state)

    def _cancel_clear(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _schedule_clear(self) -> None:
        self._cancel_clear()
        try:
            loop = asyncio.get_running_loop()
            timer: Any = loop.call_later(self._clear_delay, self._auto_clear)
        except RuntimeError:
            timer = threading.Timer(self._clear_delay, self._auto_clear)
            timer.daemon = True
            timer.start()
        with self._lock:
            self._timer = timer

    def _auto_clear(self) -> None:
        with self._lock:
            self._timer = None
        self._set(None)

    # Shared transitions

    def begin(self, state: VisualFeedback) -> None:
        self._cancel_clear()
        self._set(state)

    def clear(self) -> None:
        self._cancel_clear()
        self._set(None)

    def finish(self, state: VisualFeedback) -> None:
        self._set(state)
        self._schedule_clear()

    # Factories

    def spinner(self, kind: SpinnerKind = "dots", message: str = "Loading...") -> SpinnerControl:
        return SpinnerControl(self, kind=kind, message=message)

    def progress(
        self,
        total: float = 100,
        value: float = 0,
        message: str = "Processing...",
    ) -> ProgressControl:
        return ProgressControl(self, total=total, value=value, message=message)


class SpinnerControl:
    def __init__(self, controller: FeedbackController, kind: SpinnerKind, message: str):
        self._controller = controller
        self._kind = kind
        self._initial_message = message or "Loading..."

    def _current(self) -> SpinnerState:
        state = self._controller.state
        if isinstance(state, SpinnerState):
            return state
        return SpinnerState(kind=self._kind, message=self._initial_message)

    def start(self, message: str | None = None) -> None:
        self._controller.begin(SpinnerState(
            kind=self._kind,
            message=message or self._initial_message,
        ))

    def update(self, message: str) -> None:
        self._controller._set(replace(self._current(), message=message))

    def stop(self) -> None:
        self._controller.clear()

    def succeed(self, message: str | None = None) -> None:
        current = self._current()
        self._controller.finish(
            replace(current, message=message or current.message, status="success")
        )

    def fail(self, message: str | None = None) -> None:
        current = self._current()
        self._controller.finish(
            replace(current, message=message or current.message, status="error")
        )


class ProgressControl:
    def __init__(
        self,
        controller: FeedbackController,
        total: float,
        value: float,
        message: str,
    ):
        self._controller = controller
        self._total = total if total and total > 0 else 100
        self._initial_value = self._clamp(value)
        self._initial_message = message or "Processing..."

    def _clamp(self, value: float) -> float:
        return max(0, min(value, self._total))

    def _current(self) -> ProgressState:
        state = self._controller.state
        if isinstance(state, ProgressState):
            return state
        return ProgressState(
            value=self._initial_value,
            total=self._total,
            message=self._initial_message,
        )

    def start(self, message: str | None = None) -> None:
        self._controller.begin(ProgressState(
            value=self._initial_value,
            total=self._total,
            message=message or self._initial_message,
        ))

    def update(self, value: float) -> None:
        current = self._current()
        self._controller._set(
            replace(current, value=self._clamp(value), status="running")
        )

    def increment(self, delta: float = 1) -> None:
        current = self._current()
        self._controller._set(
            replace(current, value=self._clamp(current.value + delta), status="running")
        )

    def stop(self) -> None:
        self._controller.clear()

    def succeed(self, message: str | None = None) -> None:
        current = self._current()
        self._controller.finish(replace(
            current,
            value=self._total,
            message=message or current.message,
            status="success",
        ))

    def fail(self, message: str | None = None) -> None:
        current = self._current()
        self._controller.finish(
            replace(current, message=message or current.message, status="error")
        )
