"""Process-wide responder slot.

Exactly one responder resolves prompt requests at a time. A mode driver
installs its responder before calling ``run_action`` and clears it after;
prompt functions reach it only through :func:`resolve`.
"""

from __future__ import annotations

import inspect
import threading
from typing import Any, Awaitable, Callable

from actkit.errors import NoResponderConfigured, ResponderBusy
from actkit.prompt.requests import Request

Responder = Callable[[Request], "Any | Awaitable[Any]"]


class ResponderSlot:
    """Single-slot registry; last ``set`` wins."""

    def __init__(self):
        self._responder: Responder | None = None
        self._pending = 0
        self._lock = threading.Lock()

    def set(self, responder: Responder) -> None:
        with self._lock:
            if self._pending:
                raise ResponderBusy(
                    "Cannot replace the responder while a request is pending"
                )
            self._responder = responder

    def clear(self) -> None:
        with self._lock:
            if self._pending:
                raise ResponderBusy(
                    "Cannot clear the responder while a request is pending"
                )
            self._responder = None

    def get(self) -> Responder | None:
        return self._responder

    @property
    def pending(self) -> int:
        return self._pending

    async def resolve(self, request: Request) -> Any:
        with self._lock:
            responder = self._responder
            if responder is None:
                raise NoResponderConfigured(request.type)
            self._pending += 1
        try:
            result = responder(request)
            if inspect.isawaitable(result):
                result = await result
            return result
        finally:
            with self._lock:
                self._pending -= 1


_slot = ResponderSlot()


def set_responder(responder: Responder) -> None:
    """Install the active responder, replacing any previous one."""
    _slot.set(responder)


def clear_responder() -> None:
    """Remove the active responder."""
    _slot.clear()


def get_responder() -> Responder | None:
    return _slot.get()


async def resolve(request: Request) -> Any:
    """Hand a request to the active responder and wait for its value."""
    return await _slot.resolve(request)
