"""Output channel: an append-only log of structured messages.

Every call appends a timestamped message and, when a sink was supplied,
hands it to the sink before returning. Live consumers (the sink) and
final-state consumers (``messages``) therefore see the same order.
"""

from __future__ import annotations

import copy
import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class OutputType(str, Enum):
    log = "log"
    success = "success"
    error = "error"
    warn = "warn"
    info = "info"
    newline = "newline"
    code = "code"
    section = "section"
    list = "list"
    key_value = "key_value"
    table = "table"
    json = "json"
    separator = "separator"
    step = "step"


@dataclass(frozen=True)
class OutputMessage:
    type: OutputType
    content: Any
    timestamp: float
    meta: dict[str, Any] = field(default_factory=dict)


OutputSink = Callable[[OutputMessage], None]


def _stringify(arg: Any) -> str:
    if isinstance(arg, str):
        return arg
    if arg is None:
        return "null"
    if isinstance(arg, (dict, list, tuple)):
        try:
            return json.dumps(arg, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(arg)
    return str(arg)


class OutputChannel:
    """Collects output from one action run."""

    def __init__(self, sink: OutputSink | None = None):
        self._messages: list[OutputMessage] = []
        self._sink = sink

    @property
    def messages(self) -> list[OutputMessage]:
        """Snapshot of every message appended so far, in order."""
        return list(self._messages)

    def get_messages(self) -> list[OutputMessage]:
        return self.messages

    def __len__(self) -> int:
        return len(self._messages)

    def _append(self, type_: OutputType, content: Any, **meta: Any) -> None:
        message = OutputMessage(
            type=type_,
            content=content,
            timestamp=time.time(),
            meta=meta,
        )
        self._messages.append(message)
        if self._sink:
            self._sink(message)

    # ── Output API ───────────────────────────────────────────

    def log(self, *args: Any) -> None:
        self._append(OutputType.log, " ".join(_stringify(a) for a in args))

    def success(self, message: str) -> None:
        self._append(OutputType.success, message)

    def error(self, message: str) -> None:
        self._append(OutputType.error, message)

    def warn(self, message: str) -> None:
        self._append(OutputType.warn, message)

    def info(self, message: str) -> None:
        self._append(OutputType.info, message)

    def newline(self) -> None:
        self._append(OutputType.newline, "")

    def code(self, snippet: str, language: str = "") -> None:
        self._append(OutputType.code, snippet, language=language)

    def section(self, title: str) -> None:
        self._append(OutputType.section, title)

    def list(self, items: list[Any]) -> None:
        self._append(OutputType.list, [str(item) for item in items])

    def key_value(self, data: dict[str, Any]) -> None:
        self._append(OutputType.key_value, copy.deepcopy(data))

    def table(self, rows: list[dict[str, Any]]) -> None:
        self._append(OutputType.table, copy.deepcopy(rows))

    def json(self, data: Any, indent: int = 2) -> None:
        self._append(OutputType.json, copy.deepcopy(data), indent=indent)

    def separator(self, char: str = "─", length: int = 50) -> None:
        self._append(OutputType.separator, "", char=char, length=length)

    def step(self, number: int, description: str) -> None:
        self._append(OutputType.step, description, number=number)
