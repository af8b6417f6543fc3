"""Structured logging for actkit.

Every record is one JSON object per line: action runs, prompt
resolutions and load failures, so a headless run in CI leaves a trail
that can be grepped or fed to ``jq``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from actkit.errors import format_error


class JSONFormatter(logging.Formatter):
    """One JSON line per record.

    Keys: ``ts`` (UTC, ISO 8601), ``level``, ``logger``, ``msg``, plus
    ``data`` for anything passed as ``extra={"data": ...}`` and ``error``
    when the record carries an exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data is not None:
            entry["data"] = data
        if record.exc_info and record.exc_info[1] is not None:
            entry["error"] = format_error(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    log_dir: Path | None = None,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
) -> logging.Logger:
    """Attach JSON handlers to the ``actkit`` logger and return it.

    ``log_dir`` adds an ``actkit.jsonl`` file handler at ``level``; stderr
    always gets a handler at ``stderr_level``. Calling again only adjusts
    the stderr threshold, so modes can tighten it after startup.
    """
    root = logging.getLogger("actkit")
    root.setLevel(level)

    if root.handlers:
        for handler in root.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(stderr_level)
        return root

    formatter = JSONFormatter()
    handlers: list[logging.Handler] = []
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "actkit.jsonl", encoding="utf-8")
        file_handler.setLevel(level)
        handlers.append(file_handler)

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(stderr_level)
    handlers.append(stderr_handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root


def log_action_run(
    action_name: str,
    elapsed_s: float,
    success: bool,
    message_count: int,
    error: str | None = None,
):
    """Log a finished action run."""
    logger = logging.getLogger("actkit.executor")
    data = {
        "action": action_name,
        "elapsed_s": round(elapsed_s, 3),
        "success": success,
        "messages": message_count,
    }
    if success:
        logger.info("action_run", extra={"data": data})
    else:
        data["error"] = error
        logger.error("action_run_failed", extra={"data": data})


def log_prompt(request_type: str, source: str, arg: str | None = None):
    """Log how a prompt request was resolved (flag, default, reader or ui)."""
    logger = logging.getLogger("actkit.prompt")
    logger.debug(
        "prompt_resolved",
        extra={"data": {"type": request_type, "source": source, "arg": arg}},
    )
