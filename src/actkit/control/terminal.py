"""Timing and terminal helpers exposed on ``ctx.tui.control``."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import sys
from typing import NamedTuple

logger = logging.getLogger("actkit.control")

LONG_DELAY_SECONDS = 30


class TerminalSize(NamedTuple):
    columns: int
    lines: int


async def delay(seconds: float) -> None:
    """Pause the action. Negative durations are rejected."""
    if seconds < 0:
        raise ValueError("Delay duration must be non-negative")
    if seconds > LONG_DELAY_SECONDS:
        logger.warning("long_delay", extra={"data": {"seconds": seconds}})
    await asyncio.sleep(seconds)


def is_interactive() -> bool:
    """True for a real TTY outside CI, NO_COLOR and TERM=dumb environments."""
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        return False
    if os.environ.get("CI", "").lower() in ("true", "1"):
        return False
    if "NO_COLOR" in os.environ:
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def get_terminal_size() -> TerminalSize:
    size = shutil.get_terminal_size(fallback=(80, 24))
    return TerminalSize(columns=size.columns, lines=size.lines)
