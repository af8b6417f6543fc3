"""Shell command helper exposed to actions as ``ctx.shell``."""

from __future__ import annotations

import asyncio
import logging
import shlex
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable

from actkit.errors import ShellCommandError

logger = logging.getLogger("actkit.shell")


@dataclass(frozen=True)
class ShellResult:
    stdout: str
    stderr: str
    exit_code: int
    command: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def check(self) -> ShellResult:
        """Raise ShellCommandError unless the command exited with 0."""
        if self.exit_code != 0:
            raise ShellCommandError(self.command, self.exit_code, self.stderr)
        return self


ShellExecutor = Callable[..., Awaitable[ShellResult]]


def build_command(template: str, *args: Any) -> str:
    """Fill ``{}`` placeholders with shell-quoted arguments."""
    if not args:
        return template
    return template.format(*(shlex.quote(str(a)) for a in args))


def create_shell_executor(cwd: Path | str | None = None) -> ShellExecutor:
    """Return ``shell(command, *args)`` running in ``cwd``."""
    workdir = str(cwd) if cwd else None

    async def shell(command: str, *args: Any, timeout: float | None = None) -> ShellResult:
        full = build_command(command, *args)
        t0 = time.monotonic()
        proc = await asyncio.create_subprocess_shell(
            full,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=workdir,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise
        result = ShellResult(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=proc.returncode if proc.returncode is not None else -1,
            command=full,
        )
        logger.debug(
            "shell_exec",
            extra={"data": {
                "command": full[:200],
                "exit_code": result.exit_code,
                "elapsed_s": round(time.monotonic() - t0, 3),
            }},
        )
        return result

    return shell
