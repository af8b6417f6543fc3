"""ctx.shell helper."""

from __future__ import annotations

import asyncio

import pytest

from actkit.errors import ShellCommandError
from actkit.shell import ShellResult, build_command, create_shell_executor


class TestBuildCommand:
    def test_arguments_are_quoted(self):
        assert build_command("echo {}", "a b") == "echo 'a b'"
        assert build_command("cp {} {}", "x", "it's") == "cp x 'it'\"'\"'s'"

    def test_no_arguments_leaves_template(self):
        assert build_command("echo {}") == "echo {}"


class TestShellExecutor:
    def test_runs_in_cwd(self, tmp_path):
        (tmp_path / "marker.txt").write_text("x")
        shell = create_shell_executor(tmp_path)
        result = asyncio.run(shell("ls"))
        assert result.ok
        assert "marker.txt" in result.stdout

    def test_stdout_and_exit_code(self, tmp_path):
        shell = create_shell_executor(tmp_path)
        result = asyncio.run(shell("echo {} && exit 3", "hello world"))
        assert result.stdout.strip() == "hello world"
        assert result.exit_code == 3
        assert not result.ok

    def test_check_raises(self):
        result = ShellResult(stdout="", stderr="boom", exit_code=2, command="false")
        with pytest.raises(ShellCommandError) as exc:
            result.check()
        assert exc.value.exit_code == 2
        assert exc.value.stderr == "boom"

    def test_check_passes_through_success(self):
        result = ShellResult(stdout="ok", stderr="", exit_code=0)
        assert result.check() is result

    def test_timeout(self, tmp_path):
        shell = create_shell_executor(tmp_path)
        with pytest.raises(asyncio.TimeoutError):
            asyncio.run(shell("sleep 5", timeout=0.1))
