"""Headless responder and driver: flags, defaults, line fallback, exit codes."""

from __future__ import annotations

import asyncio
import io
import logging

import pytest
from rich.console import Console as RichConsole

from actkit.args.parser import parse_args
from actkit.errors import ArgValidationError, FormValidationError, MissingArgumentError
from actkit.modes.headless import HeadlessMode, HeadlessResponder
from actkit.modes.line_reader import LineReader
from actkit.prompt.requests import (
    ArgMapping,
    ConfirmRequest,
    FormPage,
    FormRequest,
    MultiSelectRequest,
    NumberRequest,
    PasswordRequest,
    SelectRequest,
    StepFormRequest,
    TextRequest,
    normalize_choices,
)
from actkit.prompt.responder import get_responder, resolve, set_responder


def _console():
    buf = io.StringIO()
    return RichConsole(file=buf, no_color=True, highlight=False, width=200), buf


def _no_input(prompt):
    raise AssertionError(f"unexpected read: {prompt}")


def _scripted(*lines):
    """Line reader answering from ``lines``; returns (reader, asked prompts, stderr)."""
    answers = list(lines)
    asked = []

    def input_fn(prompt):
        asked.append(prompt)
        return answers.pop(0)

    out, _ = _console()
    err, err_buf = _console()
    reader = LineReader(input_fn=input_fn, password_fn=input_fn, console=out, err_console=err)
    return reader, asked, err_buf


def _responder(argv, reader=None, interactive=False):
    reader = reader or LineReader(input_fn=_no_input, password_fn=_no_input,
                                  console=_console()[0], err_console=_console()[0])
    return HeadlessResponder(parse_args(argv), reader, interactive=lambda: interactive)


# ===================================================================
# Flags
# ===================================================================

class TestFlagResolution:
    def test_flag_value_skips_reader(self):
        responder = _responder(["--name", "hello"])
        req = TextRequest(message="Name?", mapping=ArgMapping(arg="name", arg_short="n"))
        assert asyncio.run(responder(req)) == "hello"

    def test_short_and_positional(self):
        responder = _responder(["-n", "short", "7"])
        assert asyncio.run(responder(
            TextRequest(message="Name?", mapping=ArgMapping(arg="name", arg_short="n"))
        )) == "short"
        assert asyncio.run(responder(
            NumberRequest(message="Count", mapping=ArgMapping(arg_index=0))
        )) == 7

    def test_number_flag_out_of_range_aborts(self):
        responder = _responder(["--count", "50"])
        req = NumberRequest(message="Count", max=10, mapping=ArgMapping(arg="count"))
        with pytest.raises(ArgValidationError) as exc:
            asyncio.run(responder(req))
        assert exc.value.reason == "Must be at most 10."

    def test_integer_flag(self):
        responder = _responder(["--count", "2.5"])
        req = NumberRequest(message="Count", integer=True, mapping=ArgMapping(arg="count"))
        with pytest.raises(ArgValidationError, match="integer"):
            asyncio.run(responder(req))

    def test_confirm_flags(self):
        req = ConfirmRequest(message="Go?", mapping=ArgMapping(arg="yes", arg_short="y"))
        assert asyncio.run(_responder(["-y"])(req)) is True
        assert asyncio.run(_responder(["--no-yes"])(req)) is False

    def test_select_by_label_or_value(self):
        req = SelectRequest(
            message="Env",
            choices=normalize_choices([{"label": "Production", "value": "prod"}, "dev"]),
            mapping=ArgMapping(arg="env"),
        )
        assert asyncio.run(_responder(["--env", "Production"])(req)) == "prod"
        assert asyncio.run(_responder(["--env=dev"])(req)) == "dev"
        with pytest.raises(ArgValidationError):
            asyncio.run(_responder(["--env", "qa"])(req))

    def test_multi_select_bounds(self):
        req = MultiSelectRequest(
            message="Tags",
            choices=normalize_choices(["a", "b", "c"]),
            min=2,
            mapping=ArgMapping(arg="tags"),
        )
        assert asyncio.run(_responder(["--tags", "a,c"])(req)) == ["a", "c"]
        with pytest.raises(ArgValidationError, match="at least 2"):
            asyncio.run(_responder(["--tags", "a"])(req))

    def test_text_flag_is_formatted_and_validated(self):
        req = TextRequest(
            message="Slug",
            format="kebab-case",
            validate=lambda v: "reserved" if v == "admin" else True,
            mapping=ArgMapping(arg="slug"),
        )
        assert asyncio.run(_responder(["--slug", "My Plugin"])(req)) == "my-plugin"
        with pytest.raises(ArgValidationError, match="reserved"):
            asyncio.run(_responder(["--slug", "admin"])(req))


# ===================================================================
# Missing flags
# ===================================================================

class TestMissingFlags:
    def test_non_interactive_without_default(self):
        req = TextRequest(message="Name?", mapping=ArgMapping(arg="name"))
        with pytest.raises(MissingArgumentError) as exc:
            asyncio.run(_responder([])(req))
        assert exc.value.arg_label == "--name"
        assert "--name" in str(exc.value)

    def test_non_interactive_uses_default(self):
        req = TextRequest(message="Name?", default="Tester", mapping=ArgMapping(arg="name"))
        assert asyncio.run(_responder([])(req)) == "Tester"

    def test_non_interactive_confirm_default(self):
        req = ConfirmRequest(message="Go?", default=False, mapping=ArgMapping(arg="go"))
        assert asyncio.run(_responder([])(req)) is False

    def test_positional_label(self):
        req = NumberRequest(message="Count", mapping=ArgMapping(arg_index=0))
        with pytest.raises(MissingArgumentError, match="argument at position 0"):
            asyncio.run(_responder([])(req))

    def test_interactive_falls_back_to_reader(self):
        reader, asked, _ = _scripted("typed")
        responder = _responder([], reader=reader, interactive=True)
        req = TextRequest(message="Name?", mapping=ArgMapping(arg="name"))
        assert asyncio.run(responder(req)) == "typed"
        assert asked == ["Name?: "]


# ===================================================================
# Prompt logging
# ===================================================================

def _prompt_sources(caplog):
    return [r.data["source"] for r in caplog.records if r.getMessage() == "prompt_resolved"]


class TestPromptLogging:
    def test_flag_resolution_logged_once(self, caplog):
        set_responder(_responder(["--name", "hello"]))
        req = TextRequest(message="Name?", mapping=ArgMapping(arg="name"))
        with caplog.at_level(logging.DEBUG, logger="actkit"):
            assert asyncio.run(resolve(req)) == "hello"
        assert _prompt_sources(caplog) == ["flag"]

    def test_reader_resolution_logged_once(self, caplog):
        reader, _, _ = _scripted("typed")
        set_responder(_responder([], reader=reader, interactive=True))
        with caplog.at_level(logging.DEBUG, logger="actkit"):
            assert asyncio.run(resolve(TextRequest(message="Name?"))) == "typed"
        assert _prompt_sources(caplog) == ["reader"]


# ===================================================================
# Line reader fallback
# ===================================================================

class TestLineReader:
    def test_unmapped_prompt_uses_reader(self):
        reader, asked, _ = _scripted("")
        responder = _responder(["--name", "ignored"], reader=reader)
        req = TextRequest(message="Name?", default="Tester")
        assert asyncio.run(responder(req)) == "Tester"
        assert asked == ["Name? (default: Tester): "]

    def test_number_reprompts(self):
        reader, asked, err = _scripted("abc", "5", "3")
        req = NumberRequest(message="Count", min=1, max=4)
        assert asyncio.run(reader.read(req)) == 3
        assert len(asked) == 3
        assert asked[0] == "Count [1..4]: "
        assert "✗ Invalid number" in err.getvalue()
        assert "✗ Must be <= 4" in err.getvalue()

    def test_select_is_one_based(self):
        reader, _, err = _scripted("0", "2")
        req = SelectRequest(message="Pick", choices=normalize_choices(["a", "b"]))
        assert asyncio.run(reader.read(req)) == "b"
        assert "Invalid choice. Enter 1-2" in err.getvalue()

    def test_confirm_default(self):
        reader, asked, _ = _scripted("")
        assert asyncio.run(reader.read(ConfirmRequest(message="Go?", default=True))) is True
        assert asked == ["Go? (Y/n): "]

    def test_multi_select(self):
        reader, _, _ = _scripted("1,3")
        req = MultiSelectRequest(message="Tags", choices=normalize_choices(["a", "b", "c"]))
        assert asyncio.run(reader.read(req)) == ["a", "c"]

    def test_password_uses_masked_input(self):
        secrets = []
        out, _ = _console()

        def masked(prompt):
            secrets.append(prompt)
            return "s3cret"

        reader = LineReader(input_fn=_no_input, password_fn=masked, console=out, err_console=out)
        assert asyncio.run(reader.read(PasswordRequest(message="Token"))) == "s3cret"
        assert secrets == ["Token: "]


# ===================================================================
# Forms
# ===================================================================

def _page(fields, **kwargs):
    return FormPage.model_validate({"fields": fields, **kwargs})


class TestHeadlessForms:
    def test_form_fields_from_flags(self):
        page = _page({
            "name": {"type": "text", "message": "Name", "arg": "name"},
            "port": {"type": "number", "message": "Port", "arg": "port"},
            "tls": {"type": "confirm", "message": "TLS?", "arg": "tls"},
        })
        responder = _responder(["--name", "api", "--port", "8080", "--tls"])
        assert asyncio.run(responder(FormRequest(page=page))) == {
            "name": "api", "port": 8080, "tls": True,
        }

    def test_field_validator_sees_earlier_values(self):
        seen = []

        def check(value, values):
            seen.append(dict(values))
            return True

        page = _page({
            "first": {"type": "text", "message": "First", "arg": "first"},
            "second": {"type": "text", "message": "Second", "arg": "second", "validate": check},
        })
        asyncio.run(_responder(["--first", "a", "--second", "b"])(FormRequest(page=page)))
        assert seen == [{"first": "a"}]

    def test_page_validator_rejects_flags(self):
        page = _page(
            {"a": {"type": "number", "message": "A", "arg": "a"},
             "b": {"type": "number", "message": "B", "arg": "b"}},
            validate=lambda values: "a must be below b" if values["a"] >= values["b"] else True,
        )
        with pytest.raises(FormValidationError, match="a must be below b"):
            asyncio.run(_responder(["--a", "5", "--b", "1"])(FormRequest(page=page)))

    def test_page_validator_reasks_reader_fields(self):
        reader, asked, err = _scripted("5", "1", "1", "5")
        page = _page(
            {"a": {"type": "number", "message": "A"},
             "b": {"type": "number", "message": "B"}},
            validate=lambda values: "a must be below b" if values["a"] >= values["b"] else True,
        )
        result = asyncio.run(_responder([], reader=reader)(FormRequest(page=page)))
        assert result == {"a": 1, "b": 5}
        assert len(asked) == 4
        assert "a must be below b" in err.getvalue()

    def test_step_form_merges_and_validates(self):
        steps = (
            _page({"name": {"type": "text", "message": "Name", "arg": "name"}}, title="Who"),
            _page({"email": {"type": "text", "message": "Email", "arg": "email"}}, title="Contact"),
        )
        request = StepFormRequest(steps=steps, validate=lambda v: "@" in v["email"] or "bad email")
        responder = _responder(["--name", "John", "--email", "john@example.com"])
        assert asyncio.run(responder(request)) == {"name": "John", "email": "john@example.com"}

        responder = _responder(["--name", "John", "--email", "nope"])
        with pytest.raises(FormValidationError, match="bad email"):
            asyncio.run(responder(request))


# ===================================================================
# HeadlessMode
# ===================================================================

GREET_ACTION = '''
from actkit import define_action


async def run(ctx):
    name = await ctx.tui.prompt.text("Name?", arg="name", arg_short="n")
    ctx.tui.output.success(f"Hello {name}")


action = define_action(run, name="greet", description="Say hello")
'''

FAILING_ACTION = '''
from actkit import define_action
from actkit.errors import ShellCommandError


async def run(ctx):
    raise ShellCommandError("make deploy", 4, "missing target")


action = define_action(run, name="deploy", description="Deploy")
'''


class TestHeadlessMode:
    def _mode(self, tmp_path):
        out, out_buf = _console()
        err, err_buf = _console()
        reader = LineReader(input_fn=_no_input, password_fn=_no_input, console=out, err_console=err)
        mode = HeadlessMode(
            workspace=tmp_path,
            home=tmp_path / "home",
            reader=reader,
            console=out,
            err_console=err,
            interactive=lambda: False,
        )
        return mode, out_buf, err_buf

    def _actions_dir(self, tmp_path):
        return tmp_path / ".actkit" / "actions"

    def test_success_by_name(self, tmp_path, write_action):
        write_action(GREET_ACTION, "greet.py", self._actions_dir(tmp_path))
        mode, out, _ = self._mode(tmp_path)
        assert mode.run("greet", ["--name", "Ann"]) == 0
        text = out.getvalue()
        assert "Running action: greet" in text
        assert "✔ Hello Ann" in text
        assert '✓ Action "greet" completed successfully' in text

    def test_success_by_path(self, tmp_path, write_action):
        path = write_action(GREET_ACTION, "greet.py")
        mode, out, _ = self._mode(tmp_path)
        assert mode.run(str(path), ["-n", "Bo"]) == 0
        assert "Hello Bo" in out.getvalue()

    def test_missing_argument_fails(self, tmp_path, write_action):
        write_action(GREET_ACTION, "greet.py", self._actions_dir(tmp_path))
        mode, _, err = self._mode(tmp_path)
        assert mode.run("greet", []) == 1
        text = err.getvalue()
        assert '✗ Action "greet" failed:' in text
        assert "Required argument --name is missing" in text

    def test_not_found_lists_available(self, tmp_path, write_action):
        write_action(GREET_ACTION, "greet.py", self._actions_dir(tmp_path))
        mode, _, err = self._mode(tmp_path)
        assert mode.run("nope", []) == 1
        text = err.getvalue()
        assert 'Action "nope" not found' in text
        assert "  - greet" in text

    def test_no_action_name(self, tmp_path):
        mode, _, err = self._mode(tmp_path)
        assert mode.run(None) == 1
        assert "Usage: actkit run" in err.getvalue()

    def test_help_prints_inferred_args(self, tmp_path, write_action):
        write_action(GREET_ACTION, "greet.py", self._actions_dir(tmp_path))
        mode, out, _ = self._mode(tmp_path)
        assert mode.run("greet", ["--help"]) == 0
        text = out.getvalue()
        assert "greet" in text
        assert "-n, --name <value>" in text
        assert "Running action" not in text

    def test_shell_error_exit_code(self, tmp_path, write_action):
        write_action(FAILING_ACTION, "deploy.py", self._actions_dir(tmp_path))
        mode, _, err = self._mode(tmp_path)
        assert mode.run("deploy", []) == 4
        assert "exit code 4" in err.getvalue()

    def test_broken_action_file(self, tmp_path, write_action):
        path = write_action("raise RuntimeError('import boom')\n", "broken.py")
        mode, _, err = self._mode(tmp_path)
        assert mode.run(str(path), []) == 1
        assert "import boom" in err.getvalue()

    def test_responder_cleared_after_run(self, tmp_path, write_action):
        write_action(GREET_ACTION, "greet.py", self._actions_dir(tmp_path))
        mode, _, _ = self._mode(tmp_path)
        mode.run("greet", ["--name", "x"])
        assert get_responder() is None
