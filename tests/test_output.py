"""Output channel and renderers."""

from __future__ import annotations

import io

from rich.console import Console as RichConsole

from actkit.output.channel import OutputChannel, OutputType
from actkit.output.render import PlainTextRenderer, RichRenderer


def _consoles():
    out, err = io.StringIO(), io.StringIO()
    return (
        RichConsole(file=out, no_color=True, highlight=False, width=100),
        RichConsole(file=err, no_color=True, highlight=False, width=100),
        out,
        err,
    )


class TestOutputChannel:
    def test_messages_in_call_order(self):
        ch = OutputChannel()
        ch.log("a", 1, None)
        ch.success("ok")
        ch.step(2, "second")
        types = [m.type for m in ch.messages]
        assert types == [OutputType.log, OutputType.success, OutputType.step]
        assert ch.messages[0].content == "a 1 null"
        assert ch.messages[2].meta == {"number": 2}

    def test_sink_sees_each_message_before_return(self):
        seen = []
        ch = OutputChannel(sink=lambda m: seen.append((m.content, len(ch))))
        ch.info("first")
        ch.info("second")
        assert seen == [("first", 1), ("second", 2)]

    def test_messages_is_a_snapshot(self):
        ch = OutputChannel()
        ch.log("x")
        snapshot = ch.messages
        ch.log("y")
        assert len(snapshot) == 1
        assert len(ch.get_messages()) == 2

    def test_structured_content_is_copied(self):
        ch = OutputChannel()
        data = {"k": [1, 2]}
        ch.json(data, indent=4)
        data["k"].append(3)
        assert ch.messages[0].content == {"k": [1, 2]}
        assert ch.messages[0].meta == {"indent": 4}

    def test_log_stringifies_dicts(self):
        ch = OutputChannel()
        ch.log({"a": 1}, [1, 2])
        assert ch.messages[0].content == '{"a": 1} [1, 2]'

    def test_separator_defaults(self):
        ch = OutputChannel()
        ch.separator()
        assert ch.messages[0].meta == {"char": "─", "length": 50}


class TestPlainTextRenderer:
    def test_errors_go_to_stderr(self):
        out_c, err_c, out, err = _consoles()
        ch = OutputChannel(sink=PlainTextRenderer(out_c, err_c).render)
        ch.log("hello")
        ch.error("bad")
        ch.warn("careful")
        assert "hello" in out.getvalue()
        assert "✖ bad" in err.getvalue()
        assert "⚠ careful" in err.getvalue()
        assert "bad" not in out.getvalue()

    def test_markup_is_not_interpreted(self):
        out_c, err_c, out, _ = _consoles()
        ch = OutputChannel(sink=PlainTextRenderer(out_c, err_c).render)
        ch.log("[bold]literal[/bold]")
        assert "[bold]literal[/bold]" in out.getvalue()

    def test_structured_messages(self):
        out_c, err_c, out, _ = _consoles()
        renderer = PlainTextRenderer(out_c, err_c)
        ch = OutputChannel()
        ch.section("Build")
        ch.list(["one", "two"])
        ch.key_value({"env": "prod"})
        ch.table([{"name": "a", "size": 1}])
        ch.json({"x": 1})
        ch.step(1, "Install")
        renderer.render_all(ch.messages)
        text = out.getvalue()
        assert "=== Build ===" in text
        assert "  • one" in text
        assert "  env: prod" in text
        assert "name | size" in text
        assert '"x": 1' in text
        assert "[1] Install" in text


class TestRichRenderer:
    def test_renders_every_type(self):
        buf = io.StringIO()
        renderer = RichRenderer(RichConsole(file=buf, width=100))
        ch = OutputChannel(sink=renderer.render)
        ch.log("plain")
        ch.success("done")
        ch.code("print(1)", "python")
        ch.table([{"a": 1}])
        ch.json({"b": 2})
        ch.separator("=", 10)
        text = buf.getvalue()
        assert "plain" in text
        assert "done" in text
        assert "print" in text
        assert "==========" in text
