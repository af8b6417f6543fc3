"""Renderers that turn output messages into terminal text."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from actkit.output.channel import OutputMessage, OutputType


class PlainTextRenderer:
    """Plain text for CI logs: no colors, no markup, errors on stderr."""

    def __init__(
        self,
        console: RichConsole | None = None,
        err_console: RichConsole | None = None,
    ):
        self._out = console or RichConsole(
            no_color=True, highlight=False, soft_wrap=True, emoji=False
        )
        self._err = err_console or RichConsole(
            stderr=True, no_color=True, highlight=False, soft_wrap=True, emoji=False
        )

    def _print(self, line: str = "", *, err: bool = False):
        (self._err if err else self._out).print(line, markup=False)

    def render(self, message: OutputMessage) -> None:
        content = message.content
        meta = message.meta
        kind = message.type

        if kind == OutputType.log:
            self._print(str(content))
        elif kind == OutputType.success:
            self._print(f"✔ {content}")
        elif kind == OutputType.error:
            self._print(f"✖ {content}", err=True)
        elif kind == OutputType.warn:
            self._print(f"⚠ {content}", err=True)
        elif kind == OutputType.info:
            self._print(f"ℹ {content}")
        elif kind == OutputType.newline:
            self._print()
        elif kind == OutputType.code:
            for line in str(content).splitlines() or [""]:
                self._print(f"    {line}")
        elif kind == OutputType.section:
            self._print()
            self._print(f"=== {content} ===")
            self._print()
        elif kind == OutputType.list:
            for item in content:
                self._print(f"  • {item}")
        elif kind == OutputType.key_value:
            self._print()
            for key, value in content.items():
                self._print(f"  {key}: {value}")
            self._print()
        elif kind == OutputType.table:
            self._render_table(content)
        elif kind == OutputType.json:
            self._print(json.dumps(content, indent=meta.get("indent", 2), default=str))
        elif kind == OutputType.separator:
            self._print(meta.get("char", "-") * meta.get("length", 40))
        elif kind == OutputType.step:
            self._print()
            self._print(f"[{meta.get('number', 0)}] {content}")

    def _render_table(self, rows: list[dict[str, Any]]):
        if not rows:
            return
        keys = list(rows[0].keys())
        self._print()
        self._print("  " + " | ".join(keys))
        self._print("  " + " | ".join("---" for _ in keys))
        for row in rows:
            self._print("  " + " | ".join(str(row.get(k, "")) for k in keys))
        self._print()

    def render_all(self, messages: list[OutputMessage]) -> None:
        for message in messages:
            self.render(message)


class RichRenderer:
    """Styled output for interactive terminals."""

    def __init__(self, console: RichConsole | None = None):
        self._console = console or RichConsole()

    def render(self, message: OutputMessage) -> None:
        c = self._console
        content = message.content
        meta = message.meta
        kind = message.type

        if kind == OutputType.log:
            c.print(Text(str(content)))
        elif kind == OutputType.success:
            c.print(Text.assemble(("✔ ", "green bold"), str(content)))
        elif kind == OutputType.error:
            c.print(Text.assemble(("✖ ", "red bold"), (str(content), "red")))
        elif kind == OutputType.warn:
            c.print(Text.assemble(("⚠ ", "yellow bold"), (str(content), "yellow")))
        elif kind == OutputType.info:
            c.print(Text.assemble(("ℹ ", "cyan bold"), str(content)))
        elif kind == OutputType.newline:
            c.print()
        elif kind == OutputType.code:
            c.print(Panel(
                Syntax(str(content), meta.get("language") or "text", word_wrap=True),
                border_style="dim",
                expand=False,
            ))
        elif kind == OutputType.section:
            c.print()
            c.rule(Text(str(content), style="bold"))
        elif kind == OutputType.list:
            for item in content:
                c.print(Text.assemble(("  • ", "cyan"), str(item)))
        elif kind == OutputType.key_value:
            width = max((len(str(k)) for k in content), default=0)
            for key, value in content.items():
                c.print(Text.assemble((f"  {str(key).ljust(width)}  ", "bold"), str(value)))
        elif kind == OutputType.table:
            if content:
                table = Table(show_header=True, header_style="bold")
                keys = list(content[0].keys())
                for key in keys:
                    table.add_column(str(key))
                for row in content:
                    table.add_row(*(str(row.get(k, "")) for k in keys))
                c.print(table)
        elif kind == OutputType.json:
            c.print_json(data=content, indent=meta.get("indent", 2), default=str)
        elif kind == OutputType.separator:
            c.print(Text(meta.get("char", "─") * meta.get("length", 50), style="dim"))
        elif kind == OutputType.step:
            c.print()
            c.print(Text.assemble((f"[{meta.get('number', 0)}] ", "cyan bold"), str(content)))
