"""Entry point for the actkit CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="actkit",
        description="actkit - run project actions from the terminal or CI",
    )
    parser.add_argument(
        "--workspace", "-w",
        type=Path,
        help="Project directory (default: current directory)",
    )
    sub = parser.add_subparsers(dest="command")

    # No add_help: --help/-h after the action name belong to the action
    run_p = sub.add_parser("run", help="Run an action headlessly", add_help=False)
    run_p.add_argument("action", nargs="?", help="Action name or path to an action file")
    run_p.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the action")

    help_p = sub.add_parser("help", help="Show CLI arguments an action accepts")
    help_p.add_argument("action", help="Action name or path to an action file")

    sub.add_parser("list", help="List discovered actions")

    ui_p = sub.add_parser("ui", help="Pick and run an action interactively")
    ui_p.add_argument("action", nargs="?", help="Action to run without the picker")
    ui_p.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the action")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    from actkit.config import Config
    from actkit.control.terminal import is_interactive
    from actkit.modes.headless import HeadlessMode

    workspace = (args.workspace or Path.cwd()).resolve()
    config = Config.load(workspace)
    command = args.command or ("ui" if is_interactive() else None)

    try:
        if command == "run":
            return HeadlessMode(config, workspace=workspace).run(args.action, args.args)
        if command == "help":
            return HeadlessMode(config, workspace=workspace).run(args.action, ["--help"])
        if command == "list":
            return _list_actions(config, workspace)
        if command == "ui":
            from actkit.modes.interactive import InteractiveMode

            action = getattr(args, "action", None)
            return InteractiveMode(config, workspace=workspace).run(
                action, getattr(args, "args", None)
            )
    except KeyboardInterrupt:
        return 130

    build_parser().print_help(sys.stderr)
    return 1


def _list_actions(config, workspace: Path) -> int:
    from rich.console import Console as RichConsole
    from rich.table import Table

    from actkit.action.registry import build_registry

    registry = build_registry(config, workspace)
    console = RichConsole()
    if not len(registry):
        console.print("[dim]No actions found.[/dim]")
        return 0

    table = Table(show_header=True, header_style="bold")
    table.add_column("Action")
    table.add_column("Description")
    table.add_column("Location", style="dim")
    for action in registry.all():
        table.add_row(action.name, action.describe(), action.location or "")
    console.print(table)
    return 0


if __name__ == "__main__":
    sys.exit(main())
