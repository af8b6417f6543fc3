"""Static argument inference for action files.

Walks an action's syntax tree (without importing it) and collects every
``<ns>.prompt.<method>(...)`` call that carries an ``arg`` / ``arg_short`` /
``arg_index`` keyword. The result only feeds ``--help`` output, so any
failure degrades to ``None``.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger("actkit.args")

PROMPT_METHODS = ("text", "number", "password", "select", "confirm", "multi_select")
_CHOICE_METHODS = ("select", "multi_select")
_HELP_COLUMN = 40


@dataclass
class ArgMeta:
    """One CLI argument recovered from a prompt call-site."""

    type: str
    name: str | None = None
    short: str | None = None
    index: int | None = None
    description: str | None = None
    # Only for select types; None there means the choices are built at runtime
    choices: list[str] | None = None
    message: str | None = None

    @property
    def dynamic_choices(self) -> bool:
        return self.type in _CHOICE_METHODS and self.choices is None

    @property
    def type_hint(self) -> str:
        if self.type == "confirm":
            return ""
        if self.choices is not None:
            return f" <{'|'.join(self.choices)}>"
        if self.dynamic_choices:
            return " <value>"
        if self.type == "number":
            return " <number>"
        if self.type == "multi_select":
            return " <value,...>"
        return " <value>"


@dataclass
class ActionArgsMeta:
    name: str | None = None
    description: str | None = None
    args: list[ArgMeta] = field(default_factory=list)


def _str_literal(node: ast.AST | None) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _int_literal(node: ast.AST | None) -> int | None:
    if (
        isinstance(node, ast.Constant)
        and isinstance(node.value, int)
        and not isinstance(node.value, bool)
    ):
        return node.value
    return None


def _prompt_method(call: ast.Call) -> str | None:
    """Method name if ``call`` looks like ``<ns>.prompt.<method>(...)``."""
    func = call.func
    if not isinstance(func, ast.Attribute) or func.attr not in PROMPT_METHODS:
        return None
    owner = func.value
    if isinstance(owner, ast.Attribute) and owner.attr == "prompt":
        return func.attr
    if isinstance(owner, ast.Name) and owner.id == "prompt":
        return func.attr
    return None


def _is_define_action(call: ast.Call) -> bool:
    func = call.func
    if isinstance(func, ast.Name):
        return func.id == "define_action"
    return isinstance(func, ast.Attribute) and func.attr == "define_action"


def _static_choices(node: ast.AST | None) -> list[str] | None:
    if not isinstance(node, (ast.List, ast.Tuple)):
        return None
    choices: list[str] = []
    for element in node.elts:
        literal = _str_literal(element)
        if literal is None:
            return None
        choices.append(literal)
    return choices


def _arg_meta(method: str, call: ast.Call) -> ArgMeta | None:
    kwargs: dict[str, Any] = {kw.arg: kw.value for kw in call.keywords if kw.arg}
    if not any(key in kwargs for key in ("arg", "arg_short", "arg_index")):
        return None

    message_node = call.args[0] if call.args else kwargs.get("message")
    meta = ArgMeta(
        type=method,
        name=_str_literal(kwargs.get("arg")),
        short=_str_literal(kwargs.get("arg_short")),
        index=_int_literal(kwargs.get("arg_index")),
        description=_str_literal(kwargs.get("description")),
        message=_str_literal(message_node),
    )
    if method in _CHOICE_METHODS:
        choices_node = call.args[1] if len(call.args) > 1 else kwargs.get("choices")
        meta.choices = _static_choices(choices_node)
    return meta


def _collect(tree: ast.AST) -> ActionArgsMeta:
    calls = sorted(
        (node for node in ast.walk(tree) if isinstance(node, ast.Call)),
        key=lambda node: (node.lineno, node.col_offset),
    )

    result = ActionArgsMeta()
    for call in calls:
        method = _prompt_method(call)
        if method:
            meta = _arg_meta(method, call)
            if meta is not None:
                result.args.append(meta)

    define_call = next((c for c in calls if _is_define_action(c)), None)
    if define_call is not None:
        for kw in define_call.keywords:
            if kw.arg == "name":
                result.name = _str_literal(kw.value)
            elif kw.arg == "description":
                result.description = _str_literal(kw.value)
    return result


def analyze_action_args(path: str | Path) -> ActionArgsMeta | None:
    """Extract CLI argument metadata from an action file, or None on failure.

    Help output is best effort: unreadable files, syntax errors and parser
    limits (deeply nested expressions) all yield None.
    """
    try:
        source = Path(path).read_text(encoding="utf-8")
        return _collect(ast.parse(source, filename=str(path)))
    except Exception as e:
        logger.debug(
            "args_analysis_failed",
            extra={"data": {"path": str(path), "error": f"{type(e).__name__}: {str(e)[:200]}"}},
        )
        return None


def format_args_help(meta: ActionArgsMeta, no_args_text: str | None = None) -> str:
    """Render a usage block for ``--help``."""
    lines: list[str] = []
    if meta.name:
        lines.append(meta.name)
        if meta.description:
            lines.append(f"  {meta.description}")
        lines.append("")

    if not meta.args:
        lines.append(no_args_text or "No CLI arguments available for this action.")
        return "\n".join(lines)

    lines.append("Options:")
    for arg in meta.args:
        parts: list[str] = []
        if arg.short:
            parts.append(f"-{arg.short}")
        if arg.name:
            parts.append(f"--{arg.name}")
        if arg.index is not None:
            parts.append(f"[position {arg.index}]")

        option = f"  {', '.join(parts)}{arg.type_hint}"
        desc = arg.description or arg.message or ""
        lines.append(f"{option:<{_HELP_COLUMN}} {desc}" if desc else option)

    return "\n".join(lines)
