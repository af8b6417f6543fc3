"""Action definition, context building, execution and lookup."""

from actkit.action.context import ActionContext, TuiAPI, create_action_context
from actkit.action.executor import ExecutionResult, run_action
from actkit.action.registry import (
    ActionRegistry,
    build_registry,
    load_action_file,
    resolve_action,
)
from actkit.action.types import Action, define_action

__all__ = [
    "Action",
    "ActionContext",
    "ActionRegistry",
    "ExecutionResult",
    "TuiAPI",
    "build_registry",
    "create_action_context",
    "define_action",
    "load_action_file",
    "resolve_action",
    "run_action",
]
