"""actkit: scriptable terminal actions with a pluggable prompt bridge."""

from actkit.action import (
    Action,
    ActionContext,
    ActionRegistry,
    ExecutionResult,
    define_action,
    load_action_file,
    resolve_action,
    run_action,
)
from actkit.args import analyze_action_args, format_args_help
from actkit.config import Config
from actkit.errors import (
    ActionNotFoundError,
    ActkitError,
    ArgValidationError,
    EmptyChoiceSet,
    EmptyStepList,
    MissingArgumentError,
    NoResponderConfigured,
    ShellCommandError,
)
from actkit.prompt import clear_responder, get_responder, set_responder

__version__ = "0.1.0"

__all__ = [
    "Action",
    "ActionContext",
    "ActionNotFoundError",
    "ActionRegistry",
    "ActkitError",
    "ArgValidationError",
    "Config",
    "EmptyChoiceSet",
    "EmptyStepList",
    "ExecutionResult",
    "MissingArgumentError",
    "NoResponderConfigured",
    "ShellCommandError",
    "analyze_action_args",
    "clear_responder",
    "define_action",
    "format_args_help",
    "get_responder",
    "load_action_file",
    "resolve_action",
    "run_action",
    "set_responder",
]
