"""CLI argument pipeline for headless runs."""

from actkit.args.analyzer import (
    ActionArgsMeta,
    ArgMeta,
    analyze_action_args,
    format_args_help,
)
from actkit.args.parser import (
    ParsedArgs,
    get_arg_value,
    get_flag_value,
    has_arg_mapping,
    parse_args,
)
from actkit.args.validator import (
    convert_to_boolean,
    convert_to_multi_select_value,
    convert_to_number,
    convert_to_select_value,
    validate_text_value,
)

__all__ = [
    "ActionArgsMeta",
    "ArgMeta",
    "ParsedArgs",
    "analyze_action_args",
    "convert_to_boolean",
    "convert_to_multi_select_value",
    "convert_to_number",
    "convert_to_select_value",
    "format_args_help",
    "get_arg_value",
    "get_flag_value",
    "has_arg_mapping",
    "parse_args",
    "validate_text_value",
]
