"""Raw CLI token parsing for headless runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from actkit.prompt.requests import ArgMapping


@dataclass
class ParsedArgs:
    named: dict[str, str] = field(default_factory=dict)
    positional: list[str] = field(default_factory=list)
    flags: set[str] = field(default_factory=set)


def parse_args(tokens: list[str]) -> ParsedArgs:
    """Split tokens into named values, positionals and bare flags.

    Recognised forms::

        --key=value   --key value   --flag   --no-flag   (named "flag" = "false")
        -k=value      -k value      -f       -kvalue
        anything else is positional

    A following token is taken as the value only when it does not start
    with ``-``.
    """
    parsed = ParsedArgs()
    i = 0
    while i < len(tokens):
        token = tokens[i]
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None

        if token.startswith("--"):
            body = token[2:]
            if body.startswith("no-"):
                parsed.named[body[3:]] = "false"
            elif "=" in body:
                key, _, value = body.partition("=")
                parsed.named[key] = value
            elif nxt and not nxt.startswith("-"):
                parsed.named[body] = nxt
                i += 1
            else:
                parsed.flags.add(body)
        elif token.startswith("-") and len(token) == 2:
            key = token[1]
            if nxt and not nxt.startswith("-"):
                parsed.named[key] = nxt
                i += 1
            else:
                parsed.flags.add(key)
        elif token.startswith("-") and len(token) > 2:
            rest = token[1:]
            if "=" in rest:
                key, _, value = rest.partition("=")
                parsed.named[key] = value
            else:
                parsed.named[rest[0]] = rest[1:]
        else:
            parsed.positional.append(token)
        i += 1
    return parsed


def get_arg_value(parsed: ParsedArgs, mapping: ArgMapping) -> str | None:
    """Value for a mapping: long name, then short name, then position."""
    if mapping.arg and mapping.arg in parsed.named:
        return parsed.named[mapping.arg]
    if mapping.arg_short and mapping.arg_short in parsed.named:
        return parsed.named[mapping.arg_short]
    if mapping.arg_index is not None and 0 <= mapping.arg_index < len(parsed.positional):
        return parsed.positional[mapping.arg_index] or None
    return None


def get_flag_value(parsed: ParsedArgs, mapping: ArgMapping) -> bool | None:
    """Boolean for a confirm mapping, or None when the flag is absent.

    An explicit ``--name=value`` / ``--no-name`` wins over bare flags.
    """
    if mapping.arg and mapping.arg in parsed.named:
        return parsed.named[mapping.arg] != "false"
    if mapping.arg and mapping.arg in parsed.flags:
        return True
    if mapping.arg_short and mapping.arg_short in parsed.flags:
        return True
    return None


def has_arg_mapping(mapping: ArgMapping | None) -> bool:
    return bool(mapping)
