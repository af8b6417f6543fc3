"""Action definition types."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from actkit.errors import ActionDefinitionError

if TYPE_CHECKING:
    from actkit.action.context import ActionContext

ActionRun = Callable[["ActionContext"], "Awaitable[Any] | Any"]

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True, eq=False)
class Action:
    """A named unit of executable logic with a single ``run`` routine."""

    name: str
    description: str | Callable[..., str]
    run: ActionRun
    category: str | None = None
    tags: tuple[str, ...] = ()
    translations: dict[str, dict[str, Any]] | None = None
    # Set by whoever discovered the action
    file_path: Path | None = None
    plugin_namespace: str | None = None
    location: str | None = None

    def describe(self, ctx: ActionContext | None = None) -> str:
        """Description text; callable descriptions need a context."""
        if callable(self.description):
            if ctx is None:
                return ""
            return self.description(ctx)
        return self.description

    def with_meta(self, **changes: Any) -> Action:
        return replace(self, **changes)


def define_action(
    run: ActionRun | None = None,
    *,
    name: str = "",
    description: str | Callable[..., str] | None = None,
    category: str | None = None,
    tags: list[str] | tuple[str, ...] = (),
    translations: dict[str, dict[str, Any]] | None = None,
) -> Any:
    """Define an action.

    Works as a plain call, ``define_action(run, name=..., description=...)``,
    or as a decorator, ``@define_action(name=..., description=...)``.
    An empty name is filled in from the file name by the loader.
    """
    if not description:
        raise ActionDefinitionError("Action description is required")
    if not isinstance(description, str) and not callable(description):
        raise ActionDefinitionError("Action description must be a string or callable")
    if name and not NAME_PATTERN.match(name):
        raise ActionDefinitionError(
            "Action name must contain only alphanumeric characters, dashes, and underscores"
        )

    def build(fn: ActionRun) -> Action:
        if not callable(fn):
            raise ActionDefinitionError("Action run function is required")
        return Action(
            name=name,
            description=description,
            run=fn,
            category=category,
            tags=tuple(tags),
            translations=translations,
        )

    if run is None:
        return build
    return build(run)
