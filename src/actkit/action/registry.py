"""Action discovery, loading and lookup."""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path

from actkit.action.types import NAME_PATTERN, Action
from actkit.config import CONFIG_DIR_NAME, Config
from actkit.errors import ActionDefinitionError, ActionNotFoundError

logger = logging.getLogger("actkit.registry")

ACTIONS_DIR_NAME = "actions"
EXCLUDED_DIRS = {"__pycache__", ".git", ".venv", "venv", "node_modules", "build", "dist"}


def find_action_files(directory: Path) -> list[Path]:
    """Python files under ``directory``, sorted, skipping private and excluded ones."""
    if not directory.is_dir():
        return []
    found = []
    for path in sorted(directory.rglob("*.py")):
        rel = path.relative_to(directory)
        if any(part in EXCLUDED_DIRS for part in rel.parts[:-1]):
            continue
        if path.name.startswith("_"):
            continue
        found.append(path)
    return found


def load_action_file(path: str | Path) -> Action:
    """Import an action file and return the action it defines.

    The module must expose ``action`` or define exactly one :class:`Action`
    at module level. An empty name is taken from the file stem.
    """
    path = Path(path).resolve()
    digest = hashlib.sha1(str(path).encode()).hexdigest()[:8]
    spec = importlib.util.spec_from_file_location(f"actkit_action_{path.stem}_{digest}", path)
    if spec is None or spec.loader is None:
        raise ActionDefinitionError(f"Cannot load action file: {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(spec.name, None)
        raise

    action = getattr(module, "action", None)
    if not isinstance(action, Action):
        candidates = [v for v in vars(module).values() if isinstance(v, Action)]
        if len(candidates) != 1:
            raise ActionDefinitionError(
                f"{path.name} must define exactly one action (found {len(candidates)})"
            )
        action = candidates[0]

    name = action.name or path.stem
    if not NAME_PATTERN.match(name):
        raise ActionDefinitionError(f"Invalid action name derived from {path.name}: {name!r}")
    return action.with_meta(name=name, file_path=path)


class ActionRegistry:
    """Actions by name. Registration order is priority order: the first
    action registered under a name is kept."""

    def __init__(self):
        self._actions: dict[str, Action] = {}

    def register(self, action: Action) -> bool:
        if action.name in self._actions:
            logger.debug(
                "action_shadowed",
                extra={"data": {"name": action.name, "path": str(action.file_path)}},
            )
            return False
        self._actions[action.name] = action
        return True

    def get_by_name(self, name: str) -> Action | None:
        return self._actions.get(name)

    def get_by_category(self, category: str) -> list[Action]:
        return [a for a in self._actions.values() if a.category == category]

    def all(self) -> list[Action]:
        return list(self._actions.values())

    def names(self) -> list[str]:
        return list(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, name: str) -> bool:
        return name in self._actions

    def discover(self, directory: Path, location: str | None = None) -> int:
        """Load every action file in ``directory``; broken files are skipped."""
        count = 0
        for path in find_action_files(directory):
            try:
                action = load_action_file(path)
            except Exception as e:
                logger.warning(
                    "action_load_failed",
                    extra={"data": {"path": str(path), "error": str(e)[:200]}},
                )
                continue
            if self.register(action.with_meta(location=location)):
                count += 1
        return count


def action_directories(
    config: Config, workspace: Path | None = None, home: Path | None = None
) -> list[tuple[Path, str]]:
    """Search directories in priority order with their location labels."""
    workspace = workspace or Path.cwd()
    home = home or Path.home()
    dirs = [(workspace / CONFIG_DIR_NAME / ACTIONS_DIR_NAME, "project")]
    dirs += [
        ((d if d.is_absolute() else workspace / d), "config") for d in config.action_dirs
    ]
    dirs.append((home / CONFIG_DIR_NAME / ACTIONS_DIR_NAME, "global"))
    return dirs


def build_registry(
    config: Config, workspace: Path | None = None, home: Path | None = None
) -> ActionRegistry:
    registry = ActionRegistry()
    for directory, location in action_directories(config, workspace, home):
        loaded = registry.discover(directory, location)
        logger.debug(
            "actions_discovered",
            extra={"data": {"dir": str(directory), "count": loaded}},
        )
    return registry


def resolve_action(
    ref: str,
    config: Config | None = None,
    workspace: Path | None = None,
    home: Path | None = None,
) -> Action:
    """Find an action by file path or by registered name."""
    config = config or Config()
    candidate = Path(ref)
    if ref.endswith(".py") or candidate.is_file():
        if not candidate.is_file():
            raise ActionNotFoundError(ref)
        return load_action_file(candidate)

    registry = build_registry(config, workspace, home)
    action = registry.get_by_name(ref)
    if action is None:
        raise ActionNotFoundError(ref, registry.names())
    return action
