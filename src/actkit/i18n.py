"""Minimal translation lookup.

Translations are ``{locale: {key: text}}`` dicts registered per namespace.
Actions get a ``t`` scoped to their own namespace plus any namespaces they
are allowed to reach with ``"ns:key"``.
"""

from __future__ import annotations

from typing import Any, Callable

TranslateFn = Callable[..., str]

FALLBACK_LOCALE = "en"

CORE_TRANSLATIONS: dict[str, dict[str, Any]] = {
    "en": {
        "invalid_number": "Invalid number",
        "number_required": "Number is required",
        "integer_required": "Integer required",
        "at_least": "Must be >= {min}",
        "at_most": "Must be <= {max}",
        "min_length": "Must be at least {min} characters",
        "max_length": "Must be at most {max} characters",
        "pattern_mismatch": "Does not match required pattern",
        "answer_yes_no": "Please answer y or n",
        "invalid_choice": "Invalid choice. Enter 1-{count}",
        "invalid_choices": "Invalid choices. Enter 1-{count}",
        "value_required": "A value is required",
        "default_hint": "default: {value}",
        "select_at_least": "Select at least {min} choices",
        "select_at_most": "Select at most {max} choices",
        "invalid_key": "Invalid key. Expected: {keys}",
        "press_enter": "Press Enter to continue...",
        "press_key": "Press a key",
        "enter_choice": "Enter choice number",
        "enter_choices": "Enter choice numbers (comma-separated)",
        "action_required": "Action name is required in headless mode",
        "action_not_found": 'Action "{name}" not found',
        "available_actions": "Available actions:",
        "running": "Running action: {name}",
        "completed": '✓ Action "{name}" completed successfully',
        "failed": '✗ Action "{name}" failed:',
        "no_args": "No CLI arguments available for this action.",
    },
    "ja": {
        "invalid_number": "無効な数値です",
        "number_required": "数値を入力してください",
        "answer_yes_no": "y か n で答えてください",
        "invalid_choice": "無効な選択です。1-{count} を入力してください",
        "running": "アクションを実行中: {name}",
        "completed": '✓ アクション "{name}" が完了しました',
        "failed": '✗ アクション "{name}" が失敗しました:',
    },
}


def _lookup(tree: dict[str, Any], key: str) -> str | None:
    current: Any = tree
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current if isinstance(current, str) else None


class Translator:
    """Registry of namespaced translations for one locale."""

    def __init__(self, locale: str = FALLBACK_LOCALE):
        self.locale = locale
        self._namespaces: dict[str, dict[str, dict[str, Any]]] = {}
        self.register("core", CORE_TRANSLATIONS)

    def register(self, namespace: str, translations: dict[str, dict[str, Any]]) -> None:
        self._namespaces[namespace] = translations

    def has(self, namespace: str) -> bool:
        return namespace in self._namespaces

    def translate(self, namespace: str, key: str, **variables: Any) -> str:
        locales = self._namespaces.get(namespace, {})
        text = _lookup(locales.get(self.locale, {}), key)
        if text is None:
            text = _lookup(locales.get(FALLBACK_LOCALE, {}), key)
        if text is None:
            return key
        try:
            return text.format_map(variables) if variables else text
        except (KeyError, IndexError, ValueError):
            return text

    def scoped(self, namespace: str, allowed: list[str] | None = None) -> TranslateFn:
        """``t(key, **vars)`` bound to ``namespace``; ``"ns:key"`` reaches allowed ones."""
        reachable = {namespace, "core", *(allowed or [])}

        def t(key: str, **variables: Any) -> str:
            ns, sep, rest = key.partition(":")
            if sep and ns in reachable:
                return self.translate(ns, rest, **variables)
            return self.translate(namespace, key, **variables)

        return t


_default = Translator()


def get_translator() -> Translator:
    return _default


def set_locale(locale: str) -> None:
    _default.locale = locale


def core_t(key: str, **variables: Any) -> str:
    """Translate an engine diagnostic string."""
    return _default.translate("core", key, **variables)
