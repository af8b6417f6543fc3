"""Translation lookup."""

from __future__ import annotations

from actkit.i18n import Translator, core_t, set_locale


class TestTranslator:
    def test_fallback_to_english(self):
        translator = Translator("ja")
        assert translator.translate("core", "no_args") == "No CLI arguments available for this action."
        assert translator.translate("core", "running", name="x") == "アクションを実行中: x"

    def test_nested_keys_and_missing(self):
        translator = Translator()
        translator.register("timer", {"en": {"status": {"done": "Done after {m} min"}}})
        assert translator.translate("timer", "status.done", m=5) == "Done after 5 min"
        assert translator.translate("timer", "status") == "status"
        assert translator.translate("nobody", "x") == "x"

    def test_missing_variable_keeps_template(self):
        translator = Translator()
        translator.register("a", {"en": {"hi": "Hi {name}"}})
        assert translator.translate("a", "hi", other=1) == "Hi {name}"

    def test_scoped_namespaces(self):
        translator = Translator()
        translator.register("mine", {"en": {"k": "mine"}})
        translator.register("plugin", {"en": {"k": "plugin"}})
        translator.register("secret", {"en": {"k": "secret"}})
        t = translator.scoped("mine", ["plugin"])
        assert t("k") == "mine"
        assert t("plugin:k") == "plugin"
        # Unreachable namespaces are looked up as plain keys in the own namespace
        assert t("secret:k") == "secret:k"


def test_core_t_follows_locale():
    set_locale("ja")
    assert core_t("invalid_number") == "無効な数値です"
    set_locale("en")
    assert core_t("invalid_number") == "Invalid number"
