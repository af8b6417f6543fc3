import logging
from pathlib import Path

import pytest

from actkit.i18n import set_locale
from actkit.prompt.responder import clear_responder


@pytest.fixture(autouse=True)
def _reset_globals():
    """Each test starts with no responder, English diagnostics and no log handlers."""
    clear_responder()
    set_locale("en")
    yield
    clear_responder()
    set_locale("en")
    logging.getLogger("actkit").handlers.clear()


@pytest.fixture()
def write_action(tmp_path):
    """Write an action file under tmp_path and return its path."""

    def _write(source: str, name: str = "sample.py", directory: Path | None = None) -> Path:
        target = (directory or tmp_path) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(source, encoding="utf-8")
        return target

    return _write
