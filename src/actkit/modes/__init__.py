"""Mode drivers: each installs a responder, runs an action and clears it."""

from actkit.modes.headless import HeadlessMode, HeadlessResponder
from actkit.modes.interactive import InteractiveMode
from actkit.modes.line_reader import LineReader

__all__ = ["HeadlessMode", "HeadlessResponder", "InteractiveMode", "LineReader"]
