"""Rich live display for spinner / progress state."""

from __future__ import annotations

import threading

from rich.console import Console as RichConsole, RenderableType
from rich.live import Live
from rich.progress_bar import ProgressBar
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from actkit.control.feedback import ProgressState, SpinnerState, VisualFeedback

_STATUS_MARK = {"success": ("✓", "green"), "error": ("✗", "red")}


class RichFeedback:
    """Feedback setter drawing the current state on a transient Live line."""

    def __init__(self, console: RichConsole | None = None):
        self._console = console or RichConsole()
        self._live: Live | None = None
        self._lock = threading.Lock()
        self.state: VisualFeedback = None

    def __call__(self, state: VisualFeedback) -> None:
        with self._lock:
            self.state = state
            if state is None:
                self._stop()
                return
            renderable = self._build(state)
            if self._live is None:
                self._live = Live(
                    renderable,
                    console=self._console,
                    refresh_per_second=10,
                    transient=True,
                )
                self._live.start()
            else:
                self._live.update(renderable)

    def stop(self) -> None:
        """Remove the live line, e.g. before a prompt takes over the terminal."""
        with self._lock:
            self._stop()

    def _stop(self) -> None:
        if self._live:
            self._live.stop()
            self._live = None

    def _build(self, state: SpinnerState | ProgressState) -> RenderableType:
        mark = _STATUS_MARK.get(state.status)
        if isinstance(state, SpinnerState):
            if mark:
                return Text.assemble((f"{mark[0]} ", mark[1]), state.message)
            return Spinner(state.kind, text=Text(state.message, style="dim"), style="cyan")

        grid = Table.grid(padding=(0, 1))
        grid.add_row(
            Text(f"{mark[0]} " if mark else "", style=mark[1] if mark else ""),
            ProgressBar(total=state.total, completed=state.value, width=30),
            Text(f"{state.percent:>3}%", style="cyan"),
            Text(state.message, style="dim"),
        )
        return grid
