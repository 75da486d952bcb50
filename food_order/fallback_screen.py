"""Top-level fallback shown when a view fails to render."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import Screen
from textual.widgets import Static


class ErrorFallbackScreen(Screen[None]):
    CSS = """
    ErrorFallbackScreen {
        align: center middle;
    }

    #fallback-dialog {
        width: 60;
        height: auto;
        border: round #b23a48;
        padding: 1 2;
    }

    #fallback-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Container(id="fallback-dialog"):
            yield Static("Something went wrong!", id="fallback-title")
            yield Static("An unexpected error occurred. Press r to reload the screen.")

    def on_key(self, event: Key) -> None:
        event.stop()
        if event.key == "r":
            self.dismiss(None)
