"""Yes/no confirmation modal for destructive actions."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class ConfirmModal(ModalScreen[bool]):
    CSS = """
    ConfirmModal {
        align: center middle;
        background: $background 60%;
    }

    #confirm-dialog {
        width: 56;
        height: auto;
        border: round #b23a48;
        background: $panel;
        padding: 1 2;
    }

    #confirm-prompt {
        text-style: bold;
        color: white;
        margin-bottom: 1;
    }

    #confirm-help {
        color: #dddddd;
    }
    """

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self.prompt = prompt

    def compose(self) -> ComposeResult:
        with Container(id="confirm-dialog"):
            yield Static(self.prompt, id="confirm-prompt")
            yield Static("y / Enter confirm. n / Esc cancel.", id="confirm-help")

    def on_key(self, event: Key) -> None:
        event.stop()
        if event.key in {"y", "enter"}:
            self.dismiss(True)
        elif event.key in {"n", "escape", "q", "ctrl+c"}:
            self.dismiss(False)
