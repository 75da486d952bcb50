"""Edit order quantity modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.models import Order
from food_order.rendering import format_price


class EditOrderModal(ModalScreen[int | None]):
    """Prompt for a new quantity for a submitted order."""

    CSS = """
    EditOrderModal {
        align: center middle;
        background: $background 60%;
    }

    #edit-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #edit-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #edit-info {
        color: white;
        margin-bottom: 1;
    }

    #edit-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #edit-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #edit-help {
        color: #dddddd;
    }
    """

    MAX_DIGITS = 3

    def __init__(self, order: Order) -> None:
        super().__init__()
        self.order = order
        self.value = str(order.quantity)
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="edit-dialog"):
            yield Static(f"Edit Order #{self.order.short_id}", id="edit-title")
            yield Static(id="edit-info")
            yield Static(id="edit-value")
            yield Static(id="edit-error")
            yield Static("Digits only. Enter save. Backspace delete. Esc cancel.", id="edit-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "q", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and event.character.isdigit():
            if len(self.value) < self.MAX_DIGITS:
                self.value += event.character
            self.error = ""
            self._refresh_content()
        event.stop()

    def _confirm(self) -> None:
        if not self.value:
            self.error = "New quantity is required."
            self._refresh_content()
            return

        parsed = int(self.value)
        if parsed < 1:
            self.error = "Quantity must be at least 1."
            self._refresh_content()
            return

        self.dismiss(parsed)

    def _refresh_content(self) -> None:
        info = Text()
        info.append(f"Customer: {self.order.customer_name}")
        info.append(f"\nProduct: {self.order.food_name}")
        if self.value and int(self.value) > 0:
            info.append(f"\nNew total: {format_price(self.order.unit_price * int(self.value))}", style="bold")
        self.query_one("#edit-info", Static).update(info)
        self.query_one("#edit-value", Static).update(f"New quantity: {self.value}")
        self.query_one("#edit-error", Static).update(self.error or "")
