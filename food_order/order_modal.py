"""Order form modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from food_order.errors import ValidationError
from food_order.rendering import format_price
from food_order.submission import OrderSubmissionFlow


class FoodOrderModal(ModalScreen[bool]):
    """Quantity, name and phone entry for one menu item; dismisses with True once sent."""

    CSS = """
    FoodOrderModal {
        align: center middle;
        background: $background 60%;
    }

    #order-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #order-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #order-details {
        color: white;
        margin-bottom: 1;
    }

    #order-form {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #order-status {
        margin-bottom: 1;
    }

    #order-help {
        color: #dddddd;
    }
    """

    FIELDS = ("quantity", "name", "phone")
    LABELS = {"quantity": "Quantity", "name": "Your name", "phone": "Phone"}
    MAX_QUANTITY_DIGITS = 3

    def __init__(self, flow: OrderSubmissionFlow, on_submitted: Callable[[], None] | None = None) -> None:
        super().__init__()
        self.flow = flow
        self.on_submitted = on_submitted
        self.values = {"quantity": str(flow.quantity), "name": "", "phone": ""}
        self.field_index = 0
        self.error = ""

    @property
    def active_field(self) -> str:
        return self.FIELDS[self.field_index]

    def compose(self) -> ComposeResult:
        with Container(id="order-dialog"):
            yield Static(self.flow.food.name, id="order-title")
            yield Static(id="order-details")
            yield Static(id="order-form")
            yield Static(id="order-status")
            yield Static(id="order-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        event.stop()
        if self.flow.loading:
            return

        if event.key == "escape":
            self.dismiss(self.flow.confirmed)
            return

        if self.flow.confirmed:
            if event.key == "enter":
                self.dismiss(True)
            return

        if event.key == "enter":
            self.run_worker(self._submit(), exclusive=True)
            return

        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self.FIELDS)
            self._refresh_content()
            return

        if event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(self.FIELDS)
            self._refresh_content()
            return

        if event.key == "backspace":
            value = self.values[self.active_field]
            if value:
                self._set_value(value[:-1])
            return

        if event.is_printable and event.character:
            if self.active_field == "quantity":
                if not event.character.isdigit():
                    return
                if len(self.values["quantity"]) >= self.MAX_QUANTITY_DIGITS:
                    return
            self._set_value(self.values[self.active_field] + event.character)

    def _set_value(self, value: str) -> None:
        field = self.active_field
        self.values[field] = value
        self.error = ""
        if field == "quantity" and value:
            try:
                self.flow.set_quantity(int(value))
            except ValidationError as exc:
                self.error = exc.user_message
        self._refresh_content()

    async def _submit(self) -> None:
        quantity_text = self.values["quantity"]
        quantity = int(quantity_text) if quantity_text else 0
        self.error = ""
        self._refresh_content()

        result = await self.flow.submit(self.values["name"], self.values["phone"], quantity=quantity)
        if not result.ok:
            self.error = result.message or ""
        self._refresh_content()
        if result.ok and self.on_submitted is not None:
            self.on_submitted()

    def _refresh_content(self) -> None:
        food = self.flow.food
        details = Text()
        details.append(food.description, style="italic")
        details.append(f"\n{format_price(food.unit_price)} per unit")
        details.append(f"\nTotal: {format_price(self.flow.total_amount)}", style="bold")
        self.query_one("#order-details", Static).update(details)

        form = Text()
        for idx, field in enumerate(self.FIELDS):
            if idx > 0:
                form.append("\n")
            active = idx == self.field_index and self.flow.editable
            pointer = "➤ " if active else "  "
            cursor = "|" if active else ""
            form.append(f"{pointer}{self.LABELS[field]}: {self.values[field]}{cursor}", style="bold" if active else "")
            if field == "quantity":
                form.append(f"  (max {food.remaining_quantity})", style="dim")
        self.query_one("#order-form", Static).update(form)

        status = Text()
        if self.flow.loading:
            status.append("Processing your order, please wait...", style="bold #e0b44c")
        elif self.flow.confirmed:
            status.append(self.flow.message or "", style="bold #5fbf72")
        elif self.error:
            status.append(self.error, style="#ffb3b3")
        self.query_one("#order-status", Static).update(status)

        help_widget = self.query_one("#order-help", Static)
        if self.flow.confirmed:
            help_widget.update("Enter / Esc back to the menu.")
        else:
            help_widget.update("Tab/↑/↓ switch field. Enter send order. Esc back to the menu.")
