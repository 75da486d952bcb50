"""Main Textual app class."""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, TypeVar

import structlog
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from food_order.confirm_modal import ConfirmModal
from food_order.config import POLL_INTERVAL
from food_order.constant import SHOP_TITLE
from food_order.edit_order_modal import EditOrderModal
from food_order.fallback_screen import ErrorFallbackScreen
from food_order.models import CartEntry, MenuItem, Order
from food_order.order_modal import FoodOrderModal
from food_order.rendering import (
    format_cart_line,
    format_cart_title,
    format_menu_line,
    format_order_card,
    window_bounds,
)
from food_order.session import KioskSession, build_store

logger = structlog.get_logger(__name__)

PANES = ("menu", "cart", "orders")

_Method = TypeVar("_Method", bound=Callable[..., Any])


def render_guard(method: _Method) -> _Method:
    """Send rendering faults to the fallback screen instead of crashing the app."""

    @functools.wraps(method)
    def wrapper(self: "FoodOrderApp", *args: Any, **kwargs: Any) -> Any:
        try:
            return method(self, *args, **kwargs)
        except NoMatches:
            # Main widgets are not queryable while another screen is on top.
            return None
        except Exception:
            logger.exception("Render failed", view=method.__name__)
            self._show_fallback()
            return None

    return wrapper  # type: ignore[return-value]


class FoodOrderApp(App):
    """A Textual app for ordering from the menu and managing submitted orders."""

    TITLE = SHOP_TITLE
    SUB_TITLE = "Menu / Cart / Orders"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    .pane {
        border: round $surface;
        padding: 1;
    }

    .pane.active {
        border: round $primary;
    }

    #menu-pane {
        width: 2fr;
    }

    #cart-pane {
        width: 1fr;
    }

    #orders-pane {
        width: 3fr;
    }

    #menu-list, #cart-list, #orders-list {
        height: 1fr;
        padding: 0 1;
    }

    #status-bar {
        border: heavy $secondary;
        padding: 0 1;
        height: 4;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    pane = reactive("menu")
    menu_index = reactive(0)
    cart_index = reactive(0)
    order_index = reactive(0)

    BINDINGS = [
        ("left", "cycle_pane(-1)", "Previous pane"),
        ("right", "cycle_pane(1)", "Next pane"),
        ("h", "cycle_pane(-1)", "Previous pane"),
        ("l", "cycle_pane(1)", "Next pane"),
        ("up", "move(-1)", "Previous row"),
        ("down", "move(1)", "Next row"),
        ("k", "move(-1)", "Previous row"),
        ("j", "move(1)", "Next row"),
        ("enter", "open_selected", "Order item"),
        ("x", "remove_from_cart", "Remove from cart"),
        ("e", "edit_order", "Edit order"),
        ("d", "delete_order", "Delete order"),
        ("r", "reload_orders", "Reload orders"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, session: KioskSession | None = None) -> None:
        super().__init__()
        self.session = session or KioskSession(build_store())
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="menu-pane", classes="pane"):
                yield Static("Menu", classes="pane-title")
                yield Static(id="menu-list")
            with Vertical(id="cart-pane", classes="pane"):
                yield Static(id="cart-title", classes="pane-title")
                yield Static(id="cart-list")
            with Vertical(id="orders-pane", classes="pane"):
                yield Static("Orders", classes="pane-title")
                yield Static(id="orders-list")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        logger.info("Application started")
        self.session.orders_view.on_change = self._on_orders_changed
        self.session.open()
        self._refresh_all()
        self.set_interval(POLL_INTERVAL, self.session.poll_orders)

    def on_unmount(self) -> None:
        self.session.close()
        logger.info("Application stopped")

    def _modal_open(self) -> bool:
        return isinstance(self.screen, (ModalScreen, ErrorFallbackScreen))

    def action_cycle_pane(self, delta: int) -> None:
        if self._modal_open():
            return
        idx = PANES.index(self.pane)
        self.pane = PANES[(idx + delta) % len(PANES)]
        self._refresh_all()

    def action_move(self, delta: int) -> None:
        if self._modal_open():
            return

        count = len(self._rows_for(self.pane))
        if not count:
            return
        attr = self._index_attr(self.pane)
        setattr(self, attr, (getattr(self, attr) + delta) % count)
        self._refresh_all()

    def action_open_selected(self) -> None:
        if self._modal_open() or self.pane != "menu":
            return

        item = self._selected_menu_item()
        if item is None:
            return
        if item.sold_out:
            self._set_status(f"{item.name} is sold out.")
            return

        flow = self.session.start_order(item.item_id)
        self.push_screen(FoodOrderModal(flow, on_submitted=self._refresh_all), callback=self._on_order_form_closed)

    def action_remove_from_cart(self) -> None:
        if self._modal_open() or self.pane != "cart":
            return

        entry = self._selected_cart_entry()
        if entry is None:
            return
        result = self.session.remove_from_cart(entry.item_id)
        self._set_status(result.message)

    def action_edit_order(self) -> None:
        if self._modal_open() or self.pane != "orders":
            return

        order = self._selected_order()
        if order is None:
            return
        self.push_screen(
            EditOrderModal(order),
            callback=lambda quantity: self._on_edit_closed(order.order_id, quantity),
        )

    def action_delete_order(self) -> None:
        if self._modal_open() or self.pane != "orders":
            return

        order = self._selected_order()
        if order is None:
            return
        self.run_worker(self._delete_order(order.order_id))

    def action_reload_orders(self) -> None:
        if self._modal_open():
            return
        self.session.open()
        self._set_status("Orders reloaded.")

    def _on_order_form_closed(self, sent: bool | None) -> None:
        logger.debug("Order form closed", sent=bool(sent))
        if sent:
            self.system_status = "Order sent."
        self._refresh_all()

    def _on_edit_closed(self, order_id: str, quantity: int | None) -> None:
        logger.debug("Edit dialog closed", order_id=order_id, quantity=quantity)
        self._refresh_all()
        if quantity is None:
            return
        self.run_worker(self._edit_order(order_id, quantity))

    async def _edit_order(self, order_id: str, quantity: int) -> None:
        result = await self.session.edit_order(order_id, quantity)
        self._set_status(result.message)

    async def _delete_order(self, order_id: str) -> None:
        result = await self.session.delete_order(order_id, confirm=self._confirm_delete)
        self._set_status(result.message)

    async def _confirm_delete(self, order: Order) -> bool:
        answer: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self.push_screen(
            ConfirmModal(f"Delete order #{order.short_id} for {order.customer_name}?"),
            callback=answer.set_result,
        )
        confirmed = await answer
        logger.debug("Delete confirmation closed", order_id=order.order_id, confirmed=confirmed)
        self._refresh_all()
        return confirmed

    def _show_fallback(self) -> None:
        if isinstance(self.screen, ErrorFallbackScreen):
            return
        self.push_screen(ErrorFallbackScreen(), callback=lambda _: self._refresh_all())

    def _on_orders_changed(self) -> None:
        self._refresh_orders()
        self._refresh_status()

    def _set_status(self, message: str | None) -> None:
        self.system_status = message or ""
        self._refresh_all()

    def _index_attr(self, pane: str) -> str:
        return {"menu": "menu_index", "cart": "cart_index", "orders": "order_index"}[pane]

    def _rows_for(self, pane: str) -> tuple[Any, ...]:
        if pane == "menu":
            return self.session.menu_items()
        if pane == "cart":
            return self.session.cart_entries()
        return self.session.orders

    def _selected(self, pane: str) -> Any:
        rows = self._rows_for(pane)
        if not rows:
            return None
        idx = min(getattr(self, self._index_attr(pane)), len(rows) - 1)
        return rows[idx]

    def _selected_menu_item(self) -> MenuItem | None:
        return self._selected("menu")

    def _selected_cart_entry(self) -> CartEntry | None:
        return self._selected("cart")

    def _selected_order(self) -> Order | None:
        return self._selected("orders")

    def _visible_rows(self, widget: Static, lines_per_row: int = 1) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height // lines_per_row)

    def _refresh_all(self) -> None:
        self._refresh_panes()
        self._refresh_menu()
        self._refresh_cart()
        self._refresh_orders()
        self._refresh_status()

    @render_guard
    def _refresh_panes(self) -> None:
        for pane in PANES:
            self.query_one(f"#{pane}-pane", Vertical).set_class(pane == self.pane, "active")

    @render_guard
    def _refresh_menu(self) -> None:
        widget = self.query_one("#menu-list", Static)
        rows = [format_menu_line(item) for item in self.session.menu_items()]
        self.menu_index = self._render_rows(widget, rows, self.menu_index, "(menu is empty)")

    @render_guard
    def _refresh_cart(self) -> None:
        self.query_one("#cart-title", Static).update(format_cart_title(self.session.cart_count()))
        widget = self.query_one("#cart-list", Static)
        rows = [format_cart_line(entry) for entry in self.session.cart_entries()]
        self.cart_index = self._render_rows(widget, rows, self.cart_index, "(cart is empty)")

    @render_guard
    def _refresh_orders(self) -> None:
        widget = self.query_one("#orders-list", Static)
        rows = [format_order_card(order) for order in self.session.orders]
        self.order_index = self._render_rows(widget, rows, self.order_index, "No orders available", lines_per_row=6)

    @render_guard
    def _refresh_status(self) -> None:
        bar = self.query_one("#status-bar", Static)
        view = self.session.orders_view

        text = Text()
        text.append("←/→ pane  j/k move  Enter order  x remove  e edit  d delete  r reload  Ctrl+Q quit", style="dim")
        if view.loading:
            text.append("\nLoading orders...", style="bold #e0b44c")
        if view.error:
            text.append(f"\n{view.error}", style="#ffb3b3")
        elif self.system_status:
            text.append(f"\n{self.system_status}")
        bar.update(text)

    def _render_rows(
        self,
        widget: Static,
        rows: list[Text],
        selected: int,
        empty_text: str,
        lines_per_row: int = 1,
    ) -> int:
        """Draw rows with a pointer on the selection; returns the clamped selection."""
        if not rows:
            widget.update(empty_text)
            return 0

        selected = min(selected, len(rows) - 1)
        start, end = window_bounds(len(rows), self._visible_rows(widget, lines_per_row), selected)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == selected else "  "
            lines.append(pointer)
            lines.append_text(rows[idx])

        if end < len(rows):
            lines.append("\n⋮", style="dim")

        widget.update(lines)
        return selected
