"""Rendering helpers for menu, cart and order rows."""

from __future__ import annotations

from rich.text import Text

from food_order.config import CURRENCY_SYMBOL
from food_order.models import CartEntry, MenuItem, Order

LOW_STOCK_THRESHOLD = 5


def format_price(amount: float) -> str:
    if float(amount).is_integer():
        return f"{int(amount)}{CURRENCY_SYMBOL}"
    return f"{amount:.2f}{CURRENCY_SYMBOL}"


def stock_badge_style(item: MenuItem) -> str:
    """Return a badge style that reflects how much stock is left."""
    if item.sold_out:
        return "bold #ffffff on #b23a48"
    if item.remaining_quantity <= LOW_STOCK_THRESHOLD:
        return "bold #1f1400 on #e0b44c"
    return "bold #0b1f0f on #5fbf72"


def format_menu_line(item: MenuItem) -> Text:
    text = Text()
    text.append(f"#{item.remaining_quantity}", style=stock_badge_style(item))
    text.append(f" {item.name} ")
    text.append(format_price(item.unit_price), style="dim")
    return text


def format_cart_title(count: int) -> str:
    return f"Cart ({count})"


def format_cart_line(entry: CartEntry) -> Text:
    text = Text()
    text.append(f"{entry.reserved_quantity}×", style="bold")
    text.append(f" {entry.item_name}")
    return text


def format_timestamp(order: Order) -> str:
    """Local date and time of an order."""
    return order.created_at.astimezone().strftime("%d/%m/%Y %H:%M:%S")


def format_order_card(order: Order) -> Text:
    text = Text()
    text.append(f"Order #{order.short_id}", style="bold")
    text.append(f"  {format_timestamp(order)}", style="dim")
    text.append(f"\n    Customer: {order.customer_name}")
    text.append(f"\n    Phone: {order.phone}")
    text.append(f"\n    Product: {order.food_name}")
    text.append(f"\n    Quantity: {order.quantity}")
    text.append(f"\n    Total: {format_price(order.total_amount)}")
    return text


def window_bounds(total: int, rows: int, selected: int | None) -> tuple[int, int]:
    """Slice of rows to show so the selected row stays visible."""
    if total <= 0:
        return (0, 0)

    rows = max(1, rows)
    if total <= rows:
        return (0, total)

    if selected is None:
        start = 0
    else:
        half = rows // 2
        start = selected - half
        start = max(0, start)
        start = min(start, total - rows)

    return (start, start + rows)
