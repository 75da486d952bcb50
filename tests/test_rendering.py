"""Tests for rendering helpers."""

import pytest

from food_order.models import CartEntry, MenuItem, Order
from food_order.rendering import (
    format_cart_line,
    format_cart_title,
    format_menu_line,
    format_order_card,
    format_price,
    stock_badge_style,
    window_bounds,
)


@pytest.mark.parametrize("amount,expected", [(8, "8€"), (80.0, "80€"), (7.5, "7.50€")])
def test_format_price(amount, expected):
    assert format_price(amount) == expected


def test_menu_line_shows_stock_name_and_price():
    item = MenuItem(item_id=3, name="Patatas Fritas", description="", unit_price=8, remaining_quantity=45)
    assert format_menu_line(item).plain == "#45 Patatas Fritas 8€"


def test_sold_out_items_get_a_distinct_badge():
    sold_out = MenuItem(item_id=1, name="Helado", description="", unit_price=6, remaining_quantity=0)
    in_stock = MenuItem(item_id=1, name="Helado", description="", unit_price=6, remaining_quantity=30)
    assert stock_badge_style(sold_out) != stock_badge_style(in_stock)


def test_cart_rendering():
    assert format_cart_title(7) == "Cart (7)"
    assert format_cart_line(CartEntry(item_id=3, item_name="Patatas Fritas", reserved_quantity=5)).plain == (
        "5× Patatas Fritas"
    )


def test_order_card_lists_the_order_fields():
    order = Order(
        order_id="abcdef123456",
        food_id=3,
        food_name="Patatas Fritas",
        quantity=5,
        total_amount=40,
        customer_name="Ana",
        phone="600111222",
        timestamp="2025-05-01T12:00:00+00:00",
    )
    plain = format_order_card(order).plain
    assert plain.startswith("Order #abcdef")
    assert "Customer: Ana" in plain
    assert "Phone: 600111222" in plain
    assert "Quantity: 5" in plain
    assert "Total: 40€" in plain


@pytest.mark.parametrize(
    "total,rows,selected,expected",
    [
        (0, 5, None, (0, 0)),
        (3, 5, 1, (0, 3)),
        (10, 4, None, (0, 4)),
        (10, 4, 5, (3, 7)),
        (10, 4, 9, (6, 10)),
    ],
)
def test_window_bounds(total, rows, selected, expected):
    assert window_bounds(total, rows, selected) == expected
