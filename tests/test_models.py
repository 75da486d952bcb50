"""Tests for order records and model helpers."""

from datetime import timezone

import pytest

from food_order.data import SEED_MENU, seed_menu
from food_order.models import Order, build_order_record, parse_timestamp


def test_order_is_built_from_its_record(make_record):
    order = Order.from_record("-Nabc123xyz", make_record())
    assert order.order_id == "-Nabc123xyz"
    assert order.food_name == "Patatas Fritas"
    assert order.quantity == 5
    assert order.total_amount == 40
    assert order.customer_name == "Ana"
    assert order.short_id == "-Nabc1"
    assert order.unit_price == 8


def test_record_with_missing_field_is_rejected(make_record):
    record = make_record()
    del record["foodId"]
    with pytest.raises(KeyError):
        Order.from_record("k", record)


@pytest.mark.parametrize("quantity", [0, -2])
def test_record_with_non_positive_quantity_is_rejected(make_record, quantity):
    with pytest.raises(ValueError):
        Order.from_record("k", make_record(quantity=quantity))


def test_record_with_bad_timestamp_is_rejected(make_record):
    with pytest.raises(ValueError):
        Order.from_record("k", make_record(timestamp="yesterday"))


def test_zulu_timestamps_parse_as_utc():
    assert parse_timestamp("2025-05-01T12:00:00.000Z").tzinfo == timezone.utc


def test_build_order_record_snapshots_the_item():
    fries = SEED_MENU[2]
    record = build_order_record(fries, 2, 16, "Ana", "600111222", "2025-05-01T12:00:00+00:00")
    assert record["foodId"] == 3
    assert record["foodName"] == "Patatas Fritas"
    assert record["totalAmount"] == 16


def test_seed_menu_matches_the_shop():
    menu = seed_menu()
    assert [(item.name, item.unit_price, item.remaining_quantity) for item in menu] == [
        ("Hamburguesa de Pollo", 24, 40),
        ("Hamburguesa Vegetariana", 22, 30),
        ("Patatas Fritas", 8, 50),
        ("Helado", 6, 30),
    ]


def test_numeric_text_total_is_coerced(make_record):
    order = Order.from_record("k", make_record(totalAmount="40"))
    assert order.total_amount == 40.0
    assert order.unit_price == 8.0


@pytest.mark.parametrize("total", ["forty", None, float("nan"), float("inf"), -8])
def test_record_with_bad_total_is_rejected(make_record, total):
    with pytest.raises((TypeError, ValueError)):
        Order.from_record("k", make_record(totalAmount=total))
