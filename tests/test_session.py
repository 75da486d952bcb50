"""Tests for the kiosk session facade."""

import pytest

from food_order.errors import ValidationError
from food_order.session import KioskSession, build_store
from food_order.store import MemoryOrderStore, SqliteOrderStore


async def test_cart_removal_is_the_inverse_of_a_submission(session):
    flow = session.start_order(3)
    assert (await flow.submit("Ana", "600111222", quantity=5)).ok
    assert session.catalog.find_by_id(3).remaining_quantity == 45

    result = session.remove_from_cart(3)
    assert result.ok
    assert session.catalog.find_by_id(3).remaining_quantity == 50
    assert session.cart.get(3) is None


async def test_repeated_add_remove_cycles_return_to_baseline(session):
    for qty in (5, 2, 7):
        flow = session.start_order(3)
        await flow.submit("Ana", "600111222", quantity=qty)
        session.remove_from_cart(3)
        assert session.catalog.find_by_id(3).remaining_quantity == 50


async def test_cart_count_drives_the_badge(session):
    await session.start_order(1).submit("Ana", "600111222", quantity=2)
    await session.start_order(3).submit("Ana", "600111222", quantity=5)
    assert session.cart_count() == 7
    assert [entry.item_id for entry in session.cart_entries()] == [1, 3]


def test_removing_an_absent_item_is_a_noop(session):
    result = session.remove_from_cart(3)
    assert result.ok
    assert session.catalog.find_by_id(3).remaining_quantity == 50


def test_start_order_for_unknown_item(session):
    with pytest.raises(ValidationError):
        session.start_order(99)


async def test_open_session_sees_submitted_orders(session):
    session.open()
    result = await session.start_order(3).submit("Ana", "600111222", quantity=5)
    assert [order.order_id for order in session.orders] == [result.order_id]

    edited = await session.edit_order(result.order_id, 10)
    assert edited.ok
    assert session.orders[0].total_amount == 80

    deleted = await session.delete_order(result.order_id, confirm=lambda order: True)
    assert deleted.ok
    assert session.orders == ()


async def test_deleting_an_order_does_not_touch_cart_or_stock(session):
    session.open()
    result = await session.start_order(3).submit("Ana", "600111222", quantity=5)
    await session.delete_order(result.order_id, confirm=lambda order: True)
    assert session.cart.get(3).reserved_quantity == 5
    assert session.catalog.find_by_id(3).remaining_quantity == 45


def test_close_detaches_the_subscription(session, store):
    session.open()
    session.close()
    assert store.listener_count == 0


def test_build_store_backends(tmp_path):
    assert isinstance(build_store("memory"), MemoryOrderStore)
    sqlite_store = build_store("sqlite", str(tmp_path / "orders.db"))
    assert isinstance(sqlite_store, SqliteOrderStore)
    assert sqlite_store.snapshot() == {}
    with pytest.raises(ValueError):
        build_store("firebase")


def test_custom_menu(store):
    session = KioskSession(store, menu=[])
    assert session.menu_items() == ()


async def test_operator_session_sees_orders_from_a_kiosk_session(tmp_path, clock):
    path = str(tmp_path / "orders.db")
    kiosk = KioskSession(build_store("sqlite", path), clock=clock)
    operator = KioskSession(build_store("sqlite", path), clock=clock)
    operator.open()
    try:
        result = await kiosk.start_order(3).submit("Ana", "600111222", quantity=5)
        assert operator.orders == ()

        assert operator.poll_orders()
        assert [order.order_id for order in operator.orders] == [result.order_id]
        assert operator.catalog.find_by_id(3).remaining_quantity == 50
    finally:
        operator.close()
        kiosk.close()
