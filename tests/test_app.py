"""Keyboard-driven tests for the Textual front end."""

from food_order import food_order_app
from food_order.confirm_modal import ConfirmModal
from food_order.fallback_screen import ErrorFallbackScreen
from food_order.food_order_app import FoodOrderApp
from food_order.order_modal import FoodOrderModal


async def _order_fries(pilot):
    # Menu rows: chicken burger, veggie burger, fries, ice cream.
    await pilot.press("j", "j", "enter")
    await pilot.pause()
    assert isinstance(pilot.app.screen, FoodOrderModal)
    await pilot.press("backspace", "5", "tab", "a", "n", "a", "tab", "6", "0", "0", "enter")
    await pilot.pause()
    await pilot.app.workers.wait_for_complete()
    await pilot.pause()


async def test_ordering_from_the_menu_reserves_stock(session):
    app = FoodOrderApp(session=session)
    async with app.run_test() as pilot:
        await _order_fries(pilot)

        assert session.catalog.find_by_id(3).remaining_quantity == 45
        assert session.cart.get(3).reserved_quantity == 5
        assert len(session.orders) == 1
        assert session.orders[0].customer_name == "ana"


async def test_removing_from_the_cart_restores_stock(session):
    app = FoodOrderApp(session=session)
    async with app.run_test() as pilot:
        await _order_fries(pilot)
        await pilot.press("escape")
        await pilot.pause()

        await pilot.press("right", "x")
        await pilot.pause()

        assert session.catalog.find_by_id(3).remaining_quantity == 50
        assert session.cart_count() == 0
        assert len(session.orders) == 1


async def test_delete_asks_for_confirmation(session, store, make_record):
    key = await store.append(make_record())
    app = FoodOrderApp(session=session)
    async with app.run_test() as pilot:
        await pilot.press("right", "right", "d")
        await pilot.pause()
        assert isinstance(app.screen, ConfirmModal)

        await pilot.press("n")
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert session.orders_view.find(key) is not None

        await pilot.press("d")
        await pilot.pause()
        await pilot.press("y")
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert session.orders == ()
        assert store.snapshot() == {}


async def test_render_failure_shows_the_fallback_screen(session, monkeypatch):
    def broken(count):
        raise RuntimeError("cannot render cart")

    monkeypatch.setattr(food_order_app, "format_cart_title", broken)
    app = FoodOrderApp(session=session)
    async with app.run_test() as pilot:
        await pilot.pause()
        assert isinstance(app.screen, ErrorFallbackScreen)
