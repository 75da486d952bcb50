"""Tests for the cart ledger."""

from food_order.models import CartEntry


def test_upsert_inserts_new_entry(cart, catalog):
    entry = cart.upsert(catalog.find_by_id(3), 5)
    assert entry == CartEntry(item_id=3, item_name="Patatas Fritas", reserved_quantity=5)
    assert len(cart) == 1


def test_upsert_merges_by_summing(cart, catalog):
    fries = catalog.find_by_id(3)
    cart.upsert(fries, 5)
    cart.upsert(fries, 2)
    assert cart.get(3).reserved_quantity == 7
    assert len(cart) == 1


def test_total_reserved_count_sums_all_entries(cart, catalog):
    cart.upsert(catalog.find_by_id(1), 2)
    cart.upsert(catalog.find_by_id(3), 5)
    cart.upsert(catalog.find_by_id(3), 1)
    assert cart.total_reserved_count() == 8


def test_remove_returns_entry(cart, catalog):
    cart.upsert(catalog.find_by_id(3), 5)
    removed = cart.remove(3)
    assert removed.reserved_quantity == 5
    assert cart.get(3) is None
    assert cart.total_reserved_count() == 0


def test_remove_absent_is_noop(cart):
    assert cart.remove(42) is None
    assert cart.entries() == ()
