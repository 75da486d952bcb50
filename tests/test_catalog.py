"""Tests for menu stock bookkeeping."""

import pytest

from food_order.catalog import MenuCatalog
from food_order.errors import InsufficientStock, ValidationError
from food_order.models import MenuItem


def _item(item_id=1, stock=10):
    return MenuItem(item_id=item_id, name=f"Item {item_id}", description="", unit_price=5, remaining_quantity=stock)


class TestLookup:
    def test_seed_menu_is_loaded_in_order(self, catalog):
        assert [item.item_id for item in catalog.items()] == [1, 2, 3, 4]
        assert catalog.find_by_id(3).name == "Patatas Fritas"
        assert catalog.find_by_id(3).remaining_quantity == 50

    def test_unknown_id_is_not_found(self, catalog):
        assert catalog.find_by_id(99) is None

    def test_duplicate_ids_are_rejected(self):
        with pytest.raises(ValueError):
            MenuCatalog([_item(1), _item(1)])


class TestDecrement:
    def test_decrement_reduces_remaining(self, catalog):
        updated = catalog.decrement_stock(3, 5)
        assert updated.remaining_quantity == 45
        assert catalog.find_by_id(3).remaining_quantity == 45

    def test_decrement_to_zero_is_allowed(self):
        catalog = MenuCatalog([_item(stock=4)])
        catalog.decrement_stock(1, 4)
        assert catalog.find_by_id(1).sold_out

    def test_decrement_beyond_stock_raises(self, catalog):
        with pytest.raises(InsufficientStock) as exc_info:
            catalog.decrement_stock(3, 51)
        assert exc_info.value.remaining == 50
        assert catalog.find_by_id(3).remaining_quantity == 50

    @pytest.mark.parametrize("qty", [0, -1, True])
    def test_non_positive_quantity_is_invalid(self, catalog, qty):
        with pytest.raises(ValidationError):
            catalog.decrement_stock(3, qty)

    def test_unknown_item_is_invalid(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.decrement_stock(99, 1)
        assert exc_info.value.code == "unknown item"

    def test_snapshots_are_not_mutated(self, catalog):
        before = catalog.find_by_id(3)
        catalog.decrement_stock(3, 2)
        assert before.remaining_quantity == 50


class TestIncrement:
    def test_increment_restores_stock(self, catalog):
        catalog.decrement_stock(3, 5)
        catalog.increment_stock(3, 5)
        assert catalog.find_by_id(3).remaining_quantity == 50

    def test_increment_has_no_upper_bound(self, catalog):
        catalog.increment_stock(4, 10)
        assert catalog.find_by_id(4).remaining_quantity == 40
        assert catalog.initial_quantity(4) == 30
