"""Menu catalog holding sellable items and their remaining stock."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

import structlog

from food_order.errors import InsufficientStock, ValidationError
from food_order.models import MenuItem

logger = structlog.get_logger(__name__)


class MenuCatalog:
    """Single owner of menu stock.

    Items are immutable snapshots; every stock change swaps in a new
    MenuItem, so readers never observe a half-applied mutation.
    """

    def __init__(self, items: Iterable[MenuItem]) -> None:
        self._items: dict[int, MenuItem] = {}
        for item in items:
            if item.item_id in self._items:
                raise ValueError(f"duplicate menu item id {item.item_id}")
            if item.remaining_quantity < 0:
                raise ValueError(f"menu item {item.item_id} has negative stock")
            self._items[item.item_id] = item
        self._initial_quantity = {item_id: item.remaining_quantity for item_id, item in self._items.items()}

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> tuple[MenuItem, ...]:
        return tuple(self._items.values())

    def find_by_id(self, item_id: int) -> MenuItem | None:
        return self._items.get(item_id)

    def initial_quantity(self, item_id: int) -> int:
        return self._initial_quantity[item_id]

    def decrement_stock(self, item_id: int, qty: int) -> MenuItem:
        item = self._require(item_id)
        check_quantity(qty)
        if qty > item.remaining_quantity:
            raise InsufficientStock(item_id, qty, item.remaining_quantity)

        updated = replace(item, remaining_quantity=item.remaining_quantity - qty)
        self._items[item_id] = updated
        logger.debug("Stock decremented", item_id=item_id, qty=qty, remaining=updated.remaining_quantity)
        return updated

    def increment_stock(self, item_id: int, qty: int) -> MenuItem:
        """Return qty units to stock. There is no upper bound check."""
        item = self._require(item_id)
        check_quantity(qty)

        updated = replace(item, remaining_quantity=item.remaining_quantity + qty)
        self._items[item_id] = updated
        logger.debug("Stock restored", item_id=item_id, qty=qty, remaining=updated.remaining_quantity)
        if updated.remaining_quantity > self._initial_quantity[item_id]:
            logger.warning(
                "Restored stock exceeds seeded quantity",
                item_id=item_id,
                remaining=updated.remaining_quantity,
                initial=self._initial_quantity[item_id],
            )
        return updated

    def _require(self, item_id: int) -> MenuItem:
        item = self._items.get(item_id)
        if item is None:
            raise ValidationError("unknown item", f"Menu item {item_id} does not exist.")
        return item


def check_quantity(qty: int) -> None:
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise ValidationError("invalid quantity", "Quantity must be a whole number of at least 1.")
