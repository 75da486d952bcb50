"""Pending cart reservations keyed by menu item."""

from __future__ import annotations

import structlog

from food_order.models import CartEntry, MenuItem

logger = structlog.get_logger(__name__)


class CartLedger:
    """One entry per menu item; repeat additions merge by summing quantities."""

    def __init__(self) -> None:
        self._entries: dict[int, CartEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> tuple[CartEntry, ...]:
        return tuple(self._entries.values())

    def get(self, item_id: int) -> CartEntry | None:
        return self._entries.get(item_id)

    def upsert(self, item: MenuItem, qty: int) -> CartEntry:
        if qty <= 0:
            raise ValueError("reserved quantity must be positive")

        existing = self._entries.get(item.item_id)
        if existing is not None:
            entry = CartEntry(
                item_id=item.item_id,
                item_name=existing.item_name,
                reserved_quantity=existing.reserved_quantity + qty,
            )
            logger.info("Cart entry updated", item=item.name, quantity=entry.reserved_quantity)
        else:
            entry = CartEntry(item_id=item.item_id, item_name=item.name, reserved_quantity=qty)
            logger.info("Cart entry added", item=item.name, quantity=qty)
        self._entries[item.item_id] = entry
        return entry

    def remove(self, item_id: int) -> CartEntry | None:
        """Drop the entry for item_id; the caller returns its quantity to stock."""
        entry = self._entries.pop(item_id, None)
        if entry is not None:
            logger.info("Cart entry removed", item=entry.item_name, quantity=entry.reserved_quantity)
        return entry

    def total_reserved_count(self) -> int:
        return sum(entry.reserved_quantity for entry in self._entries.values())
