"""Kiosk session: one catalog, one cart, one order store and its live view."""

from __future__ import annotations

from typing import Callable, Iterable

import structlog

from food_order.cart import CartLedger
from food_order.catalog import MenuCatalog
from food_order.config import DB_PATH, STORE_BACKEND
from food_order.data import seed_menu
from food_order.errors import OperationResult, ValidationError
from food_order.models import CartEntry, MenuItem, Order
from food_order.store import MemoryOrderStore, OrderStore, SqliteOrderStore
from food_order.submission import Clock, OrderSubmissionFlow
from food_order.sync_view import ConfirmDelete, OrderSyncView

logger = structlog.get_logger(__name__)


def build_store(backend: str = STORE_BACKEND, db_path: str = DB_PATH) -> OrderStore:
    """Create the configured order store."""
    if backend == "memory":
        return MemoryOrderStore()
    if backend == "sqlite":
        store = SqliteOrderStore(db_path)
        store.bootstrap_schema()
        return store
    raise ValueError(f"unknown order store backend {backend!r}")


class KioskSession:
    """Everything the front end reads from and sends to the ordering core."""

    def __init__(
        self,
        store: OrderStore,
        menu: Iterable[MenuItem] | None = None,
        *,
        clock: Clock | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.catalog = MenuCatalog(seed_menu() if menu is None else menu)
        self.cart = CartLedger()
        self.orders_view = OrderSyncView(store, on_change=on_change)
        self._clock = clock

    @property
    def orders(self) -> tuple[Order, ...]:
        return self.orders_view.orders

    def open(self) -> None:
        self.orders_view.subscribe()

    def close(self) -> None:
        self.orders_view.unsubscribe()
        self.store.close()

    def poll_orders(self) -> bool:
        """Pick up orders written through another connection to the same store."""
        return self.store.poll()

    def menu_items(self) -> tuple[MenuItem, ...]:
        return self.catalog.items()

    def cart_entries(self) -> tuple[CartEntry, ...]:
        return self.cart.entries()

    def cart_count(self) -> int:
        return self.cart.total_reserved_count()

    def start_order(self, item_id: int) -> OrderSubmissionFlow:
        """Open an order form for a menu item; the cart upsert is passed in explicitly."""
        food = self.catalog.find_by_id(item_id)
        if food is None:
            raise ValidationError("unknown item", f"Menu item {item_id} does not exist.")
        logger.debug("Order form opened", item=food.name)
        return OrderSubmissionFlow(
            food,
            catalog=self.catalog,
            store=self.store,
            update_cart=self.cart.upsert,
            clock=self._clock,
        )

    def remove_from_cart(self, item_id: int) -> OperationResult:
        """Drop a cart entry and return its reserved quantity to stock."""
        entry = self.cart.remove(item_id)
        if entry is None:
            logger.debug("Nothing to remove from cart", item_id=item_id)
            return OperationResult.success()

        restored = self.catalog.increment_stock(item_id, entry.reserved_quantity)
        logger.info(
            "Cart item returned to stock",
            item=entry.item_name,
            quantity=entry.reserved_quantity,
            remaining=restored.remaining_quantity,
        )
        return OperationResult.success(f"{entry.item_name} removed from the cart.")

    async def edit_order(self, order_id: str, new_quantity: int) -> OperationResult:
        return await self.orders_view.edit(order_id, new_quantity)

    async def delete_order(self, order_id: str, *, confirm: ConfirmDelete) -> OperationResult:
        return await self.orders_view.delete(order_id, confirm=confirm)
