"""Live, sorted view of the order collection with edit and delete commands."""

from __future__ import annotations

import inspect
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Mapping

import structlog

from food_order.catalog import check_quantity
from food_order.errors import OperationResult, OrderError, RemoteReadError, RemoteWriteError, ValidationError
from food_order.models import Order
from food_order.store import OrderStore, Subscription

logger = structlog.get_logger(__name__)

ConfirmDelete = Callable[[Order], "bool | Awaitable[bool]"]

LOAD_FAILED_MESSAGE = "Could not load the orders. Please try again."
UPDATE_FAILED_MESSAGE = "Could not update the order. Please try again."
DELETE_FAILED_MESSAGE = "Could not delete the order. Please try again."


def _newest_first_key(order: Order) -> datetime:
    created = order.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def flatten_snapshot(snapshot: Mapping[str, Mapping[str, Any]] | None) -> tuple[Order, ...]:
    """Turn a keyed snapshot into orders sorted newest first."""
    if not snapshot:
        return ()
    orders = [Order.from_record(key, record) for key, record in snapshot.items()]
    orders.sort(key=_newest_first_key, reverse=True)
    return tuple(orders)


class OrderSyncView:
    """Materialized order list kept in step with the store.

    Every delivery replaces the whole list. Writes are never applied
    locally; the list changes only when the store pushes the next snapshot.
    """

    def __init__(self, store: OrderStore, on_change: Callable[[], None] | None = None) -> None:
        self._store = store
        self.on_change = on_change
        self.orders: tuple[Order, ...] = ()
        self.subscribing = False
        self._writes_in_flight = 0
        self.error: str | None = None
        self.last_error: OrderError | None = None
        self._subscription: Subscription | None = None
        self._generation = 0

    @property
    def loading(self) -> bool:
        """True until the first delivery after subscribe(), or while an edit or delete is in flight."""
        return self.subscribing or self._writes_in_flight > 0

    @property
    def subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def find(self, order_id: str) -> Order | None:
        for order in self.orders:
            if order.order_id == order_id:
                return order
        return None

    def subscribe(self) -> Subscription:
        """Open the live subscription, replacing any previous one."""
        self.unsubscribe()
        self._generation += 1
        generation = self._generation
        self.subscribing = True
        logger.info("Subscribing to orders", collection=self._store.collection)

        self._subscription = self._store.subscribe(
            lambda snapshot: self._apply_snapshot(generation, snapshot),
            lambda exc: self._apply_read_error(generation, exc),
        )
        return self._subscription

    def unsubscribe(self) -> None:
        self._generation += 1
        self.subscribing = False
        if self._subscription is None:
            return
        self._subscription.close()
        self._subscription = None
        logger.debug("Unsubscribed from orders", collection=self._store.collection)

    async def edit(self, order_id: str, new_quantity: int) -> OperationResult:
        """Change an order's quantity, keeping its per-unit price."""
        order = self.find(order_id)
        try:
            if order is None:
                raise ValidationError("unknown order", "That order no longer exists.")
            check_quantity(new_quantity)
        except ValidationError as exc:
            return self._fail(exc)

        new_total = (order.total_amount / order.quantity) * new_quantity
        self._begin_write()
        logger.debug("Updating order", order_id=order_id, quantity=new_quantity)
        try:
            await self._store.update(order_id, {"quantity": new_quantity, "totalAmount": new_total})
        except RemoteWriteError as exc:
            self._end_write()
            logger.error("Order update failed", order_id=order_id, error=exc.message)
            return self._fail(exc, UPDATE_FAILED_MESSAGE)

        self._end_write()
        logger.info("Order updated", order_id=order_id, quantity=new_quantity, total_amount=new_total)
        return OperationResult.success(f"Order #{order.short_id} updated.", order_id=order_id)

    async def delete(self, order_id: str, *, confirm: ConfirmDelete) -> OperationResult:
        """Remove an order once confirm(order) approves it."""
        order = self.find(order_id)
        if order is None:
            return self._fail(ValidationError("unknown order", "That order no longer exists."))

        approved = confirm(order)
        if inspect.isawaitable(approved):
            approved = await approved
        if not approved:
            logger.debug("Order deletion cancelled", order_id=order_id)
            return OperationResult.declined("Deletion cancelled.")

        self._begin_write()
        logger.debug("Deleting order", order_id=order_id)
        try:
            await self._store.remove(order_id)
        except RemoteWriteError as exc:
            self._end_write()
            logger.error("Order deletion failed", order_id=order_id, error=exc.message)
            return self._fail(exc, DELETE_FAILED_MESSAGE)

        self._end_write()
        logger.info("Order deleted", order_id=order_id)
        return OperationResult.success(f"Order #{order.short_id} deleted.", order_id=order_id)

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _apply_snapshot(self, generation: int, snapshot: Mapping[str, Mapping[str, Any]] | None) -> None:
        if not self._is_current(generation):
            return
        try:
            orders = flatten_snapshot(snapshot)
        except (KeyError, TypeError, ValueError) as exc:
            self._apply_read_error(generation, RemoteReadError(f"malformed order snapshot: {exc}"))
            return

        self.orders = orders
        self.subscribing = False
        self.error = None
        self.last_error = None
        if orders:
            logger.info("Orders loaded", count=len(orders))
        else:
            logger.info("No orders available")
        self._changed()

    def _apply_read_error(self, generation: int, exc: RemoteReadError) -> None:
        if not self._is_current(generation):
            return
        # Keep showing the last good snapshot.
        self.subscribing = False
        self.error = LOAD_FAILED_MESSAGE
        self.last_error = exc
        logger.error("Order load failed", error=exc.message)
        self._changed()

    def _fail(self, exc: OrderError, message: str | None = None) -> OperationResult:
        result = OperationResult.failure(exc, message)
        self.error = result.message
        self.last_error = exc
        self._changed()
        return result

    def _begin_write(self) -> None:
        self._writes_in_flight += 1
        self._changed()

    def _end_write(self) -> None:
        self._writes_in_flight -= 1
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
