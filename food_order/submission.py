"""Order submission: validate, append to the order store, reconcile stock and cart."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable

import structlog

from food_order.catalog import MenuCatalog, check_quantity
from food_order.errors import InsufficientStock, OperationResult, RemoteWriteError, ValidationError
from food_order.models import MenuItem, build_order_record
from food_order.store import OrderStore

logger = structlog.get_logger(__name__)

CartUpdater = Callable[[MenuItem, int], object]
Clock = Callable[[], datetime]

CONFIRMED_MESSAGE = "Order sent. You will receive an SMS once it is ready for pickup."
SUBMIT_FAILED_MESSAGE = "Something went wrong while processing your order. Please try again."


class SubmissionState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    FAILED = "failed"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderSubmissionFlow:
    """Order form state for a single menu item.

    Idle -> Submitting -> Confirmed | Failed, with Failed -> Submitting on
    retry. Confirmed is terminal. The store append and the local stock
    decrement are two sequential steps, not a transaction: once the append
    is acknowledged the order stands even if the decrement fails.
    """

    def __init__(
        self,
        food: MenuItem,
        *,
        catalog: MenuCatalog,
        store: OrderStore,
        update_cart: CartUpdater,
        clock: Clock | None = None,
    ) -> None:
        self.food = food
        self._catalog = catalog
        self._store = store
        self._update_cart = update_cart
        self._clock = clock or _utc_now

        self.state = SubmissionState.IDLE
        self.quantity = 1
        self.total_amount = food.unit_price
        self.order_id: str | None = None
        self.error: Exception | None = None
        self.message: str | None = None

    @property
    def loading(self) -> bool:
        return self.state is SubmissionState.SUBMITTING

    @property
    def confirmed(self) -> bool:
        return self.state is SubmissionState.CONFIRMED

    @property
    def editable(self) -> bool:
        return self.state in (SubmissionState.IDLE, SubmissionState.FAILED)

    def set_quantity(self, qty: int) -> float:
        """Change the selected quantity and return the recomputed total."""
        if not self.editable:
            raise ValidationError("quantity locked", "The quantity can no longer be changed.")
        check_quantity(qty)
        self.quantity = qty
        self.total_amount = self.food.unit_price * qty
        return self.total_amount

    async def submit(self, customer_name: str, phone: str, quantity: int | None = None) -> OperationResult:
        # Guards leave the form state alone so an in-flight submission keeps its status.
        if self.state is SubmissionState.SUBMITTING:
            logger.debug("Submit ignored while in flight", item=self.food.name)
            return OperationResult.failure(
                ValidationError("submission in progress", "Your order is already being processed.")
            )
        if self.state is SubmissionState.CONFIRMED:
            return OperationResult.failure(ValidationError("already submitted", "This order has already been sent."))

        qty = self.quantity if quantity is None else quantity
        try:
            name, phone = self._validate(customer_name, phone, qty)
        except (ValidationError, InsufficientStock) as exc:
            return self._reject(exc)

        self.quantity = qty
        self.total_amount = self.food.unit_price * qty
        self.state = SubmissionState.SUBMITTING
        self.error = None
        self.message = None
        logger.info("Saving order", customer=name, item=self.food.name, quantity=qty)

        record = build_order_record(
            self.food,
            quantity=qty,
            total_amount=self.total_amount,
            customer_name=name,
            phone=phone,
            timestamp=self._clock().isoformat(),
        )
        try:
            order_id = await self._store.append(record)
        except RemoteWriteError as exc:
            self.state = SubmissionState.FAILED
            self.error = exc
            self.message = SUBMIT_FAILED_MESSAGE
            logger.error("Order save failed", customer=name, item=self.food.name, error=exc.message)
            return OperationResult.failure(exc, SUBMIT_FAILED_MESSAGE)

        self.state = SubmissionState.CONFIRMED
        self.order_id = order_id
        self.message = CONFIRMED_MESSAGE
        logger.info("Order saved", order_id=order_id, customer=name, total_amount=self.total_amount)

        self._reconcile(qty)
        return OperationResult.success(CONFIRMED_MESSAGE, order_id=order_id)

    def _validate(self, customer_name: str, phone: str, qty: int) -> tuple[str, str]:
        name = (customer_name or "").strip()
        if not name:
            raise ValidationError("missing name", "Please enter your name.")
        phone = (phone or "").strip()
        if not phone:
            raise ValidationError("missing phone", "Please enter your phone number.")
        check_quantity(qty)

        current = self._catalog.find_by_id(self.food.item_id)
        if current is None:
            raise ValidationError("unknown item", f"{self.food.name} is no longer on the menu.")
        if qty > current.remaining_quantity:
            raise InsufficientStock(current.item_id, qty, current.remaining_quantity)
        return name, phone

    def _reject(self, exc: ValidationError | InsufficientStock) -> OperationResult:
        self.error = exc
        self.message = exc.user_message
        logger.info("Order rejected", item=self.food.name, reason=exc.message)
        return OperationResult.failure(exc)

    def _reconcile(self, qty: int) -> None:
        try:
            self._catalog.decrement_stock(self.food.item_id, qty)
        except (InsufficientStock, ValidationError) as exc:
            # The order is already durable; the decrement is never rolled back.
            logger.warning(
                "Stock not decremented for saved order",
                order_id=self.order_id,
                item_id=self.food.item_id,
                error=exc.message,
            )
        self._update_cart(self.food, qty)


async def submit_order(
    food: MenuItem,
    quantity: int,
    customer_name: str,
    phone: str,
    *,
    catalog: MenuCatalog,
    store: OrderStore,
    update_cart: CartUpdater,
    clock: Clock | None = None,
) -> OperationResult:
    """Submit a single order without keeping form state around."""
    flow = OrderSubmissionFlow(food, catalog=catalog, store=store, update_cart=update_cart, clock=clock)
    return await flow.submit(customer_name, phone, quantity=quantity)
