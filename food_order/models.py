"""Domain models for food-order."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from food_order.config import SHORT_ID_LENGTH

# Field names of a persisted order record, in wire order.
ORDER_RECORD_FIELDS = (
    "foodId",
    "foodName",
    "quantity",
    "totalAmount",
    "customerName",
    "phone",
    "timestamp",
)

# Fields an operator may change on an existing order.
EDITABLE_ORDER_FIELDS = frozenset({"quantity", "totalAmount"})


@dataclass(frozen=True)
class MenuItem:
    """A sellable menu item with its remaining stock."""

    item_id: int
    name: str
    description: str
    unit_price: float
    remaining_quantity: int
    image_ref: str = ""

    @property
    def sold_out(self) -> bool:
        return self.remaining_quantity <= 0


@dataclass(frozen=True)
class CartEntry:
    """Quantity reserved against one menu item."""

    item_id: int
    item_name: str
    reserved_quantity: int


@dataclass(frozen=True)
class Order:
    """A submitted order as materialized from the order store."""

    order_id: str
    food_id: int
    food_name: str
    quantity: int
    total_amount: float
    customer_name: str
    phone: str
    timestamp: str

    @property
    def short_id(self) -> str:
        return self.order_id[:SHORT_ID_LENGTH]

    @property
    def unit_price(self) -> float:
        return self.total_amount / self.quantity

    @property
    def created_at(self) -> datetime:
        return parse_timestamp(self.timestamp)

    @classmethod
    def from_record(cls, order_id: str, record: Mapping[str, Any]) -> "Order":
        """Build an order from a stored record; raises KeyError/ValueError on bad data."""
        quantity = int(record["quantity"])
        if quantity <= 0:
            raise ValueError(f"order {order_id} has non-positive quantity {quantity}")
        total_amount = float(record["totalAmount"])
        if not math.isfinite(total_amount) or total_amount < 0:
            raise ValueError(f"order {order_id} has invalid total {total_amount}")
        timestamp = str(record["timestamp"])
        parse_timestamp(timestamp)
        return cls(
            order_id=str(order_id),
            food_id=int(record["foodId"]),
            food_name=str(record["foodName"]),
            quantity=quantity,
            total_amount=total_amount,
            customer_name=str(record["customerName"]),
            phone=str(record["phone"]),
            timestamp=timestamp,
        )


def build_order_record(
    food: MenuItem,
    quantity: int,
    total_amount: float,
    customer_name: str,
    phone: str,
    timestamp: str,
) -> dict[str, Any]:
    """Create the persisted record for a new order."""
    return {
        "foodId": food.item_id,
        "foodName": food.name,
        "quantity": quantity,
        "totalAmount": total_amount,
        "customerName": customer_name,
        "phone": phone,
        "timestamp": timestamp,
    }


def parse_timestamp(value: str) -> datetime:
    # fromisoformat before 3.11 does not accept a trailing "Z".
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
