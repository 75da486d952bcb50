"""Static menu data."""

from __future__ import annotations

from food_order.constant import MENU_SEED
from food_order.models import MenuItem


def _menu_item(raw: dict[str, str | int | float]) -> MenuItem:
    return MenuItem(
        item_id=int(raw["item_id"]),
        name=str(raw["name"]),
        description=str(raw["description"]),
        unit_price=raw["unit_price"],  # type: ignore[arg-type]
        remaining_quantity=int(raw["remaining_quantity"]),
        image_ref=str(raw.get("image_ref", "")),
    )


SEED_MENU: tuple[MenuItem, ...] = tuple(_menu_item(raw) for raw in MENU_SEED)


def seed_menu() -> list[MenuItem]:
    """Return a fresh copy of the startup menu."""
    return list(SEED_MENU)
