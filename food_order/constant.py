"""Editable static menu configuration."""

from __future__ import annotations

SHOP_TITLE = "Comida Rápida Online"

# Seed stock for a fresh session. Wrapped into MenuItem instances by food_order.data.
MENU_SEED: list[dict[str, str | int | float]] = [
    {
        "item_id": 1,
        "name": "Hamburguesa de Pollo",
        "remaining_quantity": 40,
        "description": "Hamburguesa de pollo frito - lechuga, tomate, queso y mayonesa",
        "unit_price": 24,
        "image_ref": "cb.jpeg",
    },
    {
        "item_id": 2,
        "name": "Hamburguesa Vegetariana",
        "remaining_quantity": 30,
        "description": "Hamburguesa verde - lechuga, tomate, queso vegano y mayonesa",
        "unit_price": 22,
        "image_ref": "vb.jpg",
    },
    {
        "item_id": 3,
        "name": "Patatas Fritas",
        "remaining_quantity": 50,
        "description": "Patatas crujientes con sal y especias",
        "unit_price": 8,
        "image_ref": "chips.jpeg",
    },
    {
        "item_id": 4,
        "name": "Helado",
        "remaining_quantity": 30,
        "description": "Helado casero de vainilla con toppings",
        "unit_price": 6,
        "image_ref": "ic.jpeg",
    },
]
