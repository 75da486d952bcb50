"""Runtime configuration defaults for the order store and logging."""

from __future__ import annotations

import os

DB_PATH = os.getenv("FOOD_ORDER_DB_PATH", "data/food_order.db")

# "sqlite" keeps orders across restarts, "memory" is for demos and tests.
STORE_BACKEND = os.getenv("FOOD_ORDER_STORE", "sqlite")
# Seconds between checks for orders written by another process.
POLL_INTERVAL = float(os.getenv("FOOD_ORDER_POLL_INTERVAL", "1.0"))
ORDERS_COLLECTION = "orders"

# The TUI owns the terminal, so log lines go to a file.
LOG_PATH = os.getenv("FOOD_ORDER_LOG_PATH", "/tmp/food-order.log")
LOG_LEVEL = os.getenv("FOOD_ORDER_LOG_LEVEL", "INFO")

CURRENCY_SYMBOL = "€"
SHORT_ID_LENGTH = 6
