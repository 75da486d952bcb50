"""Entry point for the food-order Textual app."""

from __future__ import annotations

from food_order.config import LOG_LEVEL, LOG_PATH
from food_order.food_order_app import FoodOrderApp
from food_order.log import configure_logging


def main() -> None:
    """Run the Textual application."""
    configure_logging(LOG_LEVEL, LOG_PATH)
    FoodOrderApp().run()


if __name__ == "__main__":
    main()
