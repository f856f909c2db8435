"""Bill computation for a cart against a restaurant menu."""

import structlog

from delivery.catalogue.restaurant import Restaurant
from delivery.config import PricingPolicy
from delivery.errors import FailureKind, OrderError

logger = structlog.get_logger(__name__)


def compute_total(cart_items: dict[str, int], restaurant: Restaurant, policy: PricingPolicy = PricingPolicy.STRICT) -> int:
    """Sum of ``price × quantity`` over the cart.

    Under ``STRICT`` any item missing from the menu aborts with
    ``ITEM_NOT_ON_MENU``. Under ``LEGACY_ZERO_PRICE`` such items are priced
    at zero and a warning is logged.
    """
    prices = {item_id: restaurant.price_of(item_id) for item_id in cart_items}
    missing = sorted(item_id for item_id, price in prices.items() if price is None)

    if missing:
        if policy == PricingPolicy.STRICT:
            raise OrderError(
                FailureKind.ITEM_NOT_ON_MENU,
                f"Items not on the menu of restaurant {restaurant.id}: {', '.join(missing)}",
            )
        logger.warning(
            "Pricing unknown items at zero",
            restaurant_id=str(restaurant.id),
            item_ids=missing,
        )

    return sum((prices[item_id] or 0) * quantity for item_id, quantity in cart_items.items())
