"""Delivery bounded context: Restaurants, Riders, and Order Fulfillment.

Handles restaurant menus, rider dispatch by proximity, and the checkout
saga that turns a customer's cart into a paid, rider-assigned order.
"""

from protean.domain import Domain

from delivery.utils.logging import configure_logging

# Configure logging for the application
configure_logging()

# Domain Composition Root
delivery = Domain(name="delivery")
