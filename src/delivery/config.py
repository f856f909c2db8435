"""Runtime settings for the checkout saga.

Defaults suit tests and local use. ``DeliverySettings.from_env`` overlays
``DELIVERY_*`` environment variables.
"""

import os
from enum import Enum

from pydantic import BaseModel, Field


class PricingPolicy(Enum):
    """How to price cart items that are missing from the restaurant's menu."""

    STRICT = "strict"  # reject the order
    LEGACY_ZERO_PRICE = "legacy_zero_price"  # price the item at 0


_ENV_VARS = {
    "pricing_policy": "DELIVERY_PRICING_POLICY",
    "payment_timeout_seconds": "DELIVERY_PAYMENT_TIMEOUT",
    "notification_timeout_seconds": "DELIVERY_NOTIFICATION_TIMEOUT",
    "max_notification_attempts": "DELIVERY_MAX_NOTIFICATION_ATTEMPTS",
    "currency_symbol": "DELIVERY_CURRENCY_SYMBOL",
}


class DeliverySettings(BaseModel):
    pricing_policy: PricingPolicy = PricingPolicy.STRICT
    payment_timeout_seconds: float | None = Field(default=None, gt=0)
    notification_timeout_seconds: float | None = Field(default=None, gt=0)
    max_notification_attempts: int = Field(default=3, ge=1)
    currency_symbol: str = "₹"

    model_config = {"frozen": True}

    @property
    def uses_timeouts(self) -> bool:
        return self.payment_timeout_seconds is not None or self.notification_timeout_seconds is not None

    @classmethod
    def from_env(cls, environ=None) -> "DeliverySettings":
        environ = os.environ if environ is None else environ
        values = {field: environ[var] for field, var in _ENV_VARS.items() if environ.get(var)}
        return cls(**values)
