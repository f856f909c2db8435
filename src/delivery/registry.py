"""Per-customer capability registries.

Each registry owns exactly one capability instance per user id. Attaching a
second instance for the same user replaces the first. Looking up a user
with nothing attached raises the registry's own failure kind, so the
checkout saga can surface it verbatim.
"""

from collections.abc import Callable
from threading import RLock

import structlog

from delivery.errors import DeliveryError, FailureKind, NotificationError, OrderError, PaymentError
from delivery.notifications.channel import NotificationChannel
from delivery.ordering.cart import CartStore
from delivery.payments.account import PaymentAccount

logger = structlog.get_logger(__name__)


class CapabilityRegistry:
    """Map of user id → capability instance."""

    capability = "capability"

    def __init__(self) -> None:
        self._instances: dict[str, object] = {}
        self._lock = RLock()

    def _missing(self, user_id: str) -> DeliveryError:
        raise NotImplementedError

    def attach(self, user_id: str, instance) -> None:
        with self._lock:
            replaced = user_id in self._instances
            self._instances[user_id] = instance
        if replaced:
            logger.info("Capability replaced", capability=self.capability, user_id=user_id)

    def get(self, user_id: str):
        with self._lock:
            instance = self._instances.get(user_id)
        if instance is None:
            raise self._missing(user_id)
        return instance

    def get_or_attach(self, user_id: str, factory: Callable[[], object]):
        """Return the user's instance, attaching ``factory()`` first if there is none."""
        with self._lock:
            instance = self._instances.get(user_id)
            if instance is None:
                instance = factory()
                self._instances[user_id] = instance
            return instance

    def detach(self, user_id: str) -> None:
        with self._lock:
            self._instances.pop(user_id, None)

    def __contains__(self, user_id) -> bool:
        with self._lock:
            return user_id in self._instances

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)


class CartRegistry(CapabilityRegistry):
    capability = "cart"

    def _missing(self, user_id: str) -> DeliveryError:
        return OrderError(FailureKind.NO_CART, f"No cart for user {user_id}")

    def get(self, user_id: str) -> CartStore:
        return super().get(user_id)


class PaymentRegistry(CapabilityRegistry):
    capability = "payment"

    def _missing(self, user_id: str) -> DeliveryError:
        return PaymentError(FailureKind.NO_ACCOUNT, f"No payment account for user {user_id}")

    def get(self, user_id: str) -> PaymentAccount:
        return super().get(user_id)


class NotificationRegistry(CapabilityRegistry):
    capability = "notification"

    def _missing(self, user_id: str) -> DeliveryError:
        return NotificationError(FailureKind.NO_CHANNEL, f"No notification channel for user {user_id}")

    def get(self, user_id: str) -> NotificationChannel:
        return super().get(user_id)
