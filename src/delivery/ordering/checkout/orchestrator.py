"""Order Checkout Saga: coordinates Cart → Billing → Payment → Dispatch → Notification.

The orchestrator owns every piece of in-memory state for one fulfillment
operator: the catalogue, the customer directory, the rider pool and the
three per-customer capability registries.

Flow of ``place_order``:
    1. Resolve customer, cart and restaurant (no side effects yet)
    2. Compute the bill
    3. Capture payment                       → committed
    4. Match the nearest rider               → on failure, refund (3) and raise
    5. Send the confirmation                 → on failure, queue for retry; order stands
    6. Clear the cart

Only a fully successful run reaches step 6, so a failed order leaves the
cart exactly as it was. A failure to clear the cart is logged and does not
undo the order. Log lines emitted on the calling thread during a checkout
carry its ``order_id``. Calls for the same customer are serialized; calls
for different customers run concurrently.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from uuid import uuid4

import structlog
from protean.exceptions import ObjectNotFoundError

from delivery.catalogue.catalogue import Catalogue
from delivery.catalogue.restaurant import Restaurant
from delivery.config import DeliverySettings
from delivery.customers.user import User
from delivery.dispatch.pool import RiderAssignment, RiderPool
from delivery.dispatch.rider import Rider
from delivery.errors import (
    CapabilityTimeout,
    CompensationFailed,
    DeliveryError,
    FailureKind,
    NotificationError,
    OrderError,
    PaymentError,
    RiderError,
)
from delivery.notifications.channel import NotificationChannel
from delivery.notifications.outbox import NotificationOutbox, PendingNotification
from delivery.ordering.billing import compute_total
from delivery.ordering.cart import CartStore, InMemoryCart
from delivery.ordering.receipt import OrderReceipt
from delivery.payments.account import PaymentAccount
from delivery.registry import CartRegistry, NotificationRegistry, PaymentRegistry
from delivery.shared.location import Location
from delivery.utils.locks import KeyedLocks
from delivery.utils.logging import add_context, clear_context
from delivery.utils.timeouts import call_with_timeout

logger = structlog.get_logger(__name__)


class OrderOrchestrator:
    def __init__(self, settings: DeliverySettings | None = None) -> None:
        self.settings = settings or DeliverySettings()
        self.catalogue = Catalogue()
        self.rider_pool = RiderPool()
        self.carts = CartRegistry()
        self.payments = PaymentRegistry()
        self.notifications = NotificationRegistry()
        self.outbox = NotificationOutbox()

        self._users: dict[str, User] = {}
        self._user_locks = KeyedLocks()
        self._executor = (
            ThreadPoolExecutor(thread_name_prefix="delivery-capability") if self.settings.uses_timeouts else None
        )

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # -------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------
    def add_restaurant(self, restaurant: Restaurant) -> None:
        self.catalogue.add(restaurant)

    def register_user(self, user: User) -> None:
        with self._user_locks.hold(str(user.id)):
            self._users[str(user.id)] = user

    def register_rider(self, rider: Rider) -> None:
        self.rider_pool.register(rider)

    def update_rider_location(self, rider_id: str, location: Location) -> None:
        self.rider_pool.update_location(rider_id, location)

    def complete_delivery(self, rider_id: str) -> None:
        self.rider_pool.complete_delivery(rider_id)

    def attach_cart(self, user_id: str, cart: CartStore) -> None:
        with self._user_locks.hold(user_id):
            self.carts.attach(user_id, cart)

    def attach_payment(self, user_id: str, account: PaymentAccount) -> None:
        with self._user_locks.hold(user_id):
            self.payments.attach(user_id, account)

    def attach_notification(self, user_id: str, channel: NotificationChannel) -> None:
        with self._user_locks.hold(user_id):
            self.notifications.attach(user_id, channel)

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def add_to_cart(self, user_id: str, item_id: str) -> None:
        """Add one unit of ``item_id``, creating the user's cart on first use."""
        with self._user_locks.hold(user_id):
            self.carts.get_or_attach(user_id, InMemoryCart).add(item_id)

    def remove_from_cart(self, user_id: str, item_id: str) -> None:
        with self._user_locks.hold(user_id):
            if user_id in self.carts:
                self.carts.get(user_id).remove(item_id)

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def place_order(self, user_id: str, restaurant_id: str) -> OrderReceipt:
        """Run the checkout saga for ``user_id`` against ``restaurant_id``.

        Returns:
            OrderReceipt for a placed order. A failed confirmation is reported
            on the receipt (``notified=False``) rather than raised.

        Raises:
            OrderError: UNKNOWN_USER, NO_CART, UNKNOWN_RESTAURANT, ITEM_NOT_ON_MENU.
            PaymentError: NO_ACCOUNT, INSUFFICIENT_FUNDS, TIMEOUT (retryable).
            RiderError: NO_RIDER_AVAILABLE, after the captured payment was refunded.
            CompensationFailed: the refund after a failed match did not go through.
            DeliveryError: OTHER, for unexpected capability failures.
        """
        order_id = f"ord-{uuid4().hex[:12]}"
        add_context(order_id=order_id)
        try:
            return self._place_order(order_id, user_id, restaurant_id)
        finally:
            clear_context("order_id")

    def _place_order(self, order_id: str, user_id: str, restaurant_id: str) -> OrderReceipt:
        with self._user_locks.hold(user_id):
            user = self.get_user(user_id)
            cart = self.carts.get(user_id)
            cart_items = cart.items()
            if not cart_items:
                raise OrderError(FailureKind.NO_CART, f"Cart of user {user_id} is empty")
            restaurant = self._get_restaurant(restaurant_id)

            total = compute_total(cart_items, restaurant, self.settings.pricing_policy)

            account = self.payments.get(user_id)
            balance = self._capture_payment(user_id, account, total)

            assignment = self._assign_rider(user_id, user.location, account, total)

            message = (
                f"Order of {self.settings.currency_symbol}{total} from {restaurant.name} processed. "
                f"Rider {assignment.rider_id} assigned. Balance: {self.settings.currency_symbol}{balance}"
            )
            failure = self._send_confirmation(user_id, message)

            # The order stands once a rider is matched.
            try:
                cart.clear()
            except Exception as exc:
                logger.error("Cart clear failed after order placed", user_id=user_id, error=str(exc))

            receipt = OrderReceipt(
                order_id=order_id,
                user_id=user_id,
                restaurant_id=str(restaurant.id),
                restaurant_name=restaurant.name,
                total=total,
                rider_id=assignment.rider_id,
                remaining_balance=balance,
                notified=failure is None,
                notification_failure=failure,
                placed_at=datetime.now(UTC),
            )

        logger.info(
            "Order placed",
            order_id=receipt.order_id,
            user_id=user_id,
            restaurant_id=receipt.restaurant_id,
            total=total,
            rider_id=receipt.rider_id,
            notified=receipt.notified,
        )
        return receipt

    def get_user(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise OrderError(FailureKind.UNKNOWN_USER, f"User {user_id} is not registered")
        return user

    def _get_restaurant(self, restaurant_id: str) -> Restaurant:
        try:
            return self.catalogue.get(restaurant_id)
        except ObjectNotFoundError as exc:
            raise OrderError(FailureKind.UNKNOWN_RESTAURANT, f"Restaurant {restaurant_id} not found") from exc

    def _capture_payment(self, user_id: str, account: PaymentAccount, total: int) -> int:
        try:
            result = call_with_timeout(
                self._executor, self.settings.payment_timeout_seconds, "payment capture", account.pay, total
            )
        except CapabilityTimeout as exc:
            # Outcome unknown: the capture may still land. Surface for reconciliation.
            logger.error("Payment capture timed out", user_id=user_id, amount=total, timeout=exc.timeout)
            raise PaymentError(FailureKind.TIMEOUT, str(exc), retryable=True) from exc
        except DeliveryError:
            raise
        except Exception as exc:
            logger.error("Payment capture failed unexpectedly", user_id=user_id, amount=total, error=str(exc))
            raise DeliveryError(FailureKind.OTHER, f"Payment capture failed: {exc}") from exc

        if not result.success:
            logger.info("Payment declined", user_id=user_id, amount=total, reason=result.failure_reason)
            raise PaymentError(FailureKind.INSUFFICIENT_FUNDS, result.failure_reason or "Insufficient funds")

        logger.info("Payment captured", user_id=user_id, amount=total, transaction_id=result.transaction_id)
        return result.balance

    def _assign_rider(self, user_id: str, target: Location, account: PaymentAccount, total: int) -> RiderAssignment:
        try:
            return self.rider_pool.match_nearest(target)
        except RiderError as exc:
            self._refund(user_id, account, total, exc)
            raise
        except Exception as exc:
            failure = DeliveryError(FailureKind.OTHER, f"Rider matching failed: {exc}")
            self._refund(user_id, account, total, failure)
            raise failure from exc

    def _refund(self, user_id: str, account: PaymentAccount, total: int, cause: DeliveryError) -> None:
        """Compensate a captured payment. Escalates if the refund does not go through."""
        try:
            result = call_with_timeout(
                self._executor, self.settings.payment_timeout_seconds, "payment refund", account.refund, total
            )
            reason = None if result.success else (result.failure_reason or "Refund rejected")
        except Exception as exc:
            reason = str(exc)

        if reason is not None:
            logger.critical(
                "Refund failed after payment capture",
                user_id=user_id,
                amount=total,
                cause=cause.kind.value,
                reason=reason,
            )
            raise CompensationFailed(
                f"Refund of {total} to user {user_id} failed after {cause.kind.value}: {reason}",
                original=cause,
            ) from cause

        logger.info("Payment refunded", user_id=user_id, amount=total, cause=cause.kind.value)

    def _send_confirmation(self, user_id: str, message: str, attempts: int = 1) -> str | None:
        """Deliver ``message``; return None on success or the failure reason.

        A failed confirmation is queued in the outbox unless it has used up
        ``max_notification_attempts``.
        """
        reason = self._notify(user_id, message)
        if reason is None:
            return None

        logger.warning("Notification failed", user_id=user_id, attempts=attempts, reason=reason)
        if attempts < self.settings.max_notification_attempts:
            self.outbox.enqueue(PendingNotification(user_id=user_id, message=message, attempts=attempts, last_error=reason))
        else:
            logger.error("Notification dropped after max attempts", user_id=user_id, attempts=attempts, reason=reason)
        return reason

    def _notify(self, user_id: str, message: str) -> str | None:
        try:
            channel = self.notifications.get(user_id)
            result = call_with_timeout(
                self._executor, self.settings.notification_timeout_seconds, "notification", channel.notify, message
            )
        except NotificationError as exc:
            return exc.detail
        except Exception as exc:
            return str(exc)

        if result.success:
            return None
        return result.failure_reason or FailureKind.DELIVERY_FAILED.value

    # -------------------------------------------------------------------
    # Notification retries
    # -------------------------------------------------------------------
    def retry_notifications(self) -> int:
        """Re-attempt every queued confirmation. Returns the number delivered."""
        delivered = 0
        for entry in self.outbox.drain():
            if self._send_confirmation(entry.user_id, entry.message, attempts=entry.attempts + 1) is None:
                delivered += 1
                logger.info("Queued notification delivered", user_id=entry.user_id, attempts=entry.attempts + 1)
        return delivered
