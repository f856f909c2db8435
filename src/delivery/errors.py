"""Failure taxonomy for order placement.

Every failure surfaced by the checkout saga is a ``DeliveryError`` tagged
with a ``FailureKind``. Callers branch on ``kind`` (and ``retryable``) to
decide whether to retry, without parsing messages.

Domain-rule violations (bad state transitions, negative prices) are not
part of this taxonomy: they raise ``protean.exceptions.ValidationError``
like the rest of the domain layer.
"""

from enum import Enum


class FailureKind(Enum):
    NO_CART = "NoCart"
    UNKNOWN_USER = "UnknownUser"
    UNKNOWN_RESTAURANT = "UnknownRestaurant"
    ITEM_NOT_ON_MENU = "ItemNotOnMenu"
    NO_ACCOUNT = "NoAccount"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    NO_RIDER_AVAILABLE = "NoRiderAvailable"
    NO_CHANNEL = "NoChannel"
    DELIVERY_FAILED = "DeliveryFailed"
    TIMEOUT = "Timeout"
    OTHER = "Other"


class DeliveryError(Exception):
    """Base class for tagged order-placement failures."""

    severity = "error"

    def __init__(self, kind: FailureKind, detail: str = "", retryable: bool = False) -> None:
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail
        self.retryable = retryable


class OrderError(DeliveryError):
    """Cart, customer or catalogue resolution failed."""


class PaymentError(DeliveryError):
    """Payment account missing, capture rejected, or capture timed out."""


class RiderError(DeliveryError):
    """No rider could be matched."""


class NotificationError(DeliveryError):
    """Notification channel missing or delivery failed."""


class CompensationFailed(DeliveryError):
    """A compensating action failed after a committed side effect.

    Money was captured but no service was rendered and the automatic refund
    did not go through. Requires operator attention.
    """

    severity = "critical"

    def __init__(self, detail: str, original: DeliveryError) -> None:
        super().__init__(FailureKind.OTHER, detail)
        self.original = original


class CapabilityTimeout(Exception):
    """A capability call did not complete within its configured timeout."""

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"{operation} timed out after {timeout}s")
        self.operation = operation
        self.timeout = timeout
