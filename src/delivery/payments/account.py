"""Payment account port (abstract interface).

Defines the contract that every payment capability attached to a customer
must implement. The checkout saga programs against this port, so a wallet,
a card-on-file or a test double can be swapped in without touching it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentResult:
    """Result of a capture or refund attempt."""

    success: bool
    balance: int
    transaction_id: str | None = None
    failure_reason: str | None = None


class PaymentAccount(ABC):
    """Abstract payment account interface."""

    account_id: str

    @abstractmethod
    def pay(self, amount: int) -> PaymentResult:
        """Capture ``amount`` from the account.

        On success the result carries the new balance. When the balance is
        insufficient the result is unsuccessful and the balance is unchanged.
        """
        ...

    @abstractmethod
    def refund(self, amount: int) -> PaymentResult:
        """Credit ``amount`` back to the account (compensation for a capture)."""
        ...
