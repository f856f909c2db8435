"""Prepaid wallet: an in-memory payment account with a running balance."""

from threading import Lock
from uuid import uuid4

from protean.exceptions import ValidationError

from delivery.payments.account import PaymentAccount, PaymentResult


class Wallet(PaymentAccount):
    """Wallet-style account. Every call is recorded in ``calls`` for assertions."""

    def __init__(self, account_id: str, balance: int = 0) -> None:
        if balance < 0:
            raise ValidationError({"balance": ["Opening balance cannot be negative"]})
        self.account_id = account_id
        self._balance = balance
        self._lock = Lock()
        self.calls: list[dict] = []

    @property
    def balance(self) -> int:
        with self._lock:
            return self._balance

    def pay(self, amount: int) -> PaymentResult:
        _validate_amount(amount)
        with self._lock:
            self.calls.append({"method": "pay", "amount": amount})
            if self._balance < amount:
                return PaymentResult(
                    success=False,
                    balance=self._balance,
                    failure_reason=f"Insufficient funds: balance {self._balance}, required {amount}",
                )
            self._balance -= amount
            return PaymentResult(
                success=True,
                balance=self._balance,
                transaction_id=f"wallet_txn_{uuid4().hex[:12]}",
            )

    def refund(self, amount: int) -> PaymentResult:
        _validate_amount(amount)
        with self._lock:
            self.calls.append({"method": "refund", "amount": amount})
            self._balance += amount
            return PaymentResult(
                success=True,
                balance=self._balance,
                transaction_id=f"wallet_ref_{uuid4().hex[:12]}",
            )


def _validate_amount(amount: int) -> None:
    if amount < 0:
        raise ValidationError({"amount": ["Amount cannot be negative"]})
