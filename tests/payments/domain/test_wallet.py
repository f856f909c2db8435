"""Tests for the Wallet payment account."""

import pytest
from delivery.payments.account import PaymentAccount, PaymentResult
from delivery.payments.wallet import Wallet
from protean.exceptions import ValidationError


class TestWalletPay:
    def test_is_a_payment_account(self):
        assert isinstance(Wallet("shivank", 100), PaymentAccount)

    def test_pay_deducts_balance(self):
        wallet = Wallet("shivank", 100)
        result = wallet.pay(26)
        assert isinstance(result, PaymentResult)
        assert result.success is True
        assert result.balance == 74
        assert result.transaction_id is not None
        assert wallet.balance == 74

    def test_pay_exact_balance(self):
        wallet = Wallet("shivank", 24)
        assert wallet.pay(24).balance == 0

    def test_insufficient_funds_leaves_balance_unchanged(self):
        wallet = Wallet("shivank", 10)
        result = wallet.pay(24)
        assert result.success is False
        assert result.balance == 10
        assert "Insufficient funds" in result.failure_reason
        assert wallet.balance == 10

    def test_pay_zero(self):
        wallet = Wallet("shivank", 10)
        assert wallet.pay(0).success is True
        assert wallet.balance == 10

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            Wallet("shivank", 10).pay(-1)


class TestWalletRefund:
    def test_refund_credits_balance(self):
        wallet = Wallet("shivank", 100)
        wallet.pay(24)
        result = wallet.refund(24)
        assert result.success is True
        assert result.balance == 100
        assert wallet.balance == 100

    def test_negative_refund_rejected(self):
        with pytest.raises(ValidationError):
            Wallet("shivank", 10).refund(-5)


class TestWalletSetup:
    def test_negative_opening_balance_rejected(self):
        with pytest.raises(ValidationError):
            Wallet("shivank", -1)

    def test_call_logging(self):
        wallet = Wallet("shivank", 100)
        wallet.pay(10)
        wallet.refund(10)
        assert [c["method"] for c in wallet.calls] == ["pay", "refund"]
        assert wallet.calls[0]["amount"] == 10
