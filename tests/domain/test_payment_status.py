"""Unit tests for payment status derivation."""

from decimal import Decimal

import pytest

from fgo.domain.model.order import PaymentStatus
from fgo.domain.service.payment_status import derive_payment_status


@pytest.mark.parametrize(
    ("net", "paid", "expected"),
    [
        ("900", "0", PaymentStatus.READY_FOR_PAYMENT),
        ("900", "100", PaymentStatus.PARTIAL_PAYMENT),
        ("900", "899.99", PaymentStatus.PARTIAL_PAYMENT),
        ("900", "899.995", PaymentStatus.FULL_PAYMENT),
        ("900", "900", PaymentStatus.FULL_PAYMENT),
        ("900", "1000", PaymentStatus.FULL_PAYMENT),
        ("0", "0", PaymentStatus.READY_FOR_PAYMENT),
        ("0", "10", PaymentStatus.FULL_PAYMENT),
    ],
)
def test_derivation(net, paid, expected):
    assert derive_payment_status(Decimal(net), Decimal(paid)) is expected


def test_idempotent():
    first = derive_payment_status(Decimal("900"), Decimal("450"))
    assert derive_payment_status(Decimal("900"), Decimal("450")) is first
