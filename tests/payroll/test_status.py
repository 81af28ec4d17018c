import pytest

from src.textile_payroll.textile_payroll.core.enums import PaymentMethod, PaymentStatus
from src.textile_payroll.textile_payroll.core.exceptions import ValidationError
from src.textile_payroll.textile_payroll.payroll.status import (
    can_transition,
    ensure_transition,
    parse_method,
    parse_status,
)


def test_allowed_transitions():
    assert can_transition(PaymentStatus.PENDING, PaymentStatus.PROCESSED)
    assert can_transition(PaymentStatus.PROCESSED, PaymentStatus.PAID)
    assert can_transition(PaymentStatus.PENDING, PaymentStatus.PAID)


@pytest.mark.parametrize(
    "current,new",
    [
        (PaymentStatus.PAID, PaymentStatus.PENDING),
        (PaymentStatus.PAID, PaymentStatus.PROCESSED),
        (PaymentStatus.PROCESSED, PaymentStatus.PENDING),
    ],
)
def test_backward_transitions_are_rejected(current, new):
    assert not can_transition(current, new)
    with pytest.raises(ValidationError):
        ensure_transition(current, new)


def test_same_status_is_accepted():
    ensure_transition(PaymentStatus.PAID, PaymentStatus.PAID)


def test_parsing():
    assert parse_status("paid") == PaymentStatus.PAID
    assert parse_method(None) == PaymentMethod.BANK_TRANSFER
    assert parse_method("bank transfer") == PaymentMethod.BANK_TRANSFER
    with pytest.raises(ValidationError):
        parse_status("refunded")
