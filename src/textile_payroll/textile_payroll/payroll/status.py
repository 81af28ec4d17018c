from __future__ import annotations

from typing import Any

from ..core.enums import PaymentMethod, PaymentStatus
from ..core.exceptions import ValidationError

# Paid is terminal. Pending may skip straight to Paid when a payment is recorded.
_ALLOWED = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PROCESSED, PaymentStatus.PAID}),
    PaymentStatus.PROCESSED: frozenset({PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset(),
}


def parse_status(value: Any) -> PaymentStatus:
    if isinstance(value, PaymentStatus):
        return value
    raw = str(value or "").strip().capitalize()
    try:
        return PaymentStatus(raw)
    except ValueError:
        raise ValidationError("Payment status must be Pending, Processed or Paid")


def parse_method(value: Any) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    if value is None or not str(value).strip():
        return PaymentMethod.BANK_TRANSFER
    raw = str(value).strip().lower()
    for method in PaymentMethod:
        if method.value.lower() == raw:
            return method
    raise ValidationError("Payment method must be Bank Transfer, Cash, Check or Other")


def can_transition(current: PaymentStatus, new: PaymentStatus) -> bool:
    return new in _ALLOWED[current]


def ensure_transition(current: PaymentStatus, new: PaymentStatus) -> None:
    """Same status is accepted as a no-op; anything not listed above is rejected."""
    if current == new or can_transition(current, new):
        return
    raise ValidationError(f"Cannot change payment status from {current.value} to {new.value}")
