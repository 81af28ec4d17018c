from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Union

from ..common.money import parse_amount, round2
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Fixed:
    """A flat amount, independent of salary."""

    amount: float


@dataclass(frozen=True)
class Percentage:
    """``value`` percent of a salary base chosen by the caller."""

    value: float


Rule = Union[Fixed, Percentage]


@dataclass(frozen=True)
class CustomLineItem:
    """Free-form allowance or deduction without rule semantics."""

    name: str
    amount: float

    def to_dict(self) -> dict:
        return {"name": self.name, "amount": self.amount}


def evaluate_rule(rule: Rule, base: float) -> float:
    if isinstance(rule, Percentage):
        return round2(base * rule.value / 100)
    if isinstance(rule, Fixed):
        return round2(rule.amount)
    raise TypeError(f"Unsupported rule: {rule!r}")


def rule_to_dict(rule: Rule) -> dict:
    if isinstance(rule, Percentage):
        return {"type": "percentage", "value": rule.value}
    if isinstance(rule, Fixed):
        return {"type": "fixed", "value": rule.amount}
    raise TypeError(f"Unsupported rule: {rule!r}")


def _strict_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number != number or number < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    return number


def parse_rule(raw: Any, *, field_name: str = "rule", strict: bool = False) -> Rule:
    """Turn a stored or submitted ``{"type", "value"}`` dict into a rule.

    Lenient mode keeps the historical behavior: anything that is not a
    percentage is a fixed amount and unparseable values become 0. Strict mode
    is used when an administrator edits the rule set.
    """
    if isinstance(raw, (Fixed, Percentage)):
        return raw
    if not isinstance(raw, dict):
        if strict:
            raise ValidationError(f"{field_name} must be an object with type and value")
        return Fixed(0.0)

    kind = str(raw.get("type") or "").strip().lower()
    if strict:
        if kind not in {"percentage", "fixed"}:
            raise ValidationError(f"{field_name}.type must be 'percentage' or 'fixed'")
        value = _strict_number(raw.get("value"), f"{field_name}.value")
    else:
        value = parse_amount(raw.get("value"))

    if kind == "percentage":
        return Percentage(value)
    return Fixed(value)


def parse_custom_items(raw: Any) -> tuple[CustomLineItem, ...]:
    """Custom items never raise: a missing or non-numeric amount is 0."""
    if not raw:
        return ()
    items: Iterable[Any] = raw if isinstance(raw, (list, tuple)) else [raw]
    out: list[CustomLineItem] = []
    for item in items:
        if isinstance(item, CustomLineItem):
            out.append(item)
        elif isinstance(item, dict):
            out.append(CustomLineItem(name=str(item.get("name") or "").strip(), amount=parse_amount(item.get("amount"))))
    return tuple(out)
