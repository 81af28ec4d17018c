from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .rules import Fixed, Percentage, Rule, parse_rule, rule_to_dict

ALLOWANCE_KEYS = ("housing", "transport", "meal", "other")
DEDUCTION_KEYS = ("tax", "insurance", "other")


@dataclass(frozen=True)
class AllowanceRules:
    """Percentages here apply to the monthly base salary."""

    housing: Rule = Percentage(10)
    transport: Rule = Fixed(2000)
    meal: Rule = Fixed(1500)
    other: Rule = Fixed(0)

    def to_dict(self) -> dict:
        return {key: rule_to_dict(getattr(self, key)) for key in ALLOWANCE_KEYS}

    @classmethod
    def from_dict(cls, raw: Optional[dict], *, strict: bool = False, base: Optional["AllowanceRules"] = None) -> "AllowanceRules":
        current = base or cls()
        raw = raw or {}
        return cls(
            **{
                key: parse_rule(raw[key], field_name=f"allowances.{key}", strict=strict) if key in raw else getattr(current, key)
                for key in ALLOWANCE_KEYS
            }
        )


@dataclass(frozen=True)
class DeductionRules:
    """Percentages here apply to the pro-rated basic salary."""

    tax: Rule = Percentage(10)
    insurance: Rule = Percentage(5)
    other: Rule = Fixed(0)

    def to_dict(self) -> dict:
        return {key: rule_to_dict(getattr(self, key)) for key in DEDUCTION_KEYS}

    @classmethod
    def from_dict(cls, raw: Optional[dict], *, strict: bool = False, base: Optional["DeductionRules"] = None) -> "DeductionRules":
        current = base or cls()
        raw = raw or {}
        return cls(
            **{
                key: parse_rule(raw[key], field_name=f"deductions.{key}", strict=strict) if key in raw else getattr(current, key)
                for key in DEDUCTION_KEYS
            }
        )


@dataclass(frozen=True)
class PayrollSettings:
    allowances: AllowanceRules = field(default_factory=AllowanceRules)
    deductions: DeductionRules = field(default_factory=DeductionRules)
    settings_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "settingsId": self.settings_id,
            "allowances": self.allowances.to_dict(),
            "deductions": self.deductions.to_dict(),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "PayrollSettings":
        return cls(
            allowances=AllowanceRules.from_dict(raw.get("allowances")),
            deductions=DeductionRules.from_dict(raw.get("deductions")),
            settings_id=raw.get("settingsId"),
        )
