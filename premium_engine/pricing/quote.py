# premium_engine/pricing/quote.py
"""
Premium calculation and quote generation.

Provides:
- pricing input validation
- base premium, risk adjustment, fees and taxes
- payment-frequency variants with prepayment discounts
- quote output object

Formulae:
  base_premium    = coverage_amount * base_rate(policy_type)
  risk_adjustment = base_premium * (composite_multiplier - 1)
  final_premium   = base_premium + risk_adjustment + fees + taxes

final_premium is the amount due per period at the requested frequency.
Variant for frequency f, requested frequency r:
  final_premium * months(f) / months(r) * (1 - discount(f)) / (1 - discount(r))
so a monthly request gives quarterly = final*3*0.95, semi-annual = final*6*0.92,
annual = final*12*0.88, and the requested frequency's variant is final_premium.

Displayed amounts: base, fees, taxes and final are rounded from the unrounded
values; the displayed risk_adjustment is the rounded final minus the other
rounded parts, so the parts on a quote always add up to its total.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from premium_engine.errors import InvalidInput
from premium_engine.pricing.config import (
    PERIOD_MONTHS,
    PaymentFrequency,
    PolicyType,
    PricingConfig,
    coerce_frequency,
    coerce_policy_type,
)
from premium_engine.risk.assessment import CompositeRiskAssessment


@dataclass(frozen=True)
class PolicyPricingInput:
    policy_type: PolicyType
    coverage_amount: float
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY

    def __post_init__(self) -> None:
        object.__setattr__(self, "policy_type", coerce_policy_type(self.policy_type))
        object.__setattr__(self, "payment_frequency", coerce_frequency(self.payment_frequency))
        object.__setattr__(self, "coverage_amount", _non_negative(self.coverage_amount, "coverage_amount"))
        if not self.coverage_amount > 0:
            raise InvalidInput(
                f"coverage_amount must be positive, got: {self.coverage_amount}",
                field="coverage_amount",
                value=self.coverage_amount,
            )


@dataclass(frozen=True)
class FrequencyVariant:
    frequency: PaymentFrequency
    amount: float
    discount_percent: float
    months: int


@dataclass(frozen=True)
class PremiumQuote:
    policy_type: PolicyType
    coverage_amount: float
    payment_frequency: PaymentFrequency
    currency: str
    precision: int
    base_rate: float
    composite_multiplier: float
    base_premium: float
    risk_adjustment: float
    fees: float
    taxes: float
    final_premium: float
    frequency_variants: Dict[PaymentFrequency, FrequencyVariant]
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["policy_type"] = self.policy_type.value
        out["payment_frequency"] = self.payment_frequency.value
        out["frequency_variants"] = {
            f.value: {**asdict(v), "frequency": f.value}
            for f, v in self.frequency_variants.items()
        }
        return out


def _non_negative(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be numeric, got a boolean", field=name, value=value)
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be numeric, got: {value!r}", field=name, value=value) from None
    if not math.isfinite(num):
        raise InvalidInput(f"{name} must be finite, got: {value!r}", field=name, value=value)
    if num < 0:
        raise InvalidInput(f"{name} must not be negative, got: {value!r}", field=name, value=value)
    return num


def round_currency(value: float, precision: int) -> float:
    # + 0.0 turns -0.0 into 0.0
    return float(round(value, precision)) + 0.0


def base_rate_for(policy_type: PolicyType, cfg: PricingConfig) -> float:
    rate = cfg.base_rates.get(policy_type)
    if rate is None:
        raise InvalidInput(f"No base rate configured for policy type: {policy_type.value}", field="policy_type", value=policy_type)
    return float(rate)


def compute_base_premium(pricing: PolicyPricingInput, cfg: PricingConfig) -> float:
    return pricing.coverage_amount * base_rate_for(pricing.policy_type, cfg)


def compute_frequency_variants(
    final_premium: float,
    requested: PaymentFrequency,
    cfg: PricingConfig,
) -> Dict[PaymentFrequency, FrequencyVariant]:
    """
    Re-express the per-period premium at every frequency.
    Amounts are unrounded; discounts are applied to the amounts, not just reported.
    """
    base_months = PERIOD_MONTHS[requested]
    base_keep = 1.0 - cfg.frequency_discounts[requested]

    variants: Dict[PaymentFrequency, FrequencyVariant] = {}
    for freq in PaymentFrequency:
        months = PERIOD_MONTHS[freq]
        discount = cfg.frequency_discounts[freq]
        if freq == requested:
            amount = final_premium
        else:
            amount = final_premium * months / base_months * (1.0 - discount) / base_keep
        variants[freq] = FrequencyVariant(
            frequency=freq,
            amount=amount,
            discount_percent=round(discount * 100.0, 4),
            months=months,
        )
    return variants


def quote(
    pricing: PolicyPricingInput,
    assessment: CompositeRiskAssessment,
    fees: float = 0.0,
    taxes: float = 0.0,
    cfg: Optional[PricingConfig] = None,
) -> PremiumQuote:
    """
    Generate a quote from pricing input and a risk assessment.

    Base, fees, taxes and final are rounded once, from unrounded
    intermediates, to cfg.precision. risk_adjustment is derived from those
    rounded values so that base + adjustment + fees + taxes == final.
    """
    cfg = cfg or PricingConfig()
    fees = _non_negative(fees, "fees")
    taxes = _non_negative(taxes, "taxes")
    multiplier = float(assessment.composite_multiplier)

    base_rate = base_rate_for(pricing.policy_type, cfg)
    base_premium = compute_base_premium(pricing, cfg)
    final_premium = base_premium * multiplier + fees + taxes

    p = cfg.precision
    base_r = round_currency(base_premium, p)
    fees_r = round_currency(fees, p)
    taxes_r = round_currency(taxes, p)
    final_r = round_currency(final_premium, p)
    variants = {
        f: FrequencyVariant(
            frequency=v.frequency,
            amount=round_currency(v.amount, p),
            discount_percent=v.discount_percent,
            months=v.months,
        )
        for f, v in compute_frequency_variants(final_premium, pricing.payment_frequency, cfg).items()
    }

    notes = [
        "Base premium is coverage times the annual base rate for the policy type.",
        "Risk adjustment is the base premium times (composite multiplier - 1).",
        "Frequency variants apply the prepayment discount to the displayed amount.",
    ]

    return PremiumQuote(
        policy_type=pricing.policy_type,
        coverage_amount=round_currency(pricing.coverage_amount, p),
        payment_frequency=pricing.payment_frequency,
        currency=cfg.currency,
        precision=p,
        base_rate=base_rate,
        composite_multiplier=multiplier,
        base_premium=base_r,
        risk_adjustment=round_currency(final_r - base_r - fees_r - taxes_r, p),
        fees=fees_r,
        taxes=taxes_r,
        final_premium=final_r,
        frequency_variants=variants,
        notes=notes,
    )
