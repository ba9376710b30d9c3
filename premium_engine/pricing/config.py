# premium_engine/pricing/config.py
"""
Pricing configuration.

- base_rates: annual premium as a share of coverage, per policy type
- frequency_discounts: prepayment discount applied to longer-interval totals
- precision: currency display precision for every quote field (0 or 2)

These values must match the authoritative pricing service exactly; a change
here is a change to every quote.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from premium_engine.errors import InvalidInput
from premium_engine.utils.config import get_engine_settings


class PolicyType(str, Enum):
    LIFE = "life"
    HEALTH = "health"
    AUTO = "auto"
    PROPERTY = "property"
    DISABILITY = "disability"


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi-annual"
    ANNUAL = "annual"


# Months covered by one payment
PERIOD_MONTHS: Dict[PaymentFrequency, int] = {
    PaymentFrequency.MONTHLY: 1,
    PaymentFrequency.QUARTERLY: 3,
    PaymentFrequency.SEMI_ANNUAL: 6,
    PaymentFrequency.ANNUAL: 12,
}

DEFAULT_BASE_RATES: Dict[PolicyType, float] = {
    PolicyType.LIFE: 0.015,
    PolicyType.HEALTH: 0.020,
    PolicyType.AUTO: 0.025,
    PolicyType.PROPERTY: 0.018,
    PolicyType.DISABILITY: 0.012,
}

DEFAULT_FREQUENCY_DISCOUNTS: Dict[PaymentFrequency, float] = {
    PaymentFrequency.MONTHLY: 0.0,
    PaymentFrequency.QUARTERLY: 0.05,
    PaymentFrequency.SEMI_ANNUAL: 0.08,
    PaymentFrequency.ANNUAL: 0.12,
}

ALLOWED_PRECISIONS = (0, 2)


@dataclass(frozen=True)
class PricingConfig:
    currency: str = "USD"

    # Decimals for every currency field of a quote
    precision: int = 2

    base_rates: Mapping[PolicyType, float] = field(default_factory=lambda: dict(DEFAULT_BASE_RATES))
    frequency_discounts: Mapping[PaymentFrequency, float] = field(
        default_factory=lambda: dict(DEFAULT_FREQUENCY_DISCOUNTS)
    )

    def __post_init__(self) -> None:
        if self.precision not in ALLOWED_PRECISIONS:
            raise InvalidInput(f"precision must be 0 or 2, got: {self.precision}", field="precision", value=self.precision)
        for policy_type, rate in self.base_rates.items():
            if not rate > 0:
                raise InvalidInput(f"base rate for {policy_type} must be positive, got: {rate}", field="base_rates", value=rate)
        missing = [f.value for f in PaymentFrequency if f not in self.frequency_discounts]
        if missing:
            raise InvalidInput(f"frequency_discounts missing: {missing}", field="frequency_discounts")
        for freq, discount in self.frequency_discounts.items():
            if not 0 <= discount < 1:
                raise InvalidInput(f"discount for {freq} must be in [0, 1), got: {discount}", field="frequency_discounts", value=discount)

    @classmethod
    def from_env(cls) -> "PricingConfig":
        settings = get_engine_settings()
        return cls(currency=settings.currency, precision=settings.precision)


_OVERRIDABLE = ("currency", "precision", "base_rates", "frequency_discounts")


def merge_pricing_overrides(overrides: Mapping[str, Any], base: Optional[PricingConfig] = None) -> PricingConfig:
    """
    Apply user overrides to PricingConfig safely.
    Supported keys:
      currency, precision, base_rates, frequency_discounts
    Rate and discount maps are merged key by key; unknown keys are ignored.
    """
    base = base or PricingConfig()
    cfg_dict = asdict(base)
    for k in _OVERRIDABLE:
        v = overrides.get(k)
        if v is None:
            continue
        if k == "base_rates":
            rates = dict(base.base_rates)
            for name, rate in v.items():
                rates[_coerce_member(PolicyType, name, "base_rates")] = float(rate)
            cfg_dict[k] = rates
        elif k == "frequency_discounts":
            discounts = dict(base.frequency_discounts)
            for name, discount in v.items():
                discounts[_coerce_member(PaymentFrequency, name, "frequency_discounts")] = float(discount)
            cfg_dict[k] = discounts
        else:
            cfg_dict[k] = v
    return PricingConfig(**cfg_dict)


def _coerce_member(enum_cls, value: Any, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidInput(f"{name} must be one of [{allowed}], got: {value!r}", field=name, value=value) from None


def coerce_policy_type(value: Any) -> PolicyType:
    return _coerce_member(PolicyType, value, "policy_type")


def coerce_frequency(value: Any) -> PaymentFrequency:
    return _coerce_member(PaymentFrequency, value, "payment_frequency")
