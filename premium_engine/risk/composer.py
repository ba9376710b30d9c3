# premium_engine/risk/composer.py
"""
Multiplicative risk composition.

composite_multiplier = product of every applicable factor's multiplier

Neutral contributions (exactly 1.0) are identity in the product and are left
out of the itemised list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

import numpy as np

from premium_engine.errors import CatalogIntegrityError
from premium_engine.risk.catalog import NEUTRAL_MULTIPLIER, RiskFactorDefinition
from premium_engine.risk.profile import RiskCategory, RiskProfile


@dataclass(frozen=True)
class Contribution:
    definition: RiskFactorDefinition
    value: Any
    multiplier: float

    @property
    def category(self) -> RiskCategory:
        return self.definition.category

    @property
    def key(self) -> str:
        return self.definition.key

    @property
    def impact_percent(self) -> float:
        """Premium change attributable to this factor alone, in percent."""
        return (self.multiplier - 1.0) * 100.0


def compose(
    factors: Iterable[RiskFactorDefinition],
    profile: Optional[RiskProfile] = None,
) -> Tuple[float, Tuple[Contribution, ...]]:
    """
    Combine factor definitions into (composite_multiplier, applied_factors).

    An empty factor set composes to exactly 1.0.
    """
    applied = []
    for d in factors:
        if not d.multiplier > 0:
            raise CatalogIntegrityError(f"Factor {d.key} has non-positive multiplier {d.multiplier}")
        if d.multiplier == NEUTRAL_MULTIPLIER:
            continue
        value = getattr(profile, d.attribute) if profile is not None and d.attribute else None
        applied.append(Contribution(definition=d, value=value, multiplier=float(d.multiplier)))

    if not applied:
        return NEUTRAL_MULTIPLIER, ()

    composite = float(np.prod([c.multiplier for c in applied]))
    return composite, tuple(applied)
