# premium_engine/risk/assessment.py
"""Profile -> CompositeRiskAssessment (catalog lookup, composition, classification)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from premium_engine.risk.catalog import FactorCatalog, lookup_applicable
from premium_engine.risk.classifier import RiskBand, classify
from premium_engine.risk.composer import Contribution, compose
from premium_engine.risk.profile import RiskCategory, RiskProfile


@dataclass(frozen=True)
class CompositeRiskAssessment:
    applied_factors: Tuple[Contribution, ...]
    composite_multiplier: float
    score: int
    risk_band: RiskBand
    is_complete: bool = False

    def by_category(self) -> Dict[RiskCategory, Tuple[Contribution, ...]]:
        return {
            c: tuple(f for f in self.applied_factors if f.category == c)
            for c in RiskCategory
        }


def assess(profile: RiskProfile, catalog: Optional[FactorCatalog] = None) -> CompositeRiskAssessment:
    factors = lookup_applicable(profile, catalog)
    composite, applied = compose(factors, profile)
    score, band = classify(composite)
    return CompositeRiskAssessment(
        applied_factors=applied,
        composite_multiplier=composite,
        score=score,
        risk_band=band,
        is_complete=profile.is_complete,
    )
