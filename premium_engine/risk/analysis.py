# premium_engine/risk/analysis.py
"""
Risk analysis summary for the customer dashboard.

- per-category summary of the applied factors (count, combined multiplier, level)
- recommendations for adverse factors the customer can act on, with the
  premium reduction computed from the catalog multipliers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from premium_engine.risk.assessment import CompositeRiskAssessment
from premium_engine.risk.catalog import DEFAULT_CATALOG, FactorCatalog
from premium_engine.risk.classifier import RiskBand
from premium_engine.risk.composer import Contribution
from premium_engine.risk.profile import RiskCategory, RiskProfile


# Combined category multiplier -> level
LEVEL_HIGH = 1.5
LEVEL_MEDIUM = 1.2

# factor key -> (advice, key of the factor it is replaced by; None = removed)
ACTIONABLE_FACTORS: Dict[str, Tuple[str, Optional[str]]] = {
    "smoker": ("Consider quitting smoking to reduce health risk", None),
    "chronic_illness": ("Regular health check-ups and medication adherence", None),
    "credit_score_poor": ("Improve credit score through timely payments", "credit_score_good"),
    "credit_score_fair": ("Improve credit score through timely payments", "credit_score_good"),
    "dangerous_hobbies": ("Consider additional safety measures or insurance riders", None),
}


@dataclass(frozen=True)
class CategorySummary:
    category: RiskCategory
    count: int
    combined_multiplier: float
    level: str


@dataclass(frozen=True)
class Recommendation:
    category: RiskCategory
    factor_key: str
    recommendation: str
    premium_reduction_percent: float

    @property
    def impact(self) -> str:
        return f"Could reduce premium by up to {self.premium_reduction_percent:.1f}%"


@dataclass(frozen=True)
class RiskAnalysis:
    score: int
    risk_band: RiskBand
    composite_multiplier: float
    is_complete: bool
    categories: Dict[RiskCategory, CategorySummary] = field(default_factory=dict)
    recommendations: List[Recommendation] = field(default_factory=list)


def category_level(combined_multiplier: float) -> str:
    if combined_multiplier >= LEVEL_HIGH:
        return "high"
    if combined_multiplier >= LEVEL_MEDIUM:
        return "medium"
    return "low"


def summarize_categories(applied: List[Contribution]) -> Dict[RiskCategory, CategorySummary]:
    out: Dict[RiskCategory, CategorySummary] = {}
    for category in RiskCategory:
        factors = [c for c in applied if c.category == category]
        if not factors:
            continue
        combined = float(np.prod([c.multiplier for c in factors]))
        out[category] = CategorySummary(
            category=category,
            count=len(factors),
            combined_multiplier=combined,
            level=category_level(combined),
        )
    return out


def _reduction_percent(current: float, replacement: float) -> float:
    return max(0.0, (1.0 - replacement / current) * 100.0)


def recommend(applied: List[Contribution], catalog: Optional[FactorCatalog] = None) -> List[Recommendation]:
    catalog = catalog or DEFAULT_CATALOG
    out: List[Recommendation] = []
    for c in applied:
        action = ACTIONABLE_FACTORS.get(c.key)
        if action is None:
            continue
        advice, replacement_key = action
        replacement = catalog.get(replacement_key).multiplier if replacement_key else 1.0
        reduction = _reduction_percent(c.multiplier, replacement)
        if reduction <= 0:
            continue
        out.append(
            Recommendation(
                category=c.category,
                factor_key=c.key,
                recommendation=advice,
                premium_reduction_percent=round(reduction, 1),
            )
        )
    return out


def analyze(
    profile: RiskProfile,
    assessment: CompositeRiskAssessment,
    catalog: Optional[FactorCatalog] = None,
) -> RiskAnalysis:
    applied = list(assessment.applied_factors)
    return RiskAnalysis(
        score=assessment.score,
        risk_band=assessment.risk_band,
        composite_multiplier=assessment.composite_multiplier,
        is_complete=profile.is_complete,
        categories=summarize_categories(applied),
        recommendations=recommend(applied, catalog),
    )
