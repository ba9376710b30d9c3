# premium_engine/engine/schemas.py
"""
Presentation contract.

Field names and units handed to the UI / API layer:
- multipliers are plain floats (1.0 = neutral)
- impactPercent / discountPercent are percentages
- currency amounts are floats already rounded to the quote precision
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from premium_engine.pricing.quote import PremiumQuote
from premium_engine.risk.analysis import RiskAnalysis
from premium_engine.risk.assessment import CompositeRiskAssessment
from premium_engine.risk.composer import Contribution


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return list(value)
    return value


def contribution_to_dict(c: Contribution) -> Dict[str, Any]:
    return {
        "category": c.category.value,
        "key": c.key,
        "description": c.definition.description,
        "value": _plain(c.value),
        "multiplier": c.multiplier,
        "impactPercent": round(c.impact_percent, 4),
    }


@dataclass(frozen=True)
class AssessmentResponse:
    assessment: CompositeRiskAssessment

    def to_dict(self) -> Dict[str, Any]:
        a = self.assessment
        return {
            "appliedFactors": [contribution_to_dict(c) for c in a.applied_factors],
            "compositeMultiplier": a.composite_multiplier,
            "score": a.score,
            "riskBand": a.risk_band.value,
            "isComplete": a.is_complete,
        }


@dataclass(frozen=True)
class QuoteResponse:
    quote: PremiumQuote

    def to_dict(self) -> Dict[str, Any]:
        q = self.quote
        return {
            "policyType": q.policy_type.value,
            "coverageAmount": q.coverage_amount,
            "paymentFrequency": q.payment_frequency.value,
            "currency": q.currency,
            "precision": q.precision,
            "baseRate": q.base_rate,
            "compositeMultiplier": q.composite_multiplier,
            "basePremium": q.base_premium,
            "riskAdjustment": q.risk_adjustment,
            "fees": q.fees,
            "taxes": q.taxes,
            "finalPremium": q.final_premium,
            "frequencyVariants": {
                f.value: {
                    "amount": v.amount,
                    "discountPercent": v.discount_percent,
                    "months": v.months,
                }
                for f, v in q.frequency_variants.items()
            },
            "notes": list(q.notes),
        }


@dataclass(frozen=True)
class AnalysisResponse:
    analysis: RiskAnalysis

    def to_dict(self) -> Dict[str, Any]:
        a = self.analysis
        return {
            "score": a.score,
            "riskBand": a.risk_band.value,
            "compositeMultiplier": a.composite_multiplier,
            "isComplete": a.is_complete,
            "categories": {
                c.value: {
                    "count": s.count,
                    "combinedMultiplier": s.combined_multiplier,
                    "level": s.level,
                }
                for c, s in a.categories.items()
            },
            "recommendations": [
                {
                    "category": r.category.value,
                    "factorKey": r.factor_key,
                    "recommendation": r.recommendation,
                    "premiumReductionPercent": r.premium_reduction_percent,
                    "impact": r.impact,
                }
                for r in a.recommendations
            ],
        }


@dataclass(frozen=True)
class EstimateResponse:
    assessment: CompositeRiskAssessment
    quote: PremiumQuote
    warnings: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assessment": AssessmentResponse(self.assessment).to_dict(),
            "quote": QuoteResponse(self.quote).to_dict(),
            "warnings": list(self.warnings or []),
        }
