# premium_engine/engine/service.py
"""
End-to-end estimation service.

Single source of truth for both the live what-if preview and the canonical
quote path:
- profile -> catalog lookup -> composition -> classification -> assessment
- assessment + pricing input -> quote

Every call is a total function of its inputs. PreviewSession is the only
stateful piece: it tracks which request is current for an interactive caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional, Tuple

from premium_engine.engine.schemas import EstimateResponse
from premium_engine.pricing.config import PricingConfig, merge_pricing_overrides
from premium_engine.pricing.quote import PolicyPricingInput, PremiumQuote, quote
from premium_engine.risk.assessment import CompositeRiskAssessment, assess
from premium_engine.risk.catalog import FactorCatalog
from premium_engine.risk.profile import REQUIRED_FOR_COMPLETENESS, RiskProfile


logger = logging.getLogger(__name__)


def estimate(
    profile: RiskProfile,
    pricing: PolicyPricingInput,
    fees: float = 0.0,
    taxes: float = 0.0,
    *,
    cfg: Optional[PricingConfig] = None,
    catalog: Optional[FactorCatalog] = None,
) -> Tuple[CompositeRiskAssessment, PremiumQuote]:
    """
    Full estimate:
      profile -> assessment -> quote
    Returns (assessment, quote).
    """
    assessment = assess(profile, catalog)
    q = quote(pricing, assessment, fees=fees, taxes=taxes, cfg=cfg)
    logger.debug(
        "Estimate policy_type=%s multiplier=%.6f score=%d band=%s final=%.2f",
        pricing.policy_type.value,
        assessment.composite_multiplier,
        assessment.score,
        assessment.risk_band.value,
        q.final_premium,
    )
    return assessment, q


def profile_warnings(profile: RiskProfile) -> List[str]:
    missing = [name for name in REQUIRED_FOR_COMPLETENESS if getattr(profile, name) is None]
    if not missing:
        return []
    return [f"Profile incomplete (missing {', '.join(missing)}); neutral multipliers used for missing data."]


def estimate_from_dict(
    payload: Mapping[str, Any],
    *,
    pricing_overrides: Optional[Mapping[str, Any]] = None,
    pricing_cfg: Optional[PricingConfig] = None,
) -> Dict[str, Any]:
    """
    Convenience: loose payload in, JSON-ready dict out (with warnings).

    payload keys: profile, policy_type, coverage_amount, payment_frequency,
    fees, taxes
    """
    profile = RiskProfile.from_dict(payload.get("profile") or {})
    pricing = PolicyPricingInput(
        policy_type=payload.get("policy_type"),
        coverage_amount=payload.get("coverage_amount"),
        payment_frequency=payload.get("payment_frequency") or "monthly",
    )
    cfg = merge_pricing_overrides(pricing_overrides or {}, pricing_cfg or PricingConfig())

    assessment, q = estimate(
        profile,
        pricing,
        fees=payload.get("fees") or 0.0,
        taxes=payload.get("taxes") or 0.0,
        cfg=cfg,
    )
    return EstimateResponse(assessment=assessment, quote=q, warnings=profile_warnings(profile)).to_dict()


# -----------------------------
# Interactive preview
# -----------------------------
@dataclass(frozen=True)
class PreviewResult:
    generation: int
    assessment: Optional[CompositeRiskAssessment]
    quote: PremiumQuote
    source: str  # "local" or "remote"


class PreviewSession:
    """
    Latest-wins bookkeeping for a what-if estimator.

    - begin() issues a generation number for each input change
    - submit_local() computes the local estimate; results for a superseded
      generation are dropped
    - accept_remote() records the authoritative quote, which replaces the
      local estimate of the same generation and is never overwritten by it
    """

    def __init__(self, cfg: Optional[PricingConfig] = None, catalog: Optional[FactorCatalog] = None) -> None:
        self._cfg = cfg
        self._catalog = catalog
        self._lock = RLock()
        self._generation = 0
        self._current: Optional[PreviewResult] = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def current(self) -> Optional[PreviewResult]:
        with self._lock:
            return self._current

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_stale(self, generation: int) -> bool:
        with self._lock:
            return generation != self._generation

    def submit_local(
        self,
        generation: int,
        profile: RiskProfile,
        pricing: PolicyPricingInput,
        fees: float = 0.0,
        taxes: float = 0.0,
    ) -> Optional[PreviewResult]:
        if self.is_stale(generation):
            logger.debug("Dropping stale preview generation=%d", generation)
            return None

        assessment, q = estimate(profile, pricing, fees, taxes, cfg=self._cfg, catalog=self._catalog)
        result = PreviewResult(generation=generation, assessment=assessment, quote=q, source="local")

        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale preview generation=%d", generation)
                return None
            if self._current is not None and self._current.generation == generation and self._current.source == "remote":
                return self._current
            self._current = result
            return result

    def accept_remote(self, generation: int, remote_quote: PremiumQuote) -> Optional[PreviewResult]:
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale remote quote generation=%d", generation)
                return None

            local = self._current if self._current is not None and self._current.generation == generation else None
            if local is not None and local.quote.final_premium != remote_quote.final_premium:
                logger.warning(
                    "Local and remote quotes diverge generation=%d local=%.2f remote=%.2f",
                    generation,
                    local.quote.final_premium,
                    remote_quote.final_premium,
                )

            self._current = PreviewResult(
                generation=generation,
                assessment=local.assessment if local is not None else None,
                quote=remote_quote,
                source="remote",
            )
            return self._current

    def preview(
        self,
        profile: RiskProfile,
        pricing: PolicyPricingInput,
        fees: float = 0.0,
        taxes: float = 0.0,
    ) -> Optional[PreviewResult]:
        return self.submit_local(self.begin(), profile, pricing, fees, taxes)
