# premium_engine/api/app.py
"""
FastAPI service for the premium engine (thin API wrapper).

Endpoints:
- GET  /health
- POST /assess    -> composite multiplier, score, band, applied factors
- POST /quote     -> assessment + premium quote (+ warnings)
- POST /analysis  -> category summary + recommendations

The API layer stays thin:
- validates request shape (pydantic); profiles accept snake_case or the
  portal's camelCase names, and an optional nested `location`
- calls premium_engine.engine.service
- InvalidInput from the engine becomes HTTP 422
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from premium_engine.engine.schemas import AnalysisResponse, AssessmentResponse
from premium_engine.engine.service import estimate_from_dict, profile_warnings
from premium_engine.errors import InvalidInput
from premium_engine.pricing.config import PricingConfig
from premium_engine.risk.analysis import analyze
from premium_engine.risk.assessment import assess
from premium_engine.risk.catalog import DEFAULT_CATALOG
from premium_engine.risk.profile import RiskProfile
from premium_engine.utils.logging_config import setup_logging


logger = logging.getLogger(__name__)

app = FastAPI(title="Premium Engine", version="0.1.0")


@app.on_event("startup")
def _startup() -> None:
    setup_logging()
    logger.info("Factor catalog loaded definitions=%d", len(DEFAULT_CATALOG.definitions))


@app.exception_handler(InvalidInput)
async def _invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
    logger.warning("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


# -----------------------------
# Schemas
# -----------------------------
def _alias(name: str, *portal_names: str) -> Any:
    # Accept the snake_case field name and the portal's camelCase name(s)
    return Field(default=None, validation_alias=AliasChoices(name, *portal_names))


class LocationInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    country: Optional[str] = None
    city: Optional[str] = None
    risk_zone: Optional[str] = _alias("risk_zone", "riskZone")


class ProfileInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Demographic
    age: Optional[float] = None
    occupation: Optional[str] = None
    employment_status: Optional[str] = _alias("employment_status", "employmentStatus")
    annual_income: Optional[float] = _alias("annual_income", "annualIncome")

    # Health (accept bool or yes/no strings)
    smoker: Optional[Union[bool, str]] = _alias("smoker", "isSmoker")
    has_chronic_illness: Optional[Union[bool, str]] = _alias("has_chronic_illness", "hasChronicIllness")
    bmi: Optional[float] = None
    health_status: Optional[str] = _alias("health_status", "healthStatus")

    # Lifestyle
    has_dangerous_hobbies: Optional[Union[bool, str]] = _alias("has_dangerous_hobbies", "hasDangerousHobbies")
    hobbies: Optional[Union[List[str], str]] = None
    exercise_frequency: Optional[str] = _alias("exercise_frequency", "exerciseFrequency")

    # Financial
    credit_score: Optional[float] = _alias("credit_score", "creditScore")
    debt: Optional[float] = None
    savings: Optional[float] = None
    has_bankruptcy_history: Optional[Union[bool, str]] = _alias("has_bankruptcy_history", "hasBankruptcyHistory")

    # Geographic (flat fields or a nested location object)
    country: Optional[str] = None
    city: Optional[str] = None
    risk_zone: Optional[str] = _alias("risk_zone", "riskZone", "locationRisk")
    location: Optional[LocationInput] = None


class QuoteRequest(BaseModel):
    profile: ProfileInput = Field(default_factory=ProfileInput)
    policy_type: str
    coverage_amount: float
    payment_frequency: str = "monthly"
    fees: float = 0.0
    taxes: float = 0.0

    # Optional pricing overrides
    currency: Optional[str] = None
    precision: Optional[int] = None
    base_rates: Optional[Dict[str, float]] = None
    frequency_discounts: Optional[Dict[str, float]] = None


class AssessResponse(BaseModel):
    assessment: Dict[str, Any]
    warnings: List[str] = Field(default_factory=list)


class EstimateOut(BaseModel):
    assessment: Dict[str, Any]
    quote: Dict[str, Any]
    warnings: List[str] = Field(default_factory=list)


def _profile(p: ProfileInput) -> RiskProfile:
    return RiskProfile.from_dict(p.model_dump(exclude_none=True))


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok", "factors": len(DEFAULT_CATALOG.definitions)}


@app.post("/assess", response_model=AssessResponse)
def assess_profile(profile: ProfileInput) -> AssessResponse:
    rp = _profile(profile)
    return AssessResponse(
        assessment=AssessmentResponse(assess(rp)).to_dict(),
        warnings=profile_warnings(rp),
    )


@app.post("/quote", response_model=EstimateOut)
def quote(req: QuoteRequest) -> EstimateOut:
    payload = req.model_dump(exclude={"currency", "precision", "base_rates", "frequency_discounts"})
    payload["profile"] = req.profile.model_dump(exclude_none=True)
    overrides = {
        k: getattr(req, k)
        for k in ("currency", "precision", "base_rates", "frequency_discounts")
        if getattr(req, k) is not None
    }
    out = estimate_from_dict(payload, pricing_overrides=overrides, pricing_cfg=PricingConfig.from_env())
    return EstimateOut(**out)


@app.post("/analysis")
def analysis(profile: ProfileInput) -> Dict[str, Any]:
    rp = _profile(profile)
    return AnalysisResponse(analyze(rp, assess(rp))).to_dict()
