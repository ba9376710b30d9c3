# premium_engine/data/portfolio.py
"""
Portfolio analytics over many profiles.

Provides:
- assess_frame / quote_frame: score (and price) one profile per DataFrame row
- risk_distribution: profile counts per risk band (dashboard chart)
- compare_with_average: where one score sits within a population

Rows are converted with RiskProfile.from_dict, so CSV/Parquet columns use the
profile field names (or the portal's camelCase names).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from premium_engine.errors import InvalidInput
from premium_engine.pricing.config import PaymentFrequency, PolicyType, PricingConfig
from premium_engine.pricing.quote import PolicyPricingInput, quote
from premium_engine.risk.assessment import assess
from premium_engine.risk.catalog import FactorCatalog
from premium_engine.risk.classifier import RiskBand, score_from_multiplier
from premium_engine.risk.profile import RiskProfile


ASSESSMENT_COLUMNS = [
    "composite_multiplier",
    "score",
    "risk_band",
    "is_complete",
    "applied_factors",
    "error",
]

QUOTE_COLUMNS = [
    "policy_type",
    "coverage_amount",
    "payment_frequency",
    "base_premium",
    "risk_adjustment",
    "fees",
    "taxes",
    "final_premium",
] + [f"{f.value.replace('-', '_')}_amount" for f in PaymentFrequency]

BAND_ORDER = [b.value for b in RiskBand]

# Neutral profile score; used as the average of an empty population
BASELINE_SCORE = score_from_multiplier(1.0)


def _check_errors_arg(errors: str) -> None:
    if errors not in ("raise", "coerce"):
        raise ValueError(f"errors must be 'raise' or 'coerce', got: {errors}")


def _rows(df: pd.DataFrame) -> Iterable[Dict[str, Any]]:
    clean = df.astype(object).where(df.notna(), None)
    return clean.to_dict(orient="records")


def _empty_result(columns: List[str], error: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {c: None for c in columns}
    out["error"] = error
    return out


def assess_frame(
    df: pd.DataFrame,
    catalog: Optional[FactorCatalog] = None,
    errors: str = "raise",
) -> pd.DataFrame:
    """
    Append assessment columns to a frame of profiles.

    errors="raise" propagates InvalidInput; errors="coerce" records the
    message in the `error` column and leaves the other columns empty.
    """
    _check_errors_arg(errors)
    results: List[Dict[str, Any]] = []
    for row in _rows(df):
        try:
            a = assess(RiskProfile.from_dict(row), catalog)
        except InvalidInput as e:
            if errors == "raise":
                raise
            results.append(_empty_result(ASSESSMENT_COLUMNS, str(e)))
            continue
        results.append(
            {
                "composite_multiplier": a.composite_multiplier,
                "score": a.score,
                "risk_band": a.risk_band.value,
                "is_complete": a.is_complete,
                "applied_factors": ",".join(c.key for c in a.applied_factors),
                "error": None,
            }
        )

    scored = pd.DataFrame(results, columns=ASSESSMENT_COLUMNS, index=df.index)
    return pd.concat([df.drop(columns=[c for c in ASSESSMENT_COLUMNS if c in df.columns]), scored], axis=1)


def quote_frame(
    df: pd.DataFrame,
    policy_type: Any = PolicyType.LIFE,
    coverage_amount: Optional[float] = None,
    payment_frequency: Any = PaymentFrequency.MONTHLY,
    fees: float = 0.0,
    taxes: float = 0.0,
    cfg: Optional[PricingConfig] = None,
    catalog: Optional[FactorCatalog] = None,
    errors: str = "raise",
) -> pd.DataFrame:
    """
    Assess and price every row.

    Row columns policy_type / coverage_amount / payment_frequency / fees /
    taxes, when present and not empty, take precedence over the arguments.
    """
    _check_errors_arg(errors)
    cfg = cfg or PricingConfig()
    columns = ASSESSMENT_COLUMNS + QUOTE_COLUMNS
    results: List[Dict[str, Any]] = []

    for row in _rows(df):
        try:
            pricing = PolicyPricingInput(
                policy_type=row.get("policy_type") or policy_type,
                coverage_amount=row.get("coverage_amount") if row.get("coverage_amount") is not None else coverage_amount,
                payment_frequency=row.get("payment_frequency") or payment_frequency,
            )
            a = assess(RiskProfile.from_dict(row), catalog)
            q = quote(
                pricing,
                a,
                fees=row.get("fees") if row.get("fees") is not None else fees,
                taxes=row.get("taxes") if row.get("taxes") is not None else taxes,
                cfg=cfg,
            )
        except InvalidInput as e:
            if errors == "raise":
                raise
            results.append(_empty_result(columns, str(e)))
            continue

        out = {
            "composite_multiplier": a.composite_multiplier,
            "score": a.score,
            "risk_band": a.risk_band.value,
            "is_complete": a.is_complete,
            "applied_factors": ",".join(c.key for c in a.applied_factors),
            "error": None,
            "policy_type": q.policy_type.value,
            "coverage_amount": q.coverage_amount,
            "payment_frequency": q.payment_frequency.value,
            "base_premium": q.base_premium,
            "risk_adjustment": q.risk_adjustment,
            "fees": q.fees,
            "taxes": q.taxes,
            "final_premium": q.final_premium,
        }
        for f, v in q.frequency_variants.items():
            out[f"{f.value.replace('-', '_')}_amount"] = v.amount
        results.append(out)

    priced = pd.DataFrame(results, columns=columns, index=df.index)
    return pd.concat([df.drop(columns=[c for c in columns if c in df.columns]), priced], axis=1)


def risk_distribution(scored: pd.DataFrame) -> pd.DataFrame:
    """
    Count profiles per risk band. Every band is present (zero-filled), in
    band order; `share` is the fraction of scored rows.
    """
    bands = scored["risk_band"].dropna()
    counts = bands.value_counts().reindex(BAND_ORDER, fill_value=0).astype(int)
    total = int(counts.sum())
    share = counts / total if total else counts.astype(float)
    return pd.DataFrame({"risk_band": BAND_ORDER, "count": counts.values, "share": share.values})


@dataclass(frozen=True)
class PopulationComparison:
    score: int
    average_score: int
    score_difference: int
    percentile: int
    population_size: int


def compare_with_average(score: int, population_scores: Iterable[float]) -> PopulationComparison:
    """
    Percentile = share of the population scoring strictly lower, x100.
    An empty population compares against the neutral-profile score.
    """
    scores = np.asarray([s for s in population_scores if s is not None and not pd.isna(s)], dtype=float)
    if scores.size == 0:
        return PopulationComparison(
            score=int(score),
            average_score=BASELINE_SCORE,
            score_difference=int(score) - BASELINE_SCORE,
            percentile=0,
            population_size=0,
        )

    average = int(round(float(scores.mean())))
    percentile = int(round(float((scores < score).sum()) / scores.size * 100.0))
    return PopulationComparison(
        score=int(score),
        average_score=average,
        score_difference=int(score) - average,
        percentile=percentile,
        population_size=int(scores.size),
    )
