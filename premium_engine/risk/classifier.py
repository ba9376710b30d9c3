# premium_engine/risk/classifier.py
"""
Map a composite multiplier onto a 0-100 score and a risk band.

score = round(clip(40 + 25 * ln(multiplier), 0, 100))

- multiplier 1.0 -> 40 (lower half of "moderate"): an average baseline
- log scale: each factor moves the score by the same amount wherever it lands
- clipping keeps the score bounded; rounding keeps it non-decreasing

Bands:
- low      : score < 30
- moderate : 30 <= score < 60
- high     : 60 <= score < 80
- very-high: score >= 80
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

import numpy as np

from premium_engine.errors import InvalidInput


class RiskBand(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very-high"


SCORE_BASELINE = 40.0
SCORE_SLOPE = 25.0

# Lower score bound of each band, highest first
BAND_THRESHOLDS = (
    (80, RiskBand.VERY_HIGH),
    (60, RiskBand.HIGH),
    (30, RiskBand.MODERATE),
    (0, RiskBand.LOW),
)


def score_from_multiplier(composite_multiplier: float) -> int:
    m = float(composite_multiplier)
    if not (m > 0 and np.isfinite(m)):
        raise InvalidInput(
            f"composite_multiplier must be positive and finite, got: {composite_multiplier}",
            field="composite_multiplier",
            value=composite_multiplier,
        )
    raw = SCORE_BASELINE + SCORE_SLOPE * float(np.log(m))
    return int(round(float(np.clip(raw, 0.0, 100.0))))


def band_for_score(score: int) -> RiskBand:
    for lower, band in BAND_THRESHOLDS:
        if score >= lower:
            return band
    return RiskBand.LOW


def classify(composite_multiplier: float) -> Tuple[int, RiskBand]:
    score = score_from_multiplier(composite_multiplier)
    return score, band_for_score(score)
