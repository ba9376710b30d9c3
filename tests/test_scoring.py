"""Tests for composition, classification and assessment."""

import math

import pytest

from premium_engine.errors import CatalogIntegrityError, InvalidInput
from premium_engine.risk.assessment import assess
from premium_engine.risk.catalog import RiskFactorDefinition, neutral_definition
from premium_engine.risk.classifier import (
    RiskBand,
    band_for_score,
    classify,
    score_from_multiplier,
)
from premium_engine.risk.composer import compose
from premium_engine.risk.profile import RiskCategory, RiskProfile


class TestCompose:
    """Tests for multiplicative composition."""

    def test_empty_set_is_exactly_one(self):
        """No factors compose to the identity."""
        assert compose([]) == (1.0, ())

    def test_neutral_rows_are_omitted(self):
        """Neutral rows leave the product and the itemised list untouched."""
        composite, applied = compose([neutral_definition(c) for c in RiskCategory])
        assert composite == 1.0
        assert applied == ()

    def test_product_is_order_independent(self, catalog):
        """Reordering factors does not change the composite."""
        factors = [catalog.get(k) for k in ("smoker", "occupation_hazardous", "credit_score_poor")]
        forward, _ = compose(factors)
        backward, _ = compose(list(reversed(factors)))
        assert forward == pytest.approx(backward, rel=1e-12)
        assert forward == pytest.approx(1.8 * 1.8 * 1.5)

    def test_non_positive_multiplier_raises(self):
        """A broken factor is an integrity failure."""
        bad = RiskFactorDefinition(category=RiskCategory.HEALTH, key="bad", multiplier=-1.0, attribute="smoker", rule=True)
        with pytest.raises(CatalogIntegrityError):
            compose([bad])

    def test_contribution_carries_profile_value(self, catalog, smoker_profile):
        """Applied factors record the value that triggered them."""
        _, applied = compose(catalog.lookup_applicable(smoker_profile), smoker_profile)
        by_key = {c.key: c for c in applied}
        assert set(by_key) == {"occupation_technology", "smoker"}
        assert by_key["smoker"].value is True
        assert by_key["smoker"].impact_percent == pytest.approx(80.0)
        assert by_key["occupation_technology"].impact_percent == pytest.approx(-20.0)


class TestClassifier:
    """Tests for score and band mapping."""

    def test_neutral_multiplier_scores_forty(self):
        """1.0 sits in the lower half of moderate."""
        assert classify(1.0) == (40, RiskBand.MODERATE)

    @pytest.mark.parametrize(
        "score,band",
        [
            (0, RiskBand.LOW),
            (29, RiskBand.LOW),
            (30, RiskBand.MODERATE),
            (59, RiskBand.MODERATE),
            (60, RiskBand.HIGH),
            (79, RiskBand.HIGH),
            (80, RiskBand.VERY_HIGH),
            (100, RiskBand.VERY_HIGH),
        ],
    )
    def test_band_thresholds(self, score, band):
        """Band edges are inclusive at the lower bound."""
        assert band_for_score(score) is band

    def test_score_is_clipped(self):
        """Extreme multipliers stay within 0-100."""
        assert score_from_multiplier(1e-6) == 0
        assert score_from_multiplier(1e6) == 100

    def test_score_non_decreasing(self):
        """Higher multipliers never score lower."""
        multipliers = [0.3, 0.5, 0.8, 1.0, 1.2, 1.44, 2.0, 3.0, 7.0, 50.0]
        scores = [score_from_multiplier(m) for m in multipliers]
        assert scores == sorted(scores)

    @pytest.mark.parametrize("bad", [0.0, -1.0, math.inf, math.nan])
    def test_invalid_multiplier_rejected(self, bad):
        """Non-positive or non-finite multipliers are invalid input."""
        with pytest.raises(InvalidInput):
            classify(bad)


class TestAssess:
    """Tests for the full assessment."""

    def test_tech_profile(self, tech_profile):
        """Technology worker in a medium zone: multiplier 0.8."""
        a = assess(tech_profile)
        assert a.composite_multiplier == pytest.approx(0.8)
        assert a.score == 34
        assert a.risk_band is RiskBand.MODERATE
        assert [c.key for c in a.applied_factors] == ["occupation_technology"]

    def test_smoker_profile(self, smoker_profile):
        """Smoking lifts the multiplier to 1.44."""
        a = assess(smoker_profile)
        assert a.composite_multiplier == pytest.approx(1.44)
        assert a.score == 49

    def test_empty_profile_is_neutral(self):
        """An empty profile is neutral and incomplete."""
        a = assess(RiskProfile())
        assert a.composite_multiplier == 1.0
        assert a.applied_factors == ()
        assert a.score == 40
        assert a.is_complete is False

    def test_high_risk_profile(self):
        """Several adverse factors reach the very-high band."""
        profile = RiskProfile(age=70, occupation="hazardous", smoker=True, credit_score=400)
        a = assess(profile)
        assert a.composite_multiplier == pytest.approx(1.5 * 1.8 * 1.8 * 1.5)
        assert a.risk_band is RiskBand.VERY_HIGH

    def test_by_category(self, complete_profile):
        """Applied factors group under their category."""
        grouped = assess(complete_profile).by_category()
        assert set(grouped) == set(RiskCategory)
        assert {c.key for c in grouped[RiskCategory.PERSONAL]} == {"age_bracket_41_55", "occupation_manual"}
        assert {c.key for c in grouped[RiskCategory.FINANCIAL]} == {"income_30k_60k", "credit_score_fair"}
        assert grouped[RiskCategory.LIFESTYLE] == ()

    def test_assessment_is_deterministic(self, complete_profile):
        """Same profile, same assessment."""
        assert assess(complete_profile) == assess(complete_profile)
