"""Tests for the estimation service and the interactive preview session."""

import logging

import pytest

from premium_engine.engine.service import PreviewSession, estimate, estimate_from_dict
from premium_engine.errors import InvalidInput
from premium_engine.pricing.quote import PolicyPricingInput, quote
from premium_engine.risk.assessment import assess


class TestEstimate:
    """Tests for the end-to-end estimate."""

    def test_estimate_returns_assessment_and_quote(self, tech_profile, life_100k):
        """profile -> assessment -> quote."""
        assessment, q = estimate(tech_profile, life_100k)
        assert assessment.score == 34
        assert q.final_premium == 1200.0

    def test_estimate_is_idempotent(self, complete_profile, life_100k):
        """Repeated calls give identical results."""
        assert estimate(complete_profile, life_100k) == estimate(complete_profile, life_100k)

    def test_estimate_from_dict(self):
        """Loose payload in, camelCase response out."""
        out = estimate_from_dict(
            {
                "profile": {"age": 30, "occupation": "technology", "isSmoker": True},
                "policy_type": "life",
                "coverage_amount": 100_000,
            }
        )
        assert out["quote"]["finalPremium"] == 2160.0
        assert out["quote"]["frequencyVariants"]["quarterly"]["discountPercent"] == 5.0
        assert out["assessment"]["riskBand"] == "moderate"
        assert {f["key"] for f in out["assessment"]["appliedFactors"]} == {"occupation_technology", "smoker"}
        assert out["warnings"] and "incomplete" in out["warnings"][0]

    def test_estimate_from_dict_overrides(self):
        """Pricing overrides apply to a single call."""
        out = estimate_from_dict(
            {"policy_type": "auto", "coverage_amount": 20_000},
            pricing_overrides={"base_rates": {"auto": 0.03}, "precision": 0},
        )
        assert out["quote"]["finalPremium"] == 600.0
        assert out["quote"]["precision"] == 0

    def test_estimate_from_dict_rejects_bad_input(self):
        """Invalid profile values propagate as InvalidInput."""
        with pytest.raises(InvalidInput):
            estimate_from_dict({"profile": {"age": 12}, "policy_type": "life", "coverage_amount": 1000})


class TestPreviewSession:
    """Tests for latest-wins preview bookkeeping."""

    def test_preview_sets_current(self, tech_profile, life_100k):
        """A fresh preview becomes current."""
        session = PreviewSession()
        result = session.preview(tech_profile, life_100k)
        assert result is not None
        assert session.current == result
        assert result.source == "local"
        assert result.quote.final_premium == 1200.0

    def test_stale_local_result_dropped(self, tech_profile, smoker_profile, life_100k):
        """A superseded generation never replaces a newer one."""
        session = PreviewSession()
        old = session.begin()
        new = session.begin()
        assert session.is_stale(old)
        assert session.submit_local(old, smoker_profile, life_100k) is None
        assert session.current is None
        session.submit_local(new, tech_profile, life_100k)
        assert session.current.generation == new

    def test_remote_replaces_local(self, tech_profile, life_100k):
        """The authoritative quote replaces the local estimate."""
        session = PreviewSession()
        gen = session.begin()
        local = session.submit_local(gen, tech_profile, life_100k)
        result = session.accept_remote(gen, local.quote)
        assert result.source == "remote"
        assert result.assessment == local.assessment

    def test_local_does_not_overwrite_remote(self, tech_profile, life_100k):
        """A late local estimate leaves the remote quote in place."""
        session = PreviewSession()
        gen = session.begin()
        remote_quote = quote(life_100k, assess(tech_profile))
        session.accept_remote(gen, remote_quote)
        result = session.submit_local(gen, tech_profile, life_100k)
        assert result.source == "remote"
        assert session.current.source == "remote"

    def test_stale_remote_dropped(self, tech_profile, life_100k):
        """Remote answers for old inputs are ignored."""
        session = PreviewSession()
        old = session.begin()
        session.begin()
        assert session.accept_remote(old, quote(life_100k, assess(tech_profile))) is None

    def test_divergence_logged(self, tech_profile, caplog):
        """A remote quote that disagrees with the local one is logged."""
        pricing = PolicyPricingInput(policy_type="life", coverage_amount=100_000)
        session = PreviewSession()
        gen = session.begin()
        session.submit_local(gen, tech_profile, pricing)
        remote = quote(pricing, assess(tech_profile), fees=10)
        with caplog.at_level(logging.WARNING, logger="premium_engine.engine.service"):
            session.accept_remote(gen, remote)
        assert "diverge" in caplog.text
        assert session.current.quote.final_premium == 1210.0
