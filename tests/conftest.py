"""Pytest fixtures for premium engine tests."""

import pandas as pd
import pytest

from premium_engine.pricing.config import PaymentFrequency, PolicyType, PricingConfig
from premium_engine.pricing.quote import PolicyPricingInput
from premium_engine.risk.catalog import DEFAULT_CATALOG, FactorCatalog
from premium_engine.risk.profile import RiskProfile


@pytest.fixture
def catalog() -> FactorCatalog:
    """The shipped factor catalog."""
    return DEFAULT_CATALOG


@pytest.fixture
def pricing_config() -> PricingConfig:
    """Default pricing: USD, two decimals."""
    return PricingConfig()


@pytest.fixture
def tech_profile() -> RiskProfile:
    """Age 30, technology worker, medium risk zone (multiplier 0.8)."""
    return RiskProfile(age=30, occupation="technology", risk_zone="medium")


@pytest.fixture
def smoker_profile() -> RiskProfile:
    """tech_profile plus smoking (multiplier 1.44)."""
    return RiskProfile(age=30, occupation="technology", risk_zone="medium", smoker=True)


@pytest.fixture
def complete_profile() -> RiskProfile:
    """Profile with every field needed for completeness."""
    return RiskProfile(
        age=45,
        occupation="manual",
        employment_status="employed",
        annual_income=45_000,
        bmi=27,
        health_status="good",
        credit_score=600,
        risk_zone="high",
    )


@pytest.fixture
def life_100k() -> PolicyPricingInput:
    """Life cover of 100,000 billed monthly."""
    return PolicyPricingInput(
        policy_type=PolicyType.LIFE,
        coverage_amount=100_000,
        payment_frequency=PaymentFrequency.MONTHLY,
    )


@pytest.fixture
def profiles_df() -> pd.DataFrame:
    """Small portfolio: neutral, low, adverse and invalid rows."""
    return pd.DataFrame(
        [
            {"age": 30, "occupation": "technology", "smoker": "no", "credit_score": None},
            {"age": 35, "occupation": "administrative", "smoker": "no", "credit_score": 700},
            {"age": 70, "occupation": "hazardous", "smoker": "yes", "credit_score": 400},
            {"age": 16, "occupation": "manual", "smoker": "no", "credit_score": 650},
        ]
    )
