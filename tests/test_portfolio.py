"""Tests for portfolio analytics over DataFrames."""

import pandas as pd
import pytest

from premium_engine.data.portfolio import (
    assess_frame,
    compare_with_average,
    quote_frame,
    risk_distribution,
)
from premium_engine.errors import InvalidInput


class TestAssessFrame:
    """Tests for scoring many profiles."""

    def test_invalid_row_raises_by_default(self, profiles_df):
        """errors='raise' propagates the first bad row."""
        with pytest.raises(InvalidInput):
            assess_frame(profiles_df)

    def test_coerce_records_errors(self, profiles_df):
        """errors='coerce' keeps bad rows with their message."""
        scored = assess_frame(profiles_df, errors="coerce")
        assert scored.shape[0] == 4
        assert scored["score"].tolist()[:3] == [34, 40, 90]
        assert scored["risk_band"].tolist()[:3] == ["moderate", "moderate", "very-high"]
        assert pd.isna(scored.loc[3, "score"])
        assert "age" in scored.loc[3, "error"]
        assert scored.loc[0, "applied_factors"] == "occupation_technology"

    def test_input_columns_kept(self, profiles_df):
        """Input columns pass through unchanged."""
        scored = assess_frame(profiles_df.iloc[:3])
        assert list(scored.columns[:4]) == list(profiles_df.columns)
        assert scored["error"].isna().all()

    def test_bad_errors_argument(self, profiles_df):
        """Only raise and coerce are accepted."""
        with pytest.raises(ValueError):
            assess_frame(profiles_df, errors="ignore")


class TestQuoteFrame:
    """Tests for pricing many profiles."""

    def test_quote_columns(self, profiles_df):
        """Each row carries its premium and frequency variants."""
        priced = quote_frame(profiles_df.iloc[:2], policy_type="life", coverage_amount=100_000)
        assert priced["final_premium"].tolist() == [1200.0, 1500.0]
        assert priced.loc[0, "quarterly_amount"] == 3420.0
        assert priced.loc[1, "semi_annual_amount"] == 8280.0
        assert set(priced["policy_type"]) == {"life"}

    def test_row_values_take_precedence(self):
        """Per-row policy columns override the defaults."""
        df = pd.DataFrame(
            [
                {"age": 30, "policy_type": "auto", "coverage_amount": 20_000},
                {"age": 30, "policy_type": None, "coverage_amount": None},
            ]
        )
        priced = quote_frame(df, policy_type="life", coverage_amount=100_000)
        assert priced["final_premium"].tolist() == [500.0, 1500.0]
        assert priced["policy_type"].tolist() == ["auto", "life"]

    def test_missing_coverage_coerced(self):
        """Rows without coverage fail individually under coerce."""
        priced = quote_frame(pd.DataFrame([{"age": 30}]), policy_type="life", errors="coerce")
        assert "coverage_amount" in priced.loc[0, "error"]


class TestRiskDistribution:
    """Tests for band counts."""

    def test_every_band_present(self, profiles_df):
        """Bands without profiles count zero."""
        dist = risk_distribution(assess_frame(profiles_df, errors="coerce"))
        assert dist["risk_band"].tolist() == ["low", "moderate", "high", "very-high"]
        assert dist["count"].tolist() == [0, 2, 0, 1]
        assert dist["share"].sum() == pytest.approx(1.0)

    def test_empty_frame(self):
        """No rows, all zeros."""
        dist = risk_distribution(pd.DataFrame({"risk_band": []}))
        assert dist["count"].tolist() == [0, 0, 0, 0]


class TestCompareWithAverage:
    """Tests for population comparison."""

    def test_against_population(self):
        """Percentile counts scores strictly below."""
        result = compare_with_average(50, [40, 60, 70])
        assert result.average_score == 57
        assert result.score_difference == -7
        assert result.percentile == 33
        assert result.population_size == 3

    def test_ties_are_not_below(self):
        """Equal scores do not count towards the percentile."""
        assert compare_with_average(40, [40, 40]).percentile == 0

    def test_empty_population(self):
        """An empty population compares against the neutral score."""
        result = compare_with_average(55, [])
        assert result.average_score == 40
        assert result.score_difference == 15
        assert result.percentile == 0
        assert result.population_size == 0
