"""Tests for the file helpers used by batch quoting."""

import json
from dataclasses import dataclass

import pandas as pd
import pytest

from premium_engine.pricing.config import PolicyType
from premium_engine.pricing.quote import PolicyPricingInput, quote
from premium_engine.risk.assessment import assess
from premium_engine.utils.io import read_df, write_df, write_json


@dataclass
class _Summary:
    policy_type: PolicyType
    rows: int


class TestFrames:
    """CSV/Parquet selection by suffix."""

    def test_csv_round_trip_keeps_columns(self, tmp_path):
        """A frame written as CSV reads back with the same columns and no index."""
        df = pd.DataFrame({"age": [30, 45], "occupation": ["technology", "manual"]})
        path = tmp_path / "nested" / "profiles.csv"
        write_df(df, path)
        back = read_df(path)
        assert list(back.columns) == ["age", "occupation"]
        assert back["age"].tolist() == [30, 45]

    def test_suffix_is_case_insensitive(self, tmp_path):
        """.CSV is read as CSV."""
        path = tmp_path / "profiles.CSV"
        path.write_text("age\n30\n", encoding="utf-8")
        assert read_df(path)["age"].tolist() == [30]

    @pytest.mark.parametrize("name", ["profiles.xlsx", "profiles"])
    def test_unsupported_format_on_write(self, tmp_path, name):
        """Unknown suffixes are rejected before anything is written."""
        with pytest.raises(ValueError, match="Unsupported dataframe format"):
            write_df(pd.DataFrame({"age": [30]}), tmp_path / "out" / name)
        assert not (tmp_path / "out").exists()

    def test_unsupported_format_on_read(self, tmp_path):
        """Unknown suffixes are rejected on read."""
        path = tmp_path / "profiles.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported dataframe format"):
            read_df(path)

    def test_missing_file(self, tmp_path):
        """A missing input is a FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_df(tmp_path / "missing.csv")


class TestWriteJson:
    """Report serialisation."""

    def test_dataclass_with_enum(self, tmp_path):
        """Dataclasses are converted; enums fall back to str."""
        path = tmp_path / "reports" / "summary.json"
        write_json(_Summary(policy_type=PolicyType.LIFE, rows=3), path)
        out = json.loads(path.read_text(encoding="utf-8"))
        assert out["rows"] == 3
        assert "life" in out["policy_type"]

    def test_object_with_to_dict(self, tmp_path, tech_profile):
        """Objects exposing to_dict() are written through it."""
        q = quote(PolicyPricingInput(policy_type="life", coverage_amount=100_000), assess(tech_profile))
        path = tmp_path / "quote.json"
        write_json(q, path)
        out = json.loads(path.read_text(encoding="utf-8"))
        assert out["final_premium"] == 1200.0
        assert out["policy_type"] == "life"
