# premium_engine/utils/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    return v if v is not None and v != "" else default


@dataclass(frozen=True)
class ProjectPaths:
    root: Path
    data_dir: Path
    raw_dir: Path
    processed_dir: Path
    reports_dir: Path


def get_project_root() -> Path:
    """
    Resolve repo root robustly.
    Assumes this file lives at: <root>/premium_engine/utils/config.py
    """
    return Path(__file__).resolve().parents[2]


def get_paths() -> ProjectPaths:
    root = get_project_root()
    data_dir = root / "data"
    return ProjectPaths(
        root=root,
        data_dir=data_dir,
        raw_dir=data_dir / "raw",
        processed_dir=data_dir / "processed",
        reports_dir=root / "reports",
    )


@dataclass(frozen=True)
class EngineSettings:
    currency: str
    precision: int


def get_engine_settings() -> EngineSettings:
    """
    Quote display settings from the environment.

    Env:
      QUOTE_CURRENCY  (default: USD)
      QUOTE_PRECISION (default: 2; 0 or 2)
    """
    raw_precision = _env("QUOTE_PRECISION", "2") or "2"
    try:
        precision = int(raw_precision)
    except ValueError as e:
        raise ValueError(f"QUOTE_PRECISION must be 0 or 2, got: {raw_precision}") from e
    if precision not in (0, 2):
        raise ValueError(f"QUOTE_PRECISION must be 0 or 2, got: {precision}")

    return EngineSettings(
        currency=_env("QUOTE_CURRENCY", "USD") or "USD",
        precision=precision,
    )


@dataclass(frozen=True)
class AwsConfig:
    region: str
    s3_bucket: Optional[str]
    s3_prefix: str

    @property
    def enabled(self) -> bool:
        return self.s3_bucket is not None


def get_aws_config() -> AwsConfig:
    """
    Configure S3 usage via environment variables.
    Keep it optional so local runs are frictionless.

    Env:
      AWS_REGION (default: eu-west-2)
      S3_BUCKET  (optional)
      S3_PREFIX  (default: premium-engine)
    """
    return AwsConfig(
        region=_env("AWS_REGION", "eu-west-2") or "eu-west-2",
        s3_bucket=_env("S3_BUCKET", None),
        s3_prefix=_env("S3_PREFIX", "premium-engine") or "premium-engine",
    )
