# premium_engine/scripts/batch_quote.py
"""
Quote a file of customer profiles in one pass.

What it does:
- Reads profiles (CSV or Parquet, one profile per row)
- Assesses and prices every row (invalid rows are kept with an `error` message)
- Writes the scored quotes to data/processed/
- Writes a summary report JSON to reports/ (counts, band distribution, totals)
- Optionally uploads quotes + report to S3 (if S3_BUCKET is set)

Usage:
  python -m premium_engine.scripts.batch_quote --in_path data/raw/profiles.csv \
    --policy_type life --coverage_amount 100000

Optional:
  --payment_frequency annual
  --out_path data/processed/profiles_quotes.parquet
  --report_path reports/batch_quote_report.json
  --upload_s3

Env (optional):
  QUOTE_CURRENCY=USD
  QUOTE_PRECISION=2
  AWS_REGION=eu-west-2
  S3_BUCKET=your-bucket
  S3_PREFIX=premium-engine
"""

from __future__ import annotations

import argparse
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from premium_engine.data.portfolio import quote_frame, risk_distribution
from premium_engine.pricing.config import PricingConfig, coerce_frequency, coerce_policy_type
from premium_engine.utils.config import get_aws_config, get_paths
from premium_engine.utils.io import read_df, s3_upload_file, write_df, write_json
from premium_engine.utils.logging_config import setup_logging


logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    source_path: str
    output_path: str
    created_utc: str
    policy_type: str
    coverage_amount: float
    payment_frequency: str
    currency: str
    rows: int
    quoted: int
    failed: int
    mean_score: Optional[float]
    total_final_premium: float
    band_counts: Dict[str, int]
    notes: List[str]


def _utc_now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def _default_out_path(in_path: Path) -> Path:
    return get_paths().processed_dir / f"{in_path.stem}_quotes.parquet"


def _default_report_path() -> Path:
    return get_paths().reports_dir / "batch_quote_report.json"


def build_report(
    quotes: pd.DataFrame,
    source_path: Path,
    output_path: Path,
    policy_type: str,
    coverage_amount: float,
    payment_frequency: str,
    currency: str,
    notes: Optional[List[str]] = None,
) -> BatchReport:
    if notes is None:
        notes = []

    ok = quotes[quotes["error"].isna()]
    dist = risk_distribution(ok)
    failed = int(quotes.shape[0] - ok.shape[0])
    if failed:
        notes.append(f"WARNING: {failed} row(s) could not be quoted; see the `error` column.")

    return BatchReport(
        source_path=str(source_path),
        output_path=str(output_path),
        created_utc=_utc_now_iso(),
        policy_type=policy_type,
        coverage_amount=float(coverage_amount),
        payment_frequency=payment_frequency,
        currency=currency,
        rows=int(quotes.shape[0]),
        quoted=int(ok.shape[0]),
        failed=failed,
        mean_score=round(float(ok["score"].astype(float).mean()), 2) if not ok.empty else None,
        total_final_premium=round(float(ok["final_premium"].astype(float).sum()), 2),
        band_counts={str(b): int(n) for b, n in zip(dist["risk_band"], dist["count"])},
        notes=notes,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Assess and price a file of customer profiles.")
    p.add_argument("--in_path", type=str, required=True, help="Input CSV/Parquet of profiles (one per row)")
    p.add_argument("--policy_type", type=str, required=True, help="life | health | auto | property | disability")
    p.add_argument("--coverage_amount", type=float, required=True, help="Coverage amount (> 0) for every row")
    p.add_argument("--payment_frequency", type=str, default="monthly", help="monthly | quarterly | semi-annual | annual")
    p.add_argument("--out_path", type=str, default=None, help="Output path (.parquet or .csv). Default: data/processed/<stem>_quotes.parquet")
    p.add_argument("--report_path", type=str, default=None, help="Report JSON path. Default: reports/batch_quote_report.json")
    p.add_argument("--upload_s3", action="store_true", help="Upload quotes + report to S3 (requires env S3_BUCKET)")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    setup_logging()
    args = parse_args(argv)
    aws = get_aws_config()
    cfg = PricingConfig.from_env()

    # Fail fast on bad run-level arguments
    policy_type = coerce_policy_type(args.policy_type)
    frequency = coerce_frequency(args.payment_frequency)
    if args.coverage_amount <= 0:
        raise ValueError(f"coverage_amount must be > 0, got: {args.coverage_amount}")

    in_path = Path(args.in_path)
    out_path = Path(args.out_path) if args.out_path else _default_out_path(in_path)
    report_path = Path(args.report_path) if args.report_path else _default_report_path()

    df = read_df(in_path)

    notes: List[str] = []
    if df.empty:
        notes.append("WARNING: Input dataframe is empty.")

    logger.info("Quoting %d profile(s) from %s", df.shape[0], in_path)
    quotes = quote_frame(
        df,
        policy_type=policy_type,
        coverage_amount=args.coverage_amount,
        payment_frequency=frequency,
        cfg=cfg,
        errors="coerce",
    )
    write_df(quotes, out_path)

    report = build_report(
        quotes,
        source_path=in_path,
        output_path=out_path,
        policy_type=policy_type.value,
        coverage_amount=args.coverage_amount,
        payment_frequency=frequency.value,
        currency=cfg.currency,
        notes=notes,
    )
    write_json(report, report_path)

    print(f"[OK] Profiles read        : {in_path}")
    print(f"[OK] Quotes saved         : {out_path}")
    print(f"[OK] Report saved         : {report_path}")
    print(f"Rows: {report.rows} | Quoted: {report.quoted} | Failed: {report.failed}")

    if args.upload_s3:
        if not aws.enabled:
            raise RuntimeError("S3 upload requested but S3_BUCKET is not set in environment.")
        bucket = aws.s3_bucket  # type: ignore[assignment]
        prefix = aws.s3_prefix.rstrip("/")

        # s3://<bucket>/<prefix>/quotes/<filename>
        # s3://<bucket>/<prefix>/reports/<filename>
        quotes_key = f"{prefix}/quotes/{out_path.name}"
        report_key = f"{prefix}/reports/{report_path.name}"

        s3_upload_file(out_path, bucket=bucket, key=quotes_key, region=aws.region)
        s3_upload_file(report_path, bucket=bucket, key=report_key, region=aws.region)

        print(f"[OK] Uploaded quotes to S3: s3://{bucket}/{quotes_key}")
        print(f"[OK] Uploaded report      : s3://{bucket}/{report_key}")


if __name__ == "__main__":
    main()
