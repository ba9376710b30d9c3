# premium_engine/utils/io.py
"""
File helpers for batch quoting.

- profile/quote frames are read and written as CSV or Parquet, picked by suffix
- reports are written as JSON (dataclasses and objects with to_dict() are
  converted; enums and dates fall back to str)
- finished files can be copied to S3
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import boto3
import pandas as pd


logger = logging.getLogger(__name__)

_READERS: Dict[str, Callable[[Path], pd.DataFrame]] = {
    ".csv": pd.read_csv,
    ".parquet": pd.read_parquet,
}

_WRITERS: Dict[str, Callable[[pd.DataFrame, Path], None]] = {
    ".csv": lambda df, path: df.to_csv(path, index=False),
    ".parquet": lambda df, path: df.to_parquet(path, index=False),
}


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _frame_format(path: Path, table: Dict[str, Any]) -> Any:
    suf = path.suffix.lower()
    if suf not in table:
        raise ValueError(f"Unsupported dataframe format: {suf or '<none>'} (use {' or '.join(table)})")
    return table[suf]


def write_json(obj: Any, path: Path) -> None:
    path = Path(path)
    ensure_dir(path.parent)

    if hasattr(obj, "to_dict"):
        payload = obj.to_dict()
    elif is_dataclass(obj) and not isinstance(obj, type):
        payload = asdict(obj)
    else:
        payload = obj

    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False, default=str)


def read_df(path: Union[str, Path]) -> pd.DataFrame:
    """Read a profile or quote frame; the suffix picks CSV or Parquet."""
    path = Path(path)
    reader = _frame_format(path, _READERS)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return reader(path)


def write_df(df: pd.DataFrame, path: Union[str, Path]) -> None:
    path = Path(path)
    writer = _frame_format(path, _WRITERS)
    ensure_dir(path.parent)
    writer(df, path)
    logger.info("Wrote %d row(s) to %s", df.shape[0], path)


def s3_upload_file(
    local_path: Path, bucket: str, key: str, region: Optional[str] = None
) -> None:
    local_path = Path(local_path)
    if not local_path.exists():
        raise FileNotFoundError(f"Local file not found: {local_path}")
    s3 = boto3.client("s3", region_name=region) if region else boto3.client("s3")
    s3.upload_file(str(local_path), bucket, key)
    logger.info("Uploaded %s to s3://%s/%s", local_path, bucket, key)
