"""Input/output helpers for the dog tracks pipeline.

Covers CSV loading with column renaming, required-column checks, timestamp and
coordinate parsing, chronological ordering per track, and CSV saving.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping

import pandas as pd

REQUIRED_COLUMNS: List[str] = [
    "track_id",
    "timestamp",
    "longitude",
    "latitude",
]


class FixParseError(ValueError):
    """Raised when a batch of fixes holds a blank track id or an unparseable timestamp or coordinate."""


def load_fixes(
    csv_path: str | Path,
    columns: Mapping[str, str] | None = None,
    sep: str = ",",
) -> pd.DataFrame:
    """Load raw fixes from a delimited text file.

    Parameters
    ----------
    csv_path:
        Path to the fix export.
    columns:
        Optional mapping from source column names to the canonical
        ``track_id``/``timestamp``/``longitude``/``latitude`` names.

    Returns
    -------
    pd.DataFrame
        Raw rows restricted to the required columns, values still unparsed.
    """

    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Fix file not found: {path}")

    logging.info("Reading %s", path)
    df = pd.read_csv(path, sep=sep, dtype=str, keep_default_na=False, na_values=[""])
    if columns:
        df = df.rename(columns=dict(columns))
    df = ensure_required_columns(df)
    logging.info("Loaded %d raw fixes from %s", len(df), path)
    return df[REQUIRED_COLUMNS].copy()


def ensure_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Validate that the DataFrame contains the required columns."""

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    return df


def normalise_fixes(df: pd.DataFrame) -> pd.DataFrame:
    """Parse timestamps to UTC datetimes and coordinates to floats.

    Any value that does not parse fails the whole batch with
    :class:`FixParseError`; there is no best-effort ingestion.
    """

    df = ensure_required_columns(df).copy()

    try:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True, format="ISO8601", errors="raise")
    except (ValueError, TypeError) as exc:
        raise FixParseError(f"Unparseable timestamp in fix batch: {exc}") from exc
    if df["timestamp"].isna().any():
        rows = df.index[df["timestamp"].isna()].tolist()
        raise FixParseError(f"Missing timestamp in rows {rows[:10]}")

    for col in ("longitude", "latitude"):
        try:
            df[col] = pd.to_numeric(df[col], errors="raise").astype(float)
        except (ValueError, TypeError) as exc:
            raise FixParseError(f"Unparseable {col} in fix batch: {exc}") from exc
        if df[col].isna().any():
            rows = df.index[df[col].isna()].tolist()
            raise FixParseError(f"Missing {col} in rows {rows[:10]}")

    blank = df["track_id"].isna() | df["track_id"].astype(str).str.strip().eq("")
    if blank.any():
        rows = df.index[blank].tolist()
        raise FixParseError(f"Missing track_id in rows {rows[:10]}")
    df["track_id"] = df["track_id"].astype(str).str.strip()
    return df


def order_fixes(df: pd.DataFrame) -> pd.DataFrame:
    """Sort fixes by (track_id, timestamp) and number them within each track.

    The sort is stable, so fixes sharing a timestamp keep their input order.
    Duplicates are kept. ``fix_seq`` is the 0-based position of a fix inside
    its track.
    """

    ordered = df.sort_values(["track_id", "timestamp"], kind="mergesort").reset_index(drop=True)
    ordered["fix_seq"] = ordered.groupby("track_id", sort=False).cumcount()
    logging.info("Ordered %d fixes across %d tracks", len(ordered), ordered["track_id"].nunique())
    return ordered


def save_dataframe(df: pd.DataFrame, path: str | Path) -> None:
    """Persist a DataFrame to CSV."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logging.info("Saved %d rows to %s", len(df), path)


def column_map_from_config(input_cfg: Dict[str, object]) -> Dict[str, str]:
    """Invert the ``input.columns`` config section (canonical -> source) for renaming."""

    columns = input_cfg.get("columns", {}) or {}
    return {str(source): str(canonical) for canonical, source in dict(columns).items()}
