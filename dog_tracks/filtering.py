"""Row filters applied between and after the metric derivations."""

from __future__ import annotations

import logging
from typing import Iterable, List

import numpy as np
import pandas as pd

from dog_tracks.steps import EARTH_RADIUS_M, derive_step_metrics

DERIVED_NUMERIC_COLUMNS: List[str] = [
    "prev_longitude",
    "prev_latitude",
    "distance_m",
    "elapsed_s",
    "speed_mps",
    "heading_rad",
    "turn_angle_rad",
]


def filter_speed_anomalies(df: pd.DataFrame, max_speed_mps: float = 10.0) -> pd.DataFrame:
    """Drop fixes whose step speed is not a plausible dog speed.

    A fix is kept when it opens its track (no previous fix) or when its speed
    is finite and strictly between 0 and ``max_speed_mps``. Zero, negative,
    infinite and NaN speeds are dropped; nothing is corrected.
    """

    speed = df["speed_mps"].to_numpy(dtype=float)
    first_of_track = df["prev_timestamp"].isna().to_numpy()
    with np.errstate(invalid="ignore"):
        plausible = np.isfinite(speed) & (speed > 0) & (speed < max_speed_mps)

    kept = df[first_of_track | plausible].reset_index(drop=True)
    dropped = len(df) - len(kept)
    if dropped:
        logging.info("Dropped %d fixes outside (0, %.1f) m/s", dropped, max_speed_mps)
    return kept


def sanitize_non_finite(df: pd.DataFrame, columns: Iterable[str] = DERIVED_NUMERIC_COLUMNS) -> pd.DataFrame:
    """Replace +/-inf with NaN in the given numeric columns."""

    out = df.copy()
    cols = [col for col in columns if col in out.columns]
    if cols:
        out[cols] = out[cols].replace([np.inf, -np.inf], np.nan)
    return out


def drop_incomplete(df: pd.DataFrame, columns: Iterable[str] = DERIVED_NUMERIC_COLUMNS) -> pd.DataFrame:
    """Drop rows with a missing value in any of the given columns."""

    cols = list(columns)
    missing = [col for col in cols if col not in df.columns]
    if missing:
        raise ValueError(f"Missing derived columns: {missing}")

    complete = df.dropna(subset=cols).reset_index(drop=True)
    dropped = len(df) - len(complete)
    if dropped:
        logging.info("Dropped %d incomplete fixes", dropped)
    return complete


def settle_on_survivors(
    df: pd.DataFrame,
    max_speed_mps: float = 10.0,
    earth_radius_m: float = EARTH_RADIUS_M,
) -> pd.DataFrame:
    """Re-derive steps from the retained fixes and re-apply the speed gate until nothing drops.

    After this every ``prev_*`` field points at a retained row and every
    re-derived speed is inside the gate.
    """

    settled = df
    while True:
        before = len(settled)
        settled = filter_speed_anomalies(
            derive_step_metrics(settled, earth_radius_m=earth_radius_m),
            max_speed_mps=max_speed_mps,
        )
        if len(settled) == before:
            return settled
