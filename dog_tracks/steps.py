"""Per-step movement metrics for GPS tracks.

Every fix is compared with the fix before it in the same track: great-circle
distance, elapsed time and speed come first, headings and turning angles are
derived once implausible steps have been filtered out. Lookback is always
grouped by ``track_id`` so no step ever spans two tracks.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pandas as pd

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lon1, lat1, lon2, lat2, radius_m: float = EARTH_RADIUS_M):
    """Vectorised haversine distance in meters between lon/lat pairs in degrees."""

    lon1, lat1, lon2, lat2 = (np.radians(np.asarray(v, dtype=float)) for v in (lon1, lat1, lon2, lat2))
    d_lat = lat2 - lat1
    d_lon = lon2 - lon1
    a = np.sin(d_lat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lon / 2.0) ** 2
    return 2.0 * radius_m * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def derive_step_metrics(df: pd.DataFrame, earth_radius_m: float = EARTH_RADIUS_M) -> pd.DataFrame:
    """Add previous-fix references, distance, elapsed time and speed.

    Expects rows ordered by (track_id, timestamp). The first fix of each
    track gets missing values for every derived column. Zero or negative
    elapsed times are passed through, so speed may be infinite, NaN or
    negative here.
    """

    out = df.copy()
    grouped = out.groupby("track_id", sort=False)
    out["prev_longitude"] = grouped["longitude"].shift(1)
    out["prev_latitude"] = grouped["latitude"].shift(1)
    out["prev_timestamp"] = grouped["timestamp"].shift(1)

    out["distance_m"] = haversine_m(
        out["prev_longitude"],
        out["prev_latitude"],
        out["longitude"],
        out["latitude"],
        radius_m=earth_radius_m,
    )
    out["elapsed_s"] = (out["timestamp"] - out["prev_timestamp"]).dt.total_seconds()
    out["speed_mps"] = out["distance_m"] / out["elapsed_s"]
    logging.info("Derived step metrics for %d fixes", len(out))
    return out


def derive_headings(
    df: pd.DataFrame,
    turn_reference: str = "contiguous",
    max_turn_gap_s: Optional[float] = None,
    earth_radius_m: float = EARTH_RADIUS_M,
) -> pd.DataFrame:
    """Add ``heading_rad`` and ``turn_angle_rad`` to a speed-filtered table.

    The heading is the planar ``atan2`` of the degree differences to the
    previous fix (0 = east, pi/2 = north), folded into (-pi, pi]. The turning
    angle compares it with the heading of the preceding retained row of the
    same track.

    With ``turn_reference="contiguous"`` the previous fix is the raw
    predecessor, and a turning angle is only set when the preceding retained
    row is that predecessor, so no step spans a dropped fix. With
    ``turn_reference="surviving"`` the previous fix is the preceding retained
    row: ``prev_*``, distance, elapsed time and speed are re-derived from it
    before the heading is computed.
    """

    if turn_reference not in {"contiguous", "surviving"}:
        raise ValueError(f"Unsupported turn_reference: {turn_reference}")

    if turn_reference == "surviving":
        out = derive_step_metrics(df, earth_radius_m=earth_radius_m)
    else:
        out = df.copy()

    heading = np.arctan2(
        (out["latitude"] - out["prev_latitude"]).to_numpy(dtype=float),
        (out["longitude"] - out["prev_longitude"]).to_numpy(dtype=float),
    )
    out["heading_rad"] = np.where(heading == -np.pi, np.pi, heading)

    grouped = out.groupby("track_id", sort=False)
    turn = (out["heading_rad"] - grouped["heading_rad"].shift(1)).abs()

    if turn_reference == "contiguous":
        if "fix_seq" not in out.columns:
            raise ValueError("turn_reference='contiguous' requires the fix_seq column from order_fixes")
        turn = turn.where(grouped["fix_seq"].diff() == 1)

    if max_turn_gap_s is not None:
        gap_s = (out["timestamp"] - grouped["timestamp"].shift(1)).dt.total_seconds()
        turn = turn.where(gap_s <= max_turn_gap_s)

    out["turn_angle_rad"] = turn
    return out
