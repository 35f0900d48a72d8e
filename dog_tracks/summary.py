"""Per-track summary tables for the report.

Aggregates the enriched steps into one row per dog, and breaks down the share
of steps spent in each land-use class.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from scipy.stats import circmean

SUMMARY_COLUMNS = [
    "track_id",
    "n_steps",
    "start",
    "end",
    "duration_s",
    "total_distance_m",
    "mean_speed_mps",
    "median_speed_mps",
    "max_speed_mps",
    "mean_heading_rad",
    "mean_turn_angle_rad",
]


def summarise_tracks(df: pd.DataFrame) -> pd.DataFrame:
    """
    For each track, count steps and aggregate distance, speed, heading and turning angle.
    Headings are averaged on the circle, so east and west cancel instead of averaging to north.
    """

    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    rows = []
    for track_id, track in df.groupby("track_id", sort=True):
        start = track["prev_timestamp"].min() if "prev_timestamp" in track else track["timestamp"].min()
        end = track["timestamp"].max()
        rows.append(
            {
                "track_id": track_id,
                "n_steps": len(track),
                "start": start,
                "end": end,
                "duration_s": (end - start).total_seconds(),
                "total_distance_m": float(track["distance_m"].sum()),
                "mean_speed_mps": float(track["speed_mps"].mean()),
                "median_speed_mps": float(track["speed_mps"].median()),
                "max_speed_mps": float(track["speed_mps"].max()),
                "mean_heading_rad": float(circmean(track["heading_rad"].to_numpy(), high=np.pi, low=-np.pi)),
                "mean_turn_angle_rad": float(track["turn_angle_rad"].mean()),
            }
        )

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def land_use_share(df: pd.DataFrame, class_column: str = "land_use_class") -> pd.DataFrame:
    """Share of each track's steps per land-use class (missing classes -> 'unclassified')."""

    if class_column not in df.columns:
        raise ValueError(f"Missing land-use column: {class_column}")
    if df.empty:
        return pd.DataFrame(columns=["track_id", class_column, "n_steps", "share"])

    classes = df[class_column].astype(object).where(df[class_column].notna(), "unclassified")
    counts = (
        pd.DataFrame({"track_id": df["track_id"], class_column: classes.astype(str)})
        .groupby(["track_id", class_column])
        .size()
        .rename("n_steps")
        .reset_index()
    )
    totals = counts.groupby("track_id")["n_steps"].transform("sum")
    counts["share"] = counts["n_steps"] / totals
    return counts
