"""End-to-end movement pipeline.

Chains parsing, ordering, step metrics, the speed gate, headings and the
completeness pass over one in-memory batch of fixes.
"""

from __future__ import annotations

import logging

import pandas as pd

from dog_tracks.config import MovementConfig
from dog_tracks.filtering import (
    DERIVED_NUMERIC_COLUMNS,
    drop_incomplete,
    filter_speed_anomalies,
    sanitize_non_finite,
    settle_on_survivors,
)
from dog_tracks.io import normalise_fixes, order_fixes
from dog_tracks.steps import derive_headings, derive_step_metrics


def run_movement_pipeline(fixes: pd.DataFrame, config: MovementConfig | None = None) -> pd.DataFrame:
    """
    Turn raw fixes into fully enriched, finite steps ordered by (track_id, timestamp).
    Raises FixParseError when a timestamp or coordinate does not parse.
    """

    config = config or MovementConfig()

    df = order_fixes(normalise_fixes(fixes))
    df = derive_step_metrics(df, earth_radius_m=config.earth_radius_m)
    df = filter_speed_anomalies(df, max_speed_mps=config.max_speed_mps)
    if config.turn_reference == "surviving":
        df = settle_on_survivors(
            df,
            max_speed_mps=config.max_speed_mps,
            earth_radius_m=config.earth_radius_m,
        )
    logging.info("%d fixes left after speed filter", len(df))

    df = derive_headings(
        df,
        turn_reference=config.turn_reference,
        max_turn_gap_s=config.max_turn_gap_s,
        earth_radius_m=config.earth_radius_m,
    )
    df = drop_incomplete(sanitize_non_finite(df, DERIVED_NUMERIC_COLUMNS), DERIVED_NUMERIC_COLUMNS)
    logging.info(
        "Pipeline produced %d steps across %d tracks",
        len(df),
        df["track_id"].nunique(),
    )
    return df
