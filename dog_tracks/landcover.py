"""Attach land-cover classes to fixes.

Fix coordinates are reprojected from WGS84 into the polygon layer's CRS and
matched with a point-in-polygon spatial join.
"""

from __future__ import annotations

import logging
from pathlib import Path

import geopandas as gpd
import numpy as np
import pandas as pd
from pyproj import Transformer

LAND_USE_COLUMN = "land_use_class"


def load_landcover(path: str | Path, class_column: str) -> gpd.GeoDataFrame:
    """Read a land-cover polygon layer and check it can be joined."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Land-cover layer not found: {path}")

    layer = gpd.read_file(path)
    if layer.crs is None:
        raise ValueError(f"Land-cover layer {path} has no coordinate reference system")
    if class_column not in layer.columns:
        raise ValueError(f"Land-cover layer {path} has no column {class_column!r}")
    logging.info("Loaded %d land-cover polygons from %s (CRS=%s)", len(layer), path, layer.crs)
    return layer


def join_landcover(fixes: pd.DataFrame, landcover: gpd.GeoDataFrame, class_column: str) -> pd.DataFrame:
    """Return ``fixes`` with a ``land_use_class`` column, one row per input row.

    Fixes outside every polygon get a missing class. A fix on a polygon
    boundary counts as inside it. Where polygons overlap or share an edge
    the one listed first in the layer wins.
    """

    if landcover.crs is None:
        raise ValueError("Land-cover layer has no coordinate reference system")
    if class_column not in landcover.columns:
        raise ValueError(f"Land-cover layer has no column {class_column!r}")

    out = fixes.reset_index(drop=True).copy()
    if out.empty:
        out[LAND_USE_COLUMN] = pd.Series(dtype=object)
        return out

    transformer = Transformer.from_crs("epsg:4326", landcover.crs, always_xy=True)
    x, y = transformer.transform(out["longitude"].to_numpy(), out["latitude"].to_numpy())
    points = gpd.GeoDataFrame(
        {"_row": np.arange(len(out))},
        geometry=gpd.points_from_xy(x, y),
        crs=landcover.crs,
    )

    polygons = landcover[[class_column, landcover.geometry.name]].reset_index(drop=True)
    joined = gpd.sjoin(points, polygons, how="left", predicate="intersects")
    joined = joined.sort_values(["_row", "index_right"], kind="mergesort", na_position="last")
    joined = joined.drop_duplicates("_row", keep="first")

    out[LAND_USE_COLUMN] = joined[class_column].to_numpy()
    unmatched = int(out[LAND_USE_COLUMN].isna().sum())
    logging.info("Joined land cover onto %d fixes (%d outside every polygon)", len(out), unmatched)
    return out
