"""Configuration helpers for the dog tracks pipeline.

Provides YAML loading, small utilities for accessing nested configuration
values with defaults, and the typed movement settings used by the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

TURN_REFERENCES = ("contiguous", "surviving")


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load a YAML configuration file."""

    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def get_nested(config: Dict[str, Any], keys: list[str], default: Any) -> Any:
    """Retrieve a nested value from a config dict with a default."""

    current: Any = config
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


@dataclass(frozen=True)
class MovementConfig:
    """Tunable heuristics of the movement pipeline.

    Attributes
    ----------
    max_speed_mps:
        Exclusive speed ceiling; steps at or above it are dropped as GPS
        artefacts.
    earth_radius_m:
        Sphere radius used by the haversine distance.
    turn_reference:
        ``"contiguous"`` only measures a turning angle against the raw
        predecessor of a fix, ``"surviving"`` measures it against whichever
        fix survived the speed filter before it.
    max_turn_gap_s:
        Optional upper bound on the time between the two headings compared by
        a turning angle.
    """

    max_speed_mps: float = 10.0
    earth_radius_m: float = 6_371_000.0
    turn_reference: str = "contiguous"
    max_turn_gap_s: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.max_speed_mps > 0:
            raise ValueError(f"max_speed_mps must be positive, got {self.max_speed_mps}")
        if not self.earth_radius_m > 0:
            raise ValueError(f"earth_radius_m must be positive, got {self.earth_radius_m}")
        if self.turn_reference not in TURN_REFERENCES:
            raise ValueError(
                f"Unsupported turn_reference: {self.turn_reference} (expected one of {TURN_REFERENCES})"
            )
        if self.max_turn_gap_s is not None and not self.max_turn_gap_s > 0:
            raise ValueError(f"max_turn_gap_s must be positive, got {self.max_turn_gap_s}")


def movement_config_from_dict(movement_cfg: Dict[str, Any] | None) -> MovementConfig:
    """Build a :class:`MovementConfig` from the ``movement`` config section."""

    movement_cfg = movement_cfg or {}
    max_gap = movement_cfg.get("max_turn_gap_s")
    return MovementConfig(
        max_speed_mps=float(movement_cfg.get("max_speed_mps", 10.0)),
        earth_radius_m=float(movement_cfg.get("earth_radius_m", 6_371_000.0)),
        turn_reference=str(movement_cfg.get("turn_reference", "contiguous")).lower(),
        max_turn_gap_s=float(max_gap) if max_gap is not None else None,
    )
