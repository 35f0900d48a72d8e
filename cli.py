"""CLI entry point for the dog tracks report.

Orchestrates loading, movement metrics, anomaly filtering, the optional
land-cover join, summary tables, and optional plotting and animation.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict

from dog_tracks.config import get_nested, load_config, movement_config_from_dict
from dog_tracks.io import column_map_from_config, load_fixes, save_dataframe
from dog_tracks.pipeline import run_movement_pipeline
from dog_tracks.summary import land_use_share, summarise_tracks


def configure_logging(log_cfg: Dict[str, object]) -> None:
    """Configure root logger with both file and console handlers."""

    log_dir = Path(log_cfg.get("dir", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    filename = log_cfg.get("filename", "dog_tracks.log")
    log_path = log_dir / filename
    level_name = str(log_cfg.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s - %(levelname)s - %(message)s"
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(fmt))
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(fmt))

    root.addHandler(file_handler)
    root.addHandler(stream_handler)
    root.info("Logging to %s (level=%s)", log_path, level_name)


def main(config_path: str = "config/tracks.yaml") -> int:
    cfg = load_config(config_path)

    configure_logging(cfg.get("logging", {}) or {})

    input_cfg = cfg.get("input", {}) or {}
    csv_path = input_cfg.get("csv", "data/dogs.csv")
    movement = movement_config_from_dict(cfg.get("movement", {}))
    logging.info(
        "Movement settings: max_speed=%.1f m/s, turn_reference=%s, max_turn_gap_s=%s",
        movement.max_speed_mps,
        movement.turn_reference,
        movement.max_turn_gap_s,
    )

    raw = load_fixes(csv_path, columns=column_map_from_config(input_cfg))
    steps = run_movement_pipeline(raw, movement)

    landcover_cfg = cfg.get("landcover", {}) or {}
    joined = False
    if landcover_cfg.get("enabled", False) and landcover_cfg.get("path"):
        from dog_tracks.landcover import join_landcover, load_landcover

        class_column = str(landcover_cfg.get("class_column", "land_use"))
        layer = load_landcover(landcover_cfg["path"], class_column)
        steps = join_landcover(steps, layer, class_column)
        joined = True

    output_cfg = cfg.get("output", {}) or {}
    output_dir = Path(output_cfg.get("dir", "output"))
    csv_dir = output_dir / "csv"
    plots_dir = output_dir / "figures"

    save_dataframe(steps, csv_dir / "fixes_enriched.csv")
    save_dataframe(summarise_tracks(steps), csv_dir / "track_summary.csv")
    if joined:
        save_dataframe(land_use_share(steps), csv_dir / "land_use_share.csv")

    if output_cfg.get("save_plots", False):
        from dog_tracks.plots import plot_speed_histogram, plot_tracks, plot_turn_angle_boxplot

        plot_tracks(steps, plots_dir / "tracks.png")
        plot_speed_histogram(steps, plots_dir / "speed_histogram.png")
        plot_turn_angle_boxplot(steps, plots_dir / "turn_angle_boxplot.png")

    if output_cfg.get("save_animation", False):
        from dog_tracks.plots import animate_tracks

        max_frames = get_nested(cfg, ["output", "animation_max_frames"], 200)
        animate_tracks(
            steps,
            plots_dir / "tracks.gif",
            fps=int(output_cfg.get("animation_fps", 10)),
            max_frames=int(max_frames) if max_frames is not None else None,
        )

    logging.info("Report written to %s", output_dir)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Dog GPS movement report.")
    parser.add_argument(
        "-c",
        "--config",
        default="config/tracks.yaml",
        help="Path to YAML config file.",
    )
    args = parser.parse_args()
    raise SystemExit(main(args.config))
