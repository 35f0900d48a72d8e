"""Plotting utilities for the movement report.

Provides simple matplotlib helpers for track maps, speed histograms,
turning-angle boxplots and an animated GIF of the tracks over time.
"""

from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.animation import FuncAnimation, PillowWriter


def plot_tracks(df: pd.DataFrame, output_path: Path) -> None:
    """Plot each track as a longitude/latitude line."""

    if df.empty:
        logging.warning("No fixes to plot; skipping %s", output_path)
        return

    fig, ax = plt.subplots(figsize=(8, 8))
    for track_id, track in df.groupby("track_id"):
        ax.plot(track["longitude"], track["latitude"], linewidth=0.8, label=str(track_id))
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title("Dog tracks")
    ax.legend(loc="best", fontsize=8)
    ax.grid(True, alpha=0.3)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


def plot_speed_histogram(df: pd.DataFrame, output_path: Path, bins: int = 50) -> None:
    """Overlay step-speed histograms, one per track."""

    if df.empty:
        logging.warning("No steps to plot; skipping %s", output_path)
        return

    fig, ax = plt.subplots(figsize=(8, 4))
    for track_id, track in df.groupby("track_id"):
        ax.hist(track["speed_mps"], bins=bins, alpha=0.5, label=str(track_id))
    ax.set_xlabel("Speed (m/s)")
    ax.set_ylabel("Steps")
    ax.set_title("Step speed")
    ax.legend(loc="best", fontsize=8)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


def plot_turn_angle_boxplot(df: pd.DataFrame, output_path: Path, by: str = "land_use_class") -> None:
    """Boxplot of turning angles grouped by ``by`` (track_id when the column is absent)."""

    if df.empty:
        logging.warning("No steps to plot; skipping %s", output_path)
        return
    if by not in df.columns:
        by = "track_id"

    groups = df[by].astype(object).where(df[by].notna(), "unclassified").astype(str)
    labels = sorted(groups.unique())
    data = [df.loc[groups == label, "turn_angle_rad"].to_numpy() for label in labels]

    fig, ax = plt.subplots(figsize=(max(6, len(labels) * 0.8), 4))
    ax.boxplot(data)
    ax.set_xticks(range(1, len(labels) + 1))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_ylabel("Turning angle (rad)")
    ax.set_title(f"Turning angle by {by}")
    fig.tight_layout()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


def animate_tracks(
    df: pd.DataFrame,
    output_path: Path,
    fps: int = 10,
    max_frames: int | None = None,
) -> None:
    """Write a GIF where each frame shows every track up to a point in time."""

    if df.empty:
        logging.warning("No fixes to animate; skipping %s", output_path)
        return

    times = df["timestamp"].drop_duplicates().sort_values().reset_index(drop=True)
    if max_frames is not None and len(times) > max_frames:
        idx = np.linspace(0, len(times) - 1, max_frames).round().astype(int)
        times = times.iloc[idx].reset_index(drop=True)

    tracks = {track_id: track for track_id, track in df.groupby("track_id")}
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.set_xlim(df["longitude"].min(), df["longitude"].max())
    ax.set_ylim(df["latitude"].min(), df["latitude"].max())
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    lines = {track_id: ax.plot([], [], linewidth=0.8, label=str(track_id))[0] for track_id in tracks}
    ax.legend(loc="upper right", fontsize=8)
    title = ax.set_title("")

    def _draw(frame: int):
        until = times.iloc[frame]
        for track_id, track in tracks.items():
            seen = track[track["timestamp"] <= until]
            lines[track_id].set_data(seen["longitude"].to_numpy(), seen["latitude"].to_numpy())
        title.set_text(str(until))
        return [*lines.values(), title]

    anim = FuncAnimation(fig, _draw, frames=len(times), blit=False)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    anim.save(str(output_path), writer=PillowWriter(fps=fps))
    plt.close(fig)
    logging.info("Saved animation with %d frames to %s", len(times), output_path)
