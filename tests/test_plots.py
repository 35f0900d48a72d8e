import numpy as np
import pandas as pd

from dog_tracks.plots import animate_tracks, plot_speed_histogram, plot_tracks, plot_turn_angle_boxplot


def _steps():
    t0 = pd.Timestamp("2023-05-01 08:00:00", tz="UTC")
    n = 12
    return pd.DataFrame(
        {
            "track_id": ["A"] * (n // 2) + ["B"] * (n // 2),
            "timestamp": [t0 + pd.Timedelta(seconds=10 * i) for i in range(n)],
            "longitude": np.linspace(13.0, 13.01, n),
            "latitude": np.linspace(52.0, 52.02, n),
            "speed_mps": np.linspace(0.5, 3.0, n),
            "turn_angle_rad": np.linspace(0.0, 1.5, n),
            "land_use_class": ["forest", "urban", None] * (n // 3),
        }
    )


def test_static_plots_written(tmp_path):
    steps = _steps()
    plot_tracks(steps, tmp_path / "tracks.png")
    plot_speed_histogram(steps, tmp_path / "speed.png", bins=5)
    plot_turn_angle_boxplot(steps, tmp_path / "turn.png")
    for name in ("tracks.png", "speed.png", "turn.png"):
        assert (tmp_path / name).stat().st_size > 0


def test_boxplot_falls_back_to_track_id(tmp_path):
    steps = _steps().drop(columns="land_use_class")
    plot_turn_angle_boxplot(steps, tmp_path / "figs" / "turn.png")
    assert (tmp_path / "figs" / "turn.png").exists()


def test_animation_written(tmp_path):
    out = tmp_path / "tracks.gif"
    animate_tracks(_steps(), out, fps=5, max_frames=4)
    assert out.stat().st_size > 0


def test_empty_input_writes_nothing(tmp_path):
    empty = _steps().iloc[:0]
    plot_tracks(empty, tmp_path / "tracks.png")
    animate_tracks(empty, tmp_path / "tracks.gif")
    assert not any(tmp_path.iterdir())
