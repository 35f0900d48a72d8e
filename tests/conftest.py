import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

BASE_TIME = pd.Timestamp("2023-05-01 08:00:00")


@pytest.fixture
def make_fixes():
    """Build a raw fix table from (track_id, seconds, longitude, latitude) tuples."""

    def _make(rows):
        return pd.DataFrame(
            {
                "track_id": [r[0] for r in rows],
                "timestamp": [(BASE_TIME + pd.Timedelta(seconds=r[1])).isoformat() for r in rows],
                "longitude": [r[2] for r in rows],
                "latitude": [r[3] for r in rows],
            }
        )

    return _make


@pytest.fixture
def three_step_track(make_fixes):
    return make_fixes(
        [
            ("A", 0, 0.0, 0.0),
            ("A", 10, 0.0001, 0.0),
            ("A", 20, 0.0001, 0.0001),
        ]
    )


@pytest.fixture
def gap_track(make_fixes):
    # the fix at t=15 repeats the t=10 position and is dropped as a zero-speed step
    return make_fixes(
        [
            ("G", 0, 0.0, 0.0),
            ("G", 10, 0.0001, 0.0),
            ("G", 15, 0.0001, 0.0),
            ("G", 20, 0.0001, 0.0001),
            ("G", 25, 0.0001, 0.0002),
        ]
    )
