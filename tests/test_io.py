import pandas as pd
import pytest

from dog_tracks.io import FixParseError, load_fixes, normalise_fixes, order_fixes, save_dataframe


def test_load_fixes_renames_source_columns(tmp_path):
    path = tmp_path / "dogs.csv"
    path.write_text(
        "individual-local-identifier,timestamp,location-long,location-lat,extra\n"
        "Rex,2023-05-01 08:00:00,13.40,52.50,x\n"
        "Rex,2023-05-01 08:00:10,13.41,52.51,y\n",
        encoding="utf-8",
    )
    df = load_fixes(
        path,
        columns={
            "individual-local-identifier": "track_id",
            "location-long": "longitude",
            "location-lat": "latitude",
        },
    )
    assert list(df.columns) == ["track_id", "timestamp", "longitude", "latitude"]
    assert len(df) == 2


def test_load_fixes_missing_column(tmp_path):
    path = tmp_path / "dogs.csv"
    path.write_text("track_id,timestamp,longitude\nA,2023-05-01 08:00:00,1.0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="latitude"):
        load_fixes(path)


def test_load_fixes_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_fixes(tmp_path / "absent.csv")


def test_normalise_parses_types(three_step_track):
    df = normalise_fixes(three_step_track)
    assert pd.api.types.is_datetime64_any_dtype(df["timestamp"])
    assert str(df["timestamp"].dt.tz) == "UTC"
    assert df["longitude"].dtype == float


def test_normalise_rejects_bad_timestamp(three_step_track):
    bad = three_step_track.copy()
    bad.loc[1, "timestamp"] = "not a time"
    with pytest.raises(FixParseError):
        normalise_fixes(bad)


def test_normalise_rejects_bad_coordinate(three_step_track):
    bad = three_step_track.copy().astype({"latitude": object})
    bad.loc[2, "latitude"] = "north-ish"
    with pytest.raises(FixParseError):
        normalise_fixes(bad)


def test_normalise_rejects_missing_coordinate(three_step_track):
    bad = three_step_track.copy()
    bad.loc[0, "longitude"] = float("nan")
    with pytest.raises(FixParseError, match="longitude"):
        normalise_fixes(bad)


def test_order_fixes_is_stable_and_numbers_tracks(make_fixes):
    raw = make_fixes(
        [
            ("B", 10, 1.0, 1.0),
            ("A", 5, 2.0, 2.0),
            ("B", 0, 3.0, 3.0),
            ("A", 5, 4.0, 4.0),
        ]
    )
    ordered = order_fixes(normalise_fixes(raw))
    assert ordered["track_id"].tolist() == ["A", "A", "B", "B"]
    # tied timestamps keep input order, duplicates survive
    assert ordered["longitude"].tolist() == [2.0, 4.0, 3.0, 1.0]
    assert ordered["fix_seq"].tolist() == [0, 1, 0, 1]


def test_save_dataframe_creates_parent(tmp_path):
    out = tmp_path / "nested" / "out.csv"
    save_dataframe(pd.DataFrame({"a": [1, 2]}), out)
    assert out.exists()


def test_normalise_accepts_mixed_iso8601_forms():
    raw = pd.DataFrame(
        {
            "track_id": ["A", "A", "A"],
            "timestamp": ["2023-05-01 08:00:00", "2023-05-01 08:00:10.500", "2023-05-01T08:00:20Z"],
            "longitude": [0.0, 0.0001, 0.0002],
            "latitude": [0.0, 0.0, 0.0],
        }
    )
    df = normalise_fixes(raw)
    elapsed = df["timestamp"].diff().dt.total_seconds().tolist()[1:]
    assert elapsed == [10.5, 9.5]


def test_normalise_rejects_blank_track_id(three_step_track):
    bad = three_step_track.copy()
    bad.loc[1, "track_id"] = float("nan")
    with pytest.raises(FixParseError, match="track_id"):
        normalise_fixes(bad)
    bad.loc[1, "track_id"] = "   "
    with pytest.raises(FixParseError, match="track_id"):
        normalise_fixes(bad)


def test_load_fixes_rejects_empty_track_id_cell(tmp_path):
    path = tmp_path / "dogs.csv"
    path.write_text(
        "track_id,timestamp,longitude,latitude\n"
        "A,2023-05-01 08:00:00,1.0,1.0\n"
        ",2023-05-01 08:00:10,1.0,1.0\n",
        encoding="utf-8",
    )
    with pytest.raises(FixParseError, match="track_id"):
        normalise_fixes(load_fixes(path))
