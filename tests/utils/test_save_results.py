"""Tests for saving assignment results."""

import dataclasses
import json

import pandas as pd
import pytest

from rideassign.config.params import IOParams, RideassignParams
from rideassign.core_types import AssignmentResult, DriverAssignment
from rideassign.utils.save_results import save_assignment_results
from rideassign.utils.time_measurement import TimeMeasurement


@pytest.fixture
def result():
    return AssignmentResult(
        assignments=[
            DriverAssignment("d1", ["r1", "r3"]),
            DriverAssignment("d2", ["r2"]),
        ],
        real_base_cost=104.5,
        total_penalty=0.0,
        total_cost=105,
        unassigned_ride_ids=["r4"],
        time_measurements=[
            TimeMeasurement("global", 0.5, 0.1, 0.01, 0.0, 0.0),
        ],
    )


@pytest.fixture
def params(tmp_path):
    return dataclasses.replace(RideassignParams(), io=IOParams(results_dir=tmp_path))


def test_json_output(result, params, tmp_path):
    path = save_assignment_results(result, params)

    assert path.parent == tmp_path
    assert path.name.startswith("assignment_results_")
    assert path.suffix == ".json"

    payload = json.loads(path.read_text())
    assert payload["Result"]["assignments"][0] == {"driverId": "d1", "rideIds": ["r1", "r3"]}
    assert payload["Result"]["totalCost"] == 105
    assert payload["Result"]["unassignedRideIds"] == ["r4"]
    assert payload["Summary"] == {
        "Assigned Rides": 3,
        "Unassigned Rides": 1,
        "Drivers Used": 2,
    }
    assert payload["Parameters"]["cost"]["hourly_rate"] == 30.0
    assert payload["Parameters"]["io"]["results_dir"] == str(tmp_path)
    assert payload["Time Measurements"][0]["span_name"] == "global"


def test_json_without_time_measurements(result, params):
    result.time_measurements = None
    payload = json.loads(save_assignment_results(result, params).read_text())
    assert "Time Measurements" not in payload


def test_csv_output(result, params, tmp_path):
    path = save_assignment_results(result, params, filename=tmp_path / "out.csv", format="csv")

    df = pd.read_csv(path, dtype=str)
    assert df["Driver_ID"].tolist() == ["d1", "d1", "d2"]
    assert df["Ride_ID"].tolist() == ["r1", "r3", "r2"]
    assert df["Sequence"].tolist() == ["1", "2", "1"]


def test_csv_with_no_assignments(params, tmp_path):
    path = save_assignment_results(
        AssignmentResult(), params, filename=tmp_path / "empty.csv", format="csv"
    )
    assert pd.read_csv(path).columns.tolist() == ["Driver_ID", "Sequence", "Ride_ID"]


def test_format_defaults_to_params(result, tmp_path):
    params = dataclasses.replace(
        RideassignParams(), io=IOParams(results_dir=tmp_path, format="csv")
    )
    assert save_assignment_results(result, params).suffix == ".csv"


def test_creates_missing_directories(result, params, tmp_path):
    target = tmp_path / "nested" / "dir" / "run.json"
    assert save_assignment_results(result, params, filename=target) == target
    assert target.exists()


def test_unsupported_format(result, params):
    with pytest.raises(ValueError, match="Unsupported output format"):
        save_assignment_results(result, params, format="xlsx")
