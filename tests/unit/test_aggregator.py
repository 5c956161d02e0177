"""Tests for result aggregation."""

import pytest

from rideassign.assignment.aggregator import (
    build_assignment_result,
    fairness_stats,
    round_half_up,
)
from rideassign.assignment.scheduler import ScheduleBook


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, 0), (70.0, 70), (70.4, 70), (70.5, 71), (71.5, 72), (2.5, 3), (-0.5, -1)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_fairness_stats_population_std():
    stats = fairness_stats({"d1": 2, "d2": 4, "d3": 0})

    assert stats.min == 0
    assert stats.max == 4
    assert stats.avg == pytest.approx(2.0)
    # Population variance: (0 + 4 + 4) / 3
    assert stats.std_dev == pytest.approx((8 / 3) ** 0.5)
    assert stats.counts_per_driver == {"d1": 2, "d2": 4, "d3": 0}


def test_fairness_stats_empty_fleet():
    stats = fairness_stats({})
    assert (stats.min, stats.max, stats.avg, stats.std_dev) == (0, 0, 0.0, 0.0)


def test_fairness_to_dict_lists_every_driver():
    data = fairness_stats({"d1": 1, "d2": 0}).to_dict()
    assert data["stdDev"] == pytest.approx(0.5)
    assert data["countsPerDriver"] == [
        {"driverId": "d1", "count": 1},
        {"driverId": "d2", "count": 0},
    ]


class TestBuildAssignmentResult:
    @pytest.fixture
    def book(self, driver_factory, ride_factory):
        book = ScheduleBook([driver_factory("d1"), driver_factory("d2"), driver_factory("d3")])
        book.commit("d1", ride_factory("r1"), base_cost=30.25, penalty=0.0)
        book.commit("d1", ride_factory("r3", start=600, end=620), base_cost=10.0, penalty=1.0)
        book.commit("d3", ride_factory("r2", start=500, end=520), base_cost=20.0, penalty=0.0)
        return book

    @pytest.fixture
    def rides(self, ride_factory):
        return [
            ride_factory("r1"),
            ride_factory("r2", start=500, end=520),
            ride_factory("r3", start=600, end=620),
            ride_factory("r4", start=700, end=720),
            ride_factory("r0", start=100, end=120),
        ]

    def test_drivers_without_rides_omitted(self, book, rides):
        result = build_assignment_result(book, rides)
        assert [a.driver_id for a in result.assignments] == ["d1", "d3"]
        assert result.rides_for("d1") == ["r1", "r3"]

    def test_cost_totals(self, book, rides):
        result = build_assignment_result(book, rides)
        assert result.real_base_cost == pytest.approx(60.25)
        assert result.total_penalty == pytest.approx(1.0)
        assert result.total_cost == 61

    def test_unassigned_in_input_order(self, book, rides):
        result = build_assignment_result(book, rides)
        assert result.unassigned_ride_ids == ["r4", "r0"]

    def test_fairness_only_when_enabled(self, book, rides):
        assert build_assignment_result(book, rides).fairness is None

        result = build_assignment_result(book, rides, fairness_enabled=True)
        assert result.fairness.counts_per_driver == {"d1": 2, "d2": 0, "d3": 1}
        assert result.fairness.min == 0

    def test_wire_shape(self, book, rides):
        data = build_assignment_result(book, rides, fairness_enabled=True).to_dict()
        assert data["assignments"] == [
            {"driverId": "d1", "rideIds": ["r1", "r3"]},
            {"driverId": "d3", "rideIds": ["r2"]},
        ]
        assert data["totalCost"] == 61
        assert set(data) == {
            "assignments",
            "realBaseCost",
            "totalPenalty",
            "totalCost",
            "unassignedRideIds",
            "fairness",
        }

    def test_no_fairness_key_when_disabled(self, book, rides):
        assert "fairness" not in build_assignment_result(book, rides).to_dict()

    def test_dataframe_rows_follow_commit_order(self, book, rides):
        df = build_assignment_result(book, rides).to_dataframe()
        assert list(df.columns) == ["Driver_ID", "Sequence", "Ride_ID"]
        assert df.values.tolist() == [["d1", 1, "r1"], ["d1", 2, "r3"], ["d3", 1, "r2"]]
