"""
Tests for cross-flight analytics.
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from utap.analysis import cross_flight
from utap.analysis.models import FlightRecord


def make_flight(flight_id, created_at, error=0.02, stability=90.0, efficiency=0.9,
                smoothness=0.8, correlation=0.0, battery=4.1, response=0.0):
    """Build a FlightRecord carrying only the metrics cross-flight analytics read."""
    return FlightRecord(
        flight_id=flight_id,
        flight_name=f"Flight {flight_id}",
        created_at=created_at,
        metrics={
            "path_accuracy": {"average_error": error},
            "stability_metrics": {"overall_stability_score": stability},
            "trajectory_efficiency": {"efficiency_ratio": efficiency},
            "turn_analysis": {"path_smoothness": smoothness},
            "network_impact": {"correlation": {"coefficient": correlation}},
        },
        battery_start_voltage=battery,
        response_time=response,
    )


@pytest.fixture
def two_flights():
    return [
        make_flight("a", datetime(2024, 3, 1, 10), error=0.03, stability=90.0, efficiency=0.80),
        make_flight("b", datetime(2024, 3, 2, 10), error=0.01, stability=60.0, efficiency=0.95),
    ]


class TestTrendDirection:
    """Tests for trend_direction()."""

    def test_increasing(self):
        """Rising series of at least four values."""
        assert cross_flight.trend_direction([1, 2, 3, 4]) == cross_flight.IMPROVING

    def test_decreasing(self):
        """Falling series."""
        assert cross_flight.trend_direction([4, 3, 2, 1]) == cross_flight.DECLINING

    def test_constant(self):
        """Flat series."""
        assert cross_flight.trend_direction([5, 5, 5, 5, 5]) == cross_flight.STABLE

    def test_within_threshold(self):
        """A 5% change is not a trend."""
        assert cross_flight.trend_direction([10, 10.5]) == cross_flight.STABLE

    @pytest.mark.parametrize("values", [[], [3.0]])
    def test_insufficient(self, values):
        """Fewer than two values cannot trend."""
        assert cross_flight.trend_direction(values) == cross_flight.INSUFFICIENT_DATA

    def test_zero_baseline(self):
        """Zero first half counts as a full change."""
        assert cross_flight.trend_direction([0, 0, 1, 1]) == cross_flight.IMPROVING
        assert cross_flight.trend_direction([0, 0, -1, -1]) == cross_flight.DECLINING
        assert cross_flight.trend_direction([0, 0, 0, 0]) == cross_flight.STABLE

    def test_odd_length_split(self):
        """The middle element belongs to the second half."""
        assert cross_flight.trend_direction([10, 12, 12]) == cross_flight.IMPROVING


class TestComparativeInsights:
    """Tests for comparative_insights()."""

    def test_best_flights(self, two_flights):
        """Best stability, efficiency and accuracy are named."""
        insights = {i["type"]: i for i in cross_flight.comparative_insights(two_flights)}

        assert insights["best_stability"]["flight_id"] == "a"
        assert "90.0%" in insights["best_stability"]["message"]
        assert insights["best_efficiency"]["flight_id"] == "b"
        assert "95.0%" in insights["best_efficiency"]["message"]
        assert insights["best_accuracy"]["flight_id"] == "b"
        assert "0.010m" in insights["best_accuracy"]["message"]
        assert "network_correlation" not in insights

    def test_ties_keep_earliest(self):
        """Equal values resolve to the first flight."""
        flights = [
            make_flight("first", datetime(2024, 1, 1)),
            make_flight("second", datetime(2024, 1, 2)),
        ]
        insights = cross_flight.comparative_insights(flights)
        assert all(i["flight_id"] == "first" for i in insights)

    def test_network_warning(self):
        """Mean correlation below -0.3 adds a warning."""
        flights = [
            make_flight("a", datetime(2024, 1, 1), correlation=-0.5),
            make_flight("b", datetime(2024, 1, 2), correlation=-0.2),
        ]
        insights = cross_flight.comparative_insights(flights)

        assert insights[-1]["type"] == "network_correlation"
        assert insights[-1]["severity"] == "warning"
        assert "-0.350" in insights[-1]["message"]

    def test_single_flight(self):
        """One flight cannot be compared."""
        insights = cross_flight.comparative_insights([make_flight("a", datetime(2024, 1, 1))])
        assert insights[0]["type"] == cross_flight.INSUFFICIENT_DATA


class TestComparisonSummary:
    """Tests for comparison_summary() and performance_variation()."""

    def test_averages(self, two_flights):
        """Percent-scaled averages of the headline metrics."""
        summary = cross_flight.comparison_summary(two_flights)

        assert summary["average_stability"] == pytest.approx(75.0)
        assert summary["average_efficiency"] == pytest.approx(87.5)
        assert summary["average_accuracy"] == pytest.approx(0.02)
        assert summary["average_smoothness"] == pytest.approx(80.0)
        assert summary["performance_variation"].startswith("High")

    @pytest.mark.parametrize("scores,label", [
        ([90, 92], "Low"), ([80, 100], "Medium"), ([50, 90], "High"),
    ])
    def test_variation_labels(self, scores, label):
        """Stddev below 5 is low, below 15 medium."""
        flights = [make_flight(str(i), datetime(2024, 1, 1), stability=s) for i, s in enumerate(scores)]
        assert cross_flight.performance_variation(flights).startswith(label)

    def test_single_flight(self):
        """Summary degrades for one flight."""
        summary = cross_flight.comparison_summary([make_flight("a", datetime(2024, 1, 1))])
        assert summary["performance_variation"] == "Insufficient data"
        assert summary["average_stability"] == 0.0


class TestPerformanceTrends:
    """Tests for period bucketing and trend series."""

    @pytest.mark.parametrize("created_at,period,key", [
        (datetime(2024, 3, 13, 15, 30), "daily", "2024-03-13"),
        (datetime(2024, 3, 13), "weekly", "2024-03-10"),
        (datetime(2024, 3, 10), "weekly", "2024-03-10"),
        (datetime(2024, 3, 16), "weekly", "2024-03-10"),
        (datetime(2024, 3, 13), "monthly", "2024-03"),
        (datetime(2024, 3, 13), "hourly", "2024-03-13"),
    ])
    def test_period_key(self, created_at, period, key):
        """Weekly buckets start on Sunday, unknown periods are daily."""
        assert cross_flight.period_key(created_at, period) == key

    def test_daily_grouping(self):
        """Flights on the same day are averaged."""
        flights = [
            make_flight("a", datetime(2024, 3, 1, 9), error=0.02),
            make_flight("b", datetime(2024, 3, 1, 15), error=0.04),
            make_flight("c", datetime(2024, 3, 2, 9), error=0.01),
        ]
        trends = cross_flight.performance_trends(flights, "accuracy", "daily")

        assert [t["period"] for t in trends] == ["2024-03-01", "2024-03-02"]
        assert trends[0]["value"] == pytest.approx(0.03)
        assert trends[0]["flight_count"] == 2
        assert trends[0]["date"] == datetime(2024, 3, 1, 9)
        assert trends[1]["flight_count"] == 1

    def test_sorted_by_date(self):
        """Out-of-order input still yields a time-ordered series."""
        flights = [
            make_flight("late", datetime(2024, 5, 1), stability=70),
            make_flight("early", datetime(2024, 3, 1), stability=90),
        ]
        trends = cross_flight.performance_trends(flights, "stability", "monthly")
        assert [t["period"] for t in trends] == ["2024-03", "2024-05"]
        assert [t["value"] for t in trends] == [90, 70]

    def test_response_time_metric(self):
        """Response time is read from the flight record."""
        flights = [make_flight("a", datetime(2024, 3, 1), response=120.0)]
        trends = cross_flight.performance_trends(flights, "response_time")
        assert trends[0]["value"] == 120.0

    def test_unknown_metric(self, caplog):
        """Unknown metrics report zeros with a warning."""
        flights = [make_flight("a", datetime(2024, 3, 1))]
        with caplog.at_level("WARNING"):
            trends = cross_flight.performance_trends(flights, "altitude")

        assert trends[0]["value"] == 0.0
        assert "altitude" in caplog.text

    def test_no_flights(self):
        """Empty history gives an empty series."""
        assert cross_flight.performance_trends([]) == []


class TestTrendSummary:
    """Tests for trend_summary()."""

    def test_improving(self):
        """First to last change above 5%."""
        summary = cross_flight.trend_summary([{"value": 80}, {"value": 82}, {"value": 88}])

        assert summary["trend"] == cross_flight.IMPROVING
        assert summary["overall_change"] == pytest.approx(10.0)
        assert summary["total_data_points"] == 3
        assert summary["average_value"] == pytest.approx(250 / 3)

    def test_stable_and_declining(self):
        """Small changes are stable, large drops declining."""
        assert cross_flight.trend_summary([{"value": 100}, {"value": 96}])["trend"] == cross_flight.STABLE
        assert cross_flight.trend_summary([{"value": 100}, {"value": 90}])["trend"] == cross_flight.DECLINING

    def test_insufficient(self):
        """A single point has no trend."""
        assert "message" in cross_flight.trend_summary([{"value": 1}])


class TestFlightPatterns:
    """Tests for common issues and pattern analysis."""

    def test_high_error_majority(self):
        """Six of ten flights above 0.1m is flagged, four is not."""
        flagged = [make_flight(str(i), datetime(2024, 1, 1), error=0.15 if i < 6 else 0.02)
                   for i in range(10)]
        clean = [make_flight(str(i), datetime(2024, 1, 1), error=0.15 if i < 4 else 0.02)
                 for i in range(10)]

        assert any("high positioning errors" in i for i in cross_flight.identify_common_issues(flagged))
        assert cross_flight.identify_common_issues(clean) == []

    def test_low_battery(self):
        """More than 30% low starting voltage is flagged; missing voltages are not low."""
        flights = [make_flight(str(i), datetime(2024, 1, 1), battery=3.7 if i < 4 else None)
                   for i in range(10)]
        issues = cross_flight.identify_common_issues(flights)
        assert issues == ["30% of flights started with low battery voltage (<3.9V)"]

        flights = [make_flight(str(i), datetime(2024, 1, 1), battery=3.7 if i < 3 else 4.2)
                   for i in range(10)]
        assert cross_flight.identify_common_issues(flights) == []

    def test_patterns(self):
        """Falling error reads as declining accuracy with a recalibration hint."""
        flights = [make_flight(str(i), datetime(2024, 1, i + 1), error=e, stability=80)
                   for i, e in enumerate([0.05, 0.05, 0.02, 0.02])]
        result = cross_flight.analyze_flight_patterns(flights)

        assert result["trends"] == {"accuracy": "declining", "stability": "stable"}
        assert "declining" in result["insights"][0]
        assert result["recommendations"] == ["Review and recalibrate positioning sensors"]

    def test_rising_error_reads_as_improving(self):
        """The accuracy trend compares raw error values."""
        flights = [make_flight(str(i), datetime(2024, 1, i + 1), error=e)
                   for i, e in enumerate([0.02, 0.02, 0.05, 0.05])]
        result = cross_flight.analyze_flight_patterns(flights)

        assert result["trends"]["accuracy"] == cross_flight.IMPROVING
        assert result["insights"] == ["Flight accuracy is improving over time"]
        assert result["recommendations"] == []

    def test_no_flights(self):
        """Empty history reports the absence of data."""
        result = cross_flight.analyze_flight_patterns([])

        assert result["trends"] == {}
        assert result["insights"] == ["No flight data available in the selected time range"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
