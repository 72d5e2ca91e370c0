"""
Cross-Flight Analytics
Aggregates the stored metrics of many flights into trends, rankings and
recurring issues.

All functions take time-ordered FlightRecord sequences, never modify them,
and degrade to explicit "insufficient data" results for degenerate input.
"""

import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Sequence

from . import statistics
from .constants import (
    HIGH_ERROR_FLIGHT_SHARE,
    HIGH_ERROR_THRESHOLD_M,
    LOW_BATTERY_FLIGHT_SHARE,
    LOW_BATTERY_THRESHOLD_V,
    LOW_VARIATION_STDDEV,
    MEDIUM_VARIATION_STDDEV,
    MIN_FLIGHTS_FOR_COMPARISON,
    MIN_TREND_POINTS,
    NETWORK_SENSITIVITY_CORRELATION,
    TREND_CHANGE_THRESHOLD_PCT,
    TREND_SUMMARY_THRESHOLD_PCT,
)
from .models import FlightRecord

logger = logging.getLogger(__name__)

IMPROVING = "improving"
DECLINING = "declining"
STABLE = "stable"
INSUFFICIENT_DATA = "insufficient_data"


# --- Metric Accessors ---


def average_error(flight: FlightRecord) -> float:
    return flight.metric("path_accuracy", "average_error")


def stability_score(flight: FlightRecord) -> float:
    return flight.metric("stability_metrics", "overall_stability_score")


def efficiency_ratio(flight: FlightRecord) -> float:
    return flight.metric("trajectory_efficiency", "efficiency_ratio")


def path_smoothness(flight: FlightRecord) -> float:
    return flight.metric("turn_analysis", "path_smoothness")


def network_correlation(flight: FlightRecord) -> float:
    return flight.metric("network_impact", "correlation", "coefficient")


def response_time(flight: FlightRecord) -> float:
    return flight.response_time


TREND_METRICS: Dict[str, Callable[[FlightRecord], float]] = {
    "accuracy": average_error,
    "stability": stability_score,
    "efficiency": efficiency_ratio,
    "response_time": response_time,
}


# --- Trend Detection ---


def _relative_change(first: float, second: float) -> float:
    """Percent change from first to second; a zero baseline maps to +/-100."""
    if first == 0:
        if second == 0:
            return 0.0
        return 100.0 if second > 0 else -100.0
    return (second - first) / first * 100


def trend_direction(values: Sequence[float]) -> str:
    """
    Classify a metric series by comparing the averages of its two halves.

    The series is split by index at ``len // 2``; a relative change of more
    than TREND_CHANGE_THRESHOLD_PCT in either direction is a trend.

    Args:
        values: Metric values in time order

    Returns:
        'improving', 'declining', 'stable' or 'insufficient_data'
    """
    if len(values) < MIN_TREND_POINTS:
        return INSUFFICIENT_DATA

    split = len(values) // 2
    change = _relative_change(statistics.mean(values[:split]), statistics.mean(values[split:]))

    if change > TREND_CHANGE_THRESHOLD_PCT:
        return IMPROVING
    if change < -TREND_CHANGE_THRESHOLD_PCT:
        return DECLINING
    return STABLE


# --- Flight Comparison ---


def _best(flights: Sequence[FlightRecord], key: Callable[[FlightRecord], float],
          lowest: bool = False) -> FlightRecord:
    """Best flight by key; the earliest one wins ties."""
    best = flights[0]
    for flight in flights[1:]:
        if (key(flight) < key(best)) if lowest else (key(flight) > key(best)):
            best = flight
    return best


def comparative_insights(flights: Sequence[FlightRecord]) -> List[Dict[str, Any]]:
    """
    Name the best flights and flag systemic network sensitivity.

    Args:
        flights: Flights to compare

    Returns:
        List of insight dictionaries with type, message and flight_id
    """
    if len(flights) < MIN_FLIGHTS_FOR_COMPARISON:
        return [{
            "type": INSUFFICIENT_DATA,
            "message": f"At least {MIN_FLIGHTS_FOR_COMPARISON} flights are required for comparison",
        }]

    best_stability = _best(flights, stability_score)
    best_efficiency = _best(flights, efficiency_ratio)
    best_accuracy = _best(flights, average_error, lowest=True)

    insights = [
        {
            "type": "best_stability",
            "message": f"{best_stability.flight_name} showed the highest stability with "
                       f"{stability_score(best_stability):.1f}% score",
            "flight_id": best_stability.flight_id,
        },
        {
            "type": "best_efficiency",
            "message": f"{best_efficiency.flight_name} achieved the best efficiency with "
                       f"{efficiency_ratio(best_efficiency) * 100:.1f}% path optimization",
            "flight_id": best_efficiency.flight_id,
        },
        {
            "type": "best_accuracy",
            "message": f"{best_accuracy.flight_name} had the lowest average error of "
                       f"{average_error(best_accuracy):.3f}m",
            "flight_id": best_accuracy.flight_id,
        },
    ]

    avg_correlation = statistics.mean([network_correlation(f) for f in flights])
    if avg_correlation < NETWORK_SENSITIVITY_CORRELATION:
        insights.append({
            "type": "network_correlation",
            "message": f"Strong negative correlation ({avg_correlation:.3f}) between network "
                       f"quality and flight errors across all flights",
            "severity": "warning",
        })

    return insights


def performance_variation(flights: Sequence[FlightRecord]) -> str:
    """Label how consistent stability scores are across flights."""
    spread = statistics.stddev([stability_score(f) for f in flights])

    if spread < LOW_VARIATION_STDDEV:
        return "Low - Consistent performance"
    if spread < MEDIUM_VARIATION_STDDEV:
        return "Medium - Some variation in performance"
    return "High - Significant performance differences"


def comparison_summary(flights: Sequence[FlightRecord]) -> Dict[str, Any]:
    """
    Average the headline metrics of a set of flights.

    Returns:
        Dictionary with average stability (%), efficiency (%), accuracy (m),
        smoothness (%) and the performance variation label
    """
    if len(flights) < MIN_FLIGHTS_FOR_COMPARISON:
        return {
            "average_stability": 0.0,
            "average_efficiency": 0.0,
            "average_accuracy": 0.0,
            "average_smoothness": 0.0,
            "performance_variation": "Insufficient data",
        }

    return {
        "average_stability": statistics.mean([stability_score(f) for f in flights]),
        "average_efficiency": statistics.mean([efficiency_ratio(f) * 100 for f in flights]),
        "average_accuracy": statistics.mean([average_error(f) for f in flights]),
        "average_smoothness": statistics.mean([path_smoothness(f) * 100 for f in flights]),
        "performance_variation": performance_variation(flights),
    }


# --- Performance Trends ---


def period_key(created_at: datetime, period: str) -> str:
    """
    Calendar bucket key of a timestamp.

    Weekly keys are the date of the Sunday that starts the week.

    Example:
        >>> period_key(datetime(2024, 3, 13), 'weekly')
        '2024-03-10'
    """
    if period == "monthly":
        return created_at.strftime("%Y-%m")
    if period == "weekly":
        days_since_sunday = (created_at.weekday() + 1) % 7
        return (created_at.date() - timedelta(days=days_since_sunday)).isoformat()
    return created_at.date().isoformat()


def performance_trends(
    flights: Sequence[FlightRecord], metric: str = "accuracy", period: str = "daily"
) -> List[Dict[str, Any]]:
    """
    Average a metric per calendar bucket.

    Args:
        flights: Flights ordered by creation time
        metric: 'accuracy', 'stability', 'efficiency' or 'response_time'
        period: 'daily', 'weekly' or 'monthly' (unknown values mean daily)

    Returns:
        Time-ordered list of {period, value, flight_count, date}
    """
    accessor = TREND_METRICS.get(metric)
    if accessor is None:
        logger.warning("Unknown trend metric %r, reporting zero values", metric)

    grouped: "OrderedDict[str, List[FlightRecord]]" = OrderedDict()
    for flight in flights:
        grouped.setdefault(period_key(flight.created_at, period), []).append(flight)

    trends = []
    for key, members in grouped.items():
        value = statistics.mean([accessor(f) for f in members]) if accessor else 0.0
        trends.append({
            "period": key,
            "value": value,
            "flight_count": len(members),
            "date": members[0].created_at,
        })

    return sorted(trends, key=lambda t: t["date"])


def trend_summary(trends: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Compare the first and last point of a performance trend series.

    Returns:
        Dictionary with point count, overall change (%), trend label and
        average value, or a message when fewer than two points exist
    """
    if len(trends) < MIN_TREND_POINTS:
        return {"message": "Insufficient data for trend analysis"}

    change = _relative_change(trends[0]["value"], trends[-1]["value"])

    if change > TREND_SUMMARY_THRESHOLD_PCT:
        trend = IMPROVING
    elif change < -TREND_SUMMARY_THRESHOLD_PCT:
        trend = DECLINING
    else:
        trend = STABLE

    return {
        "total_data_points": len(trends),
        "overall_change": change,
        "trend": trend,
        "average_value": statistics.mean([t["value"] for t in trends]),
    }


# --- Pattern Detection ---


def identify_common_issues(flights: Sequence[FlightRecord]) -> List[str]:
    """
    Flag problems shared by a large share of flights.

    Returns:
        List of human-readable issue descriptions
    """
    issues = []

    high_error = [f for f in flights if average_error(f) > HIGH_ERROR_THRESHOLD_M]
    if len(high_error) > len(flights) * HIGH_ERROR_FLIGHT_SHARE:
        issues.append("More than 50% of flights show high positioning errors (>10cm)")

    low_battery = [
        f for f in flights
        if f.battery_start_voltage is not None
        and f.battery_start_voltage < LOW_BATTERY_THRESHOLD_V
    ]
    if len(low_battery) > len(flights) * LOW_BATTERY_FLIGHT_SHARE:
        issues.append("30% of flights started with low battery voltage (<3.9V)")

    return issues


def analyze_flight_patterns(flights: Sequence[FlightRecord]) -> Dict[str, Any]:
    """
    Summarise accuracy and stability trends across a flight history.

    Args:
        flights: Flights ordered by creation time

    Returns:
        Dictionary with trends, insights and recommendations
    """
    if not flights:
        return {
            "trends": {},
            "insights": ["No flight data available in the selected time range"],
            "recommendations": [],
        }

    trends = {
        "accuracy": trend_direction([average_error(f) for f in flights]),
        "stability": trend_direction([stability_score(f) for f in flights]),
    }
    insights = []
    recommendations = []

    # Halves comparison on raw error values: a rising error reads as 'improving'
    if trends["accuracy"] == IMPROVING:
        insights.append("Flight accuracy is improving over time")
    elif trends["accuracy"] == DECLINING:
        insights.append("Flight accuracy is declining - consider system maintenance")
        recommendations.append("Review and recalibrate positioning sensors")

    insights.extend(identify_common_issues(flights))

    return {
        "trends": trends,
        "insights": insights,
        "recommendations": recommendations,
    }
