"""
Main Flight Analyzer
Coordinates all analysis components.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from . import cross_flight
from .models import FlightRecord, PositionSample, Vector3
from .network_impact import NetworkImpactAnalyzer
from .trajectory import TrajectoryAnalyzer, quality_assessment

logger = logging.getLogger(__name__)


class FlightAnalyzer:
    """
    Main analyzer coordinating all analysis components.

    Holds no flight data; every method works only on its arguments.
    """

    def __init__(
        self,
        trajectory_analyzer: Optional[TrajectoryAnalyzer] = None,
        network_analyzer: Optional[NetworkImpactAnalyzer] = None,
    ):
        """
        Initialize flight analyzer.

        Args:
            trajectory_analyzer: Per-flight trajectory engine (default settings if None)
            network_analyzer: Network impact engine (default if None)
        """
        self.trajectory = trajectory_analyzer or TrajectoryAnalyzer()
        self.network = network_analyzer or NetworkImpactAnalyzer()

    def analyze_flight(
        self,
        samples: Sequence[PositionSample],
        ideal_path: Optional[Sequence[Vector3]] = None,
    ) -> Dict[str, Any]:
        """
        Compute the complete metrics tree of one flight.

        Args:
            samples: Time-ordered position samples
            ideal_path: Optional planned waypoint route

        Returns:
            Trajectory metrics including network impact and quality assessment
        """
        metrics = self.trajectory.analyze(samples, ideal_path)
        metrics["network_impact"] = self.network.analyze(samples)
        metrics["quality_assessment"] = quality_assessment(
            metrics["path_accuracy"]["average_error"]
        )

        logger.debug(
            "Flight analyzed: avg error %.4f m, stability %.1f, efficiency %.3f",
            metrics["path_accuracy"]["average_error"],
            metrics["stability_metrics"]["overall_stability_score"],
            metrics["trajectory_efficiency"]["efficiency_ratio"],
        )

        return metrics

    def generate_report(
        self,
        samples: Sequence[PositionSample],
        ideal_path: Optional[Sequence[Vector3]] = None,
    ) -> Dict[str, Any]:
        """Formatted summary plus the detailed trajectory metrics."""
        return self.trajectory.generate_trajectory_report(samples, ideal_path)

    def compare_flights(self, flights: Sequence[FlightRecord]) -> Dict[str, Any]:
        """
        Compare headline metrics across flights.

        Returns:
            Dictionary with per-flight metrics, insights and summary
        """
        comparisons = [
            {
                "flight_id": f.flight_id,
                "flight_name": f.flight_name,
                "created_at": f.created_at,
                "metrics": {
                    "overall_stability_score": cross_flight.stability_score(f),
                    "efficiency_ratio": cross_flight.efficiency_ratio(f),
                    "path_smoothness": cross_flight.path_smoothness(f),
                    "network_correlation": cross_flight.network_correlation(f),
                    "average_error": cross_flight.average_error(f),
                    "total_turns": f.metric("turn_analysis", "total_turns", default=0),
                    "stabilization_ratio": f.metric("stability_metrics", "stabilization_ratio"),
                },
            }
            for f in flights
        ]

        return {
            "flights": comparisons,
            "insights": cross_flight.comparative_insights(flights),
            "summary": cross_flight.comparison_summary(flights),
        }

    def analyze_patterns(self, flights: Sequence[FlightRecord]) -> Dict[str, Any]:
        """Run only pattern analysis."""
        return cross_flight.analyze_flight_patterns(flights)

    def performance_trends(
        self,
        flights: Sequence[FlightRecord],
        metric: str = "accuracy",
        period: str = "daily",
    ) -> Dict[str, Any]:
        """
        Bucket a metric over time and summarise its direction.

        Returns:
            Dictionary with metric, period, trend series and summary
        """
        trends = cross_flight.performance_trends(flights, metric, period)

        return {
            "metric": metric,
            "period": period,
            "trends": trends,
            "summary": cross_flight.trend_summary(trends),
        }
