"""
Trajectory Metrics Engine
Derives path accuracy, phase, stability, efficiency, turning and motion
metrics from the position samples of a single flight.

This module analyzes one flight by:
1. Summarising positioning error overall and per axis group
2. Comparing waypoint holding against transit behaviour
3. Scoring stability from the spread of the error
4. Relating the flown distance to the ideal waypoint route
5. Detecting heading changes to quantify turning and smoothness

All methods are pure: inputs are never modified and a fresh metrics tree is
returned on every call.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..utils import (
    bearing_difference,
    calculate_bearing,
    format_error,
    format_percentage,
    path_length,
    planar_distance,
)
from . import statistics
from .constants import (
    DEFAULT_EFFICIENCY_RATIO,
    FAILING_GRADE,
    MAX_EFFICIENCY_RATIO,
    MAX_SPEED_FACTOR,
    MAX_STABILITY_SCORE,
    MIN_TURN_SEGMENT_M,
    PHASE_TRANSIT,
    PHASE_WAYPOINT,
    PHASES,
    QUALITY_GRADES,
    QUALITY_SCALE_FACTOR,
    SHARP_TURN_THRESHOLD_DEG,
    STABILITY_SCALE_FACTOR,
    TURN_THRESHOLD_DEG,
)
from .models import PositionSample, Vector3

logger = logging.getLogger(__name__)


class TrajectoryAnalyzer:
    """
    Computes the per-flight trajectory metrics tree.

    The analyzer keeps no state between calls; the constructor only fixes the
    tunable constants so alternative scales can be evaluated side by side.
    """

    def __init__(
        self,
        stability_scale: float = STABILITY_SCALE_FACTOR,
        default_efficiency: float = DEFAULT_EFFICIENCY_RATIO,
        turn_threshold_deg: float = TURN_THRESHOLD_DEG,
        sharp_turn_threshold_deg: float = SHARP_TURN_THRESHOLD_DEG,
    ):
        """
        Initialize trajectory analyzer.

        Args:
            stability_scale: Score points lost per meter of error spread
            default_efficiency: Ratio reported when no ideal path is usable
            turn_threshold_deg: Minimum heading change counted as a turn
            sharp_turn_threshold_deg: Minimum heading change for a sharp turn
        """
        self.stability_scale = stability_scale
        self.default_efficiency = default_efficiency
        self.turn_threshold_deg = turn_threshold_deg
        self.sharp_turn_threshold_deg = sharp_turn_threshold_deg

    def analyze(
        self,
        samples: Sequence[PositionSample],
        ideal_path: Optional[Sequence[Vector3]] = None,
    ) -> Dict[str, Any]:
        """
        Run all per-flight trajectory analyses.

        Args:
            samples: Time-ordered position samples of one flight
            ideal_path: Optional planned waypoint route

        Returns:
            Dictionary with path accuracy, basic stats, phase analysis,
            stability, efficiency, turn analysis and motion summary
        """
        logger.debug("Analyzing trajectory with %d samples", len(samples))

        path_accuracy = self.calculate_path_accuracy(samples)
        efficiency = self.calculate_efficiency(samples, ideal_path)

        return {
            "path_accuracy": path_accuracy,
            "basic_stats": self.calculate_basic_stats(samples),
            "phase_analysis": self.analyze_phases(samples),
            "stability_metrics": self.calculate_stability_metrics(samples),
            "trajectory_efficiency": efficiency,
            "turn_analysis": self.analyze_turns(samples),
            "motion_summary": self.calculate_motion_summary(
                samples, efficiency["actual_distance"], path_accuracy["average_error"]
            ),
        }

    def calculate_path_accuracy(self, samples: Sequence[PositionSample]) -> Dict[str, Any]:
        """Summarise positioning error overall, in the XY plane and in altitude."""
        errors = [s.error for s in samples]
        xy_errors = [s.error_xy for s in samples if s.error_xy is not None]
        z_errors = [s.error_z for s in samples if s.error_z is not None]

        overall = statistics.stats(errors)

        return {
            "average_error": overall["average"],
            "max_error": overall["max"],
            "min_error": overall["min"],
            "median_error": overall["median"],
            "total_points": len(errors),
            "xy_plane_accuracy": self._component_accuracy(xy_errors),
            "altitude_accuracy": self._component_accuracy(z_errors),
        }

    def _component_accuracy(self, errors: List[float]) -> Dict[str, float]:
        summary = statistics.stats(errors)
        return {
            "average": summary["average"],
            "max": summary["max"],
            "min": summary["min"],
            "count": len(errors),
        }

    def calculate_basic_stats(self, samples: Sequence[PositionSample]) -> Dict[str, Any]:
        """Count points per phase and list the waypoint indices visited."""
        sequence_indices = sorted(
            {s.sequence_index for s in samples if s.sequence_index is not None}
        )

        return {
            "total_points": len(samples),
            "waypoint_points": sum(1 for s in samples if s.phase == PHASE_WAYPOINT),
            "transit_points": sum(1 for s in samples if s.phase == PHASE_TRANSIT),
            "sequence_indices": sequence_indices,
        }

    def analyze_phases(self, samples: Sequence[PositionSample]) -> Dict[str, Dict[str, Any]]:
        """Compare error and stabilization between waypoint and transit phases."""
        return {
            phase: self._phase_metrics([s for s in samples if s.phase == phase])
            for phase in PHASES
        }

    def _phase_metrics(self, samples: List[PositionSample]) -> Dict[str, Any]:
        count = len(samples)
        stabilized = sum(1 for s in samples if s.stabilized)

        return {
            "count": count,
            "average_error": statistics.mean([s.error for s in samples]),
            "stabilized_count": stabilized,
            "stabilization_rate": stabilized / count if count else 0.0,
        }

    def calculate_stability_metrics(self, samples: Sequence[PositionSample]) -> Dict[str, Any]:
        """
        Calculate stabilization ratio and the stability score.

        The score drops linearly from 100 by ``stability_scale`` points per
        meter of error standard deviation and is clamped at 0.
        """
        total = len(samples)
        stabilized = sum(1 for s in samples if s.stabilized)
        error_variance = statistics.stddev([s.error for s in samples])

        return {
            "stabilization_ratio": stabilized / total if total else 0.0,
            "stabilized_points": stabilized,
            "unstabilized_points": total - stabilized,
            "error_variance": error_variance,
            "overall_stability_score": max(
                0.0, MAX_STABILITY_SCORE - error_variance * self.stability_scale
            ),
        }

    def calculate_efficiency(
        self,
        samples: Sequence[PositionSample],
        ideal_path: Optional[Sequence[Vector3]] = None,
    ) -> Dict[str, float]:
        """
        Relate the flown distance to the planned route length.

        Args:
            samples: Position samples of the flight
            ideal_path: Planned waypoints; fewer than two means no route

        Returns:
            Dictionary with actual/ideal distance, ratio and excess distance
        """
        actual_distance = path_length([s.position for s in samples])
        ideal_distance = path_length(ideal_path) if ideal_path and len(ideal_path) >= 2 else 0.0

        if ideal_distance <= 0:
            efficiency_ratio = self.default_efficiency
        elif actual_distance <= 0:
            efficiency_ratio = MAX_EFFICIENCY_RATIO
        else:
            efficiency_ratio = min(MAX_EFFICIENCY_RATIO, ideal_distance / actual_distance)

        return {
            "actual_distance": actual_distance,
            "ideal_distance": ideal_distance,
            "efficiency_ratio": efficiency_ratio,
            "excess_distance": actual_distance - ideal_distance,
        }

    def analyze_turns(self, samples: Sequence[PositionSample]) -> Dict[str, Any]:
        """
        Detect heading changes between consecutive movements.

        Movements shorter than MIN_TURN_SEGMENT_M in the XY plane are
        skipped because their heading is dominated by position noise.

        Returns:
            Dictionary with turn counts, turn rates, path smoothness and the
            individual turns
        """
        # (bearing, start sample, end sample) for each usable movement
        movements = []
        for i in range(1, len(samples)):
            prev, curr = samples[i - 1], samples[i]
            if planar_distance(prev.position, curr.position) < MIN_TURN_SEGMENT_M:
                continue
            movements.append((calculate_bearing(prev.position, curr.position), i - 1, i))

        if len(movements) < 2:
            return {
                "total_turns": 0,
                "sharp_turns": 0,
                "average_turn_rate": 0.0,
                "max_turn_rate": 0.0,
                "path_smoothness": 1.0,
                "turns": [],
            }

        changes = []
        turns = []
        for (b1, start, _), (b2, pivot, end) in zip(movements, movements[1:]):
            change = bearing_difference(b1, b2)
            changes.append(abs(change))

            if abs(change) <= self.turn_threshold_deg:
                continue

            elapsed = samples[end].time - samples[start].time
            turns.append({
                "index": pivot,
                "position": list(samples[pivot].position),
                "bearing_change": change,
                "sharpness": abs(change) / 180.0,
                "turn_rate": abs(change) / elapsed if elapsed > 0 else 0.0,
                "phase": samples[pivot].phase,
            })

        turn_rates = [t["turn_rate"] for t in turns]

        return {
            "total_turns": len(turns),
            "sharp_turns": sum(
                1 for t in turns if abs(t["bearing_change"]) > self.sharp_turn_threshold_deg
            ),
            "average_turn_rate": statistics.mean(turn_rates),
            "max_turn_rate": max(turn_rates) if turn_rates else 0.0,
            "path_smoothness": 1.0 - statistics.mean(changes) / 180.0,
            "turns": turns,
        }

    def calculate_motion_summary(
        self,
        samples: Sequence[PositionSample],
        actual_distance: float,
        average_error: float,
    ) -> Dict[str, float]:
        """
        Summarise duration and speed of the flight.

        No per-sample velocity is available, so the maximum speed is
        estimated as MAX_SPEED_FACTOR times the average speed.
        """
        duration = samples[-1].time - samples[0].time if samples else 0.0
        avg_speed = actual_distance / duration if duration > 0 else 0.0

        return {
            "duration": round(duration),
            "avg_speed": round(avg_speed, 2),
            "max_speed": round(avg_speed * MAX_SPEED_FACTOR, 2),
            "error_rate": round(average_error * 100, 2),
        }

    def generate_trajectory_report(
        self,
        samples: Sequence[PositionSample],
        ideal_path: Optional[Sequence[Vector3]] = None,
    ) -> Dict[str, Any]:
        """
        Build a display summary next to the detailed metrics.

        Returns:
            Dictionary with 'summary' (formatted strings) and 'detailed'
        """
        analysis = self.analyze(samples, ideal_path)

        return {
            "summary": {
                "average_accuracy": format_error(analysis["path_accuracy"]["average_error"]),
                "max_error": format_error(analysis["path_accuracy"]["max_error"]),
                "total_points": analysis["basic_stats"]["total_points"],
                "stabilization_rate": format_percentage(
                    analysis["stability_metrics"]["stabilization_ratio"]
                ),
                "efficiency_ratio": format_percentage(
                    analysis["trajectory_efficiency"]["efficiency_ratio"]
                ),
            },
            "detailed": analysis,
        }


def quality_assessment(average_error: float) -> Dict[str, Any]:
    """
    Convert an average positioning error into a 0-100 score and letter grade.

    Args:
        average_error: Mean positioning error in meters

    Returns:
        Dictionary with overall score, breakdown and grade
    """
    score = min(100.0, max(0.0, 100.0 - average_error * QUALITY_SCALE_FACTOR))

    return {
        "overall_score": round(score),
        "breakdown": {"accuracy": round(score)},
        "grade": assign_quality_grade(score),
    }


def assign_quality_grade(score: float) -> str:
    """Map a 0-100 score to a letter grade."""
    for threshold, grade in QUALITY_GRADES:
        if score >= threshold:
            return grade
    return FAILING_GRADE
