"""
Network Impact Analysis
Relates link quality to positioning error by bucketing samples on their
network quality score and correlating quality with error.
"""

import logging
from typing import Any, Dict, List, Sequence

from . import statistics
from .constants import (
    ADAPTIVE_CONTROL_CORRELATION,
    DEFAULT_NETWORK_QUALITY,
    MIN_EXCELLENT_PERCENTAGE,
    MODERATE_CORRELATION,
    NEGATIVE_IMPACT_CORRELATION,
    NETWORK_QUALITY_BUCKETS,
    POOR_NETWORK_PERCENTAGE,
    POSITIVE_ANOMALY_CORRELATION,
    STRONG_CORRELATION,
)
from .models import PositionSample

logger = logging.getLogger(__name__)


def network_quality_of(sample: PositionSample) -> float:
    """Network quality of a sample, treating a missing value as perfect."""
    if sample.network_quality is None:
        return DEFAULT_NETWORK_QUALITY
    return sample.network_quality


def classify_quality(quality: float) -> str:
    """
    Map a 0-100 quality score to its bucket name.

    Lower bounds are inclusive: 90 is 'excellent', 89.9 is 'good'.
    """
    for name, (low, high) in NETWORK_QUALITY_BUCKETS.items():
        if low <= quality < high:
            return name
    # Only NaN falls through every half-open range
    return "poor"


def correlation_strength(coefficient: float) -> str:
    """Label the magnitude of a correlation coefficient."""
    magnitude = abs(coefficient)
    if magnitude > STRONG_CORRELATION:
        return "strong"
    if magnitude > MODERATE_CORRELATION:
        return "moderate"
    return "weak"


def interpret_correlation(coefficient: float) -> str:
    """Describe what a quality/error correlation means for the flight."""
    if coefficient < NEGATIVE_IMPACT_CORRELATION:
        return "Network degradation significantly impacts flight performance"
    if coefficient > POSITIVE_ANOMALY_CORRELATION:
        return "Unexpected positive correlation - investigate data quality"
    return "Network quality has minimal direct impact on flight errors"


class NetworkImpactAnalyzer:
    """
    Segments a flight by network quality and measures the error impact.
    """

    def analyze(self, samples: Sequence[PositionSample]) -> Dict[str, Any]:
        """
        Analyze how network quality relates to positioning error.

        Args:
            samples: Position samples of one flight

        Returns:
            Dictionary with per-bucket segment analysis, the overall
            correlation and rule-based recommendations
        """
        qualities = [network_quality_of(s) for s in samples]
        errors = [s.error for s in samples]

        segments = self.segment_samples(samples)
        coefficient = statistics.correlation(qualities, errors)

        logger.debug(
            "Network impact over %d samples: buckets=%s r=%.3f",
            len(samples), {k: v["count"] for k, v in segments.items()}, coefficient,
        )

        quality_stats = statistics.stats(qualities)

        return {
            "segment_analysis": segments,
            "correlation": {
                "coefficient": round(coefficient, 3),
                "strength": correlation_strength(coefficient),
                "interpretation": interpret_correlation(coefficient),
            },
            "average_network_quality": quality_stats["average"],
            "network_quality_range": {
                "min": quality_stats["min"],
                "max": quality_stats["max"],
            },
            "recommendations": self.generate_recommendations(segments, coefficient),
        }

    def segment_samples(self, samples: Sequence[PositionSample]) -> Dict[str, Dict[str, float]]:
        """
        Group samples into quality buckets and summarise each one.

        Buckets without samples are left out so that "no data" can be told
        apart from "zero error".
        """
        buckets: Dict[str, List[PositionSample]] = {name: [] for name in NETWORK_QUALITY_BUCKETS}
        for sample in samples:
            buckets[classify_quality(network_quality_of(sample))].append(sample)

        total = len(samples)
        segments = {}
        for name, members in buckets.items():
            if not members:
                continue
            count = len(members)
            segments[name] = {
                "count": count,
                "percentage": count / total * 100,
                "average_error": statistics.mean([s.error for s in members]),
                "stabilization_rate": sum(1 for s in members if s.stabilized) / count * 100,
            }

        return segments

    def generate_recommendations(
        self, segments: Dict[str, Dict[str, float]], coefficient: float
    ) -> List[Dict[str, str]]:
        """Apply the fixed recommendation rules to a segment analysis."""
        recommendations = []

        poor = segments.get("poor")
        if poor and round(poor["percentage"], 1) > POOR_NETWORK_PERCENTAGE:
            recommendations.append({
                "priority": "high",
                "message": f"{poor['percentage']:.1f}% of flight time had poor network quality (<50%)",
                "action": "Consider upgrading communication equipment or optimizing antenna placement",
            })

        if coefficient < ADAPTIVE_CONTROL_CORRELATION:
            recommendations.append({
                "priority": "medium",
                "message": "Strong negative correlation between network quality and flight errors",
                "action": "Implement adaptive flight algorithms that adjust to network conditions",
            })

        excellent = segments.get("excellent")
        if excellent and round(excellent["percentage"], 1) < MIN_EXCELLENT_PERCENTAGE:
            recommendations.append({
                "priority": "medium",
                "message": "Less than 50% of flight time had excellent network quality",
                "action": "Evaluate flight paths to maximize time in high-quality network zones",
            })

        return recommendations
