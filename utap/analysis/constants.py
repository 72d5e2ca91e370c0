"""
Analysis Constants
"""

# Flight phases
PHASE_WAYPOINT = "waypoint"
PHASE_TRANSIT = "transit"
PHASES = (PHASE_WAYPOINT, PHASE_TRANSIT)

# Stability scoring
STABILITY_SCALE_FACTOR: float = 1000.0  # Score points lost per meter of error spread
MAX_STABILITY_SCORE: float = 100.0

# Trajectory efficiency
DEFAULT_EFFICIENCY_RATIO: float = 0.85  # Used when no usable ideal path exists
MAX_EFFICIENCY_RATIO: float = 1.0

# Turn analysis
TURN_THRESHOLD_DEG: float = 15.0  # Heading change counted as a turn
SHARP_TURN_THRESHOLD_DEG: float = 45.0  # Heading change counted as a sharp turn
MIN_TURN_SEGMENT_M: float = 0.01  # Shorter movements carry no usable heading

# Motion summary
MAX_SPEED_FACTOR: float = 1.5  # Max speed estimate relative to average speed

# Quality assessment (0.01m error = 90 points, 0.1m error = 0 points)
QUALITY_SCALE_FACTOR: float = 1000.0
QUALITY_GRADES = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]
FAILING_GRADE = "F"

# Network quality buckets (lower bound inclusive)
DEFAULT_NETWORK_QUALITY: float = 100.0
NETWORK_QUALITY_BUCKETS = {
    "excellent": (90, float("inf")),
    "good": (70, 90),
    "fair": (50, 70),
    "poor": (float("-inf"), 50),
}

# Correlation strength (absolute value, exclusive lower bounds)
STRONG_CORRELATION: float = 0.7
MODERATE_CORRELATION: float = 0.3
NEGATIVE_IMPACT_CORRELATION: float = -0.3  # Network degradation hurts accuracy
POSITIVE_ANOMALY_CORRELATION: float = 0.3  # Suspicious positive relation

# Network recommendations
POOR_NETWORK_PERCENTAGE: float = 10.0  # Max tolerated % of samples in poor bucket
ADAPTIVE_CONTROL_CORRELATION: float = -0.5
MIN_EXCELLENT_PERCENTAGE: float = 50.0

# Cross-flight trends
TREND_CHANGE_THRESHOLD_PCT: float = 10.0  # Halves comparison dead band
TREND_SUMMARY_THRESHOLD_PCT: float = 5.0  # First/last comparison dead band
MIN_TREND_POINTS = 2
MIN_FLIGHTS_FOR_COMPARISON = 2
NETWORK_SENSITIVITY_CORRELATION: float = -0.3  # Mean correlation flagged across flights

# Performance variation (stddev of stability scores)
LOW_VARIATION_STDDEV: float = 5.0
MEDIUM_VARIATION_STDDEV: float = 15.0

# Common issues
HIGH_ERROR_THRESHOLD_M: float = 0.1
HIGH_ERROR_FLIGHT_SHARE: float = 0.5
LOW_BATTERY_THRESHOLD_V: float = 3.9
LOW_BATTERY_FLIGHT_SHARE: float = 0.3
