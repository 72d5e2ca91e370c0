"""
UTAP Analysis Component

Trajectory metrics and cross-flight analytics for UAV telemetry.

Main Classes:
    - FlightAnalyzer: Main coordinator for all analyses
    - TrajectoryAnalyzer: Per-flight accuracy, stability, efficiency and turns
    - NetworkImpactAnalyzer: Network quality bucketing and error correlation
    - ReportGenerator: JSON and text report generation

Example:
    >>> from utap.analysis import FlightAnalyzer, samples_from_dicts
    >>> analyzer = FlightAnalyzer()
    >>> metrics = analyzer.analyze_flight(samples_from_dicts(raw['position_data']))
"""

# Main analysis components
from .analyzer import FlightAnalyzer
from .trajectory import TrajectoryAnalyzer, quality_assessment
from .network_impact import NetworkImpactAnalyzer
from .reporter import ReportGenerator
from .models import (
    FlightRecord,
    PositionSample,
    ideal_path_from_sequence,
    sample_from_dict,
    samples_from_dicts,
)

# Utilities
from . import constants
from . import cross_flight
from . import statistics

__all__ = [
    # Main classes
    'FlightAnalyzer',
    'TrajectoryAnalyzer',
    'NetworkImpactAnalyzer',
    'ReportGenerator',

    # Data model
    'FlightRecord',
    'PositionSample',
    'ideal_path_from_sequence',
    'sample_from_dict',
    'samples_from_dicts',
    'quality_assessment',

    # Modules
    'constants',
    'cross_flight',
    'statistics',
]
