"""
UTAP - UAV Trajectory Analysis Platform

Turns recorded UAV flight telemetry into trajectory performance metrics and
compares those metrics across a pilot's flight history.

Components:
    - analysis: Trajectory metrics, network impact and cross-flight analytics
    - config: Runtime configuration
    - utils: Geometry and formatting helpers

Example:
    >>> from utap.analysis import FlightAnalyzer, samples_from_dicts
    >>> analyzer = FlightAnalyzer()
    >>> metrics = analyzer.analyze_flight(samples_from_dicts(position_data))
"""

# Component imports for easy access
from . import analysis
from . import utils
from . import config

UTAP_VERSION = "v1.0.0"

__version__ = UTAP_VERSION
__author__ = "UTAP Project"
__license__ = "MIT"

__all__ = [
    "analysis",
    "utils",
    "config",
]
