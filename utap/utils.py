"""
UTAP Utility Functions
Common geometry helpers and display formatting for trajectory data.
"""

from math import atan2, degrees, sqrt
from typing import Optional, Sequence

from .config import Constants

Point = Sequence[float]


def euclidean_distance(p1: Point, p2: Point) -> float:
    """
    Calculate straight-line distance between two 3D points.

    Args:
        p1: First point as (x, y, z) in meters
        p2: Second point as (x, y, z) in meters

    Returns:
        Distance in meters

    Example:
        >>> euclidean_distance((0, 0, 0), (3, 4, 0))
        5.0
    """
    return sqrt((p2[0] - p1[0]) ** 2 + (p2[1] - p1[1]) ** 2 + (p2[2] - p1[2]) ** 2)


def planar_distance(p1: Point, p2: Point) -> float:
    """Distance between two points projected onto the XY plane."""
    return sqrt((p2[0] - p1[0]) ** 2 + (p2[1] - p1[1]) ** 2)


def path_length(points: Sequence[Point]) -> float:
    """
    Sum of distances between consecutive points.

    Args:
        points: Ordered sequence of (x, y, z) points

    Returns:
        Total length in meters, 0 for fewer than two points
    """
    total = 0.0
    for i in range(1, len(points)):
        total += euclidean_distance(points[i - 1], points[i])
    return total


def calculate_bearing(p1: Point, p2: Point) -> float:
    """
    Calculate planar heading from point 1 to point 2.

    The heading is measured in the XY plane, clockwise from the +Y axis,
    so that +Y is 0 degrees and +X is 90 degrees.

    Args:
        p1: Start point (x, y, ...)
        p2: End point (x, y, ...)

    Returns:
        Bearing in degrees (0-360)
    """
    bearing = degrees(atan2(p2[0] - p1[0], p2[1] - p1[1]))
    return (bearing + 360) % 360


def bearing_difference(b1: float, b2: float) -> float:
    """
    Signed smallest rotation from bearing b1 to bearing b2.

    Returns:
        Change in degrees within (-180, 180]

    Example:
        >>> bearing_difference(350, 10)
        20.0
    """
    diff = (b2 - b1) % 360
    if diff > Constants.DEGREES_HALF_TURN:
        diff -= 360
    return float(diff)


def format_error(error_m: Optional[float], precision: int = 4) -> str:
    """
    Format a positioning error in meters.

    Example:
        >>> format_error(0.0213)
        '0.0213m'
    """
    if error_m is None:
        return "N/A"
    return f"{error_m:.{precision}f}m"


def format_percentage(ratio: Optional[float]) -> str:
    """
    Format a 0-1 ratio as a percentage string.

    Example:
        >>> format_percentage(0.856)
        '85.6%'
    """
    if ratio is None:
        return "N/A"
    return f"{ratio * 100:.1f}%"


def format_speed(velocity_ms: Optional[float], unit: str = "ms") -> str:
    """
    Format speed in various units.

    Args:
        velocity_ms: Velocity in meters per second
        unit: Output unit ('ms', 'kmh')

    Returns:
        Formatted speed string
    """
    if velocity_ms is None:
        return "N/A"

    if unit == "kmh":
        return f"{velocity_ms * Constants.MS_TO_KMH:.1f} km/h"
    return f"{velocity_ms:.2f} m/s"


def format_duration(seconds: Optional[int]) -> str:
    """
    Format duration in human-readable format.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string

    Example:
        >>> format_duration(3665)
        '1h 1m 5s'
    """
    if seconds is None or seconds < 0:
        return "N/A"

    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
