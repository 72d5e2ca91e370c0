"""
Sample Statistics
Descriptive statistics shared by the per-flight and cross-flight analyses.

Every function accepts empty input and returns zeros instead of raising.
"""

from math import sqrt
from typing import Dict, Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for empty input."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def stats(values: Sequence[float]) -> Dict[str, float]:
    """
    Summarise a series of values.

    The median is the element at index ``len // 2`` of the sorted copy, so
    for even lengths the upper of the two middle values is used and no
    interpolation takes place.

    Args:
        values: Sequence of numbers

    Returns:
        Dictionary with average, median, min and max
    """
    if not values:
        return {"average": 0.0, "median": 0.0, "min": 0.0, "max": 0.0}

    ordered = sorted(values)

    return {
        "average": sum(values) / len(values),
        "median": ordered[len(ordered) // 2],
        "min": ordered[0],
        "max": ordered[-1],
    }


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation, 0.0 for empty input."""
    if not values:
        return 0.0
    avg = mean(values)
    return sqrt(mean([(v - avg) ** 2 for v in values]))


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equally long series.

    Args:
        x: First series
        y: Second series

    Returns:
        Coefficient in [-1, 1]; 0.0 if the series differ in length, are
        empty, or either of them is constant
    """
    n = len(x)
    if n != len(y) or n == 0:
        return 0.0

    if min(x) == max(x) or min(y) == max(y):
        return 0.0

    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_xx = sum(a * a for a in x)
    sum_yy = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_xx - sum_x * sum_x) * (n * sum_yy - sum_y * sum_y)

    if spread <= 0:
        return 0.0

    return max(-1.0, min(1.0, numerator / sqrt(spread)))
