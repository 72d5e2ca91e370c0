"""
Flight Data Model
Typed containers for telemetry samples and stored flight records, plus
helpers that map raw upload dictionaries onto them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..utils import euclidean_distance, planar_distance
from .constants import PHASE_TRANSIT

Vector3 = Tuple[float, float, float]


@dataclass(frozen=True)
class PositionSample:
    """Represents a single telemetry observation of one flight."""

    x: float
    y: float
    z: float
    time: float
    error: float = 0.0
    phase: str = PHASE_TRANSIT
    stabilized: bool = False
    target: Optional[Vector3] = None
    error_xy: Optional[float] = None
    error_z: Optional[float] = None
    network_quality: Optional[float] = None
    sequence_index: Optional[int] = None

    @property
    def position(self) -> Vector3:
        """Position as an (x, y, z) tuple."""
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class FlightRecord:
    """Represents a stored flight with its computed trajectory metrics."""

    flight_id: str
    flight_name: str
    created_at: datetime
    metrics: Dict[str, Any] = field(default_factory=dict)
    battery_start_voltage: Optional[float] = None
    response_time: float = 0.0

    def metric(self, *path: str, default: float = 0.0) -> float:
        """
        Look up a nested value in the metrics tree.

        Example:
            >>> record.metric('stability_metrics', 'overall_stability_score')
            92.5
        """
        value: Any = self.metrics
        for key in path:
            if not isinstance(value, dict) or key not in value:
                return default
            value = value[key]
        return default if value is None else value


def _parse_target(raw: Any) -> Optional[Vector3]:
    """Accept a target given as {x, y, z} mapping or [x, y, z] list."""
    if raw is None:
        return None
    if isinstance(raw, dict):
        if any(raw.get(axis) is None for axis in ("x", "y", "z")):
            return None
        return (float(raw["x"]), float(raw["y"]), float(raw["z"]))
    if len(raw) < 3:
        return None
    return (float(raw[0]), float(raw[1]), float(raw[2]))


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def sample_from_dict(raw: Dict[str, Any]) -> PositionSample:
    """
    Build a PositionSample from a raw position record.

    Missing error components are derived from the target when one is
    present. Required keys (x, y, z, time) are not checked here; upstream
    validation is expected to have rejected records without them.

    Args:
        raw: Position record as found in the upload's position_data list

    Returns:
        Normalized sample
    """
    position = (float(raw["x"]), float(raw["y"]), float(raw["z"]))
    target = _parse_target(raw.get("target"))

    error = _optional_float(raw.get("error"))
    error_xy = _optional_float(raw.get("error_xy"))
    error_z = _optional_float(raw.get("error_z"))

    if target is not None:
        if error is None:
            error = euclidean_distance(position, target)
        if error_xy is None:
            error_xy = planar_distance(position, target)
        if error_z is None:
            error_z = abs(position[2] - target[2])

    quality = raw.get("networkQuality", raw.get("network_quality"))
    sequence_index = raw.get("sequence_index")

    return PositionSample(
        x=position[0],
        y=position[1],
        z=position[2],
        time=float(raw["time"]),
        error=error if error is not None else 0.0,
        phase=raw.get("phase") or PHASE_TRANSIT,
        stabilized=bool(raw.get("stabilized", False)),
        target=target,
        error_xy=error_xy,
        error_z=error_z,
        network_quality=_optional_float(quality),
        sequence_index=int(sequence_index) if sequence_index is not None else None,
    )


def samples_from_dicts(records: Sequence[Dict[str, Any]]) -> List[PositionSample]:
    """Normalize a list of raw position records."""
    return [sample_from_dict(record) for record in records]


def ideal_path_from_sequence(sequence: Optional[Sequence[Sequence[float]]]) -> List[Vector3]:
    """Convert an upload's waypoint sequence into (x, y, z) tuples."""
    if not sequence:
        return []
    return [(float(p[0]), float(p[1]), float(p[2])) for p in sequence]
