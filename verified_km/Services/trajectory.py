# verified_km/Services/trajectory.py
"""
Trajectory Distance Estimator
=============================
Converts the ordered GPS fixes of a work session into a single verified
distance in kilometers.

Architecture:
- Input: sequence of GpsFix (ascending by timestamp, never re-sorted here)
- Output: DistanceEstimate (verified_km rounded to 2 decimals + flags)
- Pure: no I/O, no logging, no shared state
- Total: every input sequence produces a result, nothing is raised
  (naive timestamps are taken as UTC, so mixed sequences still compare)

Noise filter (applied to each RAW consecutive pair of fixes):
    d           = haversine(prev, curr)
    max_distance = max_speed_kmh / 3600 * (t_curr - t_prev)
    accepted    = d <= max_distance and d < jump_threshold_km

A rejected segment contributes nothing and the next pair is still compared
neighbor-to-neighbor, so one corrupted fix discards the segments on both of
its sides and the gap is not bridged.

Functions:
- haversine_km(): Great-circle distance between two coordinates
- is_plausible_segment(): Speed bound + jump threshold check
- estimate_verified_distance(): Full estimation over a fix sequence
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence


DEFAULT_EARTH_RADIUS_KM = 6371.0
DEFAULT_MAX_SPEED_KMH = 150.0
DEFAULT_JUMP_THRESHOLD_KM = 10.0


@dataclass(frozen=True)
class GpsFix:
    """One timestamped GPS coordinate reading."""
    timestamp: datetime
    latitude: float
    longitude: float


@dataclass(frozen=True)
class EstimatorConfig:
    """Constants of the estimator, overridable per call."""
    earth_radius_km: float = DEFAULT_EARTH_RADIUS_KM
    max_speed_kmh: float = DEFAULT_MAX_SPEED_KMH
    jump_threshold_km: float = DEFAULT_JUMP_THRESHOLD_KM

    @classmethod
    def from_settings(cls, settings) -> "EstimatorConfig":
        return cls(
            earth_radius_km=settings.EARTH_RADIUS_KM,
            max_speed_kmh=settings.MAX_SPEED_KMH,
            jump_threshold_km=settings.JUMP_THRESHOLD_KM,
        )


@dataclass(frozen=True)
class DistanceEstimate:
    """
    Result of an estimation.

    verified_km is the only figure persisted; the counters are diagnostics.
    """
    verified_km: float
    insufficient: bool
    points: int
    accepted_segments: int = 0
    rejected_segments: int = 0


# ==========================================================
# GEOMETRY
# ==========================================================

def haversine_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_km: float = DEFAULT_EARTH_RADIUS_KM
) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Formula:
        a = sin²(Δlat/2) + cos(lat1) * cos(lat2) * sin²(Δlon/2)
        c = 2 * atan2(√a, √(1−a))
        d = R * c

    Args:
        lat1, lon1: First point (decimal degrees)
        lat2, lon2: Second point (decimal degrees)
        radius_km: Sphere radius (default 6371 km)

    Returns:
        float: Distance in kilometers

    Examples:
        >>> round(haversine_km(12.9716, 77.5946, 12.9720, 77.5950), 2)
        0.06
        >>> haversine_km(10.5, -74.8, 10.5, -74.8)
        0.0
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    # Rounding can push `a` just outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return radius_km * c


def as_utc(ts: datetime) -> datetime:
    # Naive timestamps are read as UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _round_half_up(value: float, digits: int = 2) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


# ==========================================================
# NOISE FILTER
# ==========================================================

def is_plausible_segment(
    distance_km: float,
    elapsed_seconds: float,
    config: EstimatorConfig
) -> bool:
    """
    Decide whether a segment is real movement or GPS noise.

    Edge Cases:
        - elapsed_seconds == 0 → bound is 0, any movement is rejected
        - elapsed_seconds < 0 → bound is negative, always rejected
        - distance_km == bound → accepted (inclusive)
    """
    max_distance = (config.max_speed_kmh / 3600) * elapsed_seconds
    return distance_km <= max_distance and distance_km < config.jump_threshold_km


# ==========================================================
# ESTIMATOR
# ==========================================================

def estimate_verified_distance(
    fixes: Sequence[GpsFix],
    config: Optional[EstimatorConfig] = None
) -> DistanceEstimate:
    """
    Compute the verified distance travelled over an ordered fix sequence.

    Args:
        fixes: Fixes ordered by timestamp ascending (caller's guarantee)
        config: Estimator constants (defaults: R=6371, 150 km/h, 10 km)

    Returns:
        DistanceEstimate: verified_km rounded to 2 decimals (half-up).
            insufficient=True with 0.0 when fewer than 2 fixes are given.

    Examples:
        >>> from datetime import datetime, timedelta, timezone
        >>> t0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        >>> estimate_verified_distance([
        ...     GpsFix(t0, 12.9716, 77.5946),
        ...     GpsFix(t0 + timedelta(seconds=60), 12.9720, 77.5950),
        ... ]).verified_km
        0.06
    """
    config = config or EstimatorConfig()
    points = len(fixes)

    if points < 2:
        return DistanceEstimate(verified_km=0.0, insufficient=True, points=points)

    total_km = 0.0
    accepted = 0
    rejected = 0

    for prev, curr in zip(fixes, fixes[1:]):
        distance_km = haversine_km(
            prev.latitude,
            prev.longitude,
            curr.latitude,
            curr.longitude,
            radius_km=config.earth_radius_km
        )
        elapsed_seconds = (as_utc(curr.timestamp) - as_utc(prev.timestamp)).total_seconds()

        if is_plausible_segment(distance_km, elapsed_seconds, config):
            total_km += distance_km
            accepted += 1
        else:
            rejected += 1

    return DistanceEstimate(
        verified_km=_round_half_up(total_km),
        insufficient=False,
        points=points,
        accepted_segments=accepted,
        rejected_segments=rejected
    )
