"""
Tests for the trajectory distance estimator (pure, no database).
"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from verified_km.Services import trajectory
from verified_km.Services.trajectory import (
    DistanceEstimate,
    EstimatorConfig,
    GpsFix,
    estimate_verified_distance,
    haversine_km,
    is_plausible_segment,
)

T0 = datetime(2025, 1, 2, 12, 0, 0, tzinfo=timezone.utc)


def fix(seconds, lat, lon):
    return GpsFix(timestamp=T0 + timedelta(seconds=seconds), latitude=lat, longitude=lon)


class TestHaversine:
    """Great-circle geometry"""

    def test_same_point_is_zero(self):
        assert haversine_km(10.5, -74.8, 10.5, -74.8) == 0.0

    def test_short_urban_segment(self):
        assert haversine_km(12.9716, 77.5946, 12.9720, 77.5950) == pytest.approx(0.0621, abs=1e-3)

    def test_one_degree_of_latitude(self):
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=1e-3)

    def test_antipodal_points_stay_finite(self):
        half_circumference = math.pi * 6371.0
        assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(half_circumference)
        assert haversine_km(90.0, 0.0, -90.0, 0.0) == pytest.approx(half_circumference)

    def test_custom_radius_scales_distance(self):
        base = haversine_km(0.0, 0.0, 1.0, 0.0)
        assert haversine_km(0.0, 0.0, 1.0, 0.0, radius_km=3185.5) == pytest.approx(base / 2)


class TestPlausibility:
    """Speed bound and jump threshold"""

    def test_boundary_distance_is_accepted(self):
        config = EstimatorConfig(max_speed_kmh=3600)
        assert is_plausible_segment(1.0, 1.0, config) is True

    def test_just_over_boundary_is_rejected(self):
        config = EstimatorConfig(max_speed_kmh=3600)
        assert is_plausible_segment(1.0000001, 1.0, config) is False

    def test_zero_elapsed_rejects_movement(self):
        assert is_plausible_segment(0.01, 0.0, EstimatorConfig()) is False

    def test_zero_elapsed_zero_movement_is_accepted(self):
        assert is_plausible_segment(0.0, 0.0, EstimatorConfig()) is True

    def test_negative_elapsed_is_rejected(self):
        assert is_plausible_segment(0.01, -60.0, EstimatorConfig()) is False

    def test_jump_threshold_is_exclusive(self):
        config = EstimatorConfig(max_speed_kmh=100000)
        assert is_plausible_segment(9.999, 3600.0, config) is True
        assert is_plausible_segment(10.0, 3600.0, config) is False


class TestEstimateVerifiedDistance:
    """Full estimation over fix sequences"""

    @pytest.mark.parametrize("fixes", [[], [fix(0, 12.9716, 77.5946)]])
    def test_fewer_than_two_fixes_is_insufficient(self, fixes):
        result = estimate_verified_distance(fixes)
        assert result.verified_km == 0.0
        assert result.insufficient is True
        assert result.points == len(fixes)

    def test_two_plausible_fixes_equal_rounded_haversine(self):
        fixes = [fix(0, 12.9716, 77.5946), fix(60, 12.9720, 77.5950)]
        expected = round(haversine_km(12.9716, 77.5946, 12.9720, 77.5950), 2)

        result = estimate_verified_distance(fixes)

        assert result.verified_km == expected == 0.06
        assert result.insufficient is False
        assert result.points == 2
        assert result.accepted_segments == 1
        assert result.rejected_segments == 0

    def test_segment_over_jump_threshold_is_dropped_regardless_of_time(self):
        # 0.1 degree of latitude is ~11.1 km, well under the 150 km/h bound for one hour
        fixes = [fix(0, 12.0, 77.0), fix(3600, 12.1, 77.0)]

        result = estimate_verified_distance(fixes)

        assert result.verified_km == 0.0
        assert result.insufficient is False
        assert result.rejected_segments == 1

    def test_duplicate_timestamps_contribute_nothing(self):
        fixes = [fix(0, 12.9716, 77.5946), fix(0, 12.9720, 77.5950)]
        assert estimate_verified_distance(fixes).verified_km == 0.0

    def test_out_of_order_timestamps_contribute_nothing(self):
        fixes = [fix(60, 12.9716, 77.5946), fix(0, 12.9720, 77.5950)]
        result = estimate_verified_distance(fixes)
        assert result.verified_km == 0.0
        assert result.rejected_segments == 1

    def test_corrupted_middle_fix_discards_both_neighbouring_segments(self):
        fixes = [
            fix(0, 12.9716, 77.5946),
            fix(60, 12.9720, 77.5950),
            fix(120, 13.4220, 77.5950),  # ~50 km north
            fix(180, 12.9722, 77.5952),
        ]
        single_segment = round(haversine_km(12.9716, 77.5946, 12.9720, 77.5950), 2)

        result = estimate_verified_distance(fixes)

        assert result.verified_km == single_segment == 0.06
        assert result.accepted_segments == 1
        assert result.rejected_segments == 2

    def test_gap_after_corrupted_fix_is_not_bridged(self):
        # P2 -> P4 would be plausible, but only raw neighbours are compared
        fixes = [
            fix(0, 12.9716, 77.5946),
            fix(60, 13.4220, 77.5950),
            fix(120, 12.9800, 77.5946),
        ]
        assert estimate_verified_distance(fixes).verified_km == 0.0

    def test_accumulates_every_accepted_segment(self):
        fixes = [fix(i * 60, 12.97 + i * 0.001, 77.59) for i in range(11)]
        step = haversine_km(12.97, 77.59, 12.971, 77.59)

        result = estimate_verified_distance(fixes)

        assert result.verified_km == pytest.approx(round(10 * step, 2))
        assert result.accepted_segments == 10

    def test_zero_max_speed_rejects_all_movement(self):
        fixes = [fix(0, 12.9716, 77.5946), fix(60, 12.9720, 77.5950), fix(120, 12.9730, 77.5960)]
        result = estimate_verified_distance(fixes, EstimatorConfig(max_speed_kmh=0))
        assert result.verified_km == 0.0
        assert result.rejected_segments == 2

    def test_boundary_segment_counts_towards_total(self, monkeypatch):
        monkeypatch.setattr(trajectory, "haversine_km", lambda *args, **kwargs: 1.0)
        fixes = [fix(0, 0.0, 0.0), fix(1, 0.0, 0.0)]

        result = estimate_verified_distance(fixes, EstimatorConfig(max_speed_kmh=3600))

        assert result.verified_km == 1.0

    def test_rounds_half_up_to_two_decimals(self, monkeypatch):
        monkeypatch.setattr(trajectory, "haversine_km", lambda *args, **kwargs: 0.125)
        fixes = [fix(0, 0.0, 0.0), fix(60, 0.0, 0.0)]

        assert estimate_verified_distance(fixes).verified_km == 0.13

    def test_mixed_naive_and_aware_timestamps(self):
        naive_start = GpsFix(datetime(2025, 1, 2, 12, 0, 0), 12.9716, 77.5946)
        fixes = [naive_start, fix(60, 12.9720, 77.5950)]

        result = estimate_verified_distance(fixes)

        assert result.verified_km == 0.06
        assert result.accepted_segments == 1

    def test_is_deterministic(self):
        fixes = [fix(i * 30, 12.97 + (i % 3) * 0.0007, 77.59 + i * 0.0004) for i in range(50)]
        first = estimate_verified_distance(fixes)
        assert all(estimate_verified_distance(fixes) == first for _ in range(5))

    def test_does_not_reorder_input(self):
        fixes = [fix(60, 12.9720, 77.5950), fix(0, 12.9716, 77.5946)]
        estimate_verified_distance(fixes)
        assert [f.timestamp for f in fixes] == [T0 + timedelta(seconds=60), T0]

    def test_config_from_settings(self):
        class _Settings:
            EARTH_RADIUS_KM = 6378.1
            MAX_SPEED_KMH = 90.0
            JUMP_THRESHOLD_KM = 5.0

        config = EstimatorConfig.from_settings(_Settings())

        assert config == EstimatorConfig(earth_radius_km=6378.1, max_speed_kmh=90.0, jump_threshold_km=5.0)

    def test_result_is_a_distance_estimate(self):
        assert isinstance(estimate_verified_distance([]), DistanceEstimate)
