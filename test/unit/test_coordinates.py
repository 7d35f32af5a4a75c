from __future__ import annotations

import math

import numpy as np
import pytest

from core.coordinates import (
    CENTER,
    indices_to_x,
    sample_index_to_x,
    sample_to_y,
    samples_to_y,
    trace_points,
)


class TestSampleToY:
    def test_zero_reading_sits_on_centerline(self):
        assert sample_to_y(0, 1.0) == CENTER == 250

    def test_known_values_at_one_volt_per_division(self):
        # 500 / (1 * 8) = 62.5 units per volt
        assert sample_to_y(128, 1.0) == 250 - 156  # 2.5 V -> 156.25
        assert sample_to_y(255, 1.0) == 250 - 311  # 4.98 V -> 311.28

    def test_larger_division_compresses_deflection(self):
        assert sample_to_y(128, 2.0) == 250 - 78  # 78.125

    def test_millivolt_scale_goes_far_off_surface(self):
        # No clamping: out-of-range readings still map to a coordinate.
        assert sample_to_y(255, 0.01) < -10000


class TestSampleIndexToX:
    def test_first_sample_is_at_origin(self):
        assert sample_index_to_x(0, 1000, 0.01) == 0
        assert sample_index_to_x(0, 0, 0) == 0

    def test_known_values(self):
        # 500 / (0.01 * 8) = 6250 units per second
        assert sample_index_to_x(1, 1000, 0.01) == 6
        assert sample_index_to_x(10, 1000, 0.01) == 63  # 62.5 rounds up

    def test_halves_round_up(self):
        assert sample_index_to_x(2, 1000, 0.01) == 13


def test_vectorized_forms_match_scalar_functions():
    samples = np.arange(256, dtype=np.uint8)
    ys = samples_to_y(samples, 0.5)
    assert ys.tolist() == [sample_to_y(int(v), 0.5) for v in samples]

    xs = indices_to_x(50, 4808, 0.001)
    assert xs.tolist() == [sample_index_to_x(i, 4808, 0.001) for i in range(50)]


def test_trace_points_for_three_samples():
    xs, ys = trace_points(np.array([0, 128, 255], dtype=np.uint8), 1000, 0.01, 1.0)
    assert xs.tolist() == [0, 6, 13]
    assert ys.tolist() == [250, 94, -61]


def test_indices_to_x_empty():
    assert indices_to_x(0, 1000, 0.01).size == 0


@pytest.mark.parametrize("vdiv", [0.1, 1.0, 5.0])
def test_full_scale_reading_is_above_center(vdiv):
    assert sample_to_y(255, vdiv) < CENTER


class TestDegenerateScales:
    def test_zero_vdiv_goes_to_infinity(self):
        assert sample_to_y(128, 0.0) == -math.inf
        assert sample_to_y(128, -0.0) == math.inf

    def test_zero_reading_on_zero_scale_is_nan(self):
        assert math.isnan(sample_to_y(0, 0.0))

    def test_zero_rate_or_tdiv(self):
        assert sample_index_to_x(1, 0, 0.01) == math.inf
        assert sample_index_to_x(3, 1000, 0) == math.inf
        assert sample_index_to_x(0, 0, 0) == 0

    def test_non_finite_scales(self):
        assert sample_to_y(200, math.inf) == CENTER
        assert math.isnan(sample_to_y(200, math.nan))
        assert math.isnan(sample_index_to_x(5, math.nan, 0.01))

    def test_overflowing_product_stays_infinite(self):
        # 4.98 V * 6.25e307 units per volt overflows to inf
        assert sample_to_y(255, 1e-306) == -math.inf
