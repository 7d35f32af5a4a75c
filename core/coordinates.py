"""Sample value / sample index to display coordinate mapping.

The display is SURFACE_UNITS wide and tall and spans DIVISIONS divisions on
each axis. Vertical positions are measured from the top, so the centerline
(0 V) sits at SURFACE_UNITS / 2 and higher voltages move toward 0.

The ADC delivers unsigned 8-bit readings over a 0..5 V reference.
"""
from __future__ import annotations

import math

import numpy as np

SURFACE_UNITS = 500
DIVISIONS = 8
CENTER = SURFACE_UNITS // 2
ADC_REFERENCE_V = 5.0
ADC_LEVELS = 256


def _divide(numerator: float, denominator: float) -> float:
    """IEEE division: x/0 is a signed infinity and 0/0 is NaN."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _round_half_up(value: float) -> int | float:
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def units_per_division_unit(per_division: float) -> float:
    """Display units per volt (or per second) for a given division scale."""
    return _divide(SURFACE_UNITS, per_division * DIVISIONS)


def sample_to_volts(value: float) -> float:
    return value / ADC_LEVELS * ADC_REFERENCE_V


def sample_to_y(value: float, volts_per_division: float) -> int | float:
    """Vertical display coordinate of an ADC reading.

    Never raises: a zero or non-finite scale yields an infinite or NaN
    coordinate (as float) instead of an integer.
    """
    ppv = units_per_division_unit(volts_per_division)
    return CENTER - _round_half_up(sample_to_volts(value) * ppv)


def sample_index_to_x(index: int, sampling_rate: float, time_per_division: float) -> int | float:
    """Horizontal display coordinate of a sample index; index 0 is always 0.

    Like `sample_to_y`, degenerate scales give inf/NaN rather than an error.
    """
    if not index:
        return 0
    ppt = units_per_division_unit(time_per_division)
    return _round_half_up(_divide(index, sampling_rate) * ppt)


def samples_to_y(samples: np.ndarray, volts_per_division: float) -> np.ndarray:
    """Vectorized `sample_to_y`."""
    ppv = units_per_division_unit(volts_per_division)
    volts = np.asarray(samples, dtype=np.float64) / ADC_LEVELS * ADC_REFERENCE_V
    return CENTER - np.floor(volts * ppv + 0.5).astype(np.int64)


def indices_to_x(count: int, sampling_rate: float, time_per_division: float) -> np.ndarray:
    """Vectorized `sample_index_to_x` for indices 0..count-1."""
    ppt = units_per_division_unit(time_per_division)
    elapsed = np.arange(count, dtype=np.float64) / sampling_rate
    xs = np.floor(elapsed * ppt + 0.5).astype(np.int64)
    if count:
        xs[0] = 0
    return xs


def trace_points(
    samples: np.ndarray,
    sampling_rate: float,
    time_per_division: float,
    volts_per_division: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Return (xs, ys) display coordinates for a whole sample buffer."""
    samples = np.asarray(samples)
    xs = indices_to_x(samples.size, sampling_rate, time_per_division)
    ys = samples_to_y(samples, volts_per_division)
    return xs, ys


__all__ = [
    "SURFACE_UNITS",
    "DIVISIONS",
    "CENTER",
    "ADC_REFERENCE_V",
    "ADC_LEVELS",
    "sample_to_y",
    "sample_index_to_x",
    "samples_to_y",
    "indices_to_x",
    "trace_points",
]
