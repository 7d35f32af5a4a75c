"""
Property-based checks for the sample/index to display mapping.

- Vertical position never moves down as the reading increases.
- Horizontal position never moves left as the index increases.
- Index 0 is always the left edge.
- Arbitrary input maps to some coordinate instead of raising.
"""
from __future__ import annotations

import numpy as np
from hypothesis import given, settings, strategies as st

from core.coordinates import indices_to_x, sample_index_to_x, sample_to_y, samples_to_y

readings = st.integers(min_value=0, max_value=255)
vdivs = st.floats(min_value=1e-3, max_value=100.0, allow_nan=False, allow_infinity=False)
rates = st.floats(min_value=1.0, max_value=1e6, allow_nan=False, allow_infinity=False)
tdivs = st.floats(min_value=1e-6, max_value=10.0, allow_nan=False, allow_infinity=False)


@given(a=readings, b=readings, vdiv=vdivs)
@settings(max_examples=200, deadline=None)
def test_sample_to_y_is_non_increasing(a: int, b: int, vdiv: float):
    lo, hi = min(a, b), max(a, b)
    assert sample_to_y(hi, vdiv) <= sample_to_y(lo, vdiv)


@given(i=st.integers(min_value=0, max_value=10_000), rate=rates, tdiv=tdivs)
@settings(max_examples=200, deadline=None)
def test_sample_index_to_x_is_non_decreasing(i: int, rate: float, tdiv: float):
    assert sample_index_to_x(i + 1, rate, tdiv) >= sample_index_to_x(i, rate, tdiv)


@given(rate=st.floats(allow_nan=True, allow_infinity=True), tdiv=st.floats(allow_nan=True, allow_infinity=True))
@settings(max_examples=50, deadline=None)
def test_first_index_maps_to_zero_for_any_scale(rate: float, tdiv: float):
    assert sample_index_to_x(0, rate, tdiv) == 0


@given(
    samples=st.lists(readings, min_size=0, max_size=300),
    rate=rates,
    tdiv=tdivs,
    vdiv=vdivs,
)
@settings(max_examples=50, deadline=None)
def test_vectorized_mapping_agrees_with_scalar(samples, rate, tdiv, vdiv):
    arr = np.asarray(samples, dtype=np.uint8)
    assert samples_to_y(arr, vdiv).tolist() == [sample_to_y(v, vdiv) for v in samples]
    assert indices_to_x(len(samples), rate, tdiv).tolist() == [
        sample_index_to_x(i, rate, tdiv) for i in range(len(samples))
    ]


@given(
    value=st.floats(allow_nan=True, allow_infinity=True),
    vdiv=st.floats(allow_nan=True, allow_infinity=True),
    index=st.integers(min_value=0, max_value=10**6),
    rate=st.floats(allow_nan=True, allow_infinity=True),
    tdiv=st.floats(allow_nan=True, allow_infinity=True),
)
@settings(max_examples=200, deadline=None)
def test_scalar_mapping_never_raises(value, vdiv, index, rate, tdiv):
    y = sample_to_y(value, vdiv)
    x = sample_index_to_x(index, rate, tdiv)
    assert isinstance(y, (int, float))
    assert isinstance(x, (int, float))
