import math
import sys

import hypothesis.strategies as st
import pytest
from hypothesis import given

from unitengine.units.axis import (
    DEFAULT_STEP,
    MAX_KNOBS,
    AxisScale,
    axis_knob_size,
    axis_knobs,
    nice_step,
    scale_axis,
    unit_axis_knob_size,
    unit_axis_knobs,
)


NICE = (1.0, 2.0, 2.5, 5.0, 10.0)


def _is_nice(step: float) -> bool:
    magnitude = 10 ** math.floor(math.log10(step))
    normalized = step / magnitude
    return any(math.isclose(normalized, m, rel_tol=1e-9) for m in NICE)


@pytest.mark.parametrize(
    "raw, expected",
    [(0.3, 0.5), (3, 5), (20, 20), (21, 25), (0.018, 0.02), (7.5, 10), (1000, 1000)],
)
def test_nice_step_base_ten(raw, expected):
    assert math.isclose(nice_step(raw), expected)


def test_nice_step_base_sixty():
    assert nice_step(90, base=60) == 120
    assert nice_step(45, base=60) == 60
    assert nice_step(700, base=60) == 900
    # below one the clock multipliers make no sense
    assert math.isclose(nice_step(0.3, base=60), 0.5)


@pytest.mark.parametrize("raw", [0, -5, math.nan, math.inf])
def test_nice_step_invalid_raw(raw):
    assert nice_step(raw) == DEFAULT_STEP


@given(
    st.floats(min_value=-1e6, max_value=1e6),
    st.floats(min_value=1e-3, max_value=1e6),
    st.integers(min_value=1, max_value=20),
)
def test_step_is_nice_and_not_too_fine(x_min: float, span: float, n_knobs: int) -> None:
    x_max = x_min + span
    step = axis_knob_size(n_knobs, x_min, x_max)
    assert _is_nice(step)
    assert (x_max - x_min) / step <= 2 * n_knobs


@given(
    st.floats(min_value=-1e6, max_value=1e6),
    st.floats(min_value=1e-3, max_value=1e6),
    st.integers(min_value=1, max_value=20),
)
def test_extended_range_covers_and_lands_on_multiples(x_min: float, span: float, n_knobs: int) -> None:
    x_max = x_min + span
    scale = scale_axis(n_knobs, x_min, x_max, extend_to_knobs=True)
    assert scale.min <= x_min
    assert scale.max >= x_max
    for bound in (scale.min, scale.max):
        ratio = bound / scale.step
        assert math.isclose(ratio, round(ratio), rel_tol=1e-9, abs_tol=1e-6)


def test_axis_knobs_inside_range():
    assert axis_knobs(5, 0, 100) == [0, 20, 40, 60, 80, 100]
    assert axis_knobs(5, 3, 97) == [20, 40, 60, 80]


def test_axis_knobs_extended():
    assert axis_knobs(5, 3, 97, extend_to_knobs=True) == [0, 20, 40, 60, 80, 100]
    assert axis_knobs(4, 0.1, 0.9, extend_to_knobs=True) == [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]


def test_scale_without_extension_keeps_range():
    assert scale_axis(5, 3, 97) == AxisScale(step=20, min=3, max=97)


def test_degenerate_ranges_use_fallbacks():
    flat = scale_axis(5, 3, 3)
    assert flat.step > 0 and math.isfinite(flat.step)
    zero = scale_axis(5, 0, 0, extend_to_knobs=True)
    assert zero.step > 0 and zero.min <= 0 <= zero.max
    assert axis_knob_size(0, 0, 10) == 10
    assert axis_knob_size(5, math.nan, 10) == DEFAULT_STEP
    assert scale_axis(5, -math.inf, math.inf).step == DEFAULT_STEP


def test_reversed_bounds_are_swapped():
    assert scale_axis(5, 100, 0) == AxisScale(step=20, min=0, max=100)


def test_unit_axis_uses_unit_base():
    assert unit_axis_knob_size("second", 4, 0, 600) == 300
    assert unit_axis_knob_size("meter", 4, 0, 600) == 200
    assert unit_axis_knobs("minute", 3, 0, 90) == [0, 30, 60, 90]


@given(
    st.floats(allow_nan=False, allow_infinity=False),
    st.floats(allow_nan=False, allow_infinity=False),
    st.integers(min_value=1, max_value=20),
)
def test_any_finite_range_gives_finite_bounded_axis(a: float, b: float, n_knobs: int) -> None:
    low, high = min(a, b), max(a, b)
    scale = scale_axis(n_knobs, low, high, extend_to_knobs=True)
    assert scale.step > 0 and math.isfinite(scale.step)
    assert math.isfinite(scale.min) and math.isfinite(scale.max)
    if high - low > sys.float_info.min:
        # halved so the span itself cannot overflow
        assert (high / 2 - low / 2) / scale.step <= n_knobs
    assert len(axis_knobs(n_knobs, low, high)) <= MAX_KNOBS + 4
    assert len(axis_knobs(n_knobs, low, high, extend_to_knobs=True)) <= MAX_KNOBS + 4


def test_full_float_range_is_sized_without_overflow():
    scale = scale_axis(5, -1e308, 1e308)
    assert math.isfinite(scale.step)
    assert (1e308 / 2 - -1e308 / 2) / scale.step <= 5
    ticks = axis_knobs(5, -1e308, 1e308)
    assert 0 < len(ticks) <= 11
    assert all(math.isfinite(tick) for tick in ticks)

    extended = scale_axis(5, -1e308, 1e308, extend_to_knobs=True)
    assert math.isfinite(extended.min) and math.isfinite(extended.max)
    assert extended.min <= -1e308 and extended.max >= 1e308

    widest = scale_axis(1, -sys.float_info.max, sys.float_info.max, extend_to_knobs=True)
    assert math.isfinite(widest.step) and math.isfinite(widest.min) and math.isfinite(widest.max)


def test_huge_knob_requests_are_capped():
    ticks = axis_knobs(10**9, 0, 1)
    assert 1 < len(ticks) <= MAX_KNOBS + 1
    assert axis_knob_size(10**9, 0, 1) == axis_knob_size(MAX_KNOBS, 0, 1)
    assert len(axis_knobs(10**9, 0, 1, extend_to_knobs=True)) <= MAX_KNOBS + 3


def test_subnormal_span_keeps_positive_step():
    assert nice_step(5e-324) == 5e-324
    step = axis_knob_size(1, 0.0, 5e-324)
    assert step > 0
    scale = scale_axis(1, 0.0, 5e-324, extend_to_knobs=True)
    assert scale.min <= 0.0 and scale.max >= 5e-324
