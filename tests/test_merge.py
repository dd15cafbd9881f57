# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import operator

import numpy as np
import pytest

from pwlfunctions import (PiecewiseLinearFunction, add, subtract, scale,
                          negate, shift, minimum, maximum, combine)
from pwlfunctions.merge import merge_breakpoints

f = PiecewiseLinearFunction([0.0, 1.0, 2.0], [0.0, 2.0, 1.0], -1.0, 0.5)
g = PiecewiseLinearFunction([0.0, 1.5, 2.1], [1.0, 3.0, 0.5], 1.0, 3.0)

# both extrapolation regions and every breakpoint are sampled
t = np.concatenate([np.linspace(-5, 7, 241), f.x, g.x])


def test_merge_breakpoints():
    grid, kf, kg = merge_breakpoints(np.array([0.0, 1.0, 2.0]),
                                     np.array([1.0, 3.0]))
    assert np.array_equal(grid, [0.0, 1.0, 2.0, 3.0])
    assert np.array_equal(kf, [1, 2, 3, 3])
    assert np.array_equal(kg, [0, 1, 1, 2])


def test_merge_breakpoints_tolerance():
    grid, kf, kg = merge_breakpoints(np.array([0.0, 1.0]),
                                     np.array([1.0 + 1e-12]), atol=1e-9)
    assert np.array_equal(grid, [0.0, 1.0])
    assert np.array_equal(kg, [0, 1])
    grid, _, _ = merge_breakpoints(np.array([0.0, 1.0]),
                                   np.array([1.0 + 1e-12]), atol=0.0)
    assert len(grid) == 3


def test_merge_breakpoints_skips_pairs_with_neighbour_between():
    # 1 - 1e-8 is within atol of 1.0, but 1 - 5e-9 lies between them
    grid, kf, kg = merge_breakpoints(np.array([1.0]),
                                     np.array([1 - 1e-8, 1 - 5e-9]),
                                     atol=1.5e-8)
    assert np.array_equal(grid, [1 - 1e-8, 1.0])
    assert np.array_equal(kf, [0, 1])
    assert np.array_equal(kg, [1, 2])


steep = PiecewiseLinearFunction([1 - 1e-8, 1 - 5e-9], [0.0, 1.0], 0.0, 0.0)
step = PiecewiseLinearFunction([1.0], [0.0], 0.0, 0.0)
near_one = np.concatenate([np.linspace(1 - 2e-8, 1 + 1e-8, 61), steep.x])


def test_add_keeps_close_breakpoints():
    h = add(step, steep)
    assert np.all(np.diff(h.x) > 0)
    assert len(h) == 3
    assert np.allclose(h(near_one), step(near_one) + steep(near_one))
    assert h(1 - 5e-9) == 1.0


def test_add_explicit_atol_merges_into_increasing_grid():
    h = add(step, steep, atol=1.5e-8)
    assert np.all(np.diff(h.x) > 0)
    assert np.array_equal(h.x, [1 - 1e-8, 1.0])
    assert np.array_equal(h.y, [0.0, 1.0])


def test_combine_close_breakpoints_in_one_operand():
    narrow = PiecewiseLinearFunction([0.0, 1e-9], [0.0, 1.0], 0.0, 0.0)
    ramp = PiecewiseLinearFunction.affine(1.0, 0.0)
    s = np.linspace(-1e-9, 2e-9, 31)
    for op in (operator.add, operator.sub, min, max):
        h = combine(narrow, ramp, op)
        assert np.all(np.diff(h.x) > 0)
        expected = [op(a, b) for a, b in zip(narrow(s), ramp(s))]
        assert np.allclose(h(s), expected, rtol=0, atol=1e-12)


@pytest.mark.parametrize('spacing', [1e-9, 1e-8, 1.5e-8, 3e-8])
def test_add_keeps_breakpoints_across_operands(spacing):
    a = PiecewiseLinearFunction([0.0], [0.0], 0.0, 1e8)
    b = PiecewiseLinearFunction([spacing], [0.0], -1e8, 0.0)
    h = add(a, b)
    assert np.array_equal(h.x, [0.0, spacing])
    s = np.linspace(-spacing, 2 * spacing, 31)
    assert np.allclose(h(s), a(s) + b(s), rtol=1e-9, atol=1e-12)


def test_add():
    h = add(f, g)
    assert np.allclose(h(t), f(t) + g(t))
    assert np.array_equal(h.x, [0.0, 1.0, 1.5, 2.0, 2.1])
    assert h.left_slope == 0.0
    assert h.right_slope == 3.5
    assert h == f + g


def test_subtract():
    h = subtract(f, g)
    assert np.allclose(h(t), f(t) - g(t))
    assert h.left_slope == -2.0
    assert h.right_slope == -2.5
    assert h == f - g


def test_negate_and_scale():
    assert np.allclose(negate(f)(t), -f(t))
    assert -f == negate(f)
    assert np.allclose(scale(f, 2.5)(t), 2.5 * f(t))
    assert 2.5 * f == scale(f, 2.5)
    assert f * 2.5 == scale(f, 2.5)
    assert np.allclose((f / 4)(t), f(t) / 4)
    assert +f is f


def test_add_negation_is_zero():
    assert np.allclose((f + negate(f))(t), 0.0)
    assert np.allclose((g - g)(t), 0.0)


def test_scalar_arithmetic():
    assert np.allclose((2 * f - 3)(t), 2 * f(t) - 3)
    assert np.allclose((3 - f)(t), 3 - f(t))
    assert np.allclose((f + 1.5)(t), f(t) + 1.5)
    assert np.allclose((1.5 + f)(t), f(t) + 1.5)
    assert np.array_equal(shift(f, 1.0).x, f.x)
    assert np.allclose((np.float64(2.0) * f)(t), 2 * f(t))


def test_invalid_operands():
    with pytest.raises(TypeError):
        f + "a"
    with pytest.raises(TypeError):
        f * g
    with pytest.raises(TypeError):
        np.array([1.0, 2.0]) + f
    with pytest.raises(TypeError):
        minimum(1.0, 2.0)


def test_minimum_maximum():
    lo = minimum(f, g)
    hi = maximum(f, g)
    assert np.allclose(lo(t), np.minimum(f(t), g(t)))
    assert np.allclose(hi(t), np.maximum(f(t), g(t)))
    assert lo == f.minimum(g)
    assert hi == f.maximum(g)
    assert np.allclose((lo + hi)(t), (f + g)(t))


def test_minimum_crossing_on_ray():
    ff = PiecewiseLinearFunction([0.0], [1.0], 1.0, 1.0)
    gg = PiecewiseLinearFunction([0.0], [0.0], -1.0, -1.0)
    lo = minimum(ff, gg)
    assert np.allclose(lo.x, [-0.5, 0.0])
    assert np.allclose(lo.y, [0.5, 0.0])
    assert lo.left_slope == 1.0
    assert lo.right_slope == -1.0

    hi = maximum(ff, gg)
    assert np.allclose(hi.x, [-0.5, 0.0])
    assert np.allclose(hi.y, [0.5, 1.0])
    assert hi.left_slope == -1.0
    assert hi.right_slope == 1.0


def test_minimum_crossing_on_right_ray():
    ff = PiecewiseLinearFunction([0.0], [0.0], 0.0, 1.0)
    gg = PiecewiseLinearFunction([0.0], [2.0], 0.0, 0.0)
    lo = minimum(ff, gg)
    assert np.allclose(lo.x, [0.0, 2.0])
    assert np.allclose(lo.y, [0.0, 2.0])
    assert lo.right_slope == 0.0
    assert np.allclose(lo(t), np.minimum(ff(t), gg(t)))


def test_minimum_with_scalar():
    assert np.allclose(minimum(f, 1.0)(t), np.minimum(f(t), 1.0))
    assert np.allclose(maximum(0.5, g)(t), np.maximum(g(t), 0.5))


def test_combine():
    assert combine(f, g, operator.add) == add(f, g)
    assert combine(f, g, np.subtract) == subtract(f, g)
    assert combine(f, g, min) == minimum(f, g)
    assert combine(f, g, np.maximum) == maximum(f, g)
    with pytest.raises(ValueError):
        combine(f, g, operator.mul)


def test_dtype_promotion():
    f32 = PiecewiseLinearFunction(f.x, f.y, f.left_slope, f.right_slope,
                                  dtype=np.float32)
    assert (f32 + f32).dtype == np.float32
    assert (2 * f32).dtype == np.float32
    assert (f32 + g).dtype == np.float64
    assert minimum(f32, g).dtype == np.float64
