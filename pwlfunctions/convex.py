# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import logging

import numpy as np

from .errors import NotConvexInput, UnboundedMeet
from .function import PiecewiseLinearFunction
from .merge import evaluate_on_grid, grid_tolerances, merge_breakpoints
from .utils import resolve_atol

logger = logging.getLogger(__name__)


def is_convex(f, atol=None):
    """Check if a piecewise linear function is convex.

    True when `[left_slope, *slopes, right_slope]` is non-decreasing, up to
    `atol`.
    """
    atol = resolve_atol(atol, f)
    return bool(np.all(np.diff(f.extended_slopes) >= -atol))


def _lower_hull(x, y):
    """Andrew's monotone chain, lower half, on points sorted by `x`.

    Collinear points are dropped.
    """

    def cross(o, a, b):
        return ((x[a] - x[o]) * (y[b] - y[o])
                - (y[a] - y[o]) * (x[b] - x[o]))

    hull = []
    for pp in range(len(x)):
        while len(hull) >= 2 and cross(hull[-2], hull[-1], pp) <= 0:
            hull.pop()
        hull.append(pp)
    return hull


def convex_meet(f, g, atol=None):
    """Compute the convex meet of two convex piecewise linear functions.

    The convex meet is the greatest convex function lying below both `f`
    and `g`, i.e. the convex envelope of `min(f, g)`. Its left slope is the
    largest of the two left slopes and its right slope the smallest of the
    two right slopes. In between, its breakpoints are the vertices of the
    lower convex hull of the breakpoints of `f` and `g`, each taken at
    `min(f, g)`, whose adjacent slopes fall between those two ray slopes.
    All the breakpoints of the result lie on `min(f, g)`.

    Parameters
    ----------
    f, g : PiecewiseLinearFunction
        Convex operands.
    atol : float, optional
        Tolerance of the convexity check and of the slope comparison of the
        rays. Defaults to `default_atol` of the operands' dtype. Breakpoints
        of `f` and `g` are only merged when they coincide up to rounding.

    Raises
    ------
    NotConvexInput
        If `f` or `g` is not convex.
    UnboundedMeet
        If the largest left slope exceeds the smallest right slope: no
        finite convex function lies below both operands. This is the only
        error besides `NotConvexInput`: for every other input the meet exists.
    """
    atol = resolve_atol(atol, f, g)
    for name, ff in (('f', f), ('g', g)):
        if not is_convex(ff, atol=atol):
            raise NotConvexInput(
                f"`{name}` is not convex, slopes {ff.extended_slopes.tolist()}")

    left_slope = max(f.left_slope, g.left_slope)
    right_slope = min(f.right_slope, g.right_slope)
    if left_slope > right_slope + atol:
        raise UnboundedMeet(
            f"Left slope {left_slope} exceeds right slope {right_slope}, "
            f"no convex function lies below both operands")
    right_slope = max(left_slope, right_slope)

    # at coincident abscissas the lower value is kept
    grid, kf, kg = merge_breakpoints(f.x, g.x, *grid_tolerances(None, f, g))
    values = np.minimum(evaluate_on_grid(f, grid, kf),
                        evaluate_on_grid(g, grid, kg))
    hull = _lower_hull(grid, values)

    # keep the hull vertices whose supporting slopes fit the rays
    start, stop = 0, len(hull) - 1
    while start < stop and _slope(grid, values, hull, start) < left_slope:
        start += 1
    while stop > start and _slope(grid, values, hull, stop - 1) > right_slope:
        stop -= 1
    vertices = hull[start:stop + 1]

    logger.debug("Convex meet: %d + %d breakpoints give %d",
                 len(f), len(g), len(vertices))
    return PiecewiseLinearFunction(
        grid[vertices], values[vertices], left_slope, right_slope,
        dtype=np.result_type(f.dtype, g.dtype))


def _slope(x, y, hull, ii):
    """Slope of the hull edge from vertex `ii` to vertex `ii + 1`."""
    aa, bb = hull[ii], hull[ii + 1]
    return (y[bb] - y[aa]) / (x[bb] - x[aa])
