# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import logging

import numpy as np

from .canonical import remove_redundant_breakpoints
from .function import PiecewiseLinearFunction
from .utils import resolve_atol

logger = logging.getLogger(__name__)


def _breakpoints_within(x, lo, hi):
    """Entries of the sorted array `x` strictly between `lo` and `hi`."""
    return x[np.searchsorted(x, lo, side='right'):
             np.searchsorted(x, hi, side='left')]


def _preimages(f, g):
    """Abscissas where `g` reaches a breakpoint of `f` while `g` is affine.

    Flat pieces of `g` contribute nothing: `f ∘ g` is constant on them.
    """
    gx, gy = g.x, g.y
    out = []
    for ii in np.nonzero(g.slopes != 0)[0]:
        lo, hi = sorted((gy[ii], gy[ii + 1]))
        xf = _breakpoints_within(f.x, lo, hi)
        out.append(gx[ii] + (xf - gy[ii]) / g.slopes[ii])

    # left ray, g(t) runs over (-inf, y0) or (y0, inf)
    slope = g.left_slope
    if slope > 0:
        out.append(gx[0] + (f.x[f.x < gy[0]] - gy[0]) / slope)
    elif slope < 0:
        out.append(gx[0] + (f.x[f.x > gy[0]] - gy[0]) / slope)

    slope = g.right_slope
    if slope > 0:
        out.append(gx[-1] + (f.x[f.x > gy[-1]] - gy[-1]) / slope)
    elif slope < 0:
        out.append(gx[-1] + (f.x[f.x < gy[-1]] - gy[-1]) / slope)
    return out


def _ray_slope(g_slope, f, right):
    if g_slope == 0:
        # g tends to a finite value, f ∘ g is constant on the ray
        return 0.
    if (g_slope > 0) == right:
        return g_slope * f.right_slope
    return g_slope * f.left_slope


def compose(f, g, postprocess_breakpoints=True, atol=None):
    """Compute the composition `f ∘ g`, i.e. `t -> f(g(t))`.

    The breakpoints of the result are the breakpoints of `g` together with
    the abscissas where `g` crosses a breakpoint of `f`.

    Parameters
    ----------
    f : PiecewiseLinearFunction
        Outer function.
    g : PiecewiseLinearFunction
        Inner function.
    postprocess_breakpoints : bool, optional
        If True (default), redundant breakpoints are removed from the result
        with `remove_redundant_breakpoints`.
    atol : float, optional
        Tolerance used to detect collinear breakpoints when
        `postprocess_breakpoints` is True. Defaults to `default_atol` of the
        operands' dtype. Breakpoints are only merged when equal: preimages
        of distinct breakpoints of `f` under a steep `g` can be arbitrarily
        close.
    """
    atol = resolve_atol(atol, f, g)
    dtype = np.result_type(f.dtype, g.dtype)

    t = np.unique(np.concatenate([g.x] + _preimages(f, g)).astype(dtype))
    y = f(g(t))
    h = PiecewiseLinearFunction(
        t, y,
        _ray_slope(g.left_slope, f, right=False),
        _ray_slope(g.right_slope, f, right=True),
        dtype=dtype)
    logger.debug("f ∘ g: %d, %d breakpoints give %d", len(f), len(g), len(h))

    if postprocess_breakpoints:
        h = remove_redundant_breakpoints(h, atol=atol)
    return h
