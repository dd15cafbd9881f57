# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import logging

from .function import PiecewiseLinearFunction
from .utils import resolve_atol

logger = logging.getLogger(__name__)


def _chord(x, y, ii, jj):
    return (y[jj] - y[ii]) / (x[jj] - x[ii])


def _collapse(x, y, left_slope, right_slope, atol):
    """Indices of the breakpoints kept by one left to right sweep."""
    nn = len(x)
    keep = [0]
    for ii in range(1, nn - 1):
        if abs(_chord(x, y, keep[-1], ii) - _chord(x, y, ii, ii + 1)) > atol:
            keep.append(ii)
    if nn > 1:
        keep.append(nn - 1)

    # the end points can be absorbed by the rays
    while len(keep) > 1 and abs(
            _chord(x, y, keep[0], keep[1]) - left_slope) <= atol:
        keep.pop(0)
    while len(keep) > 1 and abs(
            _chord(x, y, keep[-2], keep[-1]) - right_slope) <= atol:
        keep.pop()
    return keep


def remove_redundant_breakpoints(f, atol=None):
    """Return a new piecewise linear function with redundant breakpoints removed.

    A breakpoint is redundant when the slopes on both of its sides agree
    within `atol`. The first (last) breakpoint is also redundant when the
    slope to its right (left) agrees with `left_slope` (`right_slope`). At
    least one breakpoint is always kept.

    The sweep is repeated until nothing changes, so that applying the
    function to its own result is a no-op.
    """
    atol = resolve_atol(atol, f)
    x, y = f.x, f.y
    while True:
        keep = _collapse(x, y, f.left_slope, f.right_slope, atol)
        if len(keep) == len(x):
            break
        x, y = x[keep], y[keep]
    logger.debug("Removed %d of %d breakpoints", len(f) - len(x), len(f))
    return PiecewiseLinearFunction(
        x, y, f.left_slope, f.right_slope, dtype=f.dtype)
