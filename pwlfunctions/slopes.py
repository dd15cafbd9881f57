# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import numpy as np


def segment_slopes(x, y):
    return np.diff(y) / np.diff(x)


def compute_slopes(f, extended=False):
    """Slopes of the segments of `f`, from left to right.

    Parameters
    ----------
    f : PiecewiseLinearFunction
        The function to inspect.
    extended : bool, optional
        If True, the interior slopes are bracketed by `f.left_slope` and
        `f.right_slope`, giving n + 1 values for n breakpoints. Otherwise the
        n - 1 interior slopes are returned.
    """
    if extended:
        return f.extended_slopes
    return f.slopes


def extended_slopes(f):
    return compute_slopes(f, extended=True)
