# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import numbers

import numpy as np


def default_atol(dtype=np.float64):
    """Default absolute tolerance for the floating point kind `dtype`.

    The square root of the machine epsilon: about 1.5e-8 for float64 and
    3.5e-4 for float32. Every operation taking an `atol` argument falls back
    to this value when `atol` is None.
    """
    return float(np.sqrt(np.finfo(dtype).eps))


def resolve_atol(atol, *functions):
    if atol is not None:
        return atol
    return default_atol(np.result_type(*(ff.dtype for ff in functions)))


def is_scalar(obj):
    return isinstance(obj, numbers.Real)


def coincidence_rtol(dtype=np.float64):
    """Relative distance below which two abscissas are the same point, a few
    ulps of `dtype`."""
    return 4 * float(np.finfo(dtype).eps)
