# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #

from .function import PiecewiseLinearFunction
from .errors import (PiecewiseLinearError, InvalidBreakpoints, NotConvexInput,
                     UnboundedMeet)
from .slopes import compute_slopes, extended_slopes
from .merge import (combine, add, subtract, scale, negate, shift, minimum,
                    maximum)
from .compose import compose
from .convex import is_convex, convex_meet
from .canonical import remove_redundant_breakpoints
from .utils import default_atol

from ._version import __version__


__all__ = [
    "PiecewiseLinearFunction",
    "PiecewiseLinearError",
    "InvalidBreakpoints",
    "NotConvexInput",
    "UnboundedMeet",
    "compute_slopes",
    "extended_slopes",
    "combine",
    "add",
    "subtract",
    "scale",
    "negate",
    "shift",
    "minimum",
    "maximum",
    "compose",
    "is_convex",
    "convex_meet",
    "remove_redundant_breakpoints",
    "default_atol",
    "__version__",
]
