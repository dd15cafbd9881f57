# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import builtins
import logging
import operator

import numpy as np

from .function import PiecewiseLinearFunction
from .utils import coincidence_rtol, is_scalar

logger = logging.getLogger(__name__)

# Operators whose result is linear in the operands: the result is exact on the
# common refinement grid and the ray slopes combine like the values.
LINEAR_OPERATORS = {
    operator.add: np.add,
    operator.sub: np.subtract,
    np.add: np.add,
    np.subtract: np.subtract,
}

# Order operators: crossings of the operands become extra breakpoints.
ORDER_OPERATORS = {
    builtins.min: np.minimum,
    builtins.max: np.maximum,
    np.minimum: np.minimum,
    np.maximum: np.maximum,
}

OPERATOR_SYMBOLS = {
    np.add: "+",
    np.subtract: "-",
    np.minimum: "min",
    np.maximum: "max",
}


def merge_breakpoints(xf, xg, atol=0.0, rtol=0.0):
    """Two-pointer merge of two strictly increasing sequences of abscissas.

    An abscissa of `xf` and one of `xg` closer than
    `atol + rtol * max(|xf|, |xg|)` are merged into a single grid point, taken
    from `xf`, unless another abscissa of either sequence lies between them.
    Abscissas of the same sequence are never merged.

    Returns
    -------
    grid : numpy.ndarray
        The common refinement grid, strictly increasing.
    kf, kg : numpy.ndarray
        For each grid point, the number of breakpoints of `xf` (resp. `xg`)
        consumed so far, i.e. located at or left of the grid point.
    """
    nf, ng = len(xf), len(xg)
    grid, kf, kg = [], [], []
    ii = jj = 0
    while ii < nf or jj < ng:
        cf = xf[ii] if ii < nf else np.inf
        cg = xg[jj] if jj < ng else np.inf
        nf_next = xf[ii + 1] if ii + 1 < nf else np.inf
        ng_next = xg[jj + 1] if jj + 1 < ng else np.inf
        if (ii < nf and jj < ng
                and abs(cf - cg) <= atol + rtol * max(abs(cf), abs(cg))
                and nf_next > cg and ng_next > cf):
            cp = cf
            ii += 1
            jj += 1
        elif cf < cg:
            cp = cf
            ii += 1
        else:
            cp = cg
            jj += 1
        grid.append(cp)
        kf.append(ii)
        kg.append(jj)
    dtype = np.result_type(np.asarray(xf), np.asarray(xg))
    return (np.array(grid, dtype=dtype),
            np.array(kf, dtype=np.intp), np.array(kg, dtype=np.intp))


def evaluate_on_grid(f, grid, counts):
    """Evaluate `f` on a grid built by `merge_breakpoints`, without search."""
    anchor = np.maximum(counts - 1, 0)
    return f.y[anchor] + f.extended_slopes[counts] * (grid - f.x[anchor])


def combine(f, g, op, atol=None):
    """Piecewise linear function `t -> op(f(t), g(t))`.

    Parameters
    ----------
    f, g : PiecewiseLinearFunction
        The operands.
    op : callable
        One of `operator.add`, `operator.sub`, `min`, `max` or the numpy
        ufuncs `add`, `subtract`, `minimum`, `maximum`.
    atol : float, optional
        Abscissas of `f` and `g` closer than `atol` are merged. By default
        only abscissas equal up to a few ulps are merged, see
        `grid_tolerances`.

    The result is not canonicalized, see `remove_redundant_breakpoints`.
    """
    tols = grid_tolerances(atol, f, g)
    if op in LINEAR_OPERATORS:
        return _combine_linear(f, g, LINEAR_OPERATORS[op], tols)
    if op in ORDER_OPERATORS:
        return _combine_order(f, g, ORDER_OPERATORS[op], tols)
    raise ValueError(f"Unsupported operator {op!r}")


def grid_tolerances(atol, f, g):
    """`(atol, rtol)` for `merge_breakpoints`.

    Merging abscissas moves a breakpoint of one operand, which shifts the
    values of a steep operand by its slope times the distance. Unless an
    explicit `atol` is given, only abscissas equal up to rounding are merged.
    """
    if atol is not None:
        return atol, 0.0
    return 0.0, coincidence_rtol(np.result_type(f.dtype, g.dtype))


def _combine_linear(f, g, ufunc, tols):
    grid, kf, kg = merge_breakpoints(f.x, g.x, *tols)
    y = ufunc(evaluate_on_grid(f, grid, kf), evaluate_on_grid(g, grid, kg))
    logger.debug("f %s g: %d + %d breakpoints merged into %d",
                 OPERATOR_SYMBOLS[ufunc], len(f), len(g), len(grid))
    return PiecewiseLinearFunction(
        grid, y,
        ufunc(f.left_slope, g.left_slope),
        ufunc(f.right_slope, g.right_slope),
        dtype=np.result_type(f.dtype, g.dtype))


def _combine_order(f, g, ufunc, tols):
    grid, kf, kg = merge_breakpoints(f.x, g.x, *tols)
    fv = evaluate_on_grid(f, grid, kf)
    gv = evaluate_on_grid(g, grid, kg)
    diff = fv - gv

    # crossings strictly inside grid intervals
    ii = np.nonzero(np.sign(diff[:-1]) * np.sign(diff[1:]) < 0)[0]
    frac = diff[ii] / (diff[ii] - diff[ii + 1])
    t_cross = grid[ii] + frac * (grid[ii + 1] - grid[ii])
    v_cross = fv[ii] + frac * (fv[ii + 1] - fv[ii])
    inside = (t_cross > grid[ii]) & (t_cross < grid[ii + 1])
    t_extra = [t_cross[inside]]
    v_extra = [v_cross[inside]]

    # crossings on the rays, where the difference is affine
    dl = f.left_slope - g.left_slope
    if np.sign(diff[0]) * np.sign(dl) > 0:
        tt = grid[0] - diff[0] / dl
        if tt < grid[0]:
            t_extra.append([tt])
            v_extra.append([fv[0] + f.left_slope * (tt - grid[0])])
    dr = f.right_slope - g.right_slope
    if np.sign(diff[-1]) * np.sign(dr) < 0:
        tt = grid[-1] - diff[-1] / dr
        if tt > grid[-1]:
            t_extra.append([tt])
            v_extra.append([fv[-1] + f.right_slope * (tt - grid[-1])])

    t = np.concatenate([grid] + t_extra)
    v = np.concatenate([ufunc(fv, gv)] + v_extra)
    order = np.argsort(t, kind='stable')
    logger.debug("%s(f, g): %d + %d breakpoints, %d crossings",
                 OPERATOR_SYMBOLS[ufunc], len(f), len(g), len(t) - len(grid))

    # Far to the left a ray with slope s behaves like -s * inf, far to the
    # right like s * inf: the dominating operand gives the ray slope.
    left_slope = -ufunc(-f.left_slope, -g.left_slope)
    right_slope = ufunc(f.right_slope, g.right_slope)
    return PiecewiseLinearFunction(
        t[order], v[order], left_slope, right_slope,
        dtype=np.result_type(f.dtype, g.dtype))


def add(f, g, atol=None):
    return combine(f, g, operator.add, atol=atol)


def subtract(f, g, atol=None):
    return combine(f, g, operator.sub, atol=atol)


def scale(f, c):
    """`c * f`, same breakpoints."""
    return PiecewiseLinearFunction(
        f.x, f.y * c, f.left_slope * c, f.right_slope * c, dtype=f.dtype)


def negate(f):
    return scale(f, -1)


def shift(f, c):
    """`f + c` for a scalar `c`, same breakpoints."""
    return PiecewiseLinearFunction(
        f.x, f.y + c, f.left_slope, f.right_slope, dtype=f.dtype)


def _constant_like(f, value):
    return PiecewiseLinearFunction(f.x[:1], [value], 0., 0., dtype=f.dtype)


def _order_operands(f, g):
    if is_scalar(f) and is_scalar(g):
        raise TypeError("At least one operand must be a PiecewiseLinearFunction")
    if is_scalar(f):
        f = _constant_like(g, f)
    if is_scalar(g):
        g = _constant_like(f, g)
    return f, g


def minimum(f, g, atol=None):
    """Pointwise minimum of `f` and `g`, either of which can be a scalar."""
    f, g = _order_operands(f, g)
    return combine(f, g, min, atol=atol)


def maximum(f, g, atol=None):
    """Pointwise maximum of `f` and `g`, either of which can be a scalar."""
    f, g = _order_operands(f, g)
    return combine(f, g, max, atol=atol)
