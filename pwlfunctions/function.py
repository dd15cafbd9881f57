# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #
import numpy as np

from .errors import InvalidBreakpoints
from .slopes import segment_slopes
from .utils import is_scalar, resolve_atol


def _frozen_array(values, dtype, name):
    arr = np.array(values, dtype=dtype, ndmin=1)
    if arr.ndim != 1:
        raise InvalidBreakpoints(
            f"`{name}` must be one dimensional, got shape {arr.shape}")
    arr.flags.writeable = False
    return arr


def _infer_dtype(x, y, dtype):
    if dtype is None:
        dtype = np.result_type(np.asarray(x), np.asarray(y))
        if not np.issubdtype(dtype, np.floating):
            dtype = np.float64
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.floating):
        raise InvalidBreakpoints(f"Invalid dtype {dtype}, must be floating")
    return dtype


class PiecewiseLinearFunction:
    """Continuous piecewise linear function of one real variable.

    The function is defined on the whole real line by its breakpoints
    `(x[i], y[i])`, linear interpolation between consecutive breakpoints,
    and two rays extending the first and last breakpoints with slopes
    `left_slope` and `right_slope`.

    Instances are immutable: the breakpoint arrays are read-only and every
    operation returns a new function.

    Parameters
    ----------
    x : array_like
        Abscissas of the breakpoints, strictly increasing, at least one.
    y : array_like
        Values at the breakpoints, same length as `x`.
    left_slope : float
        Slope of the function to the left of the first breakpoint.
    right_slope : float
        Slope of the function to the right of the last breakpoint.
    dtype : numpy floating dtype, optional
        Floating point kind used for all the coordinates. Inferred from `x`
        and `y` when not given, integer inputs giving float64.
    """

    __slots__ = ('_x', '_y', '_left_slope', '_right_slope', '_slopes',
                 '_extended_slopes')

    # Let numpy defer to the reflected operators below.
    __array_ufunc__ = None

    def __init__(self, x, y, left_slope, right_slope, dtype=None):
        dtype = _infer_dtype(x, y, dtype)
        x = _frozen_array(x, dtype, 'x')
        y = _frozen_array(y, dtype, 'y')

        if len(x) == 0:
            raise InvalidBreakpoints("At least one breakpoint is required")
        if len(x) != len(y):
            raise InvalidBreakpoints(
                f"`x` and `y` have different lengths ({len(x)} != {len(y)})")
        bad = np.nonzero(~(np.diff(x) > 0))[0]
        if len(bad) > 0:
            ii = bad[0]
            raise InvalidBreakpoints(
                f"`x` must be strictly increasing, got x[{ii}]={x[ii]} "
                f"followed by x[{ii + 1}]={x[ii + 1]}")

        left_slope = dtype.type(left_slope)
        right_slope = dtype.type(right_slope)
        slopes = segment_slopes(x, y)
        slopes.flags.writeable = False
        ext = np.concatenate(([left_slope], slopes, [right_slope]))
        ext.flags.writeable = False

        object.__setattr__(self, '_x', x)
        object.__setattr__(self, '_y', y)
        object.__setattr__(self, '_left_slope', left_slope)
        object.__setattr__(self, '_right_slope', right_slope)
        object.__setattr__(self, '_slopes', slopes)
        object.__setattr__(self, '_extended_slopes', ext)

    @classmethod
    def constant(cls, value, dtype=None):
        return cls.affine(0., value, dtype=dtype)

    @classmethod
    def affine(cls, slope, intercept, dtype=None):
        """The function `t -> slope * t + intercept`, breakpoint at 0."""
        return cls([0.], [intercept], slope, slope, dtype=dtype)

    def __setattr__(self, name, value):
        raise AttributeError(
            f"'{type(self).__name__}' object is immutable")

    def __delattr__(self, name):
        raise AttributeError(
            f"'{type(self).__name__}' object is immutable")

    def __reduce__(self):
        return (type(self), (self._x, self._y, self._left_slope,
                             self._right_slope, self.dtype))

    @property
    def x(self):
        return self._x

    @property
    def y(self):
        return self._y

    @property
    def left_slope(self):
        return self._left_slope

    @property
    def right_slope(self):
        return self._right_slope

    @property
    def dtype(self):
        return self._x.dtype

    @property
    def slopes(self):
        """Slopes of the n - 1 segments between consecutive breakpoints."""
        return self._slopes

    @property
    def extended_slopes(self):
        """`[left_slope, *slopes, right_slope]`, n + 1 values."""
        return self._extended_slopes

    def __len__(self):
        return len(self._x)

    def evaluate(self, t):
        """Value of the function at `t` (scalar or array_like)."""
        t = np.asarray(t, dtype=self.dtype)
        # k is the number of breakpoints at or left of t, which is also the
        # index of the active slope in the extended slopes
        k = np.searchsorted(self._x, t, side='right')
        anchor = np.maximum(k - 1, 0)
        return (self._y[anchor]
                + self._extended_slopes[k] * (t - self._x[anchor]))

    __call__ = evaluate

    def __repr__(self):
        return (f"{type(self).__name__}(x={self._x.tolist()}, "
                f"y={self._y.tolist()}, left_slope={self._left_slope}, "
                f"right_slope={self._right_slope})")

    def __eq__(self, other):
        if not isinstance(other, PiecewiseLinearFunction):
            return NotImplemented
        return (self.dtype == other.dtype
                and np.array_equal(self._x, other._x)
                and np.array_equal(self._y, other._y)
                and self._left_slope == other._left_slope
                and self._right_slope == other._right_slope)

    def __hash__(self):
        # adding zero maps -0.0 to 0.0, which compare equal
        return hash(((self._x + 0.0).tobytes(), (self._y + 0.0).tobytes(),
                     self._left_slope.item(), self._right_slope.item()))

    def isclose(self, other, atol=None):
        """Same breakpoints and slopes, within `atol`."""
        atol = resolve_atol(atol, self, other)
        return bool(len(self) == len(other)
                    and np.allclose(self._x, other._x, rtol=0, atol=atol)
                    and np.allclose(self._y, other._y, rtol=0, atol=atol)
                    and abs(self._left_slope - other._left_slope) <= atol
                    and abs(self._right_slope - other._right_slope) <= atol)

    # algebra
    def __pos__(self):
        return self

    def __neg__(self):
        from .merge import negate
        return negate(self)

    def __add__(self, other):
        from .merge import add, shift
        if isinstance(other, PiecewiseLinearFunction):
            return add(self, other)
        if is_scalar(other):
            return shift(self, other)
        return NotImplemented

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        from .merge import shift, subtract
        if isinstance(other, PiecewiseLinearFunction):
            return subtract(self, other)
        if is_scalar(other):
            return shift(self, -other)
        return NotImplemented

    def __rsub__(self, other):
        from .merge import negate, shift
        if is_scalar(other):
            return shift(negate(self), other)
        return NotImplemented

    def __mul__(self, other):
        from .merge import scale
        if is_scalar(other):
            return scale(self, other)
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        from .merge import scale
        if is_scalar(other):
            return scale(self, 1 / other)
        return NotImplemented

    def minimum(self, other, atol=None):
        from .merge import minimum
        return minimum(self, other, atol=atol)

    def maximum(self, other, atol=None):
        from .merge import maximum
        return maximum(self, other, atol=atol)

    def compose(self, inner, postprocess_breakpoints=True, atol=None):
        """`self ∘ inner`, see `pwlfunctions.compose`."""
        from .compose import compose
        return compose(self, inner,
                       postprocess_breakpoints=postprocess_breakpoints,
                       atol=atol)

    def is_convex(self, atol=None):
        from .convex import is_convex
        return is_convex(self, atol=atol)

    def remove_redundant_breakpoints(self, atol=None):
        from .canonical import remove_redundant_breakpoints
        return remove_redundant_breakpoints(self, atol=atol)
