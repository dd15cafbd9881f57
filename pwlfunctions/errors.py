# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #


class PiecewiseLinearError(Exception):
    """Base class for all errors raised by pwlfunctions."""


class InvalidBreakpoints(PiecewiseLinearError, ValueError):
    """Breakpoints do not describe a valid piecewise linear function."""


class NotConvexInput(PiecewiseLinearError, ValueError):
    """An operation requiring convex operands received a non convex one."""


class UnboundedMeet(PiecewiseLinearError, ValueError):
    """No finite convex function lies below both operands."""
