"""Numerical kernels used by :mod:`pcspace.analysis`."""

from . import statistics

__all__ = ["statistics"]
