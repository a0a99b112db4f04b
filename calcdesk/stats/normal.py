# calcdesk/stats/normal.py
"""
Standard normal CDF and its inverse.

inv_normal_cdf uses Acklam's piecewise rational approximation: one
coefficient set for the central region p_low <= p <= 1 - p_low and a second
set (mirrored) for the two tails. Relative error is below 1.15e-9 over the
whole open interval (0, 1), i.e. absolute error of order 1e-9 for |x| <= 1
and of order 1e-8 far out in the tails.

refine=True applies exactly one Halley step against normal_cdf, which takes
the result to near machine precision. It is never iterated.
"""
from __future__ import annotations

import math
from typing import Union

from calcdesk.results import DomainError

# Central region
A = (
    -3.969683028665376e01,
    2.209460984245205e02,
    -2.759285104469687e02,
    1.383577518672690e02,
    -3.066479806614716e01,
    2.506628277459239e00,
)
B = (
    -5.447609879822406e01,
    1.615858368580409e02,
    -1.556989798598866e02,
    6.680131188771972e01,
    -1.328068155288572e01,
)
# Tails
C = (
    -7.784894002430293e-03,
    -3.223964580411365e-01,
    -2.400758277161838e00,
    -2.549732539343734e00,
    4.374664141464968e00,
    2.938163982698783e00,
)
D = (
    7.784695709041462e-03,
    3.224671290700398e-01,
    2.445134137142996e00,
    3.754408661907416e00,
)

P_LOW = 0.02425
P_HIGH = 1.0 - P_LOW
MAX_REL_ERROR = 1.15e-9
# exp(x*x / 2) overflows past this
_REFINE_LIMIT = 37.0


def normal_cdf(x: float) -> float:
    """Phi(x) via erfc, accurate in both tails."""
    return 0.5 * math.erfc(-x / math.sqrt(2.0))


def _tail(q: float) -> float:
    return (((((C[0] * q + C[1]) * q + C[2]) * q + C[3]) * q + C[4]) * q + C[5]) / (
        (((D[0] * q + D[1]) * q + D[2]) * q + D[3]) * q + 1.0
    )


def _acklam(p: float) -> float:
    if p < P_LOW:
        return _tail(math.sqrt(-2.0 * math.log(p)))
    if p > P_HIGH:
        return -_tail(math.sqrt(-2.0 * math.log1p(-p)))
    q = p - 0.5
    r = q * q
    return (((((A[0] * r + A[1]) * r + A[2]) * r + A[3]) * r + A[4]) * r + A[5]) * q / (
        ((((B[0] * r + B[1]) * r + B[2]) * r + B[3]) * r + B[4]) * r + 1.0
    )


def inv_normal_cdf(p: float, refine: bool = False) -> Union[float, DomainError]:
    """
    Quantile function of the standard normal: x such that Phi(x) = p.

    p must lie in the open interval (0, 1); otherwise DomainError.
    """
    p = float(p)
    if not (0.0 < p < 1.0):
        return DomainError(f"probability must be in (0, 1) (got {p})")
    x = _acklam(p)
    if refine and abs(x) < _REFINE_LIMIT:
        # single Halley step; upper half works on the complement, 1 - p is exact there
        if p > 0.5:
            e = (1.0 - p) - normal_cdf(-x)
        else:
            e = normal_cdf(x) - p
        u = e * math.sqrt(2.0 * math.pi) * math.exp(x * x / 2.0)
        x = x - u / (1.0 + x * u / 2.0)
    return x


__all__ = ["normal_cdf", "inv_normal_cdf", "MAX_REL_ERROR"]
