# calcdesk/finance/irr.py
"""
Present value and internal rate of return.

This is the only module that defines npv/irr; everything else re-exports
(see finance/metrics.py).

IRR is found by bracketing a sign change of NPV(rate) and bisecting it.
Known limitation: a schedule with several sign changes can have several IRRs.
The solver is not a multi-root solver; it returns the root inside the first
bracket found, in the fixed order [lo, PROBE_LADDER..., hi].
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple, Union

from calcdesk.finance.schedule import ScheduleLike, as_schedule, check_rate
from calcdesk.results import (
    DomainError,
    Found,
    InputDomainError,
    NotFound,
    SolveResult,
    require,
)

logger = logging.getLogger(__name__)

DEFAULT_LO = -0.9999
DEFAULT_HI = 10.0
PROBE_LADDER = (-0.9, -0.5, -0.2, 0.0, 0.1, 0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 8.0, 10.0)
MAX_BISECTIONS = 80
NPV_TOLERANCE = 1e-10

Bracket = Tuple[float, float, float, float]  # lo, hi, npv(lo), npv(hi)


def _discounted_sum(amounts: Sequence[float], rate: float) -> float:
    """Unguarded NPV; NaN when (1+rate)**t over- or underflows."""
    base = 1.0 + rate
    total = 0.0
    try:
        for t, cf in enumerate(amounts):
            total += cf / (base ** t)
    except (OverflowError, ZeroDivisionError):
        return math.nan
    return total


# ---------- NPV ----------
def npv(cashflows: ScheduleLike, rate: float) -> Union[float, DomainError]:
    """
    Classic discounted cash flow:
        NPV(r) = sum_{t=0..N} CF[t] / (1+r)^t

    Returns DomainError for rate <= -1, an invalid schedule, or when the
    compounding leaves the floating-point range.

    >>> npv([-100000, 25000, 30000, 35000, 40000, 45000], 0)
    75000.0
    """
    try:
        schedule = as_schedule(cashflows)
        r = check_rate(rate)
    except InputDomainError as e:
        return DomainError(str(e))
    value = _discounted_sum(schedule.amounts, r)
    if not math.isfinite(value):
        return DomainError(f"NPV is not finite at rate {r}")
    return value


def annuity_pv(amount: float, rate: float, periods: float) -> Union[float, DomainError]:
    """
    Present value of a constant flow paid at the end of each period:
        amount * (1 - (1+r)^-n) / r     (r != 0)
        amount * n                      (r == 0)
    """
    try:
        r = check_rate(rate)
        n = float(periods)
        require(math.isfinite(n) and n >= 0, f"periods must be >= 0 (got {periods})")
        a = float(amount)
        require(math.isfinite(a), f"amount must be finite (got {amount})")
    except InputDomainError as e:
        return DomainError(str(e))
    if r == 0.0:
        return a * n
    try:
        return a * (1.0 - (1.0 + r) ** (-n)) / r
    except (OverflowError, ZeroDivisionError):
        return DomainError(f"annuity PV is not finite at rate {r} over {n} periods")


# ---------- IRR (periodic) ----------
def _straddles(f_a: float, f_b: float) -> bool:
    return f_a == 0.0 or f_b == 0.0 or (f_a < 0.0) != (f_b < 0.0)


def _find_bracket(amounts: Sequence[float], lo: float, hi: float) -> Tuple[Optional[Bracket], int]:
    """
    Outer bounds first; if they agree in sign, walk [lo, ladder..., hi] pairwise.
    Non-finite probes are skipped. Returns (bracket or None, finite probe count).
    """
    f_lo = _discounted_sum(amounts, lo)
    f_hi = _discounted_sum(amounts, hi)
    if math.isfinite(f_lo) and math.isfinite(f_hi) and _straddles(f_lo, f_hi):
        return (lo, hi, f_lo, f_hi), 2

    points = [lo] + [r for r in PROBE_LADDER if lo < r < hi] + [hi]
    finite = 0
    prev: Optional[Tuple[float, float]] = None
    for r in points:
        f = f_lo if r == lo else f_hi if r == hi else _discounted_sum(amounts, r)
        if not math.isfinite(f):
            logger.debug("irr: skipping non-finite probe at rate %r", r)
            continue
        finite += 1
        if prev is not None and _straddles(prev[1], f):
            return (prev[0], r, prev[1], f), finite
        prev = (r, f)
    return None, finite


def _bisect(amounts: Sequence[float], bracket: Bracket) -> Tuple[float, int]:
    lo, hi, f_lo, f_hi = bracket
    if f_lo == 0.0:
        return lo, 0
    if f_hi == 0.0:
        return hi, 0
    for i in range(1, MAX_BISECTIONS + 1):
        mid = (lo + hi) / 2.0
        f_mid = _discounted_sum(amounts, mid)
        if abs(f_mid) < NPV_TOLERANCE:
            return mid, i
        # keep the sub-interval where sign changes
        if (f_lo < 0.0) != (f_mid < 0.0):
            hi, f_hi = mid, f_mid
        else:
            lo, f_lo = mid, f_mid
    return (lo + hi) / 2.0, MAX_BISECTIONS


def irr(
    cashflows: ScheduleLike,
    lo: float = DEFAULT_LO,
    hi: float = DEFAULT_HI,
) -> SolveResult:
    """
    Periodic Internal Rate of Return: the rate r with NPV(r, cashflows) = 0.

    Returns
    -------
    Found(rate)      rate as a decimal (0.18 = 18%)
    NotFound(reason) flows never change sign, or no bracket in [lo, hi]
    DomainError      invalid schedule or bounds

    Edge Cases
    ----------
    - All-positive, all-negative or all-zero flows: NotFound (no probing)
    - Multiple roots: the first bracket in probe order wins
    """
    try:
        schedule = as_schedule(cashflows)
        lo = check_rate(lo, "lo")
        hi = check_rate(hi, "hi")
        require(hi > lo, f"hi must exceed lo (got lo={lo}, hi={hi})")
    except InputDomainError as e:
        return DomainError(str(e))

    if not schedule.has_sign_change():
        return NotFound("cash flows never change sign")

    amounts = schedule.amounts
    bracket, finite = _find_bracket(amounts, lo, hi)
    if bracket is None:
        if finite == 0:
            return NotFound("NPV was not finite at any probe rate")
        return NotFound(f"no sign change of NPV found in [{lo}, {hi}]")

    rate, iterations = _bisect(amounts, bracket)
    logger.debug(
        "irr: bracket [%r, %r] -> %r after %d bisections",
        bracket[0], bracket[1], rate, iterations,
    )
    return Found(rate)


solve_irr = irr

__all__ = [
    "DEFAULT_LO",
    "DEFAULT_HI",
    "PROBE_LADDER",
    "MAX_BISECTIONS",
    "npv",
    "annuity_pv",
    "irr",
    "solve_irr",
]
