# calcdesk/finance/payback.py
"""
Payback period helpers.

discounted_payback walks discounted inflows period by period and interpolates
linearly inside the period where the outlay is first recovered. It never
extrapolates past the horizon.
"""
from __future__ import annotations

import math
from typing import Callable, List, Optional, Sequence, Union

from calcdesk.finance.schedule import check_rate
from calcdesk.results import (
    DomainError,
    Found,
    InputDomainError,
    NotReached,
    PaybackResult,
    require,
)

FlowLike = Union[Callable[[int], float], Sequence[float]]


def _flow_function(flow: FlowLike, horizon: Optional[int]):
    """Normalise flow to (period -> amount, horizon). Sequence item k is period k+1."""
    if callable(flow):
        require(horizon is not None, "horizon is required when flow is a function")
        return flow, horizon
    flows: List[float] = [float(x) for x in flow]
    if horizon is None:
        horizon = len(flows)
    require(horizon <= len(flows), f"horizon {horizon} exceeds the {len(flows)} flows given")
    return (lambda t: flows[t - 1]), horizon


def discounted_payback(
    outlay: float,
    flow: FlowLike,
    rate: float,
    horizon: Optional[int] = None,
) -> PaybackResult:
    """
    Smallest fractional period t* where cumulative discounted inflow >= outlay.

    On the crossing period t:
        t* = (t - 1) + (outlay - cumulative_before) / discounted_flow_t

    rate == 0 uses the flows undiscounted, so a constant flow gives exactly the
    simple payback outlay / flow.
    """
    try:
        i = float(outlay)
        require(math.isfinite(i) and i > 0.0, f"outlay must be > 0 (got {outlay})")
        r = check_rate(rate)
        flow_at, n = _flow_function(flow, horizon)
        require(int(n) == n and n >= 1, f"horizon must be a positive integer (got {n})")
        n = int(n)

        base = 1.0 + r
        cumulative = 0.0
        for t in range(1, n + 1):
            cf = float(flow_at(t))
            require(math.isfinite(cf), f"cash flow at period {t} is not finite: {cf}")
            if r == 0.0:
                discounted = cf
            else:
                try:
                    discounted = cf * base ** (-t)
                except OverflowError:
                    return DomainError(f"discounting overflowed at period {t} for rate {r}")
            if cumulative + discounted >= i:
                return Found((t - 1) + (i - cumulative) / discounted)
            cumulative += discounted
    except InputDomainError as e:
        return DomainError(str(e))
    return NotReached(horizon=n, recovered=cumulative)


def simple_payback(outlay: float, flow_per_period: float) -> PaybackResult:
    """Undiscounted payback: outlay / flow (e.g. CAC / monthly gross profit)."""
    try:
        i = float(outlay)
        f = float(flow_per_period)
        require(math.isfinite(i) and i > 0.0, f"outlay must be > 0 (got {outlay})")
        require(math.isfinite(f), f"flow must be finite (got {flow_per_period})")
    except InputDomainError as e:
        return DomainError(str(e))
    if f <= 0.0:
        return NotReached(horizon=None, recovered=0.0)
    return Found(i / f)


__all__ = ["discounted_payback", "simple_payback"]
