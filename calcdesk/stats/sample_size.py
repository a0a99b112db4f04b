# calcdesk/stats/sample_size.py
"""
Per-variant sample size for a two-sided, two-proportion z-test.

    p2     = p1 + delta
    p_bar  = (p1 + p2) / 2
    s1     = sqrt(2 * p_bar * (1 - p_bar))          (pooled, under H0)
    s2     = sqrt(p1 (1 - p1) + p2 (1 - p2))         (unpooled, under H1)
    n      = ceil(((z_alpha * s1 + z_power * s2) / delta) ** 2)

with z_alpha = Phi^-1(1 - alpha / 2) and z_power = Phi^-1(power).
"""
from __future__ import annotations

import math
from typing import Union

from calcdesk.results import DomainError, InputDomainError, SampleSizeResult, require
from calcdesk.stats.normal import inv_normal_cdf


def _open_unit(value: float, name: str) -> float:
    v = float(value)
    require(0.0 < v < 1.0, f"{name} must be in (0, 1) (got {v})")
    return v


def sample_size_per_variant(
    p1: float,
    delta: float,
    alpha: float = 0.05,
    power: float = 0.8,
) -> Union[SampleSizeResult, DomainError]:
    """
    p1     baseline conversion rate
    delta  minimum detectable absolute effect (p2 - p1), > 0
    alpha  two-sided significance level
    power  1 - beta
    """
    try:
        p1 = _open_unit(p1, "p1")
        d = float(delta)
        require(d > 0.0 and math.isfinite(d), f"delta must be > 0 (got {d})")
        p2 = _open_unit(p1 + d, "p2 = p1 + delta")
        alpha = _open_unit(alpha, "alpha")
        power = _open_unit(power, "power")
    except InputDomainError as e:
        return DomainError(str(e))

    z_alpha = inv_normal_cdf(1.0 - alpha / 2.0)
    z_power = inv_normal_cdf(power)
    if isinstance(z_alpha, DomainError):
        return z_alpha
    if isinstance(z_power, DomainError):
        return z_power

    p_bar = (p1 + p2) / 2.0
    s1 = math.sqrt(2.0 * p_bar * (1.0 - p_bar))
    s2 = math.sqrt(p1 * (1.0 - p1) + p2 * (1.0 - p2))
    # power below 0.5 gives z_power < 0; clamp the sum at zero before squaring
    n = (max(0.0, z_alpha * s1 + z_power * s2) / d) ** 2
    if not math.isfinite(n):
        return DomainError(f"sample size is not finite for delta={d}")
    return SampleSizeResult(
        per_variant=max(1, math.ceil(n)),
        z_alpha=z_alpha,
        z_power=z_power,
        p2=p2,
    )


__all__ = ["sample_size_per_variant"]
