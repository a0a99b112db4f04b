"""
Sensitivity tables for the numerical core.

npv_profile: NPV across a grid of discount rates (the usual "test a range of
hurdle rates" view; its zero crossing is the IRR).
sample_size_grid: per-variant sample size across MDE x power combinations.
"""
from typing import Iterable, Optional
import logging

import numpy as np
import pandas as pd

from calcdesk.finance.irr import irr, npv
from calcdesk.finance.schedule import ScheduleLike, as_schedule
from calcdesk.results import DomainError, Found
from calcdesk.stats.sample_size import sample_size_per_variant

logger = logging.getLogger(__name__)

DEFAULT_RATES = np.linspace(-0.5, 1.0, 31)


def npv_profile(
    schedule: ScheduleLike,
    rates: Optional[Iterable[float]] = None,
) -> pd.DataFrame:
    """
    DataFrame with columns [rate, npv], one row per valid rate.

    Rates outside the NPV domain (<= -1) or where NPV is not finite are dropped.
    The solved IRR (if any) is stored in df.attrs['irr'].
    """
    cfs = as_schedule(schedule)
    grid = DEFAULT_RATES if rates is None else np.asarray(list(rates), dtype=float)

    rows = []
    skipped = 0
    for r in grid:
        value = npv(cfs, float(r))
        if isinstance(value, DomainError):
            skipped += 1
            continue
        rows.append({"rate": float(r), "npv": value})
    if skipped:
        logger.info("npv_profile: dropped %d rate(s) outside the NPV domain", skipped)

    df = pd.DataFrame(rows, columns=["rate", "npv"])
    solved = irr(cfs)
    df.attrs["irr"] = solved.value if isinstance(solved, Found) else None
    return df


def sample_size_grid(
    p1: float,
    deltas: Iterable[float],
    alpha: float = 0.05,
    powers: Iterable[float] = (0.8, 0.9),
) -> pd.DataFrame:
    """
    DataFrame with columns [delta, power, per_variant, total]; combinations
    that fall outside the valid domain are left out.
    """
    rows = []
    powers = list(powers)
    for d in deltas:
        for pw in powers:
            result = sample_size_per_variant(p1, float(d), alpha, float(pw))
            if isinstance(result, DomainError):
                logger.info("sample_size_grid: skipping delta=%s power=%s (%s)", d, pw, result.reason)
                continue
            rows.append({
                "delta": float(d),
                "power": float(pw),
                "per_variant": result.per_variant,
                "total": result.total,
            })
    return pd.DataFrame(rows, columns=["delta", "power", "per_variant", "total"])


__all__ = ["DEFAULT_RATES", "npv_profile", "sample_size_grid"]
