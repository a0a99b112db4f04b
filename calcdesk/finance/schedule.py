# calcdesk/finance/schedule.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple, Union

from calcdesk.results import require


@dataclass(frozen=True)
class CashFlowSchedule:
    """
    Ordered cash flows where amounts[t] belongs to period t (t = 0, 1, ...).
    Period 0 is conventionally the initial outlay (usually negative).
    """

    amounts: Tuple[float, ...]

    def __post_init__(self) -> None:
        require(len(self.amounts) > 0, "cash-flow schedule must not be empty")
        for t, cf in enumerate(self.amounts):
            require(math.isfinite(cf), f"cash flow at period {t} is not finite: {cf}")

    @classmethod
    def from_amounts(cls, amounts: Iterable[float]) -> "CashFlowSchedule":
        return cls(tuple(float(x) for x in amounts))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, float]]) -> "CashFlowSchedule":
        """Build from (period, amount) pairs; periods must be 0..n-1 with no gaps or repeats."""
        items = []
        for p, a in pairs:
            require(math.isfinite(float(p)) and float(p) == int(p), f"period must be a whole number (got {p})")
            items.append((int(p), float(a)))
        items.sort()
        require(len(items) > 0, "cash-flow schedule must not be empty")
        periods = [p for p, _ in items]
        require(len(set(periods)) == len(periods), "duplicate period in cash-flow schedule")
        require(
            periods == list(range(len(periods))),
            "periods must be consecutive integers starting at 0",
        )
        return cls(tuple(a for _, a in items))

    @property
    def periods(self) -> range:
        return range(len(self.amounts))

    def pairs(self) -> Iterable[Tuple[int, float]]:
        return enumerate(self.amounts)

    def has_sign_change(self) -> bool:
        return any(cf > 0 for cf in self.amounts) and any(cf < 0 for cf in self.amounts)

    def __len__(self) -> int:
        return len(self.amounts)


def check_rate(rate: float, name: str = "rate") -> float:
    """Per-period rate guard: finite and 1 + rate > 0."""
    r = float(rate)
    require(math.isfinite(r), f"{name} must be finite (got {r})")
    require(1.0 + r > 0.0, f"{name} must be greater than -1 (got {r})")
    return r


ScheduleLike = Union[CashFlowSchedule, Sequence[float]]


def as_schedule(schedule: ScheduleLike) -> CashFlowSchedule:
    if isinstance(schedule, CashFlowSchedule):
        return schedule
    return CashFlowSchedule.from_amounts(schedule)


__all__ = ["CashFlowSchedule", "ScheduleLike", "as_schedule", "check_rate"]
