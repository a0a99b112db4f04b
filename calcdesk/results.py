# calcdesk/results.py
"""
Result variants shared by the numerical core.

Every public operation returns one of these instead of raising on bad numbers:
  Found(value)            a solved quantity (IRR, payback period)
  NotFound(reason)        no root exists / none could be bracketed
  NotReached(...)         payback never reached inside the horizon
  DomainError(reason)     input outside the mathematically valid range

NotFound / NotReached are normal business outcomes ("not available"), not bugs.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


class InputDomainError(ValueError):
    """Raised internally by guards; public functions turn it into DomainError."""


@dataclass(frozen=True)
class Found:
    value: float


@dataclass(frozen=True)
class NotFound:
    reason: str = ""


@dataclass(frozen=True)
class NotReached:
    horizon: Optional[int]
    recovered: float = 0.0


@dataclass(frozen=True)
class DomainError:
    reason: str


@dataclass(frozen=True)
class SampleSizeResult:
    per_variant: int
    z_alpha: float
    z_power: float
    p2: float

    @property
    def total(self) -> int:
        return 2 * self.per_variant


SolveResult = Union[Found, NotFound, DomainError]
PaybackResult = Union[Found, NotReached, DomainError]


def require(condition: bool, reason: str) -> None:
    if not condition:
        raise InputDomainError(reason)


__all__ = [
    "InputDomainError",
    "Found",
    "NotFound",
    "NotReached",
    "DomainError",
    "SampleSizeResult",
    "SolveResult",
    "PaybackResult",
    "require",
]
