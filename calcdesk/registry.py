# calcdesk/registry.py
"""
Calculator registry: stable slug -> pure compute function.

Each compute takes validated inputs and returns a CalculatorResult holding the
headline value, secondary values and the warnings gathered along the way.
Nothing here formats numbers; callers render `format` as they see fit.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from calcdesk.finance.metrics import annuity_pv, discounted_payback, irr, npv, simple_payback
from calcdesk.results import DomainError, Found, NotFound, NotReached
from calcdesk.stats.sample_size import sample_size_per_variant
from calcdesk.validate import ValidationError, mode_from_env_or_flag, validate_inputs


@dataclass(frozen=True)
class ResultValue:
    key: str
    label: str
    value: Optional[float]  # None renders as "not available"
    format: str  # currency | number | percent | multiple | months | ratio | count
    detail: Optional[str] = None


@dataclass(frozen=True)
class CalculatorResult:
    headline: ResultValue
    secondary: Tuple[ResultValue, ...] = ()
    warnings: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "headline": asdict(self.headline),
            "secondary": [asdict(s) for s in self.secondary],
            "warnings": list(self.warnings),
        }


Compute = Callable[[Mapping[str, Any]], CalculatorResult]


@dataclass(frozen=True)
class CalculatorSpec:
    slug: str
    title: str
    category: str
    formula: str
    compute: Compute = field(repr=False)


CATEGORIES: Dict[str, str] = {
    "saas-metrics": "Core SaaS unit economics and retention metrics.",
    "paid-ads": "Ad performance and profitability calculators.",
    "finance": "Simple financial planning calculators.",
    "experimentation": "A/B test planning calculators.",
}


def _unavailable(key: str, label: str, fmt: str, warnings: Sequence[str]) -> CalculatorResult:
    return CalculatorResult(
        headline=ResultValue(key, label, None, fmt),
        warnings=tuple(warnings),
    )


def _reason(result: Any) -> str:
    if isinstance(result, DomainError):
        return result.reason
    if isinstance(result, NotFound):
        return f"IRR not available: {result.reason}"
    if isinstance(result, NotReached):
        if result.horizon is None:
            return "Never recovered: flow per period is not positive."
        return f"Not recovered within {result.horizon} periods (recovered {result.recovered:,.2f})."
    return str(result)


def _sign_changes(flows: Sequence[float]) -> int:
    signs = [f > 0 for f in flows if f != 0]
    return sum(1 for a, b in zip(signs, signs[1:]) if a != b)


# ------------------------------
# compute functions
# ------------------------------
def _npv_calculator(v: Mapping[str, Any]) -> CalculatorResult:
    warnings: List[str] = []
    r = v["discountRatePercent"] / 100
    if v["years"] <= 0:
        warnings.append("Years must be greater than 0.")

    pv = annuity_pv(v["annualCashFlow"], r, max(0.0, v["years"]))
    if isinstance(pv, DomainError):
        return _unavailable("npv", "Net present value (NPV)", "currency", warnings + [pv.reason])

    return CalculatorResult(
        headline=ResultValue(
            "npv", "Net present value (NPV)", pv - v["initialInvestment"], "currency",
            "PV of cash flows − initial investment",
        ),
        secondary=(ResultValue("pv", "Present value of cash flows", pv, "currency"),),
        warnings=tuple(warnings),
    )


def _irr_calculator(v: Mapping[str, Any]) -> CalculatorResult:
    warnings: List[str] = []
    flows = list(v["cashflows"])
    if flows and flows[0] >= 0:
        warnings.append("The first cash flow is usually the initial investment (negative).")
    if _sign_changes(flows) > 1:
        warnings.append("Cash flows change sign more than once; more than one IRR may exist.")

    result = irr(flows)
    if not isinstance(result, Found):
        return _unavailable("irr", "Internal rate of return (IRR)", "percent", warnings + [_reason(result)])

    residual = npv(flows, result.value)
    return CalculatorResult(
        headline=ResultValue(
            "irr", "Internal rate of return (IRR)", result.value, "percent",
            "Rate where NPV = 0",
        ),
        secondary=(
            ResultValue("npvAtIrr", "NPV at IRR", residual if isinstance(residual, float) else None, "currency"),
            ResultValue("netCashFlow", "Undiscounted net cash flow", sum(flows), "currency"),
        ),
        warnings=tuple(warnings),
    )


def _discounted_payback_calculator(v: Mapping[str, Any]) -> CalculatorResult:
    warnings: List[str] = []
    outlay = v["initialInvestment"]
    flow = v["cashFlowPerPeriod"]
    r = v["discountRatePercent"] / 100
    horizon = int(v["horizonPeriods"])
    if flow <= 0:
        warnings.append("Cash flow per period must be greater than 0.")

    simple = simple_payback(outlay, flow)
    secondary = (
        ResultValue(
            "simplePayback", "Simple payback (periods)",
            simple.value if isinstance(simple, Found) else None, "number",
            "Initial investment ÷ cash flow per period",
        ),
    )

    result = discounted_payback(outlay, lambda t: flow, r, horizon)
    if not isinstance(result, Found):
        warnings.append(_reason(result))
        return CalculatorResult(
            headline=ResultValue("discountedPayback", "Discounted payback (periods)", None, "number"),
            secondary=secondary,
            warnings=tuple(warnings),
        )
    return CalculatorResult(
        headline=ResultValue(
            "discountedPayback", "Discounted payback (periods)", result.value, "number",
            "First period where cumulative discounted cash flow ≥ investment",
        ),
        secondary=secondary,
        warnings=tuple(warnings),
    )


def _cac_payback_calculator(v: Mapping[str, Any]) -> CalculatorResult:
    warnings: List[str] = []
    gross_profit = v["arpaMonthly"] * (v["grossMarginPercent"] / 100)
    if v["cac"] <= 0:
        warnings.append("CAC must be greater than 0.")
    if gross_profit <= 0:
        warnings.append("Gross profit per month must be greater than 0.")

    result = simple_payback(v["cac"], gross_profit)
    secondary = (ResultValue("grossProfitPerMonth", "Gross profit / month", gross_profit, "currency"),)
    if not isinstance(result, Found):
        return CalculatorResult(
            headline=ResultValue("payback", "Payback period", None, "months"),
            secondary=secondary,
            warnings=tuple(warnings),
        )
    return CalculatorResult(
        headline=ResultValue(
            "payback", "Payback period", result.value, "months",
            "CAC ÷ (ARPA × Gross margin)",
        ),
        secondary=secondary,
        warnings=tuple(warnings),
    )


def _ab_test_sample_size_calculator(v: Mapping[str, Any]) -> CalculatorResult:
    result = sample_size_per_variant(
        p1=v["baselineRatePercent"] / 100,
        delta=v["mdePoints"] / 100,
        alpha=v["significancePercent"] / 100,
        power=v["powerPercent"] / 100,
    )
    if isinstance(result, DomainError):
        return _unavailable("perVariant", "Sample size per variant", "count", [result.reason])
    return CalculatorResult(
        headline=ResultValue(
            "perVariant", "Sample size per variant", result.per_variant, "count",
            "Two-sided two-proportion z-test",
        ),
        secondary=(
            ResultValue("total", "Total sample size (2 variants)", result.total, "count"),
            ResultValue("variantRate", "Variant conversion rate", result.p2, "percent"),
            ResultValue("zAlpha", "z (1 − α/2)", result.z_alpha, "number"),
            ResultValue("zPower", "z (power)", result.z_power, "number"),
        ),
    )


CALCULATORS: Dict[str, CalculatorSpec] = {
    spec.slug: spec
    for spec in (
        CalculatorSpec(
            "npv-calculator", "NPV Calculator", "finance",
            "NPV = Σ (cash flow_t / (1 + r)^t) − initial investment (annuity PV for constant cash flow)",
            _npv_calculator,
        ),
        CalculatorSpec(
            "irr-calculator", "IRR Calculator", "finance",
            "IRR = r such that Σ cash flow_t / (1 + r)^t = 0",
            _irr_calculator,
        ),
        CalculatorSpec(
            "discounted-payback-calculator", "Discounted Payback Calculator", "finance",
            "Payback = first t where Σ cash flow_k / (1 + r)^k ≥ investment (interpolated within the period)",
            _discounted_payback_calculator,
        ),
        CalculatorSpec(
            "cac-payback-period-calculator", "CAC Payback Period Calculator", "saas-metrics",
            "Payback (months) = CAC ÷ (ARPA × Gross Margin)",
            _cac_payback_calculator,
        ),
        CalculatorSpec(
            "ab-test-sample-size-calculator", "A/B Test Sample Size Calculator", "experimentation",
            "n = ((z(1−α/2)·√(2p̄(1−p̄)) + z(power)·√(p1(1−p1)+p2(1−p2))) / MDE)²",
            _ab_test_sample_size_calculator,
        ),
    )
}


def get_calculator(slug: str) -> Optional[CalculatorSpec]:
    return CALCULATORS.get(slug)


def calculators_by_category(category: str) -> List[CalculatorSpec]:
    return sorted((c for c in CALCULATORS.values() if c.category == category), key=lambda c: c.slug)


def run_calculator(
    slug: str,
    inputs: Mapping[str, Any],
    *,
    mode: str | None = None,
) -> CalculatorResult:
    """Validate raw inputs, compute, and append validation warnings to the result."""
    spec = get_calculator(slug)
    if spec is None:
        raise ValidationError(f"unknown calculator: {slug}")
    clean, input_warnings = validate_inputs(slug, inputs, mode=mode_from_env_or_flag(mode))
    result = spec.compute(clean)
    if not input_warnings:
        return result
    return CalculatorResult(
        headline=result.headline,
        secondary=result.secondary,
        warnings=tuple(input_warnings) + result.warnings,
    )


__all__ = [
    "ResultValue",
    "CalculatorResult",
    "CalculatorSpec",
    "CATEGORIES",
    "CALCULATORS",
    "get_calculator",
    "calculators_by_category",
    "run_calculator",
]
