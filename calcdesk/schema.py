from __future__ import annotations
from typing import Dict, Any

# Input schema per calculator: unit, type, min/max ranges, default and description.
# Bounds are advisory in relaxed mode (warnings) and enforced in strict mode.
SCHEMA: Dict[str, Dict[str, Dict[str, Any]]] = {
    "npv-calculator": {
        "initialInvestment":   {"unit": "USD",     "type": "float", "min": 0.0, "max": 1e12, "default": 100000.0, "desc": "Initial investment (upfront)"},
        "annualCashFlow":      {"unit": "USD",     "type": "float", "min": -1e12, "max": 1e12, "default": 30000.0, "desc": "Annual cash flow"},
        "years":               {"unit": "years",   "type": "float", "min": 1.0, "max": 100.0, "default": 5.0, "desc": "Years"},
        "discountRatePercent": {"unit": "percent", "type": "float", "min": 0.0, "max": 100.0, "default": 12.0, "desc": "Discount rate"},
    },
    "irr-calculator": {
        "cashflows":           {"unit": "USD",     "type": "list",  "min_len": 2, "default": [-100000.0, 25000.0, 30000.0, 35000.0, 40000.0, 45000.0], "desc": "Cash flows, period 0 first"},
    },
    "discounted-payback-calculator": {
        "initialInvestment":   {"unit": "USD",     "type": "float", "min": 0.0, "max": 1e12, "default": 100000.0, "desc": "Initial investment (upfront)"},
        "cashFlowPerPeriod":   {"unit": "USD",     "type": "float", "min": -1e12, "max": 1e12, "default": 30000.0, "desc": "Cash flow per period"},
        "discountRatePercent": {"unit": "percent", "type": "float", "min": 0.0, "max": 100.0, "default": 10.0, "desc": "Discount rate per period"},
        "horizonPeriods":      {"unit": "periods", "type": "int",   "min": 1, "max": 600, "default": 20, "desc": "Periods to search"},
    },
    "cac-payback-period-calculator": {
        "cac":                 {"unit": "USD",     "type": "float", "min": 0.0, "max": 1e9, "default": 500.0, "desc": "CAC"},
        "arpaMonthly":         {"unit": "USD",     "type": "float", "min": 0.0, "max": 1e9, "default": 200.0, "desc": "ARPA per month"},
        "grossMarginPercent":  {"unit": "percent", "type": "float", "min": 0.0, "max": 100.0, "default": 80.0, "desc": "Gross margin"},
    },
    "ab-test-sample-size-calculator": {
        "baselineRatePercent": {"unit": "percent", "type": "float", "min": 0.0, "max": 100.0, "default": 2.5, "desc": "Baseline conversion rate"},
        "mdePoints":           {"unit": "pp",      "type": "float", "min": 0.0, "max": 100.0, "default": 0.5, "desc": "Minimum detectable effect (absolute percentage points)"},
        "significancePercent": {"unit": "percent", "type": "float", "min": 0.0, "max": 100.0, "default": 5.0, "desc": "Significance level (two-sided)"},
        "powerPercent":        {"unit": "percent", "type": "float", "min": 0.0, "max": 100.0, "default": 80.0, "desc": "Statistical power"},
    },
}
