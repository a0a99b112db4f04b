"""
Finance metrics façade.

Design:
- IRR/NPV implementations live only in calcdesk.finance.irr (singleton).
- This module must not *define* irr/npv (no 'def irr' / 'def npv' here).
- Calculators import the numerical core from here.
"""
from .irr import npv as npv, irr as irr, annuity_pv as annuity_pv  # re-exports only
from .payback import discounted_payback as discounted_payback, simple_payback as simple_payback
from .schedule import CashFlowSchedule as CashFlowSchedule

__all__ = ["npv", "irr", "annuity_pv", "discounted_payback", "simple_payback", "CashFlowSchedule"]
