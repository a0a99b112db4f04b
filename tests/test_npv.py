import numpy as np
import numpy_financial as npf
import pytest

from calcdesk.finance.irr import annuity_pv, npv
from calcdesk.finance.schedule import CashFlowSchedule
from calcdesk.results import DomainError

SCENARIO_A = [-100000, 25000, 30000, 35000, 40000, 45000]


def test_npv_at_zero_rate_is_plain_sum():
    assert npv(SCENARIO_A, 0) == 75000


@pytest.mark.parametrize("rate", [-0.5, -0.1, 0.0, 0.05, 0.12, 0.5, 3.0])
def test_npv_matches_numpy_financial(rate):
    assert npv(SCENARIO_A, rate) == pytest.approx(float(npf.npv(rate, SCENARIO_A)), rel=1e-12)


def test_npv_is_non_increasing_in_rate():
    values = [npv(SCENARIO_A, float(r)) for r in np.linspace(-0.9, 5.0, 120)]
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_npv_worked_example():
    assert npv([-1000, 500, 500, 500], 0.10) == pytest.approx(243.4259, abs=1e-4)


@pytest.mark.parametrize("rate", [-1.0, -1.5, float("nan"), float("inf")])
def test_npv_rejects_rates_outside_domain(rate):
    result = npv(SCENARIO_A, rate)
    assert isinstance(result, DomainError)
    assert "rate" in result.reason


def test_npv_rejects_bad_schedules():
    assert isinstance(npv([], 0.1), DomainError)
    assert isinstance(npv([1.0, float("inf")], 0.1), DomainError)


def test_npv_accepts_schedule_from_pairs():
    sched = CashFlowSchedule.from_pairs([(1, 25000), (0, -100000), (3, 35000), (2, 30000), (5, 45000), (4, 40000)])
    assert npv(sched, 0.08) == npv(SCENARIO_A, 0.08)


def test_annuity_pv_closed_form_matches_sum():
    flows = [0.0] + [30000.0] * 5
    assert annuity_pv(30000, 0.12, 5) == pytest.approx(npv(flows, 0.12), rel=1e-12)


def test_annuity_pv_zero_rate():
    assert annuity_pv(30000, 0.0, 5) == 150000


def test_annuity_pv_domain():
    assert isinstance(annuity_pv(100, -1.0, 5), DomainError)
    assert isinstance(annuity_pv(100, 0.1, -1), DomainError)
    assert isinstance(annuity_pv(float("nan"), 0.1, 5), DomainError)
