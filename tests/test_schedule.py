import pytest

from calcdesk.finance.schedule import CashFlowSchedule, as_schedule, check_rate
from calcdesk.results import InputDomainError


def test_from_pairs_sorts_by_period():
  s = CashFlowSchedule.from_pairs([(2, 60), (0, -100), (1, 60)])
  assert s.amounts == (-100.0, 60.0, 60.0)
  assert list(s.pairs()) == [(0, -100.0), (1, 60.0), (2, 60.0)]
  assert s.periods == range(3)
  assert len(s) == 3


@pytest.mark.parametrize(
  "pairs, message",
  [
    ([(0, -100), (1, 50), (1, 60)], "duplicate"),
    ([(0, -100), (2, 60)], "consecutive"),
    ([(1, -100), (2, 60)], "consecutive"),
    ([], "empty"),
    ([(0, -100), (1, float("inf"))], "not finite"),
  ],
)
def test_from_pairs_rejects_malformed_schedules(pairs, message):
  with pytest.raises(InputDomainError, match=message):
    CashFlowSchedule.from_pairs(pairs)


def test_sign_change_detection():
  assert CashFlowSchedule.from_amounts([-1, 2]).has_sign_change()
  assert not CashFlowSchedule.from_amounts([0, 0, 3]).has_sign_change()
  assert not CashFlowSchedule.from_amounts([0.0]).has_sign_change()


def test_as_schedule_passes_schedules_through():
  s = CashFlowSchedule.from_amounts([-1, 2])
  assert as_schedule(s) is s
  assert as_schedule([-1, 2]) == s


def test_input_domain_error_is_a_value_error():
  with pytest.raises(ValueError):
    CashFlowSchedule.from_amounts([])


@pytest.mark.parametrize("rate", [-1.0, -3.0, float("nan"), float("-inf")])
def test_check_rate_rejects(rate):
  with pytest.raises(InputDomainError):
    check_rate(rate)


def test_check_rate_accepts_and_names_field():
  assert check_rate("0.05") == 0.05
  with pytest.raises(InputDomainError, match="hurdle"):
    check_rate(-1, name="hurdle")


@pytest.mark.parametrize("period", [1.5, 0.25, float("nan"), float("inf")])
def test_from_pairs_rejects_fractional_periods(period):
  with pytest.raises(InputDomainError, match="whole number"):
    CashFlowSchedule.from_pairs([(0, -100.0), (period, 60.0), (2, 60.0)])


def test_from_pairs_accepts_integral_floats():
  s = CashFlowSchedule.from_pairs([(0.0, -100.0), (1.0, 60.0), (2, 60.0)])
  assert s.amounts == (-100.0, 60.0, 60.0)
