import pytest

from calcdesk.finance.irr import npv
from calcdesk.finance.payback import discounted_payback, simple_payback
from calcdesk.results import DomainError, Found, NotReached


@pytest.mark.parametrize(
    "outlay, flow, horizon",
    [(1000.0, 300.0, 10), (100000.0, 30000.0, 5), (500.0, 160.0, 12), (7.0, 3.0, 3), (1.0, 1.0, 1)],
)
def test_zero_rate_matches_simple_payback(outlay, flow, horizon):
    result = discounted_payback(outlay, lambda t: flow, 0.0, horizon)
    assert isinstance(result, Found)
    assert result.value == pytest.approx(outlay / flow, rel=1e-12)
    assert result == Found(pytest.approx(simple_payback(outlay, flow).value, rel=1e-12))


def test_discounted_payback_crossing_is_interpolated():
    # 900 outlay, 400/period at 10%: 363.64, 330.58, 300.53 -> crosses in period 3
    result = discounted_payback(900.0, lambda t: 400.0, 0.10, 10)
    assert isinstance(result, Found)
    before = 400 / 1.1 + 400 / 1.1 ** 2
    expected = 2 + (900 - before) / (400 / 1.1 ** 3)
    assert result.value == pytest.approx(expected, rel=1e-12)
    assert 2.0 < result.value < 3.0


def test_discounted_payback_is_longer_than_simple():
    d = discounted_payback(1000.0, lambda t: 250.0, 0.08, 20)
    s = simple_payback(1000.0, 250.0)
    assert d.value > s.value


def test_cumulative_at_crossing_covers_outlay():
    flows = [200.0, 300.0, 400.0, 500.0]
    result = discounted_payback(800.0, flows, 0.05)
    assert isinstance(result, Found)
    whole = int(result.value)
    # discounted inflows through the completed periods fall short of the outlay
    assert npv([0.0] + flows[:whole], 0.05) < 800.0
    assert npv([0.0] + flows[: whole + 1], 0.05) >= 800.0


def test_not_reached_inside_horizon():
    result = discounted_payback(1000.0, lambda t: 100.0, 0.10, 5)
    assert isinstance(result, NotReached)
    assert result.horizon == 5
    assert result.recovered == pytest.approx(100 * (1 - 1.1 ** -5) / 0.1, rel=1e-12)


def test_perpetuity_below_outlay_is_never_reached():
    # 100/period at 10% is worth at most 1000 in total
    result = discounted_payback(1000.0, lambda t: 100.0, 0.10, 500)
    assert isinstance(result, NotReached)


def test_varying_flows_with_negative_period():
    flows = [500.0, -200.0, 400.0, 600.0]
    result = discounted_payback(900.0, flows, 0.0)
    # cumulative: 500, 300, 700, 1300 -> crosses in period 4
    assert result == Found(pytest.approx(3 + 200 / 600))


def test_sequence_horizon_defaults_to_length():
    assert isinstance(discounted_payback(1000.0, [100.0, 100.0], 0.0), NotReached)
    assert discounted_payback(1000.0, [100.0, 100.0], 0.0).horizon == 2


@pytest.mark.parametrize(
    "args",
    [
        (0.0, [100.0], 0.1, None),
        (-5.0, [100.0], 0.1, None),
        (100.0, [100.0], -1.0, None),
        (100.0, [100.0, 100.0], 0.1, 3),
        (100.0, [100.0], 0.1, 0),
        (100.0, lambda t: 10.0, 0.1, None),
        (100.0, lambda t: 10.0, 0.1, 2.5),
        (100.0, [float("nan")], 0.1, None),
    ],
)
def test_payback_domain_errors(args):
    assert isinstance(discounted_payback(*args), DomainError)


def test_simple_payback():
    assert simple_payback(500, 160) == Found(3.125)
    assert simple_payback(500, 0) == NotReached(horizon=None, recovered=0.0)
    assert isinstance(simple_payback(0, 100), DomainError)


def test_crossing_in_fourth_period():
    # 1000 outlay: three discounted periods recover only 994.75
    result = discounted_payback(1000.0, lambda t: 400.0, 0.10, 10)
    first_three = sum(400 / 1.1 ** t for t in (1, 2, 3))
    assert first_three < 1000.0
    assert result.value == pytest.approx(3 + (1000 - first_three) / (400 / 1.1 ** 4), rel=1e-12)
    assert 3.0 < result.value < 4.0
