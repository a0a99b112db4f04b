import io

import pytest

from calcdesk.config import ConfigError, load_run_config
from calcdesk.validate import ValidationError, _main as validate_main, mode_from_env_or_flag, validate_inputs


def test_load_run_config_flattens_groups():
  text = io.StringIO(
    "calculator: discounted-payback-calculator\n"
    "inputs:\n"
    "  investment:\n"
    "    initialInvestment: 1000\n"
    "    cashFlowPerPeriod: 250\n"
    "  discountRatePercent: 0\n"
  )
  slug, inputs = load_run_config(text)
  assert slug == "discounted-payback-calculator"
  assert inputs == {"initialInvestment": 1000, "cashFlowPerPeriod": 250, "discountRatePercent": 0}


def test_top_level_key_wins_over_grouped_duplicate():
  slug, inputs = load_run_config(io.StringIO("calculator: x\ninputs:\n  cac: 1\n  g:\n    cac: 2\n"))
  assert inputs["cac"] == 1


def test_lists_survive_flattening():
  _, inputs = load_run_config(io.StringIO("calculator: irr-calculator\ninputs:\n  cashflows: [-100, 60, 60]\n"))
  assert inputs["cashflows"] == [-100, 60, 60]


def test_json_run_file_loads(tmp_path):
  p = tmp_path / "run.json"
  p.write_text('{"calculator": "irr-calculator", "inputs": {"cashflows": [-1, 2]}}', encoding="utf-8")
  assert load_run_config(p) == ("irr-calculator", {"cashflows": [-1, 2]})


@pytest.mark.parametrize(
  "text",
  [
    "inputs: {a: 1}\n",
    "- just\n- a list\n",
    "calculator: npv-calculator\ninputs: [1, 2]\n",
    "calculator: [unterminated\n",
  ],
)
def test_bad_run_files_raise_config_error(text):
  with pytest.raises(ConfigError):
    load_run_config(io.StringIO(text))


def test_missing_file_raises_config_error(tmp_path):
  with pytest.raises(ConfigError):
    load_run_config(tmp_path / "absent.yaml")


def test_mode_resolution(monkeypatch):
  monkeypatch.setenv("VALIDATION_MODE", "STRICT")
  assert mode_from_env_or_flag(None) == "strict"
  assert mode_from_env_or_flag("relaxed") == "relaxed"
  monkeypatch.setenv("VALIDATION_MODE", "bogus")
  assert mode_from_env_or_flag(None) == "relaxed"


def test_relaxed_fills_defaults_and_warns():
  clean, warnings = validate_inputs("cac-payback-period-calculator", {"cac": "1,500", "grossMarginPercent": 120})
  assert clean == {"cac": 1500.0, "arpaMonthly": 200.0, "grossMarginPercent": 120.0}
  assert len(warnings) == 1
  assert "grossMarginPercent" in warnings[0]


def test_strict_requires_every_field():
  with pytest.raises(ValidationError, match="missing"):
    validate_inputs("cac-payback-period-calculator", {"cac": 500}, mode="strict")


def test_strict_rejects_unknown_keys():
  data = {"cac": 500, "arpaMonthly": 200, "grossMarginPercent": 80, "churn": 2}
  with pytest.raises(ValidationError, match="unknown"):
    validate_inputs("cac-payback-period-calculator", data, mode="strict")


@pytest.mark.parametrize("bad", [True, "abc", None, float("nan"), [1, 2]])
def test_non_numeric_values_raise_in_both_modes(bad):
  for mode in ("relaxed", "strict"):
    with pytest.raises(ValidationError):
      validate_inputs("cac-payback-period-calculator", {"cac": bad, "arpaMonthly": 200, "grossMarginPercent": 80}, mode=mode)


def test_int_fields_reject_fractions():
  data = {"initialInvestment": 1000, "cashFlowPerPeriod": 100, "discountRatePercent": 5, "horizonPeriods": 2.5}
  with pytest.raises(ValidationError, match="whole number"):
    validate_inputs("discounted-payback-calculator", data)


def test_cashflow_lists():
  clean, warnings = validate_inputs("irr-calculator", {"cashflows": "-100; 60; 60"})
  assert clean["cashflows"] == [-100.0, 60.0, 60.0]
  assert warnings == []
  _, warnings = validate_inputs("irr-calculator", {"cashflows": [-100]})
  assert "at least 2" in warnings[0]
  with pytest.raises(ValidationError):
    validate_inputs("irr-calculator", {"cashflows": [-100]}, mode="strict")
  with pytest.raises(ValidationError):
    validate_inputs("irr-calculator", {"cashflows": 5})


def test_validate_cli_reports_ok_and_errors(tmp_path, capsys):
  good = tmp_path / "good.yaml"
  good.write_text("calculator: irr-calculator\ninputs:\n  cashflows: [-100, 60, 60]\n", encoding="utf-8")
  assert validate_main([str(good), "--mode", "strict"]) == 0
  assert "OK:" in capsys.readouterr().out

  bad = tmp_path / "bad.yaml"
  bad.write_text("calculator: irr-calculator\ninputs:\n  cashflows: [-100, x]\n", encoding="utf-8")
  assert validate_main([str(tmp_path)]) == 1
  assert "bad.yaml" in capsys.readouterr().err
