# calcdesk/cli.py
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

# Only imports the thin runner and registry; the math stays behind them
from .config import ConfigError, load_run_config
from .registry import CATEGORIES, calculators_by_category
from .runner import run_dir
from .validate import ValidationError, mode_from_env_or_flag, validate_inputs

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="calcdesk",
        description="Business and financial calculators (NPV, IRR, payback, A/B sample size)",
    )
    p.add_argument(
        "--mode",
        default="run",
        choices=["run", "list", "profile"],
        help="run: evaluate run files; list: show calculators; profile: NPV-by-rate table (default: run).",
    )
    p.add_argument(
        "--config",
        required=False,
        default=None,
        help="Path to a single run file (YAML/JSON), or a directory of run files.",
    )
    p.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        dest="fmt",
        default="jsonl",
        choices=["csv", "jsonl"],
        help="Output format for per-value result rows (default: jsonl).",
    )
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (missing/unknown/out-of-range inputs fail).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (defaults filled, range issues become warnings).",
    )
    lv = p.add_mutually_exclusive_group()
    lv.add_argument("--debug", action="store_true", help="Enable debug logging")
    lv.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return p.parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if ns.strict:
        os.environ["VALIDATION_MODE"] = "strict"
    elif ns.relaxed:
        os.environ["VALIDATION_MODE"] = "relaxed"


def _configure_logging(ns: argparse.Namespace) -> None:
    if ns.debug:
        log_level = logging.DEBUG
    elif ns.quiet:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _list_calculators() -> int:
    for category in CATEGORIES:
        specs = calculators_by_category(category)
        if not specs:
            continue
        print(f"[{category}]")
        for spec in specs:
            print(f"  {spec.slug:<34} {spec.formula}")
    return 0


def _profile(cfg_path: Path, outputs_dir: Path) -> int:
    from .sensitivity import npv_profile

    slug, inputs = load_run_config(cfg_path)
    if slug != "irr-calculator":
        logger.error("profile mode needs an irr-calculator run file, got %s", slug)
        return 2
    clean, warnings = validate_inputs(slug, inputs, mode=mode_from_env_or_flag(None))
    for w in warnings:
        logger.warning("%s: %s", cfg_path.name, w)
    df = npv_profile(clean["cashflows"])
    out = outputs_dir / f"{cfg_path.stem}_npv_profile.csv"
    df.to_csv(out, index=False)
    logger.info("wrote %s (%d rates, irr=%s)", out, len(df), df.attrs.get("irr"))
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = parse_args(argv)
    _apply_validation_mode(ns)
    _configure_logging(ns)

    if ns.mode == "list":
        return _list_calculators()

    if not ns.config:
        logger.error("--config is required for mode %r", ns.mode)
        return 2

    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path = Path(ns.config).resolve()
    outputs_dir.mkdir(parents=True, exist_ok=True)

    try:
        if ns.mode == "profile":
            return _profile(cfg_path, outputs_dir)
        res = run_dir(cfg_path, outputs_dir, fmt=ns.fmt, strict=ns.strict)
    except (ConfigError, ValidationError) as e:
        logger.error("%s", e)
        return 2
    except Exception as e:
        # Fail noisily with non-zero; keep traceback for debugging
        logger.exception("ERROR: %s", e)
        return 1

    logger.info("summary written to %s", res.summary_path)
    return 2 if res.failed else 0


__all__ = ["main", "parse_args"]
