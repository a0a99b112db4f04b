# calcdesk/validate.py
from __future__ import annotations
import math
import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .schema import SCHEMA


class ValidationError(ValueError):
    """Input mapping violates the calculator schema."""


def mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def _as_number(key: str, value: Any, kind: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{key}: expected a number, got {value!r}")
    try:
        number = float(str(value).replace(",", "").strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key}: expected a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValidationError(f"{key}: must be finite, got {value!r}")
    if kind == "int":
        if number != int(number):
            raise ValidationError(f"{key}: expected a whole number, got {value!r}")
        return int(number)
    return number


def validate_inputs(
    slug: str,
    data: Mapping[str, Any],
    *,
    mode: str = "relaxed",
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Check raw inputs against SCHEMA[slug].
      - relaxed: fill defaults, report out-of-range values as warnings
      - strict : missing fields, unknown keys and out-of-range values raise
    Non-numeric values raise in both modes. Returns (clean_inputs, warnings).
    """
    if slug not in SCHEMA:
        raise ValidationError(f"unknown calculator: {slug}")
    fields = SCHEMA[slug]
    warnings: List[str] = []

    if mode == "strict":
        missing = [k for k in fields if k not in data]
        if missing:
            raise ValidationError(f"missing required inputs: {missing}")
        unknown = [k for k in data if k not in fields]
        if unknown:
            raise ValidationError(f"unknown inputs (strict mode): {unknown}")

    clean: Dict[str, Any] = {}
    for key, spec in fields.items():
        raw = data.get(key, spec.get("default"))
        kind = spec.get("type", "float")

        if kind == "list":
            if isinstance(raw, str):
                raw = [x for x in raw.replace(";", ",").split(",") if x.strip()]
            if not isinstance(raw, (list, tuple)):
                raise ValidationError(f"{key}: expected a list of numbers, got {raw!r}")
            values = [_as_number(f"{key}[{i}]", v, "float") for i, v in enumerate(raw)]
            min_len = int(spec.get("min_len", 1))
            if len(values) < min_len:
                msg = f"{key}: needs at least {min_len} values, got {len(values)}"
                if mode == "strict":
                    raise ValidationError(msg)
                warnings.append(msg)
            clean[key] = values
            continue

        value = _as_number(key, raw, kind)
        lo = float(spec.get("min", float("-inf")))
        hi = float(spec.get("max", float("inf")))
        if not (lo <= value <= hi):
            msg = f"{key} outside allowed range [{lo}, {hi}]: {value}"
            if mode == "strict":
                raise ValidationError(msg)
            warnings.append(msg)
        clean[key] = value

    return clean, warnings


def _iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    from .config import ConfigError, load_run_config

    parser = argparse.ArgumentParser(prog="calcdesk.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON run files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in _iter_input_files(target):
            any_seen = True
            try:
                slug, inputs = load_run_config(f)
                _, warnings = validate_inputs(slug, inputs, mode=mode)
            except (ConfigError, ValidationError) as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
                continue
            for w in warnings:
                print(f"{f}: warning: {w}", file=sys.stderr)
            print(f"OK: {f}")
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())
