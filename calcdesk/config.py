from __future__ import annotations

from typing import Any, Dict, Tuple
import io
import os
import yaml


class ConfigError(ValueError):
    """A run file could not be read or is missing required keys."""


def _flatten_grouped(inputs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten shallow groups like {'investment': {...}, 'rates': {...}} into one level.
    Prefers top-level keys if collisions occur. Lists (cashflows) are kept as-is.
    """
    flat: Dict[str, Any] = dict(inputs)
    for k, v in list(inputs.items()):
        if isinstance(v, dict):
            flat.pop(k)
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def load_run_config(
    source: str | os.PathLike | io.StringIO,
) -> Tuple[str, Dict[str, Any]]:
    """
    Load a calculator run from a YAML/JSON path or text stream:

        calculator: irr-calculator
        inputs:
          cashflows: [-100, 60, 60]

    Returns (slug, flat_inputs).
    """
    text: str
    where = "<stream>"
    if hasattr(source, "read"):
        text = str(source.read())
    else:
        where = os.fspath(source)
        try:
            with open(where, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise ConfigError(f"{where}: cannot read ({e})") from e

    try:
        cfg = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{where}: invalid YAML ({e})") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"{where}: expected a mapping at top level")

    slug = cfg.get("calculator")
    if not slug or not isinstance(slug, str):
        raise ConfigError(f"{where}: missing 'calculator' key")
    inputs = cfg.get("inputs") or {}
    if not isinstance(inputs, dict):
        raise ConfigError(f"{where}: 'inputs' must be a mapping")
    return slug, _flatten_grouped(inputs)
